"""Cumulative GPA over time."""

from typing import Iterable

import pandas as pd

from ..core import Module, frame_stats, modules_frame, semester_scope
from .history import complete_semesters


def get_gpa_trend_data(modules: Iterable[Module]) -> pd.DataFrame:
    """Cumulative GPA after each completed semester.

    Completed semesters are walked in chronological order. After each one,
    the GPA is recomputed over every module seen so far.

    Returns
    -------
    pandas.DataFrame
        One row per completed semester with columns ``label`` (e.g.
        ``"Y1S2"``), ``value`` (cumulative official GPA) and ``projected``
        (cumulative projected GPA).

    """
    table = modules_frame(modules)
    cumulative = pd.Series(False, index=table.index)

    rows = []
    for year, semester, mask in complete_semesters(table):
        cumulative = cumulative | mask
        stats = frame_stats(table[cumulative])
        rows.append(
            (semester_scope(year, semester), stats.official.gpa, stats.projected.gpa)
        )

    return pd.DataFrame(rows, columns=["label", "value", "projected"]).astype(
        {"value": float, "projected": float}
    )


def get_cumulative_vs_semester_data(modules: Iterable[Module]) -> pd.DataFrame:
    """Each completed semester's own GPA next to the cumulative GPA.

    Returns
    -------
    pandas.DataFrame
        One row per completed semester with columns ``label``,
        ``semester_gpa`` and ``cumulative_gpa``.

    """
    table = modules_frame(modules)
    cumulative = pd.Series(False, index=table.index)

    rows = []
    for year, semester, mask in complete_semesters(table):
        cumulative = cumulative | mask
        rows.append(
            (
                semester_scope(year, semester),
                frame_stats(table[mask]).official.gpa,
                frame_stats(table[cumulative]).official.gpa,
            )
        )

    return pd.DataFrame(
        rows, columns=["label", "semester_gpa", "cumulative_gpa"]
    ).astype({"semester_gpa": float, "cumulative_gpa": float})


def get_semester_changes(modules: Iterable[Module]) -> pd.DataFrame:
    """Change in cumulative GPA from one completed semester to the next.

    Returns
    -------
    pandas.DataFrame
        One row per completed semester except the first, with columns
        ``label``, ``change`` (rounded to two decimals) and ``improved``
        (whether the change is strictly positive).

    """
    trend = get_gpa_trend_data(modules)
    change = trend["value"].diff().round(2)

    changes = pd.DataFrame(
        {"label": trend["label"], "change": change, "improved": change > 0}
    )
    return changes.iloc[1:].reset_index(drop=True)
