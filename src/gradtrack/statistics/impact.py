"""Which modules move the GPA the most."""

from typing import Iterable

import numpy as np
import pandas as pd

from ..core import Module, ModuleStatus, modules_frame
from ..scales import map_grades_to_points

IMPACT_COLUMNS = [
    "code",
    "name",
    "au",
    "grade",
    "grade_points",
    "impact",
    "weighted_contribution",
]


def get_credit_weighted_impact(modules: Iterable[Module]) -> pd.DataFrame:
    """Rank completed, graded modules by their effect on the GPA.

    Each module's grade point is compared against the AU-weighted average
    grade point of the set: the module's ``impact`` is ``"positive"`` if it
    is above the average, ``"negative"`` if below, and ``"neutral"`` if
    exactly equal. Its ``weighted_contribution`` is its grade point times its
    AU, divided by the AU of the whole set.

    Returns
    -------
    pandas.DataFrame
        One row per completed module whose grade carries grade points, with
        the columns in :data:`IMPACT_COLUMNS`. Sorted so that the modules
        whose weighted contribution is farthest from the average come first.

    """
    table = modules_frame(modules)
    table["grade_points"] = map_grades_to_points(table["grade"])
    table = table[
        (table["status"] == ModuleStatus.COMPLETED.value)
        & table["grade_points"].notna()
    ]

    if table.empty:
        return pd.DataFrame(columns=IMPACT_COLUMNS)

    total_au = table["au"].sum()
    average = (table["grade_points"] * table["au"]).sum() / total_au

    points = table["grade_points"]
    table = table.assign(
        impact=np.where(
            points > average,
            "positive",
            np.where(points < average, "negative", "neutral"),
        ),
        weighted_contribution=points * table["au"] / total_au,
    )

    distance = (table["weighted_contribution"] - average).abs()
    order = distance.sort_values(ascending=False, kind="mergesort").index
    return table.loc[order, IMPACT_COLUMNS].reset_index(drop=True)
