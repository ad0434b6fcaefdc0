"""Composite GPA and AU statistics over a collection of modules."""

import dataclasses
from typing import Iterable, Optional

import pandas as pd

from ..scales import map_grades_to_points
from ._module import Module, ModuleStatus

#: the columns of the table produced by :func:`modules_frame`
FRAME_COLUMNS = [
    "id",
    "code",
    "name",
    "au",
    "type",
    "year",
    "semester",
    "status",
    "grade",
    "projected_grade",
]


# public classes =======================================================================


@dataclasses.dataclass(frozen=True)
class GradeSummary:
    """A GPA together with the number of graded AU it was computed over."""

    gpa: float = 0.0
    au: float = 0.0


@dataclasses.dataclass(frozen=True)
class CompositeStats:
    """GPA and AU totals for a set of modules.

    Attributes
    ----------
    official : GradeSummary
        GPA over completed modules with a grade that carries grade points.
    projected : GradeSummary
        Like `official`, but also folding in the projected grade of modules
        which are not yet completed. Equal to `official` when no module has a
        projected grade.
    taken_au : float
        AU of modules which are completed or in progress.
    total_existing_au : float
        AU of every module, graded or not.

    """

    official: GradeSummary = GradeSummary()
    projected: GradeSummary = GradeSummary()
    taken_au: float = 0.0
    total_existing_au: float = 0.0


# private helper functions =============================================================


def _summarize(points: pd.Series, au: pd.Series) -> GradeSummary:
    """AU-weighted mean of the non-null grade points, rounded to two decimals."""
    graded = points.notna()
    graded_au = float(au[graded].sum())
    if graded_au == 0:
        return GradeSummary(gpa=0.0, au=graded_au)
    total_points = float((points[graded] * au[graded]).sum())
    return GradeSummary(gpa=round(total_points / graded_au, 2), au=graded_au)


# public functions =====================================================================


def modules_frame(modules: Iterable[Module]) -> pd.DataFrame:
    """Build a table with one row per module.

    Enumerations are stored by value, so that the ``status`` column can be
    compared against plain strings.

    Parameters
    ----------
    modules : Iterable[Module]
        The modules to tabulate. Order is preserved.

    Returns
    -------
    pandas.DataFrame
        A table with the columns in :data:`FRAME_COLUMNS`. It has these
        columns even when there are no modules.

    """
    records = [
        (
            m.id,
            m.code,
            m.name,
            float(m.au),
            m.type.value,
            m.year,
            m.semester,
            m.status.value,
            m.grade,
            m.projected_grade,
        )
        for m in modules
    ]
    return pd.DataFrame.from_records(records, columns=FRAME_COLUMNS).astype(
        {"au": float}
    )


def frame_stats(table: pd.DataFrame) -> CompositeStats:
    """Compute :class:`CompositeStats` from a table built by :func:`modules_frame`."""
    completed = table["status"] == ModuleStatus.COMPLETED.value
    in_progress = table["status"] == ModuleStatus.IN_PROGRESS.value

    official_points = map_grades_to_points(table["grade"]).where(completed)

    # completed modules use their actual grade; others their projected one
    projected_grades = table["grade"].where(completed, table["projected_grade"])
    projected_points = map_grades_to_points(projected_grades)

    return CompositeStats(
        official=_summarize(official_points, table["au"]),
        projected=_summarize(projected_points, table["au"]),
        taken_au=float(table.loc[completed | in_progress, "au"].sum()),
        total_existing_au=float(table["au"].sum()),
    )


def composite_stats(
    modules: Iterable[Module],
    year: Optional[int] = None,
    semester: Optional[int] = None,
) -> CompositeStats:
    """Compute the official and projected GPA of a set of modules.

    The result does not depend on the order of the modules. An empty set (or
    one without graded modules) has a GPA of exactly zero.

    Parameters
    ----------
    modules : Iterable[Module]
        The modules to aggregate.
    year : Optional[int]
        If given, only modules in this year of study are considered.
    semester : Optional[int]
        If given along with `year`, only modules in that semester are
        considered. Ignored when `year` is not given.

    Returns
    -------
    CompositeStats

    """
    table = modules_frame(modules)
    if year is not None:
        table = table[table["year"] == year]
        if semester is not None:
            table = table[table["semester"] == semester]
    return frame_stats(table)
