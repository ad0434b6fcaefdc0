"""Grouping modules into semesters."""

import dataclasses
from typing import Iterable, Iterator, Optional

import pandas as pd

from ..core import (
    SEMESTERS,
    YEARS,
    Module,
    ModuleStatus,
    WorkloadThresholds,
    frame_stats,
    modules_frame,
    semester_scope,
)
from ..scales import count_grades

#: every (year, semester) bucket, in chronological order
SEMESTER_KEYS = [(year, semester) for year in YEARS for semester in SEMESTERS]


# public classes =======================================================================


@dataclasses.dataclass(frozen=True)
class SemesterStats:
    """Statistics of one completed semester.

    Attributes
    ----------
    year, semester : int
        The bucket these statistics describe.
    gpa : float
        Official GPA of the semester.
    projected_gpa : float
        Projected GPA of the semester.
    total_au : float
        AU of every module in the semester, graded or not.
    module_count : int
        Number of modules in the semester.
    grade_distribution : dict[str, int]
        Count of each letter grade, in rank order. Excluded grades are not
        counted.

    """

    year: int
    semester: int
    gpa: float
    projected_gpa: float
    total_au: float
    module_count: int
    grade_distribution: dict[str, int]

    @property
    def label(self) -> str:
        return semester_scope(self.year, self.semester)


# private helper functions =============================================================


def _period_mask(table: pd.DataFrame, year: int, semester: int) -> pd.Series:
    return (table["year"] == year) & (table["semester"] == semester)


def _is_complete(bucket: pd.DataFrame) -> bool:
    """A bucket is complete if it is non-empty and every module is completed."""
    if bucket.empty:
        return False
    return bool((bucket["status"] == ModuleStatus.COMPLETED.value).all())


# public functions =====================================================================


def complete_semesters(table: pd.DataFrame) -> Iterator[tuple[int, int, pd.Series]]:
    """Iterate over the complete semesters of a module table.

    Parameters
    ----------
    table : pandas.DataFrame
        A table built by :func:`gradtrack.core.modules_frame`.

    Yields
    ------
    tuple[int, int, pandas.Series]
        The year, the semester, and a boolean mask selecting the rows of
        `table` in that semester. Semesters are yielded in chronological
        order; incomplete semesters are skipped.

    """
    for year, semester in SEMESTER_KEYS:
        mask = _period_mask(table, year, semester)
        if _is_complete(table[mask]):
            yield year, semester, mask


def is_semester_complete(modules: Iterable[Module], year: int, semester: int) -> bool:
    """Whether a semester has modules and all of them are completed."""
    table = modules_frame(modules)
    return _is_complete(table[_period_mask(table, year, semester)])


def get_semester_history(modules: Iterable[Module]) -> list[SemesterStats]:
    """Statistics for each completed semester, in chronological order.

    Semesters with no modules, or with any module not yet completed, are
    left out.

    """
    table = modules_frame(modules)

    history = []
    for year, semester, mask in complete_semesters(table):
        bucket = table[mask]
        stats = frame_stats(bucket)
        distribution = count_grades(bucket["grade"])
        history.append(
            SemesterStats(
                year=year,
                semester=semester,
                gpa=stats.official.gpa,
                projected_gpa=stats.projected.gpa,
                total_au=stats.total_existing_au,
                module_count=len(bucket),
                grade_distribution={k: int(v) for k, v in distribution.items()},
            )
        )
    return history


def get_semester_workload_data(modules: Iterable[Module]) -> pd.DataFrame:
    """AU taken in each completed semester.

    Returns
    -------
    pandas.DataFrame
        One row per completed semester, in chronological order, with columns
        ``label`` and ``value`` (the semester's total AU).

    """
    table = modules_frame(modules)
    rows = [
        (semester_scope(year, semester), float(table.loc[mask, "au"].sum()))
        for year, semester, mask in complete_semesters(table)
    ]
    return pd.DataFrame(rows, columns=["label", "value"]).astype({"value": float})


def classify_workload(
    au: float, thresholds: Optional[WorkloadThresholds] = None
) -> str:
    """Classify a semester's AU load.

    Returns one of ``"light"`` (below the ideal range), ``"ideal"``,
    ``"heavy"`` (above ideal, up to the warning maximum) or ``"overload"``.

    """
    if thresholds is None:
        thresholds = WorkloadThresholds()

    if au < thresholds.ideal_min:
        return "light"
    if au <= thresholds.ideal_max:
        return "ideal"
    if au <= thresholds.warning_max:
        return "heavy"
    return "overload"
