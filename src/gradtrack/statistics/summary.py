"""Summaries of a student's modules."""

import dataclasses
from typing import Iterable, Optional

import pandas as pd

from ..core import MODULE_TYPES, Module, ModuleStatus, frame_stats, modules_frame
from ..scales import GRADE_POINTS, GRADE_RANK, count_grades
from .history import get_semester_history


@dataclasses.dataclass(frozen=True)
class PerformanceInsights:
    """Highlights of the student's record.

    Attributes
    ----------
    best_semester, worst_semester : Optional[tuple[str, float]]
        Label and GPA of the completed semester with the highest (lowest) GPA.
        The earliest semester wins ties.
    best_module : Optional[tuple[str, str]]
        Code and grade of the completed module with the best grade.
    average_au_per_semester : float
        Mean AU over completed semesters, rounded to one decimal.
    strongest_type : Optional[str]
        The module type with the highest GPA among completed modules.

    """

    best_semester: Optional[tuple[str, float]]
    worst_semester: Optional[tuple[str, float]]
    best_module: Optional[tuple[str, str]]
    average_au_per_semester: float
    strongest_type: Optional[str]


def _completed_grades(modules: Iterable[Module]) -> pd.Series:
    table = modules_frame(modules)
    return table.loc[table["status"] == ModuleStatus.COMPLETED.value, "grade"]


def get_grade_distribution(modules: Iterable[Module]) -> pd.Series:
    """Count of each letter grade among completed modules.

    See :func:`gradtrack.scales.count_grades`.

    """
    return count_grades(_completed_grades(modules))


def get_grade_point_distribution(modules: Iterable[Module]) -> pd.DataFrame:
    """Grade counts as a chart series.

    Returns
    -------
    pandas.DataFrame
        Columns ``label`` (the letter grade) and ``value`` (its count), in
        rank order. Grades which never occur are omitted.

    """
    counts = get_grade_distribution(modules)
    return pd.DataFrame({"label": list(counts.index), "value": list(counts.values)})


def get_module_type_breakdown(modules: Iterable[Module]) -> pd.DataFrame:
    """Number of modules, AU and GPA for each module type.

    Returns
    -------
    pandas.DataFrame
        One row per module type which has at least one module, with columns
        ``type``, ``count``, ``au`` and ``average_gpa`` (the official GPA of
        the type's modules). Types appear in :data:`gradtrack.core.MODULE_TYPES`
        order.

    """
    table = modules_frame(modules)

    rows = []
    for module_type in MODULE_TYPES:
        group = table[table["type"] == module_type.value]
        if group.empty:
            continue
        rows.append(
            (
                module_type.value,
                len(group),
                float(group["au"].sum()),
                frame_stats(group).official.gpa,
            )
        )

    return pd.DataFrame(rows, columns=["type", "count", "au", "average_gpa"])


def get_performance_insights(modules: Iterable[Module]) -> PerformanceInsights:
    """Find the best and worst semesters, the best module and strongest type."""
    modules = list(modules)
    history = get_semester_history(modules)

    best_semester = worst_semester = None
    for semester in history:
        if best_semester is None or semester.gpa > best_semester[1]:
            best_semester = (semester.label, semester.gpa)
        if worst_semester is None or semester.gpa < worst_semester[1]:
            worst_semester = (semester.label, semester.gpa)

    graded = [m for m in modules if m.is_completed and m.grade in GRADE_POINTS]
    best_module = None
    if graded:
        best = max(graded, key=lambda m: (GRADE_POINTS[m.grade], GRADE_RANK[m.grade]))
        best_module = (best.code, best.grade)

    if history:
        average_au = round(sum(s.total_au for s in history) / len(history), 1)
    else:
        average_au = 0.0

    breakdown = get_module_type_breakdown([m for m in modules if m.is_completed])
    if breakdown.empty:
        strongest_type = None
    else:
        strongest_type = breakdown.loc[breakdown["average_gpa"].idxmax(), "type"]

    return PerformanceInsights(
        best_semester=best_semester,
        worst_semester=worst_semester,
        best_module=best_module,
        average_au_per_semester=average_au,
        strongest_type=strongest_type,
    )
