"""What-if analysis and projections of the graduation GPA."""

import dataclasses
from typing import Iterable, Mapping, Optional

import pandas as pd

from .core import (
    DEFAULT_TARGET_AU,
    CompositeStats,
    Module,
    ModuleStatus,
    composite_stats,
)
from .goals import MAX_GRADE_POINT, minimum_grade_for_target, required_gpa
from .scales import GRADE_POINTS, grade_point

SUGGESTION_COLUMNS = [
    "module_id",
    "code",
    "au",
    "current_grade",
    "suggested_grade",
    "achievable",
    "impact",
]


# public classes =======================================================================


@dataclasses.dataclass(frozen=True)
class GradeImpact:
    """The change in projected GPA caused by giving one module a new grade."""

    old_gpa: float
    new_gpa: float
    impact: float


@dataclasses.dataclass(frozen=True)
class GraduationProjection:
    """Where the graduation GPA could end up.

    Attributes
    ----------
    current : float
        The official GPA so far.
    projected : float
        The projected GPA.
    best, worst : float
        The graduation GPA if every remaining AU is graded A+ (F).
    average_needed : float
        GPA needed over the remaining AU to graduate at the target. Zero when
        nothing remains.
    achievable : bool
        Whether the target can still be reached.

    """

    current: float
    projected: float
    best: float
    worst: float
    average_needed: float
    achievable: bool


# public functions =====================================================================


def what_if(modules: Iterable[Module], grades: Mapping[str, str]) -> CompositeStats:
    """Statistics after giving some modules a hypothetical grade.

    Parameters
    ----------
    modules : Iterable[Module]
        The student's modules. They are not modified.
    grades : Mapping[str, str]
        The hypothetical grade of each changed module, keyed by module id.
        Changed modules are treated as completed. Unknown ids are ignored.

    Returns
    -------
    CompositeStats

    Raises
    ------
    ValueError
        If a grade is not a known letter grade.

    """
    changed = [
        dataclasses.replace(m, grade=grades[m.id], status=ModuleStatus.COMPLETED)
        if m.id in grades
        else m
        for m in modules
    ]
    return composite_stats(changed)


def grade_impact(
    modules: Iterable[Module], module_id: str, grade: str
) -> Optional[GradeImpact]:
    """How much the projected GPA moves if one module gets `grade`.

    Returns ``None`` if no module has the given id.

    """
    modules = list(modules)
    if not any(m.id == module_id for m in modules):
        return None

    old_gpa = composite_stats(modules).projected.gpa
    new_gpa = what_if(modules, {module_id: grade}).projected.gpa
    return GradeImpact(
        old_gpa=old_gpa, new_gpa=new_gpa, impact=round(new_gpa - old_gpa, 3)
    )


def project_graduation_gpa(
    modules: Iterable[Module],
    target_gpa: float,
    target_au: float = DEFAULT_TARGET_AU,
) -> GraduationProjection:
    """Project the graduation GPA from the official GPA so far.

    The AU still to be graded is the target AU less the graded AU, and never
    negative.

    """
    stats = composite_stats(modules)
    official = stats.official
    remaining_au = max(0.0, target_au - official.au)
    earned_points = official.gpa * official.au
    total_au = official.au + remaining_au

    if total_au > 0:
        best = round((earned_points + MAX_GRADE_POINT * remaining_au) / total_au, 2)
        worst = round(earned_points / total_au, 2)
    else:
        best = worst = 0.0

    if remaining_au > 0:
        needed = required_gpa(official.gpa, official.au, target_gpa, remaining_au)
        needed = round(needed, 2)
        achievable = needed <= MAX_GRADE_POINT
    else:
        needed = 0.0
        achievable = official.gpa >= target_gpa

    return GraduationProjection(
        current=official.gpa,
        projected=stats.projected.gpa,
        best=best,
        worst=worst,
        average_needed=needed,
        achievable=achievable,
    )


def improvable_modules(modules: Iterable[Module]) -> list[Module]:
    """Modules whose grade could still raise the GPA.

    These are the modules not yet completed, and the completed modules whose
    grade is worth less than the maximum grade point. Modules with an excluded
    or missing grade are not improvable once completed.

    """
    improvable = []
    for module in modules:
        if not module.is_completed:
            improvable.append(module)
            continue
        points = grade_point(module.grade)
        if points is not None and points < MAX_GRADE_POINT:
            improvable.append(module)
    return improvable


def suggest_grades(modules: Iterable[Module], target_gpa: float) -> pd.DataFrame:
    """The lowest grade each improvable module needs to reach `target_gpa`.

    Each module is considered on its own, against the other completed
    modules. See :func:`gradtrack.goals.minimum_grade_for_target`.

    Returns
    -------
    pandas.DataFrame
        One row per improvable module, with the columns in
        :data:`SUGGESTION_COLUMNS`. ``impact`` is the grade points gained over
        the module's current grade (zero when it has none), weighted by AU.
        Modules with the most AU come first.

    """
    modules = list(modules)

    rows = []
    for module in improvable_modules(modules):
        grade, achievable = minimum_grade_for_target(modules, module.id, target_gpa)
        current = grade_point(module.grade) or 0.0
        impact = round((GRADE_POINTS[grade] - current) * module.au, 2)
        rows.append(
            (module.id, module.code, module.au, module.grade, grade, achievable, impact)
        )

    suggestions = pd.DataFrame(rows, columns=SUGGESTION_COLUMNS)
    suggestions = suggestions.sort_values("au", ascending=False, kind="mergesort")
    return suggestions.reset_index(drop=True)
