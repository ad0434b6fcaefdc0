"""Tracking progress against GPA goals."""

import dataclasses
from typing import Iterable, Optional

from .core import (
    DEFAULT_TARGET_AU,
    GoalSettings,
    Module,
    composite_stats,
    semester_scope,
)
from .scales import GRADE_POINTS, GRADE_RANK

#: AU in a typical semester, used to estimate what is left of a semester
TYPICAL_SEMESTER_AU = 18

MAX_GRADE_POINT = max(GRADE_POINTS.values())


@dataclasses.dataclass(frozen=True)
class GoalProgress:
    """Where the student stands relative to a GPA goal.

    Attributes
    ----------
    current : float
        The official GPA so far.
    target : float
        The goal.
    difference : float
        ``target - current``.
    status : str
        One of ``"achieved"``, ``"on-track"``, ``"at-risk"`` or ``"critical"``.
    projected_final : float
        The projected GPA.
    required_gpa : float
        GPA needed over the remaining AU to reach the goal, clamped to the
        grade point scale.

    """

    current: float
    target: float
    difference: float
    status: str
    projected_final: float
    required_gpa: float


def goal_status(current: float, target: float) -> str:
    """Classify a GPA relative to its goal.

    A GPA at or above the goal is achieved; within 95% of the goal it is on
    track; within 85% it is at risk; otherwise it is critical.

    """
    if current >= target:
        return "achieved"
    if current >= target * 0.95:
        return "on-track"
    if current >= target * 0.85:
        return "at-risk"
    return "critical"


def required_gpa(
    current_gpa: float, current_au: float, target_gpa: float, remaining_au: float
) -> float:
    """The GPA needed over `remaining_au` to finish at `target_gpa`.

    Zero when nothing remains. Not clamped, so it may exceed the maximum
    grade point when the goal is out of reach.

    """
    if remaining_au <= 0:
        return 0.0
    total_points_needed = target_gpa * (current_au + remaining_au)
    return (total_points_needed - current_gpa * current_au) / remaining_au


def _clamp(gpa: float) -> float:
    return min(MAX_GRADE_POINT, max(0.0, gpa))


def goal_progress(
    modules: Iterable[Module],
    goals: GoalSettings,
    target_au: float = DEFAULT_TARGET_AU,
) -> GoalProgress:
    """Progress toward the target CGPA over the whole degree."""
    stats = composite_stats(modules)
    current = stats.official.gpa
    target = goals.target_cgpa
    remaining_au = max(0.0, target_au - stats.official.au)

    return GoalProgress(
        current=current,
        target=target,
        difference=target - current,
        status=goal_status(current, target),
        projected_final=stats.projected.gpa,
        required_gpa=_clamp(
            required_gpa(current, stats.official.au, target, remaining_au)
        ),
    )


def semester_goal_progress(
    modules: Iterable[Module], goals: GoalSettings, year: int, semester: int
) -> GoalProgress:
    """Progress toward one semester's goal.

    The semester's goal defaults to the target CGPA when none is set.

    """
    target = goals.semester_goals.get(semester_scope(year, semester), goals.target_cgpa)
    stats = composite_stats(modules, year=year, semester=semester)
    current = stats.official.gpa
    remaining_au = max(0.0, TYPICAL_SEMESTER_AU - stats.official.au)

    return GoalProgress(
        current=current,
        target=target,
        difference=target - current,
        status=goal_status(current, target),
        projected_final=stats.projected.gpa,
        required_gpa=_clamp(
            required_gpa(current, stats.official.au, target, remaining_au)
        ),
    )


def minimum_grade_for_target(
    modules: Iterable[Module], module_id: str, target_gpa: float
) -> Optional[tuple[str, bool]]:
    """The lowest grade in one module that lifts the CGPA to `target_gpa`.

    Returns
    -------
    Optional[tuple[str, bool]]
        The grade and whether it is achievable. When even the best grade is
        not enough, the best grade is returned with ``False``. ``None`` if
        no module has the given id.

    """
    modules = list(modules)
    target = next((m for m in modules if m.id == module_id), None)
    if target is None:
        return None

    others = [m for m in modules if m.id != module_id and m.is_completed]
    official = composite_stats(others).official
    needed_points = target_gpa * (official.au + target.au) - official.gpa * official.au
    needed = needed_points / target.au

    # weakest grade first, with A before A+
    for grade, points in sorted(
        GRADE_POINTS.items(), key=lambda item: (item[1], GRADE_RANK[item[0]])
    ):
        if points >= needed:
            return (grade, True)
    return (next(iter(GRADE_POINTS)), False)
