import pytest

from gradtrack import GoalSettings
from gradtrack.goals import (
    goal_progress,
    goal_status,
    minimum_grade_for_target,
    required_gpa,
    semester_goal_progress,
)

from util import completed, pending


@pytest.mark.parametrize(
    "current, expected",
    [
        (4.5, "achieved"),
        (4.8, "achieved"),
        (4.3, "on-track"),
        (3.9, "at-risk"),
        (3.0, "critical"),
    ],
)
def test_goal_status(current, expected):
    assert goal_status(current, 4.5) == expected


def test_required_gpa():
    assert required_gpa(4.0, 60, 4.5, 70) == pytest.approx(345 / 70)


def test_required_gpa_with_nothing_remaining_is_zero():
    assert required_gpa(4.0, 130, 4.5, 0) == 0


def test_goal_progress():
    # given
    modules = [completed("MOD1", 4, "A"), completed("MOD2", 4, "B")]
    goals = GoalSettings(target_cgpa=4.5)

    # when
    progress = goal_progress(modules, goals, target_au=16)

    # then
    assert progress.current == 4.25
    assert progress.difference == pytest.approx(0.25)
    assert progress.status == "at-risk"
    assert progress.required_gpa == pytest.approx(4.75)


def test_goal_progress_clamps_required_gpa():
    # given
    modules = [completed(f"MOD{i}", 4, "C") for i in range(30)]

    # when
    progress = goal_progress(modules, GoalSettings(target_cgpa=4.5), target_au=130)

    # then
    assert progress.required_gpa == 5.0
    assert progress.status == "critical"


def test_goal_progress_reports_projected_gpa():
    # given
    modules = [completed("MOD1", 4, "B"), pending("MOD2", 4, projected_grade="A")]

    # when
    progress = goal_progress(modules, GoalSettings())

    # then
    assert progress.projected_final == 4.25


def test_semester_goal_uses_the_semester_target():
    # given
    goals = GoalSettings(target_cgpa=4.5, semester_goals={"Y1S1": 4.0})
    modules = [
        completed("MOD1", 4, "B+", year=1, semester=1),
        completed("MOD2", 4, "B+", year=1, semester=2),
    ]

    # when
    first = semester_goal_progress(modules, goals, 1, 1)
    second = semester_goal_progress(modules, goals, 1, 2)

    # then
    assert first.target == 4.0
    assert first.status == "achieved"
    assert second.target == 4.5
    assert second.status == "at-risk"


def test_minimum_grade_for_target():
    # given
    target = pending("MOD2", 4)
    modules = [completed("MOD1", 4, "A"), target]

    # when
    result = minimum_grade_for_target(modules, target.id, 4.25)

    # then
    assert result == ("B", True)


def test_minimum_grade_for_target_prefers_a_over_a_plus():
    # given
    target = pending("MOD2", 4)
    modules = [completed("MOD1", 4, "A"), target]

    # when
    result = minimum_grade_for_target(modules, target.id, 5.0)

    # then
    assert result == ("A", True)


def test_minimum_grade_for_unreachable_target():
    # given
    target = pending("MOD2", 4)
    modules = [completed("MOD1", 4, "B"), target]

    # when
    result = minimum_grade_for_target(modules, target.id, 5.0)

    # then
    assert result == ("A+", False)


def test_minimum_grade_for_unknown_module_is_none():
    assert minimum_grade_for_target([completed("MOD1", 4, "A")], "nope", 4.0) is None
