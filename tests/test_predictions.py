import pytest

from gradtrack.predictions import (
    SUGGESTION_COLUMNS,
    grade_impact,
    improvable_modules,
    project_graduation_gpa,
    suggest_grades,
    what_if,
)

from util import completed, pending


def test_what_if_treats_changed_modules_as_completed():
    # given
    target = pending("MOD2", 4)
    modules = [completed("MOD1", 4, "A"), target]

    # when
    stats = what_if(modules, {target.id: "B"})

    # then
    assert stats.official.gpa == 4.25
    assert stats.official.au == 8
    assert target.grade is None


def test_what_if_can_regrade_a_completed_module():
    # given
    regraded = completed("MOD1", 4, "C")

    # when
    stats = what_if([regraded], {regraded.id: "A", "unknown": "F"})

    # then
    assert stats.official.gpa == 5.0


def test_what_if_with_unknown_grade_raises():
    module = pending("MOD1", 4)
    with pytest.raises(ValueError):
        what_if([module], {module.id: "Z"})


def test_grade_impact():
    # given
    regraded = completed("MOD2", 4, "C")
    modules = [completed("MOD1", 4, "A"), regraded]

    # when
    impact = grade_impact(modules, regraded.id, "A")

    # then
    assert impact.old_gpa == 3.5
    assert impact.new_gpa == 5.0
    assert impact.impact == pytest.approx(1.5)


def test_grade_impact_of_unknown_module_is_none():
    assert grade_impact([completed("MOD1", 4, "A")], "nope", "B") is None


def test_project_graduation_gpa():
    # when
    projection = project_graduation_gpa(
        [completed("MOD1", 10, "B")], target_gpa=4.0, target_au=20
    )

    # then
    assert projection.current == 3.5
    assert projection.best == 4.25
    assert projection.worst == 1.75
    assert projection.average_needed == 4.5
    assert projection.achievable


def test_project_graduation_gpa_with_unreachable_target():
    # when
    projection = project_graduation_gpa(
        [completed("MOD1", 10, "B")], target_gpa=5.0, target_au=20
    )

    # then
    assert projection.average_needed == 6.5
    assert not projection.achievable


def test_project_graduation_gpa_with_nothing_remaining():
    # when
    projection = project_graduation_gpa(
        [completed("MOD1", 20, "B")], target_gpa=4.0, target_au=20
    )

    # then
    assert projection.best == projection.worst == 3.5
    assert projection.average_needed == 0
    assert not projection.achievable


def test_project_graduation_gpa_of_no_modules_and_no_target():
    # when
    projection = project_graduation_gpa([], target_gpa=4.0, target_au=0)

    # then
    assert projection.best == 0
    assert projection.worst == 0


def test_improvable_modules():
    # given
    modules = [
        completed("TOP", 4, "A+"),
        completed("FULL", 4, "A"),
        completed("MID", 4, "B"),
        completed("PASS", 4, "S"),
        pending("NOW", 4),
        pending("LATER", 4, status="Not Started"),
    ]

    # when
    improvable = improvable_modules(modules)

    # then
    assert [m.code for m in improvable] == ["MID", "NOW", "LATER"]


def test_suggest_grades():
    # given
    modules = [
        completed("MOD1", 4, "A"),
        pending("MOD3", 2, status="Not Started"),
        pending("MOD2", 4),
    ]

    # when
    suggestions = suggest_grades(modules, 4.25)

    # then
    assert list(suggestions.columns) == SUGGESTION_COLUMNS
    assert list(suggestions["code"]) == ["MOD2", "MOD3"]
    assert list(suggestions["suggested_grade"]) == ["B", "B-"]
    assert list(suggestions["impact"]) == [14.0, 6.0]
    assert suggestions["achievable"].all()


def test_suggest_grades_when_nothing_is_improvable():
    # when
    suggestions = suggest_grades([completed("MOD1", 4, "A+")], 4.5)

    # then
    assert suggestions.empty
    assert list(suggestions.columns) == SUGGESTION_COLUMNS
