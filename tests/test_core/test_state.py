import pytest

import gradtrack
from gradtrack import (
    DeansListOverride,
    GoalSettings,
    PersistedState,
    Timetable,
    TimetableEntry,
    WorkloadThresholds,
)
from gradtrack.core import normalize_scope

from util import completed


def test_default_state_round_trips_through_dict():
    # given
    state = PersistedState()

    # when
    restored = PersistedState.from_dict(state.to_dict())

    # then
    assert restored == state


def test_populated_state_round_trips_through_dict():
    # given
    entry = TimetableEntry(
        module_code="SC1003",
        module_name="Intro",
        day="Monday",
        start_time="09:30",
        end_time="11:30",
    )
    state = PersistedState(
        modules=[completed("SC1003", 3, "A")],
        goals=GoalSettings(target_cgpa=4.0, semester_goals={"Y1S1": 4.25}),
        target_au=140,
        timetables=[Timetable(year=1, semester=1, entries=[entry])],
        module_type_requirements={"Core": 60},
        deans_list_overrides={"Y1": DeansListOverride.FORCED_TRUE},
        selected_year=2,
        selected_semester=2,
        onboarding_complete=True,
    )

    # when
    restored = PersistedState.from_dict(state.to_dict())

    # then
    assert restored == state


def test_to_dict_uses_storage_keys():
    # when
    data = PersistedState().to_dict()

    # then
    assert data["targetAU"] == 130
    assert data["selectedSem"] == 1
    assert data["goals"]["targetCGPA"] == 4.5
    assert data["deanListOverrides"] == {}


def test_from_dict_fills_in_defaults_for_missing_fields():
    # when
    state = PersistedState.from_dict({"targetAU": 120})

    # then
    assert state.target_au == 120
    assert state.modules == []
    assert state.workload_thresholds == WorkloadThresholds()


def test_from_dict_skips_malformed_modules():
    # given
    data = {"modules": [completed("SC1003", 3, "A").to_dict(), {"code": "X"}]}

    # when
    state = PersistedState.from_dict(data)

    # then
    assert [m.code for m in state.modules] == ["SC1003"]


def test_from_dict_ignores_malformed_fields():
    # when
    state = PersistedState.from_dict({"targetAU": -5, "selectedYear": 9})

    # then
    assert state.target_au == 130
    assert state.selected_year == 1


def test_from_dict_converts_year_number_override_keys():
    # when
    state = PersistedState.from_dict(
        {"deanListOverrides": {"1": True, "2": False, "3": None, "bogus": True}}
    )

    # then
    assert state.deans_list_overrides == {
        "Y1": DeansListOverride.FORCED_TRUE,
        "Y2": DeansListOverride.FORCED_FALSE,
    }


def test_from_dict_of_non_mapping_raises():
    with pytest.raises(gradtrack.MalformedPersistedData):
        PersistedState.from_dict([1, 2, 3])


def test_goal_settings_validates_target():
    with pytest.raises(gradtrack.InvalidNumericInput):
        GoalSettings(target_cgpa=6)


def test_goal_settings_validates_semester_goal_keys():
    with pytest.raises(ValueError):
        GoalSettings(semester_goals={"Y9S1": 4.0})


def test_workload_thresholds_must_be_ordered():
    with pytest.raises(gradtrack.InvalidNumericInput):
        WorkloadThresholds(ideal_min=18, ideal_max=15)


def test_timetable_entry_validates_day_and_times():
    with pytest.raises(ValueError):
        TimetableEntry("X", "X", day="Someday", start_time="09:00", end_time="10:00")
    with pytest.raises(ValueError):
        TimetableEntry("X", "X", day="Monday", start_time="10:00", end_time="09:00")


def test_normalize_scope():
    assert normalize_scope("Y1S2") == "Y1S2"
    assert normalize_scope(2) == "Y2"
    assert normalize_scope("3") == "Y3"
    with pytest.raises(ValueError):
        normalize_scope("Y5")


def test_deans_list_override_coerce():
    assert DeansListOverride.coerce(True) is DeansListOverride.FORCED_TRUE
    assert DeansListOverride.coerce(False) is DeansListOverride.FORCED_FALSE
    assert DeansListOverride.coerce(None) is DeansListOverride.COMPUTED
    with pytest.raises(ValueError):
        DeansListOverride.coerce("yes")


@pytest.mark.parametrize("semester_goals", [["Y1S1"], "Y1S1", {1: 4.0}])
def test_goal_settings_rejects_malformed_semester_goals(semester_goals):
    with pytest.raises(ValueError):
        GoalSettings(semester_goals=semester_goals)


def test_from_dict_ignores_malformed_semester_goals():
    # when
    state = PersistedState.from_dict({"goals": {"semesterGoals": ["Y1S1"]}})

    # then
    assert state.goals == GoalSettings()
