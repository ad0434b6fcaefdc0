import pytest

import gradtrack
from gradtrack.statistics import classify_workload, is_semester_complete

from util import completed, pending


def test_semester_history_skips_incomplete_semesters():
    # given
    modules = [
        completed("MOD1", 4, "A", year=1, semester=1),
        completed("MOD2", 4, "A", year=1, semester=2),
        pending("MOD3", 4, year=1, semester=2),
    ]

    # when
    history = gradtrack.get_semester_history(modules)

    # then
    assert [s.label for s in history] == ["Y1S1"]


def test_semester_history_of_two_modules():
    # given
    modules = [completed("MOD1", 3, "B+"), completed("MOD2", 4, "A")]

    # when
    [stats] = gradtrack.get_semester_history(modules)

    # then
    assert stats.gpa == pytest.approx(32 / 7, abs=0.005)
    assert stats.total_au == 7
    assert stats.module_count == 2


def test_semester_history_is_chronological():
    # given
    modules = [
        completed("MOD1", 4, "A", year=2, semester=1),
        completed("MOD2", 4, "B", year=1, semester=2),
        completed("MOD3", 4, "C", year=1, semester=1),
    ]

    # when
    history = gradtrack.get_semester_history(modules)

    # then
    assert [(s.year, s.semester) for s in history] == [(1, 1), (1, 2), (2, 1)]


def test_semester_grade_distribution_omits_excluded_grades():
    # given
    modules = [
        completed("MOD1", 4, "A"),
        completed("MOD2", 4, "A"),
        completed("MOD3", 4, "S"),
        completed("MOD4", 4, "B-"),
    ]

    # when
    [stats] = gradtrack.get_semester_history(modules)

    # then
    assert stats.grade_distribution == {"A": 2, "B-": 1}
    assert list(stats.grade_distribution) == ["A", "B-"]
    assert stats.total_au == 16
    assert stats.gpa == pytest.approx(4.33)


def test_semester_history_of_no_modules_is_empty():
    assert gradtrack.get_semester_history([]) == []


def test_workload_counts_every_module_of_completed_semesters():
    # given
    modules = [
        completed("MOD1", 4, "A", year=1, semester=1),
        completed("MOD2", 3, "S", year=1, semester=1),
        completed("MOD3", 6, "B", year=1, semester=2),
        pending("MOD4", 4, year=2, semester=1),
    ]

    # when
    workload = gradtrack.get_semester_workload_data(modules)

    # then
    assert list(workload["label"]) == ["Y1S1", "Y1S2"]
    assert list(workload["value"]) == [7.0, 6.0]


def test_is_semester_complete():
    # given
    modules = [
        completed("MOD1", 4, "A", year=1, semester=1),
        pending("MOD2", 4, year=1, semester=2),
    ]

    # then
    assert is_semester_complete(modules, 1, 1)
    assert not is_semester_complete(modules, 1, 2)
    assert not is_semester_complete(modules, 2, 1)


@pytest.mark.parametrize(
    "au, expected",
    [(14, "light"), (15, "ideal"), (18, "ideal"), (21, "heavy"), (22, "overload")],
)
def test_classify_workload(au, expected):
    assert classify_workload(au) == expected


def test_classify_workload_with_custom_thresholds():
    # given
    thresholds = gradtrack.WorkloadThresholds(
        ideal_min=10, ideal_max=12, warning_max=14
    )

    # then
    assert classify_workload(13, thresholds) == "heavy"
