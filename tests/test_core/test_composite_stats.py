import pytest

import gradtrack
from gradtrack import composite_stats

from util import completed, pending


def example_modules():
    return [
        completed("MOD1", 3, "A", year=1, semester=1),
        completed("MOD2", 3, "B", year=1, semester=1),
        completed("MOD3", 4, "F", year=1, semester=2),
        completed("MOD4", 3, "S", year=1, semester=2),
        pending("MOD5", 3, year=2, semester=1, projected_grade="A"),
        pending("MOD6", 2, status="Not Started", year=2, semester=1),
        pending(
            "MOD7", 3, status="Not Started", year=2, semester=2, projected_grade="A"
        ),
    ]


def test_single_completed_module():
    # when
    stats = composite_stats([completed("SC1003", 4, "A")])

    # then
    assert stats.official.gpa == 5.0
    assert stats.official.au == 4


def test_weighted_average_of_two_modules():
    # given
    modules = [completed("MOD1", 3, "B+"), completed("MOD2", 4, "A")]

    # when
    stats = composite_stats(modules)

    # then
    assert stats.official.gpa == pytest.approx(32 / 7, abs=0.005)
    assert stats.official.au == 7


def test_empty_collection_has_zero_gpa():
    # when
    stats = composite_stats([])

    # then
    assert stats.official.gpa == 0
    assert stats.official.au == 0
    assert stats.projected.gpa == 0
    assert stats.total_existing_au == 0


def test_official_gpa_skips_excluded_and_unfinished_modules():
    # when
    stats = composite_stats(example_modules())

    # then
    assert stats.official.gpa == pytest.approx(2.55)
    assert stats.official.au == 10


def test_projected_gpa_folds_in_projected_grades():
    # when
    stats = composite_stats(example_modules())

    # then
    assert stats.projected.gpa == pytest.approx(3.47)
    assert stats.projected.au == 16


def test_projected_equals_official_without_projected_grades():
    # given
    modules = [completed("MOD1", 3, "A"), pending("MOD2", 3)]

    # when
    stats = composite_stats(modules)

    # then
    assert stats.projected == stats.official


def test_taken_and_total_au():
    # when
    stats = composite_stats(example_modules())

    # then
    assert stats.taken_au == 16
    assert stats.total_existing_au == 21
    assert stats.official.au <= stats.total_existing_au


def test_in_progress_module_with_grade_does_not_count_officially():
    # when
    stats = composite_stats([pending("MOD1", 3, grade="A")])

    # then
    assert stats.official.au == 0
    assert stats.official.gpa == 0


def test_result_does_not_depend_on_order():
    # given
    modules = example_modules()

    # when
    forward = composite_stats(modules)
    backward = composite_stats(list(reversed(modules)))

    # then
    assert forward == backward


def test_restricted_to_a_semester():
    # when
    stats = composite_stats(example_modules(), year=1, semester=2)

    # then
    assert stats.official.gpa == 0
    assert stats.official.au == 4
    assert stats.total_existing_au == 7


def test_restricted_to_a_year():
    # when
    stats = composite_stats(example_modules(), year=1)

    # then
    assert stats.official.au == 10
    assert isinstance(stats, gradtrack.CompositeStats)
