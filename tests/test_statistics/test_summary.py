import gradtrack
from gradtrack.statistics import get_grade_distribution, get_performance_insights

from util import completed, pending


def test_grade_distribution_counts_completed_modules_only():
    # given
    modules = [
        completed("MOD1", 4, "A"),
        completed("MOD2", 4, "A"),
        pending("MOD3", 4, grade="F"),
    ]

    # when
    distribution = get_grade_distribution(modules)

    # then
    assert dict(distribution) == {"A": 2}


def test_grade_point_distribution_is_in_rank_order():
    # given
    modules = [
        completed("MOD1", 4, "B"),
        completed("MOD2", 4, "A+"),
        completed("MOD3", 4, "A"),
        completed("MOD4", 4, "S"),
        completed("MOD5", 4, "B"),
    ]

    # when
    distribution = gradtrack.get_grade_point_distribution(modules)

    # then
    assert list(distribution["label"]) == ["A+", "A", "B"]
    assert list(distribution["value"]) == [1, 1, 2]


def test_module_type_breakdown():
    # given
    modules = [
        completed("MOD1", 4, "A", type="Core"),
        completed("MOD2", 4, "B", type="Core"),
        pending("MOD3", 8, type="FYP"),
    ]

    # when
    breakdown = gradtrack.get_module_type_breakdown(modules)

    # then
    assert list(breakdown["type"]) == ["Core", "FYP"]
    assert list(breakdown["count"]) == [2, 1]
    assert list(breakdown["au"]) == [8.0, 8.0]
    assert list(breakdown["average_gpa"]) == [4.25, 0.0]


def test_performance_insights():
    # given
    modules = [
        completed("MOD1", 4, "A", year=1, semester=1, type="Core"),
        completed("MOD2", 4, "A+", year=1, semester=2, type="UE"),
        completed("MOD3", 2, "C", year=1, semester=2, type="Core"),
        completed("MOD4", 6, "B", year=2, semester=1, type="BDE"),
    ]

    # when
    insights = get_performance_insights(modules)

    # then
    assert insights.best_semester == ("Y1S1", 5.0)
    assert insights.worst_semester == ("Y2S1", 3.5)
    assert insights.best_module == ("MOD2", "A+")
    assert insights.average_au_per_semester == 5.3
    assert insights.strongest_type == "UE"


def test_performance_insights_of_no_modules():
    # when
    insights = get_performance_insights([])

    # then
    assert insights.best_semester is None
    assert insights.best_module is None
    assert insights.average_au_per_semester == 0
    assert insights.strongest_type is None
