"""Analytics computed from a student's modules.

Every function here is pure: it reads the modules it is given and returns a
new result, so any number of callers may use them at once.

"""

from .history import (
    SEMESTER_KEYS,
    SemesterStats,
    classify_workload,
    complete_semesters,
    get_semester_history,
    get_semester_workload_data,
    is_semester_complete,
)
from .trends import (
    get_cumulative_vs_semester_data,
    get_gpa_trend_data,
    get_semester_changes,
)
from .deans_list import (
    DeansListPolicy,
    DeansListRecord,
    get_deans_list_data,
)
from .readiness import (
    COVERAGE_COLUMNS,
    AUProgress,
    GraduationReadiness,
    get_au_progress_data,
    get_graduation_readiness,
    get_type_coverage,
)
from .impact import IMPACT_COLUMNS, get_credit_weighted_impact
from .summary import (
    PerformanceInsights,
    get_grade_distribution,
    get_grade_point_distribution,
    get_module_type_breakdown,
    get_performance_insights,
)

__all__ = [
    "SEMESTER_KEYS",
    "SemesterStats",
    "classify_workload",
    "complete_semesters",
    "get_semester_history",
    "get_semester_workload_data",
    "is_semester_complete",
    "get_cumulative_vs_semester_data",
    "get_gpa_trend_data",
    "get_semester_changes",
    "DeansListPolicy",
    "DeansListRecord",
    "get_deans_list_data",
    "COVERAGE_COLUMNS",
    "AUProgress",
    "GraduationReadiness",
    "get_au_progress_data",
    "get_graduation_readiness",
    "get_type_coverage",
    "IMPACT_COLUMNS",
    "get_credit_weighted_impact",
    "PerformanceInsights",
    "get_grade_distribution",
    "get_grade_point_distribution",
    "get_module_type_breakdown",
    "get_performance_insights",
]
