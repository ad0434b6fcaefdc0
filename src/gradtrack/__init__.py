"""A package for tracking academic modules and projecting graduation outcomes."""

from .core import (
    Module,
    PlannedModule,
    ModuleStatus,
    ModuleType,
    MODULE_TYPES,
    GradeSummary,
    CompositeStats,
    composite_stats,
    AnalyticsSnapshot,
    DeansListOverride,
    Examination,
    GoalSettings,
    PersistedState,
    Timetable,
    TimetableEntry,
    WorkloadThresholds,
)

from .statistics import (
    get_semester_history,
    get_gpa_trend_data,
    get_semester_workload_data,
    get_cumulative_vs_semester_data,
    get_semester_changes,
    get_deans_list_data,
    get_graduation_readiness,
    get_credit_weighted_impact,
    get_module_type_breakdown,
    get_grade_point_distribution,
    DeansListPolicy,
)

from .store import StateStore, StoreOptions, migrate
from .exceptions import InvalidNumericInput, MalformedPersistedData

from . import goals
from . import io
from . import predictions
from . import prerequisites
from . import scales
from . import statistics

__all__ = [
    "Module",
    "PlannedModule",
    "ModuleStatus",
    "ModuleType",
    "MODULE_TYPES",
    "GradeSummary",
    "CompositeStats",
    "composite_stats",
    "AnalyticsSnapshot",
    "DeansListOverride",
    "Examination",
    "GoalSettings",
    "PersistedState",
    "Timetable",
    "TimetableEntry",
    "WorkloadThresholds",
    "get_semester_history",
    "get_gpa_trend_data",
    "get_semester_workload_data",
    "get_cumulative_vs_semester_data",
    "get_semester_changes",
    "get_deans_list_data",
    "get_graduation_readiness",
    "get_credit_weighted_impact",
    "get_module_type_breakdown",
    "get_grade_point_distribution",
    "DeansListPolicy",
    "StateStore",
    "StoreOptions",
    "migrate",
    "InvalidNumericInput",
    "MalformedPersistedData",
    "goals",
    "io",
    "predictions",
    "prerequisites",
    "scales",
    "statistics",
]
