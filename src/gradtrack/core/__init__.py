from ._module import (
    Module,
    PlannedModule,
    ModuleStatus,
    ModuleType,
    MODULE_TYPES,
    YEARS,
    SEMESTERS,
)
from ._stats import (
    GradeSummary,
    CompositeStats,
    composite_stats,
    frame_stats,
    modules_frame,
)
from ._state import (
    AnalyticsSnapshot,
    DeansListOverride,
    Examination,
    GoalSettings,
    PersistedState,
    Timetable,
    TimetableEntry,
    WorkloadThresholds,
    DEFAULT_TARGET_AU,
    STATE_VERSION,
    decode_state_fields,
    normalize_scope,
    semester_scope,
    year_scope,
)

__all__ = [
    "Module",
    "PlannedModule",
    "ModuleStatus",
    "ModuleType",
    "MODULE_TYPES",
    "YEARS",
    "SEMESTERS",
    "GradeSummary",
    "CompositeStats",
    "composite_stats",
    "frame_stats",
    "modules_frame",
    "AnalyticsSnapshot",
    "DeansListOverride",
    "Examination",
    "GoalSettings",
    "PersistedState",
    "Timetable",
    "TimetableEntry",
    "WorkloadThresholds",
    "DEFAULT_TARGET_AU",
    "STATE_VERSION",
    "decode_state_fields",
    "normalize_scope",
    "semester_scope",
    "year_scope",
]
