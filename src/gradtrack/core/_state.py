"""Types for the persisted application state."""

import dataclasses
import enum
import logging
import re
from collections.abc import Mapping
from typing import Any, Callable, Optional

from ..exceptions import InvalidNumericInput, MalformedPersistedData
from .._util import (
    check_number,
    dataclass_from_dict,
    dataclass_to_dict,
    generate_id,
    now_iso,
)
from ._module import SEMESTERS, YEARS, Module, ModuleType, PlannedModule

logger = logging.getLogger(__name__)

#: version of the persisted state layout written by this package
STATE_VERSION = 4

DEFAULT_TARGET_AU = 130

DAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
CLASS_TYPES = ("Lecture", "Tutorial", "Lab", "Seminar", "Other")
EXAM_TYPES = ("Midterm", "Final", "Quiz", "Other")

_SCOPE_PATTERN = re.compile(r"^Y([1-4])(?:S([12]))?$")
_SEMESTER_KEY_PATTERN = re.compile(r"^Y[1-4]S[12]$")


# scopes ===============================================================================


def year_scope(year: int) -> str:
    """The key of an academic year scope, e.g. ``"Y2"``."""
    return f"Y{year}"


def semester_scope(year: int, semester: int) -> str:
    """The key of a semester scope, e.g. ``"Y2S1"``."""
    return f"Y{year}S{semester}"


def normalize_scope(scope) -> str:
    """Validate a scope key.

    Bare year numbers (as used by older stored overrides) are accepted and
    converted to year scopes.

    Raises
    ------
    ValueError
        If the scope is not of the form ``"Y<year>"`` or ``"Y<year>S<semester>"``.

    """
    if isinstance(scope, int) and not isinstance(scope, bool):
        scope = str(scope)
    if isinstance(scope, str) and scope.isdigit():
        scope = f"Y{scope}"
    if not isinstance(scope, str) or _SCOPE_PATTERN.match(scope) is None:
        raise ValueError(f"Invalid scope {scope!r}.")
    return scope


# public classes =======================================================================


class DeansListOverride(enum.Enum):
    """A manual override of a computed Dean's List eligibility."""

    COMPUTED = None
    FORCED_TRUE = True
    FORCED_FALSE = False

    @classmethod
    def coerce(cls, value) -> "DeansListOverride":
        """Accept a member, a boolean, or ``None`` (meaning unset)."""
        if isinstance(value, cls):
            return value
        if value is None or isinstance(value, bool):
            return cls(value)
        raise ValueError(f"Invalid Dean's List override {value!r}.")


@dataclasses.dataclass
class GoalSettings:
    """The student's GPA goals.

    Attributes
    ----------
    target_cgpa : float
        The CGPA the student is aiming for, between 0 and 5. Default: 4.5.
    semester_goals : dict[str, float]
        Sparse per-semester GPA targets keyed like ``"Y1S2"``.
    notifications : bool
        Whether goal notifications are enabled. Default: True.
    warning_threshold : float
        Percentage behind goal at which to warn, between 0 and 100. Default: 10.
    graduation_target : Optional[float]
        Optional CGPA the student wants to graduate with.

    """

    target_cgpa: float = 4.5
    semester_goals: dict[str, float] = dataclasses.field(default_factory=dict)
    notifications: bool = True
    warning_threshold: float = 10
    graduation_target: Optional[float] = None

    def __post_init__(self):
        check_number("Target CGPA", self.target_cgpa, low=0, high=5)
        check_number("Warning threshold", self.warning_threshold, low=0, high=100)
        if self.graduation_target is not None:
            check_number("Graduation target", self.graduation_target, low=0, high=5)
        if not isinstance(self.semester_goals, Mapping):
            raise ValueError("Semester goals must be a mapping.")
        for key, gpa in self.semester_goals.items():
            if not isinstance(key, str) or _SEMESTER_KEY_PATTERN.match(key) is None:
                raise ValueError(f"Invalid semester goal key {key!r}.")
            check_number(f"Goal for {key}", gpa, low=0, high=5)
        self.semester_goals = dict(self.semester_goals)

    def to_dict(self) -> dict:
        return dataclass_to_dict(self)

    @classmethod
    def from_dict(cls, data) -> "GoalSettings":
        return dataclass_from_dict(cls, data)


@dataclasses.dataclass
class WorkloadThresholds:
    """AU per semester delimiting the light, ideal, heavy and overload zones."""

    ideal_min: float = 15
    ideal_max: float = 18
    warning_max: float = 21

    def __post_init__(self):
        check_number("Ideal minimum", self.ideal_min, low=0)
        check_number("Ideal maximum", self.ideal_max, low=self.ideal_min)
        check_number("Warning maximum", self.warning_max, low=self.ideal_max)

    def to_dict(self) -> dict:
        return dataclass_to_dict(self)

    @classmethod
    def from_dict(cls, data) -> "WorkloadThresholds":
        return dataclass_from_dict(cls, data)


@dataclasses.dataclass
class TimetableEntry:
    """A class slot in a semester timetable.

    Recurring entries repeat weekly over the teaching weeks listed in `weeks`
    (all thirteen when `weeks` is ``None``). One-off entries happen on
    `specific_date`.

    """

    module_code: str
    module_name: str
    day: str
    start_time: str
    end_time: str
    venue: str = ""
    class_type: str = "Lecture"
    recurring: bool = True
    weeks: Optional[list[int]] = None
    include_recess_week: bool = False
    specific_date: Optional[str] = None
    color: Optional[str] = None
    notes: Optional[str] = None
    id: str = dataclasses.field(default_factory=generate_id)

    def __post_init__(self):
        if self.day not in DAYS:
            raise ValueError(f"Unknown day {self.day!r}.")
        if self.class_type not in CLASS_TYPES:
            raise ValueError(f"Unknown class type {self.class_type!r}.")
        if self.start_time >= self.end_time:
            raise ValueError("A timetable entry must end after it starts.")

    def to_dict(self) -> dict:
        return dataclass_to_dict(self)

    @classmethod
    def from_dict(cls, data) -> "TimetableEntry":
        return dataclass_from_dict(cls, data)


@dataclasses.dataclass
class Examination:
    """A scheduled examination."""

    module_code: str
    module_name: str
    date: str
    start_time: str
    end_time: str
    exam_type: str = "Final"
    duration: int = 120
    venue: str = ""
    notes: Optional[str] = None
    color: Optional[str] = None
    id: str = dataclasses.field(default_factory=generate_id)

    def __post_init__(self):
        if self.exam_type not in EXAM_TYPES:
            raise ValueError(f"Unknown exam type {self.exam_type!r}.")
        check_number("Duration", self.duration, low=0, low_inclusive=False)

    def to_dict(self) -> dict:
        return dataclass_to_dict(self)

    @classmethod
    def from_dict(cls, data) -> "Examination":
        return dataclass_from_dict(cls, data)


@dataclasses.dataclass
class Timetable:
    """The classes and examinations of one semester."""

    year: int
    semester: int
    entries: list[TimetableEntry] = dataclasses.field(default_factory=list)
    examinations: list[Examination] = dataclasses.field(default_factory=list)
    calendar: Optional[dict] = None

    def __post_init__(self):
        if self.year not in YEARS or self.semester not in SEMESTERS:
            raise InvalidNumericInput(
                f"Invalid timetable period Y{self.year}S{self.semester}."
            )

    def to_dict(self) -> dict:
        return {
            "year": self.year,
            "semester": self.semester,
            "entries": [e.to_dict() for e in self.entries],
            "examinations": [e.to_dict() for e in self.examinations],
            "calendar": self.calendar,
        }

    @classmethod
    def from_dict(cls, data) -> "Timetable":
        if not isinstance(data, Mapping):
            raise MalformedPersistedData("A timetable must be a mapping.")
        try:
            return cls(
                year=data["year"],
                semester=data["semester"],
                entries=decode_list(TimetableEntry.from_dict, data.get("entries")),
                examinations=decode_list(
                    Examination.from_dict, data.get("examinations")
                ),
                calendar=data.get("calendar"),
            )
        except (KeyError, ValueError) as exc:
            raise MalformedPersistedData(f"Invalid timetable: {exc}") from exc


@dataclasses.dataclass
class AnalyticsSnapshot:
    """A point-in-time record of the student's standing."""

    cgpa: float
    total_au: float
    module_count: int
    grade_distribution: dict[str, int] = dataclasses.field(default_factory=dict)
    timestamp: str = dataclasses.field(default_factory=now_iso)
    id: str = dataclasses.field(default_factory=generate_id)

    def to_dict(self) -> dict:
        return dataclass_to_dict(self)

    @classmethod
    def from_dict(cls, data) -> "AnalyticsSnapshot":
        return dataclass_from_dict(cls, data)


@dataclasses.dataclass
class PersistedState:
    """Everything the application persists between sessions.

    Instances held by :class:`gradtrack.store.StateStore` are replaced, never
    modified, when the store commits a change.

    """

    modules: list[Module] = dataclasses.field(default_factory=list)
    goals: GoalSettings = dataclasses.field(default_factory=GoalSettings)
    snapshots: list[AnalyticsSnapshot] = dataclasses.field(default_factory=list)
    target_au: float = DEFAULT_TARGET_AU
    timetables: list[Timetable] = dataclasses.field(default_factory=list)
    planned_modules: list[PlannedModule] = dataclasses.field(default_factory=list)
    workload_thresholds: WorkloadThresholds = dataclasses.field(
        default_factory=WorkloadThresholds
    )
    module_type_requirements: dict[str, float] = dataclasses.field(
        default_factory=dict
    )
    deans_list_overrides: dict[str, DeansListOverride] = dataclasses.field(
        default_factory=dict
    )
    selected_year: int = 1
    selected_semester: int = 1
    onboarding_complete: bool = False

    def to_dict(self) -> dict:
        return {
            "modules": [m.to_dict() for m in self.modules],
            "goals": self.goals.to_dict(),
            "snapshots": [s.to_dict() for s in self.snapshots],
            "targetAU": self.target_au,
            "timetables": [t.to_dict() for t in self.timetables],
            "plannedModules": [p.to_dict() for p in self.planned_modules],
            "workloadThresholds": self.workload_thresholds.to_dict(),
            "moduleTypeRequirements": dict(self.module_type_requirements),
            "deanListOverrides": {
                scope: override.value
                for scope, override in self.deans_list_overrides.items()
                if override is not DeansListOverride.COMPUTED
            },
            "selectedYear": self.selected_year,
            "selectedSem": self.selected_semester,
            "onboardingComplete": self.onboarding_complete,
        }

    @classmethod
    def from_dict(cls, data) -> "PersistedState":
        """Decode a stored state, using defaults for anything absent or malformed.

        Raises
        ------
        MalformedPersistedData
            If `data` is not a mapping at all.

        """
        return cls(**decode_state_fields(data))


# decoding =============================================================================


def decode_list(decoder: Callable[[Any], Any], items, what: str = "item") -> list:
    """Decode each item of a stored list, skipping those which are malformed."""
    if items is None:
        return []
    if not isinstance(items, list):
        raise MalformedPersistedData(f"Expected a list of {what}s.")

    result = []
    for item in items:
        try:
            result.append(decoder(item))
        except MalformedPersistedData as exc:
            logger.warning("Skipping malformed %s: %s", what, exc)
    return result


def _decode_target_au(value) -> float:
    try:
        return check_number("Target AU", value, low=0, low_inclusive=False)
    except InvalidNumericInput as exc:
        raise MalformedPersistedData(str(exc)) from exc


def _decode_requirements(value) -> dict[str, float]:
    if not isinstance(value, Mapping):
        raise MalformedPersistedData("Module type requirements must be a mapping.")

    requirements = {}
    for key, au in value.items():
        try:
            module_type = ModuleType(key)
            check_number(f"Required AU for {key}", au, low=0, low_inclusive=False)
        except ValueError as exc:
            logger.warning("Skipping module type requirement %r: %s", key, exc)
            continue
        requirements[module_type.value] = au
    return requirements


def _decode_overrides(value) -> dict[str, DeansListOverride]:
    if not isinstance(value, Mapping):
        raise MalformedPersistedData("Dean's List overrides must be a mapping.")

    overrides = {}
    for key, flag in value.items():
        try:
            scope = normalize_scope(key)
            override = DeansListOverride.coerce(flag)
        except ValueError as exc:
            logger.warning("Skipping Dean's List override %r: %s", key, exc)
            continue
        if override is not DeansListOverride.COMPUTED:
            overrides[scope] = override
    return overrides


def _decode_period(name, allowed):
    def decode(value):
        if value not in allowed:
            raise MalformedPersistedData(f"Invalid {name} {value!r}.")
        return value

    return decode


def _decode_flag(value) -> bool:
    if not isinstance(value, bool):
        raise MalformedPersistedData(f"Expected a boolean, got {value!r}.")
    return value


_STATE_FIELDS: dict[str, tuple[str, Callable[[Any], Any]]] = {
    "modules": (
        "modules",
        lambda v: decode_list(Module.from_dict, v, "module"),
    ),
    "goals": ("goals", GoalSettings.from_dict),
    "snapshots": (
        "snapshots",
        lambda v: decode_list(AnalyticsSnapshot.from_dict, v, "snapshot"),
    ),
    "targetAU": ("target_au", _decode_target_au),
    "timetables": (
        "timetables",
        lambda v: decode_list(Timetable.from_dict, v, "timetable"),
    ),
    "plannedModules": (
        "planned_modules",
        lambda v: decode_list(PlannedModule.from_dict, v, "planned module"),
    ),
    "workloadThresholds": ("workload_thresholds", WorkloadThresholds.from_dict),
    "moduleTypeRequirements": ("module_type_requirements", _decode_requirements),
    "deanListOverrides": ("deans_list_overrides", _decode_overrides),
    "selectedYear": ("selected_year", _decode_period("year", YEARS)),
    "selectedSem": ("selected_semester", _decode_period("semester", SEMESTERS)),
    "onboardingComplete": ("onboarding_complete", _decode_flag),
}


def decode_state_fields(data) -> dict[str, Any]:
    """Decode the fields present in a stored state.

    Only keys present (and not null) in `data` appear in the result, which
    maps :class:`PersistedState` attribute names to decoded values. Fields
    which cannot be decoded are logged and left out.

    Raises
    ------
    MalformedPersistedData
        If `data` is not a mapping.

    """
    if not isinstance(data, Mapping):
        raise MalformedPersistedData(
            f"Expected the state to be a mapping, got {type(data).__name__}."
        )

    fields = {}
    for key, (attr, decoder) in _STATE_FIELDS.items():
        if data.get(key) is None:
            continue
        try:
            fields[attr] = decoder(data[key])
        except MalformedPersistedData as exc:
            logger.warning('Ignoring malformed "%s": %s', key, exc)
    return fields
