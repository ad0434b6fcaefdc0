"""Types for representing academic modules."""

import dataclasses
import enum
from typing import Optional

from ..exceptions import InvalidNumericInput
from ..scales import VALID_GRADES
from .._util import check_number, dataclass_from_dict, dataclass_to_dict, generate_id

YEARS = (1, 2, 3, 4)
SEMESTERS = (1, 2)


class ModuleStatus(str, enum.Enum):
    """Progress of a module. Only completed modules count toward graded AU."""

    NOT_STARTED = "Not Started"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


class ModuleType(str, enum.Enum):
    """The category a module counts toward.

    Members are declared in the order used whenever types are iterated.

    """

    CORE = "Core"
    BDE = "BDE"
    ICC_CORE = "ICC-Core"
    ICC_PROFESSIONAL_SERIES = "ICC-Professional Series"
    ICC_CSL = "ICC-CSL"
    FYP = "FYP"
    MATHEMATICS_PE = "Mathematics PE"
    PHYSICS_PE = "Physics PE"
    UE = "UE"
    OTHER = "Other"


#: every module type, in the documented iteration order
MODULE_TYPES = tuple(ModuleType)


# private helper functions =============================================================


def _check_period(year, semester):
    if year not in YEARS:
        raise InvalidNumericInput(f"Year must be one of {YEARS}, got {year!r}.")
    if semester not in SEMESTERS:
        raise InvalidNumericInput(
            f"Semester must be one of {SEMESTERS}, got {semester!r}."
        )


def _normalize_grade(grade):
    if grade is None or grade == "":
        return None
    if grade not in VALID_GRADES:
        raise ValueError(f'Unknown grade "{grade}".')
    return grade


# public classes =======================================================================


@dataclasses.dataclass
class Module:
    """A module the student has taken, is taking, or plans to take.

    Attributes
    ----------
    code : str
        The module code, e.g. ``"SC1003"``. Stored uppercased.
    name : str
        A human-readable title.
    au : float
        The credit weight of the module in academic units. Must be positive.
    type : ModuleType
        The category the module counts toward.
    year : int
        Year of study, from 1 to 4.
    semester : int
        Semester within the year, either 1 or 2.
    status : ModuleStatus
        Progress of the module.
    grade : Optional[str]
        The letter grade. Only meaningful once the module is completed.
    projected_grade : Optional[str]
        The grade the student expects in a module which is not yet completed.
        Used only for projected GPA.
    id : str
        Unique identifier. Generated when not given.
    created_at, updated_at : Optional[str]
        ISO-8601 timestamps maintained by :class:`gradtrack.store.StateStore`.

    """

    code: str
    name: str
    au: float
    type: ModuleType = ModuleType.CORE
    year: int = 1
    semester: int = 1
    status: ModuleStatus = ModuleStatus.NOT_STARTED
    grade: Optional[str] = None
    projected_grade: Optional[str] = None
    prerequisite_codes: list[str] = dataclasses.field(default_factory=list)
    notes: str = ""
    tags: list[str] = dataclasses.field(default_factory=list)
    id: str = dataclasses.field(default_factory=generate_id)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def __post_init__(self):
        self.code = str(self.code).strip().upper()
        self.type = ModuleType(self.type)
        self.status = ModuleStatus(self.status)
        check_number("AU", self.au, low=0, low_inclusive=False)
        _check_period(self.year, self.semester)
        self.grade = _normalize_grade(self.grade)
        self.projected_grade = _normalize_grade(self.projected_grade)
        self.prerequisite_codes = [str(c).upper() for c in self.prerequisite_codes]

    @property
    def period(self) -> tuple[int, int]:
        """The (year, semester) the module is scheduled in."""
        return (self.year, self.semester)

    @property
    def is_completed(self) -> bool:
        return self.status is ModuleStatus.COMPLETED

    def to_dict(self) -> dict:
        return dataclass_to_dict(self)

    @classmethod
    def from_dict(cls, data) -> "Module":
        return dataclass_from_dict(cls, data)


@dataclasses.dataclass
class PlannedModule:
    """A draft module in the course planner.

    A planned module becomes a :class:`Module` when it is committed with
    :meth:`gradtrack.store.StateStore.commit_planned_modules`.

    """

    code: str
    name: str
    au: float
    type: ModuleType = ModuleType.CORE
    year: int = 1
    semester: int = 1
    prerequisite_codes: list[str] = dataclasses.field(default_factory=list)
    id: str = dataclasses.field(default_factory=generate_id)

    def __post_init__(self):
        self.code = str(self.code).strip().upper()
        self.type = ModuleType(self.type)
        check_number("AU", self.au, low=0, low_inclusive=False)
        _check_period(self.year, self.semester)
        self.prerequisite_codes = [str(c).upper() for c in self.prerequisite_codes]

    def to_module(self, **kwargs) -> Module:
        """Create a not-yet-started module from this plan."""
        return Module(
            code=self.code,
            name=self.name,
            au=self.au,
            type=self.type,
            year=self.year,
            semester=self.semester,
            prerequisite_codes=list(self.prerequisite_codes),
            **kwargs,
        )

    def to_dict(self) -> dict:
        return dataclass_to_dict(self)

    @classmethod
    def from_dict(cls, data) -> "PlannedModule":
        return dataclass_from_dict(cls, data)
