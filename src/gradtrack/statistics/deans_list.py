"""Dean's List eligibility.

A scope (an academic year, or a single semester) is eligible when its GPA is
at least 4.50 over at least 15 graded AU. Only completed semesters are
considered: a year in which one semester is complete is evaluated on that
semester alone, and a year with no complete semester is omitted.

Stored overrides replace the eligibility that is *displayed*, but never the
GPA or AU that were computed.

"""

import dataclasses
from typing import Iterable, Mapping, Optional, Union

from ..core import (
    DeansListOverride,
    Module,
    YEARS,
    frame_stats,
    modules_frame,
    normalize_scope,
    semester_scope,
    year_scope,
)
from .history import complete_semesters

OverrideValue = Union[DeansListOverride, bool, None]


# public classes =======================================================================


@dataclasses.dataclass
class DeansListPolicy:
    """The thresholds a scope must meet to be eligible.

    Attributes
    ----------
    min_gpa : float
        Minimum GPA. Default: 4.5.
    min_graded_au : float
        Minimum number of graded AU. Default: 15.

    """

    min_gpa: float = 4.5
    min_graded_au: float = 15

    def is_eligible(self, gpa: float, graded_au: float) -> bool:
        return gpa >= self.min_gpa and graded_au >= self.min_graded_au


@dataclasses.dataclass(frozen=True)
class DeansListRecord:
    """Eligibility of one scope.

    Attributes
    ----------
    scope : str
        The scope key, ``"Y<year>"`` or ``"Y<year>S<semester>"``.
    year : int
        The year of study.
    semester : Optional[int]
        The semester, or ``None`` for a year scope.
    gpa : float
        GPA as computed. Never affected by overrides.
    graded_au : float
        Graded AU as computed. Never affected by overrides.
    computed_eligible : bool
        Whether the thresholds are met.
    override : DeansListOverride
        The stored override for this scope.
    semesters : tuple[DeansListRecord, ...]
        For year scopes, the records of the completed semesters in the year.

    """

    scope: str
    year: int
    semester: Optional[int]
    gpa: float
    graded_au: float
    computed_eligible: bool
    override: DeansListOverride = DeansListOverride.COMPUTED
    semesters: tuple["DeansListRecord", ...] = ()

    @property
    def label(self) -> str:
        if self.semester is None:
            return f"Year {self.year}"
        return self.scope

    @property
    def eligible(self) -> bool:
        """Eligibility after applying the override."""
        if self.override is DeansListOverride.COMPUTED:
            return self.computed_eligible
        return self.override.value

    @property
    def status(self) -> str:
        """How the record should be displayed."""
        if self.override is DeansListOverride.FORCED_TRUE:
            return "Confirmed"
        if self.override is DeansListOverride.FORCED_FALSE:
            return "Not Received"
        if self.computed_eligible:
            return "Eligible"
        return "Not Eligible"


# private helper functions =============================================================


def _normalize_overrides(
    overrides: Optional[Mapping[Union[str, int], OverrideValue]],
) -> dict[str, DeansListOverride]:
    if overrides is None:
        return {}
    return {
        normalize_scope(scope): DeansListOverride.coerce(value)
        for scope, value in overrides.items()
    }


def _record(table, scope, year, semester, policy, overrides, semesters=()):
    official = frame_stats(table).official
    return DeansListRecord(
        scope=scope,
        year=year,
        semester=semester,
        gpa=official.gpa,
        graded_au=official.au,
        computed_eligible=policy.is_eligible(official.gpa, official.au),
        override=overrides.get(scope, DeansListOverride.COMPUTED),
        semesters=tuple(semesters),
    )


# public functions =====================================================================


def get_deans_list_data(
    modules: Iterable[Module],
    overrides: Optional[Mapping[Union[str, int], OverrideValue]] = None,
    scope: str = "year",
    policy: Optional[DeansListPolicy] = None,
) -> list[DeansListRecord]:
    """Dean's List eligibility per scope.

    Parameters
    ----------
    modules : Iterable[Module]
        All of the student's modules.
    overrides : Optional[Mapping]
        Stored overrides keyed by scope. Values may be
        :class:`DeansListOverride` members, booleans, or ``None`` (unset).
        Bare year numbers are accepted as year scopes.
    scope : str
        Either ``"year"`` (default) or ``"semester"``.
    policy : Optional[DeansListPolicy]
        The eligibility thresholds. Default: ``DeansListPolicy()``.

    Returns
    -------
    list[DeansListRecord]
        One record per year with at least one completed semester, or one per
        completed semester, in chronological order.

    Raises
    ------
    ValueError
        If `scope` is not ``"year"`` or ``"semester"``, or an override key is
        not a valid scope.

    """
    if scope not in ("year", "semester"):
        raise ValueError(f'Scope must be "year" or "semester", not {scope!r}.')

    policy = policy if policy is not None else DeansListPolicy()
    overrides = _normalize_overrides(overrides)
    table = modules_frame(modules)

    semester_records = {}
    year_masks = {}
    for year, semester, mask in complete_semesters(table):
        key = semester_scope(year, semester)
        semester_records[(year, semester)] = _record(
            table[mask], key, year, semester, policy, overrides
        )
        if year in year_masks:
            year_masks[year] = year_masks[year] | mask
        else:
            year_masks[year] = mask

    if scope == "semester":
        return list(semester_records.values())

    records = []
    for year in YEARS:
        if year not in year_masks:
            continue
        semesters = [r for (y, _), r in semester_records.items() if y == year]
        records.append(
            _record(
                table[year_masks[year]],
                year_scope(year),
                year,
                None,
                policy,
                overrides,
                semesters,
            )
        )
    return records
