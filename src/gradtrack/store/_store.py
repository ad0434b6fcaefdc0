"""The owner of the persisted application state."""

import copy
import dataclasses
import json
import logging
from collections.abc import Mapping
from typing import Callable, Iterable, Optional, Union

from ..core import (
    SEMESTERS,
    YEARS,
    AnalyticsSnapshot,
    DeansListOverride,
    Examination,
    Module,
    ModuleType,
    PersistedState,
    PlannedModule,
    Timetable,
    TimetableEntry,
    composite_stats,
    decode_state_fields,
    normalize_scope,
)
from ..exceptions import InvalidNumericInput, MalformedPersistedData
from ..io.storage import MemoryStorage
from ..statistics import get_grade_distribution
from .._util import check_number, generate_id, now_iso
from ._migrate import CURRENT_VERSION, migrate

logger = logging.getLogger(__name__)

#: the keys of an export, besides ``version`` and ``exportDate``
EXPORT_KEYS = [
    "modules",
    "goals",
    "timetables",
    "plannedModules",
    "targetAU",
    "snapshots",
    "workloadThresholds",
    "moduleTypeRequirements",
    "deanListOverrides",
]

_MANAGED_FIELDS = {"id", "created_at", "updated_at"}


# StoreOptions -------------------------------------------------------------------------


@dataclasses.dataclass
class StoreOptions:
    """Configures a :class:`StateStore`.

    Attributes
    ----------
    storage_key : str
        The key the state is stored under. Default: ``"gradtrack-storage"``.
    legacy_key : str
        The key of the legacy module list imported when migrating from
        version 0 or 1. Default: ``"ntu_gpa_data"``.
    snapshot_limit : int
        How many analytics snapshots to keep; older ones are dropped.
        Default: 50.

    """

    storage_key: str = "gradtrack-storage"
    legacy_key: str = "ntu_gpa_data"
    snapshot_limit: int = 50


# private helper functions =============================================================


def _check_period(year, semester):
    if year not in YEARS or semester not in SEMESTERS:
        raise InvalidNumericInput(f"Invalid period Y{year}S{semester}.")


def _check_updates(updates):
    managed = _MANAGED_FIELDS & set(updates)
    if managed:
        raise ValueError(f"Fields {sorted(managed)} are managed by the store.")


def _find_index(items, item_id) -> int:
    for i, item in enumerate(items):
        if item.id == item_id:
            return i
    raise KeyError(f'No item with id "{item_id}".')


def _find_timetable(state, year, semester) -> Optional[Timetable]:
    for timetable in state.timetables:
        if timetable.year == year and timetable.semester == semester:
            return timetable
    return None


# StateStore ===========================================================================


class StateStore:
    """Holds the application state and persists it after every change.

    Every action builds a new :class:`PersistedState` and swaps it in at once,
    so a state obtained from :attr:`state` is never modified afterwards. If an
    action raises, nothing is changed.

    Persistence is best effort: if the storage backend fails, a warning is
    logged and the in-memory state remains authoritative.

    Parameters
    ----------
    storage : Optional
        A key-value backend from :mod:`gradtrack.io.storage`. Default: a new
        :class:`gradtrack.io.MemoryStorage`.
    options : Optional[StoreOptions]
        Options controlling the store. Default: ``StoreOptions()``.
    clock : Optional[Callable[[], str]]
        Returns the current time as an ISO-8601 string. Used for every
        timestamp the store writes.

    """

    def __init__(
        self,
        storage=None,
        options: Optional[StoreOptions] = None,
        clock: Optional[Callable[[], str]] = None,
    ):
        self.storage = storage if storage is not None else MemoryStorage()
        self.options = options if options is not None else StoreOptions()
        self._clock = clock if clock is not None else now_iso
        self._state = self._load()

    def __repr__(self):
        return (
            f"<{self.__class__.__name__} with {len(self._state.modules)} modules "
            f"in {self.storage!r}>"
        )

    @property
    def state(self) -> PersistedState:
        """The current state. Treat it as read-only."""
        return self._state

    @property
    def modules(self) -> list[Module]:
        return self._state.modules

    # loading and saving ---------------------------------------------------------------

    def _read(self, key):
        try:
            return self.storage.get_item(key)
        except (OSError, MalformedPersistedData) as exc:
            logger.warning('Could not read "%s" from storage: %s', key, exc)
            return None

    def _read_envelope(self):
        """The stored (version, state), or (None, None) if there is none."""
        text = self._read(self.options.storage_key)
        if text is None:
            return None, None

        try:
            envelope = json.loads(text)
        except json.JSONDecodeError as exc:
            logger.warning("Stored state is not valid JSON: %s", exc)
            return None, None

        if not isinstance(envelope, Mapping):
            logger.warning("Stored state is not an object; ignoring it.")
            return None, None

        return envelope.get("version"), envelope.get("state")

    def _load(self) -> PersistedState:
        version, raw = self._read_envelope()

        # newer layouts are read as is and left in storage untouched
        if isinstance(version, int) and version >= CURRENT_VERSION and raw is not None:
            return migrate(version, raw)

        legacy = None
        if not isinstance(version, int) or version <= 1 or raw is None:
            legacy = self._read(self.options.legacy_key)

        state = migrate(version, raw, legacy_payload=legacy, timestamp=self._clock())
        if raw is None and legacy is None:
            logger.debug("Nothing stored yet; starting with the default state.")
        else:
            logger.info(
                "Migrated stored state from version %s to %d.", version, CURRENT_VERSION
            )
        self._persist(state)
        return state

    def _persist(self, state: PersistedState):
        envelope = {"state": state.to_dict(), "version": CURRENT_VERSION}
        try:
            self.storage.set_item(self.options.storage_key, json.dumps(envelope))
        except OSError as exc:
            logger.warning("Could not persist state; keeping it in memory: %s", exc)

    def _draft(self) -> PersistedState:
        return copy.deepcopy(self._state)

    def _commit(self, state: PersistedState, action: str):
        self._state = state
        logger.debug("Committed %s.", action)
        self._persist(state)

    # modules --------------------------------------------------------------------------

    def add_module(self, module: Module) -> Module:
        """Add a module, stamping its creation and update times.

        A module whose id is already in use is given a fresh id.

        """
        state = self._draft()
        now = self._clock()
        module = dataclasses.replace(module, created_at=now, updated_at=now)
        if any(m.id == module.id for m in state.modules):
            module = dataclasses.replace(module, id=generate_id())
        state.modules.append(module)
        self._commit(state, f"add module {module.code}")
        return module

    def update_module(self, module_id: str, **updates) -> Module:
        """Change some fields of a module and refresh its update time.

        Raises
        ------
        KeyError
            If no module has the given id.
        ValueError
            If an update is invalid, or names a field the store manages.

        """
        _check_updates(updates)
        state = self._draft()
        i = _find_index(state.modules, module_id)
        state.modules[i] = dataclasses.replace(
            state.modules[i], **updates, updated_at=self._clock()
        )
        self._commit(state, f"update module {module_id}")
        return state.modules[i]

    def delete_module(self, module_id: str):
        self.delete_modules([module_id])

    def delete_modules(self, module_ids: Iterable[str]):
        """Delete modules by id. Unknown ids are ignored."""
        ids = set(module_ids)
        state = self._draft()
        state.modules = [m for m in state.modules if m.id not in ids]
        self._commit(state, f"delete {len(ids)} modules")

    def set_modules(self, modules: Iterable[Module]):
        """Replace every module."""
        state = self._draft()
        state.modules = copy.deepcopy(list(modules))
        self._commit(state, "set modules")

    def move_modules(self, module_ids: Iterable[str], year: int, semester: int):
        """Move modules to another semester."""
        _check_period(year, semester)
        ids = set(module_ids)
        now = self._clock()
        state = self._draft()
        state.modules = [
            dataclasses.replace(m, year=year, semester=semester, updated_at=now)
            if m.id in ids
            else m
            for m in state.modules
        ]
        self._commit(state, f"move {len(ids)} modules to Y{year}S{semester}")

    # planned modules ------------------------------------------------------------------

    def add_planned_module(self, planned: PlannedModule) -> PlannedModule:
        state = self._draft()
        state.planned_modules.append(planned)
        self._commit(state, f"plan module {planned.code}")
        return planned

    def update_planned_module(self, planned_id: str, **updates) -> PlannedModule:
        """Change some fields of a planned module.

        Raises
        ------
        KeyError
            If no planned module has the given id.

        """
        _check_updates(updates)
        state = self._draft()
        i = _find_index(state.planned_modules, planned_id)
        state.planned_modules[i] = dataclasses.replace(
            state.planned_modules[i], **updates
        )
        self._commit(state, f"update planned module {planned_id}")
        return state.planned_modules[i]

    def delete_planned_module(self, planned_id: str):
        state = self._draft()
        state.planned_modules = [
            p for p in state.planned_modules if p.id != planned_id
        ]
        self._commit(state, f"delete planned module {planned_id}")

    def set_planned_modules(self, planned: Iterable[PlannedModule]):
        state = self._draft()
        state.planned_modules = copy.deepcopy(list(planned))
        self._commit(state, "set planned modules")

    def commit_planned_modules(self, planned_ids: Iterable[str]) -> list[Module]:
        """Turn planned modules into not-yet-started modules.

        The committed plans are removed from the planner. A plan whose code
        matches an existing module (including one committed earlier in the
        same call) is dropped without creating a module.

        Returns
        -------
        list[Module]
            The modules that were created.

        """
        ids = set(planned_ids)
        now = self._clock()
        state = self._draft()

        codes = {m.code for m in state.modules}
        added = []
        for planned in state.planned_modules:
            if planned.id not in ids:
                continue
            if planned.code in codes:
                logger.debug("Skipping planned %s; the module exists.", planned.code)
                continue
            module = planned.to_module(created_at=now, updated_at=now)
            state.modules.append(module)
            codes.add(module.code)
            added.append(module)

        state.planned_modules = [p for p in state.planned_modules if p.id not in ids]
        self._commit(state, f"commit {len(added)} planned modules")
        return added

    # timetables -----------------------------------------------------------------------

    def get_timetable(self, year: int, semester: int) -> Timetable:
        """The timetable of a semester, or an empty one if none is stored."""
        timetable = _find_timetable(self._state, year, semester)
        if timetable is None:
            return Timetable(year=year, semester=semester)
        return timetable

    def _draft_timetable(self, year, semester):
        _check_period(year, semester)
        state = self._draft()
        timetable = _find_timetable(state, year, semester)
        if timetable is None:
            timetable = Timetable(year=year, semester=semester)
            state.timetables.append(timetable)
        return state, timetable

    def add_timetable_entry(self, year: int, semester: int, entry: TimetableEntry):
        state, timetable = self._draft_timetable(year, semester)
        timetable.entries.append(entry)
        self._commit(state, f"add timetable entry to Y{year}S{semester}")

    def update_timetable_entry(
        self, year: int, semester: int, entry_id: str, **updates
    ) -> TimetableEntry:
        """Change some fields of a timetable entry.

        Raises
        ------
        KeyError
            If the semester has no entry with the given id.

        """
        state, timetable = self._draft_timetable(year, semester)
        i = _find_index(timetable.entries, entry_id)
        timetable.entries[i] = dataclasses.replace(timetable.entries[i], **updates)
        self._commit(state, f"update timetable entry {entry_id}")
        return timetable.entries[i]

    def delete_timetable_entry(self, year: int, semester: int, entry_id: str):
        state, timetable = self._draft_timetable(year, semester)
        timetable.entries = [e for e in timetable.entries if e.id != entry_id]
        self._commit(state, f"delete timetable entry {entry_id}")

    def add_examination(self, year: int, semester: int, examination: Examination):
        state, timetable = self._draft_timetable(year, semester)
        timetable.examinations.append(examination)
        self._commit(state, f"add examination to Y{year}S{semester}")

    def delete_examination(self, year: int, semester: int, examination_id: str):
        state, timetable = self._draft_timetable(year, semester)
        timetable.examinations = [
            e for e in timetable.examinations if e.id != examination_id
        ]
        self._commit(state, f"delete examination {examination_id}")

    # settings -------------------------------------------------------------------------

    def set_goals(self, **updates):
        """Change some of the goal settings.

        Raises
        ------
        InvalidNumericInput
            If a target or threshold is out of range.

        """
        state = self._draft()
        state.goals = dataclasses.replace(state.goals, **updates)
        self._commit(state, "set goals")

    def set_target_au(self, target_au: float):
        """Set the AU needed to graduate. Must be positive."""
        check_number("Target AU", target_au, low=0, low_inclusive=False)
        state = self._draft()
        state.target_au = target_au
        self._commit(state, f"set target AU to {target_au}")

    def set_workload_thresholds(self, **updates):
        state = self._draft()
        state.workload_thresholds = dataclasses.replace(
            state.workload_thresholds, **updates
        )
        self._commit(state, "set workload thresholds")

    def set_module_type_requirement(
        self, module_type: Union[str, ModuleType], required_au: Optional[float]
    ):
        """Set the AU required of a module type, or clear it with ``None``."""
        module_type = ModuleType(module_type)
        if required_au is not None:
            check_number("Required AU", required_au, low=0, low_inclusive=False)

        state = self._draft()
        if required_au is None:
            state.module_type_requirements.pop(module_type.value, None)
        else:
            state.module_type_requirements[module_type.value] = required_au
        self._commit(state, f"set requirement for {module_type.value}")

    def set_deans_list_override(
        self, scope: Union[str, int], value: Union[DeansListOverride, bool, None]
    ):
        """Override the Dean's List outcome of a scope.

        Parameters
        ----------
        scope : str or int
            ``"Y<year>"``, ``"Y<year>S<semester>"``, or a bare year number.
        value : DeansListOverride, bool or None
            ``None`` (or :attr:`DeansListOverride.COMPUTED`) clears the
            override.

        """
        scope = normalize_scope(scope)
        override = DeansListOverride.coerce(value)

        state = self._draft()
        if override is DeansListOverride.COMPUTED:
            state.deans_list_overrides.pop(scope, None)
        else:
            state.deans_list_overrides[scope] = override
        self._commit(state, f"set Dean's List override for {scope}")

    def select(self, year: int, semester: int):
        """Remember the semester the student is looking at."""
        _check_period(year, semester)
        state = self._draft()
        state.selected_year = year
        state.selected_semester = semester
        self._commit(state, f"select Y{year}S{semester}")

    def complete_onboarding(self):
        state = self._draft()
        state.onboarding_complete = True
        self._commit(state, "complete onboarding")

    # snapshots ------------------------------------------------------------------------

    def add_snapshot(self, snapshot: AnalyticsSnapshot):
        """Record a snapshot, keeping only the most recent ones."""
        state = self._draft()
        state.snapshots.append(snapshot)
        state.snapshots = state.snapshots[-self.options.snapshot_limit :]
        self._commit(state, "add snapshot")

    def record_snapshot(self) -> AnalyticsSnapshot:
        """Take a snapshot of the current standing and record it."""
        modules = self._state.modules
        stats = composite_stats(modules)
        distribution = get_grade_distribution(modules)
        snapshot = AnalyticsSnapshot(
            cgpa=stats.official.gpa,
            total_au=stats.total_existing_au,
            module_count=len(modules),
            grade_distribution={k: int(v) for k, v in distribution.items()},
            timestamp=self._clock(),
        )
        self.add_snapshot(snapshot)
        return snapshot

    # import, export and reset ---------------------------------------------------------

    def export_data(self) -> dict:
        """A versioned snapshot of the persisted fields, ready to be saved as JSON."""
        data = self._state.to_dict()
        export = {"version": CURRENT_VERSION, "exportDate": self._clock()}
        export.update({key: data[key] for key in EXPORT_KEYS})
        return export

    def import_data(self, data: Mapping):
        """Replace the fields present in an export, leaving the rest untouched.

        Goals are merged into the current goals. Fields which cannot be
        decoded are logged and skipped.

        Raises
        ------
        MalformedPersistedData
            If `data` is not a mapping.

        """
        if not isinstance(data, Mapping):
            raise MalformedPersistedData("An export must be a mapping.")

        version = data.get("version")
        if isinstance(version, int) and version > CURRENT_VERSION:
            logger.warning("Importing data from newer version %d.", version)

        subset = {key: data[key] for key in EXPORT_KEYS if key in data}
        if isinstance(subset.get("goals"), Mapping):
            subset["goals"] = {**self._state.goals.to_dict(), **subset["goals"]}

        fields = decode_state_fields(subset)
        state = dataclasses.replace(self._draft(), **fields)
        self._commit(state, f"import {sorted(fields)}")

    def reset(self):
        """Clear all data except the onboarding flag."""
        state = PersistedState(onboarding_complete=self._state.onboarding_complete)
        self._commit(state, "reset")
