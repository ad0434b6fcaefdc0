"""Bringing stored state up to the current version.

Versions of the stored layout:

    0, 1  Modules lived under a separate legacy key; the stored state, if
          any, holds goals, snapshots and UI selection.
    2     Modules, goals and snapshots in one state.
    3     Adds the target AU, timetables and planned modules.
    4     Adds workload thresholds, module type requirements and Dean's List
          overrides keyed by scope.

"""

import json
import logging
from collections.abc import Mapping
from typing import Any, Optional

from ..core import DEFAULT_TARGET_AU, STATE_VERSION, GoalSettings, PersistedState
from ..exceptions import MalformedPersistedData
from .._util import now_iso

logger = logging.getLogger(__name__)

CURRENT_VERSION = STATE_VERSION


# private helper functions =============================================================


def _require_mapping(raw) -> dict:
    if not isinstance(raw, Mapping):
        raise MalformedPersistedData(
            f"Expected the stored state to be a mapping, got {type(raw).__name__}."
        )
    return dict(raw)


def _from_legacy(raw, legacy_payload, timestamp) -> dict:
    """Version 0/1 to version 3."""
    current = raw if isinstance(raw, Mapping) else {}
    legacy_modules = parse_legacy_modules(legacy_payload, timestamp)

    if legacy_modules is not None:
        logger.info("Imported %d modules from legacy storage.", len(legacy_modules))
        modules = legacy_modules
    else:
        modules = current.get("modules", [])

    return {
        "modules": modules,
        "goals": current.get("goals") or GoalSettings().to_dict(),
        "snapshots": current.get("snapshots", []),
        "targetAU": DEFAULT_TARGET_AU,
        "timetables": [],
        "plannedModules": [],
        "selectedYear": current.get("selectedYear", 1),
        "selectedSem": current.get("selectedSem", 1),
        "onboardingComplete": current.get(
            "onboardingComplete", legacy_modules is not None
        ),
    }


def _add_planner_fields(raw) -> dict:
    """Version 2 to version 3."""
    raw = _require_mapping(raw)
    raw.setdefault("targetAU", DEFAULT_TARGET_AU)
    raw.setdefault("timetables", [])
    raw.setdefault("plannedModules", [])
    return raw


def _add_settings_fields(raw) -> dict:
    """Version 3 to version 4."""
    raw = _require_mapping(raw)
    raw.setdefault("workloadThresholds", None)
    raw.setdefault("moduleTypeRequirements", {})
    raw.setdefault("deanListOverrides", {})
    return raw


_UPGRADES = {
    2: _add_planner_fields,
    3: _add_settings_fields,
}


# public functions =====================================================================


def parse_legacy_modules(payload, timestamp: str) -> Optional[list[dict]]:
    """Read the module list out of the legacy storage format.

    The legacy format is a JSON object of the form
    ``{"modules": [...], "schemaVersion": 1}``. Modules without timestamps
    are given `timestamp` as both their creation and update time.

    Parameters
    ----------
    payload : Optional[str or Mapping]
        The legacy item, either as stored text or already parsed.
    timestamp : str
        The timestamp to inject.

    Returns
    -------
    Optional[list[dict]]
        The stored modules, or ``None`` if the payload is absent or cannot be
        read.

    """
    if payload is None:
        return None

    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.warning("Could not parse legacy data: %s", exc)
            return None

    modules = payload.get("modules") if isinstance(payload, Mapping) else None
    if not isinstance(modules, list):
        logger.warning("Legacy data has no module list; ignoring it.")
        return None

    result = []
    for module in modules:
        if not isinstance(module, Mapping):
            logger.warning("Skipping malformed legacy module: %r", module)
            continue
        result.append(
            {
                **module,
                "createdAt": module.get("createdAt") or timestamp,
                "updatedAt": module.get("updatedAt") or timestamp,
            }
        )
    return result


def migrate(
    from_version: Optional[int],
    raw: Any,
    legacy_payload: Any = None,
    timestamp: Optional[str] = None,
) -> PersistedState:
    """Decode a stored state written by any version of the layout.

    This never raises: anything that cannot be read is logged and replaced
    with defaults. Migrating a state which is already current returns an
    equivalent state, so migrating twice is the same as migrating once.

    Parameters
    ----------
    from_version : Optional[int]
        The version the state was stored with, or ``None`` if unknown.
    raw : Any
        The stored state, as parsed from JSON. May be ``None``.
    legacy_payload : Any
        The item stored under the legacy key, if any. Only consulted when
        migrating from version 0 or 1 (or an unknown version).
    timestamp : Optional[str]
        Used for legacy modules without timestamps. Defaults to now.

    Returns
    -------
    PersistedState

    """
    if timestamp is None:
        timestamp = now_iso()

    if isinstance(from_version, bool) or not isinstance(from_version, int):
        from_version = None

    try:
        if from_version is None or from_version <= 1 or raw is None:
            raw, version = _from_legacy(raw, legacy_payload, timestamp), 3
        else:
            version = from_version

        if version > CURRENT_VERSION:
            logger.warning(
                "Stored state has version %d, newer than %d; reading it as is.",
                version,
                CURRENT_VERSION,
            )

        while version < CURRENT_VERSION:
            raw = _UPGRADES[version](raw)
            version += 1

        return PersistedState.from_dict(raw)
    except MalformedPersistedData as exc:
        logger.warning("Discarding unreadable stored state: %s", exc)
        return PersistedState()
