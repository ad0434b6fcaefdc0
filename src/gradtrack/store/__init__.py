"""The persisted application state and its migrations."""

from ._migrate import CURRENT_VERSION, migrate, parse_legacy_modules
from ._store import EXPORT_KEYS, StateStore, StoreOptions

__all__ = [
    "CURRENT_VERSION",
    "migrate",
    "parse_legacy_modules",
    "EXPORT_KEYS",
    "StateStore",
    "StoreOptions",
]
