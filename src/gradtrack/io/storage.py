"""Key-value backends for persisting the application state.

A backend stores text under string keys, like a browser's local storage.
Backends raise :class:`OSError` when an item cannot be read or written, and
:class:`gradtrack.exceptions.MalformedPersistedData` when a stored item is
not text. Callers decide how to recover.

"""

import pathlib as _pathlib
import re
from typing import Optional, Union

from ..exceptions import MalformedPersistedData

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class MemoryStorage:
    """Keeps items in a dictionary. Nothing survives the process."""

    def __init__(self, items: Optional[dict[str, str]] = None):
        self.items = {} if items is None else dict(items)

    def __repr__(self):
        return f"{self.__class__.__name__}(keys={sorted(self.items)!r})"

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str):
        self.items[key] = value

    def remove_item(self, key: str):
        self.items.pop(key, None)


class JSONFileStorage:
    """Keeps each item in its own ``<key>.json`` file inside a directory.

    Parameters
    ----------
    directory : pathlib.Path or str
        Where the files live. Created on the first write.

    """

    def __init__(self, directory: Union[str, _pathlib.Path]):
        self.directory = _pathlib.Path(directory)

    def __repr__(self):
        return f"{self.__class__.__name__}({str(self.directory)!r})"

    def _path(self, key: str) -> _pathlib.Path:
        if _KEY_PATTERN.match(key) is None:
            raise ValueError(f"Invalid storage key {key!r}.")
        return self.directory / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        """The stored text, or ``None`` if there is none."""
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedPersistedData(f"{path} is not UTF-8 text: {exc}") from exc

    def set_item(self, key: str, value: str):
        """Write an item, replacing the previous file in one step."""
        path = self._path(key)
        self.directory.mkdir(parents=True, exist_ok=True)
        partial = path.with_name(path.name + ".tmp")
        partial.write_text(value, encoding="utf-8")
        partial.replace(path)

    def remove_item(self, key: str):
        self._path(key).unlink(missing_ok=True)
