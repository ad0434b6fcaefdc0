"""Read and write exported snapshots.

An export is a JSON document produced by
:meth:`gradtrack.store.StateStore.export_data`. It carries a ``version`` and
an ``exportDate`` along with the persisted fields.

"""

import json
import pathlib as _pathlib
from typing import Union

from ..exceptions import MalformedPersistedData


def write(path: Union[str, _pathlib.Path], data: dict):
    """Writes an export to disk.

    Parameters
    ----------
    path : pathlib.Path or str
        The path where the export will be written.
    data : dict
        The export, as returned by ``StateStore.export_data()``.

    """
    path = _pathlib.Path(path)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")


def read(path: Union[str, _pathlib.Path]) -> dict:
    """Reads an export from disk.

    Parameters
    ----------
    path : pathlib.Path or str
        The path where the export is stored.

    Returns
    -------
    dict
        The export, ready for ``StateStore.import_data()``.

    Raises
    ------
    MalformedPersistedData
        If the file is not JSON, or does not contain a JSON object.

    """
    path = _pathlib.Path(path)

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise MalformedPersistedData(f"{path} is not a valid export: {exc}") from exc

    if not isinstance(data, dict):
        raise MalformedPersistedData(f"{path} does not contain an export object.")

    return data
