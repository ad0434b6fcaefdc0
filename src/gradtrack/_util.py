"""Private helper utilities."""

import dataclasses
import datetime
import enum
import uuid
from collections.abc import Mapping
from numbers import Real

from .exceptions import InvalidNumericInput, MalformedPersistedData

# keys on disk use camelCase, with these words spelled as acronyms
_ACRONYMS = {"au": "AU", "gpa": "GPA", "cgpa": "CGPA"}


def now_iso() -> str:
    """The current UTC time as an ISO-8601 string with millisecond precision."""
    now = datetime.datetime.now(datetime.timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def generate_id() -> str:
    return str(uuid.uuid4())


def camel_case(name: str) -> str:
    """Convert a snake_case attribute name to its camelCase storage key."""
    head, *rest = name.split("_")
    return head + "".join(_ACRONYMS.get(part, part.title()) for part in rest)


def check_number(name, value, low=None, high=None, low_inclusive=True) -> float:
    """Ensure that a value is a real number within the given bounds.

    Raises
    ------
    InvalidNumericInput
        If the value is not a number, or is out of range.

    """
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidNumericInput(f"{name} must be a number, not {value!r}.")

    if low is not None:
        if value < low or (not low_inclusive and value == low):
            bound = ">=" if low_inclusive else ">"
            raise InvalidNumericInput(f"{name} must be {bound} {low}, got {value}.")

    if high is not None and value > high:
        raise InvalidNumericInput(f"{name} must be <= {high}, got {value}.")

    return value


def dataclass_to_dict(obj) -> dict:
    """Serialize a flat dataclass into a dictionary with camelCase keys."""
    result = {}
    for field in dataclasses.fields(obj):
        value = getattr(obj, field.name)
        if isinstance(value, enum.Enum):
            value = value.value
        elif isinstance(value, list):
            value = list(value)
        elif isinstance(value, dict):
            value = dict(value)
        result[camel_case(field.name)] = value
    return result


def dataclass_from_dict(cls, data):
    """Build a flat dataclass from a dictionary.

    Both camelCase and snake_case keys are accepted. Unknown keys are ignored.

    Raises
    ------
    MalformedPersistedData
        If `data` is not a mapping, a required field is missing, or a field
        fails validation.

    """
    if not isinstance(data, Mapping):
        raise MalformedPersistedData(
            f"Expected a mapping for {cls.__name__}, got {type(data).__name__}."
        )

    names = {}
    for field in dataclasses.fields(cls):
        names[field.name] = field.name
        names[camel_case(field.name)] = field.name

    kwargs = {names[k]: v for k, v in data.items() if k in names and v is not None}

    try:
        return cls(**kwargs)
    except (TypeError, ValueError) as exc:
        raise MalformedPersistedData(f"Invalid {cls.__name__}: {exc}") from exc
