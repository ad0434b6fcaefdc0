"""Errors raised at the boundaries of the package."""


class MalformedPersistedData(ValueError):
    """A stored, legacy or imported payload could not be decoded."""


class InvalidNumericInput(ValueError):
    """A numeric setting or field was outside of its allowed range."""
