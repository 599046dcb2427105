"""Configuration faults raised by the builder and registry APIs.

Bad data never raises: it is reported as a ValidationMessage. These exceptions
signal programmer errors discovered while building or looking up validators.
"""


class ModelCheckError(Exception):
    """Base class for modelcheck usage errors."""


class InvalidExpressionError(ModelCheckError, ValueError):
    """A field accessor is not a direct attribute read."""


class ValidatorNotFoundError(ModelCheckError, LookupError):
    """No validator is registered for the requested record type."""

    def __init__(self, record_type: type):
        self.record_type = record_type
        name = getattr(record_type, "__name__", repr(record_type))
        super().__init__(f"No validator registered for type {name}")
