"""Field accessor collaborator: resolve field names and current values.

A field can be referenced by its name or by an accessor such as
``lambda p: p.email``. Accessors are not introspected: they are called once
against a recording proxy that notes which attribute was read.
"""

from collections.abc import Mapping
from typing import Any, Callable, Union

from modelcheck.errors import InvalidExpressionError

FieldRef = Union[str, Callable[[Any], Any]]


class _Missing:
    """Sentinel for a field the record does not have."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


class _Read:
    """Result of one attribute read on the recording proxy."""

    __slots__ = ("name", "touched")

    def __init__(self, name: str):
        self.name = name
        self.touched = False

    def __getattr__(self, item):
        self.touched = True
        return self

    def __getitem__(self, item):
        self.touched = True
        return self

    def __call__(self, *args, **kwargs):
        self.touched = True
        return self


class _RecordingProxy:
    __slots__ = ("_recorded",)

    def __init__(self):
        object.__setattr__(self, "_recorded", [])

    def __getattr__(self, name: str) -> _Read:
        read = _Read(name)
        self._recorded.append(read)
        return read


def field_name(accessor: FieldRef) -> str:
    """Return the field name an accessor refers to.

    Args:
        accessor: A field name, or a callable performing exactly one attribute
            read on its argument and returning it.

    Raises:
        InvalidExpressionError: If the accessor is not a direct attribute read.
    """
    if isinstance(accessor, str):
        if not accessor:
            raise InvalidExpressionError("Field name must not be empty")
        return accessor

    if not callable(accessor):
        raise InvalidExpressionError(
            f"Expected a field name or accessor, got {type(accessor).__name__}"
        )

    proxy = _RecordingProxy()
    try:
        result = accessor(proxy)
    except Exception as e:
        raise InvalidExpressionError(
            f"Expression must be a property access expression: {e}"
        ) from e

    reads = proxy._recorded
    if len(reads) != 1 or result is not reads[0] or reads[0].touched:
        raise InvalidExpressionError("Expression must be a property access expression.")
    return reads[0].name


def field_value(record: Any, name: str) -> Any:
    """Return the current value of ``name`` on ``record``, or ``MISSING``.

    Mappings are read by key, everything else by attribute.
    """
    if record is None:
        return MISSING
    if isinstance(record, Mapping):
        return record.get(name, MISSING)
    try:
        return getattr(record, name)
    except AttributeError:
        return MISSING
