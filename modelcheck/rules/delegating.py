"""Delegating rules: run a full validator over a nested record or each item of a collection.

Messages produced by the delegate are re-homed under the outer field:
``Address.City`` for nested records, ``Items[1].Code`` for collection items.
"""

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, Optional

from modelcheck.models import ValidationOutcome
from modelcheck.rules.base import FieldRule

if TYPE_CHECKING:
    from modelcheck.validator import ModelValidator


def _rehomed(outcome: ValidationOutcome, prefix: str) -> ValidationOutcome:
    return ValidationOutcome(messages=[m.rehome(prefix) for m in outcome.messages])


class NestedRule(FieldRule):
    """Validates a nested record with its own validator."""

    def __init__(self, validator: "ModelValidator", record_type: Optional[type] = None):
        super().__init__()
        self.validator = validator
        self.record_type = record_type or getattr(validator, "record_type", None)

    def _applies(self, value: Any) -> bool:
        if value is None:
            return False
        return self.record_type is None or isinstance(value, self.record_type)

    def validate(self, record: Any, field_name: str, value: Any) -> ValidationOutcome:
        if not self._applies(value):
            return ValidationOutcome()
        return _rehomed(self.validator.validate(value), field_name)

    async def validate_async(self, record: Any, field_name: str, value: Any) -> ValidationOutcome:
        if not self._applies(value):
            return ValidationOutcome()
        return _rehomed(await self.validator.validate_async(value), field_name)

    def default_message(self, field_name: str, value: Any) -> str:
        return f"Nested validation failed for {field_name}."


class CollectionRule(FieldRule):
    """Validates every item of a homogeneous collection with an item validator."""

    def __init__(self, validator: "ModelValidator", item_type: Optional[type] = None):
        super().__init__()
        self.validator = validator
        self.item_type = item_type or getattr(validator, "record_type", None)

    def _items(self, value: Any) -> list:
        """Items to validate, or an empty list when the value is not a matching collection."""
        if value is None or isinstance(value, (str, bytes, bytearray, Mapping)):
            return []
        if not isinstance(value, Iterable):
            return []
        items = list(value)
        if self.item_type is not None and not all(isinstance(item, self.item_type) for item in items):
            return []
        return items

    def validate(self, record: Any, field_name: str, value: Any) -> ValidationOutcome:
        return ValidationOutcome.concat(
            _rehomed(self.validator.validate(item), f"{field_name}[{index}]")
            for index, item in enumerate(self._items(value))
        )

    async def validate_async(self, record: Any, field_name: str, value: Any) -> ValidationOutcome:
        outcomes = []
        for index, item in enumerate(self._items(value)):
            outcome = await self.validator.validate_async(item)
            outcomes.append(_rehomed(outcome, f"{field_name}[{index}]"))
        return ValidationOutcome.concat(outcomes)

    def default_message(self, field_name: str, value: Any) -> str:
        return f"Collection validation failed for {field_name}."
