"""Model-level rules: custom record predicates and at-least-one-of."""

from typing import Any, Awaitable, Callable

import structlog

from modelcheck.accessors import MISSING, FieldRef, field_name, field_value
from modelcheck.models import ValidationOutcome
from modelcheck.rules.base import ModelRule

logger = structlog.get_logger()

RecordPredicate = Callable[[Any], bool]
AsyncRecordPredicate = Callable[[Any], Awaitable[bool]]


class ModelPredicateRule(ModelRule):
    """Record-level check. A predicate that raises counts as a failed check."""

    def __init__(self, predicate: RecordPredicate):
        super().__init__()
        self.predicate = predicate

    def validate(self, record: Any) -> ValidationOutcome:
        try:
            passed = self.predicate(record)
        except Exception as e:
            logger.warning("predicate_failed", rule=type(self).__name__, error=str(e), error_type=type(e).__name__)
            passed = False
        if passed:
            return ValidationOutcome()
        return self._fail(record)


class AsyncModelPredicateRule(ModelRule):
    """Record-level check whose predicate must be awaited."""

    supports_sync = False

    def __init__(self, predicate: AsyncRecordPredicate):
        super().__init__()
        self.predicate = predicate

    def validate(self, record: Any) -> ValidationOutcome:
        return self._async_only()

    async def validate_async(self, record: Any) -> ValidationOutcome:
        try:
            passed = await self.predicate(record)
        except Exception as e:
            logger.warning("predicate_failed", rule=type(self).__name__, error=str(e), error_type=type(e).__name__)
            passed = False
        if passed:
            return ValidationOutcome()
        return self._fail(record)

    def default_message(self, record: Any) -> str:
        return "Custom async rule failed"


class AtLeastOneOfRule(ModelRule):
    """At least one of the referenced fields must hold a non-blank value.

    Fields the record does not have are skipped.
    """

    def __init__(self):
        super().__init__()
        self.field_names: list[str] = []

    def field(self, accessor: FieldRef) -> "AtLeastOneOfRule":
        """Add a field to the set, keeping declaration order."""
        self.field_names.append(field_name(accessor))
        return self

    def validate(self, record: Any) -> ValidationOutcome:
        if self._has_value(record):
            return ValidationOutcome()
        return self._fail(record)

    def _has_value(self, record: Any) -> bool:
        for name in self.field_names:
            value = field_value(record, name)
            if value is MISSING or value is None:
                continue
            if isinstance(value, str) and not value.strip():
                continue
            return True
        return False

    def default_message(self, record: Any) -> str:
        return f"At least one of the following properties must have a value: {', '.join(self.field_names)}"
