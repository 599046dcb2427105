"""Leaf field rules: required, numeric, length, range, format and custom predicates."""

import re
from abc import abstractmethod
from datetime import date, datetime
from numbers import Number
from typing import Any, Awaitable, Callable, Optional

import structlog

from modelcheck.models import ValidationOutcome
from modelcheck.rules.base import FieldRule

logger = structlog.get_logger()

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")

# Culture-neutral formats tried after ISO-8601 when no caller format matches
INVARIANT_DATE_FORMATS = (
    "%m/%d/%Y",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y %H:%M:%S",
    "%Y/%m/%d",
    "%Y/%m/%d %H:%M:%S",
    "%d %B %Y",
    "%d %b %Y",
    "%B %d, %Y",
    "%b %d, %Y",
)

FieldPredicate = Callable[[Any, Any], bool]
AsyncFieldPredicate = Callable[[Any, Any], Awaitable[bool]]


class RequiredRule(FieldRule):
    """Value must be present and, for text, not blank."""

    def validate(self, record: Any, field_name: str, value: Any) -> ValidationOutcome:
        if value is None or (isinstance(value, str) and not value.strip()):
            return self._fail(record, field_name, value)
        return ValidationOutcome()

    def default_message(self, field_name: str, value: Any) -> str:
        return f"{field_name} is required."


class PositiveIntRule(FieldRule):
    """Value must be an int greater than zero."""

    def validate(self, record: Any, field_name: str, value: Any) -> ValidationOutcome:
        if isinstance(value, int) and not isinstance(value, bool) and value > 0:
            return ValidationOutcome()
        return self._fail(record, field_name, value)

    def default_message(self, field_name: str, value: Any) -> str:
        return f"{field_name} {value} is not a positive int"


class PositiveNumberRule(FieldRule):
    """Value must be a number greater than zero. Non-numbers never pass."""

    def validate(self, record: Any, field_name: str, value: Any) -> ValidationOutcome:
        if isinstance(value, Number) and not isinstance(value, bool):
            try:
                if value > 0:
                    return ValidationOutcome()
            except (TypeError, ArithmeticError):
                pass
        return self._fail(record, field_name, value)

    def default_message(self, field_name: str, value: Any) -> str:
        return f"{field_name} value '{value}' is not a positive number."


class MaxLengthRule(FieldRule):
    def __init__(self, max_length: int):
        super().__init__()
        self.max_length = max_length

    def validate(self, record: Any, field_name: str, value: Any) -> ValidationOutcome:
        if isinstance(value, str) and len(value) > self.max_length:
            return self._fail(record, field_name, value)
        return ValidationOutcome()

    def default_message(self, field_name: str, value: Any) -> str:
        return f"{field_name} must not exceed {self.max_length} characters."


class MinLengthRule(FieldRule):
    def __init__(self, min_length: int):
        super().__init__()
        self.min_length = min_length

    def validate(self, record: Any, field_name: str, value: Any) -> ValidationOutcome:
        if isinstance(value, str) and len(value) < self.min_length:
            return self._fail(record, field_name, value)
        return ValidationOutcome()

    def default_message(self, field_name: str, value: Any) -> str:
        return f"{field_name} must be at least {self.min_length} characters long."


class _BoundRule(FieldRule):
    """Compares the value against a bound using its natural ordering.

    Absent values are left to RequiredRule. A value that cannot be ordered
    against the bound fails.
    """

    def __init__(self, bound: Any):
        super().__init__()
        self.bound = bound

    @abstractmethod
    def _violates(self, value: Any) -> bool:
        """True when ``value`` is on the wrong side of the bound."""
        ...

    def validate(self, record: Any, field_name: str, value: Any) -> ValidationOutcome:
        if value is None:
            return ValidationOutcome()
        try:
            violated = self._violates(value)
        except (TypeError, ArithmeticError):
            violated = True
        if violated:
            return self._fail(record, field_name, value)
        return ValidationOutcome()


class MaxValueRule(_BoundRule):
    def _violates(self, value: Any) -> bool:
        return value > self.bound

    def default_message(self, field_name: str, value: Any) -> str:
        return f"{field_name} must not exceed {self.bound}."


class MinValueRule(_BoundRule):
    def _violates(self, value: Any) -> bool:
        return value < self.bound

    def default_message(self, field_name: str, value: Any) -> str:
        return f"{field_name} must be at least {self.bound}."


class EmailRule(FieldRule):
    """Non-empty text must look like local@domain.tld."""

    def validate(self, record: Any, field_name: str, value: Any) -> ValidationOutcome:
        if isinstance(value, str) and value and not EMAIL_PATTERN.match(value):
            return self._fail(record, field_name, value)
        return ValidationOutcome()

    def default_message(self, field_name: str, value: Any) -> str:
        return f"{field_name} is not a valid email address."


class StringIsDateRule(FieldRule):
    """Value must be a date, or text that parses as one.

    Text is tried against the caller's ``strptime`` format first, then
    ISO-8601, then ``INVARIANT_DATE_FORMATS``.
    """

    def __init__(self, date_format: Optional[str] = None):
        super().__init__()
        self.date_format = date_format

    def validate(self, record: Any, field_name: str, value: Any) -> ValidationOutcome:
        if self._is_date(value):
            return ValidationOutcome()
        return self._fail(record, field_name, value)

    def default_message(self, field_name: str, value: Any) -> str:
        return f"{field_name} value '{value}' is not a valid date"

    def _is_date(self, value: Any) -> bool:
        if isinstance(value, (date, datetime)):
            return True
        if not isinstance(value, str):
            return False

        text = value.strip()
        if not text:
            return False

        if self.date_format and self.date_format.strip():
            if _parses(text, self.date_format):
                return True

        try:
            datetime.fromisoformat(text)
            return True
        except ValueError:
            pass

        return any(_parses(text, fmt) for fmt in INVARIANT_DATE_FORMATS)


def _parses(text: str, fmt: str) -> bool:
    try:
        datetime.strptime(text, fmt)
        return True
    except ValueError:
        return False


class PredicateRule(FieldRule):
    """Custom check over the record and the field value.

    A predicate that raises counts as a failed check.
    """

    def __init__(self, predicate: FieldPredicate, message: Optional[str] = None):
        super().__init__()
        self.predicate = predicate
        self._default = message or "Custom validation failed."

    def validate(self, record: Any, field_name: str, value: Any) -> ValidationOutcome:
        try:
            passed = self.predicate(record, value)
        except Exception as e:
            logger.warning("predicate_failed", field=field_name, error=str(e), error_type=type(e).__name__)
            passed = False
        if passed:
            return ValidationOutcome()
        return self._fail(record, field_name, value)

    def default_message(self, field_name: str, value: Any) -> str:
        return self._default


class AsyncPredicateRule(FieldRule):
    """Custom check whose predicate must be awaited. Only runs on the async path."""

    supports_sync = False

    def __init__(self, predicate: AsyncFieldPredicate, message: Optional[str] = None):
        super().__init__()
        self.predicate = predicate
        self._default = message or "Async validation failed."

    def validate(self, record: Any, field_name: str, value: Any) -> ValidationOutcome:
        return self._async_only()

    async def validate_async(self, record: Any, field_name: str, value: Any) -> ValidationOutcome:
        try:
            passed = await self.predicate(record, value)
        except Exception as e:
            logger.warning("predicate_failed", field=field_name, error=str(e), error_type=type(e).__name__)
            passed = False
        if passed:
            return ValidationOutcome()
        return self._fail(record, field_name, value)

    def default_message(self, field_name: str, value: Any) -> str:
        return self._default
