"""Base rules: the shared configuration and the two evaluation contracts.

Every rule carries its own gating predicate, message override and severity.
Gating is evaluated by whoever runs the rule (FieldRuleChain or
ModelValidator) through ``should_run``, so it behaves the same for every rule.

A rule declares which entry points it really implements through the
``supports_sync`` / ``supports_async`` flags:

    - sync rules answer ``validate_async`` by wrapping ``validate``
    - async-only rules answer ``validate`` with an empty outcome
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Union

import structlog

from modelcheck.models import Severity, ValidationMessage, ValidationOutcome

logger = structlog.get_logger()

Condition = Callable[[Any], bool]
MessageOverride = Union[str, Callable[[Any], str]]


class Rule(ABC):
    """Configuration shared by field and model rules."""

    supports_sync: bool = True
    supports_async: bool = True

    def __init__(self):
        self._condition: Optional[Condition] = None
        self._message: Optional[str] = None
        self._message_factory: Optional[Callable[[Any], str]] = None
        self.severity: Severity = Severity.ERROR

    # ── Configuration ──

    def when(self, condition: Condition) -> "Rule":
        """Only run this rule for records where ``condition`` is true."""
        self._condition = condition
        return self

    def unless(self, condition: Condition) -> "Rule":
        """Only run this rule for records where ``condition`` is false."""
        self._condition = lambda record: not condition(record)
        return self

    def with_message(self, message: MessageOverride) -> "Rule":
        """Override the failure text with a literal or a function of the record."""
        if callable(message):
            self._message_factory = message
        else:
            self._message = message
        return self

    def as_warning(self) -> "Rule":
        self.severity = Severity.WARNING
        return self

    def as_error(self) -> "Rule":
        self.severity = Severity.ERROR
        return self

    def should_run(self, record: Any) -> bool:
        return self._condition is None or bool(self._condition(record))

    # ── Helper Methods ──

    def _render(self, record: Any, default: Callable[[], str]) -> str:
        """Literal override, then record-derived override, then the default text."""
        if self._message is not None:
            return self._message
        if self._message_factory is not None:
            return self._message_factory(record)
        return default()

    def _async_only(self) -> ValidationOutcome:
        logger.debug("async_rule_skipped", rule=type(self).__name__)
        return ValidationOutcome()


class FieldRule(Rule):
    """A check over one field's value."""

    @abstractmethod
    def validate(self, record: Any, field_name: str, value: Any) -> ValidationOutcome:
        """Check ``value`` and return zero or one message attributed to ``field_name``."""
        ...

    async def validate_async(self, record: Any, field_name: str, value: Any) -> ValidationOutcome:
        return self.validate(record, field_name, value)

    def default_message(self, field_name: str, value: Any) -> str:
        return f"{field_name} is invalid."

    def _fail(self, record: Any, field_name: str, value: Any) -> ValidationOutcome:
        """Build the single-message outcome for a failed check."""
        text = self._render(record, lambda: self.default_message(field_name, value))
        return ValidationOutcome(messages=[
            ValidationMessage(
                field=field_name,
                message=text,
                severity=self.severity,
                attempted_value=value,
            )
        ])


class ModelRule(Rule):
    """A check spanning the whole record.

    Failures are reported with an empty field path unless the rule was given
    an explicit label through ``for_field``.
    """

    def __init__(self):
        super().__init__()
        self.label: str = ""

    def for_field(self, label: str) -> "ModelRule":
        """Attribute failures of this rule to ``label`` instead of the record."""
        self.label = label
        return self

    @abstractmethod
    def validate(self, record: Any) -> ValidationOutcome:
        ...

    async def validate_async(self, record: Any) -> ValidationOutcome:
        return self.validate(record)

    def default_message(self, record: Any) -> str:
        return "Custom rule failed"

    def _fail(self, record: Any) -> ValidationOutcome:
        text = self._render(record, lambda: self.default_message(record))
        return ValidationOutcome(messages=[
            ValidationMessage(field=self.label, message=text, severity=self.severity)
        ])
