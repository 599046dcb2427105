"""FieldRuleChain: the ordered rules bound to one field, and their fluent builder.

Configuration calls (``when``, ``unless``, ``with_message``, ``as_warning``,
``as_error``) apply to the rule added most recently, so they must follow the
rule they configure:

    validator.rule_for("email").is_required().is_email().when(lambda p: p.is_active)

Here only the email check is gated. A configuration call made before any rule
is added has nothing to apply to and is ignored.
"""

from typing import TYPE_CHECKING, Any, Optional

import structlog

from modelcheck.models import ValidationOutcome
from modelcheck.rules.base import Condition, FieldRule, MessageOverride
from modelcheck.rules.delegating import CollectionRule, NestedRule
from modelcheck.rules.field import (
    AsyncFieldPredicate,
    AsyncPredicateRule,
    EmailRule,
    FieldPredicate,
    MaxLengthRule,
    MaxValueRule,
    MinLengthRule,
    MinValueRule,
    PositiveIntRule,
    PositiveNumberRule,
    PredicateRule,
    RequiredRule,
    StringIsDateRule,
)

if TYPE_CHECKING:
    from modelcheck.validator import ModelValidator

logger = structlog.get_logger()


class FieldRuleChain:
    """Rules for one field, evaluated in the order they were added."""

    def __init__(self, field_name: str):
        self._field_name = field_name
        self._rules: list[FieldRule] = []
        self._last: Optional[FieldRule] = None

    @property
    def field_name(self) -> str:
        return self._field_name

    @property
    def rules(self) -> tuple[FieldRule, ...]:
        return tuple(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def add(self, rule: FieldRule) -> "FieldRuleChain":
        """Append a rule. Later configuration calls target it."""
        self._rules.append(rule)
        self._last = rule
        return self

    # ── Evaluation ──

    def validate(self, record: Any, value: Any) -> ValidationOutcome:
        """Run every applicable rule. A failing rule does not stop later ones."""
        return ValidationOutcome.concat(
            rule.validate(record, self._field_name, value)
            for rule in self._rules
            if rule.should_run(record)
        )

    async def validate_async(self, record: Any, value: Any) -> ValidationOutcome:
        outcomes = []
        for rule in self._rules:
            if not rule.should_run(record):
                continue
            outcomes.append(await rule.validate_async(record, self._field_name, value))
        return ValidationOutcome.concat(outcomes)

    # ── Rules ──

    def is_required(self) -> "FieldRuleChain":
        return self.add(RequiredRule())

    def positive_int(self) -> "FieldRuleChain":
        return self.add(PositiveIntRule())

    def positive_number(self) -> "FieldRuleChain":
        return self.add(PositiveNumberRule())

    def string_is_date(self, date_format: Optional[str] = None) -> "FieldRuleChain":
        return self.add(StringIsDateRule(date_format))

    def max_length(self, max_length: int) -> "FieldRuleChain":
        return self.add(MaxLengthRule(max_length))

    def min_length(self, min_length: int) -> "FieldRuleChain":
        return self.add(MinLengthRule(min_length))

    def max_value(self, bound: Any) -> "FieldRuleChain":
        return self.add(MaxValueRule(bound))

    def min_value(self, bound: Any) -> "FieldRuleChain":
        return self.add(MinValueRule(bound))

    def is_email(self) -> "FieldRuleChain":
        return self.add(EmailRule())

    def must(self, predicate: FieldPredicate, message: Optional[str] = None) -> "FieldRuleChain":
        return self.add(PredicateRule(predicate, message))

    def must_async(self, predicate: AsyncFieldPredicate, message: Optional[str] = None) -> "FieldRuleChain":
        return self.add(AsyncPredicateRule(predicate, message))

    def validate_nested(self, validator: "ModelValidator", record_type: Optional[type] = None) -> "FieldRuleChain":
        return self.add(NestedRule(validator, record_type))

    def validate_collection(self, validator: "ModelValidator", item_type: Optional[type] = None) -> "FieldRuleChain":
        return self.add(CollectionRule(validator, item_type))

    # ── Configuration of the last added rule ──

    def _configure(self, setting: str) -> Optional[FieldRule]:
        if self._last is None:
            logger.warning("chain_config_without_rule", field=self._field_name, setting=setting)
        return self._last

    def when(self, condition: Condition) -> "FieldRuleChain":
        rule = self._configure("when")
        if rule is not None:
            rule.when(condition)
        return self

    def unless(self, condition: Condition) -> "FieldRuleChain":
        rule = self._configure("unless")
        if rule is not None:
            rule.unless(condition)
        return self

    def with_message(self, message: MessageOverride) -> "FieldRuleChain":
        rule = self._configure("with_message")
        if rule is not None:
            rule.with_message(message)
        return self

    def as_warning(self) -> "FieldRuleChain":
        rule = self._configure("as_warning")
        if rule is not None:
            rule.as_warning()
        return self

    def as_error(self) -> "FieldRuleChain":
        rule = self._configure("as_error")
        if rule is not None:
            rule.as_error()
        return self
