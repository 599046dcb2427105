"""ModelValidator: orchestrates field chains and model rules for one record type.

Usage:
    validator = ModelValidator(Person)
    validator.rule_for(lambda p: p.name).is_required()
    validator.rule_for("email").is_email().when(lambda p: p.is_active)
    validator.at_least_one_of().field("email").field("phone")
    validator.rule().must(lambda p: p.age >= 18).with_message("Adults only")

    outcome = validator.validate(person)
    if not outcome.is_valid:
        ...

Evaluation order is fixed: field chains in order of first reference, then
model rules in declaration order. The async path awaits each chain and rule
in that same order, one at a time.
"""

import time
from typing import Any, Optional

import structlog

from modelcheck.accessors import MISSING, FieldRef, field_name, field_value
from modelcheck.chain import FieldRuleChain
from modelcheck.config import get_settings
from modelcheck.models import ValidationOutcome
from modelcheck.rules.base import ModelRule
from modelcheck.rules.model import (
    AsyncModelPredicateRule,
    AsyncRecordPredicate,
    AtLeastOneOfRule,
    ModelPredicateRule,
    RecordPredicate,
)

logger = structlog.get_logger()


class ModelRuleBuilder:
    """Attachment point for custom model-level rules."""

    def __init__(self, rules: list[ModelRule]):
        self._rules = rules

    def must(self, predicate: RecordPredicate) -> ModelPredicateRule:
        rule = ModelPredicateRule(predicate)
        self._rules.append(rule)
        return rule

    def must_async(self, predicate: AsyncRecordPredicate) -> AsyncModelPredicateRule:
        rule = AsyncModelPredicateRule(predicate)
        self._rules.append(rule)
        return rule


class ModelValidator:
    """Validates records of one type against field chains and model rules.

    Build the validator once, then treat it as read-only: it is safe to
    validate different records concurrently as long as no builder call runs
    at the same time.
    """

    def __init__(self, record_type: Optional[type] = None):
        """
        Args:
            record_type: Type of the records this validator checks. Used by
                nested and collection rules to decide whether a value applies.
        """
        self.record_type = record_type
        self._chains: dict[str, FieldRuleChain] = {}
        self._model_rules: list[ModelRule] = []

    # ── Builder ──

    def rule_for(self, accessor: FieldRef) -> FieldRuleChain:
        """Return the chain for a field, creating it on first reference."""
        name = field_name(accessor)
        chain = self._chains.get(name)
        if chain is None:
            chain = FieldRuleChain(name)
            self._chains[name] = chain
        return chain

    def rule(self) -> ModelRuleBuilder:
        return ModelRuleBuilder(self._model_rules)

    def at_least_one_of(self) -> AtLeastOneOfRule:
        rule = AtLeastOneOfRule()
        self._model_rules.append(rule)
        return rule

    @property
    def fields(self) -> list[str]:
        return list(self._chains)

    @property
    def model_rules(self) -> tuple[ModelRule, ...]:
        return tuple(self._model_rules)

    # ── Evaluation ──

    def _value(self, record: Any, name: str) -> Any:
        value = field_value(record, name)
        return None if value is MISSING else value

    def validate(self, record: Any) -> ValidationOutcome:
        """Validate a record. Bad data is reported, never raised."""
        start_time = time.perf_counter()
        outcomes = []

        for name, chain in self._chains.items():
            outcomes.append(chain.validate(record, self._value(record, name)))

        for rule in self._model_rules:
            if rule.should_run(record):
                outcomes.append(rule.validate(record))

        outcome = ValidationOutcome.concat(outcomes)
        self._log_run(outcome, start_time, mode="sync")
        return outcome

    async def validate_async(self, record: Any) -> ValidationOutcome:
        """Validate a record, awaiting each chain and rule in sequence."""
        start_time = time.perf_counter()
        outcomes = []

        for name, chain in self._chains.items():
            outcomes.append(await chain.validate_async(record, self._value(record, name)))

        for rule in self._model_rules:
            if rule.should_run(record):
                outcomes.append(await rule.validate_async(record))

        outcome = ValidationOutcome.concat(outcomes)
        self._log_run(outcome, start_time, mode="async")
        return outcome

    def _log_run(self, outcome: ValidationOutcome, start_time: float, mode: str) -> None:
        if not get_settings().LOG_VALIDATION_RUNS:
            return
        logger.debug(
            "validation_complete",
            record_type=getattr(self.record_type, "__name__", None),
            mode=mode,
            valid=outcome.is_valid,
            summary=outcome.summary,
            fields=len(self._chains),
            model_rules=len(self._model_rules),
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )
