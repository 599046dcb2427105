"""modelcheck: declarative, composable validation for data records.

Usage:
    from modelcheck import ModelValidator

    validator = ModelValidator(Person)
    validator.rule_for(lambda p: p.name).is_required()
    outcome = validator.validate(person)
    if not outcome.is_valid:
        # Render outcome.errors into the caller's response shape
"""

from modelcheck.chain import FieldRuleChain
from modelcheck.errors import InvalidExpressionError, ModelCheckError, ValidatorNotFoundError
from modelcheck.models import Severity, ValidationMessage, ValidationOutcome
from modelcheck.registry import ValidatorRegistry, validator_registry
from modelcheck.validator import ModelRuleBuilder, ModelValidator

__all__ = [
    "ModelValidator",
    "ModelRuleBuilder",
    "FieldRuleChain",
    "ValidatorRegistry",
    "validator_registry",
    "ValidationOutcome",
    "ValidationMessage",
    "Severity",
    "ModelCheckError",
    "InvalidExpressionError",
    "ValidatorNotFoundError",
]
