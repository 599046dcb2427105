"""Rule implementations.

Usage:
    from modelcheck.rules import RequiredRule, AtLeastOneOfRule
"""

from modelcheck.rules.base import FieldRule, ModelRule, Rule
from modelcheck.rules.delegating import CollectionRule, NestedRule
from modelcheck.rules.field import (
    AsyncPredicateRule,
    EmailRule,
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
from modelcheck.rules.model import AsyncModelPredicateRule, AtLeastOneOfRule, ModelPredicateRule

__all__ = [
    "Rule",
    "FieldRule",
    "ModelRule",
    "RequiredRule",
    "PositiveIntRule",
    "PositiveNumberRule",
    "MaxLengthRule",
    "MinLengthRule",
    "MaxValueRule",
    "MinValueRule",
    "EmailRule",
    "StringIsDateRule",
    "PredicateRule",
    "AsyncPredicateRule",
    "NestedRule",
    "CollectionRule",
    "ModelPredicateRule",
    "AsyncModelPredicateRule",
    "AtLeastOneOfRule",
]
