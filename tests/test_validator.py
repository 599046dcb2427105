"""Tests for ModelValidator: ordering, gating, delegation and the async path."""

import pytest

from modelcheck import ModelValidator, Severity
from modelcheck.errors import InvalidExpressionError
from modelcheck.rules import AtLeastOneOfRule, ModelPredicateRule

from .conftest import Address, Company, LineItem, Person


def _address_validator():
    validator = ModelValidator(Address)
    validator.rule_for(lambda a: a.city).is_required()
    return validator


def _item_validator():
    validator = ModelValidator(LineItem)
    validator.rule_for("code").is_required()
    return validator


class TestScenarios:
    def test_required_field_null(self):
        validator = ModelValidator(Person)
        validator.rule_for(lambda p: p.name).is_required()

        outcome = validator.validate(Person(name=None))

        assert not outcome.is_valid
        assert len(outcome.errors) == 1
        assert outcome.errors[0].field == "name"

    def test_conditional_email(self):
        validator = ModelValidator(Person)
        validator.rule_for(lambda p: p.email).is_email().when(lambda p: p.is_active)

        assert validator.validate(Person(email="not-an-email", is_active=False)).is_valid
        outcome = validator.validate(Person(email="not-an-email", is_active=True))
        assert not outcome.is_valid
        assert len(outcome.messages) == 1

    def test_at_least_one_of(self):
        validator = ModelValidator(Person)
        validator.at_least_one_of().field("email").field("phone").field("mobile")

        outcome = validator.validate(Person(email=None, phone="", mobile="   "))
        assert not outcome.is_valid
        assert len(outcome.messages) == 1
        assert "email, phone, mobile" in outcome.messages[0].message

        assert validator.validate(Person(email="ada@example.com")).is_valid

    def test_collection_delegation(self):
        validator = ModelValidator(Person)
        validator.rule_for("items").validate_collection(_item_validator())

        person = Person(items=[LineItem(code="A"), LineItem(code=None), LineItem(code="C")])
        outcome = validator.validate(person)

        assert len(outcome.messages) == 1
        assert outcome.messages[0].field == "items[1].code"

    def test_nested_delegation(self):
        validator = ModelValidator(Person)
        validator.rule_for(lambda p: p.address).validate_nested(_address_validator())

        outcome = validator.validate(Person(address=Address(city=None)))

        assert len(outcome.messages) == 1
        assert outcome.messages[0].field == "address.city"

    @pytest.mark.asyncio
    async def test_async_model_rule_gated_off(self):
        calls = []

        async def lookup(person):
            calls.append(person)
            return False

        validator = ModelValidator(Person)
        validator.rule().must_async(lookup).when(lambda p: p.is_active)

        outcome = await validator.validate_async(Person(is_active=False))
        assert outcome.is_valid
        assert calls == []

        outcome = await validator.validate_async(Person(is_active=True))
        assert not outcome.is_valid
        assert len(calls) == 1


class TestOrdering:
    def _validator(self):
        validator = ModelValidator(Person)
        validator.rule_for("name").is_required()
        validator.rule_for("email").is_required().is_email()
        validator.rule().must(lambda p: p.age >= 18).with_message("adult")
        validator.at_least_one_of().field("phone").field("mobile")
        # Referencing an existing field again appends to its chain
        validator.rule_for("name").min_length(2)
        return validator

    def test_fields_then_model_rules(self):
        outcome = self._validator().validate(Person(name="", email=None, age=3))
        assert [(m.field, m.message) for m in outcome.messages] == [
            ("name", "name is required."),
            ("name", "name must be at least 2 characters long."),
            ("email", "email is required."),
            ("", "adult"),
            ("", "At least one of the following properties must have a value: phone, mobile"),
        ]

    def test_idempotent(self):
        validator = self._validator()
        person = Person(name="", email="bad", age=3)
        assert validator.validate(person).messages == validator.validate(person).messages

    def test_fields_in_first_reference_order(self):
        validator = self._validator()
        assert validator.fields == ["name", "email"]
        assert len(validator.model_rules) == 2
        assert isinstance(validator.model_rules[0], ModelPredicateRule)
        assert isinstance(validator.model_rules[1], AtLeastOneOfRule)

    def test_rule_for_returns_same_chain(self):
        validator = ModelValidator(Person)
        assert validator.rule_for("name") is validator.rule_for(lambda p: p.name)

    @pytest.mark.asyncio
    async def test_async_matches_sync_for_sync_rules(self):
        validator = self._validator()
        person = Person(name="", email="bad", age=3)
        assert (await validator.validate_async(person)).messages == validator.validate(person).messages


class TestGating:
    def test_when_false_suppresses_failure(self):
        validator = ModelValidator(Person)
        validator.rule_for("name").is_required().when(lambda p: p.is_active)
        validator.rule_for("email").is_email().when(lambda p: not p.is_external)
        assert validator.validate(Person(name=None, email="invalid", is_external=True)).is_valid

    def test_model_rule_gating(self):
        validator = ModelValidator(Person)
        validator.rule().must(lambda p: False).unless(lambda p: p.is_external)
        validator.at_least_one_of().field("email").when(lambda p: p.is_active)
        assert validator.validate(Person(is_external=True, is_active=False)).is_valid
        assert len(validator.validate(Person(is_external=False, is_active=True)).messages) == 2

    def test_model_rule_severity_and_label(self):
        validator = ModelValidator(Person)
        validator.at_least_one_of().field("phone").field("mobile").as_warning().for_field("contact")
        outcome = validator.validate(Person())
        assert outcome.is_valid
        assert outcome.warnings[0].field == "contact"
        assert outcome.warnings[0].severity == Severity.WARNING


class TestDelegation:
    def test_absent_or_mismatched_nested_value(self):
        validator = ModelValidator(Person)
        validator.rule_for("address").validate_nested(_address_validator())
        assert validator.validate(Person(address=None)).is_valid
        assert validator.validate(Person(address="12 Main St")).is_valid

    def test_nested_inherits_severity_of_inner_rule(self):
        inner = ModelValidator(Address)
        inner.rule_for("street").is_required().as_warning()
        validator = ModelValidator(Person)
        validator.rule_for("address").validate_nested(inner)
        outcome = validator.validate(Person(address=Address(city="Paris")))
        assert outcome.is_valid
        assert outcome.warnings[0].field == "address.street"

    def test_two_levels_of_nesting(self):
        person_validator = ModelValidator(Person)
        person_validator.rule_for("address").validate_nested(_address_validator())
        validator = ModelValidator(Company)
        validator.rule_for("owner").validate_nested(person_validator)

        outcome = validator.validate(Company(owner=Person(address=Address())))
        assert outcome.messages[0].field == "owner.address.city"

    def test_empty_or_mismatched_collection(self):
        validator = ModelValidator(Person)
        validator.rule_for("items").validate_collection(_item_validator())
        assert validator.validate(Person(items=[])).is_valid
        assert validator.validate(Person(items=[LineItem(code=None), "not an item"])).is_valid
        assert validator.validate(Person(items="abc")).is_valid
        assert validator.validate(Person(items=None)).is_valid

    def test_collection_indexes_every_failing_item(self):
        validator = ModelValidator(Person)
        validator.rule_for("items").validate_collection(_item_validator())
        items = (LineItem(code=None), LineItem(code="B"), LineItem(code=" "))
        outcome = validator.validate(Person(items=items))
        assert [m.field for m in outcome.messages] == ["items[0].code", "items[2].code"]

    def test_collection_without_item_type_accepts_mappings(self):
        item_validator = ModelValidator()
        item_validator.rule_for("code").is_required()
        validator = ModelValidator(Person)
        validator.rule_for("items").validate_collection(item_validator)
        outcome = validator.validate(Person(items=[{"code": "A"}, {"code": ""}]))
        assert [m.field for m in outcome.messages] == ["items[1].code"]

    @pytest.mark.asyncio
    async def test_async_delegation_runs_async_inner_rules(self):
        async def known_city(address, value):
            return value in {"Paris", "Athens"}

        inner = ModelValidator(Address)
        inner.rule_for("city").must_async(known_city, "Unknown city")
        item_validator = ModelValidator(LineItem)
        item_validator.rule_for("code").must_async(lambda item, value: _is_upper(value))

        validator = ModelValidator(Person)
        validator.rule_for("address").validate_nested(inner)
        validator.rule_for("items").validate_collection(item_validator)

        person = Person(address=Address(city="Gotham"), items=[LineItem(code="ok"), LineItem(code="OK")])
        outcome = await validator.validate_async(person)
        assert [(m.field, m.message) for m in outcome.messages] == [
            ("address.city", "Unknown city"),
            ("items[0].code", "Async validation failed."),
        ]

        # Sync path ignores the async-only inner rules
        assert validator.validate(person).is_valid


async def _is_upper(value):
    return value.isupper()


class TestRecordShapes:
    def test_mapping_records(self):
        validator = ModelValidator(dict)
        validator.rule_for("name").is_required()
        validator.rule_for("age").positive_int()
        outcome = validator.validate({"age": 0})
        assert [m.field for m in outcome.messages] == ["name", "age"]

    def test_missing_attribute_is_treated_as_none(self):
        validator = ModelValidator(Person)
        validator.rule_for("nickname").is_required()
        outcome = validator.validate(Person())
        assert outcome.messages[0].field == "nickname"
        assert outcome.messages[0].attempted_value is None

    def test_invalid_accessor_raises(self):
        validator = ModelValidator(Person)
        with pytest.raises(InvalidExpressionError):
            validator.rule_for(lambda p: p.name.upper())

    def test_invalid_accessor_in_at_least_one_of(self):
        validator = ModelValidator(Person)
        with pytest.raises(InvalidExpressionError):
            validator.at_least_one_of().field(lambda p: p.age + 1)


class TestLogging:
    def test_run_is_logged(self):
        from structlog.testing import capture_logs

        validator = ModelValidator(Person)
        validator.rule_for("name").is_required()
        with capture_logs() as logs:
            validator.validate(Person())
        events = [entry for entry in logs if entry["event"] == "validation_complete"]
        assert len(events) == 1
        assert events[0]["valid"] is False
        assert events[0]["summary"] == {"error": 1, "warning": 0}

    def test_predicate_failure_is_logged(self):
        from structlog.testing import capture_logs

        validator = ModelValidator(Person)
        validator.rule().must(lambda p: p.age / 0 > 1)
        with capture_logs() as logs:
            outcome = validator.validate(Person())
        assert not outcome.is_valid
        assert any(entry["event"] == "predicate_failed" for entry in logs)
