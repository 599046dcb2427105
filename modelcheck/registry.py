"""Process-wide store of validators keyed by record type.

Register validators at startup and look them up anywhere afterwards:

    validator_registry.register(Person, person_validator)
    validator_registry.get(Person).validate(person)

Prefer passing a ValidatorRegistry explicitly. The module-level
``validator_registry`` exists for code that needs ambient lookup.
"""

import threading

import structlog

from modelcheck.errors import ValidatorNotFoundError
from modelcheck.validator import ModelValidator

logger = structlog.get_logger()


class ValidatorRegistry:
    """Thread-safe mapping from record type to ModelValidator.

    Writes are serialized by a lock and replace the whole mapping, so lookups
    read a consistent dict without locking. Entries are never removed.
    """

    def __init__(self):
        self._validators: dict[type, ModelValidator] = {}
        self._lock = threading.Lock()

    def register(self, record_type: type, validator: ModelValidator) -> None:
        """Register ``validator`` for ``record_type``, replacing any previous one."""
        with self._lock:
            replaced = record_type in self._validators
            updated = dict(self._validators)
            updated[record_type] = validator
            self._validators = updated

        logger.info(
            "validator_replaced" if replaced else "validator_registered",
            record_type=getattr(record_type, "__name__", repr(record_type)),
        )

    def get(self, record_type: type) -> ModelValidator:
        """Return the validator for ``record_type``.

        Raises:
            ValidatorNotFoundError: If nothing is registered for the type.
        """
        validator = self._validators.get(record_type)
        if validator is None:
            raise ValidatorNotFoundError(record_type)
        return validator

    def has(self, record_type: type) -> bool:
        return record_type in self._validators

    def __contains__(self, record_type: type) -> bool:
        return self.has(record_type)

    def __len__(self) -> int:
        return len(self._validators)

    def registered_types(self) -> list[type]:
        return list(self._validators)


# Module-level singleton
validator_registry = ValidatorRegistry()
