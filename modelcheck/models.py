"""Validation models: severity levels, messages and the outcome value object.

An outcome is an ordered list of messages in emission order. Outcomes are
combined only by concatenation, never sorted or deduplicated.
"""

from enum import Enum
from typing import Any, Iterable, Optional

from pydantic import BaseModel, Field


class Severity(str, Enum):
    """Message severity levels."""

    ERROR = "error"      # Makes the outcome invalid
    WARNING = "warning"  # Reported, but the outcome stays valid


class ValidationMessage(BaseModel):
    """A single validation finding."""

    field: str = ""                        # Field path, empty for model-level messages
    message: str
    severity: Severity = Severity.ERROR
    attempted_value: Optional[Any] = None  # Value under test, None for model rules

    model_config = {"frozen": True}

    def rehome(self, prefix: str) -> "ValidationMessage":
        """Return a copy whose field path is nested under ``prefix``."""
        path = f"{prefix}.{self.field}" if self.field else prefix
        return self.model_copy(update={"field": path})


class ValidationOutcome(BaseModel):
    """Aggregated result of one validate call."""

    messages: list[ValidationMessage] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    @property
    def has_errors(self) -> bool:
        return any(m.severity == Severity.ERROR for m in self.messages)

    @property
    def has_warnings(self) -> bool:
        return any(m.severity == Severity.WARNING for m in self.messages)

    @property
    def errors(self) -> list[ValidationMessage]:
        return [m for m in self.messages if m.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[ValidationMessage]:
        return [m for m in self.messages if m.severity == Severity.WARNING]

    @property
    def summary(self) -> dict[str, int]:
        """Count of messages by severity."""
        counts = {severity.value: 0 for severity in Severity}
        for m in self.messages:
            counts[m.severity.value] += 1
        return counts

    def for_field(self, path: str) -> list[ValidationMessage]:
        """Messages attributed to one field path."""
        return [m for m in self.messages if m.field == path]

    def combine(self, other: "ValidationOutcome") -> "ValidationOutcome":
        """Concatenate two outcomes into a new one. Neither operand is modified."""
        return ValidationOutcome(messages=self.messages + other.messages)

    def __add__(self, other: "ValidationOutcome") -> "ValidationOutcome":
        if not isinstance(other, ValidationOutcome):
            return NotImplemented
        return self.combine(other)

    def __bool__(self) -> bool:
        return self.is_valid

    def __len__(self) -> int:
        return len(self.messages)

    @classmethod
    def empty(cls) -> "ValidationOutcome":
        return cls()

    @classmethod
    def concat(cls, outcomes: Iterable["ValidationOutcome"]) -> "ValidationOutcome":
        """Concatenate any number of outcomes in iteration order."""
        messages: list[ValidationMessage] = []
        for outcome in outcomes:
            messages.extend(outcome.messages)
        return cls(messages=messages)
