"""Shared record types and fixtures."""

from dataclasses import dataclass, field
from typing import Optional

import pytest


@dataclass
class Address:
    city: Optional[str] = None
    street: Optional[str] = None


@dataclass
class LineItem:
    code: Optional[str] = None
    quantity: int = 1


@dataclass
class Person:
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    mobile: Optional[str] = None
    age: int = 0
    is_active: bool = False
    is_external: bool = False
    address: Optional[Address] = None
    items: list = field(default_factory=list)


@pytest.fixture
def person() -> Person:
    return Person(name="Ada", email="ada@example.com", age=36, is_active=True)


@dataclass
class Company:
    owner: Optional[Person] = None
