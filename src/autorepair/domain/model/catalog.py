"""Catalog entities: customers, vehicles, mechanics, services, parts.

These live independently of service orders. Orders only reference them by
key; pricing always reads the catalog's *current* cost.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime

from autorepair.domain.exceptions import ValidationError
from autorepair.domain.model.value_objects import CENTS, Money
from autorepair.domain.service.antiquity import derive_antiquity

RFC_MAX_LENGTH = 13
NAME_MAX_LENGTH = 50
SERIAL_NUMBER_MAX_LENGTH = 50
PLATE_NUMBER_MAX_LENGTH = 15


def _require(value: str | None, label: str, max_length: int) -> None:
    if not value or not value.strip():
        raise ValidationError(f"{label} is required")
    if len(value) > max_length:
        raise ValidationError(f"{label} cannot exceed {max_length} characters")


def _require_cents(amount: Money, label: str) -> None:
    # Numeric(*, 2) columns.
    if amount.amount != amount.amount.quantize(CENTS):
        raise ValidationError(f"{label} must have at most 2 decimal places, got {amount.amount}")


@dataclass
class Customer:
    """A shop customer. Owns its vehicles: deleting it deletes them."""

    customer_id: int | None
    rfc: str
    name: str
    first_lastname: str
    second_lastname: str | None = None
    street: str = ""
    street_number: str = ""
    suburb: str = ""
    postal_code: str = ""
    city: str = ""
    main_phone: str = ""
    secondary_phone1: str | None = None
    secondary_phone2: str | None = None
    email: str | None = None
    registration_date: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        _require(self.rfc, "RFC", RFC_MAX_LENGTH)
        _require(self.name, "Customer name", NAME_MAX_LENGTH)
        _require(self.first_lastname, "Customer first lastname", NAME_MAX_LENGTH)
        if self.email and len(self.email) > NAME_MAX_LENGTH:
            raise ValidationError(
                f"Customer email cannot exceed {NAME_MAX_LENGTH} characters"
            )

    @property
    def full_name(self) -> str:
        return f"{self.name} {self.first_lastname}"


@dataclass
class Vehicle:
    """A customer's vehicle, keyed by its caller-assigned serial number.

    ``antiquity`` is derived state. Only ``stamp_antiquity()`` sets it, and
    the vehicle write path calls it on every insert and update.
    """

    serial_number: str
    plate_number: str
    brand: str
    model: str
    year: int
    color: str
    mileage: int
    customer_id: int
    type: str | None = None
    antiquity: int | None = None

    def __post_init__(self) -> None:
        _require(self.serial_number, "Serial number", SERIAL_NUMBER_MAX_LENGTH)
        _require(self.plate_number, "Plate number", PLATE_NUMBER_MAX_LENGTH)

    @property
    def display_label(self) -> str:
        return f"{self.brand} {self.model} - {self.plate_number} ({self.year})"

    def stamp_antiquity(self, as_of: date) -> None:
        self.antiquity = derive_antiquity(self.year, as_of)


@dataclass
class Mechanic:
    employee_id: int | None
    rfc: str
    name: str
    first_lastname: str
    phone: str
    salary: Money
    experience: int
    second_lastname: str | None = None
    fields: str = "Otros"

    def __post_init__(self) -> None:
        _require(self.rfc, "RFC", RFC_MAX_LENGTH)
        _require_cents(self.salary, "Mechanic salary")

    @property
    def full_name(self) -> str:
        parts = [self.name, self.first_lastname, self.second_lastname]
        return " ".join(p for p in parts if p)


@dataclass
class Service:
    """A catalog service. Its ``cost`` is the pre-tax unit price."""

    service_id: int | None
    name: str
    cost: Money
    estimated_time: int
    description: str | None = None

    def __post_init__(self) -> None:
        _require_cents(self.cost, "Service cost")


@dataclass
class Replacement:
    """A replacement part kept in stock."""

    replacement_id: int | None
    name: str
    brand: str
    unit_price: Money
    current_stock: int = 0
    minimum_stock: int = 0
    supplier: str | None = None

    def __post_init__(self) -> None:
        _require_cents(self.unit_price, "Part price")
