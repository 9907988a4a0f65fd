"""Inputs to and results of the use cases.

Handlers accept selections and return these frozen records instead of
domain objects. Money leaves as a cent-rounded ``Decimal``; the CLI does
the formatting.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

# --- Inputs -------------------------------------------------------------------


@dataclass(frozen=True)
class ServiceSelection:
    """Input: a catalog service and how many times it is performed."""

    service_id: int
    quantity: int


@dataclass(frozen=True)
class ReplacementSelection:
    """Input: a replacement part and how many units are consumed."""

    replacement_id: int
    quantity: int


# --- Outputs ------------------------------------------------------------------


@dataclass(frozen=True)
class OrderCreatedDTO:
    folio: int
    cost: Decimal
    version: int


@dataclass(frozen=True)
class OrderServiceLineDTO:
    service_id: int
    name: str
    unit_cost: Decimal
    quantity: int
    line_total: Decimal  # before tax


@dataclass(frozen=True)
class OrderReplacementLineDTO:
    replacement_id: int
    name: str
    brand: str
    unit_price: Decimal
    quantity: int
    line_total: Decimal  # before tax


@dataclass(frozen=True)
class OrderMechanicDTO:
    employee_id: int
    full_name: str
    fields: str


@dataclass(frozen=True)
class VehicleSummaryDTO:
    serial_number: str
    plate_number: str
    brand: str
    model: str
    year: int
    antiquity: int | None
    customer_id: int
    customer_name: str
    customer_rfc: str


@dataclass(frozen=True)
class OrderDetailDTO:
    """Output: a complete order with its line items, for display."""

    folio: int
    version: int
    state: str
    entry_date: datetime
    estimated_delivery_time: datetime
    delivery_time: datetime | None
    cost: Decimal
    vehicle: VehicleSummaryDTO
    services: list[OrderServiceLineDTO] = field(default_factory=list)
    replacements: list[OrderReplacementLineDTO] = field(default_factory=list)
    mechanics: list[OrderMechanicDTO] = field(default_factory=list)


@dataclass(frozen=True)
class OrderSummaryDTO:
    """Output: one row of the order list."""

    folio: int
    state: str
    entry_date: datetime
    cost: Decimal
    serial_number: str
    vehicle_label: str
    customer_name: str
    service_names: list[str]


@dataclass(frozen=True)
class VehicleOptionDTO:
    serial_number: str
    display_label: str


@dataclass(frozen=True)
class CustomerVehiclesDTO:
    """Output: a customer's vehicles for a selection list.

    An unknown customer yields no vehicles and blank RFC/name.
    """

    customer_id: int
    customer_rfc: str
    customer_name: str
    vehicles: list[VehicleOptionDTO]


@dataclass(frozen=True)
class ServiceCatalogEntryDTO:
    service_id: int
    name: str
    cost: Decimal
