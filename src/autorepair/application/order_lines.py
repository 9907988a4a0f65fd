"""Helpers shared by the create and update use cases.

Turns raw selections into validated, catalog-resolved, priced line items.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from autorepair.application.dto import ReplacementSelection, ServiceSelection
from autorepair.domain.exceptions import EntityNotFoundError, FieldError
from autorepair.domain.model.catalog import Mechanic, Replacement, Service
from autorepair.domain.model.service_order import (
    OrderMechanicLine,
    OrderReplacementLine,
    OrderServiceLine,
)
from autorepair.domain.model.value_objects import Money, Quantity
from autorepair.domain.repository.order_store import OrderStore
from autorepair.domain.service.cost_calculator import compute_order_cost
from autorepair.domain.service.selection_validator import (
    validate_mechanic_ids,
    validate_selections,
)


def selection_errors(
    services: Sequence[ServiceSelection] | None,
    replacements: Sequence[ReplacementSelection] | None = None,
    mechanic_ids: Sequence[int] | None = None,
) -> list[FieldError]:
    """Validate every collection the caller supplied. ``None`` means untouched."""
    errors: list[FieldError] = []
    if services is not None:
        errors += validate_selections(
            [(s.service_id, s.quantity) for s in services],
        )
    if replacements is not None:
        errors += validate_selections(
            [(r.replacement_id, r.quantity) for r in replacements],
            label="replacement",
            field="replacement_selections",
            required=False,
        )
    if mechanic_ids is not None:
        errors += validate_mechanic_ids(mechanic_ids)
    return errors


# --- Catalog resolution -------------------------------------------------------


def _missing(requested: Sequence[int], found: dict) -> list[str]:
    return [str(i) for i in requested if i not in found]


def load_services(store: OrderStore, selections: Sequence[ServiceSelection]) -> dict[int, Service]:
    ids = [s.service_id for s in selections]
    services = store.get_services(ids)
    missing = _missing(ids, services)
    if missing:
        raise EntityNotFoundError(f"Service not found: {', '.join(missing)}")
    return services


def load_replacements(
    store: OrderStore, selections: Sequence[ReplacementSelection]
) -> dict[int, Replacement]:
    ids = [r.replacement_id for r in selections]
    parts = store.get_replacements(ids)
    missing = _missing(ids, parts)
    if missing:
        raise EntityNotFoundError(f"Replacement not found: {', '.join(missing)}")
    return parts


def load_mechanics(store: OrderStore, employee_ids: Sequence[int]) -> dict[int, Mechanic]:
    mechanics = store.get_mechanics(employee_ids)
    missing = _missing(employee_ids, mechanics)
    if missing:
        raise EntityNotFoundError(f"Mechanic not found: {', '.join(missing)}")
    return mechanics


# --- Pricing ------------------------------------------------------------------


def service_cost_lines(
    selections: Sequence[ServiceSelection], services: dict[int, Service]
) -> list[tuple[Money, int]]:
    return [(services[s.service_id].cost, s.quantity) for s in selections]


def replacement_cost_lines(
    selections: Sequence[ReplacementSelection], parts: dict[int, Replacement]
) -> list[tuple[Money, int]]:
    return [(parts[r.replacement_id].unit_price, r.quantity) for r in selections]


def stored_service_cost_lines(store: OrderStore, folio: int) -> list[tuple[Money, int]]:
    """Price the order's current service lines at today's catalog cost."""
    lines = store.list_order_services(folio)
    services = store.get_services([line.service_id for line in lines])
    return [(services[line.service_id].cost, line.quantity.value) for line in lines]


def stored_replacement_cost_lines(store: OrderStore, folio: int) -> list[tuple[Money, int]]:
    lines = store.list_order_replacements(folio)
    parts = store.get_replacements([line.replacement_id for line in lines])
    return [(parts[line.replacement_id].unit_price, line.quantity.value) for line in lines]


def price_order(
    service_lines: list[tuple[Money, int]],
    replacement_lines: list[tuple[Money, int]],
    *,
    include_replacements: bool,
    tax_rate: Decimal,
) -> Money:
    lines = list(service_lines)
    if include_replacements:
        lines += replacement_lines
    return compute_order_cost(lines, tax_rate)


# --- Line construction --------------------------------------------------------


def service_lines(folio: int, selections: Sequence[ServiceSelection]) -> list[OrderServiceLine]:
    return [OrderServiceLine(s.service_id, folio, Quantity(s.quantity)) for s in selections]


def replacement_lines(
    folio: int, selections: Sequence[ReplacementSelection]
) -> list[OrderReplacementLine]:
    return [
        OrderReplacementLine(r.replacement_id, folio, Quantity(r.quantity))
        for r in selections
    ]


def mechanic_lines(folio: int, employee_ids: Sequence[int]) -> list[OrderMechanicLine]:
    return [OrderMechanicLine(employee_id, folio) for employee_id in employee_ids]
