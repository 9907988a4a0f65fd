"""Application service: Create Order use case.

Orchestrates the flow between the store and the domain model. The order
header and all of its line items are written in one transaction; if any
step fails nothing is kept and no folio becomes visible.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime
from decimal import Decimal

import structlog

from autorepair.application import order_lines
from autorepair.application.dto import (
    OrderCreatedDTO,
    ReplacementSelection,
    ServiceSelection,
)
from autorepair.domain.exceptions import EntityNotFoundError, FieldError, ValidationError
from autorepair.domain.model.service_order import ServiceOrder
from autorepair.domain.repository.persistence_gateway import PersistenceGateway
from autorepair.domain.service.cost_calculator import IVA_RATE

logger = structlog.stdlib.get_logger(__name__)


class CreateOrderHandler:

    def __init__(
        self,
        gateway: PersistenceGateway,
        *,
        tax_rate: Decimal = IVA_RATE,
        include_replacements_in_cost: bool = False,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._gateway = gateway
        self._tax_rate = tax_rate
        self._include_replacements = include_replacements_in_cost
        self._clock = clock

    def handle(
        self,
        serial_number: str,
        service_selections: Sequence[ServiceSelection],
        *,
        replacement_selections: Sequence[ReplacementSelection] = (),
        mechanic_ids: Sequence[int] = (),
    ) -> OrderCreatedDTO:
        """Open a new service order for a vehicle.

        Steps:
        1. Validate the raw input, reporting every problem at once.
        2. Resolve the vehicle and every catalog entry (fail if missing).
        3. Price the order from *current* catalog costs.
        4. Insert the header, then its line items; commit.
        """
        errors: list[FieldError] = []
        if not serial_number or not serial_number.strip():
            errors.append(FieldError("serial_number", "A vehicle must be selected"))
        errors += order_lines.selection_errors(
            service_selections, replacement_selections, mechanic_ids
        )
        if errors:
            raise ValidationError(errors=errors)

        with self._gateway.transaction() as store:
            if store.get_vehicle(serial_number) is None:
                raise EntityNotFoundError(f"Vehicle '{serial_number}' not found")

            services = order_lines.load_services(store, service_selections)
            parts = order_lines.load_replacements(store, replacement_selections)
            order_lines.load_mechanics(store, mechanic_ids)

            cost = order_lines.price_order(
                order_lines.service_cost_lines(service_selections, services),
                order_lines.replacement_cost_lines(replacement_selections, parts),
                include_replacements=self._include_replacements,
                tax_rate=self._tax_rate,
            )

            order = ServiceOrder.open(serial_number, cost, now=self._clock())
            folio = store.add_order(order)

            store.add_order_services(order_lines.service_lines(folio, service_selections))
            if replacement_selections:
                store.add_order_replacements(
                    order_lines.replacement_lines(folio, replacement_selections)
                )
            if mechanic_ids:
                store.add_order_mechanics(order_lines.mechanic_lines(folio, mechanic_ids))

        logger.info(
            "order.created",
            folio=folio,
            serial_number=serial_number,
            cost=str(cost.amount),
            services=len(service_selections),
        )
        return OrderCreatedDTO(folio=folio, cost=cost.amount, version=order.version)
