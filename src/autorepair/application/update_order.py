"""Application service: Update Order use case.

Only the state label and the vehicle are caller-editable on the header.
Dates are never taken from input, and the cost is always recomputed by
the server when the priced line items change.

Concurrency is optimistic: the caller presents the version it read. A
mismatch is reported as ConcurrencyError before anything is written,
and the header write itself is conditional on that version, so a
concurrent edit that slips in between read and write also fails cleanly
with every line-item change rolled back.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

import structlog

from autorepair.application import order_lines
from autorepair.application.dto import ReplacementSelection, ServiceSelection
from autorepair.domain.exceptions import (
    ConcurrencyError,
    EntityNotFoundError,
    FieldError,
    ValidationError,
)
from autorepair.domain.repository.persistence_gateway import PersistenceGateway
from autorepair.domain.service.cost_calculator import IVA_RATE

logger = structlog.stdlib.get_logger(__name__)


class UpdateOrderHandler:

    def __init__(
        self,
        gateway: PersistenceGateway,
        *,
        tax_rate: Decimal = IVA_RATE,
        include_replacements_in_cost: bool = False,
    ) -> None:
        self._gateway = gateway
        self._tax_rate = tax_rate
        self._include_replacements = include_replacements_in_cost

    def handle(
        self,
        folio: int,
        *,
        expected_version: int,
        state: str | None = None,
        serial_number: str | None = None,
        service_selections: Sequence[ServiceSelection] | None = None,
        replacement_selections: Sequence[ReplacementSelection] | None = None,
        mechanic_ids: Sequence[int] | None = None,
    ) -> None:
        """Apply the given changes; arguments left as ``None`` stay untouched.

        A collection that is passed replaces the stored one entirely.
        """
        errors: list[FieldError] = []
        if serial_number is not None and not serial_number.strip():
            errors.append(FieldError("serial_number", "A vehicle must be selected"))
        errors += order_lines.selection_errors(
            service_selections, replacement_selections, mechanic_ids
        )
        if errors:
            raise ValidationError(errors=errors)

        with self._gateway.transaction() as store:
            order = store.get_order(folio)
            if order is None:
                raise EntityNotFoundError(f"Order #{folio} not found")
            if order.version != expected_version:
                logger.info(
                    "order.update.conflict",
                    folio=folio,
                    expected_version=expected_version,
                    stored_version=order.version,
                )
                raise ConcurrencyError(
                    f"Order #{folio} was changed by someone else "
                    f"(version {order.version}, you had {expected_version}). "
                    f"Reload it and try again."
                )

            if state is not None:
                order.change_state(state)

            if serial_number is not None and serial_number != order.serial_number:
                if store.get_vehicle(serial_number) is None:
                    raise EntityNotFoundError(f"Vehicle '{serial_number}' not found")
                order.reassign_vehicle(serial_number)

            service_costs = None
            if service_selections is not None:
                services = order_lines.load_services(store, service_selections)
                service_costs = order_lines.service_cost_lines(service_selections, services)

            part_costs = None
            if replacement_selections is not None:
                parts = order_lines.load_replacements(store, replacement_selections)
                part_costs = order_lines.replacement_cost_lines(replacement_selections, parts)

            if mechanic_ids is not None:
                order_lines.load_mechanics(store, mechanic_ids)

            reprice = service_costs is not None or (
                self._include_replacements and part_costs is not None
            )
            if reprice:
                if service_costs is None:
                    service_costs = order_lines.stored_service_cost_lines(store, folio)
                if part_costs is None and self._include_replacements:
                    part_costs = order_lines.stored_replacement_cost_lines(store, folio)
                order.reprice(
                    order_lines.price_order(
                        service_costs,
                        part_costs or [],
                        include_replacements=self._include_replacements,
                        tax_rate=self._tax_rate,
                    )
                )

            # Claim the header first; a lost race aborts before any line moves.
            if not store.update_order(order, expected_version):
                logger.info("order.update.conflict", folio=folio, expected_version=expected_version)
                raise ConcurrencyError(
                    f"Order #{folio} was changed by someone else. Reload it and try again."
                )

            if service_selections is not None:
                store.delete_order_services(folio)
                store.add_order_services(order_lines.service_lines(folio, service_selections))
            if replacement_selections is not None:
                store.delete_order_replacements(folio)
                store.add_order_replacements(
                    order_lines.replacement_lines(folio, replacement_selections)
                )
            if mechanic_ids is not None:
                store.delete_order_mechanics(folio)
                store.add_order_mechanics(order_lines.mechanic_lines(folio, mechanic_ids))

        logger.info(
            "order.updated",
            folio=folio,
            version=order.version,
            cost=str(order.cost.amount),
            repriced=reprice,
        )
