"""Application service: Show Order use case (query).

Composes the header with its vehicle, customer and three line-item
collections. Read-only; may observe a concurrent update slightly late.
"""

from __future__ import annotations

from autorepair.application.dto import (
    OrderDetailDTO,
    OrderMechanicDTO,
    OrderReplacementLineDTO,
    OrderServiceLineDTO,
    VehicleSummaryDTO,
)
from autorepair.domain.exceptions import EntityNotFoundError
from autorepair.domain.model.service_order import ServiceOrder
from autorepair.domain.repository.order_store import OrderStore
from autorepair.domain.repository.persistence_gateway import PersistenceGateway


class ShowOrderHandler:

    def __init__(self, gateway: PersistenceGateway) -> None:
        self._gateway = gateway

    def handle(self, folio: int) -> OrderDetailDTO:
        with self._gateway.snapshot() as store:
            order = store.get_order(folio)
            if order is None:
                raise EntityNotFoundError(f"Order #{folio} not found")
            return self._to_dto(store, order)

    # --- Mapping --------------------------------------------------------------

    @staticmethod
    def _to_dto(store: OrderStore, order: ServiceOrder) -> OrderDetailDTO:
        folio: int = order.folio  # type: ignore[assignment]

        vehicle = store.get_vehicle(order.serial_number)
        if vehicle is None:
            raise EntityNotFoundError(f"Vehicle '{order.serial_number}' not found")
        customer = store.get_customer(vehicle.customer_id)

        service_lines = store.list_order_services(folio)
        services = store.get_services([line.service_id for line in service_lines])

        part_lines = store.list_order_replacements(folio)
        parts = store.get_replacements([line.replacement_id for line in part_lines])

        mechanic_lines = store.list_order_mechanics(folio)
        mechanics = store.get_mechanics([line.employee_id for line in mechanic_lines])

        return OrderDetailDTO(
            folio=folio,
            version=order.version,
            state=order.state,
            entry_date=order.entry_date,
            estimated_delivery_time=order.estimated_delivery_time,
            delivery_time=order.delivery_time,
            cost=order.cost.amount,
            vehicle=VehicleSummaryDTO(
                serial_number=vehicle.serial_number,
                plate_number=vehicle.plate_number,
                brand=vehicle.brand,
                model=vehicle.model,
                year=vehicle.year,
                antiquity=vehicle.antiquity,
                customer_id=vehicle.customer_id,
                customer_name=customer.full_name if customer else "",
                customer_rfc=customer.rfc if customer else "",
            ),
            services=[
                OrderServiceLineDTO(
                    service_id=line.service_id,
                    name=services[line.service_id].name,
                    unit_cost=services[line.service_id].cost.amount,
                    quantity=line.quantity.value,
                    line_total=(services[line.service_id].cost * line.quantity.value).amount,
                )
                for line in service_lines
            ],
            replacements=[
                OrderReplacementLineDTO(
                    replacement_id=line.replacement_id,
                    name=parts[line.replacement_id].name,
                    brand=parts[line.replacement_id].brand,
                    unit_price=parts[line.replacement_id].unit_price.amount,
                    quantity=line.quantity.value,
                    line_total=(parts[line.replacement_id].unit_price * line.quantity.value).amount,
                )
                for line in part_lines
            ],
            mechanics=[
                OrderMechanicDTO(
                    employee_id=line.employee_id,
                    full_name=mechanics[line.employee_id].full_name,
                    fields=mechanics[line.employee_id].fields,
                )
                for line in mechanic_lines
            ],
        )
