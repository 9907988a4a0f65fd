"""Application service: List Orders use case (query)."""

from __future__ import annotations

from autorepair.application.dto import OrderSummaryDTO
from autorepair.domain.model.catalog import Customer, Vehicle
from autorepair.domain.repository.persistence_gateway import PersistenceGateway


class ListOrdersHandler:

    def __init__(self, gateway: PersistenceGateway) -> None:
        self._gateway = gateway

    def handle(self) -> list[OrderSummaryDTO]:
        """Every order, newest folio first."""
        summaries: list[OrderSummaryDTO] = []
        vehicles: dict[str, Vehicle | None] = {}
        customers: dict[int, Customer | None] = {}

        with self._gateway.snapshot() as store:
            for order in store.list_orders():
                if order.serial_number not in vehicles:
                    vehicles[order.serial_number] = store.get_vehicle(order.serial_number)
                vehicle = vehicles[order.serial_number]

                customer = None
                if vehicle is not None:
                    if vehicle.customer_id not in customers:
                        customers[vehicle.customer_id] = store.get_customer(vehicle.customer_id)
                    customer = customers[vehicle.customer_id]

                lines = store.list_order_services(order.folio)
                services = store.get_services([line.service_id for line in lines])

                summaries.append(
                    OrderSummaryDTO(
                        folio=order.folio,
                        state=order.state,
                        entry_date=order.entry_date,
                        cost=order.cost.amount,
                        serial_number=order.serial_number,
                        vehicle_label=vehicle.display_label if vehicle else "",
                        customer_name=customer.full_name if customer else "",
                        service_names=[services[line.service_id].name for line in lines],
                    )
                )
        return summaries
