"""Application service: customer → vehicles lookup (query).

Feeds the vehicle picker once a customer is chosen. An unknown customer
is not an error: the picker simply shows nothing.
"""

from __future__ import annotations

from autorepair.application.dto import CustomerVehiclesDTO, VehicleOptionDTO
from autorepair.domain.repository.persistence_gateway import PersistenceGateway


class GetCustomerVehiclesHandler:

    def __init__(self, gateway: PersistenceGateway) -> None:
        self._gateway = gateway

    def handle(self, customer_id: int) -> CustomerVehiclesDTO:
        with self._gateway.snapshot() as store:
            customer = store.get_customer(customer_id)
            vehicles = store.list_vehicles_for_customer(customer_id) if customer else []

        return CustomerVehiclesDTO(
            customer_id=customer_id,
            customer_rfc=customer.rfc if customer else "",
            customer_name=customer.full_name if customer else "",
            vehicles=[
                VehicleOptionDTO(serial_number=v.serial_number, display_label=v.display_label)
                for v in vehicles
            ],
        )
