"""Application service: Delete Vehicle and Delete Customer use cases.

A vehicle with service orders cannot be deleted: its order history must
not disappear. Deleting a customer takes its vehicles with it, under the
same rule.
"""

from __future__ import annotations

import structlog

from autorepair.domain.exceptions import EntityNotFoundError
from autorepair.domain.repository.persistence_gateway import PersistenceGateway

logger = structlog.stdlib.get_logger(__name__)


class DeleteVehicleHandler:

    def __init__(self, gateway: PersistenceGateway) -> None:
        self._gateway = gateway

    def handle(self, serial_number: str) -> None:
        with self._gateway.transaction() as store:
            if not store.delete_vehicle(serial_number):
                raise EntityNotFoundError(f"Vehicle '{serial_number}' not found")
        logger.info("vehicle.deleted", serial_number=serial_number)


class DeleteCustomerHandler:

    def __init__(self, gateway: PersistenceGateway) -> None:
        self._gateway = gateway

    def handle(self, customer_id: int) -> None:
        with self._gateway.transaction() as store:
            vehicles = store.list_vehicles_for_customer(customer_id)
            if not store.delete_customer(customer_id):
                raise EntityNotFoundError(f"Customer #{customer_id} not found")
        logger.info("customer.deleted", customer_id=customer_id, vehicles=len(vehicles))
