"""Application services: register catalog rows the order core depends on.

Customers, services, parts and mechanics are created here with generated
ids. Vehicles have their own write path (SaveVehicleHandler) because of
antiquity.
"""

from __future__ import annotations

import structlog

from autorepair.domain.exceptions import ValidationError
from autorepair.domain.model.catalog import Customer, Mechanic, Replacement, Service
from autorepair.domain.repository.persistence_gateway import PersistenceGateway

logger = structlog.stdlib.get_logger(__name__)


class RegisterCustomerHandler:

    def __init__(self, gateway: PersistenceGateway) -> None:
        self._gateway = gateway

    def handle(self, customer: Customer) -> Customer:
        with self._gateway.transaction() as store:
            store.save_customer(customer)
        logger.info("customer.saved", customer_id=customer.customer_id)
        return customer


class RegisterServiceHandler:

    def __init__(self, gateway: PersistenceGateway) -> None:
        self._gateway = gateway

    def handle(self, service: Service) -> Service:
        if not service.name or not service.name.strip():
            raise ValidationError("Service name is required")
        if service.estimated_time < 0:
            raise ValidationError("Estimated time cannot be negative")

        with self._gateway.transaction() as store:
            store.save_service(service)
        logger.info("service.saved", service_id=service.service_id, cost=str(service.cost.amount))
        return service


class RegisterReplacementHandler:

    def __init__(self, gateway: PersistenceGateway) -> None:
        self._gateway = gateway

    def handle(self, replacement: Replacement) -> Replacement:
        if not replacement.name or not replacement.name.strip():
            raise ValidationError("Part name is required")

        with self._gateway.transaction() as store:
            store.save_replacement(replacement)
        logger.info("replacement.saved", replacement_id=replacement.replacement_id)
        return replacement


class RegisterMechanicHandler:

    def __init__(self, gateway: PersistenceGateway) -> None:
        self._gateway = gateway

    def handle(self, mechanic: Mechanic) -> Mechanic:
        with self._gateway.transaction() as store:
            store.save_mechanic(mechanic)
        logger.info("mechanic.saved", employee_id=mechanic.employee_id)
        return mechanic
