"""Application service: Save Vehicle use case.

The single write path for vehicle records. Antiquity is derived here on
every insert and update; whatever the caller put in ``antiquity`` is
overwritten.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date

import structlog

from autorepair.domain.exceptions import EntityNotFoundError
from autorepair.domain.model.catalog import Vehicle
from autorepair.domain.repository.persistence_gateway import PersistenceGateway

logger = structlog.stdlib.get_logger(__name__)


class SaveVehicleHandler:

    def __init__(
        self,
        gateway: PersistenceGateway,
        *,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._gateway = gateway
        self._today = today

    def handle(self, vehicle: Vehicle) -> Vehicle:
        with self._gateway.transaction() as store:
            if store.get_customer(vehicle.customer_id) is None:
                raise EntityNotFoundError(f"Customer #{vehicle.customer_id} not found")

            vehicle.stamp_antiquity(self._today())
            store.save_vehicle(vehicle)

        logger.info(
            "vehicle.saved",
            serial_number=vehicle.serial_number,
            customer_id=vehicle.customer_id,
            antiquity=vehicle.antiquity,
        )
        return vehicle
