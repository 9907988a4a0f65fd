"""Application service: service catalog lookup (query)."""

from __future__ import annotations

from autorepair.application.dto import ServiceCatalogEntryDTO
from autorepair.domain.repository.persistence_gateway import PersistenceGateway


class GetServiceEntryHandler:

    def __init__(self, gateway: PersistenceGateway) -> None:
        self._gateway = gateway

    def handle(self, service_id: int) -> ServiceCatalogEntryDTO | None:
        """Return the service's name and current pre-tax cost, or None."""
        with self._gateway.snapshot() as store:
            service = store.get_services([service_id]).get(service_id)

        if service is None:
            return None
        return ServiceCatalogEntryDTO(
            service_id=service_id,
            name=service.name,
            cost=service.cost.amount,
        )
