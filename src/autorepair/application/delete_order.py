"""Application service: Delete Order use case.

Removes the order's line items and then its header, in the order the
cascade planner prescribes, inside one transaction. Deleting a folio that
does not exist is reported and touches nothing.
"""

from __future__ import annotations

from collections.abc import Callable

import structlog

from autorepair.domain.exceptions import EntityNotFoundError
from autorepair.domain.repository.order_store import OrderStore
from autorepair.domain.repository.persistence_gateway import PersistenceGateway
from autorepair.domain.service.cascade_deletion import DeletionStep, plan_order_deletion

logger = structlog.stdlib.get_logger(__name__)

_DELETERS: dict[DeletionStep, Callable[[OrderStore, int], int | bool]] = {
    DeletionStep.ORDER_SERVICES: lambda store, folio: store.delete_order_services(folio),
    DeletionStep.ORDER_REPLACEMENTS: lambda store, folio: store.delete_order_replacements(folio),
    DeletionStep.ORDER_MECHANICS: lambda store, folio: store.delete_order_mechanics(folio),
    DeletionStep.SERVICE_ORDER: lambda store, folio: store.delete_order(folio),
}


class DeleteOrderHandler:

    def __init__(self, gateway: PersistenceGateway) -> None:
        self._gateway = gateway

    def handle(self, folio: int) -> None:
        with self._gateway.transaction() as store:
            if store.get_order(folio) is None:
                raise EntityNotFoundError(f"Order #{folio} not found")

            removed: dict[str, int] = {}
            for target in plan_order_deletion(folio):
                result = _DELETERS[target.step](store, target.folio)
                if target.step is DeletionStep.SERVICE_ORDER and not result:
                    # Someone else deleted it after our read.
                    raise EntityNotFoundError(f"Order #{folio} not found")
                removed[target.step.value] = int(result)

        logger.info("order.deleted", folio=folio, **removed)
