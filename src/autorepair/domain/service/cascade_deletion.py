"""Domain service: Order deletion order.

Line-item rows reference the order header by folio, so they must be
removed before the header or the delete violates their foreign keys.
The three line-item tables are independent of one another.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DeletionStep(Enum):
    ORDER_SERVICES = "OrderServices"
    ORDER_REPLACEMENTS = "OrderReplacements"
    ORDER_MECHANICS = "OrderMechanics"
    SERVICE_ORDER = "ServiceOrders"


@dataclass(frozen=True)
class DeletionTarget:
    step: DeletionStep
    folio: int


LINE_ITEM_STEPS = (
    DeletionStep.ORDER_SERVICES,
    DeletionStep.ORDER_REPLACEMENTS,
    DeletionStep.ORDER_MECHANICS,
)


def plan_order_deletion(folio: int) -> list[DeletionTarget]:
    """Children first, header last."""
    targets = [DeletionTarget(step, folio) for step in LINE_ITEM_STEPS]
    targets.append(DeletionTarget(DeletionStep.SERVICE_ORDER, folio))
    return targets
