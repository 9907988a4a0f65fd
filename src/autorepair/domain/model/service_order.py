"""ServiceOrder aggregate: the order header and its line items.

The header is the aggregate root. Its three line-item collections
(services performed, parts consumed, mechanics assigned) exist only while
the header does, and are keyed by (catalog id, folio).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from autorepair.domain.exceptions import ValidationError
from autorepair.domain.model.value_objects import Money, Quantity

STATE_MAX_LENGTH = 30
DELIVERY_LEAD_TIME = timedelta(days=1)


class OrderState:
    """Known state labels.

    State is stored as free text. Only the initial label is defined here;
    no transition table is enforced.
    """

    OPEN = "Abierta"


@dataclass(frozen=True)
class OrderServiceLine:
    service_id: int
    folio: int
    quantity: Quantity


@dataclass(frozen=True)
class OrderReplacementLine:
    replacement_id: int
    folio: int
    quantity: Quantity


@dataclass(frozen=True)
class OrderMechanicLine:
    employee_id: int
    folio: int


@dataclass
class ServiceOrder:
    """Aggregate root for service orders.

    Use ``ServiceOrder.open()`` for new orders. The ``__init__`` stays
    simple so the store can reconstitute persisted orders as-is.

    ``version`` starts at 1 and the store bumps it on every header write;
    updates must present the version they read.
    """

    folio: int | None
    serial_number: str
    entry_date: datetime
    estimated_delivery_time: datetime
    cost: Money
    state: str = OrderState.OPEN
    delivery_time: datetime | None = None
    version: int = 1

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def open(serial_number: str, cost: Money, now: datetime) -> ServiceOrder:
        return ServiceOrder(
            folio=None,
            serial_number=serial_number,
            entry_date=now,
            estimated_delivery_time=now + DELIVERY_LEAD_TIME,
            cost=cost,
            state=OrderState.OPEN,
        )

    # --- Caller-editable fields -----------------------------------------------

    def change_state(self, state: str) -> None:
        if not state or not state.strip():
            raise ValidationError("Order state cannot be blank")
        state = state.strip()
        if len(state) > STATE_MAX_LENGTH:
            raise ValidationError(
                f"Order state cannot exceed {STATE_MAX_LENGTH} characters"
            )
        self.state = state

    def reassign_vehicle(self, serial_number: str) -> None:
        self.serial_number = serial_number

    # --- Derived fields -------------------------------------------------------

    def reprice(self, cost: Money) -> None:
        """Set the server-computed total. Never fed from caller input."""
        self.cost = cost
