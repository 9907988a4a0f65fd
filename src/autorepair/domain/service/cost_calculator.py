"""Domain service: Order cost calculation.

An order's cost is the tax-inclusive total of its priced line items:

    total = round2(sum(unit_cost * quantity) * (1 + tax_rate))

Computed entirely in Decimal and rounded half-up to cents, which is how
the fixed-point ``cost`` column stores it, so a recomputed total always
compares equal to the stored one.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from autorepair.domain.exceptions import ValidationError
from autorepair.domain.model.value_objects import Money

IVA_RATE = Decimal("0.16")

# Largest value a decimal(12,2) column can hold.
MAX_ORDER_COST = Money(Decimal("9999999999.99"))


def compute_order_cost(
    line_items: Iterable[tuple[Money, int]],
    tax_rate: Decimal = IVA_RATE,
) -> Money:
    """Return the tax-inclusive total for ``(unit_cost, quantity)`` pairs."""
    subtotal = Money.total(unit_cost * quantity for unit_cost, quantity in line_items)

    total = Money(subtotal.amount * (Decimal("1") + tax_rate), subtotal.currency).rounded()
    if total > MAX_ORDER_COST:
        raise ValidationError(
            f"Order cost {total} exceeds the maximum of {MAX_ORDER_COST}"
        )
    return total
