"""Money and quantities used by orders and the catalog.

Both are frozen dataclasses: equal when their values are equal, and
impossible to build in an invalid state.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from autorepair.domain.exceptions import ValidationError

CENTS = Decimal("0.01")

MIN_QUANTITY = 1
MAX_QUANTITY = 9999


@dataclass(frozen=True)
class Money:
    """A non-negative peso amount.

    Amounts are never floats. Unit prices are stored to the cent, and
    intermediate results (a subtotal times 1.16) keep full precision
    until ``rounded()`` is called.
    """

    amount: Decimal
    currency: str = "MXN"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if not self.amount.is_finite():
            raise ValidationError(f"Money amount must be a finite number, got {self.amount}")
        if self.amount < 0:
            raise ValidationError(f"Money amount cannot be negative, got {self.amount}")

    @classmethod
    def of(cls, amount: str | int | Decimal) -> Money:
        """Build from user or database input; ``"12.50"``, ``12`` and ``Decimal`` all work."""
        try:
            return cls(Decimal(str(amount)))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc

    @classmethod
    def zero(cls) -> Money:
        return cls(Decimal("0.00"))

    @classmethod
    def total(cls, amounts: Iterable[Money]) -> Money:
        result = cls.zero()
        for amount in amounts:
            result = result + amount
        return result

    def __add__(self, other: Money) -> Money:
        self._check_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, quantity: int) -> Money:
        if not isinstance(quantity, int):
            raise TypeError(f"Money can only be multiplied by an int, not {type(quantity).__name__}")
        return Money(self.amount * quantity, self.currency)

    def __lt__(self, other: Money) -> bool:
        self._check_currency(other)
        return self.amount < other.amount

    def __gt__(self, other: Money) -> bool:
        self._check_currency(other)
        return self.amount > other.amount

    def rounded(self) -> Money:
        """Half-up to cents, as the two-decimal Numeric columns hold it."""
        return Money(self.amount.quantize(CENTS, rounding=ROUND_HALF_UP), self.currency)

    def _check_currency(self, other: Money) -> None:
        if other.currency != self.currency:
            raise ValidationError(f"Cannot combine {self.currency} with {other.currency}")

    def __str__(self) -> str:
        return f"${self.amount:,.2f}"


@dataclass(frozen=True)
class Quantity:
    """How many times a service is performed or a part is used: 1 to 9999."""

    value: int

    def __post_init__(self) -> None:
        # bool is an int subclass; True must not pass as 1.
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if not MIN_QUANTITY <= self.value <= MAX_QUANTITY:
            bound = (
                f"at least {MIN_QUANTITY}"
                if self.value < MIN_QUANTITY
                else f"no more than {MAX_QUANTITY}"
            )
            raise ValidationError(f"Quantity must be {bound}, got {self.value}")

    def __str__(self) -> str:
        return str(self.value)
