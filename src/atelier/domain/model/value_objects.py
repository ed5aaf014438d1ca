"""Value objects for prices and quantities.

Every stored price is in the store's base currency (USD).  Conversion to
a customer's currency only happens when an email is rendered, see
``atelier.domain.model.currency``.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from functools import total_ordering

from atelier.domain.exceptions import ValidationError

CENT = Decimal("0.01")
_ZERO = Decimal("0")


@total_ordering
@dataclass(frozen=True)
class Money:
    """Non-negative base-currency amount.

    Arithmetic keeps full Decimal precision so a percentage discount is
    not rounded twice.  ``rounded()`` and ``to_plain()`` fix the value to
    cents (half-up) wherever it is stored, shown or compared with what a
    client sent.
    """

    amount: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if self.amount < _ZERO:
            raise ValidationError(f"Money amount cannot be negative, got {self.amount}")

    @classmethod
    def of(cls, amount: str | float | int | Decimal) -> Money:
        """Build from anything a JSON body or a CLI flag may carry.

        Floats go through ``str`` first, so ``0.1`` stays ``0.1``.
        """
        try:
            return cls(Decimal(str(amount)))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc

    @classmethod
    def zero(cls) -> Money:
        return cls(_ZERO)

    def __add__(self, other: Money) -> Money:
        return Money(self.amount + other.amount)

    def __sub__(self, other: Money) -> Money:
        if other.amount > self.amount:
            raise ValidationError(
                f"Subtracting {other} from {self} would give a negative amount"
            )
        return Money(self.amount - other.amount)

    def __mul__(self, quantity: int) -> Money:
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise TypeError(f"Money can only be multiplied by a unit count, got {quantity!r}")
        return Money(self.amount * quantity)

    def __lt__(self, other: Money) -> bool:
        return self.amount < other.amount

    def minus_floor_zero(self, other: Money) -> Money:
        return Money(max(self.amount - other.amount, _ZERO))

    def rounded(self) -> Money:
        return Money(self.amount.quantize(CENT, rounding=ROUND_HALF_UP))

    @property
    def is_zero(self) -> bool:
        return self.amount == _ZERO

    def to_plain(self) -> str:
        """Cent string such as ``"120.00"``, used in JSON files and responses."""
        return str(self.rounded().amount)

    def __str__(self) -> str:
        return f"${self.to_plain()}"


@dataclass(frozen=True)
class Quantity:
    """Units of one line item; at least one."""

    value: int

    def __post_init__(self) -> None:
        # bool is an int subclass; True would otherwise pass as 1.
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise ValidationError(f"Quantity must be positive, got {self.value}")

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)
