"""DiscountCode aggregate: admin-managed promotional codes.

Validation is a pure read.  ``usage_count`` only moves through
``record_use()``, which the storage layer calls inside its atomic
conditional update when an order using the code is committed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from atelier.domain.exceptions import DiscountRejectedError, ValidationError
from atelier.domain.model.value_objects import Money

HUNDRED = Decimal("100")


class DiscountType(Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


def normalize_code(code: str) -> str:
    return code.strip().upper()


@dataclass
class DiscountCode:
    """Aggregate root for a discount code.

    Invariants:
    - ``code`` is stored upper-cased
    - ``usage_count`` never exceeds ``usage_limit`` once a limit is set
    - percentage values lie in 0-100
    """

    code: str
    discount_type: DiscountType
    discount_value: Decimal
    description: str | None = None
    min_purchase: Money | None = None
    max_discount: Money | None = None
    valid_until: datetime | None = None
    usage_limit: int | None = None
    usage_count: int = 0
    is_active: bool = True
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        self.code = normalize_code(self.code)
        if self.valid_until is not None and self.valid_until.tzinfo is None:
            self.valid_until = self.valid_until.replace(tzinfo=timezone.utc)
        if not self.code:
            raise ValidationError("Discount code is required")
        if self.discount_value <= 0:
            raise ValidationError("Discount value must be greater than zero")
        if self.discount_type is DiscountType.PERCENTAGE and self.discount_value > HUNDRED:
            raise ValidationError("Percentage discount cannot exceed 100")
        if self.usage_limit is not None and self.usage_limit < 0:
            raise ValidationError("Usage limit cannot be negative")

    # --- Queries --------------------------------------------------------------

    def is_expired(self, now: datetime) -> bool:
        return self.valid_until is not None and now > self.valid_until

    @property
    def is_exhausted(self) -> bool:
        return self.usage_limit is not None and self.usage_count >= self.usage_limit

    def check_usable(self, subtotal: Money, now: datetime) -> None:
        """Raise DiscountRejectedError for the first unmet condition."""
        if not self.is_active:
            raise DiscountRejectedError("Invalid discount code", reason="invalid")
        if self.is_expired(now):
            raise DiscountRejectedError("Discount code has expired", reason="expired")
        if self.is_exhausted:
            raise DiscountRejectedError(
                f"This discount code has reached its usage limit of {self.usage_limit}",
                reason="usage_exhausted",
            )
        if self.min_purchase is not None and subtotal < self.min_purchase:
            shortfall = (self.min_purchase - subtotal).rounded()
            raise DiscountRejectedError(
                f"Add {shortfall.amount:.2f} more to use this code "
                f"(minimum order: {self.min_purchase.amount:.2f})",
                reason="min_order_amount",
                min_order_amount=self.min_purchase.amount,
                shortfall=shortfall.amount,
            )

    def compute_discount(self, subtotal: Money) -> Money:
        """Discount for *subtotal*; never more than the subtotal itself."""
        if self.discount_type is DiscountType.PERCENTAGE:
            amount = Money(subtotal.amount * self.discount_value / HUNDRED)
            if self.max_discount is not None and amount > self.max_discount:
                amount = self.max_discount
        elif self.discount_type is DiscountType.FIXED:
            amount = Money(min(self.discount_value, subtotal.amount))
        else:
            raise ValidationError(
                f"Unsupported discount type {self.discount_type!r}"
            )
        return amount.rounded()

    # --- Mutations ------------------------------------------------------------

    def record_use(self) -> None:
        if self.is_exhausted:
            raise DiscountRejectedError(
                f"This discount code has reached its usage limit of {self.usage_limit}",
                reason="usage_exhausted",
            )
        self.usage_count += 1
        self.updated_at = datetime.now(timezone.utc)
