"""Order aggregate: the core of the domain.

The Order is an aggregate root that owns its line items.  A line item is
one of three variants: a regular stock-tracked product, a gift package
whose contents the customer picked at checkout, or a custom-size
(tailored) piece.  Only regular items take part in stock bookkeeping.
"""

from __future__ import annotations

import secrets
import string
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Union

from atelier.domain.exceptions import ValidationError
from atelier.domain.model.value_objects import Money, Quantity

GUEST_USER_ID = "guest"
CUSTOM_SIZE = "custom"


class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)


# ---------------------------------------------------------------------------
# Line items
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LineSnapshot:
    """Fields every line item captures at order time."""

    line_id: str
    product_id: str
    name: str
    unit_price: Money  # locked at order-creation time
    quantity: Quantity
    size: str = ""
    volume: str = ""
    image: str = ""
    category: str = ""

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass(frozen=True)
class StockLineItem:
    kind = "regular"

    snapshot: LineSnapshot

    @property
    def tracks_stock(self) -> bool:
        return True


@dataclass(frozen=True)
class GiftPackageLineItem:
    kind = "gift_package"

    snapshot: LineSnapshot
    selected_products: list[Any] | None = None
    package_details: dict[str, Any] | None = None

    @property
    def tracks_stock(self) -> bool:
        return False


@dataclass(frozen=True)
class CustomMeasurements:
    unit: str
    values: dict[str, str]

    def __post_init__(self) -> None:
        if self.unit not in ("cm", "inch"):
            raise ValidationError(
                f"Measurement unit must be 'cm' or 'inch', got {self.unit!r}"
            )


@dataclass(frozen=True)
class CustomSizeLineItem:
    kind = "custom_size"

    snapshot: LineSnapshot
    custom_measurements: CustomMeasurements | None = None

    @property
    def tracks_stock(self) -> bool:
        return False


LineItem = Union[StockLineItem, GiftPackageLineItem, CustomSizeLineItem]


# ---------------------------------------------------------------------------
# Addresses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ShippingAddress:
    name: str
    address: str
    city: str
    email: str = ""
    phone: str = ""
    secondary_phone: str = ""
    country: str = ""
    country_code: str = ""
    postal_code: str = ""
    governorate: str = ""

    def validate(self) -> None:
        missing = [
            label
            for label, value in (
                ("name", self.name),
                ("address", self.address),
                ("city", self.city),
            )
            if not value or not value.strip()
        ]
        if missing:
            raise ValidationError(
                f"Shipping address is missing required field(s): {', '.join(missing)}"
            )


# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
_SUFFIX_ALPHABET = string.digits + string.ascii_lowercase


def generate_order_id() -> str:
    """``order-<epoch-ms>-<9 base36 chars>``; sorts by creation time."""
    suffix = "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(9))
    return f"order-{int(time.time() * 1000)}-{suffix}"


@dataclass
class Order:
    """Aggregate root for customer orders.

    Use the ``Order.create()`` factory for new orders; it enforces all
    business rules.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.

    ``items`` and ``total`` are fixed at creation; only ``status`` moves.
    """

    id: str
    user_id: str
    items: tuple[LineItem, ...]
    total: Money
    shipping_address: ShippingAddress
    payment_method: str = "cod"
    payment_details: dict[str, Any] | None = None
    discount_code: str | None = None
    discount_amount: Money = field(default_factory=Money.zero)
    status: OrderStatus = OrderStatus.PENDING
    idempotency_key: str | None = None
    # False between the first save at checkout and the stock commit.
    committed: bool = True
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        user_id: str,
        items: list[LineItem],
        total: Money,
        shipping_address: ShippingAddress,
        payment_method: str | None = None,
        payment_details: dict[str, Any] | None = None,
        discount_code: str | None = None,
        discount_amount: Money | None = None,
        idempotency_key: str | None = None,
    ) -> Order:
        """Create a new pending order, enforcing all invariants."""
        if not items:
            raise ValidationError("Order must contain at least one item")

        shipping_address.validate()

        now = datetime.now(timezone.utc)
        return Order(
            id=generate_order_id(),
            user_id=user_id or GUEST_USER_ID,
            items=tuple(items),
            total=total,
            shipping_address=shipping_address,
            payment_method=payment_method or "cod",
            payment_details=payment_details,
            discount_code=discount_code or None,
            discount_amount=discount_amount or Money.zero(),
            idempotency_key=idempotency_key,
            committed=False,
            created_at=now,
            updated_at=now,
        )

    # --- State transitions ----------------------------------------------------

    def change_status(self, new_status: OrderStatus) -> OrderStatus:
        """Move to *new_status* and return the previous status."""
        if self.status.is_terminal:
            raise ValidationError(
                f"Cannot change status of an order that is {self.status.value}"
            )
        if new_status == self.status:
            raise ValidationError(f"Order is already {self.status.value}")
        if new_status == OrderStatus.PENDING:
            raise ValidationError("Cannot move an order back to pending")
        previous = self.status
        self.status = new_status
        self.updated_at = datetime.now(timezone.utc)
        return previous

    # --- Computed properties --------------------------------------------------

    @property
    def subtotal(self) -> Money:
        result = Money.zero()
        for item in self.items:
            result = result + item.snapshot.line_total
        return result

    @property
    def stock_items(self) -> list[StockLineItem]:
        return [item for item in self.items if item.tracks_stock]

    def belongs_to(self, user_id: str) -> bool:
        return self.user_id != GUEST_USER_ID and self.user_id == user_id
