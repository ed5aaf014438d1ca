"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the HTTP/CLI adapters and the application layer
without exposing domain internals.  Money crosses as cent-precision
strings (``"120.00"``) and instants as ISO-8601 strings.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any


# --- Inputs -------------------------------------------------------------------


@dataclass(frozen=True)
class LineItemSpec:
    """Input: one cart entry as submitted by the storefront."""

    product_id: str
    name: str
    price: Decimal
    quantity: int
    line_id: str = ""
    size: str = ""
    volume: str = ""
    image: str = ""
    category: str = ""
    is_gift_package: bool = False
    selected_products: list[Any] | None = None
    package_details: dict[str, Any] | None = None
    custom_measurements: dict[str, Any] | None = None


@dataclass(frozen=True)
class ShippingAddressSpec:
    name: str = ""
    address: str = ""
    city: str = ""
    email: str = ""
    phone: str = ""
    secondary_phone: str = ""
    country: str = ""
    country_code: str = ""
    postal_code: str = ""
    governorate: str = ""


@dataclass(frozen=True)
class OrderSubmission:
    """Input: a whole checkout submission."""

    items: list[LineItemSpec]
    shipping_address: ShippingAddressSpec
    total: Decimal
    payment_method: str | None = None
    payment_details: dict[str, Any] | None = None
    discount_code: str | None = None
    discount_amount: Decimal | None = None
    idempotency_key: str | None = None


@dataclass(frozen=True)
class DiscountCodeSpec:
    """Input: admin request to create a discount code."""

    code: str
    discount_type: str
    discount_value: Decimal | None
    description: str | None = None
    min_purchase: Decimal | None = None
    max_discount: Decimal | None = None
    valid_until: Any = None  # datetime | None
    usage_limit: int | None = None


# --- Outputs ------------------------------------------------------------------


@dataclass(frozen=True)
class OrderLineItemDTO:
    kind: str
    line_id: str
    product_id: str
    name: str
    unit_price: str
    quantity: int
    line_total: str
    size: str
    volume: str
    image: str
    category: str
    selected_products: list[Any] | None = None
    package_details: dict[str, Any] | None = None
    custom_measurements: dict[str, Any] | None = None


@dataclass(frozen=True)
class OrderDTO:
    id: str
    user_id: str
    status: str
    items: list[OrderLineItemDTO]
    subtotal: str
    total: str
    shipping_address: ShippingAddressSpec
    payment_method: str
    discount_code: str | None
    discount_amount: str
    created_at: str
    updated_at: str
    payment_details: dict[str, Any] | None = None


@dataclass(frozen=True)
class StatusChangeDTO:
    order: OrderDTO
    previous_status: str
    new_status: str


@dataclass(frozen=True)
class ProductSizeDTO:
    size: str
    volume: str
    price: str
    original_price: str | None
    discounted_price: str | None
    stock_count: int | None


@dataclass(frozen=True)
class ProductDTO:
    id: str
    name: str
    category: str
    image: str
    sizes: list[ProductSizeDTO]
    rating: str
    review_count: int
    is_out_of_stock: bool


@dataclass(frozen=True)
class DiscountQuoteDTO:
    valid: bool
    code: str
    type: str
    value: str
    discount_amount: str


@dataclass(frozen=True)
class DiscountCodeDTO:
    code: str
    type: str
    value: str
    description: str | None
    min_order_amount: str | None
    max_discount: str | None
    expires_at: str | None
    max_uses: int | None
    current_uses: int
    is_active: bool
    created_at: str
    updated_at: str


@dataclass(frozen=True)
class RatingDTO:
    product_id: str
    rating: str
    review_count: int

