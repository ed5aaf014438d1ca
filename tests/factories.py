"""Builders for the catalog, carts and orders used across tests."""

from __future__ import annotations

from decimal import Decimal

from atelier.application.dto import LineItemSpec, OrderSubmission, ShippingAddressSpec
from atelier.domain.model.discount import DiscountCode, DiscountType
from atelier.domain.model.order import (
    LineSnapshot,
    Order,
    ShippingAddress,
    StockLineItem,
)
from atelier.domain.model.product import Product, ProductSize
from atelier.domain.model.value_objects import Money, Quantity


def gown(stock_m: int | None = 2, stock_l: int | None = 5) -> Product:
    return Product(
        id="gown-1",
        name="Silk Gown",
        category="evening",
        sizes=[
            ProductSize("M", original_price=Money.of("150"), discounted_price=Money.of("120"),
                        stock_count=stock_m),
            ProductSize("L", original_price=Money.of("150"), discounted_price=Money.of("120"),
                        stock_count=stock_l),
        ],
    )


def scarf() -> Product:
    return Product(
        id="scarf-1",
        name="Cashmere Scarf",
        category="accessories",
        sizes=[ProductSize("One", original_price=Money.of("40"), stock_count=None)],
    )


def address(**overrides) -> ShippingAddressSpec:
    fields = {
        "name": "Layla Haddad",
        "address": "12 Palm Street",
        "city": "Dubai",
        "email": "layla@example.com",
        "phone": "+971500000000",
        "country": "United Arab Emirates",
    }
    fields.update(overrides)
    return ShippingAddressSpec(**fields)


def gown_line(quantity: int = 1, size: str = "M", price: str = "120") -> LineItemSpec:
    return LineItemSpec(
        product_id="gown-1",
        name="Silk Gown",
        price=Decimal(price),
        quantity=quantity,
        size=size,
    )


def submission(
    items: list[LineItemSpec] | None = None,
    total: str | None = None,
    discount_code: str | None = None,
    discount_amount: str | None = None,
    idempotency_key: str | None = None,
    **address_overrides,
) -> OrderSubmission:
    items = items if items is not None else [gown_line()]
    if total is None:
        subtotal = sum((i.price * i.quantity for i in items), Decimal("0"))
        total = str(subtotal - Decimal(discount_amount or "0"))
    return OrderSubmission(
        items=items,
        shipping_address=address(**address_overrides),
        total=Decimal(total),
        discount_code=discount_code,
        discount_amount=Decimal(discount_amount) if discount_amount is not None else None,
        idempotency_key=idempotency_key,
    )


def save10(**overrides) -> DiscountCode:
    fields = {
        "code": "SAVE10",
        "discount_type": DiscountType.PERCENTAGE,
        "discount_value": Decimal("10"),
        "min_purchase": Money.of("100"),
    }
    fields.update(overrides)
    return DiscountCode(**fields)


def placed_order(
    order_id: str = "order-1",
    user_id: str = "user-1",
    quantity: int = 1,
    **address_overrides,
) -> Order:
    fields = {
        "name": "Layla Haddad",
        "address": "12 Palm Street",
        "city": "Dubai",
        "email": "layla@example.com",
        "country": "United Arab Emirates",
    }
    fields.update(address_overrides)
    line = LineSnapshot(
        line_id="gown-1-M",
        product_id="gown-1",
        name="Silk Gown",
        unit_price=Money.of("120"),
        quantity=Quantity(quantity),
        size="M",
    )
    return Order(
        id=order_id,
        user_id=user_id,
        items=(StockLineItem(line),),
        total=Money.of(120 * quantity),
        shipping_address=ShippingAddress(**fields),
    )
