"""Request bodies for the HTTP API.

The storefront speaks camelCase JSON; fields are snake_case here and
aliased with pydantic's ``to_camel``.  Schemas only shape the request;
business rules are checked by the domain.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from atelier.application.dto import (
    DiscountCodeSpec,
    LineItemSpec,
    OrderSubmission,
    ShippingAddressSpec,
)
from atelier.application.mapping import line_item_from_spec, shipping_address_from_spec
from atelier.domain.exceptions import ValidationError
from atelier.domain.model.order import GUEST_USER_ID, Order, OrderStatus
from atelier.domain.model.value_objects import Money


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CustomMeasurementsIn(CamelModel):
    unit: Literal["cm", "inch"]
    values: dict[str, str] = Field(default_factory=dict)


class LineItemIn(CamelModel):
    id: str = ""
    product_id: str | None = None
    name: str = ""
    price: Decimal = Decimal("0")
    quantity: int
    size: str = ""
    volume: str = ""
    image: str = ""
    category: str = ""
    is_gift_package: bool = False
    selected_products: list[Any] | None = None
    package_details: dict[str, Any] | None = None
    custom_measurements: CustomMeasurementsIn | None = None

    def to_spec(self) -> LineItemSpec:
        # Older carts only carry the product id in ``id``.
        return LineItemSpec(
            product_id=self.product_id or self.id,
            name=self.name,
            price=self.price,
            quantity=self.quantity,
            line_id=self.id,
            size=self.size,
            volume=self.volume,
            image=self.image,
            category=self.category,
            is_gift_package=self.is_gift_package,
            selected_products=self.selected_products,
            package_details=self.package_details,
            custom_measurements=(
                self.custom_measurements.model_dump() if self.custom_measurements else None
            ),
        )


class ShippingAddressIn(CamelModel):
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

    def to_spec(self) -> ShippingAddressSpec:
        return ShippingAddressSpec(**self.model_dump())


class OrderIn(CamelModel):
    items: list[LineItemIn] = Field(default_factory=list)
    shipping_address: ShippingAddressIn = Field(default_factory=ShippingAddressIn)
    payment_method: str | None = None
    payment_details: dict[str, Any] | None = None
    discount_code: str | None = None
    discount_amount: Decimal | None = None
    total: Decimal

    def to_submission(self, idempotency_key: str | None = None) -> OrderSubmission:
        return OrderSubmission(
            items=[item.to_spec() for item in self.items],
            shipping_address=self.shipping_address.to_spec(),
            total=self.total,
            payment_method=self.payment_method,
            payment_details=self.payment_details,
            discount_code=self.discount_code,
            discount_amount=self.discount_amount,
            idempotency_key=idempotency_key,
        )


class OrderSnapshotIn(OrderIn):
    """A persisted order echoed back by a client, e.g. to trigger an email."""

    id: str
    user_id: str = GUEST_USER_ID
    status: str = OrderStatus.PENDING.value
    created_at: datetime | None = None

    def to_domain(self) -> Order:
        try:
            status = OrderStatus(self.status)
        except ValueError as exc:
            raise ValidationError(f"Unknown order status '{self.status}'") from exc
        order = Order(
            id=self.id,
            user_id=self.user_id,
            items=tuple(line_item_from_spec(item.to_spec()) for item in self.items),
            total=Money.of(self.total),
            shipping_address=shipping_address_from_spec(self.shipping_address.to_spec()),
            payment_method=self.payment_method or "cod",
            payment_details=self.payment_details,
            discount_code=self.discount_code,
            discount_amount=Money.of(self.discount_amount or 0),
            status=status,
        )
        if self.created_at is not None:
            order.created_at = self.created_at
        return order


class OrderConfirmationEmailIn(CamelModel):
    order: OrderSnapshotIn


class OrderUpdateEmailIn(CamelModel):
    order: OrderSnapshotIn
    previous_status: str | None = None
    new_status: str = ""


class OrderStatusIn(CamelModel):
    status: str


class DiscountValidateIn(CamelModel):
    code: str = ""
    order_amount: Decimal | None = None
    items: list[LineItemIn] | None = None


class DiscountCodeCreateIn(CamelModel):
    code: str = ""
    type: str = ""
    value: Decimal | None = None
    description: str | None = None
    min_order_amount: Decimal | None = None
    max_discount: Decimal | None = None
    max_uses: int | None = None
    expires_at: datetime | None = None

    def to_spec(self) -> DiscountCodeSpec:
        return DiscountCodeSpec(
            code=self.code,
            discount_type=self.type,
            discount_value=self.value,
            description=self.description,
            min_purchase=self.min_order_amount,
            max_discount=self.max_discount,
            valid_until=self.expires_at,
            usage_limit=self.max_uses,
        )


_UPDATE_FIELDS = {
    "is_active": "is_active",
    "type": "discount_type",
    "value": "discount_value",
    "description": "description",
    "min_order_amount": "min_purchase",
    "max_discount": "max_discount",
    "max_uses": "usage_limit",
    "expires_at": "valid_until",
}


class DiscountCodeUpdateIn(CamelModel):
    is_active: bool | None = None
    type: str | None = None
    value: Decimal | None = None
    description: str | None = None
    min_order_amount: Decimal | None = None
    max_discount: Decimal | None = None
    max_uses: int | None = None
    expires_at: datetime | None = None

    def to_changes(self) -> dict[str, Any]:
        """Only the fields the client actually sent."""
        return {
            _UPDATE_FIELDS[name]: getattr(self, name)
            for name in self.model_fields_set
        }


class RecalculateRatingIn(CamelModel):
    product_id: str = ""
