"""Domain <-> DTO mapping shared by the use cases."""

from __future__ import annotations

from dataclasses import asdict

from atelier.application.dto import (
    DiscountCodeDTO,
    LineItemSpec,
    OrderDTO,
    OrderLineItemDTO,
    ProductDTO,
    ProductSizeDTO,
    ShippingAddressSpec,
)
from atelier.domain.exceptions import ValidationError
from atelier.domain.model.discount import DiscountCode
from atelier.domain.model.order import (
    CUSTOM_SIZE,
    CustomMeasurements,
    CustomSizeLineItem,
    GiftPackageLineItem,
    LineItem,
    LineSnapshot,
    Order,
    ShippingAddress,
    StockLineItem,
)
from atelier.domain.model.product import Product
from atelier.domain.model.value_objects import Money, Quantity


# --- Inbound ------------------------------------------------------------------


def line_item_from_spec(spec: LineItemSpec) -> LineItem:
    """Pick the line item variant: gift package, custom size, or regular."""
    if not spec.product_id:
        raise ValidationError(f"Line item '{spec.name}' is missing a product id")
    snapshot = LineSnapshot(
        line_id=spec.line_id or spec.product_id,
        product_id=spec.product_id,
        name=spec.name,
        unit_price=Money.of(spec.price),
        quantity=Quantity(spec.quantity),
        size=spec.size,
        volume=spec.volume,
        image=spec.image,
        category=spec.category,
    )
    if spec.is_gift_package:
        return GiftPackageLineItem(
            snapshot=snapshot,
            selected_products=spec.selected_products,
            package_details=spec.package_details,
        )
    if spec.size == CUSTOM_SIZE:
        measurements = None
        if spec.custom_measurements:
            measurements = CustomMeasurements(
                unit=spec.custom_measurements.get("unit", ""),
                values=dict(spec.custom_measurements.get("values") or {}),
            )
        return CustomSizeLineItem(snapshot=snapshot, custom_measurements=measurements)
    return StockLineItem(snapshot=snapshot)


def shipping_address_from_spec(spec: ShippingAddressSpec) -> ShippingAddress:
    # Older storefront builds only send a governorate.
    return ShippingAddress(
        name=spec.name,
        address=spec.address,
        city=spec.city,
        email=spec.email,
        phone=spec.phone,
        secondary_phone=spec.secondary_phone,
        country=spec.country or spec.governorate,
        country_code=spec.country_code,
        postal_code=spec.postal_code,
        governorate=spec.governorate,
    )


# --- Outbound -----------------------------------------------------------------


def line_item_to_dto(item: LineItem) -> OrderLineItemDTO:
    line = item.snapshot
    selected_products = None
    package_details = None
    custom_measurements = None
    if isinstance(item, GiftPackageLineItem):
        selected_products = item.selected_products
        package_details = item.package_details
    elif isinstance(item, CustomSizeLineItem) and item.custom_measurements:
        custom_measurements = {
            "unit": item.custom_measurements.unit,
            "values": dict(item.custom_measurements.values),
        }
    return OrderLineItemDTO(
        kind=item.kind,
        line_id=line.line_id,
        product_id=line.product_id,
        name=line.name,
        unit_price=line.unit_price.to_plain(),
        quantity=line.quantity.value,
        line_total=line.line_total.to_plain(),
        size=line.size,
        volume=line.volume,
        image=line.image,
        category=line.category,
        selected_products=selected_products,
        package_details=package_details,
        custom_measurements=custom_measurements,
    )


def order_to_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,
        user_id=order.user_id,
        status=order.status.value,
        items=[line_item_to_dto(item) for item in order.items],
        subtotal=order.subtotal.to_plain(),
        total=order.total.to_plain(),
        shipping_address=ShippingAddressSpec(**asdict(order.shipping_address)),
        payment_method=order.payment_method,
        payment_details=order.payment_details,
        discount_code=order.discount_code,
        discount_amount=order.discount_amount.to_plain(),
        created_at=order.created_at.isoformat(),
        updated_at=order.updated_at.isoformat(),
    )


def product_to_dto(product: Product) -> ProductDTO:
    return ProductDTO(
        id=product.id,
        name=product.name,
        category=product.category,
        image=product.image,
        sizes=[
            ProductSizeDTO(
                size=s.size,
                volume=s.volume,
                price=s.effective_price.to_plain(),
                original_price=s.original_price.to_plain() if s.original_price else None,
                discounted_price=(
                    s.discounted_price.to_plain() if s.discounted_price else None
                ),
                stock_count=s.stock_count,
            )
            for s in product.sizes
        ],
        rating=f"{product.rating:.2f}",
        review_count=product.review_count,
        is_out_of_stock=product.is_out_of_stock,
    )


def discount_code_to_dto(code: DiscountCode) -> DiscountCodeDTO:
    return DiscountCodeDTO(
        code=code.code,
        type=code.discount_type.value,
        value=str(code.discount_value),
        description=code.description,
        min_order_amount=code.min_purchase.to_plain() if code.min_purchase else None,
        max_discount=code.max_discount.to_plain() if code.max_discount else None,
        expires_at=code.valid_until.isoformat() if code.valid_until else None,
        max_uses=code.usage_limit,
        current_uses=code.usage_count,
        is_active=code.is_active,
        created_at=code.created_at.isoformat(),
        updated_at=code.updated_at.isoformat(),
    )
