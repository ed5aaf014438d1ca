"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

from atelier.domain.exceptions import ConflictError, EntityNotFoundError
from atelier.domain.model.order import (
    CustomMeasurements,
    CustomSizeLineItem,
    GiftPackageLineItem,
    LineItem,
    LineSnapshot,
    Order,
    OrderStatus,
    ShippingAddress,
    StockLineItem,
)
from atelier.domain.model.value_objects import Money, Quantity
from atelier.domain.repository.order_repository import OrderRepository
from atelier.infrastructure.persistence.json_file import JsonFile


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- OrderRepository interface --------------------------------------------

    def get_by_id(self, order_id: str) -> Order | None:
        for raw in self._file.read():
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Order]:
        return self._newest_first(self._file.read())

    def list_for_user(self, user_id: str) -> list[Order]:
        return self._newest_first(r for r in self._file.read() if r["user_id"] == user_id)

    def find_by_idempotency_key(self, key: str) -> Order | None:
        raw = self._newest_with_key(self._file.read(), key)
        return self._to_domain(raw) if raw is not None else None

    def save(self, order: Order) -> None:
        with self._file.transaction() as records:
            # Upsert: replace if exists, otherwise append
            for i, raw in enumerate(records):
                if raw["id"] == order.id:
                    records[i] = self._to_raw(order)
                    break
            else:
                records.append(self._to_raw(order))

    def add_unless_duplicate(self, order: Order, since: datetime) -> Order | None:
        with self._file.transaction() as records:
            if order.idempotency_key:
                raw = self._newest_with_key(records, order.idempotency_key)
                if raw is not None and datetime.fromisoformat(raw["created_at"]) >= since:
                    return self._to_domain(raw)
            records.append(self._to_raw(order))
        return None

    def mark_committed(self, order_id: str) -> None:
        with self._file.transaction() as records:
            self._find_raw(records, order_id)["committed"] = True

    def update_status(
        self,
        order_id: str,
        expected: OrderStatus,
        new_status: OrderStatus,
    ) -> Order:
        with self._file.transaction() as records:
            raw = self._find_raw(records, order_id)
            if not raw.get("committed", True):
                raise ConflictError(f"Order {order_id} is still being placed")
            if raw["status"] != expected.value:
                raise ConflictError(
                    f"Order {order_id} is now {raw['status']}, not {expected.value}"
                )
            raw["status"] = new_status.value
            raw["updated_at"] = datetime.now(timezone.utc).isoformat()
            return self._to_domain(raw)

    def delete(self, order_id: str) -> None:
        with self._file.transaction() as records:
            records[:] = [r for r in records if r["id"] != order_id]

    # --- Lookups -------------------------------------------------------------

    @staticmethod
    def _find_raw(records: list[dict], order_id: str) -> dict:
        for raw in records:
            if raw["id"] == order_id:
                return raw
        raise EntityNotFoundError(f"Order {order_id} not found")

    @staticmethod
    def _newest_with_key(records: list[dict], key: str) -> dict | None:
        matches = [r for r in records if r.get("idempotency_key") == key]
        return max(
            matches, key=lambda r: datetime.fromisoformat(r["created_at"]), default=None
        )

    # --- Serialization --------------------------------------------------------

    def _newest_first(self, raws) -> list[Order]:
        orders = [self._to_domain(raw) for raw in raws]
        orders.sort(key=lambda o: o.created_at, reverse=True)
        return orders

    @staticmethod
    def _item_to_raw(item: LineItem) -> dict:
        line = item.snapshot
        raw = {
            "kind": item.kind,
            "line_id": line.line_id,
            "product_id": line.product_id,
            "name": line.name,
            "unit_price": line.unit_price.to_plain(),
            "quantity": line.quantity.value,
            "size": line.size,
            "volume": line.volume,
            "image": line.image,
            "category": line.category,
        }
        if isinstance(item, GiftPackageLineItem):
            raw["selected_products"] = item.selected_products
            raw["package_details"] = item.package_details
        elif isinstance(item, CustomSizeLineItem) and item.custom_measurements:
            raw["custom_measurements"] = {
                "unit": item.custom_measurements.unit,
                "values": dict(item.custom_measurements.values),
            }
        return raw

    @staticmethod
    def _item_to_domain(raw: dict) -> LineItem:
        snapshot = LineSnapshot(
            line_id=raw["line_id"],
            product_id=raw["product_id"],
            name=raw["name"],
            unit_price=Money(Decimal(raw["unit_price"])),
            quantity=Quantity(raw["quantity"]),
            size=raw.get("size", ""),
            volume=raw.get("volume", ""),
            image=raw.get("image", ""),
            category=raw.get("category", ""),
        )
        kind = raw.get("kind", StockLineItem.kind)
        if kind == GiftPackageLineItem.kind:
            return GiftPackageLineItem(
                snapshot=snapshot,
                selected_products=raw.get("selected_products"),
                package_details=raw.get("package_details"),
            )
        if kind == CustomSizeLineItem.kind:
            measurements = raw.get("custom_measurements")
            return CustomSizeLineItem(
                snapshot=snapshot,
                custom_measurements=(
                    CustomMeasurements(measurements["unit"], measurements["values"])
                    if measurements
                    else None
                ),
            )
        return StockLineItem(snapshot=snapshot)

    @classmethod
    def _to_raw(cls, order: Order) -> dict:
        return {
            "id": order.id,
            "user_id": order.user_id,
            "status": order.status.value,
            "items": [cls._item_to_raw(item) for item in order.items],
            "total": order.total.to_plain(),
            "shipping_address": asdict(order.shipping_address),
            "payment_method": order.payment_method,
            "payment_details": order.payment_details,
            "discount_code": order.discount_code,
            "discount_amount": order.discount_amount.to_plain(),
            "idempotency_key": order.idempotency_key,
            "committed": order.committed,
            "created_at": order.created_at.isoformat(),
            "updated_at": order.updated_at.isoformat(),
        }

    @classmethod
    def _to_domain(cls, raw: dict) -> Order:
        return Order(
            id=raw["id"],
            user_id=raw["user_id"],
            items=tuple(cls._item_to_domain(i) for i in raw["items"]),
            total=Money(Decimal(raw["total"])),
            shipping_address=ShippingAddress(**raw["shipping_address"]),
            payment_method=raw.get("payment_method", "cod"),
            payment_details=raw.get("payment_details"),
            discount_code=raw.get("discount_code"),
            discount_amount=Money(Decimal(raw.get("discount_amount", "0"))),
            status=OrderStatus(raw["status"]),
            idempotency_key=raw.get("idempotency_key"),
            committed=raw.get("committed", True),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw.get("updated_at", raw["created_at"])),
        )
