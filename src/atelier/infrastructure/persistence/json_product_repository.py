"""JSON-file-backed implementation of ProductRepository."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from typing import Callable

from atelier.domain.exceptions import EntityNotFoundError
from atelier.domain.model.product import Product, ProductSize
from atelier.domain.model.value_objects import Money
from atelier.domain.repository.product_repository import ProductRepository
from atelier.infrastructure.persistence.json_file import JsonFile


class JsonProductRepository(ProductRepository):

    def __init__(
        self,
        file_path: Path,
        on_write: Callable[[], None] | None = None,
    ) -> None:
        self._file = JsonFile(file_path)
        self._on_write = on_write

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        for raw in self._file.read():
            if raw["id"] == product_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Product]:
        return [self._to_domain(raw) for raw in self._file.read()]

    def save(self, product: Product) -> None:
        with self._file.transaction() as records:
            for i, raw in enumerate(records):
                if raw["id"] == product.id:
                    records[i] = self._to_raw(product)
                    break
            else:
                records.append(self._to_raw(product))
        self._written()

    def decrement_stock(self, product_id: str, size: str, quantity: int) -> bool:
        _, changed = self._mutate(product_id, lambda p: p.decrement_stock(size, quantity))
        return bool(changed)

    def restock(self, product_id: str, size: str, quantity: int) -> None:
        self._mutate(product_id, lambda p: p.restock(size, quantity))

    def set_stock(self, product_id: str, size: str, stock_count: int | None) -> Product:
        product, _ = self._mutate(product_id, lambda p: p.set_stock(size, stock_count))
        return product

    def update_rating(self, product_id: str, rating: Decimal, review_count: int) -> Product:
        product, _ = self._mutate(product_id, lambda p: p.apply_rating(rating, review_count))
        return product

    # --- Atomic update --------------------------------------------------------

    def _mutate(
        self,
        product_id: str,
        change: Callable[[Product], object],
    ) -> tuple[Product, object]:
        """Load, change and write back one product under the file lock.

        If *change* raises, nothing is written.
        """
        with self._file.transaction() as records:
            for i, raw in enumerate(records):
                if raw["id"] == product_id:
                    product = self._to_domain(raw)
                    result = change(product)
                    records[i] = self._to_raw(product)
                    break
            else:
                raise EntityNotFoundError(f"Product {product_id} not found")
        self._written()
        return product, result

    def _written(self) -> None:
        if self._on_write is not None:
            self._on_write()

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _money_or_none(raw: str | float | None) -> Money | None:
        return Money(Decimal(str(raw))) if raw is not None else None

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "name": product.name,
            "category": product.category,
            "image": product.image,
            "sizes": [
                {
                    "size": s.size,
                    "volume": s.volume,
                    "original_price": s.original_price.to_plain() if s.original_price else None,
                    "discounted_price": (
                        s.discounted_price.to_plain() if s.discounted_price else None
                    ),
                    "stock_count": s.stock_count,
                }
                for s in product.sizes
            ],
            "rating": str(product.rating),
            "review_count": product.review_count,
            "is_active": product.is_active,
            "is_out_of_stock": product.is_out_of_stock,
            "out_of_stock_override": product.out_of_stock_override,
        }

    @classmethod
    def _to_domain(cls, raw: dict) -> Product:
        sizes = [
            ProductSize(
                size=s["size"],
                volume=s.get("volume", ""),
                original_price=cls._money_or_none(s.get("original_price")),
                discounted_price=cls._money_or_none(s.get("discounted_price")),
                stock_count=s.get("stock_count"),
            )
            for s in raw.get("sizes", [])
        ]
        return Product(
            id=raw["id"],
            name=raw["name"],
            sizes=sizes,
            category=raw.get("category", ""),
            image=raw.get("image", ""),
            rating=Decimal(str(raw.get("rating", "0"))),
            review_count=raw.get("review_count", 0),
            is_active=raw.get("is_active", True),
            is_out_of_stock=raw.get("is_out_of_stock", False),
            out_of_stock_override=raw.get("out_of_stock_override", False),
        )
