"""Abstract repository for Product aggregate.

Defined in the domain layer so the domain never depends on
infrastructure.  Every mutating method is a single atomic operation
against the backing store: implementations must evaluate the condition
and apply the change without another writer interleaving.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from atelier.domain.model.product import Product


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: str) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Product]:
        """Return every product in the catalog, active or not."""

    @abstractmethod
    def save(self, product: Product) -> None:
        """Persist a new or updated product."""

    @abstractmethod
    def decrement_stock(self, product_id: str, size: str, quantity: int) -> bool:
        """Atomically take *quantity* units of *size* if enough remain.

        Returns False when the size is untracked or unknown (nothing
        changed).  Raises EntityNotFoundError for an unknown product and
        InsufficientStockError when the tracked count is below *quantity*.
        Recomputes ``is_out_of_stock`` in the same step.
        """

    @abstractmethod
    def restock(self, product_id: str, size: str, quantity: int) -> None:
        """Atomically give back units taken by ``decrement_stock``."""

    @abstractmethod
    def set_stock(self, product_id: str, size: str, stock_count: int | None) -> Product:
        """Atomically overwrite a size's stock count (None = untracked)."""

    @abstractmethod
    def update_rating(self, product_id: str, rating: Decimal, review_count: int) -> Product:
        """Atomically overwrite the derived rating fields."""
