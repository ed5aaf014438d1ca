"""Review: read-only from the core's point of view."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from atelier.domain.exceptions import ValidationError


@dataclass(frozen=True)
class Review:
    """A customer's review, unlocked by an order.

    ``product_id`` may be a size/variant-suffixed id (``gown-1-M``) and
    ``original_product_id`` may point back at the base product.
    """

    id: str
    product_id: str
    rating: int
    comment: str = ""
    order_id: str | None = None
    original_product_id: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        if not 1 <= self.rating <= 5:
            raise ValidationError(f"Review rating must be 1-5, got {self.rating}")

    def belongs_to(self, product_id: str) -> bool:
        """Exact id, variant-suffixed id, or lineage prefix."""
        if self.product_id == product_id:
            return True
        if self.product_id.startswith(product_id + "-"):
            return True
        if self.original_product_id and self.original_product_id.startswith(product_id):
            return True
        return False
