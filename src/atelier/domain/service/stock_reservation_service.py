"""Domain service: Stock Reservation.

Coordinates the cross-aggregate work of checking and taking stock for an
order's regular line items.  Gift packages and custom-size pieces are
fulfilled by hand and never touch stock.

Two phases:
  Preflight: read each product and reject the whole order if any tracked
             size cannot cover its quantity.  Nothing is mutated.
  Commit:    after the order is durably saved, take stock item by item
             through the repository's atomic conditional decrement.  A
             shortfall found here means another order won the race; every
             unit already taken for this order is given back and the
             shortfall is raised.  Any other per-item failure is logged
             and skipped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from atelier.domain.exceptions import (
    EntityNotFoundError,
    InfrastructureError,
    InsufficientStockError,
)
from atelier.domain.model.order import LineItem, Order
from atelier.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StockTake:
    """Units actually removed from one product size."""

    product_id: str
    size: str
    quantity: int


class StockReservationService:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def preflight(self, items: list[LineItem]) -> None:
        """Validate availability for every stock-tracked line item.

        Fails fast before any mutation; inactive products count as missing.
        """
        for item in items:
            if not item.tracks_stock:
                continue
            line = item.snapshot
            product = self._product_repo.get_by_id(line.product_id)
            if product is None or not product.is_active:
                raise EntityNotFoundError(f"Product {line.product_id} not found")
            product.check_available(line.size, line.quantity.value)

    def commit(self, order: Order) -> list[StockTake]:
        """Take stock for every regular item of an already-persisted order."""
        taken: list[StockTake] = []
        for item in order.stock_items:
            line = item.snapshot
            try:
                tracked = self._product_repo.decrement_stock(
                    line.product_id, line.size, line.quantity.value
                )
            except InsufficientStockError:
                logger.warning(
                    "Stock for %s size %s ran out while committing order %s",
                    line.product_id, line.size, order.id,
                )
                self.release(taken)
                raise
            except (EntityNotFoundError, InfrastructureError):
                logger.exception(
                    "Failed to decrement stock for %s size %s on order %s",
                    line.product_id, line.size, order.id,
                )
                continue
            if tracked:
                taken.append(StockTake(line.product_id, line.size, line.quantity.value))
        return taken

    def release(self, taken: list[StockTake]) -> None:
        """Give back stock taken by ``commit``; failures are logged."""
        for take in reversed(taken):
            try:
                self._product_repo.restock(take.product_id, take.size, take.quantity)
            except (EntityNotFoundError, InfrastructureError):
                logger.exception(
                    "Failed to restock %d of %s size %s",
                    take.quantity, take.product_id, take.size,
                )
