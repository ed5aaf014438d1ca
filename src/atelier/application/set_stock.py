"""Application service: Set Stock use case (operator)."""

from __future__ import annotations

import logging

from atelier.application.dto import ProductDTO
from atelier.application.mapping import product_to_dto
from atelier.domain.exceptions import ValidationError
from atelier.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class SetStockHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, product_id: str, size: str, stock_count: int | None) -> ProductDTO:
        """Set a size's stock count, or stop tracking it with ``None``."""
        if stock_count is not None and stock_count < 0:
            raise ValidationError("Stock count cannot be negative")
        product = self._product_repo.set_stock(product_id, size, stock_count)
        logger.info("Stock for %s size %s set to %s", product_id, size, stock_count)
        return product_to_dto(product)
