"""Application service: Recalculate Product Rating use case.

Safe to call after any review mutation, redundantly or repeatedly: the
result depends only on the current set of reviews.
"""

from __future__ import annotations

import logging

from atelier.application.dto import RatingDTO
from atelier.domain.exceptions import EntityNotFoundError, ValidationError
from atelier.domain.repository.product_repository import ProductRepository
from atelier.domain.repository.review_repository import ReviewRepository
from atelier.domain.service.rating_aggregator import aggregate_rating

logger = logging.getLogger(__name__)


class RecalculateRatingHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        review_repo: ReviewRepository,
    ) -> None:
        self._product_repo = product_repo
        self._review_repo = review_repo

    def handle(self, product_id: str) -> RatingDTO:
        """Aggregate every review attributed to *product_id* and store it.

        With no matching reviews both fields are reset to zero so a
        stale rating never outlives its reviews.
        """
        if not product_id or not product_id.strip():
            raise ValidationError("Product ID is required")
        if self._product_repo.get_by_id(product_id) is None:
            raise EntityNotFoundError(f"Product {product_id} not found")

        summary = aggregate_rating(self._review_repo.list_all(), product_id)
        self._product_repo.update_rating(product_id, summary.rating, summary.review_count)
        logger.info(
            "Rating for %s recalculated: %s from %d reviews",
            product_id, summary.rating, summary.review_count,
        )

        return RatingDTO(
            product_id=product_id,
            rating=f"{summary.rating:.2f}",
            review_count=summary.review_count,
        )
