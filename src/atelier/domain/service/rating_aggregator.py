"""Domain service: Rating Aggregation.

A product's displayed rating is the mean of every review attributed to
it, including reviews stored under variant-suffixed ids or pointing back
to it through ``original_product_id``.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from atelier.domain.model.review import Review


@dataclass(frozen=True)
class RatingSummary:
    rating: Decimal
    review_count: int


def matching_reviews(reviews: Iterable[Review], product_id: str) -> list[Review]:
    """Reviews belonging to *product_id*, deduplicated by review id."""
    seen: set[str] = set()
    result: list[Review] = []
    for review in reviews:
        if review.id in seen or not review.belongs_to(product_id):
            continue
        seen.add(review.id)
        result.append(review)
    return result


def aggregate_rating(reviews: Iterable[Review], product_id: str) -> RatingSummary:
    matches = matching_reviews(reviews, product_id)
    if not matches:
        return RatingSummary(rating=Decimal("0"), review_count=0)
    total = sum(Decimal(r.rating) for r in matches)
    mean = (total / len(matches)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return RatingSummary(rating=mean, review_count=len(matches))
