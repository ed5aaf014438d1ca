"""JSON-file-backed implementation of ReviewRepository."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from atelier.domain.model.review import Review
from atelier.domain.repository.review_repository import ReviewRepository
from atelier.infrastructure.persistence.json_file import JsonFile


class JsonReviewRepository(ReviewRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    def list_all(self) -> list[Review]:
        return [self._to_domain(raw) for raw in self._file.read()]

    def add(self, review: Review) -> None:
        with self._file.transaction() as records:
            records.append(self._to_raw(review))

    def remove(self, review_id: str) -> None:
        with self._file.transaction() as records:
            records[:] = [r for r in records if r["id"] != review_id]

    @staticmethod
    def _to_raw(review: Review) -> dict:
        return {
            "id": review.id,
            "product_id": review.product_id,
            "original_product_id": review.original_product_id,
            "rating": review.rating,
            "comment": review.comment,
            "order_id": review.order_id,
            "created_at": review.created_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Review:
        return Review(
            id=raw["id"],
            product_id=raw["product_id"],
            rating=int(raw["rating"]),
            comment=raw.get("comment", ""),
            order_id=raw.get("order_id"),
            original_product_id=raw.get("original_product_id"),
            created_at=datetime.fromisoformat(raw["created_at"]),
        )
