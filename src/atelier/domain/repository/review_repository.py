"""Abstract repository for Review records."""

from __future__ import annotations

from abc import ABC, abstractmethod

from atelier.domain.model.review import Review


class ReviewRepository(ABC):

    @abstractmethod
    def list_all(self) -> list[Review]:
        """Return every review."""

    @abstractmethod
    def add(self, review: Review) -> None:
        """Persist a review."""

    @abstractmethod
    def remove(self, review_id: str) -> None:
        """Delete a review if present."""
