"""Abstract repository for DiscountCode aggregate.

Lookups are case-insensitive.  ``increment_usage`` is the only way
``usage_count`` changes and must be an atomic conditional update.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from atelier.domain.model.discount import DiscountCode


class DiscountCodeRepository(ABC):

    @abstractmethod
    def get_by_code(self, code: str) -> DiscountCode | None:
        """Return a code regardless of case, or None."""

    @abstractmethod
    def list_all(self) -> list[DiscountCode]:
        """Return every code, most recently created first."""

    @abstractmethod
    def add(self, discount_code: DiscountCode) -> None:
        """Insert a new code.  Raises ConflictError if it already exists."""

    @abstractmethod
    def save(self, discount_code: DiscountCode) -> None:
        """Persist an updated code."""

    @abstractmethod
    def delete(self, code: str) -> bool:
        """Remove a code; return False if it did not exist."""

    @abstractmethod
    def increment_usage(self, code: str) -> DiscountCode:
        """Atomically bump ``usage_count`` if it is below ``usage_limit``.

        Raises EntityNotFoundError for an unknown code and
        DiscountRejectedError when the limit has been reached.
        """

    @abstractmethod
    def release_usage(self, code: str) -> None:
        """Atomically undo one ``increment_usage`` (floored at zero)."""
