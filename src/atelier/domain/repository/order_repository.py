"""Abstract repository for Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from atelier.domain.model.order import Order, OrderStatus


class OrderRepository(ABC):

    @abstractmethod
    def get_by_id(self, order_id: str) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Order]:
        """Return every order, most recent first."""

    @abstractmethod
    def list_for_user(self, user_id: str) -> list[Order]:
        """Return a user's orders, most recent first."""

    @abstractmethod
    def find_by_idempotency_key(self, key: str) -> Order | None:
        """Return the newest order created with *key*, or None."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Durably persist a new or updated order before returning."""

    @abstractmethod
    def add_unless_duplicate(self, order: Order, since: datetime) -> Order | None:
        """Atomically add a new order unless its idempotency key is taken.

        If an order with the same key was created at or after *since*,
        nothing is written and that order is returned.  Otherwise *order*
        is stored and None is returned.
        """

    @abstractmethod
    def mark_committed(self, order_id: str) -> None:
        """Flag an order whose stock and discount have been committed.

        Raises EntityNotFoundError if the order no longer exists.
        """

    @abstractmethod
    def update_status(
        self,
        order_id: str,
        expected: OrderStatus,
        new_status: OrderStatus,
    ) -> Order:
        """Move an order from *expected* to *new_status* in one step.

        Raises EntityNotFoundError if the order is gone, and ConflictError
        if it is still being placed or its status is no longer *expected*.
        """

    @abstractmethod
    def delete(self, order_id: str) -> None:
        """Remove an order that could not be committed."""
