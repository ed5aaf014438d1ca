"""Application service: Update Order Status use case.

Only the status moves; items and total stay exactly as captured at
checkout.  Cancelling does not return stock; restocking a cancelled
order is an operator decision made with ``set_stock``.
"""

from __future__ import annotations

import logging

from atelier.application.auth import Principal, require_admin
from atelier.application.dto import StatusChangeDTO
from atelier.application.mapping import order_to_dto
from atelier.domain.exceptions import EntityNotFoundError, ValidationError
from atelier.domain.model.order import OrderStatus
from atelier.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class UpdateOrderStatusHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: str, new_status: str, principal: Principal | None) -> StatusChangeDTO:
        require_admin(principal)
        try:
            status = OrderStatus(new_status)
        except ValueError as exc:
            raise ValidationError(f"Unknown order status '{new_status}'") from exc

        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order {order_id} not found")

        # Checks the transition rules against the status just read; the
        # repository only applies it if nobody moved the order since.
        previous = order.change_status(status)
        stored = self._order_repo.update_status(order_id, previous, status)
        logger.info("Order %s moved %s -> %s", stored.id, previous.value, status.value)

        return StatusChangeDTO(
            order=order_to_dto(stored),
            previous_status=previous.value,
            new_status=status.value,
        )
