"""Application service: Show Order use case (query)."""

from __future__ import annotations

from atelier.application.auth import Principal, require_principal
from atelier.application.dto import OrderDTO
from atelier.application.mapping import order_to_dto
from atelier.domain.exceptions import EntityNotFoundError
from atelier.domain.repository.order_repository import OrderRepository


class ShowOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: str, principal: Principal | None) -> OrderDTO:
        principal = require_principal(principal)
        order = self._order_repo.get_by_id(order_id)
        # Someone else's order is reported as missing rather than forbidden.
        if order is None or not (principal.is_admin or order.belongs_to(principal.user_id)):
            raise EntityNotFoundError(f"Order {order_id} not found")
        return order_to_dto(order)
