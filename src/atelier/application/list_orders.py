"""Application service: List Orders use case (query)."""

from __future__ import annotations

from atelier.application.auth import Principal, require_principal
from atelier.application.dto import OrderDTO
from atelier.application.mapping import order_to_dto
from atelier.domain.repository.order_repository import OrderRepository


class ListOrdersHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, principal: Principal | None) -> list[OrderDTO]:
        """Admins see every order; everyone else only their own."""
        principal = require_principal(principal)
        if principal.is_admin:
            orders = self._order_repo.list_all()
        else:
            orders = self._order_repo.list_for_user(principal.user_id)
        return [order_to_dto(order) for order in orders]
