"""Application service: List Discount Codes use case (admin query)."""

from __future__ import annotations

from atelier.application.auth import Principal, require_admin
from atelier.application.dto import DiscountCodeDTO
from atelier.application.mapping import discount_code_to_dto
from atelier.domain.repository.discount_code_repository import DiscountCodeRepository


class ListDiscountCodesHandler:

    def __init__(self, discount_repo: DiscountCodeRepository) -> None:
        self._discount_repo = discount_repo

    def handle(self, principal: Principal | None) -> list[DiscountCodeDTO]:
        require_admin(principal)
        return [discount_code_to_dto(c) for c in self._discount_repo.list_all()]
