"""Application service: Delete Discount Code use case (admin)."""

from __future__ import annotations

import logging

from atelier.application.auth import Principal, require_admin
from atelier.domain.exceptions import EntityNotFoundError
from atelier.domain.repository.discount_code_repository import DiscountCodeRepository

logger = logging.getLogger(__name__)


class DeleteDiscountCodeHandler:

    def __init__(self, discount_repo: DiscountCodeRepository) -> None:
        self._discount_repo = discount_repo

    def handle(self, code: str, principal: Principal | None) -> None:
        require_admin(principal)
        if not self._discount_repo.delete(code):
            raise EntityNotFoundError(f"Discount code {code.upper()} not found")
        logger.info("Discount code %s deleted", code.upper())
