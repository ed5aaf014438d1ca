"""Application service: Create Discount Code use case (admin)."""

from __future__ import annotations

import logging
from decimal import Decimal

from atelier.application.auth import Principal, require_admin
from atelier.application.dto import DiscountCodeDTO, DiscountCodeSpec
from atelier.application.mapping import discount_code_to_dto
from atelier.domain.exceptions import EntityNotFoundError, ValidationError
from atelier.domain.model.discount import DiscountCode, DiscountType
from atelier.domain.model.value_objects import Money
from atelier.domain.repository.discount_code_repository import DiscountCodeRepository

logger = logging.getLogger(__name__)


def parse_discount_type(raw: str | None) -> DiscountType:
    try:
        return DiscountType(raw)
    except ValueError as exc:
        raise ValidationError(
            "Only percentage and fixed discount types are supported"
        ) from exc


def optional_money(value: Decimal | None) -> Money | None:
    return Money.of(value) if value is not None else None


class CreateDiscountCodeHandler:

    def __init__(self, discount_repo: DiscountCodeRepository) -> None:
        self._discount_repo = discount_repo

    def handle(self, spec: DiscountCodeSpec, principal: Principal | None) -> DiscountCodeDTO:
        require_admin(principal)

        if not spec.code or not spec.discount_type:
            raise ValidationError("Code and type are required")
        discount_type = parse_discount_type(spec.discount_type)
        if spec.discount_value is None:
            raise ValidationError("Value is required for this discount type")

        discount_code = DiscountCode(
            code=spec.code,
            discount_type=discount_type,
            discount_value=Decimal(spec.discount_value),
            description=spec.description or None,
            min_purchase=optional_money(spec.min_purchase),
            max_discount=optional_money(spec.max_discount),
            valid_until=spec.valid_until,
            usage_limit=spec.usage_limit,
        )
        self._discount_repo.add(discount_code)
        logger.info("Discount code %s created", discount_code.code)

        stored = self._discount_repo.get_by_code(discount_code.code)
        if stored is None:
            raise EntityNotFoundError(f"Discount code {discount_code.code} not found")
        return discount_code_to_dto(stored)
