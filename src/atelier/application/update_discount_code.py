"""Application service: Update Discount Code use case (admin).

Two request shapes are accepted: a toggle carrying only ``is_active``,
and a general update carrying any subset of the editable fields.  Both
re-read and return the stored record.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from atelier.application.auth import Principal, require_admin
from atelier.application.create_discount_code import optional_money, parse_discount_type
from atelier.application.dto import DiscountCodeDTO
from atelier.application.mapping import discount_code_to_dto
from atelier.domain.exceptions import EntityNotFoundError, ValidationError
from atelier.domain.model.discount import DiscountCode, DiscountType
from atelier.domain.repository.discount_code_repository import DiscountCodeRepository

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset({
    "is_active",
    "discount_type",
    "discount_value",
    "description",
    "min_purchase",
    "max_discount",
    "valid_until",
    "usage_limit",
})


class UpdateDiscountCodeHandler:

    def __init__(self, discount_repo: DiscountCodeRepository) -> None:
        self._discount_repo = discount_repo

    def handle(
        self,
        code: str,
        changes: dict[str, Any],
        principal: Principal | None,
    ) -> DiscountCodeDTO:
        require_admin(principal)

        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Cannot update field(s): {', '.join(sorted(unknown))}")
        if not changes:
            raise ValidationError("No changes supplied")
        if "is_active" in changes and not isinstance(changes["is_active"], bool):
            raise ValidationError("is_active must be true or false")

        existing = self._discount_repo.get_by_code(code)
        if existing is None:
            raise EntityNotFoundError(f"Discount code {code.upper()} not found")

        if set(changes) == {"is_active"}:
            existing.is_active = changes["is_active"]
            existing.updated_at = datetime.now(timezone.utc)
            updated = existing
        else:
            updated = self._apply(existing, changes)

        self._discount_repo.save(updated)
        logger.info("Discount code %s updated (%s)", updated.code, ", ".join(sorted(changes)))

        stored = self._discount_repo.get_by_code(updated.code)
        if stored is None:
            raise EntityNotFoundError(f"Discount code {updated.code} not found")
        return discount_code_to_dto(stored)

    @staticmethod
    def _apply(existing: DiscountCode, changes: dict[str, Any]) -> DiscountCode:
        """Build a new aggregate so its invariants are re-checked."""
        discount_type: DiscountType = existing.discount_type
        if "discount_type" in changes:
            discount_type = parse_discount_type(changes["discount_type"])
        value = existing.discount_value
        if changes.get("discount_value") is not None:
            value = Decimal(changes["discount_value"])

        def pick(name: str, current: Any) -> Any:
            return changes[name] if name in changes else current

        return DiscountCode(
            code=existing.code,
            discount_type=discount_type,
            discount_value=value,
            description=pick("description", existing.description),
            min_purchase=(
                optional_money(changes["min_purchase"])
                if "min_purchase" in changes
                else existing.min_purchase
            ),
            max_discount=(
                optional_money(changes["max_discount"])
                if "max_discount" in changes
                else existing.max_discount
            ),
            valid_until=pick("valid_until", existing.valid_until),
            usage_limit=pick("usage_limit", existing.usage_limit),
            usage_count=existing.usage_count,
            is_active=pick("is_active", existing.is_active),
            created_at=existing.created_at,
            updated_at=datetime.now(timezone.utc),
        )
