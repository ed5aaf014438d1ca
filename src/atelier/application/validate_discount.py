"""Application service: Validate Discount Code use case (query).

Used by guest and signed-in checkout alike, so no principal is needed.
This never touches ``usage_count``; a use is only recorded when an order
carrying the code is committed.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from atelier.application.dto import DiscountQuoteDTO, LineItemSpec
from atelier.domain.exceptions import DiscountRejectedError, ValidationError
from atelier.domain.model.value_objects import Money
from atelier.domain.repository.discount_code_repository import DiscountCodeRepository


class ValidateDiscountHandler:

    def __init__(self, discount_repo: DiscountCodeRepository) -> None:
        self._discount_repo = discount_repo

    def handle(
        self,
        code: str,
        order_amount: Decimal | None,
        items: list[LineItemSpec] | None = None,
    ) -> DiscountQuoteDTO:
        """Check *code* against a subtotal and quote the discount.

        Checks run in order and the first failure wins: exists and
        active, not expired, usage below limit, minimum purchase met.
        *items* mirrors the storefront request and does not affect the
        amount.
        """
        if not code or not code.strip():
            raise ValidationError("Discount code is required")
        if order_amount is None:
            raise ValidationError("Order amount is required")
        subtotal = Money.of(order_amount)

        discount_code = self._discount_repo.get_by_code(code)
        if discount_code is None:
            raise DiscountRejectedError("Invalid discount code", reason="invalid")

        discount_code.check_usable(subtotal, datetime.now(timezone.utc))
        amount = discount_code.compute_discount(subtotal)
        if amount.is_zero:
            raise DiscountRejectedError(
                "This discount code does not reduce this order",
                reason="unsupported_type",
            )

        return DiscountQuoteDTO(
            valid=True,
            code=discount_code.code,
            type=discount_code.discount_type.value,
            value=str(discount_code.discount_value),
            discount_amount=amount.to_plain(),
        )
