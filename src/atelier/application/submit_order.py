"""Application service: Submit Order use case.

Orchestrates identity resolution, the stock preflight, durable order
creation and the stock/discount commit.  This is the only place that
coordinates the Product, DiscountCode and Order aggregates.

Ordering matters:
  1. resolve the caller (bad tokens fall back to guest)
  2. validate the cart and preflight stock, nothing written yet
  3. store the order as ``pending`` and uncommitted, durable before any
     stock moves; the same atomic write claims the idempotency key
  4. claim one discount use, then take stock item by item, both through
     atomic conditional updates; losing a race here removes the order
     again and restores whatever was taken
  5. mark the order committed; only committed orders are replayed
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from atelier.application.auth import TokenVerifier
from atelier.application.dto import OrderDTO, OrderSubmission
from atelier.application.mapping import (
    line_item_from_spec,
    order_to_dto,
    shipping_address_from_spec,
)
from atelier.domain.exceptions import (
    AuthorizationError,
    ConflictError,
    DiscountRejectedError,
    EntityNotFoundError,
    InfrastructureError,
    InsufficientStockError,
    TrustBoundaryError,
    ValidationError,
)
from atelier.domain.model.order import GUEST_USER_ID, Order
from atelier.domain.model.value_objects import Money
from atelier.domain.repository.discount_code_repository import DiscountCodeRepository
from atelier.domain.repository.order_repository import OrderRepository
from atelier.domain.repository.product_repository import ProductRepository
from atelier.domain.service.stock_reservation_service import StockReservationService

logger = logging.getLogger(__name__)

DEFAULT_IDEMPOTENCY_WINDOW = timedelta(hours=24)


class SubmitOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        discount_repo: DiscountCodeRepository,
        token_verifier: TokenVerifier,
        idempotency_window: timedelta = DEFAULT_IDEMPOTENCY_WINDOW,
        enforce_client_totals: bool = False,
    ) -> None:
        self._order_repo = order_repo
        self._discount_repo = discount_repo
        self._token_verifier = token_verifier
        self._reservations = StockReservationService(product_repo)
        self._idempotency_window = idempotency_window
        self._enforce_client_totals = enforce_client_totals

    def handle(self, submission: OrderSubmission, auth_token: str | None = None) -> OrderDTO:
        """Create a pending order and take stock for it."""
        user_id = self._resolve_user(auth_token)

        if submission.idempotency_key:
            existing = self._find_recent(submission.idempotency_key)
            if existing is not None:
                return self._replay(existing)

        if not submission.items:
            raise ValidationError("Order must contain at least one item")
        if submission.total is None:
            raise ValidationError("Order total is required")

        order = Order.create(
            user_id=user_id,
            items=[line_item_from_spec(spec) for spec in submission.items],
            total=Money.of(submission.total),
            shipping_address=shipping_address_from_spec(submission.shipping_address),
            payment_method=submission.payment_method,
            payment_details=submission.payment_details,
            discount_code=submission.discount_code,
            discount_amount=(
                Money.of(submission.discount_amount)
                if submission.discount_amount is not None
                else None
            ),
            idempotency_key=submission.idempotency_key,
        )

        self._reservations.preflight(list(order.items))
        self._check_client_amounts(order)

        # Claiming the key and storing the order is one atomic step, so two
        # concurrent retries cannot both get past this point.
        duplicate = self._order_repo.add_unless_duplicate(order, self._window_start())
        if duplicate is not None:
            return self._replay(duplicate)
        logger.info(
            "Order %s saved for user %s (%d items, total %s)",
            order.id, order.user_id, len(order.items), order.total,
        )

        self._commit(order)
        self._order_repo.mark_committed(order.id)
        order.committed = True
        return order_to_dto(order)

    # --- Steps ----------------------------------------------------------------

    def _resolve_user(self, auth_token: str | None) -> str:
        if not auth_token:
            return GUEST_USER_ID
        try:
            principal = self._token_verifier.verify(auth_token)
        except AuthorizationError as exc:
            logger.info("Invalid token (%s), proceeding as guest order", exc)
            return GUEST_USER_ID
        return principal.user_id

    def _window_start(self) -> datetime:
        return datetime.now(timezone.utc) - self._idempotency_window

    def _find_recent(self, key: str) -> Order | None:
        existing = self._order_repo.find_by_idempotency_key(key)
        if existing is None or existing.created_at < self._window_start():
            return None
        return existing

    def _replay(self, existing: Order) -> OrderDTO:
        if not existing.committed:
            raise ConflictError(
                f"Order for idempotency key {existing.idempotency_key} is still "
                "being placed; retry shortly"
            )
        logger.info(
            "Replaying order %s for idempotency key %s", existing.id, existing.idempotency_key
        )
        return order_to_dto(existing)

    def _commit(self, order: Order) -> None:
        claimed = False
        try:
            claimed = self._claim_discount(order)
            self._reservations.commit(order)
        except (InsufficientStockError, DiscountRejectedError):
            self._withdraw(order, release_discount=claimed)
            raise

    def _withdraw(self, order: Order, release_discount: bool) -> None:
        """Undo the pending order after a lost race.

        Storage failures here are logged, not raised, so the caller still
        sees the conflict that caused the withdrawal.
        """
        try:
            if release_discount:
                self._discount_repo.release_usage(order.discount_code)
        except InfrastructureError:
            logger.exception(
                "Could not release discount use of %s for order %s",
                order.discount_code, order.id,
            )
        try:
            self._order_repo.delete(order.id)
        except InfrastructureError:
            logger.exception("Could not remove withdrawn order %s", order.id)
        else:
            logger.warning("Order %s withdrawn during commit", order.id)

    def _claim_discount(self, order: Order) -> bool:
        if not order.discount_code:
            return False
        try:
            self._discount_repo.increment_usage(order.discount_code)
        except EntityNotFoundError:
            logger.warning(
                "Order %s references unknown discount code %s",
                order.id, order.discount_code,
            )
            return False
        return True

    def _check_client_amounts(self, order: Order) -> None:
        """Compare client-computed money against what the server would charge.

        Shipping is priced by the storefront, so the total can only be
        bounded from below by ``subtotal - discount``.
        """
        problems: list[str] = []
        subtotal = order.subtotal

        floor = subtotal.minus_floor_zero(order.discount_amount).rounded()
        if order.total.rounded() < floor:
            problems.append(f"total {order.total} is below items minus discount {floor}")

        if order.discount_code:
            code = self._discount_repo.get_by_code(order.discount_code)
            if code is None:
                problems.append(f"discount code {order.discount_code} does not exist")
            else:
                try:
                    code.check_usable(subtotal, datetime.now(timezone.utc))
                    expected = code.compute_discount(subtotal)
                    if expected != order.discount_amount.rounded():
                        problems.append(
                            f"discount {order.discount_amount} differs from "
                            f"server-computed {expected}"
                        )
                except DiscountRejectedError as exc:
                    problems.append(f"discount code {code.code}: {exc}")
        elif not order.discount_amount.is_zero:
            problems.append(f"discount {order.discount_amount} claimed without a code")

        if not problems:
            return
        logger.warning("Client amounts mismatch on order %s: %s", order.id, "; ".join(problems))
        if self._enforce_client_totals:
            raise TrustBoundaryError("Order amounts do not match: " + "; ".join(problems))
