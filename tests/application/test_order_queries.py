"""Tests for order listing, lookup and status changes."""

from datetime import timedelta

import pytest

from atelier.application.auth import ADMIN_ROLE, Principal
from atelier.application.list_orders import ListOrdersHandler
from atelier.application.show_order import ShowOrderHandler
from atelier.application.update_order_status import UpdateOrderStatusHandler
from atelier.domain.exceptions import (
    AuthorizationError,
    ConflictError,
    EntityNotFoundError,
    ForbiddenError,
    ValidationError,
)
from atelier.domain.model.order import GUEST_USER_ID, OrderStatus
from tests.factories import placed_order
from tests.fakes import FakeOrderRepository

ADMIN = Principal("admin-1", role=ADMIN_ROLE)
LAYLA = Principal("user-1")
OMAR = Principal("user-2")


def _repo():
    older = placed_order("order-old", user_id="user-1")
    older.created_at -= timedelta(days=1)
    return FakeOrderRepository([
        older,
        placed_order("order-new", user_id="user-1"),
        placed_order("order-omar", user_id="user-2"),
        placed_order("order-guest", user_id=GUEST_USER_ID),
    ])


class TestListOrders:

    def test_customer_sees_own_orders_newest_first(self):
        orders = ListOrdersHandler(_repo()).handle(LAYLA)
        assert [o.id for o in orders] == ["order-new", "order-old"]

    def test_admin_sees_everything(self):
        assert len(ListOrdersHandler(_repo()).handle(ADMIN)) == 4

    def test_anonymous_rejected(self):
        with pytest.raises(AuthorizationError):
            ListOrdersHandler(_repo()).handle(None)


class TestShowOrder:

    def test_owner_can_read(self):
        dto = ShowOrderHandler(_repo()).handle("order-new", LAYLA)
        assert dto.shipping_address.city == "Dubai"

    def test_other_customers_order_reads_as_missing(self):
        with pytest.raises(EntityNotFoundError):
            ShowOrderHandler(_repo()).handle("order-omar", LAYLA)

    def test_guest_order_hidden_from_customers(self):
        with pytest.raises(EntityNotFoundError):
            ShowOrderHandler(_repo()).handle("order-guest", LAYLA)

    def test_admin_can_read_any(self):
        assert ShowOrderHandler(_repo()).handle("order-guest", ADMIN).user_id == GUEST_USER_ID


class TestUpdateOrderStatus:

    def test_transition_reports_both_statuses(self):
        repo = _repo()

        change = UpdateOrderStatusHandler(repo).handle("order-new", "shipped", ADMIN)

        assert change.previous_status == "pending"
        assert change.new_status == "shipped"
        assert repo.get_by_id("order-new").status.value == "shipped"

    def test_total_and_items_untouched(self):
        repo = _repo()
        before = repo.get_by_id("order-new")

        UpdateOrderStatusHandler(repo).handle("order-new", "cancelled", ADMIN)

        after = repo.get_by_id("order-new")
        assert after.total == before.total
        assert after.items == before.items

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError, match="Unknown order status"):
            UpdateOrderStatusHandler(_repo()).handle("order-new", "lost", ADMIN)

    def test_customers_cannot_change_status(self):
        with pytest.raises(ForbiddenError):
            UpdateOrderStatusHandler(_repo()).handle("order-new", "shipped", LAYLA)

    def test_missing_order(self):
        with pytest.raises(EntityNotFoundError):
            UpdateOrderStatusHandler(_repo()).handle("order-ghost", "shipped", ADMIN)

    def test_order_withdrawn_mid_update_stays_gone(self):
        class WithdrawnAfterRead(FakeOrderRepository):
            def get_by_id(self, order_id):
                order = super().get_by_id(order_id)
                self.delete(order_id)
                return order

        repo = WithdrawnAfterRead([placed_order("o1")])

        with pytest.raises(EntityNotFoundError):
            UpdateOrderStatusHandler(repo).handle("o1", "processing", ADMIN)

        assert repo.list_all() == []

    def test_concurrent_change_is_a_conflict(self):
        class DeliveredAfterRead(FakeOrderRepository):
            def get_by_id(self, order_id):
                order = super().get_by_id(order_id)
                self.update_status(order_id, OrderStatus.PENDING, OrderStatus.DELIVERED)
                return order

        repo = DeliveredAfterRead([placed_order("o1")])

        with pytest.raises(ConflictError, match="now delivered"):
            UpdateOrderStatusHandler(repo).handle("o1", "cancelled", ADMIN)

        assert repo.list_all()[0].status == OrderStatus.DELIVERED

    def test_order_still_being_placed_is_a_conflict(self):
        in_flight = placed_order("o1")
        in_flight.committed = False
        repo = FakeOrderRepository([in_flight])

        with pytest.raises(ConflictError, match="still being placed"):
            UpdateOrderStatusHandler(repo).handle("o1", "processing", ADMIN)
