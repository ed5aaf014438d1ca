"""Tests for order email content and the send use cases."""

import pytest

from atelier.application.email_content import OrderEmailComposer, status_copy
from atelier.application.send_order_confirmation import SendOrderConfirmationHandler
from atelier.application.send_order_update import SendOrderUpdateHandler
from atelier.domain.exceptions import EmailConfigurationError, ValidationError
from atelier.domain.model.value_objects import Money
from tests.factories import placed_order
from tests.fakes import FakeEmailSender


def _composer():
    return OrderEmailComposer(
        store_name="Atelier",
        base_url="https://shop.example.com/",
        support_email="help@example.com",
    )


class TestConfirmationContent:

    def test_subject_and_recipient(self):
        message = _composer().confirmation(placed_order("order-7"))
        assert message.subject == "Order Confirmation #order-7 - Atelier"
        assert message.to == "layla@example.com"

    def test_amounts_in_customer_currency(self):
        order = placed_order(country="Saudi Arabia")

        text = _composer().confirmation(order).text

        assert "Silk Gown - M x 1  450.00 SAR" in text
        assert "Total: 450.00 SAR" in text

    def test_discount_and_shipping_lines(self):
        order = placed_order(country="United States")
        order.discount_code = "SAVE10"
        order.discount_amount = Money.of("12")
        order.total = Money.of("118")

        text = _composer().confirmation(order).text

        assert "Discount (SAVE10): -12.00 USD" in text
        assert "Shipping: 10.00 USD" in text

    def test_free_shipping_and_no_discount_line(self):
        text = _composer().confirmation(placed_order(country="United States")).text
        assert "Shipping: Free" in text
        assert "Discount" not in text

    def test_customer_text_is_escaped_in_html(self):
        order = placed_order(name="<b>Layla</b>")
        html = _composer().confirmation(order).html
        assert "&lt;b&gt;Layla&lt;/b&gt;" in html
        assert "<b>Layla</b>" not in html


class TestStatusUpdateContent:

    def test_delivered_invites_a_review(self):
        message = _composer().status_update(placed_order("order-7"), "shipped", "delivered")

        assert message.subject == "Order Update #order-7 - Delivered"
        assert "Leave a Review: https://shop.example.com/account" in message.text
        assert "Previous Status: shipped" in message.text

    def test_unknown_status_gets_generic_copy(self):
        copy = status_copy("on_hold")
        assert copy.title == "Status Updated"
        assert "on_hold" in copy.paragraph

    def test_missing_previous_status(self):
        message = _composer().status_update(placed_order(), None, "processing")
        assert "Previous Status: New Order" in message.text


class TestSendHandlers:

    def test_confirmation_sent(self):
        sender = FakeEmailSender()
        SendOrderConfirmationHandler(_composer(), sender).handle(placed_order())
        assert len(sender.sent) == 1

    def test_confirmation_requires_customer_email(self):
        sender = FakeEmailSender()
        with pytest.raises(ValidationError, match="Customer email not found"):
            SendOrderConfirmationHandler(_composer(), sender).handle(placed_order(email=""))
        assert sender.sent == []

    def test_configuration_error_propagates(self):
        sender = FakeEmailSender(error=EmailConfigurationError("Email configuration missing"))
        with pytest.raises(EmailConfigurationError):
            SendOrderConfirmationHandler(_composer(), sender).handle(placed_order())

    def test_update_sent(self):
        sender = FakeEmailSender()
        SendOrderUpdateHandler(_composer(), sender).handle(placed_order(), "pending", "shipped")
        assert sender.sent[0].subject.endswith("- Shipped")

    def test_update_requires_new_status(self):
        with pytest.raises(ValidationError, match="new status"):
            SendOrderUpdateHandler(_composer(), FakeEmailSender()).handle(
                placed_order(), "pending", ""
            )
