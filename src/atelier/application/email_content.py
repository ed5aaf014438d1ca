"""Transactional email content built from an order snapshot.

Amounts are stored in USD and shown in the customer's currency, resolved
from the shipping country.  Every figure is converted before formatting
so the rendered lines agree to two decimal places.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from html import escape

from atelier.domain.model.currency import CurrencyConverter
from atelier.domain.model.order import Order


@dataclass(frozen=True)
class EmailMessage:
    to: str
    subject: str
    html: str
    text: str


@dataclass(frozen=True)
class OrderAmounts:
    """USD breakdown of an order; shipping is whatever the total leaves."""

    subtotal: Decimal
    discount: Decimal
    shipping: Decimal
    total: Decimal

    @staticmethod
    def of(order: Order) -> OrderAmounts:
        subtotal = order.subtotal.amount
        discount = order.discount_amount.amount
        total = order.total.amount
        return OrderAmounts(
            subtotal=subtotal,
            discount=discount,
            shipping=total - subtotal + discount,
            total=total,
        )


@dataclass(frozen=True)
class StatusCopy:
    title: str
    badge_color: str
    heading: str
    paragraph: str
    bullets: tuple[str, ...] = ()
    cta_text: str | None = None
    cta_path: str | None = None


STATUS_COPY: dict[str, StatusCopy] = {
    "processing": StatusCopy(
        title="Processing",
        badge_color="#FFA500",
        heading="Your order is being processed!",
        paragraph=(
            "We're carefully preparing your couture pieces for shipment. "
            "This usually takes 1-2 business days."
        ),
        bullets=(
            "Quality checking each product",
            "Packaging with care",
            "Preparing shipping documents",
        ),
    ),
    "shipped": StatusCopy(
        title="Shipped",
        badge_color="#2196F3",
        heading="Your order is on its way!",
        paragraph=(
            "Your order has been shipped and is heading to your address. "
            "Delivery typically takes 3-7 business days."
        ),
        bullets=(
            "Package has been picked up by courier",
            "Estimated delivery: 3-7 business days",
            "You'll receive a call from the courier before delivery",
        ),
    ),
    "delivered": StatusCopy(
        title="Delivered",
        badge_color="#4CAF50",
        heading="Your order has been delivered!",
        paragraph=(
            "We hope you love your new look! Please take a moment to share "
            "your experience with us."
        ),
        bullets=(
            "Enjoy your new couture pieces",
            "Share your experience with a review",
            "Help other customers make informed decisions",
        ),
        cta_text="Leave a Review",
        cta_path="/account",
    ),
    "cancelled": StatusCopy(
        title="Cancelled",
        badge_color="#F44336",
        heading="Order Cancelled",
        paragraph=(
            "Your order has been cancelled. If you have any questions about "
            "this cancellation, please contact us."
        ),
    ),
}


def status_copy(status: str) -> StatusCopy:
    return STATUS_COPY.get(
        status,
        StatusCopy(
            title="Status Updated",
            badge_color="#9E9E9E",
            heading="Order Status Updated",
            paragraph=f"Your order status has been updated to: {status}",
        ),
    )


def _item_label(name: str, size: str, volume: str) -> str:
    label = name
    if size:
        label += f" - {size}"
    if volume:
        label += f" ({volume})"
    return label


class OrderEmailComposer:

    def __init__(self, store_name: str, base_url: str, support_email: str) -> None:
        self._store_name = store_name
        self._base_url = base_url.rstrip("/")
        self._support_email = support_email

    # --- Confirmation ---------------------------------------------------------

    def confirmation(self, order: Order) -> EmailMessage:
        address = order.shipping_address
        fx = CurrencyConverter.for_address(address.country_code, address.country)
        amounts = OrderAmounts.of(order)

        lines = self._item_lines(order, fx)
        summary = [("Subtotal", fx.format(amounts.subtotal))]
        if amounts.discount > 0:
            label = f"Discount ({order.discount_code})" if order.discount_code else "Discount"
            summary.append((label, "-" + fx.format(amounts.discount)))
        summary.append(
            ("Shipping", fx.format(amounts.shipping) if amounts.shipping > 0 else "Free")
        )
        summary.append(("Total", fx.format(amounts.total)))

        greeting_name = address.name or "Valued Customer"
        order_date = order.created_at.strftime("%B %d, %Y")
        address_lines = [
            address.name or "N/A",
            address.address or "N/A",
            ", ".join(p for p in (address.city, address.country or address.governorate) if p)
            or "N/A",
        ]
        if address.postal_code:
            address_lines.append(address.postal_code)
        address_lines.append(f"Phone: {address.phone or 'N/A'}")

        text = "\n".join(
            [
                f"Hello {greeting_name},",
                "",
                "Thank you for your order! Here are your order details:",
                "",
                f"Order #{order.id}",
                f"Order date: {order_date}",
                f"Payment method: {self._payment_label(order.payment_method)}",
                "",
                *(f"{label} x {qty}  {amount}" for label, qty, amount in lines),
                "",
                *(f"{label}: {value}" for label, value in summary),
                "",
                "Shipping address:",
                *address_lines,
                "",
                f"Track your order: {self._base_url}/account",
                f"Questions? Contact us at {self._support_email}",
            ]
        )

        html = self._page(
            title=f"Order Confirmation - {self._store_name}",
            body="".join(
                [
                    f"<h2>Hello {escape(greeting_name)},</h2>",
                    "<p>Thank you for your order! We've received your order and "
                    "it's being processed.</p>",
                    f"<h3>Order #{escape(order.id)}</h3>",
                    f"<p><strong>Order Date:</strong> {order_date}</p>",
                    "<p><strong>Payment Method:</strong> "
                    f"{escape(self._payment_label(order.payment_method))}</p>",
                    self._items_table(lines),
                    self._summary_table(summary),
                    "<h3>Shipping Address</h3>",
                    "<p>" + "<br>".join(escape(line) for line in address_lines) + "</p>",
                    f'<p><a href="{escape(self._base_url)}/account">Track Your Order</a> | '
                    f'<a href="{escape(self._base_url)}/products">Continue Shopping</a></p>',
                    "<p>Have questions? Contact us at "
                    f'<a href="mailto:{escape(self._support_email)}">'
                    f"{escape(self._support_email)}</a></p>",
                ]
            ),
        )

        return EmailMessage(
            to=address.email,
            subject=f"Order Confirmation #{order.id} - {self._store_name}",
            html=html,
            text=text,
        )

    # --- Status update --------------------------------------------------------

    def status_update(
        self,
        order: Order,
        previous_status: str | None,
        new_status: str,
    ) -> EmailMessage:
        address = order.shipping_address
        fx = CurrencyConverter.for_address(address.country_code, address.country)
        copy = status_copy(new_status)
        lines = self._item_lines(order, fx)
        total = fx.format(order.total.amount)
        updated = datetime.now(timezone.utc).strftime("%B %d, %Y %H:%M UTC")
        previous = previous_status or "New Order"

        text_parts = [
            f"Hello {address.name},",
            "",
            f"Order #{order.id}: {copy.title}",
            f"Previous Status: {previous}",
            f"Current Status: {new_status}",
            f"Updated: {updated}",
            "",
            *(f"{label} x {qty}  {amount}" for label, qty, amount in lines),
            f"Total: {total}",
            "",
            copy.heading,
            copy.paragraph,
            *(f"- {b}" for b in copy.bullets),
        ]
        cta_html = ""
        if copy.cta_text and copy.cta_path:
            cta_url = f"{self._base_url}{copy.cta_path}"
            text_parts.append(f"{copy.cta_text}: {cta_url}")
            cta_html = f'<p><a href="{escape(cta_url)}">{escape(copy.cta_text)}</a></p>'

        bullets_html = ""
        if copy.bullets:
            bullets_html = "<ul>" + "".join(f"<li>{escape(b)}</li>" for b in copy.bullets) + "</ul>"

        html = self._page(
            title=f"Order Update - {self._store_name}",
            body="".join(
                [
                    f"<h2>Hello {escape(address.name)},</h2>",
                    "<p>Your order status has been updated.</p>",
                    f"<h3>Order #{escape(order.id)}</h3>",
                    f'<span style="background: {copy.badge_color};">{escape(copy.title)}</span>',
                    f"<p><strong>Previous Status:</strong> {escape(previous)}</p>",
                    f"<p><strong>Current Status:</strong> {escape(new_status)}</p>",
                    f"<p><strong>Updated:</strong> {updated}</p>",
                    self._items_table(lines),
                    self._summary_table([("Total", total)]),
                    f"<h3>{escape(copy.heading)}</h3>",
                    f"<p>{escape(copy.paragraph)}</p>",
                    bullets_html,
                    cta_html,
                    "<p>Have questions about your order? "
                    f'<a href="mailto:{escape(self._support_email)}">'
                    "Contact our support team</a></p>",
                ]
            ),
        )

        return EmailMessage(
            to=address.email,
            subject=f"Order Update #{order.id} - {copy.title}",
            html=html,
            text="\n".join(text_parts),
        )

    # --- Helpers --------------------------------------------------------------

    @staticmethod
    def _item_lines(order: Order, fx: CurrencyConverter) -> list[tuple[str, int, str]]:
        return [
            (
                _item_label(item.snapshot.name, item.snapshot.size, item.snapshot.volume),
                item.snapshot.quantity.value,
                fx.format(item.snapshot.line_total.amount),
            )
            for item in order.items
        ]

    @staticmethod
    def _payment_label(method: str) -> str:
        return "Cash on Delivery" if method == "cod" else method.title()

    @staticmethod
    def _items_table(lines: list[tuple[str, int, str]]) -> str:
        rows = "".join(
            f"<tr><td>{escape(label)}</td><td>{qty}</td><td>{escape(amount)}</td></tr>"
            for label, qty, amount in lines
        )
        return (
            "<table><tr><th>Item</th><th>Qty</th><th>Total</th></tr>"
            f"{rows}</table>"
        )

    @staticmethod
    def _summary_table(rows: list[tuple[str, str]]) -> str:
        body = "".join(
            f"<tr><td>{escape(label)}:</td><td>{escape(value)}</td></tr>"
            for label, value in rows
        )
        return f"<table>{body}</table>"

    def _page(self, title: str, body: str) -> str:
        return (
            "<!DOCTYPE html><html><head><meta charset=\"utf-8\">"
            f"<title>{escape(title)}</title></head><body>"
            f"{body}"
            f"<p>{escape(self._store_name)}</p>"
            "</body></html>"
        )
