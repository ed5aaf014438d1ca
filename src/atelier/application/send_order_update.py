"""Application service: Send Order Status Update use case."""

from __future__ import annotations

import logging

from atelier.application.email_content import OrderEmailComposer
from atelier.application.email_sender import EmailSender
from atelier.domain.exceptions import ValidationError
from atelier.domain.model.order import Order

logger = logging.getLogger(__name__)


class SendOrderUpdateHandler:

    def __init__(self, composer: OrderEmailComposer, sender: EmailSender) -> None:
        self._composer = composer
        self._sender = sender

    def handle(self, order: Order, previous_status: str | None, new_status: str) -> None:
        if not new_status:
            raise ValidationError("Order and new status are required")
        if not order.shipping_address.email:
            raise ValidationError("Customer email not found in order details")
        message = self._composer.status_update(order, previous_status, new_status)
        self._sender.send(message)
        logger.info(
            "Order update for %s (%s) sent to %s", order.id, new_status, message.to
        )
