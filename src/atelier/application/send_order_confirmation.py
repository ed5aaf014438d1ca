"""Application service: Send Order Confirmation use case.

Runs after the order is durably saved; a failure here is reported to the
caller but never touches the order.
"""

from __future__ import annotations

import logging

from atelier.application.email_content import OrderEmailComposer
from atelier.application.email_sender import EmailSender
from atelier.domain.exceptions import ValidationError
from atelier.domain.model.order import Order

logger = logging.getLogger(__name__)


class SendOrderConfirmationHandler:

    def __init__(self, composer: OrderEmailComposer, sender: EmailSender) -> None:
        self._composer = composer
        self._sender = sender

    def handle(self, order: Order) -> None:
        if not order.shipping_address.email:
            raise ValidationError("Customer email not found in order details")
        message = self._composer.confirmation(order)
        self._sender.send(message)
        logger.info("Order confirmation for %s sent to %s", order.id, message.to)
