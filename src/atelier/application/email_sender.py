"""Abstract outbound mail transport."""

from __future__ import annotations

from abc import ABC, abstractmethod

from atelier.application.email_content import EmailMessage


class EmailSender(ABC):

    @abstractmethod
    def send(self, message: EmailMessage) -> None:
        """Deliver *message*.

        Raises EmailConfigurationError when credentials are missing and
        EmailDeliveryError when the transport fails.
        """
