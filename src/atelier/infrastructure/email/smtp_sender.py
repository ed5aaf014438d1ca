"""SMTP delivery for transactional email (STARTTLS + login)."""

from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage as MimeMessage
from email.utils import formataddr

from atelier.application.email_content import EmailMessage
from atelier.application.email_sender import EmailSender
from atelier.domain.exceptions import EmailConfigurationError, EmailDeliveryError

logger = logging.getLogger(__name__)


class SmtpEmailSender(EmailSender):

    def __init__(
        self,
        host: str,
        port: int,
        user: str,
        password: str,
        sender_name: str,
        timeout: float = 30.0,
    ) -> None:
        self._host = host
        self._port = port
        self._user = user
        self._password = password
        self._sender_name = sender_name
        self._timeout = timeout

    def send(self, message: EmailMessage) -> None:
        # Fail closed: never pretend a message went out.
        if not self._user or not self._password:
            logger.error("Email configuration missing (user set: %s)", bool(self._user))
            raise EmailConfigurationError(
                "Email configuration missing. Set ATELIER_EMAIL_USER and ATELIER_EMAIL_PASS."
            )

        mime = MimeMessage()
        mime["From"] = formataddr((self._sender_name, self._user))
        mime["To"] = message.to
        mime["Subject"] = message.subject
        mime.set_content(message.text)
        mime.add_alternative(message.html, subtype="html")

        try:
            with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as smtp:
                smtp.starttls()
                smtp.login(self._user, self._password)
                smtp.send_message(mime)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Failed to send '%s' to %s: %s", message.subject, message.to, exc)
            raise EmailDeliveryError(f"Failed to send email: {exc}") from exc
