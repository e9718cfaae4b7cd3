"""
============================================================
TARJETA CRC — infrastructure/services/email/smtp_sender.py
============================================================
Class: SmtpEmailSender

Responsibilities:
  - Implementar EmailSender sobre SMTP (STARTTLS opcional + login).
  - Acotar cada envío con timeout y reintentar fallas transitorias
    (desconexión, SMTP 4xx) con backoff.
  - Traducir cualquier falla final a EmailDeliveryError.

Collaborators:
  - smtplib / email.message.EmailMessage
  - infrastructure.services.retry.create_retry_decorator (tenacity)
  - crosscutting.exceptions.EmailDeliveryError
============================================================
"""

from __future__ import annotations

import smtplib
from email.message import EmailMessage
from email.utils import formataddr

from ....crosscutting.exceptions import EmailDeliveryError
from ....crosscutting.logger import logger
from ..retry import create_retry_decorator


class SmtpEmailSender:
    def __init__(
        self,
        *,
        host: str,
        port: int,
        username: str = "",
        password: str = "",
        use_tls: bool = True,
        timeout_seconds: float = 10.0,
        sender_email: str,
        sender_name: str = "",
        max_attempts: int | None = None,
    ) -> None:
        self._host = host
        self._port = port
        self._username = username
        self._password = password
        self._use_tls = use_tls
        self._timeout = timeout_seconds
        self._from = formataddr((sender_name, sender_email)) if sender_name else sender_email
        self._deliver_with_retry = create_retry_decorator(max_attempts=max_attempts)(
            self._deliver
        )

    def send(self, to: str, subject: str, html: str) -> None:
        message = EmailMessage()
        message["From"] = self._from
        message["To"] = to
        message["Subject"] = subject
        message.set_content("This message requires an HTML-capable email client.")
        message.add_alternative(html, subtype="html")

        try:
            self._deliver_with_retry(message)
        except (smtplib.SMTPException, OSError) as exc:
            raise EmailDeliveryError("Error sending email", original_error=exc) from exc

        logger.info("Email enviado", extra={"subject": subject})

    def _deliver(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as smtp:
            if self._use_tls:
                smtp.starttls()
            if self._username:
                smtp.login(self._username, self._password)
            smtp.send_message(message)
