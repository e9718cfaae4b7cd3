"""
============================================================
TARJETA CRC — infrastructure/services/email/console_sender.py
============================================================
Class: ConsoleEmailSender

Responsibilities:
  - EmailSender para desarrollo y tests: no sale a la red.
  - Loguear el envío (destinatario + subject, nunca el cuerpo: lleva tokens).
  - Guardar los mensajes en `outbox` para inspección.
============================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from threading import Lock
from typing import List

from ....crosscutting.logger import logger


@dataclass(frozen=True)
class SentEmail:
    to: str
    subject: str
    html: str


class ConsoleEmailSender:
    def __init__(self) -> None:
        self._lock = Lock()
        self._outbox: List[SentEmail] = []

    @property
    def outbox(self) -> List[SentEmail]:
        with self._lock:
            return list(self._outbox)

    def send(self, to: str, subject: str, html: str) -> None:
        with self._lock:
            self._outbox.append(SentEmail(to=to, subject=subject, html=html))
        logger.info("Email (console)", extra={"to": to, "subject": subject})
