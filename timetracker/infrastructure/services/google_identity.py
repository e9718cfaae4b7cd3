"""
============================================================
TARJETA CRC — infrastructure/services/google_identity.py
============================================================
Class: GoogleTokenInfoVerifier

Responsibilities:
  - Implementar GoogleIdentityVerifier vía el endpoint tokeninfo de Google.
  - Validar audiencia (aud == google_client_id) y presencia de sub/email.
  - Token rechazado por Google (4xx) -> None.
  - Falla de transporte / 5xx tras reintentos -> IdentityProviderError.

Collaborators:
  - httpx (HTTP client)
  - infrastructure.services.retry (tenacity)
  - domain.services.GoogleIdentity
============================================================
"""

from __future__ import annotations

from typing import Optional

import httpx

from ...crosscutting.exceptions import IdentityProviderError
from ...crosscutting.logger import logger
from ...domain.services import GoogleIdentity
from .retry import create_retry_decorator, is_transient_error

_TOKENINFO_URL = "https://oauth2.googleapis.com/tokeninfo"


class GoogleTokenInfoVerifier:
    def __init__(
        self,
        *,
        client_id: str,
        timeout_seconds: float = 10.0,
        client: httpx.Client | None = None,
        max_attempts: int | None = None,
    ) -> None:
        self._client_id = client_id
        self._client = client or httpx.Client(timeout=timeout_seconds)
        self._fetch_with_retry = create_retry_decorator(max_attempts=max_attempts)(
            self._fetch
        )

    def verify(self, id_token: str) -> Optional[GoogleIdentity]:
        try:
            claims = self._fetch_with_retry(id_token)
        except httpx.HTTPStatusError as exc:
            if is_transient_error(exc):
                raise IdentityProviderError(
                    "Google tokeninfo unavailable", original_error=exc
                ) from exc
            logger.info(
                "Google rechazó el ID token",
                extra={"status": exc.response.status_code},
            )
            return None
        except httpx.HTTPError as exc:
            raise IdentityProviderError(
                "Google tokeninfo unavailable", original_error=exc
            ) from exc

        if self._client_id and claims.get("aud") != self._client_id:
            logger.warning("ID token de Google con audiencia inesperada")
            return None

        google_id = claims.get("sub")
        email = claims.get("email")
        if not google_id or not email:
            return None

        return GoogleIdentity(
            google_id=str(google_id),
            email=str(email).lower(),
            name=str(claims.get("name") or ""),
            picture=claims.get("picture"),
            email_verified=str(claims.get("email_verified", "")).lower() == "true",
        )

    def _fetch(self, id_token: str) -> dict:
        response = self._client.get(_TOKENINFO_URL, params={"id_token": id_token})
        response.raise_for_status()
        return response.json()
