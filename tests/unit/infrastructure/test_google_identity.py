"""
Name: Google Identity Verifier Tests

Responsibilities:
  - Accept valid tokeninfo claims (audience, sub, email)
  - Reject tokens Google refuses (4xx) or with another audience
  - Surface provider outages as IdentityProviderError

Notes:
  - httpx.MockTransport; max_attempts=1 avoids backoff sleeps
"""

import httpx
import pytest

from timetracker.crosscutting.exceptions import IdentityProviderError
from timetracker.infrastructure.services.google_identity import GoogleTokenInfoVerifier

pytestmark = pytest.mark.unit

CLIENT_ID = "client-123.apps.googleusercontent.com"


def _verifier(handler) -> GoogleTokenInfoVerifier:
    return GoogleTokenInfoVerifier(
        client_id=CLIENT_ID,
        client=httpx.Client(transport=httpx.MockTransport(handler)),
        max_attempts=1,
    )


def _claims(**overrides):
    claims = {
        "aud": CLIENT_ID,
        "sub": "google-1",
        "email": "Ada@Example.com",
        "name": "Ada",
        "picture": "https://img/ada.png",
        "email_verified": "true",
    }
    claims.update(overrides)
    return claims


def test_valid_token():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["id_token"] = request.url.params["id_token"]
        return httpx.Response(200, json=_claims())

    identity = _verifier(handler).verify("the-token")

    assert seen["id_token"] == "the-token"
    assert identity.google_id == "google-1"
    assert identity.email == "ada@example.com"
    assert identity.email_verified is True


def test_wrong_audience_is_rejected():
    identity = _verifier(
        lambda request: httpx.Response(200, json=_claims(aud="someone-else"))
    ).verify("t")
    assert identity is None


def test_missing_email_is_rejected():
    claims = _claims()
    del claims["email"]
    assert _verifier(lambda request: httpx.Response(200, json=claims)).verify("t") is None


def test_refused_token_returns_none():
    verifier = _verifier(
        lambda request: httpx.Response(400, json={"error": "invalid_token"})
    )
    assert verifier.verify("t") is None


def test_outage_raises_identity_provider_error():
    verifier = _verifier(lambda request: httpx.Response(503))
    with pytest.raises(IdentityProviderError):
        verifier.verify("t")


def test_transport_error_raises_identity_provider_error():
    def handler(request):
        raise httpx.ConnectError("down", request=request)

    with pytest.raises(IdentityProviderError):
        _verifier(handler).verify("t")
