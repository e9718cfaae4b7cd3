"""
Name: Retry Helper Tests

Responsibilities:
  - Classify transient vs permanent errors (HTTP, SMTP, network)
  - Retry only transient errors; re-raise the last exception
"""

import smtplib

import httpx
import pytest

from timetracker.infrastructure.services.retry import (
    create_retry_decorator,
    is_transient_error,
)

pytestmark = pytest.mark.unit


def _status_error(code: int) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "https://example.com")
    return httpx.HTTPStatusError(
        "boom", request=request, response=httpx.Response(code, request=request)
    )


@pytest.mark.parametrize(
    "error,expected",
    [
        (_status_error(503), True),
        (_status_error(429), True),
        (_status_error(400), False),
        (_status_error(401), False),
        (smtplib.SMTPResponseException(421, b"try later"), True),
        (smtplib.SMTPResponseException(550, b"no such user"), False),
        (smtplib.SMTPServerDisconnected("bye"), True),
        (httpx.ConnectError("down"), True),
        (TimeoutError(), True),
        (ValueError("bug"), False),
    ],
)
def test_is_transient_error(error, expected):
    assert is_transient_error(error) is expected


def test_retries_transient_then_succeeds():
    calls = {"n": 0}

    @create_retry_decorator(max_attempts=3, base_delay=0, max_delay=0.01)
    def flaky():
        calls["n"] += 1
        if calls["n"] < 3:
            raise ConnectionError("reset")
        return "ok"

    assert flaky() == "ok"
    assert calls["n"] == 3


def test_permanent_error_fails_fast():
    calls = {"n": 0}

    @create_retry_decorator(max_attempts=3, base_delay=0, max_delay=0.01)
    def broken():
        calls["n"] += 1
        raise ValueError("bug")

    with pytest.raises(ValueError):
        broken()
    assert calls["n"] == 1


@pytest.mark.parametrize(
    "kwargs",
    [{"max_attempts": 0}, {"base_delay": -1}, {"max_delay": 0}],
)
def test_invalid_configuration(kwargs):
    with pytest.raises(ValueError):
        create_retry_decorator(**kwargs)
