"""
Name: Structured Logger Tests

Responsibilities:
  - Redact sensitive keys (exact match and suffix)
  - Emit JSON with request context and extras
"""

import json
import logging

import pytest

from timetracker.context import clear_context, set_request_context
from timetracker.crosscutting.logger import REDACTED, JSONFormatter, _Redactor

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "key", ["password", "Authorization", "id_token", "refresh_token", "smtp_password"]
)
def test_sensitive_keys_are_redacted(key):
    assert _Redactor().sanitize("value", key=key) == REDACTED


def test_nested_values_are_sanitized():
    sanitized = _Redactor().sanitize({"user": {"email": "a@b.io", "password": "x"}})
    assert sanitized == {"user": {"email": "a@b.io", "password": REDACTED}}


def test_long_strings_are_truncated():
    assert _Redactor(max_str=5).sanitize("abcdefgh").startswith("abcde…")


def test_json_formatter_includes_context_and_extras():
    set_request_context(request_id="req-1", method="GET", path="/x")
    try:
        record = logging.LogRecord("timetracker", logging.INFO, __file__, 1, "hola", None, None)
        record.token = "secret-value"
        record.resource = "Client"

        payload = json.loads(JSONFormatter().format(record))
    finally:
        clear_context()

    assert payload["message"] == "hola"
    assert payload["request_id"] == "req-1"
    assert payload["resource"] == "Client"
    assert payload["token"] == REDACTED
