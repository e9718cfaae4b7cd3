"""
Name: Prometheus Metrics Tests

Responsibilities:
  - Validate endpoint normalization (ids -> {id}) and status buckets
  - Validate HTTP and timer-transition counters
  - Validate /metrics exposition through the full app
"""

from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from timetracker.api.main import create_app
from timetracker.crosscutting.metrics import (
    REGISTRY,
    get_metrics_response,
    normalize_endpoint,
    record_request_metrics,
    record_timer_transition,
    status_bucket,
)

pytestmark = pytest.mark.unit


def _requests(endpoint: str, method: str, status: str) -> float:
    value = REGISTRY.get_sample_value(
        "timetracker_http_requests_total",
        {"endpoint": endpoint, "method": method, "status": status},
    )
    return value or 0.0


@pytest.mark.parametrize(
    "path,expected",
    [
        (f"/projects/by-client/{uuid4()}", "/projects/by-client/{id}"),
        (f"/time-entries/{uuid4()}/stop", "/time-entries/{id}/stop"),
        ("/clients/count", "/clients/count"),
        ("/tasks/42", "/tasks/{id}"),
        ("/healthz", "/healthz"),
    ],
)
def test_normalize_endpoint(path, expected):
    assert normalize_endpoint(path) == expected


@pytest.mark.parametrize(
    "code,bucket", [(200, "2xx"), (204, "2xx"), (302, "3xx"), (429, "4xx"), (503, "5xx")]
)
def test_status_bucket(code, bucket):
    assert status_bucket(code) == bucket


def test_record_request_metrics_uses_normalized_labels():
    before = _requests("/clients/{id}", "GET", "4xx")

    record_request_metrics(f"/clients/{uuid4()}", "GET", 404, 0.012)
    record_request_metrics(f"/clients/{uuid4()}", "GET", 404, 0.020)

    assert _requests("/clients/{id}", "GET", "4xx") - before == 2


def test_unknown_timer_transition_is_rejected():
    with pytest.raises(ValueError):
        record_timer_transition("paused")


def test_metrics_response_is_prometheus_text():
    body, content_type = get_metrics_response()

    assert content_type.startswith("text/plain")
    assert b"timetracker_http_requests_total" in body


def test_metrics_endpoint_counts_requests():
    before = _requests("/healthz", "GET", "2xx")

    with TestClient(create_app()) as client:
        client.get("/healthz")
        response = client.get("/metrics")

    assert response.status_code == 200
    assert "timetracker_http_requests_total" in response.text
    assert _requests("/healthz", "GET", "2xx") - before == 1
