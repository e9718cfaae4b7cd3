"""
Name: Pagination Tests

Responsibilities:
  - Validate page/limit defaults and offset math
  - Validate rejection of page/limit < 1 and clamping to max_limit
"""

import pytest

from timetracker.crosscutting.pagination import PageRequest, resolve_page

pytestmark = pytest.mark.unit


def test_defaults_apply_when_missing():
    error, page = resolve_page(None, None, default_limit=25)
    assert error is None
    assert page == PageRequest(page=1, limit=25)
    assert page.offset == 0


def test_offset_is_one_based():
    _, page = resolve_page(3, 10)
    assert page.offset == 20


def test_limit_is_clamped_to_max():
    _, page = resolve_page(1, 1_000, max_limit=100)
    assert page.limit == 100


def test_invalid_values_are_reported_together():
    error, page = resolve_page(0, 0)
    assert page is None
    assert error == (
        "page: must be greater than or equal to 1, "
        "limit: must be greater than or equal to 1"
    )
