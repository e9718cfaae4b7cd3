"""
Name: Rate Limit (TokenBucket) Tests

Responsibilities:
  - Validate capacity per window and continuous refill
  - Validate independent keys and LRU eviction
  - Validate per-policy limiter registry built from Settings
"""

import pytest

from timetracker.crosscutting.rate_limit import (
    RateLimitPolicy,
    TokenBucket,
    get_rate_limiter,
    reset_rate_limiters,
)

pytestmark = pytest.mark.unit


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


def test_capacity_then_denied_with_retry_after(clock):
    bucket = TokenBucket(3, 3600, clock=clock)

    assert [bucket.consume("ip:1")[0] for _ in range(3)] == [True, True, True]
    allowed, retry_after = bucket.consume("ip:1")

    assert allowed is False
    assert retry_after == pytest.approx(1200.0)
    assert bucket.remaining("ip:1") == 0


def test_refill_is_continuous(clock):
    bucket = TokenBucket(3, 3600, clock=clock)
    for _ in range(3):
        bucket.consume("ip:1")

    clock.now += 1201
    assert bucket.consume("ip:1")[0] is True
    assert bucket.consume("ip:1")[0] is False

    clock.now += 10 * 3600
    assert bucket.remaining("ip:1") == 3


def test_keys_are_independent(clock):
    bucket = TokenBucket(1, 60, clock=clock)
    assert bucket.consume("ip:1")[0] is True
    assert bucket.consume("ip:1")[0] is False
    assert bucket.consume("ip:2")[0] is True
    assert bucket.remaining("ip:3") == 1


def test_least_recent_key_is_evicted(clock):
    bucket = TokenBucket(1, 60, max_keys=2, clock=clock)
    bucket.consume("ip:1")
    bucket.consume("ip:2")
    bucket.consume("ip:3")

    # R: ip:1 fue desalojada y vuelve con bucket lleno.
    assert bucket.consume("ip:1")[0] is True
    assert bucket.consume("ip:3")[0] is False


@pytest.mark.parametrize("capacity,window", [(0, 60), (5, 0)])
def test_invalid_configuration(capacity, window):
    with pytest.raises(ValueError):
        TokenBucket(capacity, window)


def test_registry_uses_settings_per_policy():
    reset_rate_limiters()
    try:
        auth = get_rate_limiter(RateLimitPolicy.AUTH)
        email = get_rate_limiter(RateLimitPolicy.EMAIL)

        assert auth.capacity == 10
        assert auth.refill_per_second == pytest.approx(10 / 900)
        assert email.capacity == 3
        assert get_rate_limiter(RateLimitPolicy.AUTH) is auth
    finally:
        reset_rate_limiters()
