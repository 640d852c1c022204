"""Tests for the rolling-window rate limiter."""

import pytest

from app.core.errors import RateLimitedError
from app.core.security.rate_limit import RateLimiter

from tests.conftest import make_settings


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def limiter(clock) -> RateLimiter:
    return RateLimiter(make_settings(RATE_LIMIT_MAX=2, RATE_LIMIT_WINDOW_SEC=60), clock=clock)


class TestRateLimiter:
    def test_blocks_after_max_hits(self, limiter):
        limiter.hit("1.1.1.1")
        limiter.hit("1.1.1.1")
        with pytest.raises(RateLimitedError) as exc:
            limiter.hit("1.1.1.1")
        assert exc.value.status_code == 429
        assert exc.value.message == "Too many upload attempts, please try again later"

    def test_keys_are_independent(self, limiter):
        limiter.hit("a")
        limiter.hit("a")
        limiter.hit("b")
        limiter.hit("b")
        with pytest.raises(RateLimitedError):
            limiter.hit("a")
        with pytest.raises(RateLimitedError):
            limiter.hit("b")

    def test_window_rolls(self, limiter, clock):
        limiter.hit("a")
        clock.now += 30
        limiter.hit("a")
        clock.now += 31
        # first hit is now outside the window
        limiter.hit("a")
        with pytest.raises(RateLimitedError):
            limiter.hit("a")

    def test_expired_addresses_are_evicted(self, limiter, clock):
        for n in range(500):
            limiter.hit(f"10.0.{n // 256}.{n % 256}")
        assert len(limiter._hits) == 500

        clock.now += 10_000
        limiter.hit("192.168.0.1")
        assert list(limiter._hits) == ["192.168.0.1"]

    def test_live_addresses_survive_sweep(self, limiter, clock):
        limiter.hit("old")
        clock.now += 50
        limiter.hit("recent")
        clock.now += 20
        limiter.hit("new")
        assert set(limiter._hits) == {"recent", "new"}
