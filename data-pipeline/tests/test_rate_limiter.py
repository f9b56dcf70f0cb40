"""Tests for the minimum-interval rate limiter."""

import pytest
from prescriber_map.utils.rate_limiter import RateLimiter


class FakeClock:
    def __init__(self, start=100.0):
        self.now = start
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


def test_first_call_never_waits(clock):
    limiter = RateLimiter(1.1, clock=clock, sleep=clock.sleep)
    assert limiter.wait() == 0.0
    assert clock.sleeps == []
    assert limiter.call_count == 1


def test_back_to_back_calls_are_spaced(clock):
    limiter = RateLimiter(1.1, clock=clock, sleep=clock.sleep)
    limiter.wait()
    clock.now += 0.4
    waited = limiter.wait()
    assert waited == pytest.approx(0.7)
    assert clock.sleeps == [pytest.approx(0.7)]


def test_no_wait_after_interval_elapsed(clock):
    limiter = RateLimiter(1.1, clock=clock, sleep=clock.sleep)
    limiter.wait()
    clock.now += 2.0
    assert limiter.wait() == 0.0
    assert clock.sleeps == []


def test_consecutive_requests_at_least_interval_apart(clock):
    limiter = RateLimiter(1.1, clock=clock, sleep=clock.sleep)
    stamps = []
    for _ in range(5):
        limiter.wait()
        stamps.append(clock.now)
    gaps = [b - a for a, b in zip(stamps, stamps[1:])]
    assert all(gap >= 1.1 - 1e-9 for gap in gaps)


def test_reset_lets_next_call_through(clock):
    limiter = RateLimiter(1.1, clock=clock, sleep=clock.sleep)
    limiter.wait()
    limiter.reset()
    assert limiter.wait() == 0.0
    assert limiter.call_count == 1
