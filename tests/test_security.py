"""
Tests for the waiting list rate limiter and client IP lookup
"""

from types import SimpleNamespace

from theater_admin.utils.security import RateLimiter, get_client_ip

class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

def test_limit_per_window():
    clock = FakeClock()
    limiter = RateLimiter(limit=2, clock=clock)

    assert limiter.allow("10.0.0.1")
    assert limiter.allow("10.0.0.1")
    assert not limiter.allow("10.0.0.1")
    # other clients have their own budget
    assert limiter.allow("10.0.0.2")

    clock.now += 61
    assert limiter.allow("10.0.0.1")

def test_refused_requests_do_not_count():
    clock = FakeClock()
    limiter = RateLimiter(limit=1, clock=clock)

    limiter.allow("10.0.0.1")
    clock.now += 30
    assert not limiter.allow("10.0.0.1")
    clock.now += 31
    assert limiter.allow("10.0.0.1")

def test_returning_client_drops_expired_entries():
    clock = FakeClock()
    limiter = RateLimiter(limit=5, clock=clock)

    limiter.allow("10.0.0.1")
    clock.now += 61
    limiter.allow("10.0.0.1")

    assert list(limiter.requests["10.0.0.1"]) == [clock.now]

def test_stale_clients_are_evicted():
    clock = FakeClock()
    limiter = RateLimiter(limit=5, clock=clock)
    for n in range(100):
        limiter.allow(f"10.0.1.{n}")
    assert len(limiter.requests) == 100

    clock.now += 61
    limiter.allow("10.0.0.1")

    assert list(limiter.requests) == ["10.0.0.1"]

def test_client_ip_prefers_proxy_headers():
    request = SimpleNamespace(
        headers={"X-Forwarded-For": "203.0.113.7, 10.0.0.1"},
        client=SimpleNamespace(host="10.0.0.1"),
    )
    assert get_client_ip(request) == "203.0.113.7"

    request.headers = {"X-Real-IP": "203.0.113.8"}
    assert get_client_ip(request) == "203.0.113.8"

    request.headers = {}
    assert get_client_ip(request) == "10.0.0.1"
