"""
Tests for the per-IP submission cooldown.

Run with: python -m pytest tests/test_rate_limit.py
"""

from logic import rate_limit
from logic.rate_limit import CooldownLimiter


def test_first_post_allowed():
    limiter = CooldownLimiter(20_000)
    assert limiter.hit("1.1.1.1", now=1_000) is True
    assert "1.1.1.1" in limiter


def test_second_post_within_cooldown_blocked():
    limiter = CooldownLimiter(20_000)
    limiter.hit("1.1.1.1", now=1_000)
    assert limiter.hit("1.1.1.1", now=20_999) is False


def test_post_after_cooldown_allowed():
    limiter = CooldownLimiter(20_000)
    limiter.hit("1.1.1.1", now=1_000)
    assert limiter.hit("1.1.1.1", now=21_000) is True


def test_blocked_post_does_not_extend_cooldown():
    limiter = CooldownLimiter(20_000)
    limiter.hit("1.1.1.1", now=0)
    assert limiter.hit("1.1.1.1", now=15_000) is False
    assert limiter.hit("1.1.1.1", now=20_000) is True


def test_ips_are_independent():
    limiter = CooldownLimiter(20_000)
    assert limiter.hit("1.1.1.1", now=0)
    assert limiter.hit("2.2.2.2", now=1)


def test_retry_after():
    limiter = CooldownLimiter(20_000)
    assert limiter.retry_after("1.1.1.1", now=0) == 0
    limiter.hit("1.1.1.1", now=0)
    assert limiter.retry_after("1.1.1.1", now=0) == 20
    assert limiter.retry_after("1.1.1.1", now=10_500) == 10
    assert limiter.retry_after("1.1.1.1", now=19_999) == 1
    assert limiter.retry_after("1.1.1.1", now=20_000) == 0


def test_prune_removes_expired_entries():
    limiter = CooldownLimiter(20_000)
    limiter.hit("old", now=0)
    limiter.hit("new", now=15_000)

    removed = limiter.prune(now=25_000)

    assert removed == 1
    assert "old" not in limiter
    assert "new" in limiter


def test_map_stays_bounded():
    """Entries of IPs that went quiet are dropped during normal traffic."""
    limiter = CooldownLimiter(1_000)
    for i in range(rate_limit.PRUNE_EVERY * 4):
        limiter.hit(f"10.0.{i // 256}.{i % 256}", now=i * 100)
    assert len(limiter) <= rate_limit.PRUNE_EVERY + 10
