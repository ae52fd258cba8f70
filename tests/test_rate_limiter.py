from security import rate_limiter
from security.rate_limiter import is_allowed


def test_blocks_after_limit_within_window(monkeypatch):
    monkeypatch.setattr(rate_limiter, "RATE_LIMIT_MESSAGES", 2)
    monkeypatch.setattr(rate_limiter, "RATE_LIMIT_WINDOW_SECONDS", 60)
    rate_limiter._user_timestamps.clear()

    assert is_allowed(7, now=1000.0)
    assert is_allowed(7, now=1001.0)
    assert not is_allowed(7, now=1002.0)
    assert is_allowed(8, now=1002.0)


def test_window_expires(monkeypatch):
    monkeypatch.setattr(rate_limiter, "RATE_LIMIT_MESSAGES", 1)
    monkeypatch.setattr(rate_limiter, "RATE_LIMIT_WINDOW_SECONDS", 60)
    rate_limiter._user_timestamps.clear()

    assert is_allowed(7, now=1000.0)
    assert not is_allowed(7, now=1030.0)
    assert is_allowed(7, now=1061.0)
