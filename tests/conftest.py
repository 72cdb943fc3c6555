"""Shared fixtures for the flowruleoperator tests."""

from __future__ import annotations

from typing import Any

import pytest
import redis


class FakeRedis:
    """In-memory stand-in for `redis.Redis`.

    ``ping_failures`` pings fail with a connection error before pings start
    succeeding.
    """

    ping_failures = 0
    instances: list[FakeRedis] = []

    def __init__(self, **kwargs: Any) -> None:
        self.kwargs = kwargs
        self.data: dict[str, str] = {}
        self.pings = 0
        self.closed = False
        self.instances.append(self)

    def ping(self) -> bool:
        self.pings += 1
        if self.pings <= self.ping_failures:
            raise redis.ConnectionError("Connection refused")
        return True

    def set(self, key: str, value: str) -> bool:
        self.data[key] = value
        return True

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def delete(self, *keys: str) -> int:
        return sum(1 for key in keys if self.data.pop(key, None) is not None)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_redis(monkeypatch: pytest.MonkeyPatch) -> type[FakeRedis]:
    """Replace `redis.Redis` with `FakeRedis` and reset its state."""

    class Fake(FakeRedis):
        ping_failures = 0
        instances: list[FakeRedis] = []

    monkeypatch.setattr(redis, "Redis", Fake)
    return Fake
