"""Tests for the flowruleoperator.redisclient module."""

from __future__ import annotations

import pytest
import redis

from flowruleoperator.config import OperatorConfig
from flowruleoperator.exceptions import (
    ConnectRetriesExhaustedError,
    InvalidAddressError,
    KeyNotFoundError,
    NotConnectedError,
)
from flowruleoperator.redisclient import (
    QueryResult,
    RedisClient,
    RetryPolicy,
    split_address,
)

NO_DELAY = RetryPolicy(max_attempts=3, delay=0)


@pytest.mark.parametrize(
    ("addr", "expected"),
    [
        ("127.0.0.1:6379", ("127.0.0.1", 6379)),
        ("redis.default.svc:6380", ("redis.default.svc", 6380)),
        ("redis", ("redis", 6379)),
        ("[::1]:6390", ("::1", 6390)),
        ("[::1]", ("::1", 6379)),
    ],
)
def test_split_address(addr: str, expected: tuple[str, int]) -> None:
    assert split_address(addr) == expected


@pytest.mark.parametrize(
    "addr", ["redis:notaport", "redis:", ":6379", "[::1]x", "[::1]:", ""]
)
def test_split_address_rejects_malformed(addr: str) -> None:
    with pytest.raises(InvalidAddressError):
        split_address(addr)


def test_connect_with_malformed_address(fake_redis: type) -> None:
    client = RedisClient("redis:notaport", retry_policy=NO_DELAY)

    with pytest.raises(InvalidAddressError):
        client.connect()

    assert not client.connected
    assert fake_redis.instances == []


def test_construct_has_no_connection(fake_redis: type) -> None:
    client = RedisClient("10.0.0.1:6379", password="pw", db=3)

    assert client.addr == "10.0.0.1:6379"
    assert client.password == "pw"
    assert client.db == 3
    assert client.max_retries == 10
    assert client.connected is False
    assert fake_redis.instances == []


def test_from_config() -> None:
    config = OperatorConfig(
        redis_host="redis:6380",
        redis_password="pw",
        redis_db=2,
        redis_max_retries=4,
        connect_max_attempts=0,
        connect_retry_delay=1,
    )
    client = RedisClient.from_config(config)

    assert client.addr == "redis:6380"
    assert client.password == "pw"
    assert client.db == 2
    assert client.max_retries == 4
    assert client.retry_policy == RetryPolicy(max_attempts=0, delay=1)
    assert client.retry_policy.unbounded


def test_connect(fake_redis: type) -> None:
    client = RedisClient("redis:6380", password="", db=4, retry_policy=NO_DELAY)

    assert client.connect() is client
    assert client.connected

    (connection,) = fake_redis.instances
    assert connection.kwargs["host"] == "redis"
    assert connection.kwargs["port"] == 6380
    assert connection.kwargs["password"] is None
    assert connection.kwargs["db"] == 4
    assert connection.kwargs["decode_responses"] is True
    assert connection.pings == 1


def test_connect_retries_until_ping_succeeds(fake_redis: type) -> None:
    fake_redis.ping_failures = 2
    client = RedisClient("redis:6379", retry_policy=NO_DELAY)

    client.connect()

    assert client.connected
    assert fake_redis.instances[0].pings == 3


def test_connect_gives_up_after_max_attempts(fake_redis: type) -> None:
    fake_redis.ping_failures = 5
    client = RedisClient("redis:6379", retry_policy=NO_DELAY)

    with pytest.raises(ConnectRetriesExhaustedError) as excinfo:
        client.connect()

    assert excinfo.value.attempts == 3
    assert excinfo.value.addr == "redis:6379"
    assert isinstance(excinfo.value.last_error, redis.ConnectionError)
    assert not client.connected
    assert fake_redis.instances[0].closed


def test_connect_unbounded_keeps_retrying(fake_redis: type) -> None:
    fake_redis.ping_failures = 25
    client = RedisClient(
        "redis:6379", retry_policy=RetryPolicy(max_attempts=0, delay=0)
    )

    client.connect()

    assert client.connected
    assert fake_redis.instances[0].pings == 26


def test_operations_before_connect_are_rejected(fake_redis: type) -> None:
    client = RedisClient("redis:6379")

    with pytest.raises(NotConnectedError):
        client.set_value("key", "value")
    with pytest.raises(NotConnectedError):
        client.query_value("key")
    with pytest.raises(NotConnectedError):
        client.delete_value("key")


def test_delete_propagates_store_errors(
    fake_redis: type, monkeypatch: pytest.MonkeyPatch
) -> None:
    client = RedisClient("redis:6379", retry_policy=NO_DELAY).connect()

    def fail(*keys: str) -> int:
        raise redis.ResponseError("MOVED 3999 127.0.0.1:6381")

    monkeypatch.setattr(fake_redis.instances[0], "delete", fail)
    with pytest.raises(redis.ResponseError):
        client.delete_value("key")


def test_connect_when_already_connected(fake_redis: type) -> None:
    client = RedisClient("redis:6379", retry_policy=NO_DELAY).connect()

    assert client.connect() is client

    (connection,) = fake_redis.instances
    assert connection.pings == 1
    assert not connection.closed


def test_set_query_delete(fake_redis: type) -> None:
    client = RedisClient("redis:6379", retry_policy=NO_DELAY).connect()

    client.set_value("flow-rules-key", "[]")
    result = client.query_value("flow-rules-key")
    assert result.ok
    assert result.unwrap() == "[]"
    assert str(result) == "Query key 'flow-rules-key', got value '[]'"

    client.delete_value("flow-rules-key")
    result = client.query_value("flow-rules-key")
    assert not result.ok
    assert isinstance(result.error, KeyNotFoundError)
    with pytest.raises(KeyNotFoundError):
        result.unwrap()


def test_query_reports_store_errors(
    fake_redis: type, monkeypatch: pytest.MonkeyPatch
) -> None:
    client = RedisClient("redis:6379", retry_policy=NO_DELAY).connect()

    def fail(key: str) -> str:
        raise redis.ResponseError("WRONGTYPE")

    monkeypatch.setattr(fake_redis.instances[0], "get", fail)
    result = client.query_value("key")

    assert result.value is None
    assert isinstance(result.error, redis.ResponseError)
    assert str(result) == "Query key 'key' failed: WRONGTYPE"


def test_set_propagates_store_errors(
    fake_redis: type, monkeypatch: pytest.MonkeyPatch
) -> None:
    client = RedisClient("redis:6379", retry_policy=NO_DELAY).connect()

    def fail(key: str, value: str) -> bool:
        raise redis.ReadOnlyError("read only replica")

    monkeypatch.setattr(fake_redis.instances[0], "set", fail)
    with pytest.raises(redis.ReadOnlyError):
        client.set_value("key", "value")


def test_disconnect(fake_redis: type) -> None:
    client = RedisClient("redis:6379", retry_policy=NO_DELAY)

    # Never connected: no-op
    client.disconnect()

    client.connect()
    client.disconnect()
    assert not client.connected
    assert fake_redis.instances[0].closed

    # Already disconnected: no-op
    client.disconnect()
    with pytest.raises(NotConnectedError):
        client.query_value("key")


def test_context_manager(fake_redis: type) -> None:
    with RedisClient("redis:6379", retry_policy=NO_DELAY) as client:
        assert client.connected
        client.set_value("key", "value")
    assert not client.connected
    assert fake_redis.instances[0].closed


def test_query_result_exclusive_fields() -> None:
    assert QueryResult(key="k", value="v").ok
    assert not QueryResult(key="k", error=KeyNotFoundError("k")).ok
