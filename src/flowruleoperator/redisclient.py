"""A single-use Redis connection for publishing flow rules."""

from __future__ import annotations

__all__ = ("QueryResult", "RedisClient", "RetryPolicy", "split_address")

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import redis
import structlog
from redis.backoff import NoBackoff
from redis.retry import Retry

from flowruleoperator.exceptions import (
    ConnectRetriesExhaustedError,
    InvalidAddressError,
    KeyNotFoundError,
    NotConnectedError,
)

if TYPE_CHECKING:
    from flowruleoperator.config import OperatorConfig

DEFAULT_PORT = 6379


@dataclass(frozen=True)
class RetryPolicy:
    """How `RedisClient.connect` retries an unanswered ping."""

    max_attempts: int = 10
    """Number of pings before giving up. Zero or less retries forever."""

    delay: float = 5.0
    """Seconds to wait after a failed ping."""

    @property
    def unbounded(self) -> bool:
        return self.max_attempts <= 0


@dataclass(frozen=True)
class QueryResult:
    """The outcome of `RedisClient.query_value`.

    Exactly one of ``value`` and ``error`` is set.
    """

    key: str
    value: str | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> str:
        """Return the value, or raise the error of a failed query."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    def __str__(self) -> str:
        if self.error is not None:
            return f"Query key '{self.key}' failed: {self.error}"
        return f"Query key '{self.key}', got value '{self.value}'"


def split_address(addr: str) -> tuple[str, int]:
    """Split a ``host:port`` address, defaulting to the standard Redis port.

    Bracketed IPv6 hosts (``[::1]:6379``) are supported.

    Raises
    ------
    InvalidAddressError
        If the host is empty or the port is not a number.
    """
    if addr.startswith("["):
        host, _, rest = addr[1:].partition("]")
        sep, port = rest[:1], rest[1:]
        if rest and sep != ":":
            raise InvalidAddressError(addr)
    else:
        host, sep, port = addr.rpartition(":")
        if not sep:
            host, port = addr, ""
    if not host or (sep and not port.isdigit()):
        raise InvalidAddressError(addr)
    return host, int(port) if port else DEFAULT_PORT


class RedisClient:
    """Owns one connection to Redis.

    Constructing the client performs no network activity; call `connect`
    (or use the client as a context manager) before reading or writing.

    Parameters
    ----------
    addr : `str`
        Redis address as ``host:port``.
    password : `str`, optional
        Redis password. An empty string means no authentication.
    db : `int`, optional
        Logical database selected after connecting.
    max_retries : `int`, optional
        Retries for individual commands that fail on connection errors.
    retry_policy : `RetryPolicy`, optional
        Ping retry policy used by `connect`.
    logger : optional
        Logger to use. If not provided, a structlog logger is used.
    """

    def __init__(
        self,
        addr: str,
        password: str = "",
        db: int = 0,
        max_retries: int = 10,
        retry_policy: RetryPolicy | None = None,
        logger: Any | None = None,
    ) -> None:
        self.addr = addr
        self.password = password
        self.db = db
        self.max_retries = max_retries
        self.retry_policy = retry_policy or RetryPolicy()
        self._logger = logger or structlog.getLogger(__name__)
        self._connection: redis.Redis | None = None

    @classmethod
    def from_config(
        cls, config: OperatorConfig, logger: Any | None = None
    ) -> RedisClient:
        """Create a client from the operator configuration."""
        return cls(
            addr=config.redis_host,
            password=config.redis_password,
            db=config.redis_db,
            max_retries=config.redis_max_retries,
            retry_policy=RetryPolicy(
                max_attempts=config.connect_max_attempts,
                delay=config.connect_retry_delay,
            ),
            logger=logger,
        )

    @property
    def connected(self) -> bool:
        return self._connection is not None

    def connect(self) -> RedisClient:
        """Open the connection and wait until Redis answers a ping.

        Does nothing if the client is already connected.

        Returns
        -------
        client : `RedisClient`
            This client, now connected.

        Raises
        ------
        ConnectRetriesExhaustedError
            If the retry policy is bounded and no ping succeeded.
        InvalidAddressError
            If the address cannot be parsed.
        """
        if self._connection is not None:
            return self

        host, port = split_address(self.addr)
        connection = redis.Redis(
            host=host,
            port=port,
            password=self.password or None,
            db=self.db,
            decode_responses=True,
            retry=Retry(NoBackoff(), self.max_retries),
            retry_on_error=[redis.ConnectionError, redis.TimeoutError],
        )

        policy = self.retry_policy
        attempt = 0
        while True:
            attempt += 1
            try:
                if connection.ping():
                    self._connection = connection
                    self._logger.info(f"Connected to Redis at {self.addr}")
                    return self
                last_error: Exception | None = None
                self._logger.warning(
                    f"Redis at {self.addr} did not answer the ping"
                )
            except redis.RedisError as e:
                last_error = e
                self._logger.warning(f"Redis connection failed: {e}")

            if not policy.unbounded and attempt >= policy.max_attempts:
                connection.close()
                raise ConnectRetriesExhaustedError(
                    self.addr, attempt, last_error
                )
            self._logger.info(f"Retry in {policy.delay} seconds...")
            time.sleep(policy.delay)

    def disconnect(self) -> None:
        """Close the connection; does nothing if it is not open."""
        if self._connection is None:
            return
        connection, self._connection = self._connection, None
        connection.close()

    def __enter__(self) -> RedisClient:
        return self.connect()

    def __exit__(self, *exc_info: object) -> None:
        self.disconnect()

    def _require_connection(self) -> redis.Redis:
        if self._connection is None:
            raise NotConnectedError(
                f"Not connected to Redis at {self.addr}; call connect() first"
            )
        return self._connection

    def set_value(self, key: str, value: str) -> None:
        """Write ``value`` under ``key`` with no expiration."""
        self._require_connection().set(key, value)

    def query_value(self, key: str) -> QueryResult:
        """Read ``key``.

        Store errors and missing keys are reported in the returned
        `QueryResult` rather than raised.
        """
        connection = self._require_connection()
        try:
            value = connection.get(key)
        except redis.RedisError as e:
            return QueryResult(key=key, error=e)
        if value is None:
            return QueryResult(key=key, error=KeyNotFoundError(key))
        return QueryResult(key=key, value=value)

    def delete_value(self, key: str) -> None:
        """Remove ``key``."""
        self._require_connection().delete(key)
