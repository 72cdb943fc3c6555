"""Exceptions raised by the flow-rule operator."""

__all__ = (
    "ConnectRetriesExhaustedError",
    "FlowRuleOperatorError",
    "InvalidAddressError",
    "KeyNotFoundError",
    "NotConnectedError",
)


class FlowRuleOperatorError(Exception):
    """Base class for errors raised by the operator."""


class NotConnectedError(FlowRuleOperatorError):
    """A Redis operation was attempted before connecting."""


class ConnectRetriesExhaustedError(FlowRuleOperatorError):
    """Redis did not answer a ping within the allowed attempts."""

    def __init__(
        self, addr: str, attempts: int, last_error: Exception | None
    ) -> None:
        self.addr = addr
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"Redis at {addr} unreachable after {attempts} attempts: "
            f"{last_error}"
        )


class KeyNotFoundError(FlowRuleOperatorError):
    """A queried key does not exist."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Key {key!r} does not exist")


class InvalidAddressError(FlowRuleOperatorError, ValueError):
    """A Redis address is not of the form ``host:port``."""

    def __init__(self, addr: str) -> None:
        self.addr = addr
        super().__init__(f"Invalid Redis address {addr!r}; expected host:port")
