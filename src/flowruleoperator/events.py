"""Typed pod events and their dispatch to handlers."""

from __future__ import annotations

__all__ = ("EventDispatcher", "PodEvent", "PodEventKind")

import enum
from collections import defaultdict
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any


class PodEventKind(enum.Enum):
    """Lifecycle transitions of a watched pod."""

    ADDED = "added"
    UPDATED = "updated"
    DELETED = "deleted"

    @classmethod
    def from_watch_type(cls, watch_type: str | None) -> PodEventKind:
        """Map a Kubernetes watch event type to a kind.

        Objects delivered by the initial listing carry no type and count
        as added, so pods that were already running are handled too.
        """
        if watch_type is None or watch_type == "ADDED":
            return cls.ADDED
        if watch_type == "MODIFIED":
            return cls.UPDATED
        if watch_type == "DELETED":
            return cls.DELETED
        raise ValueError(f"Unknown watch event type: {watch_type!r}")


@dataclass(frozen=True)
class PodEvent:
    """A lifecycle event of one pod."""

    kind: PodEventKind
    name: str
    namespace: str
    uid: str = ""
    labels: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_raw(cls, event: Mapping[str, Any]) -> PodEvent:
        """Build an event from a raw watch event (``type`` and ``object``)."""
        metadata = event["object"].get("metadata", {})
        return cls(
            kind=PodEventKind.from_watch_type(event.get("type")),
            name=metadata.get("name", ""),
            namespace=metadata.get("namespace", ""),
            uid=metadata.get("uid", ""),
            labels=dict(metadata.get("labels") or {}),
        )


PodEventHandler = Callable[..., Any]


class EventDispatcher:
    """Route pod events to the handlers registered for their kind."""

    def __init__(self) -> None:
        self._handlers: dict[PodEventKind, list[PodEventHandler]] = (
            defaultdict(list)
        )

    def register(self, kind: PodEventKind, handler: PodEventHandler) -> None:
        self._handlers[kind].append(handler)

    def on(
        self, kind: PodEventKind
    ) -> Callable[[PodEventHandler], PodEventHandler]:
        """Register the decorated function as a handler for ``kind``."""

        def decorator(handler: PodEventHandler) -> PodEventHandler:
            self.register(kind, handler)
            return handler

        return decorator

    def handlers(self, kind: PodEventKind) -> list[PodEventHandler]:
        return list(self._handlers.get(kind, ()))

    def dispatch(self, event: PodEvent, **kwargs: Any) -> int:
        """Call each handler for the event's kind, in registration order.

        Handlers are called as ``handler(event, **kwargs)``.

        Returns
        -------
        count : `int`
            The number of handlers called.
        """
        handlers = self.handlers(event.kind)
        for handler in handlers:
            handler(event, **kwargs)
        return len(handlers)
