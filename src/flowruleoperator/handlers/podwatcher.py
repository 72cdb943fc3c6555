"""Kopf handler that reacts to watched pods by publishing the flow rules
to Redis.
"""

__all__ = (
    "dispatcher",
    "handle_pod_event",
    "is_watched_pod",
    "push_flow_rules",
)

from collections.abc import Mapping
from typing import Any

import kopf
import redis

from flowruleoperator.config import OperatorConfig
from flowruleoperator.events import EventDispatcher, PodEvent, PodEventKind
from flowruleoperator.exceptions import (
    ConnectRetriesExhaustedError,
    InvalidAddressError,
)
from flowruleoperator.k8s import matches_label_selector
from flowruleoperator.redisclient import RedisClient
from flowruleoperator.startup import get_config

dispatcher = EventDispatcher()
"""Handlers for typed pod events, keyed by event kind."""


def is_watched_pod(
    *,
    namespace: str | None,
    labels: Mapping[str, str],
    memo: Any,
    **kwargs: Any,
) -> bool:
    """Filter pods by the configured namespace and label selector."""
    config = get_config(memo)
    if namespace != config.namespace:
        return False
    return matches_label_selector(labels, config.label_selector)


@kopf.on.event("v1", "pods", when=is_watched_pod)
def handle_pod_event(
    *,
    event: dict[str, Any],
    memo: Any,
    logger: Any,
    **kwargs: Any,
) -> None:
    """Handle a watch event for a pod matching the label selector.

    Parameters
    ----------
    event : `dict`
        The raw watch event, with ``type`` (such as "ADDED", "MODIFIED" or
        "DELETED") and ``object`` (the Pod).
    memo : `kopf.Memo`
        The operator memo holding the configuration.
    logger : `Any`
        A logger instance for logging messages.
    kwargs : `Any`
        Additional keyword arguments provided by kopf.
    """
    try:
        pod_event = PodEvent.from_raw(event)
    except ValueError:
        logger.warning(f"Ignoring pod event of type {event.get('type')!r}")
        return

    dispatcher.dispatch(pod_event, config=get_config(memo), logger=logger)


@dispatcher.on(PodEventKind.ADDED)
def push_flow_rules(
    event: PodEvent,
    *,
    config: OperatorConfig,
    logger: Any,
) -> None:
    """Write the flow rules to Redis, read them back and disconnect.

    Every added pod repeats the full write. Connection and store failures
    are logged and do not stop the operator.

    Parameters
    ----------
    event : `PodEvent`
        The event of the pod that appeared.
    config : `OperatorConfig`
        The operator configuration.
    logger : `Any`
        A logger instance for logging messages.
    """
    logger.info(f"Pod {event.name} started; publishing flow rules")

    client = RedisClient.from_config(config, logger=logger)
    try:
        client.connect()
    except (ConnectRetriesExhaustedError, InvalidAddressError) as e:
        logger.error(f"Flow rules not published: {e}")
        return

    try:
        client.set_value(config.flow_rules_key, config.flow_rules)
        result = client.query_value(config.flow_rules_key)
        if result.ok:
            logger.info(str(result))
        else:
            logger.error(str(result))
    except redis.RedisError:
        logger.exception("Failed to write the flow rules to Redis")
    finally:
        client.disconnect()
