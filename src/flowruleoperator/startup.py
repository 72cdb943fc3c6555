"""Code intended to run on start-up, before running any handlers."""

__all__ = ("get_config", "start_operator")

from typing import Any

import kopf
import structlog

from flowruleoperator.config import OperatorConfig, load_config


def get_config(memo: Any) -> OperatorConfig:
    """Get the operator configuration stored in a kopf memo.

    The configuration is loaded from the environment and stored in the memo
    if it is not there yet, which is the case when the operator is started
    with ``kopf run`` rather than the ``flowrule-operator`` command.
    """
    config = memo.get("config")
    if config is None:
        config = load_config()
        memo["config"] = config
    return config


def start_operator(
    *, settings: kopf.OperatorSettings, memo: Any, logger: Any
) -> OperatorConfig:
    """Start up the operator: load the configuration and tune kopf.

    Events are processed one at a time, each to completion, so that the
    writes to Redis happen in the order the pods appear.
    """
    if logger is None:
        logger = structlog.getLogger(__name__)

    config = get_config(memo)

    settings.batching.worker_limit = 1
    settings.execution.max_workers = 1
    settings.posting.enabled = False

    logger.info(
        f"Watching pods in namespace {config.namespace} with selector "
        f"{config.label_selector}; flow rules go to Redis at "
        f"{config.redis_host} db {config.redis_db} "
        f"under {config.flow_rules_key}"
    )
    return config
