"""Kopf handlers for operator start-up and cluster authentication."""

__all__ = ("configure_operator", "login")

from typing import Any

import kopf

from flowruleoperator.k8s import create_k8sclient, get_connection_info
from flowruleoperator.startup import get_config, start_operator


@kopf.on.startup()
def configure_operator(
    *,
    settings: kopf.OperatorSettings,
    memo: Any,
    logger: Any,
    **kwargs: Any,
) -> None:
    """Load the configuration into the operator memo and tune kopf."""
    start_operator(settings=settings, memo=memo, logger=logger)


@kopf.on.login()
def login(*, memo: Any, logger: Any, **kwargs: Any) -> kopf.ConnectionInfo:
    """Authenticate with the service account or the kubeconfig file,
    depending on the ``IN_CLUSTER`` setting.
    """
    config = get_config(memo)
    k8s_client = create_k8sclient(
        in_cluster=config.in_cluster, kubeconfig=config.kubeconfig
    )
    info = get_connection_info(k8s_client)
    logger.info(f"Authenticated against {info.server}")
    return info
