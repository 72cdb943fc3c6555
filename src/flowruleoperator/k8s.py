"""Helpers for interacting with Kubernetes APIs."""

__all__ = (
    "LabelRequirement",
    "create_k8sclient",
    "get_connection_info",
    "matches_label_selector",
    "parse_label_selector",
)

from collections.abc import Mapping
from typing import Any, NamedTuple

import kopf
import kubernetes


def create_k8sclient(
    *, in_cluster: bool = True, kubeconfig: str | None = None
) -> kubernetes.client:
    """Get a Kubernetes client configured with available cluster
    authentication.

    When running in a cluster, the pod's service account is used, falling
    back to the kubeconfig file if in-cluster configuration is not
    available. Otherwise the kubeconfig file is used, which is appropriate
    for development.

    Parameters
    ----------
    in_cluster : `bool`
        Whether to try in-cluster authentication first.
    kubeconfig : `str`, optional
        Path to the kubeconfig file. The client library's default location
        is used if not set.
    """
    if in_cluster:
        try:
            kubernetes.config.load_incluster_config()
        except kubernetes.config.ConfigException:
            kubernetes.config.load_kube_config(config_file=kubeconfig or None)
    else:
        kubernetes.config.load_kube_config(config_file=kubeconfig or None)
    return kubernetes.client


def get_connection_info(k8s_client: Any) -> kopf.ConnectionInfo:
    """Convert the loaded client configuration into kopf credentials.

    Parameters
    ----------
    k8s_client
        A Kubernetes client (see `create_k8sclient`).

    Returns
    -------
    info : `kopf.ConnectionInfo`
        Credentials for kopf's API calls.
    """
    config = k8s_client.Configuration.get_default_copy()

    header = config.get_api_key_with_prefix(
        "authorization"
    ) or config.get_api_key_with_prefix("BearerToken")
    parts = header.split(" ", 1) if header else []
    if len(parts) == 2:
        scheme, token = parts
    elif len(parts) == 1:
        scheme, token = None, parts[0]
    else:
        scheme, token = None, None

    return kopf.ConnectionInfo(
        server=config.host,
        ca_path=config.ssl_ca_cert,
        insecure=not config.verify_ssl,
        username=config.username or None,
        password=config.password or None,
        scheme=scheme,
        token=token,
        certificate_path=config.cert_file,
        private_key_path=config.key_file,
        priority=1,
    )


class LabelRequirement(NamedTuple):
    """One term of an equality-based label selector."""

    key: str
    operator: str
    """One of ``=``, ``!=``, ``exists`` or ``!exists``."""

    value: str | None = None

    def matches(self, labels: Mapping[str, str]) -> bool:
        if self.operator == "=":
            return labels.get(self.key) == self.value
        if self.operator == "!=":
            return labels.get(self.key) != self.value
        if self.operator == "exists":
            return self.key in labels
        return self.key not in labels


def parse_label_selector(selector: str) -> list[LabelRequirement]:
    """Parse an equality-based label selector such as
    ``app=web,tier!=cache``.

    Supported terms are ``key=value``, ``key==value``, ``key!=value``,
    ``key`` and ``!key``. An empty selector matches everything.

    Raises
    ------
    ValueError
        If the selector uses set-based terms (``in``, ``notin``) or a term
        has no key.
    """
    requirements = []
    for term in selector.split(","):
        term = term.strip()
        if not term:
            continue
        if "(" in term or ")" in term:
            raise ValueError(
                f"Set-based label selector terms are not supported: {term!r}"
            )
        if "!=" in term:
            key, value = term.split("!=", 1)
            requirement = LabelRequirement(key.strip(), "!=", value.strip())
        elif "==" in term:
            key, value = term.split("==", 1)
            requirement = LabelRequirement(key.strip(), "=", value.strip())
        elif "=" in term:
            key, value = term.split("=", 1)
            requirement = LabelRequirement(key.strip(), "=", value.strip())
        elif term.startswith("!"):
            requirement = LabelRequirement(term[1:].strip(), "!exists")
        else:
            requirement = LabelRequirement(term, "exists")
        if not requirement.key or " " in requirement.key:
            raise ValueError(f"Invalid label selector term: {term!r}")
        requirements.append(requirement)
    return requirements


def matches_label_selector(labels: Mapping[str, str], selector: str) -> bool:
    """Check whether a set of labels satisfies a label selector."""
    return all(
        requirement.matches(labels)
        for requirement in parse_label_selector(selector)
    )
