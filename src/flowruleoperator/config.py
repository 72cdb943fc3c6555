"""Operator configuration read from the process environment."""

__all__ = (
    "OperatorConfig",
    "get_env_bool",
    "get_env_int",
    "get_env_str",
    "load_config",
)

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from flowruleoperator.rules import DEFAULT_FLOW_RULES, DEFAULT_FLOW_RULES_KEY


def get_env_str(
    key: str, fallback: str, environ: Mapping[str, str] | None = None
) -> str:
    """Get an environment variable as a string.

    An empty string counts as a set value; only an absent variable yields
    the fallback.
    """
    if environ is None:
        environ = os.environ
    return environ.get(key, fallback)


def get_env_bool(
    key: str, fallback: bool, environ: Mapping[str, str] | None = None
) -> bool:
    """Get an environment variable as a boolean.

    Only the exact literal ``"true"`` is true. Any other value that is
    present, including ``"True"`` or ``"1"``, is false.
    """
    if environ is None:
        environ = os.environ
    if key not in environ:
        return fallback
    return environ[key] == "true"


def get_env_int(
    key: str, fallback: int, environ: Mapping[str, str] | None = None
) -> int:
    """Get an environment variable as an integer.

    Parameters
    ----------
    key : `str`
        Name of the environment variable.
    fallback : `int`
        Value returned when the variable is absent or is not a base-10
        integer literal.
    environ : `Mapping`, optional
        Environment to read from. Defaults to `os.environ`.

    Returns
    -------
    value : `int`
        The parsed value, or ``fallback``.
    """
    if environ is None:
        environ = os.environ
    value = environ.get(key)
    if value is None:
        return fallback
    try:
        return int(value, 10)
    except ValueError:
        return fallback


@dataclass(frozen=True)
class OperatorConfig:
    """Settings for the operator, constructed once at startup."""

    in_cluster: bool = True
    """Whether to authenticate with the pod's service account."""

    kubeconfig: str | None = None
    """Path to a kubeconfig file, used when not running in a cluster."""

    redis_host: str = "127.0.0.1:6379"
    """Redis address as ``host:port``."""

    redis_password: str = ""
    """Redis password; empty for none."""

    redis_db: int = 4
    """Logical Redis database index."""

    redis_max_retries: int = 10
    """Retries for individual Redis commands."""

    connect_max_attempts: int = 10
    """Ping attempts before giving up on a connection; 0 retries forever."""

    connect_retry_delay: int = 5
    """Whole seconds to wait between ping attempts."""

    namespace: str = "default"
    """Namespace of the watched pods."""

    label_selector: str = "app=ads-redis-statistic"
    """Label selector of the watched pods."""

    flow_rules_key: str = DEFAULT_FLOW_RULES_KEY
    """Redis key the flow rules are written under."""

    flow_rules: str = DEFAULT_FLOW_RULES
    """Flow-rule payload, written verbatim."""


def default_kubeconfig() -> str:
    """Return the conventional kubeconfig location, or an empty string if
    there is no home directory.
    """
    try:
        return str(Path.home() / ".kube" / "config")
    except RuntimeError:
        return ""


def load_config(
    environ: Mapping[str, str] | None = None,
    *,
    kubeconfig: str | None = None,
) -> OperatorConfig:
    """Build the operator configuration from the environment.

    Parameters
    ----------
    environ : `Mapping`, optional
        Environment to read from. Defaults to `os.environ`.
    kubeconfig : `str`, optional
        Path to a kubeconfig file, usually given on the command line. When
        not running in a cluster and no path is given, ``~/.kube/config``
        is used.

    Returns
    -------
    config : `OperatorConfig`
        The configuration.
    """
    in_cluster = get_env_bool("IN_CLUSTER", True, environ)
    if kubeconfig is None and not in_cluster:
        kubeconfig = default_kubeconfig()

    return OperatorConfig(
        in_cluster=in_cluster,
        kubeconfig=kubeconfig,
        redis_host=get_env_str("REDIS_HOST", "127.0.0.1:6379", environ),
        redis_password=get_env_str("REDIS_PASSWORD", "", environ),
        redis_db=get_env_int("REDIS_DB", 4, environ),
        redis_max_retries=get_env_int("REDIS_MAX_RETRIES", 10, environ),
        connect_max_attempts=get_env_int(
            "REDIS_CONNECT_MAX_ATTEMPTS", 10, environ
        ),
        connect_retry_delay=get_env_int(
            "REDIS_CONNECT_RETRY_DELAY", 5, environ
        ),
        namespace=get_env_str("WATCH_NAMESPACE", "default", environ),
        label_selector=get_env_str(
            "WATCH_LABEL_SELECTOR", "app=ads-redis-statistic", environ
        ),
        flow_rules_key=get_env_str(
            "FLOW_RULES_KEY", DEFAULT_FLOW_RULES_KEY, environ
        ),
        flow_rules=get_env_str("FLOW_RULES", DEFAULT_FLOW_RULES, environ),
    )
