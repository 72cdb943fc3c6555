"""Kopf handlers for the flowrule-operator.

Importing this module registers the handlers, so the operator can also be
started with ``kopf run -m flowruleoperator.handlers``.
"""

__all__ = (
    "configure_operator",
    "handle_pod_event",
    "login",
    "push_flow_rules",
)

from flowruleoperator.handlers.lifecycle import configure_operator, login
from flowruleoperator.handlers.podwatcher import (
    handle_pod_event,
    push_flow_rules,
)
