"""Tests for the flowrule-operator command-line interface."""

from __future__ import annotations

from typing import Any

import kopf
import pytest
from typer.testing import CliRunner

from flowruleoperator.cli import app
from flowruleoperator.version import get_version

runner = CliRunner()


def test_version() -> None:
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert result.output.strip() == get_version()


def test_run_starts_kopf(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[dict[str, Any]] = []
    monkeypatch.setattr(kopf, "configure", lambda **kwargs: None)
    monkeypatch.setattr(kopf, "run", lambda **kwargs: calls.append(kwargs))
    monkeypatch.setenv("IN_CLUSTER", "false")
    monkeypatch.setenv("WATCH_NAMESPACE", "ads")

    result = runner.invoke(app, ["run", "--kubeconfig", "/tmp/kubeconfig"])

    assert result.exit_code == 0, result.output
    (kwargs,) = calls
    assert kwargs["standalone"] is True
    assert kwargs["namespaces"] == ["ads"]
    config = kwargs["memo"].config
    assert config.in_cluster is False
    assert config.kubeconfig == "/tmp/kubeconfig"
    assert config.namespace == "ads"
