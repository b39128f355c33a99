"""CLI tests using typer's CliRunner."""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from kafka_service_broker import __version__
from kafka_service_broker.cli import app
from kafka_service_broker.observability.health import (
    BrokerHealth,
    ComponentHealth,
    Status,
)
from kafka_service_broker.plans.base import PlanName
from kafka_service_broker.sanity import EXIT_MISSING_FIELDS, SanityReport

runner = CliRunner()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("BROKER_CATALOG_JSON", "BROKER_SERVICE_NAME", "KAFKA_HOSTNAMES"):
        monkeypatch.delenv(name, raising=False)


class TestVersion:
    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestValidate:
    def test_builtin_defaults_are_valid(self):
        result = runner.invoke(app, ["validate"])
        assert result.exit_code == 0
        assert "Valid" in result.output
        assert "topic, shared" in result.output

    def test_missing_config_file(self, tmp_path):
        result = runner.invoke(
            app, ["validate", "--config", str(tmp_path / "missing.yaml")]
        )
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_invalid_config(self, tmp_path):
        path = tmp_path / "broker.yaml"
        path.write_text("kafka:\n  replication_factor: 0\n")
        result = runner.invoke(app, ["validate", "--config", str(path)])
        assert result.exit_code == 1
        assert "Invalid config" in result.output


class TestCatalog:
    def test_lists_plans(self):
        result = runner.invoke(app, ["catalog"])
        assert result.exit_code == 0
        assert "topic" in result.output
        assert "shared" in result.output


class TestHealth:
    def test_unhealthy_exits_nonzero(self):
        down = BrokerHealth(
            components=[
                ComponentHealth(name="kafka", status=Status.UNHEALTHY, detail="down")
            ]
        )
        with patch("kafka_service_broker.cli.check_broker_health", return_value=down):
            result = runner.invoke(app, ["health"])
        assert result.exit_code == 1
        assert "kafka" in result.output

    def test_healthy(self):
        up = BrokerHealth(components=[ComponentHealth(name="kafka", status=Status.HEALTHY)])
        with patch("kafka_service_broker.cli.check_broker_health", return_value=up):
            result = runner.invoke(app, ["health"])
        assert result.exit_code == 0


class TestSanityTest:
    def test_passing_credentials(self):
        creds = {"zkPeers": "zk", "hostname": "k", "topicName": "abc"}
        with patch(
            "kafka_service_broker.sanity.check_credentials",
            return_value=SanityReport(plan=PlanName.TOPIC),
        ) as check:
            result = runner.invoke(app, ["sanity-test", "topic"], input=json.dumps(creds))
        assert result.exit_code == 0
        check.assert_called_once_with(creds, PlanName.TOPIC)

    def test_missing_fields_exit_code(self):
        result = runner.invoke(
            app, ["sanity-test", "shared"], input=json.dumps({"zkPeers": "zk"})
        )
        assert result.exit_code == EXIT_MISSING_FIELDS
        assert "topicNamePrefix" in result.output

    def test_unparseable_input(self):
        result = runner.invoke(app, ["sanity-test", "topic"], input="{nope")
        assert result.exit_code == 1
        assert "Failed to unmarshal credentials" in result.output

    def test_unknown_plan(self):
        result = runner.invoke(app, ["sanity-test", "gold"], input="{}")
        assert result.exit_code == 2
