"""Unit tests for bind-credential sanity checks."""

from __future__ import annotations

from contextlib import contextmanager

import pytest

from kafka_service_broker.errors import ClusterError
from kafka_service_broker.plans.base import PlanName
from kafka_service_broker.sanity import (
    EXIT_CONNECT_FAILED,
    EXIT_MISSING_FIELDS,
    EXIT_TOPIC_MISSING,
    check_credentials,
)

CREDS = {"zkPeers": "zk1:2181", "hostname": "kafka1:9092", "topicName": "abc123"}


@pytest.fixture
def opener(cluster):
    seen = []

    def _open(config):
        seen.append(config)
        return cluster.session()

    _open.seen = seen
    return _open


class TestCheckCredentials:
    def test_topic_plan_passes(self, cluster, opener):
        cluster.create_topic("abc123", 1, 1)
        report = check_credentials(CREDS, PlanName.TOPIC, opener)
        assert report.ok
        assert report.problems == []
        assert opener.seen[0].hostnames == "kafka1:9092"

    def test_shared_plan_uses_prefix_key(self, cluster, opener):
        cluster.create_topic("inst", 1, 1)
        creds = {"zkPeers": "zk", "hostname": "k", "topicNamePrefix": "inst"}
        assert check_credentials(creds, PlanName.SHARED, opener).ok

    def test_reports_every_missing_field(self, opener):
        report = check_credentials({"zkPeers": "zk"}, PlanName.TOPIC, opener)
        assert report.exit_code == EXIT_MISSING_FIELDS
        assert report.problems == [
            "'topicName' was not provided",
            "'hostname' was not provided",
        ]
        assert opener.seen == []

    def test_wrong_key_for_plan(self, opener):
        report = check_credentials(CREDS, PlanName.SHARED, opener)
        assert report.exit_code == EXIT_MISSING_FIELDS

    def test_lookup_failure(self):
        @contextmanager
        def _broken(config):
            raise ClusterError("Could not connect to Kafka at kafka1:9092")
            yield

        report = check_credentials(CREDS, PlanName.TOPIC, _broken)
        assert report.exit_code == EXIT_CONNECT_FAILED
        assert "could not be looked up" in report.problems[0]

    def test_missing_topic(self, opener):
        report = check_credentials(CREDS, PlanName.TOPIC, opener)
        assert report.exit_code == EXIT_TOPIC_MISSING
        assert report.problems == ["Topic abc123 does not exist"]

    def test_missing_marker_topic(self, opener):
        creds = {"zkPeers": "zk", "hostname": "k", "topicNamePrefix": "inst"}
        report = check_credentials(creds, PlanName.SHARED, opener)
        assert report.exit_code == EXIT_TOPIC_MISSING
        assert "internally provisions topic inst" in report.problems[0]
