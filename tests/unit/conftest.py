"""Shared fixtures: an in-memory Kafka cluster and broker wiring."""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager

import pytest

from kafka_service_broker.broker import ServiceBroker
from kafka_service_broker.catalog import CatalogResolver, load_catalog
from kafka_service_broker.config.models import KafkaConfig
from kafka_service_broker.errors import ClusterError
from kafka_service_broker.plans.factory import build_plan_registry

ZK_PEERS = "zk1:2181,zk2:2181"
KAFKA_HOSTNAMES = "kafka1:9092,kafka2:9092"


class FakeTopicAdmin:
    """Thread-safe in-memory stand-in for a Kafka admin session."""

    def __init__(self, topics: list[str] | None = None) -> None:
        self._lock = threading.Lock()
        self.topics: dict[str, dict[str, object]] = {}
        for name in topics or []:
            self.topics[name] = {"partitions": 1, "replication_factor": 1}
        self.fail_on_delete: set[str] = set()
        self.delete_hook: Callable[[str, float | None], None] | None = None
        self.unreachable = False
        self.sessions_opened = 0
        self.sessions_closed = 0

    def exists(self, name: str) -> bool:
        self._check_reachable()
        with self._lock:
            return name in self.topics

    def create_topic(
        self,
        name: str,
        partitions: int,
        replication_factor: int,
        config: dict[str, str] | None = None,
    ) -> None:
        self._check_reachable()
        with self._lock:
            if name in self.topics:
                raise ClusterError(f"Failed to create Kafka topic {name}: exists")
            self.topics[name] = {
                "partitions": partitions,
                "replication_factor": replication_factor,
                "config": dict(config or {}),
            }

    def list_topics(self) -> list[str]:
        self._check_reachable()
        with self._lock:
            return sorted(self.topics)

    def delete_topic(self, name: str, timeout: float | None = None) -> None:
        if self.delete_hook is not None:
            self.delete_hook(name, timeout)
        if name in self.fail_on_delete:
            raise ClusterError(f"Failed to delete Kafka topic {name}: denied")
        with self._lock:
            if self.topics.pop(name, None) is None:
                raise ClusterError(f"Failed to delete Kafka topic {name}: unknown")

    @contextmanager
    def session(self) -> Iterator[FakeTopicAdmin]:
        self.sessions_opened += 1
        try:
            yield self
        finally:
            self.sessions_closed += 1

    def _check_reachable(self) -> None:
        if self.unreachable:
            raise ClusterError("Could not connect to Kafka at kafka1:9092")


@pytest.fixture
def kafka_config() -> KafkaConfig:
    return KafkaConfig(
        zookeeper_peers=ZK_PEERS,
        hostnames=KAFKA_HOSTNAMES,
        partition_count=3,
        replication_factor=2,
        delete_timeout_seconds=2.0,
        sweep_timeout_seconds=5.0,
    )


@pytest.fixture
def cluster() -> FakeTopicAdmin:
    return FakeTopicAdmin()


@pytest.fixture
def catalog_resolver(monkeypatch: pytest.MonkeyPatch) -> CatalogResolver:
    for var in ("BROKER_CATALOG_JSON", "BROKER_SERVICE_GUID", "BROKER_SERVICE_NAME"):
        monkeypatch.delenv(var, raising=False)
    return CatalogResolver(load_catalog(environ={}))


@pytest.fixture
def broker(
    kafka_config: KafkaConfig,
    cluster: FakeTopicAdmin,
    catalog_resolver: CatalogResolver,
) -> ServiceBroker:
    """A dispatcher over both real strategies backed by the in-memory cluster."""
    registry = build_plan_registry(kafka_config, cluster.session)
    return ServiceBroker(registry, catalog_resolver)
