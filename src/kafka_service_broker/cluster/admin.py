"""Kafka topic admin session used by the plan strategies."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager
from typing import Protocol, runtime_checkable

import structlog
from confluent_kafka.admin import AdminClient, NewTopic  # type: ignore[attr-defined]

from kafka_service_broker.cluster.auth import build_admin_config
from kafka_service_broker.config.models import KafkaConfig
from kafka_service_broker.errors import ClusterError

logger = structlog.get_logger()


@runtime_checkable
class TopicAdmin(Protocol):
    """The four topic operations the broker needs from the cluster."""

    def exists(self, name: str) -> bool: ...

    def create_topic(
        self,
        name: str,
        partitions: int,
        replication_factor: int,
        config: dict[str, str] | None = None,
    ) -> None: ...

    def list_topics(self) -> list[str]: ...

    def delete_topic(self, name: str, timeout: float | None = None) -> None: ...


AdminFactory = Callable[[], AbstractContextManager[TopicAdmin]]


class KafkaTopicAdmin:
    """Thin wrapper around ``AdminClient`` bounded by the configured timeout.

    ``AdminClient`` is safe to share between threads, so one session serves
    every deletion of a single sweep.
    """

    def __init__(self, config: KafkaConfig, client: AdminClient | None = None) -> None:
        self._config = config
        self._timeout = config.timeout_seconds
        self._client: AdminClient | None = client or AdminClient(
            build_admin_config(config)
        )

    @property
    def client(self) -> AdminClient:
        if self._client is None:
            msg = "admin session is closed"
            raise ClusterError(msg)
        return self._client

    def exists(self, name: str) -> bool:
        return name in self._topic_names()

    def list_topics(self) -> list[str]:
        return sorted(self._topic_names())

    def create_topic(
        self,
        name: str,
        partitions: int,
        replication_factor: int,
        config: dict[str, str] | None = None,
    ) -> None:
        new_topic = NewTopic(
            name,
            num_partitions=partitions,
            replication_factor=replication_factor,
            config=dict(config or {}),
        )
        futures = self.client.create_topics(
            [new_topic],
            request_timeout=self._timeout,
            operation_timeout=self._timeout,
        )
        try:
            futures[name].result(timeout=self._timeout)
        except Exception as exc:
            msg = f"Failed to create Kafka topic {name}: {exc}"
            raise ClusterError(msg) from exc
        logger.debug("topic.created", topic=name, partitions=partitions)

    def delete_topic(self, name: str, timeout: float | None = None) -> None:
        wait = timeout if timeout is not None else self._timeout
        futures = self.client.delete_topics(
            [name],
            request_timeout=self._timeout,
            operation_timeout=wait,
        )
        try:
            futures[name].result(timeout=wait)
        except Exception as exc:
            msg = f"Failed to delete Kafka topic {name}: {exc}"
            raise ClusterError(msg) from exc

    def close(self) -> None:
        # librdkafka destroys the handle once the last reference is dropped.
        self._client = None

    def _topic_names(self) -> set[str]:
        try:
            metadata = self.client.list_topics(timeout=self._timeout)
        except Exception as exc:
            msg = f"Failed to get Kafka topics from {self._config.hostnames}: {exc}"
            raise ClusterError(msg) from exc
        return set(metadata.topics.keys())


@contextmanager
def open_admin(config: KafkaConfig) -> Iterator[TopicAdmin]:
    """Open a fresh admin session for one logical operation."""
    try:
        admin = KafkaTopicAdmin(config)
    except Exception as exc:
        msg = f"Could not connect to Kafka at {config.hostnames}: {exc}"
        raise ClusterError(msg) from exc
    try:
        yield admin
    finally:
        admin.close()


def admin_factory(config: KafkaConfig) -> AdminFactory:
    """Bind *config* so callers can open sessions without knowing it."""
    return lambda: open_admin(config)
