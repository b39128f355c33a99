"""Live-cluster fixtures for integration tests.

Set ``KAFKA_BOOTSTRAP`` (for example ``localhost:9092``) to run them.
"""

from __future__ import annotations

import os
import time
import uuid

import pytest
from confluent_kafka.admin import AdminClient

from kafka_service_broker.config.models import KafkaConfig


def _wait_for_kafka(bootstrap: str, *, timeout: int = 60) -> None:
    deadline = time.time() + timeout
    while time.time() < deadline:
        try:
            admin = AdminClient({"bootstrap.servers": bootstrap})
            admin.list_topics(timeout=5)
            return
        except Exception:
            time.sleep(2)
    raise TimeoutError(f"Kafka at {bootstrap} not ready after {timeout}s")


@pytest.fixture(scope="session")
def bootstrap() -> str:
    servers = os.environ.get("KAFKA_BOOTSTRAP")
    if not servers:
        pytest.skip("KAFKA_BOOTSTRAP not set")
    _wait_for_kafka(servers)
    return servers


@pytest.fixture
def live_config(bootstrap: str) -> KafkaConfig:
    return KafkaConfig(
        hostnames=bootstrap,
        timeout_ms=10_000,
        delete_timeout_seconds=30,
        sweep_timeout_seconds=60,
    )


@pytest.fixture
def instance_id() -> str:
    return f"it-{uuid.uuid4().hex[:12]}"
