"""Health probes for the Kafka cluster behind the broker."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

import structlog

from kafka_service_broker.cluster.admin import AdminFactory, admin_factory
from kafka_service_broker.config.models import KafkaConfig

logger = structlog.get_logger()


class Status(StrEnum):
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    UNKNOWN = "unknown"


@dataclass
class ComponentHealth:
    name: str
    status: Status = Status.UNKNOWN
    detail: str = ""


@dataclass
class BrokerHealth:
    components: list[ComponentHealth] = field(default_factory=list)

    @property
    def healthy(self) -> bool:
        return all(c.status == Status.HEALTHY for c in self.components)

    @property
    def summary(self) -> dict[str, str]:
        return {c.name: c.status.value for c in self.components}


def check_kafka(
    config: KafkaConfig, open_admin: AdminFactory | None = None
) -> ComponentHealth:
    """Probe Kafka connectivity by listing topics."""
    opener = open_admin or admin_factory(config)
    try:
        with opener() as admin:
            topics = admin.list_topics()
        return ComponentHealth(
            name="kafka",
            status=Status.HEALTHY,
            detail=f"{len(topics)} topic(s) on {config.hostnames}",
        )
    except Exception as exc:
        logger.warning("health.kafka_unreachable", error=str(exc))
        return ComponentHealth(name="kafka", status=Status.UNHEALTHY, detail=str(exc))


def check_broker_health(
    config: KafkaConfig, open_admin: AdminFactory | None = None
) -> BrokerHealth:
    """Run all health checks and return aggregated result."""
    return BrokerHealth(components=[check_kafka(config, open_admin)])
