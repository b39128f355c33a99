"""Plan strategy protocol, plan names and binding credentials."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Protocol, runtime_checkable

from kafka_service_broker.plans.sweep import DeletionReport


class PlanName(StrEnum):
    """Logical plan names the catalog maps plan identifiers onto."""

    TOPIC = "topic"
    SHARED = "shared"


@dataclass(frozen=True)
class InstanceCredentials:
    """What a binding hands out: cluster endpoints plus a topic or a prefix.

    ``topic_name`` (dedicated plan) and ``topic_name_prefix`` (shared plan)
    are mutually exclusive.
    """

    zookeeper_peers: str
    kafka_hostnames: str
    topic_name: str | None = None
    topic_name_prefix: str | None = None

    def __post_init__(self) -> None:
        if (self.topic_name is None) == (self.topic_name_prefix is None):
            msg = "exactly one of topic_name and topic_name_prefix must be set"
            raise ValueError(msg)

    @property
    def uri(self) -> str:
        if self.topic_name is not None:
            return f"kafka://{self.kafka_hostnames}/{self.topic_name}"
        return f"kafka://{self.kafka_hostnames}"

    def to_dict(self) -> dict[str, Any]:
        """Render the credentials map returned to the platform."""
        creds: dict[str, Any] = {
            "zkPeers": self.zookeeper_peers,
            "hostname": self.kafka_hostnames,
        }
        if self.topic_name is not None:
            creds["topicName"] = self.topic_name
        else:
            creds["topicNamePrefix"] = self.topic_name_prefix
        creds["uri"] = self.uri
        return creds


@runtime_checkable
class PlanStrategy(Protocol):
    """Turns an opaque instance ID into Kafka topics for one plan."""

    @property
    def plan(self) -> PlanName:
        """The logical plan this strategy serves."""
        ...

    def exists(self, instance_id: str) -> bool:
        """True if the instance's topic is present in the cluster."""
        ...

    def create(self, instance_id: str) -> None:
        """Create the instance's topic."""
        ...

    def destroy(self, instance_id: str) -> DeletionReport:
        """Delete every topic carrying the instance ID as a prefix."""
        ...

    def bind(self, instance_id: str, binding_id: str) -> InstanceCredentials:
        """Issue credentials for the instance."""
        ...

    def unbind(self, instance_id: str, binding_id: str) -> None:
        """Revoke a binding; raises if the binding cannot be removed."""
        ...
