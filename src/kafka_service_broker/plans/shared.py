"""Shared-prefix plan: the instance owns a topic-name prefix.

No topics are handed out.  Producers and consumers create their own topics
under the ``topicNamePrefix`` from the credentials.  A marker topic named
after the instance is still created so the instance can be found again;
binding holders may use it like any other topic under the prefix.
"""

from __future__ import annotations

from kafka_service_broker.plans.base import InstanceCredentials, PlanName
from kafka_service_broker.plans.topic import DedicatedTopicPlan


class SharedPrefixPlan(DedicatedTopicPlan):
    plan = PlanName.SHARED

    def _credentials(self, instance_id: str) -> InstanceCredentials:
        return InstanceCredentials(
            zookeeper_peers=self._config.zookeeper_peers,
            kafka_hostnames=self._config.hostnames,
            topic_name_prefix=instance_id,
        )
