"""Dedicated-topic plan: one Kafka topic per service instance."""

from __future__ import annotations

import structlog

from kafka_service_broker.cluster.admin import AdminFactory, TopicAdmin, admin_factory
from kafka_service_broker.config.models import KafkaConfig
from kafka_service_broker.plans.base import InstanceCredentials, PlanName
from kafka_service_broker.plans.sweep import DeletionReport, sweep_topics

logger = structlog.get_logger()


class DedicatedTopicPlan:
    """Provisions a topic named after the instance and binds to it.

    The topic doubles as the proof that the instance exists.  Deprovision
    removes every topic whose name starts with the instance ID, which also
    catches topics created out-of-band under that prefix.
    """

    plan = PlanName.TOPIC

    def __init__(
        self, config: KafkaConfig, open_admin: AdminFactory | None = None
    ) -> None:
        self._config = config
        self._open_admin = open_admin or admin_factory(config)

    def exists(self, instance_id: str) -> bool:
        with self._open_admin() as admin:
            return admin.exists(instance_id)

    def create(self, instance_id: str) -> None:
        with self._open_admin() as admin:
            self._create_topic(admin, instance_id)
        logger.info(
            "instance.provisioned", instance_id=instance_id, plan=self.plan.value
        )

    def destroy(self, instance_id: str) -> DeletionReport:
        with self._open_admin() as admin:
            report = sweep_topics(
                admin,
                instance_id,
                delete_timeout=self._config.delete_timeout_seconds,
                sweep_timeout=self._config.sweep_timeout_seconds,
                max_workers=self._config.delete_max_workers,
                instance_id=instance_id,
                plan=self.plan.value,
            )
        if report.complete:
            logger.info(
                "instance.deprovisioned",
                instance_id=instance_id,
                plan=self.plan.value,
                topics=report.succeeded_count,
            )
        else:
            logger.warning(
                "instance.deprovisioned_partially",
                instance_id=instance_id,
                plan=self.plan.value,
                deleted=report.succeeded_count,
                failed=sorted(report.failed),
            )
        return report

    def bind(self, instance_id: str, binding_id: str) -> InstanceCredentials:
        logger.info(
            "instance.bound",
            instance_id=instance_id,
            binding_id=binding_id,
            plan=self.plan.value,
        )
        return self._credentials(instance_id)

    def unbind(self, instance_id: str, binding_id: str) -> None:
        # Bindings share the cluster credentials; nothing to revoke.
        logger.info(
            "instance.unbound",
            instance_id=instance_id,
            binding_id=binding_id,
            plan=self.plan.value,
        )

    def _create_topic(self, admin: TopicAdmin, name: str) -> None:
        admin.create_topic(
            name,
            self._config.partition_count,
            self._config.replication_factor,
            self._config.topic_config,
        )

    def _credentials(self, instance_id: str) -> InstanceCredentials:
        return InstanceCredentials(
            zookeeper_peers=self._config.zookeeper_peers,
            kafka_hostnames=self._config.hostnames,
            topic_name=instance_id,
        )
