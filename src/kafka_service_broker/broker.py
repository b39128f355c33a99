"""Instance lifecycle dispatcher.

Routes each broker verb to the plan strategy selected by the request's plan
identifier.  Instances are not recorded anywhere: whether one exists is asked
of the strategies, and therefore of the cluster, on every call.  Instance IDs
are unique across plans, so provision probes every registered strategy.
"""

from __future__ import annotations

from typing import Any

import structlog

from kafka_service_broker.catalog import CatalogResolver, Service, load_catalog
from kafka_service_broker.cluster.admin import AdminFactory
from kafka_service_broker.config.models import BrokerSettings
from kafka_service_broker.errors import (
    BindingNotFound,
    DeprovisionIncomplete,
    InstanceAlreadyExists,
    InstanceNotFound,
    InvalidRequest,
)
from kafka_service_broker.plans.base import PlanStrategy
from kafka_service_broker.plans.factory import build_plan_registry
from kafka_service_broker.plans.registry import PlanRegistry
from kafka_service_broker.plans.sweep import DeletionReport

logger = structlog.get_logger()


class ServiceBroker:
    """Provision, deprovision, bind and unbind Kafka-backed service instances."""

    def __init__(
        self,
        registry: PlanRegistry,
        catalog: CatalogResolver,
        *,
        fail_on_partial_deprovision: bool = False,
    ) -> None:
        self._registry = registry
        self._catalog = catalog
        self._fail_on_partial_deprovision = fail_on_partial_deprovision

    @property
    def registry(self) -> PlanRegistry:
        return self._registry

    def services(self) -> list[Service]:
        return self._catalog.services()

    def provision(self, instance_id: str, plan_id: str) -> None:
        if self._find_strategy(instance_id) is not None:
            raise InstanceAlreadyExists
        strategy = self._strategy_for(plan_id)
        strategy.create(instance_id)

    def deprovision(self, instance_id: str) -> DeletionReport:
        """Destroy the instance through the first strategy that reports it.

        Both built-in plans mark an instance with a topic named after it, so
        the scan always stops at the topic strategy, even for shared-plan
        instances.  The prefix sweep is the same for both plans.
        """
        strategy = self._find_strategy(instance_id)
        if strategy is None:
            raise InstanceNotFound
        report = strategy.destroy(instance_id)
        if not report.complete and self._fail_on_partial_deprovision:
            raise DeprovisionIncomplete(report)
        return report

    def bind(self, instance_id: str, binding_id: str, plan_id: str) -> dict[str, Any]:
        strategy = self._strategy_for(plan_id)
        if not strategy.exists(instance_id):
            raise InstanceNotFound
        return strategy.bind(instance_id, binding_id).to_dict()

    def unbind(self, instance_id: str, binding_id: str, plan_id: str) -> None:
        strategy = self._strategy_for(plan_id)
        if not strategy.exists(instance_id):
            raise InstanceNotFound
        try:
            strategy.unbind(instance_id, binding_id)
        except Exception as exc:
            logger.warning(
                "binding.unbind_failed",
                instance_id=instance_id,
                binding_id=binding_id,
                error=str(exc),
            )
            raise BindingNotFound from exc

    def last_operation(self, instance_id: str) -> dict[str, str]:
        # Every operation completes before its call returns.
        return {"state": "succeeded"}

    def update(self, instance_id: str, plan_id: str | None = None) -> None:
        logger.info("instance.update_ignored", instance_id=instance_id, plan_id=plan_id)

    def _strategy_for(self, plan_id: str) -> PlanStrategy:
        if not plan_id:
            raise InvalidRequest("plan_id required")
        plan_name = self._catalog.plan_name(plan_id)
        return self._registry.resolve(plan_name)

    def _find_strategy(self, instance_id: str) -> PlanStrategy | None:
        """First registered strategy that reports the instance, if any."""
        for strategy in self._registry:
            if strategy.exists(instance_id):
                return strategy
        return None


def create_service_broker(
    settings: BrokerSettings, open_admin: AdminFactory | None = None
) -> ServiceBroker:
    """Wire catalog, strategies and dispatcher from process settings."""
    resolver = CatalogResolver(load_catalog(settings.catalog.path))
    registry = build_plan_registry(settings.kafka, open_admin)
    registry.check_catalog(resolver)
    return ServiceBroker(
        registry,
        resolver,
        fail_on_partial_deprovision=settings.broker.fail_on_partial_deprovision,
    )

