"""Factory functions for plan strategies."""

from __future__ import annotations

from kafka_service_broker.cluster.admin import AdminFactory
from kafka_service_broker.config.models import KafkaConfig
from kafka_service_broker.plans.base import PlanName, PlanStrategy
from kafka_service_broker.plans.registry import PlanRegistry


def create_plan_strategy(
    plan: PlanName,
    config: KafkaConfig,
    open_admin: AdminFactory | None = None,
) -> PlanStrategy:
    """Create the strategy serving *plan*."""
    if plan == PlanName.TOPIC:
        from kafka_service_broker.plans.topic import DedicatedTopicPlan

        return DedicatedTopicPlan(config, open_admin)

    if plan == PlanName.SHARED:
        from kafka_service_broker.plans.shared import SharedPrefixPlan

        return SharedPrefixPlan(config, open_admin)

    msg = f"Unsupported plan: {plan}"
    raise ValueError(msg)


def build_plan_registry(
    config: KafkaConfig, open_admin: AdminFactory | None = None
) -> PlanRegistry:
    """One strategy per plan, all sharing the same cluster config bundle."""
    return PlanRegistry(
        create_plan_strategy(plan, config, open_admin) for plan in PlanName
    )
