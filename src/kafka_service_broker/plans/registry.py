"""Registry of plan strategies keyed by logical plan name."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from kafka_service_broker.catalog import CatalogResolver
from kafka_service_broker.errors import PlanNotConfigured
from kafka_service_broker.plans.base import PlanName, PlanStrategy


class PlanRegistry:
    """Strategies in registration order; lookups never fall back."""

    def __init__(self, strategies: Iterable[PlanStrategy] = ()) -> None:
        self._strategies: dict[PlanName, PlanStrategy] = {}
        for strategy in strategies:
            self.register(strategy)

    def register(self, strategy: PlanStrategy) -> None:
        plan = PlanName(strategy.plan)
        if plan in self._strategies:
            msg = f"A strategy is already registered for plan '{plan}'"
            raise ValueError(msg)
        self._strategies[plan] = strategy

    def get(self, plan: PlanName) -> PlanStrategy | None:
        return self._strategies.get(plan)

    def resolve(self, plan_name: str) -> PlanStrategy:
        """Return the strategy for a catalog plan name or raise PlanNotConfigured."""
        try:
            plan = PlanName(plan_name)
        except ValueError:
            raise PlanNotConfigured(
                f"plan '{plan_name}' is not a known plan type"
            ) from None
        strategy = self._strategies.get(plan)
        if strategy is None:
            raise PlanNotConfigured(f"no strategy registered for plan '{plan}'")
        return strategy

    def check_catalog(self, catalog: CatalogResolver) -> None:
        """Fail fast when the catalog offers a plan nobody can serve."""
        for plan in catalog.plans():
            self.resolve(plan.name)

    def __iter__(self) -> Iterator[PlanStrategy]:
        return iter(self._strategies.values())

    def __len__(self) -> int:
        return len(self._strategies)

    def __contains__(self, plan: object) -> bool:
        return plan in self._strategies
