"""Sanity checks for credentials issued by a bind.

Consumes the credentials map a platform received and verifies that it is
complete for its plan and that the topic it points at exists.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from typing import Any

import structlog

from kafka_service_broker.cluster.admin import TopicAdmin, open_admin
from kafka_service_broker.config.models import KafkaConfig
from kafka_service_broker.plans.base import PlanName

logger = structlog.get_logger()

EXIT_MISSING_FIELDS = 2
EXIT_CONNECT_FAILED = 3
EXIT_TOPIC_MISSING = 4

_TOPIC_KEY = {
    PlanName.TOPIC: "topicName",
    PlanName.SHARED: "topicNamePrefix",
}


@dataclass
class SanityReport:
    plan: PlanName
    problems: list[str] = field(default_factory=list)
    exit_code: int = 0

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    def fail(self, exit_code: int, problem: str) -> SanityReport:
        self.problems.append(problem)
        self.exit_code = exit_code
        return self


def check_credentials(
    creds: Mapping[str, Any],
    plan: PlanName,
    opener: Callable[[KafkaConfig], AbstractContextManager[TopicAdmin]] = open_admin,
) -> SanityReport:
    """Validate *creds* for *plan* against the cluster they name."""
    report = SanityReport(plan=plan)
    topic_key = _TOPIC_KEY[plan]

    missing = [
        key for key in (topic_key, "zkPeers", "hostname") if not creds.get(key)
    ]
    if missing:
        for key in missing:
            report.problems.append(f"'{key}' was not provided")
        report.exit_code = EXIT_MISSING_FIELDS
        return report

    topic = str(creds[topic_key])
    config = KafkaConfig(
        zookeeper_peers=str(creds["zkPeers"]), hostnames=str(creds["hostname"])
    )
    try:
        with opener(config) as admin:
            exists = admin.exists(topic)
    except Exception as exc:
        logger.warning("sanity.lookup_failed", topic=topic, error=str(exc))
        return report.fail(
            EXIT_CONNECT_FAILED, f"Topic {topic} could not be looked up: {exc}"
        )

    if not exists:
        if plan == PlanName.SHARED:
            problem = (
                f"Expected that service plan internally provisions topic {topic}, "
                "but does not exist"
            )
        else:
            problem = f"Topic {topic} does not exist"
        return report.fail(EXIT_TOPIC_MISSING, problem)

    logger.info("sanity.passed", plan=plan.value, topic=topic)
    return report
