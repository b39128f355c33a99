"""Broker error taxonomy.

Each error carries the protocol-level message shown to the platform and the
HTTP status the API layer answers with.  Anything that is not a
:class:`BrokerError` is an unexpected failure and surfaces as a 500.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from kafka_service_broker.plans.sweep import DeletionReport


class BrokerError(Exception):
    """Base class for errors reported back through the broker protocol."""

    status_code: int = 500
    default_message: str = "broker error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def description(self) -> str:
        return str(self)


class InvalidRequest(BrokerError):
    status_code = 400
    default_message = "invalid request"


class PlanNotRecognized(BrokerError):
    status_code = 400
    default_message = "plan_id not recognized"


class PlanNotConfigured(BrokerError):
    """The catalog names a plan that has no registered strategy."""

    status_code = 500
    default_message = "no strategy registered for plan"


class InstanceAlreadyExists(BrokerError):
    status_code = 409
    default_message = "instance already exists"


class InstanceNotFound(BrokerError):
    status_code = 410
    default_message = "instance does not exist"


class BindingNotFound(BrokerError):
    status_code = 410
    default_message = "binding does not exist"


class ClusterError(BrokerError):
    """A Kafka admin operation failed; the message carries the cause text."""

    status_code = 500
    default_message = "kafka cluster error"


class DeprovisionIncomplete(BrokerError):
    """Some topics of a deprovisioned instance could not be deleted."""

    status_code = 500
    default_message = "deprovision incomplete"

    def __init__(self, report: DeletionReport) -> None:
        self.report = report
        names = ", ".join(sorted(report.failed))
        super().__init__(
            f"failed to delete {report.failed_count} of "
            f"{report.attempted_count} topic(s): {names}"
        )
