"""Concurrent prefix sweep used by every plan's deprovision."""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from kafka_service_broker.cluster.admin import TopicAdmin

logger = structlog.get_logger()

NOT_ATTEMPTED = "not attempted: sweep timed out"


@dataclass
class DeletionReport:
    """Outcome of one sweep: which topics went away and which did not."""

    prefix: str
    deleted: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def succeeded_count(self) -> int:
        return len(self.deleted)

    @property
    def failed_count(self) -> int:
        return len(self.failed)

    @property
    def attempted_count(self) -> int:
        return self.succeeded_count + self.failed_count

    @property
    def complete(self) -> bool:
        return not self.failed

    def to_dict(self) -> dict[str, Any]:
        return {
            "prefix": self.prefix,
            "deleted": sorted(self.deleted),
            "failed": dict(sorted(self.failed.items())),
        }


def sweep_topics(
    admin: TopicAdmin,
    prefix: str,
    *,
    delete_timeout: float,
    sweep_timeout: float,
    max_workers: int = 8,
    **log_context: Any,
) -> DeletionReport:
    """Delete every live topic whose name starts with *prefix*.

    Topics are enumerated once, then each deletion runs as its own task.
    The call returns only after every started deletion has finished; tasks
    still queued when *sweep_timeout* expires are cancelled and reported as
    failed.  Individual failures never abort the other deletions.
    """
    report = DeletionReport(prefix=prefix)
    names = [name for name in admin.list_topics() if name.startswith(prefix)]
    if not names:
        logger.info("sweep.no_topics", prefix=prefix, **log_context)
        return report

    executor = ThreadPoolExecutor(
        max_workers=min(max_workers, len(names)),
        thread_name_prefix="topic-delete",
    )
    futures: dict[Future[None], str] = {
        executor.submit(admin.delete_topic, name, delete_timeout): name
        for name in names
    }
    _, pending = wait(futures, timeout=sweep_timeout)
    if pending:
        logger.warning(
            "sweep.timeout",
            prefix=prefix,
            pending=len(pending),
            timeout=sweep_timeout,
            **log_context,
        )
    # Running deletions are bounded by delete_timeout; queued ones are dropped.
    executor.shutdown(wait=True, cancel_futures=True)

    for future, name in futures.items():
        if future.cancelled():
            report.failed[name] = NOT_ATTEMPTED
            continue
        exc = future.exception()
        if exc is not None:
            report.failed[name] = str(exc)
            logger.error(
                "sweep.topic_delete_failed",
                topic=name,
                error=str(exc),
                **log_context,
            )
        else:
            report.deleted.append(name)
            logger.info("sweep.topic_deleted", topic=name, **log_context)

    logger.info(
        "sweep.finished",
        prefix=prefix,
        deleted=report.succeeded_count,
        failed=report.failed_count,
        **log_context,
    )
    return report
