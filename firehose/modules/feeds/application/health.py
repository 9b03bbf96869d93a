"""Run health evaluation (owned by the pipeline driver, not the aggregator)."""

from dataclasses import dataclass

from firehose.core.config import settings
from firehose.modules.feeds.domain.entities import AggregateResult


@dataclass(frozen=True)
class HealthReport:
    feeds_total: int
    feeds_successful: int
    feeds_failed: int
    success_rate: float
    threshold: float

    @property
    def healthy(self) -> bool:
        """More than ``threshold`` of the sources must have succeeded."""
        return self.feeds_total > 0 and self.success_rate > self.threshold


def evaluate_health(
    result: AggregateResult, min_success_rate: float | None = None
) -> HealthReport:
    threshold = (
        settings.MIN_FEED_SUCCESS_RATE if min_success_rate is None else min_success_rate
    )
    return HealthReport(
        feeds_total=result.feeds_total,
        feeds_successful=result.feeds_successful,
        feeds_failed=result.feeds_failed,
        success_rate=result.success_rate,
        threshold=threshold,
    )
