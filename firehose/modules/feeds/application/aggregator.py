"""Parallel feed aggregator.

每个源一个 asyncio task，结果通过队列交给唯一的收集循环，
收集完成后按发布时间倒序排序。
"""

import asyncio
import time
from collections.abc import Callable, Sequence
from datetime import UTC, datetime

from loguru import logger

from firehose.core.infrastructure.logging import BusinessEvents
from firehose.modules.catalog.domain.entities import CatalogIndex
from firehose.modules.feeds.application.fetch_service import FeedFetchService
from firehose.modules.feeds.domain.entities import (
    AggregateResult,
    Entry,
    FeedSource,
    FetchFailure,
    FetchOutcome,
)
from firehose.modules.feeds.domain.errors import classify_error
from firehose.modules.feeds.domain.transport import FeedTransport


class FeedAggregator:
    """Fetch every source concurrently and merge the outcomes.

    Tasks share only the read-only catalog. Each one hands its single
    outcome to the collector through an :class:`asyncio.Queue`, so no
    merge state is shared between tasks. There is no per-task timeout
    here; a slow source delays completion without affecting others.
    """

    def __init__(
        self,
        catalog: CatalogIndex,
        transport: FeedTransport,
        clock: Callable[[], datetime] | None = None,
    ):
        self.fetch_service = FeedFetchService(catalog, transport, clock=clock)

    async def aggregate(self, sources: Sequence[FeedSource]) -> AggregateResult:
        """抓取所有源并合并结果（全部完成后才返回）。"""
        start_time = time.monotonic()
        logger.info(f"Fetching {len(sources)} feeds in parallel")

        queue: asyncio.Queue[FetchOutcome] = asyncio.Queue()
        tasks = [
            asyncio.create_task(self._fetch_into(queue, source), name=source.url)
            for source in sources
        ]

        result = AggregateResult()
        try:
            for _ in range(len(sources)):
                outcome = await queue.get()
                result.entries.extend(outcome.entries)
                result.statuses.append(outcome.to_status())
        finally:
            # 正常路径下所有 task 已结束；被取消时一并清理
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

        result.entries.sort(key=_sort_key, reverse=True)

        duration_ms = int((time.monotonic() - start_time) * 1000)
        logger.info(
            f"Feed results: {result.feeds_successful} successful, "
            f"{result.feeds_failed} failed, {result.entries_total} releases"
        )
        BusinessEvents.aggregation_completed(
            feeds_total=result.feeds_total,
            feeds_successful=result.feeds_successful,
            feeds_failed=result.feeds_failed,
            releases_total=result.entries_total,
            duration_ms=duration_ms,
        )
        return result

    async def _fetch_into(
        self, queue: asyncio.Queue[FetchOutcome], source: FeedSource
    ) -> None:
        try:
            outcome = await self.fetch_service.fetch(source)
        except Exception as e:
            # fetch 本身不应抛出；兜底保证一个源的异常不影响整体聚合
            logger.exception(f"Unexpected error while fetching {source.url}: {e}")
            message = str(e) or type(e).__name__
            outcome = FetchFailure(
                source=source,
                kind=classify_error(message),
                message=message,
                fetched_at=datetime.now(UTC),
            )
        queue.put_nowait(outcome)


def _sort_key(entry: Entry) -> datetime:
    # naive 时间按 UTC 处理，避免与 aware 时间比较时报错
    if entry.pub_date.tzinfo is None:
        return entry.pub_date.replace(tzinfo=UTC)
    return entry.pub_date
