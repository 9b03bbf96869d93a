"""单源抓取服务。

协调抓取、Catalog 富化、结果封装等流程。
"""

import time
from collections.abc import Callable
from datetime import UTC, datetime

from loguru import logger

from firehose.core.infrastructure.logging import BusinessEvents
from firehose.modules.catalog.domain.entities import CatalogEntry, CatalogIndex
from firehose.modules.feeds.domain.entities import (
    Entry,
    FeedSource,
    FetchFailure,
    FetchOutcome,
    FetchSuccess,
)
from firehose.modules.feeds.domain.errors import classify_error
from firehose.modules.feeds.domain.identifiers import extract_repo_slug
from firehose.modules.feeds.domain.transport import FeedTransport, ParsedFeed


def _utcnow() -> datetime:
    return datetime.now(UTC)


class FeedFetchService:
    """单源抓取服务。

    职责：
    - 调用 transport 获取并解析 Feed
    - 失败时分类错误并返回 FetchFailure（从不向上抛出）
    - 用 Catalog 元数据富化每个条目
    """

    def __init__(
        self,
        catalog: CatalogIndex,
        transport: FeedTransport,
        clock: Callable[[], datetime] | None = None,
    ):
        self.catalog = catalog
        self.transport = transport
        self.clock = clock or _utcnow

    async def fetch(self, source: FeedSource) -> FetchOutcome:
        """抓取单个源。

        Args:
            source: 要抓取的源

        Returns:
            FetchOutcome: FetchSuccess 或 FetchFailure
        """
        # 同一源的所有条目共享一个抓取时间
        fetched_at = self.clock()
        start_time = time.monotonic()

        try:
            feed = await self.transport.fetch(source.url)
        except Exception as e:
            duration_ms = int((time.monotonic() - start_time) * 1000)
            message = str(e) or type(e).__name__
            kind = classify_error(message)
            logger.warning(f"Failed to fetch {source.url}: {message}")
            BusinessEvents.feed_fetch_failed(
                feed_url=source.url, error=message, error_type=kind.value
            )
            return FetchFailure(
                source=source,
                kind=kind,
                message=message,
                fetched_at=fetched_at,
                duration_ms=duration_ms,
            )

        slug = extract_repo_slug(source.url)
        project = self.catalog.lookup(slug)
        entries = self._build_entries(source, feed, fetched_at, project)
        duration_ms = int((time.monotonic() - start_time) * 1000)

        logger.info(f"Fetched {source.url}: {len(entries)} releases")
        BusinessEvents.feed_fetched(
            feed_url=source.url,
            entries_count=len(entries),
            duration_ms=duration_ms,
            project_slug=slug or None,
            enriched=project is not None,
        )

        return FetchSuccess(
            source=source,
            entries=entries,
            fetched_at=fetched_at,
            feed_title=feed.title,
            duration_ms=duration_ms,
        )

    @staticmethod
    def _build_entries(
        source: FeedSource,
        feed: ParsedFeed,
        fetched_at: datetime,
        project: CatalogEntry | None,
    ) -> list[Entry]:
        enrichment: dict[str, str | None] = {}
        if project is not None:
            enrichment = {
                "project_name": project.name or None,
                "project_description": project.description,
                "project_status": project.maturity,
                "project_homepage": project.homepage_url,
            }
        if source.project:
            enrichment["project_name"] = source.project

        entries: list[Entry] = []
        for item in feed.items:
            entries.append(
                Entry(
                    id=item.guid or item.link,
                    title=item.title,
                    link=item.link,
                    pub_date=item.published or fetched_at,
                    content=item.content,
                    content_snippet=item.description,
                    guid=item.guid,
                    feed_url=source.url,
                    feed_title=feed.title,
                    fetched_at=fetched_at,
                    **enrichment,
                )
            )
        return entries
