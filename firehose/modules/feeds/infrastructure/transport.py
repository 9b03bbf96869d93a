"""HTTP Feed transport 实现。

使用 httpx 下载，feedparser 解析，支持 RSS 2.0 和 Atom 格式。
"""

from datetime import UTC, datetime
from typing import Any

import feedparser
import httpx
from loguru import logger

from firehose.core.config import settings
from firehose.modules.feeds.domain.exceptions import FeedTransportError
from firehose.modules.feeds.domain.transport import (
    FeedTransport,
    ParsedFeed,
    ParsedFeedItem,
)


class HttpFeedTransport(FeedTransport):
    """通过 HTTP 获取并解析单个 Feed。

    每次 fetch 只尝试一次，不做重试。
    """

    ACCEPT = "application/atom+xml, application/rss+xml, application/xml, text/xml, */*"

    def __init__(
        self,
        *,
        timeout_sec: float | None = None,
        user_agent: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.timeout_sec = timeout_sec or settings.FEED_FETCH_TIMEOUT_SEC
        self.user_agent = user_agent or settings.FETCHER_USER_AGENT
        self._transport = transport

    async def fetch(self, url: str) -> ParsedFeed:
        """下载并解析 Feed。

        Raises:
            FeedTransportError: 超时、HTTP 错误、网络错误或解析失败
        """
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_sec,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = await client.get(
                    url,
                    headers={"User-Agent": self.user_agent, "Accept": self.ACCEPT},
                )
                response.raise_for_status()
        except httpx.TimeoutException as e:
            raise FeedTransportError(url, f"Timeout: {e}") from e
        except httpx.HTTPStatusError as e:
            raise FeedTransportError(
                url, f"HTTP {e.response.status_code} {e.response.reason_phrase}"
            ) from e
        except httpx.HTTPError as e:
            raise FeedTransportError(url, str(e) or type(e).__name__) from e

        return self._parse_feed(url, response.content)

    def _parse_feed(self, url: str, content: bytes) -> ParsedFeed:
        """解析 RSS/Atom 内容。"""
        feed = feedparser.parse(content)

        # bozo 只说明文档不规范；没有任何可用内容时才视为解析失败
        if feed.bozo and not feed.entries and not feed.feed.get("title"):
            raise FeedTransportError(
                url, f"XML parse error: {feed.get('bozo_exception', 'malformed feed')}"
            )

        items = [self._parse_entry(entry) for entry in feed.entries]
        return ParsedFeed(title=feed.feed.get("title") or None, items=items)

    def _parse_entry(self, entry: Any) -> ParsedFeedItem:
        link = entry.get("link", "")
        if not link:
            # Atom 格式可能有多个 link
            for candidate in entry.get("links", []):
                if candidate.get("rel") in ("alternate", None):
                    link = candidate.get("href", "")
                    break

        content = None
        if entry.get("content"):
            content = entry.content[0].get("value") or None

        return ParsedFeedItem(
            guid=entry.get("id") or None,
            title=entry.get("title", ""),
            link=link,
            published=self._parse_feed_date(entry),
            content=content,
            description=entry.get("summary") or entry.get("description") or None,
        )

    def _parse_feed_date(self, entry: Any) -> datetime | None:
        """从 feedparser entry 解析日期。"""
        # feedparser 会将日期解析为 UTC struct_time；Atom 发布时间缺失时回退到 updated
        for field in ("published_parsed", "updated_parsed"):
            parsed = entry.get(field)
            if parsed:
                try:
                    return datetime(*parsed[:6], tzinfo=UTC)
                except (TypeError, ValueError) as e:
                    logger.debug(f"Failed to parse {field}: {e}")
        return None
