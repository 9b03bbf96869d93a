"""HTTP Feed transport 测试（httpx.MockTransport，不访问网络）。"""

from datetime import UTC, datetime

import httpx
import pytest

from firehose.modules.feeds.domain.errors import ErrorKind, classify_error
from firehose.modules.feeds.domain.exceptions import FeedTransportError
from firehose.modules.feeds.infrastructure.transport import HttpFeedTransport

pytestmark = pytest.mark.anyio

FEED_URL = "https://github.com/cilium/cilium/releases.atom"

ATOM_FEED = b"""<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <id>tag:github.com,2008:https://github.com/cilium/cilium/releases</id>
  <title>Release notes from cilium</title>
  <updated>2024-01-10T08:00:00Z</updated>
  <entry>
    <id>tag:github.com,2008:Repository/48109239/v1.15.0</id>
    <updated>2024-01-10T08:00:00Z</updated>
    <link rel="alternate" type="text/html" href="https://github.com/cilium/cilium/releases/tag/v1.15.0"/>
    <title>1.15.0</title>
    <content type="html">&lt;p&gt;Major release&lt;/p&gt;</content>
  </entry>
  <entry>
    <id>tag:github.com,2008:Repository/48109239/v1.14.5</id>
    <published>2023-12-20T10:30:00Z</published>
    <updated>2023-12-21T00:00:00Z</updated>
    <link rel="alternate" type="text/html" href="https://github.com/cilium/cilium/releases/tag/v1.14.5"/>
    <title>1.14.5</title>
    <summary>Patch release</summary>
  </entry>
</feed>
"""

RSS_FEED = b"""<?xml version="1.0"?>
<rss version="2.0">
  <channel>
    <title>Example releases</title>
    <link>https://example.com</link>
    <item>
      <title>v2.0.0</title>
      <link>https://example.com/releases/v2.0.0</link>
      <description>Second major</description>
      <pubDate>Tue, 02 Jan 2024 15:04:05 GMT</pubDate>
    </item>
  </channel>
</rss>
"""


def _transport_for(handler) -> HttpFeedTransport:
    return HttpFeedTransport(transport=httpx.MockTransport(handler))


async def test_parses_atom_feed():
    seen_headers = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen_headers["accept"] = request.headers["Accept"]
        seen_headers["user-agent"] = request.headers["User-Agent"]
        return httpx.Response(200, content=ATOM_FEED)

    feed = await _transport_for(handler).fetch(FEED_URL)

    assert feed.title == "Release notes from cilium"
    assert len(feed.items) == 2
    assert "atom+xml" in seen_headers["accept"]
    assert "Firehose" in seen_headers["user-agent"]

    latest, patch = feed.items
    assert latest.guid == "tag:github.com,2008:Repository/48109239/v1.15.0"
    assert latest.title == "1.15.0"
    assert latest.link == "https://github.com/cilium/cilium/releases/tag/v1.15.0"
    # 没有 published 时回退到 updated
    assert latest.published == datetime(2024, 1, 10, 8, 0, tzinfo=UTC)
    assert latest.content == "<p>Major release</p>"

    assert patch.published == datetime(2023, 12, 20, 10, 30, tzinfo=UTC)
    assert patch.description == "Patch release"


async def test_parses_rss_feed():
    feed = await _transport_for(lambda request: httpx.Response(200, content=RSS_FEED)).fetch(
        "https://example.com/feed.xml"
    )

    assert feed.title == "Example releases"
    item = feed.items[0]
    assert item.guid is None
    assert item.link == "https://example.com/releases/v2.0.0"
    assert item.description == "Second major"
    assert item.published == datetime(2024, 1, 2, 15, 4, 5, tzinfo=UTC)


async def test_http_error_status():
    transport = _transport_for(lambda request: httpx.Response(404))

    with pytest.raises(FeedTransportError) as exc_info:
        await transport.fetch(FEED_URL)

    assert exc_info.value.message == "HTTP 404 Not Found"
    assert classify_error(exc_info.value.message) == ErrorKind.NETWORK


async def test_timeout():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("read timed out", request=request)

    with pytest.raises(FeedTransportError) as exc_info:
        await _transport_for(handler).fetch(FEED_URL)

    assert exc_info.value.message.startswith("Timeout:")
    assert classify_error(exc_info.value.message) == ErrorKind.TIMEOUT


async def test_connection_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(FeedTransportError) as exc_info:
        await _transport_for(handler).fetch(FEED_URL)

    assert exc_info.value.message == "connection refused"
    assert classify_error(exc_info.value.message) == ErrorKind.NETWORK


async def test_malformed_document():
    transport = _transport_for(
        lambda request: httpx.Response(200, content=b"<html><body>oops")
    )

    with pytest.raises(FeedTransportError) as exc_info:
        await transport.fetch(FEED_URL)

    assert exc_info.value.message.startswith("XML parse error")
    assert classify_error(exc_info.value.message) == ErrorKind.PARSE
