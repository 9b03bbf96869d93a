"""
pytest 配置和共享 fixtures。

测试分层：
- unit/: 单元测试（不依赖网络）

使用方法：
    uv run pytest
    uv run pytest tests/unit/test_aggregator.py
"""

from datetime import UTC, datetime

import pytest

from firehose.modules.catalog.application.index_builder import build_catalog_index
from firehose.modules.catalog.domain.entities import CatalogIndex
from firehose.modules.feeds.domain.entities import FeedSource, ProjectCategory
from firehose.modules.feeds.domain.exceptions import FeedTransportError
from firehose.modules.feeds.domain.transport import ParsedFeed, ParsedFeedItem

FIXED_NOW = datetime(2024, 2, 1, 12, 0, tzinfo=UTC)


SAMPLE_LANDSCAPE_YAML = """
landscape:
  - category:
    name: Orchestration & Management
    subcategories:
      - subcategory:
        name: Scheduling & Orchestration
        items:
          - item:
            name: Kubernetes
            homepage_url: https://kubernetes.io/
            repo_url: https://github.com/kubernetes/kubernetes
            project: graduated
            description: Production-Grade Container Orchestration
          - item:
            name: Volcano
            homepage_url: https://volcano.sh/
            repo_url: https://github.com/volcano-sh/volcano
            project: incubating
            extra:
              summary_use_case: Batch scheduling on Kubernetes
      - subcategory:
        name: Service Proxy
        items:
          - item:
            name: Envoy
            homepage_url: https://www.envoyproxy.io/
            repo_url: https://github.com/envoyproxy/envoy
            project: graduated
            extra:
              summary_business_use_case: Edge and service proxy
          - item:
            name: Some GitLab Project
            repo_url: https://gitlab.com/some/project
          - item:
            name: No Repo
            homepage_url: https://example.com/
"""


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def catalog() -> CatalogIndex:
    """示例 Catalog 索引。"""
    return build_catalog_index(SAMPLE_LANDSCAPE_YAML)


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


def _make_source(url: str, project: str | None = None) -> FeedSource:
    return FeedSource(url=url, category=ProjectCategory.GRADUATED, project=project)


def _make_item(
    guid: str | None,
    published: datetime | None,
    link: str = "",
    title: str = "release",
) -> ParsedFeedItem:
    return ParsedFeedItem(guid=guid, title=title, link=link, published=published)


class _FakeTransport:
    """按 URL 返回预置的 ParsedFeed，或抛出预置的错误。"""

    def __init__(
        self,
        feeds: dict[str, ParsedFeed] | None = None,
        errors: dict[str, str] | None = None,
    ) -> None:
        self.feeds = feeds or {}
        self.errors = errors or {}
        self.calls: list[str] = []

    async def fetch(self, url: str) -> ParsedFeed:
        self.calls.append(url)
        if url in self.errors:
            raise FeedTransportError(url, self.errors[url])
        return self.feeds[url]


@pytest.fixture
def make_source():
    return _make_source


@pytest.fixture
def make_item():
    return _make_item


@pytest.fixture
def fake_transport():
    return _FakeTransport


@pytest.fixture
def landscape_yaml() -> str:
    return SAMPLE_LANDSCAPE_YAML
