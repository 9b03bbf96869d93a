"""Feed domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from firehose.modules.feeds.domain.errors import ErrorKind


class ProjectCategory(StrEnum):
    """CNCF 项目成熟度。"""

    GRADUATED = "graduated"
    INCUBATING = "incubating"
    SANDBOX = "sandbox"


class FeedSource(BaseModel):
    """One configured release feed."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(..., min_length=1, description="Feed URL")
    category: ProjectCategory = Field(..., description="项目成熟度分类")
    project: str | None = Field(default=None, description="项目名称覆盖")


class Entry(BaseModel):
    """A release entry, optionally enriched with catalog metadata."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="guid，缺省时为 link")
    title: str = Field(default="", description="标题")
    link: str = Field(default="", description="原文链接")
    pub_date: datetime = Field(..., description="发布时间")
    content: str | None = Field(default=None, description="正文")
    content_snippet: str | None = Field(default=None, description="摘要")
    guid: str | None = Field(default=None, description="Feed 提供的唯一 ID")

    feed_url: str = Field(..., description="来源 Feed URL")
    feed_title: str | None = Field(default=None, description="来源 Feed 标题")
    feed_status: Literal["success", "error"] = "success"
    fetched_at: datetime = Field(..., description="抓取时间")

    project_name: str | None = None
    project_description: str | None = None
    project_status: str | None = None
    project_homepage: str | None = None

    @property
    def is_enriched(self) -> bool:
        return bool(self.project_name)


class FeedStatus(BaseModel):
    """Per-source status record."""

    model_config = ConfigDict(frozen=True)

    feed_url: str
    status: Literal["success", "error"]
    entries_count: int = 0
    error: str | None = None
    error_type: ErrorKind | None = None
    fetched_at: datetime
    duration_ms: int = 0


@dataclass(frozen=True)
class FetchSuccess:
    """Successful fetch of one source."""

    source: FeedSource
    entries: list[Entry]
    fetched_at: datetime
    feed_title: str | None = None
    duration_ms: int = 0

    @property
    def count(self) -> int:
        return len(self.entries)

    def to_status(self) -> FeedStatus:
        return FeedStatus(
            feed_url=self.source.url,
            status="success",
            entries_count=self.count,
            fetched_at=self.fetched_at,
            duration_ms=self.duration_ms,
        )


@dataclass(frozen=True)
class FetchFailure:
    """Classified failure of one source."""

    source: FeedSource
    kind: ErrorKind
    message: str
    fetched_at: datetime
    duration_ms: int = 0

    @property
    def entries(self) -> list[Entry]:
        return []

    @property
    def count(self) -> int:
        return 0

    def to_status(self) -> FeedStatus:
        return FeedStatus(
            feed_url=self.source.url,
            status="error",
            error=self.message,
            error_type=self.kind,
            fetched_at=self.fetched_at,
            duration_ms=self.duration_ms,
        )


FetchOutcome = FetchSuccess | FetchFailure


@dataclass
class AggregateResult:
    """Merged result of one aggregation run.

    ``entries`` is sorted by ``pub_date`` descending; ``statuses`` keeps the
    order in which sources completed.
    """

    entries: list[Entry] = field(default_factory=list)
    statuses: list[FeedStatus] = field(default_factory=list)

    @property
    def feeds_total(self) -> int:
        return len(self.statuses)

    @property
    def feeds_successful(self) -> int:
        return sum(1 for status in self.statuses if status.status == "success")

    @property
    def feeds_failed(self) -> int:
        return self.feeds_total - self.feeds_successful

    @property
    def entries_total(self) -> int:
        return len(self.entries)

    @property
    def success_rate(self) -> float:
        if not self.statuses:
            return 0.0
        return self.feeds_successful / self.feeds_total

    @property
    def projects_matched(self) -> int:
        """去重后命中 Catalog 的项目数。"""
        return len({entry.project_name for entry in self.entries if entry.project_name})
