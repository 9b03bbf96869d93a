"""JSON output document.

输出结构：metadata（统计与耗时）+ releases + feeds，键名使用 camelCase。
"""

from datetime import UTC, datetime, timedelta
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from firehose.core.config import settings
from firehose.core.infrastructure.logging import BusinessEvents
from firehose.modules.catalog.domain.entities import CatalogIndex
from firehose.modules.feeds.domain.entities import AggregateResult, Entry, FeedStatus


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OutputStats(_CamelModel):
    feeds_total: int
    feeds_successful: int
    feeds_failed: int
    feeds_skipped: int = 0
    releases_total: int
    catalog_projects_total: int
    catalog_projects_matched: int


class OutputPerformance(_CamelModel):
    catalog_fetch_duration: str = "0s"
    feeds_fetch_duration: str = "0s"
    output_duration: str = "0s"


class OutputMetadata(_CamelModel):
    schema_version: str
    generated_at: datetime
    generated_by: str
    build_duration: str
    stats: OutputStats
    performance: OutputPerformance = Field(default_factory=OutputPerformance)


class OutputRelease(_CamelModel):
    """Release as written to disk (``contentSnippet``, ``pubDate`` …)."""

    id: str
    title: str
    link: str
    pub_date: datetime
    content: str | None = None
    content_snippet: str | None = None
    guid: str | None = None
    project_name: str | None = None
    project_description: str | None = None
    project_status: str | None = None
    project_homepage: str | None = None
    feed_url: str
    feed_title: str | None = None
    feed_status: str
    fetched_at: datetime

    @classmethod
    def from_entry(cls, entry: Entry) -> "OutputRelease":
        return cls.model_validate(entry.model_dump())


class OutputFeedStatus(_CamelModel):
    feed_url: str
    status: str
    entries_count: int | None = None
    error: str | None = None
    error_type: str | None = None
    fetched_at: datetime
    duration: str

    @classmethod
    def from_status(cls, status: FeedStatus) -> "OutputFeedStatus":
        return cls(
            feed_url=status.feed_url,
            status=status.status,
            entries_count=status.entries_count or None,
            error=status.error,
            error_type=status.error_type.value if status.error_type else None,
            fetched_at=status.fetched_at,
            duration=format_duration(timedelta(milliseconds=status.duration_ms)),
        )


class OutputDocument(_CamelModel):
    metadata: OutputMetadata
    releases: list[OutputRelease]
    feeds: list[OutputFeedStatus]


def format_duration(value: timedelta) -> str:
    """``timedelta`` → ``"1.234s"``。"""
    return f"{value.total_seconds():.3f}s"


def build_output_document(
    result: AggregateResult,
    catalog: CatalogIndex,
    build_duration: timedelta,
    performance: OutputPerformance | None = None,
    generated_at: datetime | None = None,
) -> OutputDocument:
    """Assemble the output document from an aggregation result."""
    stats = OutputStats(
        feeds_total=result.feeds_total,
        feeds_successful=result.feeds_successful,
        feeds_failed=result.feeds_failed,
        releases_total=result.entries_total,
        catalog_projects_total=len(catalog),
        catalog_projects_matched=result.projects_matched,
    )
    metadata = OutputMetadata(
        schema_version=settings.OUTPUT_SCHEMA_VERSION,
        generated_at=generated_at or datetime.now(UTC),
        generated_by=f"{settings.PROJECT_NAME} v{settings.VERSION}",
        build_duration=format_duration(build_duration),
        stats=stats,
        performance=performance or OutputPerformance(),
    )
    return OutputDocument(
        metadata=metadata,
        releases=[OutputRelease.from_entry(entry) for entry in result.entries],
        feeds=[OutputFeedStatus.from_status(status) for status in result.statuses],
    )


def write_output(document: OutputDocument, path: Path) -> None:
    """Write the document as pretty-printed UTF-8 JSON, creating parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        document.model_dump_json(indent=2, by_alias=True, exclude_none=True) + "\n",
        encoding="utf-8",
    )
    BusinessEvents.output_written(
        path=str(path), releases_total=len(document.releases)
    )
