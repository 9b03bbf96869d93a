"""Feed transport port and parsed feed models."""

from datetime import datetime
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field


class ParsedFeedItem(BaseModel):
    """One item of a parsed RSS/Atom document."""

    model_config = ConfigDict(frozen=True)

    guid: str | None = None
    title: str = ""
    link: str = ""
    published: datetime | None = Field(default=None, description="解析后的发布时间")
    content: str | None = None
    description: str | None = None


class ParsedFeed(BaseModel):
    """A parsed RSS/Atom document."""

    model_config = ConfigDict(frozen=True)

    title: str | None = None
    items: list[ParsedFeedItem] = Field(default_factory=list)


class FeedTransport(Protocol):
    """Port for retrieving and parsing one feed.

    Implementations raise on any failure; the message is what gets
    classified and reported.
    """

    async def fetch(self, url: str) -> ParsedFeed: ...
