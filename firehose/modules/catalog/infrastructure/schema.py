"""Typed schema for the CNCF landscape document.

Each level is validated on its own so that a malformed leaf only drops that
leaf, never the whole document.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LandscapeItemExtra(BaseModel):
    """``extra`` block of a landscape item (only the fields we read)."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    summary_use_case: str | None = None
    summary_business_use_case: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def _drop_non_strings(cls, value: Any) -> Any:
        return value if isinstance(value, str) else None


class LandscapeItem(BaseModel):
    """Leaf project entry."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str = ""
    description: str | None = None
    repo_url: str | None = None
    homepage_url: str | None = None
    project: str | None = Field(default=None, description="graduated/incubating/sandbox")
    extra: LandscapeItemExtra | None = None

    def resolved_description(self) -> str | None:
        """description → summary_use_case → summary_business_use_case."""
        candidates = [self.description]
        if self.extra is not None:
            candidates += [
                self.extra.summary_use_case,
                self.extra.summary_business_use_case,
            ]
        for candidate in candidates:
            if candidate:
                return candidate
        return None


class LandscapeSubcategory(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str | None = None
    items: list[Any] = Field(default_factory=list)


class LandscapeCategory(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str | None = None
    subcategories: list[Any] = Field(default_factory=list)


class LandscapeDocument(BaseModel):
    """Top level of ``landscape.yml``."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    landscape: list[Any] = Field(default_factory=list)

    @field_validator("landscape", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        # `landscape:` with no value parses as None
        return [] if value is None else value
