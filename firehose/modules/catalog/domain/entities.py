"""Catalog domain models."""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType


@dataclass(frozen=True)
class CatalogEntry:
    """Metadata for one catalog project."""

    name: str
    description: str | None = None
    repo_url: str | None = None
    homepage_url: str | None = None
    maturity: str | None = None  # graduated / incubating / sandbox


class CatalogIndex(Mapping[str, CatalogEntry]):
    """Read-only ``owner/repo`` → :class:`CatalogEntry` lookup.

    Safe to share between concurrent fetch tasks: nothing can mutate it after
    construction.
    """

    def __init__(self, entries: Mapping[str, CatalogEntry] | None = None) -> None:
        self._entries: Mapping[str, CatalogEntry] = MappingProxyType(
            dict(entries or {})
        )

    def __getitem__(self, slug: str) -> CatalogEntry:
        return self._entries[slug]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"CatalogIndex(projects={len(self)})"

    def lookup(self, slug: str) -> CatalogEntry | None:
        """Return the entry for ``slug``; empty slugs never match."""
        if not slug:
            return None
        return self._entries.get(slug)
