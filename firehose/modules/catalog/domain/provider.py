"""Catalog provider port."""

from dataclasses import dataclass
from typing import Literal, Protocol


@dataclass(frozen=True)
class CatalogDocument:
    """Raw catalog bytes and where they came from."""

    content: bytes
    loaded_from: Literal["remote", "snapshot"]


class CatalogProvider(Protocol):
    """Port for loading the raw catalog document."""

    async def load_document(self) -> CatalogDocument: ...
