"""Infrastructure provider for the landscape catalog."""

from __future__ import annotations

from pathlib import Path

import httpx
from loguru import logger

from firehose.core.config import settings
from firehose.modules.catalog.domain.exceptions import CatalogFetchError
from firehose.modules.catalog.domain.provider import CatalogDocument, CatalogProvider


class HttpCatalogProvider(CatalogProvider):
    """Load the catalog from a remote URL with optional snapshot fallback."""

    def __init__(
        self,
        *,
        catalog_url: str | None = None,
        timeout_sec: float | None = None,
        snapshot_path: Path | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.catalog_url = catalog_url or str(settings.CATALOG_URL)
        self.timeout_sec = timeout_sec or settings.CATALOG_FETCH_TIMEOUT_SEC
        self.snapshot_path = snapshot_path or settings.CATALOG_SNAPSHOT_PATH
        self._transport = transport

    async def load_document(self) -> CatalogDocument:
        """Load catalog from remote, then fallback to local snapshot."""
        try:
            content = await self._load_from_remote()
            return CatalogDocument(content=content, loaded_from="remote")
        except httpx.HTTPError as exc:
            if self.snapshot_path is None:
                raise CatalogFetchError(f"{self.catalog_url}: {exc}") from exc
            logger.warning(f"Failed to load catalog remotely: {exc}")

        try:
            content = self.snapshot_path.read_bytes()
        except OSError as exc:
            raise CatalogFetchError(
                f"remote failed and snapshot unreadable ({self.snapshot_path}): {exc}"
            ) from exc
        return CatalogDocument(content=content, loaded_from="snapshot")

    async def _load_from_remote(self) -> bytes:
        async with httpx.AsyncClient(
            timeout=self.timeout_sec,
            follow_redirects=True,
            transport=self._transport,
        ) as client:
            response = await client.get(
                self.catalog_url,
                headers={
                    "User-Agent": settings.FETCHER_USER_AGENT,
                    "Accept": "application/yaml, text/yaml, text/plain, */*",
                },
            )
            response.raise_for_status()
            return response.content
