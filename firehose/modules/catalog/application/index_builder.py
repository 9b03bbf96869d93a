"""Catalog index builder.

把嵌套的 landscape 文档（category → subcategory → item）展平为
``owner/repo`` → CatalogEntry 的只读索引。
"""

from collections.abc import Iterator
from typing import Any, TypeVar

import yaml
from loguru import logger
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from firehose.modules.catalog.domain.entities import CatalogEntry, CatalogIndex
from firehose.modules.catalog.domain.exceptions import CatalogParseError
from firehose.modules.catalog.infrastructure.schema import (
    LandscapeCategory,
    LandscapeDocument,
    LandscapeItem,
    LandscapeSubcategory,
)
from firehose.modules.feeds.domain.identifiers import extract_repo_slug

TModel = TypeVar("TModel", bound=BaseModel)


def build_catalog_index(raw: bytes | str) -> CatalogIndex:
    """Parse a landscape document into a :class:`CatalogIndex`.

    Args:
        raw: landscape.yml 原始内容

    Returns:
        CatalogIndex: 只读索引

    Raises:
        CatalogParseError: 文档不是合法的层级数据
    """
    document = _parse_document(raw)

    entries: dict[str, CatalogEntry] = {}
    skipped = 0

    for item in _iter_items(document):
        if not item.repo_url:
            continue

        slug = extract_repo_slug(item.repo_url)
        if not slug:
            skipped += 1
            continue

        # 重复 slug：后者覆盖前者
        entries[slug] = CatalogEntry(
            name=item.name,
            description=item.resolved_description(),
            repo_url=item.repo_url,
            homepage_url=item.homepage_url,
            maturity=item.project,
        )

    logger.debug(
        f"Catalog index built: {len(entries)} projects, {skipped} non-GitHub repos skipped"
    )
    return CatalogIndex(entries)


def _parse_document(raw: bytes | str) -> LandscapeDocument:
    try:
        payload = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise CatalogParseError(f"YAML error: {e}") from e

    if not isinstance(payload, dict):
        raise CatalogParseError("document must be a mapping")

    try:
        return LandscapeDocument.model_validate(payload)
    except PydanticValidationError as e:
        raise CatalogParseError(f"invalid 'landscape' list: {e}") from e


def _iter_items(document: LandscapeDocument) -> Iterator[LandscapeItem]:
    for raw_category in document.landscape:
        category = _validate_or_skip(LandscapeCategory, raw_category)
        if category is None:
            continue

        for raw_subcategory in category.subcategories:
            subcategory = _validate_or_skip(LandscapeSubcategory, raw_subcategory)
            if subcategory is None:
                continue

            for raw_item in subcategory.items:
                item = _validate_or_skip(LandscapeItem, raw_item)
                if item is not None:
                    yield item


def _validate_or_skip(model: type[TModel], value: Any) -> TModel | None:
    if not isinstance(value, dict):
        return None
    try:
        return model.model_validate(value)
    except PydanticValidationError as e:
        logger.debug(f"Skipping malformed {model.__name__}: {e.error_count()} errors")
        return None
