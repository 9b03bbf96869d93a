"""Feed source configuration loader (``feeds.yaml``)."""

from pathlib import Path

import yaml
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from firehose.modules.feeds.domain.entities import FeedSource
from firehose.modules.feeds.domain.exceptions import FeedConfigError


class FeedConfig(BaseModel):
    """Top level of ``feeds.yaml``."""

    model_config = ConfigDict(extra="ignore")

    feeds: list[FeedSource] = Field(default_factory=list)


def load_feed_sources(path: Path) -> list[FeedSource]:
    """Load and validate the configured feed sources.

    Raises:
        FeedConfigError: 文件不可读、YAML 非法或字段校验失败
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise FeedConfigError(f"cannot read {path}: {e}") from e

    try:
        payload = yaml.safe_load(raw) or {}
    except yaml.YAMLError as e:
        raise FeedConfigError(f"YAML error in {path}: {e}") from e

    if not isinstance(payload, dict):
        raise FeedConfigError(f"{path} must contain a mapping with a 'feeds' list")

    try:
        config = FeedConfig.model_validate(payload)
    except PydanticValidationError as e:
        raise FeedConfigError(str(e)) from e

    logger.info(f"Loaded {len(config.feeds)} feeds from {path}")
    return config.feeds
