"""Application configuration."""

from pathlib import Path
from typing import Literal

from pydantic import Field, HttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Application
    PROJECT_NAME: str = "firehose"
    VERSION: str = "1.0.0"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: str = "INFO"

    # Catalog (CNCF Landscape)
    CATALOG_URL: HttpUrl = HttpUrl(
        "https://raw.githubusercontent.com/cncf/landscape/master/landscape.yml"
    )
    CATALOG_FETCH_TIMEOUT_SEC: float = 60.0
    CATALOG_SNAPSHOT_PATH: Path | None = None  # 远程失败时的本地快照

    # Feeds
    FEEDS_CONFIG_PATH: Path = Path("config/feeds.yaml")
    FEED_FETCH_TIMEOUT_SEC: float = 30.0
    FETCHER_USER_AGENT: str = (
        "Mozilla/5.0 (compatible; Firehose/1.0; +https://github.com/castrojo/firehose)"
    )

    # Output
    OUTPUT_PATH: Path = Path("data/releases.json")
    OUTPUT_SCHEMA_VERSION: str = "1.0.0"

    # Health check：成功率必须严格大于该阈值
    MIN_FEED_SUCCESS_RATE: float = Field(default=0.5, ge=0.0, le=1.0)


settings = Settings()
