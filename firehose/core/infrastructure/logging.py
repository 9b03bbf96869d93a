"""Logging configuration with structlog integration.

提供两种日志记录方式：
1. loguru: 用于一般调试日志
2. structlog: 用于关键业务事件的结构化日志
"""

import sys
from typing import Any

import structlog
from loguru import logger

from firehose.core.config import settings


def setup_logging(level: str | None = None) -> None:
    """Configure application logging with structlog and loguru."""
    level = (level or settings.LOG_LEVEL).upper()

    _configure_structlog(level)
    _configure_loguru(level)

    logger.info(f"Logging configured with level: {level}")


def _configure_structlog(level: str) -> None:
    """配置 structlog 处理器链。"""
    if settings.ENVIRONMENT == "local":
        renderer = structlog.dev.ConsoleRenderer(colors=True)
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            _get_log_level_number(level)
        ),
        context_class=dict,
        # stdout 留给运行摘要 JSON
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def _configure_loguru(level: str) -> None:
    """配置 loguru。"""
    logger.remove()

    logger.add(
        sys.stderr,
        level=level,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        colorize=settings.ENVIRONMENT == "local",
    )


def _get_log_level_number(level: str) -> int:
    """将日志级别字符串转换为数字。"""
    levels = {
        "DEBUG": 10,
        "INFO": 20,
        "WARNING": 30,
        "ERROR": 40,
        "CRITICAL": 50,
    }
    return levels.get(level.upper(), 20)


# ============================================================================
# 业务事件日志记录器
# ============================================================================


class BusinessEvents:
    """业务事件日志助手类。

    提供统一的业务事件日志记录接口，确保事件格式一致。

    Usage:
        BusinessEvents.feed_fetched(feed_url="...", entries_count=10, duration_ms=350)
    """

    _log = structlog.get_logger("business.events")

    @classmethod
    def catalog_loaded(
        cls,
        projects_total: int,
        loaded_from: str,
        **extra: Any,
    ) -> None:
        """记录 Catalog 加载事件。"""
        cls._log.info(
            "catalog_loaded",
            event_type="catalog",
            projects_total=projects_total,
            loaded_from=loaded_from,
            **extra,
        )

    @classmethod
    def feed_fetched(
        cls,
        feed_url: str,
        entries_count: int,
        duration_ms: int,
        project_slug: str | None = None,
        **extra: Any,
    ) -> None:
        """记录单个源抓取成功事件。"""
        cls._log.info(
            "feed_fetched",
            event_type="fetch",
            feed_url=feed_url,
            entries_count=entries_count,
            duration_ms=duration_ms,
            project_slug=project_slug,
            **extra,
        )

    @classmethod
    def feed_fetch_failed(
        cls,
        feed_url: str,
        error: str,
        error_type: str,
        **extra: Any,
    ) -> None:
        """记录单个源抓取失败事件。"""
        cls._log.warning(
            "feed_fetch_failed",
            event_type="fetch_error",
            feed_url=feed_url,
            error=error,
            error_type=error_type,
            **extra,
        )

    @classmethod
    def aggregation_completed(
        cls,
        feeds_total: int,
        feeds_successful: int,
        feeds_failed: int,
        releases_total: int,
        duration_ms: int,
        **extra: Any,
    ) -> None:
        """记录聚合完成事件。"""
        cls._log.info(
            "aggregation_completed",
            event_type="aggregate",
            feeds_total=feeds_total,
            feeds_successful=feeds_successful,
            feeds_failed=feeds_failed,
            releases_total=releases_total,
            duration_ms=duration_ms,
            **extra,
        )

    @classmethod
    def health_check_failed(
        cls,
        success_rate: float,
        threshold: float,
        **extra: Any,
    ) -> None:
        """记录健康检查失败事件。"""
        cls._log.error(
            "health_check_failed",
            event_type="health",
            success_rate=round(success_rate, 4),
            threshold=threshold,
            **extra,
        )

    @classmethod
    def output_written(
        cls,
        path: str,
        releases_total: int,
        **extra: Any,
    ) -> None:
        """记录输出写入事件。"""
        cls._log.info(
            "output_written",
            event_type="output",
            path=path,
            releases_total=releases_total,
            **extra,
        )
