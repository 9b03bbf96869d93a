"""Firehose pipeline 入口。

步骤：
1. 拉取并索引 CNCF Landscape
2. 加载 Feed 配置
3. 并行抓取所有 Feed 并富化
4. 健康检查（成功率阈值）
5. 写出 JSON 并在 stdout 打印运行摘要

使用方式：
    python -m firehose.main
    python -m firehose.main --feeds-config config/feeds.yaml --output data/releases.json
"""

import argparse
import asyncio
import json
import sys
import time
from datetime import timedelta
from pathlib import Path
from typing import Any

from loguru import logger

from firehose.core.config import settings
from firehose.core.domain.exceptions import DomainException
from firehose.core.infrastructure.logging import BusinessEvents, setup_logging
from firehose.modules.catalog.application.index_builder import build_catalog_index
from firehose.modules.catalog.domain.provider import CatalogProvider
from firehose.modules.catalog.infrastructure.provider import HttpCatalogProvider
from firehose.modules.feeds.application.aggregator import FeedAggregator
from firehose.modules.feeds.application.health import evaluate_health
from firehose.modules.feeds.domain.transport import FeedTransport
from firehose.modules.feeds.infrastructure.config_loader import load_feed_sources
from firehose.modules.feeds.infrastructure.output import (
    OutputPerformance,
    build_output_document,
    format_duration,
    write_output,
)
from firehose.modules.feeds.infrastructure.transport import HttpFeedTransport


async def run_pipeline(
    feeds_config: Path,
    output_path: Path,
    catalog_provider: CatalogProvider,
    transport: FeedTransport,
) -> dict[str, Any]:
    """执行完整的抓取流程并返回运行摘要。

    Raises:
        DomainException: Catalog 不可用、配置非法或健康检查未通过
    """
    start_time = time.monotonic()

    logger.info("Fetching catalog data...")
    catalog_start = time.monotonic()
    document = await catalog_provider.load_document()
    catalog = build_catalog_index(document.content)
    catalog_duration = timedelta(seconds=time.monotonic() - catalog_start)
    BusinessEvents.catalog_loaded(
        projects_total=len(catalog), loaded_from=document.loaded_from
    )

    sources = load_feed_sources(feeds_config)

    feeds_start = time.monotonic()
    result = await FeedAggregator(catalog, transport).aggregate(sources)
    feeds_duration = timedelta(seconds=time.monotonic() - feeds_start)

    health = evaluate_health(result)
    if not health.healthy:
        BusinessEvents.health_check_failed(
            success_rate=health.success_rate, threshold=health.threshold
        )
        raise PipelineHealthError(health.success_rate, health.threshold)

    output_start = time.monotonic()
    output = build_output_document(
        result,
        catalog,
        build_duration=timedelta(seconds=time.monotonic() - start_time),
        performance=OutputPerformance(
            catalog_fetch_duration=format_duration(catalog_duration),
            feeds_fetch_duration=format_duration(feeds_duration),
        ),
    )
    # outputDuration 只覆盖文档组装，不含写盘
    output.metadata.performance.output_duration = format_duration(
        timedelta(seconds=time.monotonic() - output_start)
    )
    write_output(output, output_path)
    output_duration = timedelta(seconds=time.monotonic() - output_start)

    build_duration = timedelta(seconds=time.monotonic() - start_time)
    logger.info(
        f"Pipeline complete in {format_duration(build_duration)} "
        f"(output written in {format_duration(output_duration)}): {output_path}"
    )

    return {
        "success": True,
        "duration": format_duration(build_duration),
        "feeds_total": result.feeds_total,
        "feeds_ok": result.feeds_successful,
        "feeds_failed": result.feeds_failed,
        "releases": result.entries_total,
    }


class PipelineHealthError(DomainException):
    """Raised when too few feeds succeeded for the run to be usable."""

    error_code = "PIPELINE_UNHEALTHY"

    def __init__(self, success_rate: float, threshold: float):
        self.success_rate = success_rate
        self.threshold = threshold
        super().__init__(
            f"Catastrophic failure: only {success_rate:.1%} feeds succeeded "
            f"(threshold: more than {threshold:.0%})"
        )


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Aggregate CNCF release feeds")
    parser.add_argument(
        "--feeds-config",
        type=Path,
        default=settings.FEEDS_CONFIG_PATH,
        help="feeds.yaml path",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=settings.OUTPUT_PATH,
        help="output JSON path",
    )
    parser.add_argument("--catalog-url", default=None, help="landscape.yml URL")
    parser.add_argument(
        "--catalog-snapshot",
        type=Path,
        default=None,
        help="local landscape.yml used when the remote fetch fails",
    )
    parser.add_argument("--log-level", default=None, help="override LOG_LEVEL")
    return parser.parse_args(argv)


def cli(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    setup_logging(args.log_level)
    logger.info(f"{settings.PROJECT_NAME} pipeline v{settings.VERSION}")

    try:
        summary = asyncio.run(
            run_pipeline(
                feeds_config=args.feeds_config,
                output_path=args.output,
                catalog_provider=HttpCatalogProvider(
                    catalog_url=args.catalog_url,
                    snapshot_path=args.catalog_snapshot,
                ),
                transport=HttpFeedTransport(),
            )
        )
    except DomainException as e:
        logger.error(f"[{e.error_code}] {e.message}")
        print(
            json.dumps(
                {"success": False, "error_code": e.error_code, "error": e.message},
                indent=2,
            )
        )
        return 1

    print(json.dumps(summary, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(cli())
