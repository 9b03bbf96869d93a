"""端到端流程测试（全部依赖均为内存替身）。"""

import json
from datetime import UTC, datetime
from pathlib import Path

import pytest

from firehose.main import PipelineHealthError, cli, run_pipeline
from firehose.modules.catalog.domain.exceptions import CatalogParseError
from firehose.modules.catalog.domain.provider import CatalogDocument
from firehose.modules.feeds.domain.transport import ParsedFeed

pytestmark = pytest.mark.anyio

K8S = "https://github.com/kubernetes/kubernetes/releases.atom"
ENVOY = "https://github.com/envoyproxy/envoy/releases.atom"
BROKEN = "https://github.com/broken/feed/releases.atom"


class StaticCatalogProvider:
    def __init__(self, content: str) -> None:
        self.content = content.encode("utf-8")

    async def load_document(self) -> CatalogDocument:
        return CatalogDocument(content=self.content, loaded_from="snapshot")


@pytest.fixture
def feeds_config(tmp_path: Path) -> Path:
    path = tmp_path / "feeds.yaml"
    path.write_text(
        "feeds:\n"
        + "".join(
            f"  - url: {url}\n    category: graduated\n" for url in (K8S, ENVOY, BROKEN)
        ),
        encoding="utf-8",
    )
    return path


async def test_run_pipeline_writes_output(
    tmp_path, feeds_config, landscape_yaml, fake_transport, make_item
):
    transport = fake_transport(
        feeds={
            K8S: ParsedFeed(items=[make_item("k", datetime(2024, 1, 1, tzinfo=UTC))]),
            ENVOY: ParsedFeed(items=[make_item("e", datetime(2024, 1, 2, tzinfo=UTC))]),
        },
        errors={BROKEN: "HTTP 404 Not Found"},
    )
    output_path = tmp_path / "out" / "releases.json"

    summary = await run_pipeline(
        feeds_config=feeds_config,
        output_path=output_path,
        catalog_provider=StaticCatalogProvider(landscape_yaml),
        transport=transport,
    )

    assert summary["success"] is True
    assert summary["feeds_total"] == 3
    assert summary["feeds_ok"] == 2
    assert summary["feeds_failed"] == 1
    assert summary["releases"] == 2

    payload = json.loads(output_path.read_text(encoding="utf-8"))
    assert [r["id"] for r in payload["releases"]] == ["e", "k"]
    assert payload["releases"][0]["projectName"] == "Envoy"
    assert payload["metadata"]["stats"]["catalogProjectsMatched"] == 2
    assert payload["metadata"]["stats"]["catalogProjectsTotal"] == 3
    assert payload["metadata"]["performance"]["outputDuration"].endswith("s")
    failed = [feed for feed in payload["feeds"] if feed["status"] == "error"]
    assert [feed["feedUrl"] for feed in failed] == [BROKEN]
    assert "entriesCount" not in failed[0]


async def test_run_pipeline_unhealthy(
    tmp_path, feeds_config, landscape_yaml, fake_transport, make_item
):
    transport = fake_transport(
        feeds={K8S: ParsedFeed(items=[make_item("k", None)])},
        errors={ENVOY: "context deadline exceeded", BROKEN: "connection refused"},
    )
    output_path = tmp_path / "releases.json"

    with pytest.raises(PipelineHealthError):
        await run_pipeline(
            feeds_config=feeds_config,
            output_path=output_path,
            catalog_provider=StaticCatalogProvider(landscape_yaml),
            transport=transport,
        )

    assert not output_path.exists()


async def test_catalog_parse_failure_is_fatal(tmp_path, feeds_config, fake_transport):
    transport = fake_transport()

    with pytest.raises(CatalogParseError):
        await run_pipeline(
            feeds_config=feeds_config,
            output_path=tmp_path / "releases.json",
            catalog_provider=StaticCatalogProvider("landscape: [unclosed"),
            transport=transport,
        )

    assert transport.calls == []


def test_cli_reports_config_error(tmp_path, capsys, monkeypatch, landscape_yaml):
    monkeypatch.setattr(
        "firehose.main.HttpCatalogProvider",
        lambda **kwargs: StaticCatalogProvider(landscape_yaml),
    )

    exit_code = cli(
        [
            "--feeds-config",
            str(tmp_path / "missing.yaml"),
            "--output",
            str(tmp_path / "releases.json"),
        ]
    )

    assert exit_code == 1
    summary = json.loads(capsys.readouterr().out)
    assert summary["success"] is False
    assert summary["error_code"] == "FEED_CONFIG_ERROR"
