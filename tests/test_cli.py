# File: tests/test_cli.py
"""Тесты для CLI (`link_scout/cli.py`) с использованием click.testing.CliRunner.
Проверяют команды `scan`, `config`, `--version`, а также обработку ошибок.
"""
import importlib
import json

import pytest
from click.testing import CliRunner

from conftest import SITE, discovered
from link_scout import __version__
from link_scout.cli import cli
from link_scout.crawler.models import CrawlStatus
from link_scout.engine import DiscoveryReport
from link_scout.errors import AggregationError
from link_scout.linking import generate
from link_scout.logger import init_logging
from link_scout.ranker import rank

# link_scout re-exports the click group as `cli`, so take the module itself
cli_module = importlib.import_module("link_scout.cli")


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    # CliRunner closes the streams the CLI attached its handler to
    init_logging()


@pytest.fixture()
def scans(monkeypatch):
    """Патчим start_scan: фиктивный отчёт без сетевых запросов."""
    calls = []
    pages = [discovered("/about", "About"), discovered("/", "Acme"), discovered("/misc", "Misc")]
    report = DiscoveryReport(seed=f"{SITE}/", crawl_status=CrawlStatus.COMPLETED, pages=pages)
    report.opportunities = rank([generate(page) for page in pages])

    async def fake_scan(cfg):
        calls.append(cfg)
        return report

    monkeypatch.setattr(cli_module, "start_scan", fake_scan)
    return calls


def test_version_option():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert f"LinkScout, version {__version__}" in result.output


def test_show_config_from_url():
    result = CliRunner().invoke(cli, ["--url", "https://example.com", "--limit", "7", "config"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["base_url"].rstrip("/") == "https://example.com"
    assert data["max_pages"] == 7


def test_show_config_from_file(tmp_path):
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text("base_url: https://example.com\nmax_pages: 3\n", encoding="utf-8")
    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "--url", "https://override.test", "config"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["base_url"].rstrip("/") == "https://override.test"
    assert data["max_pages"] == 3


def test_invalid_config_exits_with_error(tmp_path):
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text("base_url: https://example.com\nmax_pages: 0\n", encoding="utf-8")
    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "config"])
    assert result.exit_code == 1
    assert "Ошибка загрузки конфигурации" in result.output


def test_scan_prints_json(scans):
    result = CliRunner().invoke(cli, ["--url", SITE, "scan"])
    assert result.exit_code == 0, result.output
    records = json.loads(result.output)
    assert [r["pageType"] for r in records] == ["homepage", "about", "other"]
    assert len(scans) == 1


def test_scan_writes_artifacts(tmp_path, scans):
    json_path = tmp_path / "links.json"
    sitemap_path = tmp_path / "sitemap.txt"
    insights_path = tmp_path / "insights.json"
    html_path = tmp_path / "report.html"
    result = CliRunner().invoke(
        cli,
        [
            "--url", SITE, "scan",
            "--json", str(json_path),
            "--sitemap", str(sitemap_path),
            "--insights", str(insights_path),
            "--html", str(html_path),
        ],
    )
    assert result.exit_code == 0, result.output
    assert json.loads(json_path.read_text(encoding="utf-8"))[0]["url"] == f"{SITE}/"
    assert sitemap_path.read_text(encoding="utf-8").splitlines() == [f"{SITE}/", f"{SITE}/about", f"{SITE}/misc"]
    assert insights_path.exists()
    assert html_path.exists()
    assert "Total pages: 3" in result.output
    assert "High-priority links:" in result.output


def test_scan_deadline_override(scans):
    result = CliRunner().invoke(cli, ["--url", SITE, "scan", "--deadline", "2.5"])
    assert result.exit_code == 0, result.output
    assert scans[0].deadline == 2.5


def test_scan_unreachable_seed(monkeypatch):
    async def failing_scan(cfg):
        raise AggregationError(f"{SITE}/", "timeout")

    monkeypatch.setattr(cli_module, "start_scan", failing_scan)
    result = CliRunner().invoke(cli, ["--url", SITE, "scan"])
    assert result.exit_code == 1
    assert "Сайт недоступен" in result.output
