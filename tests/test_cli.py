"""Тесты для CLI (`site_mapper.cli`) с использованием click.testing.CliRunner.
Проверяют команды `crawl`, `config`, `--version`, а также обработку ошибок.
"""
import json

import pytest
from click.testing import CliRunner

import site_mapper.cli as cli_module
from site_mapper.cli import cli
from site_mapper.crawler.crawler import CrawlState
from site_mapper.errors import InvalidURL
from site_mapper.logger import init_logging

QUIET = ["--log-level", "ERROR"]


@pytest.fixture(autouse=True)
def restore_logging():
    """CLI перенастраивает глобальный логгер на поток CliRunner; возвращаем как было."""
    yield
    init_logging()


@pytest.fixture(autouse=True)
def patch_start_crawl(monkeypatch, offline_graph):
    """Патчим start_crawl, чтобы вернуть готовый граф без обхода сети."""
    calls = []

    async def fake_crawl(cfg):
        calls.append(cfg)
        return offline_graph

    monkeypatch.setattr(cli_module, "start_crawl", fake_crawl)
    return calls


def test_version_option():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "SiteMapper" in result.output


def test_crawl_text_summary(patch_start_crawl):
    result = CliRunner().invoke(cli, QUIET + ["crawl", "example.com", "-w", "3", "--timeout", "2"])
    assert result.exit_code == 0, result.output
    assert "Site http://example.com - 4 pages" in result.output
    assert "/c -> ! Broken" in result.output
    cfg = patch_start_crawl[0]
    assert cfg.start_url == "example.com"
    assert cfg.workers == 3
    assert cfg.timeout == 2.0


def test_crawl_json_stdout():
    result = CliRunner().invoke(cli, QUIET + ["crawl", "example.com", "--format", "json"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert {n["id"] for n in data["nodes"]} == {"/", "/a", "/b", "/c"}
    assert len(data["edges"]) == 4


def test_crawl_json_and_html_files(tmp_path):
    out_json = tmp_path / "out.json"
    out_html = tmp_path / "report.html"
    result = CliRunner().invoke(
        cli, QUIET + ["crawl", "example.com", "--json", str(out_json), "--html", str(out_html), "--pretty"]
    )
    assert result.exit_code == 0, result.output
    assert json.loads(out_json.read_text(encoding="utf-8"))["edges"]
    assert out_html.exists()
    assert "JSON report" in result.output


def test_crawl_uses_config_file(tmp_path, patch_start_crawl):
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text("start_url: https://example.org\nworkers: 6\n", encoding="utf-8")
    result = CliRunner().invoke(cli, QUIET + ["--config", str(cfg_file), "crawl"])
    assert result.exit_code == 0, result.output
    assert patch_start_crawl[0].start_url == "https://example.org"
    assert patch_start_crawl[0].workers == 6


def test_crawl_without_url_fails():
    result = CliRunner().invoke(cli, QUIET + ["crawl"])
    assert result.exit_code == 1
    assert "Ошибка загрузки конфигурации" in result.output


def test_crawl_invalid_workers():
    result = CliRunner().invoke(cli, QUIET + ["crawl", "example.com", "-w", "0"])
    assert result.exit_code == 1


def test_crawl_construction_error(monkeypatch):
    async def broken(cfg):
        raise InvalidURL("failed to parse page 'http://[::1'")

    monkeypatch.setattr(cli_module, "start_crawl", broken)
    result = CliRunner().invoke(cli, QUIET + ["crawl", "http://[::1"])
    assert result.exit_code == 1
    assert "Ошибка при обходе" in result.output


def test_crawl_cancelled_warns(offline_graph):
    offline_graph._state = CrawlState.CANCELLED
    result = CliRunner().invoke(cli, QUIET + ["crawl", "example.com"])
    assert result.exit_code == 0
    assert "Обход не завершён" in result.output


def test_show_config(tmp_path):
    cfg_file = tmp_path / "default.json"
    cfg_file.write_text(json.dumps({"start_url": "https://example.com", "workers": 2}), encoding="utf-8")
    result = CliRunner().invoke(cli, QUIET + ["--config", str(cfg_file), "config"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["start_url"] == "https://example.com"
    assert data["workers"] == 2
    assert data["timeout"] == 5.0
