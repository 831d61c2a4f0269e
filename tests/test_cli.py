# File: tests/test_cli.py
"""Тесты для CLI (`contact_scout/cli.py`) с использованием click.testing.CliRunner.
Проверяют команды `crawl`, `enrich`, `config`, `serve`, `--version`, а также обработку ошибок.
"""
import importlib
import json

import pytest
from click.testing import CliRunner

from contact_scout.cli import cli
from contact_scout.crawler.models import CrawlResult
from contact_scout.enrich import EnrichResult, EnrichStage, Suggestion, SuggestionField

# пакет экспортирует группу `cli`, поэтому модуль берём из sys.modules
cli_module = importlib.import_module("contact_scout.cli")


@pytest.fixture()
def calls():
    return {}


@pytest.fixture(autouse=True)
def patch_engine(monkeypatch, calls, tmp_path):
    """Патчим start_crawl/start_enrich, чтобы не ходить в сеть."""

    async def fake_crawl(cfg, sites, max_pages=None, sink=None):
        calls["crawl"] = (sites, max_pages, sink)
        return {s.domain: CrawlResult(domain=s.domain, emails=[f"info@{s.domain}"]) for s in sites}

    async def fake_enrich(cfg, request):
        calls["enrich"] = request
        return EnrichResult(
            suggestions=[Suggestion(SuggestionField.DOMAIN, "acme.de", 0.9, "email")],
            stage=EnrichStage.EMAIL_DOMAIN,
            attempts=1,
        )

    monkeypatch.setattr(cli_module, "start_crawl", fake_crawl)
    monkeypatch.setattr(cli_module, "start_enrich", fake_enrich)
    # без configs/default.yaml используются значения по умолчанию
    monkeypatch.chdir(tmp_path)


def test_version_option():
    runner = CliRunner()
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "ContactScout" in result.output


def test_show_config(tmp_path):
    cfg_file = tmp_path / "custom.yaml"
    cfg_file.write_text("max_pages_per_site: 3\nbrands: [Bosch]\n", encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "config"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["max_pages_per_site"] == 3
    assert data["brands"] == ["Bosch"]


def test_invalid_config_exits_with_error(tmp_path):
    cfg_file = tmp_path / "bad.yaml"
    cfg_file.write_text("max_pages_per_site: 500\n", encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "config"])
    assert result.exit_code == 1


def test_crawl_stdout(calls):
    runner = CliRunner()
    result = runner.invoke(cli, ["crawl", "acme.de", "https://www.shop.at", "-m", "3"])
    assert result.exit_code == 0
    output = json.loads(result.stdout)
    assert list(output["results"]) == ["acme.de", "shop.at"]
    assert output["results"]["acme.de"]["emails"] == ["info@acme.de"]

    sites, max_pages, sink = calls["crawl"]
    assert [s.homepage for s in sites] == ["https://acme.de", "https://www.shop.at"]
    assert max_pages == 3
    assert sink is None


def test_crawl_json_file_and_jsonl_sink(tmp_path, calls):
    out = tmp_path / "reports" / "contacts.json"
    runner = CliRunner()
    result = runner.invoke(cli, ["crawl", "acme.de", "--json", str(out), "--jsonl", str(tmp_path / "r.jsonl")])
    assert result.exit_code == 0
    assert "JSON report" in result.output
    assert json.loads(out.read_text(encoding="utf-8"))["results"]["acme.de"]["domain"] == "acme.de"
    assert calls["crawl"][2] is not None


def test_crawl_rejects_page_limit_out_of_range():
    runner = CliRunner()
    result = runner.invoke(cli, ["crawl", "acme.de", "--max-pages", "51"])
    assert result.exit_code == 2


def test_crawl_failure_exits_1(monkeypatch):
    async def broken(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(cli_module, "start_crawl", broken)
    runner = CliRunner()
    result = runner.invoke(cli, ["crawl", "acme.de"])
    assert result.exit_code == 1


def test_enrich_outputs_suggestions(calls):
    runner = CliRunner()
    result = runner.invoke(cli, ["enrich", "--email", "sales@acme.de"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["suggestions"][0]["field"] == "domain"
    assert data["trace"]["stage"] == "email_domain"
    assert calls["enrich"].email == "sales@acme.de"


def test_enrich_without_input_exits_1():
    runner = CliRunner()
    result = runner.invoke(cli, ["enrich"])
    assert result.exit_code == 1


def test_serve_builds_app(monkeypatch):
    served = {}

    def fake_run_app(app, host, port, print=None):
        served.update(app=app, host=host, port=port)

    monkeypatch.setattr(cli_module, "run_app", fake_run_app)
    runner = CliRunner()
    result = runner.invoke(cli, ["serve", "--port", "9000"])
    assert result.exit_code == 0
    assert (served["host"], served["port"]) == ("127.0.0.1", 9000)
    routes = {r.resource.canonical for r in served["app"].router.routes()}
    assert {"/api/crawl", "/api/enrich/org"} <= routes
