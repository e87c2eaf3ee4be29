from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from cli import main as cli_main

runner = CliRunner()


@pytest.fixture(autouse=True)
def _wire_cli(monkeypatch, settings, scenario_aggregator):
    monkeypatch.setattr(cli_main, "get_settings", lambda: settings)
    monkeypatch.setattr(cli_main, "configure_logging", lambda **_: None)
    monkeypatch.setattr(cli_main, "build_aggregator", lambda _settings: scenario_aggregator)


def test_check_json_output() -> None:
    result = runner.invoke(cli_main.app, ["check", "free.com", "--json"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["bestPrice"]["registrar"] == "R3"


def test_check_invalid_domain_exits_with_usage_code() -> None:
    result = runner.invoke(cli_main.app, ["check", "not a domain"])

    assert result.exit_code == 2


def test_bulk_writes_reports(tmp_path) -> None:
    json_out = tmp_path / "out" / "report.json"
    html_out = tmp_path / "out" / "report.html"

    result = runner.invoke(
        cli_main.app,
        ["bulk", "-d", "free.com", "-d", "other.io", "--json-out", str(json_out), "--html-out", str(html_out), "-q"],
    )

    assert result.exit_code == 0, result.output
    report = json.loads(json_out.read_text(encoding="utf-8"))
    assert report["total"] == 2
    assert "free.com" in html_out.read_text(encoding="utf-8")


def test_bulk_without_domains_fails() -> None:
    result = runner.invoke(cli_main.app, ["bulk", "--text", "nothing to see", "-q"])

    assert result.exit_code == 2
