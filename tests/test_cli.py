from __future__ import annotations

import json

import pytest

from upsell.client.cli import main


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    monkeypatch.setenv("UPSELL_TELEMETRY", str(tmp_path / "telemetry.jsonl"))
    for name in ("UPSELL_ENTITLEMENT", "UPSELL_OFFERINGS", "UPSELL_CATALOG", "UPSELL_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def test_offerings_prints_labels(capsys) -> None:
    assert main(["offerings"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == ["Buy Monthly - $4.99", "Buy Annual - $39.99", "Buy Lifetime - $99.99"]


def test_buy_json_success(capsys) -> None:
    assert main(["--json", "buy", "annual_cats"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["outcome"] == "success"
    assert data["entitlements"] == ["pro_cat"]


def test_buy_failure_exit_code(capsys) -> None:
    assert main(["--json", "buy", "annual_cats", "--fail", "network timeout"]) == 1
    data = json.loads(capsys.readouterr().out)
    assert data["outcome"] == "failure"
    assert data["error"]["message"] == "network timeout"


def test_missing_offering_config(monkeypatch, capsys) -> None:
    monkeypatch.setenv("UPSELL_OFFERINGS", "monthly_cats,weekly_cats")
    assert main(["offerings"]) == 1
    assert "weekly_cats offering not found" in capsys.readouterr().out


def test_bad_catalog_exit_code(monkeypatch, tmp_path) -> None:
    bad = tmp_path / "catalog.json"
    bad.write_text("{", encoding="utf-8")
    monkeypatch.setenv("UPSELL_CATALOG", str(bad))
    assert main(["validate"]) == 2
    assert main(["offerings"]) == 2


def test_validate_and_skip(capsys) -> None:
    assert main(["validate"]) == 0
    assert main(["skip"]) == 0
    assert "Showing cat content." in capsys.readouterr().out
