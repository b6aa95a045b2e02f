"""Tests for CLI functionality."""

from __future__ import annotations

import json

import pytest

from llm_footprint.cli import main


@pytest.fixture(autouse=True)
def _empty_cwd(tmp_path, monkeypatch):
    """Keep default configuration discovery away from the repository."""
    monkeypatch.chdir(tmp_path)


def test_cli_main_no_args(capsys):
    """Missing required arguments is an error."""
    result = main([])
    assert result == 1

    captured = capsys.readouterr()
    assert "required" in captured.err


def test_cli_main_help(capsys):
    """Help exits successfully and documents the flags."""
    result = main(["--help"])
    assert result == 0

    captured = capsys.readouterr()
    assert "usage:" in captured.out.lower()
    assert "--output-tokens" in captured.out


def test_cli_prints_report(capsys):
    """A valid request prints the JSON report to stdout."""
    result = main(["-p", "mistralai", "-m", "open-mistral-7b", "-n", "100"])
    assert result == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["kind"] == "llm_footprint"
    assert payload["request"]["electricity_mix_zone"] == "WOR"
    assert "request_latency" not in payload["request"]
    assert payload["energy"]["value"]["min"] <= payload["energy"]["value"]["max"]


def test_cli_latency_and_zone(capsys):
    """Latency and zone are reflected in the report."""
    result = main(
        [
            "--provider",
            "openai",
            "--model",
            "gpt-4o-mini",
            "--output-tokens",
            "50",
            "--latency",
            "0.5",
            "--zone",
            "FRA",
        ]
    )
    assert result == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["request"]["request_latency"] == 0.5
    assert payload["request"]["electricity_mix_zone"] == "FRA"


def test_cli_writes_output_file(tmp_path, capsys):
    """--output writes the report to a file instead of stdout."""
    target = tmp_path / "out" / "report.json"
    result = main(
        ["-p", "openai", "-m", "gpt-4o", "-n", "10", "--output", str(target)]
    )
    assert result == 0
    assert capsys.readouterr().out == ""
    payload = json.loads(target.read_text(encoding="utf-8"))
    assert payload["request"]["model"] == "gpt-4o"


def test_cli_unknown_model(capsys):
    """An unknown model is reported on stderr with exit code 1."""
    result = main(["-p", "openai", "-m", "gpt-17", "-n", "10"])
    assert result == 1
    assert "Could not find model `gpt-17`" in capsys.readouterr().err


def test_cli_unknown_zone(capsys):
    """An unknown zone is reported on stderr with exit code 1."""
    result = main(["-p", "openai", "-m", "gpt-4o", "-n", "10", "-z", "ATL"])
    assert result == 1
    assert "ATL" in capsys.readouterr().err


def test_cli_rejects_non_positive_tokens(capsys):
    """Token counts must be positive integers."""
    assert main(["-p", "openai", "-m", "gpt-4o", "-n", "0"]) == 1
    assert main(["-p", "openai", "-m", "gpt-4o", "-n", "ten"]) == 1


def test_cli_rejects_unrepresentable_token_count(capsys):
    """A token count beyond float range exits 1 with a message."""
    result = main(["-p", "mistralai", "-m", "open-mistral-7b", "-n", "1" + "0" * 400])
    assert result == 1
    assert "output_token_count" in capsys.readouterr().err


def test_cli_config_file(tmp_path, capsys):
    """A configuration file changes the coefficients used."""
    cfg = tmp_path / "cfg.json"
    cfg.write_text('{"coefficients": {"datacenter_pue": 1.0}}', encoding="utf-8")

    assert main(["-p", "openai", "-m", "gpt-4o", "-n", "10"]) == 0
    default = json.loads(capsys.readouterr().out)
    assert main(["-p", "openai", "-m", "gpt-4o", "-n", "10", "-c", str(cfg)]) == 0
    tuned = json.loads(capsys.readouterr().out)
    assert tuned["energy"]["value"]["max"] < default["energy"]["value"]["max"]


def test_cli_missing_config_file(tmp_path, capsys):
    """A missing configuration file is an error."""
    result = main(
        ["-p", "openai", "-m", "gpt-4o", "-n", "10", "-c", str(tmp_path / "no.yml")]
    )
    assert result == 1
    assert "no.yml" in capsys.readouterr().err


def test_cli_invalid_log_level(capsys):
    """An unknown log level is rejected."""
    result = main(["-p", "openai", "-m", "gpt-4o", "-n", "10", "--log-level", "LOUD"])
    assert result == 1
