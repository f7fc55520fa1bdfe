"""Unit tests for the command-line interface."""

import json

from click.testing import CliRunner

from interfaces.cli import cli

REQUEST = {
    "instrument": {"side": "call", "strike": 100, "expiry": "2026-07-02", "ratio": 1},
    "scenarios": [
        {"underlyingPrice": 100, "rate": 0.05, "volatility": 0.2, "valuationDate": "2026-01-01"},
        {"underlyingPrice": 105, "rate": 0.05, "valuationDate": "2026-01-01"},
    ],
    "referencePriceOverride": 6.0,
}


def test_price_command():
    result = CliRunner().invoke(cli, ["price", "-S", "100", "-K", "100", "-T", "1", "-r", "0.05", "-v", "0.2"])
    assert result.exit_code == 0
    assert "Call Option Price: 10.45" in result.output


def test_greeks_command():
    result = CliRunner().invoke(
        cli, ["greeks", "-S", "100", "-K", "100", "-T", "1", "-r", "0.05", "-v", "0.2", "-t", "put"]
    )
    assert result.exit_code == 0
    assert "Greeks for Put Option" in result.output
    assert "Delta" in result.output


def test_scenarios_command():
    result = CliRunner().invoke(cli, ["scenarios", "-"], input=json.dumps(REQUEST))
    assert result.exit_code == 0, result.output

    data = json.loads(result.output)
    assert data["referencePrice"] == 6.0
    first, second = data["results"]
    assert abs(first["fairValue"] - 6.8776) < 1e-3
    assert abs(first["absChange"] - (first["fairValue"] - 6.0)) < 1e-5
    assert second["fairValue"] is None
    assert second["valuationDate"] == "2026-01-01"


def test_scenarios_command_rejects_spot_positions():
    request = {**REQUEST, "instrument": {**REQUEST["instrument"], "side": "spot"}}
    result = CliRunner().invoke(cli, ["scenarios", "-"], input=json.dumps(request))
    assert result.exit_code != 0
    assert "not supported" in result.output


def test_scenarios_command_invalid_json():
    result = CliRunner().invoke(cli, ["scenarios", "-"], input="{not json")
    assert result.exit_code != 0
    assert "Invalid JSON" in result.output


def test_curve_command():
    result = CliRunner().invoke(
        cli,
        ["curve", "-S", "100", "-K", "100", "-r", "0.05", "-v", "0.2", "-e", "11.01.2026", "--as-of", "2026-01-01"],
    )
    assert result.exit_code == 0, result.output
    lines = result.output.strip().splitlines()
    assert lines[-1].split() == ["10", "0.000000"]


def test_curve_command_bad_date():
    result = CliRunner().invoke(
        cli, ["curve", "-S", "100", "-K", "100", "-r", "0.05", "-v", "0.2", "-e", "tomorrow"]
    )
    assert result.exit_code != 0
