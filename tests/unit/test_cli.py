"""
Unit tests for the command line interface.
"""

import json
import pytest
from click.testing import CliRunner

from rda.cli.main import cli, format_units, parse_units


@pytest.fixture
def runner():
    return CliRunner()


class TestUnits:
    """Tests for fixed-point formatting helpers."""

    def test_format(self):
        assert format_units(100 * 10**18) == "100"
        assert format_units(21_250_000_000_000_000_000) == "21.25"
        assert format_units(0) == "0"

    def test_parse(self):
        assert parse_units("1.5") == 15 * 10**17
        assert parse_units("0") == 0


class TestCommands:
    """Tests for CLI commands."""

    def test_curve(self, runner):
        result = runner.invoke(cli, ["curve", "--raw"])
        assert result.exit_code == 0
        assert "1000000000000000000" in result.output
        assert "500000000000000000" in result.output

    def test_quote(self, runner):
        result = runner.invoke(cli, ["quote", "--start", "100", "--decay-rate", "100000", "--duration", "120", "--rows", "3"])
        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines[2].split() == ["0", "100"]
        assert lines[3].split() == ["1", "50"]
        assert lines[4].split() == ["2", "25"]
        assert "(deadline)" in lines[-1]

    def test_quote_invalid(self, runner):
        result = runner.invoke(cli, ["quote", "--start", "1", "--reserve", "2", "--decay-rate", "1", "--duration", "10"])
        assert result.exit_code != 0
        assert "reserved_price" in result.output

    def test_demo(self, runner, tmp_path):
        result = runner.invoke(cli, ["--data-dir", str(tmp_path), "demo"])
        assert result.exit_code == 0, result.output
        assert "Bob claims at 21.25 USD" in result.output
        assert "Carol is too late" in result.output
        assert "Alice withdraws 21.25 USD" in result.output
        assert not (tmp_path / "auctions.db").exists()

    def test_demo_persist_then_inspect(self, runner, tmp_path):
        result = runner.invoke(cli, ["--data-dir", str(tmp_path), "demo", "--persist"])
        assert result.exit_code == 0, result.output

        listing = runner.invoke(cli, ["--data-dir", str(tmp_path), "auctions", "list"])
        assert "#1: Sunset #7 (settled" in listing.output

        shown = runner.invoke(cli, ["--data-dir", str(tmp_path), "auctions", "show", "1", "--events"])
        data = json.loads(shown.output)
        assert data["settled"] is True
        assert data["escrowed_funds"] == 0
        assert [e["event"] for e in data["events"]] == ["AuctionCreated", "ItemWithdrawn", "FundsWithdrawn"]

        stats = runner.invoke(cli, ["--data-dir", str(tmp_path), "stats"])
        assert "auctions: 1" in stats.output

    def test_missing_store(self, runner, tmp_path):
        result = runner.invoke(cli, ["--data-dir", str(tmp_path / "none"), "auctions", "list"])
        assert result.exit_code != 0
        assert "No auction store" in result.output
