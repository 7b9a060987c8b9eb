"""
Unit tests for the command-line interface.
"""

import json
import logging
import os
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from onyx_terminal.cli import main
from onyx_terminal.cli_commands.analyze import load_candles


@pytest.fixture(autouse=True)
def reset_cli_logging():
    """Drop handlers bound to the runner's streams once a command finishes."""
    yield
    logging.getLogger("onyx_terminal").handlers.clear()


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def candle_file(temp_dir: Path, rising_candles) -> Path:
    path = temp_dir / "candles.json"
    path.write_text(json.dumps([c.model_dump() for c in rising_candles]))
    return path


@pytest.fixture
def kline_file(temp_dir: Path, rising_candles) -> Path:
    path = temp_dir / "klines.json"
    rows = [
        [c.time, str(c.open), str(c.high), str(c.low), str(c.close), str(c.volume)]
        for c in rising_candles
    ]
    path.write_text(json.dumps(rows))
    return path


class TestLoadCandles:
    """Test the JSON candle loader."""

    def test_candle_objects(self, candle_file: Path, rising_candles):
        assert load_candles(candle_file) == rising_candles

    def test_kline_rows(self, kline_file: Path, rising_candles):
        candles = load_candles(kline_file)
        assert len(candles) == len(rising_candles)
        assert candles[-1].close == rising_candles[-1].close

    def test_not_a_list(self, temp_dir: Path):
        path = temp_dir / "bad.json"
        path.write_text(json.dumps({"candles": []}))
        with pytest.raises(ValueError):
            load_candles(path)

    def test_unsupported_entry(self, temp_dir: Path):
        path = temp_dir / "bad.json"
        path.write_text(json.dumps([42]))
        with pytest.raises(ValueError):
            load_candles(path)


class TestCommands:
    """Test CLI commands end to end."""

    def test_version(self, runner: CliRunner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_coins(self, runner: CliRunner):
        result = runner.invoke(main, ["coins"])

        assert result.exit_code == 0
        for symbol in ("BTC", "ETH", "SOL", "XRP", "DOGE"):
            assert symbol in result.output

    def test_status(self, runner: CliRunner, mock_env_vars: dict):
        result = runner.invoke(main, ["status"])

        assert result.exit_code == 0
        assert "Default Symbol: ETH" in result.output
        assert "Max Results: 5" in result.output
        assert "Stochastic: %K 14 / %D 3" in result.output

    def test_analyze_file(self, runner: CliRunner, candle_file: Path):
        result = runner.invoke(main, ["analyze", "--file", str(candle_file)])

        assert result.exit_code == 0, result.output
        assert "HH + HL Uptrend" in result.output
        assert "STRONG BULL" in result.output
        assert "Stochastic %K / %D" in result.output

    def test_analyze_json(self, runner: CliRunner, kline_file: Path):
        result = runner.invoke(main, ["analyze", "--file", str(kline_file), "--json"])

        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)
        assert payload["verdict"]["trend"] == "STRONG_BULL"
        assert payload["patterns"][0]["name"] == "HH + HL Uptrend"

    def test_analyze_mock_symbol(self, runner: CliRunner):
        result = runner.invoke(main, ["analyze", "--symbol", "sol", "--count", "60"])

        assert result.exit_code == 0, result.output
        assert "over 60 candles" in result.output

    def test_unknown_symbol(self, runner: CliRunner):
        result = runner.invoke(main, ["trend", "--symbol", "NOPE"])

        assert result.exit_code == 1
        assert "Unknown symbol" in result.output

    def test_trend_loading_on_short_history(self, runner: CliRunner):
        result = runner.invoke(main, ["trend", "--count", "10"])

        assert result.exit_code == 0
        assert "Waiting for data..." in result.output

    def test_patterns(self, runner: CliRunner, candle_file: Path):
        result = runner.invoke(main, ["patterns", "--file", str(candle_file)])

        assert result.exit_code == 0
        assert "Three White Soldiers" in result.output

    def test_bad_file(self, runner: CliRunner, temp_dir: Path):
        path = temp_dir / "broken.json"
        path.write_text("not json")

        result = runner.invoke(main, ["analyze", "--file", str(path)])

        assert result.exit_code == 1
        assert "Failed to load candles" in result.output

    def test_config_file_option(self, runner: CliRunner, temp_dir: Path, candle_file: Path):
        env_file = temp_dir / "onyx.env"
        env_file.write_text("TREND_MIN_CANDLES=100\n")

        with patch.dict(os.environ, {}, clear=False):
            result = runner.invoke(main, ["--config", str(env_file), "trend", "--file", str(candle_file)])

        assert result.exit_code == 0
        assert "Waiting for data..." in result.output
