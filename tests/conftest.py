"""
Pytest configuration and fixtures for ONYX Terminal tests.
"""

import os
import random
import tempfile
from pathlib import Path
from typing import Generator, List

import pytest
from unittest.mock import patch

from onyx_terminal.config import Config
from onyx_terminal.models.market_data import Candle, EnrichedCandle
from onyx_terminal.strategies.candle_processor import CandleProcessor


MOCK_END_TIME_MS = 1_700_000_000_000


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def mock_env_vars() -> Generator[dict, None, None]:
    """Mock environment variables for testing."""
    test_env = {
        "RSI_PERIOD": "10",
        "BOLLINGER_PERIOD": "18",
        "MAX_PATTERNS": "5",
        "TREND_MIN_CANDLES": "40",
        "TICK_THROTTLE_MS": "1000",
        "HISTORY_COUNT": "120",
        "DEFAULT_SYMBOL": "eth",
        "LOG_LEVEL": "DEBUG",
    }

    with patch.dict(os.environ, test_env, clear=False):
        yield test_env


@pytest.fixture
def test_config(mock_env_vars: dict) -> Config:
    """Create a test configuration instance."""
    return Config.load_from_env()


@pytest.fixture
def rising_candles() -> List[Candle]:
    """60 accelerating up candles with rising highs and lows."""
    candles = []
    for i in range(60):
        close = 100 + i + 0.02 * i * i
        open_price = close - 0.5
        candles.append(Candle(
            time=MOCK_END_TIME_MS - (59 - i) * 60_000,
            open=open_price,
            high=close + 0.1,
            low=open_price - 0.1,
            close=close,
            volume=1000.0,
        ))
    return candles


@pytest.fixture
def falling_candles() -> List[Candle]:
    """60 accelerating down candles with falling highs and lows."""
    candles = []
    for i in range(60):
        close = 300 - i - 0.02 * i * i
        open_price = close + 0.5
        candles.append(Candle(
            time=MOCK_END_TIME_MS - (59 - i) * 60_000,
            open=open_price,
            high=open_price + 0.1,
            low=close - 0.1,
            close=close,
            volume=1000.0,
        ))
    return candles


@pytest.fixture
def mock_history() -> List[EnrichedCandle]:
    """Deterministic 150-candle BTC mock history."""
    return CandleProcessor().generate_mock_history(
        65000,
        150,
        rng=random.Random(42),
        end_time_ms=MOCK_END_TIME_MS,
    )
