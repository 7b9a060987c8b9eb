"""
ONYX Terminal: Candle Analytics Core

Turns OHLCV candle histories into technical-indicator annotations, ranked
candlestick/chart patterns and a composite trend verdict.
"""

__version__ = "0.1.0"
__author__ = "ONYX Terminal Team"
__description__ = "Candle analytics core: indicators, patterns and trend reading"

# Package-level imports for convenience
from .config import Config
from .logger import get_logger

__all__ = ["Config", "get_logger", "__version__"]
