"""
Candlestick Pattern Recognition Module

This module contains detectors for candlestick and chart-structure patterns
and the scanner that ranks them.

Pattern Types:
- Single candlestick patterns (Doji, Hammer, Shooting Star, etc.)
- Multi-candlestick patterns (Engulfing, Harami, Morning/Evening Star, etc.)
- Chart structure patterns (trend structure, consolidation, volume climax,
  Bollinger squeeze)
"""

from .base import PatternDetector
from .scanner import PatternScanner, default_detectors, detect_patterns

__all__ = [
    "PatternDetector",
    "PatternScanner",
    "default_detectors",
    "detect_patterns",
]
