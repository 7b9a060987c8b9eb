"""
Pattern and Trend Signal Models

This module contains Pydantic models for the analysis outputs:
- PatternBias: directional reading of a detected pattern
- Pattern: a detected candlestick or chart pattern
- Signal: one weighted directional opinion from an indicator
- TrendClass: composite trend classification
- TrendVerdict: aggregated trend reading with strength and commentary

All of these are ephemeral values recomputed on every analysis call.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field
from enum import Enum


class PatternBias(str, Enum):
    """Directional bias of a detected pattern."""
    BULLISH = "BULLISH"
    BEARISH = "BEARISH"
    NEUTRAL = "NEUTRAL"


class TrendClass(str, Enum):
    """Composite trend classification."""
    STRONG_BULL = "STRONG_BULL"
    BULLISH = "BULLISH"
    CONSOLIDATING = "CONSOLIDATING"
    BEARISH = "BEARISH"
    STRONG_BEAR = "STRONG_BEAR"
    LOADING = "LOADING"


TREND_LABELS: Dict[TrendClass, Dict[str, str]] = {
    TrendClass.STRONG_BULL: {"label": "STRONG BULL", "color": "#10b981"},
    TrendClass.BULLISH: {"label": "BULLISH", "color": "#34d399"},
    TrendClass.CONSOLIDATING: {"label": "CONSOLIDATING", "color": "#f59e0b"},
    TrendClass.BEARISH: {"label": "BEARISH", "color": "#fb7185"},
    TrendClass.STRONG_BEAR: {"label": "STRONG BEAR", "color": "#f43f5e"},
    TrendClass.LOADING: {"label": "LOADING", "color": "#64748b"},
}


class Pattern(BaseModel):
    """
    Detected candlestick or chart-structure pattern.

    Confidence is a fixed constant per pattern kind, so two detections of the
    same kind always rank equally.
    """

    name: str = Field(..., description="Display name, e.g. 'Bullish Engulfing'")
    type: PatternBias = Field(..., description="Directional bias of the pattern")
    description: str = Field(..., description="Short human-readable reading")
    confidence: int = Field(
        ...,
        description="Pattern confidence score (0-100)",
        ge=0,
        le=100
    )
    is_chart: bool = Field(
        default=False,
        description="True for whole-window structural patterns"
    )

    model_config = ConfigDict(frozen=True)

    @property
    def is_bullish(self) -> bool:
        return self.type == PatternBias.BULLISH

    @property
    def is_bearish(self) -> bool:
        return self.type == PatternBias.BEARISH


class Signal(BaseModel):
    """
    Weighted directional signal derived from one indicator.

    ``bull`` is None when the indicator has no directional opinion; such
    signals are reported but excluded from the weighted score.
    """

    name: str = Field(..., description="Signal name, e.g. 'RSI (14)'")
    display_value: str = Field(..., description="Formatted reading for display")
    raw_value: float = Field(..., description="Underlying numeric reading")
    bull: Optional[bool] = Field(
        None,
        description="True bullish, False bearish, None no opinion"
    )
    weight: float = Field(..., ge=0, description="Aggregation weight")
    highlight: bool = Field(default=False, description="Draw attention (e.g. fresh cross)")

    model_config = ConfigDict(frozen=True)

    @property
    def signed_weight(self) -> float:
        """Contribution to the weighted score (0 when there is no opinion)."""
        if self.bull is None:
            return 0.0
        return self.weight if self.bull else -self.weight


class TrendVerdict(BaseModel):
    """
    Composite trend verdict aggregated from indicator signals.

    ``score`` is the normalized weighted score in [-1, 1]; ``strength`` is its
    magnitude expressed as a rounded percentage.
    """

    trend: TrendClass = Field(..., description="Trend classification")
    strength: int = Field(default=0, ge=0, le=100)
    score: float = Field(default=0.0, ge=-1.0, le=1.0)
    signals: List[Signal] = Field(default_factory=list)
    bull_count: int = Field(default=0, ge=0)
    bear_count: int = Field(default=0, ge=0)
    neutral_count: int = Field(default=0, ge=0)
    momentum: str = Field(default="n/a", description="Momentum reading over the lookback")
    commentary: str = Field(default="", description="Fixed commentary for the trend class")

    model_config = ConfigDict(frozen=True)

    @computed_field
    @property
    def label(self) -> str:
        """Display label for the trend class."""
        return TREND_LABELS[self.trend]["label"]

    @computed_field
    @property
    def color(self) -> str:
        """Display color for the trend class."""
        return TREND_LABELS[self.trend]["color"]

    @property
    def is_loading(self) -> bool:
        return self.trend == TrendClass.LOADING

    @classmethod
    def loading(cls) -> "TrendVerdict":
        """Verdict reported while there is not enough history."""
        return cls(
            trend=TrendClass.LOADING,
            strength=0,
            score=0.0,
            signals=[],
            commentary="Waiting for data...",
        )
