"""
Core Market Data Models

This module contains Pydantic models for the candle data flowing through the
analytics pipeline:
- Candle: raw OHLCV record as delivered by a data-acquisition collaborator
- EnrichedCandle: Candle plus every indicator and display field
- IndicatorField: enumeration of the statically declared indicator fields
- CandleColor: display color of a candle
- Timeframe: supported candle intervals
- Coin: catalog entry used for mock history and the CLI

Candles are immutable. Every transform in the pipeline produces new instances
via ``model_copy`` instead of mutating existing ones.
"""

from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Timeframe(str, Enum):
    """Supported candle timeframes."""

    ONE_MINUTE = "1m"
    FIVE_MINUTES = "5m"
    FIFTEEN_MINUTES = "15m"
    THIRTY_MINUTES = "30m"
    ONE_HOUR = "1h"
    FOUR_HOURS = "4h"
    ONE_DAY = "1d"

    @property
    def seconds(self) -> int:
        """Convert timeframe to seconds."""
        mapping = {
            "1m": 60,
            "5m": 300,
            "15m": 900,
            "30m": 1800,
            "1h": 3600,
            "4h": 14400,
            "1d": 86400,
        }
        return mapping[self.value]

    @property
    def milliseconds(self) -> int:
        """Convert timeframe to milliseconds."""
        return self.seconds * 1000


class CandleColor(str, Enum):
    """Display color of a candle, valued with its hex code."""

    BULL = "#10b981"
    BEAR = "#f43f5e"


class IndicatorField(str, Enum):
    """Every optional indicator field declared on EnrichedCandle."""

    EMA9 = "ema9"
    EMA12 = "ema12"
    EMA21 = "ema21"
    EMA26 = "ema26"
    SMA50 = "sma50"
    MACD_LINE = "macd_line"
    MACD_SIGNAL = "macd_signal"
    MACD_HIST = "macd_hist"
    RSI = "rsi"
    BB_UPPER = "bb_upper"
    BB_MID = "bb_mid"
    BB_LOWER = "bb_lower"
    BB_WIDTH = "bb_width"
    ADX = "adx"
    DI_PLUS = "di_plus"
    DI_MINUS = "di_minus"
    OBV = "obv"
    STOCH_K = "stoch_k"
    STOCH_D = "stoch_d"


class Candle(BaseModel):
    """
    OHLCV candle record.

    Price relationships (high >= max(open, close), low <= min(open, close)) are
    not validated; the analytics accept inconsistent bars as they come.
    """

    time: int = Field(
        ...,
        description="Candle open time in milliseconds since the epoch"
    )
    open: float = Field(..., description="Opening price")
    high: float = Field(..., description="Highest price")
    low: float = Field(..., description="Lowest price")
    close: float = Field(..., description="Closing price")
    volume: float = Field(
        default=0.0,
        description="Traded volume",
        ge=0
    )

    model_config = ConfigDict(frozen=True)

    @field_validator('volume', mode='before')
    @classmethod
    def validate_volume(cls, v) -> float:
        """Treat a missing volume as zero."""
        if v is None:
            return 0.0
        return v

    @classmethod
    def from_kline(cls, row: Sequence[Any]) -> "Candle":
        """
        Create a Candle from an exchange kline row.

        Expected format: [open_time, open, high, low, close, volume, ...] with
        prices given either as numbers or numeric strings.
        """
        return cls(
            time=int(row[0]),
            open=float(row[1]),
            high=float(row[2]),
            low=float(row[3]),
            close=float(row[4]),
            volume=float(row[5]) if len(row) > 5 else 0.0,
        )

    @property
    def body_size(self) -> float:
        """Absolute difference between open and close."""
        return abs(self.close - self.open)

    @property
    def price_range(self) -> float:
        """Distance between high and low."""
        return self.high - self.low

    @property
    def upper_shadow(self) -> float:
        """Calculate upper shadow length."""
        return self.high - max(self.open, self.close)

    @property
    def lower_shadow(self) -> float:
        """Calculate lower shadow length."""
        return min(self.open, self.close) - self.low

    @property
    def is_bullish(self) -> bool:
        """A candle closing at or above its open counts as bullish."""
        return self.close >= self.open

    @property
    def body_top(self) -> float:
        return max(self.open, self.close)

    @property
    def body_bottom(self) -> float:
        return min(self.open, self.close)

    @property
    def body_midpoint(self) -> float:
        return (self.open + self.close) / 2


class EnrichedCandle(Candle):
    """
    Candle annotated with technical indicators and display fields.

    Indicator fields stay ``None`` during their warm-up period. Display fields
    are filled by the candle processor's enrichment pass.
    """

    ema9: Optional[float] = None
    ema12: Optional[float] = None
    ema21: Optional[float] = None
    ema26: Optional[float] = None
    sma50: Optional[float] = None
    macd_line: Optional[float] = None
    macd_signal: Optional[float] = None
    macd_hist: Optional[float] = None
    rsi: Optional[float] = None
    bb_upper: Optional[float] = None
    bb_mid: Optional[float] = None
    bb_lower: Optional[float] = None
    bb_width: Optional[float] = None
    adx: Optional[float] = None
    di_plus: Optional[float] = None
    di_minus: Optional[float] = None
    obv: Optional[float] = None
    stoch_k: Optional[float] = None
    stoch_d: Optional[float] = None

    is_up: Optional[bool] = Field(
        None,
        description="True when close >= open"
    )
    color: Optional[CandleColor] = Field(
        None,
        description="Display color derived from is_up"
    )
    body: Optional[Tuple[float, float]] = Field(
        None,
        description="(min(open, close), max(open, close))"
    )
    wick: Optional[Tuple[float, float]] = Field(
        None,
        description="(low, high)"
    )

    @classmethod
    def from_candle(cls, candle: Union[Candle, Dict[str, Any]]) -> "EnrichedCandle":
        """Lift a raw candle (or candle dict) into an EnrichedCandle."""
        if isinstance(candle, EnrichedCandle):
            return candle
        if isinstance(candle, Candle):
            return cls(**candle.model_dump())
        return cls(**candle)

    def indicator(self, field: IndicatorField) -> Optional[float]:
        """Read one indicator value by its declared field."""
        return getattr(self, field.value)

    def with_indicators(self, values: Dict[IndicatorField, Optional[float]]) -> "EnrichedCandle":
        """Return a copy with the given indicator fields replaced."""
        return self.model_copy(update={field.value: value for field, value in values.items()})


class Coin(BaseModel):
    """Catalog entry for a tradable coin."""

    id: str
    symbol: str
    name: str
    pair: str = Field(..., description="Exchange trading pair, e.g. BTCUSDT")
    base_price: float = Field(..., gt=0, description="Reference price for mock history")

    model_config = ConfigDict(frozen=True)


COINS: List[Coin] = [
    Coin(id="bitcoin", symbol="BTC", name="Bitcoin", pair="BTCUSDT", base_price=65000),
    Coin(id="ethereum", symbol="ETH", name="Ethereum", pair="ETHUSDT", base_price=3500),
    Coin(id="solana", symbol="SOL", name="Solana", pair="SOLUSDT", base_price=145),
    Coin(id="xrp", symbol="XRP", name="XRP", pair="XRPUSDT", base_price=0.60),
    Coin(id="dogecoin", symbol="DOGE", name="Dogecoin", pair="DOGEUSDT", base_price=0.12),
]


def get_coin(symbol: str) -> Optional[Coin]:
    """Look up a catalog coin by symbol (case-insensitive)."""
    symbol = symbol.upper().strip()
    for coin in COINS:
        if coin.symbol == symbol:
            return coin
    return None


def candles_from_klines(rows: Iterable[Sequence[Any]]) -> List[Candle]:
    """Parse a batch of exchange kline rows, preserving their order."""
    return [Candle.from_kline(row) for row in rows]
