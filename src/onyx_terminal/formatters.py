"""
Number and time formatting helpers for display.
"""

from datetime import datetime, timezone
from typing import Optional


def format_usd(value: Optional[float]) -> str:
    """Format a price as USD; assets below $1 get 4 decimals."""
    if value is None:
        return "$-"
    decimals = 4 if value < 1 else 2
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.{decimals}f}"


def format_compact(value: Optional[float]) -> str:
    """Compact number: 1,230,000 -> 1.23M."""
    value = value or 0.0
    for threshold, suffix in ((1e12, "T"), (1e9, "B"), (1e6, "M"), (1e3, "K")):
        if abs(value) >= threshold:
            text = f"{value / threshold:.2f}".rstrip("0").rstrip(".")
            return f"{text}{suffix}"
    return f"{value:.2f}".rstrip("0").rstrip(".")


def format_time(time_ms: int) -> str:
    """Millisecond timestamp -> HH:MM (UTC)."""
    return datetime.fromtimestamp(time_ms / 1000, tz=timezone.utc).strftime("%H:%M")


def format_pct(value: float, decimals: int = 2) -> str:
    """Signed percent string with + prefix."""
    return f"{'+' if value >= 0 else ''}{value:.{decimals}f}%"
