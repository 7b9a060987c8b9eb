"""
Analysis CLI commands for ONYX Terminal.

Runs the analytics pipeline over a candle file (or mock history for a catalog
coin) and prints indicators, detected patterns and the trend verdict.
"""

import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..config import Config
from ..formatters import format_compact, format_pct, format_time, format_usd
from ..models.market_data import COINS, Candle, EnrichedCandle, get_coin
from ..models.signals import Pattern, PatternBias, TrendVerdict
from ..strategies.candle_processor import CandleProcessor
from ..strategies.market_snapshot import MarketAnalyzer, MarketSnapshot

console = Console()

BIAS_STYLES = {
    PatternBias.BULLISH: "green",
    PatternBias.BEARISH: "red",
    PatternBias.NEUTRAL: "yellow",
}


def load_candles(path: Path) -> List[Candle]:
    """
    Load candles from a JSON file.

    Accepts a list of candle objects ({"time", "open", "high", "low", "close",
    "volume"}) or a list of exchange kline rows.

    Raises:
        ValueError: If the file does not hold a list of candles
    """
    with open(path, 'r') as f:
        payload = json.load(f)

    if not isinstance(payload, list):
        raise ValueError(f"Expected a JSON list of candles in {path}")

    candles = []
    for item in payload:
        if isinstance(item, dict):
            candles.append(Candle(**item))
        elif isinstance(item, (list, tuple)):
            candles.append(Candle.from_kline(item))
        else:
            raise ValueError(f"Unsupported candle entry: {item!r}")
    return candles


def _build_snapshot(
    ctx: click.Context,
    file: Optional[Path],
    symbol: Optional[str],
    count: Optional[int]
) -> MarketSnapshot:
    """Analyze a candle file, or mock history for a catalog coin."""
    config: Config = ctx.obj["config"]
    logger = ctx.obj["logger"]
    analyzer = MarketAnalyzer(config)

    if file is not None:
        try:
            raw = load_candles(file)
        except (OSError, ValueError) as e:
            console.print(f"[red]✗[/red] Failed to load candles: {e}")
            sys.exit(1)
        logger.debug(f"Loaded {len(raw)} candles from {file}")
        return analyzer.analyze(raw)

    coin = get_coin(symbol or config.feed.default_symbol)
    if coin is None:
        known = ", ".join(c.symbol for c in COINS)
        console.print(f"[red]✗[/red] Unknown symbol '{symbol}'. Known symbols: {known}")
        sys.exit(1)

    history = analyzer.processor.generate_mock_history(
        coin.base_price,
        count or config.feed.history_count,
    )
    market_logger = logging.LoggerAdapter(logger, {"symbol": coin.symbol})
    market_logger.debug(f"Generated {len(history)} mock candles")
    return analyzer.analyze_enriched(history)


def _fmt(value: Optional[float], digits: int = 2) -> str:
    return f"{value:,.{digits}f}" if value is not None else "-"


def render_indicators(candle: EnrichedCandle) -> None:
    """Print the latest candle's indicator readings."""
    table = Table(title=f"📈 Latest Candle ({format_time(candle.time)} UTC)", show_header=True)
    table.add_column("Indicator", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")

    table.add_row("Close", format_usd(candle.close))
    table.add_row("Volume", format_compact(candle.volume))
    table.add_row("EMA 9 / 21", f"{_fmt(candle.ema9)} / {_fmt(candle.ema21)}")
    table.add_row("SMA 50", _fmt(candle.sma50))
    table.add_row("MACD line / signal", f"{_fmt(candle.macd_line, 4)} / {_fmt(candle.macd_signal, 4)}")
    table.add_row("MACD histogram", _fmt(candle.macd_hist, 4))
    table.add_row("RSI", _fmt(candle.rsi, 1))
    table.add_row("Bollinger upper / mid / lower", f"{_fmt(candle.bb_upper)} / {_fmt(candle.bb_mid)} / {_fmt(candle.bb_lower)}")
    table.add_row("Bollinger width", _fmt(candle.bb_width, 4))
    table.add_row("ADX (+DI / -DI)", f"{_fmt(candle.adx, 1)} ({_fmt(candle.di_plus, 1)} / {_fmt(candle.di_minus, 1)})")
    table.add_row("OBV", format_compact(candle.obv))
    if candle.stoch_k is not None or candle.stoch_d is not None:
        table.add_row("Stochastic %K / %D", f"{_fmt(candle.stoch_k, 1)} / {_fmt(candle.stoch_d, 1)}")
    console.print(table)


def render_patterns(patterns: List[Pattern]) -> None:
    """Print detected patterns, highest confidence first."""
    if not patterns:
        console.print("[yellow]ℹ[/yellow] No patterns detected")
        return

    table = Table(title="🕯️ Detected Patterns", show_header=True)
    table.add_column("Pattern", style="cyan", no_wrap=True)
    table.add_column("Type")
    table.add_column("Confidence", justify="right")
    table.add_column("Kind")
    table.add_column("Reading")

    for pattern in patterns:
        style = BIAS_STYLES[pattern.type]
        table.add_row(
            pattern.name,
            f"[{style}]{pattern.type.value}[/{style}]",
            f"{pattern.confidence}%",
            "Chart" if pattern.is_chart else "Candle",
            pattern.description,
        )
    console.print(table)


def render_verdict(verdict: TrendVerdict) -> None:
    """Print the trend verdict with its signals."""
    if verdict.is_loading:
        console.print(Panel(verdict.commentary, title=verdict.label, style="dim"))
        return

    table = Table(title="🧭 Trend Signals", show_header=True)
    table.add_column("Signal", style="cyan", no_wrap=True)
    table.add_column("Reading")
    table.add_column("Bias")
    table.add_column("Weight", justify="right")

    for signal in verdict.signals:
        if signal.bull is None:
            bias = "[dim]neutral[/dim]"
        elif signal.bull:
            bias = "[green]bull[/green]"
        else:
            bias = "[red]bear[/red]"
        name = f"[bold]{signal.name}[/bold]" if signal.highlight else signal.name
        table.add_row(name, signal.display_value, bias, f"{signal.weight:g}")
    console.print(table)

    body = (
        f"Strength: {verdict.strength}%  Score: {verdict.score:+.2f}\n"
        f"Signals: {verdict.bull_count} bull / {verdict.bear_count} bear / {verdict.neutral_count} neutral\n"
        f"Momentum: {verdict.momentum}\n\n"
        f"{verdict.commentary}"
    )
    console.print(Panel(body, title=verdict.label, style=verdict.color))


_source_options = [
    click.option('--file', '-f', 'file', type=click.Path(exists=True, dir_okay=False, path_type=Path),
                 default=None, help='JSON file with candles or kline rows'),
    click.option('--symbol', '-s', default=None, help='Catalog coin for mock history (e.g. BTC)'),
    click.option('--count', '-n', type=click.IntRange(min=1), default=None,
                 help='Number of mock candles to generate'),
]


def source_options(func):
    """Attach the shared candle-source options to a command."""
    for option in reversed(_source_options):
        func = option(func)
    return func


@click.command()
@source_options
@click.option('--json', 'as_json', is_flag=True, help='Print patterns and verdict as JSON')
@click.pass_context
def analyze(ctx: click.Context, file: Optional[Path], symbol: Optional[str],
            count: Optional[int], as_json: bool) -> None:
    """Run the full analysis and print indicators, patterns and trend."""
    snapshot = _build_snapshot(ctx, file, symbol, count)

    if as_json:
        payload = {
            "last_price": snapshot.last_price,
            "price_change_pct": snapshot.price_change_pct,
            "patterns": [p.model_dump(mode="json") for p in snapshot.patterns],
            "verdict": snapshot.verdict.model_dump(mode="json"),
        }
        click.echo(json.dumps(payload, indent=2))
        return

    if not snapshot.candles:
        console.print("[yellow]ℹ[/yellow] No candles to analyze")
        return

    console.print(
        f"[blue]Price[/blue] {format_usd(snapshot.last_price)} "
        f"({format_pct(snapshot.price_change_pct)}) over {len(snapshot.candles)} candles"
    )
    processor = CandleProcessor(ctx.obj["config"].indicators)
    render_indicators(processor.apply_stochastic(snapshot.candles)[-1])
    render_patterns(snapshot.patterns)
    render_verdict(snapshot.verdict)


@click.command()
@source_options
@click.pass_context
def patterns(ctx: click.Context, file: Optional[Path], symbol: Optional[str],
             count: Optional[int]) -> None:
    """Print detected candlestick and chart patterns."""
    snapshot = _build_snapshot(ctx, file, symbol, count)
    render_patterns(snapshot.patterns)


@click.command()
@source_options
@click.pass_context
def trend(ctx: click.Context, file: Optional[Path], symbol: Optional[str],
          count: Optional[int]) -> None:
    """Print the composite trend verdict."""
    snapshot = _build_snapshot(ctx, file, symbol, count)
    render_verdict(snapshot.verdict)


@click.command()
def coins() -> None:
    """List the coin catalog used for mock history."""
    table = Table(title="🪙 Coin Catalog", show_header=True)
    table.add_column("Symbol", style="cyan")
    table.add_column("Name")
    table.add_column("Pair")
    table.add_column("Base Price", justify="right", style="green")

    for coin in COINS:
        table.add_row(coin.symbol, coin.name, coin.pair, format_usd(coin.base_price))
    console.print(table)
