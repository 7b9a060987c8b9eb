"""
Command-line interface for the ONYX Terminal analytics core.
"""

import sys
from pathlib import Path
from typing import Optional

import click

from . import __version__
from .config import Config
from .logger import configure_logging
from .cli_commands.analyze import analyze, coins, patterns, trend


@click.group()
@click.version_option(version=__version__, prog_name="onyx")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to .env configuration file"
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging"
)
@click.pass_context
def main(ctx: click.Context, config: Optional[Path], verbose: bool) -> None:
    """
    ONYX Terminal: candle analytics core

    Computes technical indicators, scans candlestick and chart patterns and
    reads the composite trend over OHLCV candle histories.
    """
    ctx.ensure_object(dict)

    try:
        if config:
            ctx.obj["config"] = Config.load_from_env(str(config))
        else:
            ctx.obj["config"] = Config.load_from_env()
    except Exception as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        sys.exit(1)

    # Library modules inherit the package logger handlers
    ctx.obj["logger"] = configure_logging(ctx.obj["config"].logging, verbose=verbose)


main.add_command(analyze)
main.add_command(patterns)
main.add_command(trend)
main.add_command(coins)


@main.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show the effective configuration."""
    config: Config = ctx.obj["config"]
    logger = ctx.obj["logger"]

    click.echo("⚡ ONYX Terminal Status")
    click.echo("=" * 40)

    click.echo("\n📈 Indicators:")
    click.echo(f"  RSI Period: {config.indicators.rsi_period}")
    click.echo(f"  Bollinger: {config.indicators.bollinger_period} x {config.indicators.bollinger_multiplier}")
    click.echo(f"  ADX Period: {config.indicators.adx_period}")
    click.echo(f"  Stochastic: %K {config.indicators.stochastic_k_period} / %D {config.indicators.stochastic_d_period}")
    click.echo(f"  MACD Signal Period: {config.indicators.macd_signal_period}")

    click.echo("\n🕯️ Patterns:")
    click.echo(f"  Min Candles: {config.patterns.min_candles}")
    click.echo(f"  Max Results: {config.patterns.max_results}")

    click.echo("\n🧭 Trend:")
    click.echo(f"  Min Candles: {config.trend.min_candles}")
    click.echo(f"  Strong / Bias Threshold: {config.trend.strong_threshold} / {config.trend.bias_threshold}")

    click.echo("\n📡 Feed:")
    click.echo(f"  Default Symbol: {config.feed.default_symbol}")
    click.echo(f"  History Count: {config.feed.history_count}")
    click.echo(f"  Tick Throttle: {config.feed.tick_throttle_ms} ms")

    click.echo(f"\n🔧 Log Level: {config.logging.level}")

    logger.info("Status command executed")


if __name__ == "__main__":
    main()
