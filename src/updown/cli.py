#!/usr/bin/env python3
"""Command-line interface for the up/down price prediction game."""

from __future__ import annotations

import argparse
import asyncio
import random
import sys
from datetime import date
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from updown.game import GameSession
    from updown.types import GameConfig

PROMPT = "[u]p / [d]own / [e]nd / [r]eset / [q]uit > "


def _load_config(args: argparse.Namespace) -> GameConfig:
    """Build the game config from the optional file and CLI overrides."""
    from updown.commands.play import build_game_config, load_game_config

    config = load_game_config(args.config) if args.config else build_game_config({})

    overrides: dict = {}
    source_params = dict(config.source_params)
    if args.csv:
        overrides["quote_source"] = "csv"
        source_params["file_path"] = args.csv
    elif args.source:
        overrides["quote_source"] = args.source
    if args.seed is not None:
        overrides["seed"] = args.seed
    if args.log_level:
        overrides["log_level"] = args.log_level.upper()
    overrides["source_params"] = source_params

    return build_game_config({**config.model_dump(), **overrides})


def _print_status(session: GameSession) -> None:
    state = session.state
    displayed = session.displayed_date
    print(
        f"Ticker: {state.symbol or '-'} | "
        f"Date: {displayed.isoformat() if displayed else '-'} | "
        f"Score: {state.score}"
    )


def _start(session: GameSession, symbol: str, credential: str | None) -> bool:
    """Start a game and report the outcome; returns True on success."""
    from updown.exceptions import ErrorKind
    from updown.messages import INSTRUCTION_ACTIVE, format_start_failure
    from updown.types import StartFailure

    print(f"\n📊 Loading {symbol.upper()}...")
    outcome = asyncio.run(session.start(symbol, credential))
    if isinstance(outcome, StartFailure):
        print(f"Error: {format_start_failure(outcome)}")
        if outcome.detail and outcome.kind != ErrorKind.EMPTY_INPUT:
            print(f"   ({outcome.detail})")
        return False

    summary = outcome.summary
    print(
        f"   {summary.points} points from {summary.first_date} to {summary.last_date}\n"
    )
    print(INSTRUCTION_ACTIVE)
    return True


def play_loop(
    session: GameSession,
    symbol: str,
    credential: str | None,
    read_line: Callable[[str], str] | None = None,
) -> int:
    """Run the interactive game until the player quits.

    :param session: Session to drive.
    :param symbol: First ticker to play.
    :param credential: Provider API key.
    :param read_line: Prompt reader (``input`` by default).
    :returns: Process exit code.
    """
    from updown.messages import INSTRUCTION_ENDED, INSTRUCTION_IDLE, format_guess
    from updown.types import Direction, Phase, SeriesExhausted

    read_line = read_line or input
    if not _start(session, symbol, credential):
        return 1

    while True:
        _print_status(session)
        try:
            command = read_line(PROMPT).strip().lower()
        except EOFError:
            command = "q"

        if command in ("u", "up", "d", "down"):
            direction = Direction.UP if command.startswith("u") else Direction.DOWN
            outcome = session.guess(direction)
            print(format_guess(outcome))
            if isinstance(outcome, SeriesExhausted):
                print(INSTRUCTION_ENDED)
        elif command in ("e", "end"):
            if session.state.phase == Phase.ACTIVE:
                session.end()
                print(INSTRUCTION_ENDED)
                print(f"Final score: {session.state.score}")
        elif command in ("r", "reset"):
            session.reset()
            print(INSTRUCTION_IDLE)
            try:
                next_symbol = read_line("Ticker (blank to quit): ").strip()
            except EOFError:
                next_symbol = ""
            if not next_symbol:
                return 0
            if not _start(session, next_symbol, credential):
                return 1
        elif command in ("q", "quit"):
            print(f"\n✅ Final score: {session.state.score}")
            return 0
        else:
            print(f"Unknown command '{command}'")


def cmd_play(args: argparse.Namespace) -> int:
    """Play the game interactively."""
    from updown.chart import ConsoleChartSink
    from updown.commands.play import resolve_api_key
    from updown.data import resolve_quote_source
    from updown.exceptions import ConfigError
    from updown.game import GameSession
    from updown.logging_setup import setup_logging

    try:
        config = _load_config(args)
        source = resolve_quote_source(config)
    except ConfigError as e:
        print(f"Configuration error: {e}")
        return 1

    setup_logging(config.log_level)

    print("=" * 60)
    print("UP / DOWN")
    print("=" * 60)
    print(f"Symbol:  {args.symbol.upper()}")
    print(f"Source:  {config.quote_source}")

    session = GameSession(
        source,
        ConsoleChartSink(),
        rng=random.Random(config.seed),
        window=config.window,
    )
    return play_loop(session, args.symbol, resolve_api_key(args.api_key))


def cmd_series(args: argparse.Namespace) -> int:
    """Fetch a series and show what a game could start from."""
    from updown.commands.play import resolve_api_key
    from updown.data import normalize, resolve_quote_source
    from updown.exceptions import ConfigError, ErrorKind, QuoteSourceError
    from updown.game import eligible_indices
    from updown.logging_setup import setup_logging
    from updown.messages import ERROR_MESSAGES

    try:
        config = _load_config(args)
        source = resolve_quote_source(config)
    except ConfigError as e:
        print(f"Configuration error: {e}")
        return 1

    setup_logging(config.log_level)

    credential = resolve_api_key(args.api_key)
    if source.requires_credential and not credential:
        print(f"Error: {ERROR_MESSAGES[ErrorKind.EMPTY_INPUT]}")
        return 1

    try:
        raw = source.fetch_daily(args.symbol.upper(), credential)
    except QuoteSourceError as e:
        print(f"Failed to fetch data: {e}")
        return 1

    series = normalize(raw)
    if not series:
        print("No usable price data.")
        return 1

    eligible = eligible_indices(series, date.today(), config.window)

    print("=" * 60)
    print(f"SERIES: {args.symbol.upper()}")
    print("=" * 60)
    print(f"Points:          {len(series)}")
    print(f"First:           {series[0].date} @ {series[0].close:.2f}")
    print(f"Last:            {series[-1].date} @ {series[-1].close:.2f}")
    print(f"Eligible starts: {len(eligible)}")
    if eligible:
        print(f"   {series[eligible[0]].date} to {series[eligible[-1]].date}")

    return 0


def _add_source_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("symbol", help="Stock symbol (e.g., AAPL)")
    parser.add_argument("-c", "--config", help="Path to YAML configuration file")
    parser.add_argument(
        "-s",
        "--source",
        choices=["alphavantage", "yahoo", "csv"],
        help="Quote source (default: alphavantage)",
    )
    parser.add_argument("--csv", help="Read prices from this CSV file")
    parser.add_argument(
        "-k", "--api-key", help="Alpha Vantage API key (or ALPHAVANTAGE_API_KEY)"
    )
    parser.add_argument("--seed", type=int, help="Random seed for the start day")
    parser.add_argument("--log-level", help="Logging level (default: INFO)")


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Guess whether a stock closes up or down the next day",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    play_parser = subparsers.add_parser("play", help="Play a game")
    _add_source_args(play_parser)

    series_parser = subparsers.add_parser(
        "series", help="Show the normalized series and eligible start days"
    )
    _add_source_args(series_parser)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "play":
        return cmd_play(args)
    elif args.command == "series":
        return cmd_series(args)

    return 0


if __name__ == "__main__":
    sys.exit(main())
