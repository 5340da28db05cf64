"""User-facing message formatting for game outcomes."""

from __future__ import annotations

from updown.exceptions import ErrorKind
from updown.types import (
    CommandRejected,
    GuessOutcome,
    GuessResult,
    SeriesExhausted,
    StartFailure,
    Verdict,
)

INSTRUCTION_IDLE = "Enter a ticker to start a new game."
INSTRUCTION_ACTIVE = "Predict if the next day's price goes up or down."
INSTRUCTION_ENDED = "Game ended. You can reset to play again."
SERIES_EXHAUSTED = "No more data to continue. The game has ended."

ERROR_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.EMPTY_INPUT: "Please enter a stock ticker and API key.",
    ErrorKind.INVALID_SYMBOL: "Invalid ticker symbol. Please try a different one.",
    ErrorKind.RATE_LIMITED: "API rate limit reached. Please wait and try again.",
    ErrorKind.NETWORK_FAILURE: "Network error. Please try again.",
    ErrorKind.EMPTY_RESULT: "No price data available for this ticker.",
    ErrorKind.NO_USABLE_DATA: "No price data available for this ticker.",
    ErrorKind.NO_ELIGIBLE_START: "Not enough recent data to start the game. Try another ticker.",
    ErrorKind.NOT_ACTIVE: "No game in progress. Start a game first.",
    ErrorKind.BUSY: "Still loading data. Please wait.",
    ErrorKind.STALE: "The request was superseded by a newer one.",
}


def format_delta(delta: float) -> str:
    """Signed two-decimal change, e.g. ``+1.25`` or ``-0.40``."""
    sign = "+" if delta >= 0 else ""
    return f"{sign}{delta:.2f}"


def format_start_failure(failure: StartFailure) -> str:
    """Message for a failed start attempt."""
    if failure.kind == ErrorKind.EMPTY_INPUT and failure.detail:
        return failure.detail
    if failure.kind == ErrorKind.NETWORK_FAILURE and failure.status is not None:
        return f"Network error: {failure.status}. Please try again."
    return ERROR_MESSAGES.get(failure.kind, "Failed to load data.")


def format_guess(outcome: GuessOutcome) -> str:
    """Feedback line for the outcome of a guess."""
    if isinstance(outcome, SeriesExhausted):
        return SERIES_EXHAUSTED
    if isinstance(outcome, CommandRejected):
        return ERROR_MESSAGES.get(outcome.kind, "Command rejected.")
    if isinstance(outcome, GuessResult):
        reveal = (
            f"{outcome.revealed_date.isoformat()}: {outcome.revealed_price:.2f} "
            f"(Δ {format_delta(outcome.delta)})"
        )
        if outcome.verdict == Verdict.CORRECT:
            return f"Correct! {reveal}"
        return f"Your guess was {outcome.verdict.value}. {reveal}"
    raise TypeError(f"Unexpected guess outcome: {outcome!r}")
