"""Core type definitions for the up/down game.

All data models use Pydantic BaseModel for automatic validation, JSON
serialization, and better error messages.
"""

from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Any, NewType, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from updown.exceptions import ErrorKind

Symbol = NewType("Symbol", str)


# ---------------------------------------------------------------------------
# Base Configuration
# ---------------------------------------------------------------------------


class FrozenModel(BaseModel):
    """Base model with frozen (immutable) configuration."""

    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Market Data Types
# ---------------------------------------------------------------------------


class PricePoint(FrozenModel):
    """Closing price of a security on one trading day.

    :param date: Calendar date of the close (day precision).
    :param close: Closing price, finite and strictly positive.
    """

    date: dt.date
    close: float = Field(gt=0, allow_inf_nan=False)

    @property
    def label(self) -> str:
        """Date label used on the chart and in feedback messages."""
        return self.date.isoformat()


# Ascending by date, strictly increasing, produced only by normalize().
Series = tuple[PricePoint, ...]


class SeriesSummary(FrozenModel):
    """Short description of a freshly started game.

    :param symbol: Upper-cased ticker of the game.
    :param points: Number of points in the normalized series.
    :param first_date: Oldest date in the series.
    :param last_date: Newest date in the series.
    :param start_date: Date of the hidden reference day.
    :param displayed_date: Date shown to the player as "current".
    """

    symbol: Symbol
    points: int
    first_date: dt.date
    last_date: dt.date
    start_date: dt.date
    displayed_date: dt.date


# ---------------------------------------------------------------------------
# Game Types
# ---------------------------------------------------------------------------


class Phase(str, Enum):
    """Lifecycle phase of a game."""

    IDLE = "idle"
    ACTIVE = "active"
    ENDED = "ended"


class Direction(str, Enum):
    """Player's call on the next close."""

    UP = "up"
    DOWN = "down"


class Verdict(str, Enum):
    """Outcome of a single guess."""

    CORRECT = "correct"
    INCORRECT = "incorrect"
    UNCHANGED = "unchanged"


class StartWindow(FrozenModel):
    """Constraints on where a game may start.

    :param min_days_back: Oldest allowed start, in calendar days before now.
    :param max_days_back: Newest allowed start, in calendar days before now.
    :param seed_points: Points that must exist before the start index.
    """

    min_days_back: int = Field(default=100, ge=0)
    max_days_back: int = Field(default=7, ge=0)
    seed_points: int = Field(default=7, ge=0)

    @model_validator(mode="after")
    def _check_bounds(self) -> StartWindow:
        if self.max_days_back > self.min_days_back:
            raise ValueError("max_days_back must not exceed min_days_back")
        return self


class GameState(FrozenModel):
    """Complete state of one game.

    :param symbol: Ticker being played, empty while idle.
    :param series: Normalized price series, empty while idle.
    :param current_index: Index of the reference day in ``series``.
    :param start_index: Index the game started at.
    :param score: Number of correct guesses so far.
    :param phase: Lifecycle phase.
    """

    symbol: Symbol = Symbol("")
    series: Series = ()
    current_index: int = 0
    start_index: int = 0
    score: int = Field(default=0, ge=0)
    phase: Phase = Phase.IDLE

    @model_validator(mode="after")
    def _check_invariants(self) -> GameState:
        if self.phase != Phase.IDLE:
            if not 0 <= self.current_index < len(self.series):
                raise ValueError(
                    f"current_index {self.current_index} outside series of "
                    f"length {len(self.series)}"
                )
        for prev, cur in zip(self.series, self.series[1:]):
            if cur.date <= prev.date:
                raise ValueError("series dates must be strictly increasing")
        return self

    @classmethod
    def idle(cls) -> GameState:
        """Fresh state as created at process start and on every reset."""
        return cls()

    @property
    def reference(self) -> PricePoint:
        """The point whose close is the baseline for the next guess."""
        return self.series[self.current_index]

    @property
    def displayed_date(self) -> dt.date | None:
        """Date shown to the player as the current day.

        Right after start the reference day is still hidden, so the last
        seeded point's date is shown. After a guess the revealed day is shown.
        """
        if self.phase == Phase.IDLE or not self.series:
            return None
        if self.current_index == self.start_index and self.current_index > 0:
            return self.series[self.current_index - 1].date
        return self.series[self.current_index].date


# ---------------------------------------------------------------------------
# Chart Effects
# ---------------------------------------------------------------------------


class ChartPoint(FrozenModel):
    """One labelled point on the price chart."""

    label: str
    value: float


class SeedChart(FrozenModel):
    """Replace the chart content with ``points``."""

    points: tuple[ChartPoint, ...]


class AppendPoint(FrozenModel):
    """Add ``point`` at the right edge of the chart."""

    point: ChartPoint


class ClearChart(FrozenModel):
    """Empty the chart."""


Effect = Union[SeedChart, AppendPoint, ClearChart]


# ---------------------------------------------------------------------------
# Command Outcomes
# ---------------------------------------------------------------------------


class GuessResult(FrozenModel):
    """Result of a scored guess.

    :param verdict: Whether the call was correct, incorrect, or unchanged.
    :param direction: The call that was made.
    :param revealed_date: Date of the newly revealed point.
    :param revealed_price: Close of the newly revealed point.
    :param delta: Revealed close minus reference close.
    :param score: Score after this guess.
    """

    verdict: Verdict
    direction: Direction
    revealed_date: dt.date
    revealed_price: float
    delta: float
    score: int


class SeriesExhausted(FrozenModel):
    """No further point exists; the game has ended."""

    score: int


class CommandRejected(FrozenModel):
    """A command was refused without changing state."""

    kind: ErrorKind
    detail: str = ""


class StartSuccess(FrozenModel):
    """A game was started."""

    summary: SeriesSummary


class StartFailure(FrozenModel):
    """A start attempt failed and the state is idle.

    :param kind: Classified failure.
    :param detail: Provider or validation detail, shown verbatim.
    :param status: HTTP status for network failures, if any.
    """

    kind: ErrorKind
    detail: str = ""
    status: int | None = None


GuessOutcome = Union[GuessResult, SeriesExhausted, CommandRejected]
StartOutcome = Union[StartSuccess, StartFailure]


# ---------------------------------------------------------------------------
# Configuration Types
# ---------------------------------------------------------------------------


class GameConfig(FrozenModel):
    """Configuration for a game session.

    :param quote_source: Quote source type ("alphavantage", "yahoo", "csv").
    :param source_params: Provider-specific parameters.
    :param window: Start window constraints.
    :param seed: Random seed for start selection, or None for random.
    :param log_level: Logging level.
    """

    quote_source: str = "alphavantage"
    source_params: dict[str, Any] = Field(default_factory=dict)
    window: StartWindow = Field(default_factory=StartWindow)
    seed: int | None = None
    log_level: str = "INFO"
