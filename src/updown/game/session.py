"""Game session controller.

Owns the single :class:`GameState`, runs the quote fetch for ``start``, and
applies chart effects returned by the pure transitions.
"""

from __future__ import annotations

import asyncio
import logging
import random
from datetime import date
from typing import Callable

from updown.chart.sinks import ChartSink
from updown.data.normalize import normalize
from updown.data.sources import QuoteSource, RawSeries
from updown.exceptions import (
    EmptyInputError,
    ErrorKind,
    GameError,
    NetworkFailureError,
    NoEligibleStartError,
    NoUsableDataError,
)
from updown.game import transitions
from updown.game.selector import RandomSource, pick_start
from updown.types import (
    AppendPoint,
    ClearChart,
    Direction,
    Effect,
    GameState,
    GuessOutcome,
    Phase,
    SeedChart,
    SeriesSummary,
    StartFailure,
    StartOutcome,
    StartSuccess,
    StartWindow,
)

log = logging.getLogger(__name__)


class GameSession:
    """Command surface of the game: start, guess, end, reset.

    Example usage::

        import asyncio
        import random

        from updown.chart import InMemoryChartSink
        from updown.data import AlphaVantageQuoteSource
        from updown.game import GameSession
        from updown.types import Direction

        session = GameSession(
            AlphaVantageQuoteSource(),
            InMemoryChartSink(),
            rng=random.Random(42),
        )
        outcome = asyncio.run(session.start("AAPL", "my-api-key"))
        result = session.guess(Direction.UP)

    :param quote_source: Source of raw daily series.
    :param sink: Chart feed receiving seed/append/clear instructions.
    :param rng: Randomness source for start selection.
    :param window: Start window constraints.
    :param clock: Callable returning today's date.
    """

    def __init__(
        self,
        quote_source: QuoteSource,
        sink: ChartSink,
        rng: RandomSource | None = None,
        window: StartWindow | None = None,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self.quote_source = quote_source
        self.sink = sink
        self.rng = rng or random.Random()
        self.window = window or StartWindow()
        self.clock = clock

        self._state = GameState.idle()
        self._generation = 0
        self._loading = False

    @property
    def state(self) -> GameState:
        """Current game state (read-only snapshot)."""
        return self._state

    @property
    def generation(self) -> int:
        """Counter bumped by every start and reset."""
        return self._generation

    @property
    def loading(self) -> bool:
        """Whether a quote fetch is in flight."""
        return self._loading

    @property
    def displayed_date(self) -> date | None:
        return self._state.displayed_date

    def _apply(self, effects: tuple[Effect, ...]) -> None:
        for effect in effects:
            if isinstance(effect, SeedChart):
                self.sink.seed(list(effect.points))
            elif isinstance(effect, AppendPoint):
                self.sink.append(effect.point.label, effect.point.value)
            elif isinstance(effect, ClearChart):
                self.sink.clear()

    def _validate_input(self, symbol: str | None, credential: str | None) -> str:
        symbol = (symbol or "").strip()
        if not symbol:
            raise EmptyInputError("Please enter a stock ticker.", field="symbol")
        if self.quote_source.requires_credential and not (credential or "").strip():
            raise EmptyInputError("Please enter your API key.", field="credential")
        return symbol

    async def start(self, symbol: str | None, credential: str | None = None) -> StartOutcome:
        """Fetch a series and start a new game.

        Any running game is reset first. On failure the state stays idle and
        the chart is left empty.

        :param symbol: Ticker symbol.
        :param credential: Provider access key.
        :returns: StartSuccess with a series summary, or StartFailure.
        """
        if self._loading:
            return StartFailure(kind=ErrorKind.BUSY, detail="A fetch is already in flight")

        self.reset()
        try:
            symbol = self._validate_input(symbol, credential)
        except EmptyInputError as e:
            return StartFailure(kind=e.kind, detail=str(e))

        generation = self._generation
        self._loading = True
        log.info("Fetching daily series for %s (generation %d)", symbol, generation)
        try:
            raw: RawSeries = await asyncio.to_thread(
                self.quote_source.fetch_daily, symbol, credential
            )
        except GameError as e:
            if generation != self._generation:
                log.info("Discarding failed fetch for %s from stale generation %d", symbol, generation)
                return StartFailure(kind=ErrorKind.STALE, detail=symbol)
            log.warning("Quote fetch for %s failed: %s", symbol, e)
            status = e.status if isinstance(e, NetworkFailureError) else None
            return StartFailure(kind=e.kind or ErrorKind.NETWORK_FAILURE, detail=str(e), status=status)
        finally:
            self._loading = False

        if generation != self._generation:
            log.info("Discarding fetch for %s from stale generation %d", symbol, generation)
            return StartFailure(kind=ErrorKind.STALE, detail=symbol)

        return self._start_with_data(symbol, raw)

    def _start_with_data(self, symbol: str, raw: RawSeries) -> StartOutcome:
        series = normalize(raw)
        today = self.clock()
        try:
            if not series:
                raise NoUsableDataError(f"No price data available for '{symbol}'")
            start_index = pick_start(series, today, self.rng, self.window)
            if start_index is None:
                raise NoEligibleStartError(
                    f"Not enough recent data for '{symbol}' as of {today.isoformat()}"
                )
            transition = transitions.start(self._state, symbol, series, start_index, self.window)
        except (NoUsableDataError, NoEligibleStartError) as e:
            log.warning("Cannot start %s: %s", symbol, e)
            return StartFailure(kind=e.kind, detail=str(e))

        self._state = transition.state
        self._apply(transition.effects)
        log.info(
            "Started %s at %s (%d points)",
            self._state.symbol,
            self._state.reference.date.isoformat(),
            len(series),
        )
        return StartSuccess(
            summary=SeriesSummary(
                symbol=self._state.symbol,
                points=len(series),
                first_date=series[0].date,
                last_date=series[-1].date,
                start_date=series[start_index].date,
                displayed_date=self._state.displayed_date,
            )
        )

    def guess(self, direction: Direction) -> GuessOutcome:
        """Score a call on the next close.

        :param direction: ``Direction.UP`` or ``Direction.DOWN``.
        :returns: GuessResult, SeriesExhausted, or CommandRejected.
        """
        transition = transitions.guess(self._state, direction)
        self._state = transition.state
        self._apply(transition.effects)
        return transition.outcome

    def end(self) -> None:
        """End the game; the final score is kept until reset."""
        transition = transitions.end(self._state)
        if transition.state is not self._state:
            log.info("Game %s ended with score %d", self._state.symbol, transition.state.score)
        self._state = transition.state

    def reset(self) -> None:
        """Discard the game, clear the chart, and invalidate pending fetches."""
        self._generation += 1
        if self._state.phase != Phase.IDLE:
            log.info("Game %s reset (generation %d)", self._state.symbol, self._generation)
        transition = transitions.reset()
        self._state = transition.state
        self._apply(transition.effects)
