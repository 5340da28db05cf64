"""Pure state transitions of the guessing game.

Each transition takes the current :class:`GameState` and a command and
returns a :class:`Transition` holding the new state, the chart effects to
apply, and the outcome reported to the caller. Nothing here performs I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from updown.exceptions import ErrorKind, NoEligibleStartError, NoUsableDataError
from updown.types import (
    AppendPoint,
    ChartPoint,
    ClearChart,
    CommandRejected,
    Direction,
    Effect,
    GameState,
    GuessOutcome,
    GuessResult,
    Phase,
    PricePoint,
    SeedChart,
    Series,
    SeriesExhausted,
    StartWindow,
    Symbol,
    Verdict,
)


@dataclass(frozen=True)
class Transition:
    """New state plus the effects and outcome of one command."""

    state: GameState
    effects: tuple[Effect, ...] = field(default_factory=tuple)
    outcome: GuessOutcome | None = None


def _chart_point(point: PricePoint) -> ChartPoint:
    return ChartPoint(label=point.label, value=point.close)


def judge(direction: Direction, delta: float) -> Verdict:
    """Score a call against the signed change of the close."""
    if delta == 0:
        return Verdict.UNCHANGED
    if direction == Direction.UP and delta > 0:
        return Verdict.CORRECT
    if direction == Direction.DOWN and delta < 0:
        return Verdict.CORRECT
    return Verdict.INCORRECT


def start(
    state: GameState,
    symbol: str,
    series: Series,
    start_index: int | None,
    window: StartWindow | None = None,
) -> Transition:
    """Begin a game at ``start_index``.

    The chart is seeded with the ``window.seed_points`` points strictly
    before the start index; the start point itself stays hidden.

    :raises NoUsableDataError: If the series is empty.
    :raises NoEligibleStartError: If the index leaves no seed history or no
        point to score the first guess against.
    """
    if state.phase != Phase.IDLE:
        raise ValueError(f"Cannot start from phase '{state.phase.value}'; reset first")

    window = window or StartWindow()
    if not series:
        raise NoUsableDataError("Series is empty")
    if start_index is None or not window.seed_points <= start_index < len(series) - 1:
        raise NoEligibleStartError(
            f"Start index {start_index} is not eligible for a series of {len(series)} points"
        )

    new_state = GameState(
        symbol=Symbol(symbol.strip().upper()),
        series=series,
        current_index=start_index,
        start_index=start_index,
        score=0,
        phase=Phase.ACTIVE,
    )
    seed = series[start_index - window.seed_points:start_index]
    effects: tuple[Effect, ...] = (
        SeedChart(points=tuple(_chart_point(p) for p in seed)),
    )
    return Transition(state=new_state, effects=effects)


def guess(state: GameState, direction: Direction) -> Transition:
    """Reveal the next close and score ``direction`` against it."""
    if state.phase != Phase.ACTIVE:
        return Transition(
            state=state,
            outcome=CommandRejected(kind=ErrorKind.NOT_ACTIVE, detail=state.phase.value),
        )

    next_index = state.current_index + 1
    if next_index >= len(state.series):
        return Transition(
            state=state.model_copy(update={"phase": Phase.ENDED}),
            outcome=SeriesExhausted(score=state.score),
        )

    current = state.series[state.current_index]
    revealed = state.series[next_index]
    delta = revealed.close - current.close
    verdict = judge(direction, delta)
    score = state.score + 1 if verdict == Verdict.CORRECT else state.score

    return Transition(
        state=state.model_copy(update={"current_index": next_index, "score": score}),
        effects=(AppendPoint(point=_chart_point(revealed)),),
        outcome=GuessResult(
            verdict=verdict,
            direction=direction,
            revealed_date=revealed.date,
            revealed_price=revealed.close,
            delta=delta,
            score=score,
        ),
    )


def end(state: GameState) -> Transition:
    """Stop taking guesses; score and index are kept."""
    if state.phase != Phase.ACTIVE:
        return Transition(state=state)
    return Transition(state=state.model_copy(update={"phase": Phase.ENDED}))


def reset() -> Transition:
    """Discard the game and clear the chart."""
    return Transition(state=GameState.idle(), effects=(ClearChart(),))
