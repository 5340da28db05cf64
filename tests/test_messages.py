"""Tests for user-facing message formatting."""

from datetime import date

import pytest

from updown.exceptions import ErrorKind
from updown.messages import (ERROR_MESSAGES, SERIES_EXHAUSTED, format_delta,
                             format_guess, format_start_failure)
from updown.types import (CommandRejected, Direction, GuessResult,
                          SeriesExhausted, StartFailure, Verdict)


def result(verdict: Verdict, delta: float) -> GuessResult:
    return GuessResult(
        verdict=verdict,
        direction=Direction.UP,
        revealed_date=date(2024, 5, 3),
        revealed_price=101.5,
        delta=delta,
        score=1,
    )


class TestFormatDelta:
    """Tests for signed delta formatting."""

    @pytest.mark.parametrize(
        ("delta", "expected"), [(1.254, "+1.25"), (-0.4, "-0.40"), (0.0, "+0.00")]
    )
    def test_sign_and_precision(self, delta: float, expected: str) -> None:
        assert format_delta(delta) == expected


class TestFormatGuess:
    """Tests for guess feedback."""

    def test_correct(self) -> None:
        """Correct guesses show the revealed day."""
        assert format_guess(result(Verdict.CORRECT, 1.5)) == "Correct! 2024-05-03: 101.50 (Δ +1.50)"

    def test_incorrect(self) -> None:
        msg = format_guess(result(Verdict.INCORRECT, -2.0))
        assert msg == "Your guess was incorrect. 2024-05-03: 101.50 (Δ -2.00)"

    def test_unchanged(self) -> None:
        """A flat day is reported as unchanged."""
        assert format_guess(result(Verdict.UNCHANGED, 0.0)).startswith("Your guess was unchanged.")

    def test_exhausted(self) -> None:
        assert format_guess(SeriesExhausted(score=3)) == SERIES_EXHAUSTED

    def test_rejected(self) -> None:
        msg = format_guess(CommandRejected(kind=ErrorKind.NOT_ACTIVE))
        assert msg == ERROR_MESSAGES[ErrorKind.NOT_ACTIVE]

    def test_unexpected_outcome_raises(self) -> None:
        with pytest.raises(TypeError, match="Unexpected guess outcome"):
            format_guess("nope")  # type: ignore[arg-type]


class TestFormatStartFailure:
    """Tests for start failure messages."""

    def test_every_kind_has_a_message(self) -> None:
        """No error kind falls through to a generic message."""
        assert set(ERROR_MESSAGES) == set(ErrorKind)

    def test_empty_input_uses_detail(self) -> None:
        """The missing field is named in the message."""
        failure = StartFailure(kind=ErrorKind.EMPTY_INPUT, detail="Please enter your API key.")
        assert format_start_failure(failure) == "Please enter your API key."

    def test_network_status_is_shown(self) -> None:
        failure = StartFailure(kind=ErrorKind.NETWORK_FAILURE, status=503)
        assert format_start_failure(failure) == "Network error: 503. Please try again."

    def test_network_without_status(self) -> None:
        failure = StartFailure(kind=ErrorKind.NETWORK_FAILURE, detail="refused")
        assert format_start_failure(failure) == ERROR_MESSAGES[ErrorKind.NETWORK_FAILURE]

    def test_rate_limited(self) -> None:
        failure = StartFailure(kind=ErrorKind.RATE_LIMITED)
        assert "rate limit" in format_start_failure(failure)
