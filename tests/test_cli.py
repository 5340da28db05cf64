"""Tests for the command-line interface."""

import logging
import random
from datetime import date, timedelta
from pathlib import Path

import pytest

from updown.chart import InMemoryChartSink
from updown.cli import main, play_loop
from updown.data.sources import MockQuoteSource
from updown.game import GameSession
from updown.types import Phase

TODAY = date(2024, 6, 1)


@pytest.fixture(autouse=True)
def restore_root_handlers():
    """Drop handlers that setup_logging attached during a test."""
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in before:
            root.removeHandler(handler)
    root.setLevel(level)


def scripted(*lines: str):
    """Prompt reader returning ``lines`` in order, then EOF."""
    remaining = list(lines)

    def read_line(prompt: str) -> str:
        if not remaining:
            raise EOFError
        return remaining.pop(0)

    return read_line


def rising_payload(today: date) -> dict:
    return {
        (today - timedelta(days=120 - i)).isoformat(): {"4. close": str(100 + i)}
        for i in range(121)
    }


def make_session() -> GameSession:
    source = MockQuoteSource({"AAPL": rising_payload(TODAY)})
    return GameSession(
        source, InMemoryChartSink(), rng=random.Random(1), clock=lambda: TODAY
    )


def write_csv(path: Path, today: date) -> None:
    rows = ["date,close"]
    for i in range(121):
        rows.append(f"{(today - timedelta(days=120 - i)).isoformat()},{100 + i}")
    path.write_text("\n".join(rows) + "\n")


class TestPlayLoop:
    """Tests for the interactive loop."""

    def test_guess_and_quit(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Guesses print feedback and quitting reports the score."""
        session = make_session()

        code = play_loop(session, "aapl", None, scripted("u", "d", "q"))

        out = capsys.readouterr().out
        assert code == 0
        assert "Correct! " in out
        assert "Your guess was incorrect." in out
        assert "(Δ +1.00)" in out
        assert "Final score: 1" in out
        assert session.state.score == 1

    def test_end_then_guess(self, capsys: pytest.CaptureFixture[str]) -> None:
        """After ending, guesses are refused."""
        session = make_session()

        play_loop(session, "AAPL", None, scripted("e", "u"))

        out = capsys.readouterr().out
        assert "Game ended. You can reset to play again." in out
        assert "No game in progress" in out
        assert session.state.phase == Phase.ENDED

    def test_reset_and_quit(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Reset followed by a blank ticker exits cleanly."""
        session = make_session()

        code = play_loop(session, "AAPL", None, scripted("u", "r", ""))

        assert code == 0
        assert session.state.phase == Phase.IDLE
        assert "Enter a ticker to start a new game." in capsys.readouterr().out

    def test_reset_and_restart(self) -> None:
        """Reset followed by a ticker starts a new game."""
        session = make_session()

        play_loop(session, "AAPL", None, scripted("u", "r", "AAPL", "q"))

        assert session.state.phase == Phase.ACTIVE
        assert session.state.score == 0

    def test_failed_start(self, capsys: pytest.CaptureFixture[str]) -> None:
        """An unknown ticker prints the error and exits with 1."""
        session = make_session()

        code = play_loop(session, "NOPE", None, scripted())

        assert code == 1
        assert "Invalid ticker symbol" in capsys.readouterr().out

    def test_unknown_command(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Unknown input is reported and the loop continues."""
        session = make_session()

        play_loop(session, "AAPL", None, scripted("x", "q"))

        assert "Unknown command 'x'" in capsys.readouterr().out


class TestMain:
    """Tests for the argparse entry point."""

    def test_no_command_prints_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Running without a command shows usage."""
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out.lower()

    def test_series_from_csv(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """The series command summarizes a CSV file."""
        path = tmp_path / "prices.csv"
        write_csv(path, date.today())

        code = main(["series", "AAPL", "--csv", str(path), "--log-level", "WARNING"])

        out = capsys.readouterr().out
        assert code == 0
        assert "Points:          121" in out
        assert "Eligible starts: 94" in out

    def test_play_from_csv(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """The play command runs end to end on a CSV file."""
        path = tmp_path / "prices.csv"
        write_csv(path, date.today())
        answers = iter(["u", "q"])
        monkeypatch.setattr("builtins.input", lambda prompt: next(answers))

        code = main(["play", "AAPL", "--csv", str(path), "--seed", "3", "--log-level", "WARNING"])

        out = capsys.readouterr().out
        assert code == 0
        assert "Correct! " in out
        assert "Final score: 1" in out

    def test_csv_source_without_file(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Choosing the CSV source without a file is a configuration error."""
        code = main(["series", "AAPL", "--source", "csv"])

        assert code == 1
        assert "Configuration error" in capsys.readouterr().out

    def test_missing_config_file(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """A missing config file is reported."""
        code = main(["play", "AAPL", "--config", str(tmp_path / "nope.yaml")])

        assert code == 1
        assert "not found" in capsys.readouterr().out

    def test_series_without_api_key(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """A source that needs a key is not queried without one."""
        from updown.commands.play import API_KEY_ENV_VAR

        monkeypatch.delenv(API_KEY_ENV_VAR, raising=False)

        def no_http(*args, **kwargs):
            raise AssertionError("no request expected")

        monkeypatch.setattr("updown.data.sources.httpx.Client", no_http)

        code = main(["series", "AAPL", "--source", "alphavantage"])

        assert code == 1
        assert "Please enter a stock ticker and API key." in capsys.readouterr().out
