"""Chart feed sinks receiving price points from the game."""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from updown.types import ChartPoint


class ChartSink(ABC):
    """Abstract base class for chart feeds.

    The game seeds the chart once per start, appends one point per scored
    guess, and clears it on reset.
    """

    @abstractmethod
    def seed(self, points: list[ChartPoint]) -> None:
        """Replace the chart content with ``points`` (ascending by date)."""
        ...

    @abstractmethod
    def append(self, label: str, value: float) -> None:
        """Add one point at the right edge of the chart."""
        ...

    @abstractmethod
    def clear(self) -> None:
        """Empty the chart."""
        ...


class InMemoryChartSink(ChartSink):
    """Chart sink that keeps labels and values in lists.

    Useful for tests and for front ends that redraw from the full series.
    """

    def __init__(self) -> None:
        self.labels: list[str] = []
        self.values: list[float] = []
        self.appends = 0

    def seed(self, points: list[ChartPoint]) -> None:
        self.labels = [p.label for p in points]
        self.values = [p.value for p in points]

    def append(self, label: str, value: float) -> None:
        self.labels.append(label)
        self.values.append(value)
        self.appends += 1

    def clear(self) -> None:
        self.labels = []
        self.values = []

    def __len__(self) -> int:
        return len(self.labels)


class ConsoleChartSink(InMemoryChartSink):
    """Chart sink that prints each point with a horizontal bar.

    Bars are scaled between the lowest and highest value shown so far.

    :param stream: Output stream (default: stdout).
    :param width: Maximum bar width in characters.
    """

    def __init__(self, stream: TextIO | None = None, width: int = 40) -> None:
        super().__init__()
        self.stream = stream or sys.stdout
        self.width = width

    def _bar(self, value: float) -> str:
        low, high = min(self.values), max(self.values)
        if high == low:
            filled = self.width // 2
        else:
            filled = 1 + round((value - low) / (high - low) * (self.width - 1))
        return "█" * filled

    def _print_point(self, label: str, value: float) -> None:
        print(f"   {label}  {value:>10.2f}  {self._bar(value)}", file=self.stream)

    def seed(self, points: list[ChartPoint]) -> None:
        super().seed(points)
        for label, value in zip(self.labels, self.values):
            self._print_point(label, value)

    def append(self, label: str, value: float) -> None:
        super().append(label, value)
        self._print_point(label, value)
