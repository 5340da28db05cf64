"""Tests for chart sinks."""

import io

import pytest

from updown.chart import ChartSink, ConsoleChartSink, InMemoryChartSink
from updown.types import ChartPoint

POINTS = [ChartPoint(label="2024-05-01", value=10.0), ChartPoint(label="2024-05-02", value=20.0)]


class TestChartSink:
    """Tests for the ChartSink abstract base class."""

    def test_is_abstract(self) -> None:
        with pytest.raises(TypeError, match="abstract"):
            ChartSink()  # type: ignore[abstract]


class TestInMemoryChartSink:
    """Tests for InMemoryChartSink."""

    def test_seed_replaces_content(self) -> None:
        """Seeding twice keeps only the latest points."""
        sink = InMemoryChartSink()
        sink.seed(POINTS)
        sink.seed(POINTS[:1])

        assert sink.labels == ["2024-05-01"]
        assert sink.values == [10.0]
        assert sink.appends == 0

    def test_append_and_clear(self) -> None:
        sink = InMemoryChartSink()
        sink.seed(POINTS)
        sink.append("2024-05-03", 15.0)

        assert len(sink) == 3
        assert sink.appends == 1

        sink.clear()
        assert len(sink) == 0


class TestConsoleChartSink:
    """Tests for ConsoleChartSink."""

    def test_prints_points_with_bars(self) -> None:
        """Lowest value gets the shortest bar, highest the full width."""
        stream = io.StringIO()
        sink = ConsoleChartSink(stream=stream, width=10)

        sink.seed(POINTS)
        lines = stream.getvalue().splitlines()

        assert len(lines) == 2
        assert lines[0].startswith("   2024-05-01       10.00  █")
        assert lines[0].count("█") == 1
        assert lines[1].count("█") == 10

    def test_flat_values_use_half_width(self) -> None:
        stream = io.StringIO()
        sink = ConsoleChartSink(stream=stream, width=10)

        sink.seed([ChartPoint(label="2024-05-01", value=5.0)])

        assert stream.getvalue().count("█") == 5

    def test_append_prints_one_line(self) -> None:
        stream = io.StringIO()
        sink = ConsoleChartSink(stream=stream, width=10)
        sink.seed(POINTS)

        sink.append("2024-05-03", 20.0)

        assert stream.getvalue().splitlines()[-1].startswith("   2024-05-03       20.00")
        assert sink.labels[-1] == "2024-05-03"
