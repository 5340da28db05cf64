"""Chart feed sinks."""

from updown.chart.sinks import ChartSink, ConsoleChartSink, InMemoryChartSink

__all__ = [
    "ChartSink",
    "InMemoryChartSink",
    "ConsoleChartSink",
]
