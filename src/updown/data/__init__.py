"""Quote retrieval and series normalization module."""

from updown.data.normalize import extract_time_series, normalize
from updown.data.sources import (AlphaVantageQuoteSource, CSVQuoteSource,
                                 MockQuoteSource, QuoteSource,
                                 YahooQuoteSource, resolve_quote_source)

__all__ = [
    "QuoteSource",
    "AlphaVantageQuoteSource",
    "YahooQuoteSource",
    "CSVQuoteSource",
    "MockQuoteSource",
    "resolve_quote_source",
    "extract_time_series",
    "normalize",
]
