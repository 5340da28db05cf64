"""Quote source implementations for fetching daily price series.

This module provides an abstract interface for quote sources and concrete
implementations for Alpha Vantage, Yahoo Finance, CSV files, and a mock used
in tests. Every source returns the raw payload shape consumed by
:func:`updown.data.normalize.normalize`: a mapping of ``YYYY-MM-DD`` date
strings to bar records.
"""

from __future__ import annotations

import csv
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any

import httpx

from updown.data.normalize import extract_time_series
from updown.exceptions import (
    ConfigError,
    EmptyResultError,
    InvalidSymbolError,
    NetworkFailureError,
    QuoteSourceError,
    RateLimitedError,
)

if TYPE_CHECKING:
    from updown.types import GameConfig

log = logging.getLogger(__name__)

RawSeries = dict[str, dict[str, Any]]


class QuoteSource(ABC):
    """Abstract base class for daily quote sources.

    All quote source implementations must inherit from this class and
    implement the `fetch_daily` method.
    """

    # Whether fetch_daily needs a non-empty credential
    requires_credential: bool = False

    @abstractmethod
    def fetch_daily(self, symbol: str, credential: str | None = None) -> RawSeries:
        """Fetch the daily price series for a symbol.

        :param symbol: Ticker symbol.
        :param credential: Provider access key, if the provider needs one.
        :returns: Mapping of date string to bar fields.
        :raises QuoteSourceError: If fetching fails.
        """
        ...


class AlphaVantageQuoteSource(QuoteSource):
    """Quote source backed by the Alpha Vantage daily adjusted endpoint.

    :param source_params: Optional parameters for configuring the source.
        - base_url: Query endpoint (default: https://www.alphavantage.co/query)
        - timeout: Request timeout in seconds (default: 20)
        - outputsize: "compact" (about 100 points) or "full" (default: compact)
        - function: API function (default: TIME_SERIES_DAILY_ADJUSTED)
    """

    requires_credential = True

    DEFAULT_BASE_URL = "https://www.alphavantage.co/query"

    def __init__(
        self,
        source_params: dict[str, Any] | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.params = source_params or {}
        self.base_url = self.params.get("base_url", self.DEFAULT_BASE_URL)
        self.timeout = float(self.params.get("timeout", 20))
        self.outputsize = self.params.get("outputsize", "compact")
        self.function = self.params.get("function", "TIME_SERIES_DAILY_ADJUSTED")
        self._client = client

    def _get(self, params: dict[str, str]) -> httpx.Response:
        if self._client is not None:
            return self._client.get(self.base_url, params=params)
        with httpx.Client(timeout=self.timeout) as client:
            return client.get(self.base_url, params=params)

    def fetch_daily(self, symbol: str, credential: str | None = None) -> RawSeries:
        """Fetch the compact daily adjusted series from Alpha Vantage.

        :param symbol: Ticker symbol.
        :param credential: Alpha Vantage API key.
        :returns: Mapping of date string to Alpha Vantage bar fields.
        :raises QuoteSourceError: If the request or the payload is rejected.
        """
        params = {
            "function": self.function,
            "symbol": symbol,
            "apikey": credential or "",
            "outputsize": self.outputsize,
        }

        try:
            resp = self._get(params)
        except httpx.HTTPError as e:
            raise NetworkFailureError(f"Network error: {e}") from e

        if not resp.is_success:
            raise NetworkFailureError(
                f"Network error: {resp.status_code} {resp.reason_phrase}",
                status=resp.status_code,
            )

        try:
            payload = resp.json()
        except ValueError as e:
            raise NetworkFailureError(
                f"Malformed response body: {e}", status=resp.status_code
            ) from e

        if isinstance(payload, dict):
            if payload.get("Error Message"):
                raise InvalidSymbolError(str(payload["Error Message"]))
            # Alpha Vantage reports quota exhaustion as "Note" or "Information"
            note = payload.get("Note") or payload.get("Information")
            if note:
                raise RateLimitedError(str(note))

        series = extract_time_series(payload)
        if not series:
            raise EmptyResultError(f"No daily series returned for '{symbol}'")

        return {str(k): dict(v) if isinstance(v, dict) else v for k, v in series.items()}


class YahooQuoteSource(QuoteSource):
    """Quote source that fetches daily bars from Yahoo Finance via yfinance.

    Yahoo needs no credential; any credential passed is ignored.

    :param source_params: Optional parameters for configuring the source.
        - period: History period to request (default: "6mo")
        - timeout: Request timeout in seconds (default: 30)
    """

    def __init__(self, source_params: dict[str, Any] | None = None) -> None:
        self.params = source_params or {}
        self.period = self.params.get("period", "6mo")
        self.timeout = self.params.get("timeout", 30)

    def fetch_daily(self, symbol: str, credential: str | None = None) -> RawSeries:
        """Fetch daily closes from Yahoo Finance.

        :param symbol: Ticker symbol.
        :param credential: Ignored.
        :returns: Mapping of date string to ``close``/``adjusted_close``.
        :raises QuoteSourceError: If fetching fails or the ticker is unknown.
        """
        try:
            import yfinance as yf
        except ImportError as e:
            raise NetworkFailureError(
                "yfinance is not installed. Install it with: pip install yfinance"
            ) from e

        try:
            ticker = yf.Ticker(symbol)
            df = ticker.history(
                period=self.period,
                interval="1d",
                auto_adjust=False,
                timeout=self.timeout,
            )
        except Exception as e:
            raise NetworkFailureError(
                f"Failed to fetch data for symbol '{symbol}': {e}"
            ) from e

        if df.empty:
            # Yahoo answers unknown tickers with an empty frame
            raise InvalidSymbolError(f"No data found for symbol '{symbol}'")

        out: RawSeries = {}
        try:
            for timestamp, row in df.iterrows():
                bar: dict[str, Any] = {"close": float(row["Close"])}
                if "Adj Close" in row.index:
                    bar["adjusted_close"] = float(row["Adj Close"])
                out[timestamp.strftime("%Y-%m-%d")] = bar
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise NetworkFailureError(
                f"Malformed Yahoo Finance data for symbol '{symbol}': {e}"
            ) from e
        return out


class CSVQuoteSource(QuoteSource):
    """Quote source that reads daily closes from a CSV file.

    Expected CSV format (default columns):
    - date: ``YYYY-MM-DD``
    - close: Closing price
    - adjusted_close: Adjusted closing price (optional)
    - symbol: Ticker (optional; when present rows are filtered by symbol)

    :param source_params: Required parameters:
        - file_path: Path to the CSV file.
        Optional parameters:
        - date_col, close_col, adjusted_close_col, symbol_col: column names
        - delimiter: CSV delimiter (default: ",")
    """

    def __init__(self, source_params: dict[str, Any] | None = None) -> None:
        self.params = source_params or {}
        self.file_path = self.params.get("file_path")
        if not self.file_path:
            raise ConfigError("CSVQuoteSource requires 'file_path' in source_params")

        self.date_col = self.params.get("date_col", "date")
        self.close_col = self.params.get("close_col", "close")
        self.adjusted_close_col = self.params.get("adjusted_close_col", "adjusted_close")
        self.symbol_col = self.params.get("symbol_col", "symbol")
        self.delimiter = self.params.get("delimiter", ",")

    def fetch_daily(self, symbol: str, credential: str | None = None) -> RawSeries:
        """Read the series for ``symbol`` from the CSV file.

        :param symbol: Ticker used to filter rows when a symbol column exists.
        :param credential: Ignored.
        :returns: Mapping of date string to ``close``/``adjusted_close``.
        :raises QuoteSourceError: If the file is missing or has no rows.
        """
        path = Path(self.file_path)
        if not path.exists():
            raise EmptyResultError(f"CSV file not found: {self.file_path}")

        out: RawSeries = {}
        saw_rows = False
        try:
            with open(path, newline="", encoding="utf-8") as f:
                reader = csv.DictReader(f, delimiter=self.delimiter)
                for row in reader:
                    saw_rows = True
                    row_symbol = row.get(self.symbol_col)
                    if row_symbol and row_symbol.strip().upper() != symbol.upper():
                        continue

                    date_str = row.get(self.date_col)
                    if not date_str:
                        continue

                    bar: dict[str, Any] = {"close": row.get(self.close_col)}
                    adjusted = row.get(self.adjusted_close_col)
                    if adjusted:
                        bar["adjusted_close"] = adjusted
                    out[date_str.strip()] = bar
        except csv.Error as e:
            raise EmptyResultError(f"CSV parsing error: {e}") from e
        except OSError as e:
            raise EmptyResultError(f"Failed to read CSV file: {e}") from e

        if not saw_rows:
            raise EmptyResultError(f"CSV file has no rows: {self.file_path}")
        if not out:
            raise InvalidSymbolError(f"No rows for symbol '{symbol}' in {self.file_path}")
        return out


class MockQuoteSource(QuoteSource):
    """Mock quote source for testing.

    Returns pre-configured payloads or raises a pre-configured error.

    :param payloads: Dictionary of symbol to raw series.
    :param error: Error raised by every fetch, if set.
    :param requires_credential: Whether fetches need a credential.
    """

    def __init__(
        self,
        payloads: dict[str, RawSeries] | None = None,
        error: QuoteSourceError | None = None,
        requires_credential: bool = False,
    ) -> None:
        self._payloads = payloads or {}
        self._error = error
        self.requires_credential = requires_credential
        self.calls: list[tuple[str, str | None]] = []

    def set_payload(self, symbol: str, payload: RawSeries) -> None:
        """Set the payload returned for ``symbol``."""
        self._payloads[symbol.upper()] = payload

    def set_error(self, error: QuoteSourceError | None) -> None:
        """Set the error raised by subsequent fetches."""
        self._error = error

    def fetch_daily(self, symbol: str, credential: str | None = None) -> RawSeries:
        """Return the configured payload for ``symbol``."""
        self.calls.append((symbol, credential))
        if self._error is not None:
            raise self._error
        payload = self._payloads.get(symbol.upper())
        if payload is None:
            raise InvalidSymbolError(f"Unknown symbol '{symbol}'")
        return payload


def resolve_quote_source(config: GameConfig) -> QuoteSource:
    """Construct a quote source from configuration.

    :param config: GameConfig with quote_source and source_params.
    :returns: QuoteSource instance for the specified type.
    :raises ConfigError: If the quote_source type is unrecognized.
    """
    source_type = config.quote_source.lower()

    if source_type == "alphavantage":
        return AlphaVantageQuoteSource(config.source_params)
    elif source_type == "yahoo":
        return YahooQuoteSource(config.source_params)
    elif source_type == "csv":
        return CSVQuoteSource(config.source_params)
    else:
        raise ConfigError(
            f"Unrecognized quote source type: '{config.quote_source}'. "
            f"Supported types: alphavantage, yahoo, csv"
        )
