"""Normalization of raw daily price payloads into a canonical series."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

from updown.types import PricePoint, Series

log = logging.getLogger(__name__)

# Key under which Alpha Vantage returns the daily series
TIME_SERIES_KEY = "Time Series (Daily)"

# Field names tried in order; adjusted close wins over close
ADJUSTED_CLOSE_FIELDS = ("5. adjusted close", "adjusted_close", "adj_close", "adjclose")
CLOSE_FIELDS = ("4. close", "close")


def extract_time_series(payload: Any) -> Mapping[str, Any] | None:
    """Pull the daily series mapping out of an Alpha Vantage document.

    :param payload: Decoded JSON response.
    :returns: Mapping of date string to bar fields, or None if absent.
    """
    if not isinstance(payload, Mapping):
        return None
    series = payload.get(TIME_SERIES_KEY)
    if not isinstance(series, Mapping):
        return None
    return series


def _parse_date(value: str) -> date | None:
    """Parse ``YYYY-MM-DD`` (optionally followed by a time) into a date."""
    text = str(value).strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def _pick_price(bar: Mapping[str, Any]) -> Any:
    """Return the adjusted close if present, otherwise the close."""
    for field in ADJUSTED_CLOSE_FIELDS:
        value = bar.get(field)
        if value not in (None, ""):
            return value
    for field in CLOSE_FIELDS:
        value = bar.get(field)
        if value not in (None, ""):
            return value
    return None


def _parse_price(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        price = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(price) or price <= 0:
        return None
    return price


def normalize(raw: Any) -> Series:
    """Convert a raw date→bar mapping into an ascending series.

    Entries with an unparseable date or a missing, non-numeric, non-finite or
    non-positive price are dropped. When two keys resolve to the same date
    the first one in input order is kept.

    :param raw: Mapping of date string to a record with price fields.
    :returns: Series sorted by date; empty if nothing usable was found.
    """
    if not isinstance(raw, Mapping):
        return ()

    by_date: dict[date, PricePoint] = {}
    dropped = 0
    for date_str, bar in raw.items():
        if not isinstance(bar, Mapping):
            dropped += 1
            continue
        day = _parse_date(date_str)
        price = _parse_price(_pick_price(bar))
        if day is None or price is None:
            dropped += 1
            continue
        if day in by_date:
            dropped += 1
            continue
        by_date[day] = PricePoint(date=day, close=price)

    if dropped:
        log.debug("Dropped %d unusable entries out of %d", dropped, len(raw))

    return tuple(by_date[day] for day in sorted(by_date))
