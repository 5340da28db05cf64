"""Selection of a random starting point within a series."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Protocol

from updown.types import Series, StartWindow


class RandomSource(Protocol):
    """Uniform randomness source, e.g. an instance of ``random.Random``."""

    def randrange(self, stop: int) -> int: ...


def _as_date(now: date | datetime) -> date:
    if isinstance(now, datetime):
        return now.date()
    return now


def eligible_indices(
    series: Series,
    now: date | datetime,
    window: StartWindow | None = None,
) -> list[int]:
    """List every index a game may start at.

    An index is eligible when its date lies in
    ``[now - min_days_back, now - max_days_back]``, at least
    ``seed_points`` points precede it, and at least one point follows it.

    :param series: Normalized series.
    :param now: Reference date.
    :param window: Start window constraints (default: 100/7 days, 7 points).
    :returns: Eligible indices in ascending order.
    """
    window = window or StartWindow()
    today = _as_date(now)
    min_date = today - timedelta(days=window.min_days_back)
    max_date = today - timedelta(days=window.max_days_back)

    eligible: list[int] = []
    for i, point in enumerate(series):
        if not min_date <= point.date <= max_date:
            continue
        has_prior = i - window.seed_points >= 0
        has_next = i + 1 < len(series)
        if has_prior and has_next:
            eligible.append(i)
    return eligible


def pick_start(
    series: Series,
    now: date | datetime,
    rng: RandomSource,
    window: StartWindow | None = None,
) -> int | None:
    """Draw a start index uniformly from the eligible set.

    :param series: Normalized series.
    :param now: Reference date.
    :param rng: Injected randomness source.
    :param window: Start window constraints.
    :returns: The picked index, or None if no index is eligible.
    """
    eligible = eligible_indices(series, now, window)
    if not eligible:
        return None
    return eligible[rng.randrange(len(eligible))]
