"""Game exception hierarchy.

All game-specific exceptions derive from :class:`GameError` so callers can
catch every failure of a start attempt uniformly. Each error carries an
:class:`ErrorKind` so the presentation layer can format it without parsing
message strings.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Closed set of failure kinds surfaced to the user."""

    EMPTY_INPUT = "empty_input"
    INVALID_SYMBOL = "invalid_symbol"
    RATE_LIMITED = "rate_limited"
    NETWORK_FAILURE = "network_failure"
    EMPTY_RESULT = "empty_result"
    NO_USABLE_DATA = "no_usable_data"
    NO_ELIGIBLE_START = "no_eligible_start"
    NOT_ACTIVE = "not_active"
    BUSY = "busy"
    STALE = "stale"


class GameError(Exception):
    """Base class for game-related exceptions.

    Derived exceptions set :attr:`kind` so that callers can map any failure
    onto the :class:`ErrorKind` taxonomy.
    """

    kind: ErrorKind | None = None


class ConfigError(GameError):
    """Raised when configuration files or parameters are invalid."""


class EmptyInputError(GameError):
    """Raised when the ticker or credential is missing before a fetch."""

    kind = ErrorKind.EMPTY_INPUT

    def __init__(self, message: str, field: str = "symbol") -> None:
        super().__init__(message)
        self.field = field


class QuoteSourceError(GameError):
    """Raised when a quote source cannot supply a series."""


class InvalidSymbolError(QuoteSourceError):
    """Raised when the provider does not recognise the ticker."""

    kind = ErrorKind.INVALID_SYMBOL


class RateLimitedError(QuoteSourceError):
    """Raised when the provider refuses the request because of a quota."""

    kind = ErrorKind.RATE_LIMITED


class NetworkFailureError(QuoteSourceError):
    """Raised on transport errors or non-success HTTP responses.

    :param status: HTTP status code, or None when no response was received.
    """

    kind = ErrorKind.NETWORK_FAILURE

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class EmptyResultError(QuoteSourceError):
    """Raised when the provider answers but returns no price series."""

    kind = ErrorKind.EMPTY_RESULT


class NoUsableDataError(GameError):
    """Raised when normalization leaves no valid price point."""

    kind = ErrorKind.NO_USABLE_DATA


class NoEligibleStartError(GameError):
    """Raised when no index satisfies the start window constraints."""

    kind = ErrorKind.NO_ELIGIBLE_START


__all__ = [
    "ErrorKind",
    "GameError",
    "ConfigError",
    "EmptyInputError",
    "QuoteSourceError",
    "InvalidSymbolError",
    "RateLimitedError",
    "NetworkFailureError",
    "EmptyResultError",
    "NoUsableDataError",
    "NoEligibleStartError",
]
