"""Up/down price prediction game package root."""

from updown.exceptions import ErrorKind, GameError
from updown.game import GameSession

__all__ = ["ErrorKind", "GameError", "GameSession"]
