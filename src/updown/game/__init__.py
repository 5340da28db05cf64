"""Game engine: start selection, transitions, and the session controller."""

from updown.game.selector import eligible_indices, pick_start
from updown.game.session import GameSession
from updown.game.transitions import Transition, judge

__all__ = [
    "GameSession",
    "Transition",
    "eligible_indices",
    "judge",
    "pick_start",
]
