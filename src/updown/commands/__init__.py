"""CLI command implementations for the up/down game.

Each command module provides:
- Configuration loading and validation
- Helpers shared by the CLI entry points
"""

from updown.commands.play import (build_game_config, load_game_config,
                                  resolve_api_key)

__all__ = [
    "build_game_config",
    "load_game_config",
    "resolve_api_key",
]
