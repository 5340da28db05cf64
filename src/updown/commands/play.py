"""Configuration for the play and series commands.

Example config file (updown.yaml):

    quote_source: "alphavantage"
    source_params:
      timeout: 20
      outputsize: "compact"
    window:
      min_days_back: 100
      max_days_back: 7
      seed_points: 7
    seed: 42          # Optional
    log_level: "INFO"
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from updown.exceptions import ConfigError
from updown.types import GameConfig, StartWindow

# Valid quote source types
VALID_QUOTE_SOURCES = frozenset(["alphavantage", "yahoo", "csv"])

VALID_LOG_LEVELS = frozenset(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])

# Environment variable consulted when no API key is given on the command line
API_KEY_ENV_VAR = "ALPHAVANTAGE_API_KEY"


def _parse_window(raw_window: Any) -> StartWindow:
    """Parse the optional ``window`` mapping.

    :raises ConfigError: If the mapping is malformed or inconsistent.
    """
    if raw_window is None:
        return StartWindow()
    if not isinstance(raw_window, dict):
        raise ConfigError("'window' must be a mapping")

    unknown = set(raw_window) - set(StartWindow.model_fields)
    if unknown:
        raise ConfigError(f"Unknown window fields: {sorted(unknown)}")

    try:
        return StartWindow(**raw_window)
    except ValidationError as e:
        raise ConfigError(f"Invalid window: {e}") from e


def build_game_config(raw_config: dict[str, Any]) -> GameConfig:
    """Validate a raw configuration mapping.

    :param raw_config: Mapping as loaded from YAML.
    :returns: Validated GameConfig object.
    :raises ConfigError: If any field is invalid.
    """
    quote_source = str(raw_config.get("quote_source", "alphavantage")).lower()
    if quote_source not in VALID_QUOTE_SOURCES:
        raise ConfigError(
            f"Invalid quote_source '{quote_source}'. "
            f"Valid options: {sorted(VALID_QUOTE_SOURCES)}"
        )

    source_params: dict[str, Any] = raw_config.get("source_params") or {}
    if not isinstance(source_params, dict):
        raise ConfigError("'source_params' must be a mapping")

    window = _parse_window(raw_config.get("window"))

    seed = raw_config.get("seed")
    if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
        raise ConfigError("'seed' must be an integer")

    log_level = str(raw_config.get("log_level", "INFO")).upper()
    if log_level not in VALID_LOG_LEVELS:
        raise ConfigError(
            f"Invalid log_level '{log_level}'. Valid options: {sorted(VALID_LOG_LEVELS)}"
        )

    return GameConfig(
        quote_source=quote_source,
        source_params=source_params,
        window=window,
        seed=seed,
        log_level=log_level,
    )


def load_game_config(config_path: str | Path) -> GameConfig:
    """Parse and validate a game configuration file.

    :param config_path: Path to YAML configuration file.
    :returns: Validated GameConfig object.
    :raises ConfigError: If file cannot be read or config is invalid.
    """
    config_path = Path(config_path)

    try:
        with open(config_path) as f:
            raw_config = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Configuration file not found: {config_path}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in configuration file: {e}") from e

    if raw_config is None:
        raw_config = {}
    if not isinstance(raw_config, dict):
        raise ConfigError("Configuration must be a YAML mapping")

    return build_game_config(raw_config)


def resolve_api_key(explicit: str | None) -> str | None:
    """Return the API key from the command line or the environment."""
    if explicit and explicit.strip():
        return explicit.strip()
    env_value = os.getenv(API_KEY_ENV_VAR, "").strip()
    return env_value or None
