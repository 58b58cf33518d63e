"""Engine configuration.

Loaded from ~/.poker_ai/engine_config.json when present. A missing file
means defaults; an unreadable or invalid file is logged and also yields
defaults so that a bad config never stops a table from running.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path

from poker_ai.utils.constants import DifficultyLevel

logger = logging.getLogger("poker_ai.config")

DEFAULT_CONFIG_PATH = Path.home() / ".poker_ai" / "engine_config.json"


@dataclass(frozen=True)
class EngineConfig:
    """Tunable knobs for a game session."""

    difficulty: DifficultyLevel = DifficultyLevel.HARD
    equity_cache_capacity: int = 1000
    max_opponent_models: int = 50
    opponent_stale_seconds: float = 600.0
    full_confidence_hands: int = 100
    min_hands_for_style: int = 20
    seed: int | None = None  # None = nondeterministic Monte Carlo


def load_engine_config(config_path: Path | None = None) -> EngineConfig:
    """Load engine configuration from a JSON file.

    Default path: ~/.poker_ai/engine_config.json

    Expected JSON format (every key optional):
        {
            "difficulty": "EXPERT",
            "equity_cache_capacity": 2000,
            "max_opponent_models": 50,
            "opponent_stale_seconds": 600,
            "full_confidence_hands": 100,
            "min_hands_for_style": 20,
            "seed": 42
        }

    Returns:
        The parsed EngineConfig, or EngineConfig() if the file is missing
        or invalid.
    """
    path = config_path or DEFAULT_CONFIG_PATH
    if not path.exists():
        return EngineConfig()

    try:
        with open(path) as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Failed to read engine config at %s: %s", path, e)
        return EngineConfig()

    if not isinstance(data, dict):
        logger.warning("Engine config at %s must be a JSON object", path)
        return EngineConfig()

    known = {f.name for f in fields(EngineConfig)}
    for key in data:
        if key not in known:
            logger.warning("Ignoring unknown engine config key: %s", key)

    try:
        config = EngineConfig(
            difficulty=DifficultyLevel(str(data.get("difficulty", "HARD")).upper()),
            equity_cache_capacity=int(data.get("equity_cache_capacity", 1000)),
            max_opponent_models=int(data.get("max_opponent_models", 50)),
            opponent_stale_seconds=float(data.get("opponent_stale_seconds", 600.0)),
            full_confidence_hands=int(data.get("full_confidence_hands", 100)),
            min_hands_for_style=int(data.get("min_hands_for_style", 20)),
            seed=int(data["seed"]) if data.get("seed") is not None else None,
        )
    except (TypeError, ValueError) as e:
        logger.warning("Invalid engine config at %s: %s", path, e)
        return EngineConfig()

    if config.equity_cache_capacity < 1 or config.max_opponent_models < 1:
        logger.warning("Engine config capacities must be positive, using defaults")
        return EngineConfig()
    if config.full_confidence_hands < 1:
        logger.warning("full_confidence_hands must be positive, using defaults")
        return EngineConfig()

    return config
