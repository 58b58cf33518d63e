"""Game session: the owner of every mutable cache.

A session is one table (or one simulation run). It holds the equity
cache, opponent models, tilt state, difficulty tier and random source
that decisions at that table share. Nothing is global, so sessions
running in parallel never observe each other.
"""

from __future__ import annotations

import logging
import random
import threading
import time
from collections.abc import Callable

from poker_ai.core.config import EngineConfig
from poker_ai.core.equity_calculator import EquityCache
from poker_ai.interface.opponent_model import OpponentModelStore
from poker_ai.interface.statistics_store import StatisticsStore
from poker_ai.strategy.difficulty import DifficultyManager
from poker_ai.strategy.profile import BehavioralProfile
from poker_ai.strategy.tilt import TiltState, TiltTracker

logger = logging.getLogger("poker_ai.decision")


class GameSession:
    """Per-table state shared by every decision at that table.

    Usage:
        with GameSession(load_engine_config()) as session:
            maker = DecisionMaker(session)
            decision = maker.make_decision(snapshot, hero_index, profile)
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        statistics: StatisticsStore | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config or EngineConfig()
        self.equity_cache = EquityCache(self.config.equity_cache_capacity)
        self.opponents = OpponentModelStore(
            statistics,
            max_models=self.config.max_opponent_models,
            stale_after_seconds=self.config.opponent_stale_seconds,
            full_confidence_hands=self.config.full_confidence_hands,
            min_hands_for_style=self.config.min_hands_for_style,
            clock=clock,
        )
        self.tilt = TiltTracker()
        self.difficulty = DifficultyManager(self.config.difficulty)
        self._rng = random.Random(self.config.seed)
        self._rng_lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def make_rng(self) -> random.Random:
        """A generator for one decision, drawn from the session's seed."""
        with self._rng_lock:
            return random.Random(self._rng.getrandbits(64))

    def record_hand_result(
        self,
        player_id: str,
        profile: BehavioralProfile,
        lost: bool,
        pot: float,
        equity_before: float | None = None,
    ) -> TiltState:
        """Feed a finished hand into the player's tilt state."""
        return self.tilt.record_hand_result(
            player_id, lost, pot, profile.tilt_sensitivity, equity_before,
        )

    def new_game(self) -> None:
        """Forget opponents and tilt but keep cached equities."""
        self.opponents.reset()
        self.tilt.reset()

    def close(self) -> None:
        """Discard every cache. The session cannot be used afterwards."""
        if self._closed:
            return
        logger.debug(
            "Closing session: %d cached equities (%d hits, %d misses), %d opponent models",
            len(self.equity_cache), self.equity_cache.hits, self.equity_cache.misses,
            len(self.opponents),
        )
        self.equity_cache.clear()
        self.opponents.reset()
        self.tilt.reset()
        self._closed = True

    def __enter__(self) -> GameSession:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
