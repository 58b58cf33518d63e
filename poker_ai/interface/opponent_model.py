"""Opponent modeling.

An OpponentModel wraps one player's statistics for one game mode with a
sample-size confidence and a style classification. Models live in an
OpponentModelStore owned by a single game session: they are created
lazily on first lookup, capped in number, and swept when stale, so two
concurrent sessions never see each other's observations.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from poker_ai.interface.statistics_store import PlayerStatistics, StatisticsStore
from poker_ai.utils.constants import GameMode, PlayerStyle

logger = logging.getLogger("poker_ai.opponents")

DEFAULT_FULL_CONFIDENCE_HANDS = 100
DEFAULT_MIN_HANDS_FOR_STYLE = 20
RELIABILITY_THRESHOLD = 0.5  # Confidence needed before a model shapes play
DEFAULT_MAX_MODELS = 50
DEFAULT_STALE_SECONDS = 600.0


def classify_style(vpip: float, pfr: float, af: float) -> PlayerStyle:
    """Classify a player from VPIP %, PFR % and aggression factor."""
    if vpip == 0 and pfr == 0:
        return PlayerStyle.UNKNOWN
    if vpip < 20 and pfr < 15 and af > 2.5:
        return PlayerStyle.ROCK
    if vpip > 45 and pfr < 15 and af < 1.5:
        return PlayerStyle.FISH
    if 30 <= vpip <= 45 and 25 <= pfr <= 35 and af >= 3.0:
        return PlayerStyle.LAG
    if 20 <= vpip <= 30 and 15 <= pfr <= 25 and 2.0 <= af <= 3.0:
        return PlayerStyle.TAG
    # Nearest fit for players between the archetypes
    if vpip < 25:
        return PlayerStyle.TAG
    if vpip > 40:
        return PlayerStyle.FISH
    return PlayerStyle.TAG


@dataclass
class OpponentModel:
    """Statistics, confidence and style for one (player, game mode)."""

    stats: PlayerStatistics
    full_confidence_hands: int = DEFAULT_FULL_CONFIDENCE_HANDS
    min_hands_for_style: int = DEFAULT_MIN_HANDS_FOR_STYLE
    last_access: float = field(default=0.0, compare=False)

    @property
    def player_id(self) -> str:
        return self.stats.player_id

    @property
    def game_mode(self) -> GameMode:
        return self.stats.game_mode

    @property
    def total_hands(self) -> int:
        return self.stats.hands_seen

    @property
    def confidence(self) -> float:
        """min(1, hands / full_confidence_hands); 0 with no sample."""
        if self.stats.hands_seen <= 0:
            return 0.0
        return min(1.0, self.stats.hands_seen / self.full_confidence_hands)

    @property
    def is_reliable(self) -> bool:
        return self.confidence >= RELIABILITY_THRESHOLD

    @property
    def style(self) -> PlayerStyle:
        if self.stats.hands_seen < self.min_hands_for_style:
            return PlayerStyle.UNKNOWN
        return classify_style(
            self.stats.vpip_pct, self.stats.pfr_pct, self.stats.aggression_factor,
        )


class OpponentModelStore:
    """Session-scoped, bounded collection of opponent models.

    All access is serialized by a re-entrant lock. Lookups for unseen
    players create a model seeded from the statistics store (or empty).
    """

    def __init__(
        self,
        statistics: StatisticsStore | None = None,
        max_models: int = DEFAULT_MAX_MODELS,
        stale_after_seconds: float = DEFAULT_STALE_SECONDS,
        full_confidence_hands: int = DEFAULT_FULL_CONFIDENCE_HANDS,
        min_hands_for_style: int = DEFAULT_MIN_HANDS_FOR_STYLE,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_models < 1:
            raise ValueError(f"max_models must be positive, got {max_models}")
        self._statistics = statistics
        self._max_models = max_models
        self._stale_after = stale_after_seconds
        self._full_confidence_hands = full_confidence_hands
        self._min_hands_for_style = min_hands_for_style
        self._clock = clock
        self._models: dict[tuple[str, GameMode], OpponentModel] = {}
        self._lock = threading.RLock()

    def get(self, player_id: str, game_mode: GameMode) -> OpponentModel:
        """Return the model for a player, creating it on first lookup."""
        key = (player_id, game_mode)
        with self._lock:
            model = self._models.get(key)
            if model is None:
                model = self._create(player_id, game_mode)
                self._sweep()
                self._models[key] = model
            model.last_access = self._clock()
            return model

    def record_hand(
        self,
        player_id: str,
        game_mode: GameMode,
        *,
        vpip: bool = False,
        pfr: bool = False,
        three_bet: bool = False,
        aggressive: int = 0,
        passive: int = 0,
        saw_flop: bool = False,
        showdown: bool = False,
        won_showdown: bool = False,
    ) -> OpponentModel:
        """Add one completed hand's observations to a player's model.

        The updated statistics are written back to the statistics store
        when one is attached.
        """
        with self._lock:
            model = self.get(player_id, game_mode)
            s = model.stats
            s.hands_seen += 1
            s.vpip_count += int(vpip)
            s.pfr_count += int(pfr)
            s.three_bet_count += int(three_bet)
            s.aggressive_actions += aggressive
            s.passive_actions += passive
            s.flops_seen += int(saw_flop)
            s.showdowns += int(showdown)
            s.showdowns_won += int(won_showdown)
            if self._statistics is not None:
                self._statistics.save_stats(s.copy())
            return model

    def reset(self) -> None:
        """Drop every model, e.g. when a new game starts."""
        with self._lock:
            self._models.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._models)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._models

    def _create(self, player_id: str, game_mode: GameMode) -> OpponentModel:
        stats = None
        if self._statistics is not None:
            stats = self._statistics.load_stats(player_id, game_mode)
        if stats is None:
            stats = PlayerStatistics(player_id=player_id, game_mode=game_mode)
        logger.debug(
            "New opponent model for %s (%s), %d hands on record",
            player_id, game_mode, stats.hands_seen,
        )
        return OpponentModel(
            stats=stats,
            full_confidence_hands=self._full_confidence_hands,
            min_hands_for_style=self._min_hands_for_style,
        )

    def _sweep(self) -> None:
        """Make room for one more model. Caller holds the lock."""
        if len(self._models) < self._max_models:
            return
        now = self._clock()
        stale = [
            k for k, m in self._models.items()
            if now - m.last_access > self._stale_after
        ]
        for k in stale:
            del self._models[k]
        if len(self._models) >= self._max_models:
            oldest = min(self._models, key=lambda k: self._models[k].last_access)
            del self._models[oldest]
            stale.append(oldest)
        logger.debug("Swept %d opponent models", len(stale))
