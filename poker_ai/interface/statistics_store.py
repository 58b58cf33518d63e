"""Historical player statistics, keyed by player identity and game mode.

The decision core only needs the StatisticsStore protocol. Two adapters
are provided: an in-memory store for simulations and tests, and a
SQLite store (WAL mode, write-through) for persistent play.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Protocol

from poker_ai.utils.constants import GameMode

logger = logging.getLogger("poker_ai.stats")

_DATA_DIR = Path.home() / ".poker_ai"
_DB_FILE = _DATA_DIR / "player_stats.db"

_CREATE_STATS_TABLE = """\
CREATE TABLE IF NOT EXISTS player_stats (
    player_id          TEXT NOT NULL,
    game_mode          TEXT NOT NULL,
    hands_seen         INTEGER NOT NULL DEFAULT 0,
    vpip_count         INTEGER NOT NULL DEFAULT 0,
    pfr_count          INTEGER NOT NULL DEFAULT 0,
    three_bet_count    INTEGER NOT NULL DEFAULT 0,
    aggressive_actions INTEGER NOT NULL DEFAULT 0,
    passive_actions    INTEGER NOT NULL DEFAULT 0,
    flops_seen         INTEGER NOT NULL DEFAULT 0,
    showdowns          INTEGER NOT NULL DEFAULT 0,
    showdowns_won      INTEGER NOT NULL DEFAULT 0,
    PRIMARY KEY (player_id, game_mode)
);
"""

_UPSERT_STATS = """\
INSERT INTO player_stats (
    player_id, game_mode, hands_seen, vpip_count, pfr_count, three_bet_count,
    aggressive_actions, passive_actions, flops_seen, showdowns, showdowns_won
) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
ON CONFLICT(player_id, game_mode) DO UPDATE SET
    hands_seen         = excluded.hands_seen,
    vpip_count         = excluded.vpip_count,
    pfr_count          = excluded.pfr_count,
    three_bet_count    = excluded.three_bet_count,
    aggressive_actions = excluded.aggressive_actions,
    passive_actions    = excluded.passive_actions,
    flops_seen         = excluded.flops_seen,
    showdowns          = excluded.showdowns,
    showdowns_won      = excluded.showdowns_won;
"""

_SELECT_STATS = """\
SELECT hands_seen, vpip_count, pfr_count, three_bet_count, aggressive_actions,
       passive_actions, flops_seen, showdowns, showdowns_won
FROM player_stats WHERE player_id = ? AND game_mode = ?
"""


@dataclass
class PlayerStatistics:
    """Aggregate counters for one player in one game mode."""

    player_id: str
    game_mode: GameMode
    hands_seen: int = 0
    vpip_count: int = 0
    pfr_count: int = 0
    three_bet_count: int = 0
    aggressive_actions: int = 0  # bet + raise
    passive_actions: int = 0     # call
    flops_seen: int = 0
    showdowns: int = 0           # went to showdown after seeing a flop
    showdowns_won: int = 0

    @property
    def vpip_pct(self) -> float:
        return (self.vpip_count / self.hands_seen * 100) if self.hands_seen else 0.0

    @property
    def pfr_pct(self) -> float:
        return (self.pfr_count / self.hands_seen * 100) if self.hands_seen else 0.0

    @property
    def three_bet_pct(self) -> float:
        return (self.three_bet_count / self.hands_seen * 100) if self.hands_seen else 0.0

    @property
    def wtsd_pct(self) -> float:
        return (self.showdowns / self.flops_seen * 100) if self.flops_seen else 0.0

    @property
    def wsd_pct(self) -> float:
        return (self.showdowns_won / self.showdowns * 100) if self.showdowns else 0.0

    @property
    def aggression_factor(self) -> float:
        """(bets + raises) / calls; with no calls, the aggressive count itself."""
        if self.passive_actions:
            return self.aggressive_actions / self.passive_actions
        return float(self.aggressive_actions)

    def copy(self) -> PlayerStatistics:
        return replace(self)

    def summary(self) -> str:
        """One-line summary of this player."""
        if self.hands_seen == 0:
            return f"{self.player_id}: No stats yet"
        return (
            f"{self.player_id}: VPIP {self.vpip_pct:.0f}% | PFR {self.pfr_pct:.0f}% | "
            f"3bet {self.three_bet_pct:.0f}% | AF {self.aggression_factor:.1f} | "
            f"WTSD {self.wtsd_pct:.0f}% | {self.hands_seen} hands"
        )


class StatisticsStore(Protocol):
    """Source of historical statistics for opponent modeling."""

    def load_stats(self, player_id: str, game_mode: GameMode) -> PlayerStatistics | None:
        ...

    def save_stats(self, stats: PlayerStatistics) -> None:
        ...


class InMemoryStatisticsStore:
    """Dictionary-backed store; safe to share between threads."""

    def __init__(self, initial: list[PlayerStatistics] | None = None) -> None:
        self._lock = threading.Lock()
        self._stats: dict[tuple[str, GameMode], PlayerStatistics] = {}
        for s in initial or []:
            self._stats[(s.player_id, s.game_mode)] = s.copy()

    def load_stats(self, player_id: str, game_mode: GameMode) -> PlayerStatistics | None:
        with self._lock:
            stats = self._stats.get((player_id, game_mode))
            return stats.copy() if stats else None

    def save_stats(self, stats: PlayerStatistics) -> None:
        with self._lock:
            self._stats[(stats.player_id, stats.game_mode)] = stats.copy()


class SQLiteStatisticsStore:
    """Persistent statistics in a SQLite database.

    Uses WAL mode so several sessions can read while one writes. Every
    save writes straight through to the database.
    """

    def __init__(self, db_path: Path | str | None = None) -> None:
        self._db_path = Path(db_path) if db_path else _DB_FILE
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(str(self._db_path), check_same_thread=False)
        self._conn.execute("PRAGMA journal_mode=WAL;")
        self._conn.execute(_CREATE_STATS_TABLE)
        self._conn.commit()

    def load_stats(self, player_id: str, game_mode: GameMode) -> PlayerStatistics | None:
        with self._lock:
            row = self._conn.execute(
                _SELECT_STATS, (player_id.strip(), str(game_mode))
            ).fetchone()
        if row is None:
            return None
        return PlayerStatistics(player_id.strip(), game_mode, *row)

    def save_stats(self, stats: PlayerStatistics) -> None:
        with self._lock:
            self._conn.execute(_UPSERT_STATS, (
                stats.player_id.strip(), str(stats.game_mode),
                stats.hands_seen, stats.vpip_count, stats.pfr_count,
                stats.three_bet_count, stats.aggressive_actions,
                stats.passive_actions, stats.flops_seen, stats.showdowns,
                stats.showdowns_won,
            ))
            self._conn.commit()
        logger.debug("Saved stats for %s (%s)", stats.player_id, stats.game_mode)

    def list_players(self, game_mode: GameMode | None = None) -> list[str]:
        """Return tracked player ids, optionally for one game mode."""
        with self._lock:
            if game_mode is None:
                rows = self._conn.execute(
                    "SELECT DISTINCT player_id FROM player_stats"
                ).fetchall()
            else:
                rows = self._conn.execute(
                    "SELECT player_id FROM player_stats WHERE game_mode = ?",
                    (str(game_mode),),
                ).fetchall()
        return sorted(r[0] for r in rows)

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            if self._conn:
                self._conn.close()
                self._conn = None  # type: ignore[assignment]
