"""Tilt (emotional state) tracking.

Each player carries a tilt scalar in [0, 1]. Losing a pot raises it in
proportion to the pot size and the profile's tilt sensitivity; every
other hand result lets it decay back toward zero. The scalar feeds
BehavioralProfile.effective(), and its ordinal level is reported for
diagnostics.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import StrEnum

from poker_ai.utils.constants import TiltLevel

logger = logging.getLogger("poker_ai.tilt")

# Pot size (chips) that adds a full `sensitivity` worth of tilt
TILT_POT_SCALE = 800.0
BASE_DECAY = 0.03


class TiltTrigger(StrEnum):
    BAD_BEAT = "BAD_BEAT"
    COOLER = "COOLER"
    SUCKED_OUT = "SUCKED_OUT"
    BIG_LOSS = "BIG_LOSS"


@dataclass(frozen=True)
class TiltState:
    """Snapshot of one player's tilt."""

    tilt: float = 0.0
    trigger_count: int = 0
    hands_since_trigger: int = 0

    @property
    def level(self) -> TiltLevel:
        return TiltLevel.from_value(self.tilt)

    @property
    def is_recovering(self) -> bool:
        return self.trigger_count > 0 and self.hands_since_trigger > 0


def classify_trigger(
    won: bool,
    pot: float,
    equity_before: float,
    big_pot: float = 1000.0,
) -> TiltTrigger | None:
    """Name the kind of emotional event a finished hand represents.

    Args:
        won: Whether the player won the pot.
        pot: Final pot size in chips.
        equity_before: The player's equity when the money went in.
        big_pot: Pot size considered large enough to sting.

    Returns:
        The trigger type, or None for an unremarkable hand.
    """
    if not won:
        if equity_before > 0.8 and pot > big_pot / 2:
            return TiltTrigger.BAD_BEAT if pot > big_pot else TiltTrigger.COOLER
        if pot > big_pot:
            return TiltTrigger.BIG_LOSS
        return None
    if equity_before < 0.3:
        return TiltTrigger.SUCKED_OUT
    return None


def next_tilt(current: float, lost: bool, pot: float, sensitivity: float) -> float:
    """Apply one hand result to a tilt scalar.

    A loss adds sensitivity * pot / 800 (capped at 1). Otherwise tilt
    decays by 0.03, slowed for sensitive players, floored at 0.
    """
    if lost:
        return min(1.0, current + sensitivity * max(0.0, pot) / TILT_POT_SCALE)
    return max(0.0, current - BASE_DECAY * (1.0 - sensitivity * 0.5))


class TiltTracker:
    """Per-session tilt state for every player, guarded by a lock."""

    def __init__(self) -> None:
        self._states: dict[str, TiltState] = {}
        self._lock = threading.Lock()

    def get(self, player_id: str) -> TiltState:
        with self._lock:
            return self._states.get(player_id, TiltState())

    def tilt_for(self, player_id: str) -> float:
        return self.get(player_id).tilt

    def record_hand_result(
        self,
        player_id: str,
        lost: bool,
        pot: float,
        sensitivity: float,
        equity_before: float | None = None,
    ) -> TiltState:
        """Update a player's tilt after a hand completes.

        Args:
            player_id: Player whose tilt changes.
            lost: True if the player lost chips in the hand.
            pot: Final pot size.
            sensitivity: The player's tilt sensitivity in [0, 1].
            equity_before: Optional all-in equity, used only to label
                the trigger in logs.

        Returns:
            The new TiltState.
        """
        with self._lock:
            old = self._states.get(player_id, TiltState())
            tilt = next_tilt(old.tilt, lost, pot, sensitivity)
            if lost and tilt > old.tilt:
                new = TiltState(tilt=tilt, trigger_count=old.trigger_count + 1)
            else:
                new = TiltState(
                    tilt=tilt,
                    trigger_count=old.trigger_count if tilt > 0 else 0,
                    hands_since_trigger=old.hands_since_trigger + 1,
                )
            self._states[player_id] = new

        if new.level != old.level:
            trigger = (
                classify_trigger(not lost, pot, equity_before)
                if equity_before is not None else None
            )
            logger.debug(
                "%s tilt %.2f -> %.2f (%s -> %s, trigger=%s)",
                player_id, old.tilt, new.tilt, old.level.name, new.level.name,
                trigger or "none",
            )
        return new

    def reset(self, player_id: str | None = None) -> None:
        """Forget one player's tilt, or everyone's."""
        with self._lock:
            if player_id is None:
                self._states.clear()
            else:
                self._states.pop(player_id, None)
