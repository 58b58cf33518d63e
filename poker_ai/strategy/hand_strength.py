"""Closed-form preflop hand strength (Chen formula).

Scores run from -1.5 (72o-like trash) to 20 (AA); the normalized
strength maps that range onto [0, 1].
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from poker_ai.utils.card import Card
from poker_ai.utils.constants import Rank

if TYPE_CHECKING:
    from poker_ai.strategy.profile import BehavioralProfile

PREMIUM_SCORE = 10.0
STRONG_SCORE = 7.0

_MIN_SCORE = -1.5
_SCORE_SPAN = 21.5

_HIGH_CARD_POINTS: dict[Rank, float] = {
    Rank.ACE: 10.0,
    Rank.KING: 8.0,
    Rank.QUEEN: 7.0,
    Rank.JACK: 6.0,
}

_GAP_PENALTY: dict[int, float] = {0: 0.0, 1: 0.0, 2: -1.0, 3: -2.0, 4: -4.0}

# Opening-threshold bonus by seat offset from the dealer (BTN=0 ... CO=7).
# Negative values tighten, positive values loosen.
_POSITION_BONUS: dict[int, float] = {
    0: 0.20,
    1: -0.05,
    2: 0.05,
    3: -0.18,
    4: -0.14,
    5: -0.08,
    6: 0.06,
    7: 0.14,
}


def _points(card: Card) -> float:
    return _HIGH_CARD_POINTS.get(card.rank, card.value / 2)


def chen_score(card1: Card, card2: Card) -> float:
    """Chen formula score for two hole cards.

    Args:
        card1: First hole card.
        card2: Second hole card.

    Returns:
        Score in [-1.5, 20].
    """
    high, low = (card1, card2) if card1.value >= card2.value else (card2, card1)
    score = _points(high)

    if high.value == low.value:
        # Floor of 5 leaves 55 (5.0) below suited connectors like 54s (5.5)
        return max(5.0, score * 2)

    if high.suit == low.suit:
        score += 2

    gap = high.value - low.value
    score += _GAP_PENALTY.get(gap, -5.0)

    if gap <= 2 and high.value <= 12:
        score += 1

    return max(_MIN_SCORE, score)


def normalized_strength(score: float) -> float:
    """Map a Chen score onto [0, 1]."""
    return max(0.0, min(1.0, (score - _MIN_SCORE) / _SCORE_SPAN))


def hand_strength(card1: Card, card2: Card) -> float:
    return normalized_strength(chen_score(card1, card2))


def is_premium(score: float) -> bool:
    return score >= PREMIUM_SCORE


def is_strong(score: float) -> bool:
    return score >= STRONG_SCORE


def position_bonus(seat_offset: int) -> float:
    return _POSITION_BONUS.get(seat_offset, 0.0)


def preflop_threshold(profile: BehavioralProfile, seat_offset: int) -> float:
    """Normalized strength a hand must exceed to enter the pot voluntarily.

    Starts from 0.7; position-aware profiles loosen in late position
    and tighten up front, scaled by how tight the profile is.
    """
    bonus = 0.0
    if profile.position_awareness > 0.1:
        bonus = position_bonus(seat_offset) * profile.position_awareness
    threshold = 0.7 - bonus * profile.tightness
    return max(0.05, min(0.9, threshold))


def is_playable(strength: float, profile: BehavioralProfile, seat_offset: int) -> bool:
    return strength > preflop_threshold(profile, seat_offset)
