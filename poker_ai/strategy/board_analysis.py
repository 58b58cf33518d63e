"""Board texture and draw analysis.

Pure functions over community cards (and hole cards for draws). The
wetness scalar summarizes how many strong draws the board allows and
drives bet sizing and continuation-bet frequency.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from itertools import combinations

from poker_ai.utils.card import Card

FLUSH_DRAW_OUTS = 9
OPEN_ENDED_OUTS = 8
GUTSHOT_OUTS = 4
COMBO_OVERLAP = 1


@dataclass(frozen=True)
class BoardTexture:
    """Analysis of the community card texture."""

    is_paired: bool = False
    is_monotone: bool = False  # 3+ cards of one suit
    is_two_tone: bool = False  # Exactly two suits present
    has_high_cards: bool = False  # Q, K or A on board
    connectivity: float = 0.0  # Share of card pairs within 4 ranks
    wetness: float = 0.0

    @property
    def texture_label(self) -> str:
        if self.wetness < 0.3:
            return "dry"
        if self.wetness > 0.6:
            return "wet"
        return "neutral"


@dataclass(frozen=True)
class DrawInfo:
    """Outstanding draws for a hand."""

    has_flush_draw: bool = False
    has_oesd: bool = False
    has_gutshot: bool = False
    flush_outs: int = 0
    straight_outs: int = 0

    @property
    def is_combo_draw(self) -> bool:
        return self.has_flush_draw and (self.has_oesd or self.has_gutshot)

    @property
    def has_draw(self) -> bool:
        return self.has_flush_draw or self.has_oesd or self.has_gutshot

    @property
    def total_outs(self) -> int:
        if self.is_combo_draw:
            return self.flush_outs + self.straight_outs - COMBO_OVERLAP
        return self.flush_outs + self.straight_outs


# ---------------------------------------------------------------------------
# Board texture
# ---------------------------------------------------------------------------


def analyze_board(community_cards: list[Card]) -> BoardTexture:
    """Analyze the texture of the community cards.

    Wetness = 0.40 for a monotone board (else 0.15 for two-tone),
    plus 0.35 x connectivity, minus 0.10 for a paired board, clamped
    to [0, 1].
    """
    if not community_cards:
        return BoardTexture()

    suit_counts = Counter(c.suit for c in community_cards)
    rank_counts = Counter(c.rank for c in community_cards)
    values = [c.value for c in community_cards]

    is_monotone = max(suit_counts.values()) >= 3
    is_two_tone = len(suit_counts) == 2
    is_paired = any(n >= 2 for n in rank_counts.values())
    has_high = any(v >= 12 for v in values)

    n = len(values)
    connected_pairs = sum(1 for a, b in combinations(values, 2) if abs(a - b) <= 4)
    total_pairs = n * (n - 1) / 2
    connectivity = connected_pairs / total_pairs if total_pairs else 0.0

    wetness = 0.0
    if is_monotone:
        wetness += 0.40
    elif is_two_tone:
        wetness += 0.15
    wetness += connectivity * 0.35
    if is_paired:
        wetness -= 0.10

    return BoardTexture(
        is_paired=is_paired,
        is_monotone=is_monotone,
        is_two_tone=is_two_tone,
        has_high_cards=has_high,
        connectivity=connectivity,
        wetness=max(0.0, min(1.0, wetness)),
    )


# ---------------------------------------------------------------------------
# Draw detection
# ---------------------------------------------------------------------------


def analyze_draws(hole_cards: list[Card], community_cards: list[Card]) -> DrawInfo:
    """Detect flush and straight draws for hole + community cards.

    Flush draws need exactly four cards of a suit with fewer than five
    community cards out. Straight draws are only counted on the flop and
    turn: a 5-rank window holding 4 ranks is open-ended when the missing
    rank is at either end of the window and a gutshot otherwise.
    """
    cards = list(hole_cards) + list(community_cards)
    has_flush_draw = False
    if len(community_cards) < 5:
        suit_counts = Counter(c.suit for c in cards)
        has_flush_draw = any(n == 4 for n in suit_counts.values())

    has_oesd = False
    has_gutshot = False
    if 3 <= len(community_cards) <= 4:
        has_oesd, has_gutshot = _straight_draws(cards)

    straight_outs = 0
    if has_oesd:
        straight_outs = OPEN_ENDED_OUTS
    elif has_gutshot:
        straight_outs = GUTSHOT_OUTS

    return DrawInfo(
        has_flush_draw=has_flush_draw,
        has_oesd=has_oesd,
        has_gutshot=has_gutshot and not has_oesd,
        flush_outs=FLUSH_DRAW_OUTS if has_flush_draw else 0,
        straight_outs=straight_outs,
    )


def _straight_draws(cards: list[Card]) -> tuple[bool, bool]:
    """Return (open_ended, gutshot) over a sliding 5-rank window.

    Rank indices run 0 (deuce) to 12 (ace); the ace is also present
    at -1 so the wheel window is covered.
    """
    present = {c.value - 2 for c in cards}
    if 12 in present:
        present.add(-1)

    open_ended = False
    gutshot = False
    for base in range(-1, 9):
        window = range(base, base + 5)
        missing = [r for r in window if r not in present]
        if len(missing) != 1:
            continue
        if missing[0] in (base, base + 4):
            open_ended = True
        else:
            gutshot = True
    return open_ended, gutshot
