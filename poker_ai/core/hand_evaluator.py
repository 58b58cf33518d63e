"""Texas Hold'em hand ranking.

Ranks 5 to 7 cards into a (category, kicker sequence) pair with a total
order: a higher category wins, equal categories compare kickers
lexicographically, and fully equal ranks split the pot.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass

from poker_ai.utils.card import Card
from poker_ai.utils.constants import HandRanking


@dataclass(frozen=True, order=True)
class HandRank:
    """Comparable result of ranking a hand."""

    category: HandRanking
    kickers: tuple[int, ...]

    def __str__(self) -> str:
        return f"{self.category.name} {list(self.kickers)}"


class HandEvaluator:
    """Ranks the best 5-card holding available in 5 to 7 cards."""

    @staticmethod
    def evaluate(cards: list[Card]) -> HandRank:
        """Rank the best 5-card hand from a list of cards.

        Args:
            cards: 5 to 7 cards (hole cards + community cards).

        Returns:
            HandRank with the category and ordered kicker values.

        Raises:
            ValueError: If fewer than 5 or more than 7 cards are provided.
        """
        if not 5 <= len(cards) <= 7:
            raise ValueError(f"Need 5 to 7 cards, got {len(cards)}")

        by_suit: dict[str, list[int]] = {}
        for c in cards:
            by_suit.setdefault(c.suit, []).append(c.value)

        flush_values: list[int] | None = None
        for values in by_suit.values():
            if len(values) >= 5:
                flush_values = sorted(values, reverse=True)
                break

        if flush_values is not None:
            sf_high = _straight_high(flush_values)
            if sf_high is not None:
                return HandRank(HandRanking.STRAIGHT_FLUSH, (sf_high,))

        counts = Counter(c.value for c in cards)
        # Groups ordered by size first, then by rank
        groups = sorted(counts.items(), key=lambda kv: (kv[1], kv[0]), reverse=True)

        if groups[0][1] == 4:
            quad = groups[0][0]
            kicker = max(v for v in counts if v != quad)
            return HandRank(HandRanking.FOUR_OF_A_KIND, (quad, kicker))

        trips = [v for v, n in groups if n == 3]
        pairs = [v for v, n in groups if n == 2]

        if trips and (len(trips) > 1 or pairs):
            top = trips[0]
            # A second set of trips plays as the pair
            second = max([*trips[1:], *pairs])
            return HandRank(HandRanking.FULL_HOUSE, (top, second))

        if flush_values is not None:
            return HandRank(HandRanking.FLUSH, tuple(flush_values[:5]))

        straight = _straight_high(list(counts))
        if straight is not None:
            return HandRank(HandRanking.STRAIGHT, (straight,))

        if trips:
            rest = sorted((v for v in counts if v != trips[0]), reverse=True)
            return HandRank(HandRanking.THREE_OF_A_KIND, (trips[0], *rest[:2]))

        if len(pairs) >= 2:
            high, low = pairs[0], pairs[1]
            kicker = max(v for v in counts if v not in (high, low))
            return HandRank(HandRanking.TWO_PAIR, (high, low, kicker))

        if pairs:
            rest = sorted((v for v in counts if v != pairs[0]), reverse=True)
            return HandRank(HandRanking.ONE_PAIR, (pairs[0], *rest[:3]))

        high_cards = sorted(counts, reverse=True)
        return HandRank(HandRanking.HIGH_CARD, tuple(high_cards[:5]))

    @staticmethod
    def category(hole_cards: list[Card], community: list[Card]) -> HandRanking:
        """Hand category of hole + community, or HIGH_CARD/ONE_PAIR preflop."""
        cards = list(hole_cards) + list(community)
        if len(cards) < 5:
            if len(hole_cards) == 2 and hole_cards[0].rank == hole_cards[1].rank:
                return HandRanking.ONE_PAIR
            return HandRanking.HIGH_CARD
        return HandEvaluator.evaluate(cards).category


def _straight_high(values: list[int]) -> int | None:
    """Return the high card value of the best straight, or None.

    Handles the A-2-3-4-5 (wheel) straight as a special case.
    """
    present = set(values)
    if 14 in present:
        present.add(1)
    for high in range(14, 4, -1):
        if all(v in present for v in range(high - 4, high + 1)):
            return high
    return None
