"""Card value type used throughout the decision core."""

from __future__ import annotations

from dataclasses import dataclass
from functools import total_ordering

from poker_ai.utils.constants import RANK_VALUES, Rank, Suit

_SUIT_ORDER = tuple(Suit)
_RANK_ORDER = tuple(Rank)


@total_ordering
@dataclass(frozen=True)
class Card:
    """Represents a single playing card."""

    rank: Rank
    suit: Suit

    @classmethod
    def from_str(cls, s: str) -> Card:
        """Create a Card from a 2-character string like 'Ah' or 'Td'.

        Args:
            s: A 2-character string where the first char is the rank
               and the second is the suit.

        Returns:
            A new Card instance.

        Raises:
            ValueError: If the string is not exactly 2 characters or
                       contains invalid rank/suit characters.
        """
        if len(s) != 2:
            raise ValueError(f"Card string must be 2 characters, got '{s}'")
        try:
            rank = Rank(s[0].upper())
        except ValueError:
            raise ValueError(f"Invalid rank character: '{s[0]}'") from None
        try:
            suit = Suit(s[1].lower())
        except ValueError:
            raise ValueError(f"Invalid suit character: '{s[1]}'") from None
        return cls(rank=rank, suit=suit)

    @property
    def value(self) -> int:
        """Numeric value of the card's rank (2-14)."""
        return RANK_VALUES[self.rank]

    @property
    def index(self) -> int:
        """Stable identity in [0, 52): suit-major, rank-minor."""
        return _SUIT_ORDER.index(self.suit) * 13 + _RANK_ORDER.index(self.rank)

    def __str__(self) -> str:
        return f"{self.rank.value}{self.suit.value}"

    def __repr__(self) -> str:
        return f"Card('{self}')"

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Card):
            return NotImplemented
        return (self.value, self.index) < (other.value, other.index)


def full_deck() -> list[Card]:
    """Return all 52 cards in index order."""
    return [Card(rank=r, suit=s) for s in Suit for r in Rank]


def parse_cards(s: str) -> list[Card]:
    """Parse a space-separated card string such as "Ah Kd 7c"."""
    return [Card.from_str(c) for c in s.split()]
