"""Constants and enumerations shared across the decision core."""

from __future__ import annotations

from enum import IntEnum, StrEnum


class Suit(StrEnum):
    HEARTS = "h"
    DIAMONDS = "d"
    CLUBS = "c"
    SPADES = "s"


class Rank(StrEnum):
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "T"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"
    ACE = "A"


RANK_VALUES: dict[Rank, int] = {rank: value for value, rank in enumerate(Rank, start=2)}


class HandRanking(IntEnum):
    """Hand categories as reported by the ranking comparator.

    Decision thresholds compare against these integers directly: a
    category of 1 or more is a "decent" hand, 3 or more is "strong"
    and 5 or more is a monster.
    """

    HIGH_CARD = 0
    ONE_PAIR = 1
    TWO_PAIR = 2
    THREE_OF_A_KIND = 3
    STRAIGHT = 4
    FLUSH = 5
    FULL_HOUSE = 6
    FOUR_OF_A_KIND = 7
    STRAIGHT_FLUSH = 8


class Street(StrEnum):
    PREFLOP = "PREFLOP"
    FLOP = "FLOP"
    TURN = "TURN"
    RIVER = "RIVER"


class Position(StrEnum):
    """8-max table positions, indexed by seat offset from the dealer."""

    BTN = "BTN"
    SB = "SB"
    BB = "BB"
    UTG = "UTG"
    UTG1 = "UTG+1"
    MP = "MP"
    HJ = "HJ"
    CO = "CO"

    @property
    def seat_offset(self) -> int:
        return _SEAT_ORDER.index(self)

    @classmethod
    def from_seat_offset(cls, offset: int) -> Position:
        """Map a seat offset from the dealer to a position.

        Offsets outside the 8-max ring fall back to the blinds for small
        offsets and to middle position otherwise.
        """
        if 0 <= offset < len(_SEAT_ORDER):
            return _SEAT_ORDER[offset]
        if offset < 3:
            return cls.SB if offset == 1 else cls.BB
        return cls.MP


_SEAT_ORDER: tuple[Position, ...] = (
    Position.BTN,
    Position.SB,
    Position.BB,
    Position.UTG,
    Position.UTG1,
    Position.MP,
    Position.HJ,
    Position.CO,
)


class ActionType(StrEnum):
    """Actions the engine can return, and actions observed in history."""

    FOLD = "FOLD"
    CHECK = "CHECK"
    CALL = "CALL"
    BET = "BET"
    RAISE = "RAISE"
    ALL_IN = "ALL_IN"

    @property
    def is_aggressive(self) -> bool:
        return self in (ActionType.BET, ActionType.RAISE, ActionType.ALL_IN)


class GameMode(StrEnum):
    CASH = "CASH"
    TOURNAMENT = "TOURNAMENT"


class PlayerStyle(StrEnum):
    ROCK = "ROCK"
    TAG = "TAG"
    LAG = "LAG"
    FISH = "FISH"
    UNKNOWN = "UNKNOWN"


class DifficultyLevel(StrEnum):
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"
    EXPERT = "EXPERT"


class TiltLevel(IntEnum):
    CALM = 0
    MINOR = 1
    MODERATE = 2
    SEVERE = 3
    ON_TILT = 4

    @classmethod
    def from_value(cls, tilt: float) -> TiltLevel:
        """Bucket a tilt scalar in [0, 1] into 0.2-wide bands."""
        if tilt < 0.2:
            return cls.CALM
        if tilt < 0.4:
            return cls.MINOR
        if tilt < 0.6:
            return cls.MODERATE
        if tilt < 0.8:
            return cls.SEVERE
        return cls.ON_TILT


class StackCategory(StrEnum):
    BIG = "BIG"
    MEDIUM = "MEDIUM"
    SHORT = "SHORT"
