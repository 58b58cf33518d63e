"""Tests for Card and the shared enumerations."""

import pytest

from poker_ai.utils.card import Card, full_deck, parse_cards
from poker_ai.utils.constants import (
    ActionType,
    Position,
    Rank,
    Suit,
    TiltLevel,
)


class TestCard:
    def test_from_str(self) -> None:
        c = Card.from_str("Ah")
        assert c.rank == Rank.ACE
        assert c.suit == Suit.HEARTS

    def test_from_str_is_case_tolerant(self) -> None:
        assert Card.from_str("tD") == Card(Rank.TEN, Suit.DIAMONDS)

    @pytest.mark.parametrize("bad", ["", "A", "Ahh", "1h", "Ax"])
    def test_from_str_rejects_bad_input(self, bad: str) -> None:
        with pytest.raises(ValueError):
            Card.from_str(bad)

    def test_value(self) -> None:
        assert Card.from_str("2c").value == 2
        assert Card.from_str("Ts").value == 10
        assert Card.from_str("As").value == 14

    def test_str_round_trip(self) -> None:
        assert str(Card.from_str("Qs")) == "Qs"

    def test_ordering_by_rank(self) -> None:
        assert Card.from_str("2h") < Card.from_str("3c") < Card.from_str("Ad")

    def test_hashable(self) -> None:
        assert len({Card.from_str("Ah"), Card.from_str("Ah"), Card.from_str("Kh")}) == 2


class TestDeck:
    def test_full_deck_is_52_unique_cards(self) -> None:
        deck = full_deck()
        assert len(deck) == 52
        assert len(set(deck)) == 52

    def test_indices_cover_0_to_51(self) -> None:
        assert sorted(c.index for c in full_deck()) == list(range(52))

    def test_parse_cards(self) -> None:
        assert parse_cards("Ah Kd 7c") == [
            Card(Rank.ACE, Suit.HEARTS),
            Card(Rank.KING, Suit.DIAMONDS),
            Card(Rank.SEVEN, Suit.CLUBS),
        ]


class TestPosition:
    def test_seat_offsets(self) -> None:
        assert Position.BTN.seat_offset == 0
        assert Position.BB.seat_offset == 2
        assert Position.CO.seat_offset == 7

    def test_from_seat_offset(self) -> None:
        assert Position.from_seat_offset(0) == Position.BTN
        assert Position.from_seat_offset(3) == Position.UTG
        assert Position.from_seat_offset(7) == Position.CO

    def test_from_seat_offset_out_of_ring(self) -> None:
        assert Position.from_seat_offset(-1) == Position.BB
        assert Position.from_seat_offset(9) == Position.MP


class TestEnums:
    def test_aggressive_actions(self) -> None:
        assert ActionType.BET.is_aggressive
        assert ActionType.RAISE.is_aggressive
        assert ActionType.ALL_IN.is_aggressive
        assert not ActionType.CALL.is_aggressive
        assert not ActionType.CHECK.is_aggressive

    @pytest.mark.parametrize(
        "tilt, level",
        [
            (0.0, TiltLevel.CALM),
            (0.19, TiltLevel.CALM),
            (0.2, TiltLevel.MINOR),
            (0.45, TiltLevel.MODERATE),
            (0.6, TiltLevel.SEVERE),
            (0.8, TiltLevel.ON_TILT),
            (1.0, TiltLevel.ON_TILT),
        ],
    )
    def test_tilt_bands(self, tilt: float, level: TiltLevel) -> None:
        assert TiltLevel.from_value(tilt) == level
