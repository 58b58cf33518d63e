"""Tests for the hand evaluator."""

import pytest

from poker_ai.core.hand_evaluator import HandEvaluator
from poker_ai.utils.card import Card
from poker_ai.utils.constants import HandRanking


def _cards(s: str) -> list[Card]:
    """Helper: parse space-separated card strings like 'Ah Kh Qh Jh Th'."""
    return [Card.from_str(c) for c in s.split()]


class TestHandRankings:
    def test_royal_flush_is_a_straight_flush(self) -> None:
        result = HandEvaluator.evaluate(_cards("Ah Kh Qh Jh Th"))
        assert result.category == HandRanking.STRAIGHT_FLUSH
        assert result.kickers == (14,)

    def test_straight_flush_wheel(self) -> None:
        result = HandEvaluator.evaluate(_cards("5d 4d 3d 2d Ad"))
        assert result.category == HandRanking.STRAIGHT_FLUSH
        assert result.kickers == (5,)

    def test_four_of_a_kind(self) -> None:
        result = HandEvaluator.evaluate(_cards("Ks Kh Kd Kc 3s"))
        assert result.category == HandRanking.FOUR_OF_A_KIND
        assert result.kickers == (13, 3)

    def test_full_house(self) -> None:
        result = HandEvaluator.evaluate(_cards("Jh Jd Jc 8s 8h"))
        assert result.category == HandRanking.FULL_HOUSE
        assert result.kickers == (11, 8)

    def test_two_trips_make_a_full_house(self) -> None:
        result = HandEvaluator.evaluate(_cards("9h 9d 9c 4s 4h 4d 2c"))
        assert result.category == HandRanking.FULL_HOUSE
        assert result.kickers == (9, 4)

    def test_flush(self) -> None:
        result = HandEvaluator.evaluate(_cards("Ah Th 7h 4h 2h"))
        assert result.category == HandRanking.FLUSH

    def test_straight(self) -> None:
        result = HandEvaluator.evaluate(_cards("9h 8s 7d 6c 5h"))
        assert result.category == HandRanking.STRAIGHT

    def test_wheel_straight(self) -> None:
        result = HandEvaluator.evaluate(_cards("Ah 2s 3d 4c 5h"))
        assert result.category == HandRanking.STRAIGHT
        assert result.kickers == (5,)

    def test_three_of_a_kind(self) -> None:
        result = HandEvaluator.evaluate(_cards("7h 7d 7c Ks 2h"))
        assert result.category == HandRanking.THREE_OF_A_KIND

    def test_two_pair(self) -> None:
        result = HandEvaluator.evaluate(_cards("Ah Ad 8c 8s Kh"))
        assert result.category == HandRanking.TWO_PAIR
        assert result.kickers == (14, 8, 13)

    def test_one_pair(self) -> None:
        result = HandEvaluator.evaluate(_cards("Qh Qd 9c 5s 2h"))
        assert result.category == HandRanking.ONE_PAIR

    def test_high_card(self) -> None:
        result = HandEvaluator.evaluate(_cards("Ah Jd 9c 5s 2h"))
        assert result.category == HandRanking.HIGH_CARD


class TestSevenCards:
    def test_best_five_of_seven(self) -> None:
        result = HandEvaluator.evaluate(_cards("Ah Kh Qh Jh Th 2c 3d"))
        assert result.category == HandRanking.STRAIGHT_FLUSH

    def test_flush_beats_straight_in_same_seven(self) -> None:
        result = HandEvaluator.evaluate(_cards("6h 7h 8s 9h Th 2h 3c"))
        assert result.category == HandRanking.FLUSH


class TestComparisons:
    def test_kicker_decides(self) -> None:
        a = HandEvaluator.evaluate(_cards("Ah Ad Kc 7s 2h"))
        b = HandEvaluator.evaluate(_cards("As Ac Qc 7d 2d"))
        assert a > b

    def test_identical_ranks_split(self) -> None:
        board = "Ah Kd Qc Js 9h"
        a = HandEvaluator.evaluate(_cards(f"{board} 2c 3c"))
        b = HandEvaluator.evaluate(_cards(f"{board} 2d 3d"))
        assert a == b

    def test_higher_category_wins(self) -> None:
        flush = HandEvaluator.evaluate(_cards("2h 5h 7h 9h Jh"))
        straight = HandEvaluator.evaluate(_cards("Ts Jd Qc Kh As"))
        assert flush > straight


class TestValidation:
    @pytest.mark.parametrize("n", [0, 4, 8])
    def test_rejects_wrong_card_count(self, n: int) -> None:
        cards = _cards("Ah Kh Qh Jh Th 9h 8h 7h")[:n]
        with pytest.raises(ValueError):
            HandEvaluator.evaluate(cards)


class TestCategory:
    def test_preflop_pair(self) -> None:
        assert HandEvaluator.category(_cards("9s 9d"), []) == HandRanking.ONE_PAIR

    def test_preflop_unpaired(self) -> None:
        assert HandEvaluator.category(_cards("As Kd"), []) == HandRanking.HIGH_CARD

    def test_flop(self) -> None:
        assert (
            HandEvaluator.category(_cards("As Kd"), _cards("Ah Kc 2d"))
            == HandRanking.TWO_PAIR
        )
