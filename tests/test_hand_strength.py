"""Tests for Chen scoring and preflop thresholds."""

import pytest

from poker_ai.strategy.hand_strength import (
    chen_score,
    hand_strength,
    is_playable,
    is_premium,
    is_strong,
    normalized_strength,
    preflop_threshold,
)
from poker_ai.strategy.profile import get_profile
from poker_ai.utils.card import Card, full_deck


def _pair(s: str) -> tuple[Card, Card]:
    a, b = s.split()
    return Card.from_str(a), Card.from_str(b)


class TestChenScore:
    @pytest.mark.parametrize(
        "hand, expected",
        [
            ("Ah As", 20.0),
            ("Kh Ks", 16.0),
            ("2h 2s", 5.0),
            ("Ah Kh", 12.0),
            ("Ah Kd", 10.0),
            ("Jh Th", 9.0),
            ("7h 2c", -1.5),
        ],
    )
    def test_known_scores(self, hand: str, expected: float) -> None:
        assert chen_score(*_pair(hand)) == pytest.approx(expected)

    def test_card_order_does_not_matter(self) -> None:
        a, b = _pair("Qd 9c")
        assert chen_score(a, b) == chen_score(b, a)

    def test_score_bounds(self) -> None:
        deck = full_deck()
        scores = [chen_score(a, b) for i, a in enumerate(deck) for b in deck[i + 1:]]
        assert min(scores) >= -1.5
        assert max(scores) <= 20.0


class TestNormalizedStrength:
    def test_endpoints(self) -> None:
        assert hand_strength(*_pair("Ah As")) == pytest.approx(1.0)
        assert hand_strength(*_pair("7h 2c")) == pytest.approx(0.0)

    def test_clamped(self) -> None:
        assert normalized_strength(50.0) == 1.0
        assert normalized_strength(-10.0) == 0.0

    def test_premium_and_strong(self) -> None:
        assert is_premium(chen_score(*_pair("Ah Kh")))
        assert not is_premium(chen_score(*_pair("Jh Th")))
        assert is_strong(chen_score(*_pair("Jh Th")))
        assert not is_strong(chen_score(*_pair("7h 2c")))


class TestPreflopThreshold:
    def test_position_unaware_profile_uses_base(self) -> None:
        rock = get_profile("rock")  # position_awareness 0.10
        assert preflop_threshold(rock, 0) == pytest.approx(0.7)
        assert preflop_threshold(rock, 3) == pytest.approx(0.7)

    def test_button_looser_than_utg(self) -> None:
        shark = get_profile("shark")
        assert preflop_threshold(shark, 0) < preflop_threshold(shark, 3)

    def test_threshold_bounds(self) -> None:
        for profile_id in ("maniac", "nit_steve", "pure_fish", "solver"):
            profile = get_profile(profile_id)
            for seat in range(8):
                assert 0.05 <= preflop_threshold(profile, seat) <= 0.9

    def test_aces_always_playable(self) -> None:
        strength = hand_strength(*_pair("Ah As"))
        assert is_playable(strength, get_profile("nit_steve"), 3)

    def test_trash_never_playable(self) -> None:
        strength = hand_strength(*_pair("7h 2c"))
        assert not is_playable(strength, get_profile("maniac"), 0)


class TestOrderingProperties:
    def test_pair_beats_offsuit_hand_with_same_high_card(self) -> None:
        deck = full_deck()
        for high in deck:
            pair = next(c for c in deck if c.rank == high.rank and c.suit != high.suit)
            for low in deck:
                if low.value < high.value and low.suit != high.suit:
                    assert chen_score(high, pair) >= chen_score(high, low)

    def test_low_pair_trails_suited_connector(self) -> None:
        # Known exception to pair ordering for suited hands
        assert chen_score(*_pair("5h 5s")) == pytest.approx(5.0)
        assert chen_score(*_pair("5h 4h")) == pytest.approx(5.5)

    def test_suited_beats_offsuit(self) -> None:
        deck = full_deck()
        for a in deck:
            for b in deck:
                if a.value == b.value or a.suit != b.suit:
                    continue
                offsuit = next(c for c in deck if c.rank == b.rank and c.suit != a.suit)
                assert chen_score(a, b) > chen_score(a, offsuit)
