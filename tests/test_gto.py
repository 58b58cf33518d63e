"""Tests for the GTO-flavored decision procedure."""

import pytest

from poker_ai.core.table_state import BetAction, PlayerSnapshot, TableSnapshot
from poker_ai.strategy.decision import HandContext
from poker_ai.strategy.gto import (
    GTOBetSize,
    GTOEngine,
    hand_hash,
    minimum_defense_frequency,
    mixed_choice,
    open_threshold,
    select_bet_size,
    stable_hash,
)
from poker_ai.strategy.icm import ICMCalculator
from poker_ai.strategy.profile import get_profile
from poker_ai.strategy.strategy_adjuster import EffectiveProfile
from poker_ai.utils.card import Card
from poker_ai.utils.constants import ActionType, Position, Street


def _cards(s: str) -> list[Card]:
    return [Card.from_str(c) for c in s.split()]


def _snapshot(
    street: Street,
    hole: str,
    board: str = "",
    *,
    pot: float,
    current_bet: float,
    hero_bet: float = 0.0,
    chips: float = 1000.0,
    history: list[BetAction] | None = None,
) -> TableSnapshot:
    return TableSnapshot(
        street=street,
        pot=pot,
        current_bet=current_bet,
        big_blind=10.0,
        players=[
            PlayerSnapshot("hero", chips, hero_bet, _cards(hole)),
            PlayerSnapshot("villain", 1000.0, current_bet),
        ],
        community_cards=_cards(board),
        history=history or [],
    )


def _context(snapshot: TableSnapshot, equity: float, calls: list | None = None) -> HandContext:
    def equity_fn(opponents: int, iterations: int) -> float:
        if calls is not None:
            calls.append((opponents, iterations))
        return equity

    return HandContext(
        snapshot=snapshot,
        hero_index=0,
        effective=EffectiveProfile(get_profile("academic")),
        equity_fn=equity_fn,
    )


class TestHashing:
    def test_order_independent(self) -> None:
        assert stable_hash(_cards("Ah Kd")) == stable_hash(_cards("Kd Ah"))

    def test_salt_changes_hash(self) -> None:
        cards = _cards("Ah Kd")
        assert stable_hash(cards, salt="FLOP") != stable_hash(cards, salt="TURN")

    def test_hand_hash_range(self) -> None:
        for hole in ("Ah Kd", "2c 2d", "9s 8s", "Qh 3c"):
            assert 0 <= hand_hash(_cards(hole)) < 100

    def test_is_32_bit(self) -> None:
        assert 0 <= stable_hash(_cards("As Ks Qs Js Ts")) < 2**32

    def test_mixed_choice(self) -> None:
        assert mixed_choice(134, 35)
        assert not mixed_choice(135, 35)
        assert not mixed_choice(50, 0)


class TestMinimumDefense:
    def test_half_pot_bet(self) -> None:
        assert minimum_defense_frequency(100, 50) == pytest.approx(2 / 3)

    def test_pot_sized_bet(self) -> None:
        assert minimum_defense_frequency(100, 100) == pytest.approx(0.5)

    @pytest.mark.parametrize("pot, bet", [(0, 50), (100, 0), (-5, 10)])
    def test_degenerate(self, pot: float, bet: float) -> None:
        assert minimum_defense_frequency(pot, bet) == 1.0


class TestBetSizing:
    def test_ladder_chips(self) -> None:
        assert GTOBetSize.SMALL.chips(90, 10, 1000) == pytest.approx(30)
        assert GTOBetSize.MEDIUM.chips(90, 10, 1000) == pytest.approx(45)
        assert GTOBetSize.LARGE.chips(90, 10, 1000) == pytest.approx(60)
        assert GTOBetSize.POT.chips(90, 10, 1000) == pytest.approx(90)
        assert GTOBetSize.ALL_IN.chips(90, 10, 1000) == 1000

    def test_floor_at_big_blind(self) -> None:
        assert GTOBetSize.SMALL.chips(15, 10, 1000) == 10

    @pytest.mark.parametrize(
        "strength, wetness, ip, size",
        [
            (0.9, 0.5, True, GTOBetSize.POT),
            (0.9, 0.5, False, GTOBetSize.LARGE),
            (0.7, 0.2, True, GTOBetSize.LARGE),
            (0.7, 0.6, True, GTOBetSize.MEDIUM),
            (0.2, 0.1, True, GTOBetSize.MEDIUM),
            (0.2, 0.5, True, GTOBetSize.SMALL),
            (0.5, 0.5, True, GTOBetSize.SMALL),
        ],
    )
    def test_select(self, strength: float, wetness: float, ip: bool, size: GTOBetSize) -> None:
        assert select_bet_size(strength, wetness, ip) == size

    def test_open_threshold_widens_late(self) -> None:
        assert open_threshold(Position.BTN) < open_threshold(Position.UTG)
        assert open_threshold(Position.UTG) == pytest.approx(2.8)


class TestPreflop:
    def test_open_premium(self) -> None:
        snap = _snapshot(Street.PREFLOP, "Ah As", pot=15, current_bet=10)
        decision = GTOEngine.decide(_context(snap, 0.85))
        assert decision.action == ActionType.RAISE
        assert decision.amount == 30

    def test_fold_trash(self) -> None:
        snap = _snapshot(Street.PREFLOP, "7h 2c", pot=15, current_bet=10)
        assert GTOEngine.decide(_context(snap, 0.3)).action == ActionType.FOLD

    def test_three_bet_premium_vs_raise(self) -> None:
        snap = _snapshot(Street.PREFLOP, "Ah As", pot=45, current_bet=30)
        decision = GTOEngine.decide(_context(snap, 0.85))
        assert decision.action == ActionType.RAISE
        assert decision.amount == 90

    def test_facing_three_bet_shoves_with_equity(self) -> None:
        calls: list = []
        snap = _snapshot(Street.PREFLOP, "Kh Ks", pot=140, current_bet=100, hero_bet=30)
        decision = GTOEngine.decide(_context(snap, 0.7, calls))
        assert decision.action == ActionType.ALL_IN
        assert decision.amount == 1000
        assert calls == [(1, 200)]

    def test_facing_three_bet_folds_without_equity(self) -> None:
        snap = _snapshot(Street.PREFLOP, "9h 8h", pot=140, current_bet=100, hero_bet=30)
        assert GTOEngine.decide(_context(snap, 0.4)).action == ActionType.FOLD

    def test_big_blind_option_is_repeatable(self) -> None:
        snap = _snapshot(Street.PREFLOP, "Ah Qd", pot=20, current_bet=10, hero_bet=10)
        first = GTOEngine.decide(_context(snap, 0.6))
        second = GTOEngine.decide(_context(snap, 0.6))
        assert first == second
        assert first.action in (ActionType.RAISE, ActionType.CHECK)


class TestTournament:
    def test_bubble_folds_marginal_hand(self) -> None:
        icm = ICMCalculator.analyze(1000, [1000.0] * 10, [300, 200, 150, 100, 80, 60, 45, 35, 30])
        assert icm.is_bubble
        snap = _snapshot(Street.PREFLOP, "Ah Qd", pot=15, current_bet=10)
        decision = GTOEngine.decide(_context(snap, 0.5), icm)
        assert decision.action == ActionType.FOLD
        assert "bubble" in decision.reasoning

    def test_final_table_short_stack_shoves(self) -> None:
        icm = ICMCalculator.analyze(100, [100.0] + [1000.0] * 5, [50, 30, 20])
        snap = _snapshot(Street.PREFLOP, "Ah 9d", pot=15, current_bet=10, chips=100)
        decision = GTOEngine.decide(_context(snap, 0.45), icm)
        assert decision.action == ActionType.ALL_IN
        assert decision.amount == 100

    def test_final_table_pressure_raise(self) -> None:
        icm = ICMCalculator.analyze(1000, [1000.0] * 6, [50, 30, 20])
        snap = _snapshot(Street.PREFLOP, "Ah Kd", pot=15, current_bet=10)
        decision = GTOEngine.decide(_context(snap, 0.62), icm)
        assert decision.action == ActionType.RAISE
        assert decision.amount == 30

    def test_postflop_ignores_icm(self) -> None:
        icm = ICMCalculator.analyze(1000, [1000.0] * 10, [300, 200, 150, 100, 80, 60, 45, 35, 30])
        snap = _snapshot(Street.FLOP, "7c 2d", "Kh 9s 4d", pot=100, current_bet=0)
        decision = GTOEngine.decide(_context(snap, 0.2), icm)
        assert decision.action == ActionType.CHECK


class TestPostflop:
    def test_defends_exactly_at_mdf(self) -> None:
        snap = _snapshot(Street.FLOP, "7c 2d", "Kh 9s 4d", pot=100, current_bet=50, chips=300)
        decision = GTOEngine.decide(_context(snap, 100 / 150))
        assert decision.action == ActionType.CALL
        assert decision.amount == 50

    def test_folds_below_mdf_without_draw(self) -> None:
        snap = _snapshot(Street.FLOP, "7c 2d", "Kh 9s 4d", pot=100, current_bet=50, chips=300)
        assert GTOEngine.decide(_context(snap, 0.6)).action == ActionType.FOLD

    def test_raises_big_equity(self) -> None:
        snap = _snapshot(Street.FLOP, "Kc Kd", "Kh 9s 4d", pot=90, current_bet=30)
        decision = GTOEngine.decide(_context(snap, 0.9))
        assert decision.action == ActionType.RAISE
        assert decision.amount == pytest.approx(30 + 30 + 30)

    def test_draw_calls_with_implied_odds(self) -> None:
        snap = _snapshot(Street.FLOP, "Ah 5h", "Kh 9h 2c", pot=100, current_bet=50, chips=2000)
        decision = GTOEngine.decide(_context(snap, 0.4))
        assert decision.action == ActionType.CALL

    def test_river_value_bet_with_straight(self) -> None:
        snap = _snapshot(Street.RIVER, "Ah Kh", "Qh Jh Th 2c 3d", pot=120, current_bet=0)
        decision = GTOEngine.decide(_context(snap, 0.99))
        assert decision.action == ActionType.BET
        assert decision.amount >= 80

    def test_river_raises_flush(self) -> None:
        snap = _snapshot(Street.RIVER, "Ah 3h", "Qh Jh 7h 2c 3d", pot=200, current_bet=100)
        decision = GTOEngine.decide(_context(snap, 0.85))
        assert decision.action == ActionType.RAISE
        assert decision.amount == pytest.approx(100 + 100 + 100)

    def test_river_check_back(self) -> None:
        snap = _snapshot(Street.RIVER, "7c 2d", "Kh 9s 4d 3c Jd", pot=100, current_bet=0)
        assert GTOEngine.decide(_context(snap, 0.3)).action == ActionType.CHECK

    def test_three_bet_pot_calls_with_equity(self) -> None:
        history = [
            BetAction("villain", ActionType.RAISE, 30, Street.PREFLOP),
            BetAction("hero", ActionType.RAISE, 90, Street.PREFLOP),
        ]
        snap = _snapshot(
            Street.FLOP, "Qc Qd", "Kh 9s 4d", pot=200, current_bet=100, history=history,
        )
        assert GTOEngine.decide(_context(snap, 0.55)).action == ActionType.CALL

    def test_non_raiser_checks_to_aggressor(self) -> None:
        snap = _snapshot(Street.FLOP, "Qc Qd", "Kh 9s 4d", pot=60, current_bet=0)
        assert GTOEngine.decide(_context(snap, 0.7)).action == ActionType.CHECK
