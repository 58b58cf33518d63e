"""Tests for bluff likelihood scoring."""

import pytest

from poker_ai.core.table_state import BetAction
from poker_ai.strategy.bluff_detector import BluffDetector
from poker_ai.utils.constants import ActionType, Street


def _act(action: ActionType, amount: float, street: Street = Street.RIVER) -> BetAction:
    return BetAction("villain", action, amount, street)


class TestBluffDetector:
    def test_all_signals_capped(self) -> None:
        actions = [
            _act(ActionType.BET, 50),
            _act(ActionType.RAISE, 150),
            _act(ActionType.RAISE, 600),
        ]
        result = BluffDetector.assess(4.0, 40, actions, 0.1, Street.RIVER, 300)
        assert result.probability == pytest.approx(0.85)
        assert "river overbet" in result.signals
        assert "erratic sizing" in result.signals
        assert result.likely_bluff

    def test_no_signals(self) -> None:
        actions = [_act(ActionType.BET, 100, Street.FLOP)]
        result = BluffDetector.assess(1.0, 40, actions, 0.5, Street.FLOP, 200)
        assert result.probability == 0.0
        assert result.signals == []
        assert result.unlikely_bluff

    def test_barreling_wet_board(self) -> None:
        actions = [_act(ActionType.CHECK, 0, Street.TURN), _act(ActionType.BET, 100, Street.TURN)]
        result = BluffDetector.assess(1.0, 40, actions, 0.8, Street.TURN, 200)
        assert result.probability == pytest.approx(0.10)
        assert result.signals == ["barreling a wet board"]

    def test_dry_board_and_aggressive_player(self) -> None:
        actions = [_act(ActionType.BET, 100, Street.FLOP)]
        result = BluffDetector.assess(3.5, 40, actions, 0.2, Street.FLOP, 200)
        assert result.probability == pytest.approx(0.35)

    def test_overbet_only_counts_on_river(self) -> None:
        actions = [_act(ActionType.BET, 500, Street.TURN)]
        result = BluffDetector.assess(1.0, 40, actions, 0.5, Street.TURN, 200)
        assert result.probability == 0.0

    def test_confidence_scales_with_hands(self) -> None:
        actions = [_act(ActionType.BET, 50), _act(ActionType.RAISE, 150), _act(ActionType.RAISE, 600)]
        thin = BluffDetector.assess(4.0, 15, actions, 0.1, Street.RIVER, 300)
        assert thin.confidence == pytest.approx(0.5)
        assert not thin.is_actionable
        assert not thin.likely_bluff

        thick = BluffDetector.assess(4.0, 90, actions, 0.1, Street.RIVER, 300)
        assert thick.confidence == 1.0
