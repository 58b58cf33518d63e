"""Tests for difficulty tiers."""

import pytest

from poker_ai.strategy.difficulty import DifficultyManager
from poker_ai.utils.constants import DifficultyLevel, Street


class TestFeatureGates:
    def test_default_is_hard(self) -> None:
        manager = DifficultyManager()
        assert manager.level == DifficultyLevel.HARD
        assert manager.should_use_opponent_modeling()
        assert not manager.should_use_range_thinking()

    def test_expert_enables_everything(self) -> None:
        manager = DifficultyManager(DifficultyLevel.EXPERT)
        assert manager.should_use_opponent_modeling()
        assert manager.should_use_range_thinking()
        assert manager.should_use_bluff_detection()

    def test_easy_disables_advanced_layers(self) -> None:
        manager = DifficultyManager(DifficultyLevel.EASY)
        assert not manager.should_use_opponent_modeling()
        assert not manager.should_use_bluff_detection()

    def test_set_difficulty(self) -> None:
        manager = DifficultyManager()
        manager.set_difficulty(DifficultyLevel.MEDIUM)
        assert manager.settings.mistake_rate == pytest.approx(0.10)


class TestIterations:
    @pytest.mark.parametrize(
        "level, flop, river",
        [
            (DifficultyLevel.EASY, 100, 50),
            (DifficultyLevel.MEDIUM, 300, 150),
            (DifficultyLevel.HARD, 500, 250),
            (DifficultyLevel.EXPERT, 1000, 500),
        ],
    )
    def test_river_halves_budget(self, level: DifficultyLevel, flop: int, river: int) -> None:
        manager = DifficultyManager(level)
        assert manager.monte_carlo_iterations(Street.FLOP) == flop
        assert manager.monte_carlo_iterations(Street.PREFLOP) == flop
        assert manager.monte_carlo_iterations(Street.RIVER) == river


class TestMistakes:
    def test_expert_never_errs(self) -> None:
        manager = DifficultyManager(DifficultyLevel.EXPERT)
        assert not any(manager.should_make_mistake(h) for h in range(10_000))

    def test_easy_gate_is_deterministic(self) -> None:
        manager = DifficultyManager(DifficultyLevel.EASY)
        assert manager.should_make_mistake(2_499)
        assert not manager.should_make_mistake(2_500)
        assert manager.should_make_mistake(12_000)
        assert manager.should_make_mistake(-100)

    def test_rate_matches_setting(self) -> None:
        manager = DifficultyManager(DifficultyLevel.MEDIUM)
        hits = sum(manager.should_make_mistake(h) for h in range(10_000))
        assert hits == 1_000
