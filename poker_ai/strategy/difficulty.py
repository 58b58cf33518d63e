"""Difficulty tiers.

A tier decides which advanced reasoning layers are active, how many
Monte Carlo iterations an equity estimate gets, and how often the
engine deliberately makes a mistake.
"""

from __future__ import annotations

from dataclasses import dataclass

from poker_ai.utils.constants import DifficultyLevel, Street

_MISTAKE_SCALE = 10_000


@dataclass(frozen=True)
class DifficultySettings:
    mistake_rate: float
    base_iterations: int
    opponent_modeling: bool
    range_thinking: bool
    bluff_detection: bool


DIFFICULTY_SETTINGS: dict[DifficultyLevel, DifficultySettings] = {
    DifficultyLevel.EASY: DifficultySettings(0.25, 100, False, False, False),
    DifficultyLevel.MEDIUM: DifficultySettings(0.10, 300, False, False, False),
    DifficultyLevel.HARD: DifficultySettings(0.03, 500, True, False, False),
    DifficultyLevel.EXPERT: DifficultySettings(0.0, 1000, True, True, True),
}


class DifficultyManager:
    """Feature gates and simulation budget for one difficulty level."""

    def __init__(self, level: DifficultyLevel = DifficultyLevel.HARD) -> None:
        self.level = level

    @property
    def settings(self) -> DifficultySettings:
        return DIFFICULTY_SETTINGS[self.level]

    def set_difficulty(self, level: DifficultyLevel) -> None:
        self.level = level

    def should_use_opponent_modeling(self) -> bool:
        return self.settings.opponent_modeling

    def should_use_range_thinking(self) -> bool:
        return self.settings.range_thinking

    def should_use_bluff_detection(self) -> bool:
        return self.settings.bluff_detection

    def monte_carlo_iterations(self, street: Street) -> int:
        """Iterations for an equity estimate; the river needs half."""
        base = self.settings.base_iterations
        if street == Street.RIVER:
            return max(1, base // 2)
        return base

    def should_make_mistake(self, hand_hash: int) -> bool:
        """Deterministic mistake gate seeded by a hash of the hand."""
        threshold = int(self.settings.mistake_rate * _MISTAKE_SCALE)
        return abs(hand_hash) % _MISTAKE_SCALE < threshold
