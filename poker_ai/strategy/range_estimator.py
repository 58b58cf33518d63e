"""Opponent range-width estimation.

A range is represented as a single width in [0, 1]: the fraction of all
starting hands the opponent is estimated to hold. Preflop widths come
from position-based Chen thresholds; postflop actions narrow the width
by fixed, action-specific factors and a fold zeroes it.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import StrEnum

from poker_ai.strategy.board_analysis import BoardTexture
from poker_ai.utils.constants import Position, Street


class PreflopAction(StrEnum):
    FOLD = "FOLD"
    CALL = "CALL"
    RAISE = "RAISE"
    THREE_BET = "THREE_BET"
    FOUR_BET = "FOUR_BET"


class PostflopAction(StrEnum):
    CHECK = "CHECK"
    BET = "BET"
    CALL = "CALL"
    RAISE = "RAISE"
    FOLD = "FOLD"


# Minimum Chen score of an opening raise, by position (8-max)
OPENING_CHEN_THRESHOLDS: dict[Position, float] = {
    Position.UTG: 7.0,
    Position.UTG1: 6.5,
    Position.MP: 6.0,
    Position.HJ: 5.0,
    Position.CO: 4.0,
    Position.BTN: 3.0,
    Position.SB: 4.5,
    Position.BB: 2.0,
}

DEFAULT_RAISE_WIDTH = 0.20
CALL_VS_RAISE_WIDTH = 0.15
LIMP_WIDTH = 0.25
THREE_BET_WIDTH = 0.15
FOUR_BET_WIDTH = 0.05


@dataclass(frozen=True)
class HandRange:
    """Estimated width of an opponent's holdings."""

    position: Position | None
    action: PreflopAction
    street: Street
    width: float  # Fraction of starting hands [0, 1]
    description: str

    @property
    def percentage(self) -> float:
        return self.width * 100


class RangeEstimator:
    """Estimates and narrows opponent range widths."""

    @staticmethod
    def estimate_preflop_range(
        position: Position | None,
        action: PreflopAction,
        facing_raise: bool = False,
    ) -> HandRange:
        """Estimate an opponent's preflop range from their action.

        Args:
            position: Opponent's table position (None = unknown).
            action: The preflop action taken.
            facing_raise: Whether the action was made facing a raise.

        Returns:
            HandRange with the estimated width. Unknown positions get a
            20% default width for opening raises.
        """
        match action:
            case PreflopAction.FOLD:
                width, desc = 0.0, "Folded"
            case PreflopAction.CALL if facing_raise:
                width, desc = CALL_VS_RAISE_WIDTH, "Call vs raise: small pairs, suited connectors (~15%)"
            case PreflopAction.CALL:
                width, desc = LIMP_WIDTH, "Limp: small pairs, suited and connected cards (~25%)"
            case PreflopAction.RAISE:
                threshold = OPENING_CHEN_THRESHOLDS.get(position) if position else None
                if threshold is None:
                    width, desc = DEFAULT_RAISE_WIDTH, "Open raise: unknown position (~20%)"
                else:
                    width = 1.0 - threshold / 10.0
                    desc = f"{position} open raise: Chen >= {threshold:.1f} (~{width:.0%})"
            case PreflopAction.THREE_BET:
                width, desc = THREE_BET_WIDTH, "3-bet: QQ+, AK, AQs, some bluffs (~15%)"
            case PreflopAction.FOUR_BET:
                width, desc = FOUR_BET_WIDTH, "4-bet: QQ+, AKs (~5%)"

        return HandRange(
            position=position,
            action=action,
            street=Street.PREFLOP,
            width=width,
            description=desc,
        )

    @staticmethod
    def narrow_for_postflop_action(
        hand_range: HandRange,
        action: PostflopAction,
        board: BoardTexture,
        street: Street = Street.FLOP,
    ) -> HandRange:
        """Narrow a range after an observed postflop action.

        Bets keep most of the range (less so on wet boards), checks and
        calls drop the strongest part, raises halve it and folds leave
        nothing.

        Args:
            hand_range: Opponent's current estimated range.
            action: The action taken.
            board: Texture of the board the action was taken on.
            street: Street of the action.

        Returns:
            A new HandRange whose width is never wider than the input.
        """
        match action:
            case PostflopAction.BET if board.wetness > 0.6:
                factor, note = 0.85, "bet on wet board"
            case PostflopAction.BET:
                factor, note = 0.95, "bet on dry board"
            case PostflopAction.CHECK:
                factor, note = 0.70, "check"
            case PostflopAction.RAISE:
                factor, note = 0.50, "raise"
            case PostflopAction.CALL:
                factor, note = 0.75, "call"
            case PostflopAction.FOLD:
                factor, note = 0.0, "fold"

        return replace(
            hand_range,
            street=street,
            width=hand_range.width * factor,
            description=f"{hand_range.description} -> {note}",
        )
