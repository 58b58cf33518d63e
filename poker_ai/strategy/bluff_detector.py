"""Bluff likelihood of the player who put the last bet in.

Scores observable signals (the bettor's aggression factor, an unbroken
run of aggressive actions on the street, board texture, river overbets and
erratic sizing) into a probability. The decision engine only acts on
the estimate once enough hands back it up.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from statistics import pstdev

from poker_ai.core.table_state import BetAction
from poker_ai.utils.constants import Street

MAX_BLUFF_PROBABILITY = 0.85
FULL_CONFIDENCE_HANDS = 30
# Confidence above which the estimate may change a decision
ACTIONABLE_CONFIDENCE = 0.6
LIKELY_BLUFF = 0.6
UNLIKELY_BLUFF = 0.3


@dataclass(frozen=True)
class BluffAssessment:
    probability: float
    confidence: float
    signals: list[str] = field(default_factory=list)

    @property
    def is_actionable(self) -> bool:
        return self.confidence > ACTIONABLE_CONFIDENCE

    @property
    def likely_bluff(self) -> bool:
        return self.is_actionable and self.probability > LIKELY_BLUFF

    @property
    def unlikely_bluff(self) -> bool:
        return self.is_actionable and self.probability < UNLIKELY_BLUFF


class BluffDetector:
    """Stateless bluff scoring."""

    @staticmethod
    def assess(
        aggression_factor: float,
        hands_observed: int,
        street_actions: list[BetAction],
        wetness: float,
        street: Street,
        pot: float,
    ) -> BluffAssessment:
        """Score the chance that the bettor is bluffing.

        Args:
            aggression_factor: Bettor's historical (bets + raises) / calls.
            hands_observed: Hands behind that aggression factor.
            street_actions: Every action on the current street so far,
                oldest first.
            wetness: Wetness of the current board in [0, 1].
            street: Current street.
            pot: Pot before the hero acts.

        Returns:
            BluffAssessment with the probability capped at 0.85.
        """
        score = 0.0
        signals: list[str] = []

        if aggression_factor > 3.0:
            score += 0.20
            signals.append(f"high aggression factor {aggression_factor:.1f}")

        if len(street_actions) >= 3 and all(
            a.action.is_aggressive for a in street_actions
        ):
            score += 0.25
            signals.append(f"{len(street_actions)} aggressive actions in a row")

        if wetness < 0.3:
            score += 0.15
            signals.append("dry board")
        elif wetness > 0.7 and len(street_actions) >= 2:
            score += 0.10
            signals.append("barreling a wet board")

        sized = [a.amount for a in street_actions if a.amount > 0]
        if street == Street.RIVER and sized and pot > 0 and sized[-1] > pot * 1.2:
            score += 0.20
            signals.append("river overbet")

        if len(sized) >= 2:
            mean = sum(sized) / len(sized)
            if mean > 0 and pstdev(sized) / mean > 0.3:
                score += 0.10
                signals.append("erratic sizing")

        return BluffAssessment(
            probability=min(MAX_BLUFF_PROBABILITY, score),
            confidence=min(1.0, max(0, hands_observed) / FULL_CONFIDENCE_HANDS),
            signals=signals,
        )
