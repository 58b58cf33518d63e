"""Human-readable diagnostics for decisions.

The explainer reads the same inputs the procedures used and describes
them as weighted factors plus one sentence of reasoning. Nothing here
is consulted when choosing an action.
"""

from __future__ import annotations

from dataclasses import dataclass

from poker_ai.strategy.board_analysis import BoardTexture
from poker_ai.strategy.decision import Decision, DecisionFactor
from poker_ai.strategy.hand_strength import normalized_strength
from poker_ai.strategy.profile import BehavioralProfile
from poker_ai.utils.constants import ActionType, Position

# Positional advantage on a [0, 1] scale
_POSITION_ADVANTAGE: dict[Position, float] = {
    Position.UTG: 0.30,
    Position.UTG1: 0.35,
    Position.MP: 0.40,
    Position.HJ: 0.50,
    Position.CO: 0.65,
    Position.BTN: 0.80,
    Position.SB: 0.20,
    Position.BB: 0.25,
}


@dataclass(frozen=True)
class Explanation:
    reasoning: str
    factors: tuple[DecisionFactor, ...]

    @property
    def weighted_score(self) -> float:
        total = sum(f.weight for f in self.factors)
        if total <= 0:
            return 0.0
        return sum(f.value * f.weight for f in self.factors) / total


def _verb(decision: Decision) -> str:
    match decision.action:
        case ActionType.FOLD:
            return "Fold"
        case ActionType.CHECK:
            return "Check"
        case ActionType.CALL:
            return f"Call {decision.amount:.0f}"
        case ActionType.ALL_IN:
            return f"All-in for {decision.amount:.0f}"
        case _:
            return f"{decision.action.value.capitalize()} to {decision.amount:.0f}"


def explain_preflop(
    decision: Decision,
    profile: BehavioralProfile,
    chen: float,
    position: Position,
    call_amount: float,
    big_blind: float,
) -> Explanation:
    """Describe a preflop decision.

    Weights: hand strength 0.40, position 0.25, playing style 0.20 and,
    when there is something to call, call price 0.15.
    """
    strength = normalized_strength(chen)
    factors = [
        DecisionFactor("hand_strength", strength, 0.40, f"Chen score {chen:.1f}"),
        DecisionFactor(
            "position", _POSITION_ADVANTAGE.get(position, 0.4), 0.25, f"Position {position}",
        ),
        DecisionFactor(
            "style", 0.7 if profile.tightness < 0.5 else 0.3, 0.20, f"Style {profile.name}",
        ),
    ]
    if call_amount > 0:
        price = min(1.0, call_amount / (big_blind * 3))
        factors.append(
            DecisionFactor("call_price", price, 0.15, f"{call_amount:.0f} chips to call")
        )

    if decision.action == ActionType.FOLD:
        why = "hand too weak for this position" if chen < 7 else "price too high"
    elif decision.action.is_aggressive:
        why = "strong enough to take the initiative"
    else:
        why = "playable but not worth raising"
    reasoning = f"{_verb(decision)} from {position} with Chen {chen:.1f}: {why}"
    return Explanation(reasoning, tuple(factors))


def explain_postflop(
    decision: Decision,
    profile: BehavioralProfile,
    equity: float,
    pot_odds: float,
    board: BoardTexture,
) -> Explanation:
    """Describe a postflop decision.

    Weights: equity 0.35, pot odds 0.25, board texture 0.15, playing
    style 0.15 and value-versus-bluff intent 0.10.
    """
    label = board.texture_label
    is_value = equity > 0.6
    factors = (
        DecisionFactor("equity", equity, 0.35, f"Equity {equity:.1%}"),
        DecisionFactor("pot_odds", pot_odds, 0.25, f"Pot odds {pot_odds:.1%}"),
        DecisionFactor("board", 0.7 if label == "wet" else 0.3, 0.15, f"{label.capitalize()} board"),
        DecisionFactor("style", profile.aggression, 0.15, f"Style {profile.name}"),
        DecisionFactor(
            "intent", 0.8 if is_value else 0.3, 0.10,
            "Value" if is_value else "Bluff or semi-bluff",
        ),
    )

    if pot_odds > 0:
        edge = "ahead of" if equity >= pot_odds else "behind"
        odds = f"equity {equity:.0%} {edge} pot odds {pot_odds:.0%}"
    else:
        odds = f"equity {equity:.0%}, nothing to call"
    reasoning = f"{_verb(decision)} on a {label} board: {odds}"
    return Explanation(reasoning, factors)
