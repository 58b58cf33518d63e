"""Decision types and the per-decision hand context.

HandContext gathers everything the procedures read about the hero's
situation so the preflop, postflop and GTO engines all derive pot odds,
stack-to-pot ratio and position the same way.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from poker_ai.core.table_state import PlayerSnapshot, TableSnapshot
from poker_ai.strategy.strategy_adjuster import EffectiveProfile
from poker_ai.utils.card import Card
from poker_ai.utils.constants import ActionType, Street

# SPR reported when the pot is empty
EMPTY_POT_SPR = 20.0


# ---------------------------------------------------------------------------
# Data types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DecisionFactor:
    """One weighted input behind a decision, for diagnostics."""

    name: str
    value: float  # [0, 1]
    weight: float
    description: str


@dataclass(frozen=True)
class Decision:
    """The engine's chosen action with reasoning."""

    action: ActionType
    # 0 for fold/check, chips to add for call, total bet for bet/raise,
    # remaining stack for all-in
    amount: float
    reasoning: str
    equity: float = 0.0  # Hero's estimated equity [0, 1]
    pot_odds: float = 0.0  # Required equity to call [0, 1]
    factors: tuple[DecisionFactor, ...] = ()


def fold(reasoning: str, **kwargs: float) -> Decision:
    return Decision(ActionType.FOLD, 0.0, reasoning, **kwargs)


def check(reasoning: str, **kwargs: float) -> Decision:
    return Decision(ActionType.CHECK, 0.0, reasoning, **kwargs)


def check_or_fold(call_amount: float, reasoning: str, **kwargs: float) -> Decision:
    if call_amount > 0:
        return fold(reasoning, **kwargs)
    return check(reasoning, **kwargs)


def calculate_pot_odds(call_amount: float, pot: float) -> float:
    """Equity needed to call profitably: call / (pot + call)."""
    total = pot + call_amount
    if call_amount <= 0 or total <= 0:
        return 0.0
    return call_amount / total


def implied_odds(spr: float, street: Street) -> float:
    """Extra equity credited to calls for chips still to be won later."""
    match street:
        case Street.FLOP:
            if spr > 10:
                return 0.15
            return 0.08 if spr > 5 else 0.0
        case Street.TURN:
            if spr > 8:
                return 0.10
            return 0.05 if spr > 4 else 0.0
        case _:
            return 0.0


# ---------------------------------------------------------------------------
# Hand context
# ---------------------------------------------------------------------------


EquityFn = Callable[[int, int], float]


@dataclass
class HandContext:
    """The hero's view of the table for one decision.

    Args:
        snapshot: Validated table snapshot.
        hero_index: Index of the acting player.
        effective: Profile with tilt, opponent and ICM layers applied.
        equity_fn: Returns hero equity for (opponents, iterations).
        iterations: Monte Carlo budget from the difficulty tier.
    """

    snapshot: TableSnapshot
    hero_index: int
    effective: EffectiveProfile
    equity_fn: EquityFn
    iterations: int = 500
    _equity_memo: dict[tuple[int, int], float] = field(
        default_factory=dict, repr=False, compare=False,
    )

    @property
    def hero(self) -> PlayerSnapshot:
        return self.snapshot.players[self.hero_index]

    @property
    def hole_cards(self) -> list[Card]:
        return self.hero.hole_cards

    @property
    def community(self) -> list[Card]:
        return self.snapshot.community_cards

    @property
    def street(self) -> Street:
        return self.snapshot.street

    @property
    def pot(self) -> float:
        return self.snapshot.pot

    @property
    def big_blind(self) -> float:
        return self.snapshot.big_blind

    @property
    def chips(self) -> float:
        return self.hero.chips

    @property
    def current_bet(self) -> float:
        return self.snapshot.current_bet

    @property
    def call_amount(self) -> float:
        return self.snapshot.call_amount(self.hero_index)

    @property
    def seat_offset(self) -> int:
        return self.snapshot.seat_offset(self.hero_index)

    @property
    def active_count(self) -> int:
        return self.snapshot.active_count

    @property
    def pot_odds(self) -> float:
        return calculate_pot_odds(self.call_amount, self.pot)

    @property
    def spr(self) -> float:
        return self.chips / self.pot if self.pot > 0 else EMPTY_POT_SPR

    @property
    def is_preflop_raiser(self) -> bool:
        return self.snapshot.preflop_aggressor() == self.hero.player_id

    @property
    def raises_this_street(self) -> int:
        return self.snapshot.raises_on(self.street)

    @property
    def in_position(self) -> bool:
        """True when the hero acts last postflop among active players."""
        n = len(self.snapshot.players)

        def order(i: int) -> int:
            # Postflop action starts left of the button; the button acts last
            return (self.snapshot.seat_offset(i) - 1) % n

        hero_order = order(self.hero_index)
        return all(
            order(i) < hero_order
            for i, p in enumerate(self.snapshot.players)
            if p.is_active and i != self.hero_index
        )

    def equity(self, opponents: int | None = None, iterations: int | None = None) -> float:
        """Hero equity, computed once per (opponents, iterations)."""
        if opponents is None:
            opponents = max(self.active_count, 2) - 1
        if iterations is None:
            iterations = self.iterations
        key = (opponents, iterations)
        if key not in self._equity_memo:
            self._equity_memo[key] = self.equity_fn(opponents, iterations)
        return self._equity_memo[key]
