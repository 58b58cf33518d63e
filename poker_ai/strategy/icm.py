"""Tournament equity (ICM) pressure.

Turns the hero's stack, everyone's stacks and the payout table into an
ICMSituation (stack category, bubble state, payout-jump urgency) and a
strategy adjustment for voluntarily-played hands, aggression and steal
frequency.

Also provides calculate_icm(), the Malmuth-Harville conversion of chip
stacks into prize equity, used for diagnostics.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from poker_ai.utils.constants import StackCategory

logger = logging.getLogger("poker_ai.icm")

BIG_STACK_RATIO = 1.5
SHORT_STACK_RATIO = 0.7
NEAR_BUBBLE_WINDOW = 5

# (payout jump % above which the band applies, factor)
_JUMP_BANDS: tuple[tuple[float, float], ...] = (
    (30.0, 0.7),
    (15.0, 0.4),
    (5.0, 0.2),
)
_CRITICAL_JUMP = 50.0

_BASE_PRESSURE: dict[StackCategory, float] = {
    StackCategory.BIG: 0.15,
    StackCategory.MEDIUM: -0.10,
    StackCategory.SHORT: -0.25,
}


@dataclass(frozen=True)
class ICMSituation:
    """Tournament position of one player at a decision point."""

    chips: float
    average_chips: float
    stack_ratio: float
    players_remaining: int
    payout_spots: int
    is_bubble: bool
    is_near_bubble: bool
    bubble_jump_factor: float

    @property
    def stack_category(self) -> StackCategory:
        if self.stack_ratio > BIG_STACK_RATIO:
            return StackCategory.BIG
        if self.stack_ratio < SHORT_STACK_RATIO:
            return StackCategory.SHORT
        return StackCategory.MEDIUM

    @property
    def pressure(self) -> float:
        """Signed urgency: positive for big stacks, negative otherwise."""
        return _BASE_PRESSURE[self.stack_category] * (1.0 + self.bubble_jump_factor)


@dataclass(frozen=True)
class ICMAdjustment:
    """Deltas applied to the acting profile in tournament play."""

    vpip_adjust: float  # Subtracted from tightness
    aggression_adjust: float
    steal_bonus: float
    description: str


class ICMCalculator:
    """Stateless ICM analysis."""

    @staticmethod
    def analyze(
        chips: float,
        all_stacks: list[float],
        payouts: list[float],
    ) -> ICMSituation:
        """Build the ICM situation for one player.

        Args:
            chips: The player's stack.
            all_stacks: Stacks of every entrant; busted (zero) stacks are
                not counted as remaining players.
            payouts: Prize amounts ordered 1st, 2nd, ...; one entry per
                paid place.

        Returns:
            ICMSituation recomputed from scratch.
        """
        live = [s for s in all_stacks if s > 0]
        total = sum(live)
        players = len(live)
        average = total / max(1, players) if total > 0 else 1.0
        spots = len(payouts)

        return ICMSituation(
            chips=chips,
            average_chips=average,
            stack_ratio=chips / average,
            players_remaining=players,
            payout_spots=spots,
            is_bubble=players == spots + 1,
            is_near_bubble=spots < players <= spots + NEAR_BUBBLE_WINDOW,
            bubble_jump_factor=bubble_jump_factor(players, payouts),
        )

    @staticmethod
    def strategy_adjustment(situation: ICMSituation) -> ICMAdjustment:
        """Profile deltas for a stack category under the given pressure."""
        pressure = situation.pressure

        match situation.stack_category:
            case StackCategory.BIG:
                scale = 1.0 + pressure
                return ICMAdjustment(
                    vpip_adjust=0.15 * scale,
                    aggression_adjust=0.25 * scale,
                    steal_bonus=0.20 * scale,
                    description="Big stack: apply pressure and steal",
                )
            case StackCategory.MEDIUM:
                caution = 1.5 if situation.is_near_bubble else 1.0
                return ICMAdjustment(
                    vpip_adjust=-0.12 * caution,
                    aggression_adjust=-0.08 * caution,
                    steal_bonus=-0.05 * caution,
                    description=(
                        "Medium stack near the bubble: tighten up"
                        if situation.is_near_bubble
                        else "Medium stack: standard play"
                    ),
                )
            case StackCategory.SHORT:
                desperation = max(0.0, 1.0 - situation.stack_ratio)
                return ICMAdjustment(
                    vpip_adjust=0.20 + desperation * 0.15,
                    aggression_adjust=0.35 + desperation * 0.20,
                    steal_bonus=desperation * 0.10,
                    description="Short stack: push or fold",
                )


def bubble_jump_factor(players_remaining: int, payouts: list[float]) -> float:
    """Urgency in [0, 1] from the payout jump at the player's next bust-out.

    The player's current finishing place is 2 * spots + 1 - players and
    busting costs one place. The relative payout gap between those two
    places is bucketed into severity bands.
    """
    spots = len(payouts)
    if players_remaining <= spots or not payouts:
        return 0.0

    current_place = 2 * spots + 1 - players_remaining
    next_place = current_place + 1

    def payout(place: int) -> float:
        return payouts[place - 1] if 1 <= place <= spots else 0.0

    current = payout(current_place)
    nxt = payout(next_place)
    if nxt > 0:
        jump = (current - nxt) / nxt * 100.0
    else:
        jump = 100.0 if current > 0 else 0.0

    if jump > _CRITICAL_JUMP:
        return min(1.0, jump / 100.0)
    for threshold, factor in _JUMP_BANDS:
        if jump > threshold:
            return factor
    return 0.0


# ---------------------------------------------------------------------------
# Prize equity (Malmuth-Harville)
# ---------------------------------------------------------------------------


@dataclass
class ICMResult:
    """Result of an ICM equity calculation for all players."""

    equities: list[float]  # Prize equity for each player
    chip_stacks: list[float]

    @property
    def total_equity(self) -> float:
        return sum(self.equities)

    def equity_for(self, player_index: int) -> float:
        return self.equities[player_index]

    def share_for(self, player_index: int) -> float:
        """Player's fraction of the total prize equity."""
        total = self.total_equity
        return self.equities[player_index] / total if total > 0 else 0.0


def calculate_icm(
    stacks: list[float],
    payouts: list[float],
    iterations: int | None = None,
    seed: int | None = None,
) -> ICMResult:
    """Calculate ICM prize equity for each player.

    Computes the exact Malmuth-Harville recursion for 7 or fewer players
    and a vectorised Monte Carlo estimate for larger fields.

    Args:
        stacks: Chip stacks for each player.
        payouts: Payout amounts ordered 1st, 2nd, 3rd, etc.
        iterations: Force Monte Carlo with this many samples.
        seed: Seed for the Monte Carlo generator.

    Returns:
        ICMResult with equity for each player.
    """
    n = len(stacks)
    total_chips = sum(stacks)
    if total_chips == 0:
        return ICMResult(equities=[0.0] * n, chip_stacks=list(stacks))

    padded = list(payouts[:n]) + [0.0] * max(0, n - len(payouts))

    if n <= 7 and iterations is None:
        equities = _icm_exact(stacks, padded)
    else:
        equities = _icm_monte_carlo(stacks, padded, iterations or 5_000, seed)

    return ICMResult(equities=equities, chip_stacks=list(stacks))


def _icm_exact(stacks: list[float], payouts: list[float]) -> list[float]:
    """Exact ICM using the recursive finishing-order probability tree."""
    equities = [0.0] * len(stacks)

    def _recurse(remaining: list[int], place: int, prob: float) -> None:
        if place >= len(payouts) or not remaining:
            return
        remaining_total = sum(stacks[r] for r in remaining)
        if remaining_total == 0:
            return
        for i, idx in enumerate(remaining):
            if stacks[idx] == 0:
                continue
            p = stacks[idx] / remaining_total * prob
            equities[idx] += p * payouts[place]
            _recurse(remaining[:i] + remaining[i + 1:], place + 1, p)

    _recurse([i for i, s in enumerate(stacks) if s > 0], 0, 1.0)
    return equities


def _icm_monte_carlo(
    stacks: list[float],
    payouts: list[float],
    iterations: int,
    seed: int | None,
) -> list[float]:
    """Sample finishing orders weighted by stack size.

    Sorting exponential variates divided by stack weights draws whole
    Plackett-Luce finishing orders at once, one row per iteration.
    """
    rng = np.random.default_rng(seed)
    weights = np.asarray(stacks, dtype=float)
    alive = weights > 0

    keys = rng.exponential(size=(iterations, len(stacks)))
    keys = np.where(alive, keys / np.where(alive, weights, 1.0), np.inf)
    order = np.argsort(keys, axis=1)  # column k holds who finished (k+1)th

    prize = np.asarray(payouts, dtype=float)
    equities = np.zeros(len(stacks))
    np.add.at(equities, order.ravel(), np.tile(prize, iterations))
    equities /= iterations
    return equities.tolist()
