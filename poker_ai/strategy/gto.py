"""GTO-flavored decision procedure.

Not an equilibrium solver. Position-indexed opening widths stand in for
solved ranges, and a stable hash of the hole cards turns fixed mixing
ratios into repeatable choices: the same hand in the same spot always
takes the same branch, while the population of hands mixes at the
intended frequency. Defending is driven by the minimum defense
frequency and bets come from a small sizing ladder.
"""

from __future__ import annotations

import logging
from enum import StrEnum

from poker_ai.core.hand_evaluator import HandEvaluator
from poker_ai.strategy.board_analysis import analyze_board, analyze_draws
from poker_ai.strategy.decision import (
    Decision,
    HandContext,
    check,
    check_or_fold,
    fold,
    implied_odds,
)
from poker_ai.strategy.hand_strength import PREMIUM_SCORE, STRONG_SCORE, chen_score
from poker_ai.strategy.icm import ICMSituation
from poker_ai.utils.card import Card
from poker_ai.utils.constants import ActionType, HandRanking, Position, Street

logger = logging.getLogger("poker_ai.decision")

_FNV_OFFSET = 2166136261
_FNV_PRIME = 16777619

# Opening range width (fraction of hands) by position
GTO_OPEN_WIDTHS: dict[Position, float] = {
    Position.UTG: 0.14,
    Position.UTG1: 0.17,
    Position.MP: 0.20,
    Position.HJ: 0.25,
    Position.CO: 0.30,
    Position.BTN: 0.42,
    Position.SB: 0.30,
    Position.BB: 0.45,
}
OPEN_WIDTH_TO_CHEN = 20.0
THREE_BET_WIDTH_TO_CHEN = 15.0
THREE_BET_WIDTH = {True: 0.12, False: 0.08}  # Keyed by in-position
CALL_THREE_BET_WIDTH = {True: 0.15, False: 0.10}

# Hashed mixing percentages
RAISE_VS_CALL_PCT = 35
CALL_VS_FOLD_PCT = 60
BLUFF_THREE_BET_PCT = 8
BB_RAISE_PCT = 50

PREFLOP_SHOVE_ITERATIONS = 200
FINAL_TABLE_PLAYERS = 6


# ---------------------------------------------------------------------------
# Hashing and mixing
# ---------------------------------------------------------------------------


def stable_hash(cards: list[Card], salt: str = "") -> int:
    """32-bit FNV-1a hash of card identities, independent of card order."""
    h = _FNV_OFFSET
    data = bytes(sorted(c.index for c in cards)) + salt.encode()
    for b in data:
        h ^= b
        h = (h * _FNV_PRIME) & 0xFFFFFFFF
    return h


def hand_hash(cards: list[Card]) -> int:
    """Stable pseudo-random bucket in [0, 100) for a set of cards."""
    return stable_hash(cards) % 100


def mixed_choice(seed: int, threshold_pct: float) -> bool:
    """True for the first `threshold_pct` of the 100 hash buckets."""
    return seed % 100 < threshold_pct


def minimum_defense_frequency(pot: float, bet: float) -> float:
    """MDF = pot / (pot + bet); 1.0 when either side is empty."""
    if pot <= 0 or bet <= 0:
        return 1.0
    return pot / (pot + bet)


# ---------------------------------------------------------------------------
# Bet sizing ladder
# ---------------------------------------------------------------------------


class GTOBetSize(StrEnum):
    SMALL = "1/3"
    MEDIUM = "1/2"
    LARGE = "2/3"
    POT = "pot"
    ALL_IN = "all-in"

    def chips(self, pot: float, big_blind: float, stack: float) -> float:
        match self:
            case GTOBetSize.SMALL:
                size = pot / 3
            case GTOBetSize.MEDIUM:
                size = pot / 2
            case GTOBetSize.LARGE:
                size = pot * 2 / 3
            case GTOBetSize.POT:
                size = pot
            case GTOBetSize.ALL_IN:
                return stack
        return max(big_blind, size)


def select_bet_size(strength: float, wetness: float, in_position: bool) -> GTOBetSize:
    """Pick a rung of the ladder from hand strength, texture and position."""
    if strength > 0.80:
        return GTOBetSize.POT if in_position else GTOBetSize.LARGE
    if strength > 0.60:
        return GTOBetSize.LARGE if wetness < 0.4 else GTOBetSize.MEDIUM
    if strength < 0.35:
        return GTOBetSize.MEDIUM if wetness < 0.3 else GTOBetSize.SMALL
    return GTOBetSize.SMALL


def open_threshold(position: Position) -> float:
    """Chen score needed to open from a position."""
    return GTO_OPEN_WIDTHS[position] * OPEN_WIDTH_TO_CHEN


# ---------------------------------------------------------------------------
# Procedure
# ---------------------------------------------------------------------------


class GTOEngine:
    """Hash-seeded mixed strategy for profiles flagged use_gto."""

    @staticmethod
    def decide(ctx: HandContext, icm: ICMSituation | None = None) -> Decision:
        if ctx.street == Street.PREFLOP:
            if icm is not None and (
                icm.is_bubble or icm.players_remaining <= FINAL_TABLE_PLAYERS
            ):
                return GTOEngine._tournament(ctx, icm)
            return GTOEngine._preflop(ctx)
        return GTOEngine._postflop(ctx)

    # -- preflop --------------------------------------------------------

    @staticmethod
    def _preflop(ctx: HandContext) -> Decision:
        c1, c2 = ctx.hole_cards
        chen = chen_score(c1, c2)
        seed = hand_hash(ctx.hole_cards)
        bb = ctx.big_blind
        call = ctx.call_amount
        position = Position.from_seat_offset(ctx.seat_offset)
        is_ip = ctx.seat_offset > 4

        if call > bb * 3:
            return GTOEngine._facing_three_bet(ctx)

        if call > bb:
            raise_to = ctx.current_bet * 3
            if chen >= PREMIUM_SCORE:
                return Decision(ActionType.RAISE, raise_to, f"GTO 3-bet for value (Chen {chen:.1f})")
            three_bet_floor = THREE_BET_WIDTH[is_ip] * THREE_BET_WIDTH_TO_CHEN
            if chen >= three_bet_floor or chen >= STRONG_SCORE:
                if mixed_choice(seed, RAISE_VS_CALL_PCT):
                    return Decision(ActionType.RAISE, raise_to, "GTO mixed 3-bet")
                return Decision(ActionType.CALL, call, "GTO mixed flat call")
            call_floor = CALL_THREE_BET_WIDTH[is_ip] * THREE_BET_WIDTH_TO_CHEN
            if chen >= call_floor:
                if mixed_choice(seed, CALL_VS_FOLD_PCT):
                    return Decision(ActionType.CALL, call, "GTO defend")
                return fold("GTO mixed fold")
            if mixed_choice(seed, BLUFF_THREE_BET_PCT):
                return Decision(ActionType.RAISE, raise_to, "GTO bluff 3-bet")
            return fold(f"Outside {position} defending range")

        if call == 0:
            if chen >= 8 and mixed_choice(seed, BB_RAISE_PCT):
                return Decision(ActionType.RAISE, bb * 3, "GTO raise from the big blind")
            return check("GTO check option")

        if chen >= open_threshold(position):
            return Decision(ActionType.RAISE, bb * 3, f"GTO open from {position}")
        return fold(f"Outside {position} opening range")

    @staticmethod
    def _facing_three_bet(ctx: HandContext) -> Decision:
        equity = ctx.equity(opponents=1, iterations=PREFLOP_SHOVE_ITERATIONS)
        spr = ctx.chips / max(1.0, ctx.pot)
        if equity > 0.60:
            return Decision(ActionType.ALL_IN, ctx.chips, "GTO 4-bet shove", equity=equity)
        if equity > 0.45 and spr < 2:
            return Decision(
                ActionType.ALL_IN, ctx.chips, "GTO low-SPR shove", equity=equity,
            )
        return fold("GTO fold to 3-bet", equity=equity)

    @staticmethod
    def _tournament(ctx: HandContext, icm: ICMSituation) -> Decision:
        """Preflop play on the bubble and at the final table."""
        equity = ctx.equity(iterations=PREFLOP_SHOVE_ITERATIONS)
        call = ctx.call_amount
        bb = ctx.big_blind

        if icm.is_bubble and equity < 0.60:
            return check_or_fold(call, "ICM bubble: too weak to risk elimination", equity=equity)

        if icm.players_remaining <= FINAL_TABLE_PLAYERS:
            if icm.stack_ratio < 0.15 and equity > 0.40:
                return Decision(ActionType.ALL_IN, ctx.chips, "ICM short stack shove", equity=equity)
            if icm.stack_ratio > 0.30 and equity > 0.55:
                size = ctx.current_bet * 3 if call > 0 else bb * 3
                return Decision(ActionType.RAISE, size, "ICM pressure raise", equity=equity)

        threshold = 0.5 * (1.0 - icm.pressure)
        if equity > threshold:
            if call > 0:
                return Decision(ActionType.CALL, call, "ICM-adjusted call", equity=equity)
            return Decision(ActionType.RAISE, bb * 3, "ICM-adjusted raise", equity=equity)
        return check_or_fold(call, "Below ICM equity threshold", equity=equity)

    # -- postflop -------------------------------------------------------

    @staticmethod
    def _postflop(ctx: HandContext) -> Decision:
        equity = ctx.equity()
        category = HandEvaluator.category(ctx.hole_cards, ctx.community)
        board = analyze_board(ctx.community)
        call = ctx.call_amount
        pot = ctx.pot
        bb = ctx.big_blind
        mdf = minimum_defense_frequency(pot, call)
        info = {"equity": equity, "pot_odds": ctx.pot_odds}

        def bet(strength: float, reasoning: str) -> Decision:
            size = select_bet_size(strength, board.wetness, ctx.in_position)
            amount = size.chips(pot, bb, ctx.chips)
            action = ActionType.ALL_IN if size == GTOBetSize.ALL_IN else ActionType.BET
            return Decision(action, amount, f"{reasoning} ({size} pot)", **info)

        logger.debug(
            "GTO %s: eq=%.2f mdf=%.2f cat=%s wet=%.2f",
            ctx.street, equity, mdf, category.name, board.wetness,
        )

        if ctx.street == Street.RIVER:
            if call == 0:
                if category >= HandRanking.STRAIGHT or equity > 0.75:
                    return bet(equity, "GTO river value bet")
                return check("GTO river check", **info)
            if category >= HandRanking.FLUSH or equity > 0.80:
                raise_to = ctx.current_bet + call + pot / 2
                return Decision(ActionType.RAISE, raise_to, "GTO river raise for value", **info)
            if equity >= mdf:
                return Decision(ActionType.CALL, call, f"Defending at MDF {mdf:.0%}", **info)
            return fold(f"Below MDF {mdf:.0%}", **info)

        if ctx.snapshot.raises_on(Street.PREFLOP) >= 2:
            if call == 0:
                if equity > 0.55:
                    return bet(equity, "GTO 3-bet pot value bet")
                return check("GTO 3-bet pot check", **info)
            if equity > 0.50:
                return Decision(ActionType.CALL, call, "GTO 3-bet pot call", **info)
            if category >= HandRanking.STRAIGHT or equity > 0.70:
                raise_to = ctx.current_bet + call + pot / 2
                return Decision(ActionType.RAISE, raise_to, "GTO 3-bet pot raise", **info)
            draws = analyze_draws(ctx.hole_cards, ctx.community)
            if draws.total_outs >= 8 and equity > ctx.pot_odds * 0.8:
                return Decision(ActionType.CALL, call, "GTO draw call in 3-bet pot", **info)
            return fold("GTO 3-bet pot fold", **info)

        # Single-raised pot
        if call == 0:
            if ctx.is_preflop_raiser:
                if board.wetness < 0.3:
                    cbet_freq = 0.70
                elif board.wetness < 0.6:
                    cbet_freq = 0.50
                else:
                    cbet_freq = 0.30
                seed = hand_hash(ctx.hole_cards)
                if equity > 0.65 and mixed_choice(seed, cbet_freq * 100):
                    return bet(equity, "GTO value c-bet")
                if equity < 0.35 and mixed_choice(seed, cbet_freq * 30):
                    return bet(equity, "GTO bluff c-bet")
            return check("GTO check", **info)

        if equity > 0.75:
            raise_to = ctx.current_bet + call + max(pot / 3, bb)
            return Decision(ActionType.RAISE, raise_to, "GTO raise for value", **info)
        if equity >= mdf:
            return Decision(ActionType.CALL, call, f"Defending at MDF {mdf:.0%}", **info)
        draws = analyze_draws(ctx.hole_cards, ctx.community)
        draw_equity = draws.total_outs * (0.04 if ctx.street == Street.FLOP else 0.02)
        if draw_equity + implied_odds(ctx.spr, ctx.street) > ctx.pot_odds:
            return Decision(ActionType.CALL, call, "GTO draw with implied odds", **info)
        return fold(f"Below MDF {mdf:.0%}", **info)
