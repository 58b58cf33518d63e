"""Core decision engine.

Produces one action for the hero by combining the preflop heuristic,
Monte Carlo equity, pot odds, board texture and the hero's behavioral
profile into a single pipeline.

Architecture:
  TableSnapshot + hero index + BehavioralProfile
    → validation (malformed snapshots raise)
    → effective profile (tilt, opponent style, ICM pressure)
    → GTO procedure, or the exploitative preflop / postflop engines
    → mistake injection (difficulty tier)
    → legal-amount clamping
    → Decision(action, amount, reasoning, equity, pot odds, factors)
"""

from __future__ import annotations

import logging
import time
from dataclasses import replace
from typing import TYPE_CHECKING

from poker_ai.core.equity_calculator import EquityCalculator
from poker_ai.core.hand_evaluator import HandEvaluator
from poker_ai.core.table_state import InvalidTableStateError, TableSnapshot
from poker_ai.strategy.board_analysis import (
    BoardTexture,
    DrawInfo,
    analyze_board,
    analyze_draws,
)
from poker_ai.strategy.bluff_detector import BluffAssessment, BluffDetector
from poker_ai.strategy.decision import (
    Decision,
    DecisionFactor,
    HandContext,
    check,
    check_or_fold,
    fold,
    implied_odds,
)
from poker_ai.strategy.explainer import explain_postflop, explain_preflop
from poker_ai.strategy.gto import GTOEngine, stable_hash
from poker_ai.strategy.hand_strength import (
    chen_score,
    is_playable,
    is_premium,
    is_strong,
    normalized_strength,
)
from poker_ai.strategy.icm import ICMCalculator, ICMSituation, calculate_icm
from poker_ai.strategy.profile import BehavioralProfile
from poker_ai.strategy.range_estimator import (
    HandRange,
    PostflopAction,
    PreflopAction,
    RangeEstimator,
)
from poker_ai.strategy.strategy_adjuster import build_effective_profile
from poker_ai.utils.constants import ActionType, HandRanking, PlayerStyle, Position, Street

if TYPE_CHECKING:
    from poker_ai.core.session import GameSession

logger = logging.getLogger("poker_ai.decision")

RAISE_WAR_RAISES = 2
STEAL_SEATS = (0, 7)  # BTN, CO


# ---------------------------------------------------------------------------
# Pre-flop decision logic
# ---------------------------------------------------------------------------


class PreflopEngine:
    """Exploitative pre-flop play driven by the Chen heuristic."""

    @staticmethod
    def decide(ctx: HandContext) -> Decision:
        """Make a pre-flop decision.

        The state is implied by the price to call: more than three big
        blinds is a 3-bet, more than one is a raise, exactly one is an
        unopened pot and zero is the big blind's option.
        """
        p = ctx.effective.profile
        c1, c2 = ctx.hole_cards
        chen = chen_score(c1, c2)
        strength = normalized_strength(chen)
        seat = ctx.seat_offset
        bb = ctx.big_blind
        call = ctx.call_amount
        playable = is_playable(strength, p, seat)

        logger.debug(
            "Preflop: chen=%.1f strength=%.2f seat=%d call=%.0f playable=%s",
            chen, strength, seat, call, playable,
        )

        if call > bb * 3:
            return PreflopEngine._facing_three_bet(ctx, chen, strength)
        if call > bb:
            return PreflopEngine._facing_raise(ctx, chen, strength, playable)

        if call == 0:
            if is_strong(chen) and p.aggression > 0.5:
                return Decision(ActionType.RAISE, bb * 3, "Raise the option with a strong hand")
            return check("Check the option")

        if playable:
            steal = ctx.effective.steal_bonus if seat <= 1 else 0.0
            if p.aggression + steal > 0.55:
                limpers = max(0, ctx.active_count - 4)
                size = bb * 3 + bb * limpers / 2
                return Decision(ActionType.RAISE, size, "Open raise")
            return Decision(ActionType.CALL, call, "Limp with a playable hand")

        if seat in STEAL_SEATS and p.bluff_freq > 0.15:
            return Decision(ActionType.RAISE, bb * 3, "Steal from late position")
        return fold("Hand below opening threshold")

    @staticmethod
    def _facing_three_bet(ctx: HandContext, chen: float, strength: float) -> Decision:
        p = ctx.effective.profile
        call = ctx.call_amount
        if is_premium(chen):
            if ctx.spr < 4 or ctx.chips < call * 3:
                return Decision(ActionType.ALL_IN, ctx.chips, "Premium hand, shallow stack: all-in")
            return Decision(ActionType.RAISE, ctx.current_bet * 3, "4-bet a premium hand")
        if (1.0 - strength) < p.fold_to_3bet and not is_strong(chen):
            return fold("Fold to 3-bet")
        if is_strong(chen):
            return Decision(ActionType.CALL, call, "Call 3-bet with a strong hand")
        return fold("Too weak to continue against a 3-bet")

    @staticmethod
    def _facing_raise(
        ctx: HandContext, chen: float, strength: float, playable: bool,
    ) -> Decision:
        p = ctx.effective.profile
        call = ctx.call_amount
        raise_to = ctx.current_bet * 3

        if is_premium(chen):
            if p.aggression > 0.6:
                return Decision(ActionType.RAISE, raise_to, "3-bet a premium hand")
            if p.aggression > 0.3 and chen >= 12:
                return Decision(ActionType.RAISE, raise_to, "3-bet a top premium hand")
            return Decision(ActionType.CALL, call, "Flat a premium hand")
        if is_strong(chen):
            if p.aggression > 0.5:
                return Decision(ActionType.RAISE, raise_to, "3-bet a strong hand")
            return Decision(ActionType.CALL, call, "Call with a strong hand")
        if playable:
            return Decision(ActionType.CALL, call, "Call with a playable hand")
        if strength > 0.15 and p.bluff_freq > 0.2:
            return Decision(ActionType.RAISE, raise_to, "Bluff 3-bet")
        return fold("Fold to raise")


# ---------------------------------------------------------------------------
# Post-flop decision logic
# ---------------------------------------------------------------------------


class PostflopEngine:
    """Exploitative post-flop play based on equity and pot odds."""

    @staticmethod
    def decide(ctx: HandContext, bluff: BluffAssessment | None = None) -> Decision:
        equity = ctx.equity()
        category = HandEvaluator.category(ctx.hole_cards, ctx.community)
        draws = analyze_draws(ctx.hole_cards, ctx.community)
        board = analyze_board(ctx.community)

        logger.debug(
            "%s: eq=%.2f pot_odds=%.2f hand=%s draws=%d outs wet=%.2f pfr=%s",
            ctx.street, equity, ctx.pot_odds, category.name, draws.total_outs,
            board.wetness, ctx.is_preflop_raiser,
        )

        if ctx.call_amount > 0:
            return PostflopEngine._facing_bet(ctx, equity, category, draws, board, bluff)
        return PostflopEngine._no_bet(ctx, equity, category, draws, board)

    @staticmethod
    def _no_bet(
        ctx: HandContext,
        equity: float,
        category: HandRanking,
        draws: DrawInfo,
        board: BoardTexture,
    ) -> Decision:
        """Value bet, continuation bet, semi-bluff, bluff or check."""
        eff = ctx.effective
        p = eff.profile
        pot = ctx.pot
        bb = ctx.big_blind
        info = {"equity": equity}

        if category >= HandRanking.THREE_OF_A_KIND and p.aggression > 0.5:
            fraction = 0.75 if board.wetness > 0.6 else 0.5
            size = max(bb, pot * fraction * (1 + eff.value_size_adjust))
            return Decision(ActionType.BET, size, f"Value bet {category.name}", **info)

        if ctx.is_preflop_raiser:
            cbet = p.cbet_freq if ctx.street == Street.FLOP else p.cbet_turn_freq
            cbet += 0.10 if board.wetness < 0.4 else -0.10
            continues = category >= HandRanking.ONE_PAIR or equity > 0.5 or draws.has_draw
            if continues and cbet > 0.5:
                fraction = 0.6 if board.wetness > 0.5 else 0.33
                return Decision(ActionType.BET, max(bb, pot * fraction), "Continuation bet", **info)

        if ctx.street != Street.RIVER:
            if draws.is_combo_draw and p.aggression > 0.5:
                return Decision(
                    ActionType.BET, max(bb, pot * 2 / 3), "Semi-bluff combo draw", **info,
                )
            if (draws.has_flush_draw or draws.has_oesd) and p.aggression > 0.4:
                return Decision(ActionType.BET, max(bb, pot / 2), "Semi-bluff draw", **info)

        if ctx.seat_offset in STEAL_SEATS and p.bluff_freq > 0.2 and equity < 0.35:
            return Decision(ActionType.BET, max(bb, pot / 3), "Positional bluff", **info)

        return check("Check", **info)

    @staticmethod
    def _facing_bet(
        ctx: HandContext,
        equity: float,
        category: HandRanking,
        draws: DrawInfo,
        board: BoardTexture,
        bluff: BluffAssessment | None,
    ) -> Decision:
        """Raise, call or fold against a bet."""
        p = ctx.effective.profile
        call = ctx.call_amount
        pot = ctx.pot
        pot_odds = ctx.pot_odds
        spr = ctx.spr
        min_raise = ctx.snapshot.min_raise_increment
        raise_war = ctx.raises_this_street >= RAISE_WAR_RAISES
        strong = category >= HandRanking.THREE_OF_A_KIND
        decent = category >= HandRanking.ONE_PAIR
        info = {"equity": equity, "pot_odds": pot_odds}

        if bluff is not None and bluff.is_actionable:
            if bluff.likely_bluff and (decent or equity > pot_odds * 0.7):
                return Decision(ActionType.CALL, call, "Bettor likely bluffing", **info)
            if bluff.unlikely_bluff and not strong:
                return fold("Bettor rarely bluffs here", **info)

        if category >= HandRanking.FLUSH:
            if spr < 3 or ctx.chips <= call * 2:
                return Decision(ActionType.ALL_IN, ctx.chips, f"{category.name}: all-in", **info)
            if raise_war and ctx.chips > call * 3:
                return Decision(
                    ActionType.ALL_IN, ctx.chips, f"{category.name}: end the raise war", **info,
                )
            raise_to = ctx.current_bet + max(min_raise, pot * 2 / 3)
            return Decision(ActionType.RAISE, raise_to, f"Raise {category.name} for value", **info)

        if strong:
            if raise_war:
                return Decision(ActionType.CALL, call, "Call in a raise war", **info)
            if p.aggression > 0.5:
                raise_to = ctx.current_bet + max(min_raise, pot / 2)
                return Decision(ActionType.RAISE, raise_to, f"Raise {category.name}", **info)
            return Decision(ActionType.CALL, call, f"Call with {category.name}", **info)

        if p.call_down_tendency > 0.6:
            if decent or draws.has_draw:
                return Decision(ActionType.CALL, call, "Call down", **info)
            if pot > 0 and call / pot < 0.5:
                return Decision(ActionType.CALL, call, "Call a small bet", **info)

        implied = implied_odds(spr, ctx.street)
        if equity > pot_odds + implied:
            if equity > 0.65 and p.aggression > 0.6 and not raise_war:
                raise_to = ctx.current_bet + min_raise
                return Decision(ActionType.RAISE, raise_to, "Raise with the best of it", **info)
            return Decision(ActionType.CALL, call, "Equity beats the price", **info)

        if ctx.street != Street.RIVER and draws.has_draw:
            draw_equity = draws.total_outs * (0.04 if ctx.street == Street.FLOP else 0.02)
            bonus = 0.08 if spr > 5 else 0.0
            if draws.is_combo_draw:
                if p.aggression > 0.5 and not raise_war:
                    raise_to = ctx.current_bet + max(min_raise, pot / 2)
                    return Decision(ActionType.RAISE, raise_to, "Raise a combo draw", **info)
                return Decision(ActionType.CALL, call, "Call with a combo draw", **info)
            if draw_equity + bonus > pot_odds:
                return Decision(ActionType.CALL, call, "Draw with implied odds", **info)

        if decent and p.call_down_tendency > 0.5:
            return Decision(ActionType.CALL, call, "Call with a made hand", **info)
        if pot > 0 and call / pot < 0.25 and p.tightness < 0.5:
            return Decision(ActionType.CALL, call, "Call a tiny bet", **info)
        return fold("Not enough equity", **info)


# ---------------------------------------------------------------------------
# Main decision engine
# ---------------------------------------------------------------------------


class DecisionMaker:
    """Top-level decision engine bound to one game session.

    Usage:
        maker = DecisionMaker(session)
        decision = maker.make_decision(snapshot, hero_index, profile)
    """

    def __init__(self, session: GameSession) -> None:
        self.session = session

    def make_decision(
        self,
        snapshot: TableSnapshot,
        hero_index: int,
        profile: BehavioralProfile,
    ) -> Decision:
        """Produce a decision for the hero player.

        Args:
            snapshot: Table state at the decision point.
            hero_index: Index of the hero in snapshot.players.
            profile: The hero's base behavioral profile.

        Returns:
            Decision with a legal action and amount.

        Raises:
            InvalidTableStateError: If the snapshot admits no legal action.
        """
        start = time.perf_counter()
        snapshot.validate(hero_index)
        hero = snapshot.players[hero_index]

        try:
            decision = self._decide(snapshot, hero_index, profile)
        except InvalidTableStateError:
            raise
        except Exception:
            logger.exception(
                "Decision failed for %s on %s, using fallback", hero.player_id, snapshot.street,
            )
            decision = check_or_fold(
                snapshot.call_amount(hero_index), "Fallback after internal error",
            )

        decision = _clamp_decision(decision, snapshot, hero_index)
        logger.info(
            "%s [%s] %s: %s %.0f (eq=%.2f, pot odds=%.2f) in %.1fms",
            hero.player_id, profile.name, snapshot.street, decision.action,
            decision.amount, decision.equity, decision.pot_odds,
            (time.perf_counter() - start) * 1000,
        )
        return decision

    def _decide(
        self,
        snapshot: TableSnapshot,
        hero_index: int,
        profile: BehavioralProfile,
    ) -> Decision:
        session = self.session
        hero = snapshot.players[hero_index]
        street = snapshot.street

        icm = self._icm_situation(snapshot, hero_index)
        effective = build_effective_profile(
            profile,
            tilt=session.tilt.tilt_for(hero.player_id),
            style=self._opponent_style(snapshot, hero_index),
            icm=ICMCalculator.strategy_adjustment(icm) if icm else None,
        )

        rng = session.make_rng()

        def equity_fn(opponents: int, iterations: int) -> float:
            return EquityCalculator.estimate(
                hero.hole_cards, snapshot.community_cards, opponents, iterations,
                cache=session.equity_cache, rng=rng,
            ).equity

        ctx = HandContext(
            snapshot=snapshot,
            hero_index=hero_index,
            effective=effective,
            equity_fn=equity_fn,
            iterations=session.difficulty.monte_carlo_iterations(street),
        )

        if profile.use_gto:
            decision = GTOEngine.decide(ctx, icm)
        elif street == Street.PREFLOP:
            decision = PreflopEngine.decide(ctx)
        else:
            if session.difficulty.should_use_range_thinking():
                self._read_range(ctx)
            bluff = None
            if session.difficulty.should_use_bluff_detection():
                bluff = self._assess_bluff(ctx)
            decision = PostflopEngine.decide(ctx, bluff)

        decision = self._maybe_mistake(ctx, decision)
        return self._explain(ctx, decision, icm)

    # -- effective profile inputs ---------------------------------------

    def _opponent_style(self, snapshot: TableSnapshot, hero_index: int) -> PlayerStyle | None:
        if not self.session.difficulty.should_use_opponent_modeling():
            return None
        bettor = snapshot.last_bettor_index(hero_index)
        if bettor is None:
            return None
        model = self.session.opponents.get(
            snapshot.players[bettor].player_id, snapshot.game_mode,
        )
        if not model.is_reliable:
            return None
        logger.debug(
            "Exploiting %s as %s (confidence %.2f)",
            model.player_id, model.style, model.confidence,
        )
        return model.style

    @staticmethod
    def _icm_situation(snapshot: TableSnapshot, hero_index: int) -> ICMSituation | None:
        if not snapshot.is_tournament or snapshot.tournament is None:
            return None
        t = snapshot.tournament
        situation = ICMCalculator.analyze(
            snapshot.players[hero_index].chips, list(t.stacks), list(t.payouts),
        )
        logger.debug(
            "ICM: %s stack (ratio %.2f), bubble=%s, jump=%.2f, pressure=%.2f",
            situation.stack_category, situation.stack_ratio, situation.is_bubble,
            situation.bubble_jump_factor, situation.pressure,
        )
        return situation

    # -- expert reads ---------------------------------------------------

    def _read_range(self, ctx: HandContext) -> HandRange | None:
        """Estimate the last bettor's range; used for diagnostics only."""
        snapshot = ctx.snapshot
        bettor = snapshot.last_bettor_index(ctx.hero_index)
        if bettor is None:
            return None
        position = Position.from_seat_offset(snapshot.seat_offset(bettor))
        hand_range = RangeEstimator.estimate_preflop_range(position, PreflopAction.RAISE)
        bettor_id = snapshot.players[bettor].player_id
        actions = [a for a in snapshot.street_actions(ctx.street) if a.player_id == bettor_id]
        if actions:
            board = analyze_board(ctx.community)
            hand_range = RangeEstimator.narrow_for_postflop_action(
                hand_range, _postflop_action(actions[-1].action), board, ctx.street,
            )
        logger.debug("Range read on %s: %s", bettor_id, hand_range.description)
        return hand_range

    def _assess_bluff(self, ctx: HandContext) -> BluffAssessment | None:
        snapshot = ctx.snapshot
        bettor = snapshot.last_bettor_index(ctx.hero_index)
        if bettor is None or ctx.call_amount <= 0:
            return None
        model = self.session.opponents.get(
            snapshot.players[bettor].player_id, snapshot.game_mode,
        )
        if not model.is_reliable:
            return None
        assessment = BluffDetector.assess(
            model.stats.aggression_factor,
            model.total_hands,
            snapshot.street_actions(ctx.street),
            analyze_board(ctx.community).wetness,
            ctx.street,
            ctx.pot,
        )
        logger.debug(
            "Bluff read on %s: %.0f%% (confidence %.2f) %s",
            model.player_id, assessment.probability * 100, assessment.confidence,
            ", ".join(assessment.signals) or "no signals",
        )
        return assessment

    # -- post-processing ------------------------------------------------

    def _maybe_mistake(self, ctx: HandContext, decision: Decision) -> Decision:
        """Downgrade an aggressive action when the tier's mistake gate fires."""
        if not decision.action.is_aggressive:
            return decision
        seed = stable_hash(ctx.hole_cards, salt=str(ctx.street))
        if not self.session.difficulty.should_make_mistake(seed):
            return decision
        call = ctx.call_amount
        logger.debug("Mistake injected: %s downgraded", decision.action)
        return replace(
            decision,
            action=ActionType.CALL if call > 0 else ActionType.CHECK,
            amount=call,
            reasoning=f"{decision.reasoning} (played passively)",
        )

    @staticmethod
    def _explain(ctx: HandContext, decision: Decision, icm: ICMSituation | None) -> Decision:
        p = ctx.effective.profile
        if ctx.street == Street.PREFLOP:
            c1, c2 = ctx.hole_cards
            explanation = explain_preflop(
                decision, p, chen_score(c1, c2),
                Position.from_seat_offset(ctx.seat_offset), ctx.call_amount, ctx.big_blind,
            )
        else:
            explanation = explain_postflop(
                decision, p, decision.equity, ctx.pot_odds, analyze_board(ctx.community),
            )

        factors = explanation.factors
        if icm is not None and ctx.snapshot.tournament is not None:
            stacks = [pl.chips + pl.current_bet for pl in ctx.snapshot.players]
            result = calculate_icm(stacks, list(ctx.snapshot.tournament.payouts))
            share = result.share_for(ctx.hero_index)
            factors += (
                DecisionFactor("icm_share", share, 0.10, f"Table ICM share {share:.1%}"),
            )

        return replace(
            decision,
            reasoning=f"{decision.reasoning}. {explanation.reasoning}",
            pot_odds=ctx.pot_odds,
            factors=factors,
        )


def _postflop_action(action: ActionType) -> PostflopAction:
    match action:
        case ActionType.BET | ActionType.ALL_IN:
            return PostflopAction.BET
        case ActionType.RAISE:
            return PostflopAction.RAISE
        case ActionType.CALL:
            return PostflopAction.CALL
        case ActionType.FOLD:
            return PostflopAction.FOLD
        case _:
            return PostflopAction.CHECK


def _clamp_decision(decision: Decision, snapshot: TableSnapshot, hero_index: int) -> Decision:
    """Ensure decision amounts are legal.

    - Fold and check carry no amount
    - Calls never exceed the price, and a free call is a check
    - Bets and raises are bumped up to the minimum raise
    - Calls, bets and raises that cover the stack become ALL_IN
    """
    hero = snapshot.players[hero_index]
    stack = hero.chips
    call = snapshot.call_amount(hero_index)

    def all_in() -> Decision:
        reasoning = decision.reasoning
        if decision.action != ActionType.ALL_IN:
            reasoning += " (all-in)"
        return replace(decision, action=ActionType.ALL_IN, amount=stack, reasoning=reasoning)

    match decision.action:
        case ActionType.FOLD | ActionType.CHECK:
            return replace(decision, amount=0.0)
        case ActionType.ALL_IN:
            return all_in()
        case ActionType.CALL:
            if call <= 0:
                return replace(decision, action=ActionType.CHECK, amount=0.0)
            if call >= stack:
                return all_in()
            return replace(decision, amount=call)

    # BET / RAISE: amount is the total bet after the action
    if snapshot.current_bet > 0:
        action = ActionType.RAISE
        minimum = snapshot.current_bet + snapshot.min_raise_increment
    else:
        action = ActionType.BET
        minimum = snapshot.big_blind
    amount = max(decision.amount, minimum)
    if amount - hero.current_bet >= stack:
        return all_in()
    return replace(decision, action=action, amount=amount)
