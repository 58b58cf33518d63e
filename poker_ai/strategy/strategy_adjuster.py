"""Per-decision profile assembly.

The profile that actually drives a decision is the base archetype with
three layers folded in, in this order: tilt, opponent-style deltas and
tournament (ICM) deltas. Each layer clamps its outputs so every scalar
stays in [0, 1] however the layers stack.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from poker_ai.strategy.icm import ICMAdjustment
from poker_ai.strategy.profile import BehavioralProfile, clamp01
from poker_ai.utils.constants import PlayerStyle

MIN_ADJUSTED_BLUFF = 0.01
MAX_ADJUSTED_BLUFF = 0.80
MIN_ADJUSTED_CALL_DOWN = 0.05
MAX_ADJUSTED_CALL_DOWN = 0.95


@dataclass(frozen=True)
class StyleAdjustment:
    """Exploitative deltas against one opponent style."""

    steal_bonus: float = 0.0
    bluff_delta: float = 0.0
    value_size_delta: float = 0.0
    call_down_delta: float = 0.0


_STYLE_ADJUSTMENTS: dict[PlayerStyle, StyleAdjustment] = {
    # Folds too much: steal more, bluff less into their strong ranges
    PlayerStyle.ROCK: StyleAdjustment(0.30, -0.50, -0.25, -0.30),
    PlayerStyle.LAG: StyleAdjustment(-0.10, -0.30, 0.30, 0.20),
    # Calls too much: never bluff, bet bigger for value
    PlayerStyle.FISH: StyleAdjustment(0.0, -0.70, 0.40, -0.20),
    PlayerStyle.TAG: StyleAdjustment(),
    PlayerStyle.UNKNOWN: StyleAdjustment(),
}


def adjustment_for_style(style: PlayerStyle) -> StyleAdjustment:
    return _STYLE_ADJUSTMENTS.get(style, StyleAdjustment())


@dataclass(frozen=True)
class EffectiveProfile:
    """The profile for one decision plus the transient deltas around it."""

    profile: BehavioralProfile
    tilt: float = 0.0
    steal_bonus: float = 0.0
    value_size_adjust: float = 0.0
    opponent_style: PlayerStyle = PlayerStyle.UNKNOWN
    icm_note: str = ""


def apply_style(profile: BehavioralProfile, adjustment: StyleAdjustment) -> BehavioralProfile:
    """Apply opponent-style deltas to bluffing and calling down."""
    return replace(
        profile,
        bluff_freq=max(
            MIN_ADJUSTED_BLUFF,
            min(MAX_ADJUSTED_BLUFF, profile.bluff_freq + adjustment.bluff_delta),
        ),
        call_down_tendency=max(
            MIN_ADJUSTED_CALL_DOWN,
            min(MAX_ADJUSTED_CALL_DOWN,
                profile.call_down_tendency + adjustment.call_down_delta),
        ),
    )


def apply_icm(profile: BehavioralProfile, adjustment: ICMAdjustment) -> BehavioralProfile:
    """Loosen (positive vpip_adjust) and sharpen play for tournament pressure."""
    return replace(
        profile,
        tightness=clamp01(profile.tightness - adjustment.vpip_adjust),
        aggression=clamp01(profile.aggression + adjustment.aggression_adjust),
    )


def build_effective_profile(
    base: BehavioralProfile,
    tilt: float = 0.0,
    style: PlayerStyle | None = None,
    icm: ICMAdjustment | None = None,
) -> EffectiveProfile:
    """Fold tilt, opponent style and ICM pressure into a base profile.

    Args:
        base: The archetype's base profile; it is never modified.
        tilt: The player's current tilt scalar.
        style: Opponent style to exploit, or None when opponent modeling
            is off or the model is not confident enough.
        icm: Tournament adjustment, or None in cash games.

    Returns:
        EffectiveProfile whose scalars all lie in [0, 1].
    """
    profile = base.effective(tilt)
    steal = 0.0
    value_adjust = 0.0

    if style is not None:
        adjustment = adjustment_for_style(style)
        profile = apply_style(profile, adjustment)
        steal += adjustment.steal_bonus
        value_adjust += adjustment.value_size_delta

    if icm is not None:
        profile = apply_icm(profile, icm)
        steal += icm.steal_bonus

    return EffectiveProfile(
        profile=profile,
        tilt=clamp01(tilt),
        steal_bonus=steal,
        value_size_adjust=value_adjust,
        opponent_style=style or PlayerStyle.UNKNOWN,
        icm_note=icm.description if icm else "",
    )
