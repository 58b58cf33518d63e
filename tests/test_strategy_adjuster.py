"""Tests for assembling the per-decision profile."""

from dataclasses import fields

import pytest

from poker_ai.strategy.icm import ICMAdjustment
from poker_ai.strategy.profile import get_profile
from poker_ai.strategy.strategy_adjuster import (
    adjustment_for_style,
    build_effective_profile,
)
from poker_ai.utils.constants import PlayerStyle

_UNIT_FIELDS = (
    "tightness", "aggression", "bluff_freq", "fold_to_3bet", "cbet_freq",
    "cbet_turn_freq", "position_awareness", "tilt_sensitivity",
    "call_down_tendency", "risk_tolerance", "bluff_detection",
)


class TestStyleAdjustments:
    def test_neutral_styles(self) -> None:
        assert adjustment_for_style(PlayerStyle.TAG).bluff_delta == 0.0
        assert adjustment_for_style(PlayerStyle.UNKNOWN).steal_bonus == 0.0

    def test_steal_more_against_rocks(self) -> None:
        eff = build_effective_profile(get_profile("shark"), style=PlayerStyle.ROCK)
        assert eff.steal_bonus == pytest.approx(0.30)
        assert eff.opponent_style == PlayerStyle.ROCK

    def test_never_bluff_a_fish(self) -> None:
        eff = build_effective_profile(get_profile("maniac"), style=PlayerStyle.FISH)
        assert eff.profile.bluff_freq == pytest.approx(0.01)
        assert eff.profile.call_down_tendency == pytest.approx(0.05)
        assert eff.value_size_adjust == pytest.approx(0.40)

    def test_call_down_more_against_lags(self) -> None:
        eff = build_effective_profile(get_profile("calling_station"), style=PlayerStyle.LAG)
        assert eff.profile.call_down_tendency == pytest.approx(0.95)


class TestBuildEffectiveProfile:
    def test_no_layers(self) -> None:
        rock = get_profile("rock")
        eff = build_effective_profile(rock)
        assert eff.profile == rock
        assert eff.steal_bonus == 0.0
        assert eff.opponent_style == PlayerStyle.UNKNOWN
        assert eff.icm_note == ""

    def test_tilt_applied_first(self) -> None:
        eff = build_effective_profile(get_profile("rock"), tilt=1.0)
        assert eff.tilt == 1.0
        assert eff.profile.tightness == pytest.approx(0.5)

    def test_icm_loosens_and_sharpens(self) -> None:
        icm = ICMAdjustment(0.2, 0.1, 0.05, "Short stack: push or fold")
        eff = build_effective_profile(get_profile("shark"), icm=icm)
        assert eff.profile.tightness == pytest.approx(0.28)
        assert eff.profile.aggression == pytest.approx(0.88)
        assert eff.steal_bonus == pytest.approx(0.05)
        assert eff.icm_note == "Short stack: push or fold"

    def test_stacked_layers_stay_in_bounds(self) -> None:
        icm = ICMAdjustment(0.9, 0.9, 0.5, "extreme")
        for profile_id in ("pure_fish", "maniac", "nit_steve"):
            for style in PlayerStyle:
                eff = build_effective_profile(
                    get_profile(profile_id), tilt=1.0, style=style, icm=icm
                )
                for name in _UNIT_FIELDS:
                    assert 0.0 <= getattr(eff.profile, name) <= 1.0

    def test_base_profile_untouched(self) -> None:
        base = get_profile("maniac")
        snapshot = {f.name: getattr(base, f.name) for f in fields(base)}
        build_effective_profile(base, tilt=0.8, style=PlayerStyle.FISH)
        assert {f.name: getattr(base, f.name) for f in fields(base)} == snapshot
