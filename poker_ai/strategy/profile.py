"""Behavioral profiles for AI players.

A profile is a fixed set of style scalars, each in [0, 1], plus a
deep-stack threshold in big blinds and a flag that routes decisions
through the GTO procedure. The base values never change; tilt and
per-hand strategy adjustments produce derived copies.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace

# Linear tilt coefficients and the bounds they are clamped to
TILT_ON_TIGHTNESS = 0.4
TILT_ON_AGGRESSION = 0.3
TILT_ON_BLUFF = 0.25
TILT_ON_CALL_DOWN = 0.2
MIN_EFFECTIVE_TIGHTNESS = 0.05
MAX_EFFECTIVE_AGGRESSION = 1.0
MAX_EFFECTIVE_BLUFF = 0.8
MAX_EFFECTIVE_CALL_DOWN = 1.0

_UNIT_FIELDS = (
    "tightness",
    "aggression",
    "bluff_freq",
    "fold_to_3bet",
    "cbet_freq",
    "cbet_turn_freq",
    "position_awareness",
    "tilt_sensitivity",
    "call_down_tendency",
    "risk_tolerance",
    "bluff_detection",
)


def clamp01(x: float) -> float:
    return max(0.0, min(1.0, x))


@dataclass(frozen=True)
class BehavioralProfile:
    """Playing style of one AI archetype."""

    id: str
    name: str
    tightness: float
    aggression: float
    bluff_freq: float
    fold_to_3bet: float
    cbet_freq: float
    cbet_turn_freq: float
    position_awareness: float
    tilt_sensitivity: float
    call_down_tendency: float
    risk_tolerance: float
    bluff_detection: float
    deep_stack_threshold: float = 200.0  # In big blinds
    use_gto: bool = False

    def __post_init__(self) -> None:
        for name in _UNIT_FIELDS:
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{self.id}.{name} must be in [0, 1], got {value}")
        if self.deep_stack_threshold <= 0:
            raise ValueError(
                f"{self.id}.deep_stack_threshold must be positive, "
                f"got {self.deep_stack_threshold}"
            )

    def effective_tightness(self, tilt: float) -> float:
        return max(MIN_EFFECTIVE_TIGHTNESS, self.tightness - tilt * TILT_ON_TIGHTNESS)

    def effective_aggression(self, tilt: float) -> float:
        return min(MAX_EFFECTIVE_AGGRESSION, self.aggression + tilt * TILT_ON_AGGRESSION)

    def effective_bluff_freq(self, tilt: float) -> float:
        return min(MAX_EFFECTIVE_BLUFF, self.bluff_freq + tilt * TILT_ON_BLUFF)

    def effective_call_down(self, tilt: float) -> float:
        return min(MAX_EFFECTIVE_CALL_DOWN, self.call_down_tendency + tilt * TILT_ON_CALL_DOWN)

    def effective(self, tilt: float) -> BehavioralProfile:
        """Copy of this profile with a tilt scalar in [0, 1] folded in."""
        tilt = clamp01(tilt)
        return replace(
            self,
            tightness=clamp01(self.effective_tightness(tilt)),
            aggression=clamp01(self.effective_aggression(tilt)),
            bluff_freq=clamp01(self.effective_bluff_freq(tilt)),
            call_down_tendency=clamp01(self.effective_call_down(tilt)),
        )

    def as_dict(self) -> dict[str, float | str | bool]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _profile(
    profile_id: str,
    name: str,
    values: tuple[float, ...],
    deep_stack_threshold: float,
    use_gto: bool = False,
) -> BehavioralProfile:
    return BehavioralProfile(
        profile_id, name, *values,
        deep_stack_threshold=deep_stack_threshold,
        use_gto=use_gto,
    )


# Field order: tightness, aggression, bluff_freq, fold_to_3bet, cbet_freq,
# cbet_turn_freq, position_awareness, tilt_sensitivity, call_down_tendency,
# risk_tolerance, bluff_detection
ARCHETYPES: dict[str, BehavioralProfile] = {
    p.id: p
    for p in (
        _profile("rock", "The Rock",
                 (0.90, 0.80, 0.01, 0.08, 0.80, 0.60, 0.10, 0.05, 0.05, 0.15, 0.20), 300),
        _profile("maniac", "Maniac Mike",
                 (0.25, 0.95, 0.60, 0.20, 0.90, 0.75, 0.40, 0.30, 0.15, 0.90, 0.25), 100),
        _profile("calling_station", "Calling Station",
                 (0.35, 0.15, 0.05, 0.08, 0.25, 0.15, 0.20, 0.20, 0.95, 0.30, 0.10), 200),
        _profile("fox", "Old Fox",
                 (0.55, 0.68, 0.22, 0.52, 0.65, 0.45, 0.80, 0.15, 0.30, 0.60, 0.70), 180),
        _profile("shark", "Shark",
                 (0.48, 0.78, 0.28, 0.50, 0.75, 0.55, 0.95, 0.10, 0.25, 0.70, 0.85), 150),
        _profile("academic", "The Academic",
                 (0.52, 0.62, 0.25, 0.48, 0.60, 0.42, 0.85, 0.02, 0.35, 0.60, 0.90), 200,
                 use_gto=True),
        _profile("tilt_david", "Tilting David",
                 (0.55, 0.55, 0.18, 0.50, 0.58, 0.40, 0.50, 0.85, 0.30, 0.50, 0.40), 180),
        _profile("newbie_bob", "Newbie Bob",
                 (0.25, 0.08, 0.02, 0.10, 0.05, 0.03, 0.05, 0.40, 0.90, 0.20, 0.10), 250),
        _profile("tight_mary", "Tight Mary",
                 (0.88, 0.15, 0.01, 0.45, 0.10, 0.05, 0.25, 0.15, 0.40, 0.30, 0.25), 250),
        _profile("nit_steve", "Nit Steve",
                 (0.95, 0.95, 0.01, 0.05, 0.85, 0.70, 0.15, 0.05, 0.05, 0.20, 0.40), 300),
        _profile("bluff_jack", "Bluffing Jack",
                 (0.40, 0.92, 0.55, 0.35, 0.82, 0.68, 0.70, 0.25, 0.20, 0.85, 0.35), 150),
        _profile("short_stack_sam", "Short Stack Sam",
                 (0.60, 0.85, 0.35, 0.30, 0.75, 0.55, 0.65, 0.20, 0.15, 0.80, 0.45), 50),
        _profile("trapper_tony", "Trapper Tony",
                 (0.58, 0.45, 0.15, 0.55, 0.35, 0.30, 0.75, 0.12, 0.45, 0.50, 0.65), 200),
        _profile("pure_fish", "Pure Fish",
                 (0.15, 0.05, 0.05, 0.05, 0.10, 0.05, 0.02, 0.30, 0.95, 0.10, 0.05), 300),
        _profile("nit_tag", "Tight-Aggressive Regular",
                 (0.70, 0.75, 0.18, 0.40, 0.75, 0.58, 0.80, 0.03, 0.22, 0.60, 0.75), 170),
        _profile("lag_player", "Loose-Aggressive Regular",
                 (0.35, 0.82, 0.35, 0.35, 0.78, 0.60, 0.85, 0.08, 0.25, 0.75, 0.70), 140),
        _profile("bubble_killer", "Bubble Killer",
                 (0.60, 0.80, 0.32, 0.40, 0.82, 0.65, 0.85, 0.08, 0.20, 0.72, 0.78), 145,
                 use_gto=True),
        _profile("gto_machine", "GTO Machine",
                 (0.50, 0.60, 0.25, 0.48, 0.62, 0.48, 0.85, 0.01, 0.32, 0.55, 0.88), 180,
                 use_gto=True),
        _profile("solver", "Solver",
                 (0.52, 0.58, 0.24, 0.50, 0.60, 0.46, 0.88, 0.00, 0.30, 0.52, 0.92), 185,
                 use_gto=True),
    )
}


def get_profile(profile_id: str) -> BehavioralProfile:
    """Look up an archetype by id.

    Raises:
        KeyError: If the id is not in the catalog.
    """
    try:
        return ARCHETYPES[profile_id]
    except KeyError:
        raise KeyError(
            f"Unknown profile '{profile_id}'. Known: {', '.join(sorted(ARCHETYPES))}"
        ) from None
