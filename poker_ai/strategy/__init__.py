"""Decision strategy for AI poker players.

Turns a table snapshot and a behavioral profile into one action,
blending a preflop heuristic, Monte Carlo equity, opponent modeling,
tilt and tournament (ICM) pressure.

Key public API:
    DecisionMaker       -- Entry point bound to a GameSession
    Decision            -- Chosen action, amount, reasoning and factors
    BehavioralProfile   -- Playing style scalars of one archetype
    get_profile         -- Look up a catalog archetype by id
"""

from poker_ai.strategy.decision import Decision, DecisionFactor
from poker_ai.strategy.decision_maker import DecisionMaker
from poker_ai.strategy.profile import ARCHETYPES, BehavioralProfile, get_profile

__all__ = [
    "ARCHETYPES",
    "BehavioralProfile",
    "Decision",
    "DecisionFactor",
    "DecisionMaker",
    "get_profile",
]
