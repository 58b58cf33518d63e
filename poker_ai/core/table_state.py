"""Table snapshot consumed from the orchestration layer.

The decision core never deals cards, moves chips or sequences betting
rounds. It reads a snapshot of the table at the moment a player must act
and validates that the snapshot admits a legal action.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from poker_ai.utils.card import Card
from poker_ai.utils.constants import ActionType, GameMode, Street


class InvalidTableStateError(ValueError):
    """Raised when a snapshot cannot describe a legal decision point."""


@dataclass(frozen=True)
class BetAction:
    """A single action in the hand's betting history."""

    player_id: str
    action: ActionType
    amount: float = 0.0
    street: Street = Street.PREFLOP


@dataclass
class PlayerSnapshot:
    """State of a single seat at the moment of the decision."""

    player_id: str
    chips: float
    current_bet: float = 0.0
    hole_cards: list[Card] = field(default_factory=list)
    is_active: bool = True
    is_all_in: bool = False


@dataclass(frozen=True)
class TournamentState:
    """Tournament-wide information needed for ICM.

    payouts lists prize amounts ordered 1st, 2nd, 3rd, ... and stacks
    lists the chip count of every entrant (0 once busted),
    including players seated at other tables.
    """

    payouts: tuple[float, ...]
    stacks: tuple[float, ...]


@dataclass
class TableSnapshot:
    """Complete table state at a decision point."""

    street: Street
    pot: float
    current_bet: float
    big_blind: float
    players: list[PlayerSnapshot]
    community_cards: list[Card] = field(default_factory=list)
    dealer_index: int = 0
    min_raise: float = 0.0  # Minimum raise increment; 0 means one big blind
    game_mode: GameMode = GameMode.CASH
    tournament: TournamentState | None = None
    history: list[BetAction] = field(default_factory=list)

    @property
    def is_tournament(self) -> bool:
        return self.game_mode == GameMode.TOURNAMENT

    @property
    def active_players(self) -> list[PlayerSnapshot]:
        return [p for p in self.players if p.is_active]

    @property
    def active_count(self) -> int:
        return len(self.active_players)

    @property
    def min_raise_increment(self) -> float:
        return self.min_raise if self.min_raise > 0 else self.big_blind

    def seat_offset(self, player_index: int) -> int:
        """Seats clockwise from the dealer button (button = 0)."""
        return (player_index - self.dealer_index) % len(self.players)

    def call_amount(self, player_index: int) -> float:
        """Chips the player must add to match the current bet."""
        player = self.players[player_index]
        return max(0.0, self.current_bet - player.current_bet)

    def raises_on(self, street: Street) -> int:
        return sum(
            1 for a in self.history
            if a.street == street and a.action == ActionType.RAISE
        )

    def preflop_aggressor(self) -> str | None:
        """Player id of the last preflop raiser, if any."""
        aggressor = None
        for a in self.history:
            if a.street == Street.PREFLOP and a.action in (
                ActionType.RAISE, ActionType.ALL_IN, ActionType.BET,
            ):
                aggressor = a.player_id
        return aggressor

    def street_actions(self, street: Street) -> list[BetAction]:
        return [a for a in self.history if a.street == street]

    def last_bettor_index(self, hero_index: int) -> int | None:
        """Index of the active opponent with the largest bet in front of them."""
        best: int | None = None
        best_bet = 0.0
        for i, p in enumerate(self.players):
            if i == hero_index or not p.is_active:
                continue
            if p.current_bet > best_bet:
                best, best_bet = i, p.current_bet
        return best

    def validate(self, hero_index: int) -> None:
        """Check that the snapshot admits a legal action for the hero.

        Raises:
            InvalidTableStateError: If the pot or a stack is negative, the
                hero index is out of range, or the hero cannot act.
        """
        if self.pot < 0:
            raise InvalidTableStateError(f"Negative pot: {self.pot}")
        if self.big_blind <= 0:
            raise InvalidTableStateError(f"Big blind must be positive, got {self.big_blind}")
        if not 0 <= hero_index < len(self.players):
            raise InvalidTableStateError(
                f"Hero index {hero_index} out of range for {len(self.players)} players"
            )
        hero = self.players[hero_index]
        if hero.chips < 0:
            raise InvalidTableStateError(f"Negative stack for {hero.player_id}: {hero.chips}")
        if not hero.is_active or hero.is_all_in:
            raise InvalidTableStateError(
                f"{hero.player_id} has no legal actions (inactive or all-in)"
            )
        if hero.chips == 0:
            raise InvalidTableStateError(f"{hero.player_id} has no chips to act with")
        if len(hero.hole_cards) != 2:
            raise InvalidTableStateError(
                f"{hero.player_id} needs 2 hole cards, got {len(hero.hole_cards)}"
            )
        expected = {Street.PREFLOP: 0, Street.FLOP: 3, Street.TURN: 4, Street.RIVER: 5}
        if len(self.community_cards) != expected[self.street]:
            raise InvalidTableStateError(
                f"{self.street} expects {expected[self.street]} community cards, "
                f"got {len(self.community_cards)}"
            )
