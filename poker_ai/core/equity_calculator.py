"""Monte Carlo equity calculator for Texas Hold'em.

Estimates the probability that a hand wins (splits counting half)
against a number of unknown opponent hands by running simulated
runouts of the remaining community cards.

Results are memoized in an EquityCache owned by the caller's game
session. Includes a parallel variant (parallel_estimate) that splits
iterations across worker processes; workers never touch a cache.
"""

from __future__ import annotations

import logging
import os
import random
import threading
from collections import OrderedDict
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass

from poker_ai.core.hand_evaluator import HandEvaluator
from poker_ai.utils.card import Card, full_deck
from poker_ai.utils.constants import Rank, Suit

logger = logging.getLogger("poker_ai.equity")

DEFAULT_CACHE_CAPACITY = 1000

# Number of worker processes for parallel Monte Carlo.
# Defaults to CPU count minus 1, with a minimum of 1 and a maximum of 4.
_MAX_WORKERS = max(1, min(4, (os.cpu_count() or 2) - 1))

NEUTRAL_EQUITY = 0.5

EquityKey = tuple[tuple[int, ...], tuple[int, ...], int, int]


@dataclass(frozen=True)
class EquityResult:
    """Result of an equity calculation."""

    equity: float  # Win probability [0, 1], splits count half
    win_count: int
    split_count: int
    loss_count: int
    simulations: int

    @property
    def win_pct(self) -> float:
        return self.equity * 100

    def __str__(self) -> str:
        return (
            f"Equity: {self.win_pct:.1f}% "
            f"(W: {self.win_count}, S: {self.split_count}, L: {self.loss_count}, "
            f"sims: {self.simulations})"
        )


def _fixed(equity: float) -> EquityResult:
    return EquityResult(equity=equity, win_count=0, split_count=0, loss_count=0, simulations=0)


class EquityCache:
    """Bounded, thread-safe memo of equity results.

    Entries are kept in insertion order. Once the size exceeds capacity
    the oldest half is dropped in one pass; lookups do not refresh an
    entry's position, so this is not an LRU.
    """

    def __init__(self, capacity: int = DEFAULT_CACHE_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"Cache capacity must be positive, got {capacity}")
        self._capacity = capacity
        self._entries: OrderedDict[EquityKey, EquityResult] = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    @staticmethod
    def make_key(
        hole_cards: list[Card],
        community: list[Card],
        opponents: int,
        iterations: int,
    ) -> EquityKey:
        """Exact key, independent of the order cards were dealt in."""
        return (
            tuple(sorted(c.index for c in hole_cards)),
            tuple(sorted(c.index for c in community)),
            opponents,
            iterations,
        )

    def get(self, key: EquityKey) -> EquityResult | None:
        with self._lock:
            result = self._entries.get(key)
            if result is None:
                self.misses += 1
            else:
                self.hits += 1
            return result

    def put(self, key: EquityKey, result: EquityResult) -> None:
        with self._lock:
            self._entries[key] = result
            if len(self._entries) > self._capacity:
                evict = len(self._entries) // 2
                for _ in range(evict):
                    self._entries.popitem(last=False)
                logger.debug("Equity cache evicted %d oldest entries", evict)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    @property
    def capacity(self) -> int:
        return self._capacity


def _simulate(
    hole_cards: list[Card],
    community: list[Card],
    opponents: int,
    iterations: int,
    rng: random.Random,
) -> tuple[int, int, int]:
    """Run the rollout loop and return (wins, splits, losses)."""
    dead = set(hole_cards) | set(community)
    unseen = [c for c in full_deck() if c not in dead]
    board_needed = 5 - len(community)

    wins = 0
    splits = 0
    losses = 0

    for _ in range(iterations):
        rng.shuffle(unseen)
        pos = opponents * 2
        runout = community + unseen[pos:pos + board_needed]
        hero_rank = HandEvaluator.evaluate(hole_cards + runout)

        beaten = False
        tied = False
        for i in range(opponents):
            opp_rank = HandEvaluator.evaluate(unseen[i * 2:i * 2 + 2] + runout)
            if opp_rank > hero_rank:
                beaten = True
                break
            if opp_rank == hero_rank:
                tied = True

        if beaten:
            losses += 1
        elif tied:
            splits += 1
        else:
            wins += 1

    return wins, splits, losses


def _simulate_chunk(
    hole: list[tuple[str, str]],
    board: list[tuple[str, str]],
    opponents: int,
    iterations: int,
    seed: int,
) -> tuple[int, int, int]:
    """Worker function for parallel Monte Carlo.

    Arguments are plain tuples so they pickle cheaply across processes.
    """
    hole_cards = [Card(rank=Rank(r), suit=Suit(s)) for r, s in hole]
    community = [Card(rank=Rank(r), suit=Suit(s)) for r, s in board]
    return _simulate(hole_cards, community, opponents, iterations, random.Random(seed))


class EquityCalculator:
    """Monte Carlo equity simulator."""

    @staticmethod
    def estimate(
        hole_cards: list[Card],
        community: list[Card],
        opponents: int,
        iterations: int = 1000,
        cache: EquityCache | None = None,
        rng: random.Random | None = None,
    ) -> EquityResult:
        """Estimate hero equity against a number of random opponent hands.

        Args:
            hole_cards: Hero's 2 hole cards.
            community: Community cards already dealt (0, 3, 4 or 5).
            opponents: Number of opponents still in the hand.
            iterations: Number of Monte Carlo rollouts.
            cache: Optional session cache consulted before simulating.
            rng: Random source (defaults to a fresh random.Random()).

        Returns:
            EquityResult for the hero. Equity is 1.0 with no opponents and
            a neutral 0.5 when the unseen cards cannot supply the deal.
        """
        if opponents <= 0:
            return _fixed(1.0)
        if iterations <= 0:
            raise ValueError(f"iterations must be positive, got {iterations}")

        key = EquityCache.make_key(hole_cards, community, opponents, iterations)
        if cache is not None:
            cached = cache.get(key)
            if cached is not None:
                return cached

        unseen = 52 - len(set(hole_cards) | set(community))
        needed = opponents * 2 + (5 - len(community))
        if needed > unseen:
            logger.debug(
                "Not enough unseen cards (%d) for %d opponents, returning neutral equity",
                unseen, opponents,
            )
            return _fixed(NEUTRAL_EQUITY)

        wins, splits, losses = _simulate(
            list(hole_cards), list(community), opponents, iterations,
            rng or random.Random(),
        )
        result = EquityResult(
            equity=(wins + splits * 0.5) / iterations,
            win_count=wins,
            split_count=splits,
            loss_count=losses,
            simulations=iterations,
        )
        if cache is not None:
            cache.put(key, result)
        return result

    @staticmethod
    def hand_vs_hand(
        hand1: list[Card],
        hand2: list[Card],
        board: list[Card] | None = None,
        simulations: int = 10_000,
        rng: random.Random | None = None,
    ) -> EquityResult:
        """Calculate equity of hand1 vs a known hand2.

        Args:
            hand1: Player 1's hole cards (2 cards).
            hand2: Player 2's hole cards (2 cards).
            board: Community cards already dealt (0-5 cards).
            simulations: Number of Monte Carlo simulations.
            rng: Random source.

        Returns:
            EquityResult for hand1; its loss_count is hand2's win count.
        """
        board = board or []
        rng = rng or random.Random()
        cards_needed = 5 - len(board)
        dead = set(hand1) | set(hand2) | set(board)
        available = [c for c in full_deck() if c not in dead]

        wins = 0
        splits = 0
        losses = 0

        for _ in range(simulations):
            runout = board + rng.sample(available, cards_needed)
            eval1 = HandEvaluator.evaluate(list(hand1) + runout)
            eval2 = HandEvaluator.evaluate(list(hand2) + runout)

            if eval1 > eval2:
                wins += 1
            elif eval1 == eval2:
                splits += 1
            else:
                losses += 1

        return EquityResult(
            equity=(wins + splits * 0.5) / simulations,
            win_count=wins,
            split_count=splits,
            loss_count=losses,
            simulations=simulations,
        )

    @staticmethod
    def parallel_estimate(
        hole_cards: list[Card],
        community: list[Card],
        opponents: int,
        iterations: int = 10_000,
        max_workers: int | None = None,
        seed: int | None = None,
    ) -> EquityResult:
        """Estimate equity with iterations split across worker processes.

        Falls back to the sequential estimate for small iteration counts
        (<500) where process overhead would negate the benefit. Each
        worker gets its own seed and none of them shares a cache.

        Args:
            hole_cards: Hero's 2 hole cards.
            community: Community cards already dealt.
            opponents: Number of opponents still in the hand.
            iterations: Total number of rollouts.
            max_workers: Max worker processes (defaults to _MAX_WORKERS).
            seed: Base seed; chunk i uses seed + i.

        Returns:
            EquityResult for the hero.
        """
        base_seed = seed if seed is not None else random.randint(0, 2**31)
        if iterations < 500:
            return EquityCalculator.estimate(
                hole_cards, community, opponents, iterations,
                rng=random.Random(base_seed),
            )
        if opponents <= 0:
            return _fixed(1.0)
        unseen = 52 - len(set(hole_cards) | set(community))
        if opponents * 2 + (5 - len(community)) > unseen:
            return _fixed(NEUTRAL_EQUITY)

        hole = [(c.rank.value, c.suit.value) for c in hole_cards]
        board = [(c.rank.value, c.suit.value) for c in community]

        workers = max_workers or _MAX_WORKERS
        chunk_size = iterations // workers
        remainder = iterations % workers
        chunks = [chunk_size + (1 if i < remainder else 0) for i in range(workers)]

        with ProcessPoolExecutor(max_workers=workers) as executor:
            futures = [
                executor.submit(
                    _simulate_chunk, hole, board, opponents, chunk, base_seed + i,
                )
                for i, chunk in enumerate(chunks) if chunk > 0
            ]
            results = [f.result() for f in futures]

        wins = sum(r[0] for r in results)
        splits = sum(r[1] for r in results)
        losses = sum(r[2] for r in results)
        total = wins + splits + losses

        return EquityResult(
            equity=(wins + splits * 0.5) / total,
            win_count=wins,
            split_count=splits,
            loss_count=losses,
            simulations=total,
        )
