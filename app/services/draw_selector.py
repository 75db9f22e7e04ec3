from __future__ import annotations

import random
from collections.abc import Sequence
from typing import Protocol

from app.db.enums import DrawPolicy, Rarity
from app.db.repositories.dishes import PoolEntry
from app.services.errors import NoCandidates


TIER_WEIGHTS: dict[Rarity, int] = {
    Rarity.LEGEND: 40,
    Rarity.EPIC: 30,
    Rarity.RARE: 20,
    Rarity.COMMON: 10,
}

# odds of the tier roll used by the fallback policy; legend is never rolled
FALLBACK_TIER_ODDS: tuple[tuple[Rarity, float], ...] = (
    (Rarity.COMMON, 0.75),
    (Rarity.RARE, 0.20),
    (Rarity.EPIC, 0.05),
)
FALLBACK_TIER_ORDER: tuple[Rarity, ...] = (Rarity.COMMON, Rarity.RARE, Rarity.EPIC)


class DrawSelector(Protocol):
    policy: DrawPolicy

    def select(self, pool: Sequence[PoolEntry]) -> PoolEntry: ...


class WeightedItemSelector:
    """Per-entry weighted sampling.

    Every entry contributes its tier's weight on its own, so the chance of a
    single entry is ``weight / sum(weights of the pool)``.
    """

    policy = DrawPolicy.WEIGHTED_ITEM

    def __init__(self, rng: random.Random | None = None, weights: dict[Rarity, int] | None = None) -> None:
        self._rng = rng or random.Random()
        self._weights = weights or TIER_WEIGHTS

    def weight_of(self, entry: PoolEntry) -> int:
        return self._weights[entry.rarity]

    def select(self, pool: Sequence[PoolEntry]) -> PoolEntry:
        if not pool:
            raise NoCandidates()

        total_weight = sum(self.weight_of(entry) for entry in pool)
        remainder = self._rng.random() * total_weight
        for entry in pool:
            remainder -= self.weight_of(entry)
            if remainder <= 0:
                return entry

        # rng.random() < 1.0 so the walk always ends above; keep the last
        # entry as the answer if float rounding ever says otherwise
        return pool[-1]


class FallbackTierSelector:
    """Roll a tier first, then pick uniformly inside it.

    When the rolled tier has no entries the remaining tiers are tried in
    ``FALLBACK_TIER_ORDER`` and legend is the last resort.
    """

    policy = DrawPolicy.FALLBACK_TIER

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def roll_tier(self) -> Rarity:
        roll = self._rng.random()
        cumulative = 0.0
        for rarity, odds in FALLBACK_TIER_ODDS:
            cumulative += odds
            if roll < cumulative:
                return rarity
        return FALLBACK_TIER_ODDS[-1][0]

    def select(self, pool: Sequence[PoolEntry]) -> PoolEntry:
        if not pool:
            raise NoCandidates()

        by_tier: dict[Rarity, list[PoolEntry]] = {}
        for entry in pool:
            by_tier.setdefault(entry.rarity, []).append(entry)

        rolled = self.roll_tier()
        candidates = [rolled] + [r for r in FALLBACK_TIER_ORDER if r != rolled] + [Rarity.LEGEND]
        for rarity in candidates:
            entries = by_tier.get(rarity)
            if entries:
                return entries[self._rng.randrange(len(entries))]

        raise NoCandidates()


def build_selector(policy: DrawPolicy | str, rng: random.Random | None = None) -> DrawSelector:
    match DrawPolicy(policy):
        case DrawPolicy.WEIGHTED_ITEM:
            return WeightedItemSelector(rng=rng)
        case DrawPolicy.FALLBACK_TIER:
            return FallbackTierSelector(rng=rng)
