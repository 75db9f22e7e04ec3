import random
from collections import Counter

import pytest

from app.db.enums import DrawPolicy, Rarity
from app.db.repositories.dishes import PoolEntry
from app.services.draw_selector import (
    FallbackTierSelector,
    WeightedItemSelector,
    build_selector,
)
from app.services.errors import NoCandidates


class ScriptedRandom(random.Random):
    """random.Random whose random() replays a script, then behaves normally."""

    def __init__(self, values):
        super().__init__(0)
        self._values = list(values)

    def random(self):
        if self._values:
            return self._values.pop(0)
        return super().random()


def one_per_tier():
    return [
        PoolEntry(dish_id=1, rarity=Rarity.LEGEND),
        PoolEntry(dish_id=2, rarity=Rarity.EPIC),
        PoolEntry(dish_id=3, rarity=Rarity.RARE),
        PoolEntry(dish_id=4, rarity=Rarity.COMMON),
    ]


@pytest.mark.parametrize("policy", list(DrawPolicy))
def test_select_returns_member_of_pool(policy):
    selector = build_selector(policy, rng=random.Random(42))
    pool = [
        PoolEntry(dish_id=10, rarity=Rarity.COMMON),
        PoolEntry(dish_id=11, rarity=Rarity.LEGEND),
        PoolEntry(dish_id=12, rarity=Rarity.RARE),
    ]
    pool_ids = {entry.dish_id for entry in pool}

    for _ in range(500):
        assert selector.select(pool).dish_id in pool_ids


@pytest.mark.parametrize("policy", list(DrawPolicy))
def test_empty_pool_raises_no_candidates(policy):
    selector = build_selector(policy, rng=random.Random(42))
    with pytest.raises(NoCandidates):
        selector.select([])


def test_build_selector_accepts_policy_strings():
    assert isinstance(build_selector("weighted_item"), WeightedItemSelector)
    assert isinstance(build_selector("fallback_tier"), FallbackTierSelector)
    with pytest.raises(ValueError):
        build_selector("uniform")


def test_weighted_same_tier_is_uniform():
    selector = WeightedItemSelector(rng=random.Random(2024))
    pool = [PoolEntry(dish_id=i, rarity=Rarity.RARE) for i in range(1, 5)]
    trials = 20000

    counts = Counter(selector.select(pool).dish_id for _ in range(trials))

    for dish_id in range(1, 5):
        assert counts[dish_id] / trials == pytest.approx(0.25, abs=0.02)


def test_weighted_one_per_tier_matches_tier_weights():
    selector = WeightedItemSelector(rng=random.Random(99))
    trials = 10000

    counts = Counter(selector.select(one_per_tier()).rarity for _ in range(trials))

    assert counts[Rarity.LEGEND] / trials == pytest.approx(0.40, abs=0.03)
    assert counts[Rarity.EPIC] / trials == pytest.approx(0.30, abs=0.03)
    assert counts[Rarity.RARE] / trials == pytest.approx(0.20, abs=0.03)
    assert counts[Rarity.COMMON] / trials == pytest.approx(0.10, abs=0.03)


def test_weighted_weight_is_per_entry_not_per_tier():
    # nine commons (90) against one legend (40)
    pool = [PoolEntry(dish_id=i, rarity=Rarity.COMMON) for i in range(1, 10)]
    pool.append(PoolEntry(dish_id=10, rarity=Rarity.LEGEND))
    selector = WeightedItemSelector(rng=random.Random(5))
    trials = 13000

    counts = Counter(selector.select(pool).rarity for _ in range(trials))

    assert counts[Rarity.COMMON] / trials == pytest.approx(90 / 130, abs=0.03)


def test_weighted_walk_boundaries():
    # total weight 100: legend covers (0, 40], epic (40, 70], rare (70, 90], common (90, 100)
    pool = one_per_tier()

    assert WeightedItemSelector(rng=ScriptedRandom([0.0])).select(pool).dish_id == 1
    assert WeightedItemSelector(rng=ScriptedRandom([0.40])).select(pool).dish_id == 1
    assert WeightedItemSelector(rng=ScriptedRandom([0.41])).select(pool).dish_id == 2
    assert WeightedItemSelector(rng=ScriptedRandom([0.69])).select(pool).dish_id == 2
    assert WeightedItemSelector(rng=ScriptedRandom([0.89])).select(pool).dish_id == 3
    assert WeightedItemSelector(rng=ScriptedRandom([0.999])).select(pool).dish_id == 4


def test_fallback_picks_rolled_tier_when_present():
    # 0.80 rolls rare
    selector = FallbackTierSelector(rng=ScriptedRandom([0.80]))
    assert selector.select(one_per_tier()).rarity == Rarity.RARE


def test_fallback_order_is_common_rare_epic_then_legend():
    pool = [
        PoolEntry(dish_id=1, rarity=Rarity.EPIC),
        PoolEntry(dish_id=2, rarity=Rarity.RARE),
        PoolEntry(dish_id=3, rarity=Rarity.LEGEND),
    ]
    # rolls common (0.10): not present, so rare is next in the fixed order
    assert FallbackTierSelector(rng=ScriptedRandom([0.10])).select(pool).rarity == Rarity.RARE

    # rolls epic (0.99): present, kept
    assert FallbackTierSelector(rng=ScriptedRandom([0.99])).select(pool).rarity == Rarity.EPIC

    epic_and_legend = [pool[0], pool[2]]
    # rolls rare (0.80): missing; common missing too, epic is next
    assert FallbackTierSelector(rng=ScriptedRandom([0.80])).select(epic_and_legend).rarity == Rarity.EPIC


def test_fallback_legend_only_pool_still_draws():
    pool = [PoolEntry(dish_id=7, rarity=Rarity.LEGEND)]
    selector = FallbackTierSelector(rng=random.Random(3))

    for _ in range(50):
        assert selector.select(pool).dish_id == 7


def test_fallback_tier_roll_distribution():
    selector = FallbackTierSelector(rng=random.Random(11))
    trials = 10000

    counts = Counter(selector.select(one_per_tier()).rarity for _ in range(trials))

    assert counts[Rarity.COMMON] / trials == pytest.approx(0.75, abs=0.03)
    assert counts[Rarity.RARE] / trials == pytest.approx(0.20, abs=0.03)
    assert counts[Rarity.EPIC] / trials == pytest.approx(0.05, abs=0.02)
    assert counts[Rarity.LEGEND] == 0
