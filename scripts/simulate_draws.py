import argparse
import random
from collections import Counter

from app.db.enums import DrawPolicy, Rarity
from app.db.repositories.dishes import PoolEntry
from app.services.draw_selector import TIER_WEIGHTS, build_selector


def one_per_tier_pool() -> list[PoolEntry]:
    return [PoolEntry(dish_id=index, rarity=rarity) for index, rarity in enumerate(Rarity, start=1)]


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Run the draw selector against a synthetic pool and print the observed odds."
    )
    parser.add_argument("--iterations", type=int, default=10000)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument(
        "--policy",
        choices=[policy.value for policy in DrawPolicy],
        action="append",
        help="Policy to simulate; repeat to compare. Defaults to every policy.",
    )
    args = parser.parse_args()

    pool = one_per_tier_pool()
    total_weight = sum(TIER_WEIGHTS[entry.rarity] for entry in pool)
    policies = args.policy or [policy.value for policy in DrawPolicy]

    for policy in policies:
        selector = build_selector(policy, rng=random.Random(args.seed))
        results = Counter(selector.select(pool).rarity for _ in range(args.iterations))

        print(f"{policy} ({args.iterations} draws)")
        for rarity in sorted(Rarity, key=lambda r: TIER_WEIGHTS[r], reverse=True):
            observed = results[rarity] / args.iterations * 100
            expected = TIER_WEIGHTS[rarity] / total_weight * 100
            print(f"  {rarity.value:<7} {results[rarity]:>7}  {observed:5.1f}%  (weighted target {expected:4.1f}%)")


if __name__ == "__main__":
    main()
