from decimal import Decimal

from app.db.enums import Rarity

# (minimum rating, tier), checked top down
RARITY_THRESHOLDS: tuple[tuple[float, Rarity], ...] = (
    (4.5, Rarity.LEGEND),
    (4.0, Rarity.EPIC),
    (3.5, Rarity.RARE),
)


def classify_rarity(rating: float | Decimal | None) -> Rarity:
    if rating is None:
        return Rarity.COMMON

    value = float(rating)
    for minimum, rarity in RARITY_THRESHOLDS:
        if value >= minimum:
            return rarity
    return Rarity.COMMON
