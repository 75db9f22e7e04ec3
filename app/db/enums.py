import enum

class Rarity(enum.StrEnum):
    COMMON = "common"
    RARE = "rare"
    EPIC = "epic"
    LEGEND = "legend"

class DrawPolicy(enum.StrEnum):
    WEIGHTED_ITEM = "weighted_item"
    FALLBACK_TIER = "fallback_tier"
