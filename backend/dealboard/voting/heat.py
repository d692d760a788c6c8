"""Heat score display tiers."""

import enum
from typing import Optional


class HeatTier(str, enum.Enum):
    HOT = "hot"
    WARM = "warm"
    NEUTRAL = "neutral"
    COLD = "cold"

    @property
    def emoji(self) -> str:
        return _EMOJI[self]

    @property
    def color(self) -> str:
        return _COLOR[self]


_EMOJI = {
    HeatTier.HOT: "🔥",
    HeatTier.WARM: "♨️",
    HeatTier.NEUTRAL: "😐",
    HeatTier.COLD: "🧊",
}

_COLOR = {
    HeatTier.HOT: "red-600",
    HeatTier.WARM: "orange-500",
    HeatTier.NEUTRAL: "gray-500",
    HeatTier.COLD: "blue-500",
}

# Checked top to bottom; first threshold the score reaches wins
_LADDER = (
    (90, HeatTier.HOT),
    (50, HeatTier.WARM),
    (0, HeatTier.NEUTRAL),
)


def heat_tier(score: Optional[int]) -> HeatTier:
    """Map a heat score to its display tier. A missing score counts as 0."""
    value = score or 0
    for threshold, tier in _LADDER:
        if value >= threshold:
            return tier
    return HeatTier.COLD
