"""Tests for heat score display tiers."""

import pytest

from dealboard.schemas import HeatBadge
from dealboard.voting import HeatTier, heat_tier


class TestHeatTier:
    @pytest.mark.parametrize(
        "score, tier",
        [
            (250, HeatTier.HOT),
            (90, HeatTier.HOT),
            (89, HeatTier.WARM),
            (50, HeatTier.WARM),
            (49, HeatTier.NEUTRAL),
            (0, HeatTier.NEUTRAL),
            (-1, HeatTier.COLD),
            (-40, HeatTier.COLD),
        ],
    )
    def test_thresholds(self, score, tier):
        assert heat_tier(score) is tier

    def test_missing_score_is_neutral(self):
        assert heat_tier(None) is HeatTier.NEUTRAL

    def test_emoji_and_color(self):
        assert HeatTier.HOT.emoji == "🔥"
        assert HeatTier.HOT.color == "red-600"
        assert HeatTier.COLD.emoji == "🧊"
        assert HeatTier.COLD.color == "blue-500"


class TestHeatBadge:
    def test_for_score(self):
        badge = HeatBadge.for_score(55)

        assert badge.tier == "warm"
        assert badge.emoji == "♨️"
        assert badge.color == "orange-500"
