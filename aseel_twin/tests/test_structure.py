"""
Test: Structural Index
Verifies ASI scoring shapes, weighting and structural warnings.
"""

import pytest
from aseel_twin.config import STRUCTURE
from aseel_twin.engines.structure import (
    StructureProfile,
    calculate_asi,
    ideally_high,
    ideally_low,
)


def ideal_profile(**overrides) -> StructureProfile:
    """Every trait exactly at its breed target or threshold."""
    values = dict(STRUCTURE.targets)
    values["tail_carriage"] = STRUCTURE.tail_carriage_threshold
    values.update(overrides)
    return StructureProfile(**values)


class TestShapeFunctions:
    """Tests for the ideally-high and ideally-low shapes."""

    def test_ideally_high_saturates(self):
        assert ideally_high(0.4, 0.8) == pytest.approx(0.5)
        assert ideally_high(0.8, 0.8) == 1.0
        assert ideally_high(1.0, 0.8) == 1.0

    def test_ideally_low_decays(self):
        assert ideally_low(0.1, 0.3) == 1.0
        assert ideally_low(0.3, 0.3) == 1.0
        assert ideally_low(0.65, 0.3) == pytest.approx(0.5)
        assert ideally_low(1.0, 0.3) == 0.0


class TestCalculateASI:
    """Tests for the Aseel Structural Index."""

    def test_ideal_bird_scores_100(self):
        """All traits on target gives a perfect score and no warnings."""
        score, warnings = calculate_asi(ideal_profile())
        assert score == 100
        assert warnings == []

    def test_weights_sum_to_one(self):
        assert sum(STRUCTURE.weights.values()) == pytest.approx(1.0)

    def test_exceeding_target_does_not_add(self):
        score, _ = calculate_asi(ideal_profile(neck_length=1.0, body_width=1.0))
        assert score == 100

    def test_short_neck_warns(self):
        score, warnings = calculate_asi(ideal_profile(neck_length=0.2))
        # Neck contributes 0.15 x 0.25 instead of 0.15
        assert score == 89
        assert warnings == [STRUCTURE.warnings["neck_length"]]

    def test_high_tail_warns(self):
        score, warnings = calculate_asi(ideal_profile(tail_carriage=1.0))
        assert score == 90
        assert warnings == [STRUCTURE.warnings["tail_carriage"]]

    def test_out_of_range_values_clamped(self):
        score, _ = calculate_asi(ideal_profile(chest_depth=3.0, tail_carriage=-1.0))
        assert score == 100

    def test_all_zero(self):
        """A zeroed profile scores only the tail and warns on every other trait."""
        profile = StructureProfile(*([0.0] * 8))
        score, warnings = calculate_asi(profile)
        assert score == 10
        assert len(warnings) == 7

    def test_score_in_range(self):
        for value in (0.0, 0.25, 0.5, 0.75, 1.0):
            score, _ = calculate_asi(StructureProfile(*([value] * 8)))
            assert 0 <= score <= 100


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
