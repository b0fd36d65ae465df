"""Tests for the calculator pricing rules."""

import pytest

from src.errors import InvalidInput
from src.pricing.engine import MIN_PRICE, PricingEngine


class TestPricingEngine:
    """Weight × base × complexity + coating surcharge, with a floor."""

    def test_medium_zinc(self):
        engine = PricingEngine()
        # 2 × 50000 × 1.2 + 2 × 15000
        assert engine.estimate(2, "medium", "zinc") == 150000

    def test_small_order_clamps_to_floor(self):
        engine = PricingEngine()
        assert engine.estimate(0.1, "simple", "none") == MIN_PRICE == 50000

    def test_complex_paint(self):
        engine = PricingEngine()
        # 3 × 50000 × 1.5 + 3 × 8000
        assert engine.estimate(3, "complex", "paint") == 249000

    def test_simple_no_coating(self):
        engine = PricingEngine()
        assert engine.estimate(4, "simple", "none") == 200000

    def test_unknown_complexity_is_medium(self):
        engine = PricingEngine()
        assert engine.estimate(2, "extreme", "none") == engine.estimate(2, "medium", "none")
        assert engine.estimate(2, None, "none") == 120000

    def test_unknown_coating_is_none(self):
        engine = PricingEngine()
        assert engine.estimate(2, "simple", "gold") == 100000
        assert engine.estimate(2, "simple", None) == 100000

    def test_fractional_weight(self):
        engine = PricingEngine()
        # 1.5 × 50000 × 1.2 + 1.5 × 8000
        assert engine.estimate(1.5, "medium", "paint") == 102000

    def test_result_is_int(self):
        engine = PricingEngine()
        assert isinstance(engine.estimate(1.33, "medium", "paint"), int)

    @pytest.mark.parametrize("weight", [None, 0, -1, float("nan"), float("inf")])
    def test_invalid_weight(self, weight):
        engine = PricingEngine()
        with pytest.raises(InvalidInput):
            engine.estimate(weight, "medium", "zinc")

    def test_huge_weight_rejected(self):
        engine = PricingEngine()
        with pytest.raises(InvalidInput, match="too large"):
            engine.estimate(1e305, "complex", "zinc")
