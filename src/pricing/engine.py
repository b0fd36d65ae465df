"""Pricing Engine — rough quote for the public cost calculator."""

from __future__ import annotations

import math
from typing import Optional

import structlog

from src.errors import InvalidInput
from src.schemas.pricing import Coating, Complexity

logger = structlog.get_logger()

BASE_PRICE_PER_TONNE = 50000
MIN_PRICE = 50000

COMPLEXITY_FACTORS = {
    Complexity.SIMPLE: 1.0,
    Complexity.MEDIUM: 1.2,
    Complexity.COMPLEX: 1.5,
}

# Surcharge per tonne
COATING_SURCHARGES = {
    Coating.ZINC: 15000,
    Coating.PAINT: 8000,
    Coating.NONE: 0,
}


class PricingEngine:
    """Multiplicative pricing rules: weight × base × complexity + coating."""

    def estimate(
        self,
        weight: Optional[float],
        complexity: Optional[str] = None,
        coating: Optional[str] = None,
    ) -> int:
        """Return the quote in whole rubles.

        Args:
            weight: Structure weight in tonnes, must be positive
            complexity: simple | medium | complex (anything else → medium)
            coating: zinc | paint | none (anything else → none)

        Raises:
            InvalidInput: weight is missing or not positive
        """
        if weight is None or not math.isfinite(weight) or weight <= 0:
            raise InvalidInput("weight must be a positive number")

        level = self._complexity(complexity)
        finish = self._coating(coating)

        total = weight * BASE_PRICE_PER_TONNE * COMPLEXITY_FACTORS[level]
        total += weight * COATING_SURCHARGES[finish]
        if not math.isfinite(total):
            raise InvalidInput("weight is too large")
        total = max(total, MIN_PRICE)

        # Half-up, not banker's rounding
        price = math.floor(total + 0.5)

        logger.info(
            "price_estimated",
            weight=weight,
            complexity=level.value,
            coating=finish.value,
            price=price,
        )
        return price

    def _complexity(self, value: Optional[str]) -> Complexity:
        try:
            return Complexity(value)
        except ValueError:
            return Complexity.MEDIUM

    def _coating(self, value: Optional[str]) -> Coating:
        try:
            return Coating(value)
        except ValueError:
            return Coating.NONE
