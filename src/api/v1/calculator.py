"""Public cost calculator API."""

from fastapi import APIRouter, Depends

from src.dependencies import get_pricing_engine
from src.pricing.engine import PricingEngine
from src.schemas.pricing import CalculateRequest, PriceQuote

router = APIRouter(prefix="/api", tags=["calculator"])


@router.post("/calculate", response_model=PriceQuote)
async def calculate_price(
    data: CalculateRequest,
    engine: PricingEngine = Depends(get_pricing_engine),
) -> PriceQuote:
    """Rough price for a metal structure by weight, complexity and coating."""
    price = engine.estimate(data.weight, data.complexity, data.coating)
    return PriceQuote(price=price)
