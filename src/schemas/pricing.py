"""Calculator schemas."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Complexity(str, Enum):
    SIMPLE = "simple"
    MEDIUM = "medium"
    COMPLEX = "complex"


class Coating(str, Enum):
    ZINC = "zinc"
    PAINT = "paint"
    NONE = "none"


class CalculateRequest(BaseModel):
    """Public calculator form. Unknown complexity/coating values are tolerated."""

    weight: Optional[float] = None  # tonnes
    complexity: Optional[str] = None
    coating: Optional[str] = None
    product_type: Optional[str] = Field(None, alias="productType")


class PriceQuote(BaseModel):
    success: bool = True
    price: int
    currency: str = "RUB"
