# app/models/shipping.py
import math
import uuid
from datetime import datetime
from typing import Any

from pydantic import field_validator
from sqlmodel import SQLModel, Field


class ShippingRate(SQLModel):
    """
    Flat shipping cost for a (province, city) pair.

    Matches table `shipping_rates`:
      - id, province, city, cost, is_active, updated_at
    """

    id: uuid.UUID | None = None
    province: str
    city: str

    cost: float = Field(
        default=0,
        description="Flat cost for this destination",
    )

    is_active: bool = True
    updated_at: datetime | None = None

    @field_validator("cost", mode="before")
    @classmethod
    def _finite_cost(cls, v: Any) -> float:
        # unparsable or non-finite costs resolve to free shipping
        try:
            cost = float(v)
        except (TypeError, ValueError):
            return 0.0
        return cost if math.isfinite(cost) else 0.0
