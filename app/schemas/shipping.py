# app/schemas/shipping.py
import uuid

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class ShippingCost(SQLModel):
    province: str
    city: str
    cost: float


class ShippingRateSave(SQLModel):
    """
    Admin payload for creating or updating a shipping rate (upsert by id).
    """

    model_config = ConfigDict(extra="forbid")

    id: uuid.UUID | None = None
    province: str
    city: str
    cost: float = Field(ge=0)
    is_active: bool = True

    @field_validator("province", "city")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class SiteSettingSave(SQLModel):
    model_config = ConfigDict(extra="forbid")

    key: str
    value: str | None = None
