# app/models/cart.py
import uuid
from datetime import datetime
from typing import Any, Literal

from pydantic import field_validator
from sqlmodel import SQLModel, Field

CartStatus = Literal["active", "converted"]


class Cart(SQLModel):
    """
    Shopping cart owned by one user.

    At most one cart per user is expected to be `active`; it is created
    lazily and flips to `converted` at checkout.
    """

    id: uuid.UUID
    user_id: uuid.UUID
    status: CartStatus = "active"
    created_at: datetime | None = None


class CartProduct(SQLModel):
    """Minimal product info joined onto a cart line."""

    id: uuid.UUID
    slug: str | None = None
    title: str | None = None
    subtitle: str | None = None


class CartItem(SQLModel):
    """
    Cart line. One row per (cart, product); re-adding a product bumps qty.

    `unit_price` is captured when the line is added or bumped, it is not
    linked to the live product price.
    """

    id: uuid.UUID
    cart_id: uuid.UUID | None = None
    product_id: uuid.UUID | None = None

    qty: int = Field(
        default=0,
        description="Must be >= 1 when written",
    )

    unit_price: float = Field(
        default=0.0,
        description="Price when added to cart",
    )

    product: CartProduct | None = None

    @field_validator("qty", "unit_price", mode="before")
    @classmethod
    def _none_as_zero(cls, v: Any) -> Any:
        return 0 if v is None else v

    @property
    def line_total(self) -> float:
        return self.unit_price * self.qty

    @property
    def resolved_product_id(self) -> uuid.UUID | None:
        if self.product_id is not None:
            return self.product_id
        return self.product.id if self.product else None
