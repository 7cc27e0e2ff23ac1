# app/models/order.py
import uuid
from datetime import datetime
from typing import Any, Literal

from pydantic import field_validator
from sqlmodel import SQLModel, Field

OrderStatus = Literal[
    "pending",
    "processing",
    "paid",
    "shipped",
    "completed",
    "cancelled",
]

ORDER_STATUSES: tuple[str, ...] = (
    "pending",
    "processing",
    "paid",
    "shipped",
    "completed",
    "cancelled",
)

# Statuses that count towards paid revenue
PAID_STATUSES = frozenset({"paid", "shipped", "completed"})


class Order(SQLModel):
    """
    Customer order created from a cart at checkout.

    Matches table `orders`:
      - id, user_id, order_number, status, subtotal_amount, shipping_cost,
        total_amount, shipping_province, shipping_city, shipping_address,
        created_at
    """

    id: uuid.UUID
    user_id: uuid.UUID | None = None

    order_number: str | None = Field(
        default=None,
        description="Human-facing reference, supplied by the caller",
    )

    status: str = Field(
        default="pending",
        description="Order status lifecycle",
    )

    subtotal_amount: float | None = None
    shipping_cost: float | None = None

    # subtotal + shipping
    total_amount: float | None = None

    shipping_province: str | None = None
    shipping_city: str | None = None

    # "recipient | phone | street | city | province", empty parts omitted
    shipping_address: str | None = None

    created_at: datetime | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _default_status(cls, v: Any) -> Any:
        return v or "pending"

    @property
    def reference(self) -> str:
        return self.order_number or str(self.id)


class OrderItem(SQLModel):
    """
    Line item inside an order, an immutable snapshot of a cart line.

    Matches table `order_items`:
      - id, order_id, product_id, qty, unit_price
    """

    id: uuid.UUID | None = None
    order_id: uuid.UUID
    product_id: uuid.UUID

    qty: int = Field(
        gt=0,
        description="Quantity ordered (>=1)",
    )

    unit_price: float = Field(
        description="Unit price at time of checkout",
    )
