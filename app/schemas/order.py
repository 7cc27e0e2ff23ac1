# app/schemas/order.py
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from app.models.order import Order, OrderStatus
from app.schemas.cart import CartItemRead


class ShippingDetails(SQLModel):
    """
    Destination captured at checkout.

    All five parts are required; blanks are rejected by the checkout
    service before any remote call.
    """

    recipient_name: str = ""
    phone: str = ""
    street: str = ""
    city: str = ""
    province: str = ""

    @field_validator("recipient_name", "phone", "street", "city", "province", mode="before")
    @classmethod
    def strip(cls, v: str | None) -> str:
        return str(v or "").strip()

    def address_line(self) -> str:
        """recipient | phone | street | city | province, empty parts omitted."""
        parts = [self.recipient_name, self.phone, self.street, self.city, self.province]
        return " | ".join(p for p in parts if p)

    def missing_fields(self) -> list[str]:
        return [
            name
            for name in ("recipient_name", "phone", "province", "city", "street")
            if not getattr(self, name)
        ]


class CheckoutRequest(ShippingDetails):
    """
    Payload for converting the current cart into an order.

    User provides:
      - recipient_name, phone, street, city, province
      - order_number (optional; the router generates one when missing)

    Backend derives:
      - user_id from token
      - status = 'pending'
      - subtotal / shipping_cost / total_amount
      - items from cart
    """

    model_config = ConfigDict(extra="forbid")

    order_number: str | None = None


class CheckoutResult(SQLModel):
    """
    Outcome of a checkout attempt.

    ok=False with reason="empty_cart" is a normal outcome, not an error.
    On success it carries everything the WhatsApp hand-off needs.
    """

    ok: bool
    reason: str | None = None

    order: Order | None = None
    items: list[CartItemRead] = Field(default_factory=list)
    subtotal: float = 0.0
    shipping_cost: float = 0.0
    grand_total: float = 0.0
    shipping: ShippingDetails | None = None

    handoff_url: str | None = None


class OrderStatusUpdate(SQLModel):
    """
    Payload for admin status changes.
    """

    model_config = ConfigDict(extra="forbid")

    status: OrderStatus


class OrderStats(SQLModel):
    """
    Admin dashboard order totals for an optional date range.
    """

    counts: dict[str, int] = Field(default_factory=dict)
    total_orders: int = 0
    all_revenue: float = 0.0
    paid_revenue: float = 0.0
    date_from: datetime | None = None
    date_to: datetime | None = None
