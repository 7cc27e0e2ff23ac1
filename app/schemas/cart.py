# app/schemas/cart.py
import uuid

from sqlmodel import SQLModel, Field

from app.models.cart import Cart, CartProduct


class CartItemCreate(SQLModel):
    """
    Payload for adding to cart.

    `qty` is floored and clamped to >= 1 by the service, so fractional or
    zero values are accepted here.
    """

    product_id: uuid.UUID
    qty: float = 1


class CartItemRead(SQLModel):
    """
    Read model for a single cart line, including line_total.
    """

    id: uuid.UUID
    product_id: uuid.UUID | None = None
    product: CartProduct | None = None
    qty: int
    unit_price: float
    line_total: float


class CartSnapshot(SQLModel):
    """
    Full cart response model with totals.
    """

    cart: Cart
    items: list[CartItemRead] = Field(default_factory=list)
    total_qty: int = 0
    total_amount: float = 0.0

    @property
    def is_empty(self) -> bool:
        return not self.items


class CheckoutQuote(SQLModel):
    """
    Per-request view of the cart drawer: cart plus the shipping cost for
    the destination currently selected by the shopper.
    """

    snapshot: CartSnapshot
    province: str = ""
    city: str = ""
    shipping_cost: float = 0.0
    grand_total: float = 0.0
