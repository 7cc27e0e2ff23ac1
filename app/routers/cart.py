# app/routers/cart.py
import uuid

from fastapi import APIRouter, Depends
from supabase import Client

from app.core.auth import require_auth
from app.core.supabase_client import get_supabase
from app.models.user import AuthUser
from app.repositories.cart_repo import CartRepository
from app.repositories.order_repo import OrderRepository
from app.repositories.product_repo import ProductRepository
from app.repositories.shipping_repo import ShippingRepository
from app.schemas.cart import CartItemCreate, CartSnapshot, CheckoutQuote
from app.services.cart_service import CartService
from app.services.checkout_service import CheckoutService
from app.services.shipping_service import ShippingService

router = APIRouter(prefix="/cart", tags=["Cart"])

cart_repo = CartRepository()
product_repo = ProductRepository()
service = CartService(cart_repo, product_repo)
checkout_service = CheckoutService(
    service,
    ShippingService(ShippingRepository()),
    cart_repo,
    OrderRepository(),
)


@router.get("", response_model=CartSnapshot)
def get_my_cart(
    client: Client = Depends(get_supabase),
    current_user: AuthUser = Depends(require_auth),
):
    """
    Get the current user's active cart with totals.

    An active cart is created on first access.
    """
    return service.get_cart_items(client, current_user.id)


@router.get("/quote", response_model=CheckoutQuote)
def quote_my_cart(
    province: str = "",
    city: str = "",
    client: Client = Depends(get_supabase),
    current_user: AuthUser = Depends(require_auth),
):
    """
    Cart totals plus shipping for the selected province/city.

    Unknown destinations cost 0.
    """
    return checkout_service.quote(client, current_user.id, province, city)


@router.post("", response_model=CartSnapshot)
def add_to_cart(
    payload: CartItemCreate,
    client: Client = Depends(get_supabase),
    current_user: AuthUser = Depends(require_auth),
):
    """
    Add a product to the current user's cart.

    Errors:
      - 404 product not found
      - 409 out of stock / not enough stock (detail includes what is left)
    """
    return service.add_to_cart(client, current_user.id, payload.product_id, payload.qty)


@router.delete("/{item_id}", response_model=CartSnapshot)
def remove_cart_item(
    item_id: uuid.UUID,
    client: Client = Depends(get_supabase),
    current_user: AuthUser = Depends(require_auth),
):
    """
    Remove a line item from the cart.

    Returns the updated cart.
    """
    return service.remove_cart_item(client, current_user.id, item_id)
