# app/routers/orders.py
from fastapi import APIRouter, Depends
from supabase import Client

from app.core.auth import require_auth
from app.core.config import get_settings
from app.core.supabase_client import get_supabase
from app.models.order import Order
from app.models.user import AuthUser
from app.repositories.cart_repo import CartRepository
from app.repositories.order_repo import OrderRepository
from app.repositories.product_repo import ProductRepository
from app.repositories.shipping_repo import ShippingRepository
from app.schemas.order import CheckoutRequest, CheckoutResult
from app.services.cart_service import CartService
from app.services.checkout_service import (
    CheckoutService,
    build_handoff_url,
    generate_order_number,
)
from app.services.order_service import OrderService
from app.services.shipping_service import ShippingService

settings = get_settings()

router = APIRouter(tags=["Orders"])

order_repo = OrderRepository()
cart_repo = CartRepository()
checkout_service = CheckoutService(
    CartService(cart_repo, ProductRepository()),
    ShippingService(ShippingRepository()),
    cart_repo,
    order_repo,
)
service = OrderService(order_repo)


@router.post("/checkout", response_model=CheckoutResult)
def checkout(
    payload: CheckoutRequest,
    client: Client = Depends(get_supabase),
    current_user: AuthUser = Depends(require_auth),
):
    """
    Convert the current user's cart into a pending order.

    - ok=false, reason="empty_cart" when there is nothing to order.
    - On success `handoff_url` opens WhatsApp with the order summary,
      payment is confirmed there by the shop.
    - 502 with {step, order_id} if a write fails part-way.
    """
    if not payload.order_number:
        payload.order_number = generate_order_number()

    result = checkout_service.checkout(client, current_user.id, payload)
    if result.ok:
        result.handoff_url = build_handoff_url(result, settings.WHATSAPP_NUMBER)
    return result


@router.get("/orders", response_model=list[Order])
def list_my_orders(
    client: Client = Depends(get_supabase),
    current_user: AuthUser = Depends(require_auth),
):
    """
    List the authenticated user's orders, newest first.
    """
    return service.list_user_orders(client, current_user.id)
