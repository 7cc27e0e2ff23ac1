# app/services/checkout_service.py
import logging
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator
from urllib.parse import quote

from supabase import Client

from app.core.errors import CheckoutError, ValidationError
from app.core.formatting import format_idr
from app.models.order import Order
from app.repositories.cart_repo import CartRepository
from app.repositories.order_repo import OrderRepository
from app.schemas.cart import CartSnapshot, CheckoutQuote
from app.schemas.order import CheckoutRequest, CheckoutResult, ShippingDetails
from app.services.cart_service import CartService
from app.services.shipping_service import ShippingService

logger = logging.getLogger(__name__)

MISSING_ADDRESS_MESSAGE = "Lengkapi data pengiriman (nama, no HP, provinsi, kota, alamat)."


def generate_order_number(now: datetime | None = None) -> str:
    """
    ORD-<yyyymmdd>-<last 6 digits of the ms timestamp>.

    Unique enough for a small shop; the orders table does not enforce it.
    """
    now = now or datetime.now(timezone.utc)
    millis = str(int(now.timestamp() * 1000))
    return f"ORD-{now:%Y%m%d}-{millis[-6:]}"


class CheckoutService:
    """
    Converts the active cart into an order.

    Steps (each its own round trip, no transaction):
      1. snapshot the cart (empty => ok=False, nothing written)
      2. resolve shipping cost (0 when unknown)
      3. compute totals
      4. insert order (status 'pending')
      5. insert order items copied from the snapshot
      6. mark the cart 'converted'
      7. delete the cart's line items
      8. create the next active cart

    A failure after step 4 leaves the order in place and the remaining
    steps unapplied. It is raised as CheckoutError naming the step and
    the order id so the shop can fix it by hand.
    """

    def __init__(
        self,
        cart_service: CartService,
        shipping_service: ShippingService,
        cart_repo: CartRepository,
        order_repo: OrderRepository,
    ):
        self.cart_service = cart_service
        self.shipping_service = shipping_service
        self.cart_repo = cart_repo
        self.order_repo = order_repo

    # -------- Public operations --------

    def quote(
        self,
        client: Client,
        user_id: uuid.UUID,
        province: str | None = None,
        city: str | None = None,
    ) -> CheckoutQuote:
        """
        Cart snapshot plus shipping for the selected destination.
        """
        snapshot = self.cart_service.get_cart_items(client, user_id)
        shipping_cost = self.shipping_service.get_cost(client, province, city)
        return CheckoutQuote(
            snapshot=snapshot,
            province=(province or "").strip(),
            city=(city or "").strip(),
            shipping_cost=shipping_cost,
            grand_total=snapshot.total_amount + shipping_cost,
        )

    def checkout(
        self,
        client: Client,
        user_id: uuid.UUID,
        request: CheckoutRequest,
    ) -> CheckoutResult:
        """
        Run the checkout steps for the user's active cart.

        Raises:
            ValidationError: a shipping field is blank (nothing is read or written).
            CheckoutError: a write failed; `order_id` is set when the order row exists.
        """
        if request.missing_fields():
            raise ValidationError(MISSING_ADDRESS_MESSAGE)

        snapshot = self._snapshot(client, user_id)
        if snapshot.is_empty:
            logger.info("Checkout skipped for user %s: cart is empty", user_id)
            return CheckoutResult(ok=False, reason="empty_cart")

        shipping_cost = self._resolve_shipping(client, request)
        subtotal = snapshot.total_amount
        grand_total = subtotal + shipping_cost

        order = self._create_order(
            client, user_id, request, subtotal, shipping_cost, grand_total
        )
        order_id = str(order.id)

        with self._step("create_order_items", order_id):
            self._create_order_items(client, order, snapshot)
        with self._step("retire_cart", order_id):
            self.cart_repo.mark_converted(client, snapshot.cart.id)
        with self._step("clear_cart_items", order_id):
            self.cart_repo.clear_cart(client, snapshot.cart.id)
        with self._step("provision_next_cart", order_id):
            self.cart_service.ensure_active_cart(client, user_id)

        logger.info(
            "Checkout complete: order %s (%s) for user %s, total %s",
            order_id,
            order.order_number,
            user_id,
            grand_total,
        )

        return CheckoutResult(
            ok=True,
            order=order,
            items=snapshot.items,
            subtotal=subtotal,
            shipping_cost=shipping_cost,
            grand_total=grand_total,
            shipping=ShippingDetails.model_validate(request.model_dump(exclude={"order_number"})),
        )

    # -------- Steps --------

    def _snapshot(self, client: Client, user_id: uuid.UUID) -> CartSnapshot:
        return self.cart_service.get_cart_items(client, user_id)

    def _resolve_shipping(self, client: Client, request: CheckoutRequest) -> float:
        return self.shipping_service.get_cost(client, request.province, request.city)

    def _create_order(
        self,
        client: Client,
        user_id: uuid.UUID,
        request: CheckoutRequest,
        subtotal: float,
        shipping_cost: float,
        grand_total: float,
    ) -> Order:
        address = request.address_line()
        with self._step("create_order", None):
            return self.order_repo.create_order(
                client,
                {
                    "user_id": str(user_id),
                    "status": "pending",
                    "order_number": request.order_number or None,
                    "subtotal_amount": subtotal,
                    "shipping_cost": shipping_cost,
                    "total_amount": grand_total,
                    "shipping_province": request.province or None,
                    "shipping_city": request.city or None,
                    "shipping_address": address or None,
                },
            )

    def _create_order_items(
        self, client: Client, order: Order, snapshot: CartSnapshot
    ) -> None:
        # prices come from the snapshot, not the live product
        rows = [
            {
                "order_id": str(order.id),
                "product_id": str(it.product_id),
                "qty": it.qty,
                "unit_price": it.unit_price,
            }
            for it in snapshot.items
        ]
        self.order_repo.create_items(client, rows)

    @contextmanager
    def _step(self, name: str, order_id: str | None) -> Iterator[None]:
        logger.debug("Checkout step %s (order %s)", name, order_id)
        try:
            yield
        except Exception as exc:
            logger.error(
                "Checkout failed at step %s (order %s): %s", name, order_id, exc
            )
            raise CheckoutError(step=name, cause=exc, order_id=order_id) from exc


# -------- WhatsApp hand-off --------


def build_handoff_message(result: CheckoutResult) -> str:
    """
    Prefilled message the shopper sends to confirm payment manually.
    """
    if not result.ok or result.order is None or result.shipping is None:
        raise ValueError("hand-off needs a successful checkout")

    order = result.order
    ship = result.shipping
    lines = [
        f"- {(it.product.title if it.product and it.product.title else 'Produk')} "
        f"x{it.qty} = {format_idr(it.line_total)}"
        for it in result.items
    ]

    return "\n".join(
        [
            "Halo, saya mau checkout pesanan.",
            f"Order: {order.order_number or '-'}",
            f"Order ID: {order.id}",
            "",
            "Item:",
            *lines,
            "",
            f"Subtotal: {format_idr(result.subtotal)}",
            f"Ongkir: {format_idr(result.shipping_cost)}",
            f"Total Akhir: {format_idr(result.grand_total)}",
            "",
            "Alamat Pengiriman:",
            f"{ship.recipient_name} ({ship.phone})",
            ship.street,
            f"{ship.city}, {ship.province}",
            "",
            "Mohon info cara pembayaran (transfer). Terima kasih.",
        ]
    )


def build_handoff_url(result: CheckoutResult, phone_number: str) -> str:
    """wa.me link with the hand-off message prefilled."""
    return f"https://wa.me/{phone_number}?text={quote(build_handoff_message(result), safe='')}"
