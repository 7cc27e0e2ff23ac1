# app/services/cart_service.py
import logging
import math
import uuid
from typing import Any

from supabase import Client

from app.core.errors import InsufficientStock, NotFoundError, OutOfStock
from app.models.cart import Cart
from app.models.product import to_stock
from app.repositories.cart_repo import CartRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.cart import CartItemRead, CartSnapshot
from app.services import catalog_service

logger = logging.getLogger(__name__)


def requested_quantity(qty: Any) -> int:
    """Floor to an int and clamp to >= 1; non-numeric input means 1."""
    try:
        num = float(qty)
    except (TypeError, ValueError):
        return 1
    if not math.isfinite(num):
        return 1
    return max(1, math.floor(num))


class CartService:
    """
    Business logic for cart operations.

    Responsibilities:
      - keep one `active` cart per user (created lazily)
      - enforce tracked stock on add-to-cart
      - capture unit_price from the live product price
      - compute line totals and cart totals

    Known limitation: ensure_active_cart is read-then-insert over two round
    trips, so two concurrent first calls for one user can create two active
    carts.
    """

    def __init__(self, cart_repo: CartRepository, product_repo: ProductRepository):
        self.cart_repo = cart_repo
        self.product_repo = product_repo

    # ---- public operations ----

    def ensure_active_cart(self, client: Client, user_id: uuid.UUID) -> Cart:
        """
        Return the user's active cart, creating it when none exists.
        """
        existing = self.cart_repo.get_active_cart(client, user_id)
        if existing:
            return existing

        cart = self.cart_repo.create_cart(client, user_id)
        logger.info("Created active cart %s for user %s", cart.id, user_id)
        return cart

    def get_cart_items(self, client: Client, user_id: uuid.UUID) -> CartSnapshot:
        """
        Return full cart snapshot:
          - active cart
          - line items joined with minimal product info
          - total_qty (sum of qty)
          - total_amount (sum of qty * unit_price)
        """
        cart = self.ensure_active_cart(client, user_id)
        items = self.cart_repo.list_items(client, cart.id)

        item_reads: list[CartItemRead] = []
        total_qty = 0
        total_amount = 0.0

        for it in items:
            line_total = it.line_total
            total_qty += it.qty
            total_amount += line_total

            item_reads.append(
                CartItemRead(
                    id=it.id,
                    product_id=it.resolved_product_id,
                    product=it.product,
                    qty=it.qty,
                    unit_price=it.unit_price,
                    line_total=line_total,
                )
            )

        return CartSnapshot(
            cart=cart,
            items=item_reads,
            total_qty=total_qty,
            total_amount=total_amount,
        )

    def add_to_cart(
        self,
        client: Client,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
        qty: Any = 1,
    ) -> CartSnapshot:
        """
        Add a product to the user's active cart.

        Rules:
          - requested qty is floored and clamped to >= 1
          - tracked stock <= 0 => OutOfStock
          - existing qty + requested > tracked stock => InsufficientStock
          - an existing line is bumped and its unit_price is refreshed to
            the current product price (the whole line is repriced)
          - otherwise a new line is inserted at the current price
          - the price is read like the catalog grid reads it ("Rp 350.000"
            is 350, text without digits is 0)
        """
        cart = self.ensure_active_cart(client, user_id)
        existing = self.cart_repo.get_item(client, cart.id, product_id)

        product = self.product_repo.get_for_cart(client, product_id)
        if product is None:
            raise NotFoundError("Produk tidak ditemukan.")

        unit_price = catalog_service.price_or_zero(product)
        requested = requested_quantity(qty)
        existing_qty = to_stock(existing.qty) if existing else 0

        if product.track_stock:
            stock = product.stock_qty
            if stock <= 0:
                raise OutOfStock()
            if existing_qty + requested > stock:
                raise InsufficientStock(remaining=stock)

        if existing:
            self.cart_repo.update_item(
                client,
                existing.id,
                qty=existing.qty + requested,
                unit_price=unit_price,
            )
        else:
            self.cart_repo.create_item(
                client,
                cart_id=cart.id,
                product_id=product_id,
                qty=requested,
                unit_price=unit_price,
            )

        return self.get_cart_items(client, user_id)

    def remove_cart_item(
        self,
        client: Client,
        user_id: uuid.UUID,
        cart_item_id: uuid.UUID,
    ) -> CartSnapshot:
        """
        Delete one line item and return the refreshed snapshot.

        The line is deleted by id; ownership is not re-checked beyond
        making sure the user has an active cart.
        """
        self.ensure_active_cart(client, user_id)
        self.cart_repo.delete_item(client, cart_item_id)
        return self.get_cart_items(client, user_id)
