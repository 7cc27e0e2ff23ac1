# app/repositories/cart_repo.py
import uuid

from supabase import Client

from app.core.supabase_client import run_query
from app.models.cart import Cart, CartItem

# Line items joined with the minimal product info the cart drawer shows
ITEM_COLUMNS = "id, cart_id, product_id, qty, unit_price, product:products(id, slug, title, subtitle)"


class CartRepository:
    """
    Data access layer for `carts` and `cart_items`.

    NOTE:
      - Every call is its own PostgREST round trip; there is no
        transaction spanning several calls.
    """

    # ---- Carts ----

    def get_active_cart(self, client: Client, user_id: uuid.UUID) -> Cart | None:
        rows = run_query(
            client.table("carts")
            .select("*")
            .eq("user_id", str(user_id))
            .eq("status", "active")
            .limit(1),
            "carts.select_active",
        )
        return Cart.model_validate(rows[0]) if rows else None

    def create_cart(self, client: Client, user_id: uuid.UUID) -> Cart:
        rows = run_query(
            client.table("carts").insert({"user_id": str(user_id), "status": "active"}),
            "carts.insert",
        )
        return Cart.model_validate(rows[0])

    def mark_converted(self, client: Client, cart_id: uuid.UUID) -> None:
        run_query(
            client.table("carts").update({"status": "converted"}).eq("id", str(cart_id)),
            "carts.convert",
        )

    # ---- Cart items ----

    def list_items(self, client: Client, cart_id: uuid.UUID) -> list[CartItem]:
        rows = run_query(
            client.table("cart_items").select(ITEM_COLUMNS).eq("cart_id", str(cart_id)),
            "cart_items.select",
        )
        return [CartItem.model_validate(r) for r in rows]

    def get_item(
        self, client: Client, cart_id: uuid.UUID, product_id: uuid.UUID
    ) -> CartItem | None:
        rows = run_query(
            client.table("cart_items")
            .select("id, qty")
            .eq("cart_id", str(cart_id))
            .eq("product_id", str(product_id))
            .limit(1),
            "cart_items.select_one",
        )
        return CartItem.model_validate(rows[0]) if rows else None

    def create_item(
        self,
        client: Client,
        *,
        cart_id: uuid.UUID,
        product_id: uuid.UUID,
        qty: int,
        unit_price: float,
    ) -> None:
        run_query(
            client.table("cart_items").insert(
                {
                    "cart_id": str(cart_id),
                    "product_id": str(product_id),
                    "qty": qty,
                    "unit_price": unit_price,
                }
            ),
            "cart_items.insert",
        )

    def update_item(
        self, client: Client, item_id: uuid.UUID, *, qty: int, unit_price: float
    ) -> None:
        run_query(
            client.table("cart_items")
            .update({"qty": qty, "unit_price": unit_price})
            .eq("id", str(item_id)),
            "cart_items.update",
        )

    def delete_item(self, client: Client, item_id: uuid.UUID) -> None:
        run_query(
            client.table("cart_items").delete().eq("id", str(item_id)),
            "cart_items.delete",
        )

    def clear_cart(self, client: Client, cart_id: uuid.UUID) -> None:
        run_query(
            client.table("cart_items").delete().eq("cart_id", str(cart_id)),
            "cart_items.clear",
        )
