# app/repositories/order_repo.py
import uuid
from typing import Any

from supabase import Client

from app.core.supabase_client import run_query
from app.models.order import Order, OrderItem

ORDER_COLUMNS = (
    "id, user_id, order_number, status, subtotal_amount, shipping_cost, "
    "total_amount, shipping_province, shipping_city, shipping_address, created_at"
)


class OrderRepository:
    """
    Data access layer for `orders` and `order_items`.

    NOTE:
      - PostgREST gives no multi-statement transaction; order creation is
        sequenced by the checkout service.
    """

    # ---- Orders ----

    def list_for_user(self, client: Client, user_id: uuid.UUID) -> list[Order]:
        rows = run_query(
            client.table("orders")
            .select(ORDER_COLUMNS)
            .eq("user_id", str(user_id))
            .order("created_at", desc=True),
            "orders.select_mine",
        )
        return [Order.model_validate(r) for r in rows]

    def list_all(self, client: Client) -> list[Order]:
        rows = run_query(
            client.table("orders").select(ORDER_COLUMNS).order("created_at", desc=True),
            "orders.select_all",
        )
        return [Order.model_validate(r) for r in rows]

    def get_by_id(self, client: Client, order_id: uuid.UUID) -> Order | None:
        rows = run_query(
            client.table("orders").select(ORDER_COLUMNS).eq("id", str(order_id)).limit(1),
            "orders.select_one",
        )
        return Order.model_validate(rows[0]) if rows else None

    def create_order(self, client: Client, payload: dict[str, Any]) -> Order:
        rows = run_query(client.table("orders").insert(payload), "orders.insert")
        return Order.model_validate(rows[0])

    def update_status(self, client: Client, order_id: uuid.UUID, status: str) -> None:
        run_query(
            client.table("orders").update({"status": status}).eq("id", str(order_id)),
            "orders.update_status",
        )

    # ---- Order items ----

    def create_items(
        self, client: Client, items: list[dict[str, Any]]
    ) -> list[OrderItem]:
        rows = run_query(client.table("order_items").insert(items), "order_items.insert")
        return [OrderItem.model_validate(r) for r in rows]

    def list_items(self, client: Client, order_id: uuid.UUID) -> list[OrderItem]:
        rows = run_query(
            client.table("order_items")
            .select("id, order_id, product_id, qty, unit_price")
            .eq("order_id", str(order_id)),
            "order_items.select",
        )
        return [OrderItem.model_validate(r) for r in rows]
