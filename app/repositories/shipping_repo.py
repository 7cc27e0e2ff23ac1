# app/repositories/shipping_repo.py
import uuid
from typing import Any

from supabase import Client

from app.core.supabase_client import run_query
from app.models.shipping import ShippingRate


class ShippingRepository:
    """
    Data access layer for `shipping_rates`.

    Lookups only ever consider rows with is_active = true.
    """

    def list_active_provinces(self, client: Client) -> list[Any]:
        rows = run_query(
            client.table("shipping_rates")
            .select("province")
            .eq("is_active", True)
            .order("province"),
            "shipping_rates.select_provinces",
        )
        return [r.get("province") for r in rows]

    def list_active_cities(self, client: Client, province: str) -> list[Any]:
        rows = run_query(
            client.table("shipping_rates")
            .select("city")
            .eq("is_active", True)
            .eq("province", province)
            .order("city"),
            "shipping_rates.select_cities",
        )
        return [r.get("city") for r in rows]

    def find_active_rate(
        self, client: Client, province: str, city: str
    ) -> ShippingRate | None:
        rows = run_query(
            client.table("shipping_rates")
            .select("province, city, cost")
            .eq("is_active", True)
            .eq("province", province)
            .eq("city", city)
            .limit(1),
            "shipping_rates.select_cost",
        )
        return ShippingRate.model_validate(rows[0]) if rows else None

    # ---- Admin ----

    def list_all(self, client: Client) -> list[ShippingRate]:
        rows = run_query(
            client.table("shipping_rates")
            .select("id, province, city, cost, is_active, updated_at")
            .order("province")
            .order("city"),
            "shipping_rates.select_all",
        )
        return [ShippingRate.model_validate(r) for r in rows]

    def upsert(self, client: Client, payload: dict[str, Any]) -> ShippingRate:
        rows = run_query(
            client.table("shipping_rates").upsert(payload),
            "shipping_rates.upsert",
        )
        return ShippingRate.model_validate(rows[0])

    def delete(self, client: Client, rate_id: uuid.UUID) -> None:
        run_query(
            client.table("shipping_rates").delete().eq("id", str(rate_id)),
            "shipping_rates.delete",
        )
