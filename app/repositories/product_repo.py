# app/repositories/product_repo.py
import uuid
from typing import Any

from supabase import Client

from app.core.supabase_client import run_query
from app.models.product import Product, ProductImage

# Storefront listing: everything the catalog filters and cards need
CATALOG_COLUMNS = (
    "id, slug, title, subtitle, description, badge, price, color, battery, "
    "weight, latency, track_stock, stock_qty, is_active, "
    "product_images(image_url, sort_order)"
)

DETAIL_COLUMNS = (
    "id, slug, title, subtitle, detail_description, badge, price, color, "
    "battery, weight, latency, track_stock, stock_qty, is_active, "
    "product_images(image_url, sort_order)"
)

CARD_COLUMNS = (
    "id, slug, title, subtitle, badge, price, color, battery, weight, latency, "
    "is_active, product_images(image_url, sort_order)"
)

ADMIN_COLUMNS = "id, slug, title, subtitle, badge, price, stock_qty, track_stock, is_active"

# Live price + stock fields read on add-to-cart
CART_COLUMNS = "id, slug, title, price, track_stock, stock_qty"

# is_active NULL counts as active
VISIBLE = "is_active.is.null,is_active.eq.true"


class ProductRepository:
    """
    Data access layer for `products` & `product_images`.

    - Pure Supabase calls; rows are mapped into typed records here.
    - No FastAPI, no business logic.
    """

    # ----- Storefront reads -----

    def get_for_cart(self, client: Client, product_id: uuid.UUID) -> Product | None:
        rows = run_query(
            client.table("products").select(CART_COLUMNS).eq("id", str(product_id)).limit(1),
            "products.select_for_cart",
        )
        return Product.model_validate(rows[0]) if rows else None

    def list_visible(self, client: Client) -> list[Product]:
        rows = run_query(
            client.table("products").select(CATALOG_COLUMNS).or_(VISIBLE),
            "products.select_catalog",
        )
        return [Product.model_validate(r) for r in rows]

    def get_visible_by_slug(self, client: Client, slug: str) -> Product | None:
        rows = run_query(
            client.table("products")
            .select(DETAIL_COLUMNS)
            .eq("slug", slug)
            .or_(VISIBLE)
            .limit(1),
            "products.select_by_slug",
        )
        return Product.model_validate(rows[0]) if rows else None

    def list_related(
        self, client: Client, product_id: uuid.UUID, limit: int = 6
    ) -> list[Product]:
        rows = run_query(
            client.table("products")
            .select(CARD_COLUMNS)
            .neq("id", str(product_id))
            .or_(VISIBLE)
            .limit(limit),
            "products.select_related",
        )
        return [Product.model_validate(r) for r in rows]

    def list_visible_by_ids(self, client: Client, ids: list[str]) -> list[Product]:
        if not ids:
            return []
        rows = run_query(
            client.table("products").select(CARD_COLUMNS).in_("id", ids).or_(VISIBLE),
            "products.select_by_ids",
        )
        return [Product.model_validate(r) for r in rows]

    # ----- Admin -----

    def list_all(self, client: Client) -> list[Product]:
        rows = run_query(
            client.table("products").select(ADMIN_COLUMNS).order("title"),
            "products.select_admin",
        )
        return [Product.model_validate(r) for r in rows]

    def upsert(self, client: Client, payload: dict[str, Any]) -> uuid.UUID:
        rows = run_query(client.table("products").upsert(payload), "products.upsert")
        return uuid.UUID(str(rows[0]["id"]))

    def set_active(self, client: Client, product_id: uuid.UUID, is_active: bool) -> None:
        run_query(
            client.table("products")
            .update({"is_active": is_active})
            .eq("id", str(product_id)),
            "products.set_active",
        )

    # ----- Product images -----

    def list_images(self, client: Client, product_id: uuid.UUID) -> list[ProductImage]:
        rows = run_query(
            client.table("product_images")
            .select("id, product_id, image_url, sort_order, created_at")
            .eq("product_id", str(product_id))
            .order("sort_order")
            .order("created_at"),
            "product_images.select",
        )
        return [ProductImage.model_validate(r) for r in rows]

    def create_image(
        self, client: Client, product_id: uuid.UUID, image_url: str, sort_order: int = 0
    ) -> ProductImage:
        rows = run_query(
            client.table("product_images").insert(
                {
                    "product_id": str(product_id),
                    "image_url": image_url,
                    "sort_order": sort_order,
                }
            ),
            "product_images.insert",
        )
        return ProductImage.model_validate(rows[0])

    def update_image(
        self, client: Client, image_id: uuid.UUID, patch: dict[str, Any]
    ) -> None:
        run_query(
            client.table("product_images").update(patch).eq("id", str(image_id)),
            "product_images.update",
        )

    def delete_image(self, client: Client, image_id: uuid.UUID) -> None:
        run_query(
            client.table("product_images").delete().eq("id", str(image_id)),
            "product_images.delete",
        )
