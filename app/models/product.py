# app/models/product.py
import math
import uuid
from datetime import datetime
from typing import Any

from pydantic import field_validator
from sqlmodel import SQLModel, Field

# Storefront shows "Menipis" at or below this many units
LOW_STOCK_LABEL_AT = 5


def to_stock(value: Any) -> int:
    """Floor to a non-negative int; anything non-numeric counts as 0."""
    try:
        num = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(num):
        return 0
    return max(0, math.floor(num))


class ProductImage(SQLModel):
    """
    Gallery image for a product.

    Matches table `product_images`:
      - id, product_id, image_url, sort_order, created_at
    """

    id: uuid.UUID | None = None
    product_id: uuid.UUID | None = None

    image_url: str = Field(
        description="Public URL (usually Supabase Storage)",
    )

    sort_order: int = Field(
        default=0,
        description="Ordering index within the gallery",
    )

    created_at: datetime | None = None

    @field_validator("sort_order", mode="before")
    @classmethod
    def _default_sort_order(cls, v: Any) -> Any:
        return 0 if v is None else v


class Product(SQLModel):
    """
    Product catalog entry.

    Matches table `products`:
      - id, slug, title, subtitle, description, detail_description, badge,
        price, color, battery, weight, latency, track_stock, stock_qty,
        is_active, embedded product_images

    `price` is kept raw: the admin console stores numbers but older rows
    carry formatted strings ("Rp 350.000"), parsed by the catalog engine.
    """

    id: uuid.UUID
    slug: str
    title: str

    subtitle: str | None = None
    description: str | None = None
    detail_description: str | None = None
    badge: str | None = None

    price: float | str | None = None

    color: str | None = None
    battery: str | None = None
    weight: str | None = None
    latency: str | None = None

    # NULL is kept: the storefront reads it as untracked, the admin
    # stock report as tracked
    track_stock: bool | None = Field(
        default=False,
        description="Whether stock_qty is enforced on add-to-cart",
    )
    stock_qty: int = Field(
        default=0,
        ge=0,
        description="Units in stock; meaningful only when track_stock",
    )

    # NULL means active
    is_active: bool | None = None

    # embedded `product_images(...)`, ordered by sort_order
    product_images: list[ProductImage] = Field(default_factory=list)

    @field_validator("track_stock", mode="before")
    @classmethod
    def _coerce_track_stock(cls, v: Any) -> bool | None:
        return None if v is None else bool(v)

    @field_validator("stock_qty", mode="before")
    @classmethod
    def _coerce_stock_qty(cls, v: Any) -> int:
        return to_stock(v)

    @field_validator("product_images", mode="before")
    @classmethod
    def _sort_images(cls, v: Any) -> Any:
        if not isinstance(v, list):
            return []
        return sorted(
            v,
            key=lambda img: (img.get("sort_order") or 0) if isinstance(img, dict) else 0,
        )

    @property
    def is_visible(self) -> bool:
        return self.is_active is None or self.is_active is True

    @property
    def thumbnail_url(self) -> str | None:
        if not self.product_images:
            return None
        return self.product_images[0].image_url

    @property
    def stock_label(self) -> str:
        """Storefront stock pill: Ready / Habis / Menipis (n) / Stok n."""
        if not self.track_stock:
            return "Ready"
        if self.stock_qty <= 0:
            return "Habis"
        if self.stock_qty <= LOW_STOCK_LABEL_AT:
            return f"Menipis ({self.stock_qty})"
        return f"Stok {self.stock_qty}"
