# app/schemas/product.py
import uuid
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from app.models.product import Product

SortMode = Literal["featured", "titleAsc", "priceAsc", "priceDesc"]


class CatalogQuery(SQLModel):
    """
    Storefront filter state. Filters compose with AND, then sort.
    """

    q: str = ""
    use_case: str = "all"
    color: str = ""
    sort: SortMode = "featured"


class PromoPrice(SQLModel):
    """
    Display-only discount derived from the badge text.
    """

    percent: int
    price: float
    old_price: int


class Highlight(SQLModel):
    label: str
    value: str


class ProductCard(SQLModel):
    """
    Product as listed on the storefront grid.
    """

    product: Product
    thumbnail_url: str | None = None
    stock_label: str
    promo: PromoPrice | None = None


class ProductDetail(ProductCard):
    """
    Product detail page payload.
    """

    highlights: list[Highlight] = Field(default_factory=list)


class CompareTable(SQLModel):
    """
    Side-by-side specification table for the compare set.

    `rows` pairs a label with one value per selected product.
    """

    products: list[Product] = Field(default_factory=list)
    rows: list[tuple[str, list[str]]] = Field(default_factory=list)
    hint: str | None = None


class ProductSave(SQLModel):
    """
    Admin payload for creating or updating a product (upsert by id).

    Title and slug are checked by the admin service so the message
    matches the console's wording.
    """

    model_config = ConfigDict(extra="forbid")

    id: uuid.UUID | None = None
    title: str = ""
    slug: str = ""
    subtitle: str = ""
    badge: str = ""
    price: float = 0
    track_stock: bool = True
    stock_qty: int = Field(default=0, ge=0)
    is_active: bool | None = None

    @field_validator("title", "slug", "subtitle", "badge", mode="before")
    @classmethod
    def strip(cls, v: str | None) -> str:
        return str(v or "").strip()


class ProductImageCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    image_url: str
    sort_order: int = Field(default=0, ge=0)

    @field_validator("image_url")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("image_url cannot be empty")
        return v


class ProductImageUpdate(SQLModel):
    """
    Partial update payload for a gallery image.
    All fields are optional.
    """

    model_config = ConfigDict(extra="forbid")

    image_url: str | None = None
    sort_order: int | None = Field(default=None, ge=0)


class ProductActiveUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    is_active: bool


class StockStats(SQLModel):
    """
    Admin stock report over products with tracked stock.
    """

    threshold: int
    total_trackable: int
    out_of_stock: list[Product] = Field(default_factory=list)
    low_stock: list[Product] = Field(default_factory=list)
