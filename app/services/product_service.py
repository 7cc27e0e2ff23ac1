# app/services/product_service.py
import uuid

from supabase import Client

from app.core.errors import NotFoundError
from app.models.product import Product
from app.repositories.product_repo import ProductRepository
from app.schemas.product import CatalogQuery, CompareTable, ProductCard, ProductDetail
from app.services import catalog_service

RELATED_LIMIT = 6


class ProductService:
    """
    Storefront reads for products.

    Responsibilities:
      - fetch the visible catalog once and run the in-memory filters on it
      - product detail by slug (hidden products are "not found")
      - related products, wishlist products, compare table
    """

    def __init__(self, repo: ProductRepository):
        self.repo = repo

    # ----- Catalog -----

    def list_catalog(self, client: Client, query: CatalogQuery | None = None) -> list[ProductCard]:
        products = self.repo.list_visible(client)
        if query is not None:
            products = catalog_service.apply_filters(products, query)
        return [catalog_service.to_card(p) for p in products]

    def color_options(self, client: Client) -> list[str]:
        return catalog_service.color_options(self.repo.list_visible(client))

    def get_by_slug(self, client: Client, slug: str) -> Product:
        product = self.repo.get_visible_by_slug(client, slug.strip())
        if not product:
            raise NotFoundError("Produk tidak ditemukan.")
        return product

    def get_detail(self, client: Client, slug: str) -> ProductDetail:
        return catalog_service.to_detail(self.get_by_slug(client, slug))

    def related(self, client: Client, slug: str, limit: int = RELATED_LIMIT) -> list[ProductCard]:
        product = self.get_by_slug(client, slug)
        return [
            catalog_service.to_card(p)
            for p in self.repo.list_related(client, product.id, limit=limit)
        ]

    # ----- Selections -----

    def list_by_ids(self, client: Client, ids: list[str]) -> list[ProductCard]:
        """Visible products for a wishlist, in wishlist order."""
        valid = [i for i in ids if _is_uuid(i)]
        products = self.repo.list_visible_by_ids(client, valid)
        return [catalog_service.to_card(p) for p in catalog_service.order_like(products, valid)]

    def compare(self, client: Client, ids: list[str]) -> CompareTable:
        return catalog_service.compare_table(self.repo.list_visible(client), ids)


def _is_uuid(value: str) -> bool:
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True
