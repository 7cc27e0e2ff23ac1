# app/routers/products.py
from fastapi import APIRouter, Depends, Query, Request, Response
from supabase import Client

from app.core.config import get_settings
from app.core.cookie_storage import CookieStorage
from app.core.supabase_client import get_supabase
from app.repositories.product_repo import ProductRepository
from app.schemas.product import (
    CatalogQuery,
    CompareTable,
    ProductCard,
    ProductDetail,
    SortMode,
)
from app.services.product_service import ProductService
from app.services.selection_service import COMPARE, SelectionSet

settings = get_settings()

router = APIRouter(prefix="/products", tags=["Products"])

repo = ProductRepository()
service = ProductService(repo)


# -------- Public endpoints --------


@router.get("", response_model=list[ProductCard])
def list_products(
    client: Client = Depends(get_supabase),
    q: str = "",
    use_case: str = "all",
    color: str = "",
    sort: SortMode = "featured",
):
    """
    Storefront catalog.

    - Only visible products (is_active true or null).
    - Filters run in order: search `q`, `use_case`, `color`, then `sort`.
    """
    query = CatalogQuery(q=q, use_case=use_case, color=color, sort=sort)
    return service.list_catalog(client, query)


@router.get("/colors", response_model=list[str])
def list_colors(client: Client = Depends(get_supabase)):
    """
    Distinct colours for the colour filter dropdown.
    """
    return service.color_options(client)


@router.get("/compare", response_model=CompareTable)
def compare_products(
    request: Request,
    response: Response,
    ids: list[str] | None = Query(default=None),
    client: Client = Depends(get_supabase),
):
    """
    Side-by-side comparison table.

    Uses `ids` when given, otherwise the visitor's compare cookie.
    """
    if ids is None:
        ids = SelectionSet(
            COMPARE, CookieStorage(request, response), settings.COMPARE_LIMIT
        ).items()
    return service.compare(client, ids)


@router.get("/{slug}", response_model=ProductDetail)
def get_product(slug: str, client: Client = Depends(get_supabase)):
    """
    Product detail by slug. Hidden products are reported as not found.
    """
    return service.get_detail(client, slug)


@router.get("/{slug}/related", response_model=list[ProductCard])
def list_related(
    slug: str,
    client: Client = Depends(get_supabase),
    limit: int = Query(default=6, ge=1, le=24),
):
    """
    Other visible products to show under the detail page.
    """
    return service.related(client, slug, limit=limit)

