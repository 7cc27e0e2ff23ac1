# app/routers/selections.py
from fastapi import APIRouter, Depends, Request, Response
from supabase import Client

from app.core.config import get_settings
from app.core.cookie_storage import CookieStorage
from app.core.supabase_client import get_supabase
from app.repositories.product_repo import ProductRepository
from app.schemas.product import ProductCard
from app.schemas.user import SelectionRead, ToggleResult
from app.services.product_service import ProductService
from app.services.selection_service import SelectionSet, compare_set, wishlist

settings = get_settings()

router = APIRouter(prefix="/selections", tags=["Selections"])

product_service = ProductService(ProductRepository())


def get_wishlist(request: Request, response: Response) -> SelectionSet:
    return wishlist(CookieStorage(request, response))


def get_compare(request: Request, response: Response) -> SelectionSet:
    return compare_set(CookieStorage(request, response), settings.COMPARE_LIMIT)


# -------- Wishlist --------


@router.get("/wishlist", response_model=SelectionRead)
def read_wishlist(selection: SelectionSet = Depends(get_wishlist)):
    return selection.read()


@router.get("/wishlist/products", response_model=list[ProductCard])
def read_wishlist_products(
    selection: SelectionSet = Depends(get_wishlist),
    client: Client = Depends(get_supabase),
):
    """
    Visible products in the wishlist, in the order they were added.
    Ids of deleted or hidden products are skipped.
    """
    return product_service.list_by_ids(client, selection.items())


@router.post("/wishlist/{product_id}", response_model=ToggleResult)
def toggle_wishlist(product_id: str, selection: SelectionSet = Depends(get_wishlist)):
    """
    Add the product if absent, remove it if present.
    """
    return selection.toggle(product_id)


@router.delete("/wishlist", response_model=SelectionRead)
def clear_wishlist(selection: SelectionSet = Depends(get_wishlist)):
    selection.clear()
    return selection.read()


# -------- Compare --------


@router.get("/compare", response_model=SelectionRead)
def read_compare(selection: SelectionSet = Depends(get_compare)):
    return selection.read()


@router.post("/compare/{product_id}", response_model=ToggleResult)
def toggle_compare(product_id: str, selection: SelectionSet = Depends(get_compare)):
    """
    Toggle a product in the compare set.

    At the cap, adding returns full=true and leaves the set unchanged.
    """
    return selection.toggle(product_id)


@router.delete("/compare", response_model=SelectionRead)
def clear_compare(selection: SelectionSet = Depends(get_compare)):
    selection.clear()
    return selection.read()
