# app/routers/shipping.py
from fastapi import APIRouter, Depends
from supabase import Client

from app.core.supabase_client import get_supabase
from app.repositories.shipping_repo import ShippingRepository
from app.schemas.shipping import ShippingCost
from app.services.shipping_service import ShippingService

router = APIRouter(prefix="/shipping", tags=["Shipping"])

repo = ShippingRepository()
service = ShippingService(repo)


@router.get("/provinces", response_model=list[str])
def list_provinces(client: Client = Depends(get_supabase)):
    """
    Provinces that have at least one active rate, sorted.
    """
    return service.list_provinces(client)


@router.get("/cities", response_model=list[str])
def list_cities(province: str = "", client: Client = Depends(get_supabase)):
    """
    Cities with an active rate in `province`. Blank province => [].
    """
    return service.list_cities(client, province)


@router.get("/cost", response_model=ShippingCost)
def get_cost(
    province: str = "",
    city: str = "",
    client: Client = Depends(get_supabase),
):
    """
    Flat shipping cost for a destination; 0 when no active rate matches.
    """
    return ShippingCost(
        province=province.strip(),
        city=city.strip(),
        cost=service.get_cost(client, province, city),
    )
