# app/routers/admin.py
import uuid
from datetime import datetime

from fastapi import (
    APIRouter,
    Depends,
    File,
    HTTPException,
    UploadFile,
    status,
)
from supabase import Client

from app.core.auth import require_admin
from app.core.config import get_settings
from app.core.supabase_client import get_supabase
from app.models.order import Order
from app.models.product import Product, ProductImage
from app.models.setting import SiteSetting
from app.models.shipping import ShippingRate
from app.repositories.order_repo import OrderRepository
from app.repositories.product_repo import ProductRepository
from app.repositories.setting_repo import SiteSettingRepository
from app.repositories.shipping_repo import ShippingRepository
from app.schemas.order import OrderStats, OrderStatusUpdate
from app.schemas.product import (
    ProductActiveUpdate,
    ProductImageCreate,
    ProductImageUpdate,
    ProductSave,
    StockStats,
)
from app.schemas.shipping import ShippingRateSave, SiteSettingSave
from app.services.admin_service import AdminService
from app.services.order_service import OrderService
from app.services.shipping_service import ShippingService

settings = get_settings()

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
)

service = AdminService(ProductRepository(), SiteSettingRepository())
order_service = OrderService(OrderRepository())
shipping_service = ShippingService(ShippingRepository())


# -------- Products --------


@router.get("/products", response_model=list[Product])
def list_products(client: Client = Depends(get_supabase)):
    """
    All products, hidden ones included, ordered by title.
    """
    return service.list_products(client)


@router.post("/products", response_model=dict[str, uuid.UUID])
def save_product(payload: ProductSave, client: Client = Depends(get_supabase)):
    """
    Create or update a product (upsert by id).
    """
    return {"id": service.save_product(client, payload)}


@router.patch("/products/{product_id}/active", status_code=status.HTTP_204_NO_CONTENT)
def set_product_active(
    product_id: uuid.UUID,
    payload: ProductActiveUpdate,
    client: Client = Depends(get_supabase),
):
    """
    Show or hide a product in the storefront.
    """
    service.set_product_active(client, product_id, payload.is_active)
    return None


# -------- Product images --------


@router.get("/products/{product_id}/images", response_model=list[ProductImage])
def list_product_images(product_id: uuid.UUID, client: Client = Depends(get_supabase)):
    return service.list_images(client, product_id)


@router.post(
    "/products/{product_id}/images",
    response_model=ProductImage,
    status_code=status.HTTP_201_CREATED,
)
def add_product_image(
    product_id: uuid.UUID,
    payload: ProductImageCreate,
    client: Client = Depends(get_supabase),
):
    """
    Add a gallery image by URL.
    """
    return service.add_image(client, product_id, payload)


@router.post(
    "/products/{product_id}/images/upload",
    response_model=list[ProductImage],
    summary="Upload one or more gallery images for a product",
)
def upload_product_images(
    product_id: uuid.UUID,
    files: list[UploadFile] = File(...),
    client: Client = Depends(get_supabase),
):
    """
    Upload one or more gallery images to Storage.

    - Accepts JPEG, PNG, WEBP.
    - New images are appended at the end of the gallery (sort_order).
    """
    if not files:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No files uploaded",
        )

    payload: list[tuple[str, bytes]] = []
    for f in files:
        if not f.content_type:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Missing content-type for one of the uploaded files",
            )
        payload.append((f.content_type, f.file.read()))

    return service.upload_images(client, product_id, payload)


@router.patch("/images/{image_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_product_image(
    image_id: uuid.UUID,
    payload: ProductImageUpdate,
    client: Client = Depends(get_supabase),
):
    service.update_image(client, image_id, payload)
    return None


@router.delete("/products/{product_id}/images/{image_id}")
def delete_product_image(
    product_id: uuid.UUID,
    image_id: uuid.UUID,
    client: Client = Depends(get_supabase),
) -> dict[str, str]:
    """
    Delete a gallery image; the Storage object goes too when it is ours.
    """
    service.delete_image(client, product_id, image_id)
    return {"message": "Gallery image deleted successfully"}


# -------- Shipping rates --------


@router.get("/shipping-rates", response_model=list[ShippingRate])
def list_shipping_rates(client: Client = Depends(get_supabase)):
    return shipping_service.list_rates(client)


@router.post("/shipping-rates", response_model=ShippingRate)
def save_shipping_rate(payload: ShippingRateSave, client: Client = Depends(get_supabase)):
    return shipping_service.save_rate(client, payload)


@router.delete("/shipping-rates/{rate_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_shipping_rate(rate_id: uuid.UUID, client: Client = Depends(get_supabase)):
    shipping_service.delete_rate(client, rate_id)
    return None


# -------- Site settings --------


@router.get("/settings", response_model=list[SiteSetting])
def list_settings(client: Client = Depends(get_supabase)):
    return service.list_settings(client)


@router.post("/settings", response_model=SiteSetting)
def save_setting(payload: SiteSettingSave, client: Client = Depends(get_supabase)):
    return service.save_setting(client, payload.key, payload.value)


@router.delete("/settings/{key}", status_code=status.HTTP_204_NO_CONTENT)
def delete_setting(key: str, client: Client = Depends(get_supabase)):
    service.delete_setting(client, key)
    return None


# -------- Orders --------


@router.get("/orders", response_model=list[Order])
def list_all_orders(client: Client = Depends(get_supabase)):
    """
    All orders, newest first.
    """
    return order_service.list_all_orders(client)


@router.patch("/orders/{order_id}/status", response_model=Order)
def update_order_status(
    order_id: uuid.UUID,
    payload: OrderStatusUpdate,
    client: Client = Depends(get_supabase),
):
    """
    Move an order to any of:
    pending, processing, paid, shipped, completed, cancelled.
    """
    return order_service.update_status(client, order_id, payload.status)


# -------- Stats --------


@router.get("/stats/orders", response_model=OrderStats)
def get_order_stats(
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    client: Client = Depends(get_supabase),
):
    """
    Order counts per status and revenue for an optional date range.
    """
    return order_service.stats(client, date_from, date_to)


@router.get("/stats/stock", response_model=StockStats)
def get_stock_stats(
    threshold: int | None = None,
    client: Client = Depends(get_supabase),
):
    """
    Out-of-stock and low-stock products (tracked stock only).

    `threshold` defaults to LOW_STOCK_THRESHOLD.
    """
    limit = settings.LOW_STOCK_THRESHOLD if threshold is None else max(0, threshold)
    return service.stock_stats(client, limit)
