# app/services/admin_service.py
import logging
import uuid
from typing import Iterable

from supabase import Client

from app.core.errors import ValidationError
from app.core.storage_utils import delete_public_url, generate_filename, upload_to_storage
from app.models.product import Product, ProductImage
from app.models.setting import SiteSetting
from app.repositories.product_repo import ProductRepository
from app.repositories.setting_repo import SiteSettingRepository
from app.schemas.product import (
    ProductImageCreate,
    ProductImageUpdate,
    ProductSave,
    StockStats,
)

logger = logging.getLogger(__name__)

# --- Image config ---

MAX_IMAGE_BYTES = 5 * 1024 * 1024  # 5MB per image

ALLOWED_IMAGE_CONTENT_TYPES: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}


def compute_stock_stats(products: Iterable[Product], threshold: int) -> StockStats:
    """
    Stock report over products whose stock is tracked. Only an explicit
    track_stock=False opts a product out; NULL counts as tracked.

    out_of_stock: qty <= 0
    low_stock:    0 < qty <= threshold, lowest first
    """
    trackable = [p for p in products if p.track_stock is not False]
    out_of_stock = [p for p in trackable if p.stock_qty <= 0]
    low_stock = sorted(
        (p for p in trackable if 0 < p.stock_qty <= threshold),
        key=lambda p: p.stock_qty,
    )
    return StockStats(
        threshold=threshold,
        total_trackable=len(trackable),
        out_of_stock=out_of_stock,
        low_stock=low_stock,
    )


class AdminService:
    """
    Business logic behind the admin console.

    Responsibilities:
      - product upsert with title/slug checks, active toggle
      - gallery images (by URL or uploaded to Supabase Storage)
      - site settings key/value rows
      - stock report
    Access is enforced at the router via require_admin.
    """

    def __init__(self, product_repo: ProductRepository, setting_repo: SiteSettingRepository):
        self.product_repo = product_repo
        self.setting_repo = setting_repo

    # ----- Products -----

    def list_products(self, client: Client) -> list[Product]:
        return self.product_repo.list_all(client)

    def save_product(self, client: Client, payload: ProductSave) -> uuid.UUID:
        """
        Create or update a product (upsert by id).

        - title and slug are required
        - untracked products always store stock_qty = 0
        """
        if not payload.title or not payload.slug:
            raise ValidationError("Title dan Slug wajib diisi.")

        data = payload.model_dump(exclude_none=True)
        if "id" in data:
            data["id"] = str(data["id"])
        if not payload.track_stock:
            data["stock_qty"] = 0

        product_id = self.product_repo.upsert(client, data)
        logger.info("Saved product %s (%s)", product_id, payload.slug)
        return product_id

    def set_product_active(self, client: Client, product_id: uuid.UUID, is_active: bool) -> None:
        self.product_repo.set_active(client, product_id, is_active)

    def stock_stats(self, client: Client, threshold: int) -> StockStats:
        return compute_stock_stats(self.product_repo.list_all(client), threshold)

    # ----- Gallery images -----

    @staticmethod
    def _validate_and_get_ext(content_type: str, file_bytes: bytes) -> str:
        if content_type not in ALLOWED_IMAGE_CONTENT_TYPES:
            raise ValidationError("Unsupported image type. Allowed: JPEG, PNG, WEBP.")

        if len(file_bytes) > MAX_IMAGE_BYTES:
            raise ValidationError("Image too large (max 5MB).")

        return ALLOWED_IMAGE_CONTENT_TYPES[content_type]

    def list_images(self, client: Client, product_id: uuid.UUID) -> list[ProductImage]:
        return self.product_repo.list_images(client, product_id)

    def add_image(
        self, client: Client, product_id: uuid.UUID, payload: ProductImageCreate
    ) -> ProductImage:
        return self.product_repo.create_image(
            client, product_id, payload.image_url, payload.sort_order
        )

    def upload_images(
        self,
        client: Client,
        product_id: uuid.UUID,
        files: Iterable[tuple[str, bytes]],
    ) -> list[ProductImage]:
        """
        Upload one or more gallery images and append them to the gallery.

        Args:
            files: iterable of (content_type, file_bytes)

        Path pattern:
            products/<product_id>/gallery/<uuid>.<ext>
        """
        next_order = len(self.product_repo.list_images(client, product_id))

        new_images: list[ProductImage] = []
        for idx, (content_type, file_bytes) in enumerate(files):
            ext = self._validate_and_get_ext(content_type, file_bytes)
            path = f"products/{product_id}/gallery/{generate_filename(ext)}"
            url = upload_to_storage(client, path, file_bytes, content_type)
            new_images.append(
                self.product_repo.create_image(client, product_id, url, next_order + idx)
            )

        return new_images

    def update_image(
        self, client: Client, image_id: uuid.UUID, payload: ProductImageUpdate
    ) -> None:
        patch = payload.model_dump(exclude_none=True)
        if not patch:
            raise ValidationError("Tidak ada perubahan.")
        self.product_repo.update_image(client, image_id, patch)

    def delete_image(self, client: Client, product_id: uuid.UUID, image_id: uuid.UUID) -> None:
        """
        Delete a gallery image row, and its Storage object when it lives in
        our bucket.
        """
        images = self.product_repo.list_images(client, product_id)
        image = next((img for img in images if img.id == image_id), None)

        self.product_repo.delete_image(client, image_id)
        if image is not None:
            delete_public_url(client, image.image_url)

    # ----- Site settings -----

    def list_settings(self, client: Client) -> list[SiteSetting]:
        return self.setting_repo.list(client)

    def save_setting(self, client: Client, key: str, value: str | None) -> SiteSetting:
        key = (key or "").strip()
        if not key:
            raise ValidationError("Key wajib diisi.")
        return self.setting_repo.upsert(client, key, value)

    def delete_setting(self, client: Client, key: str) -> None:
        self.setting_repo.delete(client, key)
