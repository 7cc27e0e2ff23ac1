import uuid
from datetime import datetime, timezone

import pytest

from app.core.errors import NotFoundError, ValidationError
from app.models.order import Order
from app.models.product import Product
from app.repositories.order_repo import OrderRepository
from app.repositories.product_repo import ProductRepository
from app.repositories.setting_repo import SiteSettingRepository
from app.schemas.product import ProductImageCreate, ProductImageUpdate, ProductSave
from app.services.admin_service import AdminService, compute_stock_stats
from app.services.order_service import OrderService, compute_order_stats
from tests.fake_supabase import BASE_URL


@pytest.fixture
def admin() -> AdminService:
    return AdminService(ProductRepository(), SiteSettingRepository())


@pytest.fixture
def orders() -> OrderService:
    return OrderService(OrderRepository())


def order(status, total=None, subtotal=None, created_at=None) -> Order:
    return Order(
        id=uuid.uuid4(),
        status=status,
        total_amount=total,
        subtotal_amount=subtotal,
        created_at=created_at,
    )


def product(title, track_stock=True, stock_qty=0) -> Product:
    return Product(
        id=uuid.uuid4(), slug=title.lower(), title=title, track_stock=track_stock, stock_qty=stock_qty
    )


# -------- Order stats --------


def test_order_stats_counts_and_revenue():
    stats = compute_order_stats(
        [
            order("pending", total=100),
            order("paid", total=200),
            order("shipped", total=None, subtotal=50),
            order("cancelled", total=999),
            order("completed", total=10),
        ]
    )

    assert stats.total_orders == 5
    assert stats.counts == {"pending": 1, "paid": 1, "shipped": 1, "cancelled": 1, "completed": 1}
    assert stats.all_revenue == 1359
    assert stats.paid_revenue == 260


def test_order_stats_date_range():
    jan = datetime(2024, 1, 15, tzinfo=timezone.utc)
    feb = datetime(2024, 2, 15, tzinfo=timezone.utc)
    mar = datetime(2024, 3, 15, tzinfo=timezone.utc)

    stats = compute_order_stats(
        [order("paid", 100, created_at=jan), order("paid", 200, created_at=feb), order("paid", 400, created_at=mar), order("paid", 1)],
        date_from=datetime(2024, 2, 1, tzinfo=timezone.utc),
        date_to=datetime(2024, 2, 28, tzinfo=timezone.utc),
    )

    assert stats.total_orders == 2
    assert stats.paid_revenue == 201


def test_update_status(db, orders):
    row = db.seed("orders", {"status": "pending", "total_amount": 10})[0]

    updated = orders.update_status(db, row["id"], "paid")

    assert updated.status == "paid"
    assert db.rows("orders", id=row["id"])[0]["status"] == "paid"


def test_update_status_rejects_unknown_values(db, orders):
    row = db.seed("orders", {"status": "pending"})[0]

    with pytest.raises(ValidationError):
        orders.update_status(db, row["id"], "lost")


def test_update_status_missing_order(db, orders):
    with pytest.raises(NotFoundError):
        orders.update_status(db, uuid.uuid4(), "paid")


def test_user_orders_newest_first(db, orders, user_id):
    db.seed(
        "orders",
        {"user_id": str(user_id), "order_number": "ORD-1"},
        {"user_id": str(user_id), "order_number": "ORD-2"},
        {"user_id": str(uuid.uuid4()), "order_number": "ORD-X"},
    )

    result = orders.list_user_orders(db, user_id)

    assert [o.order_number for o in result] == ["ORD-2", "ORD-1"]
    assert all(o.status == "pending" for o in result)


# -------- Stock stats --------


def test_stock_stats_only_tracked_products():
    stats = compute_stock_stats(
        [
            product("Empty", stock_qty=0),
            product("Two", stock_qty=2),
            product("One", stock_qty=1),
            product("Plenty", stock_qty=50),
            product("Untracked", track_stock=False, stock_qty=0),
        ],
        threshold=5,
    )

    assert stats.total_trackable == 4
    assert [p.title for p in stats.out_of_stock] == ["Empty"]
    assert [p.title for p in stats.low_stock] == ["One", "Two"]


# -------- Products --------


def test_save_product_requires_title_and_slug(db, admin):
    with pytest.raises(ValidationError):
        admin.save_product(db, ProductSave(title="Headset", slug="  "))

    assert db.calls == []


def test_save_product_untracked_stores_zero_stock(db, admin):
    product_id = admin.save_product(
        db, ProductSave(title="Headset", slug="headset", price=100, track_stock=False, stock_qty=9)
    )

    row = db.rows("products", id=product_id)[0]
    assert row["stock_qty"] == 0
    assert row["title"] == "Headset"


def test_save_product_updates_existing(db, admin):
    product_id = admin.save_product(db, ProductSave(title="A", slug="a", stock_qty=3))

    admin.save_product(db, ProductSave(id=product_id, title="A2", slug="a", stock_qty=4))

    rows = db.rows("products")
    assert len(rows) == 1
    assert rows[0]["title"] == "A2"
    assert rows[0]["stock_qty"] == 4


def test_set_product_active(db, admin, seed_product):
    row = seed_product(is_active=True)

    admin.set_product_active(db, row["id"], False)

    assert db.rows("products", id=row["id"])[0]["is_active"] is False


def test_list_products_orders_by_title(db, admin, seed_product):
    seed_product(title="Zeta")
    seed_product(title="Alpha", is_active=False)

    assert [p.title for p in admin.list_products(db)] == ["Alpha", "Zeta"]


# -------- Images --------


def test_upload_images_appends_to_gallery(db, admin, seed_product):
    row = seed_product()
    admin.add_image(db, row["id"], ProductImageCreate(image_url="https://cdn.test/a.png"))

    images = admin.upload_images(db, row["id"], [("image/png", b"png-bytes"), ("image/webp", b"w")])

    assert [img.sort_order for img in images] == [1, 2]
    bucket = db.storage.from_("product-images")
    assert len(bucket.objects) == 2
    assert all(img.image_url.startswith(f"{BASE_URL}/storage/v1/object/public/product-images/products/") for img in images)


def test_upload_rejects_unsupported_type(db, admin, seed_product):
    row = seed_product()

    with pytest.raises(ValidationError):
        admin.upload_images(db, row["id"], [("image/gif", b"gif")])


def test_upload_rejects_large_files(db, admin, seed_product):
    row = seed_product()

    with pytest.raises(ValidationError):
        admin.upload_images(db, row["id"], [("image/png", b"x" * (5 * 1024 * 1024 + 1))])


def test_delete_image_removes_storage_object(db, admin, seed_product):
    row = seed_product()
    [image] = admin.upload_images(db, row["id"], [("image/png", b"png")])

    admin.delete_image(db, row["id"], image.id)

    bucket = db.storage.from_("product-images")
    assert bucket.objects == {}
    assert admin.list_images(db, row["id"]) == []


def test_delete_external_image_keeps_storage(db, admin, seed_product):
    row = seed_product()
    image = admin.add_image(db, row["id"], ProductImageCreate(image_url="https://cdn.test/a.png"))

    admin.delete_image(db, row["id"], image.id)

    assert db.storage.from_("product-images").removed == []


def test_update_image_needs_changes(db, admin, seed_product):
    row = seed_product()
    image = admin.add_image(db, row["id"], ProductImageCreate(image_url="https://cdn.test/a.png"))

    with pytest.raises(ValidationError):
        admin.update_image(db, image.id, ProductImageUpdate())

    admin.update_image(db, image.id, ProductImageUpdate(sort_order=4))
    assert admin.list_images(db, row["id"])[0].sort_order == 4


# -------- Settings --------


def test_settings_roundtrip(db, admin):
    admin.save_setting(db, "whatsapp", "628123")
    admin.save_setting(db, " whatsapp ", "628999")
    admin.save_setting(db, "banner", None)

    settings = admin.list_settings(db)
    assert [(s.key, s.value) for s in settings] == [("banner", None), ("whatsapp", "628999")]

    admin.delete_setting(db, "banner")
    assert [s.key for s in admin.list_settings(db)] == ["whatsapp"]


def test_setting_key_required(db, admin):
    with pytest.raises(ValidationError):
        admin.save_setting(db, "  ", "x")


def test_stock_stats_count_unset_tracking_as_tracked(db, admin, seed_product):
    seed_product(title="Legacy", track_stock=None, stock_qty=0)
    seed_product(title="Loose", track_stock=False, stock_qty=0)

    stats = admin.stock_stats(db, threshold=5)

    assert stats.total_trackable == 1
    assert [p.title for p in stats.out_of_stock] == ["Legacy"]


def test_unset_tracking_stays_untracked_on_the_storefront(db, seed_product, user_id):
    from app.repositories.cart_repo import CartRepository
    from app.services.cart_service import CartService

    row = seed_product(title="Legacy", track_stock=None, stock_qty=0)
    cart = CartService(CartRepository(), ProductRepository())

    snapshot = cart.add_to_cart(db, user_id, row["id"])

    assert snapshot.total_qty == 1
    assert Product.model_validate(row).stock_label == "Ready"
