import uuid

import pytest

from app.core.errors import InsufficientStock, NotFoundError, OutOfStock, RemoteError
from app.repositories.cart_repo import CartRepository
from app.repositories.product_repo import ProductRepository
from app.services.cart_service import CartService, requested_quantity


@pytest.fixture
def service() -> CartService:
    return CartService(CartRepository(), ProductRepository())


def test_ensure_active_cart_is_stable_across_calls(db, service, user_id):
    first = service.ensure_active_cart(db, user_id)
    second = service.ensure_active_cart(db, user_id)

    assert first.id == second.id
    assert len(db.rows("carts", user_id=user_id, status="active")) == 1


def test_ensure_active_cart_ignores_converted_carts(db, service, user_id):
    old = db.seed("carts", {"user_id": str(user_id), "status": "converted"})[0]

    cart = service.ensure_active_cart(db, user_id)

    assert str(cart.id) != old["id"]
    assert cart.status == "active"


def test_readd_bumps_qty_and_reprices_whole_line(db, service, seed_product, user_id):
    product = seed_product(price=100000, track_stock=False)

    service.add_to_cart(db, user_id, product["id"], 2)
    product["price"] = 120000
    snapshot = service.add_to_cart(db, user_id, product["id"], 3)

    assert len(snapshot.items) == 1
    line = snapshot.items[0]
    assert line.qty == 5
    assert line.unit_price == 120000
    assert line.line_total == 600000
    assert snapshot.total_qty == 5
    assert snapshot.total_amount == 600000


def test_text_price_is_read_like_the_catalog(db, service, seed_product, user_id):
    formatted = seed_product(price="Rp 350.000")
    on_request = seed_product(price="Hubungi kami")

    service.add_to_cart(db, user_id, formatted["id"], 2)
    snapshot = service.add_to_cart(db, user_id, on_request["id"])

    assert [it.unit_price for it in snapshot.items] == [350.0, 0.0]
    assert snapshot.total_amount == 700.0


def test_insufficient_stock_reports_remaining_and_keeps_cart(db, service, seed_product, user_id):
    product = seed_product(price=50000, track_stock=True, stock_qty=4)
    service.add_to_cart(db, user_id, product["id"], 3)

    with pytest.raises(InsufficientStock) as excinfo:
        service.add_to_cart(db, user_id, product["id"], 2)

    assert excinfo.value.remaining == 4
    assert "4" in excinfo.value.message
    assert excinfo.value.status_code == 409
    snapshot = service.get_cart_items(db, user_id)
    assert [it.qty for it in snapshot.items] == [3]


def test_out_of_stock_blocks_before_any_write(db, service, seed_product, user_id):
    product = seed_product(track_stock=True, stock_qty=0)

    with pytest.raises(OutOfStock):
        service.add_to_cart(db, user_id, product["id"], 1)

    assert db.rows("cart_items") == []


def test_untracked_stock_ignores_stock_qty(db, service, seed_product, user_id):
    product = seed_product(track_stock=False, stock_qty=0)

    snapshot = service.add_to_cart(db, user_id, product["id"], 7)

    assert snapshot.items[0].qty == 7


def test_requested_qty_is_floored_and_clamped(db, service, seed_product, user_id):
    product = seed_product(price=1000)

    snapshot = service.add_to_cart(db, user_id, product["id"], 2.9)
    assert snapshot.items[0].qty == 2

    snapshot = service.add_to_cart(db, user_id, product["id"], 0)
    assert snapshot.items[0].qty == 3


@pytest.mark.parametrize(
    "raw, expected",
    [(1, 1), (3.7, 3), (0, 1), (-4, 1), ("2", 2), ("abc", 1), (None, 1), (float("nan"), 1)],
)
def test_requested_quantity(raw, expected):
    assert requested_quantity(raw) == expected


def test_unknown_product_is_not_found(db, service, user_id):
    with pytest.raises(NotFoundError):
        service.add_to_cart(db, user_id, uuid.uuid4(), 1)


def test_snapshot_joins_product_info_and_totals(db, service, seed_product, user_id):
    a = seed_product(title="Alpha", price=100000)
    b = seed_product(title="Beta", price=50000)
    service.add_to_cart(db, user_id, a["id"], 2)
    snapshot = service.add_to_cart(db, user_id, b["id"], 1)

    titles = sorted(it.product.title for it in snapshot.items)
    assert titles == ["Alpha", "Beta"]
    assert snapshot.total_qty == 3
    assert snapshot.total_amount == 250000


def test_remove_cart_item_returns_refreshed_snapshot(db, service, seed_product, user_id):
    a = seed_product(price=100)
    b = seed_product(price=200)
    service.add_to_cart(db, user_id, a["id"], 1)
    snapshot = service.add_to_cart(db, user_id, b["id"], 1)
    line_a = next(it for it in snapshot.items if str(it.product_id) == a["id"])

    snapshot = service.remove_cart_item(db, user_id, line_a.id)

    assert [str(it.product_id) for it in snapshot.items] == [b["id"]]
    assert snapshot.total_amount == 200


def test_remote_failure_surfaces_as_remote_error(db, service, user_id):
    db.fail("carts", "select", message="permission denied", code="42501")

    with pytest.raises(RemoteError) as excinfo:
        service.get_cart_items(db, user_id)

    assert excinfo.value.message == "permission denied"
    assert excinfo.value.code == "42501"
    assert excinfo.value.status_code == 502
