import pytest

from app.repositories.shipping_repo import ShippingRepository
from app.schemas.shipping import ShippingRateSave
from app.services.shipping_service import ShippingService


@pytest.fixture
def service() -> ShippingService:
    return ShippingService(ShippingRepository())


@pytest.fixture
def rates(db):
    return db.seed(
        "shipping_rates",
        {"province": "Jawa Barat", "city": "Bekasi", "cost": 15000, "is_active": True},
        {"province": "Jawa Barat", "city": "Bogor", "cost": 18000, "is_active": True},
        {"province": "Jawa Barat", "city": "Bandung", "cost": 20000, "is_active": False},
        {"province": "DKI Jakarta", "city": "Jakarta Selatan", "cost": 10000, "is_active": True},
        {"province": "DKI Jakarta", "city": "Jakarta Barat", "cost": 10000, "is_active": True},
        {"province": "Bali", "city": "Denpasar", "cost": 40000, "is_active": False},
    )


def test_unknown_destination_costs_zero(db, service, rates):
    assert service.get_cost(db, "Jawa Barat", "Bandung") == 0


def test_exact_active_match_returns_cost(db, service, rates):
    assert service.get_cost(db, "Jawa Barat", "Bogor") == 18000
    assert service.get_cost(db, "  Jawa Barat ", " Bekasi ") == 15000


def test_blank_input_costs_zero_without_querying(db, service, rates):
    assert service.get_cost(db, "", "Bogor") == 0
    assert service.get_cost(db, "Jawa Barat", "   ") == 0
    assert db.calls == []


def test_non_finite_cost_is_zero(db, service):
    db.seed("shipping_rates", {"province": "X", "city": "Y", "cost": "abc", "is_active": True})

    assert service.get_cost(db, "X", "Y") == 0


def test_provinces_are_distinct_sorted_and_active_only(db, service, rates):
    assert service.list_provinces(db) == ["DKI Jakarta", "Jawa Barat"]


def test_cities_scoped_to_province(db, service, rates):
    assert service.list_cities(db, "Jawa Barat") == ["Bekasi", "Bogor"]
    assert service.list_cities(db, "jawa barat") == []


def test_blank_province_lists_no_cities_without_querying(db, service, rates):
    assert service.list_cities(db, "") == []
    assert service.list_cities(db, None) == []
    assert db.calls == []


def test_save_rate_creates_then_updates(db, service):
    created = service.save_rate(
        db, ShippingRateSave(province=" Bali ", city="Denpasar", cost=40000)
    )
    assert created.province == "Bali"
    assert created.is_active is True

    updated = service.save_rate(
        db,
        ShippingRateSave(id=created.id, province="Bali", city="Denpasar", cost=35000),
    )
    assert updated.id == created.id
    assert updated.cost == 35000
    assert len(db.rows("shipping_rates")) == 1


def test_rate_payload_rejects_blank_city():
    with pytest.raises(ValueError):
        ShippingRateSave(province="Bali", city="  ", cost=1)


def test_delete_rate(db, service, rates):
    service.delete_rate(db, rates[0]["id"])

    assert service.get_cost(db, "Jawa Barat", "Bekasi") == 0
