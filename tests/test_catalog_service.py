import math
import uuid

import pytest

from app.models.product import Product
from app.schemas.product import CatalogQuery
from app.services import catalog_service as catalog


def make(title="Produk", price=100, **fields) -> Product:
    return Product.model_validate(
        {"id": str(uuid.uuid4()), "slug": title.lower().replace(" ", "-"), "title": title, "price": price, **fields}
    )


def titles(products):
    return [p.title for p in products]


def test_budget_keeps_cheapest_35_percent_by_count():
    products = [make(f"P{p}", p) for p in (70, 10, 100, 40, 20, 90, 30, 60, 50, 80)]

    result = catalog.filter_use_case(products, "budget")

    assert sorted(catalog.price_or_zero(p) for p in result) == [10, 20, 30, 40]


def test_budget_ignores_missing_prices():
    products = [make("A", 10), make("B", ""), make("C", 30), make("D", None)]

    result = catalog.filter_use_case(products, "budget")

    assert titles(result) == ["A"]


def test_budget_counts_text_price_as_zero():
    products = [make("A", 10), make("B", "Hubungi kami"), make("C", 30), make("D", 50)]

    result = catalog.filter_use_case(products, "budget")

    assert titles(result) == ["A", "B"]


def test_budget_falls_back_to_keywords_without_prices():
    products = [
        make("Headset Murah", None),
        make("Flagship", ""),
        make("Earbud", None, badge="Hemat"),
    ]

    result = catalog.filter_use_case(products, "budget")

    assert titles(result) == ["Headset Murah", "Earbud"]


@pytest.mark.parametrize(
    "prices, expected",
    [([5], 5), ([3, 1, 2], 2), ([10, 20, 30, 40, 50, 60, 70, 80, 90, 100], 40)],
)
def test_budget_threshold(prices, expected):
    assert catalog.budget_threshold(prices) == expected


def test_use_case_keywords_and_aliases():
    products = [
        make("Gamer X", subtitle="Low latency 40ms"),
        make("Studio", description="Detail vocal jernih"),
        make("Thump", badge="Deep Bass"),
        make("Quiet", description="Active Noise Cancelling"),
    ]

    assert titles(catalog.filter_use_case(products, "gaming")) == ["Gamer X"]
    assert titles(catalog.filter_use_case(products, "music")) == ["Studio"]
    assert titles(catalog.filter_use_case(products, "musik")) == ["Studio"]
    assert titles(catalog.filter_use_case(products, "bass")) == ["Thump"]
    assert titles(catalog.filter_use_case(products, "noise-cancelling")) == ["Quiet"]
    assert titles(catalog.filter_use_case(products, "anc")) == ["Quiet"]
    assert len(catalog.filter_use_case(products, "all")) == 4


def test_search_is_case_insensitive_over_haystack():
    products = [make("Alpha", color="Midnight Blue"), make("Beta", badge="NEW"), make("Gamma")]

    assert titles(catalog.search(products, "BLUE")) == ["Alpha"]
    assert titles(catalog.search(products, "new")) == ["Beta"]
    assert titles(catalog.search(products, "  ")) == ["Alpha", "Beta", "Gamma"]


def test_color_filter_exact_case_insensitive():
    products = [make("A", color="Black"), make("B", color="black "), make("C", color="Blackish")]

    assert titles(catalog.filter_color(products, "BLACK")) == ["A", "B"]
    assert len(catalog.filter_color(products, "all")) == 3
    assert len(catalog.filter_color(products, "")) == 3


def test_sort_modes():
    products = [make("b", 30), make("C", "abc"), make("a", 10)]

    assert titles(catalog.sort_products(products, "featured")) == ["b", "C", "a"]
    assert titles(catalog.sort_products(products, "titleAsc")) == ["a", "b", "C"]
    assert titles(catalog.sort_products(products, "priceAsc")) == ["C", "a", "b"]
    assert titles(catalog.sort_products(products, "priceDesc")) == ["b", "a", "C"]


def test_title_sort_ignores_accents_and_case():
    products = [make("Zeta"), make("\u00c9clair"), make("alpha")]

    assert titles(catalog.sort_products(products, "titleAsc")) == ["alpha", "\u00c9clair", "Zeta"]


def test_filters_compose_before_sorting():
    products = [
        make("Z Bass", 300, color="Red", badge="bass"),
        make("A Bass", 200, color="Red", badge="bass"),
        make("M Bass", 100, color="Blue", badge="bass"),
        make("Plain", 50, color="Red"),
    ]
    query = CatalogQuery(q="bass", use_case="bass", color="red", sort="priceAsc")

    assert titles(catalog.apply_filters(products, query)) == ["A Bass", "Z Bass"]


@pytest.mark.parametrize(
    "raw, expected",
    [(350000, 350000.0), ("350000", 350000.0), ("Rp 350.000", 350.0), ("12.5k", 12.5), ("call us", 0.0)],
)
def test_parse_price(raw, expected):
    assert catalog.parse_price(raw) == expected


@pytest.mark.parametrize("raw", ["", None, "1.2.3"])
def test_parse_price_nan(raw):
    assert math.isnan(catalog.parse_price(raw))


@pytest.mark.parametrize(
    "badge, expected",
    [("Diskon 20%", 20), ("PROMO", 15), ("sale!", 15), ("2%", 5), ("99%", 80), ("New", 0), (None, 0)],
)
def test_promo_percent(badge, expected):
    assert catalog.promo_percent(badge) == expected


def test_promo_old_price_rounds():
    promo = catalog.promo_pricing(make("A", 80000, badge="Diskon 20%"))

    assert promo.percent == 20
    assert promo.price == 80000
    assert promo.old_price == 100000


def test_no_promo_without_badge_keywords():
    assert catalog.promo_pricing(make("A", 80000, badge="Best Seller")) is None


def test_color_options_distinct_sorted():
    products = [make("A", color="Red"), make("B", color=" Blue "), make("C", color="Red"), make("D")]

    assert catalog.color_options(products) == ["Blue", "Red"]


def test_color_options_fold_case_and_accents():
    products = [make("A", color="white"), make("B", color="Black"), make("C", color="\u00c9cru")]

    assert catalog.color_options(products) == ["Black", "\u00c9cru", "white"]


def test_highlights_from_specs_and_badge():
    product = make(
        "A", latency="40ms", battery="30 jam", weight="-", color="Black", badge="ANC Gaming Bass"
    )

    labels = [h.label for h in catalog.highlights(product)]

    assert labels == ["Latency", "Baterai", "Warna", "Fitur", "Use Case"]


def test_compare_table_needs_two_products():
    a = make("A")

    table = catalog.compare_table([a], [str(a.id)])

    assert table.rows == []
    assert table.hint == catalog.COMPARE_HINT


def test_compare_table_follows_selection_order():
    a = make("A", 100000, color="Red")
    b = make("B", "Hubungi kami")
    c = make("C")

    table = catalog.compare_table([a, b, c], [str(b.id), str(a.id), "missing"])

    assert titles(table.products) == ["B", "A"]
    rows = dict(table.rows)
    assert rows["Nama"] == ["B", "A"]
    assert rows["Harga"] == ["Hubungi kami", "Rp 100.000"]
    assert rows["Warna"] == ["-", "Red"]


def test_card_stock_labels():
    assert catalog.to_card(make("A", track_stock=False)).stock_label == "Ready"
    assert catalog.to_card(make("A", track_stock=True, stock_qty=0)).stock_label == "Habis"
    assert catalog.to_card(make("A", track_stock=True, stock_qty=3)).stock_label == "Menipis (3)"
    assert catalog.to_card(make("A", track_stock=True, stock_qty=12)).stock_label == "Stok 12"


def test_card_thumbnail_is_first_image_by_sort_order():
    product = make(
        "A",
        product_images=[
            {"image_url": "b.png", "sort_order": 2},
            {"image_url": "a.png", "sort_order": 1},
        ],
    )

    assert catalog.to_card(product).thumbnail_url == "a.png"
