# app/services/catalog_service.py
"""
In-memory catalog engine for the storefront grid.

The product list is fetched once per page load and everything here works
on that snapshot: text search, use-case buckets, color filter, sorting,
promo pricing, the compare table and detail-page highlights.

Filters compose with AND in a fixed order (search, use case, color) and
sorting runs last.
"""
import math
import re
from typing import Any, Iterable, Sequence

from app.core.formatting import collation_key, display_text, format_price
from app.models.product import Product
from app.schemas.product import (
    CatalogQuery,
    CompareTable,
    Highlight,
    ProductCard,
    ProductDetail,
    PromoPrice,
)

# Keyword buckets for the use-case chips. "music" and "noise-cancelling"
# are aliases for the chip ids the storefront uses.
USE_CASE_KEYWORDS: dict[str, tuple[str, ...]] = {
    "gaming": ("gaming", "latency", "low latency"),
    "musik": ("musik", "music", "audio", "detail", "vocal"),
    "music": ("musik", "music", "audio", "detail", "vocal"),
    "bass": ("bass", "deep bass", "sub bass"),
    "anc": ("anc", "noise cancel", "noise cancelling", "cancel"),
    "noise-cancelling": ("anc", "noise cancel", "noise cancelling", "cancel"),
    "budget": ("budget", "murah", "hemat"),
}

# Share of the catalog (by count) that counts as "budget"
BUDGET_PERCENTILE = 0.35

# Sentinel colour values meaning "no colour filter"
ALL_COLORS = frozenset({"", "all", "semua"})

PROMO_PERCENT_RE = re.compile(r"(\d{1,2})\s*%")
PROMO_WORDS = ("promo", "diskon", "sale")
DEFAULT_PROMO_PERCENT = 15
MIN_PROMO_PERCENT = 5
MAX_PROMO_PERCENT = 80

COMPARE_HINT = "Pilih minimal 2 produk untuk dibandingkan."

MAX_HIGHLIGHTS = 5


# ----- Parsing helpers -----


def normalize(value: Any) -> str:
    return str(value if value is not None else "").strip().lower()


def parse_price(value: Any) -> float:
    """
    Parse a raw price field.

    Numbers pass through. Strings keep only digits and '.', so
    "Rp 350.000" parses as 350.0 (the dot is read as a decimal point)
    and text with no digits at all ("Hubungi kami") parses as 0.
    None, "" and malformed numbers ("1.2.3") are NaN.
    """
    if value is None or value == "" or isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)

    digits = re.sub(r"[^0-9.]", "", str(value))
    if not digits:
        return 0.0
    try:
        return float(digits)
    except ValueError:
        return math.nan


def price_or_zero(product: Product) -> float:
    price = parse_price(product.price)
    return price if math.isfinite(price) else 0.0


def haystack(product: Product) -> str:
    """Lowercased text the search and use-case filters look into."""
    return " ".join(
        normalize(v)
        for v in (
            product.title,
            product.subtitle,
            product.description,
            product.badge,
            product.color,
        )
    )


def _matches_any(product: Product, keywords: Iterable[str]) -> bool:
    hay = haystack(product)
    return any(normalize(k) in hay for k in keywords)


# ----- Filters -----


def search(products: Sequence[Product], q: str | None) -> list[Product]:
    needle = normalize(q)
    if not needle:
        return list(products)
    return [p for p in products if needle in haystack(p)]


def budget_threshold(prices: Sequence[float]) -> float:
    """
    Price at the 35th percentile by count: the ceil(n * 0.35)-th cheapest
    price (1-indexed), clamped into range.
    """
    ordered = sorted(prices)
    idx = math.ceil(len(ordered) * BUDGET_PERCENTILE) - 1
    idx = max(0, min(len(ordered) - 1, idx))
    return ordered[idx]


def filter_use_case(products: Sequence[Product], use_case: str | None) -> list[Product]:
    """
    Keep products in a use-case bucket.

    "budget" is price based: items at or below the 35th-percentile price.
    Only when no price parses does it fall back to budget keywords.
    """
    key = normalize(use_case)
    if not key or key == "all":
        return list(products)

    if key == "budget":
        priced = [(p, parse_price(p.price)) for p in products]
        priced = [(p, price) for p, price in priced if math.isfinite(price)]
        if priced:
            threshold = budget_threshold([price for _, price in priced])
            return [p for p, price in priced if price <= threshold]
        return [p for p in products if _matches_any(p, USE_CASE_KEYWORDS["budget"])]

    keywords = USE_CASE_KEYWORDS.get(key, (key,))
    return [p for p in products if _matches_any(p, keywords)]


def filter_color(products: Sequence[Product], color: str | None) -> list[Product]:
    selected = normalize(color)
    if selected in ALL_COLORS:
        return list(products)
    return [p for p in products if normalize(p.color) == selected]


def sort_products(products: Sequence[Product], mode: str | None) -> list[Product]:
    """
    featured keeps fetch order; titleAsc ignores case and accents; price
    sorts treat unparseable prices as 0. All sorts are stable.
    """
    if mode == "titleAsc":
        return sorted(products, key=lambda p: collation_key(p.title or ""))
    if mode == "priceAsc":
        return sorted(products, key=price_or_zero)
    if mode == "priceDesc":
        return sorted(products, key=price_or_zero, reverse=True)
    return list(products)


def apply_filters(products: Sequence[Product], query: CatalogQuery) -> list[Product]:
    result = search(products, query.q)
    result = filter_use_case(result, query.use_case)
    result = filter_color(result, query.color)
    return sort_products(result, query.sort)


def color_options(products: Sequence[Product]) -> list[str]:
    colors = {str(p.color).strip() for p in products if p.color and str(p.color).strip()}
    return sorted(colors, key=collation_key)


# ----- Presentation-adjacent derivations -----


def promo_percent(badge: str | None) -> int:
    """Discount encoded in the badge text, 0 when there is none."""
    text = normalize(badge)
    if not text:
        return 0
    match = PROMO_PERCENT_RE.search(text)
    if match:
        return min(MAX_PROMO_PERCENT, max(MIN_PROMO_PERCENT, int(match.group(1))))
    if any(word in text for word in PROMO_WORDS):
        return DEFAULT_PROMO_PERCENT
    return 0


def promo_pricing(product: Product) -> PromoPrice | None:
    """
    Display-only "was" price: price / (1 - pct/100), rounded half up.
    """
    pct = promo_percent(product.badge)
    if not pct:
        return None
    price = price_or_zero(product)
    old_price = math.floor(price / (1 - pct / 100) + 0.5)
    return PromoPrice(percent=pct, price=price, old_price=old_price)


def highlights(product: Product) -> list[Highlight]:
    """Spec highlights for the detail page, at most five."""
    out: list[Highlight] = []
    for label, value in (
        ("Latency", product.latency),
        ("Baterai", product.battery),
        ("Bobot", product.weight),
        ("Warna", product.color),
    ):
        text = str(value or "").strip()
        if text and text != "-":
            out.append(Highlight(label=label, value=text))

    badge = normalize(product.badge)
    if "anc" in badge:
        out.append(Highlight(label="Fitur", value="ANC / Noise Cancelling"))
    if "gaming" in badge or "latency" in badge:
        out.append(Highlight(label="Use Case", value="Gaming Friendly"))
    if "bass" in badge:
        out.append(Highlight(label="Sound", value="Bass Boost"))

    return out[:MAX_HIGHLIGHTS]


def to_card(product: Product) -> ProductCard:
    return ProductCard(
        product=product,
        thumbnail_url=product.thumbnail_url,
        stock_label=product.stock_label,
        promo=promo_pricing(product),
    )


def to_detail(product: Product) -> ProductDetail:
    return ProductDetail(
        product=product,
        thumbnail_url=product.thumbnail_url,
        stock_label=product.stock_label,
        promo=promo_pricing(product),
        highlights=highlights(product),
    )


def compare_table(products: Sequence[Product], ids: Sequence[str]) -> CompareTable:
    """
    Specification table for the products in the compare set, in set order.
    Ids missing from the catalog are skipped.
    """
    by_id = {str(p.id): p for p in products}
    selected = [by_id[i] for i in ids if i in by_id]
    if len(selected) < 2:
        return CompareTable(products=selected, rows=[], hint=COMPARE_HINT)

    fields = (
        ("Nama", lambda p: display_text(p.title)),
        ("Harga", lambda p: format_price(p.price)),
        ("Warna", lambda p: display_text(p.color)),
        ("Baterai", lambda p: display_text(p.battery)),
        ("Bobot", lambda p: display_text(p.weight)),
        ("Latency", lambda p: display_text(p.latency)),
        ("Badge", lambda p: display_text(p.badge)),
    )
    rows = [(label, [fn(p) for p in selected]) for label, fn in fields]
    return CompareTable(products=selected, rows=rows)


def order_like(products: Sequence[Product], ids: Sequence[str]) -> list[Product]:
    """Reorder fetched products to follow a stored id list (wishlist order)."""
    position = {pid: idx for idx, pid in enumerate(ids)}
    return sorted(products, key=lambda p: position.get(str(p.id), len(position)))
