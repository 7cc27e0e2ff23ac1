# app/services/shipping_service.py
import uuid
from typing import Any, Iterable

from supabase import Client

from app.core.formatting import collation_key
from app.models.shipping import ShippingRate
from app.repositories.shipping_repo import ShippingRepository
from app.schemas.shipping import ShippingRateSave


def _clean(value: Any) -> str:
    return str(value or "").strip()


def _distinct_sorted(values: Iterable[Any]) -> list[str]:
    seen: dict[str, None] = {}
    for v in values:
        text = _clean(v)
        if text:
            seen.setdefault(text, None)
    return sorted(seen, key=collation_key)


class ShippingService:
    """
    Resolves province -> city -> flat shipping cost from `shipping_rates`.

    An unknown destination costs 0. That is a product decision (free
    shipping rather than a blocked checkout), so callers never see a
    "not found" error here.
    """

    def __init__(self, repo: ShippingRepository):
        self.repo = repo

    def list_provinces(self, client: Client) -> list[str]:
        """Distinct active provinces, trimmed and sorted."""
        return _distinct_sorted(self.repo.list_active_provinces(client))

    def list_cities(self, client: Client, province: str | None) -> list[str]:
        """Distinct active cities of a province; blank province => []."""
        p = _clean(province)
        if not p:
            return []
        return _distinct_sorted(self.repo.list_active_cities(client, p))

    def get_cost(self, client: Client, province: str | None, city: str | None) -> float:
        """
        Flat cost for an exact (province, city) match on active rates.

        Returns 0 when either input is blank, when nothing matches, or when
        the stored cost is not a finite number.
        """
        p = _clean(province)
        c = _clean(city)
        if not p or not c:
            return 0

        rate = self.repo.find_active_rate(client, p, c)
        if rate is None:
            return 0
        return rate.cost

    # ---- Admin ----

    def list_rates(self, client: Client) -> list[ShippingRate]:
        return self.repo.list_all(client)

    def save_rate(self, client: Client, payload: ShippingRateSave) -> ShippingRate:
        data = payload.model_dump(exclude_none=True)
        if "id" in data:
            data["id"] = str(data["id"])
        return self.repo.upsert(client, data)

    def delete_rate(self, client: Client, rate_id: uuid.UUID) -> None:
        self.repo.delete(client, rate_id)
