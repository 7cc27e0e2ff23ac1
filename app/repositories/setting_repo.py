# app/repositories/setting_repo.py
from supabase import Client

from app.core.supabase_client import run_query
from app.models.setting import SiteSetting


class SiteSettingRepository:
    """Data access layer for `site_settings` (keyed by `key`)."""

    def list(self, client: Client) -> list[SiteSetting]:
        rows = run_query(
            client.table("site_settings").select("key, value, updated_at").order("key"),
            "site_settings.select",
        )
        return [SiteSetting.model_validate(r) for r in rows]

    def upsert(self, client: Client, key: str, value: str | None) -> SiteSetting:
        rows = run_query(
            client.table("site_settings").upsert({"key": key, "value": value}),
            "site_settings.upsert",
        )
        return SiteSetting.model_validate(rows[0])

    def delete(self, client: Client, key: str) -> None:
        run_query(
            client.table("site_settings").delete().eq("key", key),
            "site_settings.delete",
        )
