# app/models/setting.py
from datetime import datetime

from sqlmodel import SQLModel


class SiteSetting(SQLModel):
    """Key/value row of table `site_settings` (admin only)."""

    key: str
    value: str | None = None
    updated_at: datetime | None = None
