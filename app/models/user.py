# app/models/user.py
import uuid
from datetime import datetime
from typing import Any

from pydantic import field_validator
from sqlmodel import SQLModel, Field


class AuthUser(SQLModel):
    """
    Identity taken from a verified Supabase access token.

    Identity:
      - id: Supabase auth.users.id (UUID from JWT "sub")

    Passwords and sessions stay in Supabase Auth; the backend only sees
    the claims.
    """

    id: uuid.UUID
    email: str | None = None


class Profile(SQLModel):
    """
    Row of table `profiles`, used for role lookup only.

    Role:
      - "admin" unlocks the admin console
      - anything else (or no row) is a regular customer
    """

    id: uuid.UUID

    role: str = Field(
        default="",
        description="Application role, normalised to lowercase",
    )

    created_at: datetime | None = None

    @field_validator("role", mode="before")
    @classmethod
    def _normalise_role(cls, v: Any) -> str:
        return str(v or "").strip().lower()

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
