# app/repositories/user_repo.py
import uuid

from supabase import Client

from app.core.supabase_client import run_query
from app.models.user import Profile


class ProfileRepository:
    """
    Data access layer for `profiles`.

    Only the role is read; profiles are provisioned by Supabase triggers.
    """

    def get_by_id(self, client: Client, user_id: uuid.UUID) -> Profile | None:
        """Return the profile row, or None if the user has none yet."""
        rows = run_query(
            client.table("profiles").select("id, role").eq("id", str(user_id)).limit(1),
            "profiles.select",
        )
        return Profile.model_validate(rows[0]) if rows else None
