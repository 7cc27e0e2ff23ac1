# app/schemas/user.py
import uuid

from pydantic import ConfigDict
from sqlmodel import SQLModel


class Credentials(SQLModel):
    """
    Email + password for sign up / sign in.

    The email is normalised by the auth service, not here, so pasted
    addresses with fullwidth characters still work.
    """

    model_config = ConfigDict(extra="forbid")

    email: str
    password: str


class AuthResult(SQLModel):
    """
    Result of sign up / sign in.

    access_token is None after sign up when email confirmation is on.
    """

    user_id: uuid.UUID | None = None
    email: str | None = None
    access_token: str | None = None
    refresh_token: str | None = None
    message: str | None = None


class MeRead(SQLModel):
    id: uuid.UUID
    email: str | None = None
    role: str = ""
    is_admin: bool = False


class SelectionRead(SQLModel):
    """
    Wishlist / compare set as stored in the client cookie.
    """

    name: str
    items: list[str]
    limit: int | None = None


class ToggleResult(SQLModel):
    """
    Outcome of toggling one id in a selection set.

    full=True means the compare set is at its cap and nothing changed.
    """

    active: bool
    items: list[str]
    full: bool = False
