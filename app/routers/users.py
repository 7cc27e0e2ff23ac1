# app/routers/users.py
from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials
from supabase import Client

from app.core.auth import bearer_scheme, require_auth
from app.core.config import get_settings
from app.core.supabase_client import get_auth_client, get_supabase
from app.models.user import AuthUser
from app.repositories.user_repo import ProfileRepository
from app.schemas.user import AuthResult, Credentials, MeRead
from app.services.auth_service import AuthService

settings = get_settings()

router = APIRouter(prefix="/auth", tags=["Auth"])

repo = ProfileRepository()
service = AuthService(repo, default_cooldown=settings.AUTH_COOLDOWN_SECONDS)


@router.post("/signup", response_model=AuthResult, status_code=status.HTTP_201_CREATED)
def sign_up(
    payload: Credentials,
    redirect_to: str | None = None,
    client: Client = Depends(get_auth_client),
):
    """
    Create an account with email + password.

    The email is normalised first (fullwidth characters, pasted quotes,
    invisible characters). 429 carries Retry-After while Supabase
    rate-limits this address.
    """
    return service.sign_up(client, payload.email, payload.password, redirect_to)


@router.post("/signin", response_model=AuthResult)
def sign_in(payload: Credentials, client: Client = Depends(get_auth_client)):
    """
    Sign in with email + password and return the Supabase session tokens.
    """
    return service.sign_in(client, payload.email, payload.password)


@router.post("/signout", status_code=status.HTTP_204_NO_CONTENT)
def sign_out(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    _: AuthUser = Depends(require_auth),
    client: Client = Depends(get_auth_client),
):
    """
    Revoke the session behind the bearer token.
    """
    service.sign_out(client, credentials.credentials if credentials else None)
    return None


@router.get("/me", response_model=MeRead)
def read_me(
    current_user: AuthUser = Depends(require_auth),
    client: Client = Depends(get_supabase),
):
    """
    Return the authenticated user and their role from `profiles`.
    """
    role = service.get_role(client, current_user.id)
    return MeRead(
        id=current_user.id,
        email=current_user.email,
        role=role,
        is_admin=role == "admin",
    )
