# app/services/auth_service.py
import logging
import math
import re
import time
import unicodedata
import uuid
from typing import Any, Callable

from supabase import Client

from app.core.errors import AuthFailedError, RateLimitError, StoreError
from app.models.user import AuthUser
from app.repositories.user_repo import ProfileRepository
from app.schemas.user import AuthResult

logger = logging.getLogger(__name__)

_ZERO_WIDTH_RE = re.compile("[\u200b-\u200d\ufeff]")
_WHITESPACE_RE = re.compile(r"\s+")
_DOTS_RE = re.compile("[\uff0e\u3002\uff61]")
_EDGE_QUOTES_RE = re.compile("^[\"'`]+|[\"'`]+$")
_DOUBLE_CURLY_RE = re.compile("[\u201c\u201d\u201e\u201f]")
_SINGLE_CURLY_RE = re.compile("[\u2018\u2019\u201a\u201b]")

_RETRY_AFTER_RE = re.compile(r"after\s+(\d+)\s*seconds?", re.IGNORECASE)


def normalize_email(raw: Any) -> str:
    """
    Clean an email pasted from chat apps or phone keyboards.

    NFKC folds fullwidth characters, then invisible characters, whitespace,
    wrapping quotes and curly quotes are dropped and the result lowercased.
    """
    text = unicodedata.normalize("NFKC", str(raw if raw is not None else "")).strip()
    text = _ZERO_WIDTH_RE.sub("", text)
    text = _WHITESPACE_RE.sub("", text)
    text = text.replace("\uff20", "@")
    text = _DOTS_RE.sub(".", text)
    text = _EDGE_QUOTES_RE.sub("", text)
    text = _DOUBLE_CURLY_RE.sub("", text)
    text = _SINGLE_CURLY_RE.sub("", text)
    return text.lower()


def retry_after_seconds(message: str | None, default: int) -> int:
    """Seconds from an "... after N seconds" message, else `default`."""
    match = _RETRY_AFTER_RE.search(message or "")
    return int(match.group(1)) if match else default


class AuthCooldown:
    """
    Countdown started when Supabase Auth rate-limits a visitor. While it
    runs, further attempts are refused locally without calling Supabase.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._until = 0.0

    def start(self, seconds: int) -> None:
        self._until = self._clock() + max(1, int(seconds))

    def remaining(self) -> int:
        return max(0, math.ceil(self._until - self._clock()))

    @property
    def active(self) -> bool:
        return self.remaining() > 0


class AuthService:
    """
    Account operations through Supabase Auth.

    Responsibilities:
      - normalise emails before they reach Supabase
      - translate Supabase Auth errors (429 -> RateLimitError + cooldown)
      - role lookup in `profiles`
    """

    def __init__(
        self,
        profile_repo: ProfileRepository,
        default_cooldown: int = 30,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.profile_repo = profile_repo
        self.default_cooldown = default_cooldown
        self._clock = clock
        self._cooldowns: dict[str, AuthCooldown] = {}

    # ---- internal helpers ----

    def _cooldown(self, email: str) -> AuthCooldown:
        if email not in self._cooldowns:
            self._cooldowns[email] = AuthCooldown(self._clock)
        return self._cooldowns[email]

    def _check_cooldown(self, email: str) -> None:
        # expired entries go first so the map only holds running countdowns
        for key in [k for k, c in self._cooldowns.items() if not c.active]:
            del self._cooldowns[key]

        cooldown = self._cooldowns.get(email)
        if cooldown is not None:
            raise RateLimitError(retry_after=cooldown.remaining())

    def _translate(self, exc: Exception, email: str | None = None) -> StoreError:
        status = getattr(exc, "status", None)
        message = getattr(exc, "message", None) or str(exc)

        if isinstance(status, int) and status == 429:
            seconds = max(1, retry_after_seconds(message, self.default_cooldown))
            if email:
                self._cooldown(email).start(seconds)
            logger.warning("Supabase Auth rate limit, cooling down %ss", seconds)
            return RateLimitError(retry_after=seconds)

        return AuthFailedError(message or None)

    @staticmethod
    def _result(response: Any, message: str | None = None) -> AuthResult:
        user = getattr(response, "user", None)
        session = getattr(response, "session", None)
        return AuthResult(
            user_id=getattr(user, "id", None),
            email=getattr(user, "email", None),
            access_token=getattr(session, "access_token", None),
            refresh_token=getattr(session, "refresh_token", None),
            message=message,
        )

    # ---- public operations ----

    def sign_up(
        self,
        client: Client,
        email: str,
        password: str,
        redirect_to: str | None = None,
    ) -> AuthResult:
        normalized = normalize_email(email)
        self._check_cooldown(normalized)

        credentials: dict[str, Any] = {"email": normalized, "password": password}
        if redirect_to:
            credentials["options"] = {"email_redirect_to": redirect_to}

        try:
            response = client.auth.sign_up(credentials)
        except Exception as exc:
            raise self._translate(exc, normalized) from exc

        return self._result(
            response,
            "Akun dibuat. Jika email verification aktif, cek email kamu.",
        )

    def sign_in(self, client: Client, email: str, password: str) -> AuthResult:
        normalized = normalize_email(email)
        self._check_cooldown(normalized)

        try:
            response = client.auth.sign_in_with_password(
                {"email": normalized, "password": password}
            )
        except Exception as exc:
            raise self._translate(exc, normalized) from exc

        return self._result(response)

    def sign_out(self, client: Client, access_token: str | None = None) -> None:
        """
        End a session. With `access_token` the session behind that token
        is revoked; without it, the client's own session is dropped.
        """
        try:
            if access_token:
                client.auth.admin.sign_out(access_token)
            else:
                client.auth.sign_out()
        except Exception as exc:
            raise self._translate(exc) from exc

    def get_user(self, client: Client) -> AuthUser | None:
        """Current user of the client's session; any failure means no user."""
        try:
            response = client.auth.get_user()
        except Exception as exc:
            logger.debug("get_user failed: %s", exc)
            return None

        user = getattr(response, "user", None)
        if user is None:
            return None
        return AuthUser(id=user.id, email=getattr(user, "email", None))

    def on_auth_state_change(
        self,
        client: Client,
        callback: Callable[[AuthUser | None], None],
    ) -> Any:
        """
        Subscribe to session changes; `callback` gets the user or None.

        Returns the Supabase subscription (call .unsubscribe() to stop).
        """

        def _listener(_event: Any, session: Any) -> None:
            user = getattr(session, "user", None) if session else None
            callback(AuthUser(id=user.id, email=getattr(user, "email", None)) if user else None)

        return client.auth.on_auth_state_change(_listener)

    def get_role(self, client: Client, user_id: uuid.UUID) -> str:
        profile = self.profile_repo.get_by_id(client, user_id)
        return profile.role if profile else ""
