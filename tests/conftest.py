import os
import time
import uuid

# Settings are read at import time; give them test values first.
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from app.core.config import get_settings
from app.core.supabase_client import get_auth_client, get_supabase
from tests.fake_supabase import FakeSupabase


@pytest.fixture
def db() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def user_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def seed_product(db):
    def _seed(**fields):
        row = {
            "slug": fields.get("slug", f"p-{uuid.uuid4().hex[:6]}"),
            "title": "Produk",
            "price": 100000,
            "track_stock": False,
            "stock_qty": 0,
            "is_active": True,
        }
        row.update(fields)
        return db.seed("products", row)[0]

    return _seed


def make_token(user_id: uuid.UUID, email: str = "buyer@example.com", ttl: int = 3600) -> str:
    settings = get_settings()
    claims = {"sub": str(user_id), "email": email, "exp": int(time.time()) + ttl}
    return jwt.encode(claims, settings.SUPABASE_JWT_SECRET, algorithm=settings.SUPABASE_JWT_ALG)


@pytest.fixture
def auth_headers(user_id):
    return {"Authorization": f"Bearer {make_token(user_id)}"}


@pytest.fixture
def api(db):
    from app.main import app

    app.dependency_overrides[get_supabase] = lambda: db
    app.dependency_overrides[get_auth_client] = lambda: db
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
