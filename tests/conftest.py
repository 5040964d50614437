import os

os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("STAFF_TEAM_ID", "staff-team")
os.environ.setdefault("COOKIE_SECURE", "false")

import pytest
from fastapi.testclient import TestClient

from fake_supabase import FakeSupabase
from keno_admin.config import settings
from keno_admin.database.document_store import DocumentStore
from keno_admin.database.identity_client import IdentityClient
from keno_admin.database.supabase_client import get_supabase, get_service_supabase
from keno_admin.main import app
from keno_admin.modules.auth.resolver import AuthorizationResolver
from keno_admin.modules.roles.cache import RoleCache


@pytest.fixture
def fake():
    """Empty in-memory Supabase."""
    return FakeSupabase()


@pytest.fixture
def store(fake):
    return DocumentStore(fake)


@pytest.fixture
def identity_client(fake):
    return IdentityClient(fake, fake)


@pytest.fixture
def resolver(identity_client, store):
    return AuthorizationResolver(identity_client, store)


@pytest.fixture
def client(fake):
    """API client wired to the fake Supabase."""
    app.dependency_overrides[get_supabase] = lambda: fake
    app.dependency_overrides[get_service_supabase] = lambda: fake
    app.state.role_cache = RoleCache(settings.role_cache_ttl_seconds)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_cookie_names():
    return set(settings.auth_cookie_names)
