"""Pytest configuration and fixtures for civic-admin.

HTTP tests run against civic_admin.main:app with the services dependency
overridden by real use cases over in-memory repositories, so no Firestore
project or network access is needed.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-civic-admin-tests")
os.environ["AUTO_ASSIGN_ENABLED"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"

from collections.abc import AsyncIterator  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from civic_admin.api.v1.dependencies.services import get_services  # noqa: E402
from civic_admin.core.container import Services  # noqa: E402
from civic_admin.domain.enums import UserRole  # noqa: E402
from civic_admin.infrastructure.security.jwt import create_access_token  # noqa: E402
from civic_admin.main import app  # noqa: E402
from tests.fakes import FakeStore, build_fake_services  # noqa: E402


def _bearer(user_id: str, role: UserRole, email: str) -> dict[str, str]:
    token = create_access_token(user_id, role.value, email=email)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def store() -> FakeStore:
    """Empty in-memory data store; tests seed what they need."""
    return FakeStore()


@pytest.fixture
def services(store: FakeStore) -> Services:
    return build_fake_services(store)


@pytest.fixture
async def client(services: Services) -> AsyncIterator[AsyncClient]:
    """Async HTTP client against the FastAPI app (ASGI) backed by the fake store."""
    app.dependency_overrides[get_services] = lambda: services
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.pop(get_services, None)


@pytest.fixture
async def unconfigured_client() -> AsyncIterator[AsyncClient]:
    """Client without the services override: no Firestore client is configured."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return _bearer("admin-1", UserRole.ADMIN, "admin@city.gov")


@pytest.fixture
def moderator_headers() -> dict[str, str]:
    return _bearer("mod-1", UserRole.MODERATOR, "mod@city.gov")


@pytest.fixture
def citizen_headers() -> dict[str, str]:
    return _bearer("citizen-1", UserRole.CITIZEN, "citizen@example.com")
