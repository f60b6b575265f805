"""
This module contains pytest fixtures and configuration for testing.

Resource clients are exercised against the in-memory sandbox backend through
httpx's ASGI transport, so no network is involved.
"""
import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from ekraf_admin.api import AdminApi
from ekraf_admin.common.session import MemoryStorage, SessionStore
from ekraf_admin.sandbox import SandboxState, create_app, seed_demo_data

BASE_URL = "http://testserver/api"
UPLOADER_URL = "https://uploader.test/upload"

ADMIN_EMAIL = "admin@ekraf.test"
ADMIN_PASSWORD = "admin123"


def _no_uploads(request: httpx.Request) -> httpx.Response:
    return httpx.Response(503, json={"message": "uploader disabled in tests"})


@pytest.fixture
def sandbox_state():
    """
    Sandbox data seeded with the demo set: 3 subsectors, 3 categories,
    2 admins, 2 partners (Sari verified, Budi not) and 4 products.
    """
    return seed_demo_data(SandboxState())


@pytest.fixture
def sandbox_app(sandbox_state):
    return create_app(sandbox_state)


@pytest.fixture
def client(sandbox_app):
    """
    Create a test client for the sandbox application.
    """
    return TestClient(sandbox_app)


@pytest.fixture
def session():
    return SessionStore(MemoryStorage())


@pytest.fixture
def make_api(sandbox_app, session):
    """
    Factory for AdminApi instances wired to the sandbox and the shared session.
    """
    def factory() -> AdminApi:
        return AdminApi(
            session=session,
            base_url=BASE_URL,
            uploader_url=UPLOADER_URL,
            http_transport=httpx.ASGITransport(app=sandbox_app),
            uploader_transport=httpx.MockTransport(_no_uploads),
        )
    return factory


@pytest_asyncio.fixture
async def api(make_api):
    """
    An AdminApi with an empty session.
    """
    instance = make_api()
    yield instance
    await instance.aclose()


@pytest_asyncio.fixture
async def admin_api(api):
    """
    An AdminApi logged in as the seeded admin account.
    """
    await api.auth.login(ADMIN_EMAIL, ADMIN_PASSWORD, "admin")
    return api


@pytest.fixture
def admin_token(client):
    response = client.post(
        "/api/auth/login/admin",
        json={"usernameOrEmail": ADMIN_EMAIL, "password": ADMIN_PASSWORD},
    )
    assert response.status_code == 200
    return response.json()["token"]
