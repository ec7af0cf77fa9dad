import pytest
import httpx
from asgi_lifespan import LifespanManager

from app.auth import deps as auth_deps
from app.core.config import Settings
from app.main import create_app
from app.storage.adapter import DataStoreAdapter
from fixtures import make_settings


@pytest.fixture
def config() -> Settings:
    return make_settings()


@pytest.fixture
async def store(config):
    adapter = DataStoreAdapter(config)
    await adapter.start()
    yield adapter
    await adapter.aclose()


@pytest.fixture
async def api(config):
    app = create_app(config)
    async with LifespanManager(app):
        yield app


@pytest.fixture
async def client(api):
    transport = httpx.ASGITransport(app=api)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def login(api):
    """Act as ``uid`` for subsequent requests, bypassing the OTP exchange."""

    def _login(uid: str, email: str = "") -> None:
        api.dependency_overrides[auth_deps.get_current_user_id] = lambda: uid
        api.dependency_overrides[auth_deps.get_current_email] = lambda: email or f"{uid}@example.com"

    yield _login
    api.dependency_overrides.pop(auth_deps.get_current_user_id, None)
    api.dependency_overrides.pop(auth_deps.get_current_email, None)
