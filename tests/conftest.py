import httpx
import pytest
import respx
from httpx import ASGITransport, AsyncClient

from blingproxy.app import app
from blingproxy.config import Settings, get_settings
from blingproxy.services.bling import BlingClient, Credentials
from tests.upstream import BLING_API, DEPOSIT_ID  # sourcery skip: dont-import-test-modules


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(
        client_id="client-id",
        client_secret="client-secret",
        access_token="old-access",
        refresh_token="old-refresh",
    )


@pytest.fixture
def settings() -> Settings:
    """Settings wired to the mocked upstream, ignoring any local .env file."""
    return Settings(_env_file=None, bling_api_url=BLING_API, bling_id_deposito=DEPOSIT_ID)


@pytest.fixture
async def bling(credentials: Credentials):
    http = httpx.AsyncClient(base_url=BLING_API, timeout=5.0)
    client = BlingClient(credentials, http)
    yield client
    await client.aclose()


@pytest.fixture
def bling_mock():
    """Mock the Bling API; requests to unmocked routes raise."""
    with respx.mock(base_url=BLING_API, assert_all_called=False) as mock:
        yield mock


@pytest.fixture
async def client(bling: BlingClient, settings: Settings):
    app.state.bling = bling
    app.dependency_overrides[get_settings] = lambda: settings
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
