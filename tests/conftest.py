import sys
from contextlib import AsyncExitStack
from pathlib import Path

import httpx
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from user_access_platform.config import Settings  # noqa: E402
from user_access_platform.main import create_app  # noqa: E402

BASE_URL = "http://userapitest"


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        jwt_secret="test-secret-0123456789abcdef-0123456789",
        app_env="test",
        bcrypt_rounds=4,
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        log_dir=tmp_path / "logs",
        log_to_file=False,
    )


@pytest.fixture
def app(settings):
    application = create_app(settings)
    # ASGITransport does not run startup events
    application.state.database.init_db()
    yield application
    application.state.database.dispose()


@pytest.fixture
async def client_factory(app):
    async with AsyncExitStack() as stack:

        async def make_client(raise_app_exceptions: bool = True) -> httpx.AsyncClient:
            transport = httpx.ASGITransport(app=app, raise_app_exceptions=raise_app_exceptions)
            return await stack.enter_async_context(
                httpx.AsyncClient(transport=transport, base_url=BASE_URL)
            )

        yield make_client


@pytest.fixture
async def api_client(client_factory):
    return await client_factory()
