# tests/conftest.py
import os

import pytest
import pytest_asyncio
from dotenv import load_dotenv
from httpx import ASGITransport, AsyncClient

from geocache.schemas.geo import Coordinate
from geocache.services.cache_store import CacheStore
from geocache.services.container import build_container
from tests.factories import FakeClock, FakeProviders, InMemoryBackend

load_dotenv(".env.test", override=False)
os.environ["TESTING"] = "1"

from geocache.main import create_app  # noqa: E402


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def backend(clock) -> InMemoryBackend:
    return InMemoryBackend(clock)


@pytest.fixture
def store(backend) -> CacheStore:
    return CacheStore(backend)


@pytest.fixture
def providers() -> FakeProviders:
    return FakeProviders()


@pytest.fixture
def london() -> Coordinate:
    return Coordinate.of(51.5, -0.12)


@pytest.fixture
def services(backend, providers, clock):
    return build_container(
        backend,
        providers.as_providers(),
        postal_zone_countries=["GB"],
        clock=clock,
    )


@pytest_asyncio.fixture
async def app_client(services):
    app = create_app(services)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
