# tests/conftest.py
import copy
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.main import app
from app.api.deps import get_price_service
from app.core.settings import settings
from app.db.init_db import init_db
from app.db.session import make_engine
from app.fuelcheck.client import FuelCheckClient
from app.pricing.errors import StoreReadError, StoreWriteError
from app.pricing.service import PriceService
from app.store.base import KeyValueStore, PriceHistoryStore
from app.store.sql import SqlKeyValueStore

CRON_SECRET = "test-cron-secret"

# Shape of the NSW FuelCheck /fuel/prices response (trimmed)
SAMPLE_PAYLOAD = {
    "stations": [
        {"brand": "7-Eleven", "code": 1001, "name": "7-Eleven Ashfield"},
        {"brand": "Ampol", "code": 1002, "name": "Ampol Burwood"},
    ],
    "prices": [
        {"stationcode": 1001, "fueltype": "U91", "price": 180.1, "lastupdated": "10/03/2026 08:01:00"},
        {"stationcode": 1002, "fueltype": "E10", "price": 179.9, "lastupdated": "10/03/2026 08:03:00"},
        {"stationcode": 1001, "fueltype": "P95", "price": 205.0, "lastupdated": "10/03/2026 08:01:00"},
        {"stationcode": 1002, "fueltype": "DL", "price": 190.0, "lastupdated": "10/03/2026 08:03:00"},
        {"stationcode": 1002, "fueltype": "LPG", "price": 99.9, "lastupdated": "10/03/2026 08:03:00"},
    ],
}


class FixedClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class MemoryKV(KeyValueStore):
    """Dict-backed store whose reads/writes can be switched to fail."""

    def __init__(self) -> None:
        self.data: dict[str, Any] = {}
        self.fail_reads = False
        self.fail_writes = False
        self.writes = 0

    async def get(self, key: str) -> Any | None:
        if self.fail_reads:
            raise StoreReadError("store unreachable")
        return self.data.get(key)

    async def upsert(self, key: str, value: Any) -> None:
        if self.fail_writes:
            raise StoreWriteError("store rejected write")
        self.writes += 1
        self.data[key] = value


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture()
def sample_payload():
    return copy.deepcopy(SAMPLE_PAYLOAD)


@pytest.fixture()
def clock():
    return FixedClock(datetime(2026, 3, 10, 9, 30, tzinfo=timezone.utc))


@pytest.fixture()
def memory_kv():
    return MemoryKV()


@pytest.fixture()
def memory_service(memory_kv, clock):
    return PriceService(PriceHistoryStore(memory_kv, "fuel_prices"), clock=clock)


@pytest.fixture()
async def test_engine(tmp_path):
    # Use a real file (NOT :memory:) so every session sees the same database.
    engine = make_engine(f"sqlite+aiosqlite:///{tmp_path / 'test_fuel.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture()
def sql_store(test_engine):
    factory = async_sessionmaker(test_engine, expire_on_commit=False, class_=AsyncSession)
    return PriceHistoryStore(SqlKeyValueStore(factory), "fuel_prices")


@pytest.fixture()
def service(sql_store, clock):
    return PriceService(sql_store, clock=clock)


@pytest.fixture()
def upstream(monkeypatch):
    """
    Mock the FuelCheck API. Set ``upstream["payload"]`` to change the
    response, or to an exception instance to make the fetch fail.
    """
    state: dict[str, Any] = {"payload": SAMPLE_PAYLOAD, "calls": 0}

    async def mock_get_json(self, path: str = "", params=None):
        state["calls"] += 1
        if isinstance(state["payload"], Exception):
            raise state["payload"]
        return state["payload"]

    monkeypatch.setattr(FuelCheckClient, "get_json", mock_get_json, raising=True)
    return state


@pytest.fixture()
async def client(service, upstream, monkeypatch):
    monkeypatch.setattr(settings, "CRON_SECRET", CRON_SECRET)
    app.dependency_overrides[get_price_service] = lambda: service

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
