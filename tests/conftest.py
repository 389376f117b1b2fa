from datetime import date
from fnmatch import fnmatchcase
from typing import Any, AsyncGenerator, Awaitable, Callable

from httpx import ASGITransport, AsyncClient
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from src.cache.client import cache
from src.database.base import Base
from src.database.sessions import get_async_session
from src.main import app


TEST_DATABASE_URL = 'sqlite+aiosqlite://'

CHECK_IN = date(2025, 3, 10)
CHECK_OUT = date(2025, 3, 13)

BookingFactory = Callable[..., Awaitable[dict[str, Any]]]


def booking_payload(property_id: str, **overrides: Any) -> dict[str, Any]:
    """Тело запроса на создание брони с разумными значениями."""
    payload = {
        'guest_name': 'Ivan Petrov',
        'email': 'ivan@example.com',
        'phone': '+79990000000',
        'property_id': property_id,
        'platform': 'Booking.com',
        'payment_method': 'online',
        'amount': '1500.00',
        'payment_date': CHECK_IN.isoformat(),
        'check_in_date': CHECK_IN.isoformat(),
        'check_out_date': CHECK_OUT.isoformat(),
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def build_booking() -> Callable[..., dict[str, Any]]:  # noqa
    return booking_payload


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:  # noqa
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={'check_same_thread': False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):  # noqa
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:  # noqa
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:  # noqa
    async def override_get_async_session() -> AsyncGenerator[
        AsyncSession,
        None,
    ]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_get_async_session
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url='http://test',
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def guest_house(client) -> dict[str, Any]:  # noqa
    response = await client.post('/properties', json={'name': 'Sea Breeze'})
    assert response.status_code == 201, response.text
    return response.json()


@pytest_asyncio.fixture
async def room(client, guest_house) -> dict[str, Any]:  # noqa
    response = await client.post(
        '/rooms',
        json={'property_id': guest_house['id'], 'room_no': '101'},
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest_asyncio.fixture
async def make_booking(client, guest_house) -> BookingFactory:  # noqa
    async def _make(**overrides: Any) -> dict[str, Any]:
        response = await client.post(
            '/bookings',
            json=booking_payload(guest_house['id'], **overrides),
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _make


class InMemoryRedis:
    """Часть API redis.asyncio.Redis, которой пользуется RedisCache."""

    def __init__(self) -> None:
        self.store: dict[str, bytes] = {}
        self.closed = False

    async def ping(self) -> bool:
        return True

    async def get(self, key: str) -> bytes | None:
        return self.store.get(key)

    async def set(self, key: str, value: bytes, ex: int | None = None) -> bool:
        self.store[key] = value
        return True

    async def delete(self, *keys: str) -> int:
        return sum(self.store.pop(key, None) is not None for key in keys)

    async def scan_iter(self, match: str = '*', count: int | None = None):  # noqa
        for key in [k for k in self.store if fnmatchcase(k, match)]:
            yield key

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def live_cache(monkeypatch) -> InMemoryRedis:  # noqa
    """Подключает общий клиент кэша к хранилищу в памяти."""
    redis = InMemoryRedis()
    monkeypatch.setattr(cache, '_client', redis)
    return redis


@pytest.fixture
def cache_key() -> Callable[[str], str]:  # noqa
    """Ключ в том виде, в каком он лежит в Redis (с префиксом)."""
    return cache._key

