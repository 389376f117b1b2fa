"""Кэш поверх Redis.

Все операции безопасны при недоступном Redis: чтение дает промах,
запись и удаление ничего не делают. Приложение при этом работает
напрямую с БД.
"""

from contextlib import asynccontextmanager
import logging
from typing import Any, AsyncIterator, Awaitable, Callable

import orjson
from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import RedisError

from src.config import settings


logger = logging.getLogger('app.cache')

JSONValue = dict | list | str | int | float | bool

SCAN_BATCH = 100


class RedisCache:
    """Клиент кэша с пулом соединений и JSON-значениями (orjson)."""

    def __init__(self, prefix: str | None = None) -> None:
        self.prefix = prefix if prefix is not None else (
            settings.cache.KEY_PREFIX
        )
        self._pool: ConnectionPool | None = None
        self._client: Redis | None = None

    def _key(self, key: str) -> str:
        return f'{self.prefix}:{key}' if self.prefix else key

    @property
    def is_available(self) -> bool:
        return self._client is not None

    async def connect(self) -> None:
        """Создает пул и проверяет соединение.

        При ошибке кэш остается выключенным до следующего connect().
        """
        redis_conf = settings.redis
        pool = ConnectionPool.from_url(
            redis_conf.URL,
            password=redis_conf.PASSWORD or None,
            max_connections=redis_conf.MAX_CONNECTIONS,
            socket_connect_timeout=redis_conf.SOCKET_CONNECTION_TIMEOUT,
            socket_timeout=redis_conf.SOCKET_TIMEOUT,
            retry_on_timeout=redis_conf.RETRY_ON_TIMEOUT,
        )
        client = Redis(connection_pool=pool)
        try:
            await client.ping()
        except (RedisError, OSError) as exc:
            logger.warning('Redis недоступен, кэш выключен: %s', exc)
            await pool.disconnect()
            return

        self._pool, self._client = pool, client
        logger.info(
            'Redis подключен (префикс %r, пул до %d соединений)',
            self.prefix,
            redis_conf.MAX_CONNECTIONS,
        )

    async def close(self) -> None:
        client, pool = self._client, self._pool
        self._client = self._pool = None
        if client is not None:
            await client.aclose()
        if pool is not None:
            await pool.aclose()
            logger.info('Соединение с Redis закрыто')

    @asynccontextmanager
    async def connected(self) -> AsyncIterator['RedisCache']:
        """Кэш, подключенный на время блока.

        Для кода вне FastAPI (задачи Celery), где lifespan не вызывает
        connect(). Уже открытое соединение не трогает.
        """
        owned = not self.is_available
        if owned:
            await self.connect()
        try:
            yield self
        finally:
            if owned:
                await self.close()

    async def get(self, key: str) -> JSONValue | None:
        """Значение по ключу или None (промах, ошибка, Redis выключен)."""
        if self._client is None:
            return None
        try:
            raw = await self._client.get(self._key(key))
            return orjson.loads(raw) if raw else None
        except (RedisError, ValueError) as exc:
            logger.debug('Ошибка чтения кэша %s: %s', key, exc)
            return None

    async def set(
        self,
        key: str,
        value: JSONValue,
        ttl: int = 300,
    ) -> bool:
        if self._client is None:
            return False
        try:
            await self._client.set(self._key(key), orjson.dumps(value), ex=ttl)
        except (RedisError, TypeError) as exc:
            logger.debug('Ошибка записи кэша %s: %s', key, exc)
            return False
        return True

    async def get_or_set(
        self,
        key: str,
        factory: Callable[[], Awaitable[Any]],
        ttl: int = 300,
    ) -> Any:
        """Read-through: при промахе вызывает factory и кладет результат.

        Без Redis factory вызывается на каждый запрос.
        """
        cached = await self.get(key)
        if cached is not None:
            logger.debug('Кэш-попадание: %s', key)
            return cached
        value = await factory()
        await self.set(key, value, ttl)
        return value

    async def delete(self, *keys: str) -> int:
        if self._client is None or not keys:
            return 0
        try:
            return await self._client.delete(*map(self._key, keys))
        except RedisError as exc:
            logger.debug('Ошибка удаления ключей %s: %s', keys, exc)
            return 0

    async def delete_pattern(self, pattern: str) -> int:
        """Удаляет ключи по glob-шаблону, обходя keyspace через SCAN."""
        if self._client is None:
            return 0
        deleted = 0
        batch: list[bytes] = []
        try:
            async for found in self._client.scan_iter(
                match=self._key(pattern),
                count=SCAN_BATCH,
            ):
                batch.append(found)
                if len(batch) == SCAN_BATCH:
                    deleted += await self._client.delete(*batch)
                    batch.clear()
            if batch:
                deleted += await self._client.delete(*batch)
        except RedisError as exc:
            logger.debug('Ошибка удаления по шаблону %s: %s', pattern, exc)
        return deleted


cache = RedisCache()


async def get_cache() -> RedisCache:
    """Зависимость FastAPI с общим клиентом кэша."""
    return cache
