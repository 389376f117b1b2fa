"""Сериализация объектов для кэша и чтение с проверкой формата."""

import logging
from typing import Any, Iterable, Type, TypeVar

from pydantic import BaseModel, ValidationError

from src.cache.client import RedisCache


logger = logging.getLogger('app.cache')

SchemaT = TypeVar('SchemaT', bound=BaseModel)


def dump_one(schema: Type[SchemaT], obj: Any) -> dict:
    """ORM-объект или схема -> JSON-совместимый dict."""
    return schema.model_validate(obj).model_dump(mode='json')


def dump_list(schema: Type[SchemaT], objs: Iterable[Any]) -> list[dict]:
    return [dump_one(schema, obj) for obj in objs]


async def cache_get_one(
    cache: RedisCache,
    key: str,
    schema: Type[SchemaT],
) -> dict | None:
    """Объект из кэша, если он соответствует схеме.

    Запись другого формата (например, после смены схемы) удаляется,
    вызывающий код получает промах и читает из БД.
    """
    cached = await cache.get(key)
    if cached is None:
        return None
    reason = None
    if not isinstance(cached, dict):
        reason = 'не словарь'
    else:
        try:
            schema.model_validate(cached)
        except ValidationError:
            reason = f'не соответствует {schema.__name__}'
    if reason is None:
        return cached
    logger.warning('Устаревшая запись кэша %s (%s), удаляем', key, reason)
    await cache.delete(key)
    return None


async def cache_set(
    cache: RedisCache,
    key: str,
    payload: object,
    ttl: int,
) -> None:
    if ttl > 0:
        await cache.set(key, payload, ttl=ttl)
    else:
        logger.debug('Кэш для %s отключен (ttl=%s)', key, ttl)
