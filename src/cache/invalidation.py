"""Сброс кэша после изменения объектов размещения и номеров."""

import logging
from uuid import UUID

from .client import cache
from .keys import (
    key_room,
    pattern_all_properties,
    pattern_all_rooms,
    pattern_property,
    pattern_property_rooms,
)


logger = logging.getLogger('app.cache')


async def _drop(*patterns: str, keys: tuple[str, ...] = ()) -> int:
    deleted = await cache.delete(*keys)
    for pattern in patterns:
        deleted += await cache.delete_pattern(pattern)
    return deleted


async def invalidate_property(property_id: UUID) -> int:
    """Объект, его номера и все списки: меняется property_name номеров."""
    deleted = await _drop(
        pattern_property(property_id),
        pattern_all_properties(),
        pattern_all_rooms(),
    )
    logger.info('Сброшен кэш объекта %s: %d ключей', property_id, deleted)
    return deleted


async def invalidate_all_properties() -> int:
    deleted = await _drop(pattern_all_properties())
    logger.info('Сброшены списки объектов: %d ключей', deleted)
    return deleted


async def invalidate_property_rooms(property_id: UUID) -> int:
    return await _drop(
        pattern_all_rooms(),
        pattern_property_rooms(property_id),
    )


async def invalidate_room(room_id: UUID, property_id: UUID) -> int:
    """Номер и списки номеров, в которые он входит."""
    deleted = await cache.delete(key_room(room_id))
    deleted += await invalidate_property_rooms(property_id)
    logger.info('Сброшен кэш номера %s: %d ключей', room_id, deleted)
    return deleted
