"""Модуль генерации ключей для Redis кэша.

Все ключи имеют entity-like формат для удобства и читаемости:
- Списки: 'properties:list', 'rooms:list'
- Объекты: 'property:uuid', 'room:uuid'
- Вложенные: 'property:uuid:rooms'

Клиент добавляет к каждому ключу префикс CACHE_KEY_PREFIX
(ghd:property:...), здесь он не указывается.

Примеры:
    properties:list
    properties:list:show_all=true
    property:123e4567-e89b-12d3-a456-426614174000
    property:123e4567-e89b-12d3-a456-426614174000:rooms
    room:987fcdeb-51a2-43f7-b123-426614174000
"""

from typing import Any
from uuid import UUID


PREFIX_PROPERTY = 'property'
PREFIX_PROPERTIES = 'properties'
PREFIX_ROOM = 'room'
PREFIX_ROOMS = 'rooms'


def _build_key(*parts: Any) -> str:
    """Универсальный построитель ключей.

    Args:
        *parts: Части ключа для объединения

    Returns:
        str: Ключ в формате 'part1:part2:part3'

    Example:
        >>> _build_key('property', uuid4(), 'rooms')
        'property:123e4567-e89b-12d3-a456-426614174000:rooms'

    """
    return ':'.join(str(part) for part in parts if part is not None)


def key_properties_list(show_all: bool = False) -> str:
    """Ключ для списка объектов размещения.

    Example:
        >>> key_properties_list()
        'properties:list'
        >>> key_properties_list(show_all=True)
        'properties:list:show_all=true'

    """
    parts = [PREFIX_PROPERTIES, 'list']
    if show_all:
        parts.append('show_all=true')
    return _build_key(*parts)


def key_property(property_id: UUID) -> str:
    """Ключ для объекта размещения."""
    return _build_key(PREFIX_PROPERTY, property_id)


def key_property_rooms(property_id: UUID, show_all: bool = False) -> str:
    """Ключ для списка номеров объекта размещения.

    Example:
        >>> key_property_rooms(UUID('123e4567-...'))
        'property:123e4567-...:rooms'

    """
    return _build_key(
        PREFIX_PROPERTY,
        property_id,
        'rooms',
        'show_all=true' if show_all else None,
    )


def key_rooms_list(show_all: bool = False) -> str:
    """Ключ для списка всех номеров (без фильтра по объекту)."""
    return _build_key(
        PREFIX_ROOMS,
        'list',
        'show_all=true' if show_all else None,
    )


def key_room(room_id: UUID) -> str:
    """Ключ для номера."""
    return _build_key(PREFIX_ROOM, room_id)


def pattern_property(property_id: UUID) -> str:
    """Паттерн для всех ключей объекта размещения.

    Returns:
        str: Паттерн для Redis SCAN

    Example:
        >>> pattern_property(UUID('123e4567-...'))
        'property:123e4567-...*'

    """
    return f'{PREFIX_PROPERTY}:{property_id}*'


def pattern_all_properties() -> str:
    """Паттерн для всех списков объектов размещения."""
    return f'{PREFIX_PROPERTIES}*'


def pattern_property_rooms(property_id: UUID) -> str:
    """Паттерн для обоих вариантов списка номеров объекта."""
    return f'{PREFIX_PROPERTY}:{property_id}:rooms*'


def pattern_all_rooms() -> str:
    """Паттерн для всех списков номеров."""
    return f'{PREFIX_ROOMS}*'
