"""Redis cache module.

Основные компоненты:
    - RedisCache: асинхронный клиент с connection pooling
    - Функции инвалидации: invalidate_property, invalidate_room, etc.
    - Генераторы ключей: key_property, key_properties_list, etc.
    - Хелперы: cache_get_one, cache_set, dump_one, dump_list

"""

from src.cache.client import RedisCache, cache, get_cache
from src.cache.helpers import (
    cache_get_one,
    cache_set,
    dump_list,
    dump_one,
)
from src.cache.invalidation import (
    invalidate_all_properties,
    invalidate_property,
    invalidate_property_rooms,
    invalidate_room,
)
from src.cache.keys import (
    key_properties_list,
    key_property,
    key_property_rooms,
    key_room,
    key_rooms_list,
    pattern_all_properties,
    pattern_all_rooms,
    pattern_property,
    pattern_property_rooms,
)


__all__ = [
    # Client
    'RedisCache',
    'cache',
    'get_cache',
    # Helpers
    'cache_get_one',
    'cache_set',
    'dump_one',
    'dump_list',
    # Invalidation
    'invalidate_property',
    'invalidate_all_properties',
    'invalidate_property_rooms',
    'invalidate_room',
    # Keys
    'key_properties_list',
    'key_property',
    'key_property_rooms',
    'key_rooms_list',
    'key_room',
    'pattern_property',
    'pattern_all_properties',
    'pattern_all_rooms',
    'pattern_property_rooms',
]
