from contextlib import asynccontextmanager
from uuid import UUID

import pytest

from src.cache.client import cache
from src.cache.keys import (
    key_properties_list,
    key_property,
    key_property_rooms,
    key_room,
    key_rooms_list,
)
from src.celery.tasks import room_status
from src.rooms.constants import RoomStatus
from src.rooms.models import Room


async def warm_room_cache(client, room, live_cache, cache_key):  # noqa
    """Читает номер и списки номеров, чтобы они попали в кэш."""
    await client.get('/rooms')
    await client.get('/rooms', params={'property_id': room['property_id']})
    await client.get(f'/rooms/{room["id"]}')
    keys = [
        cache_key(key_rooms_list()),
        cache_key(key_property_rooms(UUID(room['property_id']))),
        cache_key(key_room(UUID(room['id']))),
    ]
    assert all(key in live_cache.store for key in keys)
    return keys


def assert_dropped(live_cache, keys):  # noqa
    assert [key for key in keys if key in live_cache.store] == []


@pytest.mark.asyncio
async def test_room_reads_are_cached(client, room, live_cache, cache_key):  # noqa
    await warm_room_cache(client, room, live_cache, cache_key)

    response = await client.get(f'/rooms/{room["id"]}')

    assert response.json()['room_no'] == room['room_no']


@pytest.mark.asyncio
async def test_booking_actions_drop_room_cache(  # noqa
    client,
    room,
    make_booking,
    live_cache,
    cache_key,
):
    booking = await make_booking()
    url = f'/bookings/{booking["id"]}'

    keys = await warm_room_cache(client, room, live_cache, cache_key)
    await client.post(f'{url}/assign', json={'room_id': room['id']})
    assert_dropped(live_cache, keys)

    await warm_room_cache(client, room, live_cache, cache_key)
    await client.post(f'{url}/check-in')
    assert_dropped(live_cache, keys)
    room_state = (await client.get(f'/rooms/{room["id"]}')).json()
    assert room_state['status'] == 'occupied'

    await warm_room_cache(client, room, live_cache, cache_key)
    await client.post(f'{url}/check-out')
    assert_dropped(live_cache, keys)
    room_state = (await client.get(f'/rooms/{room["id"]}')).json()
    assert room_state['status'] == 'available'


@pytest.mark.asyncio
async def test_cancel_drops_room_cache(  # noqa
    client,
    room,
    make_booking,
    live_cache,
    cache_key,
):
    booking = await make_booking(room_id=room['id'])
    await client.post(f'/bookings/{booking["id"]}/check-in')

    keys = await warm_room_cache(client, room, live_cache, cache_key)
    response = await client.delete(f'/bookings/{booking["id"]}')

    assert response.status_code == 200
    assert_dropped(live_cache, keys)
    room_state = (await client.get(f'/rooms/{room["id"]}')).json()
    assert room_state['status'] == 'available'


@pytest.mark.asyncio
async def test_room_check_in_drops_room_cache(  # noqa
    client,
    room,
    make_booking,
    live_cache,
    cache_key,
):
    booking = await make_booking()

    keys = await warm_room_cache(client, room, live_cache, cache_key)
    response = await client.post(
        f'/rooms/{room["id"]}/check-in',
        json={'booking_id': booking['id']},
    )

    assert response.status_code == 200
    assert_dropped(live_cache, keys)


@pytest.mark.asyncio
async def test_property_changes_drop_property_cache(  # noqa
    client,
    guest_house,
    live_cache,
    cache_key,
):
    url = f'/properties/{guest_house["id"]}'
    keys = [
        cache_key(key_properties_list()),
        cache_key(key_property(UUID(guest_house['id']))),
    ]

    await client.get('/properties')
    await client.get(url)
    assert all(key in live_cache.store for key in keys)

    await client.patch(url, json={'name': 'Sea Breeze Annex'})
    assert_dropped(live_cache, keys)
    assert (await client.get(url)).json()['name'] == 'Sea Breeze Annex'

    await client.get('/properties')
    await client.delete(url)
    assert_dropped(live_cache, keys)
    assert (await client.get(url)).json()['is_active'] is False


@pytest.mark.asyncio
async def test_room_status_task_connects_cache_and_drops_keys(  # noqa
    client,
    room,
    db_session,
    live_cache,
    cache_key,
    monkeypatch,
):
    keys = await warm_room_cache(client, room, live_cache, cache_key)
    stored = await db_session.get(Room, UUID(room['id']))
    stored.status = RoomStatus.OCCUPIED
    await db_session.commit()

    # Воркер стартует без подключенного кэша
    monkeypatch.setattr(cache, '_client', None)

    async def connect():  # noqa
        cache._client = live_cache

    @asynccontextmanager
    async def shared_session_scope():  # noqa
        yield db_session

    monkeypatch.setattr(cache, 'connect', connect)
    monkeypatch.setattr(room_status, 'session_scope', shared_session_scope)

    changed = await room_status._sync_room_statuses_async()

    assert changed == 1
    assert cache.is_available is False
    assert live_cache.closed is True
    assert_dropped(live_cache, keys)
    await db_session.refresh(stored)
    assert stored.status == RoomStatus.AVAILABLE
