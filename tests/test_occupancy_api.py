from uuid import uuid4

import pytest


@pytest.mark.asyncio
async def test_occupancy(client, guest_house, room, make_booking):  # noqa
    free_room = (
        await client.post(
            '/rooms',
            json={'property_id': guest_house['id'], 'room_no': '102'},
        )
    ).json()
    leaving_room = (
        await client.post(
            '/rooms',
            json={'property_id': guest_house['id'], 'room_no': '103'},
        )
    ).json()
    staying = await make_booking(room_id=room['id'])
    leaving = await make_booking(
        room_id=leaving_room['id'],
        check_in_date='2025-03-08',
        check_out_date='2025-03-11',
    )
    waiting = await make_booking(
        check_in_date='2025-04-01',
        check_out_date='2025-04-02',
    )

    response = await client.get(
        '/occupancy',
        params={'property_id': guest_house['id'], 'date': '2025-03-11'},
    )

    assert response.status_code == 200
    data = response.json()
    assert data['date'] == '2025-03-11'
    assert [r['room']['room_no'] for r in data['rooms']] == [
        '101',
        '102',
        '103',
    ]
    by_no = {r['room']['room_no']: r for r in data['rooms']}

    assert by_no['101']['is_available'] is False
    assert [(b['id'], b['type']) for b in by_no['101']['bookings']] == [
        (staying['id'], 'stay'),
    ]
    assert by_no['102']['is_available'] is True
    assert by_no['102']['bookings'] == []
    assert by_no['102']['room']['id'] == free_room['id']
    assert by_no['103']['is_available'] is True
    assert [(b['id'], b['type']) for b in by_no['103']['bookings']] == [
        (leaving['id'], 'checkout'),
    ]
    assert [b['id'] for b in data['unassigned']] == [waiting['id']]


@pytest.mark.asyncio
async def test_occupancy_skips_inactive_rooms(client, guest_house, room):  # noqa
    await client.delete(f'/rooms/{room["id"]}')

    response = await client.get(
        '/occupancy',
        params={'property_id': guest_house['id'], 'date': '2025-03-11'},
    )

    assert response.status_code == 200
    assert response.json()['rooms'] == []


@pytest.mark.asyncio
async def test_occupancy_unknown_property(client):  # noqa
    response = await client.get(
        '/occupancy',
        params={'property_id': str(uuid4())},
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_occupancy_requires_property(client):  # noqa
    response = await client.get('/occupancy')

    assert response.status_code == 422
