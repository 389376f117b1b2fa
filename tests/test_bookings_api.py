from uuid import UUID, uuid4

import pytest
from sqlalchemy import update

from src.rooms.models import Room


async def room_status(client, room_id):  # noqa
    return (await client.get(f'/rooms/{room_id}')).json()['status']


@pytest.mark.asyncio
async def test_create_booking(client, guest_house, build_booking):  # noqa
    response = await client.post(
        '/bookings',
        json=build_booking(guest_house['id'], reservation_id='BK-1'),
    )

    assert response.status_code == 201
    data = response.json()
    assert data['status'] == 'booked'
    assert data['amount'] == 1500.0
    assert data['property_name'] == guest_house['name']
    assert data['room_id'] is None
    assert data['room_no'] is None
    assert data['reservation_id'] == 'BK-1'


@pytest.mark.asyncio
async def test_create_booking_with_room(client, room, make_booking):  # noqa
    booking = await make_booking(room_id=room['id'])

    assert booking['room_id'] == room['id']
    assert booking['room_no'] == room['room_no']
    assert booking['status'] == 'booked'
    assert await room_status(client, room['id']) == 'available'


@pytest.mark.asyncio
@pytest.mark.parametrize(
    'overrides',
    [
        {'check_out_date': '2025-03-10'},
        {'check_out_date': '2025-03-09'},
        {'amount': '-1'},
        {'platform': 'Trivago'},
        {'payment_method': 'card'},
        {'guest_name': ''},
    ],
)
async def test_create_booking_invalid(  # noqa
    client,
    guest_house,
    build_booking,
    overrides,
):
    response = await client.post(
        '/bookings',
        json=build_booking(guest_house['id'], **overrides),
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_create_booking_unknown_property(client, build_booking):  # noqa
    response = await client.post(
        '/bookings',
        json=build_booking(str(uuid4())),
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_create_booking_room_of_other_property(  # noqa
    client,
    room,
    build_booking,
):
    other = (await client.post('/properties', json={'name': 'Other'})).json()
    response = await client.post(
        '/bookings',
        json=build_booking(other['id'], room_id=room['id']),
    )

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_get_booking(client, make_booking):  # noqa
    booking = await make_booking()

    response = await client.get(f'/bookings/{booking["id"]}')
    assert response.status_code == 200
    assert response.json()['id'] == booking['id']

    missing = await client.get(f'/bookings/{uuid4()}')
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_patch_booking(client, make_booking):  # noqa
    booking = await make_booking()

    response = await client.patch(
        f'/bookings/{booking["id"]}',
        json={'guest_name': 'Anna', 'amount': '2000.5'},
    )

    assert response.status_code == 200
    data = response.json()
    assert data['guest_name'] == 'Anna'
    assert data['amount'] == 2000.5
    assert data['check_in_date'] == booking['check_in_date']


@pytest.mark.asyncio
async def test_patch_booking_dates_checked_against_stored(  # noqa
    client,
    make_booking,
):
    booking = await make_booking()

    response = await client.patch(
        f'/bookings/{booking["id"]}',
        json={'check_out_date': '2025-03-09'},
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_patch_booking_rejects_null(client, make_booking):  # noqa
    booking = await make_booking()

    response = await client.patch(
        f'/bookings/{booking["id"]}',
        json={'amount': None},
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_patch_booking_dates_conflict(client, room, make_booking):  # noqa
    await make_booking(room_id=room['id'])
    later = await make_booking(
        room_id=room['id'],
        check_in_date='2025-03-13',
        check_out_date='2025-03-16',
    )

    response = await client.patch(
        f'/bookings/{later["id"]}',
        json={'check_in_date': '2025-03-12'},
    )

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_assign_room(client, room, make_booking):  # noqa
    booking = await make_booking()

    response = await client.post(
        f'/bookings/{booking["id"]}/assign',
        json={'room_id': room['id']},
    )

    assert response.status_code == 200
    assert response.json()['room_id'] == room['id']
    assert response.json()['status'] == 'booked'

    unassigned = await client.post(
        f'/bookings/{booking["id"]}/assign',
        json={'room_id': None},
    )
    assert unassigned.status_code == 200
    assert unassigned.json()['room_id'] is None


@pytest.mark.asyncio
async def test_assign_room_conflict(client, room, make_booking):  # noqa
    await make_booking(room_id=room['id'])
    overlapping = await make_booking(
        check_in_date='2025-03-12',
        check_out_date='2025-03-14',
    )
    turnover = await make_booking(
        check_in_date='2025-03-13',
        check_out_date='2025-03-14',
    )

    response = await client.post(
        f'/bookings/{overlapping["id"]}/assign',
        json={'room_id': room['id']},
    )
    assert response.status_code == 409

    response = await client.post(
        f'/bookings/{turnover["id"]}/assign',
        json={'room_id': room['id']},
    )
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_assign_room_ignores_cancelled(client, room, make_booking):  # noqa
    first = await make_booking(room_id=room['id'])
    await client.delete(f'/bookings/{first["id"]}')
    second = await make_booking()

    response = await client.post(
        f'/bookings/{second["id"]}/assign',
        json={'room_id': room['id']},
    )

    assert response.status_code == 200


@pytest.mark.asyncio
async def test_assign_room_of_other_property(client, room, build_booking):  # noqa
    other = (await client.post('/properties', json={'name': 'Other'})).json()
    booking = (
        await client.post('/bookings', json=build_booking(other['id']))
    ).json()

    response = await client.post(
        f'/bookings/{booking["id"]}/assign',
        json={'room_id': room['id']},
    )

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_assign_unknown_room(client, make_booking):  # noqa
    booking = await make_booking()

    response = await client.post(
        f'/bookings/{booking["id"]}/assign',
        json={'room_id': str(uuid4())},
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_assign_cancelled_booking(client, room, make_booking):  # noqa
    booking = await make_booking()
    await client.delete(f'/bookings/{booking["id"]}')

    response = await client.post(
        f'/bookings/{booking["id"]}/assign',
        json={'room_id': room['id']},
    )

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_check_in_and_check_out(client, room, make_booking):  # noqa
    booking = await make_booking(room_id=room['id'])
    url = f'/bookings/{booking["id"]}'

    response = await client.post(f'{url}/check-in')
    assert response.status_code == 200
    assert response.json()['status'] == 'checkin'
    assert await room_status(client, room['id']) == 'occupied'

    response = await client.post(f'{url}/check-out')
    assert response.status_code == 200
    data = response.json()
    assert data['status'] == 'checkout'
    assert data['room_id'] == room['id']
    assert await room_status(client, room['id']) == 'available'

    again = await client.post(f'{url}/check-in')
    assert again.status_code == 409


@pytest.mark.asyncio
async def test_check_in_requires_room(client, make_booking):  # noqa
    booking = await make_booking()

    response = await client.post(f'/bookings/{booking["id"]}/check-in')

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_check_in_into_inactive_room(  # noqa
    client,
    room,
    make_booking,
    db_session,
):
    booking = await make_booking(room_id=room['id'])
    # Номер, деактивированный в обход API (например, прямо в БД)
    await db_session.execute(
        update(Room)
        .where(Room.id == UUID(room['id']))
        .values(active=False),
    )
    await db_session.commit()

    response = await client.post(f'/bookings/{booking["id"]}/check-in')

    assert response.status_code == 409
    stored = (await client.get(f'/bookings/{booking["id"]}')).json()
    assert stored['status'] == 'booked'
    assert await room_status(client, room['id']) == 'available'


@pytest.mark.asyncio
async def test_check_out_requires_check_in(client, room, make_booking):  # noqa
    booking = await make_booking(room_id=room['id'])

    response = await client.post(f'/bookings/{booking["id"]}/check-out')

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_move_checked_in_guest(client, guest_house, room, make_booking):  # noqa
    second_room = (
        await client.post(
            '/rooms',
            json={'property_id': guest_house['id'], 'room_no': '102'},
        )
    ).json()
    booking = await make_booking(room_id=room['id'])
    url = f'/bookings/{booking["id"]}'
    await client.post(f'{url}/check-in')

    cannot_unassign = await client.post(
        f'{url}/assign',
        json={'room_id': None},
    )
    assert cannot_unassign.status_code == 409

    response = await client.post(
        f'{url}/assign',
        json={'room_id': second_room['id']},
    )
    assert response.status_code == 200
    assert response.json()['room_id'] == second_room['id']
    assert await room_status(client, room['id']) == 'available'
    assert await room_status(client, second_room['id']) == 'occupied'


@pytest.mark.asyncio
async def test_cancel_checked_in_booking(client, room, make_booking):  # noqa
    booking = await make_booking(room_id=room['id'])
    await client.post(f'/bookings/{booking["id"]}/check-in')

    response = await client.delete(f'/bookings/{booking["id"]}')

    assert response.status_code == 200
    assert response.json()['status'] == 'cancel'
    assert await room_status(client, room['id']) == 'available'

    twice = await client.delete(f'/bookings/{booking["id"]}')
    assert twice.status_code == 409


@pytest.mark.asyncio
async def test_cancel_keeps_room_of_other_guest(client, room, make_booking):  # noqa
    guest = await make_booking(room_id=room['id'])
    await client.post(f'/bookings/{guest["id"]}/check-in')
    future = await make_booking(
        room_id=room['id'],
        check_in_date='2025-03-20',
        check_out_date='2025-03-22',
    )

    response = await client.delete(f'/bookings/{future["id"]}')

    assert response.status_code == 200
    assert await room_status(client, room['id']) == 'occupied'


@pytest.mark.asyncio
async def test_list_bookings_for_date(client, make_booking):  # noqa
    arriving = await make_booking(
        guest_name='Arriving',
        check_in_date='2025-03-12',
        check_out_date='2025-03-14',
    )
    staying = await make_booking(guest_name='Staying')
    leaving = await make_booking(
        guest_name='Leaving',
        check_in_date='2025-03-09',
        check_out_date='2025-03-12',
    )
    cancelled = await make_booking(guest_name='Cancelled')
    await client.delete(f'/bookings/{cancelled["id"]}')
    await make_booking(
        guest_name='Later',
        check_in_date='2025-03-20',
        check_out_date='2025-03-21',
    )

    response = await client.get('/bookings', params={'date': '2025-03-12'})

    assert response.status_code == 200
    types = {b['id']: b['type'] for b in response.json()}
    assert types == {
        arriving['id']: 'checkin',
        staying['id']: 'stay',
        leaving['id']: 'checkout',
    }


@pytest.mark.asyncio
async def test_list_bookings_by_property(  # noqa
    client,
    make_booking,
    build_booking,
):
    mine = await make_booking()
    other = (await client.post('/properties', json={'name': 'Other'})).json()
    await client.post('/bookings', json=build_booking(other['id']))

    response = await client.get(
        '/bookings',
        params={'date': '2025-03-11', 'property_id': mine['property_id']},
    )

    assert [b['id'] for b in response.json()] == [mine['id']]


@pytest.mark.asyncio
async def test_list_unassigned_and_active(client, room, make_booking):  # noqa
    later = await make_booking(
        check_in_date='2025-04-01',
        check_out_date='2025-04-03',
    )
    sooner = await make_booking()
    in_house = await make_booking(room_id=room['id'])
    await client.post(f'/bookings/{in_house["id"]}/check-in')
    cancelled = await make_booking()
    await client.delete(f'/bookings/{cancelled["id"]}')

    unassigned = await client.get('/bookings', params={'unassigned': True})
    assert [b['id'] for b in unassigned.json()] == [sooner['id'], later['id']]
    assert all(b['type'] is None for b in unassigned.json())

    active = await client.get('/bookings', params={'active': True})
    assert [b['id'] for b in active.json()] == [in_house['id']]


@pytest.mark.asyncio
async def test_bulk_create(client, guest_house, build_booking):  # noqa
    rows = [
        build_booking(guest_house['id'], reservation_id='R-1'),
        build_booking(guest_house['id'], reservation_id='R-2'),
        build_booking(guest_house['id'], reservation_id='R-1'),
        build_booking(guest_house['id']),
    ]

    response = await client.post('/bookings/bulk', json={'bookings': rows})

    assert response.status_code == 201
    data = response.json()
    assert len(data['created']) == 3
    assert data['skipped'] == ['R-1']

    repeat = await client.post(
        '/bookings/bulk',
        json={'bookings': rows[:2]},
    )
    assert repeat.status_code == 201
    assert repeat.json()['created'] == []
    assert repeat.json()['skipped'] == ['R-1', 'R-2']


@pytest.mark.asyncio
async def test_bulk_create_is_atomic(client, guest_house, build_booking):  # noqa
    rows = [
        build_booking(guest_house['id'], reservation_id='R-1'),
        build_booking(str(uuid4()), reservation_id='R-2'),
    ]

    response = await client.post('/bookings/bulk', json={'bookings': rows})

    assert response.status_code == 404
    listed = await client.get('/bookings', params={'unassigned': True})
    assert listed.json() == []


@pytest.mark.asyncio
async def test_bulk_create_empty(client):  # noqa
    response = await client.post('/bookings/bulk', json={'bookings': []})

    assert response.status_code == 422
