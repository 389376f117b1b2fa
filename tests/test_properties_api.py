from uuid import uuid4

import pytest


@pytest.mark.asyncio
async def test_create_property(client):  # noqa
    response = await client.post('/properties', json={'name': '  Hill Top '})

    assert response.status_code == 201
    data = response.json()
    assert data['name'] == 'Hill Top'
    assert data['is_active'] is True
    assert data['created_at'].endswith('Z')


@pytest.mark.asyncio
@pytest.mark.parametrize(
    'payload',
    [{'name': ''}, {}, {'name': 'A', 'unknown': 1}, {'name': 'x' * 101}],
)
async def test_create_property_invalid(client, payload):  # noqa
    response = await client.post('/properties', json=payload)

    assert response.status_code == 422
    assert response.json()['code'] == 422


@pytest.mark.asyncio
async def test_broken_json_is_bad_request(client):  # noqa
    response = await client.post(
        '/properties',
        content='{"name": ',
        headers={'Content-Type': 'application/json'},
    )

    assert response.status_code == 400
    assert response.json()['code'] == 400


@pytest.mark.asyncio
async def test_list_properties_sorted_and_filtered(client):  # noqa
    for name in ('Zebra Inn', 'Alpha House', 'Mango Stay'):
        await client.post('/properties', json={'name': name})
    mango = (await client.get('/properties')).json()[1]
    await client.delete(f'/properties/{mango["id"]}')

    active = await client.get('/properties')
    assert [p['name'] for p in active.json()] == ['Alpha House', 'Zebra Inn']

    everything = await client.get('/properties', params={'show_all': True})
    assert [p['name'] for p in everything.json()] == [
        'Alpha House',
        'Mango Stay',
        'Zebra Inn',
    ]


@pytest.mark.asyncio
async def test_get_property(client, guest_house):  # noqa
    response = await client.get(f'/properties/{guest_house["id"]}')

    assert response.status_code == 200
    assert response.json()['name'] == guest_house['name']


@pytest.mark.asyncio
async def test_get_missing_property(client):  # noqa
    response = await client.get(f'/properties/{uuid4()}')

    assert response.status_code == 404
    body = response.json()
    assert body['code'] == 404
    assert body['message']


@pytest.mark.asyncio
async def test_patch_property(client, guest_house):  # noqa
    response = await client.patch(
        f'/properties/{guest_house["id"]}',
        json={'name': 'Sea Breeze Annex'},
    )

    assert response.status_code == 200
    assert response.json()['name'] == 'Sea Breeze Annex'


@pytest.mark.asyncio
async def test_patch_property_rejects_null(client, guest_house):  # noqa
    response = await client.patch(
        f'/properties/{guest_house["id"]}',
        json={'name': None},
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_soft_delete_and_restore_property(client, guest_house):  # noqa
    url = f'/properties/{guest_house["id"]}'

    response = await client.delete(url)
    assert response.status_code == 204
    assert (await client.get(url)).json()['is_active'] is False

    response = await client.patch(url, json={'is_active': True})
    assert response.status_code == 200
    assert response.json()['is_active'] is True


@pytest.mark.asyncio
async def test_delete_missing_property(client):  # noqa
    response = await client.delete(f'/properties/{uuid4()}')

    assert response.status_code == 404
