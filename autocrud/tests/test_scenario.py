import pytest

from autocrud.tests.util import *


@pytest.mark.asyncio
async def test_user_lifecycle(crud_client, users):
    user = await get_saved(await crud_client.post('/api/users/', json={'username': 'al', 'age': 9, 'hacker': True}))
    assert user == {'_id': user['_id'], 'username': 'al', 'age': 9}
    assert users.rows[user['_id']] == {'_id': user['_id'], 'username': 'al', 'age': 9}

    path = '/api/users/{}'.format(user['_id'])
    assert await get_json(await crud_client.get(path)) == user

    await get_text(await crud_client.delete(path), 200)
    await get_text(await crud_client.delete(path), 404)
    assert await get_json(await crud_client.get(path)) is None


@pytest.mark.asyncio
async def test_many_users(crud_client, users, fake):
    names = list()
    for _ in range(10):
        names.append(fake.unique.user_name())
        await get_saved(await crud_client.post('/api/users/', json={
            'username': names[-1],
            'age': fake.random_int(1, 99)}))

    data = await get_json(await crud_client.get('/api/users/'))
    assert [rec['username'] for rec in data] == names

    await get_text(await crud_client.post('/api/users/', json={'username': names[3]}), 400)
    assert len(users.rows) == 10

    rec = data[5]
    updated = await get_saved(await crud_client.put('/api/users/{}'.format(rec['_id']), json={'age': 100}))
    assert updated == dict(rec, age=100)
