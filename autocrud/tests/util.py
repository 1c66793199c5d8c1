import json

from autocrud.fields import ID


async def get_json(response, status=200):
    assert response.status_code == status
    return await response.get_json()


async def get_text(response, status):
    """
    Decode a status-only response (e.g. 'Not Found') or a plain text error.
    """
    assert response.status_code == status
    return await response.get_data(as_text=True)


async def get_saved(response, status=200):
    """
    Decode a create or update response (a JSON string holding the record).
    """
    data = await get_json(response, status)
    assert isinstance(data, str)
    return json.loads(data)


def assert_record(rec, validator=None, **values):
    assert isinstance(rec, dict)
    assert ID in rec
    if validator is not None:
        assert validator(rec[ID])
    for name, value in values.items():
        assert name in rec
        assert rec[name] == value
    return rec


def assert_no_field(rec, name):
    assert name not in rec


def assert_calls(model, *operations):
    assert tuple(call[0] for call in model.calls) == operations
