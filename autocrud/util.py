from collections.abc import Sequence


def v(val):
    if isinstance(val, str) or not isinstance(val, Sequence):
        yield val
    else:
        for item in val:
            yield item


async def get_body(request):
    """
    Get the JSON request body as a dictionary.

    The parsed body is cached by the request object, so changes made to the
    returned dictionary are seen by later calls during the same request.

    :param request: the current request
    :return: the JSON object sent by the client, or an empty dictionary
    """
    data = await request.get_json(force=True, silent=True)
    return data if isinstance(data, dict) else dict()
