import inspect
from collections.abc import Sequence, Set

from autocrud.exc import Error
from autocrud.log import logger
from autocrud.util import get_body


class Filter:
    """ The base class for all route filters """

    def wrap(self, handler):
        """
        Wrap a request handler.

        :param handler: a coroutine function accepting the request
        :return: a coroutine function accepting the request
        """
        raise NotImplementedError

    def __repr__(self):
        return '<{}>'.format(self.__class__.__name__)


class MiddlewareFilter(Filter):
    """
    Runs a caller supplied function in front of the handler.

    The function receives the request and the downstream handler, and returns
    a response. It may call the handler (possibly after inspecting or changing
    the request body), or withhold it and respond on its own.

    >>> async def superuser_only(request, handler):
    >>>     if not current_user.is_superuser:
    >>>         return 'Forbidden', 403
    >>>     return await handler(request)
    >>>
    >>> MiddlewareFilter(superuser_only)
    """

    def __init__(self, func):
        if not callable(func):
            raise Error('middleware must be callable: {!r}'.format(func))
        self.func = func

    def wrap(self, handler):

        async def handle(request):
            response = self.func(request, handler)
            if inspect.isawaitable(response):
                response = await response
            return response

        return handle

    def __repr__(self):
        return '<{}({})>'.format(self.__class__.__name__, getattr(self.func, '__name__', self.func))


class FieldWhitelist(Filter):
    """
    Removes request body keys that are not whitelisted, then calls the handler.

    >>> FieldWhitelist('username', 'age')
    """

    def __init__(self, *names):
        for name in names:
            if not isinstance(name, str):
                raise Error('invalid field name: {!r}'.format(name))
        self.names = frozenset(names)

    async def apply(self, request):
        body = await get_body(request)
        removed = [key for key in body.keys() if key not in self.names]
        for key in removed:
            del body[key]
        if removed:
            logger.info('filtered out: {}'.format(', '.join(removed)))
        return body

    def wrap(self, handler):

        async def handle(request):
            await self.apply(request)
            return await handler(request)

        return handle

    def __repr__(self):
        return '<{}({})>'.format(self.__class__.__name__, ', '.join(sorted(self.names)))


def as_filter(filter_, whitelist=True):
    """
    Get a route filter.

    A function becomes a :class:`MiddlewareFilter` and a sequence or set of
    field names becomes a :class:`FieldWhitelist`.

    :param filter_: a filter, a function, a sequence of field names, or None
    :param bool whitelist: whether field whitelists are accepted
    :return: a filter or None
    """
    if filter_ is None:
        return None
    if not isinstance(filter_, Filter):
        if callable(filter_):
            filter_ = MiddlewareFilter(filter_)
        elif isinstance(filter_, (Sequence, Set)) and not isinstance(filter_, str):
            filter_ = FieldWhitelist(*filter_)
        else:
            raise Error('invalid filter: {!r}'.format(filter_))
    if isinstance(filter_, FieldWhitelist) and not whitelist:
        raise Error('field whitelist not supported here: {!r}'.format(filter_))
    return filter_
