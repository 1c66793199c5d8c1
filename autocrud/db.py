from contextlib import asynccontextmanager

from asyncpg.exceptions import UniqueViolationError
from sqlalchemy.exc import DBAPIError

from autocrud.exc import Error
from autocrud.log import log_query, logger


def is_unique_violation(e):
    """
    Check whether a database error reports a violated uniqueness constraint.

    :param DBAPIError e: an error raised by SQLAlchemy
    :return: True for a duplicate key error
    """
    if not isinstance(e, DBAPIError):
        return False
    orig = e.orig
    if getattr(orig, 'sqlstate', None) == UniqueViolationError.sqlstate:
        return True
    return isinstance(getattr(orig, '__cause__', None), UniqueViolationError)


class Database:
    """
    Holds the asynchronous engine used by all models.

    The engine is created (and disposed) by the application:

    >>> from sqlalchemy.ext.asyncio import create_async_engine
    >>> from autocrud.db import db
    >>>
    >>> db.bind(create_async_engine('postgresql+asyncpg://autocrud@localhost/autocrud'))
    """

    def __init__(self):
        self.engine = None

    def bind(self, engine):
        self.engine = engine
        logger.info('bound engine: {!r}'.format(engine))

    @asynccontextmanager
    async def begin(self):
        if self.engine is None:
            raise Error('database engine is not bound')
        async with self.engine.begin() as conn:
            yield conn

    async def fetch(self, query):
        log_query(query)
        async with self.begin() as conn:
            result = await conn.execute(query)
            return [dict(row) for row in result.mappings()]

    async def fetchrow(self, query):
        log_query(query)
        async with self.begin() as conn:
            result = await conn.execute(query)
            row = result.mappings().first()
            return dict(row) if row is not None else None


db = Database()
