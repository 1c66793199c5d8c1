import datetime as dt
import re
import uuid

import marshmallow as ma
from sqlalchemy.sql import sqltypes

from autocrud.exc import DataTypeError

accept_date = ('%Y-%m-%d', '%Y-%m')
accept_time = ('%H:%M:%S', '%H:%M', '%I:%M%p', '%I:%M %p')
accept_datetime = ('%Y-%m-%dT%H:%M:%SZ', '%Y-%m-%dT%H:%M:%S.%fZ',
                   '%Y-%m-%dT%H:%M:%S', '%Y-%m-%d %H:%M:%S', '%Y-%m-%d %I:%M:%S%p',
                   '%Y-%m-%d %I:%M:%S %p',
                   '%Y-%m-%dT%H:%M', '%Y-%m-%d %H:%M', '%Y-%m-%d %I:%M', '%Y-%m-%d %I:%M%p',
                   '%Y-%m-%d %I:%M %p')

re_int = re.compile(r'[+-]?[0-9]+')


class DataType:
    FORMAT_DATETIME = '%Y-%m-%dT%H:%M:%SZ'
    FORMAT_DATE = '%Y-%m-%d'
    FORMAT_TIME = '%H:%M:%S'

    VALUES_TRUE = ('t', 'true', 'on', '1', 'yes')
    VALUES_FALSE = ('f', 'false', 'off', '0', 'no')

    registry = dict()

    def __init__(self, ma_type, *sa_types, **kwargs):
        self.ma_type = self.get_ma_type(ma_type)
        self.sa_types = tuple(self.get_sa_type(sa_type) for sa_type in sa_types)
        self.parser = kwargs.get('parser', str)
        self.ma_kwargs = kwargs.get('ma_kwargs', dict())

    @property
    def name(self):
        return self.ma_type.__name__

    def get_ma_type(self, ma_type):
        if not issubclass(ma_type, ma.fields.Field):
            raise ValueError('[{}] ma_type | invalid marshmallow'
                             ' field: {!r}'.format(ma_type.__name__, ma_type))
        return ma_type

    def get_sa_type(self, sa_type):
        if not issubclass(sa_type, sqltypes.TypeEngine):
            raise ValueError('[{}] sa_type | invalid SQLAlchemy'
                             ' sql type: {!r}'.format(self.name, sa_type))
        if sa_type in DataType.registry.keys():
            raise ValueError('[{}] sa_type | already registered: {!r}'.format(self.name, sa_type))
        DataType.registry[sa_type] = self
        return sa_type

    def get_ma_field(self):
        return self.ma_type(**self.ma_kwargs)

    def parse(self, val):
        """
        Parse a string value (e.g. a URL path segment).

        :param str val: the value to parse
        :return: the parsed value
        :raises DataTypeError: if the value cannot be parsed
        """
        try:
            res = self.parser(val)
        except (TypeError, ValueError):
            raise DataTypeError('invalid value: {}'.format(val), self)
        else:
            return res

    def load(self, val):
        """
        Cast a JSON value for the storage layer.

        Strings are parsed; ``None`` and native JSON values pass through as is.
        """
        if val is None or self.parser is str or not isinstance(val, str):
            return val
        return self.parse(val)

    @staticmethod
    def get(expr):
        if expr is not None and hasattr(expr, 'type'):
            for sa_type, data_type in DataType.registry.items():
                if isinstance(expr.type, sa_type):
                    return data_type

    def __repr__(self):
        return '<{}>'.format(self.name)


def parse_bool(val):
    if not isinstance(val, str):
        raise ValueError
    if val.lower() not in DataType.VALUES_TRUE and val.lower() not in DataType.VALUES_FALSE:
        raise ValueError
    return val.lower() in DataType.VALUES_TRUE


def parse_int(val):
    if isinstance(val, bool):
        raise ValueError
    if isinstance(val, str) and not re_int.fullmatch(val):
        raise ValueError
    return int(val)


def parse_date(val):
    if not isinstance(val, str):
        raise ValueError
    for fmt in accept_date:
        try:
            return dt.datetime.strptime(val, fmt).date()
        except ValueError:
            pass
    raise ValueError


def parse_time(val):
    if not isinstance(val, str):
        raise ValueError
    for fmt in accept_time:
        try:
            return dt.datetime.strptime(val, fmt).time()
        except ValueError:
            pass
    raise ValueError


def parse_datetime(val):
    if not isinstance(val, str):
        raise ValueError
    for fmt in (*accept_datetime, *accept_date):
        try:
            return dt.datetime.strptime(val, fmt)
        except ValueError:
            pass
    raise ValueError


Bool = DataType(
    ma.fields.Boolean,
    sqltypes.Boolean,
    parser=parse_bool)

Integer = DataType(
    ma.fields.Integer,
    sqltypes.Integer,
    parser=parse_int)

Float = DataType(
    ma.fields.Float,
    sqltypes.Numeric,
    parser=float)

String = DataType(
    ma.fields.String,
    sqltypes.Text, sqltypes.String, sqltypes.Enum)

Date = DataType(
    ma.fields.Date,
    sqltypes.Date,
    parser=parse_date,
    ma_kwargs=dict(format=DataType.FORMAT_DATE))

Time = DataType(
    ma.fields.Time,
    sqltypes.Time,
    parser=parse_time,
    ma_kwargs=dict(format=DataType.FORMAT_TIME))

DateTime = DataType(
    ma.fields.DateTime,
    sqltypes.DateTime,
    parser=parse_datetime,
    ma_kwargs=dict(format=DataType.FORMAT_DATETIME))

UUID = DataType(
    ma.fields.UUID,
    sqltypes.Uuid,
    parser=uuid.UUID)

JSON = DataType(ma.fields.Raw, sqltypes.JSON)
