from sqlalchemy.sql import sqltypes
from sqlalchemy.sql.schema import Column

from autocrud.datatypes import DataType
from autocrud.exc import DataTypeError, Error, ModelError

ID = '_id'
"""
Reserved field name of the record identifier (the table primary key).
"""

INTEGER_BOUNDS = (
    (sqltypes.SmallInteger, 2 ** 15),
    (sqltypes.BigInteger, 2 ** 63),
    (sqltypes.Integer, 2 ** 31),
)
"""
Value bounds of the integer column types (subclasses of Integer first).
"""


class Field:
    """
    A schema field, which maps to a database table column.

    >>> from autocrud.datatypes import Date
    >>> from autocrud.tests.db import users_t
    >>>
    >>> Field('username')
    >>> Field('name', users_t.c.username)
    >>> Field('name', 'username')
    >>> Field('born', data_type=Date)
    """

    def __init__(self, name, col=None, data_type=None):
        """
        :param str name: a unique field name
        :param Column|str col: the table column or column name (defaults to the field name)
        :param DataType data_type: derived from the column type (optional)
        """
        if data_type is not None and not isinstance(data_type, DataType):
            raise Error('invalid data type provided: "{}"'.format(data_type))
        if col is not None and not isinstance(col, (Column, str)):
            raise Error('invalid column provided: {!r}'.format(col))

        self.name = name
        self.col = col
        self.data_type = data_type
        self.expr = None

    def load(self, model):
        if self.name == ID:
            self.expr = model.primary_key
        elif isinstance(self.col, Column):
            self.expr = model.get_expr(self.col.name)
        else:
            self.expr = model.get_expr(self.col if self.col is not None else self.name)
        if self.data_type is None:
            self.data_type = DataType.get(self.expr)
        if self.data_type is None:
            raise ModelError('unsupported column type: {}.{} ({})'.format(
                self.expr.table.name, self.expr.name, self.expr.type), model)

    def get_bounds(self):
        for sa_type, bound in INTEGER_BOUNDS:
            if isinstance(self.expr.type, sa_type):
                return -bound, bound - 1

    def check(self, val):
        bounds = self.get_bounds()
        if bounds is not None and isinstance(val, int) and not isinstance(val, bool):
            if not bounds[0] <= val <= bounds[1]:
                raise DataTypeError('out of range: {}'.format(val), self.data_type)
        return val

    def parse(self, val):
        """
        Parse a string value (e.g. a URL path segment) for this field's column.

        :raises DataTypeError: if the value cannot be parsed or does not fit the column
        """
        return self.check(self.data_type.parse(val))

    def cast(self, val):
        return self.check(self.data_type.load(val))

    @property
    def column(self):
        return self.expr.label(self.name)

    def get_ma_field(self):
        return self.data_type.get_ma_field()

    def __repr__(self):
        return '<{}({})>'.format(self.__class__.__name__, self.name)
