from copy import copy

import marshmallow as ma
from inflection import dasherize, underscore
from sqlalchemy.exc import DBAPIError
from sqlalchemy.sql import delete, insert, select, update
from sqlalchemy.sql.schema import Table

from autocrud.db import db, is_unique_violation
from autocrud.exc import DataTypeError, DuplicateKey, Error, ModelError, StorageError
from autocrud.fields import ID, Field
from autocrud.log import logger
from autocrud.util import v


class Record(dict):
    """
    A single row of a model's table, keyed by field name.
    """

    def __init__(self, model, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.model = model

    @property
    def id(self):
        return self.get(ID)

    @property
    def is_new(self):
        """
        True if the record has not been stored yet.
        """
        return self.get(ID) is None


def get_primary_key(table):
    """
    Get table primary key column.

    .. note::

        Assumes a simple (non-composite) key and returns the first column.

    :param table: SQLAlchemy Table object
    :return: the primary key column or None
    """
    for col in table.primary_key.columns:
        return col


class Model:
    """
    A model binds a schema to a database table.
    """

    type_ = None
    """
    Unique resource type (str)
    """

    table = None
    """
    The SQLAlchemy table storing the model's records.
    """

    fields = None
    """
    A sequence of fields or field names.
    """

    ####################################################################################################################
    # initialization
    ####################################################################################################################

    def __init__(self):
        self.type_ = self.get_type()
        self.table = self.get_table()
        self.fields = self.get_fields()
        self.schema = self.get_schema()
        logger.info('initialized model: {!r}'.format(self))

    @classmethod
    def get_type(cls):
        if cls.type_ is None:
            type_ = dasherize(underscore(cls.__name__))
            return type_.replace('model', '').strip('-')
        if not isinstance(cls.type_, str):
            raise Error('"type_" must be a string')
        return cls.type_

    def get_table(self):
        if self.table is None:
            raise ModelError('attribute: "table" is not set', self)
        if not isinstance(self.table, Table):
            raise ModelError('invalid table: {!r}'.format(self.table), self)
        if get_primary_key(self.table) is None:
            raise ModelError('table has no primary key: {}'.format(self.table.name), self)
        return self.table

    def get_fields(self):
        fields = dict()
        if self.fields is not None:
            for field in v(self.fields):
                if isinstance(field, str):
                    fields[field] = Field(field)
                elif isinstance(field, Field):
                    fields[field.name] = copy(field)
                else:
                    raise ModelError('invalid field: {!r}'.format(field), self)

        if ID in fields.keys():
            raise ModelError('illegal field name: "{}"'.format(ID), self)

        fields = {ID: Field(ID), **fields}
        for field in fields.values():
            field.load(self)
        return fields

    def get_schema(self):
        return type('{}Schema'.format(self.name),
                    (ma.Schema,),
                    {name: field.get_ma_field() for name, field in self.fields.items()})()

    def get_expr(self, col):
        expr = self.table.c.get(col)
        if expr is None:
            raise ModelError('db column: {!r} not found'.format(col), self)
        return expr

    def field(self, name):
        if name in self.fields.keys():
            return self.fields[name]
        raise ModelError('field does not exist: "{}"'.format(name), self)

    ####################################################################################################################
    # properties
    ####################################################################################################################

    @property
    def name(self):
        """
        Unique model name.
        """
        return self.__class__.__name__

    @property
    def collection(self):
        """
        The name of the table storing the model's records.
        """
        return self.table.name

    @property
    def primary_key(self):
        """
        A database column representing the Model's primary key.
        """
        return get_primary_key(self.table)

    @property
    def attributes(self):
        """
        A dictionary of writable fields keyed by name (all fields except the record id).
        """
        return {name: field for name, field in self.fields.items() if name != ID}

    ####################################################################################################################
    # query helpers
    ####################################################################################################################

    def get_columns(self, fields=None):
        """
        Get the labeled columns of a projection.

        :param fields: a sequence of field names, or None for all fields
        :return: a list of column expressions, the record id first
        """
        if fields is None:
            names = list(self.fields.keys())
        else:
            names = [ID, *(name for name in v(fields) if name != ID)]
        return [self.field(name).column for name in names]

    def get_where(self, filter_):
        clauses = list()
        for name, val in (filter_ or dict()).items():
            field = self.field(name)
            try:
                val = field.cast(val)
            except DataTypeError as e:
                raise StorageError('cast failed for "{}" | {}'.format(name, e), self)
            clauses.append(field.expr == val)
        return clauses

    def get_values(self, rec):
        values = dict()
        for name, field in self.attributes.items():
            if name in rec:
                try:
                    values[field.expr] = field.cast(rec[name])
                except DataTypeError as e:
                    raise StorageError('cast failed for "{}" | {}'.format(name, e), self)
        return values

    async def execute(self, fetch, query):
        try:
            return await fetch(query)
        except DBAPIError as e:
            if is_unique_violation(e):
                raise DuplicateKey(self) from e
            raise StorageError(str(e.orig), self) from e
        except OSError as e:
            raise StorageError(str(e), self) from e

    ####################################################################################################################
    # records
    ####################################################################################################################

    def new(self, **data):
        """
        Create a blank record, not stored until saved.
        """
        rec = Record(self)
        self.set_properties(rec, data)
        return rec

    def record(self, row):
        return Record(self, row) if row is not None else None

    def set_properties(self, rec, data):
        """
        Copy the values of declared fields from data onto a record.

        Keys that are not declared fields are ignored; fields missing from
        data are left untouched. Values are copied as is.

        :param Record rec: the target record
        :param dict data: the source values (e.g. a request body)
        """
        for name in self.attributes.keys():
            if name in data:
                rec[name] = data[name]
        return rec

    def parse_value(self, name, value):
        """
        Parse a string value (e.g. a URL path segment) with the field's data type.

        :raises DataTypeError: if the value cannot be parsed or does not fit the column
        """
        return self.field(name).parse(value)

    def dump(self, data, many=False):
        if data is None:
            return None
        if many:
            return self.schema.dump([dict(rec) for rec in data], many=True)
        return self.schema.dump(dict(data))

    ####################################################################################################################
    # public interface
    ####################################################################################################################

    async def find(self, filter_=None, fields=None):
        """
        Fetch all records matching a filter.

        >>> await UserModel().find({'age': 9}, ('username',))
        [{'_id': 1, 'username': 'al'}]

        :param dict filter_: field values to match (equality)
        :param fields: a sequence of field names to return (optional)
        :return: a list of records
        """
        query = select(*self.get_columns(fields)).where(*self.get_where(filter_)).order_by(self.primary_key)
        return [self.record(row) for row in await self.execute(db.fetch, query)]

    async def find_one(self, filter_, fields=None):
        """
        Fetch the first record matching a filter.

        :param dict filter_: field values to match (equality)
        :param fields: a sequence of field names to return (optional)
        :return: a record or None
        """
        query = select(*self.get_columns(fields)).where(*self.get_where(filter_)).limit(1)
        return self.record(await self.execute(db.fetchrow, query))

    async def find_by_id(self, object_id):
        return await self.find_one({ID: object_id})

    async def save(self, rec):
        """
        Insert a new record or update an existing one.

        :param Record rec: the record to store
        :return: the stored record, or None if an existing record is gone
        :raises DuplicateKey: if a uniqueness constraint is violated
        :raises StorageError: on any other storage failure
        """
        values = self.get_values(rec)
        if rec.is_new:
            query = insert(self.table)
            if values:
                query = query.values(values)
        elif values:
            query = update(self.table).where(*self.get_where({ID: rec.id})).values(values)
        else:
            return await self.find_by_id(rec.id)
        return self.record(await self.execute(db.fetchrow, query.returning(*self.get_columns())))

    async def remove(self, filter_):
        """
        Delete all records matching a filter.

        :param dict filter_: field values to match (equality)
        :return: the number of deleted records
        """
        query = delete(self.table).where(*self.get_where(filter_)).returning(self.primary_key)
        return len(await self.execute(db.fetch, query))

    def __repr__(self):
        return '<Model({})>'.format(self.name)
