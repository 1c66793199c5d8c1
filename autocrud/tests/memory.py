from autocrud.exc import DataTypeError, DuplicateKey, StorageError
from autocrud.fields import ID
from autocrud.model import Model
from autocrud.tests.model import UserModel


class MemoryModel(Model):
    """
    Keeps records in a dictionary instead of the database.

    Every storage call is recorded in ``calls``; setting ``error`` makes the
    next storage calls fail with that error.
    """

    def __init__(self):
        super().__init__()
        self.rows = dict()
        self.calls = list()
        self.error = None
        self.last_id = 0

    def check(self, operation, *args):
        self.calls.append((operation, *args))
        if self.error is not None:
            raise self.error

    def cast(self, filter_):
        try:
            return {name: self.field(name).cast(val) for name, val in (filter_ or dict()).items()}
        except DataTypeError as e:
            raise StorageError('cast failed | {}'.format(e), self)

    def select(self, filter_):
        filter_ = self.cast(filter_)
        return [row for _, row in sorted(self.rows.items())
                if all(row.get(name) == val for name, val in filter_.items())]

    def project(self, row, fields):
        names = self.fields.keys() if fields is None else (ID, *fields)
        return self.record({name: row[name] for name in names if name in row})

    def insert(self, **data):
        self.last_id += 1
        self.rows[self.last_id] = {ID: self.last_id, **data}
        return self.last_id

    async def find(self, filter_=None, fields=None):
        self.check('find', filter_, fields)
        return [self.project(row, fields) for row in self.select(filter_)]

    async def find_one(self, filter_, fields=None):
        self.check('find_one', filter_, fields)
        rows = self.select(filter_)
        return self.project(rows[0], fields) if rows else None

    async def save(self, rec):
        self.check('save', dict(rec))
        values = {name: rec[name] for name in self.attributes.keys() if name in rec}
        for name, field in self.attributes.items():
            if field.expr.unique and name in values:
                for row in self.rows.values():
                    if row[ID] != rec.id and row.get(name) == values[name]:
                        raise DuplicateKey(self)
        if rec.is_new:
            object_id = self.insert(**values)
        elif rec.id in self.rows:
            object_id = rec.id
            self.rows[object_id].update(values)
        else:
            return None
        return self.record(dict(self.rows[object_id]))

    async def remove(self, filter_):
        self.check('remove', filter_)
        rows = self.select(filter_)
        for row in rows:
            del self.rows[row[ID]]
        return len(rows)


class MemoryUserModel(MemoryModel, UserModel):
    type_ = 'user'
