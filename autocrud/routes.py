"""
Generate CRUD routes for a model.

>>> from quart import Blueprint, Quart
>>> from autocrud.routes import RouteGenerator, build_default_router
>>>
>>> app = Quart(__name__)
>>> app.register_blueprint(build_default_router(UserModel), url_prefix='/api/users')
>>>
>>> articles = Blueprint('articles', __name__)
>>> routes = RouteGenerator(articles, ArticleModel)
>>> routes.list_all(fields=('title',))
>>> routes.get_one('slug')
>>> routes.create(('title', 'body'))
>>> routes.delete(superuser_only)
>>> app.register_blueprint(articles, url_prefix='/api/articles')

Each route is registered exactly once; registering the same route twice
is an error reported by Quart.
"""

import json

from quart import Blueprint, jsonify, request
from werkzeug.http import HTTP_STATUS_CODES

from autocrud.config import get_setting
from autocrud.exc import DUPLICATE_KEY_MESSAGE, DataTypeError, DuplicateKey, StorageError, get_error_object
from autocrud.fields import ID
from autocrud.filters import as_filter
from autocrud.log import logger
from autocrud.model import Model
from autocrud.util import get_body


def send_status(status):
    return HTTP_STATUS_CODES[status], status


def send_error(e):
    return jsonify(get_error_object(e)), e.status


def get_path(key):
    if key == ID:
        return '/<{}>'.format(key)
    return '/{0}/<{0}>'.format(key)


class RouteGenerator:
    """
    Registers CRUD request handlers for a model on a router.

    The router is a Quart blueprint or application. The model may be given as
    a class or an instance.
    """

    def __init__(self, router, model):
        self.router = router
        self.model = model() if isinstance(model, type) and issubclass(model, Model) else model

    def add_route(self, rule, operation, method, handler, filter_=None):
        view = filter_.wrap(handler) if filter_ is not None else handler

        async def endpoint(**kwargs):
            return await view(request)

        name = '{}_{}'.format(self.model.type_, operation)
        endpoint.__name__ = name
        self.router.add_url_rule(rule, name, endpoint, methods=[method])
        logger.info('registered route: {} {} -> {} {!r}'.format(method, rule, name, filter_))

    def success(self, rec):
        data = self.model.dump(rec)
        if get_setting('AUTOCRUD_DOUBLE_ENCODE'):
            return jsonify(json.dumps(data, separators=(',', ':')))
        return jsonify(data)

    async def save(self, rec):
        try:
            rec = await self.model.save(rec)
        except DuplicateKey:
            return DUPLICATE_KEY_MESSAGE, 400
        except StorageError as e:
            return send_error(e)
        return self.success(rec)

    ####################################################################################################################
    # routes
    ####################################################################################################################

    def list_all(self, fields=None, filter_=None):
        """
        Register ``GET /``: fetch all records.

        :param fields: a sequence of field names to return (optional)
        :param filter_: a middleware filter (optional)
        """
        model = self.model
        model.get_columns(fields)

        async def handle(req):
            try:
                recs = await model.find({}, fields)
            except StorageError as e:
                return send_error(e)
            return jsonify(model.dump(recs, many=True))

        self.add_route('/', 'list', 'GET', handle, as_filter(filter_, whitelist=False))

    def get_one(self, key=None, fields=None, filter_=None):
        """
        Register a route fetching a single record by the value of a field.

        Records are addressed at ``GET /<_id>`` by default, and at
        ``GET /<key>/<key>`` when a different key field is given. The path
        parameter must parse as a value of the key field's type, otherwise the
        request fails with a 400 status.

        :param str key: the key field name (defaults to the record id)
        :param fields: a sequence of field names to return (optional)
        :param filter_: a middleware filter (optional)
        """
        model = self.model
        key = key if key else ID
        model.field(key)
        model.get_columns(fields)

        async def handle(req):
            value = req.view_args.get(key)
            if not value:
                return send_status(400)
            try:
                value = model.parse_value(key, value)
            except DataTypeError:
                return send_status(400)
            try:
                rec = await model.find_one({key: value}, fields)
            except StorageError as e:
                return send_error(e)
            return jsonify(model.dump(rec))

        operation = 'get' if key == ID else 'get_by_{}'.format(key)
        self.add_route(get_path(key), operation, 'GET', handle, as_filter(filter_, whitelist=False))

    def create(self, filter_=None):
        """
        Register ``POST /``: store a new record.

        Request body keys that match a model field are copied onto the new
        record, all others are ignored.

        :param filter_: a middleware filter or a field whitelist (optional)
        """
        model = self.model

        async def handle(req):
            rec = model.new()
            model.set_properties(rec, await get_body(req))
            return await self.save(rec)

        self.add_route('/', 'create', 'POST', handle, as_filter(filter_))

    def update(self, filter_=None):
        """
        Register ``PUT /<_id>``: change an existing record.

        :param filter_: a middleware filter or a field whitelist (optional)
        """
        model = self.model

        async def handle(req):
            try:
                rec = await model.find_by_id(req.view_args.get(ID))
            except StorageError as e:
                return send_error(e)
            if rec is None:
                return send_status(404)
            model.set_properties(rec, await get_body(req))
            return await self.save(rec)

        self.add_route(get_path(ID), 'update', 'PUT', handle, as_filter(filter_))

    def delete(self, filter_=None):
        """
        Register ``DELETE /<_id>``: remove a record.

        :param filter_: a middleware filter (optional)
        """
        model = self.model

        async def handle(req):
            object_id = req.view_args.get(ID)
            if not object_id:
                return send_status(400)
            try:
                count = await model.remove({ID: object_id})
            except StorageError as e:
                return send_error(e)
            return send_status(200 if count > 0 else 404)

        self.add_route(get_path(ID), 'delete', 'DELETE', handle, as_filter(filter_, whitelist=False))

    def all_crud(self):
        self.list_all()
        self.get_one()
        self.create()
        self.update()
        self.delete()


########################################################################################################################
# Router Functions
########################################################################################################################

def register_list_all(router, model, fields=None, filter_=None):
    RouteGenerator(router, model).list_all(fields, filter_)


def register_get_one(router, model, key=None, fields=None, filter_=None):
    RouteGenerator(router, model).get_one(key, fields, filter_)


def register_create(router, model, filter_=None):
    RouteGenerator(router, model).create(filter_)


def register_update(router, model, filter_=None):
    RouteGenerator(router, model).update(filter_)


def register_delete(router, model, filter_=None):
    RouteGenerator(router, model).delete(filter_)


def register_all_crud(router, model):
    """
    Register all CRUD routes: ``GET /``, ``GET /<_id>``, ``POST /``,
    ``PUT /<_id>`` and ``DELETE /<_id>``.
    """
    RouteGenerator(router, model).all_crud()


def build_default_router(model, name=None, **kwargs):
    """
    Create a blueprint serving all CRUD routes of a model.

    :param model: a model class or instance
    :param str name: blueprint name (defaults to the model type)
    :param kwargs: extra blueprint options (e.g. url_prefix)
    :return: a Quart blueprint
    """
    if isinstance(model, type) and issubclass(model, Model):
        model = model()
    router = Blueprint(name if name else model.type_, __name__, **kwargs)
    register_all_crud(router, model)
    return router
