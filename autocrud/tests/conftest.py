import faker
import pytest
from quart import Blueprint

from autocrud.routes import RouteGenerator, build_default_router
from autocrud.tests.app import create_app
from autocrud.tests.auth import logout
from autocrud.tests.memory import MemoryUserModel

RANDOM_SEED = 1980


@pytest.fixture()
def fake():
    fake = faker.Faker('en_US')
    fake.seed_instance(RANDOM_SEED)
    return fake


@pytest.fixture(autouse=True)
def logged_out():
    logout()
    yield
    logout()


#
# models
#

@pytest.fixture()
def users():
    return MemoryUserModel()


@pytest.fixture()
def user_1(users):
    users.insert(username='jem', age=30)
    return users.rows[users.last_id]


@pytest.fixture()
def user_2(users):
    users.insert(username='al', age=9)
    return users.rows[users.last_id]


#
# routers
#

@pytest.fixture()
def router():
    return Blueprint('users', __name__)


@pytest.fixture()
def routes(router, users):
    return RouteGenerator(router, users)


@pytest.fixture()
def client(router):
    """ A test client for routes registered on the router fixture (use after registering) """
    return lambda **config: create_app(('/api/users', router), **config).test_client()


@pytest.fixture()
def crud_client(users):
    return create_app(('/api/users', build_default_router(users))).test_client()
