import pytest
import uuid

from config import TestingConfig
from ordersvc import create_app
from ordersvc.database import create_all, get_session_factory
from ordersvc.domain.product import NewProduct
from ordersvc.domain.user import NewUser
from ordersvc.middleware import SERVICES_KEY
from ordersvc.types.email import parse_email
from ordersvc.types.money import Money
from ordersvc.types.name import Name
from ordersvc.types.role import Role
from ordersvc.utils.request_context import RequestContext


@pytest.fixture(scope='function')
def app(tmp_path):
    """Application on a fresh SQLite file database per test.

    A file (not :memory:) so that transactional and non-transactional
    sessions really use separate connections.
    """
    class _Config(TestingConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'orders.db'}"

    app = create_app(_Config)
    session_factory = get_session_factory(app)
    create_all(session_factory)
    yield app
    session_factory.kw['bind'].dispose()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def session_factory(app):
    return get_session_factory(app)


@pytest.fixture(scope='function')
def services(app):
    """Non-transactional service bundle wired to the test database."""
    return app.extensions[SERVICES_KEY]


@pytest.fixture(scope='function')
def ctx():
    return RequestContext.background()


@pytest.fixture(scope='function')
def user(services, ctx):
    """Create test user."""
    suffix = str(uuid.uuid4())[:8]
    return services.users.create(ctx, NewUser(
        name=Name.parse('Test Customer'),
        email=parse_email(f'customer-{suffix}@test.com'),
        roles=(Role.USER,),
        password='password123',
    ))


@pytest.fixture(scope='function')
def products(services, ctx):
    """Create three products priced 10.34, 5.00 and 1.00."""
    return [
        services.products.create(ctx, NewProduct(name=Name.parse(name), price=Money.must_parse(price)))
        for name, price in (('Coffee Beans', '10.34'), ('Green Tea', '5.00'), ('Sugar Pack', '1.00'))
    ]


@pytest.fixture(scope='function')
def auth_headers(user):
    """Identity header for the test user."""
    return {'X-User-ID': str(user.id)}
