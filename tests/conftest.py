import pytest

from app import create_app
from config import Config
from models import db as _db
from utils.auth_utils import generate_access_token
from tests.factories import make_user


class TestConfig(Config):
    __test__ = False

    TESTING = True
    SECRET_KEY = 'test-secret-key'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    MAIL_SERVER = None
    MAIL_SUPPRESS_SEND = True
    PAYMENT_GATEWAY_KEY_ID = 'key_test_123'
    PAYMENT_GATEWAY_SECRET = 'gateway-test-secret'
    MOCK_TEST_ENFORCE_DEADLINE = False
    MOCK_TEST_SUBMIT_GRACE_SECONDS = 60
    PRACTICE_BATCH_SIZE = 30
    LOG_LEVEL = 'WARNING'


@pytest.fixture
def app():
    app = create_app(TestConfig)
    yield app
    with app.app_context():
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def ctx(app):
    """Application context for calling services directly"""
    with app.app_context():
        yield app


@pytest.fixture
def db(ctx):
    return _db


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth(app):
    """Create a user and return (user_id, headers) for authenticated requests"""
    def _auth(**kwargs):
        with app.app_context():
            user = make_user(**kwargs)
            token = generate_access_token(user)
            return user.id, {'Authorization': f'Bearer {token}'}
    return _auth
