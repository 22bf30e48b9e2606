# tests/conftest.py

import pytest

from app import create_app
from models import db
from services import get_enrollment_service


def make_app(tmp_path, **overrides):
    config = {
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///' + str(tmp_path / 'workshops.db'),
        'SINGLE_ENROLLMENT_PER_REGISTRANT': False,
    }
    config.update(overrides)
    return create_app(config)


@pytest.fixture
def app(tmp_path):
    app = make_app(tmp_path)
    yield app
    with app.app_context():
        db.session.remove()
        db.engine.dispose()


@pytest.fixture
def single_app(tmp_path):
    app = make_app(tmp_path, SINGLE_ENROLLMENT_PER_REGISTRANT=True)
    yield app
    with app.app_context():
        db.session.remove()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def service(app):
    with app.app_context():
        yield get_enrollment_service()


@pytest.fixture
def single_service(single_app):
    with single_app.app_context():
        yield get_enrollment_service()


@pytest.fixture
def short_timeout_app(tmp_path):
    app = make_app(tmp_path, SQLITE_BUSY_TIMEOUT=0.5)
    yield app
    with app.app_context():
        db.session.remove()
        db.engine.dispose()
