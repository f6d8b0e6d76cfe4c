# tests/conftest.py

import pytest
from fastapi.testclient import TestClient

from qrlink.config import Settings
from qrlink.main import create_app
from tests.helpers import register


@pytest.fixture
def settings():
    return Settings(secret_key="test-secret", public_base_url="http://qr.test")


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def session_client(settings):
    app = create_app(settings.model_copy(update={"auth_strategy": "session"}))
    with TestClient(app) as c:
        yield c


@pytest.fixture
def logged_in(client):
    res = register(client)
    assert res.status_code == 201
    return client
