# tests/conftest.py
import pytest
from fastapi.testclient import TestClient
from loguru import logger

from product_api.config import Settings
from product_api.database import ProductStore
from product_api.main import create_app

API_KEY = "test-key"


@pytest.fixture
def store():
    return ProductStore.seeded()


@pytest.fixture
def app(store):
    return create_app(settings=Settings(_env_file=None, api_key=API_KEY), store=store)


@pytest.fixture
def client(app):
    # authorized client; a fresh app (and store) per test
    return TestClient(app, headers={"x-api-key": API_KEY})


@pytest.fixture
def anon_client(app):
    return TestClient(app)


@pytest.fixture
def log_messages():
    messages = []
    handler_id = logger.add(lambda m: messages.append(m.record), level="DEBUG")
    yield messages
    logger.remove(handler_id)
