import pytest
from fastapi.testclient import TestClient

from prompt_manager.api.http_api import create_app
from prompt_manager.storage.database import Database


@pytest.fixture
def db():
    database = Database(":memory:")
    yield database
    database.close()


@pytest.fixture
def client():
    with TestClient(create_app(":memory:")) as test_client:
        yield test_client
