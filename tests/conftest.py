import pytest
from fastapi.testclient import TestClient

from app.core.db import get_db, get_products_coll
from app.main import app
from tests.fakes import FakeCollection, FakeDB


@pytest.fixture
def fake_coll():
    return FakeCollection()


@pytest.fixture
def client(fake_coll):
    app.dependency_overrides[get_products_coll] = lambda: fake_coll
    app.dependency_overrides[get_db] = lambda: FakeDB()
    yield TestClient(app)
    app.dependency_overrides.clear()
