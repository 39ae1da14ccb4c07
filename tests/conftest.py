"""Pytest configuration: every test gets a fresh in-memory MongoDB."""

import mongomock
import pytest
from fastapi.testclient import TestClient

import database
from schemas import Product, User


@pytest.fixture(scope="function", autouse=True)
def mongo_db(monkeypatch):
    """Swap the module-level database handle for a mongomock one."""
    db = mongomock.MongoClient()["storefront_test"]
    monkeypatch.setattr(database, "db", db)
    yield db


@pytest.fixture
def client():
    from main import app
    return TestClient(app)


@pytest.fixture
def make_user():
    def _make(name="Ana", email="ana@shop.io", is_admin=False):
        user = User(name=name, email=email, password_hash="not-a-real-hash", is_admin=is_admin)
        return database.create_document("user", user)
    return _make


@pytest.fixture
def make_product():
    def _make(name="Runner", description="Light road shoe", price=10.0,
              category="Shoes", stocks=5, pictures=None):
        product = Product(
            name=name,
            description=description,
            price=price,
            category=category,
            pictures=pictures or [],
            stocks=stocks,
        )
        return database.create_document("product", product)
    return _make
