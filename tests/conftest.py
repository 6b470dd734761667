import os
from itertools import count
from typing import Generator

import pytest

# Settings are read once; point them at an in-memory database before any import
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["DEFAULT_ADMIN_EMAIL"] = "admin@test.ga"
os.environ["DEFAULT_ADMIN_PASSWORD"] = "admin-pass"

from fastapi.testclient import TestClient

from gabonshop.infrastructure.database import Base, SessionLocal, engine
from gabonshop.infrastructure.gateway import SQLAlchemyAuthGateway, SQLAlchemyDocumentGateway
from gabonshop.infrastructure.auth_client import AuthSessionClient
from gabonshop.application.services.catalog_store import CatalogStore
from gabonshop.main import app


@pytest.fixture(scope="function")
def fresh_db() -> Generator:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def gateway(fresh_db):
    return SQLAlchemyDocumentGateway(SessionLocal)


@pytest.fixture
def auth_gateway(fresh_db):
    return SQLAlchemyAuthGateway(SessionLocal)


@pytest.fixture
def auth_client(auth_gateway):
    return AuthSessionClient(auth_gateway)


@pytest.fixture
def clock():
    # Strictly increasing millisecond timestamps
    ticks = count(1_700_000_000_000, 1000)
    return lambda: next(ticks)


@pytest.fixture
def catalog(gateway, clock):
    store = CatalogStore(gateway, clock=clock)
    store.init()
    yield store
    store.dispose()


@pytest.fixture
def client(fresh_db):
    with TestClient(app) as c:
        yield c


def register(client, email, name="Awa", phone="077 12 34 56", password="secret1"):
    r = client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "phone": phone, "password": password},
    )
    assert r.status_code == 201, r.text
    return r.json()


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_token(client):
    r = client.post("/api/auth/login", json={"email": "admin@test.ga", "password": "admin-pass"})
    assert r.status_code == 200, r.text
    return r.json()["access_token"]
