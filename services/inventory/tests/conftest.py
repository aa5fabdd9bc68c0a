"""Shared fixtures: both record stores, a temporary photo store and an API client."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from inventory_service.database import create_session_factory
from inventory_service.dependencies import get_photo_store, get_record_store
from inventory_service.main import app
from inventory_service.photos import PhotoStore
from inventory_service.stores.document import DocumentRecordStore
from inventory_service.stores.sql import SqlRecordStore


@pytest.fixture
def sql_store():
    """Relational store on a private in-memory SQLite database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield SqlRecordStore(create_session_factory(engine=engine))
    engine.dispose()


@pytest.fixture
def document_store(tmp_path):
    return DocumentRecordStore(str(tmp_path / "cache" / "inventory.json"))


@pytest.fixture(params=["sql", "document"])
def record_store(request):
    """Runs the dependent test once per backend."""
    return request.getfixturevalue(f"{request.param}_store")


@pytest.fixture
def photo_store(tmp_path):
    return PhotoStore(str(tmp_path / "cache" / "photos"))


@pytest.fixture
def client(record_store, photo_store):
    app.dependency_overrides[get_record_store] = lambda: record_store
    app.dependency_overrides[get_photo_store] = lambda: photo_store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def jpeg_bytes():
    return b"\xff\xd8\xff\xe0" + b"fake-jpeg-body" * 10 + b"\xff\xd9"


@pytest.fixture
def document_client(document_store, photo_store):
    """API client pinned to the document backend."""
    app.dependency_overrides[get_record_store] = lambda: document_store
    app.dependency_overrides[get_photo_store] = lambda: photo_store
    yield TestClient(app)
    app.dependency_overrides.clear()
