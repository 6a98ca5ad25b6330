from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.auth import create_access_token, create_user
from app.core.lightbox import LightboxRegistry
from app.database import Base, get_db
from app.main import app
from app.routers.lightbox_router import get_registry
from app.store.sql_store import SqlItemStore


@pytest.fixture()
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def registry():
    return LightboxRegistry(max_sessions=5)


@pytest.fixture()
def client(db, registry):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_registry] = lambda: registry
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def store(db):
    return SqlItemStore(db)


@pytest.fixture()
def make_item(store):
    """Insert items with strictly increasing timestamps."""
    base = datetime(2024, 1, 1, 12, 0, 0)
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        data = {
            "media_type": "photo",
            "category": "wedding",
            "embed_url": f"https://drive.google.com/file/d/file{counter['n']}/preview",
            "full_url": None,
            "title": f"Item {counter['n']}",
            "created_at": base + timedelta(minutes=counter["n"]),
        }
        data.update(overrides)
        return store.create(data)

    return _make


@pytest.fixture()
def admin_user(db):
    return create_user(db, "admin@example.com", "secret123", is_admin=True)


@pytest.fixture()
def admin_headers(admin_user):
    token = create_access_token({"sub": admin_user.id})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def visitor_headers(db):
    user = create_user(db, "guest@example.com", "secret123")
    token = create_access_token({"sub": user.id})
    return {"Authorization": f"Bearer {token}"}
