"""Pytest fixtures: in-memory SQLite, seeded users and an authenticated client."""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.auth.utils import create_access_token
from app.api.profile.models import User
from app.database.database import Base, get_db
from app.main import app
from app.websocket import websocket_manager


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def make_user(db):
    def _make_user(user_id, first_name=None, last_name=None, **fields):
        user = User(id=user_id, first_name=first_name, last_name=last_name, **fields)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def alice(make_user):
    return make_user("alice", "Alice", "Jones", email="alice@example.com", city="Vilnius")


@pytest.fixture
def bob(make_user):
    return make_user("bob", "Bob", "Smith", email="bob@example.com", city="Kaunas")


@pytest.fixture
def carol(make_user):
    return make_user("carol", "Carol", None)


@pytest.fixture(autouse=True)
def clear_socket_connections():
    websocket_manager.user_connections.clear()
    yield
    websocket_manager.user_connections.clear()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _auth_headers(user_id):
        return {"Authorization": f"Bearer {create_access_token({'sub': user_id})}"}

    return _auth_headers
