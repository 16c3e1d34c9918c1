import os

# Keep the app's own startup away from any real database file
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from notes_backend.api.main import app
from notes_store.db import create_db_engine, get_db
from notes_store.init_db import ensure_admin_seed, initialize_schema


@pytest.fixture
def engine():
    """Fresh in-memory SQLite engine, shared across threads, for one test."""
    engine = create_db_engine("sqlite://", poolclass=StaticPool)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    initialize_schema(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    """Provide a SQLAlchemy session for isolated test usage."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def override_db(db_session):
    """Point the app's get_db dependency at the test session."""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def make_client(override_db):
    """Factory for independent clients, each with its own cookie jar."""
    clients = []

    def _make():
        c = TestClient(app)
        c.__enter__()
        clients.append(c)
        return c

    yield _make
    for c in clients:
        c.__exit__(None, None, None)


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def user_data():
    """Returns default account data for registration."""
    return {"email": "alice@example.com", "password": "alicepassword123"}


@pytest.fixture
def second_user_data():
    """Returns a second account's data."""
    return {"email": "bob@example.com", "password": "bobpassword456"}


@pytest.fixture
def admin_data(db_session):
    data = {"email": "root@example.com", "password": "rootpassword"}
    ensure_admin_seed(db_session, data["email"], data["password"])
    return data


def register_and_login(client, email, password):
    """Helper for registering then logging in; the client keeps the cookie."""
    r1 = client.post("/auth/register", json={"email": email, "password": password})
    assert r1.status_code in (201, 400)
    r2 = client.post("/auth/login", json={"email": email, "password": password})
    assert r2.status_code == 200
    return r2.json()


@pytest.fixture
def alice(make_client, user_data):
    c = make_client()
    register_and_login(c, user_data["email"], user_data["password"])
    return c


@pytest.fixture
def bob(make_client, second_user_data):
    c = make_client()
    register_and_login(c, second_user_data["email"], second_user_data["password"])
    return c


@pytest.fixture
def admin(make_client, admin_data):
    c = make_client()
    r = c.post("/auth/login", json=admin_data)
    assert r.status_code == 200
    return c
