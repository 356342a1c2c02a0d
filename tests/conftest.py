"""
Pytest fixtures for testing
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event, JSON
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from sqlalchemy.dialects.postgresql import JSONB

from app.config import get_settings
from app.infrastructure.db.session import Base
from app.infrastructure.db.models import User
from app.auth import hash_password


@pytest.fixture
def db_engine():
    """Create in-memory SQLite engine for tests, with JSONB→JSON mapping."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # ON DELETE CASCADE needs foreign keys switched on in SQLite
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    # SQLite doesn't support JSONB, remap to JSON for tests
    for table in Base.metadata.tables.values():
        for col in table.columns:
            if isinstance(col.type, JSONB):
                col.type = JSON()
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(bind=db_engine)


@pytest.fixture
def db_session(session_factory) -> Session:
    """Create database session for tests"""
    session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def settings(monkeypatch):
    """Cached settings; attributes changed through monkeypatch are restored after the test"""
    s = get_settings()
    monkeypatch.setattr(s, "WISH_STATUS_SOURCE", "live")
    return s


@pytest.fixture
def caller_status_source(settings, monkeypatch):
    """Stored wish status taken from the caller-supplied amount (legacy behaviour)"""
    monkeypatch.setattr(settings, "WISH_STATUS_SOURCE", "caller")
    return settings


def _make_user(db_session, email, name="Test User", is_admin=False) -> User:
    user = User(
        name=name,
        email=email,
        password_hash=hash_password("password123"),
        is_admin=is_admin,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def owner(db_session) -> User:
    """Owner of the savings/wishes under test"""
    return _make_user(db_session, "owner@gmail.com", name="Owner")


@pytest.fixture
def other_user(db_session) -> User:
    return _make_user(db_session, "other@gmail.com", name="Other")


@pytest.fixture
def owner_id(owner):
    """ID of the owner fixture"""
    return owner.id


# ── API ──────────────────────────────────────────────────────────────────────

@pytest.fixture
def client(session_factory, settings):
    """TestClient with get_db bound to the test database"""
    from app.api.deps import get_db
    from app.main import app

    def _override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _register(client, email="budi@gmail.com", name="Budi", password="password123") -> dict:
    response = client.post("/api/v1/auth/register", json={
        "name": name,
        "email": email,
        "password": password,
        "password_confirmation": password,
    })
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def auth_headers(client) -> dict:
    """Authorization header of a freshly registered user"""
    token = _register(client)["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(client, session_factory) -> dict:
    """Authorization header of an admin user"""
    body = _register(client, email="admin@gmail.com", name="Admin")
    db = session_factory()
    try:
        user = db.query(User).filter(User.id == body["user"]["id"]).one()
        user.is_admin = True
        db.commit()
    finally:
        db.close()
    return {"Authorization": f"Bearer {body['access_token']}"}


@pytest.fixture
def register_user(client):
    """Register a user through the API; returns the response body"""
    def _do(email, name="User", password="password123"):
        return _register(client, email=email, name=name, password=password)
    return _do
