import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

# The engine module switches to in-memory SQLite once pytest is imported
os.environ.setdefault("PYTEST_RUNNING", "1")

from emporium.db import models
from emporium.db.database import SessionLocal, engine
from emporium.api.main import app
from emporium.utils.feature_flags import refresh_feature_flag_cache

ADMIN_EMAIL = "admin@example.com"


@pytest.fixture(scope="session", autouse=True)
def create_schema_once():
    """Create all tables once per test session (SQLite in-memory)."""
    models.Base.metadata.create_all(bind=engine)
    yield
    models.Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def clean_data():
    """Truncate all tables between tests without dropping metadata (faster)."""
    with engine.begin() as connection:
        for table in reversed(models.Base.metadata.sorted_tables):
            connection.execute(table.delete())
    yield


@pytest.fixture(autouse=True)
def _runtime_env(monkeypatch):
    monkeypatch.delenv("DEV_MODE", raising=False)
    monkeypatch.setenv("ADMIN_EMAILS", ADMIN_EMAIL)
    for name in (
        "FEATURE_BLOG_ENABLED",
        "FEATURE_SHOP_ENABLED",
        "FEATURE_CHAT_ENABLED",
        "FEATURE_LIVE_QUERIES_ENABLED",
    ):
        monkeypatch.delenv(name, raising=False)
    refresh_feature_flag_cache()
    yield
    refresh_feature_flag_cache()


@pytest.fixture
def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def user_headers():
    return {"x-auth-request-email": "writer@example.com", "x-auth-request-user": "Writer"}


@pytest.fixture
def admin_headers():
    return {"x-auth-request-email": ADMIN_EMAIL, "x-auth-request-user": "Admin"}


@pytest.fixture
def user_factory(db_session: Session):
    def _create(email: str, role: str = "user", display_name: str = None):
        user = models.User(email=email, display_name=display_name or email.split("@")[0], role=role)
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user
    return _create
