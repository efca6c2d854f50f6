"""
Database engine and session management.

Builds the SQLAlchemy engine from environment configuration with test
fallbacks (SQLite in-memory) and exposes the FastAPI session dependency.
"""
import os
import sys
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool


def _get_database_url() -> str:
    if os.getenv("DATABASE_URL"):
        return os.getenv("DATABASE_URL")

    # Otherwise, generate from individual components (all must be set)
    parts = {
        "POSTGRES_USER": os.getenv("POSTGRES_USER"),
        "POSTGRES_PASSWORD": os.getenv("POSTGRES_PASSWORD"),
        "POSTGRES_HOST": os.getenv("POSTGRES_HOST"),
        "POSTGRES_PORT": os.getenv("POSTGRES_PORT"),
        "POSTGRES_DB": os.getenv("POSTGRES_DB"),
    }
    missing = [name for name, value in parts.items() if not value]
    if missing:
        raise ValueError(f"Missing required database environment variables: {', '.join(missing)}")

    return (
        f"postgresql://{parts['POSTGRES_USER']}:{parts['POSTGRES_PASSWORD']}"
        f"@{parts['POSTGRES_HOST']}:{parts['POSTGRES_PORT']}/{parts['POSTGRES_DB']}"
    )


def _is_pytest_runtime() -> bool:
    """Best-effort detection that we're executing under pytest.

    ``PYTEST_CURRENT_TEST`` is only set while a test runs, so the engine built
    at import time during collection relies on ``pytest`` being in
    ``sys.modules``. ``PYTEST_RUNNING=1`` forces the test path.
    """
    if os.getenv("PYTEST_RUNNING") == "1":
        return True
    if "PYTEST_CURRENT_TEST" in os.environ:
        return True
    return "pytest" in sys.modules


# Test override strategy:
# 1. EMPORIUM_TEST_DB wins when set.
# 2. Else TEST_DATABASE_URL (set by the e2e migration test) is used as-is.
# 3. Else under pytest an in-memory SQLite database is forced.
explicit_test_db = os.getenv("EMPORIUM_TEST_DB")
explicit_e2e_db = os.getenv("TEST_DATABASE_URL")

_engine_kwargs: dict = {}
if explicit_test_db:
    DATABASE_URL = explicit_test_db
    if DATABASE_URL.startswith("sqlite"):
        _engine_kwargs = {"connect_args": {"check_same_thread": False}}
elif explicit_e2e_db:
    DATABASE_URL = explicit_e2e_db
elif _is_pytest_runtime():
    # StaticPool keeps one connection so the in-memory schema survives
    DATABASE_URL = "sqlite+pysqlite:///:memory:"
    _engine_kwargs = {
        "connect_args": {"check_same_thread": False},
        "poolclass": StaticPool,
    }
else:
    DATABASE_URL = _get_database_url()

engine = create_engine(DATABASE_URL, **_engine_kwargs)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

_SCHEMA_INIT_DONE = False


def _ensure_sqlite_schema():
    """Create tables once for SQLite databases (tests and local runs)."""
    global _SCHEMA_INIT_DONE
    if _SCHEMA_INIT_DONE:
        return
    if str(engine.url).startswith("sqlite"):
        from emporium.db import models
        models.Base.metadata.create_all(bind=engine)
    _SCHEMA_INIT_DONE = True


def get_db():
    """Dependency to get a database session."""
    _ensure_sqlite_schema()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
