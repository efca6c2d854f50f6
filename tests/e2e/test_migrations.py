"""
Alembic migrations and Postgres-only behaviour against a disposable
Postgres container. Skipped when Docker is not reachable.
"""
import os
from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect
from sqlalchemy.orm import sessionmaker

from emporium.db import models, query_builder
from emporium.db.repositories import records

pytestmark = pytest.mark.e2e

ROOT = Path(__file__).resolve().parents[2]


def _normalize(url: str) -> str:
    # postgresql+psycopg2:// -> postgresql://
    if "+" in url.split("://", 1)[0]:
        scheme, rest = url.split("://", 1)
        url = scheme.split("+", 1)[0] + "://" + rest
    return url


def _start_container(factory, image: str):
    """Started container from ``factory``, or skip when Docker is unreachable."""
    # the constructor already talks to the Docker daemon
    try:
        container = factory(image)
        container.start()
    except Exception as exc:  # Docker missing or not running
        pytest.skip(f"Postgres container unavailable: {exc}")
    return container


@pytest.fixture(scope="module")
def postgres_url():
    if os.getenv("SKIP_DOCKER_TESTS") == "1":
        pytest.skip("SKIP_DOCKER_TESTS=1")
    postgres = pytest.importorskip("testcontainers.postgres")
    image = os.getenv("TEST_POSTGRES_IMAGE", "postgres:16-alpine")
    container = _start_container(postgres.PostgresContainer, image)
    try:
        yield _normalize(container.get_connection_url())
    finally:
        container.stop()


@pytest.fixture
def alembic_config(postgres_url, monkeypatch):
    monkeypatch.setenv("TEST_DATABASE_URL", postgres_url)
    cfg = Config(str(ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(ROOT / "migrations"))
    cfg.set_main_option("sqlalchemy.url", postgres_url)
    return cfg


def test_upgrade_creates_every_table_then_downgrade_drops_them(alembic_config, postgres_url):
    command.upgrade(alembic_config, "head")
    engine = create_engine(postgres_url, future=True)
    try:
        tables = set(inspect(engine).get_table_names())
        assert set(models.Base.metadata.tables) <= tables

        command.downgrade(alembic_config, "base")
        remaining = set(inspect(engine).get_table_names()) - {"alembic_version"}
        assert remaining == set()
    finally:
        engine.dispose()


def test_reference_list_filters_on_jsonb(alembic_config, postgres_url):
    command.upgrade(alembic_config, "head")
    engine = create_engine(postgres_url, future=True)
    db = sessionmaker(bind=engine, autoflush=False)()
    try:
        author = records.create(db, "User", {"email": "pg@example.com", "display_name": "Pg"})
        body = "x" * 60
        records.create(db, "BlogPost", {
            "title": "Tagged", "content": body, "slug": "tagged", "author": author.id,
            "categories": ["BlogCategory:news"],
        })
        records.create(db, "BlogPost", {"title": "Plain", "content": body, "slug": "plain", "author": author.id})

        statement = query_builder.build_query({"category": "news"}, "BlogPost", ("created_at",))
        assert [p.title for p in records.query(db, statement)] == ["Tagged"]
    finally:
        db.close()
        command.downgrade(alembic_config, "base")
        engine.dispose()


def test_unreachable_docker_skips_instead_of_erroring():
    def no_daemon(_image):
        raise FileNotFoundError(2, "No such file or directory")

    with pytest.raises(pytest.skip.Exception, match="Postgres container unavailable"):
        _start_container(no_daemon, "postgres:16-alpine")
