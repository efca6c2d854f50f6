from datetime import timedelta

import pytest

from emporium.db import models
from emporium.db.models.base import now_utc
from emporium.db.query_builder import DEFAULT_LIMIT, MAX_LIMIT, build_query, resolve_limit, resolve_start
from emporium.db.repositories import records


@pytest.mark.parametrize(
    "raw,expected",
    [(None, DEFAULT_LIMIT), ("", DEFAULT_LIMIT), ("abc", DEFAULT_LIMIT), ("0", DEFAULT_LIMIT),
     ("-5", DEFAULT_LIMIT), ("25", 25), ("1000", MAX_LIMIT)],
)
def test_resolve_limit(raw, expected):
    assert resolve_limit(raw) == expected


@pytest.mark.parametrize("raw,expected", [(None, 0), ("x", 0), ("-1", 0), ("7", 7)])
def test_resolve_start(raw, expected):
    assert resolve_start(raw) == expected


@pytest.fixture
def posts(db_session):
    base = now_utc()
    rows = []
    for i, (title, tags) in enumerate(
        [("Alpha news", ["BlogTag:t1"]), ("Beta notes", ["BlogTag:t2"]), ("Gamma news", ["BlogTag:t1", "BlogTag:t2"])]
    ):
        post = models.BlogPost(
            title=title,
            content="x" * 60,
            slug=f"post-{i}",
            author="User:u1" if i < 2 else "User:u2",
            categories=["BlogCategory:c1"] if i == 0 else [],
            tags=tags,
            created_at=base + timedelta(seconds=i),
            updated_at=base,
        )
        db_session.add(post)
        rows.append(post)
    db_session.commit()
    return rows


def _titles(db_session, params, **kwargs):
    stmt = build_query(params, "BlogPost", ("created_at", "title"), **kwargs)
    return [p.title for p in records.query(db_session, stmt)]


def test_default_order_is_newest_first(db_session, posts):
    assert _titles(db_session, {}) == ["Gamma news", "Beta notes", "Alpha news"]


def test_order_by_whitelist_and_direction(db_session, posts):
    assert _titles(db_session, {"orderBy": "title", "orderDirection": "asc"}) == [
        "Alpha news", "Beta notes", "Gamma news",
    ]
    # Unknown order fields fall back to created_at
    assert _titles(db_session, {"orderBy": "content; DROP TABLE", "orderDirection": "ASC"}) == [
        "Alpha news", "Beta notes", "Gamma news",
    ]


def test_title_and_query_filters(db_session, posts):
    assert sorted(_titles(db_session, {"title": " news "})) == ["Alpha news", "Gamma news"]
    assert _titles(db_session, {"query": "Beta"}, query_field="title") == ["Beta notes"]
    # query is ignored without a query field
    assert len(_titles(db_session, {"query": "Beta"})) == 3


def test_filter_values_are_bound_not_interpolated(db_session, posts):
    assert _titles(db_session, {"title": "' OR 1=1 --"}) == []
    assert _titles(db_session, {"title": "%"}) == []


def test_reference_filters_accept_bare_keys(db_session, posts):
    assert sorted(_titles(db_session, {"author": "u1"})) == ["Alpha news", "Beta notes"]
    assert _titles(db_session, {"author": "User:u2"}) == ["Gamma news"]
    assert _titles(db_session, {"author": "not a key"}) == []
    assert _titles(db_session, {"category": "c1"}) == ["Alpha news"]


def test_pagination(db_session, posts):
    assert _titles(db_session, {"limit": "1", "start": "1"}) == ["Beta notes"]
    assert _titles(db_session, {"limit": "junk", "start": "-3"}) == ["Gamma news", "Beta notes", "Alpha news"]


def test_price_filter_ignores_non_numbers(db_session):
    for slug, price in (("a", 5.0), ("b", 9.5)):
        db_session.add(models.ShopProduct(name=slug, slug=slug, price=price, category_id=["ShopCategory:c"]))
    db_session.commit()
    stmt = build_query({"price": "9.5"}, "ShopProduct", ("created_at", "price"))
    assert [p.slug for p in records.query(db_session, stmt)] == ["b"]
    stmt = build_query({"price": "cheap"}, "ShopProduct", ("created_at", "price"))
    assert len(records.query(db_session, stmt)) == 2
    stmt = build_query({"category": "c"}, "ShopProduct", ("created_at",))
    assert len(records.query(db_session, stmt)) == 2
