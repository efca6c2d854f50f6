import pytest
from sqlalchemy.exc import SQLAlchemyError

from emporium.db.patches import prepare_updates
from emporium.db.repositories import blog as blog_repo
from emporium.db.repositories import records


def _post(db, slug="hello"):
    return records.create(
        db, "BlogPost", {"title": slug.title(), "content": "x" * 60, "slug": slug, "author": "User:u1"}
    )


def _fail(*_args, **_kwargs):
    raise SQLAlchemyError("post list write failed")


def test_comment_is_mirrored_in_one_commit(db_session):
    post = _post(db_session)
    comment = blog_repo.create_comment(
        db_session, {"post_ref": post.id, "user_ref": "User:u1", "content": "Nice post"}
    )
    assert records.select(db_session, post.id).comments == [comment.id]

    blog_repo.delete_comment(db_session, comment.id)
    assert records.select(db_session, post.id).comments == []
    assert records.select(db_session, comment.id) is None


def test_failed_mirror_write_rolls_back_the_comment(db_session, monkeypatch):
    post = _post(db_session)
    monkeypatch.setattr(records, "array_add", _fail)
    with pytest.raises(SQLAlchemyError):
        blog_repo.create_comment(db_session, {"post_ref": post.id, "user_ref": "User:u1", "content": "Lost"})
    assert records.select_all(db_session, "BlogComment") == []
    assert records.select(db_session, post.id).comments == []


def test_failed_mirror_removal_keeps_the_like(db_session, monkeypatch):
    post = _post(db_session)
    like = blog_repo.create_like(db_session, {"post_ref": post.id, "user_ref": "User:u1"})
    monkeypatch.setattr(records, "array_remove", _fail)
    with pytest.raises(SQLAlchemyError):
        blog_repo.delete_like(db_session, like.id)
    assert records.select(db_session, like.id) is not None
    assert records.select(db_session, post.id).likes == [like.id]


def test_moving_a_like_moves_its_mirror_entry(db_session):
    first, second = _post(db_session, "first"), _post(db_session, "second")
    like = blog_repo.create_like(db_session, {"post_ref": first.id, "user_ref": "User:u1"})
    moved = blog_repo.update_like(db_session, like.id, prepare_updates([("/post_ref", second.id)]))
    assert moved.post_ref == second.id
    assert records.select(db_session, first.id).likes == []
    assert records.select(db_session, second.id).likes == [like.id]
