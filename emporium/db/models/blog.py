from sqlalchemy import Column, String, Text, Index, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from .base import Base, RecordMixin


class BlogPost(RecordMixin, Base):
    __tablename__ = 'blog_posts'
    __record_table__ = 'BlogPost'
    __references__ = {'author': 'User'}
    __reference_lists__ = {
        'categories': 'BlogCategory',
        'tags': 'BlogTag',
        'likes': 'BlogLike',
        'comments': 'BlogComment',
    }

    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    slug = Column(String(255), nullable=False, unique=True)
    author = Column(String(96), nullable=False, index=True)
    categories = Column(JSONB, nullable=False, default=list)
    tags = Column(JSONB, nullable=False, default=list)
    likes = Column(JSONB, nullable=False, default=list)
    comments = Column(JSONB, nullable=False, default=list)


class BlogCategory(RecordMixin, Base):
    __tablename__ = 'blog_categories'
    __record_table__ = 'BlogCategory'
    __references__ = {'parent_id': 'BlogCategory'}

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    slug = Column(String(255), nullable=False, unique=True)
    parent_id = Column(String(96), nullable=True)


class BlogTag(RecordMixin, Base):
    __tablename__ = 'blog_tags'
    __record_table__ = 'BlogTag'

    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True)


class BlogComment(RecordMixin, Base):
    __tablename__ = 'blog_comments'
    __record_table__ = 'BlogComment'
    __references__ = {
        'post_ref': 'BlogPost',
        'user_ref': 'User',
        'parent_comment_ref': 'BlogComment',
    }

    post_ref = Column(String(96), nullable=False, index=True)
    user_ref = Column(String(96), nullable=False, index=True)
    parent_comment_ref = Column(String(96), nullable=True)
    content = Column(Text, nullable=False)


class BlogLike(RecordMixin, Base):
    __tablename__ = 'blog_likes'
    __record_table__ = 'BlogLike'
    __references__ = {'post_ref': 'BlogPost', 'user_ref': 'User'}

    post_ref = Column(String(96), nullable=False)
    user_ref = Column(String(96), nullable=False)

    __table_args__ = (
        UniqueConstraint('post_ref', 'user_ref', name='uq_blog_likes_post_user'),
        Index('ix_blog_likes_post_ref', 'post_ref'),
    )


class BlogBookmark(RecordMixin, Base):
    __tablename__ = 'blog_bookmarks'
    __record_table__ = 'BlogBookmark'
    __references__ = {'post_ref': 'BlogPost', 'user_ref': 'User'}

    post_ref = Column(String(96), nullable=False)
    user_ref = Column(String(96), nullable=False)

    __table_args__ = (
        UniqueConstraint('post_ref', 'user_ref', name='uq_blog_bookmarks_post_user'),
        Index('ix_blog_bookmarks_user_ref', 'user_ref'),
    )


class BlogMedia(RecordMixin, Base):
    __tablename__ = 'blog_media'
    __record_table__ = 'BlogMedia'
    __references__ = {'post_ref': 'BlogPost'}

    post_ref = Column(String(96), nullable=False, index=True)
    media_url = Column(String(2048), nullable=False)
    # 'image' | 'video' | 'audio' | 'document'
    media_type = Column(String(20), nullable=False)
