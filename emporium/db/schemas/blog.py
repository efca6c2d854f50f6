from datetime import datetime
from typing import List, Literal, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator


MediaType = Literal["image", "video", "audio", "document"]


class _Record(BaseModel):
    id: str
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)


# Posts

class BlogPostCreate(BaseModel):
    title: str = Field(min_length=3)
    content: str = Field(min_length=50)
    slug: str = Field(min_length=3)
    author: str = Field(min_length=1)
    categories: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)


class BlogPostUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=3)
    content: Optional[str] = Field(default=None, min_length=50)
    slug: Optional[str] = Field(default=None, min_length=3)
    author: Optional[str] = None
    categories: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    likes: Optional[List[str]] = None
    comments: Optional[List[str]] = None


class BlogPost(_Record):
    title: str
    content: str
    slug: str
    author: str
    categories: List[str] = []
    tags: List[str] = []
    likes: List[str] = []
    comments: List[str] = []


# Categories

class BlogCategoryCreate(BaseModel):
    title: str = Field(min_length=3)
    description: str = Field(min_length=10)
    slug: str = Field(min_length=3)
    parent_id: Optional[str] = None


class BlogCategoryUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=3)
    description: Optional[str] = Field(default=None, min_length=10)
    slug: Optional[str] = Field(default=None, min_length=3)
    parent_id: Optional[str] = None


class BlogCategory(_Record):
    title: str
    description: str
    slug: str
    parent_id: Optional[str] = None


# Tags

class BlogTagCreate(BaseModel):
    name: str = Field(min_length=2)
    slug: str = Field(min_length=2)


class BlogTagUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2)
    slug: Optional[str] = Field(default=None, min_length=2)


class BlogTag(_Record):
    name: str
    slug: str


# Comments

class BlogCommentCreate(BaseModel):
    post_ref: str = Field(min_length=1)
    user_ref: str = Field(min_length=1)
    content: str = Field(min_length=1)
    parent_id: Optional[str] = None


class BlogCommentUpdate(BaseModel):
    content: Optional[str] = Field(default=None, min_length=1)
    parent_id: Optional[str] = None


class BlogComment(_Record):
    post_ref: str
    user_ref: str
    content: str
    parent_comment_ref: Optional[str] = None


# Likes and bookmarks share a shape

class PostUserLink(BaseModel):
    post_ref: str = Field(min_length=1)
    user_ref: str = Field(min_length=1)


class PostUserLinkUpdate(BaseModel):
    post_ref: Optional[str] = None
    user_ref: Optional[str] = None


class BlogLike(_Record):
    post_ref: str
    user_ref: str


class BlogBookmark(_Record):
    post_ref: str
    user_ref: str


# Media

def _check_http_url(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("media_url must be an http(s) URL")
    return value


class BlogMediaCreate(BaseModel):
    post_ref: str = Field(min_length=1)
    media_url: str
    media_type: MediaType

    @field_validator("media_url")
    @classmethod
    def _validate_url(cls, v: str) -> str:
        return _check_http_url(v)


class BlogMediaUpdate(BaseModel):
    post_ref: Optional[str] = None
    media_url: Optional[str] = None
    media_type: Optional[MediaType] = None

    @field_validator("media_url")
    @classmethod
    def _validate_url(cls, v: Optional[str]) -> Optional[str]:
        return _check_http_url(v)


class BlogMedia(_Record):
    post_ref: str
    media_url: str
    media_type: str
