"""
Blog API: posts at the blog root, sub-resources under their own segment.

Sub-resource routers are mounted before the post router so that
``/category`` and friends are not captured by ``/{post_id}``.
"""
from fastapi import APIRouter, Depends

from emporium.api.deps import require_feature
from emporium.utils.feature_flags import blog_feature_enabled

from .categories import router as categories_router
from .comments import router as comments_router
from .likes import router as likes_router
from .media import router as media_router
from .posts import router as posts_router
from .tags import router as tags_router

PREFIX = "/api/blog"

router = APIRouter(dependencies=[Depends(require_feature(blog_feature_enabled))])
for _child in (categories_router, tags_router, comments_router, likes_router, media_router, posts_router):
    router.include_router(_child, prefix=PREFIX)
