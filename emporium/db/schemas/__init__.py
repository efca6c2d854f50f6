"""
Domain-split Pydantic schemas with a compatibility aggregator.
"""

from .users import UserBase, UserUpdate, User
from .blog import (
    BlogPostCreate,
    BlogPostUpdate,
    BlogPost,
    BlogCategoryCreate,
    BlogCategoryUpdate,
    BlogCategory,
    BlogTagCreate,
    BlogTagUpdate,
    BlogTag,
    BlogCommentCreate,
    BlogCommentUpdate,
    BlogComment,
    PostUserLink,
    PostUserLinkUpdate,
    BlogLike,
    BlogBookmark,
    BlogMediaCreate,
    BlogMediaUpdate,
    BlogMedia,
)
from .shop import (
    ShopCategoryCreate,
    ShopCategoryUpdate,
    ShopCategory,
    ShopProductCreate,
    ShopProductUpdate,
    ShopProduct,
    CartItem,
    ShopCartCreate,
    ShopCartUpdate,
    ShopCart,
    ShopDiscountCreate,
    ShopDiscountUpdate,
    ShopDiscount,
    ShopOrderCreate,
    ShopOrderUpdate,
    ShopOrder,
    ShopOrderDetailsCreate,
    ShopOrderDetailsUpdate,
    ShopOrderDetails,
    ShopPaymentCreate,
    ShopPaymentUpdate,
    ShopPayment,
    ShopReviewCreate,
    ShopReviewUpdate,
    ShopReview,
)
from .chat import (
    ChatStart,
    MessageCreate,
    MessageUpdate,
    ChatAssign,
    ChatUser,
    Chat,
    Message,
    ChatSession,
    ChatSummary,
    ChatWithMessages,
)
from .audits import AuditLogBase, AuditLogCreate, AuditLog
from .admin import MonthlyRevenue, RecentSale, Dashboard
