"""initial schema: users, blog, shop, chat and audit tables

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '0001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSONB = postgresql.JSONB(astext_type=sa.Text())


def _record_columns():
    return [
        sa.Column('id', sa.String(length=96), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=False),
    ]


def _create_record_table(name, *columns, constraints=()):
    op.create_table(
        name,
        *_record_columns(),
        *columns,
        sa.PrimaryKeyConstraint('id'),
        *constraints,
    )
    op.create_index(op.f(f'ix_{name}_created_at'), name, ['created_at'], unique=False)


def upgrade() -> None:
    """Upgrade schema."""
    _create_record_table(
        'users',
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('display_name', sa.String(), nullable=True),
        sa.Column('role', sa.String(length=20), nullable=False, server_default='user'),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    # Blog
    _create_record_table(
        'blog_posts',
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('slug', sa.String(length=255), nullable=False),
        sa.Column('author', sa.String(length=96), nullable=False),
        sa.Column('categories', JSONB, nullable=False),
        sa.Column('tags', JSONB, nullable=False),
        sa.Column('likes', JSONB, nullable=False),
        sa.Column('comments', JSONB, nullable=False),
        constraints=(sa.UniqueConstraint('slug'),),
    )
    op.create_index(op.f('ix_blog_posts_author'), 'blog_posts', ['author'], unique=False)

    _create_record_table(
        'blog_categories',
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('slug', sa.String(length=255), nullable=False),
        sa.Column('parent_id', sa.String(length=96), nullable=True),
        constraints=(sa.UniqueConstraint('slug'),),
    )
    _create_record_table(
        'blog_tags',
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('slug', sa.String(length=255), nullable=False),
        constraints=(sa.UniqueConstraint('slug'),),
    )
    _create_record_table(
        'blog_comments',
        sa.Column('post_ref', sa.String(length=96), nullable=False),
        sa.Column('user_ref', sa.String(length=96), nullable=False),
        sa.Column('parent_comment_ref', sa.String(length=96), nullable=True),
        sa.Column('content', sa.Text(), nullable=False),
    )
    op.create_index(op.f('ix_blog_comments_post_ref'), 'blog_comments', ['post_ref'], unique=False)
    op.create_index(op.f('ix_blog_comments_user_ref'), 'blog_comments', ['user_ref'], unique=False)

    _create_record_table(
        'blog_likes',
        sa.Column('post_ref', sa.String(length=96), nullable=False),
        sa.Column('user_ref', sa.String(length=96), nullable=False),
        constraints=(sa.UniqueConstraint('post_ref', 'user_ref', name='uq_blog_likes_post_user'),),
    )
    op.create_index('ix_blog_likes_post_ref', 'blog_likes', ['post_ref'], unique=False)

    _create_record_table(
        'blog_bookmarks',
        sa.Column('post_ref', sa.String(length=96), nullable=False),
        sa.Column('user_ref', sa.String(length=96), nullable=False),
        constraints=(sa.UniqueConstraint('post_ref', 'user_ref', name='uq_blog_bookmarks_post_user'),),
    )
    op.create_index('ix_blog_bookmarks_user_ref', 'blog_bookmarks', ['user_ref'], unique=False)

    _create_record_table(
        'blog_media',
        sa.Column('post_ref', sa.String(length=96), nullable=False),
        sa.Column('media_url', sa.String(length=2048), nullable=False),
        sa.Column('media_type', sa.String(length=20), nullable=False),
    )
    op.create_index(op.f('ix_blog_media_post_ref'), 'blog_media', ['post_ref'], unique=False)

    # Shop
    _create_record_table(
        'shop_categories',
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('slug', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('parent_id', sa.String(length=96), nullable=True),
        constraints=(sa.UniqueConstraint('slug'),),
    )
    _create_record_table(
        'shop_products',
        sa.Column('category_id', JSONB, nullable=False),
        sa.Column('product_type', sa.String(length=20), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('slug', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('stock', sa.Integer(), nullable=False),
        sa.Column('cover_image', sa.String(length=2048), nullable=True),
        sa.Column('files', JSONB, nullable=False),
        sa.Column('metadata', JSONB, nullable=True),
        constraints=(sa.UniqueConstraint('slug'),),
    )
    _create_record_table(
        'shop_carts',
        sa.Column('user_id', sa.String(length=96), nullable=False),
        sa.Column('items', JSONB, nullable=False),
    )
    op.create_index(op.f('ix_shop_carts_user_id'), 'shop_carts', ['user_id'], unique=False)

    _create_record_table(
        'shop_discounts',
        sa.Column('product_id', JSONB, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('usage_limit', sa.Integer(), nullable=False),
        sa.Column('discount_code', sa.String(length=64), nullable=False),
        sa.Column('discount_percentage', sa.Float(), nullable=False),
        sa.Column('start_date', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('end_date', sa.TIMESTAMP(timezone=True), nullable=False),
        constraints=(sa.UniqueConstraint('discount_code'),),
    )
    _create_record_table(
        'shop_orders',
        sa.Column('user_id', sa.String(length=96), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('total_amount', sa.Float(), nullable=False),
        sa.Column('address_line', sa.String(length=512), nullable=True),
        sa.Column('city', sa.String(length=255), nullable=True),
        sa.Column('country', sa.String(length=255), nullable=True),
        sa.Column('postal_code', sa.String(length=32), nullable=True),
    )
    op.create_index(op.f('ix_shop_orders_user_id'), 'shop_orders', ['user_id'], unique=False)

    _create_record_table(
        'shop_order_details',
        sa.Column('order_id', sa.String(length=96), nullable=False),
        sa.Column('product_id', sa.String(length=96), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('price_per_unit', sa.Float(), nullable=False),
        sa.Column('total_price', sa.Float(), nullable=False),
        sa.Column('applied_discount', sa.String(length=96), nullable=True),
    )
    op.create_index(op.f('ix_shop_order_details_order_id'), 'shop_order_details', ['order_id'], unique=False)

    _create_record_table(
        'shop_payments',
        sa.Column('order_id', sa.String(length=96), nullable=False),
        sa.Column('product_id', JSONB, nullable=False),
        sa.Column('payment_date', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('payment_method', sa.String(length=20), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('transaction_id', sa.String(length=255), nullable=True),
        sa.Column('metadata', JSONB, nullable=True),
    )
    op.create_index(op.f('ix_shop_payments_order_id'), 'shop_payments', ['order_id'], unique=False)

    _create_record_table(
        'shop_reviews',
        sa.Column('product_id', sa.String(length=96), nullable=False),
        sa.Column('user_id', sa.String(length=96), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('comment', sa.Text(), nullable=True),
    )
    op.create_index(op.f('ix_shop_reviews_product_id'), 'shop_reviews', ['product_id'], unique=False)

    # Chat
    _create_record_table(
        'chat_users',
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('user_ref', sa.String(length=96), nullable=True),
    )
    op.create_index(op.f('ix_chat_users_email'), 'chat_users', ['email'], unique=True)

    _create_record_table(
        'chats',
        sa.Column('user_id', sa.String(length=96), nullable=False),
        sa.Column('admin_id', sa.String(length=96), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('started_at', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('ended_at', sa.TIMESTAMP(timezone=True), nullable=True),
    )
    op.create_index(op.f('ix_chats_user_id'), 'chats', ['user_id'], unique=False)

    _create_record_table(
        'chat_messages',
        sa.Column('chat_id', sa.String(length=96), nullable=False),
        sa.Column('sender_id', sa.String(length=96), nullable=False),
        sa.Column('sender_role', sa.String(length=20), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
    )
    op.create_index('ix_chat_messages_chat_id_created_at', 'chat_messages', ['chat_id', 'created_at'], unique=False)

    # Audit
    op.create_table(
        'audit_logs',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('actor_user_id', sa.String(length=96), nullable=False),
        sa.Column('action_type', sa.Text(), nullable=False),
        sa.Column('target_type', sa.Text(), nullable=True),
        sa.Column('target_id', sa.String(length=96), nullable=True),
        sa.Column('status', sa.Text(), nullable=False),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('metadata', JSONB, nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_audit_logs_actor_user_id_created_at', 'audit_logs', ['actor_user_id', 'created_at'], unique=False)
    op.create_index('ix_audit_logs_action_type', 'audit_logs', ['action_type'], unique=False)
    op.create_index('ix_audit_logs_target', 'audit_logs', ['target_type', 'target_id'], unique=False)


_TABLES = (
    'audit_logs',
    'chat_messages',
    'chats',
    'chat_users',
    'shop_reviews',
    'shop_payments',
    'shop_order_details',
    'shop_orders',
    'shop_discounts',
    'shop_carts',
    'shop_products',
    'shop_categories',
    'blog_media',
    'blog_bookmarks',
    'blog_likes',
    'blog_comments',
    'blog_tags',
    'blog_categories',
    'blog_posts',
    'users',
)


def downgrade() -> None:
    """Downgrade schema."""
    for name in _TABLES:
        op.drop_table(name)
