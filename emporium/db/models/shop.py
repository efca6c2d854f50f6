from sqlalchemy import Column, String, Text, Integer, Float, Boolean, DateTime
from sqlalchemy.dialects.postgresql import JSONB
from .base import Base, RecordMixin


class ShopCategory(RecordMixin, Base):
    __tablename__ = 'shop_categories'
    __record_table__ = 'ShopCategory'
    __references__ = {'parent_id': 'ShopCategory'}

    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True)
    description = Column(Text, nullable=True)
    parent_id = Column(String(96), nullable=True)


class ShopProduct(RecordMixin, Base):
    __tablename__ = 'shop_products'
    __record_table__ = 'ShopProduct'
    __reference_lists__ = {'category_id': 'ShopCategory'}

    category_id = Column(JSONB, nullable=False, default=list)
    # 'physical' | 'digital'
    product_type = Column(String(20), nullable=False, default='physical')
    is_active = Column(Boolean, nullable=False, default=True)
    slug = Column(String(255), nullable=False, unique=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Float, nullable=False, default=0.0)
    stock = Column(Integer, nullable=False, default=0)
    cover_image = Column(String(2048), nullable=True)
    files = Column(JSONB, nullable=False, default=list)
    # Non-reserved attribute name, DB column 'metadata'
    metadata_json = Column('metadata', JSONB, nullable=True)


class ShopCart(RecordMixin, Base):
    __tablename__ = 'shop_carts'
    __record_table__ = 'ShopCart'
    __references__ = {'user_id': 'User'}

    user_id = Column(String(96), nullable=False, index=True)
    # [{"product_id": "ShopProduct:...", "quantity": 2}, ...]
    items = Column(JSONB, nullable=False, default=list)


class ShopDiscount(RecordMixin, Base):
    __tablename__ = 'shop_discounts'
    __record_table__ = 'ShopDiscount'
    __reference_lists__ = {'product_id': 'ShopProduct'}

    product_id = Column(JSONB, nullable=False, default=list)
    name = Column(String(255), nullable=False)
    usage_limit = Column(Integer, nullable=False, default=0)
    discount_code = Column(String(64), nullable=False, unique=True)
    discount_percentage = Column(Float, nullable=False)
    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=False)


class ShopOrder(RecordMixin, Base):
    __tablename__ = 'shop_orders'
    __record_table__ = 'ShopOrder'
    __references__ = {'user_id': 'User'}

    user_id = Column(String(96), nullable=False, index=True)
    # 'pending' | 'paid' | 'shipped' | 'delivered' | 'cancelled'
    status = Column(String(20), nullable=False, default='pending')
    total_amount = Column(Float, nullable=False, default=0.0)
    address_line = Column(String(512), nullable=True)
    city = Column(String(255), nullable=True)
    country = Column(String(255), nullable=True)
    postal_code = Column(String(32), nullable=True)


class ShopOrderDetails(RecordMixin, Base):
    __tablename__ = 'shop_order_details'
    __record_table__ = 'ShopOrderDetails'
    __references__ = {
        'order_id': 'ShopOrder',
        'product_id': 'ShopProduct',
        'applied_discount': 'ShopDiscount',
    }

    order_id = Column(String(96), nullable=False, index=True)
    product_id = Column(String(96), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    price_per_unit = Column(Float, nullable=False)
    total_price = Column(Float, nullable=False)
    applied_discount = Column(String(96), nullable=True)


class ShopPayment(RecordMixin, Base):
    __tablename__ = 'shop_payments'
    __record_table__ = 'ShopPayment'
    __references__ = {'order_id': 'ShopOrder'}
    __reference_lists__ = {'product_id': 'ShopProduct'}

    order_id = Column(String(96), nullable=False, index=True)
    product_id = Column(JSONB, nullable=False, default=list)
    payment_date = Column(DateTime(timezone=True), nullable=False)
    # 'card' | 'paypal' | 'bank_transfer' | 'cash'
    payment_method = Column(String(20), nullable=False)
    amount = Column(Float, nullable=False)
    transaction_id = Column(String(255), nullable=True)
    metadata_json = Column('metadata', JSONB, nullable=True)


class ShopReview(RecordMixin, Base):
    __tablename__ = 'shop_reviews'
    __record_table__ = 'ShopReview'
    __references__ = {'product_id': 'ShopProduct', 'user_id': 'User'}

    product_id = Column(String(96), nullable=False, index=True)
    user_id = Column(String(96), nullable=False)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
