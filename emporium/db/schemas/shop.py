from datetime import UTC, datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


ProductType = Literal["physical", "digital"]
OrderStatus = Literal["pending", "paid", "shipped", "delivered", "cancelled"]
PaymentMethod = Literal["card", "paypal", "bank_transfer", "cash"]

# ORM rows expose the JSON column as ``metadata_json``
_METADATA_ALIAS = AliasChoices("metadata_json", "metadata")


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Aware UTC form of ``value``; naive datetimes are taken to be UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class _Record(BaseModel):
    id: str
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)


# Categories

class ShopCategoryCreate(BaseModel):
    name: str = Field(min_length=2)
    slug: str = Field(min_length=2)
    description: Optional[str] = None
    parent_id: Optional[str] = None


class ShopCategoryUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2)
    slug: Optional[str] = Field(default=None, min_length=2)
    description: Optional[str] = None
    parent_id: Optional[str] = None


class ShopCategory(_Record):
    name: str
    slug: str
    description: Optional[str] = None
    parent_id: Optional[str] = None


# Products

class ShopProductCreate(BaseModel):
    category_id: List[str] = Field(min_length=1)
    product_type: ProductType = "physical"
    is_active: bool = True
    slug: str = Field(min_length=2)
    name: str = Field(min_length=2)
    description: Optional[str] = None
    price: float = Field(ge=0)
    stock: int = Field(default=0, ge=0)
    cover_image: Optional[str] = None
    files: List[str] = Field(default_factory=list)
    metadata: Optional[Dict[str, Any]] = None


class ShopProductUpdate(BaseModel):
    category_id: Optional[List[str]] = Field(default=None, min_length=1)
    product_type: Optional[ProductType] = None
    is_active: Optional[bool] = None
    slug: Optional[str] = Field(default=None, min_length=2)
    name: Optional[str] = Field(default=None, min_length=2)
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    stock: Optional[int] = Field(default=None, ge=0)
    cover_image: Optional[str] = None
    files: Optional[List[str]] = None
    metadata: Optional[Dict[str, Any]] = None


class ShopProduct(_Record):
    category_id: List[str] = []
    product_type: str
    is_active: bool
    slug: str
    name: str
    description: Optional[str] = None
    price: float
    stock: int
    cover_image: Optional[str] = None
    files: List[str] = []
    metadata: Optional[Dict[str, Any]] = Field(default=None, validation_alias=_METADATA_ALIAS)


# Carts

class CartItem(BaseModel):
    product_id: str = Field(min_length=1)
    quantity: int = Field(ge=1)


class ShopCartCreate(BaseModel):
    user_id: str = Field(min_length=1)
    items: List[CartItem] = Field(default_factory=list)


class ShopCartUpdate(BaseModel):
    user_id: Optional[str] = None
    items: Optional[List[CartItem]] = None


class ShopCart(_Record):
    user_id: str
    items: List[CartItem] = []


# Discounts

class ShopDiscountCreate(BaseModel):
    product_id: List[str] = Field(default_factory=list)
    name: str = Field(min_length=2)
    usage_limit: int = Field(default=0, ge=0)
    discount_code: str = Field(min_length=3)
    discount_percentage: float = Field(ge=0, le=100)
    start_date: datetime
    end_date: datetime

    @model_validator(mode="after")
    def _check_window(self):
        if as_utc(self.end_date) < as_utc(self.start_date):
            raise ValueError("end_date must not precede start_date")
        return self


class ShopDiscountUpdate(BaseModel):
    product_id: Optional[List[str]] = None
    name: Optional[str] = Field(default=None, min_length=2)
    usage_limit: Optional[int] = Field(default=None, ge=0)
    discount_code: Optional[str] = Field(default=None, min_length=3)
    discount_percentage: Optional[float] = Field(default=None, ge=0, le=100)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @model_validator(mode="after")
    def _check_window(self):
        if self.start_date and self.end_date and as_utc(self.end_date) < as_utc(self.start_date):
            raise ValueError("end_date must not precede start_date")
        return self


class ShopDiscount(_Record):
    product_id: List[str] = []
    name: str
    usage_limit: int
    discount_code: str
    discount_percentage: float
    start_date: datetime
    end_date: datetime


# Orders

class ShopOrderCreate(BaseModel):
    user_id: str = Field(min_length=1)
    status: OrderStatus = "pending"
    total_amount: float = Field(default=0, ge=0)
    address_line: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = None


class ShopOrderUpdate(BaseModel):
    user_id: Optional[str] = None
    status: Optional[OrderStatus] = None
    total_amount: Optional[float] = Field(default=None, ge=0)
    address_line: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = None


class ShopOrder(_Record):
    user_id: str
    status: str
    total_amount: float
    address_line: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = None


# Order details

class ShopOrderDetailsCreate(BaseModel):
    order_id: str = Field(min_length=1)
    product_id: str = Field(min_length=1)
    quantity: int = Field(default=1, ge=1)
    price_per_unit: float = Field(ge=0)
    total_price: Optional[float] = Field(default=None, ge=0)
    applied_discount: Optional[str] = None


class ShopOrderDetailsUpdate(BaseModel):
    order_id: Optional[str] = None
    product_id: Optional[str] = None
    quantity: Optional[int] = Field(default=None, ge=1)
    price_per_unit: Optional[float] = Field(default=None, ge=0)
    total_price: Optional[float] = Field(default=None, ge=0)
    applied_discount: Optional[str] = None


class ShopOrderDetails(_Record):
    order_id: str
    product_id: str
    quantity: int
    price_per_unit: float
    total_price: float
    applied_discount: Optional[str] = None


# Payments

class ShopPaymentCreate(BaseModel):
    order_id: str = Field(min_length=1)
    product_id: List[str] = Field(default_factory=list)
    payment_date: datetime
    payment_method: PaymentMethod
    amount: float = Field(gt=0)
    transaction_id: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class ShopPaymentUpdate(BaseModel):
    order_id: Optional[str] = None
    product_id: Optional[List[str]] = None
    payment_date: Optional[datetime] = None
    payment_method: Optional[PaymentMethod] = None
    amount: Optional[float] = Field(default=None, gt=0)
    transaction_id: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class ShopPayment(_Record):
    order_id: str
    product_id: List[str] = []
    payment_date: datetime
    payment_method: str
    amount: float
    transaction_id: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = Field(default=None, validation_alias=_METADATA_ALIAS)


# Reviews

class ShopReviewCreate(BaseModel):
    product_id: str = Field(min_length=1)
    user_id: str = Field(min_length=1)
    rating: int = Field(ge=1, le=5)
    comment: Optional[str] = None


class ShopReviewUpdate(BaseModel):
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    comment: Optional[str] = None


class ShopReview(_Record):
    product_id: str
    user_id: str
    rating: int
    comment: Optional[str] = None
