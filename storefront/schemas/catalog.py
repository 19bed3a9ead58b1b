import uuid
from datetime import datetime
from enum import Enum

from pydantic import Field, field_validator

from storefront.models.product import DEFAULT_CURRENCY, ProductTag
from storefront.schemas.common import CamelModel


class ProductSortBy(str, Enum):
    NEWEST = "newest"
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    TRENDING = "trending"
    VIEWS = "views"
    LIKES = "likes"


PRODUCT_PER_PAGE = 20


def _reject_null(value):
    # PATCH 에서 필드를 생략하는 것은 허용, 필수 컬럼에 null 을 보내는 것은 거부
    if value is None:
        raise ValueError("Field cannot be null")
    return value


# ---------- Category ----------

class CategoryCreate(CamelModel):
    name_en: str = Field(min_length=1, max_length=255)
    name_ar: str = Field(min_length=1, max_length=255)
    parent_id: uuid.UUID | None = None


class CategoryUpdate(CamelModel):
    name_en: str | None = Field(default=None, min_length=1, max_length=255)
    name_ar: str | None = Field(default=None, min_length=1, max_length=255)
    parent_id: uuid.UUID | None = None

    # parent_id 는 null 로 최상위 카테고리로 옮길 수 있음
    @field_validator("name_en", "name_ar")
    @classmethod
    def _not_null(cls, value):
        return _reject_null(value)


class CategoryResponse(CamelModel):
    id: uuid.UUID
    name_en: str
    name_ar: str
    parent_id: uuid.UUID | None = None
    created_at: datetime


# ---------- Product ----------

class ProductCreate(CamelModel):
    title: str = Field(min_length=1, max_length=500)
    short_description: str | None = None
    full_description: str | None = None
    price: float = Field(ge=0)
    cost: float | None = Field(default=None, ge=0)
    currency: str = Field(default=DEFAULT_CURRENCY, min_length=3, max_length=3)
    category_id: uuid.UUID
    tags: list[ProductTag] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)
    stock_count: int = Field(ge=0)
    available: bool = True
    expiry_timer: datetime | None = None


class ProductUpdate(CamelModel):
    title: str | None = Field(default=None, min_length=1, max_length=500)
    short_description: str | None = None
    full_description: str | None = None
    price: float | None = Field(default=None, ge=0)
    cost: float | None = Field(default=None, ge=0)
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    category_id: uuid.UUID | None = None
    tags: list[ProductTag] | None = None
    images: list[str] | None = None
    stock_count: int | None = Field(default=None, ge=0)
    available: bool | None = None
    expiry_timer: datetime | None = None

    @field_validator(
        "title", "price", "currency", "category_id", "tags", "images", "stock_count", "available"
    )
    @classmethod
    def _not_null(cls, value):
        return _reject_null(value)


class ToggleAvailabilityRequest(CamelModel):
    available: bool


class UpdateStockRequest(CamelModel):
    stock_count: int = Field(ge=0)


class ProductResponse(CamelModel):
    id: uuid.UUID
    title: str
    short_description: str | None = None
    full_description: str | None = None
    price: float
    cost: float | None = None
    currency: str
    category_id: uuid.UUID
    category: CategoryResponse | None = None
    tags: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)
    stock_count: int
    available: bool
    expiry_timer: datetime | None = None
    views_count: int
    likes: int
    dislikes: int
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None


class LikeToggleResponse(CamelModel):
    liked: bool
    likes_count: int


# ---------- Comment ----------

class CommentCreate(CamelModel):
    text: str = Field(min_length=1)
    rating: int = Field(ge=1, le=5)


class CommentAuthor(CamelModel):
    id: uuid.UUID
    name: str


class CommentResponse(CamelModel):
    id: uuid.UUID
    product_id: uuid.UUID
    user_id: uuid.UUID
    user: CommentAuthor | None = None
    text: str
    rating: int
    flagged: bool
    created_at: datetime
    updated_at: datetime
