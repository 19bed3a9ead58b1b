"""
product.py

상품(Product) 및 좋아요(ProductLike) 모델 정의 파일.

- 상품 삭제는 Soft Delete(deleted_at) 방식
- views_count / likes 는 비정규화된 카운터로,
  항상 "count = count ± 1" 형태의 단일 UPDATE로만 변경한다
- tags 는 "a,b,c" TEXT, images 는 JSON 배열로 저장 (URL 에는 ',' 가 들어갈 수 있음)
- ProductLike 는 (product_id, user_id) 유니크 제약으로
  사용자당 상품 하나에 좋아요 한 번만 허용

"""

import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import (
    Boolean, DateTime, ForeignKey, Integer, Numeric, String, Text, TypeDecorator,
    UniqueConstraint, Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.core.clock import utc_now
from storefront.db.base import Base, JSONType
from storefront.models.category import Category


class ProductTag(str, Enum):
    NEW = "new"
    COMING_SOON = "coming_soon"
    ORDER_TO_BUY = "order_to_buy"


DEFAULT_CURRENCY = "SAR"


class StringList(TypeDecorator):
    """문자열 리스트를 "a,b,c" 형태의 TEXT로 저장.

    DB 종류와 상관없이 LIKE 로 태그 필터링이 가능하도록 단순 구분자 방식을 사용한다.
    값에 ',' 가 포함되면 안 되므로 고정된 값(ProductTag)에만 사용한다.
    컬럼과 비교할 때는 type_coerce(..., Text) 로 원본 TEXT 와 비교해야 한다.
    """

    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return ",".join(v.value if isinstance(v, Enum) else str(v) for v in value)

    def process_result_value(self, value, dialect):
        if not value:
            return []
        return value.split(",")


class Product(Base):
    __tablename__ = "products"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    short_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    full_description: Mapped[str | None] = mapped_column(Text, nullable=True)

    price: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False)
    cost: Mapped[float | None] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=True)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default=DEFAULT_CURRENCY)

    category_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("categories.id", ondelete="CASCADE"), nullable=False, index=True
    )
    category: Mapped[Category] = relationship(Category, lazy="joined")

    tags: Mapped[list[str]] = mapped_column(StringList, nullable=True, default=list)
    images: Mapped[list[str]] = mapped_column(JSONType, nullable=True, default=list)

    stock_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    expiry_timer: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    views_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    likes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    dislikes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False
    )
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, index=True)


class ProductLike(Base):
    __tablename__ = "product_likes"
    __table_args__ = (
        UniqueConstraint("product_id", "user_id", name="uq_product_likes_product_user"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    product_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now, nullable=False)
