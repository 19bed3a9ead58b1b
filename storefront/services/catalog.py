"""
services/catalog.py

상품(Product) / 좋아요 / 댓글 비즈니스 로직.

주요 기능:
- 상품 생성 / 수정 / Soft Delete / 복구, 판매 여부 / 재고 변경 (관리자)
- 필터 + 정렬 + 페이지 조회 (공개)
- 조회수 증가, 좋아요 토글, 댓글 작성 / 조회 / 신고 토글

설계 원칙:
- 카운터(views_count, likes)는 "count = count ± 1" 단일 UPDATE로만 변경
- 좋아요 중복은 (product_id, user_id) 유니크 제약이 최종적으로 막음
- 공개 조회는 삭제된 상품 제외, 관리자 조회는 포함
- 커밋은 호출 측(unit_of_work)에서 수행

"""

import uuid
from dataclasses import dataclass

from sqlalchemy import Text, asc, delete, desc, func, or_, select, type_coerce, update
from sqlalchemy.orm import Session

from storefront.core.clock import utc_now
from storefront.core.errors import not_found
from storefront.models.category import Category
from storefront.models.comment import Comment
from storefront.models.product import Product, ProductLike
from storefront.schemas.catalog import PRODUCT_PER_PAGE, ProductSortBy


@dataclass
class ProductFilter:
    category: uuid.UUID | None = None
    tag: str | None = None
    available: bool | None = None
    search: str | None = None
    min_price: float | None = None
    max_price: float | None = None
    sort_by: ProductSortBy = ProductSortBy.NEWEST
    page: int = 1
    limit: int = PRODUCT_PER_PAGE


_SORT_COLUMNS = {
    ProductSortBy.NEWEST: desc(Product.created_at),
    ProductSortBy.PRICE_ASC: asc(Product.price),
    ProductSortBy.PRICE_DESC: desc(Product.price),
    ProductSortBy.TRENDING: desc(Product.views_count),
    ProductSortBy.VIEWS: desc(Product.views_count),
    ProductSortBy.LIKES: desc(Product.likes),
}


def _tag_clause(tag: str):
    # tags 는 "a,b,c" 로 저장됨. StringList 변환을 거치지 않도록 TEXT 로 비교
    tags = type_coerce(Product.tags, Text)
    value = _escape_like(tag)
    return or_(
        tags == tag,
        tags.like(f"{value},%", escape="\\"),
        tags.like(f"%,{value}", escape="\\"),
        tags.like(f"%,{value},%", escape="\\"),
    )


def _escape_like(text: str) -> str:
    # % _ 는 와일드카드가 아닌 문자 그대로 매칭
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


# ---------- 조회 ----------

def get_product(db: Session, product_id: uuid.UUID, *, include_deleted: bool = False) -> Product:
    stmt = select(Product).where(Product.id == product_id)
    if not include_deleted:
        stmt = stmt.where(Product.deleted_at.is_(None))
    product = db.scalar(stmt)
    if not product:
        raise not_found("PRODUCT_NOT_FOUND", "Product not found")
    return product


def list_products(db: Session, flt: ProductFilter) -> tuple[list[Product], int]:
    conditions = [Product.deleted_at.is_(None)]

    if flt.category:
        conditions.append(Product.category_id == flt.category)
    if flt.tag:
        conditions.append(_tag_clause(flt.tag))
    if flt.available is not None:
        conditions.append(Product.available.is_(flt.available))
    if flt.search:
        pattern = f"%{_escape_like(flt.search)}%"
        conditions.append(
            or_(
                Product.title.ilike(pattern, escape="\\"),
                Product.short_description.ilike(pattern, escape="\\"),
            )
        )
    if flt.min_price is not None:
        conditions.append(Product.price >= flt.min_price)
    if flt.max_price is not None:
        conditions.append(Product.price <= flt.max_price)

    total = db.scalar(select(func.count()).select_from(Product).where(*conditions)) or 0
    rows = db.scalars(
        select(Product)
        .where(*conditions)
        .order_by(_SORT_COLUMNS[flt.sort_by], desc(Product.id))
        .offset((flt.page - 1) * flt.limit)
        .limit(flt.limit)
    ).all()
    return list(rows), total


def list_products_for_admin(db: Session) -> list[Product]:
    return list(db.scalars(select(Product).order_by(desc(Product.created_at))).all())


# ---------- 관리자 변경 ----------

def _ensure_category(db: Session, category_id: uuid.UUID) -> None:
    if not db.get(Category, category_id):
        raise not_found("CATEGORY_NOT_FOUND", "Category not found")


def create_product(db: Session, data: dict) -> Product:
    _ensure_category(db, data["category_id"])
    product = Product(**data)
    db.add(product)
    db.flush()
    return product


def update_product(db: Session, product_id: uuid.UUID, changes: dict) -> Product:
    product = get_product(db, product_id, include_deleted=True)
    if changes.get("category_id"):
        _ensure_category(db, changes["category_id"])
    for field, value in changes.items():
        setattr(product, field, value)
    db.flush()
    return product


def soft_delete_product(db: Session, product_id: uuid.UUID) -> None:
    product = get_product(db, product_id, include_deleted=True)
    if product.deleted_at is None:
        product.deleted_at = utc_now()
    db.flush()


def restore_product(db: Session, product_id: uuid.UUID) -> Product:
    product = get_product(db, product_id, include_deleted=True)
    product.deleted_at = None
    db.flush()
    return product


def set_availability(db: Session, product_id: uuid.UUID, available: bool) -> Product:
    return update_product(db, product_id, {"available": available})


def set_stock(db: Session, product_id: uuid.UUID, stock_count: int) -> Product:
    return update_product(db, product_id, {"stock_count": stock_count})


# ---------- 조회수 / 좋아요 ----------

def increment_views(db: Session, product_id: uuid.UUID) -> None:
    result = db.execute(
        update(Product)
        .where(Product.id == product_id, Product.deleted_at.is_(None))
        .values(views_count=Product.views_count + 1)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        raise not_found("PRODUCT_NOT_FOUND", "Product not found")


def _likes_count(db: Session, product_id: uuid.UUID) -> int:
    return db.scalar(select(Product.likes).where(Product.id == product_id)) or 0


def toggle_like(db: Session, *, user_id: uuid.UUID, product_id: uuid.UUID) -> tuple[bool, int]:
    get_product(db, product_id)

    removed = db.execute(
        delete(ProductLike).where(ProductLike.product_id == product_id, ProductLike.user_id == user_id)
    )
    if removed.rowcount:
        delta, liked = -1, False
    else:
        db.add(ProductLike(product_id=product_id, user_id=user_id))
        db.flush()
        delta, liked = 1, True

    db.execute(
        update(Product)
        .where(Product.id == product_id)
        .values(likes=Product.likes + delta)
        .execution_options(synchronize_session=False)
    )
    return liked, _likes_count(db, product_id)


# ---------- 댓글 ----------

def add_comment(db: Session, *, user_id: uuid.UUID, product_id: uuid.UUID, text: str, rating: int) -> Comment:
    get_product(db, product_id)
    comment = Comment(product_id=product_id, user_id=user_id, text=text, rating=rating)
    db.add(comment)
    db.flush()
    return comment


def list_comments(db: Session, product_id: uuid.UUID, *, page: int = 1, limit: int = 20) -> tuple[list[Comment], int]:
    total = db.scalar(select(func.count()).select_from(Comment).where(Comment.product_id == product_id)) or 0
    rows = db.scalars(
        select(Comment)
        .where(Comment.product_id == product_id)
        .order_by(desc(Comment.created_at), desc(Comment.id))
        .offset((page - 1) * limit)
        .limit(limit)
    ).all()
    return list(rows), total


def flag_comment(db: Session, comment_id: uuid.UUID) -> Comment:
    comment = db.get(Comment, comment_id)
    if not comment:
        raise not_found("COMMENT_NOT_FOUND", "Comment not found")
    comment.flagged = not comment.flagged
    db.flush()
    return comment
