import uuid

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from storefront.core.errors import bad_request, conflict, not_found
from storefront.models.category import Category
from storefront.models.product import Product


def get_category(db: Session, category_id: uuid.UUID) -> Category:
    category = db.get(Category, category_id)
    if not category:
        raise not_found("CATEGORY_NOT_FOUND", "Category not found")
    return category


def count_products(db: Session, category_id: uuid.UUID) -> int:
    return db.scalar(
        select(func.count())
        .select_from(Product)
        .where(Product.category_id == category_id, Product.deleted_at.is_(None))
    ) or 0


def list_categories(db: Session) -> list[Category]:
    return list(db.scalars(select(Category).order_by(Category.name_en)).all())


def create_category(db: Session, *, name_en: str, name_ar: str, parent_id: uuid.UUID | None = None) -> Category:
    if parent_id is not None:
        get_category(db, parent_id)
    category = Category(name_en=name_en, name_ar=name_ar, parent_id=parent_id)
    db.add(category)
    db.flush()
    return category


def update_category(db: Session, category_id: uuid.UUID, changes: dict) -> Category:
    category = get_category(db, category_id)
    parent_id = changes.get("parent_id")
    if parent_id is not None:
        if parent_id == category_id:
            raise bad_request("VALIDATION_ERROR", "Category cannot be its own parent")
        get_category(db, parent_id)
    for field, value in changes.items():
        setattr(category, field, value)
    db.flush()
    return category


def delete_category(db: Session, category_id: uuid.UUID) -> None:
    category = get_category(db, category_id)
    # 삭제된 상품까지 포함해서 참조 여부 확인
    in_use = db.scalar(select(func.count()).select_from(Product).where(Product.category_id == category_id)) or 0
    if in_use:
        raise conflict("CATEGORY_IN_USE", "Category still has products")
    db.delete(category)
    db.flush()
