import uuid

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from storefront.core.deps import get_db, require_permission
from storefront.core.permissions import Permission
from storefront.db.session import unit_of_work
from storefront.models.user import User
from storefront.schemas.catalog import CategoryCreate, CategoryResponse, CategoryUpdate
from storefront.services import categories as category_service

router = APIRouter(prefix="/api/categories", tags=["categories"])
admin_router = APIRouter(prefix="/api/admin/categories", tags=["admin-categories"])

manage = require_permission(Permission.MANAGE_CATEGORIES)


@router.get("")
def list_categories(db: Session = Depends(get_db)):
    categories = category_service.list_categories(db)
    return {"success": True, "data": [CategoryResponse.model_validate(c).dump() for c in categories]}


# 상세 조회 시 (삭제되지 않은) 상품 수 포함
@router.get("/{category_id}")
def get_category(category_id: uuid.UUID, db: Session = Depends(get_db)):
    category = category_service.get_category(db, category_id)
    return {
        "success": True,
        "data": {
            **CategoryResponse.model_validate(category).dump(),
            "productCount": category_service.count_products(db, category_id),
        },
    }


@admin_router.post("", status_code=status.HTTP_201_CREATED)
def create_category(
    data: CategoryCreate,
    db: Session = Depends(get_db),
    _: User = Depends(manage),
):
    with unit_of_work(db):
        category = category_service.create_category(
            db, name_en=data.name_en, name_ar=data.name_ar, parent_id=data.parent_id
        )

    db.refresh(category)
    return {"success": True, "data": CategoryResponse.model_validate(category).dump()}


@admin_router.patch("/{category_id}")
def update_category(
    category_id: uuid.UUID,
    data: CategoryUpdate,
    db: Session = Depends(get_db),
    _: User = Depends(manage),
):
    with unit_of_work(db):
        category = category_service.update_category(db, category_id, data.model_dump(exclude_unset=True))

    db.refresh(category)
    return {"success": True, "data": CategoryResponse.model_validate(category).dump()}


@admin_router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: uuid.UUID,
    db: Session = Depends(get_db),
    _: User = Depends(manage),
):
    with unit_of_work(db):
        category_service.delete_category(db, category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
