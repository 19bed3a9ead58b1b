"""
products.py

상품 API 모음 (공개 / 회원 / 관리자).

- /api/products          : 누구나 조회 가능, 좋아요 / 댓글 / 조회수는 로그인 필요
- /api/admin/products    : 관리자 전용 상품 관리 (MANAGE_PRODUCTS 권한)

비즈니스 로직은 services.catalog 에 위임하고,
이 라우터는 요청 파싱 / 권한 검사 / 트랜잭션 / 응답 형태만 담당한다.

"""

import uuid

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from storefront.core.deps import get_current_user, get_db, require_permission
from storefront.core.permissions import Permission
from storefront.db.session import unit_of_work
from storefront.models.product import Product, ProductTag
from storefront.models.user import User
from storefront.schemas.catalog import (
    PRODUCT_PER_PAGE,
    CommentCreate,
    CommentResponse,
    LikeToggleResponse,
    ProductCreate,
    ProductResponse,
    ProductSortBy,
    ProductUpdate,
    ToggleAvailabilityRequest,
    UpdateStockRequest,
)
from storefront.schemas.common import pagination
from storefront.services import catalog

router = APIRouter(prefix="/api/products", tags=["products"])
admin_router = APIRouter(prefix="/api/admin/products", tags=["admin-products"])

interact = require_permission(Permission.INTERACT_WITH_PRODUCTS)
manage = require_permission(Permission.MANAGE_PRODUCTS)


def _product_out(product: Product) -> dict:
    return ProductResponse.model_validate(product).dump()


def product_filter(
    category: uuid.UUID | None = Query(None),
    tag: ProductTag | None = Query(None),
    available: bool | None = Query(None),
    search: str | None = Query(None, min_length=1),
    min_price: float | None = Query(None, alias="minPrice", ge=0),
    max_price: float | None = Query(None, alias="maxPrice", ge=0),
    sort_by: ProductSortBy = Query(ProductSortBy.NEWEST, alias="sortBy"),
    page: int = Query(1, ge=1),
    limit: int = Query(PRODUCT_PER_PAGE, ge=1, le=100),
) -> catalog.ProductFilter:
    return catalog.ProductFilter(
        category=category,
        tag=tag.value if tag else None,
        available=available,
        search=search,
        min_price=min_price,
        max_price=max_price,
        sort_by=sort_by,
        page=page,
        limit=limit,
    )


def _listing(db: Session, flt: catalog.ProductFilter) -> dict:
    products, total = catalog.list_products(db, flt)
    return {
        "success": True,
        "data": [_product_out(p) for p in products],
        "pagination": pagination(page=flt.page, limit=flt.limit, total=total),
    }


# ==============================================================================
# 공개 / 회원 API
# ==============================================================================

@router.get("")
def list_products(
    flt: catalog.ProductFilter = Depends(product_filter),
    db: Session = Depends(get_db),
):
    return _listing(db, flt)


@router.get("/category/{category_id}")
def list_products_by_category(
    category_id: uuid.UUID,
    flt: catalog.ProductFilter = Depends(product_filter),
    db: Session = Depends(get_db),
):
    flt.category = category_id
    return _listing(db, flt)


# 상세 조회 시 조회수 1 증가
@router.get("/{product_id}")
def get_product(product_id: uuid.UUID, db: Session = Depends(get_db)):
    with unit_of_work(db):
        catalog.increment_views(db, product_id)

    product = catalog.get_product(db, product_id)
    return {"success": True, "data": _product_out(product)}


@router.post("/{product_id}/views")
def increment_views(
    product_id: uuid.UUID,
    db: Session = Depends(get_db),
    _: User = Depends(interact),
):
    with unit_of_work(db):
        catalog.increment_views(db, product_id)
    return {"success": True}


@router.post("/{product_id}/like")
def toggle_like(
    product_id: uuid.UUID,
    db: Session = Depends(get_db),
    user: User = Depends(interact),
):
    with unit_of_work(db):
        liked, likes_count = catalog.toggle_like(db, user_id=user.id, product_id=product_id)
    return {
        "success": True,
        "data": LikeToggleResponse(liked=liked, likes_count=likes_count).dump(),
    }


@router.post("/{product_id}/comments", status_code=status.HTTP_201_CREATED)
def add_comment(
    product_id: uuid.UUID,
    data: CommentCreate,
    db: Session = Depends(get_db),
    user: User = Depends(interact),
):
    with unit_of_work(db):
        comment = catalog.add_comment(db, user_id=user.id, product_id=product_id, text=data.text, rating=data.rating)

    db.refresh(comment)
    return {"success": True, "data": CommentResponse.model_validate(comment).dump()}


@router.get("/{product_id}/comments")
def list_comments(
    product_id: uuid.UUID,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    comments, total = catalog.list_comments(db, product_id, page=page, limit=limit)
    return {
        "success": True,
        "data": [CommentResponse.model_validate(c).dump() for c in comments],
        "pagination": pagination(page=page, limit=limit, total=total),
    }


@router.post("/comments/{comment_id}/flag")
def flag_comment(
    comment_id: uuid.UUID,
    db: Session = Depends(get_db),
    _: User = Depends(interact),
):
    with unit_of_work(db):
        comment = catalog.flag_comment(db, comment_id)

    db.refresh(comment)
    return {"success": True, "data": CommentResponse.model_validate(comment).dump()}


# ==============================================================================
# 관리자 API
# ==============================================================================

@admin_router.post("", status_code=status.HTTP_201_CREATED)
def create_product(
    data: ProductCreate,
    db: Session = Depends(get_db),
    _: User = Depends(manage),
):
    with unit_of_work(db):
        product = catalog.create_product(db, data.model_dump())

    db.refresh(product)
    return {"success": True, "data": _product_out(product)}


# 삭제된 상품까지 포함
@admin_router.get("")
def list_products_for_admin(
    db: Session = Depends(get_db),
    _: User = Depends(manage),
):
    products = catalog.list_products_for_admin(db)
    return {"success": True, "data": [_product_out(p) for p in products]}


@admin_router.get("/{product_id}")
def get_product_for_admin(
    product_id: uuid.UUID,
    db: Session = Depends(get_db),
    _: User = Depends(manage),
):
    product = catalog.get_product(db, product_id, include_deleted=True)
    return {"success": True, "data": _product_out(product)}


@admin_router.patch("/{product_id}")
def update_product(
    product_id: uuid.UUID,
    data: ProductUpdate,
    db: Session = Depends(get_db),
    _: User = Depends(manage),
):
    with unit_of_work(db):
        product = catalog.update_product(db, product_id, data.model_dump(exclude_unset=True))

    db.refresh(product)
    return {"success": True, "data": _product_out(product)}


@admin_router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: uuid.UUID,
    db: Session = Depends(get_db),
    _: User = Depends(manage),
):
    with unit_of_work(db):
        catalog.soft_delete_product(db, product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@admin_router.post("/{product_id}/restore")
def restore_product(
    product_id: uuid.UUID,
    db: Session = Depends(get_db),
    _: User = Depends(manage),
):
    with unit_of_work(db):
        product = catalog.restore_product(db, product_id)

    db.refresh(product)
    return {"success": True, "data": _product_out(product)}


@admin_router.patch("/{product_id}/availability")
def toggle_availability(
    product_id: uuid.UUID,
    data: ToggleAvailabilityRequest,
    db: Session = Depends(get_db),
    _: User = Depends(manage),
):
    with unit_of_work(db):
        product = catalog.set_availability(db, product_id, data.available)

    db.refresh(product)
    return {"success": True, "data": _product_out(product)}


@admin_router.patch("/{product_id}/stock")
def update_stock(
    product_id: uuid.UUID,
    data: UpdateStockRequest,
    db: Session = Depends(get_db),
    _: User = Depends(manage),
):
    with unit_of_work(db):
        product = catalog.set_stock(db, product_id, data.stock_count)

    db.refresh(product)
    return {"success": True, "data": _product_out(product)}
