"""
access_codes.py

관리자 전용 액세스 코드 API.

주요 기능:
- 액세스 코드 일괄 발급 (권한 / 유효 기간 / 사용 한도 / 개수 지정)
- 발급된 코드 최신순 페이지 조회

설계 원칙:
- 모든 엔드포인트는 POLICY 테이블의 권한 검사(require_permission)를 거침
- 발급과 감사 로그 기록은 하나의 트랜잭션으로 커밋

관련 파일:
- storefront.services.access_codes : 코드 생성 / 조회 로직
- storefront.core.permissions      : 권한 정책 테이블

"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from storefront.core.deps import get_db, require_permission
from storefront.core.permissions import Permission
from storefront.db.session import unit_of_work
from storefront.models.user import User
from storefront.schemas.access_code import AccessCodeResponse, GenerateCodesRequest, GeneratedCode
from storefront.schemas.common import pagination
from storefront.services import access_codes as access_code_service

router = APIRouter(prefix="/api/admin/access-codes", tags=["admin-access-codes"])


@router.post("/generate", status_code=status.HTTP_201_CREATED)
def generate_codes(
    data: GenerateCodesRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(require_permission(Permission.GENERATE_ACCESS_CODES)),
):
    with unit_of_work(db):
        codes = access_code_service.generate_codes(
            db,
            admin_id=admin.id,
            role=data.role,
            valid_days=data.valid_days,
            uses_allowed=data.uses_allowed,
            count=data.count,
            note=data.note,
        )
        # 커밋 전에 응답용 값을 확정 (커밋 후에는 객체가 만료됨)
        payload = [GeneratedCode.model_validate(c).dump() for c in codes]

    return {
        "success": True,
        "message": f"Generated {len(payload)} access code(s)",
        "data": payload,
    }


@router.get("")
def list_codes(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    db: Session = Depends(get_db),
    _: User = Depends(require_permission(Permission.LIST_ACCESS_CODES)),
):
    codes, total = access_code_service.list_codes(db, page=page, limit=limit)
    return {
        "success": True,
        "data": [AccessCodeResponse.model_validate(c).dump() for c in codes],
        "pagination": pagination(page=page, limit=limit, total=total),
    }
