"""
services/access_codes.py

액세스 코드 발급 / 조회 비즈니스 로직.

주요 기능:
- 관리자가 지정한 권한 / 유효 기간 / 사용 한도로 코드를 일괄 발급
- 발급 1회(배치)당 감사 로그 1건 기록 (개별 코드 값은 남기지 않음)
- 최신순 페이지 조회

설계 원칙:
- 코드는 [A-Z0-9] 에서 균등하게 뽑은 8자리 (secrets 사용)
- 같은 배치 안에서, 그리고 이미 저장된 코드와 겹치면 다시 뽑음
- 커밋은 호출 측(unit_of_work)에서 수행

관련 파일:
- storefront.routers.access_codes : 관리자 액세스 코드 API
- storefront.services.audit_log   : 감사 로그 기록

"""

import logging
import secrets
import string
import uuid
from datetime import timedelta

from sqlalchemy import desc, func, select
from sqlalchemy.orm import Session

from storefront.core.clock import utc_now
from storefront.models.access_code import CODE_LENGTH, AccessCode
from storefront.models.audit_log import AuditAction
from storefront.models.user import Role
from storefront.services.audit_log import write_audit_log

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits


def random_code(length: int = CODE_LENGTH) -> str:
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


def _fresh_codes(db: Session, count: int) -> list[str]:
    codes: set[str] = set()
    while len(codes) < count:
        candidates = {random_code() for _ in range(count - len(codes))} - codes
        taken = set(db.scalars(select(AccessCode.code).where(AccessCode.code.in_(candidates))).all())
        if taken:
            logger.info("Regenerating %d access code(s) that already exist", len(taken))
        codes |= candidates - taken
    return sorted(codes)


def generate_codes(
    db: Session,
    *,
    admin_id: uuid.UUID,
    role: Role,
    valid_days: int,
    uses_allowed: int,
    count: int = 1,
    note: str | None = None,
) -> list[AccessCode]:
    valid_from = utc_now()
    valid_until = valid_from + timedelta(days=valid_days)

    codes = [
        AccessCode(
            code=value,
            role=role,
            valid_from=valid_from,
            valid_until=valid_until,
            uses_allowed=uses_allowed,
            uses_count=0,
            is_used=False,
            issued_by=admin_id,
            note=note or f"{role.value} access code",
        )
        for value in _fresh_codes(db, count)
    ]
    db.add_all(codes)
    db.flush()

    write_audit_log(
        db,
        admin_id=admin_id,
        action=AuditAction.GENERATE_ACCESS_CODES,
        resource_type="access_code",
        old_value=None,
        new_value={
            "count": len(codes),
            "role": role.value,
            "validDays": valid_days,
            "usesAllowed": uses_allowed,
        },
    )

    logger.info("Admin %s generated %d %s access code(s)", admin_id, len(codes), role.value)
    return codes


def list_codes(db: Session, *, page: int = 1, limit: int = 50) -> tuple[list[AccessCode], int]:
    total = db.scalar(select(func.count()).select_from(AccessCode)) or 0
    rows = db.scalars(
        select(AccessCode)
        .order_by(desc(AccessCode.created_at), desc(AccessCode.id))
        .offset((page - 1) * limit)
        .limit(limit)
    ).all()
    return list(rows), total
