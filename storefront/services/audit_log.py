"""
services/audit_log.py

관리자 행위 로그 기록 / 조회 서비스.

이 파일은 관리자(Admin)가 수행한 주요 행위를
AuditLog 테이블에 기록하고, 최근 로그를 조회하는 역할을 담당한다.

설계 원칙:
- 로그 기록은 실제 변경과 같은 트랜잭션 안에서 add 만 수행
- 로그 데이터는 수정/삭제하지 않는 것을 전제로 설계

"""

import uuid

from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from storefront.models.audit_log import AuditAction, AuditLog


"""
관리자 행위 로그 기록 함수

- admin_id      : 행위를 수행한 관리자 ID
- action        : 수행된 관리자 행위 유형
- resource_type : 대상 리소스 종류
- resource_id   : 대상 리소스 ID (선택)
- old_value     : 변경 전 스냅샷 (선택)
- new_value     : 변경 후 스냅샷 (선택)

NOTE:
- db.commit()은 호출 측(unit_of_work)에서 수행

"""
def write_audit_log(
    db: Session,
    *,
    admin_id: uuid.UUID,
    action: AuditAction,
    resource_type: str,
    resource_id: str | None = None,
    old_value: dict | None = None,
    new_value: dict | None = None,
) -> AuditLog:
    log = AuditLog(
        admin_id=admin_id,
        action=action.value,
        resource_type=resource_type,
        resource_id=resource_id,
        old_value=old_value,
        new_value=new_value,
    )
    db.add(log)
    return log


AUDIT_LOG_MAX_LIMIT = 200


# 조회 개수는 1 ~ AUDIT_LOG_MAX_LIMIT 로 보정하고, 실제 적용된 limit 도 함께 반환
def list_audit_logs(db: Session, *, limit: int = 50) -> tuple[list[AuditLog], int]:
    limit = max(1, min(limit, AUDIT_LOG_MAX_LIMIT))
    logs = db.scalars(select(AuditLog).order_by(desc(AuditLog.created_at)).limit(limit)).all()
    return list(logs), limit
