"""

audit_log.py

관리자(Admin) 행위 기록(Audit Log) 모델 정의 파일.

이 파일은 관리자에 의해 수행된 주요 관리 행위
(액세스 코드 일괄 발급 등)를
DB에 영구적으로 기록하기 위한 로그 테이블을 정의한다.

운영 중 발생할 수 있는 문제 추적,
권한 오남용 방지, 감사(Audit) 목적을 위한 모델이다.

설계 원칙:
- 실제 데이터 변경과 로그 기록을 분리
- 로그 데이터는 수정/삭제하지 않는 것을 전제로 설계
- 변경 전/후 상태는 JSON 스냅샷으로 보관 (개별 코드 값은 남기지 않음)

"""

import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from storefront.core.clock import utc_now
from storefront.db.base import Base, JSONType


#  관리자 행위 유형 Enum

class AuditAction(str, Enum):
    GENERATE_ACCESS_CODES = "GENERATE_ACCESS_CODES"


"""
관리자 행위 로그 모델

- admin_id      : 행위를 수행한 관리자 ID
- action        : 수행된 관리자 행위 유형
- resource_type : 대상 리소스 종류 (예: access_code)
- resource_id   : 대상 리소스 ID (일괄 작업이면 없음)
- old_value     : 변경 전 스냅샷
- new_value     : 변경 후 스냅샷
- created_at    : 행위 발생 시각 (UTC)

"""

class AuditLog(Base):
    __tablename__ = "audit_logs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    admin_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)

    action: Mapped[str] = mapped_column(String(100), nullable=False)
    resource_type: Mapped[str] = mapped_column(String(100), nullable=False)
    resource_id: Mapped[str | None] = mapped_column(String(255), nullable=True)

    old_value: Mapped[dict | None] = mapped_column(JSONType, nullable=True)
    new_value: Mapped[dict | None] = mapped_column(JSONType, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now, nullable=False)
