"""
access_code.py

액세스 코드(AccessCode) 모델 정의 파일.

관리자가 일괄 발급하는 8자리 코드로,
비활성 사용자가 코드를 사용(redeem)하면 계정이 활성화되고
코드에 지정된 권한(role)을 부여받는다.

불변 조건:
- code 는 항상 대문자로 저장 (입력은 대소문자 구분 없음)
- uses_count <= uses_allowed
- is_used == (uses_count >= uses_allowed)
- 생성 후에는 uses_count 증가 / is_used 변경 외에는 수정하지 않음
- 삭제하지 않음

"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from storefront.core.clock import utc_now
from storefront.db.base import Base
from storefront.models.user import Role, RoleType

CODE_LENGTH = 8


class AccessCode(Base):
    __tablename__ = "access_codes"
    __table_args__ = (
        CheckConstraint("uses_count <= uses_allowed", name="ck_access_codes_uses_within_quota"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    code: Mapped[str] = mapped_column(String(CODE_LENGTH), unique=True, index=True, nullable=False)
    role: Mapped[Role] = mapped_column(RoleType, nullable=False, default=Role.USER)

    valid_from: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    valid_until: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    uses_allowed: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    uses_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_used: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    issued_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id"), nullable=True)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False
    )
