"""
user.py

사용자(User) 및 권한(Role) 모델 정의 파일.

이 파일은 쇼핑몰 사용자의 기본 정보(이름, 전화번호)와
권한(Role), 활성화 여부(active), 부가 프로필 정보를 관리한다.

모든 인증, 권한, 상품 관리 기능의 기준이 되는 핵심 모델이다.

상태 전이:
- 회원가입 직후        : active=False, role=user
- 액세스 코드로 활성화 : active=True, role=코드가 부여하는 권한 (단 한 번)
- active=True 에서 다시 비활성으로 돌아가는 흐름은 없음

"""

import uuid
import datetime
from enum import Enum

from sqlalchemy import String, Boolean, DateTime, JSON, Uuid, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from storefront.core.clock import utc_now
from storefront.db.base import Base


"""
사용자 권한(Role) 정의

- SUPER_ADMIN : 최고 관리자
- ADMIN       : 관리자 (상품 / 액세스 코드 관리)
- USER        : 일반 사용자

"""

class Role(str, Enum):
    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    USER = "user"


# DB에는 소문자 값("super_admin" 등)을 그대로 저장
RoleType = SAEnum(
    Role,
    name="user_role",
    values_callable=lambda enum: [member.value for member in enum],
)


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(20), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    role: Mapped[Role] = mapped_column(RoleType, nullable=False, default=Role.USER)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    salary_range: Mapped[str | None] = mapped_column(String(100), nullable=True)
    interested_categories: Mapped[list | None] = mapped_column(JSON, nullable=True)

    created_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False
    )
