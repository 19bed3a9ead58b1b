"""
services/tokens.py

토큰 발급기(Token Issuer).

로그인 / 토큰 재발급 시 access + refresh 토큰 쌍을 만들고,
refresh 토큰 값과 만료 시각을 sessions 테이블에 기록한다.

sessions 기록은 로그아웃 시 "정확히 같은 토큰"을 지우기 위한 장부일 뿐이며,
토큰 유효성은 항상 서명과 만료 시각만으로 판단한다.

"""

from datetime import timedelta

from sqlalchemy import delete
from sqlalchemy.orm import Session

from storefront.core.clock import utc_now
from storefront.core.config import settings
from storefront.core.security import create_access_token, create_refresh_token
from storefront.models.session import UserSession
from storefront.models.user import User


def issue_token_pair(db: Session, user: User) -> dict:
    claims = {"subject": str(user.id), "phone": user.phone, "role": user.role.value}
    access = create_access_token(**claims)
    refresh = create_refresh_token(**claims)

    db.add(
        UserSession(
            user_id=user.id,
            token=refresh,
            expires_at=utc_now() + timedelta(seconds=settings.REFRESH_TOKEN_EXPIRE_SECONDS),
        )
    )

    return {
        "access_token": access,
        "refresh_token": refresh,
        "expires_in": settings.ACCESS_TOKEN_EXPIRE_SECONDS,
    }


def revoke_session(db: Session, *, user_id, token: str) -> int:
    # 일치하는 행이 없어도 에러 없이 0 반환
    result = db.execute(
        delete(UserSession).where(UserSession.user_id == user_id, UserSession.token == token)
    )
    return result.rowcount or 0
