import logging
import uuid
from typing import Generator

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.orm import Session
from sqlalchemy import select

from storefront.core.errors import forbidden, unauthorized
from storefront.core.permissions import Permission, is_allowed
from storefront.core.security import decode_access_token
from storefront.db.session import SessionLocal
from storefront.models.user import User

logger = logging.getLogger(__name__)

# Swagger Authorize에서 "Bearer 토큰" 입력받는 스키마
bearer_scheme = HTTPBearer(auto_error=False)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_bearer_token(
    cred: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    if cred is None:
        raise unauthorized("UNAUTHORIZED", "Not authenticated")
    return cred.credentials


def get_current_user(
    token: str = Depends(get_bearer_token),
    db: Session = Depends(get_db),
) -> User:
    try:
        payload = decode_access_token(token)
        # User.id가 UUID라서 변환
        user_id = uuid.UUID(payload["sub"])
    except (JWTError, ValueError):
        raise unauthorized("INVALID_TOKEN", "Invalid or expired access token")

    user = db.scalar(select(User).where(User.id == user_id))
    if not user:
        raise unauthorized("USER_NOT_FOUND", "User not found")

    if not user.active:
        raise unauthorized("ACCOUNT_INACTIVE", "Account is not active")

    return user


# 모든 역할 기반 접근 제어가 거치는 단일 검사 지점
def require_permission(permission: Permission):
    def _checker(current_user: User = Depends(get_current_user)) -> User:
        if not is_allowed(current_user.role, permission):
            logger.warning("Denied %s for user %s (role=%s)", permission.value, current_user.id, current_user.role.value)
            raise forbidden(f"Requires permission {permission.value}")
        return current_user
    return _checker
