"""
security.py

비밀번호 해싱 및 JWT 토큰 생성/검증을 담당하는 보안 유틸리티 모음.

이 파일은 인증(auth) 로직에서 사용하는
저수준(low-level) 보안 기능만을 제공하며,
라우터나 비즈니스 로직, 세션 저장은 포함하지 않는다.

주요 기능:
- 비밀번호 해싱 및 검증 (bcrypt, cost는 설정값)
- JWT Access Token 생성
- JWT Refresh Token 생성
- Access / Refresh Token 디코딩 및 검증

설계 원칙:
- Access Token과 Refresh Token을 type 클레임으로 명확히 분리
- 두 토큰 모두 같은 payload(sub, phone, role)를 가짐
- jti(랜덤 값)를 넣어 같은 초에 발급된 토큰도 서로 다르게 만듦
- 시간 기반(exp) 만료는 UTC 기준으로 처리

관련 파일:
- storefront.core.config        : JWT 시크릿 키 및 만료 설정
- storefront.core.deps          : Access Token을 실제로 검증하는 인증 의존성
- storefront.services.tokens    : 토큰 쌍 발급 + 세션 기록

"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Literal, Optional

from jose import jwt, JWTError
from passlib.context import CryptContext

from storefront.core.config import settings


# bcrypt 기반 비밀번호 해싱 컨텍스트
# 해시마다 salt가 포함되며, rounds는 설정값으로 조절
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)

TokenType = Literal["access", "refresh"]


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


"""
JWT 토큰 생성 내부 공통 함수

- sub   : 사용자 식별자(user_id)
- phone : 사용자 전화번호
- role  : 발급 시점의 권한
- type  : access 또는 refresh
- jti   : 토큰마다 다른 랜덤 식별자
- exp   : 만료 시각 (UTC timestamp)

"""

def _create_token(*, subject: str, phone: str, role: str, token_type: TokenType,
                  expires_delta: timedelta, secret: str) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": subject,
        "phone": phone,
        "role": role,
        "type": token_type,
        "jti": uuid.uuid4().hex,
        "iat": int(now.timestamp()),
        "exp": int((now + expires_delta).timestamp()),
    }
    return jwt.encode(payload, secret, algorithm=settings.ALGORITHM)


def create_access_token(subject: str, phone: str, role: str,
                        expires_delta: Optional[timedelta] = None) -> str:
    return _create_token(
        subject=subject,
        phone=phone,
        role=role,
        token_type="access",
        expires_delta=expires_delta or timedelta(seconds=settings.ACCESS_TOKEN_EXPIRE_SECONDS),
        secret=settings.SECRET_KEY,
    )


def create_refresh_token(subject: str, phone: str, role: str,
                         expires_delta: Optional[timedelta] = None) -> str:
    return _create_token(
        subject=subject,
        phone=phone,
        role=role,
        token_type="refresh",
        expires_delta=expires_delta or timedelta(seconds=settings.REFRESH_TOKEN_EXPIRE_SECONDS),
        secret=settings.refresh_secret,
    )


"""
토큰 디코딩 및 검증 함수

- 서명 / 만료 검증
- 토큰 타입(access / refresh) 확인
- sub 클레임 존재 확인
- 유효하지 않을 경우 JWTError 발생

"""

def _decode(token: str, *, secret: str, expected_type: TokenType) -> dict:
    payload = jwt.decode(token, secret, algorithms=[settings.ALGORITHM])
    if payload.get("type") != expected_type:
        raise JWTError(f"Not an {expected_type} token")
    if not payload.get("sub"):
        raise JWTError("Missing subject")
    return payload


def decode_access_token(token: str) -> dict:
    return _decode(token, secret=settings.SECRET_KEY, expected_type="access")


def decode_refresh_token(token: str) -> dict:
    return _decode(token, secret=settings.refresh_secret, expected_type="refresh")
