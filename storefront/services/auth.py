"""
services/auth.py

인증 / 계정 활성화 비즈니스 로직.

라우터는 이 파일의 함수를 unit_of_work 안에서 호출하고,
여기서는 검증 / 상태 변경 / 토큰 발급만 담당한다.
HTTP / FastAPI 의존성은 없으며, 실패는 모두 AppError로 알린다.

주요 기능:
- 회원 가입 (비활성 user 로 생성)
- 전화번호 + 비밀번호 + 액세스 코드로 계정 활성화
- 로그인 (토큰 쌍 발급)
- refresh token 으로 토큰 재발급
- 로그아웃 (세션 기록 삭제, 멱등)
- 내 정보 조회

설계 원칙:
- 존재하지 않는 전화번호와 틀린 비밀번호는 같은 에러(INVALID_CREDENTIALS)로 응답
- 액세스 코드 사용 횟수 증가는 "uses_count < uses_allowed" 조건부 단일 UPDATE로 수행해
  동시에 여러 요청이 같은 코드를 써도 한도를 넘지 않음
- 사용자 활성화도 "active = false" 조건부 UPDATE로 한 번만 일어나도록 보장
- 두 UPDATE는 같은 트랜잭션에서 커밋되며, 하나라도 실패하면 모두 롤백

관련 파일:
- storefront.routers.auth       : 인증 API
- storefront.services.tokens    : 토큰 쌍 발급 / 세션 기록
- storefront.models.access_code : AccessCode 모델

"""

import logging
import uuid

from jose import JWTError
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from storefront.core.clock import as_utc, utc_now
from storefront.core.errors import AppError, bad_request, conflict, unauthorized
from storefront.core.security import decode_refresh_token, get_password_hash, pwd_context, verify_password
from storefront.models.access_code import AccessCode
from storefront.models.user import Role, User
from storefront.services.tokens import issue_token_pair, revoke_session

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid phone number or password"


def _invalid_credentials() -> AppError:
    return unauthorized("INVALID_CREDENTIALS", INVALID_CREDENTIALS_MESSAGE)


"""
전화번호 / 비밀번호 확인

- 사용자가 없을 때도 더미 해시 검증을 수행해 응답 시간 차이를 줄임
- 어느 쪽이 틀렸는지 구분하지 않음

"""

def authenticate(db: Session, *, phone: str, password: str) -> User:
    user = db.scalar(select(User).where(User.phone == phone))
    if not user:
        pwd_context.dummy_verify()
        logger.warning("Credential check failed: unknown phone")
        raise _invalid_credentials()

    if not verify_password(password, user.password_hash):
        logger.warning("Credential check failed for user %s", user.id)
        raise _invalid_credentials()

    return user


def signup(db: Session, *, name: str, phone: str, password: str, confirm_password: str) -> User:
    if password != confirm_password:
        raise bad_request("VALIDATION_ERROR", "Passwords do not match")

    existing = db.scalar(select(User).where(User.phone == phone))
    if existing:
        raise conflict("USER_ALREADY_EXISTS", "User with this phone number already exists")

    # 가입 시 입력값과 관계없이 항상 비활성 user
    user = User(
        name=name,
        phone=phone,
        password_hash=get_password_hash(password),
        role=Role.USER,
        active=False,
    )
    db.add(user)
    db.flush()

    logger.info("User %s signed up", user.id)
    return user


"""
액세스 코드로 계정 활성화

검사 순서:
1) 전화번호 / 비밀번호             -> INVALID_CREDENTIALS
2) 이미 활성화된 계정               -> ALREADY_ACTIVATED
3) 코드 존재 여부 (대문자로 변환)   -> INVALID_ACCESS_CODE
4) 유효 기간 [valid_from, valid_until] -> EXPIRED_CODE
5) 사용 한도                        -> CODE_USAGE_LIMIT_REACHED

성공 시:
- 코드 uses_count + 1, 한도에 도달하면 is_used = True
- 사용자 active = True, role = 코드의 role

"""

def activate_with_credentials(db: Session, *, phone: str, password: str, access_code: str) -> tuple[User, AccessCode]:
    user = authenticate(db, phone=phone, password=password)

    if user.active:
        raise bad_request("ALREADY_ACTIVATED", "Account is already activated")

    code = db.scalar(select(AccessCode).where(AccessCode.code == access_code.upper()))
    if not code:
        logger.warning("Activation failed for user %s: unknown access code", user.id)
        raise bad_request("INVALID_ACCESS_CODE", "Invalid access code")

    now = utc_now()
    if now < as_utc(code.valid_from) or now > as_utc(code.valid_until):
        logger.warning("Activation failed for user %s: code %s outside validity window", user.id, code.id)
        raise bad_request("EXPIRED_CODE", "Access code has expired")

    if code.uses_count >= code.uses_allowed:
        raise _usage_limit_reached(user, code)

    redeemed = db.execute(
        update(AccessCode)
        .where(AccessCode.id == code.id, AccessCode.uses_count < AccessCode.uses_allowed)
        .values(
            uses_count=AccessCode.uses_count + 1,
            is_used=AccessCode.uses_count + 1 >= AccessCode.uses_allowed,
        )
        .execution_options(synchronize_session=False)
    )
    # 다른 요청이 먼저 마지막 사용 횟수를 가져간 경우
    if redeemed.rowcount != 1:
        raise _usage_limit_reached(user, code)

    promoted = db.execute(
        update(User)
        .where(User.id == user.id, User.active.is_(False))
        .values(active=True, role=code.role)
        .execution_options(synchronize_session=False)
    )
    if promoted.rowcount != 1:
        raise bad_request("ALREADY_ACTIVATED", "Account is already activated")

    logger.info("User %s activated with code %s as %s", user.id, code.id, code.role.value)
    return user, code


def _usage_limit_reached(user: User, code: AccessCode) -> AppError:
    logger.warning("Activation failed for user %s: code %s usage limit reached", user.id, code.id)
    return bad_request("CODE_USAGE_LIMIT_REACHED", "Access code usage limit reached")


def login(db: Session, *, phone: str, password: str) -> tuple[User, dict]:
    user = authenticate(db, phone=phone, password=password)

    if not user.active:
        raise unauthorized("ACCOUNT_NOT_ACTIVATED", "Please activate your account with an access code")

    tokens = issue_token_pair(db, user)
    logger.info("User %s logged in", user.id)
    return user, tokens


"""
refresh token 으로 토큰 재발급

- 서명 / 만료 / 토큰 타입 중 하나라도 실패하면 INVALID_TOKEN
- 토큰의 사용자가 없거나 비활성이면 INVALID_TOKEN
- 기존 refresh token 은 별도로 무효화하지 않음 (만료 시각까지 재사용 가능)

"""

def refresh_token(db: Session, *, token: str) -> dict:
    try:
        payload = decode_refresh_token(token)
        user_id = uuid.UUID(payload["sub"])
    except (JWTError, ValueError):
        raise unauthorized("INVALID_TOKEN", "Invalid or expired refresh token")

    user = db.scalar(select(User).where(User.id == user_id))
    if not user or not user.active:
        raise unauthorized("INVALID_TOKEN", "Invalid refresh token")

    return issue_token_pair(db, user)


def logout(db: Session, *, user_id: uuid.UUID, token: str) -> None:
    removed = revoke_session(db, user_id=user_id, token=token)
    logger.info("User %s logged out (%d session row(s) removed)", user_id, removed)


def get_me(db: Session, *, user_id: uuid.UUID) -> User:
    user = db.scalar(select(User).where(User.id == user_id))
    if not user:
        raise unauthorized("USER_NOT_FOUND", "User not found")
    return user
