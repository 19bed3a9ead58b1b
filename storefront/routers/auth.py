"""
auth.py

인증(Authentication) 및 계정 활성화 API 모음.

이 파일은 회원 가입, 액세스 코드 활성화, 로그인, 토큰 재발급,
로그아웃, 내 정보 조회와 같이 사용자 인증 흐름 전반을 담당한다.
JWT 기반 인증 방식을 사용하며, Access Token + Refresh Token 구조를 따른다.

주요 기능:
- 회원 가입 (비활성 user 로 생성)
- 전화번호 / 비밀번호 / 액세스 코드로 계정 활성화
- 로그인 및 토큰 발급
- Refresh Token 기반 토큰 재발급
- 로그아웃 (세션 기록 삭제)
- 내 정보 조회

설계 원칙:
- Access Token / Refresh Token 모두 응답 바디로 전달 (모바일 앱 / 관리자 대시보드 공용)
- 보호 API는 Authorization: Bearer <accessToken> 헤더로 인증
- 실제 검증 / 상태 변경은 services.auth 에 위임하고,
  이 라우터는 트랜잭션(unit_of_work)과 응답 형태만 담당

관련 파일:
- storefront.services.auth      : 인증 비즈니스 로직
- storefront.core.deps          : 인증 의존성(get_current_user)
- storefront.schemas.auth       : 인증 관련 요청/응답

"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.core.deps import get_bearer_token, get_current_user, get_db
from storefront.core.errors import conflict
from storefront.db.session import unit_of_work
from storefront.models.user import User
from storefront.schemas.auth import (
    ActivateRequest,
    LoginRequest,
    LogoutRequest,
    ProfileResponse,
    RefreshTokenRequest,
    SignupRequest,
    SignupResponse,
    TokenPair,
    UserResponse,
)
from storefront.services import auth as auth_service

router = APIRouter(prefix="/api/auth", tags=["auth"])


"""
회원 가입 API

- 비밀번호 / 비밀번호 확인 불일치 시 VALIDATION_ERROR
- 이미 가입된 전화번호면 USER_ALREADY_EXISTS
- 가입 직후 계정은 비활성(active=false), 권한은 user

"""

@router.post("/signup", status_code=status.HTTP_201_CREATED)
def signup(data: SignupRequest, db: Session = Depends(get_db)):
    try:
        with unit_of_work(db):
            user = auth_service.signup(
                db,
                name=data.name,
                phone=data.phone,
                password=data.password,
                confirm_password=data.confirm_password,
            )
    except IntegrityError:
        # 동시에 같은 번호로 가입한 경우 유니크 제약에서 걸림
        raise conflict("USER_ALREADY_EXISTS", "User with this phone number already exists")

    db.refresh(user)
    return {
        "success": True,
        "message": "User registered successfully. Please activate your account with an access code.",
        "data": SignupResponse.model_validate(user).dump(),
    }


"""
계정 활성화 API

- 전화번호 / 비밀번호로 본인 확인 후 액세스 코드 사용
- 성공하면 계정 활성화 + 코드에 지정된 권한 부여

"""

@router.post("/activate")
def activate(data: ActivateRequest, db: Session = Depends(get_db)):
    with unit_of_work(db):
        user, _ = auth_service.activate_with_credentials(
            db,
            phone=data.phone,
            password=data.password,
            access_code=data.access_code,
        )

    db.refresh(user)
    return {
        "success": True,
        "message": "Account activated successfully",
        "data": UserResponse.model_validate(user).dump(),
    }


@router.post("/login")
def login(data: LoginRequest, db: Session = Depends(get_db)):
    with unit_of_work(db):
        user, tokens = auth_service.login(db, phone=data.phone, password=data.password)

    db.refresh(user)
    return {
        "success": True,
        "data": {
            "user": UserResponse.model_validate(user).dump(),
            **TokenPair(**tokens).dump(),
        },
    }


@router.post("/refresh-token")
def refresh_token(data: RefreshTokenRequest, db: Session = Depends(get_db)):
    with unit_of_work(db):
        tokens = auth_service.refresh_token(db, token=data.refresh_token)

    return {
        "success": True,
        "data": TokenPair(**tokens).dump(),
    }


"""
로그아웃 API

- 바디에 refreshToken 이 있으면 그 토큰의 세션 기록을 삭제
- 없으면 Authorization 헤더의 토큰 값으로 삭제 시도
- 일치하는 기록이 없어도 항상 성공 (여러 번 호출해도 동일)

"""

@router.post("/logout")
def logout(
    data: LogoutRequest | None = None,
    token: str = Depends(get_bearer_token),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    target = (data.refresh_token if data else None) or token
    with unit_of_work(db):
        auth_service.logout(db, user_id=user.id, token=target)

    return {
        "success": True,
        "message": "Logged out successfully",
    }


@router.get("/me")
def me(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user = auth_service.get_me(db, user_id=current_user.id)
    return {
        "success": True,
        "data": ProfileResponse.model_validate(user).dump(),
    }
