"""
client.py

Storefront API 클라이언트 (관리자 대시보드 / 모바일 앱 공용 세션 처리).

화면(UI)은 다루지 않고, 앱이 서버와 주고받는 인증 흐름과
로그인 상태 보관 방식만 담당한다.

주요 기능:
- 회원 가입 / 계정 활성화 / 로그인 / 토큰 재발급 / 내 정보 조회 / 로그아웃
- 로그인 상태(AuthSession)를 JSON 파일로 저장하고, 시작 시 복원

설계 원칙:
- 로그인 상태는 전역 변수가 아니라 명시적인 AuthSession 객체로 다룸
- 로그아웃은 서버 호출이 실패해도 로컬 상태는 항상 지움
- 서버의 에러 응답은 ApiError(code, message, status_code)로 변환

관련 파일:
- storefront.routers.auth       : 클라이언트가 호출하는 인증 API

"""

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class ApiError(Exception):
    def __init__(self, code: str, message: str, status_code: int):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ApiError":
        try:
            error = response.json().get("error") or {}
        except ValueError:
            error = {}
        return cls(
            code=error.get("code", "HTTP_ERROR"),
            message=error.get("message", response.text),
            status_code=response.status_code,
        )


@dataclass
class AuthSession:
    access_token: str
    refresh_token: str
    user: dict[str, Any] = field(default_factory=dict)


class SessionStorage:
    """AuthSession 을 JSON 파일 하나에 저장. 파일이 없거나 깨져 있으면 로그아웃 상태로 본다."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> AuthSession | None:
        if not self.path.exists():
            return None
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            return AuthSession(**raw)
        except (ValueError, TypeError):
            logger.warning("Ignoring unreadable session file %s", self.path)
            return None

    def save(self, session: AuthSession) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(asdict(session)), encoding="utf-8")

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


class StorefrontClient:
    def __init__(self, http: httpx.Client, storage: SessionStorage):
        self.http = http
        self.storage = storage
        self.session: AuthSession | None = storage.load()

    @property
    def is_authenticated(self) -> bool:
        return self.session is not None

    def _auth_headers(self) -> dict:
        if not self.session:
            return {}
        return {"Authorization": f"Bearer {self.session.access_token}"}

    def _request(self, method: str, path: str, **kwargs) -> dict:
        response = self.http.request(method, path, **kwargs)
        if response.is_error:
            raise ApiError.from_response(response)
        return response.json()

    def signup(self, *, name: str, phone: str, password: str, confirm_password: str) -> dict:
        body = self._request(
            "POST",
            "/api/auth/signup",
            json={"name": name, "phone": phone, "password": password, "confirmPassword": confirm_password},
        )
        return body["data"]

    def activate(self, *, phone: str, password: str, access_code: str) -> dict:
        body = self._request(
            "POST",
            "/api/auth/activate",
            json={"phone": phone, "password": password, "accessCode": access_code},
        )
        return body["data"]

    def login(self, *, phone: str, password: str) -> AuthSession:
        data = self._request("POST", "/api/auth/login", json={"phone": phone, "password": password})["data"]
        self.session = AuthSession(
            access_token=data["accessToken"],
            refresh_token=data["refreshToken"],
            user=data["user"],
        )
        self.storage.save(self.session)
        return self.session

    def refresh(self) -> AuthSession:
        if not self.session:
            raise ApiError("UNAUTHORIZED", "Not logged in", 401)

        data = self._request(
            "POST",
            "/api/auth/refresh-token",
            json={"refreshToken": self.session.refresh_token},
        )["data"]
        self.session = AuthSession(
            access_token=data["accessToken"],
            refresh_token=data["refreshToken"],
            user=self.session.user,
        )
        self.storage.save(self.session)
        return self.session

    def me(self) -> dict:
        return self._request("GET", "/api/auth/me", headers=self._auth_headers())["data"]

    def logout(self) -> None:
        if self.session:
            try:
                self._request(
                    "POST",
                    "/api/auth/logout",
                    json={"refreshToken": self.session.refresh_token},
                    headers=self._auth_headers(),
                )
            except (httpx.HTTPError, ApiError) as exc:
                logger.warning("Remote logout failed, clearing local session anyway: %s", exc)

        self.session = None
        self.storage.clear()
