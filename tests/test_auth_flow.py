"""

인증 기본 플로우 통합 테스트.
- 회원가입(비활성 user) → 활성화 전 로그인 차단 → 액세스 코드로 활성화 → 로그인 → 내 정보,
  전화번호 / 비밀번호 오류 응답 동일성, 중복 가입, 입력값 검증까지 확인한다.

"""

from storefront.models.user import Role
from tests.helpers import (
    DEFAULT_PASSWORD,
    auth_header,
    create_code_in_db,
    create_user_in_db,
    get_code,
    get_user,
    login,
    unique_phone,
)


def _signup(client, phone: str, password: str = DEFAULT_PASSWORD, confirm: str | None = None):
    return client.post(
        "/api/auth/signup",
        json={
            "name": "테스트유저",
            "phone": phone,
            "password": password,
            "confirmPassword": confirm if confirm is not None else password,
        },
    )


def test_signup_activate_login_me_flow(client, db_session):
    phone = unique_phone()

    reg = _signup(client, phone)
    assert reg.status_code == 201, reg.text
    body = reg.json()
    assert body["success"] is True
    assert body["data"]["phone"] == phone
    assert body["data"]["active"] is False
    user_id = body["data"]["id"]

    # 활성화 전 로그인 차단
    pending = client.post("/api/auth/login", json={"phone": phone, "password": DEFAULT_PASSWORD})
    assert pending.status_code == 401
    assert pending.json()["error"]["code"] == "ACCOUNT_NOT_ACTIVATED"

    create_code_in_db(db_session, code="ABCD1234", role=Role.USER)

    # 소문자로 입력해도 대문자로 변환되어 매칭
    act = client.post(
        "/api/auth/activate",
        json={"phone": phone, "password": DEFAULT_PASSWORD, "accessCode": "abcd1234"},
    )
    assert act.status_code == 200, act.text
    assert act.json()["data"]["active"] is True
    assert act.json()["data"]["role"] == "user"

    user = get_user(db_session, user_id)
    assert user.active is True
    code = get_code(db_session, "ABCD1234")
    assert code.uses_count == 1
    assert code.is_used is True

    data = login(client, phone)
    assert data["accessToken"]
    assert data["refreshToken"]
    assert data["expiresIn"] == 900
    assert data["user"]["id"] == user_id

    me = client.get("/api/auth/me", headers=auth_header(data["accessToken"]))
    assert me.status_code == 200, me.text
    profile = me.json()["data"]
    assert profile["phone"] == phone
    assert profile["role"] == "user"
    assert "passwordHash" not in profile


def test_unknown_phone_and_wrong_password_look_identical(client, db_session):
    user = create_user_in_db(db_session)

    wrong_password = client.post("/api/auth/login", json={"phone": user.phone, "password": "nope-nope"})
    unknown_phone = client.post("/api/auth/login", json={"phone": unique_phone(), "password": DEFAULT_PASSWORD})

    assert wrong_password.status_code == unknown_phone.status_code == 401
    assert wrong_password.json()["error"] == unknown_phone.json()["error"]
    assert wrong_password.json()["error"]["code"] == "INVALID_CREDENTIALS"


def test_signup_password_mismatch(client):
    r = _signup(client, unique_phone(), password="secret1", confirm="secret2")
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "VALIDATION_ERROR"


def test_signup_duplicate_phone(client):
    phone = unique_phone()
    assert _signup(client, phone).status_code == 201

    again = _signup(client, phone)
    assert again.status_code == 409
    assert again.json()["error"]["code"] == "USER_ALREADY_EXISTS"


def test_signup_rejects_malformed_phone(client):
    r = _signup(client, "0501234567")
    assert r.status_code == 400
    body = r.json()
    assert body["error"]["code"] == "VALIDATION_ERROR"
    assert body["error"]["details"]


def test_me_requires_token(client):
    r = client.get("/api/auth/me")
    assert r.status_code == 401
    assert r.json()["error"]["code"] == "UNAUTHORIZED"

    bad = client.get("/api/auth/me", headers=auth_header("not-a-jwt"))
    assert bad.status_code == 401
    assert bad.json()["error"]["code"] == "INVALID_TOKEN"


def test_inactive_user_token_is_rejected(client, db_session):
    user = create_user_in_db(db_session)
    token = login(client, user.phone)["accessToken"]

    user.active = False
    db_session.commit()

    r = client.get("/api/auth/me", headers=auth_header(token))
    assert r.status_code == 401
    assert r.json()["error"]["code"] == "ACCOUNT_INACTIVE"
