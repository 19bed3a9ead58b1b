"""

액세스 코드 활성화 규칙 테스트.
- 검사 순서(자격 증명 → 이미 활성화 → 코드 존재 → 유효 기간 → 사용 한도)
- 실패한 활성화는 코드 사용 횟수를 바꾸지 않음
- 다회용 코드와 관리자 코드
- 동시에 들어온 요청: 조건부 UPDATE 결과가 최종 판단

"""

from datetime import timedelta

import pytest

from storefront.core.clock import utc_now
from storefront.core.errors import AppError
from storefront.db.session import unit_of_work
from storefront.models.access_code import AccessCode
from storefront.models.user import Role, User
from storefront.services.auth import activate_with_credentials
from tests.helpers import (
    DEFAULT_PASSWORD,
    auth_header,
    create_code_in_db,
    create_user_in_db,
    get_code,
    get_user,
    login,
)


def _activate(client, phone: str, code: str, password: str = DEFAULT_PASSWORD):
    return client.post(
        "/api/auth/activate",
        json={"phone": phone, "password": password, "accessCode": code},
    )


def test_wrong_password_checked_before_code(client, db_session):
    user = create_user_in_db(db_session, active=False)

    r = _activate(client, user.phone, "NOPE0000", password="wrong-password")
    assert r.status_code == 401
    assert r.json()["error"]["code"] == "INVALID_CREDENTIALS"


def test_already_activated(client, db_session):
    user = create_user_in_db(db_session, active=True)
    create_code_in_db(db_session, code="ACTIVE01")

    r = _activate(client, user.phone, "ACTIVE01")
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "ALREADY_ACTIVATED"
    assert get_code(db_session, "ACTIVE01").uses_count == 0


def test_unknown_code(client, db_session):
    user = create_user_in_db(db_session, active=False)

    r = _activate(client, user.phone, "ZZZZ9999")
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "INVALID_ACCESS_CODE"


def test_expired_code_leaves_usage_unchanged(client, db_session):
    user = create_user_in_db(db_session, active=False)
    now = utc_now()
    create_code_in_db(
        db_session,
        code="EXPIRED1",
        valid_from=now - timedelta(days=31),
        valid_until=now - timedelta(days=1),
    )

    r = _activate(client, user.phone, "EXPIRED1")
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "EXPIRED_CODE"

    assert get_code(db_session, "EXPIRED1").uses_count == 0
    assert get_user(db_session, user.id).active is False


def test_not_yet_valid_code_is_expired(client, db_session):
    user = create_user_in_db(db_session, active=False)
    now = utc_now()
    create_code_in_db(
        db_session,
        code="FUTURE01",
        valid_from=now + timedelta(days=1),
        valid_until=now + timedelta(days=10),
    )

    r = _activate(client, user.phone, "FUTURE01")
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "EXPIRED_CODE"


def test_usage_limit_reached(client, db_session):
    user = create_user_in_db(db_session, active=False)
    create_code_in_db(db_session, code="USEDUP01", uses_allowed=1, uses_count=1)

    r = _activate(client, user.phone, "USEDUP01")
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "CODE_USAGE_LIMIT_REACHED"
    assert get_user(db_session, user.id).active is False


def test_multi_use_code_counts_each_activation(client, db_session):
    create_code_in_db(db_session, code="MULTI005", uses_allowed=2)
    first = create_user_in_db(db_session, active=False)
    second = create_user_in_db(db_session, active=False)
    third = create_user_in_db(db_session, active=False)

    assert _activate(client, first.phone, "MULTI005").status_code == 200
    code = get_code(db_session, "MULTI005")
    assert code.uses_count == 1
    assert code.is_used is False

    assert _activate(client, second.phone, "MULTI005").status_code == 200
    code = get_code(db_session, "MULTI005")
    assert code.uses_count == 2
    assert code.is_used is True

    r = _activate(client, third.phone, "MULTI005")
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "CODE_USAGE_LIMIT_REACHED"
    assert get_code(db_session, "MULTI005").uses_count == 2


def test_admin_code_grants_admin_role(client, db_session):
    user = create_user_in_db(db_session, active=False)
    create_code_in_db(db_session, code="ADMIN001", role=Role.ADMIN)

    r = _activate(client, user.phone, "ADMIN001")
    assert r.status_code == 200, r.text
    assert r.json()["data"]["role"] == "admin"

    token = login(client, user.phone)["accessToken"]
    codes = client.get("/api/admin/access-codes", headers=auth_header(token))
    assert codes.status_code == 200, codes.text

    # 같은 1회용 코드로 다른 사용자는 활성화 불가
    other = create_user_in_db(db_session, active=False)
    again = _activate(client, other.phone, "ADMIN001")
    assert again.status_code == 400
    assert again.json()["error"]["code"] == "CODE_USAGE_LIMIT_REACHED"


def test_concurrent_last_use_wins_the_race(db_session, session_factory):
    """사전 검사 뒤 다른 요청이 마지막 사용 횟수를 가져간 경우"""
    user = create_user_in_db(db_session, active=False)
    code = create_code_in_db(db_session, code="RACE0001", uses_allowed=1)
    assert code.uses_count == 0  # 이 세션은 uses_count=0 을 들고 있음

    with session_factory() as other:
        other.get(AccessCode, code.id).uses_count = 1
        other.commit()

    with pytest.raises(AppError) as exc_info:
        with unit_of_work(db_session):
            activate_with_credentials(
                db_session, phone=user.phone, password=DEFAULT_PASSWORD, access_code="RACE0001"
            )

    assert exc_info.value.code == "CODE_USAGE_LIMIT_REACHED"
    assert get_code(db_session, "RACE0001").uses_count == 1
    assert get_user(db_session, user.id).active is False


def test_concurrent_activation_rolls_back_redemption(db_session, session_factory):
    """같은 계정이 다른 요청에서 먼저 활성화된 경우 코드 사용도 되돌림"""
    create_code_in_db(db_session, code="RACE0002", uses_allowed=2)
    user = create_user_in_db(db_session, active=False)
    assert user.active is False  # 이 세션은 비활성 상태를 들고 있음

    with session_factory() as other:
        other.get(User, user.id).active = True
        other.commit()

    with pytest.raises(AppError) as exc_info:
        with unit_of_work(db_session):
            activate_with_credentials(
                db_session, phone=user.phone, password=DEFAULT_PASSWORD, access_code="RACE0002"
            )

    assert exc_info.value.code == "ALREADY_ACTIVATED"
    code = get_code(db_session, "RACE0002")
    assert code.uses_count == 0
    assert code.is_used is False
