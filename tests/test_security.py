from datetime import timedelta

import pytest
from jose import JWTError

from storefront.core.permissions import POLICY, Permission, is_allowed
from storefront.core.security import (
    create_access_token,
    create_refresh_token,
    decode_access_token,
    decode_refresh_token,
    get_password_hash,
    verify_password,
)
from storefront.models.user import Role


def test_password_hash_roundtrip():
    hashed = get_password_hash("secret123")
    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("secret124", hashed)


def test_same_password_hashes_differently():
    assert get_password_hash("secret123") != get_password_hash("secret123")


def test_tokens_issued_together_are_distinct():
    a = create_access_token("user-1", "+966500000000", "user")
    b = create_access_token("user-1", "+966500000000", "user")
    assert a != b


def test_token_types_are_not_interchangeable():
    access = create_access_token("user-1", "+966500000000", "admin")
    refresh = create_refresh_token("user-1", "+966500000000", "admin")

    assert decode_access_token(access)["role"] == "admin"
    assert decode_refresh_token(refresh)["type"] == "refresh"

    with pytest.raises(JWTError):
        decode_access_token(refresh)
    with pytest.raises(JWTError):
        decode_refresh_token(access)


def test_expired_token_fails_to_decode():
    token = create_refresh_token("user-1", "+966500000000", "user", expires_delta=timedelta(seconds=-1))
    with pytest.raises(JWTError):
        decode_refresh_token(token)


def test_every_permission_has_a_policy_entry():
    assert set(POLICY) == set(Permission)


@pytest.mark.parametrize("role", [Role.SUPER_ADMIN, Role.ADMIN])
def test_admin_roles_can_manage(role):
    assert is_allowed(role, Permission.GENERATE_ACCESS_CODES)
    assert is_allowed(role, Permission.MANAGE_PRODUCTS)
    assert is_allowed(role, Permission.VIEW_AUDIT_LOGS)


def test_user_role_is_limited_to_interaction():
    assert is_allowed(Role.USER, Permission.INTERACT_WITH_PRODUCTS)
    assert not is_allowed(Role.USER, Permission.GENERATE_ACCESS_CODES)
    assert not is_allowed(Role.USER, Permission.LIST_ACCESS_CODES)
    assert not is_allowed(Role.USER, Permission.MANAGE_CATEGORIES)
