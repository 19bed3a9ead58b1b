# tests/helpers.py
import uuid
from datetime import timedelta

from sqlalchemy.orm import Session
from sqlalchemy import select

from storefront.core.clock import utc_now
from storefront.core.security import get_password_hash
from storefront.models.access_code import AccessCode
from storefront.models.category import Category
from storefront.models.user import User, Role

DEFAULT_PASSWORD = "Passw0rd!"


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def unique_phone() -> str:
    return f"+9665{uuid.uuid4().int % 10**8:08d}"


def create_user_in_db(
    db: Session,
    *,
    phone: str | None = None,
    password: str = DEFAULT_PASSWORD,
    role: Role = Role.USER,
    active: bool = True,
    name: str = "테스트유저",
) -> User:
    user = User(
        name=name,
        phone=phone or unique_phone(),
        password_hash=get_password_hash(password),
        role=role,
        active=active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def create_code_in_db(
    db: Session,
    *,
    code: str,
    role: Role = Role.USER,
    uses_allowed: int = 1,
    uses_count: int = 0,
    valid_from=None,
    valid_until=None,
) -> AccessCode:
    now = utc_now()
    access_code = AccessCode(
        code=code,
        role=role,
        valid_from=valid_from or now - timedelta(days=1),
        valid_until=valid_until or now + timedelta(days=30),
        uses_allowed=uses_allowed,
        uses_count=uses_count,
        is_used=uses_count >= uses_allowed,
        note=f"{role.value} access code",
    )
    db.add(access_code)
    db.commit()
    db.refresh(access_code)
    return access_code


def create_category_in_db(db: Session, *, name_en: str = "Phones", name_ar: str = "هواتف") -> Category:
    category = Category(name_en=name_en, name_ar=name_ar)
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def login(client, phone: str, password: str = DEFAULT_PASSWORD) -> dict:
    r = client.post("/api/auth/login", json={"phone": phone, "password": password})
    assert r.status_code == 200, r.text
    return r.json()["data"]


def login_as(client, db: Session, role: Role) -> tuple[User, str]:
    """해당 역할의 활성 계정을 만들고 accessToken 까지 발급"""
    user = create_user_in_db(db, role=role)
    return user, login(client, user.phone)["accessToken"]


def get_user(db: Session, user_id) -> User:
    db.expire_all()
    return db.scalar(select(User).where(User.id == uuid.UUID(str(user_id))))


def get_code(db: Session, code: str) -> AccessCode:
    db.expire_all()
    return db.scalar(select(AccessCode).where(AccessCode.code == code))
