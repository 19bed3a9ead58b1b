"""

초기 데이터 생성 스크립트.

- 서버 최초 세팅 시 실행하는 용도
- .env에 정의된 SUPERADMIN_* 환경 변수를 읽어
  SUPER_ADMIN 계정을 (활성 상태로) 생성한다.
- 이미 SUPER_ADMIN 계정이 존재하면 계정 생성은 건너뛴다.
- 액세스 코드가 하나도 없으면 시작용 코드 묶음을 발급하고 출력한다.
    - user  / 30일  / 1회  x 5
    - admin / 365일 / 1회  x 3
    - user  / 30일  / 5회  x 2

사용 방법
- 가상환경 접속
- (.venv) ~\backend~$ python -m scripts.seed

"""

import os
from dotenv import load_dotenv
load_dotenv()

from sqlalchemy import func, select
from storefront.db.session import SessionLocal, unit_of_work
from storefront.models.access_code import AccessCode
from storefront.models.user import User, Role
from storefront.core.security import get_password_hash
from storefront.services.access_codes import generate_codes


STARTER_CODES = [
    # (role, valid_days, uses_allowed, count)
    (Role.USER, 30, 1, 5),
    (Role.ADMIN, 365, 1, 3),
    (Role.USER, 30, 5, 2),
]


def ensure_superadmin(db) -> User:
    existing = db.scalar(select(User).where(User.role == Role.SUPER_ADMIN))
    if existing:
        print("✅ SUPER_ADMIN already exists. Skip creation.")
        return existing

    phone = os.environ["SUPERADMIN_PHONE"]
    password = os.environ["SUPERADMIN_PASSWORD"]
    name = os.environ.get("SUPERADMIN_NAME", "Super Admin")

    if db.scalar(select(User).where(User.phone == phone)):
        raise RuntimeError("Phone already exists but is not SUPER_ADMIN")

    user = User(
        name=name,
        phone=phone,
        password_hash=get_password_hash(password),
        role=Role.SUPER_ADMIN,
        active=True,
    )
    with unit_of_work(db):
        db.add(user)

    print(f"🚀 SUPER_ADMIN created: {phone}")
    return user


def seed_access_codes(db, admin: User) -> None:
    if db.scalar(select(func.count()).select_from(AccessCode)):
        print("✅ Access codes already exist. Skip seeding.")
        return

    with unit_of_work(db):
        batches = [
            (role, valid_days, uses_allowed, generate_codes(
                db,
                admin_id=admin.id,
                role=role,
                valid_days=valid_days,
                uses_allowed=uses_allowed,
                count=count,
            ))
            for role, valid_days, uses_allowed, count in STARTER_CODES
        ]

    for role, valid_days, uses_allowed, codes in batches:
        print(f"🚀 {role.value} / {valid_days}d / {uses_allowed} use(s):")
        for code in codes:
            print(f"   {code.code}")


def main():
    db = SessionLocal()
    try:
        admin = ensure_superadmin(db)
        seed_access_codes(db, admin)
    finally:
        db.close()


if __name__ == "__main__":
    main()
