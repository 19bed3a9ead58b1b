import os

# 앱 import 전에 테스트용 환경 변수 세팅 (settings 는 import 시점에 한 번 생성됨)
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.main import app as fastapi_app
from storefront.core.config import settings
from storefront.core.deps import get_db
from storefront.db.base import Base

# ✅ 모델 import (Base.metadata에 테이블 등록)
import storefront.models  # noqa: F401


# TEST_DATABASE_URL 이 없으면 in-memory SQLite 한 개를 모든 세션이 공유
TEST_DB_URL = settings.TEST_DATABASE_URL or "sqlite://"

if TEST_DB_URL.startswith("sqlite"):
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
else:
    engine = create_engine(TEST_DB_URL, pool_pre_ping=True)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def setup_test_db():
    """각 테스트마다 스키마를 새로 생성"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session():
    """테스트에서 직접 DB 조작할 때 쓰는 세션"""
    session = TestingSessionLocal()
    try:
        yield session
        session.commit()
    finally:
        session.close()


@pytest.fixture()
def client():
    fastapi_app.dependency_overrides[get_db] = override_get_db
    with TestClient(fastapi_app) as c:
        yield c
    fastapi_app.dependency_overrides.clear()


@pytest.fixture()
def session_factory():
    """동시 요청 상황을 흉내낼 때 쓰는 별도 세션 생성기"""
    return TestingSessionLocal
