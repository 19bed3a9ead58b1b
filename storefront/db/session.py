"""
session.py

데이터베이스 엔진 및 세션(Session) 관리 파일.

이 파일은 SQLAlchemy Engine과 SessionLocal을 생성하여
애플리케이션 전반에서 공통으로 사용하는 DB 연결을 관리한다.

FastAPI 의존성(get_db)을 통해
요청 단위로 세션을 생성/종료하는 구조를 지원한다.

설계 원칙:
- DB 연결 설정은 한 곳에서만 정의
- 세션 생성/종료 책임을 명확히 분리
- 쓰기 작업은 unit_of_work 블록 안에서 커밋/롤백을 한 번에 처리
- pool_pre_ping=True로 유휴 연결 오류 방지

관련 파일:
- storefront.core.config        : DATABASE_URL 설정
- storefront.core.deps          : get_db 의존성

"""

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from storefront.core.config import settings


def _connect_args(url: str) -> dict:
    # SQLite 커넥션은 요청 스레드를 넘나들 수 있어야 함
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


# SQLAlchemy Engine 생성
# pool_pre_ping=True:
#   장시간 idle 후 끊어진 DB 커넥션을 자동으로 감지/재연결
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    connect_args=_connect_args(settings.DATABASE_URL),
)

# 요청 단위로 사용할 세션 팩토리
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


"""
쓰기 작업 단위(Unit of Work)

- 블록이 정상 종료되면 commit
- 어떤 예외든 발생하면 rollback 후 그대로 다시 던짐
  (AppError는 에러 핸들러가, 그 외는 catch-all 핸들러가 응답으로 변환)

"""

@contextmanager
def unit_of_work(db: Session) -> Iterator[Session]:
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
