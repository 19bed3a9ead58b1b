"""
config.py

애플리케이션 전역 설정(Configuration) 관리 파일.

이 파일은 .env 환경 변수들을 Pydantic BaseSettings를 통해 로드하여
애플리케이션 전반에서 공통으로 사용하는 설정 값을 제공한다.

주요 설정 항목:
- 데이터베이스 연결 정보
- JWT 서명 시크릿 및 access / refresh 만료 시간(초 단위)
- 비밀번호 해시 cost(bcrypt rounds)
- CORS 허용 도메인 목록
- 로그 레벨

설계 원칙:
- 모든 환경 변수는 이 파일을 통해서만 접근
- 로컬 / 테스트 / 운영 환경을 .env로 분리하여 관리
- 설정 값은 런타임 중 변경되지 않는 불변 객체로 취급

관련 파일:
- storefront.main               : CORS / 로깅 초기화 시 설정 사용
- storefront.core.security      : JWT 시크릿 / 만료 / bcrypt 설정 사용
- storefront.db.session         : DATABASE_URL 사용

"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

# .env 파일에 정의된 환경 변수를 로드하는 설정 클래스
# extra="ignore" 옵션으로 정의되지 않은 환경 변수는 무시
class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "Storefront Backend"

    DATABASE_URL: str
    TEST_DATABASE_URL: str | None = None

    SECRET_KEY: str
    # 비워두면 SECRET_KEY 하나로 access / refresh 모두 서명
    REFRESH_SECRET_KEY: str | None = None
    ALGORITHM: str = "HS256"

    ACCESS_TOKEN_EXPIRE_SECONDS: int = 900
    REFRESH_TOKEN_EXPIRE_SECONDS: int = 7 * 24 * 60 * 60

    # 테스트에서는 4 정도로 낮춰서 사용
    BCRYPT_ROUNDS: int = 10

    LOG_LEVEL: str = "INFO"

    # CORS 허용 도메인 (관리자 대시보드 / 모바일 개발 서버)
    CORS_ORIGINS: List[str] = ["http://localhost:5173", "http://localhost:8081"]

    @property
    def refresh_secret(self) -> str:
        return self.REFRESH_SECRET_KEY or self.SECRET_KEY


# 애플리케이션 전역에서 import하여 사용하는 Settings 인스턴스
# 실행 시 한 번만 생성됨
settings = Settings()
