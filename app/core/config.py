# app/core/config.py

from typing import Any, List
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict
import os

# 프로젝트의 루트 디렉토리 경로를 계산합니다.
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


class Settings(BaseSettings):
    """
    애플리케이션의 모든 설정을 정의하는 Pydantic BaseSettings 모델입니다.
    환경 변수 및 .env 파일에서 값을 자동으로 로드합니다.
    """

    # --- Pydantic Settings 설정 ---
    model_config = SettingsConfigDict(
        env_file=os.path.join(BASE_DIR, '.env'),  # 프로젝트 루트의 .env 파일
        env_file_encoding='utf-8',
        extra='ignore',                           # 모델에 없는 변수는 무시
        case_sensitive=True                       # 환경 변수 이름 대소문자 구분
    )

    # --- 애플리케이션 기본 설정 ---
    APP_NAME: str = "Tag Management Service"
    APP_VERSION: str = "1.0.5"
    APP_DESCRIPTION: str = "Medical device inventory tagging service API"
    APP_ENV: str = Field("development", description="Application environment (e.g., development, production, testing)")
    DEBUG_MODE: bool = Field(False, description="Enable debug mode for SQL echo and detailed errors")
    LOG_LEVEL: str = Field("INFO", description="Root logging level (DEBUG, INFO, WARNING, ...)")

    # 의료기기 소프트웨어 규격 (헬스 체크 및 리포트에 표기)
    COMPLIANCE_STANDARD: str = Field("ISO-13485", description="Compliance standard reported by the service")

    # --- 데이터베이스 설정 ---
    DATABASE_URL: SecretStr = Field(..., description="PostgreSQL database connection URL (postgresql+asyncpg://...)")

    # --- ARQ (Redis) 설정 ---
    REDIS_HOST: str = Field("localhost", description="Redis host for the ARQ worker")
    REDIS_PORT: int = Field(6379, description="Redis port for the ARQ worker")

    # --- API 설정 ---
    DEFAULT_PAGE_SIZE: int = Field(50, description="Default page size for tag listings")
    CORS_ORIGINS: List[str] = Field(default_factory=lambda: ["*"], description="Allowed CORS origins")

    def model_post_init(self, __context: Any) -> None:  # noqa: ANN001
        # 로그 레벨은 대문자로 통일합니다.
        self.LOG_LEVEL = self.LOG_LEVEL.upper()


settings = Settings()
