# app/core/database.py

"""
애플리케이션의 데이터베이스 연결 및 세션 관리를 담당하는 모듈입니다.

- SQLModel의 비동기 엔진을 설정합니다.
- 비동기 세션 생성을 위한 유틸리티 함수를 제공합니다.
- 애플리케이션 시작 시 데이터베이스 스키마와 테이블을 생성하는 함수를 포함합니다 (개발용).
"""

import logging
from typing import Any, AsyncGenerator, Dict
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine
from sqlalchemy.orm import configure_mappers, sessionmaker
from sqlalchemy import text

from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings

logger = logging.getLogger(__name__)

# 도메인별 PostgreSQL 스키마 목록 (alembic env.py에서도 사용)
SCHEMA = ["loc", "mst", "tag"]


def engine_options(database_url: str) -> Dict[str, Any]:
    """
    DB URL에 맞는 엔진 옵션을 반환합니다.
    SQLite는 스키마를 지원하지 않으므로 schema_translate_map으로 스키마를 제거합니다.
    """
    if database_url.startswith("sqlite"):
        return {
            "execution_options": {"schema_translate_map": {name: None for name in SCHEMA}},
        }
    return {
        "pool_recycle": 3600,  # 1시간마다 연결 재활용
        "pool_size": 10,       # 최소 10개의 연결 유지
        "max_overflow": 20,    # 최대 20개의 추가 연결 허용 (총 30개)
    }


_database_url = settings.DATABASE_URL.get_secret_value()

# SQLModel 엔진을 생성합니다.
engine: AsyncEngine = create_async_engine(
    _database_url,
    echo=settings.DEBUG_MODE,  # 디버그 모드일 때만 SQL 쿼리 출력
    future=True,
    **engine_options(_database_url),
)

# 비동기 세션을 생성하는 '세션 공장'을 정의합니다.
AsyncSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

metadata = SQLModel.metadata

# 매퍼 구성 완료 플래그 (중복 호출 방지)
_mappers_configured = False


# =============================================================================
# 데이터베이스 초기화 및 테이블 생성 함수
# =============================================================================
async def create_db_and_tables(target_engine: AsyncEngine = engine) -> None:
    """
    데이터베이스 스키마 및 테이블을 생성합니다.
    개발 환경 및 시드 스크립트에서만 사용하며, 기존 테이블을 삭제하지는 않습니다.
    운영 환경에서는 Alembic 마이그레이션을 사용합니다.
    """
    global _mappers_configured

    # 모든 모델이 metadata에 등록되도록 임포트합니다.
    import app.domains.models  # noqa: F401

    async with target_engine.begin() as conn:
        if conn.dialect.name == "postgresql":
            for schema_name in SCHEMA:
                await conn.execute(text(f"CREATE SCHEMA IF NOT EXISTS {schema_name}"))
                logger.debug("스키마 '%s' 생성 완료 또는 이미 존재.", schema_name)

        # SQLAlchemy 매퍼 초기화: 모든 모델 클래스가 로드된 후 한 번만 호출합니다.
        if not _mappers_configured:
            configure_mappers()
            _mappers_configured = True

        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("데이터베이스 테이블 생성이 완료되었습니다 (또는 이미 존재).")


# =============================================================================
# 비동기 데이터베이스 세션 의존성 주입
# =============================================================================
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI 의존성 주입을 위한 비동기 데이터베이스 세션 제너레이터입니다.
    요청마다 새로운 세션을 생성하고, 요청 처리 후 세션을 자동으로 닫습니다.
    """
    async with AsyncSessionLocal() as session:
        yield session


@asynccontextmanager
async def get_async_session_context() -> AsyncGenerator[AsyncSession, None]:
    """
    ARQ Task, typer 스크립트 등 요청 밖에서 사용할 수 있는
    독립적인 비동기 DB 세션을 제공하는 컨텍스트 관리자입니다.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
