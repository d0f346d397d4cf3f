# app/main.py

import logging
from datetime import datetime, UTC
from typing import AsyncGenerator
from contextlib import asynccontextmanager
from arq.connections import create_pool, RedisSettings
from arq.cron import cron

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from fastapi import FastAPI, Depends, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware

# 핵심 설정 및 데이터베이스 모듈 임포트
from app.core.config import settings
from app.core.database import engine, get_session
from app import API_PREFIX

# 태스크 모듈 임포트
from app.core import tasks as core_tasks
from app.domains.tag import tasks as tag_tasks

# 도메인 라우터 임포트
from app.domains.loc.routers import router as loc_router
from app.domains.mst.routers import router as mst_router
from app.domains.tag.routers import router as tag_router

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

# ARQ 워커가 실행할 태스크 함수 목록
worker_functions = [
    core_tasks.health_check_database_task,
    tag_tasks.release_auto_tag_reservations_task,
]


# ARQ 워커 설정 클래스
class ArqWorkerSettings:
    redis_settings = RedisSettings(host=settings.REDIS_HOST, port=settings.REDIS_PORT)
    functions = worker_functions
    cron_jobs = [
        # 매일 자정 DB 헬스 체크
        cron(core_tasks.health_check_database_task, hour={0}, minute={0}, timeout=300, keep_result=600),
        # 매일 새벽 2시 남아 있는 자동 태그 예약 해제
        cron(tag_tasks.release_auto_tag_reservations_task, hour={2}, minute={0}, timeout=600, keep_result=3600),
    ]


# -- 애플리케이션 수명 주기 이벤트 핸들러 --
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI 애플리케이션의 수명 주기 이벤트(데이터베이스, ARQ Redis)를 함께 처리합니다.
    """
    logger.info("Starting %s %s (%s)", settings.APP_NAME, settings.APP_VERSION, settings.APP_ENV)
    try:
        # 테이블은 Alembic 마이그레이션으로 관리합니다.
        app.state.redis = await create_pool(ArqWorkerSettings.redis_settings)
        logger.info("ARQ Redis connection pool created.")
    except Exception:
        logger.exception("Error during application startup")
        raise

    yield  # 애플리케이션 실행

    logger.info("Shutting down %s", settings.APP_NAME)
    try:
        if app.state.redis:
            await app.state.redis.close()
            logger.info("ARQ Redis connection pool closed.")
        await engine.dispose()
        logger.info("Database connection pool disposed.")
    except Exception:
        logger.exception("Error during application shutdown")


# -- FastAPI 애플리케이션 인스턴스 생성 --
app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# -- CORS 미들웨어 설정 --
# 허용 출처는 설정(CORS_ORIGINS)으로 관리합니다.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -- 도메인 라우터 포함 --
app.include_router(loc_router, prefix=f"{API_PREFIX}/loc", tags=["Location Management (위치 관리)"])
app.include_router(mst_router, prefix=f"{API_PREFIX}/mst", tags=["Master Data Management (기준 정보 관리)"])
app.include_router(tag_router, prefix=f"{API_PREFIX}/tag", tags=["Tag Management (태그 관리)"])


# -- 루트 엔드포인트 --
@app.get("/", summary="API Root", response_description="Welcome message and documentation link.")
async def read_root():
    return {"message": f"Welcome to {settings.APP_NAME}. Visit /docs for interactive API documentation."}


# -- 헬스 체크 엔드포인트 --
@app.get("/health-check", summary="Health Check", response_description="Status of the application and database connection.")
async def health_check(session: AsyncSession = Depends(get_session)):
    """
    데이터베이스 연결을 테스트하여 서비스의 정상 작동 여부를 확인합니다.
    """
    try:
        result = await session.exec(select(1))
        if result.first():
            return {"status": "ok", "database_connection": "successful"}
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Database health check failed: No result from test query"
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Database health check failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Database connection error during health check: {e}"
        )


@app.get("/health", summary="Service Health")
async def health():
    """서비스 상태와 버전, 준수 표준을 반환합니다."""
    return {
        "status": "Healthy",
        "timestamp": datetime.now(UTC).isoformat(),
        "version": settings.APP_VERSION,
        "complianceStandard": settings.COMPLIANCE_STANDARD,
    }


@app.get("/api/info", summary="Service Information")
async def api_info():
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.APP_ENV,
        "complianceStandard": settings.COMPLIANCE_STANDARD,
    }
