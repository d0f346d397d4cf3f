# tests/test_main.py

"""
FastAPI 애플리케이션의 메인 엔드포인트에 대한 통합 테스트를 정의하는 모듈입니다.

- 루트 경로 (`/`), 헬스 체크 (`/health-check`, `/health`), 서비스 정보 (`/api/info`)
"""

import pytest
from httpx import AsyncClient

from app.core.config import settings
from app.main import ArqWorkerSettings


@pytest.mark.asyncio
async def test_read_root(client: AsyncClient):
    response = await client.get("/")
    assert response.status_code == 200
    assert response.json() == {
        "message": f"Welcome to {settings.APP_NAME}. Visit /docs for interactive API documentation."
    }


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    """
    헬스 체크 엔드포인트가 데이터베이스 연결 상태를 올바르게 반환하는지 테스트합니다.
    """
    response = await client.get("/health-check")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database_connection": "successful"}


@pytest.mark.asyncio
async def test_health_reports_version_and_compliance(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "Healthy"
    assert body["version"] == settings.APP_VERSION
    assert body["complianceStandard"] == "ISO-13485"
    assert "timestamp" in body


@pytest.mark.asyncio
async def test_api_info(client: AsyncClient):
    response = await client.get("/api/info")
    assert response.status_code == 200
    body = response.json()
    assert body["name"] == settings.APP_NAME
    assert body["environment"] == settings.APP_ENV
    assert body["complianceStandard"] == settings.COMPLIANCE_STANDARD


def test_worker_settings_register_jobs():
    """ARQ 워커가 헬스 체크와 자동 태그 예약 해제 작업을 등록하는지 확인합니다."""
    function_names = {func.__name__ for func in ArqWorkerSettings.functions}
    assert "health_check_database_task" in function_names
    assert "release_auto_tag_reservations_task" in function_names
    assert len(ArqWorkerSettings.cron_jobs) == 2
    assert ArqWorkerSettings.redis_settings.host == settings.REDIS_HOST
