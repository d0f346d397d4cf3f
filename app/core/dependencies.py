# app/core/dependencies.py

"""
FastAPI 애플리케이션의 의존성 주입(Dependency Injection)을 정의하는 모듈입니다.

- 데이터베이스 세션 관리 (get_db_session).
- 목록 조회용 페이지네이션 파라미터 (PageParams).
"""

from typing import AsyncGenerator

from fastapi import Query
from pydantic import BaseModel
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings
from app.core.database import get_session as get_main_app_session


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI 의존성 주입을 위한 비동기 데이터베이스 세션 제너레이터입니다.
    app.core.database.get_session을 래핑하여 사용합니다.
    """
    async for session in get_main_app_session():
        yield session


class PageParams(BaseModel):
    """page / page_size 쿼리 파라미터를 skip / limit 으로 변환합니다."""
    page: int
    page_size: int

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        return self.page_size


def get_page_params(
    page: int = Query(1, ge=1, description="1부터 시작하는 페이지 번호"),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, alias="pageSize", ge=1, le=500, description="페이지 크기"),
) -> PageParams:
    return PageParams(page=page, page_size=page_size)
