# tests/conftest.py

import os
from typing import AsyncGenerator, Awaitable, Callable

# 설정(Settings)은 임포트 시점에 DATABASE_URL을 요구하므로 앱 임포트 전에 지정합니다.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("APP_ENV", "testing")

import pytest_asyncio  # noqa: E402
from httpx import AsyncClient, ASGITransport  # noqa: E402

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402
from sqlmodel.ext.asyncio.session import AsyncSession  # noqa: E402

# app.main을 임포트하여 FastAPI 앱 인스턴스에 접근합니다.
from app.main import app as main_app  # noqa: E402
from app.core import dependencies as deps  # noqa: E402
from app.core.database import SCHEMA, get_session  # noqa: E402

# --- 모든 모델 임포트 ---
#  SQLModel.metadata.create_all()이 모든 테이블을 인식하려면 모든 모델 클래스가 임포트되어야 합니다.
from app.domains.models import *  # noqa: F401, F403, E402
from app.domains.loc import models as loc_models  # noqa: E402
from app.domains.mst import models as mst_models  # noqa: E402
from app.domains.tag import models as tag_models  # noqa: E402


# --- 테스트용 데이터베이스 설정 ---
# 운영 DB(PostgreSQL)와 분리된 메모리 SQLite를 사용합니다.
# SQLite는 스키마를 지원하지 않으므로 loc/mst/tag 스키마를 제거하여 매핑합니다.
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """각 테스트마다 빈 메모리 DB에 모든 테이블을 생성합니다."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,  # 메모리 DB를 하나의 연결로 공유
        connect_args={"check_same_thread": False},
        execution_options={"schema_translate_map": {name: None for name in SCHEMA}},
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """
    테스트 함수마다 독립적인 비동기 데이터베이스 세션을 제공합니다.
    """
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with TestingSessionLocal() as session:
        yield session


# --- 비동기 테스트 클라이언트 픽스처 ---
@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    테스트용 비동기 DB 세션을 주입한 AsyncClient 인스턴스를 생성합니다.
    ASGITransport는 lifespan을 실행하지 않으므로 Redis가 필요하지 않습니다.
    """

    def override_get_session_and_dependency():
        yield db_session

    original_overrides = main_app.dependency_overrides.copy()
    try:
        main_app.dependency_overrides[get_session] = override_get_session_and_dependency
        main_app.dependency_overrides[deps.get_db_session] = override_get_session_and_dependency

        async with AsyncClient(transport=ASGITransport(app=main_app), base_url="http://test") as async_client:
            yield async_client
    finally:
        main_app.dependency_overrides.clear()
        main_app.dependency_overrides.update(original_overrides)


# --- 도메인별 공통 픽스처 ---
@pytest_asyncio.fixture(name="test_location")
async def test_location_fixture(db_session: AsyncSession) -> loc_models.Location:
    """테스트용 장소A를 데이터베이스에 생성하고 반환합니다."""
    location = loc_models.Location(name="Test Location A", code="LOC-A")
    db_session.add(location)
    await db_session.commit()
    await db_session.refresh(location)
    return location


@pytest_asyncio.fixture(name="other_location")
async def other_location_fixture(db_session: AsyncSession) -> loc_models.Location:
    location = loc_models.Location(name="Test Location B", code="LOC-B")
    db_session.add(location)
    await db_session.commit()
    await db_session.refresh(location)
    return location


@pytest_asyncio.fixture(name="test_customer")
async def test_customer_fixture(db_session: AsyncSession) -> mst_models.Customer:
    customer = mst_models.Customer(code="CUST-001", name="Test Customer")
    db_session.add(customer)
    await db_session.commit()
    await db_session.refresh(customer)
    return customer


@pytest_asyncio.fixture(name="test_item")
async def test_item_fixture(db_session: AsyncSession, test_customer: mst_models.Customer) -> mst_models.Item:
    item = mst_models.Item(item_number="ITEM-001", name="Forceps", customer_id=test_customer.id)
    db_session.add(item)
    await db_session.commit()
    await db_session.refresh(item)
    return item


@pytest_asyncio.fixture(scope="function")
def unit_factory(db_session: AsyncSession) -> Callable[..., Awaitable[mst_models.Unit]]:
    """유닛 생성을 위한 팩토리 픽스처"""
    async def _create_unit(unit_number: str, **kwargs) -> mst_models.Unit:
        unit = mst_models.Unit(unit_number=unit_number, **kwargs)
        db_session.add(unit)
        await db_session.commit()
        await db_session.refresh(unit)
        return unit
    return _create_unit


@pytest_asyncio.fixture(name="test_unit")
async def test_unit_fixture(unit_factory: Callable, test_item: mst_models.Item) -> mst_models.Unit:
    return await unit_factory("TEST-UNIT-001", item_id=test_item.id)


@pytest_asyncio.fixture(name="test_unit_2")
async def test_unit_2_fixture(unit_factory: Callable, test_item: mst_models.Item) -> mst_models.Unit:
    return await unit_factory("TEST-UNIT-002", item_id=test_item.id)


@pytest_asyncio.fixture(name="test_indicator")
async def test_indicator_fixture(db_session: AsyncSession) -> mst_models.Indicator:
    indicator = mst_models.Indicator(indicator_number="IND-001", name="Steam Indicator")
    db_session.add(indicator)
    await db_session.commit()
    await db_session.refresh(indicator)
    return indicator


@pytest_asyncio.fixture(scope="function")
def tag_factory(
    db_session: AsyncSession, test_location: loc_models.Location
) -> Callable[..., Awaitable[tag_models.Tag]]:
    """
    태그 생성을 위한 팩토리 픽스처.
    번호를 생략하면 유형별로 1부터 증가하는 번호를 사용합니다.
    """
    counters = {}

    async def _create_tag(tag_type: tag_models.TagType = tag_models.TagType.BUNDLE, **kwargs) -> tag_models.Tag:
        if "tag_number" not in kwargs:
            counters[tag_type] = counters.get(tag_type, 0) + 1
            kwargs["tag_number"] = counters[tag_type]
        kwargs.setdefault("location_id", test_location.id)
        tag = tag_models.Tag(tag_type=tag_type, **kwargs)
        db_session.add(tag)
        await db_session.commit()
        await db_session.refresh(tag)
        return tag
    return _create_tag
