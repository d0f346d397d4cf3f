# app/domains/mst/models.py

"""
'mst' 도메인 (PostgreSQL 'mst' 스키마)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

- customers: 유닛/아이템을 소유한 고객(병원, 부서)
- items: 제품(기구 세트) 정의
- units: 실제로 태그에 담겨 이동하는 개별 기구 세트
- indicators: 멸균 공정 검증용 지시계(BI/CI)
"""

from typing import Optional, List
from datetime import datetime, UTC
from enum import IntEnum
from sqlmodel import Field, Relationship, SQLModel, Column
from sqlalchemy import ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP


# =============================================================================
# 0. Enum 정의
# =============================================================================
class UnitStatus(IntEnum):
    """
    유닛의 재처리 상태를 정의하는 정수형 Enum 클래스입니다.
    """
    NEW = 0
    DIRTY = 1
    IN_WASH = 2
    CLEAN = 3
    IN_STERILIZATION = 4
    STERILE = 5
    IN_USE = 6
    EXPIRED = 7
    MAINTENANCE = 8

    @property
    def display_name(self) -> str:
        # IN_STERILIZATION -> "In Sterilization"
        return " ".join(word.capitalize() for word in self.name.split("_"))


# =============================================================================
# 1. mst.customers 테이블 모델
# =============================================================================
class CustomerBase(SQLModel):
    id: Optional[int] = Field(default=None, primary_key=True, description="고객 고유 ID")
    code: str = Field(max_length=20, sa_column_kwargs={"unique": True}, description="고객 코드")
    name: str = Field(max_length=100, description="고객 명칭")
    is_active: bool = Field(default=True, description="사용 여부")

    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
    )


class Customer(CustomerBase, table=True):
    """
    PostgreSQL의 mst.customers 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "customers"
    __table_args__ = {'schema': 'mst'}

    items: List["Item"] = Relationship(back_populates="customer")


# =============================================================================
# 2. mst.items 테이블 모델
# =============================================================================
class ItemBase(SQLModel):
    id: Optional[int] = Field(default=None, primary_key=True, description="아이템 고유 ID")
    item_number: str = Field(max_length=50, sa_column_kwargs={"unique": True}, description="아이템 번호")
    name: str = Field(max_length=100, description="아이템 명칭")
    item_text: Optional[str] = Field(default=None, description="아이템 설명 텍스트")
    customer_id: Optional[int] = Field(
        default=None,
        sa_column=Column(ForeignKey("mst.customers.id", onupdate="CASCADE", ondelete="RESTRICT")),
        description="소유 고객 ID (FK)"
    )
    storage_type: Optional[str] = Field(default=None, max_length=50, description="보관 유형")
    is_active: bool = Field(default=True, description="사용 여부")

    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
    )


class Item(ItemBase, table=True):
    """
    PostgreSQL의 mst.items 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "items"
    __table_args__ = {'schema': 'mst'}

    customer: Optional["Customer"] = Relationship(back_populates="items")
    units: List["Unit"] = Relationship(back_populates="item")


# =============================================================================
# 3. mst.units 테이블 모델
# =============================================================================
class UnitBase(SQLModel):
    id: Optional[int] = Field(default=None, primary_key=True, description="유닛 고유 ID")
    unit_number: str = Field(max_length=50, sa_column_kwargs={"unique": True}, description="유닛 번호 (바코드)")
    serial_number: Optional[str] = Field(default=None, max_length=50, description="시리얼 번호")
    status: UnitStatus = Field(default=UnitStatus.NEW, description="유닛 재처리 상태")
    item_id: Optional[int] = Field(
        default=None,
        sa_column=Column(ForeignKey("mst.items.id", onupdate="CASCADE", ondelete="RESTRICT")),
        description="아이템(제품) ID (FK)"
    )
    customer_id: Optional[int] = Field(
        default=None,
        sa_column=Column(ForeignKey("mst.customers.id", onupdate="CASCADE", ondelete="RESTRICT")),
        description="소유 고객 ID (FK)"
    )
    # 유닛이 태그에 담기면 태그의 위치로 갱신됩니다.
    location_id: Optional[int] = Field(
        default=None,
        sa_column=Column(ForeignKey("loc.locations.id", onupdate="CASCADE", ondelete="SET NULL")),
        description="현재 위치 ID (FK)"
    )

    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
    )


class Unit(UnitBase, table=True):
    """
    PostgreSQL의 mst.units 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "units"
    __table_args__ = {'schema': 'mst'}

    item: Optional["Item"] = Relationship(back_populates="units")


# =============================================================================
# 4. mst.indicators 테이블 모델
# =============================================================================
class IndicatorBase(SQLModel):
    id: Optional[int] = Field(default=None, primary_key=True, description="지시계 고유 ID")
    indicator_number: str = Field(max_length=50, sa_column_kwargs={"unique": True}, description="지시계 번호")
    name: str = Field(max_length=100, description="지시계 명칭")
    indicator_type: Optional[str] = Field(default=None, max_length=50, description="지시계 유형 (BI, CI 등)")
    lot_number: Optional[str] = Field(default=None, max_length=50, description="로트 번호")
    is_active: bool = Field(default=True, description="사용 여부")

    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
    )


class Indicator(IndicatorBase, table=True):
    """
    PostgreSQL의 mst.indicators 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "indicators"
    __table_args__ = {'schema': 'mst'}
