# app/domains/mst/schemas.py

"""
'mst' 도메인의 API 요청 및 응답 스키마를 정의하는 모듈입니다.
"""

from typing import Optional
from datetime import datetime
from pydantic import Field, computed_field
from sqlmodel import SQLModel

from app.domains.mst.models import UnitStatus


# =============================================================================
# 1. mst.customers 스키마
# =============================================================================
class CustomerBase(SQLModel):
    code: str = Field(..., max_length=20, description="고객 코드 (고유)")
    name: str = Field(..., max_length=100, description="고객 명칭")
    is_active: bool = Field(True, description="사용 여부")


class CustomerCreate(CustomerBase):
    pass


class CustomerUpdate(SQLModel):
    code: Optional[str] = Field(None, max_length=20)
    name: Optional[str] = Field(None, max_length=100)
    is_active: Optional[bool] = None


class CustomerRead(CustomerBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# =============================================================================
# 2. mst.items 스키마
# =============================================================================
class ItemBase(SQLModel):
    item_number: str = Field(..., max_length=50, description="아이템 번호 (고유)")
    name: str = Field(..., max_length=100, description="아이템 명칭")
    item_text: Optional[str] = Field(None, description="아이템 설명")
    customer_id: Optional[int] = Field(None, description="소유 고객 ID")
    storage_type: Optional[str] = Field(None, max_length=50, description="보관 유형")
    is_active: bool = Field(True, description="사용 여부")


class ItemCreate(ItemBase):
    pass


class ItemUpdate(SQLModel):
    item_number: Optional[str] = Field(None, max_length=50)
    name: Optional[str] = Field(None, max_length=100)
    item_text: Optional[str] = None
    customer_id: Optional[int] = None
    storage_type: Optional[str] = Field(None, max_length=50)
    is_active: Optional[bool] = None


class ItemRead(ItemBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# =============================================================================
# 3. mst.units 스키마
# =============================================================================
class UnitBase(SQLModel):
    unit_number: str = Field(..., max_length=50, description="유닛 번호 (고유)")
    serial_number: Optional[str] = Field(None, max_length=50, description="시리얼 번호")
    status: UnitStatus = Field(UnitStatus.NEW, description="유닛 재처리 상태")
    item_id: Optional[int] = Field(None, description="아이템(제품) ID")
    customer_id: Optional[int] = Field(None, description="소유 고객 ID")
    location_id: Optional[int] = Field(None, description="현재 위치 ID")


class UnitCreate(UnitBase):
    pass


class UnitUpdate(SQLModel):
    unit_number: Optional[str] = Field(None, max_length=50)
    serial_number: Optional[str] = Field(None, max_length=50)
    status: Optional[UnitStatus] = None
    item_id: Optional[int] = None
    customer_id: Optional[int] = None
    location_id: Optional[int] = None


class UnitStatusUpdate(SQLModel):
    """유닛 상태 변경 요청 스키마"""
    status: UnitStatus


class UnitRead(UnitBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @computed_field
    @property
    def status_display(self) -> str:
        return UnitStatus(self.status).display_name

    class Config:
        from_attributes = True


# =============================================================================
# 4. mst.indicators 스키마
# =============================================================================
class IndicatorBase(SQLModel):
    indicator_number: str = Field(..., max_length=50, description="지시계 번호 (고유)")
    name: str = Field(..., max_length=100, description="지시계 명칭")
    indicator_type: Optional[str] = Field(None, max_length=50, description="지시계 유형")
    lot_number: Optional[str] = Field(None, max_length=50, description="로트 번호")
    is_active: bool = Field(True, description="사용 여부")


class IndicatorCreate(IndicatorBase):
    pass


class IndicatorUpdate(SQLModel):
    indicator_number: Optional[str] = Field(None, max_length=50)
    name: Optional[str] = Field(None, max_length=100)
    indicator_type: Optional[str] = Field(None, max_length=50)
    lot_number: Optional[str] = Field(None, max_length=50)
    is_active: Optional[bool] = None


class IndicatorRead(IndicatorBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
