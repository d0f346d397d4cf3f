# app/domains/loc/schemas.py

"""
'loc' 도메인의 API 요청(생성, 업데이트) 및 응답(조회) 스키마를 정의하는 모듈입니다.
"""

from typing import Optional
from datetime import datetime
from pydantic import Field
from sqlmodel import SQLModel


# =============================================================================
# 1. loc.locations 테이블 스키마
# =============================================================================
class LocationBase(SQLModel):
    """
    장소의 기본 속성을 정의하는 Base 스키마입니다.
    """
    name: str = Field(..., max_length=100, description="장소 명칭")
    code: Optional[str] = Field(None, max_length=20, description="장소 코드 (고유)")
    description: Optional[str] = Field(None, description="설명")
    parent_location_id: Optional[int] = Field(None, description="상위 장소 ID")
    is_active: bool = Field(True, description="사용 여부")


class LocationCreate(LocationBase):
    """새로운 장소를 생성하기 위한 스키마입니다. `name`은 필수입니다."""
    pass


class LocationUpdate(SQLModel):
    """
    기존 장소 정보를 업데이트하기 위한 스키마입니다.
    모든 필드는 선택 사항입니다 (부분 업데이트 가능).
    """
    name: Optional[str] = Field(None, max_length=100)
    code: Optional[str] = Field(None, max_length=20)
    description: Optional[str] = None
    parent_location_id: Optional[int] = None
    is_active: Optional[bool] = None


class LocationRead(LocationBase):
    """장소 정보를 클라이언트에 응답하기 위한 스키마입니다."""
    id: int = Field(..., description="장소 고유 ID")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
