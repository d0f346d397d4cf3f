# app/domains/loc/models.py

"""
'loc' 도메인 (PostgreSQL 'loc' 스키마)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.
 - 장소(Location)는 상위 장소를 참조하는 자기 참조 계층 구조입니다.
   (예: 중앙공급실 -> 세척 구역 -> 세척기 1번)
"""

from typing import Optional, List, TYPE_CHECKING
from datetime import datetime, UTC
from sqlmodel import Field, Relationship, SQLModel, Column
from sqlalchemy import ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP

if TYPE_CHECKING:
    from app.domains.tag.models import Tag


# =============================================================================
# 1. loc.locations 테이블 모델
# =============================================================================
class LocationBase(SQLModel):
    """
    loc.locations 테이블의 기본 속성을 정의하는 SQLModel Base 클래스입니다.
    """
    id: Optional[int] = Field(default=None, primary_key=True, description="장소 고유 ID")
    name: str = Field(max_length=100, description="장소 명칭 (예: 세척실 A)")
    code: Optional[str] = Field(default=None, max_length=20, sa_column_kwargs={"unique": True}, description="장소 코드")
    description: Optional[str] = Field(default=None, description="설명")
    parent_location_id: Optional[int] = Field(
        default=None,
        sa_column=Column(ForeignKey("loc.locations.id", onupdate="CASCADE", ondelete="RESTRICT")),
        description="상위 장소 ID (계층 구조를 위해)"
    )
    is_active: bool = Field(default=True, description="사용 여부")

    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
        description="레코드 마지막 업데이트 일시"
    )


class Location(LocationBase, table=True):
    """
    PostgreSQL의 loc.locations 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "locations"
    __table_args__ = {'schema': 'loc'}

    # 계층 관계: 자기 자신을 참조
    parent_location: Optional["Location"] = Relationship(
        back_populates="child_locations",
        sa_relationship_kwargs={
            "remote_side": "Location.id",
            "foreign_keys": "Location.parent_location_id",
        }
    )
    child_locations: List["Location"] = Relationship(
        back_populates="parent_location",
        sa_relationship_kwargs={"foreign_keys": "Location.parent_location_id"}
    )

    # tag.tags의 location_id가 loc.locations.id를 참조
    tags: List["Tag"] = Relationship(back_populates="location")
