# app/domains/tag/models.py

"""
'tag' 도메인 (PostgreSQL 'tag' 스키마)의 Enum 및 데이터베이스 ORM 모델을 정의하는 모듈입니다.

- tags: 공정에서 추적되는 물리적/논리적 용기
- tag_contents: 상위 태그와 그 안에 담긴 대상(유닛/아이템/하위 태그/지시계)의 연결
"""

from typing import Dict, FrozenSet, Optional, List, TYPE_CHECKING
from datetime import datetime, UTC
from enum import IntEnum
from sqlmodel import Field, Relationship, SQLModel, Column
from sqlalchemy import CheckConstraint, ForeignKey, Index, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP

if TYPE_CHECKING:
    from app.domains.loc.models import Location


# =============================================================================
# 0. Enum 정의
# =============================================================================
class TagType(IntEnum):
    """
    태그 유형을 정의하는 정수형 Enum 클래스입니다.
    """
    PREP_TAG = 0
    BUNDLE = 1
    BASKET = 2
    STERI_LOAD = 3             # 멸균 로드
    WASH = 4
    WASH_LOAD = 5
    TRANSPORT = 6
    CASE_CART = 7
    TRANSPORT_BOX = 8
    INSTRUMENT_CONTAINER = 9

    @property
    def is_auto_tag(self) -> bool:
        """시스템이 자동으로 예약/해제할 수 있는 유형인지 여부"""
        return self not in (TagType.CASE_CART, TagType.INSTRUMENT_CONTAINER)

    @property
    def display_name(self) -> str:
        return TAG_TYPE_DISPLAY_NAMES[self]


TAG_TYPE_DISPLAY_NAMES: Dict[TagType, str] = {
    TagType.PREP_TAG: "Prep Tag",
    TagType.BUNDLE: "Bundle",
    TagType.BASKET: "Basket",
    TagType.STERI_LOAD: "Sterilization Load",
    TagType.WASH: "Wash",
    TagType.WASH_LOAD: "Wash Load",
    TagType.TRANSPORT: "Transport",
    TagType.CASE_CART: "Case Cart",
    TagType.TRANSPORT_BOX: "Transport Box",
    TagType.INSTRUMENT_CONTAINER: "Instrument Container",
}

# 자동 태그를 시작하기 전에 같은 위치에서 중지해야 하는 유형 (자기 자신은 항상 포함)
AUTO_TAG_CONFLICTS: Dict[TagType, FrozenSet[TagType]] = {
    TagType.BASKET: frozenset({TagType.BASKET, TagType.BUNDLE, TagType.TRANSPORT}),
    TagType.BUNDLE: frozenset({TagType.BUNDLE}),
    TagType.TRANSPORT: frozenset({TagType.BASKET, TagType.BUNDLE, TagType.TRANSPORT}),
    TagType.WASH: frozenset({TagType.WASH}),
    TagType.WASH_LOAD: frozenset({TagType.WASH, TagType.WASH_LOAD}),
    TagType.TRANSPORT_BOX: frozenset({TagType.BUNDLE, TagType.TRANSPORT_BOX, TagType.INSTRUMENT_CONTAINER}),
}


def conflicting_tag_types(tag_type: TagType) -> FrozenSet[TagType]:
    """tag_type의 자동 태그를 시작할 때 먼저 중지해야 할 유형 집합을 반환합니다."""
    return AUTO_TAG_CONFLICTS.get(tag_type, frozenset()) | {tag_type}


class TagContentCondition(IntEnum):
    """태그 내용물의 구성 상태 (유닛/아이템 기준)"""
    EMPTY = 0
    UNITS = 1
    ITEMS = 2
    MIXED = 3


class LifeStatus(IntEnum):
    ACTIVE = 0
    INACTIVE = 1
    DEAD = 2


class TagContentType(IntEnum):
    UNIT = 0
    ITEM = 1
    TAG = 2
    INDICATOR = 3


# =============================================================================
# 1. tag.tags 테이블 모델
# =============================================================================
class TagBase(SQLModel):
    """
    tag.tags 테이블의 기본 속성을 정의하는 SQLModel Base 클래스입니다.
    """
    id: Optional[int] = Field(default=None, primary_key=True, description="태그 고유 ID")
    tag_number: int = Field(description="태그 번호 (유형별 고유)")
    tag_type: TagType = Field(description="태그 유형")
    status: LifeStatus = Field(default=LifeStatus.ACTIVE, description="태그 수명 상태")
    location_id: int = Field(
        sa_column=Column(ForeignKey("loc.locations.id", onupdate="CASCADE", ondelete="RESTRICT"), nullable=False),
        description="현재 위치 ID (FK)"
    )
    location_time: Optional[datetime] = Field(
        default=None,
        sa_column=Column(TIMESTAMP(timezone=True)),
        description="마지막으로 내용물이 스캔된 시각"
    )
    is_auto: bool = Field(default=False, description="자동 태그 여부")
    has_auto_reservation: bool = Field(default=False, description="자동 태그 예약 여부")
    holds_items: bool = Field(default=False, description="아이템(비유닛 기구)을 담을 수 있는지 여부")
    created_by: Optional[int] = Field(default=None, description="생성 사용자 키")

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


class Tag(TagBase, table=True):
    """
    PostgreSQL의 tag.tags 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "tags"
    __table_args__ = (
        UniqueConstraint('tag_type', 'tag_number'),
        Index('ix_tags_auto_lookup', 'tag_type', 'location_id', 'is_auto'),
        {'schema': 'tag'}
    )

    location: Optional["Location"] = Relationship(back_populates="tags")
    # 이 태그가 상위 태그로서 가진 내용물 행
    contents: List["TagContent"] = Relationship(
        back_populates="parent_tag",
        sa_relationship_kwargs={
            "foreign_keys": "TagContent.parent_tag_id",
            "cascade": "all, delete-orphan",
        }
    )


# =============================================================================
# 2. tag.tag_contents 테이블 모델
# =============================================================================
class TagContentBase(SQLModel):
    """
    tag.tag_contents 테이블의 기본 속성을 정의하는 SQLModel Base 클래스입니다.
    한 행은 정확히 하나의 내용물(하위 태그, 유닛, 아이템, 지시계)을 가리킵니다.
    """
    id: Optional[int] = Field(default=None, primary_key=True, description="태그 내용물 고유 ID")
    parent_tag_id: int = Field(
        sa_column=Column(ForeignKey("tag.tags.id", onupdate="CASCADE", ondelete="CASCADE"), nullable=False, index=True),
        description="상위 태그 ID (FK)"
    )
    content_type: TagContentType = Field(description="내용물 유형")
    child_tag_id: Optional[int] = Field(
        default=None,
        sa_column=Column(ForeignKey("tag.tags.id", onupdate="CASCADE", ondelete="CASCADE"), index=True),
        description="하위 태그 ID (FK)"
    )
    unit_id: Optional[int] = Field(
        default=None,
        sa_column=Column(ForeignKey("mst.units.id", onupdate="CASCADE", ondelete="CASCADE"), index=True),
        description="유닛 ID (FK)"
    )
    item_id: Optional[int] = Field(
        default=None,
        sa_column=Column(ForeignKey("mst.items.id", onupdate="CASCADE", ondelete="CASCADE")),
        description="아이템 ID (FK)"
    )
    serial_key_id: Optional[int] = Field(default=None, description="아이템 시리얼 키")
    lot_info_key_id: Optional[int] = Field(default=None, description="아이템 로트 정보 키")
    quantity: int = Field(default=1, ge=1, description="아이템 수량")
    indicator_id: Optional[int] = Field(
        default=None,
        sa_column=Column(ForeignKey("mst.indicators.id", onupdate="CASCADE", ondelete="CASCADE")),
        description="지시계 ID (FK)"
    )
    location_id: Optional[int] = Field(
        default=None,
        sa_column=Column(ForeignKey("loc.locations.id", onupdate="CASCADE", ondelete="SET NULL")),
        description="내용물이 담긴 위치 ID (FK)"
    )
    is_split: bool = Field(default=False, description="여러 태그에 나뉘어 담긴(split) 유닛 여부")
    created_by: Optional[int] = Field(default=None, description="생성 사용자 키")

    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )


class TagContent(TagContentBase, table=True):
    """
    PostgreSQL의 tag.tag_contents 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "tag_contents"
    __table_args__ = (
        CheckConstraint(
            "(CASE WHEN child_tag_id IS NULL THEN 0 ELSE 1 END"
            " + CASE WHEN unit_id IS NULL THEN 0 ELSE 1 END"
            " + CASE WHEN item_id IS NULL THEN 0 ELSE 1 END"
            " + CASE WHEN indicator_id IS NULL THEN 0 ELSE 1 END) = 1",
            name="ck_tag_contents_single_target",
        ),
        CheckConstraint("parent_tag_id <> child_tag_id", name="ck_tag_contents_not_self"),
        {'schema': 'tag'}
    )

    parent_tag: Optional["Tag"] = Relationship(
        back_populates="contents",
        sa_relationship_kwargs={"foreign_keys": "TagContent.parent_tag_id"}
    )
