# app/domains/tag/schemas.py

"""
'tag' 도메인의 API 요청(생성, 업데이트, 내용물 조작) 및 응답(조회) 스키마를 정의하는 모듈입니다.
"""

from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field
from sqlmodel import SQLModel

from app.domains.tag.models import LifeStatus, TagContentCondition, TagContentType, TagType


# =============================================================================
# 1. 태그 유형 스키마
# =============================================================================
class TagTypeRead(BaseModel):
    """태그 유형 정보 (Enum 기반)"""
    tag_type: TagType
    name: str
    display_name: str
    is_auto: bool


# =============================================================================
# 2. tag.tags 스키마
# =============================================================================
class TagCreate(SQLModel):
    """
    새로운 태그를 생성하기 위한 스키마입니다.
    `tag_number`를 생략하면 같은 유형의 마지막 번호 + 1로 자동 채번합니다.
    `holds_items`를 생략하면 유형 기본값(기구 컨테이너만 True)을 사용합니다.
    """
    tag_type: TagType = Field(..., description="태그 유형")
    location_id: int = Field(..., description="태그 위치 ID")
    is_auto: bool = Field(False, description="자동 태그 여부")
    tag_number: Optional[int] = Field(None, ge=1, description="태그 번호 (생략 시 자동 채번)")
    holds_items: Optional[bool] = Field(None, description="아이템 보관 가능 여부")
    created_by: Optional[int] = Field(None, description="생성 사용자 키")


class TagUpdate(SQLModel):
    """태그의 상태/위치/아이템 보관 여부를 변경하는 스키마입니다."""
    status: Optional[LifeStatus] = None
    location_id: Optional[int] = None
    holds_items: Optional[bool] = None


class TagRead(SQLModel):
    """태그 기본 정보 응답 스키마"""
    id: int
    tag_number: int
    tag_type: TagType
    status: LifeStatus
    location_id: int
    location_time: Optional[datetime] = None
    is_auto: bool
    has_auto_reservation: bool
    holds_items: bool
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TagDetailRead(TagRead):
    """내용물에서 파생된 값을 포함한 태그 상세 응답 스키마"""
    display_string: str
    full_display_string: str
    is_empty: bool
    content_condition: TagContentCondition
    content_count: int


class TagPage(BaseModel):
    """페이지 단위 태그 목록 응답"""
    items: List[TagRead]
    total: int
    page: int
    page_size: int


# =============================================================================
# 3. 자동 태그 스키마
# =============================================================================
class StartAutoTagRequest(BaseModel):
    tag_type: TagType
    location_id: int = Field(..., description="자동 태그를 시작할 위치 ID")
    user_key_id: Optional[int] = Field(None, description="요청 사용자 키")


class StopAutoTagResult(BaseModel):
    tag_type: Optional[TagType] = None
    stopped_count: int


# =============================================================================
# 4. tag.tag_contents 스키마
# =============================================================================
class TagContentRead(SQLModel):
    id: int
    parent_tag_id: int
    content_type: TagContentType
    child_tag_id: Optional[int] = None
    unit_id: Optional[int] = None
    item_id: Optional[int] = None
    serial_key_id: Optional[int] = None
    lot_info_key_id: Optional[int] = None
    quantity: int = 1
    indicator_id: Optional[int] = None
    location_id: Optional[int] = None
    is_split: bool = False
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class InsertUnitRequest(BaseModel):
    unit_id: int
    time: Optional[datetime] = Field(None, description="스캔 시각 (생략 시 현재 시각)")
    hide_moves: bool = Field(False, description="이동 로그를 남기지 않음")
    mark_as_split: bool = Field(False, description="다른 태그에서 제거하지 않고 나눠 담음")
    user_key_id: Optional[int] = None


class InsertItemRequest(BaseModel):
    item_id: int
    serial_key_id: Optional[int] = None
    lot_info_key_id: Optional[int] = None
    quantity: int = Field(1, ge=1)
    user_key_id: Optional[int] = None


class ItemIdentity(BaseModel):
    """태그 아이템 식별자: (item_id, serial_key_id, lot_info_key_id)"""
    item_id: int
    serial_key_id: Optional[int] = None
    lot_info_key_id: Optional[int] = None


class InsertIndicatorRequest(BaseModel):
    indicator_id: int
    user_key_id: Optional[int] = None


class TagValidationRequest(BaseModel):
    valid_types: List[TagType] = Field(..., min_length=1)
    must_have_content: List[TagType] = Field(default_factory=list)
    required_conditions: List[TagContentCondition] = Field(default_factory=list)


class TagValidationResult(BaseModel):
    tag_id: int
    is_valid: bool
    content_condition: TagContentCondition
    is_empty: bool


# =============================================================================
# 5. 조회용 응답 스키마
# =============================================================================
class BoolResult(BaseModel):
    result: bool


class CountResult(BaseModel):
    count: int


class DisplayStringRead(BaseModel):
    tag_id: int
    display_string: str
    full_display_string: str


class RootTagRead(BaseModel):
    tag_id: int
    root_tag_id: int


class MoveContentsResult(BaseModel):
    source_tag_id: int
    target_tag_id: int
    moved_count: int


class DissolveResult(BaseModel):
    dissolved_tag_ids: List[int]
    removed_count: int
