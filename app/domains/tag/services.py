# app/domains/tag/services.py

"""
'tag' 도메인의 업무 규칙을 구현하는 서비스 모듈입니다.

- 자동 태그 예약/해제와 유형 간 충돌 처리
- 내용물 구성 상태(Empty/Units/Items/Mixed) 판정
- 유닛/아이템/하위 태그/지시계의 담기, 빼기, 이동
- 태그 계층(상위/하위/루트) 조회

규칙 위반은 HTTPException으로 알립니다. (404: 대상 없음, 400: 규칙 위반, 409: 중복 내용물)
"""

import logging
from datetime import datetime, UTC
from typing import Iterable, List, Optional, Set, Tuple

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlmodel.ext.asyncio.session import AsyncSession

from app.domains.loc import models as loc_models
from app.domains.mst import models as mst_models
from . import crud, schemas
from .models import (
    LifeStatus,
    Tag,
    TagContent,
    TagContentCondition,
    TagContentType,
    TagType,
    conflicting_tag_types,
)

logger = logging.getLogger(__name__)


# =============================================================================
# 1. 파생 속성 (표시 문자열, 내용물 상태)
# =============================================================================
def display_string(tag: Tag) -> str:
    """예: 'Bundle #12'"""
    return f"{TagType(tag.tag_type).display_name} #{tag.tag_number}"


def full_display_string(tag: Tag) -> str:
    """자동 태그이면 '[AUTO] ' 접두어를 붙입니다."""
    prefix = "[AUTO] " if tag.is_auto else ""
    return f"{prefix}{display_string(tag)}"


def derive_content_condition(content_types: Iterable[TagContentType]) -> TagContentCondition:
    """
    내용물 유형 목록으로 구성 상태를 판정합니다.
    하위 태그와 지시계는 판정에 포함하지 않으므로, 그것만 담긴 태그는 EMPTY 입니다.
    """
    kinds = set(content_types)
    has_units = TagContentType.UNIT in kinds
    has_items = TagContentType.ITEM in kinds
    if has_units and has_items:
        return TagContentCondition.MIXED
    if has_units:
        return TagContentCondition.UNITS
    if has_items:
        return TagContentCondition.ITEMS
    return TagContentCondition.EMPTY


def check_tag_validity(
    tag_type: TagType,
    is_empty: bool,
    condition: TagContentCondition,
    valid_types: Iterable[TagType],
    must_have_content: Iterable[TagType] = (),
    required_conditions: Iterable[TagContentCondition] = (),
) -> bool:
    """
    태그가 작업 대상 조건을 만족하는지 판정합니다.
    - 유형이 valid_types에 포함되어야 합니다.
    - 유형이 must_have_content에 있으면 비어 있으면 안 됩니다.
    - required_conditions가 주어지면 구성 상태가 그 안에 있어야 합니다.
    """
    if tag_type not in set(valid_types):
        return False
    if tag_type in set(must_have_content) and is_empty:
        return False
    required = set(required_conditions)
    if required and condition not in required:
        return False
    return True


async def get_content_condition(db: AsyncSession, tag_id: int) -> TagContentCondition:
    return derive_content_condition(await crud.tag_content.get_content_types(db, tag_id=tag_id))


async def is_tag_empty(db: AsyncSession, tag_id: int, ignore_split: bool = False) -> bool:
    """유닛/아이템/하위 태그/지시계 중 하나도 없으면 비어 있는 것으로 봅니다."""
    return await crud.tag_content.count_by_tag(db, tag_id=tag_id, ignore_split=ignore_split) == 0


async def get_tag_content_count(db: AsyncSession, tag_id: int) -> int:
    return await crud.tag_content.count_by_tag(db, tag_id=tag_id)


async def build_tag_detail(db: AsyncSession, tag: Tag) -> schemas.TagDetailRead:
    """태그와 내용물에서 파생된 값을 합쳐 상세 응답을 만듭니다."""
    content_count = await get_tag_content_count(db, tag.id)
    return schemas.TagDetailRead(
        **schemas.TagRead.model_validate(tag).model_dump(),
        display_string=display_string(tag),
        full_display_string=full_display_string(tag),
        is_empty=content_count == 0,
        content_condition=await get_content_condition(db, tag.id),
        content_count=content_count,
    )


# =============================================================================
# 2. 조회 헬퍼
# =============================================================================
async def get_tag_or_404(db: AsyncSession, tag_id: int) -> Tag:
    tag = await crud.tag.get(db, id=tag_id)
    if tag is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Tag {tag_id} not found.")
    return tag


async def get_tag_by_number(db: AsyncSession, tag_number: int, tag_type: TagType) -> Tag:
    tag = await crud.tag.get_by_number(db, tag_number=tag_number, tag_type=tag_type)
    if tag is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{tag_type.display_name} #{tag_number} not found."
        )
    return tag


async def _get_or_404(db: AsyncSession, model, id: int, label: str):
    obj = await db.get(model, id)
    if obj is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} {id} not found.")
    return obj


def _ensure_not_dead(tag: Tag) -> None:
    if tag.status == LifeStatus.DEAD:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{display_string(tag)} is dead and cannot receive contents."
        )


def _ensure_type(tag: Tag, expected: TagType) -> None:
    if tag.tag_type != expected:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{display_string(tag)} is not a {expected.display_name}."
        )


async def _commit(db: AsyncSession, *objs) -> None:
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.error("IntegrityError while saving tag changes: %s", e)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Tag change violates a database constraint.")
    for obj in objs:
        await db.refresh(obj)


# =============================================================================
# 3. 태그 생성/수정/삭제
# =============================================================================
async def create_tag(db: AsyncSession, tag_in: schemas.TagCreate) -> Tag:
    """
    태그를 생성합니다.
    번호를 생략하면 자동 채번하고, 아이템 보관 여부는 기구 컨테이너만 기본 True 입니다.
    """
    await _get_or_404(db, loc_models.Location, tag_in.location_id, "Location")

    tag_number = tag_in.tag_number
    if tag_number is None:
        tag_number = await crud.tag.next_tag_number(db, tag_type=tag_in.tag_type)
    elif await crud.tag.get_by_number(db, tag_number=tag_number, tag_type=tag_in.tag_type):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{tag_in.tag_type.display_name} #{tag_number} already exists."
        )

    holds_items = tag_in.holds_items
    if holds_items is None:
        holds_items = tag_in.tag_type == TagType.INSTRUMENT_CONTAINER

    tag = Tag(
        tag_number=tag_number,
        tag_type=tag_in.tag_type,
        status=LifeStatus.ACTIVE,
        location_id=tag_in.location_id,
        is_auto=tag_in.is_auto,
        holds_items=holds_items,
        created_by=tag_in.created_by,
    )
    db.add(tag)
    await _commit(db, tag)
    logger.info("Created %s at location %s", full_display_string(tag), tag.location_id)
    return tag


async def update_tag(db: AsyncSession, tag: Tag, tag_in: schemas.TagUpdate) -> Tag:
    update_data = tag_in.model_dump(exclude_unset=True)
    if update_data.get("location_id") is not None:
        await _get_or_404(db, loc_models.Location, update_data["location_id"], "Location")
    return await crud.tag.update(db, db_obj=tag, obj_in=update_data)


async def delete_tag(db: AsyncSession, tag_id: int) -> None:
    """
    태그를 삭제합니다. 내용물이 남아 있으면 거부합니다.
    다른 태그에 하위 태그로 담겨 있던 행도 함께 제거됩니다.
    """
    tag = await get_tag_or_404(db, tag_id)
    if not await is_tag_empty(db, tag_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Cannot delete {display_string(tag)} because it is not empty."
        )
    await crud.tag_content.delete_rows(db, await crud.tag_content.get_rows_referencing_tag(db, tag_id=tag_id))
    await db.delete(tag)
    await _commit(db)
    logger.info("Deleted %s", display_string(tag))


# =============================================================================
# 4. 자동 태그 예약
# =============================================================================
async def _release(db: AsyncSession, tags: Iterable[Tag]) -> int:
    count = 0
    for tag in tags:
        tag.has_auto_reservation = False
        db.add(tag)
        count += 1
        logger.info("Released auto reservation of %s", full_display_string(tag))
    return count


async def stop_auto_tag(db: AsyncSession, tag_type: TagType, location_id: Optional[int] = None) -> int:
    """
    해당 유형(및 위치)의 자동 태그 예약을 모두 해제하고 해제한 개수를 반환합니다.
    해제할 예약이 없으면 0을 반환합니다.
    """
    reserved = await crud.tag.get_auto_tags(db, tag_types=[tag_type], location_id=location_id, reserved=True)
    count = await _release(db, reserved)
    if count:
        await _commit(db, *reserved)
    return count


async def stop_all_auto_tags(db: AsyncSession, location_id: Optional[int] = None) -> int:
    """모든 자동 태그 예약을 해제합니다."""
    reserved = await crud.tag.get_auto_tags(db, location_id=location_id, reserved=True)
    count = await _release(db, reserved)
    if count:
        await _commit(db, *reserved)
    logger.info("Stopped %d auto tag reservation(s)", count)
    return count


async def _find_empty_auto_tag(db: AsyncSession, tag_type: TagType, location_id: int) -> Optional[Tag]:
    candidates = await crud.tag.get_auto_tags(
        db, tag_types=[tag_type], location_id=location_id, reserved=False
    )
    for candidate in candidates:
        if candidate.status == LifeStatus.ACTIVE and await is_tag_empty(db, candidate.id):
            return candidate
    return None


async def reserve_empty_auto_tag(db: AsyncSession, tag_type: TagType, location_id: int) -> Optional[Tag]:
    """위치에 있는 비어 있고 예약되지 않은 자동 태그를 찾아 예약합니다. 없으면 None."""
    tag = await _find_empty_auto_tag(db, tag_type, location_id)
    if tag is None:
        return None
    tag.has_auto_reservation = True
    db.add(tag)
    await _commit(db, tag)
    return tag


async def release_auto_tag_reservation(db: AsyncSession, tag_id: int) -> Tag:
    tag = await get_tag_or_404(db, tag_id)
    if not tag.is_auto:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{display_string(tag)} is not an auto tag."
        )
    await _release(db, [tag])
    await _commit(db, tag)
    return tag


def is_tag_type_licensed(tag_type: TagType) -> bool:
    # 라이선스 모듈이 없으므로 모든 유형을 허용합니다.
    return True


async def start_auto_tag(
    db: AsyncSession, tag_type: TagType, location_id: int, user_key_id: Optional[int] = None
) -> Tag:
    """
    자동 태그를 시작합니다.
    1. 같은 위치에서 충돌하는 유형의 예약을 해제합니다.
    2. 비어 있는 자동 태그가 있으면 재사용하고, 없으면 새 번호로 생성합니다.
    3. 태그를 예약 상태로 표시합니다.
    """
    if not is_tag_type_licensed(tag_type) or not tag_type.is_auto_tag:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{tag_type.display_name} cannot be used as an auto tag."
        )
    await _get_or_404(db, loc_models.Location, location_id, "Location")

    conflicts = await crud.tag.get_auto_tags(
        db, tag_types=conflicting_tag_types(tag_type), location_id=location_id, reserved=True
    )
    await _release(db, conflicts)
    await db.flush()

    tag = await _find_empty_auto_tag(db, tag_type, location_id)
    if tag is None:
        tag = Tag(
            tag_number=await crud.tag.next_tag_number(db, tag_type=tag_type),
            tag_type=tag_type,
            status=LifeStatus.ACTIVE,
            location_id=location_id,
            is_auto=True,
            holds_items=tag_type == TagType.INSTRUMENT_CONTAINER,
            created_by=user_key_id,
        )
    tag.has_auto_reservation = True
    db.add(tag)
    await _commit(db, tag, *conflicts)
    logger.info("Started %s at location %s", full_display_string(tag), location_id)
    return tag


# =============================================================================
# 5. 태그 계층 조회
# =============================================================================
async def get_parent_tag(db: AsyncSession, tag_id: int) -> Optional[Tag]:
    row = await crud.tag_content.get_parent_row(db, child_tag_id=tag_id)
    if row is None:
        return None
    return await crud.tag.get(db, id=row.parent_tag_id)


async def get_child_tags(db: AsyncSession, tag_id: int) -> List[Tag]:
    rows = await crud.tag_content.get_child_rows(db, tag_id=tag_id)
    return await crud.tag.get_by_ids(db, ids=[row.child_tag_id for row in rows])


async def get_descendant_tags(db: AsyncSession, tag_id: int) -> List[Tag]:
    """하위 태그를 재귀적으로 모두 반환합니다. (자기 자신 제외)"""
    descendants: List[Tag] = []
    visited: Set[int] = {tag_id}
    pending = [tag_id]
    while pending:
        for child in await get_child_tags(db, pending.pop(0)):
            if child.id not in visited:
                visited.add(child.id)
                descendants.append(child)
                pending.append(child.id)
    return descendants


async def get_ancestor_ids(db: AsyncSession, tag_id: int) -> List[int]:
    """상위 태그를 루트까지 따라가며 ID 목록을 반환합니다. (자기 자신 포함, 가까운 순)"""
    chain: List[int] = [tag_id]
    row = await crud.tag_content.get_parent_row(db, child_tag_id=tag_id)
    while row is not None and row.parent_tag_id not in chain:
        chain.append(row.parent_tag_id)
        row = await crud.tag_content.get_parent_row(db, child_tag_id=row.parent_tag_id)
    return chain


async def get_root_tag_id(db: AsyncSession, tag_id: int) -> int:
    await get_tag_or_404(db, tag_id)
    return (await get_ancestor_ids(db, tag_id))[-1]


async def get_all_contained_units(db: AsyncSession, tag_id: int) -> List[mst_models.Unit]:
    """하위 태그까지 재귀적으로 따라가며 담긴 유닛을 모두 반환합니다. (중복 제거)"""
    unit_ids: List[int] = []
    visited: Set[int] = set()
    pending = [tag_id]
    while pending:
        current = pending.pop(0)
        if current in visited:
            continue
        visited.add(current)
        for unit_id in await crud.tag_content.get_unit_ids_in_tag(db, tag_id=current):
            if unit_id not in unit_ids:
                unit_ids.append(unit_id)
        pending.extend(row.child_tag_id for row in await crud.tag_content.get_child_rows(db, tag_id=current))

    units = []
    for unit_id in unit_ids:
        unit = await db.get(mst_models.Unit, unit_id)
        if unit is not None:
            units.append(unit)
    return units


async def is_unit_in_tag(db: AsyncSession, tag_id: int, unit_id: int) -> bool:
    return await crud.tag_content.get_unit_in_tag(db, tag_id=tag_id, unit_id=unit_id) is not None


async def get_unit_tags(db: AsyncSession, unit_id: int) -> List[Tag]:
    rows = await crud.tag_content.get_unit_rows(db, unit_id=unit_id)
    return await crud.tag.get_by_ids(db, ids=sorted({row.parent_tag_id for row in rows}))


async def unit_is_split_to_tags(db: AsyncSession, unit_id: int) -> bool:
    """유닛이 두 개 이상의 태그에 담겨 있으면 True"""
    rows = await crud.tag_content.get_unit_rows(db, unit_id=unit_id)
    return len({row.parent_tag_id for row in rows}) > 1


async def is_valid_tag(
    db: AsyncSession,
    tag: Tag,
    valid_types: Iterable[TagType],
    must_have_content: Iterable[TagType] = (),
    required_conditions: Iterable[TagContentCondition] = (),
) -> bool:
    return check_tag_validity(
        TagType(tag.tag_type),
        await is_tag_empty(db, tag.id),
        await get_content_condition(db, tag.id),
        valid_types,
        must_have_content,
        required_conditions,
    )


# =============================================================================
# 6. 내용물 담기
# =============================================================================
def _log_move(hide_moves: bool, message: str, *args) -> None:
    logger.log(logging.DEBUG if hide_moves else logging.INFO, message, *args)


async def insert_unit(
    db: AsyncSession,
    tag_id: int,
    unit_id: int,
    time: Optional[datetime] = None,
    mark_as_split: bool = False,
    hide_moves: bool = False,
    user_key_id: Optional[int] = None,
) -> TagContent:
    """
    유닛을 태그에 담습니다.
    split이 아니면 다른 태그에서 먼저 제거(이동)하고, split이면 다른 태그에 그대로 둡니다.
    """
    tag = await get_tag_or_404(db, tag_id)
    _ensure_not_dead(tag)
    unit = await _get_or_404(db, mst_models.Unit, unit_id, "Unit")
    if await is_unit_in_tag(db, tag_id, unit_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Unit {unit.unit_number} is already in {display_string(tag)}."
        )

    if not mark_as_split:
        previous = await crud.tag_content.get_unit_rows(db, unit_id=unit_id, exclude_tag_id=tag_id)
        for row in previous:
            _log_move(hide_moves, "Unit %s moved from tag %s to tag %s", unit.unit_number, row.parent_tag_id, tag_id)
        await crud.tag_content.delete_rows(db, previous)

    scan_time = time or datetime.now(UTC)
    row = crud.tag_content.add_row(
        db,
        parent_tag_id=tag.id,
        content_type=TagContentType.UNIT,
        unit_id=unit.id,
        location_id=tag.location_id,
        is_split=mark_as_split,
        created_by=user_key_id,
    )
    unit.location_id = tag.location_id
    tag.location_time = scan_time
    db.add(unit)
    db.add(tag)
    await _commit(db, row, unit, tag)
    _log_move(hide_moves, "Unit %s inserted into %s", unit.unit_number, display_string(tag))
    return row


async def insert_item(
    db: AsyncSession,
    tag_id: int,
    item_id: int,
    serial_key_id: Optional[int] = None,
    lot_info_key_id: Optional[int] = None,
    quantity: int = 1,
    user_key_id: Optional[int] = None,
) -> TagContent:
    """
    아이템을 태그에 담습니다. 아이템 보관이 허용된 태그만 가능합니다.
    같은 아이템(item_id, serial_key_id)은 다른 태그에서 먼저 제거되며,
    같은 식별자(아이템, 시리얼, 로트)가 이미 있으면 수량을 더합니다.
    """
    tag = await get_tag_or_404(db, tag_id)
    _ensure_not_dead(tag)
    if not tag.holds_items:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{display_string(tag)} cannot hold items."
        )
    await _get_or_404(db, mst_models.Item, item_id, "Item")

    previous = await crud.tag_content.get_item_rows(
        db, item_id=item_id, serial_key_id=serial_key_id, exclude_tag_id=tag_id
    )
    await crud.tag_content.delete_rows(db, previous)

    identity = schemas.ItemIdentity(item_id=item_id, serial_key_id=serial_key_id, lot_info_key_id=lot_info_key_id)
    row = await crud.tag_content.get_item_in_tag(db, tag_id=tag_id, identity=identity)
    if row is not None:
        row.quantity += quantity
        db.add(row)
    else:
        row = crud.tag_content.add_row(
            db,
            parent_tag_id=tag.id,
            content_type=TagContentType.ITEM,
            item_id=item_id,
            serial_key_id=serial_key_id,
            lot_info_key_id=lot_info_key_id,
            quantity=quantity,
            location_id=tag.location_id,
            created_by=user_key_id,
        )
    tag.location_time = datetime.now(UTC)
    db.add(tag)
    await _commit(db, row, tag)
    return row


async def insert_tag(
    db: AsyncSession,
    target_tag_id: int,
    source_tag_id: int,
    hide_moves: bool = False,
    user_key_id: Optional[int] = None,
) -> TagContent:
    """
    source 태그를 target 태그 안에 담습니다.
    자기 자신이나 자신의 하위 태그 안으로는 담을 수 없으며, 기존 상위 태그에서는 빠집니다.
    """
    if target_tag_id == source_tag_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="A tag cannot be inserted into itself.")
    target = await get_tag_or_404(db, target_tag_id)
    source = await get_tag_or_404(db, source_tag_id)
    _ensure_not_dead(target)

    if source.id in await get_ancestor_ids(db, target.id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{display_string(target)} is already inside {display_string(source)}."
        )

    previous = await crud.tag_content.get_rows_referencing_tag(db, tag_id=source.id)
    for old in previous:
        if old.parent_tag_id == target.id:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"{display_string(source)} is already in {display_string(target)}."
            )
        _log_move(hide_moves, "%s moved from tag %s to %s", display_string(source), old.parent_tag_id, display_string(target))
    await crud.tag_content.delete_rows(db, previous)

    row = crud.tag_content.add_row(
        db,
        parent_tag_id=target.id,
        content_type=TagContentType.TAG,
        child_tag_id=source.id,
        location_id=target.location_id,
        created_by=user_key_id,
    )
    # 담긴 태그와 그 하위 태그 전체가 상위 태그의 위치를 따라갑니다.
    moved_tags = [source] + await get_descendant_tags(db, source.id)
    for moved in moved_tags:
        moved.location_id = target.location_id
        db.add(moved)
    target.location_time = datetime.now(UTC)
    db.add(target)
    await _commit(db, row, target, *moved_tags)
    _log_move(hide_moves, "%s inserted into %s", display_string(source), display_string(target))
    return row


async def insert_indicator(
    db: AsyncSession, tag_id: int, indicator_id: int, user_key_id: Optional[int] = None
) -> TagContent:
    """지시계를 태그에 담습니다. 다른 태그에 있던 지시계는 이동합니다."""
    tag = await get_tag_or_404(db, tag_id)
    _ensure_not_dead(tag)
    await _get_or_404(db, mst_models.Indicator, indicator_id, "Indicator")
    if await crud.tag_content.get_indicator_in_tag(db, tag_id=tag_id, indicator_id=indicator_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Indicator {indicator_id} is already in {display_string(tag)}."
        )
    await crud.tag_content.delete_rows(
        db, await crud.tag_content.get_indicator_rows(db, indicator_id=indicator_id, exclude_tag_id=tag_id)
    )
    row = crud.tag_content.add_row(
        db,
        parent_tag_id=tag.id,
        content_type=TagContentType.INDICATOR,
        indicator_id=indicator_id,
        location_id=tag.location_id,
        created_by=user_key_id,
    )
    await _commit(db, row)
    return row


# =============================================================================
# 7. 내용물 빼기
# =============================================================================
async def remove_unit(db: AsyncSession, tag_id: int, unit_id: int) -> None:
    await get_tag_or_404(db, tag_id)
    row = await crud.tag_content.get_unit_in_tag(db, tag_id=tag_id, unit_id=unit_id)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unit {unit_id} is not in tag {tag_id}.")
    await crud.tag_content.delete_rows(db, [row])
    await _commit(db)


async def remove_unit_from_all_tags(db: AsyncSession, unit_id: int) -> int:
    removed = await crud.tag_content.delete_rows(db, await crud.tag_content.get_unit_rows(db, unit_id=unit_id))
    await _commit(db)
    return removed


async def remove_item(db: AsyncSession, tag_id: int, identity: schemas.ItemIdentity) -> None:
    await get_tag_or_404(db, tag_id)
    row = await crud.tag_content.get_item_in_tag(db, tag_id=tag_id, identity=identity)
    if row is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=f"Item {identity.item_id} is not in tag {tag_id}."
        )
    await crud.tag_content.delete_rows(db, [row])
    await _commit(db)


async def remove_tag(db: AsyncSession, parent_tag_id: int, child_tag_id: int) -> None:
    await get_tag_or_404(db, parent_tag_id)
    row = await crud.tag_content.get_parent_row(db, child_tag_id=child_tag_id)
    if row is None or row.parent_tag_id != parent_tag_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=f"Tag {child_tag_id} is not in tag {parent_tag_id}."
        )
    await crud.tag_content.delete_rows(db, [row])
    await _commit(db)


async def remove_tag_from_parent(db: AsyncSession, child_tag_id: int) -> bool:
    """태그를 담고 있는 상위 태그에서 뺍니다. 상위 태그가 없으면 False."""
    rows = await crud.tag_content.get_rows_referencing_tag(db, tag_id=child_tag_id)
    if not rows:
        return False
    await crud.tag_content.delete_rows(db, rows)
    await _commit(db)
    return True


async def remove_indicator(db: AsyncSession, tag_id: int, indicator_id: int) -> None:
    await get_tag_or_404(db, tag_id)
    row = await crud.tag_content.get_indicator_in_tag(db, tag_id=tag_id, indicator_id=indicator_id)
    if row is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=f"Indicator {indicator_id} is not in tag {tag_id}."
        )
    await crud.tag_content.delete_rows(db, [row])
    await _commit(db)


async def remove_indicator_from_all_tags(db: AsyncSession, indicator_id: int) -> int:
    removed = await crud.tag_content.delete_rows(
        db, await crud.tag_content.get_indicator_rows(db, indicator_id=indicator_id)
    )
    await _commit(db)
    return removed


# =============================================================================
# 8. 이송 (transport) 이동
# =============================================================================
def _ensure_dispatchable(box: Tag, force_dispatch: bool) -> None:
    if box.status != LifeStatus.ACTIVE and not force_dispatch:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{display_string(box)} is not active. Use force_dispatch to override."
        )


async def move_unit_to_transport_box(
    db: AsyncSession, unit_id: int, box_id: int, force_dispatch: bool = False
) -> TagContent:
    box = await get_tag_or_404(db, box_id)
    _ensure_type(box, TagType.TRANSPORT_BOX)
    _ensure_dispatchable(box, force_dispatch)
    return await insert_unit(db, box_id, unit_id)


async def move_bundle_to_transport_box(
    db: AsyncSession, bundle_id: int, box_id: int, force_dispatch: bool = False
) -> TagContent:
    bundle = await get_tag_or_404(db, bundle_id)
    box = await get_tag_or_404(db, box_id)
    _ensure_type(bundle, TagType.BUNDLE)
    _ensure_type(box, TagType.TRANSPORT_BOX)
    _ensure_dispatchable(box, force_dispatch)
    return await insert_tag(db, box_id, bundle_id)


async def move_tag_to_tag(db: AsyncSession, source_tag_id: int, target_tag_id: int) -> TagContent:
    return await insert_tag(db, target_tag_id, source_tag_id)


async def move_tag_to_transport_tag(db: AsyncSession, source_tag_id: int, transport_tag_id: int) -> TagContent:
    transport = await get_tag_or_404(db, transport_tag_id)
    _ensure_type(transport, TagType.TRANSPORT)
    return await insert_tag(db, transport_tag_id, source_tag_id)


async def _find_same_content(db: AsyncSession, tag_id: int, row: TagContent) -> Optional[TagContent]:
    """tag_id 태그에 row와 같은 유닛/아이템 식별자/지시계가 있으면 그 행을 반환합니다."""
    if row.content_type == TagContentType.UNIT:
        return await crud.tag_content.get_unit_in_tag(db, tag_id=tag_id, unit_id=row.unit_id)
    if row.content_type == TagContentType.ITEM:
        identity = schemas.ItemIdentity(
            item_id=row.item_id, serial_key_id=row.serial_key_id, lot_info_key_id=row.lot_info_key_id
        )
        return await crud.tag_content.get_item_in_tag(db, tag_id=tag_id, identity=identity)
    if row.content_type == TagContentType.INDICATOR:
        return await crud.tag_content.get_indicator_in_tag(db, tag_id=tag_id, indicator_id=row.indicator_id)
    return None


async def move_tag_content_to_transport_tag(db: AsyncSession, source_tag_id: int, transport_tag_id: int) -> int:
    """
    source 태그의 내용물을 모두 이송 태그로 옮기고, 옮긴 행 수를 반환합니다.
    이송 태그에 이미 있는 유닛/지시계 행은 합쳐지고, 같은 식별자의 아이템은 수량을 더합니다.
    """
    if source_tag_id == transport_tag_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Source and transport tag are the same.")
    source = await get_tag_or_404(db, source_tag_id)
    transport = await get_tag_or_404(db, transport_tag_id)
    _ensure_type(transport, TagType.TRANSPORT)
    _ensure_not_dead(transport)

    rows = await crud.tag_content.get_by_tag(db, tag_id=source.id)
    blocked = set(await get_ancestor_ids(db, transport.id))
    if any(row.child_tag_id in blocked for row in rows if row.child_tag_id is not None):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{display_string(source)} contains {display_string(transport)} or one of its parents."
        )
    touched: List[TagContent] = []
    for row in rows:
        existing = await _find_same_content(db, transport.id, row)
        if existing is not None:
            # 이송 태그에 이미 같은 내용물이 있으면 한 행으로 합칩니다.
            if row.content_type == TagContentType.ITEM:
                existing.quantity += row.quantity
            elif row.content_type == TagContentType.UNIT:
                existing.is_split = existing.is_split and row.is_split
            db.add(existing)
            await db.delete(row)
            touched.append(existing)
            continue
        row.parent_tag_id = transport.id
        row.location_id = transport.location_id
        db.add(row)
        touched.append(row)
    transport.location_time = datetime.now(UTC)
    db.add(transport)
    await _commit(db, transport, *touched)
    logger.info("Moved %d content row(s) from %s to %s", len(rows), display_string(source), display_string(transport))
    return len(rows)


# =============================================================================
# 9. 해체 / 비우기
# =============================================================================
async def dissolve_tag(db: AsyncSession, tag_id: int) -> Tuple[List[int], int]:
    """
    태그의 내용물을 모두 제거합니다. (하위 태그는 루트 태그가 됩니다)
    이 태그에 split으로 담긴 유닛을 함께 나눠 가진 다른 태그도 같이 해체합니다.
    """
    tag = await get_tag_or_404(db, tag_id)
    split_units = await crud.tag_content.get_split_unit_ids(db, tag_id=tag.id)
    linked = await crud.tag_content.get_tag_ids_with_split_units(db, unit_ids=split_units, exclude_tag_id=tag.id)

    dissolved = [tag.id] + linked
    removed = 0
    for current in dissolved:
        removed += await crud.tag_content.delete_by_tag(db, tag_id=current)
    await _commit(db)
    logger.info("Dissolved tag(s) %s, removed %d content row(s)", dissolved, removed)
    return dissolved, removed


async def clear_tag_contents(db: AsyncSession, tag_id: int) -> int:
    await get_tag_or_404(db, tag_id)
    removed = await crud.tag_content.delete_by_tag(db, tag_id=tag_id)
    await _commit(db)
    return removed
