# app/domains/tag/routers.py

"""
'tag' 도메인 (PostgreSQL 'tag' 스키마)의 API 엔드포인트를 정의하는 모듈입니다.

- 태그 CRUD 및 유형/번호 조회
- 자동 태그 시작/중지/예약
- 태그 내용물(유닛, 아이템, 하위 태그, 지시계) 담기/빼기/이동
- 태그 계층 및 상태 조회

업무 규칙은 services.py에 있으며, 라우터는 요청/응답 변환만 담당합니다.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.domains.mst import schemas as mst_schemas
from app.domains.tag import crud as tag_crud
from app.domains.tag import schemas as tag_schemas
from app.domains.tag import services as tag_services
from app.domains.tag.models import LifeStatus, TagType

router = APIRouter(
    tags=["Tag Management (태그 관리)"],
    responses={404: {"description": "Not found"}},
)


# =============================================================================
# 1. 태그 목록 / 고정 경로 조회
#    주의: /tags/{tag_id} 보다 먼저 선언해야 합니다.
# =============================================================================
@router.get("/tags/types", response_model=List[tag_schemas.TagTypeRead], summary="태그 유형 목록")
async def read_tag_types():
    """모든 태그 유형과 표시 이름, 자동 태그 가능 여부를 반환합니다."""
    return [
        tag_schemas.TagTypeRead(
            tag_type=tag_type, name=tag_type.name,
            display_name=tag_type.display_name, is_auto=tag_type.is_auto_tag
        )
        for tag_type in TagType
    ]


@router.get("/tags/", response_model=tag_schemas.TagPage, summary="태그 목록 조회 (페이지)")
async def read_tags(
    tag_type: Optional[TagType] = None,
    location_id: Optional[int] = None,
    status_filter: Optional[LifeStatus] = Query(None, alias="status"),
    page: deps.PageParams = Depends(deps.get_page_params),
    db: AsyncSession = Depends(deps.get_db_session),
):
    tags, total = await tag_crud.tag.get_page(
        db, skip=page.skip, limit=page.limit,
        tag_type=tag_type, location_id=location_id, status=status_filter,
    )
    return tag_schemas.TagPage(
        items=[tag_schemas.TagRead.model_validate(tag) for tag in tags],
        total=total, page=page.page, page_size=page.page_size,
    )


@router.get("/tags/auto/reserved", response_model=List[tag_schemas.TagRead], summary="예약된 자동 태그 목록")
async def read_reserved_auto_tags(
    location_id: Optional[int] = None,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await tag_crud.tag.get_auto_tags(db, location_id=location_id, reserved=True)


@router.get("/tags/roots", response_model=List[tag_schemas.TagRead], summary="루트 태그 목록")
async def read_root_tags(
    tag_type: Optional[TagType] = None,
    location_id: Optional[int] = None,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """다른 태그에 담겨 있지 않은 태그 목록을 조회합니다."""
    return await tag_crud.tag.get_root_tags(db, tag_type=tag_type, location_id=location_id)


@router.get(
    "/tags/number/{tag_number}/type/{tag_type}",
    response_model=tag_schemas.TagDetailRead, summary="번호와 유형으로 태그 조회"
)
async def read_tag_by_number(tag_number: int, tag_type: TagType, db: AsyncSession = Depends(deps.get_db_session)):
    tag = await tag_services.get_tag_by_number(db, tag_number, tag_type)
    return await tag_services.build_tag_detail(db, tag)


# =============================================================================
# 2. 자동 태그 엔드포인트
# =============================================================================
@router.post("/tags/auto/start", response_model=tag_schemas.TagDetailRead, summary="자동 태그 시작")
async def start_auto_tag(
    request: tag_schemas.StartAutoTagRequest,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """
    위치에서 자동 태그를 시작합니다.
    충돌하는 유형의 예약은 먼저 해제되고, 비어 있는 자동 태그가 있으면 재사용합니다.
    """
    tag = await tag_services.start_auto_tag(db, request.tag_type, request.location_id, request.user_key_id)
    return await tag_services.build_tag_detail(db, tag)


@router.post("/tags/auto/stop/{tag_type}", response_model=tag_schemas.StopAutoTagResult, summary="자동 태그 중지")
async def stop_auto_tag(
    tag_type: TagType,
    location_id: Optional[int] = None,
    db: AsyncSession = Depends(deps.get_db_session),
):
    stopped = await tag_services.stop_auto_tag(db, tag_type, location_id)
    if not stopped:
        raise HTTPException(status_code=404, detail=f"No reserved {tag_type.display_name} auto tag found.")
    return tag_schemas.StopAutoTagResult(tag_type=tag_type, stopped_count=stopped)


@router.post("/tags/auto/stop-all", response_model=tag_schemas.StopAutoTagResult, summary="모든 자동 태그 중지")
async def stop_all_auto_tags(
    location_id: Optional[int] = None,
    db: AsyncSession = Depends(deps.get_db_session),
):
    stopped = await tag_services.stop_all_auto_tags(db, location_id)
    return tag_schemas.StopAutoTagResult(stopped_count=stopped)


@router.post("/tags/auto/reserve/{tag_type}", response_model=tag_schemas.TagRead, summary="빈 자동 태그 예약")
async def reserve_empty_auto_tag(
    tag_type: TagType,
    location_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
):
    tag = await tag_services.reserve_empty_auto_tag(db, tag_type, location_id)
    if tag is None:
        raise HTTPException(status_code=404, detail=f"No empty {tag_type.display_name} auto tag available.")
    return tag


# =============================================================================
# 3. 태그 CRUD
# =============================================================================
@router.post("/tags/", response_model=tag_schemas.TagDetailRead, status_code=status.HTTP_201_CREATED, summary="새 태그 생성")
async def create_tag(
    tag_create: tag_schemas.TagCreate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """
    새로운 태그를 생성합니다.
    - `tag_number`: 생략하면 같은 유형의 다음 번호로 채번
    - `holds_items`: 생략하면 기구 컨테이너만 True
    """
    tag = await tag_services.create_tag(db, tag_create)
    return await tag_services.build_tag_detail(db, tag)


@router.get("/tags/{tag_id}", response_model=tag_schemas.TagDetailRead, summary="특정 태그 조회")
async def read_tag(tag_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    tag = await tag_services.get_tag_or_404(db, tag_id)
    return await tag_services.build_tag_detail(db, tag)


@router.put("/tags/{tag_id}", response_model=tag_schemas.TagDetailRead, summary="태그 정보 업데이트")
async def update_tag(
    tag_id: int,
    tag_update: tag_schemas.TagUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    tag = await tag_services.get_tag_or_404(db, tag_id)
    tag = await tag_services.update_tag(db, tag, tag_update)
    return await tag_services.build_tag_detail(db, tag)


@router.delete("/tags/{tag_id}", status_code=status.HTTP_204_NO_CONTENT, summary="태그 삭제")
async def delete_tag(tag_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    """내용물이 남아 있는 태그는 삭제할 수 없습니다."""
    await tag_services.delete_tag(db, tag_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/tags/{tag_id}/release", response_model=tag_schemas.TagRead, summary="자동 태그 예약 해제")
async def release_auto_tag_reservation(tag_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return await tag_services.release_auto_tag_reservation(db, tag_id)


# =============================================================================
# 4. 태그 내용물 담기 / 빼기
# =============================================================================
@router.get("/tags/{tag_id}/contents", response_model=List[tag_schemas.TagContentRead], summary="태그 내용물 목록")
async def read_tag_contents(tag_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    await tag_services.get_tag_or_404(db, tag_id)
    return await tag_crud.tag_content.get_by_tag(db, tag_id=tag_id)


@router.delete("/tags/{tag_id}/contents", response_model=tag_schemas.CountResult, summary="태그 비우기")
async def clear_tag_contents(tag_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return tag_schemas.CountResult(count=await tag_services.clear_tag_contents(db, tag_id))


@router.post(
    "/tags/{tag_id}/units", response_model=tag_schemas.TagContentRead,
    status_code=status.HTTP_201_CREATED, summary="유닛 담기"
)
async def insert_unit(
    tag_id: int,
    request: tag_schemas.InsertUnitRequest,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """
    유닛을 태그에 담습니다.
    `mark_as_split`이 False이면 다른 태그에 담겨 있던 유닛은 이 태그로 이동합니다.
    """
    return await tag_services.insert_unit(
        db, tag_id, request.unit_id, time=request.time, mark_as_split=request.mark_as_split,
        hide_moves=request.hide_moves, user_key_id=request.user_key_id,
    )


@router.delete("/tags/{tag_id}/units/{unit_id}", status_code=status.HTTP_204_NO_CONTENT, summary="유닛 빼기")
async def remove_unit(tag_id: int, unit_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    await tag_services.remove_unit(db, tag_id, unit_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/tags/{tag_id}/units/{unit_id}/exists", response_model=tag_schemas.BoolResult, summary="유닛 포함 여부")
async def is_unit_in_tag(tag_id: int, unit_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    await tag_services.get_tag_or_404(db, tag_id)
    return tag_schemas.BoolResult(result=await tag_services.is_unit_in_tag(db, tag_id, unit_id))


@router.get("/tags/{tag_id}/all-units", response_model=List[mst_schemas.UnitRead], summary="하위 태그 포함 전체 유닛")
async def read_all_contained_units(tag_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    await tag_services.get_tag_or_404(db, tag_id)
    return await tag_services.get_all_contained_units(db, tag_id)


@router.post(
    "/tags/{tag_id}/items", response_model=tag_schemas.TagContentRead,
    status_code=status.HTTP_201_CREATED, summary="아이템 담기"
)
async def insert_item(
    tag_id: int,
    request: tag_schemas.InsertItemRequest,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await tag_services.insert_item(
        db, tag_id, request.item_id, serial_key_id=request.serial_key_id,
        lot_info_key_id=request.lot_info_key_id, quantity=request.quantity, user_key_id=request.user_key_id,
    )


@router.delete("/tags/{tag_id}/items", status_code=status.HTTP_204_NO_CONTENT, summary="아이템 빼기")
async def remove_item(
    tag_id: int,
    item_id: int,
    serial_key_id: Optional[int] = None,
    lot_info_key_id: Optional[int] = None,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """(item_id, serial_key_id, lot_info_key_id)가 일치하는 아이템 행을 제거합니다."""
    identity = tag_schemas.ItemIdentity(item_id=item_id, serial_key_id=serial_key_id, lot_info_key_id=lot_info_key_id)
    await tag_services.remove_item(db, tag_id, identity)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/tags/{target_tag_id}/tags/{source_tag_id}", response_model=tag_schemas.TagContentRead,
    status_code=status.HTTP_201_CREATED, summary="하위 태그 담기"
)
async def insert_tag(
    target_tag_id: int,
    source_tag_id: int,
    hide_moves: bool = False,
    user_key_id: Optional[int] = None,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await tag_services.insert_tag(
        db, target_tag_id, source_tag_id, hide_moves=hide_moves, user_key_id=user_key_id
    )


@router.delete("/tags/{parent_tag_id}/tags/{child_tag_id}", status_code=status.HTTP_204_NO_CONTENT, summary="하위 태그 빼기")
async def remove_tag(parent_tag_id: int, child_tag_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    await tag_services.remove_tag(db, parent_tag_id, child_tag_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/tags/{tag_id}/indicators", response_model=tag_schemas.TagContentRead,
    status_code=status.HTTP_201_CREATED, summary="지시계 담기"
)
async def insert_indicator(
    tag_id: int,
    request: tag_schemas.InsertIndicatorRequest,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await tag_services.insert_indicator(db, tag_id, request.indicator_id, user_key_id=request.user_key_id)


@router.delete("/tags/{tag_id}/indicators/{indicator_id}", status_code=status.HTTP_204_NO_CONTENT, summary="지시계 빼기")
async def remove_indicator(tag_id: int, indicator_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    await tag_services.remove_indicator(db, tag_id, indicator_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/tags/{tag_id}/parent", status_code=status.HTTP_204_NO_CONTENT, summary="상위 태그에서 빼기")
async def remove_tag_from_parent(tag_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    await tag_services.get_tag_or_404(db, tag_id)
    if not await tag_services.remove_tag_from_parent(db, tag_id):
        raise HTTPException(status_code=404, detail=f"Tag {tag_id} has no parent tag.")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/units/{unit_id}/tags", response_model=List[tag_schemas.TagRead], summary="유닛이 담긴 태그 목록")
async def read_unit_tags(unit_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return await tag_services.get_unit_tags(db, unit_id)


@router.get("/units/{unit_id}/is-split", response_model=tag_schemas.BoolResult, summary="유닛 split 여부")
async def unit_is_split_to_tags(unit_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return tag_schemas.BoolResult(result=await tag_services.unit_is_split_to_tags(db, unit_id))


@router.delete("/units/{unit_id}/tags", response_model=tag_schemas.CountResult, summary="모든 태그에서 유닛 빼기")
async def remove_unit_from_all_tags(unit_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return tag_schemas.CountResult(count=await tag_services.remove_unit_from_all_tags(db, unit_id))


@router.delete("/indicators/{indicator_id}/tags", response_model=tag_schemas.CountResult, summary="모든 태그에서 지시계 빼기")
async def remove_indicator_from_all_tags(indicator_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return tag_schemas.CountResult(count=await tag_services.remove_indicator_from_all_tags(db, indicator_id))


# =============================================================================
# 5. 이동 엔드포인트
# =============================================================================
@router.post(
    "/transport-box/{box_id}/units/{unit_id}", response_model=tag_schemas.TagContentRead,
    summary="유닛을 이송 박스로 이동"
)
async def move_unit_to_transport_box(
    box_id: int,
    unit_id: int,
    force_dispatch: bool = False,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await tag_services.move_unit_to_transport_box(db, unit_id, box_id, force_dispatch=force_dispatch)


@router.post(
    "/transport-box/{box_id}/bundles/{bundle_id}", response_model=tag_schemas.TagContentRead,
    summary="번들을 이송 박스로 이동"
)
async def move_bundle_to_transport_box(
    box_id: int,
    bundle_id: int,
    force_dispatch: bool = False,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await tag_services.move_bundle_to_transport_box(db, bundle_id, box_id, force_dispatch=force_dispatch)


@router.post(
    "/tags/{source_tag_id}/move-to/{target_tag_id}", response_model=tag_schemas.TagContentRead,
    summary="태그를 다른 태그로 이동"
)
async def move_tag_to_tag(source_tag_id: int, target_tag_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return await tag_services.move_tag_to_tag(db, source_tag_id, target_tag_id)


@router.post(
    "/transport/{transport_tag_id}/tags/{source_tag_id}", response_model=tag_schemas.TagContentRead,
    summary="태그를 이송 태그로 이동"
)
async def move_tag_to_transport_tag(
    transport_tag_id: int, source_tag_id: int, db: AsyncSession = Depends(deps.get_db_session)
):
    return await tag_services.move_tag_to_transport_tag(db, source_tag_id, transport_tag_id)


@router.post(
    "/transport/{transport_tag_id}/contents/{source_tag_id}", response_model=tag_schemas.MoveContentsResult,
    summary="태그 내용물을 이송 태그로 이동"
)
async def move_tag_content_to_transport_tag(
    transport_tag_id: int, source_tag_id: int, db: AsyncSession = Depends(deps.get_db_session)
):
    moved = await tag_services.move_tag_content_to_transport_tag(db, source_tag_id, transport_tag_id)
    return tag_schemas.MoveContentsResult(
        source_tag_id=source_tag_id, target_tag_id=transport_tag_id, moved_count=moved
    )


# =============================================================================
# 6. 태그 상태 / 계층 조회
# =============================================================================
@router.get("/tags/{tag_id}/is-empty", response_model=tag_schemas.BoolResult, summary="태그가 비었는지 확인")
async def is_tag_empty(tag_id: int, ignore_split: bool = False, db: AsyncSession = Depends(deps.get_db_session)):
    await tag_services.get_tag_or_404(db, tag_id)
    return tag_schemas.BoolResult(result=await tag_services.is_tag_empty(db, tag_id, ignore_split=ignore_split))


@router.get("/tags/{tag_id}/content-count", response_model=tag_schemas.CountResult, summary="태그 내용물 개수")
async def get_tag_content_count(tag_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    await tag_services.get_tag_or_404(db, tag_id)
    return tag_schemas.CountResult(count=await tag_services.get_tag_content_count(db, tag_id))


@router.get("/tags/{tag_id}/parent", response_model=Optional[tag_schemas.TagRead], summary="상위 태그 조회")
async def read_parent_tag(tag_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    """상위 태그가 없으면 null을 반환합니다."""
    await tag_services.get_tag_or_404(db, tag_id)
    return await tag_services.get_parent_tag(db, tag_id)


@router.get("/tags/{tag_id}/children", response_model=List[tag_schemas.TagRead], summary="하위 태그 목록")
async def read_child_tags(tag_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    await tag_services.get_tag_or_404(db, tag_id)
    return await tag_services.get_child_tags(db, tag_id)


@router.get("/tags/{tag_id}/root", response_model=tag_schemas.RootTagRead, summary="루트 태그 ID 조회")
async def read_root_tag_id(tag_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return tag_schemas.RootTagRead(tag_id=tag_id, root_tag_id=await tag_services.get_root_tag_id(db, tag_id))


@router.get("/tags/{tag_id}/display-string", response_model=tag_schemas.DisplayStringRead, summary="태그 표시 문자열")
async def read_display_string(tag_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    tag = await tag_services.get_tag_or_404(db, tag_id)
    return tag_schemas.DisplayStringRead(
        tag_id=tag.id,
        display_string=tag_services.display_string(tag),
        full_display_string=tag_services.full_display_string(tag),
    )


@router.post("/tags/{tag_id}/validate", response_model=tag_schemas.TagValidationResult, summary="태그 작업 가능 여부 검증")
async def validate_tag(
    tag_id: int,
    request: tag_schemas.TagValidationRequest,
    db: AsyncSession = Depends(deps.get_db_session),
):
    tag = await tag_services.get_tag_or_404(db, tag_id)
    return tag_schemas.TagValidationResult(
        tag_id=tag.id,
        is_valid=await tag_services.is_valid_tag(
            db, tag, request.valid_types, request.must_have_content, request.required_conditions
        ),
        content_condition=await tag_services.get_content_condition(db, tag.id),
        is_empty=await tag_services.is_tag_empty(db, tag.id),
    )


# =============================================================================
# 7. 해체
# =============================================================================
@router.post("/tags/{tag_id}/dissolve", response_model=tag_schemas.DissolveResult, summary="태그 해체")
async def dissolve_tag(tag_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    """
    태그의 내용물을 모두 제거합니다. 하위 태그는 루트 태그가 되며,
    split 유닛을 나눠 가진 다른 태그도 함께 해체됩니다.
    """
    dissolved, removed = await tag_services.dissolve_tag(db, tag_id)
    return tag_schemas.DissolveResult(dissolved_tag_ids=dissolved, removed_count=removed)
