# app/domains/loc/routers.py

"""
'loc' 도메인 (PostgreSQL 'loc' 스키마)의 API 엔드포인트를 정의하는 모듈입니다.

태그가 놓이는 장소(Location)의 계층 구조에 대한 CRUD 엔드포인트를 제공합니다.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.domains.loc import crud as loc_crud
from app.domains.loc import schemas as loc_schemas

router = APIRouter(
    tags=["Location Management (위치 관리)"],
    responses={404: {"description": "Not found"}},
)


# =============================================================================
# 1. loc.locations 엔드포인트 (장소 관리)
# =============================================================================
@router.post("/locations/", response_model=loc_schemas.LocationRead, status_code=status.HTTP_201_CREATED, summary="새 장소 생성")
async def create_location(
    location_create: loc_schemas.LocationCreate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """
    새로운 장소를 생성합니다.
    - `name`: 장소 명칭 (같은 상위 장소 아래에서 고유)
    - `code`: 장소 코드 (고유)
    - `parent_location_id`: 상위 장소 ID
    """
    return await loc_crud.location.create(db=db, obj_in=location_create)


@router.get("/locations/", response_model=List[loc_schemas.LocationRead], summary="장소 목록 조회")
async def read_locations(
    parent_location_id: Optional[int] = None,
    is_active: Optional[bool] = None,
    skip: int = 0,
    limit: int = 100,
    db: AsyncSession = Depends(deps.get_db_session)
):
    """
    장소 목록을 조회합니다. 상위 장소 ID와 사용 여부로 필터링할 수 있습니다.
    """
    return await loc_crud.location.get_multi(
        db, skip=skip, limit=limit, parent_location_id=parent_location_id, is_active=is_active
    )


@router.get("/locations/{location_id}", response_model=loc_schemas.LocationRead, summary="특정 장소 조회")
async def read_location(
    location_id: int,
    db: AsyncSession = Depends(deps.get_db_session)
):
    db_location = await loc_crud.location.get(db, id=location_id)
    if db_location is None:
        raise HTTPException(status_code=404, detail="Location not found")
    return db_location


@router.get("/locations/{location_id}/children", response_model=List[loc_schemas.LocationRead], summary="하위 장소 목록 조회")
async def read_location_children(
    location_id: int,
    db: AsyncSession = Depends(deps.get_db_session)
):
    """특정 장소의 직속 하위 장소들을 조회합니다."""
    if await loc_crud.location.get(db, id=location_id) is None:
        raise HTTPException(status_code=404, detail="Location not found")
    return await loc_crud.location.get_children(db, location_id=location_id)


@router.put("/locations/{location_id}", response_model=loc_schemas.LocationRead, summary="장소 정보 업데이트")
async def update_location(
    location_id: int,
    location_update: loc_schemas.LocationUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """
    특정 장소 정보를 업데이트합니다 (부분 업데이트 가능).
    상위 장소를 자기 자신이나 하위 장소로 바꾸면 400 에러가 발생합니다.
    """
    db_location = await loc_crud.location.get(db, id=location_id)
    if db_location is None:
        raise HTTPException(status_code=404, detail="Location not found")
    return await loc_crud.location.update(db=db, db_obj=db_location, obj_in=location_update)


@router.delete("/locations/{location_id}", status_code=status.HTTP_204_NO_CONTENT, summary="장소 삭제")
async def delete_location(
    location_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """
    특정 장소를 삭제합니다. 하위 장소나 태그가 있으면 삭제할 수 없습니다.
    """
    db_location = await loc_crud.location.get(db, id=location_id)
    if db_location is None:
        raise HTTPException(status_code=404, detail="Location not found")
    await loc_crud.location.remove(db, id=location_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
