# app/domains/mst/routers.py

"""
'mst' 도메인 (PostgreSQL 'mst' 스키마)의 API 엔드포인트를 정의하는 모듈입니다.

고객, 아이템, 유닛, 멸균 지시계에 대한 CRUD 엔드포인트를 제공합니다.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.domains.mst import crud as mst_crud
from app.domains.mst import schemas as mst_schemas
from app.domains.mst.models import UnitStatus

router = APIRouter(
    tags=["Master Data Management (기준 정보 관리)"],
    responses={404: {"description": "Not found"}},
)


# =============================================================================
# 1. mst.customers 엔드포인트
# =============================================================================
@router.post("/customers/", response_model=mst_schemas.CustomerRead, status_code=status.HTTP_201_CREATED, summary="새 고객 생성")
async def create_customer(
    customer_create: mst_schemas.CustomerCreate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await mst_crud.customer.create(db=db, obj_in=customer_create)


@router.get("/customers/", response_model=List[mst_schemas.CustomerRead], summary="고객 목록 조회")
async def read_customers(
    is_active: Optional[bool] = None,
    skip: int = 0,
    limit: int = 100,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await mst_crud.customer.get_multi(db, skip=skip, limit=limit, is_active=is_active)


@router.get("/customers/{customer_id}", response_model=mst_schemas.CustomerRead, summary="특정 고객 조회")
async def read_customer(customer_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    db_customer = await mst_crud.customer.get(db, id=customer_id)
    if db_customer is None:
        raise HTTPException(status_code=404, detail="Customer not found")
    return db_customer


@router.put("/customers/{customer_id}", response_model=mst_schemas.CustomerRead, summary="고객 정보 업데이트")
async def update_customer(
    customer_id: int,
    customer_update: mst_schemas.CustomerUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    db_customer = await mst_crud.customer.get(db, id=customer_id)
    if db_customer is None:
        raise HTTPException(status_code=404, detail="Customer not found")
    return await mst_crud.customer.update(db=db, db_obj=db_customer, obj_in=customer_update)


@router.delete("/customers/{customer_id}", status_code=status.HTTP_204_NO_CONTENT, summary="고객 삭제")
async def delete_customer(customer_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    if await mst_crud.customer.get(db, id=customer_id) is None:
        raise HTTPException(status_code=404, detail="Customer not found")
    await mst_crud.customer.remove(db, id=customer_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# 2. mst.items 엔드포인트
# =============================================================================
@router.post("/items/", response_model=mst_schemas.ItemRead, status_code=status.HTTP_201_CREATED, summary="새 아이템 생성")
async def create_item(
    item_create: mst_schemas.ItemCreate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await mst_crud.item.create(db=db, obj_in=item_create)


@router.get("/items/", response_model=List[mst_schemas.ItemRead], summary="아이템 목록 조회")
async def read_items(
    customer_id: Optional[int] = None,
    skip: int = 0,
    limit: int = 100,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await mst_crud.item.get_multi(db, skip=skip, limit=limit, customer_id=customer_id)


@router.get("/items/{item_id}", response_model=mst_schemas.ItemRead, summary="특정 아이템 조회")
async def read_item(item_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    db_item = await mst_crud.item.get(db, id=item_id)
    if db_item is None:
        raise HTTPException(status_code=404, detail="Item not found")
    return db_item


@router.put("/items/{item_id}", response_model=mst_schemas.ItemRead, summary="아이템 정보 업데이트")
async def update_item(
    item_id: int,
    item_update: mst_schemas.ItemUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    db_item = await mst_crud.item.get(db, id=item_id)
    if db_item is None:
        raise HTTPException(status_code=404, detail="Item not found")
    return await mst_crud.item.update(db=db, db_obj=db_item, obj_in=item_update)


@router.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT, summary="아이템 삭제")
async def delete_item(item_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    if await mst_crud.item.get(db, id=item_id) is None:
        raise HTTPException(status_code=404, detail="Item not found")
    await mst_crud.item.remove(db, id=item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# 3. mst.units 엔드포인트
# =============================================================================
@router.post("/units/", response_model=mst_schemas.UnitRead, status_code=status.HTTP_201_CREATED, summary="새 유닛 등록")
async def create_unit(
    unit_create: mst_schemas.UnitCreate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """
    새로운 유닛(개별 기구 세트)을 등록합니다.
    - `unit_number`: 유닛 번호 (고유)
    - `item_id`, `customer_id`, `location_id`: 존재하지 않으면 404
    """
    return await mst_crud.unit.create(db=db, obj_in=unit_create)


@router.get("/units/", response_model=List[mst_schemas.UnitRead], summary="유닛 목록 조회")
async def read_units(
    status_filter: Optional[UnitStatus] = None,
    location_id: Optional[int] = None,
    customer_id: Optional[int] = None,
    skip: int = 0,
    limit: int = 100,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await mst_crud.unit.get_multi(
        db, skip=skip, limit=limit, status=status_filter, location_id=location_id, customer_id=customer_id
    )


@router.get("/units/{unit_id}", response_model=mst_schemas.UnitRead, summary="특정 유닛 조회")
async def read_unit(unit_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    db_unit = await mst_crud.unit.get(db, id=unit_id)
    if db_unit is None:
        raise HTTPException(status_code=404, detail="Unit not found")
    return db_unit


@router.put("/units/{unit_id}", response_model=mst_schemas.UnitRead, summary="유닛 정보 업데이트")
async def update_unit(
    unit_id: int,
    unit_update: mst_schemas.UnitUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    db_unit = await mst_crud.unit.get(db, id=unit_id)
    if db_unit is None:
        raise HTTPException(status_code=404, detail="Unit not found")
    return await mst_crud.unit.update(db=db, db_obj=db_unit, obj_in=unit_update)


@router.patch("/units/{unit_id}/status", response_model=mst_schemas.UnitRead, summary="유닛 상태 변경")
async def update_unit_status(
    unit_id: int,
    status_update: mst_schemas.UnitStatusUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    db_unit = await mst_crud.unit.get(db, id=unit_id)
    if db_unit is None:
        raise HTTPException(status_code=404, detail="Unit not found")
    return await mst_crud.unit.set_status(db, db_obj=db_unit, new_status=status_update.status)


@router.delete("/units/{unit_id}", status_code=status.HTTP_204_NO_CONTENT, summary="유닛 삭제")
async def delete_unit(unit_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    if await mst_crud.unit.get(db, id=unit_id) is None:
        raise HTTPException(status_code=404, detail="Unit not found")
    await mst_crud.unit.remove(db, id=unit_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# 4. mst.indicators 엔드포인트
# =============================================================================
@router.post("/indicators/", response_model=mst_schemas.IndicatorRead, status_code=status.HTTP_201_CREATED, summary="새 지시계 등록")
async def create_indicator(
    indicator_create: mst_schemas.IndicatorCreate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await mst_crud.indicator.create(db=db, obj_in=indicator_create)


@router.get("/indicators/", response_model=List[mst_schemas.IndicatorRead], summary="지시계 목록 조회")
async def read_indicators(
    skip: int = 0,
    limit: int = 100,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await mst_crud.indicator.get_multi(db, skip=skip, limit=limit)


@router.get("/indicators/{indicator_id}", response_model=mst_schemas.IndicatorRead, summary="특정 지시계 조회")
async def read_indicator(indicator_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    db_indicator = await mst_crud.indicator.get(db, id=indicator_id)
    if db_indicator is None:
        raise HTTPException(status_code=404, detail="Indicator not found")
    return db_indicator


@router.put("/indicators/{indicator_id}", response_model=mst_schemas.IndicatorRead, summary="지시계 정보 업데이트")
async def update_indicator(
    indicator_id: int,
    indicator_update: mst_schemas.IndicatorUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    db_indicator = await mst_crud.indicator.get(db, id=indicator_id)
    if db_indicator is None:
        raise HTTPException(status_code=404, detail="Indicator not found")
    return await mst_crud.indicator.update(db=db, db_obj=db_indicator, obj_in=indicator_update)


@router.delete("/indicators/{indicator_id}", status_code=status.HTTP_204_NO_CONTENT, summary="지시계 삭제")
async def delete_indicator(indicator_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    if await mst_crud.indicator.get(db, id=indicator_id) is None:
        raise HTTPException(status_code=404, detail="Indicator not found")
    await mst_crud.indicator.remove(db, id=indicator_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
