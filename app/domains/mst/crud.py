# app/domains/mst/crud.py

"""
'mst' 도메인 (기준 정보)과 관련된 CRUD 로직을 담당하는 모듈입니다.
"""

from typing import Any, Dict, Optional, Union
import logging

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from fastapi import HTTPException, status

from app.core.crud_base import CRUDBase
from app.domains.loc import models as loc_models
from app.domains.tag.models import TagContent
from . import models as mst_models
from . import schemas as mst_schemas

logger = logging.getLogger(__name__)


async def _ensure_exists(db: AsyncSession, model: Any, id: Optional[int], label: str) -> None:
    """외래 키로 지정된 레코드가 존재하는지 확인합니다."""
    if id is not None and await db.get(model, id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found.")


# =============================================================================
# 1. 고객 (Customer) CRUD
# =============================================================================
class CRUDCustomer(CRUDBase[mst_models.Customer, mst_schemas.CustomerCreate, mst_schemas.CustomerUpdate]):
    def __init__(self):
        super().__init__(model=mst_models.Customer)

    async def create(self, db: AsyncSession, *, obj_in: mst_schemas.CustomerCreate) -> mst_models.Customer:
        if await self.get_by_attribute(db, attribute="code", value=obj_in.code):
            raise HTTPException(status_code=400, detail="Customer with this code already exists.")
        return await super().create(db, obj_in=obj_in)

    async def remove(self, db: AsyncSession, *, id: int) -> Optional[mst_models.Customer]:
        """아이템이나 유닛이 참조하는 고객은 삭제할 수 없습니다."""
        for model in (mst_models.Item, mst_models.Unit):
            stmt = select(model).where(model.customer_id == id).limit(1)
            if (await db.execute(stmt)).first():
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Cannot delete this customer as it is referenced by {model.__tablename__}."
                )
        return await super().delete(db, id=id)


customer = CRUDCustomer()


# =============================================================================
# 2. 아이템 (Item) CRUD
# =============================================================================
class CRUDItem(CRUDBase[mst_models.Item, mst_schemas.ItemCreate, mst_schemas.ItemUpdate]):
    def __init__(self):
        super().__init__(model=mst_models.Item)

    async def create(self, db: AsyncSession, *, obj_in: mst_schemas.ItemCreate) -> mst_models.Item:
        if await self.get_by_attribute(db, attribute="item_number", value=obj_in.item_number):
            raise HTTPException(status_code=400, detail="Item with this number already exists.")
        await _ensure_exists(db, mst_models.Customer, obj_in.customer_id, "Customer")
        return await super().create(db, obj_in=obj_in)

    async def update(
        self, db: AsyncSession, *, db_obj: mst_models.Item, obj_in: Union[mst_schemas.ItemUpdate, Dict[str, Any]]
    ) -> mst_models.Item:
        update_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)
        await _ensure_exists(db, mst_models.Customer, update_data.get("customer_id"), "Customer")
        return await super().update(db, db_obj=db_obj, obj_in=update_data)

    async def remove(self, db: AsyncSession, *, id: int) -> Optional[mst_models.Item]:
        stmt = select(mst_models.Unit).where(mst_models.Unit.item_id == id).limit(1)
        if (await db.execute(stmt)).first():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot delete this item as units are registered for it."
            )
        stmt = select(TagContent).where(TagContent.item_id == id).limit(1)
        if (await db.execute(stmt)).first():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot delete this item while it is inside a tag."
            )
        return await super().delete(db, id=id)


item = CRUDItem()


# =============================================================================
# 3. 유닛 (Unit) CRUD
# =============================================================================
class CRUDUnit(CRUDBase[mst_models.Unit, mst_schemas.UnitCreate, mst_schemas.UnitUpdate]):
    def __init__(self):
        super().__init__(model=mst_models.Unit)

    async def _check_references(self, db: AsyncSession, data: Dict[str, Any]) -> None:
        await _ensure_exists(db, mst_models.Item, data.get("item_id"), "Item")
        await _ensure_exists(db, mst_models.Customer, data.get("customer_id"), "Customer")
        await _ensure_exists(db, loc_models.Location, data.get("location_id"), "Location")

    async def create(self, db: AsyncSession, *, obj_in: mst_schemas.UnitCreate) -> mst_models.Unit:
        if await self.get_by_attribute(db, attribute="unit_number", value=obj_in.unit_number):
            raise HTTPException(status_code=400, detail="Unit with this number already exists.")
        await self._check_references(db, obj_in.model_dump())
        return await super().create(db, obj_in=obj_in)

    async def update(
        self, db: AsyncSession, *, db_obj: mst_models.Unit, obj_in: Union[mst_schemas.UnitUpdate, Dict[str, Any]]
    ) -> mst_models.Unit:
        update_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)
        number = update_data.get("unit_number")
        if number and number != db_obj.unit_number:
            if await self.get_by_attribute(db, attribute="unit_number", value=number):
                raise HTTPException(status_code=400, detail="Unit with this number already exists.")
        await self._check_references(db, update_data)
        return await super().update(db, db_obj=db_obj, obj_in=update_data)

    async def set_status(
        self, db: AsyncSession, *, db_obj: mst_models.Unit, new_status: mst_models.UnitStatus
    ) -> mst_models.Unit:
        """유닛의 재처리 상태를 변경합니다."""
        logger.info(
            "Unit %s status %s -> %s", db_obj.unit_number,
            mst_models.UnitStatus(db_obj.status).name, new_status.name
        )
        return await super().update(db, db_obj=db_obj, obj_in={"status": new_status})

    async def remove(self, db: AsyncSession, *, id: int) -> Optional[mst_models.Unit]:
        """태그에 담겨 있는 유닛은 삭제할 수 없습니다."""
        stmt = select(TagContent).where(TagContent.unit_id == id).limit(1)
        if (await db.execute(stmt)).first():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot delete this unit while it is inside a tag."
            )
        return await super().delete(db, id=id)


unit = CRUDUnit()


# =============================================================================
# 4. 지시계 (Indicator) CRUD
# =============================================================================
class CRUDIndicator(CRUDBase[mst_models.Indicator, mst_schemas.IndicatorCreate, mst_schemas.IndicatorUpdate]):
    def __init__(self):
        super().__init__(model=mst_models.Indicator)

    async def create(self, db: AsyncSession, *, obj_in: mst_schemas.IndicatorCreate) -> mst_models.Indicator:
        if await self.get_by_attribute(db, attribute="indicator_number", value=obj_in.indicator_number):
            raise HTTPException(status_code=400, detail="Indicator with this number already exists.")
        return await super().create(db, obj_in=obj_in)

    async def remove(self, db: AsyncSession, *, id: int) -> Optional[mst_models.Indicator]:
        stmt = select(TagContent).where(TagContent.indicator_id == id).limit(1)
        if (await db.execute(stmt)).first():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot delete this indicator while it is inside a tag."
            )
        return await super().delete(db, id=id)


indicator = CRUDIndicator()
