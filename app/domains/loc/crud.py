# app/domains/loc/crud.py

"""
'loc' 도메인 (위치 정보)과 관련된 CRUD 로직을 담당하는 모듈입니다.
"""

from typing import List, Union, Dict, Any, Optional
import logging

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from fastapi import HTTPException, status

from app.core.crud_base import CRUDBase
from . import models as loc_models
from . import schemas as loc_schemas
from app.domains.tag.models import Tag as TagTag


logger = logging.getLogger(__name__)


# =============================================================================
# 1. 장소 (Location) CRUD
# =============================================================================
class CRUDLocation(
    CRUDBase[
        loc_models.Location,
        loc_schemas.LocationCreate,
        loc_schemas.LocationUpdate
    ]
):
    def __init__(self):
        super().__init__(model=loc_models.Location)

    async def get_by_code(self, db: AsyncSession, *, code: str) -> Optional[loc_models.Location]:
        """장소 코드로 조회합니다."""
        statement = select(self.model).where(self.model.code == code)
        result = await db.execute(statement)
        return result.scalars().one_or_none()

    async def get_by_name(
        self, db: AsyncSession, *, name: str, parent_location_id: Optional[int] = None
    ) -> Optional[loc_models.Location]:
        """같은 상위 장소 아래에서 이름으로 조회합니다."""
        statement = select(self.model).where(
            self.model.name == name,
            self.model.parent_location_id == parent_location_id,
        )
        result = await db.execute(statement)
        return result.scalars().first()

    async def get_children(self, db: AsyncSession, *, location_id: int) -> List[loc_models.Location]:
        """직속 하위 장소 목록을 반환합니다."""
        statement = (
            select(self.model)
            .where(self.model.parent_location_id == location_id)
            .order_by(self.model.id)
        )
        result = await db.execute(statement)
        return result.scalars().all()

    async def get_ancestor_ids(self, db: AsyncSession, *, location_id: int) -> List[int]:
        """상위 장소를 루트까지 따라가며 ID 목록을 반환합니다. (자기 자신 포함)"""
        ancestor_ids: List[int] = []
        current_id: Optional[int] = location_id
        while current_id is not None and current_id not in ancestor_ids:
            ancestor_ids.append(current_id)
            current = await db.get(self.model, current_id)
            current_id = current.parent_location_id if current else None
        return ancestor_ids

    async def _validate_parent(self, db: AsyncSession, *, parent_location_id: Optional[int], location_id: Optional[int] = None) -> None:
        if parent_location_id is None:
            return
        if await db.get(self.model, parent_location_id) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Parent location not found.")
        if location_id is not None:
            # 새 상위 장소의 조상 중에 자기 자신이 있으면 순환 구조가 됩니다.
            if location_id in await self.get_ancestor_ids(db, location_id=parent_location_id):
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="A location cannot be placed under itself or one of its descendants."
                )

    async def create(self, db: AsyncSession, *, obj_in: loc_schemas.LocationCreate) -> loc_models.Location:
        """코드/이름 중복 및 상위 장소를 확인하고 생성합니다."""
        if obj_in.code and await self.get_by_code(db, code=obj_in.code):
            raise HTTPException(status_code=400, detail="Location with this code already exists.")
        if await self.get_by_name(db, name=obj_in.name, parent_location_id=obj_in.parent_location_id):
            raise HTTPException(status_code=400, detail="Location with this name already exists under the same parent.")
        await self._validate_parent(db, parent_location_id=obj_in.parent_location_id)
        return await super().create(db, obj_in=obj_in)

    async def update(
        self,
        db: AsyncSession, *, db_obj: loc_models.Location, obj_in: Union[loc_schemas.LocationUpdate, Dict[str, Any]]
    ) -> loc_models.Location:
        """장소 정보를 업데이트합니다. 상위 장소 변경 시 순환 여부를 확인합니다."""
        update_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)
        if update_data.get("code") and update_data["code"] != db_obj.code:
            if await self.get_by_code(db, code=update_data["code"]):
                raise HTTPException(status_code=400, detail="Location with this code already exists.")
        name = update_data.get("name") or db_obj.name
        parent_location_id = update_data.get("parent_location_id", db_obj.parent_location_id)
        if name != db_obj.name or parent_location_id != db_obj.parent_location_id:
            existing = await self.get_by_name(db, name=name, parent_location_id=parent_location_id)
            if existing is not None and existing.id != db_obj.id:
                raise HTTPException(status_code=400, detail="Location with this name already exists under the same parent.")
        if "parent_location_id" in update_data:
            await self._validate_parent(
                db, parent_location_id=update_data["parent_location_id"], location_id=db_obj.id
            )
        return await super().update(db, db_obj=db_obj, obj_in=update_data)

    async def remove(self, db: AsyncSession, *, id: int) -> Optional[loc_models.Location]:
        """
        장소를 삭제합니다.
        단, 하위 장소나 이 장소에 있는 태그가 있으면 삭제를 거부합니다.
        """
        child_check_stmt = select(self.model).where(self.model.parent_location_id == id).limit(1)
        if (await db.execute(child_check_stmt)).first():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot delete this location as it has child locations."
            )

        tag_check_stmt = select(TagTag).where(TagTag.location_id == id).limit(1)
        if (await db.execute(tag_check_stmt)).first():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot delete this location as tags are assigned to it."
            )

        logger.info("Deleting location %s", id)
        return await super().delete(db, id=id)


location = CRUDLocation()
