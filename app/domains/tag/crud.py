# app/domains/tag/crud.py

"""
'tag' 도메인 (태그 및 태그 내용물)의 데이터 접근 로직을 담당하는 모듈입니다.

여기의 내용물 조회/삭제 메서드는 커밋하지 않습니다.
하나의 업무 동작(예: 다른 태그에서 제거 후 담기)이 한 번에 커밋되도록
services.py에서 트랜잭션을 마무리합니다.
"""

from typing import Iterable, List, Optional, Sequence, Tuple
import logging

from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.crud_base import CRUDBase
from . import models as tag_models
from . import schemas as tag_schemas

logger = logging.getLogger(__name__)


# =============================================================================
# 1. 태그 (Tag) CRUD
# =============================================================================
class CRUDTag(CRUDBase[tag_models.Tag, tag_schemas.TagCreate, tag_schemas.TagUpdate]):
    def __init__(self):
        super().__init__(model=tag_models.Tag)

    async def get_by_number(
        self, db: AsyncSession, *, tag_number: int, tag_type: tag_models.TagType
    ) -> Optional[tag_models.Tag]:
        """유형과 번호로 태그를 조회합니다."""
        statement = select(self.model).where(
            self.model.tag_number == tag_number,
            self.model.tag_type == tag_type,
        )
        result = await db.execute(statement)
        return result.scalars().one_or_none()

    async def next_tag_number(self, db: AsyncSession, *, tag_type: tag_models.TagType) -> int:
        """해당 유형의 마지막 태그 번호 + 1 을 반환합니다."""
        statement = select(func.max(self.model.tag_number)).where(self.model.tag_type == tag_type)
        current_max = (await db.execute(statement)).scalar_one_or_none()
        return (current_max or 0) + 1

    async def get_page(
        self,
        db: AsyncSession,
        *,
        skip: int,
        limit: int,
        tag_type: Optional[tag_models.TagType] = None,
        location_id: Optional[int] = None,
        status: Optional[tag_models.LifeStatus] = None,
    ) -> Tuple[List[tag_models.Tag], int]:
        """필터 조건에 맞는 태그 한 페이지와 전체 건수를 반환합니다."""
        filters = {"tag_type": tag_type, "location_id": location_id, "status": status}
        total = await self.count(db, **filters)
        tags = await self.get_multi(db, skip=skip, limit=limit, **filters)
        return tags, total

    async def get_auto_tags(
        self,
        db: AsyncSession,
        *,
        tag_types: Optional[Iterable[tag_models.TagType]] = None,
        location_id: Optional[int] = None,
        reserved: Optional[bool] = None,
    ) -> List[tag_models.Tag]:
        """자동 태그를 유형/위치/예약 여부로 조회합니다. (태그 번호 순)"""
        statement = select(self.model).where(self.model.is_auto == True)  # noqa: E712
        if tag_types is not None:
            statement = statement.where(self.model.tag_type.in_(list(tag_types)))
        if location_id is not None:
            statement = statement.where(self.model.location_id == location_id)
        if reserved is not None:
            statement = statement.where(self.model.has_auto_reservation == reserved)
        statement = statement.order_by(self.model.tag_type, self.model.tag_number)
        result = await db.execute(statement)
        return result.scalars().all()

    async def get_by_ids(self, db: AsyncSession, *, ids: Sequence[int]) -> List[tag_models.Tag]:
        if not ids:
            return []
        statement = select(self.model).where(self.model.id.in_(list(ids))).order_by(self.model.id)
        result = await db.execute(statement)
        return result.scalars().all()

    async def get_root_tags(
        self,
        db: AsyncSession,
        *,
        tag_type: Optional[tag_models.TagType] = None,
        location_id: Optional[int] = None,
    ) -> List[tag_models.Tag]:
        """다른 태그에 담겨 있지 않은 태그 목록을 반환합니다."""
        nested = select(tag_models.TagContent.child_tag_id).where(
            tag_models.TagContent.child_tag_id.is_not(None)
        )
        statement = select(self.model).where(self.model.id.not_in(nested))
        if tag_type is not None:
            statement = statement.where(self.model.tag_type == tag_type)
        if location_id is not None:
            statement = statement.where(self.model.location_id == location_id)
        result = await db.execute(statement.order_by(self.model.id))
        return result.scalars().all()


tag = CRUDTag()


# =============================================================================
# 2. 태그 내용물 (TagContent) 데이터 접근
# =============================================================================
class CRUDTagContent(CRUDBase[tag_models.TagContent, tag_schemas.TagContentRead, tag_schemas.TagContentRead]):
    def __init__(self):
        super().__init__(model=tag_models.TagContent)

    async def _all(self, db: AsyncSession, *conditions) -> List[tag_models.TagContent]:
        statement = select(self.model).where(*conditions).order_by(self.model.id)
        result = await db.execute(statement)
        return result.scalars().all()

    async def get_by_tag(self, db: AsyncSession, *, tag_id: int) -> List[tag_models.TagContent]:
        """태그의 모든 내용물 행을 반환합니다."""
        return await self._all(db, self.model.parent_tag_id == tag_id)

    async def count_by_tag(self, db: AsyncSession, *, tag_id: int, ignore_split: bool = False) -> int:
        statement = select(func.count()).select_from(self.model).where(self.model.parent_tag_id == tag_id)
        if ignore_split:
            statement = statement.where(self.model.is_split == False)  # noqa: E712
        return (await db.execute(statement)).scalar_one()

    async def get_content_types(self, db: AsyncSession, *, tag_id: int) -> List[tag_models.TagContentType]:
        """태그에 존재하는 내용물 유형 목록 (중복 제거)"""
        statement = select(self.model.content_type).where(self.model.parent_tag_id == tag_id).distinct()
        result = await db.execute(statement)
        return [tag_models.TagContentType(value) for value in result.scalars().all()]

    # --- 유닛 ---
    async def get_unit_rows(
        self, db: AsyncSession, *, unit_id: int, exclude_tag_id: Optional[int] = None
    ) -> List[tag_models.TagContent]:
        conditions = [self.model.unit_id == unit_id]
        if exclude_tag_id is not None:
            conditions.append(self.model.parent_tag_id != exclude_tag_id)
        return await self._all(db, *conditions)

    async def get_unit_in_tag(
        self, db: AsyncSession, *, tag_id: int, unit_id: int
    ) -> Optional[tag_models.TagContent]:
        rows = await self._all(db, self.model.parent_tag_id == tag_id, self.model.unit_id == unit_id)
        return rows[0] if rows else None

    async def get_unit_ids_in_tag(self, db: AsyncSession, *, tag_id: int) -> List[int]:
        statement = select(self.model.unit_id).where(
            self.model.parent_tag_id == tag_id, self.model.unit_id.is_not(None)
        ).order_by(self.model.id)
        return list((await db.execute(statement)).scalars().all())

    # --- 아이템 ---
    async def get_item_rows(
        self,
        db: AsyncSession,
        *,
        item_id: int,
        serial_key_id: Optional[int],
        exclude_tag_id: Optional[int] = None,
    ) -> List[tag_models.TagContent]:
        conditions = [self.model.item_id == item_id, self.model.serial_key_id == serial_key_id]
        if exclude_tag_id is not None:
            conditions.append(self.model.parent_tag_id != exclude_tag_id)
        return await self._all(db, *conditions)

    async def get_item_in_tag(
        self, db: AsyncSession, *, tag_id: int, identity: tag_schemas.ItemIdentity
    ) -> Optional[tag_models.TagContent]:
        rows = await self._all(
            db,
            self.model.parent_tag_id == tag_id,
            self.model.item_id == identity.item_id,
            self.model.serial_key_id == identity.serial_key_id,
            self.model.lot_info_key_id == identity.lot_info_key_id,
        )
        return rows[0] if rows else None

    # --- 하위 태그 ---
    async def get_parent_row(self, db: AsyncSession, *, child_tag_id: int) -> Optional[tag_models.TagContent]:
        """하위 태그가 담긴 행을 반환합니다. (태그는 하나의 상위 태그에만 담깁니다)"""
        rows = await self._all(db, self.model.child_tag_id == child_tag_id)
        return rows[0] if rows else None

    async def get_child_rows(self, db: AsyncSession, *, tag_id: int) -> List[tag_models.TagContent]:
        return await self._all(db, self.model.parent_tag_id == tag_id, self.model.child_tag_id.is_not(None))

    async def get_rows_referencing_tag(self, db: AsyncSession, *, tag_id: int) -> List[tag_models.TagContent]:
        """태그가 하위 태그로 등장하는 모든 행"""
        return await self._all(db, self.model.child_tag_id == tag_id)

    # --- 지시계 ---
    async def get_indicator_rows(
        self, db: AsyncSession, *, indicator_id: int, exclude_tag_id: Optional[int] = None
    ) -> List[tag_models.TagContent]:
        conditions = [self.model.indicator_id == indicator_id]
        if exclude_tag_id is not None:
            conditions.append(self.model.parent_tag_id != exclude_tag_id)
        return await self._all(db, *conditions)

    async def get_indicator_in_tag(
        self, db: AsyncSession, *, tag_id: int, indicator_id: int
    ) -> Optional[tag_models.TagContent]:
        rows = await self._all(db, self.model.parent_tag_id == tag_id, self.model.indicator_id == indicator_id)
        return rows[0] if rows else None

    # --- split ---
    async def get_split_unit_ids(self, db: AsyncSession, *, tag_id: int) -> List[int]:
        statement = select(self.model.unit_id).where(
            self.model.parent_tag_id == tag_id,
            self.model.is_split == True,  # noqa: E712
            self.model.unit_id.is_not(None),
        )
        return list((await db.execute(statement)).scalars().all())

    async def get_tag_ids_with_split_units(
        self, db: AsyncSession, *, unit_ids: Sequence[int], exclude_tag_id: int
    ) -> List[int]:
        if not unit_ids:
            return []
        statement = select(self.model.parent_tag_id).where(
            self.model.unit_id.in_(list(unit_ids)),
            self.model.is_split == True,  # noqa: E712
            self.model.parent_tag_id != exclude_tag_id,
        ).distinct()
        return sorted((await db.execute(statement)).scalars().all())

    # --- 변경 (커밋하지 않음) ---
    def add_row(self, db: AsyncSession, **values) -> tag_models.TagContent:
        row = tag_models.TagContent(**values)
        db.add(row)
        return row

    async def delete_rows(self, db: AsyncSession, rows: Iterable[tag_models.TagContent]) -> int:
        count = 0
        for row in rows:
            await db.delete(row)
            count += 1
        return count

    async def delete_by_tag(self, db: AsyncSession, *, tag_id: int) -> int:
        return await self.delete_rows(db, await self.get_by_tag(db, tag_id=tag_id))


tag_content = CRUDTagContent()
