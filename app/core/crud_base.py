# app/core/crud_base.py

"""
공통 CRUD(Create, Read, Update, Delete) 작업을 위한 기본 클래스 모듈입니다.
모든 도메인의 CRUD 클래스는 이 클래스를 상속받아 모델별 규칙을 추가합니다.
"""

import logging
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union

from fastapi import HTTPException, status
from pydantic import BaseModel
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=SQLModel)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    모든 CRUD 작업에 대한 기본 클래스를 정의합니다.
    """
    def __init__(self, model: Type[ModelType]):
        self.model = model

    async def get(self, db: AsyncSession, id: Any) -> Optional[ModelType]:
        """ID를 기준으로 단일 레코드를 조회합니다."""
        return await db.get(self.model, id)

    async def get_or_404(self, db: AsyncSession, id: Any) -> ModelType:
        """ID로 조회하고, 없으면 404 예외를 발생시킵니다."""
        db_obj = await db.get(self.model, id)
        if db_obj is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"{self.model.__name__} {id} not found."
            )
        return db_obj

    async def get_multi(
        self, db: AsyncSession, *, skip: int = 0, limit: int = 100, **kwargs: Any
    ) -> List[ModelType]:
        """
        여러 레코드를 조회합니다.
        값이 None이 아닌 키워드 인자는 동일 조건 필터로 적용됩니다.
        """
        query = select(self.model)
        for field, value in kwargs.items():
            if value is not None and hasattr(self.model, field):
                query = query.where(getattr(self.model, field) == value)

        query = query.order_by(self.model.id).offset(skip).limit(limit)
        result = await db.execute(query)
        return result.scalars().all()

    async def count(self, db: AsyncSession, **kwargs: Any) -> int:
        """조건에 맞는 레코드 수를 반환합니다."""
        query = select(func.count()).select_from(self.model)
        for field, value in kwargs.items():
            if value is not None and hasattr(self.model, field):
                query = query.where(getattr(self.model, field) == value)
        result = await db.execute(query)
        return result.scalar_one()

    async def get_by_attribute(
        self, db: AsyncSession, *, attribute: str, value: Any
    ) -> Optional[ModelType]:
        statement = select(self.model).where(getattr(self.model, attribute) == value)
        response = await db.execute(statement)
        return response.scalars().first()

    async def get_filtered(
        self,
        db: AsyncSession,
        *,
        filters: Optional[Dict[str, Any]] = None,  # 다중 속성 필터: {"attribute_name": "value"}
        order_by_field: Optional[str] = None,      # 정렬할 필드 (예: "tag_number")
        order_desc: bool = False,                  # 내림차순 정렬 여부
        skip: int = 0,
        limit: int = 100
    ) -> List[ModelType]:
        """
        다중 속성 필터와 정렬, 페이징을 지원하는 다중 조회.
        존재하지 않는 속성은 경고 로그를 남기고 무시합니다.
        """
        query = select(self.model)
        conditions = []

        if filters:
            for attribute, value in filters.items():
                if hasattr(self.model, attribute):
                    conditions.append(getattr(self.model, attribute) == value)
                else:
                    logger.warning("Model %s has no attribute '%s'", self.model.__name__, attribute)

        if conditions:
            query = query.where(*conditions)

        if order_by_field and hasattr(self.model, order_by_field):
            column = getattr(self.model, order_by_field)
            query = query.order_by(column.desc() if order_desc else column)
        else:
            if order_by_field:
                logger.warning("Model %s has no attribute '%s' for ordering.", self.model.__name__, order_by_field)
            query = query.order_by(self.model.id)

        query = query.offset(skip).limit(limit)
        result = await db.execute(query)
        return result.scalars().all()

    async def get_one_filtered(
        self, db: AsyncSession, *, filters: Optional[Dict[str, Any]] = None
    ) -> Optional[ModelType]:
        """
        조건을 만족하는 레코드 중 첫 번째(id 순)를 반환하며, 없으면 None을 반환합니다.
        """
        rows = await self.get_filtered(db, filters=filters, limit=1)
        return rows[0] if rows else None

    async def create(self, db: AsyncSession, *, obj_in: Union[CreateSchemaType, Dict[str, Any]]) -> ModelType:
        """
        새로운 레코드를 생성합니다.
        제약 조건 위반(IntegrityError)은 롤백 후 400 에러로 변환합니다.
        """
        db_obj = self.model.model_validate(obj_in)
        db.add(db_obj)
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            logger.error("IntegrityError while creating %s: %s", self.model.__name__, e)
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"{self.model.__name__} violates a database constraint."
            )
        await db.refresh(db_obj)
        return db_obj

    async def update(
        self, db: AsyncSession, *, db_obj: ModelType, obj_in: Union[UpdateSchemaType, Dict[str, Any]]
    ) -> ModelType:
        """
        기존 레코드를 업데이트합니다. (설정된 필드만 부분 업데이트)
        """
        if isinstance(obj_in, dict):
            update_data = obj_in
        else:
            update_data = obj_in.model_dump(exclude_unset=True)
        for key, value in update_data.items():
            setattr(db_obj, key, value)

        db.add(db_obj)
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            logger.error("IntegrityError while updating %s: %s", self.model.__name__, e)
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"{self.model.__name__} violates a database constraint."
            )
        await db.refresh(db_obj)
        return db_obj

    async def delete(self, db: AsyncSession, *, id: Any) -> Optional[ModelType]:
        """ID를 기준으로 레코드를 삭제합니다."""
        db_obj = await db.get(self.model, id)
        if db_obj:
            await db.delete(db_obj)
            await db.commit()
        return db_obj
