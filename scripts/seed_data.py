# flake8: noqa
# scripts/seed_data.py

import asyncio
import logging

import typer
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.database import create_db_and_tables, get_async_session_context
from app.domains.loc import crud as loc_crud
from app.domains.loc import schemas as loc_schemas
from app.domains.mst import crud as mst_crud
from app.domains.mst import schemas as mst_schemas
from app.domains.tag import crud as tag_crud
from app.domains.tag import schemas as tag_schemas
from app.domains.tag import services as tag_services
from app.domains.tag.models import TagType

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

cli = typer.Typer()


async def seed(db: AsyncSession) -> None:
    """
    개발/테스트용 기본 데이터를 생성합니다. 이미 있는 데이터는 건너뜁니다.
    """
    # 1. 장소
    locations = []
    for name, code in (("Test Location A", "LOC-A"), ("Test Location B", "LOC-B")):
        location = await loc_crud.location.get_by_code(db, code=code)
        if location is None:
            location = await loc_crud.location.create(db, obj_in=loc_schemas.LocationCreate(name=name, code=code))
            logger.info("Location created: %s", name)
        locations.append(location)

    # 2. 고객 / 아이템
    customer = await mst_crud.customer.get_by_attribute(db, attribute="code", value="CUST-001")
    if customer is None:
        customer = await mst_crud.customer.create(
            db, obj_in=mst_schemas.CustomerCreate(code="CUST-001", name="Test Customer")
        )
    item = await mst_crud.item.get_by_attribute(db, attribute="item_number", value="ITEM-001")
    if item is None:
        item = await mst_crud.item.create(
            db, obj_in=mst_schemas.ItemCreate(
                item_number="ITEM-001", name="Surgical Instrument Set", customer_id=customer.id
            )
        )

    # 3. 유닛
    units = []
    for unit_number in ("TEST-UNIT-001", "TEST-UNIT-002"):
        unit = await mst_crud.unit.get_by_attribute(db, attribute="unit_number", value=unit_number)
        if unit is None:
            unit = await mst_crud.unit.create(
                db, obj_in=mst_schemas.UnitCreate(
                    unit_number=unit_number, item_id=item.id, customer_id=customer.id, location_id=locations[0].id
                )
            )
            logger.info("Unit created: %s", unit_number)
        units.append(unit)

    # 4. 태그 (#1 ~ #3), 태그 #1 에 두 유닛을 담습니다.
    tags = []
    for tag_number in (1, 2, 3):
        tag = await tag_crud.tag.get_by_number(db, tag_number=tag_number, tag_type=TagType.BUNDLE)
        if tag is None:
            tag = await tag_services.create_tag(
                db, tag_schemas.TagCreate(tag_type=TagType.BUNDLE, location_id=locations[0].id, tag_number=tag_number)
            )
        tags.append(tag)

    for unit in units:
        if not await tag_services.is_unit_in_tag(db, tags[0].id, unit.id):
            await tag_services.insert_unit(db, tags[0].id, unit.id)
    logger.info("Seed data is ready.")


@cli.command()
def main(
    create_tables: bool = typer.Option(
        False, "--create-tables", help="시드 전에 스키마/테이블을 생성합니다. (개발용)"
    ),
):
    """
    Tag Management Service 개발용 기본 데이터를 생성합니다.
    """
    async def run_seed():
        if create_tables:
            await create_db_and_tables()
        async with get_async_session_context() as db:
            await seed(db)

    asyncio.run(run_seed())


if __name__ == "__main__":
    cli()
