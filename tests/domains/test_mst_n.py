# tests/domains/test_mst_n.py

"""
'mst' 도메인 (기준 정보) 관련 API 엔드포인트에 대한 통합 테스트를 정의하는 모듈입니다.

- 고객: 생성/코드 중복/참조 중 삭제 거부
- 아이템: 생성/존재하지 않는 고객 참조/태그에 담긴 아이템 삭제 거부
- 유닛: 생성/필터링/상태 변경(status_display)/태그에 담긴 유닛 삭제 거부
- 지시계: 생성/조회/삭제
"""

import pytest
from httpx import AsyncClient
from sqlmodel.ext.asyncio.session import AsyncSession

from app.domains.mst import models as mst_models
from app.domains.mst.models import UnitStatus
from app.domains.tag import models as tag_models

BASE_URL = "/api/v1/mst"


def test_unit_status_display_names():
    assert UnitStatus.NEW.display_name == "New"
    assert UnitStatus.IN_WASH.display_name == "In Wash"
    assert UnitStatus.IN_STERILIZATION.display_name == "In Sterilization"
    assert UnitStatus.MAINTENANCE.display_name == "Maintenance"


# --- 고객 ---
@pytest.mark.asyncio
async def test_create_and_read_customer(client: AsyncClient):
    response = await client.post(f"{BASE_URL}/customers/", json={"code": "HOSP-1", "name": "General Hospital"})
    assert response.status_code == 201
    customer_id = response.json()["id"]

    response = await client.get(f"{BASE_URL}/customers/{customer_id}")
    assert response.status_code == 200
    assert response.json()["name"] == "General Hospital"


@pytest.mark.asyncio
async def test_create_customer_duplicate_code(client: AsyncClient, test_customer: mst_models.Customer):
    response = await client.post(f"{BASE_URL}/customers/", json={"code": test_customer.code, "name": "Dup"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Customer with this code already exists."


@pytest.mark.asyncio
async def test_delete_customer_referenced_by_item_rejected(
    client: AsyncClient, test_customer: mst_models.Customer, test_item: mst_models.Item
):
    response = await client.delete(f"{BASE_URL}/customers/{test_customer.id}")
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_update_and_delete_customer(client: AsyncClient, test_customer: mst_models.Customer):
    response = await client.put(f"{BASE_URL}/customers/{test_customer.id}", json={"is_active": False})
    assert response.status_code == 200
    assert response.json()["is_active"] is False

    response = await client.delete(f"{BASE_URL}/customers/{test_customer.id}")
    assert response.status_code == 204

    response = await client.get(f"{BASE_URL}/customers/{test_customer.id}")
    assert response.status_code == 404


# --- 아이템 ---
@pytest.mark.asyncio
async def test_create_item_with_missing_customer(client: AsyncClient):
    response = await client.post(
        f"{BASE_URL}/items/", json={"item_number": "ITEM-X", "name": "Retractor", "customer_id": 9999}
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_read_items_filtered_by_customer(
    client: AsyncClient, db_session: AsyncSession, test_item: mst_models.Item
):
    db_session.add(mst_models.Item(item_number="ITEM-OTHER", name="Scissors"))
    await db_session.commit()

    response = await client.get(f"{BASE_URL}/items/", params={"customer_id": test_item.customer_id})
    assert response.status_code == 200
    assert [item["item_number"] for item in response.json()] == ["ITEM-001"]


@pytest.mark.asyncio
async def test_delete_item_with_units_rejected(
    client: AsyncClient, test_item: mst_models.Item, test_unit: mst_models.Unit
):
    response = await client.delete(f"{BASE_URL}/items/{test_item.id}")
    assert response.status_code == 400
    assert "units" in response.json()["detail"]


@pytest.mark.asyncio
async def test_delete_item_inside_tag_rejected(
    client: AsyncClient, db_session: AsyncSession, tag_factory, test_item: mst_models.Item
):
    tag = await tag_factory(tag_models.TagType.INSTRUMENT_CONTAINER, holds_items=True)
    db_session.add(tag_models.TagContent(
        parent_tag_id=tag.id, content_type=tag_models.TagContentType.ITEM, item_id=test_item.id
    ))
    await db_session.commit()

    response = await client.delete(f"{BASE_URL}/items/{test_item.id}")
    assert response.status_code == 400
    assert "inside a tag" in response.json()["detail"]


# --- 유닛 ---
@pytest.mark.asyncio
async def test_create_unit(client: AsyncClient, test_item: mst_models.Item, test_location):
    unit_data = {"unit_number": "U-100", "item_id": test_item.id, "location_id": test_location.id}
    response = await client.post(f"{BASE_URL}/units/", json=unit_data)
    assert response.status_code == 201
    created = response.json()
    assert created["status"] == UnitStatus.NEW
    assert created["status_display"] == "New"


@pytest.mark.asyncio
async def test_create_unit_duplicate_number(client: AsyncClient, test_unit: mst_models.Unit):
    response = await client.post(f"{BASE_URL}/units/", json={"unit_number": test_unit.unit_number})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_create_unit_with_missing_item(client: AsyncClient):
    response = await client.post(f"{BASE_URL}/units/", json={"unit_number": "U-200", "item_id": 9999})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_unit_status(client: AsyncClient, test_unit: mst_models.Unit):
    response = await client.patch(
        f"{BASE_URL}/units/{test_unit.id}/status", json={"status": UnitStatus.STERILE.value}
    )
    assert response.status_code == 200
    assert response.json()["status"] == UnitStatus.STERILE
    assert response.json()["status_display"] == "Sterile"


@pytest.mark.asyncio
async def test_read_units_filtered_by_status(
    client: AsyncClient, unit_factory, test_item: mst_models.Item
):
    await unit_factory("U-DIRTY", status=UnitStatus.DIRTY)
    await unit_factory("U-CLEAN", status=UnitStatus.CLEAN)

    response = await client.get(f"{BASE_URL}/units/", params={"status_filter": UnitStatus.CLEAN.value})
    assert response.status_code == 200
    assert [unit["unit_number"] for unit in response.json()] == ["U-CLEAN"]


@pytest.mark.asyncio
async def test_delete_unit_inside_tag_rejected(
    client: AsyncClient, db_session: AsyncSession, tag_factory, test_unit: mst_models.Unit
):
    tag = await tag_factory()
    db_session.add(tag_models.TagContent(
        parent_tag_id=tag.id, content_type=tag_models.TagContentType.UNIT, unit_id=test_unit.id
    ))
    await db_session.commit()

    response = await client.delete(f"{BASE_URL}/units/{test_unit.id}")
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_delete_unit(client: AsyncClient, test_unit: mst_models.Unit):
    response = await client.delete(f"{BASE_URL}/units/{test_unit.id}")
    assert response.status_code == 204


# --- 지시계 ---
@pytest.mark.asyncio
async def test_indicator_crud(client: AsyncClient):
    response = await client.post(
        f"{BASE_URL}/indicators/",
        json={"indicator_number": "BI-1", "name": "Biological Indicator", "indicator_type": "BI"},
    )
    assert response.status_code == 201
    indicator_id = response.json()["id"]

    response = await client.post(f"{BASE_URL}/indicators/", json={"indicator_number": "BI-1", "name": "Dup"})
    assert response.status_code == 400

    response = await client.put(f"{BASE_URL}/indicators/{indicator_id}", json={"lot_number": "LOT-9"})
    assert response.status_code == 200
    assert response.json()["lot_number"] == "LOT-9"

    response = await client.get(f"{BASE_URL}/indicators/")
    assert len(response.json()) == 1

    response = await client.delete(f"{BASE_URL}/indicators/{indicator_id}")
    assert response.status_code == 204
