# tests/domains/test_loc_n.py

"""
'loc' 도메인 (장소 관리) 관련 API 엔드포인트에 대한 통합 테스트를 정의하는 모듈입니다.

- `POST /loc/locations/` (생성, 코드/이름 중복)
- `GET /loc/locations/` (목록 조회, 상위 장소 필터링)
- `GET /loc/locations/{id}` / `GET /loc/locations/{id}/children`
- `PUT /loc/locations/{id}` (업데이트, 순환 구조 거부)
- `DELETE /loc/locations/{id}` (하위 장소/태그가 있으면 거부)
"""

import pytest
from httpx import AsyncClient
from sqlmodel.ext.asyncio.session import AsyncSession

from app.domains.loc import models as loc_models
from app.domains.tag import models as tag_models

BASE_URL = "/api/v1/loc/locations"


@pytest.mark.asyncio
async def test_create_location_success(client: AsyncClient):
    location_data = {"name": "Decontamination", "code": "DECON", "description": "Dirty side"}
    response = await client.post(f"{BASE_URL}/", json=location_data)

    assert response.status_code == 201
    created = response.json()
    assert created["name"] == location_data["name"]
    assert created["code"] == location_data["code"]
    assert created["is_active"] is True
    assert "id" in created


@pytest.mark.asyncio
async def test_create_location_duplicate_code(client: AsyncClient, test_location: loc_models.Location):
    response = await client.post(f"{BASE_URL}/", json={"name": "Another", "code": test_location.code})
    assert response.status_code == 400
    assert response.json()["detail"] == "Location with this code already exists."


@pytest.mark.asyncio
async def test_create_location_duplicate_name_under_same_parent(
    client: AsyncClient, test_location: loc_models.Location
):
    response = await client.post(f"{BASE_URL}/", json={"name": test_location.name, "code": "NEW"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_create_location_same_name_under_other_parent(
    client: AsyncClient, test_location: loc_models.Location
):
    """상위 장소가 다르면 같은 이름을 사용할 수 있습니다."""
    response = await client.post(
        f"{BASE_URL}/",
        json={"name": test_location.name, "code": "SUB-A", "parent_location_id": test_location.id},
    )
    assert response.status_code == 201
    assert response.json()["parent_location_id"] == test_location.id


@pytest.mark.asyncio
async def test_create_location_missing_parent(client: AsyncClient):
    response = await client.post(f"{BASE_URL}/", json={"name": "Orphan", "parent_location_id": 9999})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_read_locations_filtered_by_parent(
    client: AsyncClient, db_session: AsyncSession, test_location: loc_models.Location
):
    child = loc_models.Location(name="Child", code="CHILD", parent_location_id=test_location.id)
    db_session.add(child)
    await db_session.commit()

    response = await client.get(f"{BASE_URL}/", params={"parent_location_id": test_location.id})
    assert response.status_code == 200
    locations = response.json()
    assert [loc["code"] for loc in locations] == ["CHILD"]

    response = await client.get(f"{BASE_URL}/")
    assert len(response.json()) == 2


@pytest.mark.asyncio
async def test_read_location_and_children(
    client: AsyncClient, db_session: AsyncSession, test_location: loc_models.Location
):
    db_session.add(loc_models.Location(name="Shelf 1", code="S1", parent_location_id=test_location.id))
    db_session.add(loc_models.Location(name="Shelf 2", code="S2", parent_location_id=test_location.id))
    await db_session.commit()

    response = await client.get(f"{BASE_URL}/{test_location.id}")
    assert response.status_code == 200
    assert response.json()["code"] == "LOC-A"

    response = await client.get(f"{BASE_URL}/{test_location.id}/children")
    assert response.status_code == 200
    assert [loc["code"] for loc in response.json()] == ["S1", "S2"]


@pytest.mark.asyncio
async def test_read_location_not_found(client: AsyncClient):
    response = await client.get(f"{BASE_URL}/9999")
    assert response.status_code == 404
    assert response.json()["detail"] == "Location not found"


@pytest.mark.asyncio
async def test_update_location(client: AsyncClient, test_location: loc_models.Location):
    response = await client.put(f"{BASE_URL}/{test_location.id}", json={"description": "Clean side"})
    assert response.status_code == 200
    assert response.json()["description"] == "Clean side"
    assert response.json()["code"] == "LOC-A"


@pytest.mark.asyncio
async def test_update_location_rejects_cycle(
    client: AsyncClient, db_session: AsyncSession, test_location: loc_models.Location
):
    """자기 자신이나 하위 장소를 상위 장소로 지정할 수 없습니다."""
    child = loc_models.Location(name="Child", code="CHILD", parent_location_id=test_location.id)
    db_session.add(child)
    await db_session.commit()
    await db_session.refresh(child)

    response = await client.put(f"{BASE_URL}/{test_location.id}", json={"parent_location_id": child.id})
    assert response.status_code == 400

    response = await client.put(f"{BASE_URL}/{test_location.id}", json={"parent_location_id": test_location.id})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_update_location_duplicate_name_under_same_parent(
    client: AsyncClient, test_location: loc_models.Location, other_location: loc_models.Location
):
    response = await client.put(f"{BASE_URL}/{other_location.id}", json={"name": test_location.name})
    assert response.status_code == 400
    assert response.json()["detail"] == "Location with this name already exists under the same parent."

    # 같은 이름이라도 다른 상위 장소 아래로 옮기면 허용됩니다.
    response = await client.put(
        f"{BASE_URL}/{other_location.id}",
        json={"name": test_location.name, "parent_location_id": test_location.id},
    )
    assert response.status_code == 200
    assert response.json()["name"] == test_location.name


@pytest.mark.asyncio
async def test_delete_location(client: AsyncClient, db_session: AsyncSession):
    location = loc_models.Location(name="Temp", code="TMP")
    db_session.add(location)
    await db_session.commit()
    await db_session.refresh(location)

    response = await client.delete(f"{BASE_URL}/{location.id}")
    assert response.status_code == 204

    response = await client.get(f"{BASE_URL}/{location.id}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_location_with_children_rejected(
    client: AsyncClient, db_session: AsyncSession, test_location: loc_models.Location
):
    db_session.add(loc_models.Location(name="Child", code="CHILD", parent_location_id=test_location.id))
    await db_session.commit()

    response = await client.delete(f"{BASE_URL}/{test_location.id}")
    assert response.status_code == 400
    assert "child locations" in response.json()["detail"]


@pytest.mark.asyncio
async def test_delete_location_with_tags_rejected(
    client: AsyncClient, tag_factory, test_location: loc_models.Location
):
    await tag_factory(tag_models.TagType.BUNDLE)

    response = await client.delete(f"{BASE_URL}/{test_location.id}")
    assert response.status_code == 400
    assert "tags" in response.json()["detail"]


@pytest.mark.asyncio
async def test_delete_location_not_found(client: AsyncClient):
    response = await client.delete(f"{BASE_URL}/9999")
    assert response.status_code == 404
