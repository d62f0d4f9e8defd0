"""Tests for surgical inventory endpoints."""

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from healx.models.inventory import disposal_records, surgical_items


def item_url(item: dict, suffix: str = "") -> str:
    return f"/api/inventory/surgical-items/{item['id']}{suffix}"


@pytest.fixture
def item_payload() -> dict:
    return {
        "name": "Mayo Scissors",
        "category": "Cutting Instruments",
        "description": "Curved, 17 cm",
        "quantity": 40,
        "min_stock_level": 10,
        "price": 18.75,
        "supplier_name": "MedSupply Lanka",
        "supplier_email": "Orders@MedSupply.example.com",
        "location": {"room": "OR-2", "shelf": "B", "bin": "4"},
        "batch_number": "MS-2291",
    }


@pytest.mark.asyncio
async def test_create_item(
    client: AsyncClient,
    receptionist_headers: dict,
    item_payload: dict,
) -> None:
    response = await client.post(
        "/api/inventory/surgical-items",
        json=item_payload,
        headers=receptionist_headers,
    )
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["stock_status"] == "Available"
    assert data["price"] == 18.75
    assert data["location"] == {"room": "OR-2", "shelf": "B", "bin": "4"}
    assert data["supplier_email"] == "orders@medsupply.example.com"
    assert data["is_active"] is True


@pytest.mark.asyncio
async def test_create_item_validation(
    client: AsyncClient,
    receptionist_headers: dict,
    item_payload: dict,
) -> None:
    for field, value in (("quantity", -1), ("category", "Toys"), ("price", -5)):
        response = await client.post(
            "/api/inventory/surgical-items",
            json={**item_payload, field: value},
            headers=receptionist_headers,
        )
        assert response.status_code == 400, field


@pytest.mark.asyncio
async def test_inventory_requires_staff(
    client: AsyncClient,
    patient_headers: dict,
) -> None:
    response = await client.get("/api/inventory/surgical-items", headers=patient_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_get_item_reports_low_stock(
    client: AsyncClient,
    receptionist_headers: dict,
    test_item: dict,
) -> None:
    response = await client.get(item_url(test_item), headers=receptionist_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["quantity"] == 5
    assert data["stock_status"] == "Low Stock"


@pytest.mark.asyncio
async def test_list_filters_by_stock_status(
    client: AsyncClient,
    receptionist_headers: dict,
    test_item: dict,
    item_payload: dict,
) -> None:
    await client.post(
        "/api/inventory/surgical-items",
        json=item_payload,
        headers=receptionist_headers,
    )
    await client.post(
        "/api/inventory/surgical-items",
        json={**item_payload, "name": "Bone Screw 3.5mm", "category": "Implants", "quantity": 0},
        headers=receptionist_headers,
    )

    everything = await client.get("/api/inventory/surgical-items", headers=receptionist_headers)
    assert everything.json()["data"]["total"] == 3

    for stock_status, expected in (
        ("Low Stock", ["Silk Suture 2-0"]),
        ("Out of Stock", ["Bone Screw 3.5mm"]),
        ("Available", ["Mayo Scissors"]),
    ):
        response = await client.get(
            "/api/inventory/surgical-items",
            params={"stock_status": stock_status},
            headers=receptionist_headers,
        )
        assert [i["name"] for i in response.json()["data"]["items"]] == expected

    searched = await client.get(
        "/api/inventory/surgical-items",
        params={"search": "suture"},
        headers=receptionist_headers,
    )
    assert searched.json()["data"]["total"] == 1

    by_quantity = await client.get(
        "/api/inventory/surgical-items",
        params={"sort_by": "quantity", "sort_order": "desc"},
        headers=receptionist_headers,
    )
    quantities = [i["quantity"] for i in by_quantity.json()["data"]["items"]]
    assert quantities == [40, 5, 0]


@pytest.mark.asyncio
async def test_update_item_keeps_quantity(
    client: AsyncClient,
    receptionist_headers: dict,
    test_item: dict,
) -> None:
    response = await client.put(
        item_url(test_item),
        json={"min_stock_level": 3, "location": {"room": "Store", "shelf": "A"}, "quantity": 99},
        headers=receptionist_headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["quantity"] == 5
    assert data["min_stock_level"] == 3
    assert data["stock_status"] == "Available"
    assert data["location"] == {"room": "Store", "shelf": "A", "bin": None}


@pytest.mark.asyncio
async def test_delete_is_soft(
    client: AsyncClient,
    receptionist_headers: dict,
    test_item: dict,
    db_session: AsyncSession,
) -> None:
    response = await client.delete(item_url(test_item), headers=receptionist_headers)
    assert response.status_code == 200

    missing = await client.get(item_url(test_item), headers=receptionist_headers)
    assert missing.status_code == 404

    row = (
        await db_session.execute(
            select(surgical_items.c.is_active).where(surgical_items.c.id == test_item["id"])
        )
    ).one()
    assert row.is_active is False


@pytest.mark.asyncio
async def test_dispose_decrements_and_records(
    client: AsyncClient,
    receptionist_headers: dict,
    test_item: dict,
) -> None:
    response = await client.post(
        item_url(test_item, "/dispose"),
        json={"quantity_disposed": 3, "reason": "Expired", "disposed_by": "Nurse Perera"},
        headers=receptionist_headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["item"]["quantity"] == 2
    record = data["disposal_record"]
    assert record["previous_quantity"] == 5
    assert record["remaining_quantity"] == 2
    assert record["unit_price"] == 12.5
    assert record["estimated_value"] == 37.5

    history = await client.get(
        "/api/inventory/disposal-history",
        params={"item_id": str(test_item["id"])},
        headers=receptionist_headers,
    )
    assert history.json()["data"]["total"] == 1


@pytest.mark.asyncio
async def test_dispose_more_than_stock(
    client: AsyncClient,
    receptionist_headers: dict,
    test_item: dict,
    db_session: AsyncSession,
) -> None:
    response = await client.post(
        item_url(test_item, "/dispose"),
        json={"quantity_disposed": 6, "reason": "Damaged", "disposed_by": "Nurse Perera"},
        headers=receptionist_headers,
    )
    assert response.status_code == 400
    assert response.json()["error"] == "InsufficientStockException"

    item = await client.get(item_url(test_item), headers=receptionist_headers)
    assert item.json()["data"]["quantity"] == 5

    count = (
        await db_session.execute(select(func.count()).select_from(disposal_records))
    ).scalar_one()
    assert count == 0


@pytest.mark.asyncio
async def test_dispose_rejects_zero(
    client: AsyncClient,
    receptionist_headers: dict,
    test_item: dict,
) -> None:
    response = await client.post(
        item_url(test_item, "/dispose"),
        json={"quantity_disposed": 0, "reason": "Damaged", "disposed_by": "Nurse Perera"},
        headers=receptionist_headers,
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_dispose_rejects_blank_reason(
    client: AsyncClient,
    receptionist_headers: dict,
    test_item: dict,
) -> None:
    for body in (
        {"quantity_disposed": 1, "reason": "   ", "disposed_by": "Nurse Perera"},
        {"quantity_disposed": 1, "reason": "Expired", "disposed_by": " "},
    ):
        response = await client.post(
            item_url(test_item, "/dispose"), json=body, headers=receptionist_headers
        )
        assert response.status_code == 400, body

    item = await client.get(item_url(test_item), headers=receptionist_headers)
    assert item.json()["data"]["quantity"] == 5


@pytest.mark.asyncio
async def test_dispose_missing_item(
    client: AsyncClient,
    receptionist_headers: dict,
) -> None:
    response = await client.post(
        "/api/inventory/surgical-items/00000000-0000-0000-0000-000000000001/dispose",
        json={"quantity_disposed": 1, "reason": "Damaged", "disposed_by": "Nurse Perera"},
        headers=receptionist_headers,
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_stock_usage_and_restock(
    client: AsyncClient,
    receptionist_headers: dict,
    test_item: dict,
) -> None:
    url = item_url(test_item, "/update-stock")

    too_much = await client.post(
        url, json={"quantity": 6, "type": "usage"}, headers=receptionist_headers
    )
    assert too_much.status_code == 400

    used = await client.post(url, json={"quantity": 5, "type": "usage"}, headers=receptionist_headers)
    assert used.status_code == 200
    assert used.json()["data"]["quantity"] == 0
    assert used.json()["data"]["stock_status"] == "Out of Stock"

    restocked = await client.post(
        url, json={"quantity": 20, "type": "restock"}, headers=receptionist_headers
    )
    assert restocked.status_code == 200
    assert restocked.json()["data"]["quantity"] == 20
    assert restocked.json()["data"]["last_restocked"] is not None

    unknown = await client.post(
        url, json={"quantity": 1, "type": "transfer"}, headers=receptionist_headers
    )
    assert unknown.status_code == 400


@pytest.mark.asyncio
async def test_restock_need(
    client: AsyncClient,
    receptionist_headers: dict,
    test_item: dict,
) -> None:
    response = await client.get(item_url(test_item, "/restock-need"), headers=receptionist_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["needed"] is True
    assert data["urgency"] == "HIGH"
    assert data["suggested_quantity"] == 25
    assert data["item_name"] == test_item["name"]


@pytest.mark.asyncio
async def test_disposal_stats(
    client: AsyncClient,
    receptionist_headers: dict,
    test_item: dict,
) -> None:
    for quantity, reason in ((2, "Expired"), (1, "Expired"), (1, "Damaged")):
        response = await client.post(
            item_url(test_item, "/dispose"),
            json={"quantity_disposed": quantity, "reason": reason, "disposed_by": "Store keeper"},
            headers=receptionist_headers,
        )
        assert response.status_code == 200

    response = await client.get("/api/inventory/disposal-stats", headers=receptionist_headers)
    assert response.status_code == 200
    stats = response.json()["data"]
    assert stats["total_records"] == 3
    assert stats["total_quantity"] == 4
    assert stats["total_value"] == 50.0
    by_reason = {r["reason"]: r for r in stats["by_reason"]}
    assert by_reason["Expired"]["count"] == 2
    assert by_reason["Expired"]["quantity"] == 3
    assert by_reason["Damaged"]["value"] == 12.5
