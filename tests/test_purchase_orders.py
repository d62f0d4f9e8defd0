"""Tests for purchase order endpoints."""

from datetime import date, timedelta
from uuid import uuid4

import pytest
from httpx import AsyncClient

ORDERS_URL = "/api/purchaseOrders"


def order_payload(supplier: dict, **extra) -> dict:
    return {
        "supplier_id": str(supplier["id"]),
        "items": [
            {"product": "Sterile Gauze 10x10", "quantity": 2, "unit_price": 10.25, "total_price": 999},
            {"product": "Nitrile Gloves M", "quantity": 3, "unit_price": 5},
        ],
        "expected_delivery": (date.today() + timedelta(days=7)).isoformat(),
        "notes": "Deliver to main store",
        "total_amount": 1,
        **extra,
    }


async def create_order(client: AsyncClient, headers: dict, supplier: dict) -> dict:
    response = await client.post(ORDERS_URL, json=order_payload(supplier), headers=headers)
    assert response.status_code == 201, response.json()
    return response.json()["data"]


@pytest.mark.asyncio
async def test_total_is_computed_from_items(
    client: AsyncClient,
    admin_headers: dict,
    test_supplier: dict,
) -> None:
    order = await create_order(client, admin_headers, test_supplier)

    assert order["total_amount"] == 35.5
    assert [i["total_price"] for i in order["items"]] == [20.5, 15.0]
    assert order["status"] == "pending"
    assert order["order_number"].startswith("PO-")
    assert order["supplier"]["name"] == test_supplier["name"]


@pytest.mark.asyncio
async def test_unknown_supplier(client: AsyncClient, admin_headers: dict) -> None:
    response = await client.post(
        ORDERS_URL, json=order_payload({"id": uuid4()}), headers=admin_headers
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_order_validation(
    client: AsyncClient,
    admin_headers: dict,
    test_supplier: dict,
) -> None:
    yesterday = (date.today() - timedelta(days=1)).isoformat()
    for extra in (
        {"items": []},
        {"expected_delivery": yesterday},
        {"items": [{"product": "Gauze", "quantity": 0, "unit_price": 1}]},
        {"items": [{"product": "Gauze", "quantity": 1, "unit_price": 0}]},
        {"notes": "x" * 501},
    ):
        response = await client.post(
            ORDERS_URL, json=order_payload(test_supplier, **extra), headers=admin_headers
        )
        assert response.status_code == 400, extra


@pytest.mark.asyncio
async def test_replacing_items_recomputes_total(
    client: AsyncClient,
    admin_headers: dict,
    test_supplier: dict,
) -> None:
    order = await create_order(client, admin_headers, test_supplier)

    response = await client.put(
        f"{ORDERS_URL}/{order['id']}",
        json={"items": [{"product": "Scalpel Blade #10", "quantity": 100, "unit_price": 0.35}]},
        headers=admin_headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["total_amount"] == 35.0
    assert len(data["items"]) == 1
    assert data["items"][0]["product"] == "Scalpel Blade #10"


@pytest.mark.asyncio
async def test_status_lifecycle(
    client: AsyncClient,
    admin_headers: dict,
    test_supplier: dict,
) -> None:
    order = await create_order(client, admin_headers, test_supplier)
    url = f"{ORDERS_URL}/{order['id']}"

    skipped = await client.put(url, json={"status": "received"}, headers=admin_headers)
    assert skipped.status_code == 400

    for status in ("approved", "ordered", "received"):
        response = await client.put(url, json={"status": status}, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["data"]["status"] == status

    assert response.json()["data"]["actual_delivery"] is not None

    cancelled = await client.put(url, json={"status": "cancelled"}, headers=admin_headers)
    assert cancelled.status_code == 400


@pytest.mark.asyncio
async def test_received_order_is_frozen(
    client: AsyncClient,
    admin_headers: dict,
    test_supplier: dict,
) -> None:
    order = await create_order(client, admin_headers, test_supplier)
    url = f"{ORDERS_URL}/{order['id']}"
    for status in ("approved", "ordered", "received"):
        await client.put(url, json={"status": status}, headers=admin_headers)

    for change in (
        {"items": [{"product": "Gauze", "quantity": 1, "unit_price": 1}]},
        {"expected_delivery": (date.today() + timedelta(days=3)).isoformat()},
    ):
        response = await client.put(url, json=change, headers=admin_headers)
        assert response.status_code == 400, change

    rated = await client.put(url, json={"rating": 4}, headers=admin_headers)
    assert rated.status_code == 200
    assert rated.json()["data"]["total_amount"] == 35.5
    assert len(rated.json()["data"]["items"]) == 2


@pytest.mark.asyncio
async def test_list_and_delete(
    client: AsyncClient,
    admin_headers: dict,
    test_supplier: dict,
) -> None:
    first = await create_order(client, admin_headers, test_supplier)
    await create_order(client, admin_headers, test_supplier)

    listed = await client.get(
        ORDERS_URL, params={"supplier_id": str(test_supplier["id"])}, headers=admin_headers
    )
    assert listed.json()["data"]["total"] == 2
    assert all(len(o["items"]) == 2 for o in listed.json()["data"]["items"])

    deleted = await client.delete(f"{ORDERS_URL}/{first['id']}", headers=admin_headers)
    assert deleted.status_code == 200

    missing = await client.get(f"{ORDERS_URL}/{first['id']}", headers=admin_headers)
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_purchase_orders_are_admin_only(
    client: AsyncClient,
    finance_headers: dict,
) -> None:
    response = await client.get(ORDERS_URL, headers=finance_headers)
    assert response.status_code == 403
