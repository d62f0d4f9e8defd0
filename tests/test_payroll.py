"""Tests for payroll endpoints."""

from uuid import uuid4

import pytest
from httpx import AsyncClient

PAYROLLS_URL = "/api/payrolls"


def payroll(**extra) -> dict:
    return {
        "employee_id": "EMP-DOC-1001",
        "employee_name": "Dr. Amara Silva",
        "gross_salary": 120000,
        "bonuses": 5000,
        "deductions": 2000,
        "payroll_month": "October",
        "payroll_year": 2026,
        "net_salary": 1,
        "epf": 1,
        **extra,
    }


async def create_payroll(client: AsyncClient, headers: dict, **extra) -> dict:
    response = await client.post(PAYROLLS_URL, json=payroll(**extra), headers=headers)
    assert response.status_code == 201, response.json()
    return response.json()["data"]


@pytest.mark.asyncio
async def test_contributions_are_computed(client: AsyncClient, finance_headers: dict) -> None:
    data = await create_payroll(client, finance_headers)

    assert data["epf"] == 9600.0
    assert data["etf"] == 3600.0
    assert data["net_salary"] == 109800.0
    assert data["status"] == "Pending"
    assert data["payroll_id"].startswith("PAY-202610-")


@pytest.mark.asyncio
async def test_month_is_case_insensitive(client: AsyncClient, finance_headers: dict) -> None:
    data = await create_payroll(client, finance_headers, payroll_month="october")
    assert data["payroll_month"] == "October"

    listed = await client.get(
        PAYROLLS_URL, params={"payroll_month": "OCTOBER"}, headers=finance_headers
    )
    assert listed.status_code == 200
    assert listed.json()["data"]["total"] == 1


@pytest.mark.asyncio
async def test_one_entry_per_employee_and_month(
    client: AsyncClient,
    finance_headers: dict,
) -> None:
    await create_payroll(client, finance_headers)

    duplicate = await client.post(PAYROLLS_URL, json=payroll(), headers=finance_headers)
    assert duplicate.status_code == 400
    assert duplicate.json()["message"] == (
        "Payroll already exists for this employee in the specified month and year"
    )

    next_month = await client.post(
        PAYROLLS_URL, json=payroll(payroll_month="November"), headers=finance_headers
    )
    assert next_month.status_code == 201


@pytest.mark.asyncio
async def test_payroll_id_is_unique(client: AsyncClient, finance_headers: dict) -> None:
    await create_payroll(client, finance_headers, payroll_id="PR-001")

    response = await client.post(
        PAYROLLS_URL,
        json=payroll(payroll_id="PR-001", employee_id="EMP-REC-2002"),
        headers=finance_headers,
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Payroll ID already exists"


@pytest.mark.asyncio
async def test_payroll_validation(client: AsyncClient, finance_headers: dict) -> None:
    for extra in (
        {"gross_salary": -1},
        {"payroll_month": "Smarch"},
        {"employee_name": "  "},
        {"payroll_year": 1999},
        {"deductions": 200000},
    ):
        response = await client.post(PAYROLLS_URL, json=payroll(**extra), headers=finance_headers)
        assert response.status_code == 400, extra


@pytest.mark.asyncio
async def test_update_recomputes_net_salary(client: AsyncClient, finance_headers: dict) -> None:
    created = await create_payroll(client, finance_headers)

    response = await client.put(
        f"{PAYROLLS_URL}/{created['id']}",
        json={"gross_salary": 100000, "net_salary": 5},
        headers=finance_headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["epf"] == 8000.0
    assert data["etf"] == 3000.0
    assert data["net_salary"] == 92000.0
    assert data["bonuses"] == 5000.0


@pytest.mark.asyncio
async def test_status_lifecycle(client: AsyncClient, finance_headers: dict) -> None:
    created = await create_payroll(client, finance_headers)
    url = f"{PAYROLLS_URL}/{created['id']}"

    skipped = await client.patch(f"{url}/status", json={"status": "Paid"}, headers=finance_headers)
    assert skipped.status_code == 400

    for status in ("Processed", "Paid"):
        response = await client.patch(
            f"{url}/status", json={"status": status}, headers=finance_headers
        )
        assert response.status_code == 200
        assert response.json()["data"]["status"] == status

    reopened = await client.patch(
        f"{url}/status", json={"status": "Pending"}, headers=finance_headers
    )
    assert reopened.status_code == 400

    edited = await client.put(url, json={"bonuses": 1}, headers=finance_headers)
    assert edited.status_code == 400
    assert edited.json()["message"] == "Cannot modify a Paid payroll"


@pytest.mark.asyncio
async def test_summary(client: AsyncClient, finance_headers: dict) -> None:
    first = await create_payroll(client, finance_headers)
    await create_payroll(
        client,
        finance_headers,
        employee_id="EMP-REC-2002",
        employee_name="Kamala Fernando",
        gross_salary=80000,
        bonuses=0,
        deductions=0,
    )
    await create_payroll(client, finance_headers, payroll_month="September")
    await client.patch(
        f"{PAYROLLS_URL}/{first['id']}/status",
        json={"status": "Processed"},
        headers=finance_headers,
    )

    response = await client.get(
        f"{PAYROLLS_URL}/summary",
        params={"payroll_month": "October", "payroll_year": 2026},
        headers=finance_headers,
    )
    assert response.status_code == 200
    summary = response.json()["data"]
    assert summary["total_employees"] == 2
    assert summary["total_gross_salary"] == 200000.0
    assert summary["total_epf"] == 16000.0
    assert summary["total_etf"] == 6000.0
    assert summary["total_net_salary"] == 181000.0
    assert summary["pending_payrolls"] == 1
    assert summary["processed_payrolls"] == 1
    assert summary["paid_payrolls"] == 0

    everything = await client.get(f"{PAYROLLS_URL}/summary", headers=finance_headers)
    assert everything.json()["data"]["total_employees"] == 3


@pytest.mark.asyncio
async def test_empty_summary(client: AsyncClient, finance_headers: dict) -> None:
    response = await client.get(f"{PAYROLLS_URL}/summary", headers=finance_headers)
    assert response.status_code == 200
    assert response.json()["data"]["total_employees"] == 0
    assert response.json()["data"]["total_net_salary"] == 0.0


@pytest.mark.asyncio
async def test_list_and_delete(client: AsyncClient, admin_headers: dict) -> None:
    first = await create_payroll(client, admin_headers)
    await create_payroll(client, admin_headers, employee_id="EMP-REC-2002")

    listed = await client.get(
        PAYROLLS_URL, params={"employee_id": "EMP-REC-2002"}, headers=admin_headers
    )
    assert listed.json()["data"]["total"] == 1

    url = f"{PAYROLLS_URL}/{first['id']}"
    assert (await client.delete(url, headers=admin_headers)).status_code == 200
    assert (await client.get(url, headers=admin_headers)).status_code == 404
    assert (await client.delete(url, headers=admin_headers)).status_code == 404


@pytest.mark.asyncio
async def test_missing_payroll(client: AsyncClient, finance_headers: dict) -> None:
    response = await client.get(f"{PAYROLLS_URL}/{uuid4()}", headers=finance_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Payroll record not found"


@pytest.mark.asyncio
async def test_payroll_needs_finance_role(
    client: AsyncClient,
    receptionist_headers: dict,
) -> None:
    response = await client.get(PAYROLLS_URL, headers=receptionist_headers)
    assert response.status_code == 403
