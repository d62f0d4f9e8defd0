"""Tests for payment (invoice) endpoints."""

from uuid import uuid4

import pytest
from httpx import AsyncClient

PAYMENTS_URL = "/api/financialPay/payments"


def invoice(**extra) -> dict:
    return {
        "patient_name": "Nimal Perera",
        "doctor_name": "Dr. Amara Silva",
        "department": "Cardiology",
        "services": [
            {"service_type": "Consultation", "quantity": 1, "unit_price": 2500, "subtotal": 1},
            {"service_type": "ECG", "description": "12 lead", "quantity": 2, "unit_price": 1200.5},
        ],
        "discount": 400,
        "tax": 100,
        "amount_paid": 3000,
        "payment_method": "cash",
        "total_amount": 1,
        **extra,
    }


async def create_invoice(client: AsyncClient, headers: dict, **extra) -> dict:
    response = await client.post(PAYMENTS_URL, json=invoice(**extra), headers=headers)
    assert response.status_code == 201, response.json()
    return response.json()["data"]


@pytest.mark.asyncio
async def test_totals_are_computed(client: AsyncClient, finance_headers: dict) -> None:
    data = await create_invoice(client, finance_headers)

    assert [s["subtotal"] for s in data["services"]] == [2500.0, 2401.0]
    assert data["subtotal"] == 4901.0
    assert data["total_amount"] == 4601.0
    assert data["balance"] == 1601.0
    assert data["payment_method"] == "Cash"
    assert data["invoice_number"].startswith("INV-")
    assert data["hospital_name"] == "HealX Healthcare Center"


@pytest.mark.asyncio
async def test_amount_rules(client: AsyncClient, finance_headers: dict) -> None:
    overpaid = await client.post(
        PAYMENTS_URL, json=invoice(amount_paid=5000), headers=finance_headers
    )
    assert overpaid.status_code == 400
    assert overpaid.json()["message"] == "Amount paid cannot exceed the total amount"

    discounted = await client.post(
        PAYMENTS_URL, json=invoice(discount=10000, amount_paid=0), headers=finance_headers
    )
    assert discounted.status_code == 400

    unknown_method = await client.post(
        PAYMENTS_URL, json=invoice(payment_method="cheque"), headers=finance_headers
    )
    assert unknown_method.status_code == 400

    no_services = await client.post(PAYMENTS_URL, json=invoice(services=[]), headers=finance_headers)
    assert no_services.status_code == 400


@pytest.mark.asyncio
async def test_duplicate_invoice_number(client: AsyncClient, finance_headers: dict) -> None:
    await create_invoice(client, finance_headers, invoice_number="INV-20261019-0001")

    response = await client.post(
        PAYMENTS_URL, json=invoice(invoice_number="INV-20261019-0001"), headers=finance_headers
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Invoice number already exists"


@pytest.mark.asyncio
async def test_references_must_exist(
    client: AsyncClient,
    finance_headers: dict,
    test_patient: dict,
    test_doctor: dict,
) -> None:
    linked = await create_invoice(
        client,
        finance_headers,
        patient_id=str(test_patient["id"]),
        doctor_id=str(test_doctor["id"]),
    )
    assert linked["patient_id"] == str(test_patient["id"])

    for field in ("patient_id", "doctor_id"):
        response = await client.post(
            PAYMENTS_URL, json=invoice(**{field: str(uuid4())}), headers=finance_headers
        )
        assert response.status_code == 404, field


@pytest.mark.asyncio
async def test_recording_payment_updates_balance(
    client: AsyncClient,
    finance_headers: dict,
) -> None:
    created = await create_invoice(client, finance_headers)
    url = f"{PAYMENTS_URL}/{created['id']}"

    paid = await client.put(
        url, json={"amount_paid": 4601, "payment_method": "CARD"}, headers=finance_headers
    )
    assert paid.status_code == 200
    assert paid.json()["data"]["balance"] == 0.0
    assert paid.json()["data"]["payment_method"] == "Card"

    too_much = await client.put(url, json={"amount_paid": 5000}, headers=finance_headers)
    assert too_much.status_code == 400


@pytest.mark.asyncio
async def test_list_filters(
    client: AsyncClient,
    finance_headers: dict,
) -> None:
    await create_invoice(client, finance_headers)
    await create_invoice(
        client, finance_headers, patient_name="Kamala Fernando", payment_method="Insurance"
    )

    by_method = await client.get(
        PAYMENTS_URL, params={"payment_method": "insurance"}, headers=finance_headers
    )
    assert by_method.status_code == 200
    assert [p["patient_name"] for p in by_method.json()["data"]["items"]] == ["Kamala Fernando"]

    searched = await client.get(PAYMENTS_URL, params={"search": "nimal"}, headers=finance_headers)
    assert searched.json()["data"]["total"] == 1

    unknown = await client.get(
        PAYMENTS_URL, params={"payment_method": "cheque"}, headers=finance_headers
    )
    assert unknown.status_code == 400


@pytest.mark.asyncio
async def test_summary(client: AsyncClient, finance_headers: dict) -> None:
    await create_invoice(client, finance_headers)
    await create_invoice(client, finance_headers, payment_method="Card", amount_paid=4601)

    response = await client.get(f"{PAYMENTS_URL}/summary", headers=finance_headers)
    assert response.status_code == 200
    summary = response.json()["data"]
    assert summary["total_invoices"] == 2
    assert summary["total_billed"] == 9202.0
    assert summary["total_collected"] == 7601.0
    assert summary["total_outstanding"] == 1601.0
    assert {m["payment_method"] for m in summary["by_method"]} == {"Cash", "Card"}


@pytest.mark.asyncio
async def test_delete_invoice(client: AsyncClient, admin_headers: dict) -> None:
    created = await create_invoice(client, admin_headers)
    url = f"{PAYMENTS_URL}/{created['id']}"

    assert (await client.delete(url, headers=admin_headers)).status_code == 200
    assert (await client.get(url, headers=admin_headers)).status_code == 404


@pytest.mark.asyncio
async def test_payments_need_finance_role(
    client: AsyncClient,
    receptionist_headers: dict,
) -> None:
    response = await client.get(PAYMENTS_URL, headers=receptionist_headers)
    assert response.status_code == 403
