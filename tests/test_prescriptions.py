"""Tests for prescription endpoints."""

from uuid import UUID, uuid4

import pytest
from httpx import AsyncClient

PRESCRIPTIONS_URL = "/api/prescriptions"


def prescription(**extra) -> dict:
    return {
        "diagnosis": "Essential hypertension",
        "medicines": [
            {
                "name": "Amlodipine",
                "dosage": "5 mg",
                "frequency": "Once daily",
                "duration": "30 days",
            }
        ],
        "patient_id": "PT-2026-TEST01",
        "patient_name": "Nimal Perera",
        "patient_email": "nimal@example.com",
        "patient_blood_group": "O+",
        "patient_allergies": ["Penicillin"],
        "doctor_id": "EMP-DOC-1760000000000",
        "doctor_name": "Dr. Amara Silva",
        "doctor_specialization": "Cardiology",
        **extra,
    }


async def create_prescription(client: AsyncClient, headers: dict, **extra) -> dict:
    response = await client.post(PRESCRIPTIONS_URL, json=prescription(**extra), headers=headers)
    assert response.status_code == 201, response.json()
    return response.json()["data"]


@pytest.mark.asyncio
async def test_create_prescription(client: AsyncClient, receptionist_headers: dict) -> None:
    data = await create_prescription(client, receptionist_headers)

    assert data["prescription_code"] == f"RX-{UUID(data['id']).hex[-8:].upper()}"
    assert data["prescribed_on"] is not None
    assert data["medicines"][0]["notes"] == ""
    assert data["patient_allergies"] == ["Penicillin"]


@pytest.mark.asyncio
async def test_prescription_validation(client: AsyncClient, receptionist_headers: dict) -> None:
    for extra in (
        {"diagnosis": "Fl"},
        {"medicines": []},
        {"medicines": [{"name": "Amlodipine", "dosage": "5 mg"}]},
        {"patient_blood_group": "C+"},
        {"patient_name": ""},
    ):
        response = await client.post(
            PRESCRIPTIONS_URL, json=prescription(**extra), headers=receptionist_headers
        )
        assert response.status_code == 400, extra


@pytest.mark.asyncio
async def test_update_replaces_content(client: AsyncClient, receptionist_headers: dict) -> None:
    created = await create_prescription(client, receptionist_headers)

    response = await client.put(
        f"{PRESCRIPTIONS_URL}/{created['id']}",
        json=prescription(
            diagnosis="Hypertension with hyperlipidaemia",
            medicines=[
                {"name": "Amlodipine", "dosage": "10 mg", "frequency": "Once daily", "duration": "30 days"},
                {"name": "Atorvastatin", "dosage": "20 mg", "frequency": "Nightly", "duration": "90 days"},
            ],
        ),
        headers=receptionist_headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert len(data["medicines"]) == 2
    assert data["prescription_code"] == created["prescription_code"]


@pytest.mark.asyncio
async def test_list_and_search(client: AsyncClient, receptionist_headers: dict) -> None:
    await create_prescription(client, receptionist_headers)
    await create_prescription(
        client,
        receptionist_headers,
        patient_id="PT-2026-OTHER1",
        patient_name="Kamala Fernando",
        diagnosis="Acute bronchitis",
    )

    by_patient = await client.get(
        PRESCRIPTIONS_URL, params={"patient_id": "PT-2026-OTHER1"}, headers=receptionist_headers
    )
    assert [p["patient_name"] for p in by_patient.json()["data"]] == ["Kamala Fernando"]

    searched = await client.get(
        PRESCRIPTIONS_URL, params={"search": "HYPERTENSION"}, headers=receptionist_headers
    )
    assert [p["patient_name"] for p in searched.json()["data"]] == ["Nimal Perera"]


@pytest.mark.asyncio
async def test_delete_prescription(client: AsyncClient, receptionist_headers: dict) -> None:
    created = await create_prescription(client, receptionist_headers)
    url = f"{PRESCRIPTIONS_URL}/{created['id']}"

    assert (await client.delete(url, headers=receptionist_headers)).status_code == 200
    assert (await client.get(url, headers=receptionist_headers)).status_code == 404
    assert (await client.delete(url, headers=receptionist_headers)).status_code == 404


@pytest.mark.asyncio
async def test_missing_prescription(client: AsyncClient, receptionist_headers: dict) -> None:
    response = await client.put(
        f"{PRESCRIPTIONS_URL}/{uuid4()}", json=prescription(), headers=receptionist_headers
    )
    assert response.status_code == 404
