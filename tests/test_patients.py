"""Tests for patient profile endpoints."""

from uuid import uuid4

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_get_own_profile(
    client: AsyncClient,
    patient_headers: dict,
    test_patient: dict,
) -> None:
    response = await client.get("/api/patients/me", headers=patient_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["patient_code"] == test_patient["patient_code"]
    assert data["gender"] == "Male"
    assert "password_hash" not in data


@pytest.mark.asyncio
async def test_update_own_profile(
    client: AsyncClient,
    patient_headers: dict,
    test_patient: dict,
) -> None:
    response = await client.put(
        "/api/patients/me",
        json={"phone": "+94779999999", "allergies": "Penicillin", "email": "new@example.com"},
        headers=patient_headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["phone"] == "+94779999999"
    assert data["allergies"] == "Penicillin"
    assert data["email"] == test_patient["email"]
    assert data["name"] == test_patient["name"]


@pytest.mark.asyncio
async def test_profile_validation(client: AsyncClient, patient_headers: dict) -> None:
    response = await client.put("/api/patients/me", json={"age": 200}, headers=patient_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_staff_cannot_use_patient_profile(
    client: AsyncClient,
    receptionist_headers: dict,
) -> None:
    response = await client.get("/api/patients/me", headers=receptionist_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_staff_lists_and_reads_patients(
    client: AsyncClient,
    receptionist_headers: dict,
    test_patient: dict,
) -> None:
    listed = await client.get(
        "/api/patients", params={"search": "pt-2026"}, headers=receptionist_headers
    )
    assert listed.status_code == 200
    page = listed.json()["data"]
    assert page["total"] == 1
    assert page["total_pages"] == 1
    assert page["items"][0]["id"] == str(test_patient["id"])

    found = await client.get(f"/api/patients/{test_patient['id']}", headers=receptionist_headers)
    assert found.status_code == 200

    missing = await client.get(f"/api/patients/{uuid4()}", headers=receptionist_headers)
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_patients_cannot_list_patients(client: AsyncClient, patient_headers: dict) -> None:
    response = await client.get("/api/patients", headers=patient_headers)
    assert response.status_code == 403
