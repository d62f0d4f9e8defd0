"""Tests for doctor endpoints and their Redis cache."""

import json
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from httpx import AsyncClient


def doctor_payload(**extra) -> dict:
    return {
        "name": "Dr. Ravi Gunawardena",
        "specialization": "Orthopaedics",
        "email": "ravi@healx.example.com",
        "available_hours": [
            {"day": "Wednesday", "start_time": "08:00", "end_time": "12:00"},
            {"day": "Wednesday", "start_time": "14:00", "end_time": "18:00"},
        ],
        **extra,
    }


@pytest.mark.asyncio
async def test_list_doctors_is_public(client: AsyncClient, test_doctor: dict) -> None:
    response = await client.get("/api/doctors")
    assert response.status_code == 200
    doctors = response.json()["data"]
    assert [d["name"] for d in doctors] == [test_doctor["name"]]
    assert doctors[0]["available_hours"][0]["day"] == "Monday"


@pytest.mark.asyncio
async def test_filter_by_specialization(
    client: AsyncClient,
    admin_headers: dict,
    test_doctor: dict,
) -> None:
    await client.post("/api/doctors", json=doctor_payload(), headers=admin_headers)

    response = await client.get("/api/doctors", params={"specialization": "cardio"})
    assert [d["name"] for d in response.json()["data"]] == [test_doctor["name"]]


@pytest.mark.asyncio
async def test_create_doctor(client: AsyncClient, admin_headers: dict, redis_mock: MagicMock) -> None:
    response = await client.post("/api/doctors", json=doctor_payload(), headers=admin_headers)
    assert response.status_code == 201
    data = response.json()["data"]
    assert len(data["available_hours"]) == 2

    # Cached lists are dropped after a write
    redis_mock.keys.assert_called_with("doctor:list:*")


@pytest.mark.asyncio
async def test_availability_window_validation(client: AsyncClient, admin_headers: dict) -> None:
    for window in (
        {"day": "Funday", "start_time": "08:00", "end_time": "12:00"},
        {"day": "Monday", "start_time": "8:00", "end_time": "12:00"},
        {"day": "Monday", "start_time": "12:00", "end_time": "08:00"},
    ):
        response = await client.post(
            "/api/doctors",
            json=doctor_payload(available_hours=[window]),
            headers=admin_headers,
        )
        assert response.status_code == 400, window


@pytest.mark.asyncio
async def test_only_admin_manages_doctors(
    client: AsyncClient,
    receptionist_headers: dict,
    test_doctor: dict,
) -> None:
    created = await client.post("/api/doctors", json=doctor_payload(), headers=receptionist_headers)
    assert created.status_code == 403

    updated = await client.put(
        f"/api/doctors/{test_doctor['id']}",
        json={"specialization": "Neurology"},
        headers=receptionist_headers,
    )
    assert updated.status_code == 403


@pytest.mark.asyncio
async def test_update_doctor_invalidates_cache(
    client: AsyncClient,
    admin_headers: dict,
    redis_mock: MagicMock,
    test_doctor: dict,
) -> None:
    response = await client.put(
        f"/api/doctors/{test_doctor['id']}",
        json={"available_hours": [{"day": "Friday", "start_time": "10:00", "end_time": "13:00"}]},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["data"]["available_hours"][0]["day"] == "Friday"
    assert response.json()["data"]["specialization"] == "Cardiology"

    redis_mock.delete.assert_any_call(f"doctor:{test_doctor['id']}")


@pytest.mark.asyncio
async def test_get_doctor_caches_result(
    client: AsyncClient,
    redis_mock: MagicMock,
    test_doctor: dict,
) -> None:
    response = await client.get(f"/api/doctors/{test_doctor['id']}")
    assert response.status_code == 200

    redis_mock.setex.assert_called_once()
    key, ttl, value = redis_mock.setex.call_args.args
    assert key == f"doctor:{test_doctor['id']}"
    assert ttl == 900
    assert json.loads(value)["name"] == test_doctor["name"]


@pytest.mark.asyncio
async def test_get_doctor_served_from_cache(client: AsyncClient, redis_mock: MagicMock) -> None:
    doctor_id = str(uuid4())
    redis_mock.get.return_value = json.dumps(
        {
            "id": doctor_id,
            "name": "Dr. Cached",
            "specialization": "Dermatology",
            "email": None,
            "phone": None,
            "available_hours": [],
            "created_at": "2026-01-01T00:00:00Z",
            "updated_at": "2026-01-01T00:00:00Z",
        }
    )

    # The row does not exist in the database; only the cache knows it
    response = await client.get(f"/api/doctors/{doctor_id}")
    assert response.status_code == 200
    assert response.json()["data"]["name"] == "Dr. Cached"


@pytest.mark.asyncio
async def test_unknown_doctor(client: AsyncClient) -> None:
    response = await client.get(f"/api/doctors/{uuid4()}")
    assert response.status_code == 404
    assert response.json()["message"] == "Doctor not found"
