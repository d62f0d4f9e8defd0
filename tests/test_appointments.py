"""Tests for appointment endpoints."""

from datetime import timedelta

import pytest
from httpx import AsyncClient


def booking(doctor: dict, day, time: str = "10:00", **extra) -> dict:
    return {
        "doctor_id": str(doctor["id"]),
        "appointment_date": day.isoformat(),
        "appointment_time": time,
        "symptoms": "Chest pain on exertion",
        **extra,
    }


@pytest.mark.asyncio
async def test_patient_books_appointment(
    client: AsyncClient,
    patient_headers: dict,
    test_patient: dict,
    test_doctor: dict,
    monday,
) -> None:
    """A patient booking inside the doctor's hours gets a Pending appointment."""
    response = await client.post(
        "/api/appointments",
        json=booking(test_doctor, monday),
        headers=patient_headers,
    )
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    data = body["data"]
    assert data["status"] == "Pending"
    assert data["patient_id"] == str(test_patient["id"])
    assert data["patient_name"] == test_patient["name"]
    assert data["patient_email"] == test_patient["email"]
    assert data["appointment_time"] == "10:00"


@pytest.mark.asyncio
async def test_booking_requires_authentication(
    client: AsyncClient,
    test_doctor: dict,
    monday,
) -> None:
    response = await client.post("/api/appointments", json=booking(test_doctor, monday))
    assert response.status_code == 401
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_booking_on_unavailable_day(
    client: AsyncClient,
    patient_headers: dict,
    test_doctor: dict,
    monday,
) -> None:
    """No window on Tuesday means the doctor is unavailable that day."""
    response = await client.post(
        "/api/appointments",
        json=booking(test_doctor, monday + timedelta(days=1)),
        headers=patient_headers,
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Doctor not available on this day"


@pytest.mark.asyncio
async def test_booking_outside_hours(
    client: AsyncClient,
    patient_headers: dict,
    test_doctor: dict,
    monday,
) -> None:
    response = await client.post(
        "/api/appointments",
        json=booking(test_doctor, monday, "18:00"),
        headers=patient_headers,
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Selected time is outside doctor's hours"


@pytest.mark.asyncio
async def test_window_end_is_bookable(
    client: AsyncClient,
    patient_headers: dict,
    test_doctor: dict,
    monday,
) -> None:
    """Both ends of an availability window are inclusive."""
    for time in ("09:00", "17:00"):
        response = await client.post(
            "/api/appointments",
            json=booking(test_doctor, monday, time),
            headers=patient_headers,
        )
        assert response.status_code == 201, response.json()


@pytest.mark.asyncio
async def test_malformed_time_is_rejected(
    client: AsyncClient,
    patient_headers: dict,
    test_doctor: dict,
    monday,
) -> None:
    response = await client.post(
        "/api/appointments",
        json=booking(test_doctor, monday, "9:00"),
        headers=patient_headers,
    )
    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Validation failed"
    assert body["details"]


@pytest.mark.asyncio
async def test_unknown_doctor(
    client: AsyncClient,
    patient_headers: dict,
    monday,
) -> None:
    response = await client.post(
        "/api/appointments",
        json=booking({"id": "00000000-0000-0000-0000-000000000001"}, monday),
        headers=patient_headers,
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_slot_cannot_be_double_booked(
    client: AsyncClient,
    patient_headers: dict,
    receptionist_headers: dict,
    test_doctor: dict,
    monday,
) -> None:
    first = await client.post(
        "/api/appointments",
        json=booking(test_doctor, monday),
        headers=patient_headers,
    )
    assert first.status_code == 201

    second = await client.post(
        "/api/appointments",
        json=booking(test_doctor, monday, patient_name="Walk-in Patient"),
        headers=receptionist_headers,
    )
    assert second.status_code == 400
    assert second.json()["message"] == "Time slot already booked"


@pytest.mark.asyncio
async def test_cancelled_slot_is_freed(
    client: AsyncClient,
    patient_headers: dict,
    receptionist_headers: dict,
    test_doctor: dict,
    monday,
) -> None:
    first = await client.post(
        "/api/appointments",
        json=booking(test_doctor, monday),
        headers=patient_headers,
    )
    appointment_id = first.json()["data"]["id"]

    cancelled = await client.delete(f"/api/appointments/{appointment_id}", headers=patient_headers)
    assert cancelled.status_code == 200
    assert cancelled.json()["data"]["status"] == "Cancelled"
    assert cancelled.json()["data"]["cancelled_at"] is not None

    rebooked = await client.post(
        "/api/appointments",
        json=booking(test_doctor, monday, patient_name="Walk-in Patient"),
        headers=receptionist_headers,
    )
    assert rebooked.status_code == 201


@pytest.mark.asyncio
async def test_staff_booking_needs_patient(
    client: AsyncClient,
    receptionist_headers: dict,
    test_doctor: dict,
    monday,
) -> None:
    response = await client.post(
        "/api/appointments",
        json=booking(test_doctor, monday),
        headers=receptionist_headers,
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_booking_records_patient_details(
    client: AsyncClient,
    receptionist_headers: dict,
    test_patient: dict,
    test_doctor: dict,
    monday,
) -> None:
    """Details missing from the request fall back to the patient record."""
    response = await client.post(
        "/api/appointments",
        json=booking(
            test_doctor,
            monday,
            patient_id=str(test_patient["id"]),
            patient_date_of_birth="1984-05-02",
            patient_blood_group="O+",
            patient_allergies="Penicillin",
            emergency_contact_name="Kumari Perera",
            emergency_contact_phone="+94770000000",
            emergency_contact_relationship="Spouse",
        ),
        headers=receptionist_headers,
    )
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["patient_gender"] == "Male"
    assert data["patient_date_of_birth"] == "1984-05-02"
    assert data["patient_blood_group"] == "O+"
    assert data["patient_allergies"] == "Penicillin"
    assert data["emergency_contact_name"] == "Kumari Perera"
    assert data["emergency_contact_relationship"] == "Spouse"


@pytest.mark.asyncio
async def test_booking_rejects_bad_patient_details(
    client: AsyncClient,
    receptionist_headers: dict,
    test_doctor: dict,
    monday,
) -> None:
    future = (monday + timedelta(days=365)).isoformat()
    for extra in (
        {"patient_blood_group": "C+"},
        {"patient_gender": "Unknown"},
        {"patient_date_of_birth": future},
    ):
        response = await client.post(
            "/api/appointments",
            json=booking(test_doctor, monday, patient_name="Walk-in", **extra),
            headers=receptionist_headers,
        )
        assert response.status_code == 400, extra


@pytest.mark.asyncio
async def test_status_lifecycle(
    client: AsyncClient,
    patient_headers: dict,
    receptionist_headers: dict,
    test_doctor: dict,
    monday,
) -> None:
    created = await client.post(
        "/api/appointments",
        json=booking(test_doctor, monday),
        headers=patient_headers,
    )
    appointment_id = created.json()["data"]["id"]
    url = f"/api/appointments/{appointment_id}/status"

    skipped = await client.patch(url, json={"status": "Completed"}, headers=receptionist_headers)
    assert skipped.status_code == 400
    assert skipped.json()["message"] == "Cannot change status from Pending to Completed"

    for status in ("Approved", "Completed"):
        response = await client.patch(url, json={"status": status}, headers=receptionist_headers)
        assert response.status_code == 200
        assert response.json()["data"]["status"] == status

    reopened = await client.patch(url, json={"status": "Cancelled"}, headers=receptionist_headers)
    assert reopened.status_code == 400


@pytest.mark.asyncio
async def test_same_status_is_a_no_op(
    client: AsyncClient,
    patient_headers: dict,
    receptionist_headers: dict,
    test_doctor: dict,
    monday,
) -> None:
    created = await client.post(
        "/api/appointments",
        json=booking(test_doctor, monday),
        headers=patient_headers,
    )
    appointment_id = created.json()["data"]["id"]

    response = await client.patch(
        f"/api/appointments/{appointment_id}/status",
        json={"status": "Pending"},
        headers=receptionist_headers,
    )
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "Pending"


@pytest.mark.asyncio
async def test_patient_cannot_change_status(
    client: AsyncClient,
    patient_headers: dict,
    test_doctor: dict,
    monday,
) -> None:
    created = await client.post(
        "/api/appointments",
        json=booking(test_doctor, monday),
        headers=patient_headers,
    )
    appointment_id = created.json()["data"]["id"]

    response = await client.patch(
        f"/api/appointments/{appointment_id}/status",
        json={"status": "Approved"},
        headers=patient_headers,
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_patient_sees_only_own_appointments(
    client: AsyncClient,
    patient_headers: dict,
    receptionist_headers: dict,
    test_doctor: dict,
    monday,
) -> None:
    own = await client.post(
        "/api/appointments",
        json=booking(test_doctor, monday, "10:00"),
        headers=patient_headers,
    )
    other = await client.post(
        "/api/appointments",
        json=booking(test_doctor, monday, "11:00", patient_name="Kamala Fernando"),
        headers=receptionist_headers,
    )
    assert other.status_code == 201
    other_id = other.json()["data"]["id"]

    listed = await client.get("/api/appointments", headers=patient_headers)
    assert listed.status_code == 200
    page = listed.json()["data"]
    assert page["total"] == 1
    assert page["items"][0]["id"] == own.json()["data"]["id"]

    hidden = await client.get(f"/api/appointments/{other_id}", headers=patient_headers)
    assert hidden.status_code == 404

    staff_view = await client.get("/api/appointments", headers=receptionist_headers)
    assert staff_view.json()["data"]["total"] == 2


@pytest.mark.asyncio
async def test_list_filters_by_status(
    client: AsyncClient,
    patient_headers: dict,
    receptionist_headers: dict,
    test_doctor: dict,
    monday,
) -> None:
    first = await client.post(
        "/api/appointments",
        json=booking(test_doctor, monday, "10:00"),
        headers=patient_headers,
    )
    await client.post(
        "/api/appointments",
        json=booking(test_doctor, monday, "10:30"),
        headers=patient_headers,
    )
    await client.patch(
        f"/api/appointments/{first.json()['data']['id']}/status",
        json={"status": "Approved"},
        headers=receptionist_headers,
    )

    response = await client.get(
        "/api/appointments",
        params={"status": "Approved", "doctor_id": str(test_doctor["id"])},
        headers=receptionist_headers,
    )
    assert response.status_code == 200
    items = response.json()["data"]["items"]
    assert [a["appointment_time"] for a in items] == ["10:00"]


@pytest.mark.asyncio
async def test_reschedule_checks_hours_and_slot(
    client: AsyncClient,
    patient_headers: dict,
    receptionist_headers: dict,
    test_doctor: dict,
    monday,
) -> None:
    first = await client.post(
        "/api/appointments",
        json=booking(test_doctor, monday, "10:00"),
        headers=patient_headers,
    )
    second = await client.post(
        "/api/appointments",
        json=booking(test_doctor, monday, "11:00"),
        headers=patient_headers,
    )
    second_id = second.json()["data"]["id"]

    taken = await client.put(
        f"/api/appointments/{second_id}",
        json={"appointment_time": "10:00"},
        headers=receptionist_headers,
    )
    assert taken.status_code == 400
    assert taken.json()["message"] == "Time slot already booked"

    late = await client.put(
        f"/api/appointments/{second_id}",
        json={"appointment_time": "20:00"},
        headers=receptionist_headers,
    )
    assert late.status_code == 400

    moved = await client.put(
        f"/api/appointments/{second_id}",
        json={"appointment_time": "14:30", "notes": "Moved at patient's request"},
        headers=receptionist_headers,
    )
    assert moved.status_code == 200
    assert moved.json()["data"]["appointment_time"] == "14:30"
    assert moved.json()["data"]["notes"] == "Moved at patient's request"
    assert first.json()["data"]["appointment_time"] == "10:00"


@pytest.mark.asyncio
async def test_closed_appointment_cannot_be_edited(
    client: AsyncClient,
    patient_headers: dict,
    receptionist_headers: dict,
    test_doctor: dict,
    monday,
) -> None:
    created = await client.post(
        "/api/appointments",
        json=booking(test_doctor, monday),
        headers=patient_headers,
    )
    appointment_id = created.json()["data"]["id"]
    await client.delete(f"/api/appointments/{appointment_id}", headers=patient_headers)

    response = await client.put(
        f"/api/appointments/{appointment_id}",
        json={"notes": "too late"},
        headers=receptionist_headers,
    )
    assert response.status_code == 400
