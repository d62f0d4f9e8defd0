"""Appointment endpoints."""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Query, status

from healx.dependencies import Cache, CurrentPrincipal, DatabaseSession, StaffPrincipal
from healx.schemas.appointments import (
    AppointmentCreate,
    AppointmentFilters,
    AppointmentResponse,
    AppointmentStatus,
    AppointmentStatusUpdate,
    AppointmentUpdate,
)
from healx.schemas.common import Envelope, Page
from healx.services.appointment_service import AppointmentService

router = APIRouter()


@router.post(
    "",
    response_model=Envelope[AppointmentResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Book appointment",
)
async def book_appointment(
    data: AppointmentCreate,
    principal: CurrentPrincipal,
    db: DatabaseSession,
    cache: Cache,
) -> Envelope[AppointmentResponse]:
    """
    Book an appointment with a doctor.

    Patients book for themselves; staff may book on behalf of a patient.

    Args:
        data: Booking request
        principal: Authenticated caller
        db: Database session
        cache: Redis cache manager used for doctor lookups

    Returns:
        The new appointment in Pending status

    Raises:
        DoctorUnavailableException: Doctor has no hours on that weekday
        OutsideHoursException: Time outside the doctor's hours
        SlotTakenException: Slot already booked
    """
    appointment = await AppointmentService(db, cache).book_appointment(principal, data)
    return Envelope(message="Appointment booked", data=appointment)


@router.get(
    "",
    response_model=Envelope[Page[AppointmentResponse]],
    status_code=status.HTTP_200_OK,
    summary="List appointments",
)
async def list_appointments(
    principal: CurrentPrincipal,
    db: DatabaseSession,
    patient_id: UUID | None = Query(None),
    patient_email: str | None = Query(None),
    doctor_id: UUID | None = Query(None),
    status_filter: AppointmentStatus | None = Query(None, alias="status"),
    appointment_date: date | None = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
) -> Envelope[Page[AppointmentResponse]]:
    """
    List appointments with filtering.

    Patients only ever see their own appointments.
    """
    filters = AppointmentFilters(
        patient_id=patient_id,
        patient_email=patient_email,
        doctor_id=doctor_id,
        status=status_filter,
        appointment_date=appointment_date,
        page=page,
        page_size=page_size,
    )
    return Envelope(data=await AppointmentService(db).list_appointments(principal, filters))


@router.get(
    "/{appointment_id}",
    response_model=Envelope[AppointmentResponse],
    status_code=status.HTTP_200_OK,
    summary="Get appointment",
)
async def get_appointment(
    appointment_id: UUID,
    principal: CurrentPrincipal,
    db: DatabaseSession,
) -> Envelope[AppointmentResponse]:
    """Get an appointment; patients may only read their own."""
    return Envelope(data=await AppointmentService(db).get_appointment(principal, appointment_id))


@router.put(
    "/{appointment_id}",
    response_model=Envelope[AppointmentResponse],
    status_code=status.HTTP_200_OK,
    summary="Update appointment",
)
async def update_appointment(
    appointment_id: UUID,
    data: AppointmentUpdate,
    principal: StaffPrincipal,
    db: DatabaseSession,
    cache: Cache,
) -> Envelope[AppointmentResponse]:
    """
    Reschedule or amend an appointment. Staff only.

    Rescheduling re-checks the doctor's availability and the slot.
    """
    appointment = await AppointmentService(db, cache).update_appointment(appointment_id, data)
    return Envelope(message="Appointment updated", data=appointment)


@router.patch(
    "/{appointment_id}/status",
    response_model=Envelope[AppointmentResponse],
    status_code=status.HTTP_200_OK,
    summary="Change appointment status",
)
async def update_appointment_status(
    appointment_id: UUID,
    data: AppointmentStatusUpdate,
    principal: StaffPrincipal,
    db: DatabaseSession,
) -> Envelope[AppointmentResponse]:
    """
    Move an appointment through Pending, Approved, Completed or Cancelled.

    Raises:
        InvalidStatusTransitionException: If the move is not allowed
    """
    appointment = await AppointmentService(db).update_status(appointment_id, data)
    return Envelope(message=f"Appointment {appointment.status.value.lower()}", data=appointment)


@router.delete(
    "/{appointment_id}",
    response_model=Envelope[AppointmentResponse],
    status_code=status.HTTP_200_OK,
    summary="Cancel appointment",
)
async def cancel_appointment(
    appointment_id: UUID,
    principal: CurrentPrincipal,
    db: DatabaseSession,
) -> Envelope[AppointmentResponse]:
    """Cancel an appointment, freeing its slot. Appointments are never hard deleted."""
    appointment = await AppointmentService(db).cancel_appointment(principal, appointment_id)
    return Envelope(message="Appointment cancelled", data=appointment)
