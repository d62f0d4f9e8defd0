"""Appointment booking service.

Slot uniqueness is enforced by the ``uq_appointments_active_slot`` partial
index: a booking is inserted directly and a unique violation means another
active booking already holds the (doctor, date, time) slot.
"""

from datetime import UTC, date, datetime
from uuid import UUID

import structlog
from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from healx.core.exceptions import (
    ConflictException,
    DoctorUnavailableException,
    InvalidStatusTransitionException,
    NotFoundException,
    OutsideHoursException,
    SlotTakenException,
    ValidationFailedException,
)
from healx.core.redis_client import CacheManager
from healx.models.appointments import appointments
from healx.models.patients import patients
from healx.schemas.appointments import (
    APPOINTMENT_TRANSITIONS,
    AppointmentCreate,
    AppointmentFilters,
    AppointmentResponse,
    AppointmentStatus,
    AppointmentStatusUpdate,
    AppointmentUpdate,
)
from healx.schemas.auth import Principal
from healx.schemas.common import Page
from healx.schemas.doctors import AvailabilityWindow, DoctorResponse, Weekday
from healx.services.doctor_service import DoctorService

logger = structlog.get_logger()

# Indexed by date.weekday()
WEEKDAYS = tuple(Weekday)


def check_availability(windows: list[AvailabilityWindow], day: date, time: str) -> None:
    """
    Check a requested slot against a doctor's availability windows.

    Times are zero-padded ``HH:MM`` so string comparison orders them; both
    window ends are inclusive.

    Raises:
        DoctorUnavailableException: If no window exists for the weekday
        OutsideHoursException: If the time falls outside every window of the day
    """
    weekday = WEEKDAYS[day.weekday()]
    todays = [w for w in windows if w.day == weekday]
    if not todays:
        raise DoctorUnavailableException()
    if not any(w.start_time <= time <= w.end_time for w in todays):
        raise OutsideHoursException()


def check_transition(current: AppointmentStatus, requested: AppointmentStatus) -> bool:
    """
    Validate a status change.

    Returns:
        False when the status is unchanged (no-op), True when it must be applied

    Raises:
        InvalidStatusTransitionException: If the move is not allowed
    """
    if current == requested:
        return False
    if requested not in APPOINTMENT_TRANSITIONS[current]:
        raise InvalidStatusTransitionException(current.value, requested.value)
    return True


class AppointmentService:
    """Service for managing appointments."""

    def __init__(self, db: AsyncSession, cache_manager: CacheManager | None = None):
        """Initialize service with database session."""
        self.db = db
        self.doctors = DoctorService(db, cache_manager)

    async def _get_patient(self, patient_id: UUID) -> dict:
        result = await self.db.execute(select(patients).where(patients.c.id == patient_id))
        row = result.mappings().first()
        if not row:
            raise NotFoundException("Patient not found")
        return dict(row)

    async def _get_row(self, appointment_id: UUID) -> dict:
        result = await self.db.execute(
            select(appointments).where(appointments.c.id == appointment_id)
        )
        row = result.mappings().first()
        if not row:
            raise NotFoundException("Appointment not found")
        return dict(row)

    async def _get_visible_row(self, principal: Principal, appointment_id: UUID) -> dict:
        row = await self._get_row(appointment_id)
        # Patients only see their own bookings; others are reported as missing
        if principal.is_patient and row["patient_id"] != principal.id:
            raise NotFoundException("Appointment not found")
        return row

    async def _resolve_doctor(self, doctor_id: UUID) -> DoctorResponse:
        return await self.doctors.get_doctor(doctor_id)

    async def _patient_fields(self, principal: Principal, data: AppointmentCreate) -> dict:
        details = {
            "patient_date_of_birth": data.patient_date_of_birth,
            "patient_blood_group": (
                data.patient_blood_group.value if data.patient_blood_group else None
            ),
            "emergency_contact_name": data.emergency_contact_name,
            "emergency_contact_phone": data.emergency_contact_phone,
            "emergency_contact_relationship": data.emergency_contact_relationship,
        }
        if principal.is_patient:
            patient = await self._get_patient(principal.id)
        elif data.patient_id is not None:
            patient = await self._get_patient(data.patient_id)
        else:
            if not data.patient_name:
                raise ValidationFailedException("patient_name or patient_id is required")
            return {
                "patient_id": None,
                "patient_name": data.patient_name,
                "patient_email": data.patient_email.lower() if data.patient_email else None,
                "patient_phone": data.patient_phone,
                "patient_gender": data.patient_gender.value if data.patient_gender else None,
                "patient_allergies": data.patient_allergies,
                **details,
            }

        return {
            "patient_id": patient["id"],
            "patient_name": data.patient_name or patient["name"],
            "patient_email": (data.patient_email or patient["email"]).lower(),
            "patient_phone": data.patient_phone or patient["phone"],
            "patient_gender": (
                data.patient_gender.value if data.patient_gender else patient["gender"]
            ),
            "patient_allergies": data.patient_allergies or patient["allergies"],
            **details,
        }

    async def book_appointment(
        self,
        principal: Principal,
        data: AppointmentCreate,
    ) -> AppointmentResponse:
        """
        Book an appointment after checking the doctor's availability.

        Args:
            principal: Authenticated caller; patients book for themselves
            data: Booking request

        Returns:
            The new appointment in ``Pending`` status

        Raises:
            NotFoundException: If the doctor or referenced patient is missing
            DoctorUnavailableException: If the doctor has no hours that weekday
            OutsideHoursException: If the time is outside the doctor's hours
            SlotTakenException: If the slot already has an active booking
        """
        doctor = await self._resolve_doctor(data.doctor_id)
        check_availability(doctor.available_hours, data.appointment_date, data.appointment_time)

        values = await self._patient_fields(principal, data)
        values.update(
            doctor_id=data.doctor_id,
            appointment_date=data.appointment_date,
            appointment_time=data.appointment_time,
            appointment_type=data.appointment_type.value,
            symptoms=data.symptoms,
            urgency=data.urgency.value,
            notes=data.notes,
            status=AppointmentStatus.PENDING.value,
        )

        try:
            result = await self.db.execute(
                appointments.insert().values(**values).returning(appointments)
            )
            row = dict(result.mappings().one())
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.info(
                "appointment_slot_taken",
                doctor_id=str(data.doctor_id),
                date=data.appointment_date.isoformat(),
                time=data.appointment_time,
            )
            raise SlotTakenException()

        logger.info(
            "appointment_booked",
            appointment_id=str(row["id"]),
            doctor_id=str(row["doctor_id"]),
            date=data.appointment_date.isoformat(),
            time=data.appointment_time,
        )
        return AppointmentResponse.model_validate(row)

    async def get_appointment(
        self,
        principal: Principal,
        appointment_id: UUID,
    ) -> AppointmentResponse:
        """
        Get appointment by ID.

        Raises:
            NotFoundException: If not found or not visible to the caller
        """
        row = await self._get_visible_row(principal, appointment_id)
        return AppointmentResponse.model_validate(row)

    async def list_appointments(
        self,
        principal: Principal,
        filters: AppointmentFilters,
    ) -> Page[AppointmentResponse]:
        """
        List appointments with optional filters.

        Patients are always restricted to their own bookings.
        """
        conditions = []
        if principal.is_patient:
            conditions.append(appointments.c.patient_id == principal.id)
        elif filters.patient_id:
            conditions.append(appointments.c.patient_id == filters.patient_id)

        if filters.patient_email:
            conditions.append(appointments.c.patient_email == filters.patient_email.lower())
        if filters.doctor_id:
            conditions.append(appointments.c.doctor_id == filters.doctor_id)
        if filters.status:
            conditions.append(appointments.c.status == filters.status.value)
        if filters.appointment_date:
            conditions.append(appointments.c.appointment_date == filters.appointment_date)

        count_stmt = select(func.count()).select_from(appointments).where(*conditions)
        total = (await self.db.execute(count_stmt)).scalar_one()

        stmt = (
            select(appointments)
            .where(*conditions)
            .order_by(appointments.c.appointment_date.desc(), appointments.c.appointment_time)
            .offset((filters.page - 1) * filters.page_size)
            .limit(filters.page_size)
        )
        rows = (await self.db.execute(stmt)).mappings().all()
        items = [AppointmentResponse.model_validate(dict(r)) for r in rows]
        return Page[AppointmentResponse].build(items, total, filters.page, filters.page_size)

    async def update_appointment(
        self,
        appointment_id: UUID,
        data: AppointmentUpdate,
    ) -> AppointmentResponse:
        """
        Reschedule or amend an appointment.

        Changing doctor, date or time re-runs the availability checks and the
        slot uniqueness constraint.

        Raises:
            NotFoundException: If appointment or new doctor not found
            ValidationFailedException: If the appointment is closed
            SlotTakenException: If the new slot is already booked
        """
        row = await self._get_row(appointment_id)
        status = AppointmentStatus(row["status"])
        if not APPOINTMENT_TRANSITIONS[status]:
            raise ValidationFailedException(f"Cannot modify a {status.value} appointment")

        values = data.model_dump(exclude_unset=True, exclude_none=True, mode="json")
        if not values:
            return AppointmentResponse.model_validate(row)

        if {"doctor_id", "appointment_date", "appointment_time"} & values.keys():
            doctor_id = data.doctor_id or row["doctor_id"]
            day = data.appointment_date or row["appointment_date"]
            time = data.appointment_time or row["appointment_time"]
            doctor = await self._resolve_doctor(doctor_id)
            check_availability(doctor.available_hours, day, time)
            values.update(doctor_id=doctor_id, appointment_date=day, appointment_time=time)

        stmt = (
            update(appointments)
            .where(appointments.c.id == appointment_id)
            .values(**values)
            .returning(appointments)
        )
        try:
            result = await self.db.execute(stmt)
            updated = dict(result.mappings().one())
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise SlotTakenException()

        logger.info("appointment_updated", appointment_id=str(appointment_id), fields=sorted(values))
        return AppointmentResponse.model_validate(updated)

    async def _transition(
        self,
        row: dict,
        requested: AppointmentStatus,
        notes: str | None = None,
    ) -> AppointmentResponse:
        current = AppointmentStatus(row["status"])
        if not check_transition(current, requested):
            return AppointmentResponse.model_validate(row)

        values: dict = {"status": requested.value}
        if requested == AppointmentStatus.CANCELLED:
            values["cancelled_at"] = datetime.now(UTC)
        if notes is not None:
            values["notes"] = notes

        # Guard on the status read above so concurrent changes are not lost
        stmt = (
            update(appointments)
            .where(
                appointments.c.id == row["id"],
                appointments.c.status == current.value,
            )
            .values(**values)
            .returning(appointments)
        )
        result = await self.db.execute(stmt)
        updated = result.mappings().first()
        if not updated:
            await self.db.rollback()
            raise ConflictException("Appointment was modified by another request")
        await self.db.commit()

        logger.info(
            "appointment_status_changed",
            appointment_id=str(row["id"]),
            from_status=current.value,
            to_status=requested.value,
        )
        return AppointmentResponse.model_validate(dict(updated))

    async def update_status(
        self,
        appointment_id: UUID,
        data: AppointmentStatusUpdate,
    ) -> AppointmentResponse:
        """
        Move an appointment through its lifecycle.

        Raises:
            NotFoundException: If appointment not found
            InvalidStatusTransitionException: If the move is not allowed
        """
        row = await self._get_row(appointment_id)
        return await self._transition(row, data.status, data.notes)

    async def cancel_appointment(
        self,
        principal: Principal,
        appointment_id: UUID,
    ) -> AppointmentResponse:
        """
        Cancel an appointment and free its slot.

        Raises:
            NotFoundException: If not found or not visible to the caller
            InvalidStatusTransitionException: If already completed
        """
        row = await self._get_visible_row(principal, appointment_id)
        return await self._transition(row, AppointmentStatus.CANCELLED)
