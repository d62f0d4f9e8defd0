"""Doctor endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query, status

from healx.dependencies import AdminPrincipal, Cache, DatabaseSession
from healx.schemas.common import Envelope
from healx.schemas.doctors import DoctorCreate, DoctorResponse, DoctorUpdate
from healx.services.doctor_service import DoctorService

router = APIRouter()


@router.get(
    "",
    response_model=Envelope[list[DoctorResponse]],
    status_code=status.HTTP_200_OK,
    summary="List doctors",
)
async def list_doctors(
    db: DatabaseSession,
    cache: Cache,
    specialization: str | None = Query(None, description="Filter by specialization"),
) -> Envelope[list[DoctorResponse]]:
    """
    List doctors with their availability windows.

    Args:
        db: Database session
        cache: Redis cache manager
        specialization: Optional case-insensitive specialization filter

    Returns:
        Doctors ordered by name
    """
    return Envelope(data=await DoctorService(db, cache).list_doctors(specialization))


@router.post(
    "",
    response_model=Envelope[DoctorResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create doctor",
)
async def create_doctor(
    data: DoctorCreate,
    principal: AdminPrincipal,
    db: DatabaseSession,
    cache: Cache,
) -> Envelope[DoctorResponse]:
    """Create a doctor. Admin only."""
    doctor = await DoctorService(db, cache).create_doctor(data)
    return Envelope(message="Doctor created", data=doctor)


@router.get(
    "/{doctor_id}",
    response_model=Envelope[DoctorResponse],
    status_code=status.HTTP_200_OK,
    summary="Get doctor",
)
async def get_doctor(doctor_id: UUID, db: DatabaseSession, cache: Cache) -> Envelope[DoctorResponse]:
    """
    Get doctor details by ID.

    Raises:
        NotFoundException: If doctor not found
    """
    return Envelope(data=await DoctorService(db, cache).get_doctor(doctor_id))


@router.put(
    "/{doctor_id}",
    response_model=Envelope[DoctorResponse],
    status_code=status.HTTP_200_OK,
    summary="Update doctor",
)
async def update_doctor(
    doctor_id: UUID,
    data: DoctorUpdate,
    principal: AdminPrincipal,
    db: DatabaseSession,
    cache: Cache,
) -> Envelope[DoctorResponse]:
    """Update a doctor's details or availability. Admin only."""
    doctor = await DoctorService(db, cache).update_doctor(doctor_id, data)
    return Envelope(message="Doctor updated", data=doctor)
