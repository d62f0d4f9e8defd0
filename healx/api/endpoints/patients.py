"""Patient endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query, status

from healx.dependencies import DatabaseSession, PatientPrincipal, StaffPrincipal
from healx.schemas.auth import PatientResponse, PatientUpdate
from healx.schemas.common import Envelope, Page
from healx.services.patient_service import PatientService

router = APIRouter()


@router.get(
    "/me",
    response_model=Envelope[PatientResponse],
    status_code=status.HTTP_200_OK,
    summary="Get own profile",
)
async def get_my_profile(principal: PatientPrincipal, db: DatabaseSession) -> Envelope[PatientResponse]:
    """Return the authenticated patient's profile."""
    return Envelope(data=await PatientService(db).get_patient(principal.id))


@router.put(
    "/me",
    response_model=Envelope[PatientResponse],
    status_code=status.HTTP_200_OK,
    summary="Update own profile",
)
async def update_my_profile(
    data: PatientUpdate,
    principal: PatientPrincipal,
    db: DatabaseSession,
) -> Envelope[PatientResponse]:
    """
    Update the authenticated patient's profile.

    Args:
        data: Fields to change
        principal: Authenticated patient
        db: Database session

    Returns:
        Updated profile
    """
    patient = await PatientService(db).update_profile(principal.id, data)
    return Envelope(message="Profile updated", data=patient)


@router.get(
    "",
    response_model=Envelope[Page[PatientResponse]],
    status_code=status.HTTP_200_OK,
    summary="List patients",
)
async def list_patients(
    principal: StaffPrincipal,
    db: DatabaseSession,
    search: str | None = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
) -> Envelope[Page[PatientResponse]]:
    """List patients, optionally searching name, email or patient code. Staff only."""
    return Envelope(data=await PatientService(db).list_patients(search, page, page_size))


@router.get(
    "/{patient_id}",
    response_model=Envelope[PatientResponse],
    status_code=status.HTTP_200_OK,
    summary="Get patient",
)
async def get_patient(
    patient_id: UUID,
    principal: StaffPrincipal,
    db: DatabaseSession,
) -> Envelope[PatientResponse]:
    """Get a patient by id. Staff only."""
    return Envelope(data=await PatientService(db).get_patient(patient_id))
