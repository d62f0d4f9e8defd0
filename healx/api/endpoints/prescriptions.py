"""Prescription endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query, status

from healx.dependencies import DatabaseSession, StaffPrincipal
from healx.schemas.common import Envelope
from healx.schemas.prescriptions import (
    PrescriptionCreate,
    PrescriptionResponse,
    PrescriptionUpdate,
)
from healx.services.prescription_service import PrescriptionService

router = APIRouter()


@router.get(
    "",
    response_model=Envelope[list[PrescriptionResponse]],
    status_code=status.HTTP_200_OK,
    summary="List prescriptions",
)
async def list_prescriptions(
    principal: StaffPrincipal,
    db: DatabaseSession,
    patient_id: str | None = Query(None),
    doctor_id: str | None = Query(None),
    search: str | None = Query(None, description="Match patient name or diagnosis"),
) -> Envelope[list[PrescriptionResponse]]:
    """List prescriptions, newest first."""
    prescriptions = await PrescriptionService(db).list_prescriptions(patient_id, doctor_id, search)
    return Envelope(data=prescriptions)


@router.post(
    "",
    response_model=Envelope[PrescriptionResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create prescription",
)
async def create_prescription(
    data: PrescriptionCreate,
    principal: StaffPrincipal,
    db: DatabaseSession,
) -> Envelope[PrescriptionResponse]:
    """
    Create a prescription.

    Args:
        data: Diagnosis, medicines and patient/doctor details
        principal: Authenticated staff member
        db: Database session

    Returns:
        The stored prescription with its display code
    """
    prescription = await PrescriptionService(db).create_prescription(data)
    return Envelope(message="Prescription created", data=prescription)


@router.get(
    "/{prescription_id}",
    response_model=Envelope[PrescriptionResponse],
    status_code=status.HTTP_200_OK,
    summary="Get prescription",
)
async def get_prescription(
    prescription_id: UUID,
    principal: StaffPrincipal,
    db: DatabaseSession,
) -> Envelope[PrescriptionResponse]:
    return Envelope(data=await PrescriptionService(db).get_prescription(prescription_id))


@router.put(
    "/{prescription_id}",
    response_model=Envelope[PrescriptionResponse],
    status_code=status.HTTP_200_OK,
    summary="Update prescription",
)
async def update_prescription(
    prescription_id: UUID,
    data: PrescriptionUpdate,
    principal: StaffPrincipal,
    db: DatabaseSession,
) -> Envelope[PrescriptionResponse]:
    prescription = await PrescriptionService(db).update_prescription(prescription_id, data)
    return Envelope(message="Prescription updated", data=prescription)


@router.delete(
    "/{prescription_id}",
    response_model=Envelope[None],
    status_code=status.HTTP_200_OK,
    summary="Delete prescription",
)
async def delete_prescription(
    prescription_id: UUID,
    principal: StaffPrincipal,
    db: DatabaseSession,
) -> Envelope[None]:
    await PrescriptionService(db).delete_prescription(prescription_id)
    return Envelope(message="Prescription deleted")
