"""Consultation endpoints."""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Query, status

from healx.dependencies import DatabaseSession, StaffPrincipal
from healx.schemas.common import Envelope
from healx.schemas.consultations import ConsultationCreate, ConsultationResponse
from healx.services.consultation_service import ConsultationService

router = APIRouter()


@router.post(
    "",
    response_model=Envelope[ConsultationResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Record consultation",
)
async def create_consultation(
    data: ConsultationCreate,
    principal: StaffPrincipal,
    db: DatabaseSession,
) -> Envelope[ConsultationResponse]:
    """Record a consultation after a visit."""
    consultation = await ConsultationService(db).create_consultation(data)
    return Envelope(message="Consultation recorded", data=consultation)


@router.get(
    "",
    response_model=Envelope[list[ConsultationResponse]],
    status_code=status.HTTP_200_OK,
    summary="List consultations",
)
async def list_consultations(
    principal: StaffPrincipal,
    db: DatabaseSession,
    doctor_id: UUID | None = Query(None),
    patient_id: UUID | None = Query(None),
    consultation_date: date | None = Query(None),
) -> Envelope[list[ConsultationResponse]]:
    """List consultations, newest first."""
    consultations = await ConsultationService(db).list_consultations(
        doctor_id, patient_id, consultation_date
    )
    return Envelope(data=consultations)


@router.get(
    "/{consultation_id}",
    response_model=Envelope[ConsultationResponse],
    status_code=status.HTTP_200_OK,
    summary="Get consultation",
)
async def get_consultation(
    consultation_id: UUID,
    principal: StaffPrincipal,
    db: DatabaseSession,
) -> Envelope[ConsultationResponse]:
    return Envelope(data=await ConsultationService(db).get_consultation(consultation_id))
