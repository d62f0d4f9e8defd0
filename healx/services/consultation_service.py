"""Consultation records service."""

from datetime import date
from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from healx.core.exceptions import NotFoundException
from healx.models.consultations import consultations
from healx.models.doctors import doctors
from healx.models.patients import patients
from healx.schemas.consultations import ConsultationCreate, ConsultationResponse

logger = structlog.get_logger()


class ConsultationService:
    """Consultations are recorded once and read afterwards."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def _ensure_exists(self, table, row_id: UUID, label: str) -> None:
        result = await self.db.execute(select(table.c.id).where(table.c.id == row_id))
        if result.first() is None:
            raise NotFoundException(f"{label} not found")

    async def create_consultation(self, data: ConsultationCreate) -> ConsultationResponse:
        """
        Record a consultation.

        Raises:
            NotFoundException: If a referenced doctor or patient does not exist
        """
        if data.doctor_id is not None:
            await self._ensure_exists(doctors, data.doctor_id, "Doctor")
        if data.patient_id is not None:
            await self._ensure_exists(patients, data.patient_id, "Patient")

        result = await self.db.execute(
            consultations.insert().values(**data.model_dump()).returning(consultations)
        )
        row = dict(result.mappings().one())
        await self.db.commit()

        logger.info("consultation_recorded", consultation_id=str(row["id"]))
        return ConsultationResponse.model_validate(row)

    async def get_consultation(self, consultation_id: UUID) -> ConsultationResponse:
        """Get a consultation by id."""
        result = await self.db.execute(
            select(consultations).where(consultations.c.id == consultation_id)
        )
        row = result.mappings().first()
        if not row:
            raise NotFoundException("Consultation not found")
        return ConsultationResponse.model_validate(dict(row))

    async def list_consultations(
        self,
        doctor_id: UUID | None = None,
        patient_id: UUID | None = None,
        consultation_date: date | None = None,
    ) -> list[ConsultationResponse]:
        """List consultations, newest first."""
        stmt = select(consultations)
        if doctor_id:
            stmt = stmt.where(consultations.c.doctor_id == doctor_id)
        if patient_id:
            stmt = stmt.where(consultations.c.patient_id == patient_id)
        if consultation_date:
            stmt = stmt.where(consultations.c.consultation_date == consultation_date)
        stmt = stmt.order_by(
            consultations.c.consultation_date.desc(),
            consultations.c.consultation_time.desc(),
        )
        rows = (await self.db.execute(stmt)).mappings().all()
        return [ConsultationResponse.model_validate(dict(r)) for r in rows]
