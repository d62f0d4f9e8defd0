"""Prescription service."""

from datetime import UTC, datetime
from uuid import UUID

import structlog
from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from healx.core.exceptions import NotFoundException
from healx.models.prescriptions import prescriptions
from healx.schemas.prescriptions import (
    PrescriptionCreate,
    PrescriptionResponse,
    PrescriptionUpdate,
)

logger = structlog.get_logger()


def _values(data: PrescriptionCreate | PrescriptionUpdate) -> dict:
    values = data.model_dump(mode="json")
    values["prescribed_on"] = data.prescribed_on or datetime.now(UTC).date()
    values["patient_date_of_birth"] = data.patient_date_of_birth
    return values


class PrescriptionService:
    """CRUD over prescriptions."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def create_prescription(self, data: PrescriptionCreate) -> PrescriptionResponse:
        """Create a prescription; ``prescribed_on`` defaults to today."""
        result = await self.db.execute(
            prescriptions.insert().values(**_values(data)).returning(prescriptions)
        )
        row = dict(result.mappings().one())
        await self.db.commit()

        logger.info(
            "prescription_created",
            prescription_id=str(row["id"]),
            medicines=len(row["medicines"]),
        )
        return PrescriptionResponse.model_validate(row)

    async def get_prescription(self, prescription_id: UUID) -> PrescriptionResponse:
        """Get a prescription by id."""
        result = await self.db.execute(
            select(prescriptions).where(prescriptions.c.id == prescription_id)
        )
        row = result.mappings().first()
        if not row:
            raise NotFoundException("Prescription not found")
        return PrescriptionResponse.model_validate(dict(row))

    async def list_prescriptions(
        self,
        patient_id: str | None = None,
        doctor_id: str | None = None,
        search: str | None = None,
    ) -> list[PrescriptionResponse]:
        """List prescriptions, newest first."""
        stmt = select(prescriptions)
        if patient_id:
            stmt = stmt.where(prescriptions.c.patient_id == patient_id)
        if doctor_id:
            stmt = stmt.where(prescriptions.c.doctor_id == doctor_id)
        if search:
            pattern = f"%{search.lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(prescriptions.c.patient_name).like(pattern),
                    func.lower(prescriptions.c.diagnosis).like(pattern),
                )
            )
        stmt = stmt.order_by(prescriptions.c.prescribed_on.desc(), prescriptions.c.created_at.desc())
        rows = (await self.db.execute(stmt)).mappings().all()
        return [PrescriptionResponse.model_validate(dict(r)) for r in rows]

    async def update_prescription(
        self,
        prescription_id: UUID,
        data: PrescriptionUpdate,
    ) -> PrescriptionResponse:
        """Replace a prescription's content."""
        stmt = (
            update(prescriptions)
            .where(prescriptions.c.id == prescription_id)
            .values(**_values(data))
            .returning(prescriptions)
        )
        row = (await self.db.execute(stmt)).mappings().first()
        if not row:
            raise NotFoundException("Prescription not found")
        await self.db.commit()

        logger.info("prescription_updated", prescription_id=str(prescription_id))
        return PrescriptionResponse.model_validate(dict(row))

    async def delete_prescription(self, prescription_id: UUID) -> None:
        """Delete a prescription."""
        result = await self.db.execute(
            delete(prescriptions).where(prescriptions.c.id == prescription_id)
        )
        if result.rowcount == 0:
            raise NotFoundException("Prescription not found")
        await self.db.commit()
        logger.info("prescription_deleted", prescription_id=str(prescription_id))
