"""Patient profile service."""

from uuid import UUID

import structlog
from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from healx.core.exceptions import NotFoundException
from healx.models.patients import patients
from healx.schemas.auth import PatientResponse, PatientUpdate
from healx.schemas.common import Page

logger = structlog.get_logger()


class PatientService:
    """Service for patient lookups and profile edits."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def get_patient(self, patient_id: UUID) -> PatientResponse:
        """
        Get a patient by id.

        Raises:
            NotFoundException: If no such patient exists
        """
        result = await self.db.execute(select(patients).where(patients.c.id == patient_id))
        row = result.mappings().first()
        if not row:
            raise NotFoundException("Patient not found")
        return PatientResponse.model_validate(dict(row))

    async def update_profile(self, patient_id: UUID, data: PatientUpdate) -> PatientResponse:
        """Apply a profile edit; only provided fields change."""
        values = data.model_dump(exclude_unset=True, mode="json")
        if not values:
            return await self.get_patient(patient_id)

        stmt = (
            update(patients)
            .where(patients.c.id == patient_id)
            .values(**values)
            .returning(patients)
        )
        result = await self.db.execute(stmt)
        row = result.mappings().first()
        if not row:
            raise NotFoundException("Patient not found")
        await self.db.commit()

        logger.info("patient_profile_updated", patient_id=str(patient_id), fields=sorted(values))
        return PatientResponse.model_validate(dict(row))

    async def list_patients(
        self,
        search: str | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> Page[PatientResponse]:
        """List patients, optionally matching name, email or patient code."""
        conditions = []
        if search:
            pattern = f"%{search.lower()}%"
            conditions.append(
                or_(
                    func.lower(patients.c.name).like(pattern),
                    patients.c.email.like(pattern),
                    func.lower(patients.c.patient_code).like(pattern),
                )
            )

        count_stmt = select(func.count()).select_from(patients).where(*conditions)
        total = (await self.db.execute(count_stmt)).scalar_one()

        stmt = (
            select(patients)
            .where(*conditions)
            .order_by(patients.c.created_at.desc(), patients.c.name)
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        rows = (await self.db.execute(stmt)).mappings().all()
        items = [PatientResponse.model_validate(dict(r)) for r in rows]
        return Page[PatientResponse].build(items, total, page, page_size)
