"""Doctor service for business logic."""

from uuid import UUID

import structlog
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from healx.core.exceptions import NotFoundException
from healx.core.redis_client import CacheManager
from healx.models.doctors import doctors
from healx.schemas.doctors import DoctorCreate, DoctorResponse, DoctorUpdate

logger = structlog.get_logger()


class DoctorService:
    """Service for doctor operations."""

    # Cache TTL in seconds
    DOCTOR_CACHE_TTL = 900  # 15 minutes for individual doctors
    DOCTOR_LIST_CACHE_TTL = 300  # 5 minutes for lists

    def __init__(self, db: AsyncSession, cache_manager: CacheManager | None = None):
        """Initialize service with database session and optional cache manager."""
        self.db = db
        self.cache = cache_manager

    @staticmethod
    def _get_doctor_cache_key(doctor_id: UUID) -> str:
        """Generate cache key for doctor."""
        return f"doctor:{doctor_id}"

    @staticmethod
    def _get_list_cache_key(specialization: str | None) -> str:
        return f"doctor:list:{(specialization or '*all*').lower()}"

    def _invalidate(self, doctor_id: UUID | None = None) -> None:
        if not self.cache:
            return
        if doctor_id is not None:
            self.cache.delete(self._get_doctor_cache_key(doctor_id))
        self.cache.delete_pattern("doctor:list:*")

    async def create_doctor(self, data: DoctorCreate) -> DoctorResponse:
        """Create a new doctor profile."""
        stmt = (
            doctors.insert()
            .values(**data.model_dump(mode="json"))
            .returning(doctors)
        )
        result = await self.db.execute(stmt)
        doctor = dict(result.mappings().one())
        await self.db.commit()

        self._invalidate()
        logger.info("doctor_created", doctor_id=str(doctor["id"]))
        return DoctorResponse.model_validate(doctor)

    async def get_doctor(self, doctor_id: UUID) -> DoctorResponse:
        """
        Get doctor by ID with caching.

        Raises:
            NotFoundException: If doctor not found
        """
        if self.cache:
            cached = self.cache.get_json(self._get_doctor_cache_key(doctor_id))
            if cached:
                return DoctorResponse.model_validate(cached)

        result = await self.db.execute(select(doctors).where(doctors.c.id == doctor_id))
        row = result.mappings().first()
        if not row:
            raise NotFoundException("Doctor not found")

        doctor = DoctorResponse.model_validate(dict(row))
        if self.cache:
            self.cache.set_json(
                self._get_doctor_cache_key(doctor_id),
                doctor.model_dump(mode="json"),
                ttl=self.DOCTOR_CACHE_TTL,
            )
        return doctor

    async def list_doctors(self, specialization: str | None = None) -> list[DoctorResponse]:
        """List doctors, optionally filtered by specialization (case-insensitive)."""
        cache_key = self._get_list_cache_key(specialization)
        if self.cache:
            cached = self.cache.get_json(cache_key)
            if isinstance(cached, list):
                return [DoctorResponse.model_validate(d) for d in cached]

        stmt = select(doctors).order_by(doctors.c.name)
        if specialization:
            stmt = stmt.where(
                func.lower(doctors.c.specialization).like(f"%{specialization.lower()}%")
            )
        rows = (await self.db.execute(stmt)).mappings().all()
        doctor_list = [DoctorResponse.model_validate(dict(r)) for r in rows]

        if self.cache:
            self.cache.set_json(
                cache_key,
                [d.model_dump(mode="json") for d in doctor_list],
                ttl=self.DOCTOR_LIST_CACHE_TTL,
            )
        return doctor_list

    async def update_doctor(self, doctor_id: UUID, data: DoctorUpdate) -> DoctorResponse:
        """
        Update doctor fields that were provided.

        Raises:
            NotFoundException: If doctor not found
        """
        values = data.model_dump(exclude_unset=True, mode="json")
        if values.get("available_hours") is None:
            values.pop("available_hours", None)
        if not values:
            return await self.get_doctor(doctor_id)

        stmt = update(doctors).where(doctors.c.id == doctor_id).values(**values).returning(doctors)
        result = await self.db.execute(stmt)
        row = result.mappings().first()
        if not row:
            raise NotFoundException("Doctor not found")
        await self.db.commit()

        self._invalidate(doctor_id)
        logger.info("doctor_updated", doctor_id=str(doctor_id), fields=sorted(values))
        return DoctorResponse.model_validate(dict(row))
