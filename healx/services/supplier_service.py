"""Supplier service."""

from uuid import UUID

import structlog
from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from healx.core.exceptions import ConflictException, NotFoundException
from healx.models.suppliers import suppliers
from healx.schemas.common import Page
from healx.schemas.suppliers import (
    SupplierCreate,
    SupplierFilters,
    SupplierResponse,
    SupplierUpdate,
)

logger = structlog.get_logger()


class SupplierService:
    """Service for supplier operations."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def create_supplier(self, data: SupplierCreate) -> SupplierResponse:
        """
        Create a supplier.

        Raises:
            ConflictException: If a supplier with the email already exists
        """
        stmt = suppliers.insert().values(**data.model_dump(mode="json")).returning(suppliers)
        try:
            row = dict((await self.db.execute(stmt)).mappings().one())
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictException("Supplier with this email already exists")

        logger.info("supplier_created", supplier_id=str(row["id"]))
        return SupplierResponse.model_validate(row)

    async def get_supplier(self, supplier_id: UUID) -> SupplierResponse:
        """Get a supplier by id."""
        result = await self.db.execute(select(suppliers).where(suppliers.c.id == supplier_id))
        row = result.mappings().first()
        if not row:
            raise NotFoundException("Supplier not found")
        return SupplierResponse.model_validate(dict(row))

    async def list_suppliers(self, filters: SupplierFilters) -> Page[SupplierResponse]:
        """List suppliers with search, category and status filters."""
        conditions = []
        if filters.search:
            pattern = f"%{filters.search}%"
            conditions.append(
                or_(
                    suppliers.c.name.ilike(pattern),
                    suppliers.c.email.ilike(pattern),
                    suppliers.c.phone.ilike(pattern),
                )
            )
        if filters.category:
            conditions.append(suppliers.c.category == filters.category.value)
        if filters.status:
            conditions.append(suppliers.c.status == filters.status.value)

        count_stmt = select(func.count()).select_from(suppliers).where(*conditions)
        total = (await self.db.execute(count_stmt)).scalar_one()

        stmt = (
            select(suppliers)
            .where(*conditions)
            .order_by(suppliers.c.created_at.desc(), suppliers.c.name)
            .offset((filters.page - 1) * filters.page_size)
            .limit(filters.page_size)
        )
        rows = (await self.db.execute(stmt)).mappings().all()
        items = [SupplierResponse.model_validate(dict(r)) for r in rows]
        return Page[SupplierResponse].build(items, total, filters.page, filters.page_size)

    async def update_supplier(self, supplier_id: UUID, data: SupplierUpdate) -> SupplierResponse:
        """
        Update the provided supplier fields.

        Raises:
            NotFoundException: If supplier not found
            ConflictException: If the new email belongs to another supplier
        """
        values = {
            k: v
            for k, v in data.model_dump(exclude_unset=True, mode="json").items()
            if v is not None or k == "address"
        }
        if not values:
            return await self.get_supplier(supplier_id)

        stmt = (
            update(suppliers)
            .where(suppliers.c.id == supplier_id)
            .values(**values)
            .returning(suppliers)
        )
        try:
            row = (await self.db.execute(stmt)).mappings().first()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictException("Supplier with this email already exists")
        if not row:
            raise NotFoundException("Supplier not found")
        await self.db.commit()

        logger.info("supplier_updated", supplier_id=str(supplier_id), fields=sorted(values))
        return SupplierResponse.model_validate(dict(row))

    async def delete_supplier(self, supplier_id: UUID) -> None:
        """
        Delete a supplier.

        Raises:
            NotFoundException: If supplier not found
            ConflictException: If purchase orders still reference it
        """
        try:
            result = await self.db.execute(delete(suppliers).where(suppliers.c.id == supplier_id))
            if result.rowcount == 0:
                raise NotFoundException("Supplier not found")
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictException("Supplier is referenced by purchase orders")

        logger.info("supplier_deleted", supplier_id=str(supplier_id))
