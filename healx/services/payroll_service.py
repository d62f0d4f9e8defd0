"""Payroll service.

EPF, ETF and net salary are derived from gross salary, bonuses and
deductions on every write.
"""

from uuid import UUID

import structlog
from sqlalchemy import case, delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from healx.core.exceptions import (
    ConflictException,
    InvalidStatusTransitionException,
    NotFoundException,
    ValidationFailedException,
)
from healx.core.identifiers import generate_payroll_id
from healx.core.pricing import payroll_amounts, to_money
from healx.models.finance import payrolls
from healx.schemas.common import Page
from healx.schemas.payroll import (
    PAYROLL_TRANSITIONS,
    PayrollCreate,
    PayrollFilters,
    PayrollMonth,
    PayrollResponse,
    PayrollStatus,
    PayrollStatusUpdate,
    PayrollSummary,
    PayrollUpdate,
)

logger = structlog.get_logger()


class PayrollService:
    """Service for monthly payroll entries."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def _get_row(self, payroll_id: UUID) -> dict:
        result = await self.db.execute(select(payrolls).where(payrolls.c.id == payroll_id))
        row = result.mappings().first()
        if not row:
            raise NotFoundException("Payroll record not found")
        return dict(row)

    async def _period_taken(self, employee_id: str, month: PayrollMonth, year: int) -> bool:
        result = await self.db.execute(
            select(payrolls.c.id).where(
                payrolls.c.employee_id == employee_id,
                payrolls.c.payroll_month == month.value,
                payrolls.c.payroll_year == year,
            )
        )
        return result.first() is not None

    async def create_payroll(self, data: PayrollCreate) -> PayrollResponse:
        """
        Record a payroll entry.

        Raises:
            ConflictException: If the employee already has an entry for the
                month, or the payroll id is taken
            ValidationFailedException: If deductions exceed the salary payable
        """
        if await self._period_taken(data.employee_id, data.payroll_month, data.payroll_year):
            raise ConflictException(
                "Payroll already exists for this employee in the specified month and year"
            )
        try:
            amounts = payroll_amounts(data.gross_salary, data.bonuses, data.deductions)
        except ValueError as e:
            raise ValidationFailedException(str(e))

        payroll_id = data.payroll_id or generate_payroll_id(
            data.payroll_year, data.payroll_month.number
        )
        stmt = (
            payrolls.insert()
            .values(
                payroll_id=payroll_id,
                employee_id=data.employee_id,
                employee_name=data.employee_name,
                payroll_month=data.payroll_month.value,
                payroll_year=data.payroll_year,
                gross_salary=to_money(data.gross_salary),
                bonuses=to_money(data.bonuses),
                deductions=to_money(data.deductions),
                epf=amounts.epf,
                etf=amounts.etf,
                net_salary=amounts.net_salary,
                status=PayrollStatus.PENDING.value,
            )
            .returning(payrolls)
        )
        try:
            row = dict((await self.db.execute(stmt)).mappings().one())
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictException("Payroll ID already exists")

        logger.info(
            "payroll_created",
            payroll_id=payroll_id,
            employee_id=data.employee_id,
            period=f"{data.payroll_month.value} {data.payroll_year}",
            net_salary=str(amounts.net_salary),
        )
        return PayrollResponse.model_validate(row)

    async def get_payroll(self, payroll_id: UUID) -> PayrollResponse:
        return PayrollResponse.model_validate(await self._get_row(payroll_id))

    async def list_payrolls(self, filters: PayrollFilters) -> Page[PayrollResponse]:
        """List payroll entries, newest first."""
        conditions = []
        if filters.employee_id:
            conditions.append(payrolls.c.employee_id == filters.employee_id)
        if filters.payroll_month:
            conditions.append(payrolls.c.payroll_month == filters.payroll_month.value)
        if filters.payroll_year:
            conditions.append(payrolls.c.payroll_year == filters.payroll_year)
        if filters.status:
            conditions.append(payrolls.c.status == filters.status.value)

        count_stmt = select(func.count()).select_from(payrolls).where(*conditions)
        total = (await self.db.execute(count_stmt)).scalar_one()

        stmt = (
            select(payrolls)
            .where(*conditions)
            .order_by(payrolls.c.created_at.desc())
            .offset((filters.page - 1) * filters.page_size)
            .limit(filters.page_size)
        )
        rows = (await self.db.execute(stmt)).mappings().all()
        items = [PayrollResponse.model_validate(dict(r)) for r in rows]
        return Page[PayrollResponse].build(items, total, filters.page, filters.page_size)

    async def update_payroll(self, payroll_id: UUID, data: PayrollUpdate) -> PayrollResponse:
        """
        Amend an unpaid payroll entry; contributions and net pay are recomputed.

        Raises:
            NotFoundException: If the entry is missing
            ValidationFailedException: If the entry is paid or deductions
                exceed the salary payable
        """
        row = await self._get_row(payroll_id)
        status = PayrollStatus(row["status"])
        if not PAYROLL_TRANSITIONS[status]:
            raise ValidationFailedException(f"Cannot modify a {status.value} payroll")

        values = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
        if not values:
            return PayrollResponse.model_validate(row)

        gross = values.get("gross_salary", row["gross_salary"])
        bonuses = values.get("bonuses", row["bonuses"])
        deductions = values.get("deductions", row["deductions"])
        try:
            amounts = payroll_amounts(gross, bonuses, deductions)
        except ValueError as e:
            raise ValidationFailedException(str(e))

        for field in ("gross_salary", "bonuses", "deductions"):
            if field in values:
                values[field] = to_money(values[field])
        values.update(epf=amounts.epf, etf=amounts.etf, net_salary=amounts.net_salary)

        row = dict(
            (
                await self.db.execute(
                    update(payrolls)
                    .where(payrolls.c.id == payroll_id)
                    .values(**values)
                    .returning(payrolls)
                )
            ).mappings().one()
        )
        await self.db.commit()
        logger.info("payroll_updated", payroll_id=row["payroll_id"], fields=sorted(values))
        return PayrollResponse.model_validate(row)

    async def change_status(
        self,
        payroll_id: UUID,
        data: PayrollStatusUpdate,
    ) -> PayrollResponse:
        """
        Move an entry along Pending -> Processed -> Paid.

        Requesting the current status is a no-op.

        Raises:
            NotFoundException: If the entry is missing
            InvalidStatusTransitionException: If the move is not allowed
        """
        row = await self._get_row(payroll_id)
        current = PayrollStatus(row["status"])
        if data.status == current:
            return PayrollResponse.model_validate(row)
        if data.status not in PAYROLL_TRANSITIONS[current]:
            raise InvalidStatusTransitionException(current.value, data.status.value)

        row = dict(
            (
                await self.db.execute(
                    update(payrolls)
                    .where(payrolls.c.id == payroll_id)
                    .values(status=data.status.value)
                    .returning(payrolls)
                )
            ).mappings().one()
        )
        await self.db.commit()
        logger.info(
            "payroll_status_changed",
            payroll_id=row["payroll_id"],
            from_status=current.value,
            to_status=data.status.value,
        )
        return PayrollResponse.model_validate(row)

    async def delete_payroll(self, payroll_id: UUID) -> None:
        """Delete a payroll entry."""
        result = await self.db.execute(delete(payrolls).where(payrolls.c.id == payroll_id))
        if result.rowcount == 0:
            raise NotFoundException("Payroll record not found")
        await self.db.commit()
        logger.info("payroll_deleted", payroll_id=str(payroll_id))

    async def summary(
        self,
        payroll_month: PayrollMonth | None = None,
        payroll_year: int | None = None,
    ) -> PayrollSummary:
        """Totals and status counts, optionally for one month and/or year."""
        conditions = []
        if payroll_month:
            conditions.append(payrolls.c.payroll_month == payroll_month.value)
        if payroll_year:
            conditions.append(payrolls.c.payroll_year == payroll_year)

        def status_count(status: PayrollStatus):
            return func.coalesce(
                func.sum(case((payrolls.c.status == status.value, 1), else_=0)), 0
            )

        stmt = select(
            func.count().label("total_employees"),
            func.sum(payrolls.c.gross_salary).label("total_gross_salary"),
            func.sum(payrolls.c.deductions).label("total_deductions"),
            func.sum(payrolls.c.bonuses).label("total_bonuses"),
            func.sum(payrolls.c.epf).label("total_epf"),
            func.sum(payrolls.c.etf).label("total_etf"),
            func.sum(payrolls.c.net_salary).label("total_net_salary"),
            status_count(PayrollStatus.PENDING).label("pending_payrolls"),
            status_count(PayrollStatus.PROCESSED).label("processed_payrolls"),
            status_count(PayrollStatus.PAID).label("paid_payrolls"),
        ).where(*conditions)
        row = (await self.db.execute(stmt)).mappings().one()

        return PayrollSummary(
            total_employees=row["total_employees"],
            total_gross_salary=to_money(row["total_gross_salary"] or 0),
            total_deductions=to_money(row["total_deductions"] or 0),
            total_bonuses=to_money(row["total_bonuses"] or 0),
            total_epf=to_money(row["total_epf"] or 0),
            total_etf=to_money(row["total_etf"] or 0),
            total_net_salary=to_money(row["total_net_salary"] or 0),
            pending_payrolls=row["pending_payrolls"],
            processed_payrolls=row["processed_payrolls"],
            paid_payrolls=row["paid_payrolls"],
        )
