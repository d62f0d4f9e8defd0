"""Utility expense service."""

import re
from collections import defaultdict
from decimal import Decimal

import structlog
from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from healx.core.exceptions import ConflictException, NotFoundException, ValidationFailedException
from healx.core.identifiers import generate_utility_id
from healx.core.pricing import to_money
from healx.models.finance import utility_expenses
from healx.schemas.common import Page
from healx.schemas.utilities import (
    UTILITY_ID_PATTERN,
    ExpenseBreakdown,
    MonthlyExpense,
    UtilityCreate,
    UtilityFilters,
    UtilityPaymentStatus,
    UtilityResponse,
    UtilityStats,
    UtilityUpdate,
    check_billing_period,
)

logger = structlog.get_logger()

_UTILITY_ID_RE = re.compile(UTILITY_ID_PATTERN)


def normalize_utility_id(utility_id: str) -> str:
    """
    Upper-case a utility id taken from a URL.

    Raises:
        ValidationFailedException: If it is not six characters of [A-Z0-9]
    """
    utility_id = utility_id.strip().upper()
    if not _UTILITY_ID_RE.match(utility_id):
        raise ValidationFailedException(
            "Invalid ID format. ID must be exactly 6 characters long "
            "and contain only uppercase letters and numbers"
        )
    return utility_id


class UtilityService:
    """Service for utility bills and spending statistics."""

    MAX_ID_ATTEMPTS = 10
    MONTHS_IN_STATS = 12
    OVERDUE_IN_STATS = 10

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def _get_row(self, utility_id: str) -> dict:
        result = await self.db.execute(
            select(utility_expenses).where(
                utility_expenses.c.utility_id == normalize_utility_id(utility_id)
            )
        )
        row = result.mappings().first()
        if not row:
            raise NotFoundException("Utility record not found")
        return dict(row)

    async def _id_taken(self, utility_id: str) -> bool:
        result = await self.db.execute(
            select(utility_expenses.c.id).where(utility_expenses.c.utility_id == utility_id)
        )
        return result.first() is not None

    async def generate_id(self) -> str:
        """Return a utility id not yet used by any record."""
        for _ in range(self.MAX_ID_ATTEMPTS):
            candidate = generate_utility_id()
            if not await self._id_taken(candidate):
                return candidate
        raise ConflictException("Could not generate a unique utility ID")

    async def create_utility(self, data: UtilityCreate) -> UtilityResponse:
        """
        Record a utility bill.

        Raises:
            ConflictException: If the utility id is already used
        """
        utility_id = data.utility_id or await self.generate_id()
        if await self._id_taken(utility_id):
            raise ConflictException("Utility record with this Utility ID already exists")

        values = data.model_dump(exclude={"utility_id"})
        values.update(
            utility_id=utility_id,
            category=data.category.value,
            payment_status=data.payment_status.value,
            amount=to_money(data.amount),
        )
        try:
            row = dict(
                (
                    await self.db.execute(
                        utility_expenses.insert().values(**values).returning(utility_expenses)
                    )
                ).mappings().one()
            )
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictException("Utility record with this Utility ID already exists")

        logger.info(
            "utility_recorded",
            utility_id=utility_id,
            category=data.category.value,
            amount=str(values["amount"]),
        )
        return UtilityResponse.model_validate(row)

    async def get_utility(self, utility_id: str) -> UtilityResponse:
        return UtilityResponse.model_validate(await self._get_row(utility_id))

    async def list_utilities(self, filters: UtilityFilters) -> Page[UtilityResponse]:
        """List utility bills, newest first."""
        conditions = []
        if filters.search:
            pattern = f"%{filters.search}%"
            conditions.append(
                or_(
                    utility_expenses.c.utility_id.ilike(pattern),
                    utility_expenses.c.description.ilike(pattern),
                    utility_expenses.c.vendor_name.ilike(pattern),
                    utility_expenses.c.invoice_number.ilike(pattern),
                )
            )
        if filters.category:
            conditions.append(utility_expenses.c.category == filters.category.value)
        if filters.payment_status:
            conditions.append(utility_expenses.c.payment_status == filters.payment_status.value)
        if filters.vendor_name:
            conditions.append(utility_expenses.c.vendor_name.ilike(f"%{filters.vendor_name}%"))
        if filters.start_date:
            conditions.append(utility_expenses.c.billing_period_start >= filters.start_date)
        if filters.end_date:
            conditions.append(utility_expenses.c.billing_period_start <= filters.end_date)

        count_stmt = select(func.count()).select_from(utility_expenses).where(*conditions)
        total = (await self.db.execute(count_stmt)).scalar_one()

        stmt = (
            select(utility_expenses)
            .where(*conditions)
            .order_by(utility_expenses.c.created_at.desc())
            .offset((filters.page - 1) * filters.page_size)
            .limit(filters.page_size)
        )
        rows = (await self.db.execute(stmt)).mappings().all()
        items = [UtilityResponse.model_validate(dict(r)) for r in rows]
        return Page[UtilityResponse].build(items, total, filters.page, filters.page_size)

    async def update_utility(self, utility_id: str, data: UtilityUpdate) -> UtilityResponse:
        """
        Amend a utility bill.

        Raises:
            NotFoundException: If the bill is missing
            ValidationFailedException: If the resulting billing period is invalid
        """
        row = await self._get_row(utility_id)
        values = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
        if not values:
            return UtilityResponse.model_validate(row)

        if {"billing_period_start", "billing_period_end"} & values.keys():
            try:
                check_billing_period(
                    values.get("billing_period_start", row["billing_period_start"]),
                    values.get("billing_period_end", row["billing_period_end"]),
                )
            except ValueError as e:
                raise ValidationFailedException(str(e))

        for field in ("category", "payment_status"):
            if field in values:
                values[field] = values[field].value
        if "amount" in values:
            values["amount"] = to_money(values["amount"])

        row = dict(
            (
                await self.db.execute(
                    update(utility_expenses)
                    .where(utility_expenses.c.id == row["id"])
                    .values(**values)
                    .returning(utility_expenses)
                )
            ).mappings().one()
        )
        await self.db.commit()
        logger.info("utility_updated", utility_id=row["utility_id"], fields=sorted(values))
        return UtilityResponse.model_validate(row)

    async def delete_utility(self, utility_id: str) -> UtilityResponse:
        """Delete a utility bill and return what was removed."""
        row = await self._get_row(utility_id)
        await self.db.execute(delete(utility_expenses).where(utility_expenses.c.id == row["id"]))
        await self.db.commit()
        logger.info("utility_deleted", utility_id=row["utility_id"])
        return UtilityResponse.model_validate(row)

    async def stats(self) -> UtilityStats:
        """Totals by category, payment status and billing month, plus overdue bills."""

        async def breakdown(column) -> list[ExpenseBreakdown]:
            stmt = (
                select(
                    column.label("key"),
                    func.sum(utility_expenses.c.amount).label("total"),
                    func.count().label("count"),
                )
                .group_by(column)
            )
            rows = (await self.db.execute(stmt)).mappings().all()
            items = [
                ExpenseBreakdown(key=r["key"], total=to_money(r["total"] or 0), count=r["count"])
                for r in rows
            ]
            return sorted(items, key=lambda b: b.total, reverse=True)

        by_category = await breakdown(utility_expenses.c.category)
        by_status = await breakdown(utility_expenses.c.payment_status)

        # Grouped in Python so the month arithmetic is the same on every dialect
        monthly: dict[tuple[int, int], list] = defaultdict(lambda: [Decimal("0"), 0])
        period_rows = await self.db.execute(
            select(utility_expenses.c.billing_period_start, utility_expenses.c.amount)
        )
        for start, amount in period_rows:
            bucket = monthly[(start.year, start.month)]
            bucket[0] += to_money(amount)
            bucket[1] += 1
        monthly_expenses = [
            MonthlyExpense(year=year, month=month, total=to_money(total), count=count)
            for (year, month), (total, count) in sorted(monthly.items(), reverse=True)
        ][: self.MONTHS_IN_STATS]

        overdue_rows = (
            await self.db.execute(
                select(utility_expenses)
                .where(utility_expenses.c.payment_status == UtilityPaymentStatus.OVERDUE.value)
                .order_by(utility_expenses.c.billing_period_end)
                .limit(self.OVERDUE_IN_STATS)
            )
        ).mappings().all()

        return UtilityStats(
            total_expenses=sum((b.total for b in by_category), to_money(0)),
            total_records=sum(b.count for b in by_category),
            category_breakdown=by_category,
            payment_status_breakdown=by_status,
            monthly_expenses=monthly_expenses,
            recent_overdue=[UtilityResponse.model_validate(dict(r)) for r in overdue_rows],
        )
