"""Payment (invoice) service.

Subtotals, total and balance are derived from the service lines on every
write; amounts sent by clients are never stored.
"""

from datetime import UTC, datetime
from uuid import UUID

import structlog
from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from healx.config import settings
from healx.core.exceptions import ConflictException, NotFoundException, ValidationFailedException
from healx.core.identifiers import generate_invoice_number
from healx.core.pricing import invoice_totals, line_total, to_money
from healx.models.doctors import doctors
from healx.models.patients import patients
from healx.models.payments import payment_services, payments
from healx.schemas.common import Page
from healx.schemas.payments import (
    MethodBreakdown,
    PaymentCreate,
    PaymentFilters,
    PaymentResponse,
    PaymentSummary,
    PaymentUpdate,
)

logger = structlog.get_logger()


class PaymentService:
    """Service for invoices and their service lines."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def _ensure_exists(self, table, row_id: UUID, label: str) -> None:
        result = await self.db.execute(select(table.c.id).where(table.c.id == row_id))
        if result.first() is None:
            raise NotFoundException(f"{label} not found")

    async def _get_row(self, payment_id: UUID) -> dict:
        result = await self.db.execute(select(payments).where(payments.c.id == payment_id))
        row = result.mappings().first()
        if not row:
            raise NotFoundException("Payment not found")
        return dict(row)

    async def _assemble(self, rows: list[dict]) -> list[PaymentResponse]:
        if not rows:
            return []
        line_rows = (
            await self.db.execute(
                select(payment_services)
                .where(payment_services.c.payment_id.in_([r["id"] for r in rows]))
                .order_by(payment_services.c.position)
            )
        ).mappings().all()
        responses = []
        for row in rows:
            data = dict(row)
            data["services"] = [dict(s) for s in line_rows if s["payment_id"] == row["id"]]
            responses.append(PaymentResponse.model_validate(data))
        return responses

    async def create_payment(self, data: PaymentCreate) -> PaymentResponse:
        """
        Issue an invoice.

        Raises:
            NotFoundException: If the referenced patient or doctor is missing
            ValidationFailedException: If the discount exceeds the bill or the
                paid amount exceeds the total
            ConflictException: If the invoice number is already used
        """
        if data.patient_id is not None:
            await self._ensure_exists(patients, data.patient_id, "Patient")
        if data.doctor_id is not None:
            await self._ensure_exists(doctors, data.doctor_id, "Doctor")

        lines = [(s.quantity, s.unit_price) for s in data.services]
        try:
            totals = invoice_totals(lines, data.discount, data.tax, data.amount_paid)
        except ValueError as e:
            raise ValidationFailedException(str(e))

        invoice_number = data.invoice_number or generate_invoice_number()
        stmt = (
            payments.insert()
            .values(
                invoice_number=invoice_number,
                hospital_name=data.hospital_name or settings.hospital_name,
                branch_name=data.branch_name,
                invoice_date=data.invoice_date or datetime.now(UTC).date(),
                patient_id=data.patient_id,
                patient_name=data.patient_name,
                patient_phone=data.patient_phone,
                patient_email=data.patient_email.lower() if data.patient_email else None,
                patient_address=data.patient_address,
                doctor_id=data.doctor_id,
                doctor_name=data.doctor_name,
                department=data.department,
                subtotal=totals.subtotal,
                discount=to_money(data.discount),
                tax=to_money(data.tax),
                total_amount=totals.total_amount,
                amount_paid=to_money(data.amount_paid),
                balance=totals.balance,
                payment_method=data.payment_method.value,
                terms=data.terms,
                note=data.note,
            )
            .returning(payments)
        )
        try:
            row = dict((await self.db.execute(stmt)).mappings().one())
            await self.db.execute(
                payment_services.insert(),
                [
                    {
                        "payment_id": row["id"],
                        "position": position,
                        "service_type": s.service_type,
                        "description": s.description,
                        "quantity": s.quantity,
                        "unit_price": to_money(s.unit_price),
                        "subtotal": line_total(s.quantity, s.unit_price),
                    }
                    for position, s in enumerate(data.services)
                ],
            )
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictException("Invoice number already exists")

        logger.info(
            "invoice_issued",
            payment_id=str(row["id"]),
            invoice_number=invoice_number,
            total_amount=str(totals.total_amount),
            balance=str(totals.balance),
        )
        return (await self._assemble([row]))[0]

    async def get_payment(self, payment_id: UUID) -> PaymentResponse:
        """Get an invoice with its service lines."""
        return (await self._assemble([await self._get_row(payment_id)]))[0]

    async def list_payments(self, filters: PaymentFilters) -> Page[PaymentResponse]:
        """List invoices, newest first."""
        conditions = []
        if filters.search:
            pattern = f"%{filters.search}%"
            conditions.append(
                or_(
                    payments.c.patient_name.ilike(pattern),
                    payments.c.invoice_number.ilike(pattern),
                    payments.c.doctor_name.ilike(pattern),
                )
            )
        if filters.payment_method:
            conditions.append(payments.c.payment_method == filters.payment_method.value)
        if filters.patient_id:
            conditions.append(payments.c.patient_id == filters.patient_id)
        if filters.start_date:
            conditions.append(payments.c.invoice_date >= filters.start_date)
        if filters.end_date:
            conditions.append(payments.c.invoice_date <= filters.end_date)

        count_stmt = select(func.count()).select_from(payments).where(*conditions)
        total = (await self.db.execute(count_stmt)).scalar_one()

        stmt = (
            select(payments)
            .where(*conditions)
            .order_by(payments.c.invoice_date.desc(), payments.c.created_at.desc())
            .offset((filters.page - 1) * filters.page_size)
            .limit(filters.page_size)
        )
        rows = [dict(r) for r in (await self.db.execute(stmt)).mappings().all()]
        items = await self._assemble(rows)
        return Page[PaymentResponse].build(items, total, filters.page, filters.page_size)

    async def update_payment(self, payment_id: UUID, data: PaymentUpdate) -> PaymentResponse:
        """
        Record a payment or amend invoice details.

        Line items, discount and tax are fixed once issued; a new
        ``amount_paid`` recomputes the balance.

        Raises:
            NotFoundException: If the invoice is missing
            ValidationFailedException: If the paid amount exceeds the total
        """
        row = await self._get_row(payment_id)
        values = {
            k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None
        }
        if "payment_method" in values:
            values["payment_method"] = data.payment_method.value
        if "patient_email" in values:
            values["patient_email"] = values["patient_email"].lower()
        if "amount_paid" in values:
            paid = to_money(values["amount_paid"])
            total = to_money(row["total_amount"])
            if paid > total:
                raise ValidationFailedException("Amount paid cannot exceed the total amount")
            values["amount_paid"] = paid
            values["balance"] = to_money(total - paid)

        if values:
            row = dict(
                (
                    await self.db.execute(
                        update(payments)
                        .where(payments.c.id == payment_id)
                        .values(**values)
                        .returning(payments)
                    )
                ).mappings().one()
            )
            await self.db.commit()
            logger.info("invoice_updated", payment_id=str(payment_id), fields=sorted(values))

        return (await self._assemble([row]))[0]

    async def delete_payment(self, payment_id: UUID) -> None:
        """Delete an invoice and its service lines."""
        await self._get_row(payment_id)
        await self.db.execute(
            delete(payment_services).where(payment_services.c.payment_id == payment_id)
        )
        await self.db.execute(delete(payments).where(payments.c.id == payment_id))
        await self.db.commit()
        logger.info("invoice_deleted", payment_id=str(payment_id))

    async def summary(self) -> PaymentSummary:
        """Totals billed, collected and outstanding, with a per-method breakdown."""
        stmt = (
            select(
                payments.c.payment_method,
                func.count().label("count"),
                func.sum(payments.c.total_amount).label("total_amount"),
                func.sum(payments.c.amount_paid).label("amount_paid"),
                func.sum(payments.c.balance).label("balance"),
            )
            .group_by(payments.c.payment_method)
            .order_by(payments.c.payment_method)
        )
        rows = (await self.db.execute(stmt)).mappings().all()

        zero = to_money(0)
        by_method = [
            MethodBreakdown(
                payment_method=r["payment_method"],
                count=r["count"],
                total_amount=to_money(r["total_amount"] or 0),
                amount_paid=to_money(r["amount_paid"] or 0),
            )
            for r in rows
        ]
        return PaymentSummary(
            total_invoices=sum(r["count"] for r in rows),
            total_billed=sum((m.total_amount for m in by_method), zero),
            total_collected=sum((m.amount_paid for m in by_method), zero),
            total_outstanding=sum((to_money(r["balance"] or 0) for r in rows), zero),
            by_method=by_method,
        )
