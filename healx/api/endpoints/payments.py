"""Payment (invoice) endpoints."""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status
from pydantic import BeforeValidator

from healx.dependencies import DatabaseSession, FinancePrincipal
from healx.schemas.common import Envelope, Page
from healx.schemas.payments import (
    PaymentCreate,
    PaymentFilters,
    PaymentMethod,
    PaymentResponse,
    PaymentSummary,
    PaymentUpdate,
    normalize_payment_method,
)
from healx.services.payment_service import PaymentService

router = APIRouter()


@router.get(
    "/summary",
    response_model=Envelope[PaymentSummary],
    status_code=status.HTTP_200_OK,
    summary="Payment summary",
)
async def payment_summary(principal: FinancePrincipal, db: DatabaseSession) -> Envelope[PaymentSummary]:
    """Totals billed, collected and outstanding, broken down by payment method."""
    return Envelope(data=await PaymentService(db).summary())


@router.get(
    "",
    response_model=Envelope[Page[PaymentResponse]],
    status_code=status.HTTP_200_OK,
    summary="List invoices",
)
async def list_payments(
    principal: FinancePrincipal,
    db: DatabaseSession,
    search: str | None = Query(None, description="Patient, doctor or invoice number"),
    payment_method: Annotated[
        PaymentMethod | None, BeforeValidator(normalize_payment_method), Query()
    ] = None,
    patient_id: UUID | None = Query(None),
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
) -> Envelope[Page[PaymentResponse]]:
    filters = PaymentFilters(
        search=search,
        payment_method=payment_method,
        patient_id=patient_id,
        start_date=start_date,
        end_date=end_date,
        page=page,
        page_size=page_size,
    )
    return Envelope(data=await PaymentService(db).list_payments(filters))


@router.post(
    "",
    response_model=Envelope[PaymentResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create invoice",
)
async def create_payment(
    data: PaymentCreate,
    principal: FinancePrincipal,
    db: DatabaseSession,
) -> Envelope[PaymentResponse]:
    """
    Issue an invoice.

    Args:
        data: Patient, doctor, service lines, discount, tax and amount paid
        principal: Financial manager or admin
        db: Database session

    Returns:
        The invoice with server-computed subtotal, total and balance

    Raises:
        ConflictException: If the invoice number is already used
        ValidationFailedException: If the amounts are inconsistent
    """
    payment = await PaymentService(db).create_payment(data)
    return Envelope(message="Payment recorded", data=payment)


@router.get(
    "/{payment_id}",
    response_model=Envelope[PaymentResponse],
    status_code=status.HTTP_200_OK,
    summary="Get invoice",
)
async def get_payment(
    payment_id: UUID,
    principal: FinancePrincipal,
    db: DatabaseSession,
) -> Envelope[PaymentResponse]:
    return Envelope(data=await PaymentService(db).get_payment(payment_id))


@router.put(
    "/{payment_id}",
    response_model=Envelope[PaymentResponse],
    status_code=status.HTTP_200_OK,
    summary="Update invoice",
)
async def update_payment(
    payment_id: UUID,
    data: PaymentUpdate,
    principal: FinancePrincipal,
    db: DatabaseSession,
) -> Envelope[PaymentResponse]:
    """Record a payment or amend notes; the balance is recomputed."""
    payment = await PaymentService(db).update_payment(payment_id, data)
    return Envelope(message="Payment updated", data=payment)


@router.delete(
    "/{payment_id}",
    response_model=Envelope[None],
    status_code=status.HTTP_200_OK,
    summary="Delete invoice",
)
async def delete_payment(
    payment_id: UUID,
    principal: FinancePrincipal,
    db: DatabaseSession,
) -> Envelope[None]:
    await PaymentService(db).delete_payment(payment_id)
    return Envelope(message="Payment deleted")
