"""Payroll endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status
from pydantic import BeforeValidator

from healx.dependencies import DatabaseSession, FinancePrincipal
from healx.schemas.common import Envelope, Page
from healx.schemas.payroll import (
    PayrollCreate,
    PayrollFilters,
    PayrollMonth,
    PayrollResponse,
    PayrollStatus,
    PayrollStatusUpdate,
    PayrollSummary,
    PayrollUpdate,
    normalize_month,
)
from healx.services.payroll_service import PayrollService

router = APIRouter()

MonthQuery = Annotated[PayrollMonth | None, BeforeValidator(normalize_month), Query()]


@router.post(
    "",
    response_model=Envelope[PayrollResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create payroll entry",
)
async def create_payroll(
    data: PayrollCreate,
    principal: FinancePrincipal,
    db: DatabaseSession,
) -> Envelope[PayrollResponse]:
    """
    Record one employee's pay for a month.

    Args:
        data: Employee, period, gross salary, bonuses and deductions
        principal: Financial manager or admin
        db: Database session

    Returns:
        The entry with server-computed EPF, ETF and net salary

    Raises:
        ConflictException: If the employee already has an entry for the period
    """
    payroll = await PayrollService(db).create_payroll(data)
    return Envelope(message="Payroll created successfully", data=payroll)


@router.get(
    "",
    response_model=Envelope[Page[PayrollResponse]],
    status_code=status.HTTP_200_OK,
    summary="List payroll entries",
)
async def list_payrolls(
    principal: FinancePrincipal,
    db: DatabaseSession,
    employee_id: str | None = Query(None),
    payroll_month: MonthQuery = None,
    payroll_year: int | None = Query(None, ge=2000, le=2100),
    payroll_status: PayrollStatus | None = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
) -> Envelope[Page[PayrollResponse]]:
    filters = PayrollFilters(
        employee_id=employee_id,
        payroll_month=payroll_month,
        payroll_year=payroll_year,
        status=payroll_status,
        page=page,
        page_size=page_size,
    )
    return Envelope(data=await PayrollService(db).list_payrolls(filters))


@router.get(
    "/summary",
    response_model=Envelope[PayrollSummary],
    status_code=status.HTTP_200_OK,
    summary="Payroll summary",
)
async def payroll_summary(
    principal: FinancePrincipal,
    db: DatabaseSession,
    payroll_month: MonthQuery = None,
    payroll_year: int | None = Query(None, ge=2000, le=2100),
) -> Envelope[PayrollSummary]:
    """Totals of salaries, contributions and net pay with counts per status."""
    return Envelope(data=await PayrollService(db).summary(payroll_month, payroll_year))


@router.get(
    "/{payroll_id}",
    response_model=Envelope[PayrollResponse],
    status_code=status.HTTP_200_OK,
    summary="Get payroll entry",
)
async def get_payroll(
    payroll_id: UUID,
    principal: FinancePrincipal,
    db: DatabaseSession,
) -> Envelope[PayrollResponse]:
    return Envelope(data=await PayrollService(db).get_payroll(payroll_id))


@router.put(
    "/{payroll_id}",
    response_model=Envelope[PayrollResponse],
    status_code=status.HTTP_200_OK,
    summary="Update payroll entry",
)
async def update_payroll(
    payroll_id: UUID,
    data: PayrollUpdate,
    principal: FinancePrincipal,
    db: DatabaseSession,
) -> Envelope[PayrollResponse]:
    """Amend an unpaid entry; EPF, ETF and net salary are recomputed."""
    payroll = await PayrollService(db).update_payroll(payroll_id, data)
    return Envelope(message="Payroll updated successfully", data=payroll)


@router.patch(
    "/{payroll_id}/status",
    response_model=Envelope[PayrollResponse],
    status_code=status.HTTP_200_OK,
    summary="Change payroll status",
)
async def change_payroll_status(
    payroll_id: UUID,
    data: PayrollStatusUpdate,
    principal: FinancePrincipal,
    db: DatabaseSession,
) -> Envelope[PayrollResponse]:
    payroll = await PayrollService(db).change_status(payroll_id, data)
    return Envelope(message="Payroll status updated successfully", data=payroll)


@router.delete(
    "/{payroll_id}",
    response_model=Envelope[None],
    status_code=status.HTTP_200_OK,
    summary="Delete payroll entry",
)
async def delete_payroll(
    payroll_id: UUID,
    principal: FinancePrincipal,
    db: DatabaseSession,
) -> Envelope[None]:
    await PayrollService(db).delete_payroll(payroll_id)
    return Envelope(message="Payroll deleted successfully")
