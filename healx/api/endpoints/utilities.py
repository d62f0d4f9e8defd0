"""Utility expense endpoints."""

from datetime import date

from fastapi import APIRouter, Query, status

from healx.dependencies import DatabaseSession, FinancePrincipal
from healx.schemas.common import Envelope, Page
from healx.schemas.utilities import (
    GeneratedUtilityId,
    UtilityCategory,
    UtilityCreate,
    UtilityFilters,
    UtilityPaymentStatus,
    UtilityResponse,
    UtilityStats,
    UtilityUpdate,
)
from healx.services.utility_service import UtilityService

router = APIRouter()


@router.post(
    "",
    response_model=Envelope[UtilityResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Record utility expense",
)
async def create_utility(
    data: UtilityCreate,
    principal: FinancePrincipal,
    db: DatabaseSession,
) -> Envelope[UtilityResponse]:
    """
    Record a utility bill.

    Raises:
        ConflictException: If the utility id is already used
    """
    utility = await UtilityService(db).create_utility(data)
    return Envelope(message="Utility expense record created successfully", data=utility)


@router.get(
    "",
    response_model=Envelope[Page[UtilityResponse]],
    status_code=status.HTTP_200_OK,
    summary="List utility expenses",
)
async def list_utilities(
    principal: FinancePrincipal,
    db: DatabaseSession,
    search: str | None = Query(None, description="Id, description, vendor or invoice number"),
    category: UtilityCategory | None = Query(None),
    payment_status: UtilityPaymentStatus | None = Query(None),
    vendor_name: str | None = Query(None),
    start_date: date | None = Query(None, description="Billing period starts on or after"),
    end_date: date | None = Query(None, description="Billing period starts on or before"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
) -> Envelope[Page[UtilityResponse]]:
    filters = UtilityFilters(
        search=search,
        category=category,
        payment_status=payment_status,
        vendor_name=vendor_name,
        start_date=start_date,
        end_date=end_date,
        page=page,
        page_size=page_size,
    )
    return Envelope(data=await UtilityService(db).list_utilities(filters))


@router.get(
    "/generate-id",
    response_model=Envelope[GeneratedUtilityId],
    status_code=status.HTTP_200_OK,
    summary="Generate utility id",
)
async def generate_utility_id(
    principal: FinancePrincipal,
    db: DatabaseSession,
) -> Envelope[GeneratedUtilityId]:
    utility_id = await UtilityService(db).generate_id()
    return Envelope(data=GeneratedUtilityId(id=utility_id))


@router.get(
    "/stats",
    response_model=Envelope[UtilityStats],
    status_code=status.HTTP_200_OK,
    summary="Utility expense statistics",
)
async def utility_stats(principal: FinancePrincipal, db: DatabaseSession) -> Envelope[UtilityStats]:
    """Totals by category, payment status and billing month, plus overdue bills."""
    return Envelope(data=await UtilityService(db).stats())


@router.get(
    "/{utility_id}",
    response_model=Envelope[UtilityResponse],
    status_code=status.HTTP_200_OK,
    summary="Get utility expense",
)
async def get_utility(
    utility_id: str,
    principal: FinancePrincipal,
    db: DatabaseSession,
) -> Envelope[UtilityResponse]:
    return Envelope(data=await UtilityService(db).get_utility(utility_id))


@router.put(
    "/{utility_id}",
    response_model=Envelope[UtilityResponse],
    status_code=status.HTTP_200_OK,
    summary="Update utility expense",
)
async def update_utility(
    utility_id: str,
    data: UtilityUpdate,
    principal: FinancePrincipal,
    db: DatabaseSession,
) -> Envelope[UtilityResponse]:
    utility = await UtilityService(db).update_utility(utility_id, data)
    return Envelope(message="Utility record updated successfully", data=utility)


@router.delete(
    "/{utility_id}",
    response_model=Envelope[UtilityResponse],
    status_code=status.HTTP_200_OK,
    summary="Delete utility expense",
)
async def delete_utility(
    utility_id: str,
    principal: FinancePrincipal,
    db: DatabaseSession,
) -> Envelope[UtilityResponse]:
    utility = await UtilityService(db).delete_utility(utility_id)
    return Envelope(message="Utility record deleted successfully", data=utility)
