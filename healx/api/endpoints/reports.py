"""Report endpoints."""

from fastapi import APIRouter, status

from healx.dependencies import DatabaseSession, StaffPrincipal
from healx.schemas.common import Envelope
from healx.schemas.reports import SurgicalInventoryReport
from healx.services.report_service import ReportService

router = APIRouter()


@router.get(
    "/surgical",
    response_model=Envelope[SurgicalInventoryReport],
    status_code=status.HTTP_200_OK,
    summary="Surgical inventory report",
)
async def surgical_inventory_report(
    principal: StaffPrincipal,
    db: DatabaseSession,
) -> Envelope[SurgicalInventoryReport]:
    """
    Summarise the surgical inventory.

    Returns:
        Counts by stock status and category, total value, low stock items,
        disposal totals and the number of open restock orders
    """
    return Envelope(data=await ReportService(db).surgical_inventory())
