"""Inventory reporting."""

from datetime import UTC, datetime

from sqlalchemy import func, select, true
from sqlalchemy.ext.asyncio import AsyncSession

from healx.core.pricing import line_total, to_money
from healx.models.inventory import disposal_records, restock_orders, surgical_items
from healx.schemas.inventory import OPEN_RESTOCK_STATUSES, StockStatus, classify_stock
from healx.schemas.reports import CategoryBreakdown, LowStockItem, SurgicalInventoryReport
from healx.services.inventory_service import restock_urgency


class ReportService:
    """Builds the surgical inventory report from current table contents."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def surgical_inventory(self) -> SurgicalInventoryReport:
        """Counts by stock status and category, value, low stock and disposals."""
        rows = (
            await self.db.execute(
                select(surgical_items)
                .where(surgical_items.c.is_active == true())
                .order_by(surgical_items.c.quantity, surgical_items.c.name)
            )
        ).mappings().all()

        zero = to_money(0)
        by_status = {status.value: 0 for status in StockStatus}
        by_category: dict[str, CategoryBreakdown] = {}
        low_stock: list[LowStockItem] = []

        for row in rows:
            status = classify_stock(row["quantity"], row["min_stock_level"])
            by_status[status.value] += 1

            value = line_total(row["quantity"], row["price"])
            entry = by_category.setdefault(
                row["category"],
                CategoryBreakdown(
                    category=row["category"], item_count=0, total_quantity=0, total_value=zero
                ),
            )
            entry.item_count += 1
            entry.total_quantity += row["quantity"]
            entry.total_value += value

            if status != StockStatus.AVAILABLE:
                low_stock.append(
                    LowStockItem(
                        id=str(row["id"]),
                        name=row["name"],
                        category=row["category"],
                        quantity=row["quantity"],
                        min_stock_level=row["min_stock_level"],
                        stock_status=status,
                        urgency=restock_urgency(row["quantity"], row["min_stock_level"]),
                    )
                )

        disposed = (
            await self.db.execute(
                select(
                    func.coalesce(func.sum(disposal_records.c.quantity_disposed), 0),
                    func.sum(disposal_records.c.estimated_value),
                )
            )
        ).one()
        open_orders = (
            await self.db.execute(
                select(func.count())
                .select_from(restock_orders)
                .where(restock_orders.c.status.in_([s.value for s in OPEN_RESTOCK_STATUSES]))
            )
        ).scalar_one()

        categories = sorted(by_category.values(), key=lambda c: c.category)
        return SurgicalInventoryReport(
            generated_at=datetime.now(UTC),
            total_items=len(rows),
            total_quantity=sum(r["quantity"] for r in rows),
            total_value=sum((c.total_value for c in categories), zero),
            by_stock_status=by_status,
            by_category=categories,
            low_stock_items=low_stock,
            total_disposed_quantity=int(disposed[0]),
            total_disposed_value=to_money(disposed[1] or 0),
            open_restock_orders=open_orders,
        )
