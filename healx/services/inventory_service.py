"""Surgical inventory service.

Quantity changes that remove stock use a single conditional UPDATE
(``quantity >= q``) so concurrent requests can never drive stock negative.
"""

from datetime import UTC, datetime, time
from uuid import UUID

import structlog
from sqlalchemy import and_, func, or_, select, true, update
from sqlalchemy.ext.asyncio import AsyncSession

from healx.core.exceptions import InsufficientStockException, NotFoundException
from healx.core.pricing import line_total, to_money
from healx.models.inventory import disposal_records, surgical_items
from healx.schemas.common import Page
from healx.schemas.inventory import (
    DisposalFilters,
    DisposalReasonStats,
    DisposalRecordResponse,
    DisposalResult,
    DisposalStats,
    DisposeRequest,
    RestockNeed,
    RestockUrgency,
    StockChangeType,
    StockStatus,
    StockUpdate,
    SurgicalItemCreate,
    SurgicalItemFilters,
    SurgicalItemResponse,
    SurgicalItemUpdate,
)

logger = structlog.get_logger()


def restock_urgency(quantity: int, min_stock_level: int) -> RestockUrgency:
    """Urgency tier of an item's current stock."""
    if quantity == 0:
        return RestockUrgency.CRITICAL
    if quantity <= min_stock_level * 0.5:
        return RestockUrgency.HIGH
    if quantity <= min_stock_level:
        return RestockUrgency.MEDIUM
    return RestockUrgency.LOW


def default_reorder_quantity(quantity: int, min_stock_level: int) -> int:
    """Bring stock up to three times the minimum, never ordering less than one."""
    suggested = 3 * min_stock_level - quantity
    if suggested <= 0:
        suggested = 2 * min_stock_level
    return max(suggested, 1)


def evaluate_restock_need(quantity: int, min_stock_level: int) -> RestockNeed:
    """
    Decide whether an item needs restocking and how urgently.

    An item needs restocking once its quantity is at or below its minimum
    stock level.
    """
    return RestockNeed(
        current_stock=quantity,
        min_stock_level=min_stock_level,
        needed=quantity <= min_stock_level,
        urgency=restock_urgency(quantity, min_stock_level),
        suggested_quantity=default_reorder_quantity(quantity, min_stock_level),
    )


def _flatten(values: dict) -> dict:
    """Map the nested ``location`` object onto its columns."""
    if "location" in values:
        location = values.pop("location") or {}
        for key in ("room", "shelf", "bin"):
            values[f"location_{key}"] = location.get(key)
    return values


_STOCK_STATUS_CONDITIONS = {
    StockStatus.OUT_OF_STOCK: surgical_items.c.quantity == 0,
    StockStatus.LOW_STOCK: and_(
        surgical_items.c.quantity > 0,
        surgical_items.c.quantity <= surgical_items.c.min_stock_level,
    ),
    StockStatus.AVAILABLE: surgical_items.c.quantity > surgical_items.c.min_stock_level,
}


class InventoryService:
    """Service for surgical items and their quantity changes."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def _get_active_row(self, item_id: UUID) -> dict:
        result = await self.db.execute(
            select(surgical_items).where(
                surgical_items.c.id == item_id,
                surgical_items.c.is_active == true(),
            )
        )
        row = result.mappings().first()
        if not row:
            raise NotFoundException("Surgical item not found")
        return dict(row)

    # CRUD

    async def create_item(self, data: SurgicalItemCreate) -> SurgicalItemResponse:
        """Create a surgical item."""
        values = _flatten(data.model_dump())
        values["category"] = data.category.value
        values["price"] = to_money(data.price)
        values["supplier_email"] = data.supplier_email.lower() if data.supplier_email else None

        result = await self.db.execute(
            surgical_items.insert().values(**values).returning(surgical_items)
        )
        row = dict(result.mappings().one())
        await self.db.commit()

        logger.info("surgical_item_created", item_id=str(row["id"]), quantity=row["quantity"])
        return SurgicalItemResponse.from_row(row)

    async def get_item(self, item_id: UUID) -> SurgicalItemResponse:
        """
        Get an active surgical item.

        Raises:
            NotFoundException: If the item is missing or soft deleted
        """
        return SurgicalItemResponse.from_row(await self._get_active_row(item_id))

    async def list_items(self, filters: SurgicalItemFilters) -> Page[SurgicalItemResponse]:
        """List active items with search, category and stock status filters."""
        conditions = [surgical_items.c.is_active == true()]
        if filters.search:
            pattern = f"%{filters.search}%"
            conditions.append(
                or_(
                    surgical_items.c.name.ilike(pattern),
                    surgical_items.c.description.ilike(pattern),
                    surgical_items.c.supplier_name.ilike(pattern),
                    surgical_items.c.batch_number.ilike(pattern),
                )
            )
        if filters.category:
            conditions.append(surgical_items.c.category == filters.category.value)
        if filters.stock_status:
            conditions.append(_STOCK_STATUS_CONDITIONS[filters.stock_status])

        count_stmt = select(func.count()).select_from(surgical_items).where(*conditions)
        total = (await self.db.execute(count_stmt)).scalar_one()

        sort_column = surgical_items.c[filters.sort_by]
        order = sort_column.desc() if filters.sort_order == "desc" else sort_column.asc()
        stmt = (
            select(surgical_items)
            .where(*conditions)
            .order_by(order, surgical_items.c.id)
            .offset((filters.page - 1) * filters.page_size)
            .limit(filters.page_size)
        )
        rows = (await self.db.execute(stmt)).mappings().all()
        items = [SurgicalItemResponse.from_row(dict(r)) for r in rows]
        return Page[SurgicalItemResponse].build(items, total, filters.page, filters.page_size)

    async def update_item(self, item_id: UUID, data: SurgicalItemUpdate) -> SurgicalItemResponse:
        """Update descriptive fields of an active item."""
        values = _flatten(data.model_dump(exclude_unset=True))
        # Columns that are NOT NULL keep their value when null is sent
        for key in ("name", "category", "price", "min_stock_level", "supplier_name"):
            if key in values and values[key] is None:
                values.pop(key)
        if not values:
            return await self.get_item(item_id)
        if "category" in values:
            values["category"] = data.category.value
        if "price" in values:
            values["price"] = to_money(values["price"])
        if values.get("supplier_email"):
            values["supplier_email"] = values["supplier_email"].lower()

        stmt = (
            update(surgical_items)
            .where(surgical_items.c.id == item_id, surgical_items.c.is_active == true())
            .values(**values)
            .returning(surgical_items)
        )
        row = (await self.db.execute(stmt)).mappings().first()
        if not row:
            raise NotFoundException("Surgical item not found")
        await self.db.commit()

        logger.info("surgical_item_updated", item_id=str(item_id), fields=sorted(values))
        return SurgicalItemResponse.from_row(dict(row))

    async def delete_item(self, item_id: UUID) -> None:
        """Soft delete an item; its history stays intact."""
        stmt = (
            update(surgical_items)
            .where(surgical_items.c.id == item_id, surgical_items.c.is_active == true())
            .values(is_active=False)
        )
        result = await self.db.execute(stmt)
        if result.rowcount == 0:
            raise NotFoundException("Surgical item not found")
        await self.db.commit()
        logger.info("surgical_item_deleted", item_id=str(item_id))

    # Quantity changes

    async def _decrement(self, item_id: UUID, quantity: int, action: str) -> dict:
        """
        Remove ``quantity`` units in one conditional UPDATE.

        Returns the updated row; the caller owns the transaction.
        """
        stmt = (
            update(surgical_items)
            .where(
                surgical_items.c.id == item_id,
                surgical_items.c.is_active == true(),
                surgical_items.c.quantity >= quantity,
            )
            .values(quantity=surgical_items.c.quantity - quantity)
            .returning(surgical_items)
        )
        row = (await self.db.execute(stmt)).mappings().first()
        if row:
            return dict(row)

        await self.db.rollback()
        current = await self._get_active_row(item_id)
        raise InsufficientStockException(
            f"Cannot {action} {quantity} units of {current['name']}: "
            f"only {current['quantity']} in stock"
        )

    async def dispose_item(self, item_id: UUID, data: DisposeRequest) -> DisposalResult:
        """
        Dispose units of an item and record the disposal.

        The decrement and the record insert share one transaction.

        Raises:
            NotFoundException: If the item is missing or soft deleted
            InsufficientStockException: If more units are disposed than held
        """
        item = await self._decrement(item_id, data.quantity_disposed, "dispose")
        unit_price = to_money(item["price"])

        record_stmt = (
            disposal_records.insert()
            .values(
                item_id=item_id,
                item_name=item["name"],
                category=item["category"],
                quantity_disposed=data.quantity_disposed,
                reason=data.reason,
                disposed_by=data.disposed_by,
                disposed_date=datetime.now(UTC),
                estimated_value=line_total(data.quantity_disposed, unit_price),
                disposal_type="manual",
                previous_quantity=item["quantity"] + data.quantity_disposed,
                remaining_quantity=item["quantity"],
                unit_price=unit_price,
            )
            .returning(disposal_records)
        )
        record = dict((await self.db.execute(record_stmt)).mappings().one())
        await self.db.commit()

        logger.info(
            "item_disposed",
            item_id=str(item_id),
            quantity=data.quantity_disposed,
            remaining=item["quantity"],
            reason=data.reason,
        )
        return DisposalResult(
            item=SurgicalItemResponse.from_row(item),
            disposal_record=DisposalRecordResponse.model_validate(record),
        )

    async def update_stock(self, item_id: UUID, data: StockUpdate) -> SurgicalItemResponse:
        """
        Apply a usage (decrement) or restock (increment) to an item.

        Raises:
            NotFoundException: If the item is missing or soft deleted
            InsufficientStockException: If usage exceeds the stock held
        """
        if data.type == StockChangeType.USAGE:
            row = await self._decrement(item_id, data.quantity, "use")
        else:
            stmt = (
                update(surgical_items)
                .where(surgical_items.c.id == item_id, surgical_items.c.is_active == true())
                .values(
                    quantity=surgical_items.c.quantity + data.quantity,
                    last_restocked=datetime.now(UTC),
                )
                .returning(surgical_items)
            )
            found = (await self.db.execute(stmt)).mappings().first()
            if not found:
                raise NotFoundException("Surgical item not found")
            row = dict(found)
        await self.db.commit()

        logger.info(
            "stock_updated",
            item_id=str(item_id),
            change=data.type.value,
            quantity=data.quantity,
            new_quantity=row["quantity"],
        )
        return SurgicalItemResponse.from_row(row)

    async def restock_need(self, item_id: UUID) -> RestockNeed:
        """Evaluate one item against its minimum stock level."""
        item = await self._get_active_row(item_id)
        need = evaluate_restock_need(item["quantity"], item["min_stock_level"])
        return need.model_copy(update={"item_id": item["id"], "item_name": item["name"]})

    # Disposal history

    def _disposal_conditions(self, filters: DisposalFilters) -> list:
        conditions = []
        if filters.item_id:
            conditions.append(disposal_records.c.item_id == filters.item_id)
        if filters.reason:
            conditions.append(disposal_records.c.reason.ilike(f"%{filters.reason}%"))
        if filters.start_date:
            start = datetime.combine(filters.start_date, time.min, tzinfo=UTC)
            conditions.append(disposal_records.c.disposed_date >= start)
        if filters.end_date:
            end = datetime.combine(filters.end_date, time.max, tzinfo=UTC)
            conditions.append(disposal_records.c.disposed_date <= end)
        return conditions

    async def disposal_history(self, filters: DisposalFilters) -> Page[DisposalRecordResponse]:
        """List disposal records, newest first."""
        conditions = self._disposal_conditions(filters)
        count_stmt = select(func.count()).select_from(disposal_records).where(*conditions)
        total = (await self.db.execute(count_stmt)).scalar_one()

        stmt = (
            select(disposal_records)
            .where(*conditions)
            .order_by(disposal_records.c.disposed_date.desc())
            .offset((filters.page - 1) * filters.page_size)
            .limit(filters.page_size)
        )
        rows = (await self.db.execute(stmt)).mappings().all()
        items = [DisposalRecordResponse.model_validate(dict(r)) for r in rows]
        return Page[DisposalRecordResponse].build(items, total, filters.page, filters.page_size)

    async def disposal_stats(self) -> DisposalStats:
        """Totals of disposal records, quantity and value, grouped by reason."""
        stmt = (
            select(
                disposal_records.c.reason,
                func.count().label("count"),
                func.sum(disposal_records.c.quantity_disposed).label("quantity"),
                func.sum(disposal_records.c.estimated_value).label("value"),
            )
            .group_by(disposal_records.c.reason)
            .order_by(func.sum(disposal_records.c.quantity_disposed).desc())
        )
        rows = (await self.db.execute(stmt)).mappings().all()
        by_reason = [
            DisposalReasonStats(
                reason=r["reason"],
                count=r["count"],
                quantity=r["quantity"] or 0,
                value=to_money(r["value"] or 0),
            )
            for r in rows
        ]
        return DisposalStats(
            total_records=sum(r.count for r in by_reason),
            total_quantity=sum(r.quantity for r in by_reason),
            total_value=to_money(sum((r.value for r in by_reason), to_money(0))),
            by_reason=by_reason,
        )
