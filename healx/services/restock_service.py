"""Restock order service."""

from datetime import UTC, datetime
from uuid import UUID

import structlog
from sqlalchemy import exists, func, select, true, update
from sqlalchemy.ext.asyncio import AsyncSession

from healx.core.exceptions import (
    ConflictException,
    InvalidStatusTransitionException,
    NotFoundException,
)
from healx.core.pricing import line_total
from healx.models.inventory import restock_orders, surgical_items
from healx.models.suppliers import suppliers
from healx.schemas.common import Page
from healx.schemas.inventory import (
    OPEN_RESTOCK_STATUSES,
    RESTOCK_TRANSITIONS,
    RestockFilters,
    RestockOrderCreate,
    RestockOrderResponse,
    RestockStatus,
    RestockStatusUpdate,
)
from healx.services.inventory_service import default_reorder_quantity, evaluate_restock_need

logger = structlog.get_logger()


class RestockService:
    """Creates restock orders and moves them through their lifecycle."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def _get_item(self, item_id: UUID) -> dict:
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

    async def _supplier_fields(self, item: dict, supplier_id: UUID | None) -> dict:
        if supplier_id is None:
            return {
                "supplier_id": item["supplier_id"],
                "supplier_name": item["supplier_name"],
                "supplier_contact": item["supplier_contact"],
                "supplier_email": item["supplier_email"],
            }
        result = await self.db.execute(select(suppliers).where(suppliers.c.id == supplier_id))
        supplier = result.mappings().first()
        if not supplier:
            raise NotFoundException("Supplier not found")
        return {
            "supplier_id": supplier["id"],
            "supplier_name": supplier["name"],
            "supplier_contact": supplier["phone"],
            "supplier_email": supplier["email"],
        }

    async def _insert_order(
        self,
        item: dict,
        supplier: dict,
        reorder_quantity: int | None = None,
        **extra,
    ) -> dict:
        need = evaluate_restock_need(item["quantity"], item["min_stock_level"])
        quantity = reorder_quantity or default_reorder_quantity(
            item["quantity"], item["min_stock_level"]
        )
        stmt = (
            restock_orders.insert()
            .values(
                item_id=item["id"],
                item_name=item["name"],
                current_stock=item["quantity"],
                min_stock_level=item["min_stock_level"],
                reorder_quantity=quantity,
                status=RestockStatus.PENDING.value,
                urgency=need.urgency.value,
                estimated_cost=line_total(quantity, item["price"]),
                **supplier,
                **extra,
            )
            .returning(restock_orders)
        )
        return dict((await self.db.execute(stmt)).mappings().one())

    async def create_order(self, data: RestockOrderCreate) -> RestockOrderResponse:
        """
        Create a PENDING restock order for an item.

        The item's quantity is not touched until the order is delivered.

        Raises:
            NotFoundException: If the item or the given supplier is missing
        """
        item = await self._get_item(data.item_id)
        supplier = await self._supplier_fields(item, data.supplier_id)
        order = await self._insert_order(
            item,
            supplier,
            data.reorder_quantity,
            expected_delivery=data.expected_delivery,
            notes=data.notes,
        )
        await self.db.commit()

        logger.info(
            "restock_order_created",
            order_id=str(order["id"]),
            item_id=str(item["id"]),
            quantity=order["reorder_quantity"],
            urgency=order["urgency"],
        )
        return RestockOrderResponse.model_validate(order)

    async def get_order(self, order_id: UUID) -> RestockOrderResponse:
        """Get a restock order by id."""
        return RestockOrderResponse.model_validate(await self._get_order_row(order_id))

    async def _get_order_row(self, order_id: UUID) -> dict:
        result = await self.db.execute(select(restock_orders).where(restock_orders.c.id == order_id))
        row = result.mappings().first()
        if not row:
            raise NotFoundException("Restock order not found")
        return dict(row)

    async def list_orders(self, filters: RestockFilters) -> Page[RestockOrderResponse]:
        """List restock orders, newest first."""
        conditions = []
        if filters.status:
            conditions.append(restock_orders.c.status == filters.status.value)
        if filters.urgency:
            conditions.append(restock_orders.c.urgency == filters.urgency.value)
        if filters.item_id:
            conditions.append(restock_orders.c.item_id == filters.item_id)

        count_stmt = select(func.count()).select_from(restock_orders).where(*conditions)
        total = (await self.db.execute(count_stmt)).scalar_one()

        stmt = (
            select(restock_orders)
            .where(*conditions)
            .order_by(restock_orders.c.created_at.desc())
            .offset((filters.page - 1) * filters.page_size)
            .limit(filters.page_size)
        )
        rows = (await self.db.execute(stmt)).mappings().all()
        items = [RestockOrderResponse.model_validate(dict(r)) for r in rows]
        return Page[RestockOrderResponse].build(items, total, filters.page, filters.page_size)

    async def transition(self, order_id: UUID, data: RestockStatusUpdate) -> RestockOrderResponse:
        """
        Move a restock order to a new status.

        Delivering an order adds its quantity to the item and stamps the
        delivery and restock times, all in the same transaction.

        Raises:
            NotFoundException: If the order is missing
            InvalidStatusTransitionException: If the move is not allowed
        """
        order = await self._get_order_row(order_id)
        current = RestockStatus(order["status"])
        requested = data.status
        if current == requested:
            return RestockOrderResponse.model_validate(order)
        if requested not in RESTOCK_TRANSITIONS[current]:
            raise InvalidStatusTransitionException(current.value, requested.value)

        now = datetime.now(UTC)
        values: dict = {"status": requested.value}
        if requested == RestockStatus.APPROVED and data.approved_by:
            values["approved_by"] = data.approved_by
        if requested == RestockStatus.ERROR and data.error_message:
            values["error_message"] = data.error_message
        if requested == RestockStatus.DELIVERED:
            values["actual_delivery"] = now
        if data.actual_cost is not None:
            values["actual_cost"] = data.actual_cost
        if data.notes is not None:
            values["notes"] = data.notes

        stmt = (
            update(restock_orders)
            .where(restock_orders.c.id == order_id, restock_orders.c.status == current.value)
            .values(**values)
            .returning(restock_orders)
        )
        updated = (await self.db.execute(stmt)).mappings().first()
        if not updated:
            await self.db.rollback()
            raise ConflictException("Restock order was modified by another request")

        if requested == RestockStatus.DELIVERED:
            item_stmt = (
                update(surgical_items)
                .where(surgical_items.c.id == order["item_id"])
                .values(
                    quantity=surgical_items.c.quantity + order["reorder_quantity"],
                    last_restocked=now,
                )
            )
            result = await self.db.execute(item_stmt)
            if result.rowcount == 0:
                await self.db.rollback()
                raise NotFoundException("Surgical item not found")
        await self.db.commit()

        logger.info(
            "restock_order_status_changed",
            order_id=str(order_id),
            from_status=current.value,
            to_status=requested.value,
        )
        return RestockOrderResponse.model_validate(dict(updated))

    async def auto_check(self) -> list[RestockOrderResponse]:
        """
        Create PENDING orders for every active item at or below its minimum.

        Items that already have an open (PENDING, APPROVED or ORDERED) order
        are skipped.
        """
        open_order = exists().where(
            restock_orders.c.item_id == surgical_items.c.id,
            restock_orders.c.status.in_([s.value for s in OPEN_RESTOCK_STATUSES]),
        )
        stmt = (
            select(surgical_items)
            .where(
                surgical_items.c.is_active == true(),
                surgical_items.c.quantity <= surgical_items.c.min_stock_level,
                ~open_order,
            )
            .order_by(surgical_items.c.quantity, surgical_items.c.name)
        )
        items = (await self.db.execute(stmt)).mappings().all()

        created = []
        for item in items:
            item = dict(item)
            supplier = await self._supplier_fields(item, None)
            created.append(
                await self._insert_order(item, supplier, notes="Created by automatic restock check")
            )
        await self.db.commit()

        logger.info("auto_restock_check_completed", items_checked=len(items), created=len(created))
        return [RestockOrderResponse.model_validate(o) for o in created]
