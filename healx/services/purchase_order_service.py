"""Purchase order service.

Line totals and the order total are always computed here from quantity and
unit price; totals sent by clients are never stored.
"""

from datetime import UTC, datetime
from uuid import UUID

import structlog
from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from healx.core.exceptions import (
    ConflictException,
    InvalidStatusTransitionException,
    NotFoundException,
    ValidationFailedException,
)
from healx.core.identifiers import generate_order_number
from healx.core.pricing import line_total, purchase_order_total
from healx.models.purchase_orders import purchase_order_items, purchase_orders
from healx.models.suppliers import suppliers
from healx.schemas.common import Page
from healx.schemas.purchase_orders import (
    PURCHASE_ORDER_TRANSITIONS,
    PurchaseOrderCreate,
    PurchaseOrderFilters,
    PurchaseOrderItemIn,
    PurchaseOrderResponse,
    PurchaseOrderStatus,
    PurchaseOrderUpdate,
)

logger = structlog.get_logger()


class PurchaseOrderService:
    """Service for purchase orders and their line items."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def _get_supplier(self, supplier_id: UUID) -> dict:
        result = await self.db.execute(select(suppliers).where(suppliers.c.id == supplier_id))
        row = result.mappings().first()
        if not row:
            raise NotFoundException("Supplier not found")
        return dict(row)

    async def _insert_items(self, order_id: UUID, items: list[PurchaseOrderItemIn]) -> None:
        await self.db.execute(
            purchase_order_items.insert(),
            [
                {
                    "purchase_order_id": order_id,
                    "position": position,
                    "product": item.product,
                    "quantity": item.quantity,
                    "unit_price": item.unit_price,
                    "total_price": line_total(item.quantity, item.unit_price),
                }
                for position, item in enumerate(items)
            ],
        )

    async def _assemble(self, orders: list[dict]) -> list[PurchaseOrderResponse]:
        """Attach line items and a supplier summary to order rows."""
        if not orders:
            return []
        order_ids = [o["id"] for o in orders]
        item_rows = (
            await self.db.execute(
                select(purchase_order_items)
                .where(purchase_order_items.c.purchase_order_id.in_(order_ids))
                .order_by(purchase_order_items.c.position)
            )
        ).mappings().all()
        supplier_ids = list({o["supplier_id"] for o in orders})
        supplier_rows = (
            await self.db.execute(select(suppliers).where(suppliers.c.id.in_(supplier_ids)))
        ).mappings().all()
        supplier_by_id = {s["id"]: dict(s) for s in supplier_rows}

        responses = []
        for order in orders:
            data = dict(order)
            data["items"] = [
                dict(i) for i in item_rows if i["purchase_order_id"] == order["id"]
            ]
            data["supplier"] = supplier_by_id.get(order["supplier_id"])
            responses.append(PurchaseOrderResponse.model_validate(data))
        return responses

    async def _get_row(self, order_id: UUID) -> dict:
        result = await self.db.execute(
            select(purchase_orders).where(purchase_orders.c.id == order_id)
        )
        row = result.mappings().first()
        if not row:
            raise NotFoundException("Purchase order not found")
        return dict(row)

    async def create_order(
        self,
        data: PurchaseOrderCreate,
        created_by: UUID | None = None,
    ) -> PurchaseOrderResponse:
        """
        Create a purchase order with its line items in one transaction.

        Raises:
            NotFoundException: If the supplier does not exist
        """
        await self._get_supplier(data.supplier_id)
        total = purchase_order_total((i.quantity, i.unit_price) for i in data.items)

        stmt = (
            purchase_orders.insert()
            .values(
                order_number=generate_order_number(),
                supplier_id=data.supplier_id,
                total_amount=total,
                status=PurchaseOrderStatus.PENDING.value,
                order_date=datetime.now(UTC),
                expected_delivery=data.expected_delivery,
                notes=data.notes,
                rating=data.rating,
                created_by=created_by,
            )
            .returning(purchase_orders)
        )
        try:
            order = dict((await self.db.execute(stmt)).mappings().one())
            await self._insert_items(order["id"], data.items)
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictException("Purchase order number already exists")

        logger.info(
            "purchase_order_created",
            order_id=str(order["id"]),
            order_number=order["order_number"],
            total_amount=str(total),
            lines=len(data.items),
        )
        return (await self._assemble([order]))[0]

    async def get_order(self, order_id: UUID) -> PurchaseOrderResponse:
        """Get a purchase order with its line items."""
        return (await self._assemble([await self._get_row(order_id)]))[0]

    async def list_orders(self, filters: PurchaseOrderFilters) -> Page[PurchaseOrderResponse]:
        """List purchase orders, newest first."""
        conditions = []
        if filters.status:
            conditions.append(purchase_orders.c.status == filters.status.value)
        if filters.supplier_id:
            conditions.append(purchase_orders.c.supplier_id == filters.supplier_id)

        count_stmt = select(func.count()).select_from(purchase_orders).where(*conditions)
        total = (await self.db.execute(count_stmt)).scalar_one()

        stmt = (
            select(purchase_orders)
            .where(*conditions)
            .order_by(purchase_orders.c.order_date.desc())
            .offset((filters.page - 1) * filters.page_size)
            .limit(filters.page_size)
        )
        rows = [dict(r) for r in (await self.db.execute(stmt)).mappings().all()]
        items = await self._assemble(rows)
        return Page[PurchaseOrderResponse].build(items, total, filters.page, filters.page_size)

    async def update_order(
        self,
        order_id: UUID,
        data: PurchaseOrderUpdate,
    ) -> PurchaseOrderResponse:
        """
        Update a purchase order.

        New line items replace the old ones and the total is recomputed.
        Status changes follow pending -> approved -> ordered -> received,
        with cancellation allowed before receipt.

        Raises:
            NotFoundException: If the order is missing
            InvalidStatusTransitionException: If the status move is not allowed
            ValidationFailedException: If items or delivery date change on a closed order
        """
        order = await self._get_row(order_id)
        current = PurchaseOrderStatus(order["status"])
        values: dict = {}

        if not PURCHASE_ORDER_TRANSITIONS[current] and (
            data.items is not None or data.expected_delivery is not None
        ):
            raise ValidationFailedException(f"Cannot modify a {current.value} purchase order")

        if data.status is not None and data.status != current:
            if data.status not in PURCHASE_ORDER_TRANSITIONS[current]:
                raise InvalidStatusTransitionException(current.value, data.status.value)
            values["status"] = data.status.value
            if data.status == PurchaseOrderStatus.RECEIVED:
                values["actual_delivery"] = datetime.now(UTC)

        if data.items is not None:
            values["total_amount"] = purchase_order_total(
                (i.quantity, i.unit_price) for i in data.items
            )
            await self.db.execute(
                delete(purchase_order_items).where(
                    purchase_order_items.c.purchase_order_id == order_id
                )
            )
            await self._insert_items(order_id, data.items)

        for field in ("expected_delivery", "notes", "rating"):
            if field in data.model_fields_set and getattr(data, field) is not None:
                values[field] = getattr(data, field)

        if values:
            order = dict(
                (
                    await self.db.execute(
                        update(purchase_orders)
                        .where(purchase_orders.c.id == order_id)
                        .values(**values)
                        .returning(purchase_orders)
                    )
                ).mappings().one()
            )
        await self.db.commit()

        if "status" in values:
            logger.info(
                "purchase_order_status_changed",
                order_id=str(order_id),
                from_status=current.value,
                to_status=values["status"],
            )
        return (await self._assemble([order]))[0]

    async def delete_order(self, order_id: UUID) -> None:
        """Delete a purchase order and its line items."""
        await self._get_row(order_id)
        await self.db.execute(
            delete(purchase_order_items).where(purchase_order_items.c.purchase_order_id == order_id)
        )
        await self.db.execute(delete(purchase_orders).where(purchase_orders.c.id == order_id))
        await self.db.commit()
        logger.info("purchase_order_deleted", order_id=str(order_id))
