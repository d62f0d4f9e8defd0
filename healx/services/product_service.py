"""Product catalogue service."""

from uuid import UUID

import structlog
from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from healx.core.exceptions import NotFoundException
from healx.core.pricing import to_money
from healx.models.products import products
from healx.schemas.products import ProductCreate, ProductResponse, ProductUpdate

logger = structlog.get_logger()


class ProductService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_products(self) -> list[ProductResponse]:
        rows = (await self.db.execute(select(products).order_by(products.c.created_at))).mappings()
        return [ProductResponse.model_validate(dict(r)) for r in rows.all()]

    async def create_product(self, data: ProductCreate) -> ProductResponse:
        values = data.model_dump()
        values["price"] = to_money(values["price"])
        row = (
            await self.db.execute(products.insert().values(**values).returning(products))
        ).mappings().one()
        await self.db.commit()
        logger.info("product_created", product_id=str(row["id"]))
        return ProductResponse.model_validate(dict(row))

    async def update_product(self, product_id: UUID, data: ProductUpdate) -> ProductResponse:
        values = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
        if "price" in values:
            values["price"] = to_money(values["price"])
        stmt = select(products).where(products.c.id == product_id)
        if values:
            stmt = (
                update(products)
                .where(products.c.id == product_id)
                .values(**values)
                .returning(products)
            )
        row = (await self.db.execute(stmt)).mappings().first()
        if not row:
            raise NotFoundException("Product not found")
        await self.db.commit()
        return ProductResponse.model_validate(dict(row))

    async def delete_product(self, product_id: UUID) -> None:
        result = await self.db.execute(delete(products).where(products.c.id == product_id))
        if result.rowcount == 0:
            raise NotFoundException("Product not found")
        await self.db.commit()
        logger.info("product_deleted", product_id=str(product_id))
