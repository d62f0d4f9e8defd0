"""Inventory report schema."""

from datetime import datetime

from pydantic import BaseModel

from healx.schemas.common import Money
from healx.schemas.inventory import RestockUrgency, StockStatus


class CategoryBreakdown(BaseModel):
    category: str
    item_count: int
    total_quantity: int
    total_value: Money


class LowStockItem(BaseModel):
    id: str
    name: str
    category: str
    quantity: int
    min_stock_level: int
    stock_status: StockStatus
    urgency: RestockUrgency


class SurgicalInventoryReport(BaseModel):
    """Point-in-time summary of the surgical inventory."""

    generated_at: datetime
    total_items: int
    total_quantity: int
    total_value: Money
    by_stock_status: dict[str, int]
    by_category: list[CategoryBreakdown]
    low_stock_items: list[LowStockItem]
    total_disposed_quantity: int
    total_disposed_value: Money
    open_restock_orders: int
