"""Database models."""

from healx.models.appointments import appointments
from healx.models.base import metadata
from healx.models.consultations import consultations
from healx.models.doctors import doctors
from healx.models.finance import payrolls, utility_expenses
from healx.models.inventory import disposal_records, restock_orders, surgical_items
from healx.models.patients import patients
from healx.models.payments import payment_services, payments
from healx.models.prescriptions import prescriptions
from healx.models.products import products
from healx.models.purchase_orders import purchase_order_items, purchase_orders
from healx.models.staff import staff
from healx.models.suppliers import suppliers

__all__ = [
    "appointments",
    "consultations",
    "disposal_records",
    "doctors",
    "metadata",
    "patients",
    "payment_services",
    "payments",
    "payrolls",
    "prescriptions",
    "products",
    "purchase_order_items",
    "purchase_orders",
    "restock_orders",
    "staff",
    "suppliers",
    "surgical_items",
    "utility_expenses",
]
