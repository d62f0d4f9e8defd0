"""API router configuration."""

from fastapi import APIRouter

from healx.api.endpoints import (
    appointments,
    auth,
    consultations,
    doctors,
    health,
    inventory,
    patients,
    payments,
    payroll,
    prescriptions,
    products,
    purchase_orders,
    reports,
    suppliers,
    utilities,
)

api_router = APIRouter()

# Include routers
api_router.include_router(health.router, tags=["Health"])
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(patients.router, prefix="/patients", tags=["Patients"])
api_router.include_router(doctors.router, prefix="/doctors", tags=["Doctors"])
api_router.include_router(appointments.router, prefix="/appointments", tags=["Appointments"])
api_router.include_router(
    consultations.router, prefix="/prescription/consultations", tags=["Consultations"]
)
api_router.include_router(prescriptions.router, prefix="/prescriptions", tags=["Prescriptions"])
api_router.include_router(inventory.router, prefix="/inventory", tags=["Inventory"])
api_router.include_router(suppliers.router, prefix="/suppliers", tags=["Suppliers"])
api_router.include_router(
    purchase_orders.router, prefix="/purchaseOrders", tags=["Purchase Orders"]
)
api_router.include_router(payments.router, prefix="/financialPay/payments", tags=["Payments"])
api_router.include_router(payroll.router, prefix="/payrolls", tags=["Payroll"])
api_router.include_router(
    utilities.router, prefix="/financial-utilities", tags=["Utility Expenses"]
)
api_router.include_router(products.router, prefix="/Product", tags=["Products"])
api_router.include_router(reports.router, prefix="/report", tags=["Reports"])
