import os

# Settings are read at import time
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_FORMAT", "console")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from collections.abc import AsyncGenerator
from datetime import date, timedelta
from decimal import Decimal
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool

from healx.core.redis_client import get_redis_client
from healx.core.security import get_password_hash
from healx.database import Database, get_database, get_db
from healx.main import app
from healx.models import doctors, metadata, patients, suppliers, surgical_items
from healx.services.auth_service import AuthService


def next_weekday(weekday: int) -> date:
    """Next date strictly after today falling on ``weekday`` (Monday is 0)."""
    today = date.today()
    return today + timedelta(days=(weekday - today.weekday()) % 7 or 7)


def bearer(subject: str, role: str) -> dict:
    token = AuthService.create_tokens(subject, role).access_token
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """File-backed SQLite database, created fresh for each test."""
    test_engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'healx_test.db'}",
        echo=False,
        poolclass=NullPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(metadata.create_all)

    yield test_engine

    await test_engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with Database(engine).sessionmaker() as session:
        yield session


@pytest.fixture
def redis_mock() -> MagicMock:
    """Redis stand-in: every lookup misses and every write succeeds."""
    client = MagicMock()
    client.get.return_value = None
    client.exists.return_value = 0
    client.keys.return_value = []
    client.ping.return_value = True
    return client


@pytest_asyncio.fixture
async def client(
    engine: AsyncEngine,
    db_session: AsyncSession,
    redis_mock: MagicMock,
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_database] = lambda: Database(engine)
    app.dependency_overrides[get_redis_client] = lambda: redis_mock

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# Principals


@pytest.fixture
def admin_headers() -> dict:
    return bearer(str(uuid4()), "admin")


@pytest.fixture
def receptionist_headers() -> dict:
    return bearer(str(uuid4()), "receptionist")


@pytest.fixture
def finance_headers() -> dict:
    return bearer(str(uuid4()), "financial_manager")


@pytest_asyncio.fixture
async def test_patient(db_session: AsyncSession) -> dict:
    """Create a patient account in the database."""
    patient_id = uuid4()
    values = {
        "id": patient_id,
        "patient_code": "PT-2026-TEST01",
        "name": "Nimal Perera",
        "email": "nimal@example.com",
        "phone": "+94771234567",
        "age": 42,
        "gender": "Male",
        "password_hash": get_password_hash("secret123"),
        "role": "Patient",
    }
    await db_session.execute(insert(patients).values(**values))
    await db_session.commit()
    return values


@pytest.fixture
def patient_headers(test_patient: dict) -> dict:
    return bearer(str(test_patient["id"]), "Patient")


# Domain data


@pytest_asyncio.fixture
async def test_doctor(db_session: AsyncSession) -> dict:
    """Doctor available on Mondays from 09:00 to 17:00."""
    values = {
        "id": uuid4(),
        "name": "Dr. Amara Silva",
        "specialization": "Cardiology",
        "email": "amara.silva@example.com",
        "phone": "+94112345678",
        "available_hours": [{"day": "Monday", "start_time": "09:00", "end_time": "17:00"}],
    }
    await db_session.execute(insert(doctors).values(**values))
    await db_session.commit()
    return values


@pytest_asyncio.fixture
async def test_supplier(db_session: AsyncSession) -> dict:
    values = {
        "id": uuid4(),
        "name": "MedSupply Lanka",
        "email": "orders@medsupply.example.com",
        "phone": "+94 11 555 0101",
        "category": "medical_equipment",
        "status": "active",
        "rating": 4,
    }
    await db_session.execute(insert(suppliers).values(**values))
    await db_session.commit()
    return values


@pytest_asyncio.fixture
async def test_item(db_session: AsyncSession, test_supplier: dict) -> dict:
    """Surgical item with 5 units against a minimum of 10."""
    values = {
        "id": uuid4(),
        "name": "Silk Suture 2-0",
        "category": "Sutures",
        "quantity": 5,
        "min_stock_level": 10,
        "price": Decimal("12.50"),
        "supplier_id": test_supplier["id"],
        "supplier_name": test_supplier["name"],
        "supplier_contact": test_supplier["phone"],
        "supplier_email": test_supplier["email"],
    }
    await db_session.execute(insert(surgical_items).values(**values))
    await db_session.commit()
    return values


@pytest.fixture
def monday() -> date:
    return next_weekday(0)
