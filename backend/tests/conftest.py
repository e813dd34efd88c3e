"""
Wildwood Zoo Backend — Test Configuration (conftest.py)
=========================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.
Who:   Used by all test files in the tests/ directory.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_db_session: Mock database session (unit tests, no real DB)
    ├── test_db:         In-memory SQLite Database handle with all tables
    ├── test_client:     HTTPX AsyncClient bound to create_app(database=test_db)
    ├── seed:            Inserts zoo rows directly through test_db
    └── auth_headers:    Builds `Authorization: Bearer` headers for a seeded user
"""

import os
from datetime import date
from typing import Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.pool import StaticPool


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Override settings for testing BEFORE any app imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["JWT_SECRET"] = "wildwood-test-secret-0123456789abcdef"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests

from wildwood.database import Database  # noqa: E402
from wildwood.models import (  # noqa: E402
    Animal,
    Enclosure,
    GiftShop,
    Inventory,
    Product,
    Staff,
    Visitor,
)
from wildwood.security import create_access_token, hash_password  # noqa: E402
from wildwood.services.auth_service import staff_principal, visitor_principal  # noqa: E402

DEFAULT_PASSWORD = "secret123"


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_rollback(mock_db_session):
            mock_db_session.flush.side_effect = SQLAlchemyError("boom")
            ...
            mock_db_session.rollback.assert_awaited_once()
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.get = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def test_db():
    """
    In-memory SQLite database with every table created.

    StaticPool keeps a single connection alive, so all sessions (and the
    app under test) see the same in-memory database.
    """
    database = Database(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await database.create_all()
    yield database
    await database.dispose()


@pytest_asyncio.fixture
async def test_client(test_db):
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from wildwood.main import create_app

    app = create_app(database=test_db)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# ══════════════════════════════════════════════════════════════════════════
# Seed Data
# ══════════════════════════════════════════════════════════════════════════

class Seeder:
    """Inserts rows with one committed session per call."""

    def __init__(self, database: Database):
        self.database = database

    async def _save(self, obj):
        async with self.database.session_factory() as session:
            session.add(obj)
            await session.commit()
        return obj

    async def staff(
        self,
        username: str = "manager",
        role: str = "Manager",
        staff_type: str = "Admin",
        name: Optional[str] = None,
        password: str = DEFAULT_PASSWORD,
        supervisor_id: Optional[int] = None,
    ) -> Staff:
        return await self._save(Staff(
            name=name or username.title(),
            role=role,
            staff_type=staff_type,
            ssn="123-45-6789",
            birthdate=date(1985, 4, 12),
            sex="F",
            address="1 Zoo Lane",
            supervisor_id=supervisor_id,
            username=username,
            password_hash=hash_password(password),
        ))

    async def visitor(
        self,
        username: str = "visitor",
        password: str = DEFAULT_PASSWORD,
        first_name: str = "Vera",
        last_name: str = "Visitor",
    ) -> Visitor:
        return await self._save(Visitor(
            first_name=first_name,
            last_name=last_name,
            username=username,
            password_hash=hash_password(password),
            billing_address="22 Acacia Avenue",
        ))

    async def enclosure(
        self,
        name: str = "Savannah",
        type: str = "Grassland",
        capacity: int = 4,
        staff_id: Optional[int] = None,
    ) -> Enclosure:
        return await self._save(Enclosure(
            name=name,
            type=type,
            capacity=capacity,
            location="North Trail",
            staff_id=staff_id,
        ))

    async def animal(
        self,
        enclosure_id: int,
        name: str = "Zuri",
        species: str = "Lion",
        health_status: str = "Healthy",
        last_vet_checkup: date = date(2025, 3, 1),
    ) -> Animal:
        return await self._save(Animal(
            name=name,
            species=species,
            date_of_birth=date(2019, 6, 1),
            gender="Female",
            health_status=health_status,
            last_vet_checkup=last_vet_checkup,
            danger_level="High",
            enclosure_id=enclosure_id,
        ))

    async def gift_shop(self, name: str = "Safari Gifts", location: str = "Main Gate") -> GiftShop:
        return await self._save(GiftShop(name=name, location=location))

    async def product(
        self,
        name: str = "Plush Lion",
        price: float = 12.5,
        category: str = "Toys",
        available: bool = True,
    ) -> Product:
        return await self._save(Product(
            name=name,
            description=f"{name} from the gift shop",
            price=price,
            category=category,
            available=available,
        ))

    async def inventory(self, gift_shop_id: int, product_id: int, quantity: int) -> Inventory:
        return await self._save(Inventory(
            gift_shop_id=gift_shop_id,
            product_id=product_id,
            quantity_in_stock=quantity,
        ))


@pytest.fixture
def seed(test_db) -> Seeder:
    return Seeder(test_db)


@pytest.fixture
def auth_headers():
    """
    Bearer headers for a seeded Visitor or Staff row.

    Usage:
        manager = await seed.staff()
        await test_client.get("/api/staff", headers=auth_headers(manager))
    """
    def _headers(user) -> dict:
        principal = visitor_principal(user) if isinstance(user, Visitor) else staff_principal(user)
        return {"Authorization": f"Bearer {create_access_token(principal)}"}
    return _headers
