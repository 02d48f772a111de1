import os

# Settings are read at import time; point them at a throwaway database first.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SCHEDULER_ENABLED", "false")

from datetime import datetime, timezone

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from vendops import models  # noqa: F401
from vendops.database import Base, get_db
from vendops.main import app
from vendops.models import Location, Machine, Sale


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def utc(year, month, day, hour=12):
    return datetime(year, month, day, hour, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def seeded(db):
    """
    Four locations with September 2026 sales:
    - Downtown Gym: 10% of gross, $1000 gross
    - Library: $30/mo flat, no sales
    - Airport: 5% + $20/mo hybrid, $2000 gross
    - Warehouse: no commission, $500 gross
    """
    gym = Location(name="Downtown Gym", commission_model="percent_gross", commission_pct_bps=1000)
    library = Location(name="Library", commission_model="flat_month", commission_flat_cents=3000)
    airport = Location(
        name="Airport",
        commission_model="hybrid",
        commission_pct_bps=500,
        commission_flat_cents=2000,
    )
    warehouse = Location(name="Warehouse", commission_model="none")
    db.add_all([gym, library, airport, warehouse])
    await db.flush()

    gym_machine = Machine(name="Gym Snack 1", serial_number="GYM-001", location_id=gym.id)
    airport_machine = Machine(name="Gate B Drinks", serial_number="AIR-001", location_id=airport.id)
    warehouse_machine = Machine(name="Break Room", serial_number="WH-001", location_id=warehouse.id)
    unplaced_machine = Machine(name="Spare", serial_number="SPARE-001")
    db.add_all([gym_machine, airport_machine, warehouse_machine, unplaced_machine])
    await db.flush()

    db.add_all([
        # $1000.00 at the gym, split across two lines
        Sale(machine_id=gym_machine.id, qty=60, unit_price_cents=1000, occurred_at=utc(2026, 9, 3)),
        Sale(machine_id=gym_machine.id, qty=40, unit_price_cents=1000, occurred_at=utc(2026, 9, 30, 23)),
        # Just outside the window on both sides
        Sale(machine_id=gym_machine.id, qty=5, unit_price_cents=1000, occurred_at=utc(2026, 8, 31, 23)),
        Sale(machine_id=gym_machine.id, qty=5, unit_price_cents=1000, occurred_at=utc(2026, 10, 1, 0)),
        # $2000.00 at the airport
        Sale(machine_id=airport_machine.id, qty=200, unit_price_cents=1000, occurred_at=utc(2026, 9, 15)),
        # Excluded location and unplaced machine
        Sale(machine_id=warehouse_machine.id, qty=50, unit_price_cents=1000, occurred_at=utc(2026, 9, 10)),
        Sale(machine_id=unplaced_machine.id, qty=10, unit_price_cents=1000, occurred_at=utc(2026, 9, 10)),
    ])
    await db.commit()

    return {
        "gym": gym,
        "library": library,
        "airport": airport,
        "warehouse": warehouse,
        "gym_machine": gym_machine,
        "unplaced_machine": unplaced_machine,
    }
