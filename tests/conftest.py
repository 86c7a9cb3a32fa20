import os
from datetime import date, datetime, timezone

# Must be set before leavedesk.core.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from leavedesk.core.clock import FixedClock, get_clock
from leavedesk.core.database import Base
from leavedesk.core.dependencies import get_db
from leavedesk.core.security import create_access_token
from leavedesk.main import app
from leavedesk.models import Employee, Holiday, User

# "Today" for every test: Monday 2025-03-03
TODAY = date(2025, 3, 3)
NOW = datetime(2025, 3, 3, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
async def session_factory():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory, clock):
    async def _get_test_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _get_test_db
    app.dependency_overrides[get_clock] = lambda: clock
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def make_person(
    db,
    name="Emily Johnson",
    email="emily@acme.com",
    role="employee",
    leave_balance=20,
    department="Engineering",
    with_login=True,
):
    employee = Employee(
        name=name,
        email=email,
        role=role,
        department=department,
        hire_date=date(2023, 1, 9),
        leave_balance=leave_balance,
        created_at=NOW,
    )
    db.add(employee)
    await db.flush()
    user = None
    if with_login:
        user = User(email=email, hashed_password="not-used", employee_id=employee.id)
        db.add(user)
        await db.flush()
    await db.commit()
    return employee, user


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token({'sub': str(user.id)})}"}


@pytest.fixture
async def employee(db):
    emp, user = await make_person(db)
    return emp, auth_headers(user)


@pytest.fixture
async def admin(db):
    emp, user = await make_person(
        db, name="Sarah Chen", email="sarah@acme.com", role="admin", department="HR"
    )
    return emp, auth_headers(user)


async def add_holiday(db, name: str, day: date, kind: str = "public") -> Holiday:
    holiday = Holiday(name=name, date=day, type=kind, created_at=NOW)
    db.add(holiday)
    await db.commit()
    return holiday


@pytest.fixture
def fetch(session_factory):
    """Load a row through a fresh session, bypassing any cached instances."""

    async def _fetch(model, ident):
        async with session_factory() as session:
            return await session.get(model, ident)

    return _fetch
