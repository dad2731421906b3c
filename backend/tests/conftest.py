"""Shared test configuration and fixtures.

Each test gets a fresh schema on its own engine:
- By default an in-memory SQLite database (``sqlite+aiosqlite``).
- Set ``TEST_DATABASE_URL`` to run against PostgreSQL instead.

The app's ``get_db`` dependency is overridden with a session bound to a
transaction that always rolls back, so fixtures and requests share state.
"""

import os

os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("ENVIRONMENT", "test")

import uuid
from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import datetime, timedelta
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

import rentora.models  # noqa: F401  (register every table on Base.metadata)
from rentora.auth.jwt import create_token_pair
from rentora.auth.passwords import hash_password
from rentora.database import Base, get_db, utcnow
from rentora.main import app
from rentora.models.booking import Booking
from rentora.models.enums import BookingStatus, PriceUnit, PropertyStatus, PropertyType, UserRole
from rentora.models.property import Property
from rentora.models.user import User
from rentora.services.pricing import compute_total_price, stay_length_days

_test_db_url = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite://")

TEST_PASSWORD = "testpass123"


def _make_engine():
    if _test_db_url.startswith("sqlite"):
        return create_async_engine(
            _test_db_url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_async_engine(_test_db_url, echo=False, pool_pre_ping=True)


# ---------------------------------------------------------------------------
# Per-test engine, schema and transactional session
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def test_engine():
    """Create an engine with all tables; drop them again afterwards."""
    engine = _make_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async session wrapped in a transaction that always rolls back."""
    async with test_engine.connect() as connection:
        transaction = await connection.begin()
        session = AsyncSession(bind=connection, expire_on_commit=False)

        try:
            yield session
        finally:
            await session.close()
            await transaction.rollback()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Provide an httpx AsyncClient wired to use the test DB session."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.state.metrics.reset()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Users and auth headers
# ---------------------------------------------------------------------------


@pytest.fixture
def make_user(db_session: AsyncSession) -> Callable[..., Awaitable[User]]:
    """Factory: create a user with the given role directly in the DB."""

    async def _make(role: UserRole = UserRole.USER, **overrides) -> User:
        unique = uuid.uuid4().hex[:8]
        values = {
            "email": f"{role.value.lower()}-{unique}@test.com",
            "hashed_password": hash_password(TEST_PASSWORD),
            "first_name": role.value.title(),
            "last_name": "Tester",
            "role": role.value,
            "is_active": True,
        }
        values.update(overrides)
        user = User(**values)
        db_session.add(user)
        await db_session.flush()
        await db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def headers_for() -> Callable[[User], dict[str, str]]:
    """Return a function building Authorization headers for a user."""

    def _headers(user: User) -> dict[str, str]:
        tokens = create_token_pair(str(user.id), email=user.email, role=user.role)
        return {"Authorization": f"Bearer {tokens['access_token']}"}

    return _headers


@pytest_asyncio.fixture
async def guest_user(make_user) -> User:
    return await make_user(UserRole.USER, first_name="Gina", last_name="Guest")


@pytest_asyncio.fixture
async def other_user(make_user) -> User:
    return await make_user(UserRole.USER, first_name="Oscar", last_name="Other")


@pytest_asyncio.fixture
async def host_user(make_user) -> User:
    return await make_user(UserRole.HOST, first_name="Hugo", last_name="Host")


@pytest_asyncio.fixture
async def admin_user(make_user) -> User:
    return await make_user(UserRole.ADMIN, first_name="Alma", last_name="Admin")


@pytest_asyncio.fixture
async def provider_user(make_user) -> User:
    return await make_user(UserRole.SERVICE_PROVIDER, first_name="Pedro", last_name="Provider")


@pytest.fixture
def guest_headers(guest_user: User, headers_for) -> dict[str, str]:
    return headers_for(guest_user)


@pytest.fixture
def other_headers(other_user: User, headers_for) -> dict[str, str]:
    return headers_for(other_user)


@pytest.fixture
def host_headers(host_user: User, headers_for) -> dict[str, str]:
    return headers_for(host_user)


@pytest.fixture
def admin_headers(admin_user: User, headers_for) -> dict[str, str]:
    return headers_for(admin_user)


@pytest.fixture
def provider_headers(provider_user: User, headers_for) -> dict[str, str]:
    return headers_for(provider_user)


# ---------------------------------------------------------------------------
# Dates, properties and bookings
# ---------------------------------------------------------------------------


@pytest.fixture
def day() -> Callable[[int], datetime]:
    """``day(n)``: midnight UTC ``n`` days after a fixed point 30 days from now."""
    anchor = utcnow().replace(hour=0, minute=0, second=0, microsecond=0) + timedelta(days=30)

    def _day(n: int) -> datetime:
        return anchor + timedelta(days=n)

    return _day


@pytest.fixture
def make_property(db_session: AsyncSession, host_user: User) -> Callable[..., Awaitable[Property]]:
    """Factory: create an AVAILABLE property owned by ``host_user`` unless overridden."""

    async def _make(**overrides) -> Property:
        values = {
            "owner_id": host_user.id,
            "title": "Test Apartment in Town",
            "description": "A comfortable apartment used by automated tests.",
            "type": PropertyType.APARTMENT.value,
            "price": Decimal("1000.00"),
            "price_unit": PriceUnit.DAILY.value,
            "bedrooms": 2,
            "bathrooms": 1,
            "furnished": True,
            "address": "1 Test Street",
            "city": "Lisbon",
            "state": "Lisboa",
            "zip_code": "1000-001",
            "amenities": ["wifi"],
            "rules": [],
            "min_stay_days": 1,
            "status": PropertyStatus.AVAILABLE.value,
        }
        values.update(overrides)
        prop = Property(**values)
        db_session.add(prop)
        await db_session.flush()
        await db_session.refresh(prop)
        return prop

    return _make


@pytest_asyncio.fixture
async def test_property(make_property) -> Property:
    return await make_property()


@pytest.fixture
def make_booking(db_session: AsyncSession, guest_user: User) -> Callable[..., Awaitable[Booking]]:
    """Factory: insert a booking directly, bypassing the lifecycle checks."""

    async def _make(
        prop: Property,
        check_in: datetime,
        check_out: datetime,
        status: BookingStatus = BookingStatus.CONFIRMED,
        guest: User | None = None,
    ) -> Booking:
        guest = guest or guest_user
        booking = Booking(
            property_id=prop.id,
            guest_id=guest.id,
            host_id=prop.owner_id,
            check_in=check_in,
            check_out=check_out,
            guests_count=1,
            total_price=compute_total_price(prop.price, prop.price_unit, stay_length_days(check_in, check_out)),
            status=status.value,
        )
        db_session.add(booking)
        await db_session.flush()
        await db_session.refresh(booking)
        return booking

    return _make
