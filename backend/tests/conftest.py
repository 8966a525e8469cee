"""Shared test fixtures for the filament profiles backend tests."""

import logging
import os
from collections.abc import AsyncGenerator
from datetime import datetime, timedelta
from decimal import Decimal

import pytest

# IMPORTANT: Set environment variables BEFORE any app imports
# This must happen before settings/config are loaded
os.environ["LOG_TO_FILE"] = "false"
os.environ["DEBUG"] = "false"

from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from backend.app.core.config import settings  # noqa: E402

settings.log_to_file = False

from backend.app.core.database import Base, Database  # noqa: E402

# Use in-memory SQLite for tests
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def test_database() -> AsyncGenerator[Database, None]:
    """Create a test database with all tables and no seeded lookups."""
    # StaticPool: every session shares the one in-memory connection
    database = Database(TEST_DATABASE_URL, seed_lookups=False, poolclass=StaticPool)
    await database.open()

    yield database

    async with database.engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await database.close()


@pytest.fixture
async def db_session(test_database) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with test_database.session() as session:
        yield session


@pytest.fixture
async def async_client(test_database) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client bound to the test database."""
    from backend.app.core.invalidation import ViewInvalidator
    from backend.app.main import app

    # ASGITransport does not run the lifespan, so install the database directly
    app.state.database = test_database
    app.state.invalidator = ViewInvalidator()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    del app.state.database


# ============================================================================
# Factory Fixtures for Test Data
# ============================================================================


@pytest.fixture
def user_factory(db_session):
    """Factory to create test users."""
    _counter = [0]  # Use list to allow mutation in nested function

    async def _create_user(**kwargs):
        from backend.app.core.auth import get_password_hash
        from backend.app.models.user import User

        _counter[0] += 1
        password = kwargs.pop("password", "testpassword123")

        defaults = {
            "name": f"Test User {_counter[0]}",
            "email": f"user{_counter[0]}@example.com",
            "role": "user",
            "password_hash": get_password_hash(password),
        }
        defaults.update(kwargs)

        user = User(**defaults)
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _create_user


@pytest.fixture
def filament_brand_factory(db_session):
    """Factory to create filament brands, reusing an existing row with the same name."""

    async def _create_brand(name: str = "Polymaker"):
        from sqlalchemy import select

        from backend.app.models.filament import FilamentBrand

        result = await db_session.execute(select(FilamentBrand).where(FilamentBrand.name == name))
        brand = result.scalar_one_or_none()
        if brand:
            return brand

        brand = FilamentBrand(name=name)
        db_session.add(brand)
        await db_session.commit()
        await db_session.refresh(brand)
        return brand

    return _create_brand


@pytest.fixture
def filament_material_factory(db_session):
    """Factory to create filament materials, reusing an existing row with the same name."""

    async def _create_material(name: str = "PLA"):
        from sqlalchemy import select

        from backend.app.models.filament import FilamentMaterial

        result = await db_session.execute(select(FilamentMaterial).where(FilamentMaterial.name == name))
        material = result.scalar_one_or_none()
        if material:
            return material

        material = FilamentMaterial(name=name)
        db_session.add(material)
        await db_session.commit()
        await db_session.refresh(material)
        return material

    return _create_material


@pytest.fixture
def filament_factory(db_session, filament_brand_factory, filament_material_factory):
    """Factory to create test filaments."""

    async def _create_filament(brand: str = "Polymaker", material: str = "PLA", **kwargs):
        from backend.app.models.filament import Filament

        brand_row = await filament_brand_factory(brand)
        material_row = await filament_material_factory(material)

        defaults = {
            "brand_id": brand_row.brand_id,
            "material_id": material_row.material_id,
            "color": "Jade White",
            "diameter": Decimal("1.75"),
            "spool_weight": Decimal("250.00"),
            "filament_density": Decimal("1.24"),
            "cost_per_kg": Decimal("24.99"),
        }
        defaults.update(kwargs)

        filament = Filament(**defaults)
        db_session.add(filament)
        await db_session.commit()
        await db_session.refresh(filament)
        return filament

    return _create_filament


@pytest.fixture
def printer_factory(db_session):
    """Factory to create test printers."""

    async def _create_printer(brand: str = "Bambu Lab", **kwargs):
        from sqlalchemy import select

        from backend.app.models.printer import Printer, PrinterBrand

        result = await db_session.execute(select(PrinterBrand).where(PrinterBrand.name == brand))
        brand_row = result.scalar_one_or_none()
        if brand_row is None:
            brand_row = PrinterBrand(name=brand)
            db_session.add(brand_row)
            await db_session.flush()

        defaults = {
            "brand_id": brand_row.brand_id,
            "model_name": "X1C",
            "extruder_type": "direct drive",
            "bed_type": "textured PEI",
        }
        defaults.update(kwargs)

        printer = Printer(**defaults)
        db_session.add(printer)
        await db_session.commit()
        await db_session.refresh(printer)
        return printer

    return _create_printer


@pytest.fixture
def profile_factory(db_session):
    """Factory to create filament profiles directly, bypassing the mutation service.

    Each profile gets a submission date one minute after the previous one so
    listing order is deterministic.
    """
    _counter = [0]
    base_time = datetime(2024, 1, 1, 12, 0, 0)

    async def _create_profile(filament_id: str, user_id: str | None = None, **kwargs):
        from backend.app.models.filament_profile import FilamentProfile

        _counter[0] += 1
        defaults = {
            "filament_id": filament_id,
            "user_id": user_id,
            "filament_profile_name": f"Profile {_counter[0]}",
            "submission_date": base_time + timedelta(minutes=_counter[0]),
        }
        defaults.update(kwargs)

        profile = FilamentProfile(**defaults)
        db_session.add(profile)
        await db_session.commit()
        await db_session.refresh(profile)
        return profile

    return _create_profile


@pytest.fixture
def auth_headers():
    """Build a bearer Authorization header for a user."""
    from backend.app.core.auth import create_access_token

    def _headers(user) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(data={'sub': user.id})}"}

    return _headers


# ============================================================================
# Log Capture Fixtures for Error Detection
# ============================================================================


class LogCapture(logging.Handler):
    """Handler that captures log records for testing."""

    def __init__(self):
        super().__init__()
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord):
        self.records.append(record)

    def get_errors(self) -> list[logging.LogRecord]:
        """Get all ERROR and CRITICAL level records."""
        return [r for r in self.records if r.levelno >= logging.ERROR]

    def has_errors(self) -> bool:
        return len(self.get_errors()) > 0


@pytest.fixture
def capture_logs():
    """Fixture that captures log output during a test."""
    handler = LogCapture()
    handler.setLevel(logging.DEBUG)

    # Attach to root logger to capture all logs
    root_logger = logging.getLogger()
    root_logger.addHandler(handler)

    yield handler

    root_logger.removeHandler(handler)
