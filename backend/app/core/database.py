import logging

from sqlalchemy import event, func, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from starlette.requests import Request

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


DEFAULT_FILAMENT_BRANDS = [
    "Bambu Lab",
    "Polymaker",
    "Prusament",
    "eSun",
    "Elegoo",
    "Sunlu",
    "Overture",
    "Hatchbox",
]

DEFAULT_FILAMENT_MATERIALS = ["PLA", "PETG", "ABS", "ASA", "TPU", "PA", "PC"]

DEFAULT_PRINTER_BRANDS = ["Bambu Lab", "Prusa", "Creality", "Elegoo", "Anycubic", "Voron"]


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE actions unless this is set per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Storage client owning the engine and session factory.

    Constructed once per process (or per test), opened at startup and closed at
    shutdown. Services never reach for a global engine; they receive sessions
    created here.
    """

    def __init__(self, url: str, echo: bool = False, seed_lookups: bool = True, **engine_kwargs):
        self.url = url
        self.seed_lookups = seed_lookups
        self.engine: AsyncEngine = create_async_engine(url, echo=echo, **engine_kwargs)
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        self.sessionmaker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    def session(self) -> AsyncSession:
        return self.sessionmaker()

    async def open(self) -> None:
        """Create tables and seed lookup data."""
        # Import models to register them with SQLAlchemy
        from backend.app.models import filament, filament_profile, printer, user  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        if self.seed_lookups:
            await self.seed_lookup_tables()

        logger.info("Database ready (%s)", self.engine.url.render_as_string(hide_password=True))

    async def close(self) -> None:
        await self.engine.dispose()

    async def seed_lookup_tables(self) -> None:
        """Seed default brands and materials if their tables are empty."""
        from backend.app.models.filament import FilamentBrand, FilamentMaterial
        from backend.app.models.printer import PrinterBrand

        async with self.session() as session:
            for model, names in (
                (FilamentBrand, DEFAULT_FILAMENT_BRANDS),
                (FilamentMaterial, DEFAULT_FILAMENT_MATERIALS),
                (PrinterBrand, DEFAULT_PRINTER_BRANDS),
            ):
                result = await session.execute(select(func.count()).select_from(model))
                if result.scalar():
                    continue
                session.add_all(model(name=name) for name in names)
                logger.info("Seeded %d rows into %s", len(names), model.__tablename__)

            await session.commit()


async def get_db(request: Request) -> AsyncSession:
    database: Database = request.app.state.database
    async with database.session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
