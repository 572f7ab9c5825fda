import logging
import re
from dataclasses import dataclass

from sqlalchemy import text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError, SQLAlchemyError
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base

from todo_api.config import Settings

logger = logging.getLogger(__name__)

Base = declarative_base()

# Template tokens left behind by a deploy platform that never substituted them,
# e.g. "${{MySQL.MYSQL_URL}}" or "${DATABASE_URL}"
PLACEHOLDER_RE = re.compile(r"\$\{\{?[^{}]*\}?\}")

# Bare schemes are upgraded to the async driver for that backend
ASYNC_DRIVERS = {
    "mysql": "mysql+aiomysql",
    "postgres": "postgresql+asyncpg",
    "postgresql": "postgresql+asyncpg",
    "sqlite": "sqlite+aiosqlite",
}


class ConfigurationError(Exception):
    """Connection settings are missing or unusable."""


class StartupError(RuntimeError):
    """Raised by the app lifespan when the database cannot be provisioned."""


def is_placeholder(value: str) -> bool:
    return bool(PLACEHOLDER_RE.search(value))


def resolve_database_url(settings: Settings) -> URL:
    """
    Pick the connection target from settings.

    A connection string wins over discrete parts unless it is an unresolved
    template placeholder, in which case the discrete parts are used instead.
    """
    if settings.database_url and not is_placeholder(settings.database_url):
        try:
            url = make_url(settings.database_url)
        except (ArgumentError, ValueError) as exc:
            raise ConfigurationError("Database connection string could not be parsed") from exc
        return url.set(drivername=ASYNC_DRIVERS.get(url.drivername, url.drivername))

    if settings.database_url:
        logger.warning("Connection string looks like an unresolved placeholder, using discrete settings")

    missing = [
        name for name, value in (
            ("MYSQL_HOST", settings.db_host),
            ("MYSQL_USER", settings.db_user),
            ("MYSQL_DATABASE", settings.db_name),
        )
        if not value
    ]
    if missing:
        raise ConfigurationError(f"Missing database settings: {', '.join(missing)}")

    try:
        port = int(settings.db_port) if settings.db_port else None
    except ValueError as exc:
        raise ConfigurationError(f"MYSQL_PORT must be a number, got {settings.db_port!r}") from exc

    return URL.create(
        drivername=ASYNC_DRIVERS.get(settings.db_driver, settings.db_driver),
        username=settings.db_user,
        password=settings.db_password,
        host=settings.db_host,
        port=port,
        database=settings.db_name,
    )


class Database:
    """Process-wide engine and session factory, created once at startup."""

    def __init__(self, url: URL | str, **engine_options):
        self.url = make_url(url)
        self.engine = create_async_engine(self.url, echo=False, **engine_options)
        self.sessionmaker = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False
        )

    @classmethod
    def from_settings(cls, settings: Settings, **engine_options) -> "Database":
        return cls(resolve_database_url(settings), **engine_options)

    async def ping(self) -> None:
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def dispose(self) -> None:
        await self.engine.dispose()


@dataclass(frozen=True)
class StartupResult:
    database: Database | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.database is not None

    @classmethod
    def success(cls, database: Database) -> "StartupResult":
        return cls(database=database)

    @classmethod
    def failure(cls, error: Exception) -> "StartupResult":
        return cls(error=error)


async def provision(settings: Settings, **engine_options) -> StartupResult:
    """Build the database handle and check it is reachable once. Never retries."""
    database = None
    try:
        database = Database.from_settings(settings, **engine_options)
        await database.ping()
    except (ConfigurationError, SQLAlchemyError, OSError, ImportError) as exc:
        logger.error("Database connection error: %s", exc)
        if database is not None:
            await database.dispose()
        return StartupResult.failure(exc)

    logger.info("Database connected successfully (%s)", database.url.render_as_string(hide_password=True))
    return StartupResult.success(database)
