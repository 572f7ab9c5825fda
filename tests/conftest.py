import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.pool import NullPool

from todo_api.config import Settings
from todo_api.database import Base, Database
from todo_api.main import create_app
from todo_api.models.todo import Todo  # noqa: F401  registers the table on Base

SETTINGS_ENV = [
    "MYSQL_URL", "MYSQL_PUBLIC_URL", "DATABASE_URL",
    "MYSQL_HOST", "MYSQLHOST", "MYSQL_USER", "MYSQLUSER",
    "MYSQL_PASSWORD", "MYSQLPASSWORD", "MYSQL_DATABASE", "MYSQLDATABASE",
    "MYSQL_PORT", "MYSQLPORT", "DB_DRIVER",
    "LISTEN_HOST", "PORT", "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    # Keep a developer's .env or shell from leaking into settings under test
    for name in SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_settings():
    def _make(**values) -> Settings:
        return Settings(_env_file=None, **values)
    return _make


@pytest.fixture
def sqlite_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'todos.db'}"


@pytest.fixture
async def database(sqlite_url):
    db = Database(sqlite_url, poolclass=NullPool)
    async with db.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield db
    await db.dispose()


@pytest.fixture
async def session(database):
    async with database.sessionmaker() as db:
        yield db


@pytest.fixture
async def client(database):
    transport = ASGITransport(app=create_app(database))
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
