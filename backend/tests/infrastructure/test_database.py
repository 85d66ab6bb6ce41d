"""Database Session Manager: startup, schema bootstrap, pool options and error mapping.

Invariants:
    - connect() creates the employees table and is safe to repeat
    - Ping timeout, unreachable databases and schema failures raise StartupError
      after disposing the pool
    - Max idle 0 keeps no idle connections
    - Pool limits translate to pool_size / max_overflow / pool_recycle
"""

import asyncio

import pytest
from sqlalchemy import inspect, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.pool import NullPool

from employee_service.core.errors import ConstraintViolationError, StartupError, StorageError
from employee_service.infrastructure.database import DatabaseSessionManager, pool_options


def sqlite_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'employees.db'}"


async def _columns(manager: DatabaseSessionManager) -> dict[str, dict]:
    async with manager.engine.connect() as conn:
        cols = await conn.run_sync(
            lambda sync_conn: inspect(sync_conn).get_columns("employees"),
        )
    return {c["name"]: c for c in cols}


async def test_connect_creates_employees_table(db_manager):
    cols = await _columns(db_manager)
    assert set(cols) == {
        "id", "first_name", "last_name", "email", "position",
        "created_at", "updated_at",
    }
    assert cols["position"]["nullable"] is True
    assert cols["email"]["nullable"] is False
    assert cols["first_name"]["nullable"] is False


async def test_connect_is_idempotent(tmp_path):
    url = sqlite_url(tmp_path)
    first = DatabaseSessionManager(url)
    await first.connect()
    async with first.engine.begin() as conn:
        await conn.execute(text(
            "INSERT INTO employees (first_name, last_name, email) "
            "VALUES ('Alice', 'Smith', 'alice@example.com')",
        ))
    await first.dispose()

    second = DatabaseSessionManager(url)
    await second.connect()
    async with second.engine.connect() as conn:
        count = (await conn.execute(text("SELECT COUNT(*) FROM employees"))).scalar()
    await second.dispose()
    assert count == 1


async def test_server_defaults_fill_timestamps(db_manager):
    async with db_manager.engine.begin() as conn:
        await conn.execute(text(
            "INSERT INTO employees (first_name, last_name, email) "
            "VALUES ('Bob', 'Jones', 'bob@example.com')",
        ))
        row = (await conn.execute(text(
            "SELECT created_at, updated_at FROM employees",
        ))).one()
    assert row.created_at is not None
    assert row.updated_at is not None


@pytest.fixture
def disposed(monkeypatch):
    """Records every AsyncEngine.dispose() call."""
    calls = []
    original = AsyncEngine.dispose

    async def tracking_dispose(self, close=True):
        calls.append(self)
        await original(self, close)

    monkeypatch.setattr(AsyncEngine, "dispose", tracking_dispose)
    return calls


async def test_unreachable_database_is_startup_error(tmp_path, disposed):
    missing_dir = tmp_path / "missing" / "employees.db"
    manager = DatabaseSessionManager(f"sqlite+aiosqlite:///{missing_dir}")
    with pytest.raises(StartupError) as exc_info:
        await manager.connect()
    assert exc_info.value.message.startswith("db init:")
    assert any(engine is manager.engine for engine in disposed)


async def test_ping_timeout_is_startup_error(tmp_path, monkeypatch, disposed):
    manager = DatabaseSessionManager(
        sqlite_url(tmp_path), ping_timeout_seconds=0.05,
    )

    async def hanging_ping():
        await asyncio.sleep(5)

    monkeypatch.setattr(manager, "_ping", hanging_ping)
    with pytest.raises(StartupError) as exc_info:
        await manager.connect()
    assert "ping timeout" in exc_info.value.message
    assert any(engine is manager.engine for engine in disposed)


async def test_schema_failure_is_startup_error(tmp_path, monkeypatch, disposed):
    manager = DatabaseSessionManager(sqlite_url(tmp_path))

    async def failing_schema():
        raise OperationalError(
            "CREATE TABLE employees", {}, Exception("database is locked"),
        )

    monkeypatch.setattr(manager, "_ensure_schema", failing_schema)
    with pytest.raises(StartupError) as exc_info:
        await manager.connect()
    assert exc_info.value.message.startswith("db init:")
    assert "database is locked" in exc_info.value.message
    assert any(engine is manager.engine for engine in disposed)


async def test_health_check(db_manager):
    assert await db_manager.health_check() is True


async def test_health_check_false_when_unreachable(tmp_path):
    manager = DatabaseSessionManager(
        f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'x.db'}",
    )
    assert await manager.health_check() is False
    await manager.dispose()


async def test_session_maps_integrity_error(db_manager):
    insert = text(
        "INSERT INTO employees (first_name, last_name, email) "
        "VALUES ('A', 'B', 'dup@example.com')",
    )
    async with db_manager.session("seed") as db:
        await db.execute(insert)
        await db.commit()
    with pytest.raises(ConstraintViolationError) as exc_info:
        async with db_manager.session("insert employee") as db:
            await db.execute(insert)
            await db.commit()
    assert exc_info.value.operation == "insert employee"


async def test_session_maps_operational_error(db_manager):
    with pytest.raises(StorageError) as exc_info:
        async with db_manager.session("select employee") as db:
            await db.execute(text("SELECT * FROM no_such_table"))
    assert not isinstance(exc_info.value, ConstraintViolationError)
    assert exc_info.value.code == "DATABASE_ERROR"


def test_pool_options_from_limits():
    opts = pool_options("postgresql+asyncpg://u:p@db/hr", 25, 10, 300)
    assert opts["pool_size"] == 10
    assert opts["max_overflow"] == 15
    assert opts["pool_recycle"] == 300
    assert opts["pool_pre_ping"] is True


def test_pool_options_caps_idle_at_open():
    opts = pool_options("postgresql+asyncpg://u:p@db/hr", 5, 25, 0)
    assert opts["pool_size"] == 5
    assert opts["max_overflow"] == 0
    assert opts["pool_recycle"] == -1


def test_pool_options_skipped_for_memory_sqlite():
    assert pool_options("sqlite+aiosqlite:///:memory:", 25, 25, 300) == {}
    assert pool_options("sqlite+aiosqlite://", 25, 25, 300) == {}


def test_pool_options_zero_idle_keeps_nothing_pooled():
    opts = pool_options("postgresql+asyncpg://u:p@db/hr", 4, 0, 300)
    assert opts["poolclass"] is NullPool
    assert "pool_size" not in opts
    assert "max_overflow" not in opts
    assert opts["pool_recycle"] == 300


async def test_zero_idle_releases_connections(tmp_path):
    manager = DatabaseSessionManager(sqlite_url(tmp_path), max_open=4, max_idle=0)
    await manager.connect()

    async def query():
        async with manager.session("select employees") as db:
            await db.execute(text("SELECT COUNT(*) FROM employees"))

    await asyncio.gather(*(query() for _ in range(4)))
    assert isinstance(manager.engine.pool, NullPool)
    await manager.dispose()
