"""Root conftest: shared test configuration and fixtures.

Invariants:
    - Every test that touches SQL gets a fresh SQLite file under tmp_path
    - The app under test gets its EmployeeService injected; the lifespan never
      opens the configured DATABASE_DSN
"""

import os

# Keep the module-level app in employee_service.main away from real config
os.environ.setdefault("DATABASE_DSN", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest
from httpx import ASGITransport, AsyncClient

from employee_service.config import Settings
from employee_service.infrastructure.database import DatabaseSessionManager
from employee_service.infrastructure.employee_repository import SqlEmployeeRepository
from employee_service.main import create_app
from employee_service.services.employee_service import EmployeeService

from tests.fakes import InMemoryEmployeeRepository


def sqlite_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'employees.db'}"


@pytest.fixture
def test_settings(tmp_path):
    return Settings(_env_file=None, database_dsn=sqlite_url(tmp_path))


@pytest.fixture
async def db_manager(tmp_path):
    manager = DatabaseSessionManager(
        sqlite_url(tmp_path), max_open=5, max_idle=2, max_lifetime_seconds=60,
    )
    await manager.connect()
    yield manager
    await manager.dispose()


@pytest.fixture
def repository(db_manager):
    return SqlEmployeeRepository(db_manager)


@pytest.fixture
def fake_repository():
    return InMemoryEmployeeRepository()


@pytest.fixture
async def client(test_settings, repository, db_manager):
    """HTTP client over the full app, backed by a temp SQLite database."""
    app = create_app(
        settings=test_settings,
        employee_service=EmployeeService(repository),
        db_manager=db_manager,
    )
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
