"""Employee Service API: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery); employee routes are served
      at /employees and at the versioned alias /api/v1/employees, each with and
      without a trailing slash
    - Dependencies wired by constructor injection, in order:
      DatabaseSessionManager -> SqlEmployeeRepository -> EmployeeService
    - Startup fails fast: a StartupError from the storage layer aborts the lifespan
    - Shutdown releases the pool after uvicorn has drained in-flight requests
      (bounded by SHUTDOWN_GRACE_SECONDS)

Design Decisions:
    - Lifespan over @app.on_event
    - create_app() accepts a ready EmployeeService; the lifespan then skips storage
      wiring entirely (tests inject services backed by fakes or a temp database)
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from employee_service.api.error_handlers import register_error_handlers
from employee_service.api.middleware import register_middleware
from employee_service.api.routes import employees, health
from employee_service.config import Settings, get_settings
from employee_service.infrastructure.database import DatabaseSessionManager
from employee_service.infrastructure.employee_repository import SqlEmployeeRepository
from employee_service.infrastructure.observability import setup_logging
from employee_service.services.employee_service import EmployeeService

logger = logging.getLogger(__name__)


def build_db_manager(settings: Settings) -> DatabaseSessionManager:
    return DatabaseSessionManager(
        settings.database_dsn,
        max_open=settings.db_max_open_conns,
        max_idle=settings.db_max_idle_conns,
        max_lifetime_seconds=settings.db_conn_max_lifetime_seconds,
        ping_timeout_seconds=settings.db_ping_timeout_seconds,
    )


def _make_lifespan(settings: Settings):

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown lifecycle."""
        if getattr(app.state, "employee_service", None) is not None:
            logger.info("Employee Service started with injected service")
            yield
            return

        db_manager = build_db_manager(settings)
        await db_manager.connect()
        app.state.db_manager = db_manager
        app.state.employee_service = EmployeeService(
            SqlEmployeeRepository(db_manager),
        )
        logger.info("Employee Service started")
        try:
            yield
        finally:
            logger.info("Employee Service shutting down")
            app.state.employee_service = None
            app.state.db_manager = None
            await db_manager.dispose()

    return lifespan


def create_app(
    settings: Settings | None = None,
    employee_service: EmployeeService | None = None,
    db_manager: DatabaseSessionManager | None = None,
) -> FastAPI:
    """Build the FastAPI app; storage is opened by the lifespan unless a service is injected."""
    settings = settings or get_settings()
    app = FastAPI(
        title="Employee Service",
        version="1.0.0",
        description="Employee CRUD service (REST + SQL + SQLAlchemy)",
        lifespan=_make_lifespan(settings),
    )
    app.state.employee_service = employee_service
    app.state.db_manager = db_manager

    register_middleware(app, settings.request_timeout_seconds)
    register_error_handlers(app)

    app.include_router(health.router)
    app.include_router(employees.router)
    app.include_router(employees.router, prefix="/api/v1")
    return app


app = create_app()


def run() -> None:
    """Console entry point: configure logging and serve until interrupted."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    logger.info(f"Server listening on {settings.server_addr}")
    uvicorn.run(
        app,
        host=settings.listen_host(),
        port=settings.listen_port(),
        timeout_graceful_shutdown=settings.shutdown_grace_seconds,
        log_config=None,
    )
    logger.info("Server stopped")
