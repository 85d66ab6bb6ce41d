"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - Every knob has a default; the service starts with an empty environment
    - get_settings() is cached (lru_cache), single instance per process
    - Invalid numeric values fail validation at startup (fatal, no partial service)

Design Decisions:
    - Env names mirror the field names (SERVER_ADDR, DATABASE_DSN, DB_MAX_OPEN_CONNS, ...)
    - Driver-less URLs are rewritten to their async driver form
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ASYNC_DRIVERS = {
    "postgresql://": "postgresql+asyncpg://",
    "postgres://": "postgresql+asyncpg://",
    "sqlite://": "sqlite+aiosqlite://",
}


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore",
    )

    # Server
    server_addr: str = ":8080"
    request_timeout_seconds: float = Field(30.0, gt=0)
    shutdown_grace_seconds: int = Field(15, ge=0)

    # Database
    database_dsn: str = "sqlite+aiosqlite:///employees.db"
    db_max_open_conns: int = Field(25, ge=1)
    db_max_idle_conns: int = Field(25, ge=0)
    db_conn_max_lifetime_seconds: int = Field(300, ge=0)
    db_ping_timeout_seconds: float = Field(5.0, gt=0)

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("database_dsn", mode="before")
    @classmethod
    def use_async_driver(cls, v: str) -> str:
        """Map plain postgresql:// and sqlite:// URLs onto asyncpg / aiosqlite."""
        if isinstance(v, str):
            for prefix, replacement in _ASYNC_DRIVERS.items():
                if v.startswith(prefix):
                    return v.replace(prefix, replacement, 1)
        return v

    @field_validator("server_addr")
    @classmethod
    def check_server_addr(cls, v: str) -> str:
        _, sep, port = v.rpartition(":")
        if not sep or not port.isdigit():
            raise ValueError("server_addr must look like 'host:port' or ':port'")
        return v

    def listen_host(self) -> str:
        host = self.server_addr.rpartition(":")[0]
        return host.strip("[]") or "0.0.0.0"

    def listen_port(self) -> int:
        return int(self.server_addr.rpartition(":")[2])


@lru_cache
def get_settings() -> Settings:
    return Settings()
