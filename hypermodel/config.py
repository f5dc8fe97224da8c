"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Every value can be overridden from the environment or a .env file
    - api_prefix is normalized to a leading slash and no trailing slash, so
      generated links never contain `//`
    - get_settings() is cached (lru_cache); create_app(settings) bypasses it

Design Decisions:
    - Defaults target the docker-compose Postgres; tests point DATABASE_URL
      at in-memory SQLite before anything imports the app
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Document store
    database_url: str = "postgresql+asyncpg://hypermodel:hypermodel@db:5432/hypermodel"
    database_pool_size: int = 20
    database_max_overflow: int = 10
    # Create missing tables on startup (local runs); deployments use alembic
    database_create_tables: bool = False

    # HTTP surface
    api_prefix: str = "/api/rest"
    cors_origins: list[str] = ["http://localhost:3000"]
    environment: str = "development"

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("database_url", mode="before")
    @classmethod
    def use_asyncpg_driver(cls, v: str) -> str:
        """Hosting platforms hand out postgresql:// URLs; the engine needs asyncpg."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return "postgresql+asyncpg://" + v.removeprefix("postgresql://")
        return v

    @field_validator("api_prefix")
    @classmethod
    def normalize_prefix(cls, v: str) -> str:
        v = v.strip().strip("/")
        return f"/{v}" if v else ""

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def expose_error_stack(self) -> bool:
        """Tracebacks go into 500 responses everywhere except production."""
        return not self.is_production


@lru_cache
def get_settings() -> Settings:
    return Settings()
