"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - Connection string and port come from the environment (DATABASE_URL, PORT)
    - get_settings() is cached (lru_cache): single instance per process
    - database_url "memory://" selects the in-process store (no database server)

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all settings: works out-of-the-box with docker-compose
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MEMORY_DATABASE_URL = "memory://"


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = "postgresql+asyncpg://users:users@db:5432/users"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting platforms provide postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10
    database_create_schema: bool = True

    # Server
    host: str = "0.0.0.0"
    port: int = 5000
    environment: str = "development"

    # API
    cors_origins: list[str] = ["http://localhost:3000"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def uses_memory_store(self) -> bool:
        return self.database_url == MEMORY_DATABASE_URL


@lru_cache
def get_settings() -> Settings:
    return Settings()
