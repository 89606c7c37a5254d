"""Application Configuration - environment-driven settings via pydantic-settings.

Invariants:
    - All credentials come from environment variables or .env (never hardcoded)
    - get_settings() is cached (lru_cache): read once per process
    - Invalid settings raise pydantic.ValidationError at startup

Environment layout (prefix APP_, nested with "__"):
    APP_DATABASE__HOST, APP_DATABASE__PORT, APP_DATABASE__USERNAME,
    APP_DATABASE__PASSWORD, APP_DATABASE__DATABASE_NAME, APP_DATABASE__DRIVER,
    APP_APPLICATION__HOST, APP_APPLICATION__PORT, APP_LOG_LEVEL, APP_LOG_FORMAT
"""

from functools import lru_cache

from pydantic import BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


class DatabaseSettings(BaseModel):
    """Connection parameters for the subscriptions database."""

    driver: str = "postgresql+asyncpg"
    host: str = "localhost"
    port: int = Field(5432, ge=1, le=65535)
    username: str = "postgres"
    password: SecretStr = SecretStr("password")
    database_name: str = "newsletter"
    pool_size: int = Field(20, ge=1)
    max_overflow: int = Field(10, ge=0)

    @field_validator("driver", mode="before")
    @classmethod
    def normalize_driver(cls, v: str) -> str:
        """Hosting platforms hand out postgresql:// but the pool needs asyncpg."""
        if isinstance(v, str) and v in ("postgres", "postgresql"):
            return "postgresql+asyncpg"
        return v

    @property
    def is_sqlite(self) -> bool:
        return self.driver.startswith("sqlite")

    def connection_string(self) -> URL:
        """Full URL for the configured database."""
        return self.with_database(self.database_name)

    def with_database(self, database_name: str) -> URL:
        """Same server and credentials, different database."""
        if self.is_sqlite:
            return URL.create(self.driver, database=database_name)
        return URL.create(
            self.driver,
            username=self.username,
            password=self.password.get_secret_value(),
            host=self.host,
            port=self.port,
            database=database_name,
        )

    def without_database(self) -> URL:
        """Maintenance URL used to issue CREATE/DROP DATABASE."""
        return self.with_database("postgres")


class ApplicationSettings(BaseModel):
    """Bind address for the HTTP server."""

    host: str = "127.0.0.1"
    port: int = Field(8000, ge=0, le=65535)


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="APP_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    database: DatabaseSettings = DatabaseSettings()
    application: ApplicationSettings = ApplicationSettings()

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
