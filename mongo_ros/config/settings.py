"""Environment-based settings. Read-only; no business logic."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Process-wide settings loaded from environment variables.

    The ``warehouse_*`` connection fields default to ``None`` so that an unset
    variable reads as absent from the parameter store.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="mongo-ros", description="Node name used in logs")
    log_level: str = Field(default="INFO", description="Log level name")

    # Warehouse connection (see config/storage/mongo for resolution order)
    warehouse_host: str | None = Field(default=None, description="MongoDB host")
    warehouse_port: int | None = Field(default=None, ge=1, le=65535, description="MongoDB port")
    warehouse_database_name: str | None = Field(default=None, description="Database used for authentication")
    warehouse_user: str | None = Field(default=None, description="MongoDB username")
    warehouse_pwd: str | None = Field(default=None, description="MongoDB password")
    warehouse_authenticate: bool | None = Field(default=None, description="Authenticate after connecting")

    # Retry behaviour
    warehouse_strict_auth: bool = Field(default=True, description="Fail immediately on authentication errors")
    warehouse_connect_timeout: float = Field(default=300.0, ge=0, description="Total connect budget (seconds)")
    warehouse_retry_interval: float = Field(default=1.0, gt=0, description="Pause between attempts (seconds)")
    warehouse_attempt_timeout_ms: int = Field(
        default=2000, ge=100, description="Server selection timeout for one attempt (ms)"
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance. Use for process lifetime."""
    return Settings()
