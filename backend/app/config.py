from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    app_env: str = Field(
        ...,
        description="Application environment (development, staging, production)",
    )

    database_url: str = Field(
        ...,
        description="PostgreSQL connection string",
    )

    redis_url: str = Field(
        ...,
        description="Redis connection string",
    )

    log_dir: str = Field(
        default="./logs",
        description="Directory for log files",
    )

    cors_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated list of allowed CORS origins",
    )

    version_history_default_limit: int = Field(
        default=50,
        ge=1,
        description="Number of history entries returned when no limit is given",
    )
    version_history_max_limit: int = Field(
        default=200,
        ge=1,
        description="Upper bound accepted for the history limit parameter",
    )
    version_events_enabled: bool = Field(
        default=True,
        description="Publish version_created events to Redis after commit",
    )

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


def get_settings() -> Settings:
    return Settings()
