"""Application configuration using Pydantic Settings."""

import os
from typing import List
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# NOTE: logfire.configure() is not called here. Logfire is configured once at
# application startup (main.py via observability/logfire_config.py), in the
# Celery worker init hook, or in pytest hooks (conftest.py).


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are validated at startup to ensure the application
    has the required configuration before it starts.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application Settings
    environment: str = Field(default="development", description="Environment: development, staging, production")
    debug: bool = Field(default=False, description="Debug mode")

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port")

    # CORS Settings
    allowed_origins: str = Field(
        default="http://localhost:3000, http://localhost:5173",
        description="Comma-separated list of allowed CORS origins"
    )

    # Database Configuration (PostgreSQL when db_host is set, SQLite otherwise)
    db_user: str = Field(default="", description="Database user")
    db_password: str = Field(default="", description="Database password")
    db_host: str = Field(default="", description="Database host")
    db_port: int = Field(default=5432, description="Database port")
    db_name: str = Field(default="text_pipelines", description="Database name")
    db_sslmode: str = Field(default="prefer", description="PostgreSQL sslmode")
    sqlite_path: str = Field(default="./text_pipelines.db", description="SQLite file used when db_host is empty")

    # Text generation backend
    anthropic_api_key: str = Field(default="", description="Anthropic API key")
    llm_model: str = Field(default="anthropic:claude-haiku-4-5", description="pydantic-ai model identifier for step processing")
    planner_model: str = Field(default="anthropic:claude-haiku-4-5", description="Model used to generate pipeline steps from an instruction")
    generation_retries: int = Field(default=1, ge=0, description="pydantic-ai agent retries per backend call")

    # Execution limits
    step_timeout_seconds: float = Field(default=60.0, gt=0, description="Maximum duration of a single step")
    run_deadline_seconds: float = Field(default=300.0, gt=0, description="Maximum duration of a whole pipeline run")

    # Pagination
    pagination_default_limit: int = Field(default=20, ge=1, description="Default page size for history endpoints")
    pagination_max_limit: int = Field(default=100, ge=1, description="Maximum page size for history endpoints")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    # Observability
    logfire_token: str = Field(default="", description="Logfire observability token")

    @field_validator("allowed_origins")
    @classmethod
    def parse_origins(cls, v: str) -> List[str]:
        """Parse comma-separated origins into a list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"

    @property
    def database_url(self) -> str:
        """
        Construct the SQLAlchemy database URL.

        Uses the psycopg2 driver when a PostgreSQL host is configured and
        falls back to a local SQLite file for development.
        """
        if not self.db_host.strip():
            return f"sqlite:///{self.sqlite_path}"
        return (
            f"postgresql+psycopg2://{self.db_user}:{self.db_password}@"
            f"{self.db_host}:{self.db_port}/{self.db_name}?sslmode={self.db_sslmode}"
        )


# Create a singleton instance
settings = Settings()

# Ensure SDKs that read ANTHROPIC_API_KEY at import time see the configured value.
if settings.anthropic_api_key:
    os.environ.setdefault("ANTHROPIC_API_KEY", settings.anthropic_api_key)
