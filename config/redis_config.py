"""
Redis configuration for the Celery broker and result backend.
"""
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class RedisSettings(BaseSettings):
    """Redis configuration settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: Optional[str] = None

    def _url(self, db: int) -> str:
        if self.redis_password:
            return f"redis://:{self.redis_password}@{self.redis_host}:{self.redis_port}/{db}"
        return f"redis://{self.redis_host}:{self.redis_port}/{db}"

    @property
    def broker_url(self) -> str:
        """Celery broker URL."""
        return self._url(self.redis_db)

    @property
    def result_backend(self) -> str:
        """Celery result backend URL (uses db+1 to keep results apart from the queue)."""
        return self._url(self.redis_db + 1)


# Global instance
redis_settings = RedisSettings()
