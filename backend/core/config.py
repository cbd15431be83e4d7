"""
Service Configuration
Environment-driven settings shared by every router.

All values can be overridden with SC_-prefixed environment variables,
e.g. SC_DB_PATH=/var/lib/sc/db.sqlite.
"""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Backend settings"""
    model_config = SettingsConfigDict(env_prefix="SC_", env_file=".env", extra="ignore")

    db_path: str = "data/student_companion.db"
    frontend_url: str = "http://localhost:8501"
    reset_token_ttl_seconds: int = 3600
    bcrypt_rounds: int = 10
    feed_limit: int = 100
    cors_origins: str = "*"  # comma-separated

    @property
    def allowed_origins(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
