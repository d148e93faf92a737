"""Application configuration managed via environment variables."""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Circadian Scheduler"
    debug: bool = False
    log_level: str = "INFO"
    database_url: str = "postgresql+psycopg2://circadian@localhost:5432/circadian"
    opik_enabled: bool = False
    opik_api_key: str | None = None
    opik_project: str = "circadian-scheduler"
    plan_lock_provider: str = "memory"


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()


settings = get_settings()
