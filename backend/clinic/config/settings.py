import os
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import List

env = os.getenv("APP_ENV", "development")
env_file = f".env.{env}"

class Settings(BaseSettings):
    # postgresql+asyncpg://... in deployments, a local SQLite file otherwise
    database_url: str = "sqlite+aiosqlite:///./clinic.db"
    # CORS origins can be overridden via CORS_ORIGINS env var (JSON list)
    cors_origins: List[str] = Field(default=["http://localhost:5173", "http://localhost:3000"])

    sql_echo: bool = False
    # create missing tables at startup instead of relying on alembic (dev only)
    auto_create_tables: bool = False
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=env_file,
        env_file_encoding="utf-8",
        extra="ignore",
    )

settings = Settings()
