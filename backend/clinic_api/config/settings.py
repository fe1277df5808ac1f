import os
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import Optional, List

env = os.getenv("APP_ENV", "development")
env_file = f".env.{env}"

class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./clinic.db"
    # Production deployments run `alembic upgrade head` and set this to false
    create_tables: bool = True
    # CORS origins can be overridden via CORS_ORIGINS env var (JSON list)
    cors_origins: List[str] = Field(default=["http://localhost:3000"])
    api_prefix: str = "/api"
    log_level: str = "INFO"

    # JWT configuration. A missing secret is reported per request, not at startup.
    secret_key: Optional[str] = None
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24

    bcrypt_rounds: int = 10

    model_config = SettingsConfigDict(
        env_file=env_file,
        env_file_encoding="utf-8",
        extra="ignore",
    )

settings = Settings()
