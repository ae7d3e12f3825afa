# realty/config.py
from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ---- App ----
    app_name: str = "Realty Catalog"
    app_version: str = "0.1.0"
    app_env: str = "local"  # local|dev|prod
    api_prefix: str = "/api"

    # ---- Database ----
    database_url: str = "sqlite:///./realty.db"
    auto_create_schema: bool = True  # local convenience; prod runs alembic

    # ---- CORS (used by main.py) ----
    cors_allow_origins: list[str] | str = ["*"]

    # ---- Logging ----
    log_level: str = "INFO"
    log_format: str = "json"  # json|text
    sql_log_level: str = "WARNING"

    # ---- Soft delete ----
    # appended as "{name}{marker}{epoch_ms}" when a named row is retired
    retired_name_marker: str = "_d"

    @property
    def is_prod(self) -> bool:
        return (self.app_env or "local").strip().lower() in ("prod", "production")

    def model_post_init(self, __context) -> None:
        if self.is_prod:
            # Hard fail: wildcard CORS in prod
            origins = self.cors_allow_origins
            if origins == "*" or origins == ["*"] or (isinstance(origins, str) and "*" in origins):
                raise ValueError("SECURITY: cors_allow_origins wildcard is not allowed in prod")


settings = Settings()
