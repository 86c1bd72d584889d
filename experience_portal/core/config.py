"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Server
    port: int = 3001
    cors_origin: str = "*"  # "*" or comma-separated origins

    # PostgreSQL (users, comments, reports, announcements)
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "placement_user"
    postgres_password: str = "password"
    postgres_db: str = "placement_portal"
    database_url: Optional[str] = None  # overrides the postgres_* parts when set

    # MongoDB (experiences, company standardizations)
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "placement_portal"
    mongodb_timeout_ms: int = 5000

    # JWT Auth
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60 * 24 * 30

    # Registration
    allowed_email_domains: str = "marwadiuniversity.ac.in,marwadiuniversity.edu.in"

    # App
    debug: bool = False
    log_level: str = "INFO"
    log_dir: Optional[str] = None

    # PDF export; a Unicode TTF, else the first system font found is used
    pdf_font_path: Optional[str] = None

    @property
    def sql_url(self) -> str:
        """Construct the relational database URL"""
        if self.database_url:
            return self.database_url
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def cors_origins(self) -> List[str]:
        if self.cors_origin.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.cors_origin.split(",") if o.strip()]

    @property
    def email_domains(self) -> List[str]:
        return [d.strip().lower() for d in self.allowed_email_domains.split(",") if d.strip()]

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
