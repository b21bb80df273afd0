"""Configuration management for the shareholder registry."""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = Field(default="Quick Ride Shareholder Registry")
    version: str = Field(default="0.1.0")
    docs_url: str | None = Field(default="/docs")
    redoc_url: str | None = Field(default="/redoc")
    openapi_url: str = Field(default="/openapi.json")
    log_level: str = Field(default="INFO")

    database_url: str = Field(default="postgresql+psycopg://quickride:quickride@db:5432/quickride")

    aws_region: str = Field(default="us-east-1")
    s3_endpoint_url: str | None = Field(default=None)
    audit_log_bucket: str = Field(default="quickride-audit-logs")
    audit_log_prefix: str = Field(default="audit/records")
    audit_log_sample_rate: float = Field(default=1.0)

    enable_metrics: bool = Field(default=True)
    enable_tracing: bool = Field(default=True)
    otel_exporter_endpoint: str | None = Field(default=None)

    jwt_algorithm: str = Field(default="HS256")
    jwt_secret_key: str = Field(default="change-me-in-production")
    access_token_expire_minutes: int = Field(default=60)

    bcrypt_rounds: int = Field(default=10, ge=4, le=31)

    admin_username: str = Field(default="admin")
    admin_password: str = Field(default="admin123")
    admin_email: str = Field(default="admin@quickride.com")

    company_name: str = Field(default="Quick Ride")
    company_division: str = Field(default="Sikkim Division")
    agreement_title: str = Field(default="Shareholder Investment Agreement")
    office_contact_line: str = Field(
        default=(
            "Quick Ride Office: Burtuk, Helipad Gangtok, 737101, East District, Sikkim  |  "
            "Phone: +91 9932369890  |  Email: quickcab2026@gmail.com"
        )
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()


__all__ = ["Settings", "get_settings"]
