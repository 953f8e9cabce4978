"""Application configuration."""

import json
import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    yoco_secret_key: str
    yoco_base_url: str = "https://payments.yoco.com/api"
    from_email: str
    from_name: str = "Marital Grace Team"
    email_backend: str = "brevo"
    brevo_api_key: str | None = None
    brevo_base_url: str = "https://api.brevo.com/v3"
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_username: str | None = None
    smtp_password: str | None = None
    google_spreadsheet_id: str | None = None
    google_service_account_json: str | None = None
    google_sheet_name: str = "Sheet1"
    ticket_price: int = 100
    currency: str = "ZAR"
    public_base_url: str | None = None
    ticket_image_path: str = "public/media/1994.png"
    port: int = 3000
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_service_account_info(raw: str | None) -> dict[str, str] | None:
    """Parse Google service-account credentials given inline or as a file path."""
    if raw is None:
        return None
    cleaned = raw.strip()
    if not cleaned:
        return None
    if cleaned.startswith("{"):
        return json.loads(cleaned)
    return json.loads(Path(cleaned).read_text(encoding="utf-8"))
