"""Runtime configuration read from ``ATELIER_*`` environment variables.

A ``.env`` file in the working directory is honoured as well.
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="ATELIER_",
        env_file=".env",
        extra="ignore",
    )

    data_dir: Path = _DEFAULT_DATA_DIR

    jwt_secret: str = ""
    jwt_algorithm: str = "HS256"

    email_user: str = ""
    email_pass: str = ""
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_timeout_seconds: float = 30.0

    store_name: str = "Atelier"
    base_url: str = "http://localhost:8000"
    support_email: str = "support@example.com"

    catalog_cache_ttl_seconds: float = 30.0
    idempotency_window_seconds: int = 86_400
    enforce_client_totals: bool = False

    log_level: str = "INFO"
