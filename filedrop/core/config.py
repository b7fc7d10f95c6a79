"""
filedrop/core/config.py

Centralised configuration loaded from environment variables.
Use a .env file locally; Docker Compose injects these at runtime.
"""

from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # ── Application ────────────────────────────────────────────────────────────
    app_name: str = "filedrop upload service"
    app_version: str = "1.0.0"
    debug: bool = False

    # ── Upload destination ─────────────────────────────────────────────────────
    upload_dir: str = "./data/uploads"
    rename_uploads: bool = True         # default for the ?rename= query param
    overwrite_existing: bool = True

    # ── Validation ─────────────────────────────────────────────────────────────
    max_upload_bytes: Optional[int] = None      # None → 1 GiB at call time
    allowed_content_types: List[str] = []       # empty → every type accepted

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


# Single shared instance — import this everywhere.
settings = Settings()
