from __future__ import annotations

import os
import re
from pathlib import Path
from typing import List


class Settings:
    """Centralized configuration for the heart-check backend."""

    def __init__(self) -> None:
        base_dir = Path(__file__).resolve().parent
        repo_root = base_dir.parent
        data_root_default = repo_root / "data"

        self.data_root: Path = Path(
            os.environ.get("HEARTCHECK_DATA_ROOT") or data_root_default
        ).expanduser()
        self.db_path: Path = Path(
            os.environ.get("HEARTCHECK_DB_PATH") or (self.data_root / "heartcheck.db")
        ).expanduser()
        # Staging and production deployments point at different tables.
        table = (os.environ.get("HEARTCHECK_ASSESSMENTS_TABLE") or "heart_health_assessments").strip()
        if not re.fullmatch(r"[A-Za-z_][A-Za-z0-9_]*", table):
            raise ValueError(f"Invalid assessments table name: {table!r}")
        self.assessments_table: str = table
        self.fetch_timeout: float = float(os.environ.get("HEARTCHECK_FETCH_TIMEOUT") or "30")
        self.max_upload_mb: int = int(os.environ.get("HEARTCHECK_MAX_UPLOAD_MB") or "20")
        self.host: str = os.environ.get("HEARTCHECK_HOST") or os.environ.get("HOST") or "127.0.0.1"
        self.port_raw: str = os.environ.get("HEARTCHECK_PORT") or os.environ.get("PORT") or "8000"

        cors = os.environ.get("HEARTCHECK_CORS_ORIGINS", "*")
        if cors.strip() == "*":
            self.cors_origins: List[str] = ["*"]
        else:
            self.cors_origins = [
                origin.strip() for origin in cors.split(",") if origin.strip()
            ]

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024


settings = Settings()
