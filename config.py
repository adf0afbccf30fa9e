"""Application configuration loaded from environment variables."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, model_validator

from analytics.models import GRANULARITIES

load_dotenv()

_PROJECT_ROOT = Path(__file__).resolve().parent

logger = logging.getLogger(__name__)


class Config(BaseModel):
    """Centralised app configuration backed by env vars."""

    # Analytics
    snapshot_path: str = str(_PROJECT_ROOT / "data" / "ledger.json")
    stale_threshold_days: int = 30
    trend_granularity: str = "monthly"
    log_level: str = "INFO"

    # Flask
    flask_host: str = "127.0.0.1"
    flask_port: int = 5000
    flask_debug: bool = True
    cors_origins: list[str] = ["http://localhost:8081"]

    @model_validator(mode="after")
    def _warn_suspicious_fields(self) -> Config:
        """Log warnings for values the analytics layer will not use as intended."""
        if self.stale_threshold_days <= 0:
            logger.warning(
                "STALE_THRESHOLD_DAYS=%d: every listed item will be reported as stale",
                self.stale_threshold_days,
            )
        if self.trend_granularity not in GRANULARITIES:
            logger.warning(
                "TREND_GRANULARITY=%r is not one of %s; trend reports will fail",
                self.trend_granularity,
                ", ".join(GRANULARITIES),
            )
        return self

    @classmethod
    def from_env(cls) -> Config:
        """Build config from environment variables."""
        cors_raw = os.getenv("CORS_ORIGINS", "http://localhost:8081")
        cors_origins = [o.strip() for o in cors_raw.split(",") if o.strip()]

        return cls(
            snapshot_path=os.getenv(
                "SNAPSHOT_PATH", str(_PROJECT_ROOT / "data" / "ledger.json")
            ),
            stale_threshold_days=int(os.getenv("STALE_THRESHOLD_DAYS", "30")),
            trend_granularity=os.getenv("TREND_GRANULARITY", "monthly"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            flask_host=os.getenv("FLASK_HOST", "127.0.0.1"),
            flask_port=int(os.getenv("FLASK_PORT", "5000")),
            flask_debug=os.getenv("FLASK_DEBUG", "true").lower() in ("1", "true", "yes"),
            cors_origins=cors_origins,
        )


settings = Config.from_env()
