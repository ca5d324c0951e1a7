"""
Application Configuration

Environment-driven settings for the exposure tracker. Values are read from
the process environment (prefix ``EXPOSURE_``) and the project ``.env`` file.
"""
from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Runtime settings for data location, display baselines and logging."""

    model_config = SettingsConfigDict(
        env_prefix="EXPOSURE_",
        env_file=PROJECT_ROOT / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Data ────────────────────────────────────────────────────────────
    data_dir: Path = Field(default=PROJECT_ROOT / "data" / "p1")
    snapshot_file_pattern: str = "all-chemicals_test*.csv"
    max_snapshot_id: int = Field(default=4, ge=1)

    # ── Display baselines ──────────────────────────────────────────────
    # Population detection-rate baseline for comparison bars. Configured,
    # not derived from data.
    baseline_detection_rate: float = Field(default=0.35, ge=0.0, le=1.0)
    top_priority_count: int = Field(default=8, ge=1)
    category_trend_limit: int = Field(default=6, ge=1)

    # ── Service ────────────────────────────────────────────────────────
    log_level: str = "INFO"
    log_file: Optional[str] = None
    cors_origins: List[str] = ["*"]


settings = Settings()
