"""Centralized configuration loaded from environment."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    baseline_dir: Path = Field(default=Path("baselines"), alias="BASELINE_DIR")
    baseline_url: str = Field(default="", alias="BASELINE_URL")
    reference_branch: str = Field(default="main", alias="REFERENCE_BRANCH")
    policy_path: Path = Field(default=Path("policies/default.yaml"), alias="POLICY_PATH")
    output_dir: Path = Field(default=Path("gate-results"), alias="OUTPUT_DIR")
    fetch_timeout_s: float = Field(default=30.0, alias="FETCH_TIMEOUT_S")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")


settings = Settings()
