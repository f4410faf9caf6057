"""
beautydesk/config.py – application settings loaded from environment variables.
"""
from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Backend ───────────────────────────────────────────────────────────────
    api_base_url: str = "https://yes-madem-backened.onrender.com"
    api_prefix: str = "/api"

    # ── Gateway ───────────────────────────────────────────────────────────────
    request_timeout_seconds: float = 15.0
    cache_ttl_seconds: float = 600.0

    # ── Dashboard ─────────────────────────────────────────────────────────────
    # Pause between the sequential dashboard reads so the backend's rate
    # limiter is not tripped on page load.
    dashboard_request_delay_seconds: float = 1.0

    # ── Rate limiting ─────────────────────────────────────────────────────────
    rate_limit_per_minute: int = 60

    # ── App ───────────────────────────────────────────────────────────────────
    app_name: str = "BeautyDesk Admin"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"


settings = Settings()
