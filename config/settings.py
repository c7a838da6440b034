"""ReviewDesk global settings — loaded from environment variables via .env file."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """All configuration flows through this class. Never read env vars directly."""

    model_config = SettingsConfigDict(
        env_file=PROJECT_ROOT / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # ── Environment ──────────────────────────────────────────────
    reviewdesk_env: Literal["dev", "prod"] = "dev"

    # ── LLM Provider ─────────────────────────────────────────────
    gemini_api_key: SecretStr = SecretStr("")
    gemini_model: str = "gemini-2.5-flash"
    gemini_image_model: str = "gemini-2.5-flash-image"
    llm_timeout_seconds: int = 60
    llm_max_retries: int = 2

    # ── Storage ──────────────────────────────────────────────────
    storage_backend: Literal["memory", "file", "redis"] = "file"
    storage_dir: Path = PROJECT_ROOT / "data" / "workspaces"
    redis_url: SecretStr = SecretStr("redis://localhost:6379/0")

    # ── Tenants & Metering ───────────────────────────────────────
    tenants_file: Path | None = None
    charge_policy: Literal["charge_before_attempt", "refund_on_failure"] = (
        "charge_before_attempt"
    )

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = "INFO"
    log_json: bool = False

    @model_validator(mode="after")
    def _check_prod_secrets(self) -> "Settings":
        """Prevent production deployment without an LLM key."""
        if self.reviewdesk_env == "prod" and not self.gemini_api_key.get_secret_value():
            msg = "GEMINI_API_KEY must be set when REVIEWDESK_ENV=prod."
            raise ValueError(msg)
        return self


_settings_instance: Settings | None = None


def get_settings() -> Settings:
    """Singleton settings loader — reads .env once, reuses thereafter."""
    global _settings_instance  # noqa: PLW0603
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
