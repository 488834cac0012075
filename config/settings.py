"""Application settings and configuration management."""
from __future__ import annotations

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or defaults."""

    DB_PATH: str = Field(default="data/summaries.db")
    LLM_CONFIG_PATH: str = Field(default="app_config.json")

    ADMIN_TOKEN: str = ""
    CORS_ORIGINS: str = ""
    PUBLIC_APP_URL: str = "http://localhost:3000"

    SESSION_TTL_MINUTES: int = Field(default=120, ge=0)
    MIN_TRANSCRIPT_CHARS: int = Field(default=120, ge=0)
    SUMMARY_RETRY_DELAY_S: float = Field(default=1.5, ge=0.0)
    TRANSCRIBE_LANGUAGE: str = "en"
    OPENING_LINE: str = "Hello, and thank you for your time. Let's begin the interview."

    model_config = SettingsConfigDict(env_file=".env", validate_assignment=True, extra="ignore")

    def cors_origins(self) -> List[str]:
        """Return the allowed CORS origins, local dev origin first."""

        origins = ["http://localhost:3000"]
        extra = [item.strip() for item in self.CORS_ORIGINS.split(",") if item.strip()]
        public = self.PUBLIC_APP_URL.strip()
        for origin in [*extra, public]:
            if origin and origin not in origins:
                origins.append(origin)
        return origins


settings = Settings()
