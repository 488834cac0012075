"""Provider route configuration for the LLM, speech and avatar collaborators."""
from __future__ import annotations

from pathlib import Path
from typing import Dict

from pydantic import BaseModel, Field


TURN_ROUTE = "interview.turn"
SUMMARY_ROUTE = "summary.individual"
GROUP_SUMMARY_ROUTE = "summary.group"
TRANSCRIBE_ROUTE = "speech.transcribe"
AVATAR_ROUTE = "avatar.speak"


class LlmRoute(BaseModel):
    """HTTP endpoint configuration for one provider call class."""

    name: str
    base_url: str
    endpoint: str
    model: str = ""
    timeout_s: float = Field(ge=0.1)
    max_retries: int = Field(default=1, ge=0)
    temperature: float | None = Field(default=None, ge=0.0, le=2.0)
    api_key_env: str | None = None
    extra_headers: Dict[str, str] = Field(default_factory=dict)


class AppConfig(BaseModel):
    """Application configuration root."""

    llm_routes: Dict[str, LlmRoute]
    registry: Dict[str, str]


def default_config() -> AppConfig:
    """Routes used when no configuration file is present."""

    openai_chat = LlmRoute(
        name="openai-chat",
        base_url="https://api.openai.com",
        endpoint="/v1/chat/completions",
        model="gpt-4.1-mini",
        timeout_s=60.0,
        max_retries=1,
        temperature=0.4,
        api_key_env="OPENAI_API_KEY",
    )
    openai_whisper = LlmRoute(
        name="openai-whisper",
        base_url="https://api.openai.com",
        endpoint="/v1/audio/transcriptions",
        model="whisper-1",
        timeout_s=60.0,
        max_retries=0,
        api_key_env="OPENAI_API_KEY",
    )
    heygen = LlmRoute(
        name="heygen-streaming",
        base_url="https://api.heygen.com",
        endpoint="/v1/streaming.task",
        timeout_s=30.0,
        max_retries=0,
        api_key_env="HEYGEN_API_KEY",
    )
    return AppConfig(
        llm_routes={route.name: route for route in (openai_chat, openai_whisper, heygen)},
        registry={
            TURN_ROUTE: openai_chat.name,
            SUMMARY_ROUTE: openai_chat.name,
            GROUP_SUMMARY_ROUTE: openai_chat.name,
            TRANSCRIBE_ROUTE: openai_whisper.name,
            AVATAR_ROUTE: heygen.name,
        },
    )


def load_config(path: Path) -> AppConfig:
    """Load configuration from disk, falling back to the default routes."""

    if not path.exists():
        return default_config()
    data = path.read_text(encoding="utf-8")
    return AppConfig.model_validate_json(data)


def route_for(cfg: AppConfig, target: str) -> LlmRoute:
    """Resolve a registry target to its configured route."""

    if target not in cfg.registry:
        raise KeyError(f"Registry entry missing for '{target}'")
    route_id = cfg.registry[target]
    if route_id not in cfg.llm_routes:
        raise KeyError(f"Route '{route_id}' missing for '{target}'")
    return cfg.llm_routes[route_id]
