"""Configuration package for the interview hub services."""
from .registry import (
    GROUP_SUMMARY_KEY,
    SPEAK_KEY,
    SUMMARY_KEY,
    TRANSCRIBE_KEY,
    TURN_KEY,
    bind_model,
    get_model,
)
from .routes import (
    AVATAR_ROUTE,
    GROUP_SUMMARY_ROUTE,
    SUMMARY_ROUTE,
    TRANSCRIBE_ROUTE,
    TURN_ROUTE,
    AppConfig,
    LlmRoute,
    default_config,
    load_config,
    route_for,
)
from .settings import Settings, settings

__all__ = [
    "AppConfig",
    "LlmRoute",
    "default_config",
    "load_config",
    "route_for",
    "AVATAR_ROUTE",
    "GROUP_SUMMARY_ROUTE",
    "SUMMARY_ROUTE",
    "TRANSCRIBE_ROUTE",
    "TURN_ROUTE",
    "GROUP_SUMMARY_KEY",
    "SPEAK_KEY",
    "SUMMARY_KEY",
    "TRANSCRIBE_KEY",
    "TURN_KEY",
    "bind_model",
    "get_model",
    "Settings",
    "settings",
]
