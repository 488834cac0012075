"""In-memory collaborator registry.

The turn engine, summarization trigger and group reports never talk to a
provider directly; they look up a callable bound under one of the keys below.
``api_server`` binds the httpx-backed implementations at startup and tests
bind fakes.
"""
from typing import Any, Callable, Dict

_REGISTRY: Dict[str, Callable[..., Any]] = {}


def bind_model(key: str, fn: Callable[..., Any]) -> None:
    """Bind a callable implementation to a registry key."""
    _REGISTRY[key] = fn


def get_model(key: str) -> Callable[..., Any]:
    """Retrieve a callable from the registry.

    Raises:
        KeyError: If no callable has been bound for ``key``.
    """

    if key not in _REGISTRY:
        raise KeyError(f"Model not bound in registry: {key}")
    return _REGISTRY[key]


def is_bound(key: str) -> bool:
    return key in _REGISTRY


def unbind_all() -> None:
    _REGISTRY.clear()


TURN_KEY = "models.interview_turn"
SUMMARY_KEY = "models.individual_summary"
GROUP_SUMMARY_KEY = "models.group_summary"
TRANSCRIBE_KEY = "models.transcribe"
SPEAK_KEY = "models.avatar_speak"
