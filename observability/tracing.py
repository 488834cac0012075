"""Span helper for timing collaborator calls."""
from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator

from .logger import log_event


@contextmanager
def span(kind: str, session_id: str, **fields: Any) -> Iterator[Dict[str, Any]]:
    """Emit one ``kind`` event with ``ms`` and ``outcome`` when the block exits.

    The yielded dict is merged into the event, so callers can attach results.
    """

    extra: Dict[str, Any] = dict(fields)
    start = time.perf_counter()
    outcome = "ok"
    try:
        yield extra
    except Exception:
        outcome = "error"
        raise
    finally:
        elapsed_ms = int((time.perf_counter() - start) * 1000)
        log_event(kind, session_id, ms=elapsed_ms, outcome=extra.pop("outcome", outcome), **extra)


__all__ = ["span"]
