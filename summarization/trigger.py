"""Post-interview summarization with at-most-once persistence.

The trigger is the only code that moves a :class:`SummaryStatus` forward.
It generates the report once, writes it, and retries the write exactly once
with the same text when the first write fails.
"""
from __future__ import annotations

import sqlite3
import threading
import time
from typing import Callable, Optional, Set

from config.registry import SUMMARY_KEY, get_model
from config.settings import settings
from llm_gateway import LlmGatewayError
from observability.logger import log_event
from storage.summaries import put_summary

from .prompts import SUMMARY_SYSTEM_PROMPT, build_summary_prompt
from .status import SummaryStatus

GenerateFn = Callable[..., str]
PersistFn = Callable[[str, str, Optional[str]], object]

_IN_FLIGHT: Set[str] = set()
_IN_FLIGHT_LOCK = threading.Lock()


def _claim(token: str) -> bool:
    with _IN_FLIGHT_LOCK:
        if token in _IN_FLIGHT:
            return False
        _IN_FLIGHT.add(token)
        return True


def _release(token: str) -> None:
    with _IN_FLIGHT_LOCK:
        _IN_FLIGHT.discard(token)


class SummarizationTrigger:
    """Turns a finished transcript into one stored Summary row."""

    def __init__(
        self,
        generate: Optional[GenerateFn] = None,
        persist: Optional[PersistFn] = None,
        sleep: Callable[[float], None] = time.sleep,
        retry_delay_s: Optional[float] = None,
        min_chars: Optional[int] = None,
    ) -> None:
        self._generate = generate
        self._persist = persist or put_summary
        self._sleep = sleep
        self._retry_delay_s = settings.SUMMARY_RETRY_DELAY_S if retry_delay_s is None else retry_delay_s
        self._min_chars = settings.MIN_TRANSCRIPT_CHARS if min_chars is None else min_chars

    def fire(self, token: str, transcript: str, status: SummaryStatus) -> SummaryStatus:
        """Summarize ``transcript`` for ``token`` unless already saved or in flight.

        Returns the status reached by this call. ``saved`` is only returned
        after the store confirmed the write.
        """

        if not status.can_fire:
            log_event("summary_skip", token, status=status.kind)
            return status

        text = (transcript or "").strip()
        if len(text) < self._min_chars:
            log_event("summary_failed", token, reason="transcript too short", chars=len(text))
            return SummaryStatus.failed("transcript too short")

        if not _claim(token):
            # Another request owns this token; the caller stays eligible to fire later.
            log_event("summary_skip", token, status="in_flight")
            return status
        try:
            return self._run(token, text)
        finally:
            _release(token)

    def _run(self, token: str, transcript: str) -> SummaryStatus:
        log_event("summary_start", token, status="in_flight", chars=len(transcript))
        started = time.perf_counter()
        try:
            report = self._resolve_generate()(
                system_prompt=SUMMARY_SYSTEM_PROMPT,
                user_prompt=build_summary_prompt(token, transcript),
            )
        except LlmGatewayError as exc:
            log_event("summary_failed", token, reason=f"generation failed: {exc}")
            return SummaryStatus.failed(f"generation failed: {exc}")
        report = (report or "").strip()
        if not report:
            log_event("summary_failed", token, reason="generation returned empty text")
            return SummaryStatus.failed("generation returned empty text")

        # The retry reuses the generated text; the LLM is never called twice.
        for attempt in range(2):
            try:
                self._persist(token, report, transcript)
            except (sqlite3.Error, OSError) as exc:
                if attempt == 0:
                    log_event("summary_retry", token, reason=str(exc), delay_s=self._retry_delay_s)
                    self._sleep(self._retry_delay_s)
                    continue
                log_event("summary_failed", token, reason=f"store write failed: {exc}")
                return SummaryStatus.failed(f"store write failed: {exc}")
            break

        elapsed_ms = int((time.perf_counter() - started) * 1000)
        log_event("summary_saved", token, status="saved", ms=elapsed_ms)
        return SummaryStatus.saved()

    def _resolve_generate(self) -> GenerateFn:
        if self._generate is not None:
            return self._generate
        return get_model(SUMMARY_KEY)


__all__ = ["SummarizationTrigger"]
