"""Pure transition functions for one scripted interview.

Every function takes a :class:`SessionState` and returns a new
:class:`Transition`; the input state is never modified, so a rejected call
(raised :class:`TurnRejected`) leaves the caller's state exactly as it was.
Side effects are described, not performed; see :mod:`interview_session.runner`.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import List, Optional

from config.settings import settings
from storage.configs import InterviewConfig
from summarization.status import SummaryStatus

from .models import (
    EmptyAnswer,
    Effect,
    InvalidScript,
    NoTurnPending,
    Notice,
    QuestionOutOfRange,
    RequestReply,
    SessionAlreadyStarted,
    SessionExpired,
    SessionFinished,
    SessionNotStarted,
    SessionState,
    Speak,
    Summarize,
    Transition,
    Turn,
    TurnInProgress,
)
from .prompts import SYSTEM_PROMPT, build_turn_prompt, opening_line, render_transcript


def new_session(token: str, avatar_session_id: Optional[str] = None) -> SessionState:
    return SessionState(token=token, avatar_session_id=avatar_session_id or None)


def start_session(
    state: SessionState,
    config: InterviewConfig,
    now: datetime,
    greeting: Optional[str] = None,
) -> Transition:
    """``idle -> active``: question 0 and the opening interviewer line."""

    if state.phase != "idle":
        raise SessionAlreadyStarted(f"session {state.token} already started")
    if not config.questions:
        raise InvalidScript("interview script has no questions")
    opening = opening_line(greeting if greeting is not None else settings.OPENING_LINE, config.questions[0])
    started = state.model_copy(
        update={
            "phase": "active",
            "question_index": 0,
            "transcript": [Turn(speaker="interviewer", text=opening)],
            "pending_answer": None,
            "started_at": now,
            "last_activity_at": now,
        }
    )
    return Transition(state=started, effects=[Speak(text=opening)])


def submit_answer(
    state: SessionState,
    config: InterviewConfig,
    answer: str,
    now: datetime,
    ttl_minutes: Optional[int] = None,
) -> Transition:
    """``active -> awaiting_reply`` and a request for the next interviewer line."""

    if state.phase == "idle":
        raise SessionNotStarted(f"session {state.token} has not started")
    if state.phase == "finished":
        raise SessionFinished(f"session {state.token} is finished")
    if state.phase == "awaiting_reply":
        raise TurnInProgress(f"session {state.token} is waiting for a reply")
    text = (answer or "").strip()
    if not text:
        raise EmptyAnswer("answer text is empty")
    if is_expired(state, now, ttl_minutes):
        raise SessionExpired(f"session {state.token} expired")
    current = _current_question(state, config)
    upcoming = _question(config, state.question_index + 1)
    so_far = [*state.transcript, Turn(speaker="candidate", text=text)]
    prompt = build_turn_prompt(
        objective=config.objective,
        tone=config.tone,
        current_question=current,
        next_question=upcoming,
        transcript=render_transcript(so_far),
    )
    waiting = state.model_copy(
        update={"phase": "awaiting_reply", "pending_answer": text, "last_activity_at": now}
    )
    return Transition(state=waiting, effects=[RequestReply(system_prompt=SYSTEM_PROMPT, user_prompt=prompt)])


def reply_received(state: SessionState, config: InterviewConfig, text: str, now: datetime) -> Transition:
    """Record the answered exchange; advance the index or finish the session.

    A blank reply is handled as :func:`reply_failed`, so the index and the
    transcript do not move.
    """

    if state.phase != "awaiting_reply":
        raise NoTurnPending(f"session {state.token} has no outstanding turn")
    _current_question(state, config)
    reply = (text or "").strip()
    if not reply:
        return reply_failed(state, "interviewer reply was empty")

    transcript = [
        *state.transcript,
        Turn(speaker="candidate", text=state.pending_answer or ""),
        Turn(speaker="interviewer", text=reply),
    ]
    effects: List[Effect] = [Speak(text=reply)]
    update = {"transcript": transcript, "pending_answer": None, "last_activity_at": now}
    if _question(config, state.question_index + 1) is not None:
        update.update({"phase": "active", "question_index": state.question_index + 1})
    else:
        update["phase"] = "finished"
        effects.append(Summarize(transcript=render_transcript(transcript)))
    return Transition(state=state.model_copy(update=update), effects=effects)


def reply_failed(state: SessionState, reason: str) -> Transition:
    """Drop the pending answer and return to ``active`` so the turn can be retried."""

    if state.phase != "awaiting_reply":
        raise NoTurnPending(f"session {state.token} has no outstanding turn")
    restored = state.model_copy(update={"phase": "active", "pending_answer": None})
    return Transition(state=restored, effects=[Notice(reason=reason)])


def mark_summary(state: SessionState, status: SummaryStatus) -> SessionState:
    return state.model_copy(update={"summary": status})


def is_expired(state: SessionState, now: datetime, ttl_minutes: Optional[int] = None) -> bool:
    """True once ``ttl_minutes`` have passed since the last activity (0 disables)."""

    ttl = settings.SESSION_TTL_MINUTES if ttl_minutes is None else ttl_minutes
    if ttl <= 0 or state.last_activity_at is None:
        return False
    last = state.last_activity_at
    if last.tzinfo is None and now.tzinfo is not None:
        last = last.replace(tzinfo=timezone.utc)
    return now - last > timedelta(minutes=ttl)


def _current_question(state: SessionState, config: InterviewConfig) -> str:
    # The script may have been re-saved shorter since the client last posted.
    current = _question(config, state.question_index)
    if current is None:
        raise QuestionOutOfRange(
            f"session {state.token} is at question {state.question_index} but the script has {len(config.questions)}"
        )
    return current


def _question(config: InterviewConfig, index: int) -> Optional[str]:
    if 0 <= index < len(config.questions):
        return config.questions[index]
    return None


__all__ = [
    "new_session",
    "start_session",
    "submit_answer",
    "reply_received",
    "reply_failed",
    "mark_summary",
    "is_expired",
]
