"""Turn engine for scripted avatar interviews."""
from .engine import (
    is_expired,
    mark_summary,
    new_session,
    reply_failed,
    reply_received,
    start_session,
    submit_answer,
)
from .models import (
    EmptyAnswer,
    InvalidScript,
    NoTurnPending,
    Notice,
    QuestionOutOfRange,
    RequestReply,
    SessionAlreadyStarted,
    SessionExpired,
    SessionFinished,
    SessionNotFinished,
    SessionNotStarted,
    SessionState,
    Speak,
    Summarize,
    Transition,
    Turn,
    TurnInProgress,
    TurnRejected,
)
from .prompts import SYSTEM_PROMPT, build_turn_prompt, opening_line, render_transcript
from .runner import TurnResult, TurnRunner

__all__ = [
    "is_expired",
    "mark_summary",
    "new_session",
    "reply_failed",
    "reply_received",
    "start_session",
    "submit_answer",
    "EmptyAnswer",
    "InvalidScript",
    "NoTurnPending",
    "Notice",
    "QuestionOutOfRange",
    "RequestReply",
    "SessionAlreadyStarted",
    "SessionExpired",
    "SessionFinished",
    "SessionNotFinished",
    "SessionNotStarted",
    "SessionState",
    "Speak",
    "Summarize",
    "Transition",
    "Turn",
    "TurnInProgress",
    "TurnRejected",
    "SYSTEM_PROMPT",
    "build_turn_prompt",
    "opening_line",
    "render_transcript",
    "TurnResult",
    "TurnRunner",
]
