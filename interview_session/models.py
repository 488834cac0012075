from __future__ import annotations  # Turn engine state, effects and rejection types

from datetime import datetime
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field

from summarization.status import SummaryStatus

Speaker = Literal["interviewer", "candidate"]
Phase = Literal["idle", "active", "awaiting_reply", "finished"]


class Turn(BaseModel):  # One utterance in the transcript
    speaker: Speaker
    text: str


class SessionState(BaseModel):  # Client-held state of one candidate run
    token: str
    phase: Phase = "idle"
    question_index: int = Field(default=0, ge=0)
    transcript: List[Turn] = Field(default_factory=list)
    pending_answer: Optional[str] = None
    avatar_session_id: Optional[str] = None
    summary: SummaryStatus = Field(default_factory=SummaryStatus)
    started_at: Optional[datetime] = None
    last_activity_at: Optional[datetime] = None

    @property
    def finished(self) -> bool:
        return self.phase == "finished"


class RequestReply(BaseModel):  # Ask the LLM for the next interviewer utterance
    kind: Literal["request_reply"] = "request_reply"
    system_prompt: str
    user_prompt: str


class Speak(BaseModel):  # Have the avatar say an interviewer utterance
    kind: Literal["speak"] = "speak"
    text: str


class Summarize(BaseModel):  # Hand the finished transcript to the summarization trigger
    kind: Literal["summarize"] = "summarize"
    transcript: str


class Notice(BaseModel):  # Retryable failure to surface to the caller
    kind: Literal["notice"] = "notice"
    reason: str


Effect = Union[RequestReply, Speak, Summarize, Notice]


class Transition(BaseModel):  # Result of a pure transition
    state: SessionState
    effects: List[Effect] = Field(default_factory=list)


class TurnRejected(ValueError):  # Precondition failure; the input state is left untouched
    code = "rejected"

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.code)


class SessionNotStarted(TurnRejected):
    code = "not_started"


class SessionAlreadyStarted(TurnRejected):
    code = "already_started"


class SessionFinished(TurnRejected):
    code = "finished"


class TurnInProgress(TurnRejected):
    code = "turn_in_progress"


class SessionNotFinished(TurnRejected):
    code = "not_finished"


class NoTurnPending(TurnRejected):
    code = "no_turn_pending"


class EmptyAnswer(TurnRejected):
    code = "empty_answer"


class SessionExpired(TurnRejected):
    code = "expired"


class InvalidScript(TurnRejected):
    code = "invalid_script"


class QuestionOutOfRange(TurnRejected):  # Index no longer points into the stored script
    code = "question_out_of_range"


__all__ = [
    "Speaker",
    "Phase",
    "Turn",
    "SessionState",
    "RequestReply",
    "Speak",
    "Summarize",
    "Notice",
    "Effect",
    "Transition",
    "TurnRejected",
    "SessionNotStarted",
    "SessionAlreadyStarted",
    "SessionFinished",
    "TurnInProgress",
    "SessionNotFinished",
    "NoTurnPending",
    "EmptyAnswer",
    "SessionExpired",
    "InvalidScript",
    "QuestionOutOfRange",
]
