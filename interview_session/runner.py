from __future__ import annotations  # Executes engine effects against the registered collaborators

import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from pydantic import BaseModel, Field

from avatar_gateway import AvatarGatewayError
from config.registry import SPEAK_KEY, TURN_KEY, get_model, is_bound
from llm_gateway import LlmGatewayError
from observability.logger import log_event
from observability.tracing import span
from storage.configs import get_config
from summarization.trigger import SummarizationTrigger

from .engine import mark_summary, new_session, reply_failed, reply_received, start_session, submit_answer
from .models import Notice, RequestReply, SessionNotFinished, SessionState, Speak, Summarize, Transition
from .prompts import render_transcript


logger = logging.getLogger(__name__)


class TurnResult(BaseModel):  # State handed back to the client after one request
    state: SessionState
    reply: Optional[str] = None
    warnings: List[str] = Field(default_factory=list)
    error: Optional[str] = None


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TurnRunner:
    """Per-request driver: pure transitions in, collaborator calls out.

    Config is re-read from the Config Store on every call so the client only
    ever holds the session state, never the script.
    """

    def __init__(
        self,
        generate: Optional[Callable[..., str]] = None,
        speak: Optional[Callable[..., None]] = None,
        trigger: Optional[SummarizationTrigger] = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._generate = generate
        self._speak = speak
        self._trigger = trigger or SummarizationTrigger()
        self._clock = clock

    def start(self, token: str, avatar_session_id: Optional[str] = None) -> TurnResult:
        """Load the script for ``token`` and open the session.

        Raises:
            KeyError: If no config is stored for the token.
        """

        stored = get_config(token)
        transition = start_session(new_session(token, avatar_session_id), stored.config, self._clock())
        log_event("session_start", token, phase=transition.state.phase, questions=len(stored.config.questions))
        result = TurnResult(state=transition.state, reply=transition.state.transcript[-1].text)
        return self._apply(transition, result)

    def answer(self, state: SessionState, answer: str) -> TurnResult:
        """Submit one candidate answer and fetch the interviewer's reply.

        Raises:
            KeyError: If the config behind ``state.token`` is gone.
            TurnRejected: If the state does not accept an answer.
        """

        config = get_config(state.token).config
        now = self._clock()
        transition = submit_answer(state, config, answer, now)
        request = next(effect for effect in transition.effects if isinstance(effect, RequestReply))
        try:
            with span("interviewer_reply", state.token, question_index=state.question_index):
                text = self._resolve_generate()(system_prompt=request.system_prompt, user_prompt=request.user_prompt)
        except LlmGatewayError as exc:
            logger.warning("Interviewer reply failed token=%s: %s", state.token, exc)
            followup = reply_failed(transition.state, str(exc))
        else:
            followup = reply_received(transition.state, config, text, self._clock())

        retried = followup.state.phase == "active" and followup.state.question_index == state.question_index
        log_event(
            "turn",
            state.token,
            phase=followup.state.phase,
            question_index=followup.state.question_index,
            outcome="retry" if retried else "advanced",
        )
        spoken = next((effect.text for effect in followup.effects if isinstance(effect, Speak)), None)
        return self._apply(followup, TurnResult(state=followup.state, reply=spoken))

    def finish(self, state: SessionState) -> TurnResult:
        """Fire summarization for a finished session that has not been saved yet.

        Calling it again after ``saved`` is a no-op.
        """

        if not state.finished:
            raise SessionNotFinished(f"session {state.token} is not finished")
        status = self._trigger.fire(state.token, render_transcript(state.transcript), state.summary)
        updated = mark_summary(state, status)
        result = TurnResult(state=updated)
        if status.kind == "failed":
            result.error = status.reason
        log_event("session_finished", state.token, status=status.kind)
        return result

    def _apply(self, transition: Transition, result: TurnResult) -> TurnResult:
        state = transition.state
        for effect in transition.effects:
            if isinstance(effect, Speak):
                warning = self._play(state, effect.text)
                if warning:
                    result.warnings.append(warning)
            elif isinstance(effect, Summarize):
                status = self._trigger.fire(state.token, effect.transcript, state.summary)
                state = mark_summary(state, status)
                if status.kind == "failed":
                    result.warnings.append(f"summary not saved: {status.reason}")
            elif isinstance(effect, Notice):
                result.error = effect.reason
        result.state = state
        return result

    def _play(self, state: SessionState, text: str) -> Optional[str]:
        # Playback never rolls back a recorded turn.
        if not state.avatar_session_id:
            return None
        speak = self._speak
        if speak is None:
            if not is_bound(SPEAK_KEY):
                return None
            speak = get_model(SPEAK_KEY)
        try:
            speak(session_id=state.avatar_session_id, text=text)
        except AvatarGatewayError as exc:
            logger.warning("Avatar playback failed token=%s: %s", state.token, exc)
            return f"avatar playback failed: {exc}"
        return None

    def _resolve_generate(self) -> Callable[..., str]:
        if self._generate is not None:
            return self._generate
        return get_model(TURN_KEY)


__all__ = ["TurnResult", "TurnRunner"]
