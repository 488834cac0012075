"""FastAPI routes for candidate interview sessions.

The session state lives on the client: every call posts it back and receives
the next state. Rejections leave the posted state valid for a retry.
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, File, HTTPException, UploadFile

from api.schemas import FinishReq, StartReq, TranscribeResp, TurnReq
from config.registry import TRANSCRIBE_KEY, get_model
from interview_session import SessionExpired, TurnRejected, TurnResult, TurnRunner
from interview_session.models import EmptyAnswer
from llm_gateway import LlmGatewayError
from observability.logger import log_event


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/interview-sessions")

RETRY_MESSAGE = "Something went wrong on our side. Please try again."


def _runner() -> TurnRunner:
    return TurnRunner()


def _rejection(token: str, exc: TurnRejected) -> HTTPException:
    log_event("turn_rejected", token, code=exc.code)
    if isinstance(exc, SessionExpired):
        status = 410
    elif isinstance(exc, EmptyAnswer):
        status = 400
    else:
        status = 409
    return HTTPException(status_code=status, detail={"code": exc.code, "message": str(exc)})


@router.post("/start", response_model=TurnResult)
def start(req: StartReq) -> TurnResult:
    try:
        return _runner().start(req.token.strip(), req.avatar_session_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Interview not found") from exc
    except TurnRejected as exc:
        raise _rejection(req.token, exc) from exc
    except Exception as exc:  # noqa: BLE001
        logger.exception("Unable to start interview session")
        raise HTTPException(status_code=500, detail=RETRY_MESSAGE) from exc


@router.post("/turn", response_model=TurnResult)
def turn(req: TurnReq) -> TurnResult:
    """Submit one answer. A failed interviewer reply comes back with ``error`` set and an unchanged index."""

    try:
        return _runner().answer(req.state, req.answer)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Interview not found") from exc
    except TurnRejected as exc:
        raise _rejection(req.state.token, exc) from exc
    except Exception as exc:  # noqa: BLE001
        logger.exception("Unexpected error while advancing session")
        raise HTTPException(status_code=500, detail=RETRY_MESSAGE) from exc


@router.post("/finish", response_model=TurnResult)
def finish(req: FinishReq) -> TurnResult:
    try:
        return _runner().finish(req.state)
    except TurnRejected as exc:
        raise _rejection(req.state.token, exc) from exc
    except Exception as exc:  # noqa: BLE001
        logger.exception("Unexpected error while finishing session")
        raise HTTPException(status_code=500, detail=RETRY_MESSAGE) from exc


@router.post("/transcribe", response_model=TranscribeResp)
def transcribe(file: UploadFile = File(...)) -> TranscribeResp:
    audio = file.file.read()
    if not audio:
        raise HTTPException(status_code=400, detail="No audio received. Please try again.")
    try:
        text = get_model(TRANSCRIBE_KEY)(
            audio=audio,
            filename=file.filename or "audio.webm",
            content_type=file.content_type or "audio/webm",
        )
    except LlmGatewayError as exc:
        logger.warning("Transcription failed: %s", exc)
        raise HTTPException(status_code=502, detail="We could not hear that clearly. Please try again.") from exc
    except Exception as exc:  # noqa: BLE001
        logger.exception("Unexpected error while transcribing audio")
        raise HTTPException(status_code=500, detail=RETRY_MESSAGE) from exc
    text = (text or "").strip()
    if not text:
        raise HTTPException(status_code=422, detail="We could not hear that clearly. Please try again.")
    return TranscribeResp(text=text)
