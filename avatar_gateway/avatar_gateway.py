from __future__ import annotations  # Streaming avatar speak gateway

import logging
from typing import Optional

from config import LlmRoute
from llm_gateway import HttpClient
from llm_gateway.llm_gateway import send


logger = logging.getLogger(__name__)


class AvatarGatewayError(RuntimeError):  # Avatar playback failure
    pass


def speak(
    session_id: str,
    text: str,
    *,
    cfg: LlmRoute,
    client: Optional[HttpClient] = None,
) -> None:  # Ask the streaming avatar session to say ``text`` verbatim
    if not session_id.strip():
        raise AvatarGatewayError("Avatar session id is required")
    if not text.strip():
        raise AvatarGatewayError("Nothing to speak")
    send(
        cfg,
        client,
        label="Avatar",
        error=AvatarGatewayError,
        parse_json=False,
        json={"session_id": session_id, "text": text, "task_type": "repeat"},
    )
    logger.info("Avatar speak sent session=%s chars=%d", session_id, len(text))
