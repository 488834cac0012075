from __future__ import annotations  # LLM text and speech-to-text gateway module

import logging
import os
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, Tuple, Type

import httpx

from config import LlmRoute


logger = logging.getLogger(__name__)  # Module logger setup

MAX_DETAIL_CHARS = 200


class HttpClient(Protocol):  # Minimal HTTP client protocol
    def post(self, url: str, *, headers: Dict[str, str], timeout: float, **kwargs: Any) -> "HttpResponse": ...


class HttpResponse(Protocol):  # Minimal HTTP response protocol
    @property
    def status_code(self) -> int: ...

    def json(self) -> Any: ...

    @property
    def text(self) -> str: ...


class LlmGatewayError(RuntimeError):  # Base gateway error
    pass


class TranscriptionError(LlmGatewayError):  # Speech-to-text failure
    pass


def generate(
    system_prompt: str,
    user_prompt: str,
    *,
    cfg: LlmRoute,
    client: Optional[HttpClient] = None,
    options: Optional[Dict[str, Any]] = None,
) -> str:  # Single system + user exchange returning plain text
    messages = [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_prompt},
    ]
    return chat(messages, cfg=cfg, client=client, options=options)


def chat(
    messages: Sequence[Dict[str, str]],
    *,
    cfg: LlmRoute,
    client: Optional[HttpClient] = None,
    options: Optional[Dict[str, Any]] = None,
) -> str:
    """Run a chat completion and return the stripped reply text.

    Empty replies are retried up to ``cfg.max_retries`` times. Transport
    failures and error statuses raise immediately.

    Raises:
        LlmGatewayError: On transport failure, status >= 400, a non-JSON body,
            or when every attempt came back empty.
    """

    payload: Dict[str, Any] = {"model": cfg.model, "messages": _normalize_messages(messages)}
    if cfg.temperature is not None:
        payload["temperature"] = cfg.temperature
    payload.update(options or {})

    attempts = cfg.max_retries + 1
    logger.info("LLM request route=%s model=%s attempts=%d preview=%s", cfg.name, cfg.model, attempts, _preview(payload["messages"]))
    for attempt in range(1, attempts + 1):
        data = send(cfg, client, label="LLM", error=LlmGatewayError, json=payload)
        content = _extract_content(data).strip()
        if content:
            logger.info("LLM reply route=%s attempt=%d chars=%d", cfg.name, attempt, len(content))
            return content
        logger.warning("LLM returned empty text route=%s attempt=%d/%d", cfg.name, attempt, attempts)
    raise LlmGatewayError("LLM returned an empty response")


def transcribe(
    audio: bytes,
    *,
    cfg: LlmRoute,
    filename: str = "audio.webm",
    content_type: str = "audio/webm",
    language: Optional[str] = None,
    client: Optional[HttpClient] = None,
) -> str:  # Upload recorded audio and return the transcript text
    if not audio:
        raise TranscriptionError("Audio payload is empty")
    form: Dict[str, str] = {"model": cfg.model}
    if language:
        form["language"] = language
    logger.info("Transcription route=%s model=%s bytes=%d", cfg.name, cfg.model, len(audio))
    data = send(
        cfg,
        client,
        label="Transcription",
        error=TranscriptionError,
        data=form,
        files={"file": (filename, audio, content_type)},
    )
    text = str(data.get("text") or "").strip() if isinstance(data, dict) else ""
    if not text:
        raise TranscriptionError("Transcription was empty")
    return text


def send(
    cfg: LlmRoute,
    client: Optional[HttpClient],
    *,
    label: str,
    error: Type[Exception],
    parse_json: bool = True,
    **kwargs: Any,
) -> Any:
    """POST to ``cfg`` and return the decoded JSON body.

    Every failure is raised as ``error`` with the provider's own message
    attached, so admin surfaces can show the reason.
    """

    base = {"Content-Type": "application/json"} if "json" in kwargs else {}
    url = f"{cfg.base_url.rstrip('/')}{cfg.endpoint}"
    try:
        response, close_cb = _post(url, _headers(cfg, base), cfg.timeout_s, client, **kwargs)
    except (httpx.HTTPError, OSError) as exc:
        logger.error("%s transport failure route=%s: %s", label, cfg.name, exc)
        raise error(f"{label} transport failed: {exc}") from exc
    try:
        if response.status_code >= 400:
            detail = _error_detail(response)
            logger.error("%s error route=%s status=%s detail=%s", label, cfg.name, response.status_code, detail)
            raise error(f"{label} returned status {response.status_code}: {detail}")
        if not parse_json:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise error(f"{label} payload was not JSON") from exc
    finally:
        if close_cb is not None:
            close_cb()


def _headers(cfg: LlmRoute, base: Dict[str, str]) -> Dict[str, str]:  # Merge auth and extra headers
    headers = dict(base)
    api_key = os.getenv(cfg.api_key_env) if cfg.api_key_env else None
    if api_key:
        headers["Authorization"] = f"Bearer {api_key}"
    headers.update(cfg.extra_headers)
    return headers


def _post(
    url: str,
    headers: Dict[str, str],
    timeout: float,
    client: Optional[HttpClient],
    **kwargs: Any,
) -> Tuple[HttpResponse, Optional[Callable[[], None]]]:  # Use the injected client or a one-shot httpx.Client
    if client is not None:
        return client.post(url, headers=headers, timeout=timeout, **kwargs), None
    http_client = httpx.Client(timeout=timeout)
    try:
        response = http_client.post(url, headers=headers, **kwargs)
    except BaseException:
        http_client.close()
        raise
    return response, http_client.close


def _normalize_messages(messages: Sequence[Dict[str, str]]) -> List[Dict[str, str]]:
    if not messages:
        raise ValueError("At least one chat message is required")
    normalized: List[Dict[str, str]] = []
    for item in messages:
        role = str(item.get("role", "")).strip()
        if not role:
            raise ValueError("Chat message missing role")
        normalized.append({"role": role, "content": str(item.get("content", ""))})
    return normalized


def _preview(messages: Sequence[Dict[str, str]], limit: int = 120) -> str:  # Last non-empty line for logs
    for message in reversed(messages):
        text = message["content"].strip()
        if text:
            first = text.splitlines()[0]
            return first if len(first) <= limit else first[: limit - 3] + "..."
    return ""


def _extract_content(data: Any) -> str:  # choices[0].message.content, or a bare content/text field
    if not isinstance(data, dict):
        raise LlmGatewayError("LLM response missing content")
    choices = data.get("choices")
    if isinstance(choices, list) and choices and isinstance(choices[0], dict):
        message = choices[0].get("message")
        if isinstance(message, dict):
            return message.get("content") or ""
    for key in ("content", "text"):
        if isinstance(data.get(key), str):
            return data[key]
    raise LlmGatewayError("LLM response missing content")


def _error_detail(response: HttpResponse) -> str:  # Provider error message, trimmed
    try:
        data = response.json()
    except ValueError:
        return (response.text or "").strip()[:MAX_DETAIL_CHARS]
    error = data.get("error") if isinstance(data, dict) else None
    if isinstance(error, dict) and isinstance(error.get("message"), str):
        return error["message"][:MAX_DETAIL_CHARS]
    if isinstance(error, str):
        return error[:MAX_DETAIL_CHARS]
    return str(data)[:MAX_DETAIL_CHARS]
