"""Config Store: one interview script per interview token."""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from .sqlite import get_conn, utc_now


class InterviewConfig(BaseModel):
    objective: str = Field(min_length=1)
    tone: str = Field(min_length=1)
    questions: List[str] = Field(min_length=1)
    avatarId: str = Field(min_length=1)
    voiceId: str = Field(min_length=1)

    @field_validator("objective", "tone", "avatarId", "voiceId", mode="before")
    @classmethod
    def _strip_text(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("questions")
    @classmethod
    def _non_empty_questions(cls, value: List[str]) -> List[str]:
        cleaned = [item.strip() for item in value]
        if any(not item for item in cleaned):
            raise ValueError("questions must be non-empty strings")
        return cleaned


class StoredConfig(BaseModel):
    interviewId: str
    config: InterviewConfig
    meta: Optional[Dict[str, Any]] = None
    createdAt: str
    updatedAt: str


def put_config(token: str, config: InterviewConfig | Dict[str, Any], meta: Optional[Dict[str, Any]] = None) -> StoredConfig:
    """Insert or overwrite the config stored under ``token``.

    Raises:
        ValueError: If the token is blank.
        pydantic.ValidationError: If the config is missing fields.
    """

    interview_id = str(token or "").strip()
    if not interview_id:
        raise ValueError("interview token is required")
    payload = config if isinstance(config, InterviewConfig) else InterviewConfig.model_validate(config)
    now = utc_now()
    with get_conn() as conn:
        conn.execute(
            """INSERT INTO interview_configs (interviewId, configJson, metaJson, createdAt, updatedAt)
               VALUES (?, ?, ?, ?, ?)
               ON CONFLICT(interviewId) DO UPDATE SET
                 configJson=excluded.configJson,
                 metaJson=excluded.metaJson,
                 updatedAt=excluded.updatedAt""",
            (
                interview_id,
                payload.model_dump_json(),
                json.dumps(meta) if meta else None,
                now,
                now,
            ),
        )
    return get_config(interview_id)


def get_config(token: str) -> StoredConfig:
    """Return the config for ``token``.

    Raises:
        KeyError: If no config exists for the token.
    """

    with get_conn() as conn:
        row = conn.execute(
            """SELECT interviewId, configJson, metaJson, createdAt, updatedAt
               FROM interview_configs WHERE interviewId = ?""",
            (str(token),),
        ).fetchone()
    if row is None:
        raise KeyError(f"Config '{token}' not found")
    return _record(row)


def list_configs(limit: int = 500) -> List[StoredConfig]:
    with get_conn() as conn:
        rows = conn.execute(
            """SELECT interviewId, configJson, metaJson, createdAt, updatedAt
               FROM interview_configs ORDER BY updatedAt DESC LIMIT ?""",
            (limit,),
        ).fetchall()
    return [_record(row) for row in rows]


def _record(row: Any) -> StoredConfig:
    meta = json.loads(row["metaJson"]) if row["metaJson"] else None
    return StoredConfig(
        interviewId=row["interviewId"],
        config=InterviewConfig.model_validate_json(row["configJson"]),
        meta=meta,
        createdAt=row["createdAt"],
        updatedAt=row["updatedAt"],
    )
