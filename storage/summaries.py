"""Summary Store: one synthesized report plus raw transcript per interview token."""
from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

from .sqlite import get_conn, utc_now


class SummaryPayload(BaseModel):
    interviewId: str = Field(min_length=1)
    summary: str = Field(min_length=1)
    rawConversation: Optional[str] = None

    @field_validator("interviewId", "summary", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value


class Summary(BaseModel):
    interviewId: str
    summary: str
    rawConversation: Optional[str] = None
    createdAt: str


def put_summary(token: str, summary: str, raw_conversation: Optional[str] = None) -> Summary:
    """Insert or overwrite the summary for ``token`` and return the stored row."""

    payload = SummaryPayload(interviewId=token, summary=summary, rawConversation=raw_conversation or None)
    now = utc_now()
    with get_conn() as conn:
        conn.execute(
            """INSERT INTO summaries (interviewId, summary, rawConversation, createdAt)
               VALUES (?, ?, ?, ?)
               ON CONFLICT(interviewId) DO UPDATE SET
                 summary=excluded.summary,
                 rawConversation=excluded.rawConversation,
                 createdAt=excluded.createdAt""",
            (payload.interviewId, payload.summary, payload.rawConversation, now),
        )
    return Summary(
        interviewId=payload.interviewId,
        summary=payload.summary,
        rawConversation=payload.rawConversation,
        createdAt=now,
    )


def get_summary(token: str) -> Summary:
    """Return the summary for ``token``.

    Raises:
        KeyError: If no summary has been stored for the token.
    """

    with get_conn() as conn:
        row = conn.execute(
            "SELECT interviewId, summary, rawConversation, createdAt FROM summaries WHERE interviewId = ?",
            (str(token),),
        ).fetchone()
    if row is None:
        raise KeyError(f"Summary '{token}' not found")
    return Summary(**dict(row))


def list_summaries(limit: int = 500) -> List[Summary]:
    with get_conn() as conn:
        rows = conn.execute(
            "SELECT interviewId, summary, rawConversation, createdAt FROM summaries ORDER BY createdAt DESC LIMIT ?",
            (limit,),
        ).fetchall()
    return [Summary(**dict(row)) for row in rows]


def delete_summary(token: str) -> None:
    """Delete the summary for ``token``.

    Raises:
        KeyError: If there was nothing to delete.
    """

    with get_conn() as conn:
        cur = conn.execute("DELETE FROM summaries WHERE interviewId = ?", (str(token),))
        deleted = cur.rowcount
    if not deleted:
        raise KeyError(f"Summary '{token}' not found")
