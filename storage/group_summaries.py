"""Cached group-level reports."""
from __future__ import annotations

from pydantic import BaseModel, Field

from .sqlite import get_conn, utc_now


class GroupSummary(BaseModel):
    groupId: str = Field(min_length=1)
    summary: str = Field(min_length=1)
    createdAt: str


def put_group_summary(group_id: str, summary: str) -> GroupSummary:
    record = GroupSummary(groupId=str(group_id).strip(), summary=summary.strip(), createdAt=utc_now())
    with get_conn() as conn:
        conn.execute(
            """INSERT INTO group_summaries (groupId, summary, createdAt)
               VALUES (?, ?, ?)
               ON CONFLICT(groupId) DO UPDATE SET
                 summary=excluded.summary,
                 createdAt=excluded.createdAt""",
            (record.groupId, record.summary, record.createdAt),
        )
    return record


def get_group_summary(group_id: str) -> GroupSummary:
    """Return the cached report.

    Raises:
        KeyError: If nothing is cached, or the cached text is blank.
    """

    with get_conn() as conn:
        row = conn.execute(
            "SELECT groupId, summary, createdAt FROM group_summaries WHERE groupId = ?",
            (str(group_id),),
        ).fetchone()
    if row is None or not (row["summary"] or "").strip():
        raise KeyError(f"Group summary '{group_id}' not found")
    return GroupSummary(**dict(row))


def delete_group_summary(group_id: str) -> bool:
    with get_conn() as conn:
        cur = conn.execute("DELETE FROM group_summaries WHERE groupId = ?", (str(group_id),))
        return cur.rowcount > 0
