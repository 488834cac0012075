"""Group Registry: interview tokens collected under a group token."""
from __future__ import annotations

import json
from typing import Any, Iterable, List, Optional

from pydantic import BaseModel, Field, field_validator

from .sqlite import get_conn, utc_now


class GroupPayload(BaseModel):
    groupId: str = Field(min_length=1)
    restaurantName: Optional[str] = None
    interviewIds: List[str] = Field(min_length=1)

    @field_validator("groupId", mode="before")
    @classmethod
    def _strip_group(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("restaurantName", mode="before")
    @classmethod
    def _blank_name(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip() or None
        return value

    @field_validator("interviewIds")
    @classmethod
    def _clean_ids(cls, value: List[str]) -> List[str]:
        cleaned = [str(item).strip() for item in value if str(item).strip()]
        if not cleaned:
            raise ValueError("interviewIds must contain at least one token")
        return cleaned


class Group(BaseModel):
    groupId: str
    restaurantName: Optional[str] = None
    interviewIds: List[str]
    createdAt: str
    updatedAt: str


def merge_ids(existing: Iterable[str], new: Iterable[str]) -> List[str]:
    """Union of two id sequences, deduplicated, first appearance wins."""

    merged: List[str] = []
    seen: set[str] = set()
    for item in [*existing, *new]:
        key = str(item)
        if key in seen:
            continue
        seen.add(key)
        merged.append(key)
    return merged


def put_group(group_id: str, restaurant_name: Optional[str] = None, interview_ids: Iterable[str] = ()) -> Group:
    """Merge ``interview_ids`` into the group and return the saved row.

    The id set only ever grows. ``restaurant_name`` replaces the stored label
    when given; ``createdAt`` is kept from the first write.
    """

    payload = GroupPayload(groupId=group_id, restaurantName=restaurant_name, interviewIds=list(interview_ids))
    now = utc_now()
    with get_conn() as conn:
        conn.execute("BEGIN IMMEDIATE")
        existing = conn.execute(
            "SELECT restaurantName, interviewIds, createdAt FROM groups WHERE groupId = ?",
            (payload.groupId,),
        ).fetchone()
        existing_ids: List[str] = json.loads(existing["interviewIds"]) if existing else []
        merged = merge_ids(existing_ids, payload.interviewIds)
        name = payload.restaurantName or (existing["restaurantName"] if existing else None)
        created_at = existing["createdAt"] if existing else now
        conn.execute(
            """INSERT INTO groups (groupId, restaurantName, interviewIds, createdAt, updatedAt)
               VALUES (?, ?, ?, ?, ?)
               ON CONFLICT(groupId) DO UPDATE SET
                 restaurantName=excluded.restaurantName,
                 interviewIds=excluded.interviewIds,
                 updatedAt=excluded.updatedAt""",
            (payload.groupId, name, json.dumps(merged), created_at, now),
        )
    return Group(
        groupId=payload.groupId,
        restaurantName=name,
        interviewIds=merged,
        createdAt=created_at,
        updatedAt=now,
    )


def get_group(group_id: str) -> Group:
    """Return the group row.

    Raises:
        KeyError: If the group does not exist.
    """

    with get_conn() as conn:
        row = conn.execute(
            "SELECT groupId, restaurantName, interviewIds, createdAt, updatedAt FROM groups WHERE groupId = ?",
            (str(group_id),),
        ).fetchone()
    if row is None:
        raise KeyError(f"Group '{group_id}' not found")
    return _record(row)


def list_groups(limit: int = 500) -> List[Group]:
    with get_conn() as conn:
        rows = conn.execute(
            """SELECT groupId, restaurantName, interviewIds, createdAt, updatedAt
               FROM groups ORDER BY updatedAt DESC LIMIT ?""",
            (limit,),
        ).fetchall()
    return [_record(row) for row in rows]


def groups_containing(token: str) -> List[str]:
    """Ids of every group whose token set includes ``token``."""

    with get_conn() as conn:
        rows = conn.execute("SELECT groupId, interviewIds FROM groups").fetchall()
    return [row["groupId"] for row in rows if str(token) in json.loads(row["interviewIds"])]


def _record(row: Any) -> Group:
    return Group(
        groupId=row["groupId"],
        restaurantName=row["restaurantName"] or None,
        interviewIds=json.loads(row["interviewIds"]),
        createdAt=row["createdAt"],
        updatedAt=row["updatedAt"],
    )
