"""Pydantic schemas for the HTTP API."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from interview_session.models import SessionState
from storage.configs import InterviewConfig


class OkResp(BaseModel):
    ok: bool = True


class SaveConfigReq(BaseModel):
    interviewId: str = Field(min_length=1)
    config: InterviewConfig
    meta: Optional[Dict[str, Any]] = None


class SaveSummaryReq(BaseModel):
    interviewId: str = Field(min_length=1)
    summary: str = Field(min_length=1)
    rawConversation: Optional[str] = None


class SaveGroupReq(BaseModel):
    groupId: str = Field(min_length=1)
    restaurantName: Optional[str] = None
    interviewIds: List[str] = Field(min_length=1)


class DeleteSummaryResp(BaseModel):
    ok: bool = True
    interviewId: str
    invalidatedGroups: List[str] = Field(default_factory=list)


class GenerateLinksReq(BaseModel):
    config: InterviewConfig
    groupId: str = Field(min_length=1)
    restaurantName: Optional[str] = None
    count: int = Field(default=1, ge=1, le=500)


class DebugCounts(BaseModel):
    interview_configs: int
    summaries: int
    groups: int
    group_summaries: int


class DebugResp(BaseModel):
    ok: bool = True
    dbPath: str
    counts: DebugCounts
    allowedOrigins: List[str]


class StartReq(BaseModel):
    token: str = Field(min_length=1)
    avatar_session_id: Optional[str] = None


class TurnReq(BaseModel):
    state: SessionState
    answer: str = ""


class FinishReq(BaseModel):
    state: SessionState


class TranscribeResp(BaseModel):
    text: str


__all__ = [
    "OkResp",
    "SaveConfigReq",
    "SaveSummaryReq",
    "SaveGroupReq",
    "DeleteSummaryResp",
    "GenerateLinksReq",
    "DebugCounts",
    "DebugResp",
    "StartReq",
    "TurnReq",
    "FinishReq",
    "TranscribeResp",
]
