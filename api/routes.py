"""FastAPI routes for configs, summaries, groups and admin links."""
from __future__ import annotations

import logging
import sqlite3
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError

from admin.links import GeneratedLinks, generate_links
from api.auth import require_admin
from api.schemas import (
    DebugCounts,
    DebugResp,
    DeleteSummaryResp,
    GenerateLinksReq,
    OkResp,
    SaveConfigReq,
    SaveGroupReq,
    SaveSummaryReq,
)
from config.settings import settings
from llm_gateway import LlmGatewayError
from reports.group_summary import InsufficientData, get_or_build_group_summary, invalidate_for_token
from storage import (
    Group,
    GroupSummary,
    StoredConfig,
    Summary,
    delete_summary,
    get_config,
    get_conn,
    get_group,
    get_group_summary,
    get_summary,
    list_groups,
    list_summaries,
    put_config,
    put_group,
    put_summary,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")
admin = [Depends(require_admin)]


@router.get("/admin/ping", response_model=OkResp, dependencies=admin)
def admin_ping() -> OkResp:
    return OkResp()


@router.get("/public-app-url")
def public_app_url() -> dict:
    return {"publicAppUrl": settings.PUBLIC_APP_URL.rstrip("/")}


@router.get("/debug/db", response_model=DebugResp, dependencies=admin)
def debug_db() -> DebugResp:
    with get_conn() as conn:
        counts = {
            table: conn.execute(f"SELECT COUNT(*) AS n FROM {table}").fetchone()["n"]
            for table in ("interview_configs", "summaries", "groups", "group_summaries")
        }
    return DebugResp(dbPath=settings.DB_PATH, counts=DebugCounts(**counts), allowedOrigins=settings.cors_origins())


@router.post("/save-interview-config", response_model=StoredConfig, dependencies=admin)
def save_interview_config(req: SaveConfigReq) -> StoredConfig:
    try:
        return put_config(req.interviewId, req.config, req.meta)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except sqlite3.Error as exc:
        logger.exception("Unable to save interview config")
        raise HTTPException(status_code=500, detail="Unable to save interview config") from exc


@router.get("/interview-config/{token}", response_model=StoredConfig)
def read_interview_config(token: str) -> StoredConfig:
    try:
        return get_config(token)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Interview not found") from exc


@router.post("/save-summary", response_model=Summary)
def save_summary(req: SaveSummaryReq) -> Summary:
    try:
        return put_summary(req.interviewId, req.summary, req.rawConversation)
    except (ValidationError, ValueError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except sqlite3.Error as exc:
        logger.exception("Unable to save summary")
        raise HTTPException(status_code=500, detail="Unable to save summary") from exc


@router.get("/summary/{token}", response_model=Summary, dependencies=admin)
def read_summary(token: str) -> Summary:
    try:
        return get_summary(token)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Summary not found") from exc


@router.delete("/summary/{token}", response_model=DeleteSummaryResp, dependencies=admin)
def remove_summary(token: str) -> DeleteSummaryResp:
    try:
        delete_summary(token)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Summary not found") from exc
    invalidated = invalidate_for_token(token)
    return DeleteSummaryResp(interviewId=token, invalidatedGroups=invalidated)


@router.get("/summaries", response_model=List[Summary], dependencies=admin)
def read_summaries() -> List[Summary]:
    return list_summaries(limit=500)


@router.post("/save-group", response_model=Group, dependencies=admin)
def save_group(req: SaveGroupReq) -> Group:
    try:
        return put_group(req.groupId, req.restaurantName, req.interviewIds)
    except (ValidationError, ValueError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except sqlite3.Error as exc:
        logger.exception("Unable to save group")
        raise HTTPException(status_code=500, detail="Unable to save group") from exc


@router.get("/group/{group_id}", response_model=Group, dependencies=admin)
def read_group(group_id: str) -> Group:
    try:
        return get_group(group_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Group not found") from exc


@router.get("/groups", response_model=List[Group], dependencies=admin)
def read_groups() -> List[Group]:
    return list_groups(limit=500)


@router.get("/group-summary/{group_id}", response_model=GroupSummary, dependencies=admin)
def group_summary(group_id: str, refresh: int = 0) -> GroupSummary:
    try:
        return get_or_build_group_summary(group_id, refresh=refresh == 1)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Group not found") from exc
    except InsufficientData as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except LlmGatewayError as exc:
        logger.exception("Group report generation failed")
        raise HTTPException(status_code=502, detail=f"LLM request failed: {exc}") from exc
    except Exception as exc:  # noqa: BLE001
        logger.exception("Unexpected error while building group report")
        raise HTTPException(status_code=500, detail="Unable to build group report") from exc


@router.get("/group-summary-cache/{group_id}", response_model=GroupSummary, dependencies=admin)
def group_summary_cache(group_id: str) -> GroupSummary:
    try:
        return get_group_summary(group_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Group summary not cached") from exc


@router.post("/admin/links", response_model=GeneratedLinks, dependencies=admin)
def admin_links(req: GenerateLinksReq) -> GeneratedLinks:
    try:
        return generate_links(req.config, req.groupId, req.restaurantName, req.count)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except sqlite3.Error as exc:
        logger.exception("Unable to generate interview links")
        raise HTTPException(status_code=500, detail="Unable to generate interview links") from exc
