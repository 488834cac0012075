"""Group report synthesis backed by the group_summaries cache."""
from __future__ import annotations

import logging
from typing import Callable, List, Optional, Tuple

from config.registry import GROUP_SUMMARY_KEY, get_model
from llm_gateway import LlmGatewayError
from observability.tracing import span
from storage.group_summaries import GroupSummary, delete_group_summary, get_group_summary, put_group_summary
from storage.groups import get_group, groups_containing
from storage.summaries import get_summary

from .prompts import GROUP_SYSTEM_PROMPT, build_group_prompt


logger = logging.getLogger(__name__)


class InsufficientData(ValueError):  # No constituent summary exists yet
    pass


def collect_blocks(interview_ids: List[str]) -> List[Tuple[str, str]]:
    """Non-blank summaries for ``interview_ids`` in group order; missing ones are skipped."""

    blocks: List[Tuple[str, str]] = []
    for interview_id in interview_ids:
        try:
            row = get_summary(interview_id)
        except KeyError:
            continue
        text = row.summary.strip()
        if text:
            blocks.append((interview_id, text))
    return blocks


def get_or_build_group_summary(
    group_id: str,
    refresh: bool = False,
    generate: Optional[Callable[..., str]] = None,
) -> GroupSummary:
    """Return the cached group report, or synthesize and cache a new one.

    Raises:
        KeyError: If the group does not exist.
        InsufficientData: If no interview in the group has a summary.
        LlmGatewayError: If generation fails or returns empty text.
        RuntimeError: If no group report model is bound.
    """

    group = get_group(group_id)
    if not refresh:
        try:
            return get_group_summary(group.groupId)
        except KeyError:
            pass

    blocks = collect_blocks(group.interviewIds)
    if not blocks:
        raise InsufficientData(f"No individual summaries yet for group '{group.groupId}'")

    generate_fn = generate or _group_model()
    with span("group_summary_built", group.groupId, reports=len(blocks), refresh=refresh):
        text = generate_fn(system_prompt=GROUP_SYSTEM_PROMPT, user_prompt=build_group_prompt(group, blocks))
        text = (text or "").strip()
        if not text:
            raise LlmGatewayError("Group report generation returned empty text")
        return put_group_summary(group.groupId, text)


def _group_model() -> Callable[..., str]:
    try:
        return get_model(GROUP_SUMMARY_KEY)
    except KeyError as exc:
        # KeyError is reserved for unknown groups.
        raise RuntimeError("Group report model is not configured") from exc


def invalidate_for_token(token: str) -> List[str]:
    """Drop cached reports of every group containing ``token``; returns the affected group ids."""

    dropped = [group_id for group_id in groups_containing(token) if delete_group_summary(group_id)]
    if dropped:
        logger.info("Invalidated group reports token=%s groups=%s", token, dropped)
    return dropped


__all__ = ["InsufficientData", "collect_blocks", "get_or_build_group_summary", "invalidate_for_token"]
