from __future__ import annotations  # Group report prompts

from textwrap import dedent
from typing import Sequence, Tuple

from storage.groups import Group

GROUP_SYSTEM_PROMPT = dedent(
    """
    You are a senior qualitative customer-experience consultant.

    You receive several individual interview reports collected for the same
    venue or group. Synthesize them into one strategic report.

    Rules:
    - Use only what the individual reports say. Never invent data, numbers or quotes.
    - Prioritize patterns that repeat across interviews over isolated remarks.
    - Keep a precise, professional register without exaggeration.

    Structure:
    1) Executive summary (6-8 lines at most)
    2) Key experience patterns, positive and negative
    3) Priority frictions and pain points (only those mentioned explicitly)
    4) Improvement opportunities and recommendations derived from the patterns
    5) Representative quotes or ideas, faithful to the source reports
    """
).strip()


def build_group_prompt(group: Group, blocks: Sequence[Tuple[str, str]]) -> str:
    """User prompt listing each available report as ``(interview id, summary)``."""

    label = f"Restaurant: {group.restaurantName}" if group.restaurantName else f"Group: {group.groupId}"
    sections = "\n\n".join(
        f"--- INTERVIEW {index} ({interview_id}) ---\n{summary}"
        for index, (interview_id, summary) in enumerate(blocks, start=1)
    )
    return "\n".join(
        [
            label,
            f"Group id: {group.groupId}",
            f"Interviews in the group: {len(group.interviewIds)}",
            f"Interviews with a report available: {len(blocks)}",
            "",
            "INDIVIDUAL REPORTS:",
            sections,
        ]
    )
