"""Group-level interview reports."""
from .group_summary import InsufficientData, collect_blocks, get_or_build_group_summary, invalidate_for_token
from .prompts import GROUP_SYSTEM_PROMPT, build_group_prompt

__all__ = [
    "InsufficientData",
    "collect_blocks",
    "get_or_build_group_summary",
    "invalidate_for_token",
    "GROUP_SYSTEM_PROMPT",
    "build_group_prompt",
]
