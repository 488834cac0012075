"""Summarization trigger package."""
from .prompts import SUMMARY_SYSTEM_PROMPT, build_summary_prompt
from .status import SummaryKind, SummaryStatus
from .trigger import SummarizationTrigger

__all__ = [
    "SUMMARY_SYSTEM_PROMPT",
    "build_summary_prompt",
    "SummaryKind",
    "SummaryStatus",
    "SummarizationTrigger",
]
