"""Tagged status of the post-interview summary save."""
from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel

SummaryKind = Literal["not_started", "in_flight", "saved", "failed"]


class SummaryStatus(BaseModel):
    """``not_started | in_flight | saved | failed(reason)``.

    Only :class:`summarization.trigger.SummarizationTrigger` moves a status
    forward; ``saved`` is reached only after a confirmed write.
    """

    kind: SummaryKind = "not_started"
    reason: Optional[str] = None

    @classmethod
    def not_started(cls) -> "SummaryStatus":
        return cls()

    @classmethod
    def in_flight(cls) -> "SummaryStatus":
        return cls(kind="in_flight")

    @classmethod
    def saved(cls) -> "SummaryStatus":
        return cls(kind="saved")

    @classmethod
    def failed(cls, reason: str) -> "SummaryStatus":
        return cls(kind="failed", reason=reason)

    @property
    def can_fire(self) -> bool:
        return self.kind in ("not_started", "failed")


__all__ = ["SummaryKind", "SummaryStatus"]
