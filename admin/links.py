"""Admin link generator: mints interview tokens for one group."""
from __future__ import annotations

import re
import string
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from config.settings import settings
from observability.logger import log_event
from storage.configs import InterviewConfig, put_config
from storage.groups import Group, put_group

_BASE36 = string.digits + string.ascii_lowercase


class CandidateLink(BaseModel):  # URLs for one minted token
    token: str
    candidateUrl: str
    resultsUrl: str


class GeneratedLinks(BaseModel):  # Result of one generation batch
    groupId: str
    restaurantName: Optional[str] = None
    links: List[CandidateLink]
    groupReportUrl: str
    group: Group

    @property
    def tokens(self) -> List[str]:
        return [link.token for link in self.links]


def normalize_group_id(raw: str) -> str:
    """Lower-case, whitespace runs to ``-``, then keep only ``[a-z0-9-_]``."""

    lowered = (raw or "").strip().lower()
    dashed = re.sub(r"\s+", "-", lowered)
    return re.sub(r"[^a-z0-9\-_]", "", dashed)


def to_base36(value: int) -> str:
    if value < 0:
        raise ValueError("value must be non-negative")
    if value == 0:
        return "0"
    digits: List[str] = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def mint_tokens(count: int, now: datetime) -> List[str]:
    """``<base36 epoch millis>-<n>`` for n in 1..count."""

    base = to_base36(int(now.timestamp() * 1000))
    return [f"{base}-{index}" for index in range(1, count + 1)]


def generate_links(
    config: InterviewConfig | Dict[str, Any],
    group_id: str,
    restaurant_name: Optional[str] = None,
    count: int = 1,
    now: Optional[datetime] = None,
) -> GeneratedLinks:
    """Save one config per new token, merge the tokens into the group, return the URLs.

    Raises:
        ValueError: If the group id normalizes to nothing or ``count < 1``.
        pydantic.ValidationError: If the config is incomplete.
    """

    normalized = normalize_group_id(group_id)
    if not normalized:
        raise ValueError("group id is required")
    if count < 1:
        raise ValueError("count must be at least 1")
    script = config if isinstance(config, InterviewConfig) else InterviewConfig.model_validate(config)
    moment = now or datetime.now(timezone.utc)
    name = (restaurant_name or "").strip() or None
    created_at = moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")

    tokens = mint_tokens(count, moment)
    for token in tokens:
        meta: Dict[str, Any] = {"interviewId": token, "groupId": normalized, "createdAt": created_at}
        if name:
            meta["restaurantName"] = name
        put_config(token, script, meta)
    group = put_group(normalized, name, tokens)
    log_event("links_generated", normalized, count=len(tokens))

    base_url = settings.PUBLIC_APP_URL.rstrip("/")
    return GeneratedLinks(
        groupId=normalized,
        restaurantName=name,
        links=[
            CandidateLink(
                token=token,
                candidateUrl=f"{base_url}/candidate/{token}",
                resultsUrl=f"{base_url}/results/{token}",
            )
            for token in tokens
        ],
        groupReportUrl=f"{base_url}/results/group/{normalized}",
        group=group,
    )


__all__ = [
    "CandidateLink",
    "GeneratedLinks",
    "normalize_group_id",
    "to_base36",
    "mint_tokens",
    "generate_links",
]
