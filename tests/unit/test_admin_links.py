"""Tests for the admin link generator."""
from __future__ import annotations

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from admin import generate_links, mint_tokens, normalize_group_id, to_base36
from config.settings import settings
from storage import get_config, get_group

NOW = datetime(2026, 3, 1, 10, 30, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("Casa Pepe", "casa-pepe"),
        ("  Bar   Ñandú #1 ", "bar-and-1"),
        ("rest_2024-A", "rest_2024-a"),
        ("!!!", ""),
    ],
)
def test_normalize_group_id(raw, expected):
    assert normalize_group_id(raw) == expected


def test_base36_tokens():
    assert to_base36(0) == "0"
    assert to_base36(35) == "z"
    assert to_base36(36) == "10"
    millis = int(NOW.timestamp() * 1000)
    tokens = mint_tokens(3, NOW)
    assert tokens == [f"{to_base36(millis)}-{n}" for n in (1, 2, 3)]
    assert int(tokens[0].split("-")[0], 36) == millis


def test_generate_links_writes_configs_and_group(script, monkeypatch):
    monkeypatch.setattr(settings, "PUBLIC_APP_URL", "https://app.example/", raising=False)
    result = generate_links(script, "Casa Pepe", " Casa Pepe ", count=2, now=NOW)

    assert result.groupId == "casa-pepe"
    assert len(result.tokens) == 2
    first = result.links[0]
    assert first.candidateUrl == f"https://app.example/candidate/{first.token}"
    assert first.resultsUrl == f"https://app.example/results/{first.token}"
    assert result.groupReportUrl == "https://app.example/results/group/casa-pepe"

    stored = get_config(first.token)
    assert stored.config.questions == ["Q1", "Q2"]
    assert stored.meta == {
        "interviewId": first.token,
        "groupId": "casa-pepe",
        "restaurantName": "Casa Pepe",
        "createdAt": "2026-03-01T10:30:00.000Z",
    }
    assert get_group("casa-pepe").interviewIds == result.tokens


def test_second_batch_merges_into_group(script):
    first = generate_links(script, "g1", count=1, now=NOW)
    later = datetime(2026, 3, 2, tzinfo=timezone.utc)
    second = generate_links(script, "g1", count=2, now=later)
    assert second.group.interviewIds == first.tokens + second.tokens
    assert "restaurantName" not in get_config(second.tokens[0]).meta


def test_generate_links_validation(script):
    with pytest.raises(ValueError):
        generate_links(script, "###", count=1)
    with pytest.raises(ValueError):
        generate_links(script, "g1", count=0)
    with pytest.raises(ValidationError):
        generate_links({**script, "questions": []}, "g1", count=1)
