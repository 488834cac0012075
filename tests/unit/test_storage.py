"""Tests for the SQLite stores."""
from __future__ import annotations

import os
import sqlite3

import pytest
from pydantic import ValidationError

from config.settings import settings
from storage import (
    delete_group_summary,
    delete_summary,
    get_config,
    get_group,
    get_group_summary,
    get_summary,
    groups_containing,
    list_configs,
    list_groups,
    list_summaries,
    merge_ids,
    migrate,
    put_config,
    put_group,
    put_group_summary,
    put_summary,
)


def test_migrate_creates_tables():
    assert os.path.exists(settings.DB_PATH)
    migrate(settings.DB_PATH)
    conn = sqlite3.connect(settings.DB_PATH)
    try:
        names = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
    finally:
        conn.close()
    assert {"interview_configs", "summaries", "groups", "group_summaries"} <= names


def test_config_upsert_keeps_created_at(script):
    first = put_config("tok1", script, {"groupId": "g1"})
    second = put_config("tok1", {**script, "tone": "formal"})
    assert second.createdAt == first.createdAt
    assert second.config.tone == "formal"
    assert second.meta is None
    assert get_config("tok1").config.questions == ["Q1", "Q2"]
    assert [row.interviewId for row in list_configs()] == ["tok1"]


@pytest.mark.parametrize(
    "patch",
    [{"questions": []}, {"questions": ["Q1", "  "]}, {"objective": "   "}, {"voiceId": ""}],
)
def test_config_rejects_incomplete_scripts(script, patch):
    with pytest.raises(ValidationError):
        put_config("tok1", {**script, **patch})
    with pytest.raises(KeyError):
        get_config("tok1")


def test_config_requires_token(script):
    with pytest.raises(ValueError):
        put_config("  ", script)


def test_summary_upsert_is_idempotent():
    put_summary("tok1", "Report", "raw")
    put_summary("tok1", "Report", "raw")
    rows = list_summaries()
    assert len(rows) == 1
    assert get_summary("tok1").summary == "Report"

    put_summary("tok1", "Newer report")
    assert get_summary("tok1").summary == "Newer report"
    assert get_summary("tok1").rawConversation is None


def test_unknown_summary_is_not_found():
    with pytest.raises(KeyError):
        get_summary("unknown-token")


def test_blank_summary_is_rejected():
    with pytest.raises(ValidationError):
        put_summary("tok1", "   ")


def test_delete_summary_is_authoritative():
    put_summary("tok1", "Report")
    delete_summary("tok1")
    with pytest.raises(KeyError):
        get_summary("tok1")
    with pytest.raises(KeyError):
        delete_summary("tok1")


def test_merge_ids_is_ordered_union():
    assert merge_ids(["a", "b"], ["b", "c", "a"]) == ["a", "b", "c"]
    assert merge_ids([], []) == []


def test_group_union_and_name_handling():
    first = put_group("g1", "Casa Pepe", ["a", "b"])
    second = put_group("g1", None, ["b", "c"])
    assert second.interviewIds == ["a", "b", "c"]
    assert second.restaurantName == "Casa Pepe"
    assert second.createdAt == first.createdAt
    assert set(get_group("g1").interviewIds) == {"a", "b", "c"}

    renamed = put_group("g1", "Casa Pepa", ["a"])
    assert renamed.restaurantName == "Casa Pepa"
    assert renamed.interviewIds == ["a", "b", "c"]


def test_group_requires_ids():
    with pytest.raises(ValidationError):
        put_group("g1", None, [])
    with pytest.raises(KeyError):
        get_group("g1")


def test_groups_containing_and_listing():
    put_group("g1", None, ["a", "b"])
    put_group("g2", None, ["b", "c"])
    assert sorted(groups_containing("b")) == ["g1", "g2"]
    assert groups_containing("z") == []
    assert {group.groupId for group in list_groups()} == {"g1", "g2"}


def test_group_summary_cache_roundtrip():
    with pytest.raises(KeyError):
        get_group_summary("g1")
    put_group_summary("g1", "Cached report")
    assert get_group_summary("g1").summary == "Cached report"
    assert delete_group_summary("g1") is True
    assert delete_group_summary("g1") is False
