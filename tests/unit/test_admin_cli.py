"""Tests for the table inspection CLI."""
from __future__ import annotations

import sys

from observability import admin_cli
from storage import put_config, put_group, put_summary


def test_tail_configs_lists_group_and_question_count(script, capsys):
    put_config("tok1", script, meta={"interviewId": "tok1", "groupId": "casa-pepe"})
    put_config("tok2", script)
    admin_cli.tail_configs(10)
    out = capsys.readouterr().out
    assert "tok1 group=casa-pepe questions=2" in out
    assert "tok2 group=- questions=2" in out


def test_main_dispatches_flags(script, capsys, monkeypatch):
    put_config("tok1", script)
    put_summary("tok1", "Lovely food\nSlow service")
    put_group("g1", "Casa Pepe", ["tok1"])
    monkeypatch.setattr(
        sys,
        "argv",
        ["admin_cli", "--tail-configs", "5", "--tail-summaries", "5", "--tail-groups", "5", "--group", "g1"],
    )
    admin_cli.main()
    out = capsys.readouterr().out
    assert "tok1 group=- questions=2" in out
    assert "tok1 chars=24 :: Lovely food" in out
    assert "g1 (Casa Pepe) interviews=1 report=-" in out
    assert '"groupId": "g1"' in out
