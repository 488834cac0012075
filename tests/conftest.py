import os
import sys
import tempfile
from pathlib import Path
from typing import Dict, List

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config.registry import GROUP_SUMMARY_KEY, SPEAK_KEY, SUMMARY_KEY, TRANSCRIBE_KEY, TURN_KEY, bind_model, unbind_all
from config.settings import settings
from storage.migrate import migrate

SCRIPT = {
    "objective": "Understand the dinner experience",
    "tone": "warm",
    "questions": ["Q1", "Q2"],
    "avatarId": "av1",
    "voiceId": "vo1",
}


@pytest.fixture(autouse=True)
def tmp_db(monkeypatch):
    td = tempfile.TemporaryDirectory()
    db_path = os.path.join(td.name, "test.db")
    monkeypatch.setattr(settings, "DB_PATH", db_path, raising=False)
    monkeypatch.setattr(settings, "SUMMARY_RETRY_DELAY_S", 0.0, raising=False)
    monkeypatch.setattr(settings, "MIN_TRANSCRIPT_CHARS", 20, raising=False)
    migrate(db_path)
    try:
        yield
    finally:
        unbind_all()
        td.cleanup()


@pytest.fixture
def script() -> Dict:
    return {**SCRIPT, "questions": list(SCRIPT["questions"])}


class Recorder:
    """Collects calls made to a fake collaborator."""

    def __init__(self, replies: List[str]):
        self.replies = list(replies)
        self.calls: List[Dict] = []

    def __call__(self, **kwargs):
        self.calls.append(kwargs)
        return self.replies.pop(0) if self.replies else "Thank you, that is all for today."


@pytest.fixture
def fake_models():
    turn = Recorder(["Thanks. Q2?", "Thank you, that concludes our interview."])
    summary = Recorder(["Guest enjoyed the dinner; service was slow."])
    group = Recorder(["Across guests: food praised, waits criticized."])
    spoken: List[Dict] = []
    bind_model(TURN_KEY, turn)
    bind_model(SUMMARY_KEY, summary)
    bind_model(GROUP_SUMMARY_KEY, group)
    bind_model(TRANSCRIBE_KEY, lambda **_: "It was fine, thanks.")
    bind_model(SPEAK_KEY, lambda **kwargs: spoken.append(kwargs))
    return {"turn": turn, "summary": summary, "group": group, "spoken": spoken}


@pytest.fixture
def admin_headers(monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_TOKEN", "secret", raising=False)
    return {"x-admin-token": "secret"}
