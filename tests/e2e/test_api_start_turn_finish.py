from fastapi.testclient import TestClient

from api_server import create_app
from config.registry import SUMMARY_KEY, TRANSCRIBE_KEY, TURN_KEY, bind_model
from storage import list_summaries, put_config
from llm_gateway import LlmGatewayError, TranscriptionError


app = create_app(bind=False)
client = TestClient(app)


def _links(admin_headers, script):
    resp = client.post(
        "/api/admin/links",
        json={"config": script, "groupId": "Casa Pepe", "restaurantName": "Casa Pepe", "count": 1},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    return resp.json()["links"][0]["token"]


def test_full_flow(admin_headers, script, fake_models):
    token = _links(admin_headers, script)

    start_resp = client.post("/api/interview-sessions/start", json={"token": token})
    assert start_resp.status_code == 200
    started = start_resp.json()
    assert started["state"]["phase"] == "active"
    assert "Q1" in started["reply"]

    turn_resp = client.post("/api/interview-sessions/turn", json={"state": started["state"], "answer": "fine"})
    assert turn_resp.status_code == 200
    second = turn_resp.json()
    assert second["reply"] == "Thanks. Q2?"
    assert second["state"]["question_index"] == 1

    last = client.post(
        "/api/interview-sessions/turn",
        json={"state": second["state"], "answer": "Great food, but the wait was long."},
    ).json()
    assert last["state"]["phase"] == "finished"
    assert last["state"]["summary"]["kind"] == "saved"

    summary = client.get(f"/api/summary/{token}", headers=admin_headers)
    assert summary.status_code == 200
    assert "Candidate: fine" in summary.json()["rawConversation"]

    finish_resp = client.post("/api/interview-sessions/finish", json={"state": last["state"]})
    assert finish_resp.status_code == 200
    assert finish_resp.json()["state"]["summary"]["kind"] == "saved"
    assert len(fake_models["summary"].calls) == 1

    late = client.post("/api/interview-sessions/turn", json={"state": last["state"], "answer": "one more"})
    assert late.status_code == 409
    assert late.json()["detail"]["code"] == "finished"

    report = client.get("/api/group-summary/casa-pepe", headers=admin_headers)
    assert report.status_code == 200
    assert report.json()["summary"]


def test_rejections_and_retryable_failure(admin_headers, script, fake_models):
    token = _links(admin_headers, script)
    state = client.post("/api/interview-sessions/start", json={"token": token}).json()["state"]

    empty = client.post("/api/interview-sessions/turn", json={"state": state, "answer": "   "})
    assert empty.status_code == 400
    assert empty.json()["detail"]["code"] == "empty_answer"

    expired = {**state, "last_activity_at": "2000-01-01T00:00:00Z"}
    gone = client.post("/api/interview-sessions/turn", json={"state": expired, "answer": "hi"})
    assert gone.status_code == 410

    not_done = client.post("/api/interview-sessions/finish", json={"state": state})
    assert not_done.status_code == 409

    def broken(**_):
        raise LlmGatewayError("timeout")

    bind_model(TURN_KEY, broken)
    retry = client.post("/api/interview-sessions/turn", json={"state": state, "answer": "fine"})
    assert retry.status_code == 200
    body = retry.json()
    assert body["error"] == "timeout"
    assert body["state"]["question_index"] == 0
    assert body["state"]["phase"] == "active"


def test_failed_summary_then_finish_saves_once(admin_headers, script, fake_models):
    calls = []

    def flaky_summary(**_):
        calls.append(1)
        if len(calls) == 1:
            raise LlmGatewayError("LLM returned status 503: overloaded")
        return "Guest enjoyed the dinner."

    bind_model(SUMMARY_KEY, flaky_summary)
    token = _links(admin_headers, script)
    state = client.post("/api/interview-sessions/start", json={"token": token}).json()["state"]
    state = client.post("/api/interview-sessions/turn", json={"state": state, "answer": "fine"}).json()["state"]
    last = client.post(
        "/api/interview-sessions/turn",
        json={"state": state, "answer": "Great food, but the wait was long."},
    ).json()
    assert last["state"]["summary"]["kind"] == "failed"
    assert last["warnings"][0].startswith("summary not saved:")
    assert list_summaries() == []

    finished = client.post("/api/interview-sessions/finish", json={"state": last["state"]})
    assert finished.status_code == 200
    assert finished.json()["state"]["summary"]["kind"] == "saved"
    assert [row.interviewId for row in list_summaries()] == [token]

    again = client.post("/api/interview-sessions/finish", json={"state": finished.json()["state"]})
    assert again.json()["state"]["summary"]["kind"] == "saved"
    assert len(calls) == 2


def test_turn_after_script_shrinks_is_409(admin_headers, script, fake_models):
    token = _links(admin_headers, script)
    state = client.post("/api/interview-sessions/start", json={"token": token}).json()["state"]
    state = client.post("/api/interview-sessions/turn", json={"state": state, "answer": "fine"}).json()["state"]

    put_config(token, {**script, "questions": ["Q1"]})
    resp = client.post("/api/interview-sessions/turn", json={"state": state, "answer": "great"})
    assert resp.status_code == 409
    assert resp.json()["detail"]["code"] == "question_out_of_range"
    assert list_summaries() == []

def test_unknown_token_is_404(fake_models):
    assert client.post("/api/interview-sessions/start", json={"token": "nope"}).status_code == 404


def test_transcribe(fake_models):
    resp = client.post(
        "/api/interview-sessions/transcribe",
        files={"file": ("answer.webm", b"\x1a\x45\xdf\xa3", "audio/webm")},
    )
    assert resp.status_code == 200
    assert resp.json() == {"text": "It was fine, thanks."}


def test_transcribe_failure_is_reassuring(fake_models):
    def broken(**_):
        raise TranscriptionError("Transcription returned status 500: boom")

    bind_model(TRANSCRIBE_KEY, broken)
    resp = client.post(
        "/api/interview-sessions/transcribe",
        files={"file": ("answer.webm", b"\x00", "audio/webm")},
    )
    assert resp.status_code == 502
    assert "boom" not in resp.json()["detail"]
    assert "try again" in resp.json()["detail"]


def test_transcribe_without_model_is_retryable_500():
    resp = client.post(
        "/api/interview-sessions/transcribe",
        files={"file": ("answer.webm", b"\x00", "audio/webm")},
    )
    assert resp.status_code == 500
    assert resp.json()["detail"] == "Something went wrong on our side. Please try again."
