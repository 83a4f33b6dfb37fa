import io

from conftest import JOB, RESUME, score_json
from routes.ws_routes import socketio

ANSWER = "I worked with a customer who was about to churn..."


def upload(client):
    return client.post("/api/upload_documents", json={
        "resume": RESUME, "job": JOB,
        "resume_filename": "resume.txt", "job_filename": "job.txt",
    })


def test_fresh_session_is_landing(client):
    resp = client.get("/api/session")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["ok"] is True
    assert body["session"]["step"] == "landing"
    assert body["session"]["owner_id"] == "test-user"


def test_full_flow(client, generator):
    generator.queue("evaluate", score_json(overall=82), score_json(overall=70))

    resp = upload(client)
    assert resp.status_code == 200
    session = resp.get_json()["session"]
    assert session["step"] == "principle_selection"
    assert len(session["principles"]) == 5

    resp = client.post("/api/select_principle", json={})
    assert resp.get_json()["session"]["step"] == "question"

    resp = client.post("/api/feedback", json={"transcript": ANSWER})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["result"]["report"]["overallScore"]["score"] == 82
    assert body["session"]["step"] == "feedback"

    for _ in range(4):
        client.post("/api/next")
        resp = client.post("/api/feedback", json={"transcript": ANSWER})
        assert resp.status_code == 200
    resp = client.post("/api/next")
    assert resp.get_json()["session"]["step"] == "final"

    results = client.get("/api/results").get_json()
    assert results["finished"] is True
    # 82, 70, 70, 70, 70 -> 72.4
    assert results["summary"]["overall_score"] == 72
    assert results["summary"]["question_count"] == 5
    assert results["summary"]["saved_responses"] == 5


def test_multipart_upload(client):
    resp = client.post("/api/upload_documents", data={
        "resume": (io.BytesIO(RESUME.encode("utf-8")), "resume.txt"),
        "job": (io.BytesIO(JOB.encode("utf-8")), "job.md"),
    }, content_type="multipart/form-data")
    assert resp.status_code == 200
    assert resp.get_json()["resume_chars"] == len(RESUME)


def test_binary_upload_is_rejected(client, generator):
    resp = client.post("/api/upload_documents", data={
        "resume": (io.BytesIO(b"%PDF-1.7 ..."), "resume.pdf"),
        "job": (io.BytesIO(JOB.encode("utf-8")), "job.txt"),
    }, content_type="multipart/form-data")
    assert resp.status_code == 400
    assert resp.get_json()["ok"] is False
    assert generator.count() == 0


def test_missing_job_description(client, generator):
    resp = client.post("/api/upload_documents", json={"resume": RESUME, "job": ""})
    assert resp.status_code == 400
    assert resp.get_json()["stage"] == "upload"
    assert generator.count() == 0


def test_malformed_feedback_reports_error(client, generator):
    upload(client)
    client.post("/api/select_principle", json={"principle": "Ownership"})
    generator.queue("evaluate", "I'd rate this 8/10")

    resp = client.post("/api/feedback", json={"transcript": ANSWER})

    assert resp.status_code == 502
    body = resp.get_json()
    assert body["ok"] is False
    assert body["kind"] == "MalformedResponseError"
    assert body["session"]["step"] == "question"
    assert body["session"]["results"] == []
    assert body["session"]["draft_transcript"] == ANSWER


def test_empty_transcript(client):
    upload(client)
    client.post("/api/select_principle", json={})
    resp = client.post("/api/feedback", json={"transcript": ""})
    assert resp.status_code == 400
    assert resp.get_json()["session"]["step"] == "question"


def test_non_string_documents_are_rejected(client, generator):
    resp = client.post("/api/upload_documents", json={"resume": ["a"], "job": "PM role"})
    assert resp.status_code == 400
    body = resp.get_json()
    assert body["ok"] is False
    assert body["kind"] == "ValidationError"
    assert body["stage"] == "upload"
    assert generator.count() == 0


def test_upload_body_must_be_an_object(client):
    resp = client.post("/api/upload_documents", json=["resume", "job"])
    assert resp.status_code == 400


def test_non_string_transcript_is_rejected(client):
    upload(client)
    client.post("/api/select_principle", json={})
    resp = client.post("/api/feedback", json={"transcript": 123})
    assert resp.status_code == 400
    body = resp.get_json()
    assert body["stage"] == "feedback"
    assert body["session"]["step"] == "question"
    assert body["session"]["draft_transcript"] == ""


def test_non_string_principle_is_rejected(client):
    upload(client)
    resp = client.post("/api/select_principle", json={"principle": 5})
    assert resp.status_code == 400
    assert resp.get_json()["session"]["step"] == "principle_selection"


def test_wrong_step_is_conflict(client):
    resp = client.post("/api/next")
    assert resp.status_code == 409


def test_reset_returns_to_landing(client):
    upload(client)
    resp = client.post("/api/reset")
    assert resp.get_json()["session"]["step"] == "landing"
    assert resp.get_json()["session"]["principles"] == []


def test_transcribe(client, transcriber):
    resp = client.post("/api/transcribe", data={
        "audio": (io.BytesIO(b"OggS\x00\x02fake"), "answer.ogg"),
    }, content_type="multipart/form-data")
    assert resp.status_code == 200
    assert resp.get_json()["transcript"] == transcriber.text
    assert transcriber.calls[0][1] == "answer.ogg"


def test_transcribe_needs_audio(client):
    resp = client.post("/api/transcribe", data={}, content_type="multipart/form-data")
    assert resp.status_code == 400


def test_principle_catalog(client):
    principles = client.get("/api/principles").get_json()["principles"]
    assert len(principles) == 16
    assert principles[0]["title"] == "Customer Obsession"


def test_debug_llm(client):
    body = client.get("/api/debug_llm").get_json()
    assert body == {"ok": True, "model": "fake-model", "text": "OK", "mode": "aistudio"}


def test_websocket_pushes_state(app, client):
    ws = socketio.test_client(app)
    received = ws.get_received()
    assert received[0]["name"] == "server_message"

    ws.emit("join", {})
    received = ws.get_received()
    assert received[-1]["name"] == "session_state"
    assert received[-1]["args"][0]["step"] == "landing"

    client.post("/api/start")
    names = [m["name"] for m in ws.get_received()]
    assert "session_state" in names
    ws.disconnect()
