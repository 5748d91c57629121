from udyat.prompts import GENERATION_ERROR


def chat(client, message):
    r = client.post("/api/chat", json={"message": message})
    assert r.status_code == 200, r.text
    return r.json()


def test_chat_greeting(client):
    data = chat(client, "hello")
    assert data["reply"]["role"] == "assistant"
    assert data["reply"]["content"].startswith("Hello!")
    assert data["context"]["type"] == "greeting"
    assert data["context"]["collectedData"] == {}


def test_chat_rejects_blank_message(client):
    r = client.post("/api/chat", json={"message": "   "})
    assert r.status_code == 400
    assert r.json() == {"error": "message required"}


def test_chat_rejects_overlapping_submission(client):
    from udyat.main import app

    app.state.session.pending = True
    r = client.post("/api/chat", json={"message": "hello"})
    assert r.status_code == 409
    assert "still being processed" in r.json()["error"]


def test_chat_collects_fields_across_turns(client):
    data = chat(client, "create resume experience: worked at Acme")
    assert data["context"]["missingFields"] == ["education", "skills", "achievements", "objective"]
    assert data["context"]["currentSection"] == "education"

    for answer in ("BTech CS", "Go, Rust", "Shipped X"):
        data = chat(client, answer)
    data = chat(client, "Backend role")

    ctx = data["context"]
    assert ctx["isComplete"] is True
    assert ctx["missingFields"] == []
    assert ctx["currentSection"] is None
    assert ctx["collectedData"]["objective"] == ["Backend role"]
    assert [s["type"] for s in data["sections"]] == ["complete"]
    assert "## Key Achievements\n- Shipped X" in data["reply"]["content"]

    session = client.get("/api/session").json()
    assert len(session["messages"]) == 10
    assert session["hasAnalysis"] is False


def test_chat_generation_without_key_reports_error(client):
    data = chat(client, "write my skills section")
    assert data["reply"]["content"] == GENERATION_ERROR
    assert data["sections"] == []


def test_chat_generation_persists_section(client, fake_gateway):
    fake_gateway.replies = ["## Education\n- BTech"]
    data = chat(client, "polish my education")
    assert data["reply"]["content"] == "## Education\n- BTech"
    assert [(s["type"], s["content"]) for s in data["sections"]] == [("education", "## Education\n- BTech")]


def test_stream_message_clears_streaming_flag(client):
    reply = chat(client, "hey")["reply"]
    assert reply["isStreaming"] is True

    r = client.get(f"/api/session/messages/{reply['id']}/stream")
    assert r.status_code == 200
    assert r.text.strip() == reply["content"].strip()

    messages = client.get("/api/session").json()["messages"]
    assert messages[-1]["isStreaming"] is False


def test_stream_unknown_message(client):
    r = client.get("/api/session/messages/nope/stream")
    assert r.status_code == 404
    assert r.json() == {"error": "message not found"}


def test_versions_snapshot_sections(client):
    chat(client, "create resume experience: a education: b skills: c achievements: d objective: e")
    saved = client.post("/api/session/versions")
    assert saved.status_code == 200
    assert [s["type"] for s in saved.json()["sections"]] == ["complete"]
    versions = client.get("/api/session/versions").json()
    assert [v["id"] for v in versions] == [saved.json()["id"]]
