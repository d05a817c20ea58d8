import json

import httpx
from fastapi.testclient import TestClient

from insight_worker.app import app
from insight_worker.services.fallback import FALLBACK_REFLECTION, fallback_analysis

from conftest import chat_body, json_handler, mock_client, request_json


client = TestClient(app)


def _reply_with(handler):
    app.state.state.http_client = mock_client(handler)


def test_health_reports_active_provider():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "provider": "deepseek"}
    assert r.headers.get("X-Request-Id")


def test_reflection_endpoint():
    seen = []
    _reply_with(json_handler(chat_body("Hello there"), seen=seen))
    r = client.post("/v1/insights/reflection", json={"entry": "Today was hard."})
    assert r.status_code == 200
    assert r.json() == {"ok": True, "text": "Hello there"}
    assert request_json(seen[0])["model"] == "deepseek-chat"


def test_reflection_endpoint_uses_context():
    seen = []
    _reply_with(json_handler(chat_body("ok"), seen=seen))
    body = {"entry": "entry", "context": {"goals": ["clarity"], "challenges": ["stuck"]}}
    r = client.post("/v1/insights/reflection", json=body)
    assert r.status_code == 200
    prompt = request_json(seen[0])["messages"][0]["content"]
    assert "achieving mental clarity" in prompt
    assert "feeling stuck in same patterns" in prompt


def test_provider_outage_still_answers_200():
    def handler(request):
        raise httpx.ConnectError("down", request=request)

    _reply_with(handler)
    r = client.post("/v1/insights/reflection", json={"entry": "entry"})
    assert r.status_code == 200
    assert r.json()["text"] == FALLBACK_REFLECTION

    r = client.post("/v1/insights/analysis", json={"entry": "entry"})
    assert r.status_code == 200
    assert r.json()["analysis"] == fallback_analysis().model_dump()


def test_analysis_endpoint_normalizes_reply():
    raw = {
        "themes": [{"name": "Work", "count": 8, "breakdown": "Deadlines", "insights": ["Busy"], "emoji": "💼"}],
        "emotions": [{"name": "Stressed", "percentage": 80}, {"name": "Hopeful", "percentage": 40}],
        "perspective": "You are coping.",
    }
    _reply_with(json_handler(chat_body("Here you go:\n" + json.dumps(raw))))
    r = client.post("/v1/insights/analysis", json={"entry": "Deadline week."})
    assert r.status_code == 200
    analysis = r.json()["analysis"]
    assert analysis["themes"][0]["count"] == 5
    assert [e["percentage"] for e in analysis["emotions"]] == [67, 33]
    assert analysis["emotions"][0]["color"] == "#EF4444"


def test_title_endpoint_falls_back_to_dated_title():
    _reply_with(json_handler({"error": "quota"}, status_code=429))
    r = client.post("/v1/insights/title", json={"entry": "entry"})
    assert r.status_code == 200
    assert r.json()["text"].startswith("Journal Entry - ")


def test_all_endpoint_combines_tasks():
    _reply_with(json_handler(chat_body('{"themes": [], "emotions": [], "perspective": "Be kind."}')))
    r = client.post("/v1/insights/all", json={"entry": "entry"})
    assert r.status_code == 200
    body = r.json()
    assert set(body) == {"ok", "title", "reflection", "perspective", "analysis"}
    assert body["analysis"]["perspective"] == "Be kind."


def test_missing_entry_is_rejected():
    r = client.post("/v1/insights/reflection", json={})
    assert r.status_code == 422
