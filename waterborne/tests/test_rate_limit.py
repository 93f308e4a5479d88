from waterborne import settings


def test_chat_rate_limit_envelope(client, monkeypatch):
    monkeypatch.setattr(settings, "CHAT_RATE_LIMIT", "2/minute")
    for _ in range(2):
        assert client.post("/api/chat", json={"message": "hello"}).status_code == 200
    r = client.post("/api/chat", json={"message": "hello"})
    assert r.status_code == 429
    j = r.json()
    assert j["code"] == "TOO_MANY_REQUESTS"
    assert j["trace_id"]
    assert r.headers["retry-after"] == "60"


def test_analysis_rate_limit_is_separate(client, monkeypatch):
    monkeypatch.setattr(settings, "ANALYSIS_RATE_LIMIT", "1/minute")
    assert client.post("/api/analysis", json={"symptoms": ["fever"]}).status_code == 200
    assert client.post("/api/analysis", json={"symptoms": ["fever"]}).status_code == 429
    # chat keeps its own limit
    assert client.post("/api/chat", json={"message": "hello"}).status_code == 200
