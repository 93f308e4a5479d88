def test_analysis_ranks_diseases(client):
    r = client.post("/api/analysis", json={"symptoms": ["fever", "Diarrhea", "vomiting", "dehydration"]})
    assert r.status_code == 200, r.text
    j = r.json()
    assert j["locale"] == "en"
    assert j["detected"] is True
    assert j["symptoms"] == ["fever", "diarrhea", "vomiting", "dehydration"]
    assert [(d["id"], d["probability"]) for d in j["results"]] == [
        ("cholera", 75),
        ("gastroenteritis", 57),
        ("cryptosporidiosis", 57),
    ]
    assert j["results"][0]["name"] == "Cholera"
    assert j["results"][0]["remedies"]
    assert "title" not in j or j["title"] is None


def test_analysis_accepts_localized_labels(client):
    r = client.post("/api/analysis", json={"symptoms": ["दस्त", "जी मिचलाना"], "locale": "hi-IN"})
    assert r.status_code == 200, r.text
    j = r.json()
    assert j["locale"] == "hi"
    assert j["symptoms"] == ["diarrhea", "nausea"]
    assert [d["id"] for d in j["results"]] == ["cholera", "gastroenteritis", "giardiasis"]
    assert j["results"][0]["name"] == "हैजा"
    assert j["results"][0]["probability"] == 50


def test_analysis_empty_selection_reports_nothing_detected(client):
    r = client.post("/api/analysis", json={"symptoms": []})
    assert r.status_code == 200
    j = r.json()
    assert j["results"] == []
    assert j["detected"] is False
    assert j["title"] == "No specific disease detected"
    assert j["message"]


def test_analysis_weak_match_reports_nothing_detected_in_locale(client):
    r = client.post("/api/analysis", json={"symptoms": ["headache"], "locale": "hi"})
    j = r.json()
    assert j["detected"] is False
    assert j["title"] == "कोई विशेष बीमारी नहीं मिली"


def test_analysis_reports_unrecognized_labels(client):
    r = client.post("/api/analysis", json={"symptoms": ["diarrhea", "sneezing"], "locale": "fr"})
    j = r.json()
    assert j["locale"] == "en"
    assert j["unrecognized"] == ["sneezing"]
    assert [(d["id"], d["probability"]) for d in j["results"]] == [("cholera", 25)]


def test_symptom_list_localized(client):
    r = client.get("/api/symptoms", params={"locale": "bn"})
    assert r.status_code == 200
    j = r.json()
    assert j["locale"] == "bn"
    assert {"id": "fever", "label": "জ্বর"} in j["symptoms"]


def test_symptom_list_defaults_to_base(client):
    j = client.get("/api/symptoms").json()
    assert j["locale"] == "en"
    assert j["symptoms"][0] == {"id": "fever", "label": "Fever"}


def test_analysis_delay_is_optional(client, monkeypatch):
    from waterborne import settings
    from waterborne.routes import analysis_routes

    waited = []

    async def fake_sleep(seconds):
        waited.append(seconds)

    monkeypatch.setattr(settings, "ANALYSIS_DELAY_MS", 2500)
    monkeypatch.setattr(analysis_routes.asyncio, "sleep", fake_sleep)
    r = client.post("/api/analysis", json={"symptoms": ["fever"]})
    assert r.status_code == 200
    assert 2.5 in waited
