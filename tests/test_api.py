# tests/test_api.py

import logging

from app.core.config import settings
from app.core.logger import logger
from app.services import pictogram_engine
from conftest import make_pictogram


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"ok": True, "status": "ok", "service": "Lexipic backend"}

def test_echo(client):
    response = client.post("/api/echo", json={"message": "hola", "language": "es"})
    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert body["received"] == {"message": "hola", "language": "es"}

def test_logger_level_follows_settings():
    assert logger.level == logging.getLevelName(settings.LOG_LEVEL.upper())
    assert logger.propagate is False


# --- Pictogram generation ---

def stub_search(monkeypatch, results_by_query):
    seen = []

    async def fake_search(language, query):
        seen.append((language, query))
        outcome = results_by_query.get(query, [])
        if isinstance(outcome, Exception):
            raise outcome
        return [make_pictogram(i, search_text=query, language=language) for i in outcome]

    monkeypatch.setattr(pictogram_engine, "search_pictograms", fake_search)
    return seen

def test_generate_pictograms(client, monkeypatch):
    stub_search(monkeypatch, {"quiero agua": [1, 2], "quiero": [2, 3], "agua": [4]})

    response = client.post("/api/pictograms/generate", json={"text": "quiero agua", "language": "es"})

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert [p["id"] for p in body["pictograms"]] == [1, 2, 3, 4]
    assert body["usedQueries"] == ["quiero agua", "quiero", "agua"]
    assert body["pictograms"][0]["searchText"] == "quiero agua"
    assert body["pictograms"][0]["imageUrl"].endswith("/1/1_500.png")
    assert "message" not in body

def test_generate_pictograms_partial_upstream_failure(client, monkeypatch):
    from app.utils.errors import SearchUnavailable
    stub_search(monkeypatch, {
        "comer pan ahora": [1],
        "comer": SearchUnavailable("500"),
        "pan": [2],
    })

    body = client.post("/api/pictograms/generate", json={"text": "comer pan ahora"}).json()

    assert [p["id"] for p in body["pictograms"]] == [1, 2]
    assert body["usedQueries"] == ["comer pan ahora", "pan"]

def test_generate_pictograms_caps_at_six(client, monkeypatch):
    stub_search(monkeypatch, {"uno dos tres": list(range(1, 8)), "uno": [8, 9], "dos": [10]})
    body = client.post("/api/pictograms/generate", json={"text": "uno dos tres"}).json()
    assert [p["id"] for p in body["pictograms"]] == [1, 2, 3, 4, 5, 6]

def test_generate_pictograms_nothing_found(client, monkeypatch):
    stub_search(monkeypatch, {})
    response = client.post("/api/pictograms/generate", json={"text": "xyz"})
    assert response.status_code == 200
    assert response.json() == {
        "ok": True,
        "pictograms": [],
        "usedQueries": ["xyz"],
        "message": "No pictograms found",
    }

def test_generate_pictograms_defaults_language(client, monkeypatch):
    seen = stub_search(monkeypatch, {"sol": [1]})
    client.post("/api/pictograms/generate", json={"text": "sol", "language": 42})
    assert seen == [("es", "sol")]

def test_generate_pictograms_missing_text(client):
    response = client.post("/api/pictograms/generate", json={"language": "es"})
    assert response.status_code == 400
    assert response.json()["ok"] is False

def test_generate_pictograms_non_string_text(client):
    response = client.post("/api/pictograms/generate", json={"text": 123})
    assert response.status_code == 400

def test_generate_pictograms_blank_text(client):
    response = client.post("/api/pictograms/generate", json={"text": "   "})
    assert response.status_code == 400
    assert response.json() == {"ok": False, "error": "Missing text"}


# --- Broadcast room messages ---

def test_message_round_trip(client):
    pictogram = {
        "id": 7,
        "searchText": "gato",
        "language": "es",
        "keywords": ["gato", "felino"],
        "imageUrl": "https://static.arasaac.org/pictograms/7/7_500.png",
    }
    response = client.post("/api/messages", json={
        "role": "user",
        "text": "el gato",
        "pictograms": [pictogram],
        "sessionId": "s-1",
    })
    assert response.status_code == 201
    created = response.json()["message"]
    assert created["role"] == "user"
    assert created["language"] == "es"
    assert created["sessionId"] == "s-1"
    assert "createdAt" in created and "id" in created

    messages = client.get("/api/messages").json()["messages"]
    assert len(messages) == 1
    assert messages[0]["id"] == created["id"]
    assert messages[0]["pictograms"] == [pictogram]

def test_message_defaults(client):
    created = client.post("/api/messages", json={"role": "assistant"}).json()["message"]
    assert created["text"] == ""
    assert created["pictograms"] == []
    assert created["language"] == "es"
    assert "sessionId" not in created

def test_message_rejects_bad_role(client):
    response = client.post("/api/messages", json={"role": "system", "text": "hi"})
    assert response.status_code == 400
    assert response.json()["ok"] is False
    assert client.get("/api/messages").json()["messages"] == []

def test_messages_newest_first_with_limit(client):
    for i in range(3):
        client.post("/api/messages", json={"role": "user", "text": f"m{i}"})

    texts = [m["text"] for m in client.get("/api/messages").json()["messages"]]
    assert texts == ["m2", "m1", "m0"]

    limited = client.get("/api/messages", params={"limit": 2}).json()["messages"]
    assert [m["text"] for m in limited] == ["m2", "m1"]

def test_messages_default_limit(client):
    for i in range(51):
        client.post("/api/messages", json={"role": "user", "text": f"m{i}"})

    texts = [m["text"] for m in client.get("/api/messages").json()["messages"]]
    assert len(texts) == 50
    assert texts[0] == "m50"
    assert "m0" not in texts

def test_messages_filter_by_session(client):
    client.post("/api/messages", json={"role": "user", "text": "a", "sessionId": "one"})
    client.post("/api/messages", json={"role": "user", "text": "b", "sessionId": "two"})
    messages = client.get("/api/messages", params={"sessionId": "two"}).json()["messages"]
    assert [m["text"] for m in messages] == ["b"]

def test_messages_invalid_limit(client):
    assert client.get("/api/messages", params={"limit": 0}).status_code == 400
