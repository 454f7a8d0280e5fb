"""
Tests: api/http_api.py and api/routes/*

All requests go through `TestClient` against an in-memory database.
"""

import pytest

from prompt_manager.core.errors import HttpError


@pytest.fixture
def category_id(client):
    res = client.post("/api/categories", json={"name": "People"})
    assert res.status_code == 201
    return res.json()["id"]


def test_health(client):
    assert client.get("/api/health").json() == {"ok": True}


# ──────────────────────────────────────────────────────────────────────────────
# CRUD
# ──────────────────────────────────────────────────────────────────────────────

def test_creates_category_and_phrase(client, category_id):
    res = client.post("/api/phrases", json={"category_id": category_id, "text": "a thoughtful portrait"})
    assert res.status_code == 201
    assert res.json()["category_id"] == category_id

    listed = client.get("/api/phrases", params={"category_id": category_id})
    assert listed.status_code == 200
    assert len(listed.json()) == 1


def test_duplicate_phrase_conflict(client, category_id):
    client.post("/api/phrases", json={"category_id": category_id, "text": "Red Hair"})
    res = client.post("/api/phrases", json={"category_id": category_id, "text": "red  hair"})
    assert res.status_code == 409
    assert "error" in res.json()


def test_bulk_phrases(client, category_id):
    res = client.post(
        "/api/phrases/bulk",
        json={"category_id": category_id, "lines": "Red Hair\nred  hair\nBlue Eyes"},
    )
    assert res.status_code == 201
    body = res.json()
    assert (body["count"], body["skipped"], body["duplicates"]) == (2, 1, ["red  hair"])


def test_update_and_delete_phrase(client, category_id):
    phrase = client.post("/api/phrases", json={"category_id": category_id, "text": "smile"}).json()

    res = client.put(f"/api/phrases/{phrase['id']}", json={"favorite": 1, "text": " big smile "})
    assert res.status_code == 200
    assert res.json()["favorite"] == 1
    assert res.json()["text"] == "big smile"

    assert client.delete(f"/api/phrases/{phrase['id']}").status_code == 204
    assert client.delete(f"/api/phrases/{phrase['id']}").status_code == 404


def test_rename_and_delete_category(client, category_id):
    res = client.put(f"/api/categories/{category_id}", json={"name": "Faces"})
    assert res.json()["name"] == "Faces"
    assert client.delete(f"/api/categories/{category_id}").status_code == 204
    assert client.get("/api/categories").json() == []


def test_validation_errors_are_400(client):
    res = client.post("/api/categories", json={"name": ""})
    assert res.status_code == 400
    assert "name" in res.json()["error"]

    res = client.put("/api/settings", json={"lm_temperature": 5})
    assert res.status_code == 400

    res = client.post("/api/join", json={"tokens": ["a"], "join_mode": "dash"})
    assert res.status_code == 400


# ──────────────────────────────────────────────────────────────────────────────
# Join / split / export
# ──────────────────────────────────────────────────────────────────────────────

def test_join_uses_stored_mode_when_omitted(client):
    client.put("/api/settings", json={"join_mode": "comma"})
    res = client.post("/api/join", json={"tokens": ["red hair", ",", "blue eyes", ","]})
    assert res.json() == {"text": "red hair, blue eyes", "join_mode": "comma"}


def test_join_explicit_mode_overrides_setting(client):
    res = client.post("/api/join", json={"tokens": ["A tall tree", "A small house."], "join_mode": "sentence"})
    assert res.json()["text"] == "A tall tree. A small house."


def test_split_endpoint(client):
    res = client.post("/api/split", json={"content": "a, b, c", "join_mode": "comma"})
    assert res.json()["tokens"] == ["a", "b", "c"]


def test_export_writes_file(client, tmp_path):
    output_path = tmp_path / "nested" / "prompt.txt"
    client.put("/api/settings", json={"prompt_output_path": str(output_path)})

    res = client.post("/api/export", json={"tokens": ["a beautiful girl", "sitting", "in a park"]})
    assert res.status_code == 200
    body = res.json()
    assert body["ok"] is True
    assert body["bytes_written"] == len("a beautiful girl sitting in a park")
    assert output_path.read_text(encoding="utf-8") == "a beautiful girl sitting in a park"

    entries = client.get("/api/history").json()
    assert entries[0]["source"] == "export"
    assert entries[0]["tokens"] == ["a beautiful girl", "sitting", "in a park"]


def test_export_counts_utf8_bytes(client, tmp_path):
    output_path = tmp_path / "prompt.txt"
    client.put("/api/settings", json={"prompt_output_path": str(output_path)})
    res = client.post("/api/export", json={"tokens": ["café"], "join_mode": "space"})
    assert res.json()["bytes_written"] == 5


def test_empty_export_still_writes_and_records_history(client, tmp_path):
    output_path = tmp_path / "prompt.txt"
    output_path.write_text("stale", encoding="utf-8")
    client.put("/api/settings", json={"prompt_output_path": str(output_path)})

    res = client.post("/api/export", json={"tokens": []})
    assert res.status_code == 200
    assert (res.json()["bytes_written"], res.json()["final_text"]) == (0, "")
    assert output_path.read_text(encoding="utf-8") == ""

    entries = client.get("/api/history").json()
    assert len(entries) == 1
    assert (entries[0]["source"], entries[0]["content"], entries[0]["tokens"]) == ("export", "", [])


def test_check_path(client, tmp_path):
    target = tmp_path / "deep" / "out.txt"
    res = client.post("/api/settings/check-path", json={"prompt_output_path": str(target)})
    assert res.json() == {"ok": True, "path": str(target)}
    assert target.exists()


# ──────────────────────────────────────────────────────────────────────────────
# Prompts & history
# ──────────────────────────────────────────────────────────────────────────────

def test_prompt_lifecycle(client):
    res = client.post("/api/prompts", json={"title": "Park", "tokens": ["girl", "park"], "join_mode": "comma"})
    assert res.status_code == 201
    prompt = res.json()
    assert prompt["content"] == "girl, park"

    res = client.put(f"/api/prompts/{prompt['id']}", json={"tokens": ["girl", "lake"], "join_mode": "comma"})
    assert res.json()["content"] == "girl, lake"

    tokens = client.get(f"/api/prompts/{prompt['id']}/tokens").json()["tokens"]
    assert tokens == ["girl", "lake"]

    assert client.delete(f"/api/prompts/{prompt['id']}").status_code == 204
    assert client.get("/api/prompts").json() == []


def test_prompt_requires_content_or_tokens(client):
    res = client.post("/api/prompts", json={"title": "empty"})
    assert res.status_code == 400


def test_history_restore_splits_content(client):
    entry = client.post("/api/history", json={"source": "manual-save", "content": "One. Two."}).json()
    res = client.get(f"/api/history/{entry['id']}/tokens", params={"join_mode": "sentence"})
    assert res.json()["tokens"] == ["One", "Two"]


# ──────────────────────────────────────────────────────────────────────────────
# Settings, backup, LM
# ──────────────────────────────────────────────────────────────────────────────

def test_settings_update_coerces_flags(client):
    res = client.put("/api/settings", json={"lm_use_top_p": 0, "lm_model": "qwen"})
    body = res.json()
    assert body["lm_use_top_p"] is False
    assert body["lm_model"] == "qwen"
    assert client.get("/api/settings").json()["lm_model"] == "qwen"


def test_backup_export_import(client, category_id):
    client.post("/api/phrases", json={"category_id": category_id, "text": "portrait"})
    snapshot = client.get("/api/backup/export").json()

    client.delete(f"/api/categories/{category_id}")
    assert client.post("/api/backup/import", json=snapshot).json() == {"ok": True}
    assert [p["text"] for p in client.get("/api/phrases").json()] == ["portrait"]


def test_lm_endpoint_returns_model_text(client, monkeypatch):
    captured = {}

    def fake_transform(mode, text, settings):
        captured["args"] = (mode, text, settings["lm_base_url"])
        return "a red fox"

    monkeypatch.setattr("prompt_manager.api.routes.lm.transform_text", fake_transform)
    res = client.post("/api/lm", json={"mode": "ru2en", "text": "рыжая лиса"})
    assert res.json() == {"text": "a red fox"}
    assert captured["args"][1] == "рыжая лиса"


def test_lm_endpoint_propagates_upstream_status(client, monkeypatch):
    def failing(mode, text, settings):
        raise HttpError(503, "model not loaded")

    monkeypatch.setattr("prompt_manager.api.routes.lm.transform_text", failing)
    res = client.post("/api/lm", json={"mode": "improve", "text": "cat"})
    assert res.status_code == 503
    assert res.json() == {"error": "model not loaded"}


def test_lm_endpoint_rejects_unknown_mode(client):
    assert client.post("/api/lm", json={"mode": "fr2en", "text": "x"}).status_code == 400
