"""
Tests: storage/*

Repository functions are exercised against an in-memory database; the
migration test uses a file database created with an older schema.
"""

import sqlite3
import threading

import pytest

from prompt_manager.core.errors import ConflictError, HttpError, NotFoundError
from prompt_manager.prompting.join_engine import JoinMode
from prompt_manager.storage import backup, categories, history, phrases, prompts, settings
from prompt_manager.storage.database import Database


@pytest.fixture
def category(db):
    return categories.create_category(db, "People")


# ──────────────────────────────────────────────────────────────────────────────
# Categories
# ──────────────────────────────────────────────────────────────────────────────

def test_categories_are_appended_in_order(db):
    first = categories.create_category(db, "People")
    second = categories.create_category(db, "Places")
    assert (first["order_index"], second["order_index"]) == (1, 2)
    assert [c["name"] for c in categories.list_categories(db)] == ["People", "Places"]


def test_update_category_partial(db, category):
    updated = categories.update_category(db, category["id"], order_index=7)
    assert updated["name"] == "People"
    assert updated["order_index"] == 7


def test_delete_category_removes_its_phrases(db, category):
    phrases.add_phrase(db, category["id"], "portrait")
    categories.delete_category(db, category["id"])
    assert phrases.list_phrases(db) == []
    with pytest.raises(NotFoundError):
        categories.delete_category(db, category["id"])


# ──────────────────────────────────────────────────────────────────────────────
# Phrases
# ──────────────────────────────────────────────────────────────────────────────

def test_add_phrase_trims_and_orders(db, category):
    first = phrases.add_phrase(db, category["id"], "  a thoughtful portrait ")
    second = phrases.add_phrase(db, category["id"], "soft light")
    assert first["text"] == "a thoughtful portrait"
    assert (first["order_index"], second["order_index"]) == (1, 2)
    assert first["favorite"] == 0


def test_add_phrase_rejects_normalized_duplicate(db, category):
    phrases.add_phrase(db, category["id"], "Red Hair")
    with pytest.raises(ConflictError):
        phrases.add_phrase(db, category["id"], "  red   HAIR")


def test_same_text_allowed_in_other_category(db, category):
    other = categories.create_category(db, "Other")
    phrases.add_phrase(db, category["id"], "red hair")
    assert phrases.add_phrase(db, other["id"], "red hair")["category_id"] == other["id"]


def test_add_phrase_unknown_category(db):
    with pytest.raises(NotFoundError):
        phrases.add_phrase(db, "missing", "text")


def test_bulk_add_reports_duplicates(db, category):
    result = phrases.bulk_add_phrases(db, category["id"], "Red Hair\nred  hair\n\nBlue Eyes")
    assert result["count"] == 2
    assert result["skipped"] == 1
    assert result["duplicates"] == ["red  hair"]
    assert [p["text"] for p in phrases.list_phrases(db, category["id"])] == ["Red Hair", "Blue Eyes"]


def test_bulk_add_checks_existing_snapshot(db, category):
    phrases.add_phrase(db, category["id"], "blue eyes")
    result = phrases.bulk_add_phrases(db, category["id"], "BLUE EYES\nfreckles")
    assert result["duplicates"] == ["BLUE EYES"]
    assert [row["order_index"] for row in result["inserted"]] == [2]


def test_concurrent_bulk_adds_are_serialized(db, category):
    workers = 8
    barrier = threading.Barrier(workers)
    results, errors = [], []

    def worker():
        barrier.wait()
        try:
            results.append(phrases.bulk_add_phrases(db, category["id"], "A\nB\nC"))
        except Exception as err:
            errors.append(err)

    threads = [threading.Thread(target=worker) for _ in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    assert sorted(r["count"] for r in results) == [0] * (workers - 1) + [3]
    rows = phrases.list_phrases(db, category["id"])
    assert [(r["text"], r["order_index"]) for r in rows] == [("A", 1), ("B", 2), ("C", 3)]


def test_move_phrase_appends_to_target_category(db, category):
    target = categories.create_category(db, "Target")
    phrases.add_phrase(db, target["id"], "existing")
    moved = phrases.add_phrase(db, category["id"], "mover")

    updated = phrases.update_phrase(db, moved["id"], category_id=target["id"], favorite=1)
    assert updated["category_id"] == target["id"]
    assert updated["order_index"] == 2
    assert updated["favorite"] == 1


def test_update_phrase_rejects_blank_text(db, category):
    phrase = phrases.add_phrase(db, category["id"], "x")
    with pytest.raises(HttpError) as excinfo:
        phrases.update_phrase(db, phrase["id"], text="   ")
    assert excinfo.value.status_code == 400


# ──────────────────────────────────────────────────────────────────────────────
# Prompts & history
# ──────────────────────────────────────────────────────────────────────────────

def test_create_prompt_builds_content_from_tokens(db):
    record = prompts.create_prompt(db, JoinMode.COMMA, title=" Portrait ", tokens=[" red hair", ",", "blue eyes "])
    assert record["title"] == "Portrait"
    assert record["content"] == "red hair, blue eyes"
    assert record["tokens"] == ["red hair", ",", "blue eyes"]


def test_create_prompt_prefers_explicit_content(db):
    record = prompts.create_prompt(db, "space", content="  hand written  ", tokens=["a", "b"])
    assert record["content"] == "hand written"


def test_create_prompt_requires_content_or_tokens(db):
    with pytest.raises(HttpError):
        prompts.create_prompt(db, "space", content="   ", tokens=["", " "])


def test_update_prompt_keeps_content_without_new_input(db):
    record = prompts.create_prompt(db, "space", content="keep me")
    updated = prompts.update_prompt(db, record["id"], "space", title="renamed")
    assert updated["content"] == "keep me"
    assert updated["title"] == "renamed"
    assert updated["tokens"] == []


def test_prompt_tokens_fall_back_to_split(db):
    record = prompts.create_prompt(db, "space", content="One. Two.")
    assert prompts.prompt_tokens(db, record["id"], "sentence") == ["One", "Two"]
    assert prompts.prompt_tokens(db, record["id"], "space") == ["One. Two."]


def test_history_lists_newest_first_with_limit(db):
    for label in ("first", "second", "third"):
        history.add_history(db, "manual-save", "space", content=label)
    entries = history.list_history(db, limit=2)
    assert [e["content"] for e in entries] == ["third", "second"]


def test_history_tokens_prefer_stored_tokens(db):
    entry = history.add_history(db, "export", "comma", tokens=["a, b", "c"])
    assert history.history_tokens(db, entry["id"], "comma") == ["a, b", "c"]


def test_history_rejects_empty_entry_unless_allowed(db):
    with pytest.raises(HttpError):
        history.add_history(db, "manual-save", "space", content="  ", tokens=[])
    entry = history.add_history(db, "export", "space", content="", tokens=[], allow_empty=True)
    assert (entry["content"], entry["tokens"]) == ("", [])


def test_delete_missing_history_entry(db):
    with pytest.raises(NotFoundError):
        history.delete_history_entry(db, "nope")


# ──────────────────────────────────────────────────────────────────────────────
# Settings & backup
# ──────────────────────────────────────────────────────────────────────────────

def test_default_settings_are_seeded(db):
    current = settings.get_settings(db)
    assert current["join_mode"] == "space"
    assert current["lm_model"] is None
    assert current["lm_use_temperature"] is True


def test_update_settings_merges_patch(db):
    updated = settings.update_settings(
        db, {"join_mode": JoinMode.SENTENCE, "lm_use_top_k": False, "lm_model": "mistral"}
    )
    assert updated["join_mode"] == "sentence"
    assert updated["lm_use_top_k"] is False
    assert settings.get_join_mode(db) is JoinMode.SENTENCE
    assert settings.get_settings(db)["lm_model"] == "mistral"

    cleared = settings.update_settings(db, {"lm_model": None})
    assert cleared["lm_model"] is None


def test_backup_round_trip(db, category):
    phrases.add_phrase(db, category["id"], "portrait")
    prompts.create_prompt(db, "comma", tokens=["a", "b"])
    history.add_history(db, "export", "space", content="x")
    settings.update_settings(db, {"join_mode": "comma"})
    payload = backup.export_backup(db)

    other = Database(":memory:")
    try:
        backup.import_backup(other, payload)
        assert backup.export_backup(other) == payload
    finally:
        other.close()


def test_backup_import_rolls_back_on_bad_rows(db, category):
    payload = backup.export_backup(db)
    payload["phrases"] = [{"id": "p1", "text": "missing columns"}]
    with pytest.raises(HttpError):
        backup.import_backup(db, payload)
    assert [c["id"] for c in categories.list_categories(db)] == [category["id"]]


def test_backup_import_rejects_unknown_join_mode(db):
    payload = backup.export_backup(db)
    payload["settings"]["join_mode"] = "dash"
    with pytest.raises(HttpError):
        backup.import_backup(db, payload)


# ──────────────────────────────────────────────────────────────────────────────
# Migration
# ──────────────────────────────────────────────────────────────────────────────

def test_old_database_gets_missing_columns_and_phrase_order(tmp_path):
    path = str(tmp_path / "old.sqlite")
    conn = sqlite3.connect(path)
    conn.executescript(
        """
        CREATE TABLE category (id TEXT PRIMARY KEY, name TEXT NOT NULL, order_index INTEGER NOT NULL,
                               created_at TEXT NOT NULL, updated_at TEXT NOT NULL);
        CREATE TABLE phrase (id TEXT PRIMARY KEY, category_id TEXT NOT NULL, text TEXT NOT NULL,
                             favorite INTEGER NOT NULL DEFAULT 0,
                             created_at TEXT NOT NULL, updated_at TEXT NOT NULL);
        INSERT INTO category VALUES ('c1', 'People', 1, '2024-01-01', '2024-01-01');
        INSERT INTO phrase VALUES ('p2', 'c1', 'second', 0, '2024-01-02', '2024-01-02');
        INSERT INTO phrase VALUES ('p1', 'c1', 'first', 0, '2024-01-01', '2024-01-01');
        """
    )
    conn.commit()
    conn.close()

    database = Database(path)
    try:
        rows = phrases.list_phrases(database, "c1")
        assert [(r["id"], r["order_index"]) for r in rows] == [("p1", 1), ("p2", 2)]
    finally:
        database.close()
