"""Saved-prompt persistence.

A saved prompt keeps its title, the joined content, and (optionally) the
cleaned token list it was built from. When a request supplies tokens but no
content, the content is built with the join mode passed by the caller.
"""

from prompt_manager.core.errors import HttpError, NotFoundError
from prompt_manager.storage.database import new_id, now_iso
from prompt_manager.storage.records import (
    clean_tokens,
    dump_tokens,
    resolve_content,
    restore_tokens,
    row_to_record,
)


def list_prompts(db) -> list:
    with db.transaction() as conn:
        rows = conn.execute("SELECT * FROM prompt_saved ORDER BY updated_at DESC, rowid DESC").fetchall()
    return [row_to_record(row) for row in rows]


def get_prompt(db, prompt_id: str) -> dict:
    with db.transaction() as conn:
        row = conn.execute("SELECT * FROM prompt_saved WHERE id = ?", (prompt_id,)).fetchone()
    if row is None:
        raise NotFoundError("Prompt not found")
    return row_to_record(row)


def create_prompt(db, join_mode, title=None, content=None, tokens=None) -> dict:
    tokens = clean_tokens(tokens)
    if not (content and content.strip()) and not tokens:
        raise HttpError(400, "content or tokens required")

    now = now_iso()
    row = {
        "id": new_id(),
        "title": (title or "").strip(),
        "content": resolve_content(content, tokens, join_mode),
        "tokens_json": dump_tokens(tokens),
        "created_at": now,
        "updated_at": now,
    }
    with db.transaction() as conn:
        conn.execute(
            "INSERT INTO prompt_saved (id, title, content, tokens_json, created_at, updated_at) "
            "VALUES (:id, :title, :content, :tokens_json, :created_at, :updated_at)",
            row,
        )
    return row_to_record(row)


def update_prompt(db, prompt_id: str, join_mode, title=None, content=None, tokens=None) -> dict:
    tokens = clean_tokens(tokens)
    with db.transaction() as conn:
        existing = conn.execute("SELECT * FROM prompt_saved WHERE id = ?", (prompt_id,)).fetchone()
        if existing is None:
            raise NotFoundError("Prompt not found")
        updated = dict(existing)
        if title is not None:
            updated["title"] = title.strip()
        updated["content"] = resolve_content(content, tokens, join_mode, fallback=existing["content"])
        if tokens is not None:
            updated["tokens_json"] = dump_tokens(tokens)
        updated["updated_at"] = now_iso()
        conn.execute(
            "UPDATE prompt_saved SET title = :title, content = :content, "
            "tokens_json = :tokens_json, updated_at = :updated_at WHERE id = :id",
            updated,
        )
    return row_to_record(updated)


def delete_prompt(db, prompt_id: str) -> None:
    with db.transaction() as conn:
        existing = conn.execute("SELECT id FROM prompt_saved WHERE id = ?", (prompt_id,)).fetchone()
        if existing is None:
            raise NotFoundError("Prompt not found")
        conn.execute("DELETE FROM prompt_saved WHERE id = ?", (prompt_id,))


def prompt_tokens(db, prompt_id: str, join_mode) -> list:
    """Return the tokens to reload a saved prompt into the builder."""
    return restore_tokens(get_prompt(db, prompt_id), join_mode)
