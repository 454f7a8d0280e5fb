"""Prompt history persistence.

History entries are append-only snapshots of exported, saved, or restored
prompts. `source` labels the originating action (for example `export`,
`manual-save`, `restore`).
"""

from prompt_manager.config import DEFAULT_HISTORY_LIMIT
from prompt_manager.core.errors import HttpError, NotFoundError
from prompt_manager.storage.database import new_id, now_iso
from prompt_manager.storage.records import (
    clean_tokens,
    dump_tokens,
    resolve_content,
    restore_tokens,
    row_to_record,
)


def list_history(db, limit: int = DEFAULT_HISTORY_LIMIT) -> list:
    with db.transaction() as conn:
        rows = conn.execute(
            "SELECT * FROM prompt_history ORDER BY created_at DESC, rowid DESC LIMIT ?", (limit,)
        ).fetchall()
    return [row_to_record(row) for row in rows]


def get_history_entry(db, entry_id: str) -> dict:
    with db.transaction() as conn:
        row = conn.execute("SELECT * FROM prompt_history WHERE id = ?", (entry_id,)).fetchone()
    if row is None:
        raise NotFoundError("History item not found")
    return row_to_record(row)


def add_history(db, source: str, join_mode, content=None, tokens=None, allow_empty=False) -> dict:
    """Append a history entry.

    Args:
        db: Open `Database`.
        source: Originating action label.
        join_mode: Mode used to build content when only tokens are given.
        content: Joined prompt text; wins over tokens when non-blank.
        tokens: Raw token list; cleaned before storage.
        allow_empty: Store the entry even when it carries no text, as exports do.

    Raises:
        HttpError: 400 when neither content nor tokens carry text and
            `allow_empty` is not set.
    """
    tokens = clean_tokens(tokens)
    if not allow_empty and not (content and content.strip()) and not tokens:
        raise HttpError(400, "content or tokens required")

    row = {
        "id": new_id(),
        "content": resolve_content(content, tokens, join_mode),
        "tokens_json": dump_tokens(tokens),
        "created_at": now_iso(),
        "source": source,
    }
    with db.transaction() as conn:
        conn.execute(
            "INSERT INTO prompt_history (id, content, tokens_json, created_at, source) "
            "VALUES (:id, :content, :tokens_json, :created_at, :source)",
            row,
        )
    return row_to_record(row)


def delete_history_entry(db, entry_id: str) -> None:
    with db.transaction() as conn:
        existing = conn.execute("SELECT id FROM prompt_history WHERE id = ?", (entry_id,)).fetchone()
        if existing is None:
            raise NotFoundError("History item not found")
        conn.execute("DELETE FROM prompt_history WHERE id = ?", (entry_id,))


def history_tokens(db, entry_id: str, join_mode) -> list:
    """Return the tokens to restore a history entry into the builder."""
    return restore_tokens(get_history_entry(db, entry_id), join_mode)
