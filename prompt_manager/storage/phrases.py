"""Phrase persistence with duplicate-aware inserts.

Duplicate handling:
    Single and bulk inserts both go through `plan_bulk_insert`, so the same
    comparison form (trimmed, lower-cased, whitespace-collapsed) applies
    everywhere. The snapshot of existing phrase texts is read inside the same
    transaction that performs the inserts; `Database.transaction` holds the
    connection lock for the whole batch, which serializes concurrent batches.

Ordering:
    Phrases are ordered per category by `order_index`. Inserts append after the
    category's current maximum; moving a phrase to another category without an
    explicit position appends it there too.
"""

import logging

from prompt_manager.core.errors import ConflictError, HttpError, NotFoundError
from prompt_manager.prompting.dedup import plan_bulk_insert, split_lines
from prompt_manager.storage.database import new_id, now_iso


logger = logging.getLogger(__name__)


def _require_category(conn, category_id: str) -> None:
    row = conn.execute("SELECT id FROM category WHERE id = ?", (category_id,)).fetchone()
    if row is None:
        raise NotFoundError("Category not found")


def _next_order(conn, category_id: str) -> int:
    max_order = conn.execute(
        "SELECT MAX(order_index) FROM phrase WHERE category_id = ?", (category_id,)
    ).fetchone()[0]
    return (max_order or 0) + 1


def _existing_texts(conn, category_id: str) -> list:
    rows = conn.execute("SELECT text FROM phrase WHERE category_id = ?", (category_id,)).fetchall()
    return [row["text"] for row in rows]


def _insert(conn, category_id: str, texts: list) -> list:
    order_index = _next_order(conn, category_id)
    now = now_iso()
    inserted = []
    for text in texts:
        row = {
            "id": new_id(),
            "category_id": category_id,
            "text": text,
            "favorite": 0,
            "order_index": order_index,
            "created_at": now,
            "updated_at": now,
        }
        conn.execute(
            "INSERT INTO phrase (id, category_id, text, favorite, order_index, created_at, updated_at) "
            "VALUES (:id, :category_id, :text, :favorite, :order_index, :created_at, :updated_at)",
            row,
        )
        inserted.append(row)
        order_index += 1
    return inserted


def list_phrases(db, category_id=None) -> list:
    with db.transaction() as conn:
        if category_id:
            rows = conn.execute(
                "SELECT * FROM phrase WHERE category_id = ? ORDER BY order_index ASC",
                (category_id,),
            ).fetchall()
        else:
            rows = conn.execute(
                "SELECT * FROM phrase ORDER BY category_id ASC, order_index ASC"
            ).fetchall()
    return [dict(row) for row in rows]


def add_phrase(db, category_id: str, text: str) -> dict:
    """Insert one phrase, rejecting a duplicate of a stored phrase with 409."""
    with db.transaction() as conn:
        _require_category(conn, category_id)
        plan = plan_bulk_insert([text], _existing_texts(conn, category_id))
        if plan.duplicates:
            raise ConflictError("Phrase already exists")
        if not plan.to_insert:
            raise HttpError(400, "Phrase text is empty")
        row = _insert(conn, category_id, plan.to_insert)[0]
    return row


def bulk_add_phrases(db, category_id: str, lines: str) -> dict:
    """Insert newline-separated phrases, skipping duplicates.

    Args:
        db: Open `Database`.
        category_id: Target category.
        lines: Raw text, one phrase per line.

    Returns:
        `{"count", "skipped", "duplicates", "inserted"}` where `duplicates`
        lists the skipped lines as typed and `inserted` the new rows.
    """
    with db.transaction() as conn:
        _require_category(conn, category_id)
        plan = plan_bulk_insert(split_lines(lines), _existing_texts(conn, category_id))
        inserted = _insert(conn, category_id, plan.to_insert)

    if plan.duplicates:
        logger.info(
            "Bulk insert into %s skipped %d duplicate(s)", category_id, len(plan.duplicates)
        )
    return {
        "count": len(inserted),
        "skipped": len(plan.duplicates),
        "duplicates": plan.duplicates,
        "inserted": inserted,
    }


def update_phrase(db, phrase_id: str, text=None, favorite=None, category_id=None, order_index=None) -> dict:
    with db.transaction() as conn:
        existing = conn.execute("SELECT * FROM phrase WHERE id = ?", (phrase_id,)).fetchone()
        if existing is None:
            raise NotFoundError("Phrase not found")
        updated = dict(existing)

        if category_id is not None and category_id != existing["category_id"]:
            _require_category(conn, category_id)
            updated["category_id"] = category_id
            if order_index is None:
                updated["order_index"] = _next_order(conn, category_id)
        if order_index is not None:
            updated["order_index"] = order_index
        if text is not None:
            if not text.strip():
                raise HttpError(400, "Phrase text is empty")
            updated["text"] = text.strip()
        if favorite is not None:
            updated["favorite"] = favorite
        updated["updated_at"] = now_iso()

        conn.execute(
            "UPDATE phrase SET text = :text, favorite = :favorite, category_id = :category_id, "
            "order_index = :order_index, updated_at = :updated_at WHERE id = :id",
            updated,
        )
    return updated


def delete_phrase(db, phrase_id: str) -> None:
    with db.transaction() as conn:
        existing = conn.execute("SELECT id FROM phrase WHERE id = ?", (phrase_id,)).fetchone()
        if existing is None:
            raise NotFoundError("Phrase not found")
        conn.execute("DELETE FROM phrase WHERE id = ?", (phrase_id,))
