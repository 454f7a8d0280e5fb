"""Category persistence.

Categories are ordered by `order_index`; new categories are appended after the
current maximum. Deleting a category deletes its phrases.
"""

import logging

from prompt_manager.core.errors import NotFoundError
from prompt_manager.storage.database import new_id, now_iso


logger = logging.getLogger(__name__)


def list_categories(db) -> list:
    with db.transaction() as conn:
        rows = conn.execute("SELECT * FROM category ORDER BY order_index ASC").fetchall()
    return [dict(row) for row in rows]


def create_category(db, name: str) -> dict:
    with db.transaction() as conn:
        max_order = conn.execute("SELECT MAX(order_index) FROM category").fetchone()[0]
        now = now_iso()
        row = {
            "id": new_id(),
            "name": name,
            "order_index": (max_order or 0) + 1,
            "created_at": now,
            "updated_at": now,
        }
        conn.execute(
            "INSERT INTO category (id, name, order_index, created_at, updated_at) "
            "VALUES (:id, :name, :order_index, :created_at, :updated_at)",
            row,
        )
    logger.info("Created category %s (%r)", row["id"], name)
    return row


def update_category(db, category_id: str, name=None, order_index=None) -> dict:
    with db.transaction() as conn:
        existing = conn.execute("SELECT * FROM category WHERE id = ?", (category_id,)).fetchone()
        if existing is None:
            raise NotFoundError("Category not found")
        updated = dict(existing)
        if name is not None:
            updated["name"] = name
        if order_index is not None:
            updated["order_index"] = order_index
        updated["updated_at"] = now_iso()
        conn.execute(
            "UPDATE category SET name = :name, order_index = :order_index, "
            "updated_at = :updated_at WHERE id = :id",
            updated,
        )
    return updated


def delete_category(db, category_id: str) -> None:
    with db.transaction() as conn:
        existing = conn.execute("SELECT id FROM category WHERE id = ?", (category_id,)).fetchone()
        if existing is None:
            raise NotFoundError("Category not found")
        conn.execute("DELETE FROM phrase WHERE category_id = ?", (category_id,))
        conn.execute("DELETE FROM category WHERE id = ?", (category_id,))
    logger.info("Deleted category %s", category_id)
