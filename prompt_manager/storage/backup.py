"""Full-database backup export and import.

Export returns every table as a list of raw rows plus the settings record.
Import replaces categories, phrases, prompts, and history in one transaction
and merges the supplied settings over the defaults; any failure rolls the
whole import back.
"""

import logging
import sqlite3

from prompt_manager.core.errors import HttpError
from prompt_manager.prompting.join_engine import coerce_join_mode
from prompt_manager.storage.records import dump_tokens
from prompt_manager.storage.settings import default_settings, get_settings, write_settings


logger = logging.getLogger(__name__)


INSERT_CATEGORY = (
    "INSERT INTO category (id, name, order_index, created_at, updated_at) "
    "VALUES (:id, :name, :order_index, :created_at, :updated_at)"
)
INSERT_PHRASE = (
    "INSERT INTO phrase (id, category_id, text, favorite, order_index, created_at, updated_at) "
    "VALUES (:id, :category_id, :text, :favorite, :order_index, :created_at, :updated_at)"
)
INSERT_PROMPT = (
    "INSERT INTO prompt_saved (id, title, content, tokens_json, created_at, updated_at) "
    "VALUES (:id, :title, :content, :tokens_json, :created_at, :updated_at)"
)
INSERT_HISTORY = (
    "INSERT INTO prompt_history (id, content, tokens_json, created_at, source) "
    "VALUES (:id, :content, :tokens_json, :created_at, :source)"
)


def export_backup(db) -> dict:
    with db.transaction() as conn:
        payload = {
            "categories": [dict(row) for row in conn.execute("SELECT * FROM category")],
            "phrases": [dict(row) for row in conn.execute("SELECT * FROM phrase")],
            "prompts": [dict(row) for row in conn.execute("SELECT * FROM prompt_saved")],
            "history": [dict(row) for row in conn.execute("SELECT * FROM prompt_history")],
        }
    payload["settings"] = get_settings(db)
    return payload


def _with_tokens_json(item: dict) -> dict:
    # Accept API-shaped records that carry a decoded `tokens` list.
    row = dict(item)
    if "tokens_json" not in row:
        row["tokens_json"] = dump_tokens(row.get("tokens"))
    return row


def import_backup(db, payload: dict) -> None:
    """Replace stored data with the contents of a backup payload.

    Args:
        db: Open `Database`.
        payload: Dict with `categories`, `phrases`, `prompts`, `history` row
            lists and an optional `settings` dict.

    Raises:
        HttpError: 400 when a row is missing a column, violates a constraint,
            or the settings carry an unknown join mode.
    """
    try:
        with db.transaction() as conn:
            conn.execute("DELETE FROM phrase")
            conn.execute("DELETE FROM category")
            conn.execute("DELETE FROM prompt_saved")
            conn.execute("DELETE FROM prompt_history")

            for item in payload.get("categories", []):
                conn.execute(INSERT_CATEGORY, item)
            for item in payload.get("phrases", []):
                conn.execute(INSERT_PHRASE, {"favorite": 0, **item, "order_index": item.get("order_index") or 0})
            for item in payload.get("prompts", []):
                conn.execute(INSERT_PROMPT, _with_tokens_json(item))
            for item in payload.get("history", []):
                conn.execute(INSERT_HISTORY, _with_tokens_json(item))

            settings = payload.get("settings")
            if settings:
                merged = {**default_settings(), **settings}
                merged["join_mode"] = coerce_join_mode(merged["join_mode"])
                write_settings(conn, merged)
    except (sqlite3.Error, KeyError, TypeError, ValueError) as err:
        logger.exception("Backup import failed")
        raise HttpError(400, f"Import failed: {err}") from err

    logger.info(
        "Imported backup: %d categories, %d phrases, %d prompts, %d history entries",
        len(payload.get("categories", [])),
        len(payload.get("phrases", [])),
        len(payload.get("prompts", [])),
        len(payload.get("history", [])),
    )
