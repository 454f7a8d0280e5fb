"""Single-row application settings persistence.

The settings row (id 1) holds the stored join mode, the export path, and the
LLM connection parameters. The join mode stored here is only a default: API
handlers read it to fill an omitted request field and then pass the mode
explicitly into the join engine.

Boolean flags (`lm_use_*`) are stored as 0/1 integers and returned as `bool`.
"""

import sqlite3

from prompt_manager.config import DEFAULT_PROMPT_OUTPUT_PATH
from prompt_manager.llm.provider_config import (
    DEFAULT_LM_BASE_URL,
    DEFAULT_LM_TEMPERATURE,
    DEFAULT_LM_TOP_K,
    DEFAULT_LM_TOP_P,
    default_lm_api_key,
)
from prompt_manager.prompting.join_engine import JoinMode

SETTINGS_ID = 1

BOOLEAN_FIELDS = ("lm_use_temperature", "lm_use_top_p", "lm_use_top_k")

SETTINGS_FIELDS = (
    "prompt_output_path",
    "join_mode",
    "lm_base_url",
    "lm_api_key",
    "lm_model",
    "lm_temperature",
    "lm_top_p",
    "lm_top_k",
) + BOOLEAN_FIELDS


def default_settings() -> dict:
    """Return the settings used to seed an empty database."""
    return {
        "id": SETTINGS_ID,
        "prompt_output_path": DEFAULT_PROMPT_OUTPUT_PATH,
        "join_mode": JoinMode.SPACE.value,
        "lm_base_url": DEFAULT_LM_BASE_URL,
        "lm_api_key": default_lm_api_key(),
        "lm_model": None,
        "lm_temperature": DEFAULT_LM_TEMPERATURE,
        "lm_top_p": DEFAULT_LM_TOP_P,
        "lm_top_k": DEFAULT_LM_TOP_K,
        "lm_use_temperature": 1,
        "lm_use_top_p": 1,
        "lm_use_top_k": 1,
    }


def _to_storage(values: dict) -> dict:
    stored = dict(values)
    for name in BOOLEAN_FIELDS:
        stored[name] = 1 if stored[name] else 0
    if isinstance(stored["join_mode"], JoinMode):
        stored["join_mode"] = stored["join_mode"].value
    return stored


def _from_row(row: sqlite3.Row) -> dict:
    settings = dict(row)
    for name in BOOLEAN_FIELDS:
        settings[name] = bool(settings[name])
    return settings


def write_settings(conn: sqlite3.Connection, values: dict) -> None:
    """Overwrite the settings row with `values` (all `SETTINGS_FIELDS` required)."""
    stored = _to_storage(values)
    assignments = ", ".join(f"{name} = :{name}" for name in SETTINGS_FIELDS)
    conn.execute(
        f"UPDATE app_settings SET {assignments} WHERE id = {SETTINGS_ID}",
        {name: stored[name] for name in SETTINGS_FIELDS},
    )


def seed_settings(conn: sqlite3.Connection) -> None:
    """Insert the default settings row when the table is empty."""
    row = conn.execute("SELECT id FROM app_settings WHERE id = ?", (SETTINGS_ID,)).fetchone()
    if row:
        return
    columns = ("id",) + SETTINGS_FIELDS
    placeholders = ", ".join(f":{name}" for name in columns)
    conn.execute(
        f"INSERT INTO app_settings ({', '.join(columns)}) VALUES ({placeholders})",
        _to_storage(default_settings()),
    )


def get_settings(db) -> dict:
    with db.transaction() as conn:
        row = conn.execute("SELECT * FROM app_settings WHERE id = ?", (SETTINGS_ID,)).fetchone()
    return _from_row(row)


def get_join_mode(db) -> JoinMode:
    """Return the stored default join mode."""
    return JoinMode(get_settings(db)["join_mode"])


def update_settings(db, patch: dict) -> dict:
    """Merge `patch` into the stored settings and return the result.

    Keys not in `SETTINGS_FIELDS` are ignored. `None` values are applied only
    for `lm_model`, the one nullable field.
    """
    with db.transaction() as conn:
        row = conn.execute("SELECT * FROM app_settings WHERE id = ?", (SETTINGS_ID,)).fetchone()
        current = _from_row(row)
        for name, value in patch.items():
            if name not in SETTINGS_FIELDS:
                continue
            if value is None and name != "lm_model":
                continue
            current[name] = value
        write_settings(conn, current)
    return _from_row_dict(current)


def _from_row_dict(values: dict) -> dict:
    settings = _to_storage(values)
    for name in BOOLEAN_FIELDS:
        settings[name] = bool(settings[name])
    return settings
