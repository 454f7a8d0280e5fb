"""Helpers shared by the saved-prompt and history repositories.

Both record kinds store a prompt string plus an optional JSON token list.
These helpers decide the stored content from a request and rebuild a token
list from a stored row.
"""

import json
import logging
import sqlite3

from prompt_manager.prompting.join_engine import build_prompt, normalize_tokens, split_prompt


logger = logging.getLogger(__name__)


def parse_tokens(tokens_json) -> list:
    """Decode a stored token list, keeping only string entries.

    Malformed or non-list JSON yields an empty list.
    """
    if not tokens_json:
        return []
    try:
        parsed = json.loads(tokens_json)
    except ValueError:
        logger.warning("Ignoring malformed tokens_json: %r", tokens_json)
        return []
    if not isinstance(parsed, list):
        return []
    return [item for item in parsed if isinstance(item, str)]


def dump_tokens(tokens):
    if tokens is None:
        return None
    return json.dumps(tokens, ensure_ascii=False)


def clean_tokens(tokens):
    """Normalize an optional request token list; `None` stays `None`."""
    if tokens is None:
        return None
    return normalize_tokens(tokens)


def resolve_content(content, tokens, join_mode, fallback: str = "") -> str:
    """Pick the content to store for a prompt or history record.

    Args:
        content: Request content; used when non-blank (trimmed).
        tokens: Cleaned request tokens or `None`.
        join_mode: Mode used to build content from `tokens`.
        fallback: Content kept when neither content nor tokens are supplied.

    Returns:
        Trimmed `content`, else the joined `tokens`, else `fallback`.
    """
    if content and content.strip():
        return content.strip()
    if tokens is not None:
        return build_prompt(tokens, join_mode)
    return fallback


def row_to_record(row: sqlite3.Row) -> dict:
    """Convert a stored row into an API record with a decoded `tokens` list."""
    record = dict(row)
    record["tokens"] = parse_tokens(record.pop("tokens_json", None))
    return record


def restore_tokens(record: dict, join_mode) -> list:
    """Return the stored tokens of a record, or split its content when none were kept."""
    if record.get("tokens"):
        return record["tokens"]
    return split_prompt(record["content"], join_mode)
