"""Export dispatcher used by the `/api/export` endpoint.

Role in pipeline:
    - Joins the caller's tokens with the explicitly supplied join mode.
    - Writes the joined text verbatim to the configured output path.
    - Records the export as a history entry with `source="export"`.

Error handling strategy:
    Writer failures (`HttpError`) propagate; no history entry is recorded when
    the file could not be written.
"""

from prompt_manager.export.writer import write_prompt_file
from prompt_manager.prompting.join_engine import build_prompt
from prompt_manager.storage.history import add_history
from prompt_manager.storage.settings import get_settings


def export_prompt(db, tokens, join_mode) -> dict:
    """Build, write, and log one prompt export.

    Args:
        db: Open `Database`; supplies the output path and receives history.
        tokens: Raw token list.
        join_mode: Mode passed to `build_prompt`.

    Returns:
        `{"ok", "path", "bytes_written", "final_text"}`.
    """
    path = get_settings(db)["prompt_output_path"]
    final_text = build_prompt(tokens, join_mode)
    bytes_written = write_prompt_file(path, final_text)

    add_history(db, "export", join_mode, content=final_text, tokens=tokens, allow_empty=True)

    return {
        "ok": True,
        "path": path,
        "bytes_written": bytes_written,
        "final_text": final_text,
    }
