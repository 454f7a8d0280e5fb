"""Prompt file writer.

Processing flow:
    1. Create the parent directory of the configured output path.
    2. Write the prompt text to a unique temp file beside the target as UTF-8
       without newline translation.
    3. Atomically replace the target file.

Error handling strategy:
    Filesystem failures raise `HttpError(400, ...)` so the API can report the
    unusable path to the user.

Side effects:
    Creates directories and overwrites the target file.
"""

import logging
import os
import tempfile

from prompt_manager.core.errors import HttpError


logger = logging.getLogger(__name__)


def write_prompt_file(path: str, text: str) -> int:
    """Write `text` to `path` and return the number of UTF-8 bytes written.

    Args:
        path: Destination file path.
        text: Prompt text, written verbatim.

    Returns:
        Byte length of the encoded text.

    Failure handling:
        - Blank path -> `HttpError(400)`.
        - `OSError` while creating directories or writing -> `HttpError(400)`.
    """
    if not path or not path.strip():
        raise HttpError(400, "Export path is not configured")

    data = text.encode("utf-8")
    tmp = None
    try:
        parent = os.path.dirname(os.path.abspath(path))
        os.makedirs(parent, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "wb", dir=parent, prefix=os.path.basename(path) + ".", suffix=".tmp", delete=False
        ) as f:
            tmp = f.name
            f.write(data)
        os.replace(tmp, path)
    except OSError as err:
        logger.exception("Failed to write prompt file %s", path)
        if tmp is not None and os.path.exists(tmp):
            os.remove(tmp)
        raise HttpError(400, f"Export failed: {err}") from err

    logger.info("Wrote %d bytes to %s", len(data), path)
    return len(data)


def check_output_path(path: str) -> str:
    """Verify that `path` can be created and opened for writing.

    The parent directory is created and the file is opened in write mode,
    which truncates an existing file.

    Returns:
        The checked path.
    """
    try:
        parent = os.path.dirname(os.path.abspath(path))
        os.makedirs(parent, exist_ok=True)
        with open(path, "w", encoding="utf-8"):
            pass
    except OSError as err:
        raise HttpError(400, f"Path check failed: {err}") from err
    return path
