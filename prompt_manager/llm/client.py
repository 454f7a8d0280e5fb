"""OpenAI-compatible transport client for LLM requests.

Architectural role:
    Executes one chat-completions HTTP request against the user-configured base
    URL (typically a local LM Studio server) and extracts the reply text.

Model invocation flow:
    `service.transform_text` -> `send_chat_request(base_url, api_key, payload)`
    -> `POST {base_url}/chat/completions` -> reply text.

Retry behavior:
    No retry loop is implemented. Each HTTP call is attempted once with
    `LM_TIMEOUT` seconds.

Failure handling model:
    Failures raise `HttpError`:
    - Non-2xx upstream status -> same status, upstream body as message.
    - Transport failures -> 502 with a sanitized message.
    - Missing/empty reply content -> 502.
"""

import logging

import requests

from prompt_manager.core.errors import HttpError
from prompt_manager.llm.provider_config import LM_TIMEOUT


logger = logging.getLogger(__name__)


def _build_sanitized_http_error(err: requests.exceptions.RequestException) -> str:
    """Build error text without exposing raw transport internals."""
    status_code = None
    if getattr(err, "response", None) is not None:
        status_code = getattr(err.response, "status_code", None)
    if status_code:
        return f"LM HTTP ERROR ({status_code})"
    return "LM REQUEST FAILED"


def chat_completions_url(base_url: str) -> str:
    return f"{base_url.rstrip('/')}/chat/completions"


def send_chat_request(base_url: str, api_key: str, payload: dict) -> str:
    """Send one chat-completions request and return the trimmed reply text.

    Args:
        base_url: Provider base URL ending in `/v1` (trailing slash allowed).
        api_key: Bearer token; local servers accept any non-empty value.
        payload: OpenAI-style request body.

    Returns:
        Trimmed `choices[0].message.content`.

    Raises:
        HttpError: See module docstring.
    """
    headers = {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {api_key}",
    }

    try:
        response = requests.post(
            chat_completions_url(base_url),
            headers=headers,
            json=payload,
            timeout=LM_TIMEOUT,
        )
    except requests.exceptions.RequestException as err:
        logger.exception("LM request to %s failed", base_url)
        raise HttpError(502, _build_sanitized_http_error(err)) from err

    if not response.ok:
        raise HttpError(response.status_code, response.text or "LM error")

    try:
        data = response.json()
    except ValueError as err:
        raise HttpError(502, "LM returned invalid JSON") from err

    if not isinstance(data, dict):
        raise HttpError(502, "LM returned invalid JSON")

    text = None
    choices = data.get("choices") or []
    if isinstance(choices, list) and choices and isinstance(choices[0], dict):
        message = choices[0].get("message")
        content = message.get("content") if isinstance(message, dict) else None
        if isinstance(content, str):
            text = content.strip()

    if not text:
        raise HttpError(502, "Empty response from LM")

    return text
