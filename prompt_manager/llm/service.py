"""Settings-to-payload adapter for LLM invocation.

Architectural role:
    Provides the text-transformation entrypoint used by the `/api/lm` endpoint.
    This module bridges instruction construction (`prompting.prompt_builder`)
    and stored LLM settings to transport (`prompt_manager.llm.client`).

Model call flow:
    mode + text + settings -> payload construction -> `client.send_chat_request(...)`.

Parameter handling:
    `temperature`, `top_p`, and `top_k` are included only when the matching
    `lm_use_*` flag is enabled in settings, so servers that reject a parameter
    can be accommodated.

Determinism:
    Payload construction is deterministic for fixed inputs and settings.
    Generated output remains non-deterministic because inference runs remotely.
"""

from prompt_manager.llm.client import send_chat_request
from prompt_manager.llm.provider_config import DEFAULT_LM_MODEL
from prompt_manager.prompting.prompt_builder import build_lm_messages


def build_payload(mode, text: str, settings: dict) -> dict:
    """Build the chat-completions request body for one transformation.

    Args:
        mode: `LMMode` member or value.
        text: User text to transform.
        settings: Stored settings dict (see `storage.settings`).

    Returns:
        OpenAI-style payload dict.
    """
    payload = {
        "model": settings.get("lm_model") or DEFAULT_LM_MODEL,
        "messages": build_lm_messages(mode, text),
    }
    if settings.get("lm_use_temperature"):
        payload["temperature"] = settings["lm_temperature"]
    if settings.get("lm_use_top_p"):
        payload["top_p"] = settings["lm_top_p"]
    if settings.get("lm_use_top_k"):
        payload["top_k"] = settings["lm_top_k"]
    return payload


def transform_text(mode, text: str, settings: dict) -> str:
    """Translate or improve `text` with the configured model.

    Failure scenarios:
        Transport/provider failures raise `HttpError` from `client`.
    """
    payload = build_payload(mode, text, settings)
    return send_chat_request(settings["lm_base_url"], settings["lm_api_key"], payload)
