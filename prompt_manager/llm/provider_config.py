"""Provider/runtime configuration for the LLM layer.

Architectural role:
    Centralizes the defaults used to seed LLM settings and the credential lookup
    consumed by `prompt_manager.llm.client`.

Model call flow integration:
    - `storage.settings` seeds a fresh settings row from `DEFAULT_LM_*` values.
    - `service.transform_text` falls back to `DEFAULT_LM_MODEL` when no model
      is configured.
    - `client.send_chat_request` applies `LM_TIMEOUT`.

Determinism:
    Deterministic for a fixed process environment and key files. Values are resolved
    at import time (plus runtime key-file reads in `load_key`).

Failure behavior:
    Missing key material is represented as `None` and replaced by
    `FALLBACK_LM_API_KEY`, which local OpenAI-compatible servers accept.
"""

import os
from dotenv import load_dotenv

load_dotenv()

# Key file path; `LM_API_KEY` in the environment overrides its contents.
LM_KEY_FILE = "config/lm.key"

FALLBACK_LM_API_KEY = "lm-studio"

# Model name sent when the stored settings leave `lm_model` empty.
DEFAULT_LM_MODEL = "local-model"

DEFAULT_LM_BASE_URL = os.getenv("LM_BASE_URL", "http://127.0.0.1:1234/v1")
DEFAULT_LM_TEMPERATURE = 0.2
DEFAULT_LM_TOP_P = 0.9
DEFAULT_LM_TOP_K = 40

LM_TIMEOUT = float(os.getenv("LM_TIMEOUT", "120"))


def load_key(path):
    """Load API key from environment override or key file.

    Resolution order:
        1. Environment variable inferred from file stem (for example
           `config/lm.key` -> `LM_API_KEY`).
        2. Raw file contents at `path`.

    Args:
        path: Configured key file path or `None`.

    Returns:
        Key string or `None` when not available.

    Edge cases:
        - `None` path returns `None`.
        - Missing file returns `None`.
    """
    if not path:
        return None
    key_name = os.path.splitext(os.path.basename(path))[0].upper() + "_API_KEY"
    env_value = os.getenv(key_name)
    if env_value:
        return env_value
    if not os.path.exists(path):
        return None
    with open(path, "r") as f:
        return f.read().strip()


def default_lm_api_key():
    """Return the key used to seed settings on first database initialization."""
    return load_key(LM_KEY_FILE) or FALLBACK_LM_API_KEY
