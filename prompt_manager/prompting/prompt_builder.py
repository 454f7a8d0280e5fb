"""Instruction assembly for LLM-assisted phrase editing.

This module only builds chat messages from already validated inputs. Settings
lookup, sampling parameters, and model invocation happen in `prompt_manager.llm`.

Design constraints:
    - Deterministic construction for identical inputs.
    - Fixed message order: system instruction first, user text second.
    - No hidden side effects (no I/O, no global state mutation).

Prompt safety model:
    User text is forwarded verbatim as the user message. The system instruction
    asks for output-only text so the reply can be inserted as a phrase token
    without post-processing.
"""

from enum import Enum
from typing import Dict, List


class LMMode(str, Enum):
    """Supported LLM text transformations."""

    RU2EN = "ru2en"
    EN2RU = "en2ru"
    IMPROVE = "improve"


# =========================================================
# MODE INSTRUCTIONS
# =========================================================
# One system instruction per mode. Each instruction ends with an output-only
# constraint so replies can be used as prompt text directly.

LM_MODE_INSTRUCTIONS: Dict[LMMode, str] = {
    LMMode.RU2EN: (
        "Translate Russian text into natural, concise English prompt text for image generation.\n"
        "Output only English text."
    ),
    LMMode.EN2RU: (
        "Translate English prompt text into Russian. Output only Russian text."
    ),
    LMMode.IMPROVE: (
        "Rewrite the English prompt text to sound more natural and useful for image generation. "
        "Keep meaning. Output only the improved prompt."
    ),
}


def build_lm_messages(mode, text: str) -> List[dict]:
    """Build the chat message list for one LLM transformation.

    Args:
        mode: `LMMode` member or its string value.
        text: User-supplied text to transform.

    Returns:
        OpenAI-style `messages` list with a system and a user entry.

    Edge cases:
        `text` is forwarded unmodified; callers validate non-emptiness.

    Failure handling:
        Unknown modes raise `ValueError` from the `LMMode` constructor.
    """
    instruction = LM_MODE_INSTRUCTIONS[LMMode(mode)]
    return [
        {"role": "system", "content": instruction},
        {"role": "user", "content": text},
    ]
