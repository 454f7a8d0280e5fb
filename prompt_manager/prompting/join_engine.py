"""Token join/split engine for prompt assembly.

This module is intentionally narrow: it only converts an ordered token list into
a single prompt string (and back). Token selection, ordering, persistence, and
file export happen outside this module.

Design constraints:
    - Deterministic output for identical inputs.
    - The join mode is always an explicit argument; no module state is read.
    - No hidden side effects (no I/O, no global state mutation).

Join modes:
    - `space`: tokens separated by one space; stray spaces before `, . ; ! ?`
      are removed.
    - `comma`: tokens separated by `", "`; standalone comma tokens are dropped.
    - `sentence`: tokens separated by `". "`; the result always ends with `.`.

Round-trip behavior:
    `split_prompt` inverts `build_prompt` only for `comma` and `sentence` text
    that follows the exact separator convention. `space` text is never split,
    because spaces are both the separator and part of multi-word tokens.

Failure handling:
    Unknown join modes raise `ValueError`. Every other input is valid.
"""

import re
from enum import Enum
from typing import Iterable, List


class JoinMode(str, Enum):
    """Separator and punctuation policy used to merge tokens."""

    SPACE = "space"
    COMMA = "comma"
    SENTENCE = "sentence"


# Single-character tokens rendered as punctuation by UI layers.
# The join algorithms below do not consult this set; each mode applies its own
# literal filter.
PUNCTUATION = frozenset({",", ".", "!", "?", ";", ":"})

_WHITESPACE_RUN = re.compile(r"\s+")
_SPACE_BEFORE_PUNCT = re.compile(r"\s+([,.;!?])")
_REPEATED_COMMAS = re.compile(r",\s*,+")
_SPACE_BEFORE_COMMA = re.compile(r"\s+,")
_SPACE_BEFORE_PERIOD = re.compile(r"\s+\.")


def coerce_join_mode(join_mode) -> JoinMode:
    """Return `join_mode` as a `JoinMode`, failing fast on unknown values.

    Args:
        join_mode: A `JoinMode` member or its string value.

    Returns:
        Matching `JoinMode` member.

    Raises:
        ValueError: If the value names no known join mode.
    """
    try:
        return JoinMode(join_mode)
    except ValueError:
        raise ValueError(f"Unknown join mode: {join_mode!r}") from None


# =========================================================
# TOKEN HELPERS
# =========================================================

def normalize_tokens(tokens: Iterable[str]) -> List[str]:
    """Trim every token and drop the ones left empty, preserving order."""
    cleaned = []
    for token in tokens:
        text = token.strip()
        if text:
            cleaned.append(text)
    return cleaned


def is_punctuation_token(token: str) -> bool:
    """Return whether `token` is a single punctuation mark after trimming."""
    return token.strip() in PUNCTUATION


def _collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RUN.sub(" ", text).strip()


# =========================================================
# JOIN
# =========================================================
# Every mode starts from the cleaned sequence (trimmed, empties dropped).
# Filtering rules are literal and mode-specific:
#   - comma mode drops tokens equal to ","
#   - sentence mode drops tokens equal to "." and strips one trailing "."
#     from longer tokens
# Space mode filters nothing.

def _join_space(tokens: List[str]) -> str:
    text = _collapse_whitespace(" ".join(tokens))
    return _SPACE_BEFORE_PUNCT.sub(r"\1", text)


def _join_comma(tokens: List[str]) -> str:
    filtered = [token for token in tokens if token != ","]
    text = ", ".join(filtered)
    text = _REPEATED_COMMAS.sub(", ", text)
    text = _collapse_whitespace(text)
    return _SPACE_BEFORE_COMMA.sub(",", text)


def _join_sentence(tokens: List[str]) -> str:
    filtered = []
    for token in tokens:
        if token == ".":
            continue
        if len(token) > 1 and token.endswith("."):
            token = token[:-1]
        filtered.append(token)

    text = _collapse_whitespace(". ".join(filtered))
    text = _SPACE_BEFORE_PERIOD.sub(".", text)
    if text and not text.endswith("."):
        text += "."
    return text


_JOINERS = {
    JoinMode.SPACE: _join_space,
    JoinMode.COMMA: _join_comma,
    JoinMode.SENTENCE: _join_sentence,
}


def build_prompt(tokens: Iterable[str], join_mode) -> str:
    """Join raw tokens into one prompt string.

    Args:
        tokens: Ordered raw tokens; untrimmed and empty entries are allowed.
        join_mode: `JoinMode` member or its string value.

    Returns:
        Joined prompt text. Empty string when no token survives cleaning.

    Determinism:
        Pre-normalizing the tokens never changes the output:
        `build_prompt(normalize_tokens(t), m) == build_prompt(t, m)`.

    Edge cases:
        - Tokens are not deduplicated; `["cat", "cat"]` joins to `"cat, cat"`
          in comma mode.
        - A sentence-mode token ending in "." loses that period before joining,
          and the terminal period is re-added once.

    Raises:
        ValueError: On an unknown join mode.
    """
    mode = coerce_join_mode(join_mode)
    return _JOINERS[mode](normalize_tokens(tokens))


# =========================================================
# SPLIT
# =========================================================

def split_prompt(content: str, join_mode) -> List[str]:
    """Split prompt text back into tokens using the mode's separator.

    Args:
        content: Prompt text, usually produced by `build_prompt` but possibly
            edited by hand.
        join_mode: `JoinMode` member or its string value.

    Returns:
        Token list. Empty when `content` is blank.

    Edge cases:
        - `sentence`: splits on `". "` and strips one trailing period per piece.
        - `comma`: splits on `", "`.
        - `space`: returns the whole trimmed text as a single token.

    Raises:
        ValueError: On an unknown join mode.
    """
    mode = coerce_join_mode(join_mode)

    if not content.strip():
        return []

    if mode is JoinMode.SENTENCE:
        tokens = []
        for piece in content.split(". "):
            if piece.endswith("."):
                piece = piece[:-1]
            piece = piece.strip()
            if piece:
                tokens.append(piece)
        return tokens

    if mode is JoinMode.COMMA:
        return [piece.strip() for piece in content.split(", ") if piece.strip()]

    return [content.strip()]
