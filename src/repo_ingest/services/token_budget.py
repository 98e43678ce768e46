"""Token counting and truncation for rendered bundles.

Uses ``tiktoken`` for exact token counting so a rendered bundle can be cut to
a model's context window at a line boundary.
"""

from __future__ import annotations

import tiktoken

_ENCODING_NAME = "cl100k_base"  # GPT-4o family

TRUNCATION_MARKER = "\n[… truncated to fit token budget]"

_encoder: tiktoken.Encoding | None = None


def _get_encoder() -> tiktoken.Encoding:
    global _encoder  # noqa: PLW0603
    if _encoder is None:
        _encoder = tiktoken.get_encoding(_ENCODING_NAME)
    return _encoder


def count_tokens(text: str) -> int:
    """Return the exact token count for *text* under cl100k_base."""
    return len(_get_encoder().encode(text))


def truncate_to_budget(text: str, max_tokens: int) -> str:
    """Truncate *text* to fit within *max_tokens*, cutting at line boundaries.

    Attempts to preserve complete lines rather than splitting mid-word.
    """
    encoder = _get_encoder()
    tokens = encoder.encode(text)
    if len(tokens) <= max_tokens:
        return text

    truncated = encoder.decode(tokens[: max(max_tokens, 0)])

    # Roll back to the last newline for a clean cut
    last_nl = truncated.rfind("\n")
    if last_nl > len(truncated) // 2:
        truncated = truncated[: last_nl + 1]

    return truncated + TRUNCATION_MARKER
