"""Rough token arithmetic for provider input limits.

No tokenizer is loaded; a fixed characters-per-token ratio is used that
over-counts for English text, so truncated input always fits.
"""

CHARS_PER_TOKEN = 3


def estimate_tokens(text: str) -> int:
    """Return an estimated token count for *text* (at least 1)."""
    return max(1, len(text) // CHARS_PER_TOKEN)


def truncate_to_tokens(text: str, max_tokens: int) -> str:
    """Cut *text* down to roughly *max_tokens* tokens."""
    max_chars = max_tokens * CHARS_PER_TOKEN
    if len(text) <= max_chars:
        return text
    return text[:max_chars]
