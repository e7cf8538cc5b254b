"""Approximate token counting for context budgeting."""

# Roughly three characters per token for mixed English/code text
CHARS_PER_TOKEN = 3


def count_tokens(text: str) -> int:
    """Approximate the LLM token count of text (0 for empty, otherwise at least 1)."""
    if not text:
        return 0
    return max(1, len(text) // CHARS_PER_TOKEN)
