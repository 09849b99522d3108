"""Text utilities: sentence segmentation, preview truncation, read-time estimate."""

import math
import re

from bedtime_stories.config import PREVIEW_CHARACTERS, WORDS_PER_MINUTE

# Run of terminal punctuation directly followed by whitespace
_SENTENCE_BREAK = re.compile(r"([.!?]+\s+)")
# Terminator with optional closing quotes/brackets, at whitespace or end of text
_SENTENCE_END = re.compile(r"[.!?]+[\"'”’)\]]*(?=\s|$)")


def split_sentences(text: str) -> list[str]:
    """
    Split on runs of . ! ? followed by whitespace. Punctuation stays with its
    sentence; empty fragments are dropped. Order is preserved so sentence
    indexes are stable for feedback anchoring.
    """
    parts = _SENTENCE_BREAK.split(text)
    sentences: list[str] = []
    # re.split with a capture group alternates body, separator, body, ...
    for i in range(0, len(parts), 2):
        body = parts[i]
        sep = parts[i + 1] if i + 1 < len(parts) else ""
        sentence = (body + sep).strip()
        if sentence:
            sentences.append(sentence)
    return sentences


def preview_text(text: str, limit: int = PREVIEW_CHARACTERS) -> str:
    """
    First `limit` characters, extended to the end of the sentence in progress.
    Text that fits within the limit is returned unchanged.
    """
    if len(text) <= limit:
        return text
    # Start one char early so a terminator sitting exactly at the cut counts
    match = _SENTENCE_END.search(text, max(limit - 1, 0))
    if match is None:
        return text
    return text[: match.end()]


def word_count(text: str) -> int:
    stripped = text.strip()
    if not stripped:
        return 0
    return len(stripped.split())


def estimate_read_minutes(text: str, words_per_minute: int = WORDS_PER_MINUTE) -> int:
    """Read-aloud minutes, rounded up."""
    return math.ceil(word_count(text) / words_per_minute)
