"""Text heuristics shared by the local provider and the remote prompt builders."""
import math
import re
from collections import Counter
from typing import List

from learning_ai.utils.constants import (
    CHUNK_FALLBACK_CHARS,
    CHUNK_SIZE,
    MAX_PROMPT_TEXT_CHARS,
    MAX_SENTENCE_CHARS,
    MIN_SENTENCE_CHARS,
)

_SENTENCE_SPLIT = re.compile(r"(?<=[.!?])\s+")
_KEYWORD_PATTERN = re.compile(r"[a-z][a-z0-9\-]{3,}")
_WHITESPACE = re.compile(r"\s+")

STOP_WORDS = frozenset({
    "about", "after", "again", "against", "because", "before", "between",
    "could", "every", "first", "from", "have", "into", "lesson", "more",
    "other", "should", "their", "there", "these", "those", "through",
    "under", "using", "what", "when", "where", "which", "while", "with",
    "your", "this", "that", "they", "them", "were", "will", "than",
})


def unique_in_order(items) -> list:
    """Drop duplicates, keeping the first occurrence of each item."""
    return list(dict.fromkeys(items))


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", (text or "").strip())


def limit_text(text: str, max_chars: int) -> str:
    """Trim and cut text to at most max_chars characters."""
    return (text or "").strip()[:max_chars]


def split_sentences(text: str) -> List[str]:
    """Split on sentence-ending punctuation followed by whitespace, dropping blanks."""
    stripped = (text or "").strip()
    if not stripped:
        return []
    return [part.strip() for part in _SENTENCE_SPLIT.split(stripped) if part.strip()]


def sentence_chunks(text: str) -> List[str]:
    """
    Sentence fragments usable as topics.

    Keeps fragments longer than 12 characters, truncated to 120 characters,
    deduplicated in first-seen order.
    """
    chunks = [
        sentence[:MAX_SENTENCE_CHARS]
        for sentence in split_sentences(text)
        if len(sentence) > MIN_SENTENCE_CHARS
    ]
    return unique_in_order(chunks)


def extract_keywords(text: str, limit: int = 20) -> List[str]:
    """
    Most frequent content words of a text.

    Tokens match [a-z][a-z0-9-]{3,} after lower-casing; stop words are dropped.
    Ties keep first-seen order.
    """
    words = _KEYWORD_PATTERN.findall((text or "").lower())
    frequency = Counter(word for word in words if word not in STOP_WORDS)
    # Counter preserves insertion order and sorted() is stable
    ranked = sorted(frequency.items(), key=lambda item: item[1], reverse=True)
    return [word for word, _ in ranked[:limit]]


def estimate_study_minutes(text_length: int, minimum: int, maximum: int, chars_per_minute: int, min_chars: int) -> int:
    minutes = math.ceil(max(min_chars, text_length) / chars_per_minute)
    return max(minimum, min(maximum, minutes))


def extractive_chunk_summary(chunk: str) -> str:
    """Leading two sentences of a chunk plus its top keywords."""
    lead = split_sentences(chunk)[:2]
    keywords = extract_keywords(chunk, 6)
    keyword_part = f" Keywords: {', '.join(keywords)}." if keywords else ""

    if lead:
        return " ".join(lead) + keyword_part
    return limit_text(chunk, CHUNK_FALLBACK_CHARS) + keyword_part


def prepare_lesson_context(
    text: str,
    max_chars: int = MAX_PROMPT_TEXT_CHARS,
    chunk_size: int = CHUNK_SIZE,
) -> str:
    """
    Bound lesson text for a prompt without blindly truncating it.

    Short text is passed through (whitespace collapsed). Long text is cut into
    fixed-size chunks and each chunk replaced by an extractive digest, so the
    prompt still sees signal from the whole document.
    """
    normalized = collapse_whitespace(text)
    if len(normalized) <= max_chars:
        return normalized

    chunks = [normalized[i:i + chunk_size] for i in range(0, len(normalized), chunk_size)]
    summaries = [
        f"Chunk {index}: {extractive_chunk_summary(chunk)}"
        for index, chunk in enumerate(chunks, start=1)
    ]
    return limit_text("\n".join(summaries), max_chars)
