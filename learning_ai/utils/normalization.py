"""Normalisation of decoded model payloads into contract-safe values."""
import re
from typing import Any, Dict, Iterable, List, Optional

from learning_ai.utils.constants import MAX_QUIZ_OPTIONS, MIN_QUIZ_OPTIONS
from learning_ai.utils.text_utils import unique_in_order

_WHITESPACE = re.compile(r"\s+")


def to_text(value: Any) -> str:
    """Coerce a scalar JSON value to a trimmed string (None becomes '')."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else ""
    if isinstance(value, (dict, list)):
        return ""
    return str(value).strip()


def normalize_string_list(value: Any) -> List[str]:
    """
    Coerce a JSON value into a clean list of strings.

    Non-list input yields []. Elements are stringified and trimmed, empty
    entries dropped, and duplicates removed preserving order.
    """
    if not isinstance(value, (list, tuple)):
        return []
    return unique_in_order(item for item in (to_text(v) for v in value) if item)


def question_key(text: str) -> str:
    """Uniqueness key for a question: whitespace collapsed, lower-cased."""
    return _WHITESPACE.sub(" ", text or "").lower()


def normalize_quiz_options(options: Any, correct: str) -> Optional[List[str]]:
    """
    Make a usable option list around the correct answer.

    The correct answer is prepended when missing, duplicates are removed and
    the list is capped at four entries. If the cap dropped the correct answer
    it is forced into slot 0. Returns None when fewer than two options remain.
    """
    cleaned = normalize_string_list(options)
    if correct not in cleaned:
        cleaned.insert(0, correct)

    cleaned = unique_in_order(cleaned)
    if len(cleaned) < MIN_QUIZ_OPTIONS:
        return None

    cleaned = cleaned[:MAX_QUIZ_OPTIONS]
    if correct not in cleaned:
        cleaned[0] = correct
    return cleaned


def normalize_quiz_questions(rows: Iterable[Any], limit: Optional[int] = None) -> List[Dict[str, Any]]:
    """
    Filter and repair raw question rows.

    Rows need non-empty `text` and `correctAnswer`; options go through
    normalize_quiz_options; questions repeating an earlier normalised text
    are dropped. Stops once `limit` questions were collected.
    """
    questions: List[Dict[str, Any]] = []
    seen = set()

    for row in rows:
        if not isinstance(row, dict):
            continue

        text = to_text(row.get("text"))
        correct = to_text(row.get("correctAnswer", row.get("correct_answer")))
        if not text or not correct:
            continue

        options = normalize_quiz_options(row.get("options"), correct)
        if options is None:
            continue

        key = question_key(text)
        if not key or key in seen:
            continue
        seen.add(key)

        questions.append({"text": text, "options": options, "correctAnswer": correct})
        if limit is not None and len(questions) >= limit:
            break

    return questions


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def to_float(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def to_int(value: Any, default: int) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default
