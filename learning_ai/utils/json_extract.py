"""
JSON Utilities: resilient extraction of JSON payloads from model output.

Models routinely wrap JSON in markdown fences or prose despite being told not
to. Strategies, tried in order until one yields an object or array:
  1. Parse the whole trimmed string
  2. Parse the interior of a ``` / ```json fenced block
  3. Parse the first balanced {...} or [...] span
"""

import json
import re
from typing import Any, Optional, Union

from learning_ai.exceptions import MalformedOutputError

JsonPayload = Union[dict, list]

_FENCE_PATTERN = re.compile(r"```(?:json)?\s*(.+?)\s*```", re.IGNORECASE | re.DOTALL)
_decoder = json.JSONDecoder()


def _loads_payload(candidate: str) -> Optional[JsonPayload]:
    try:
        value = json.loads(candidate)
    except (ValueError, RecursionError):
        return None
    return value if isinstance(value, (dict, list)) else None


def _first_balanced_span(text: str) -> Optional[JsonPayload]:
    """Decode the first {...} / [...] that parses, ignoring noise around it."""
    index = 0
    while index < len(text):
        if text[index] not in "{[":
            index += 1
            continue
        try:
            value, _ = _decoder.raw_decode(text, index)
        except json.JSONDecodeError:
            index += 1
            continue
        except RecursionError:
            # Nested past the recursion limit; skip the whole run of openers
            index += 1
            while index < len(text) and text[index] in "{[":
                index += 1
            continue
        if isinstance(value, (dict, list)):
            return value
        index += 1
    return None


def extract_json(content: Any) -> Optional[JsonPayload]:
    """
    Extract a JSON object or array from LLM output.

    Args:
        content: Raw model output (non-strings are treated as empty)

    Returns:
        The parsed dict/list, or None when no JSON payload was found
    """
    if not isinstance(content, str):
        return None

    trimmed = content.strip()
    if not trimmed:
        return None

    # Strategy 1: Direct parse
    payload = _loads_payload(trimmed)
    if payload is not None:
        return payload

    # Strategy 2: Fenced code block
    match = _FENCE_PATTERN.search(trimmed)
    if match:
        payload = _loads_payload(match.group(1).strip())
        if payload is not None:
            return payload

    # Strategy 3: First balanced span inside surrounding noise
    return _first_balanced_span(trimmed)


def decode_json_or_raise(content: Any, provider: str = "model", after_repair: bool = False) -> JsonPayload:
    """Like extract_json, but raises MalformedOutputError when nothing is found."""
    payload = extract_json(content)
    if payload is None:
        suffix = " after repair attempt." if after_repair else "."
        raise MalformedOutputError(
            provider,
            f"{provider} returned invalid JSON payload{suffix}",
            raw_output=content if isinstance(content, str) else None,
        )
    return payload
