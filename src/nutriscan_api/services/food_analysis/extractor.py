"""
JSON extraction from free-text vision model replies.

Models are asked to reply with JSON only, but routinely wrap it in prose or
markdown code fences. The extractor takes the span from the first ``{`` to
the last ``}`` and lets the real JSON parser decide whether it is valid, so
braces inside string values never confuse it.
"""

import json
import logging
import re

from nutriscan_api.core.exceptions import ExtractionError

logger = logging.getLogger(__name__)

EXCERPT_LENGTH = 200

_FENCE_JSON = re.compile(r"```json", re.IGNORECASE)
_FENCE = re.compile(r"```")
_BLANK_LINE = re.compile(r"^\s*[\r\n]", re.MULTILINE)


def _brace_span(text: str) -> str | None:
    """Return text from the first '{' to the last '}' inclusive, if any."""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end < start:
        return None
    return text[start : end + 1]


def _is_json(candidate: str) -> bool:
    try:
        json.loads(candidate)
    except (ValueError, RecursionError):
        return False
    return True


def strip_code_fences(text: str) -> str:
    """Remove ```json / ``` markers and blank lines."""
    cleaned = _FENCE_JSON.sub("", text)
    cleaned = _FENCE.sub("", cleaned)
    cleaned = _BLANK_LINE.sub("", cleaned)
    return cleaned.strip()


def extract_json(raw_text: str) -> str:
    """
    Isolate the JSON object embedded in a model reply.

    Args:
        raw_text: Free-text reply from the vision model

    Returns:
        The JSON object text (guaranteed to parse with json.loads)

    Raises:
        ExtractionError: If no brace-delimited span parses as JSON
    """
    if not raw_text or not raw_text.strip():
        raise ExtractionError("Empty response text")

    excerpt = raw_text[:EXCERPT_LENGTH]

    candidate = _brace_span(raw_text)
    if candidate is not None and _is_json(candidate):
        return candidate

    cleaned = strip_code_fences(raw_text)
    candidate = _brace_span(cleaned)
    if candidate is None:
        logger.warning("No JSON structure found in model reply")
        raise ExtractionError(
            f"No valid JSON structure found in response: {excerpt}...",
            excerpt=excerpt,
        )

    if not _is_json(candidate):
        logger.warning("Brace-delimited span in model reply is not valid JSON")
        raise ExtractionError(
            f"Could not extract valid JSON. Original text: {excerpt}...",
            excerpt=excerpt,
        )

    return candidate
