"""
Utilities for pulling a JSON object out of free-form model output.
"""
import json
from typing import Any, Dict, Optional


def find_balanced_object(text: str) -> Optional[str]:
    """
    Return the first top-level balanced ``{...}`` substring of ``text``.

    Braces inside JSON string literals are ignored, so a description such as
    ``"use {brand} paint"`` does not end the object early.

    Example:
        Input: 'Sure! ```json\n{"title": "Chair"}\n``` Enjoy'
        Output: '{"title": "Chair"}'
    """
    if not text:
        return None

    start = text.find('{')
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == '\\':
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char == '{':
            depth += 1
        elif char == '}':
            depth -= 1
            if depth == 0:
                return text[start:index + 1]

    # Opening brace never closed
    return None


def extract_json_object(text: str) -> Dict[str, Any]:
    """
    Extract and decode the first JSON object embedded in ``text``.

    Raises:
        ValueError: if no balanced object exists or it does not decode to a dict
    """
    candidate = find_balanced_object(text)
    if candidate is None:
        raise ValueError("No JSON object found in AI response")

    try:
        decoded = json.loads(candidate)
    except json.JSONDecodeError as e:
        raise ValueError(f"AI response contained invalid JSON: {e}") from e

    if not isinstance(decoded, dict):
        raise ValueError("AI response JSON is not an object")
    return decoded
