"""
Model-response parsing helpers.

Models asked for a JSON object sometimes wrap it in a markdown code fence or
add a sentence around it; these helpers recover the object when possible.
"""

import json
from typing import Any, Dict, Optional


def match_json_object(text: str) -> Optional[str]:
    """
    Extract the first balanced JSON object from mixed text.

    Braces inside string literals are ignored.

    Args:
        text: Text potentially containing a JSON object

    Returns:
        Extracted JSON object string, or None if not found
    """
    if not text:
        return None

    depth = 0
    start = -1
    in_string = False
    escape_next = False

    for i, char in enumerate(text):
        if escape_next:
            escape_next = False
            continue

        if char == '\\' and in_string:
            escape_next = True
            continue

        if char == '"':
            in_string = not in_string
            continue

        if in_string:
            continue

        if char == '{':
            if depth == 0:
                start = i
            depth += 1
        elif char == '}' and depth > 0:
            depth -= 1
            if depth == 0 and start >= 0:
                return text[start:i + 1]

    return None


def strip_code_fence(text: str) -> str:
    """Remove a surrounding ``` / ```json fence."""
    text = text.strip()
    if not text.startswith('```'):
        return text

    lines = text.split('\n')[1:]
    if lines and lines[-1].strip() == '```':
        lines = lines[:-1]
    return '\n'.join(lines).strip()


def _loads_object(text: str) -> Optional[Dict[str, Any]]:
    try:
        result = json.loads(text)
    except json.JSONDecodeError:
        return None
    return result if isinstance(result, dict) else None


def safe_parse_json_object(text: str) -> Optional[Dict[str, Any]]:
    """
    Safely parse a JSON object from potentially malformed text.

    Tries multiple strategies:
    1. Direct parse
    2. Remove markdown code fence and parse
    3. Extract with brace matching and parse

    Args:
        text: Text to parse

    Returns:
        Parsed dict or None on failure

    Example:
        >>> safe_parse_json_object('```json\\n{"title": "Hallo"}\\n```')
        {'title': 'Hallo'}
    """
    if not text or not text.strip():
        return None

    text = text.strip()

    result = _loads_object(text)
    if result is not None:
        return result

    clean_text = strip_code_fence(text)
    if clean_text != text:
        result = _loads_object(clean_text)
        if result is not None:
            return result

    extracted = match_json_object(text)
    if extracted:
        return _loads_object(extracted)

    return None
