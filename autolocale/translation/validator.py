"""
Translation Validation Module

Checks the model's JSON object against the requested field keys before any
patch is built from it.
"""

from typing import Any, Dict, List, Tuple

from autolocale.logger import get_logger

logger = get_logger(__name__)


def sanitize_model_output(result: Dict[str, Any], fields: List[str]) -> Tuple[Dict[str, str], List[str]]:
    """
    Keep only the requested keys, coerced to strings.

    A missing key or a null value becomes an empty string, meaning "nothing
    to write". Numbers and booleans are stringified; nested objects and lists
    are not translations and are dropped to an empty string.

    Args:
        result: Parsed JSON object returned by the model
        fields: Requested field paths

    Returns:
        Tuple of (translations by path, list of problems found)
    """
    problems: List[str] = []
    translations: Dict[str, str] = {}

    for path in fields:
        value = result.get(path)
        if path not in result:
            problems.append(f"missing_key:{path}")
            value = ''
        elif value is None:
            value = ''
        elif isinstance(value, (dict, list)):
            problems.append(f"non_string_value:{path}")
            value = ''
        elif not isinstance(value, str):
            value = str(value)
        translations[path] = value

    extra = [key for key in result if key not in fields]
    if extra:
        problems.append(f"extra_keys:{','.join(extra)}")

    if problems:
        logger.warning(f"Model output did not match the requested keys: {problems}")

    return translations, problems
