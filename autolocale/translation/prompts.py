"""
Prompt construction for the localization model call.
"""

import json
from typing import Any, Dict, Optional, Tuple

from autolocale.config import DEFAULT_SYSTEM_MESSAGE
from autolocale.translation.result import TranslationRequest
import autolocale.language_codes as lc


def build_system_prompt(fields) -> str:
    keys = ', '.join(f'"{f}"' for f in fields)
    return ' '.join([
        DEFAULT_SYSTEM_MESSAGE,
        f"Return a strict JSON object with exactly these keys: {keys}.",
        "Preserve meaning, tone, and domain terms.",
        "Keep placeholders like {name}, {count}, %{var} unchanged.",
        "Do not invent data if the source is empty; return an empty string for that key.",
        "No markdown. No extra keys. No explanations.",
    ])


def build_prompt(
    collection: str,
    request: TranslationRequest,
    extra_context: Optional[Dict[str, Any]] = None,
) -> Tuple[str, str]:
    """
    Build the system and user prompts for one translation request.

    Args:
        collection: Collection slug, given to the model as context
        request: The locale pair, requested field paths and source texts
        extra_context: Optional context block (known keys, domain hints)

    Returns:
        Tuple of (system_prompt, user_prompt)
    """
    user_obj: Dict[str, Any] = {
        "task": "localize",
        "collection": collection,
        "from": request.source_locale,
        "to": request.target_locale,
        "from_language": lc.describe_locale(request.source_locale),
        "to_language": lc.describe_locale(request.target_locale),
        "source": {path: request.source_values.get(path, '') for path in request.fields},
    }
    if extra_context:
        user_obj["context"] = extra_context

    user_prompt = json.dumps(user_obj, ensure_ascii=False, indent=2)
    return build_system_prompt(request.fields), user_prompt
