"""
AI Provider API Implementation

This module contains the HTTP call to an OpenAI-compatible chat-completions
endpoint (OpenAI, DeepSeek, or any compatible custom provider).

The function takes ClientOptions plus the two prompts and returns the raw
text content of the first choice.
"""

from typing import Any, Optional

import httpx

from autolocale.logger import get_logger
from autolocale.ai.exceptions import LLMRequestFailed

logger = get_logger(__name__)

DEFAULT_TIMEOUT_MS = 20000


def timeout_seconds(timeout_ms: Any) -> float:
    """Per-call budget in seconds; a missing or non-positive value means the default."""
    try:
        value = float(timeout_ms)
    except (TypeError, ValueError):
        value = 0.0
    if value <= 0:
        value = DEFAULT_TIMEOUT_MS
    return value / 1000.0


def get_httpx_timeout(timeout_ms: Any) -> httpx.Timeout:
    """
    Convert a millisecond timeout to an httpx.Timeout object.

    Args:
        timeout_ms: Total per-call budget in milliseconds

    Returns:
        httpx.Timeout object
    """
    timeout_value = timeout_seconds(timeout_ms)
    return httpx.Timeout(
        connect=min(timeout_value, 10.0),
        write=timeout_value,
        read=timeout_value,
        pool=min(timeout_value, 10.0),
    )


def handle_http_error(e: httpx.HTTPStatusError, provider: str):
    """Raise LLMRequestFailed with the provider's error message."""
    status_code = e.response.status_code
    error_text = "Unknown error"

    try:
        error_json = e.response.json()
        if isinstance(error_json, dict) and "error" in error_json:
            error_detail = error_json["error"]
            if isinstance(error_detail, dict):
                error_text = error_detail.get("message", str(error_detail))
            else:
                error_text = str(error_detail)
    except ValueError:
        error_text = e.response.text[:500] if e.response.text else "No details"

    raise LLMRequestFailed(
        f"{provider} API error ({status_code}): {error_text}",
        details={"status_code": status_code},
    )


def build_request_body(options, system_prompt: str, user_prompt: str) -> dict:
    return {
        "model": options.model,
        "messages": [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ],
        "temperature": options.temperature,
        "response_format": {"type": "json_object"},
        # Some OpenAI-compatible providers ignore this
        "max_tokens": options.max_tokens,
    }


async def call_chat_completion_text(
    options,
    system_prompt: str,
    user_prompt: str,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """
    Call an OpenAI-compatible chat-completions API and return the text content.

    Args:
        options: ClientOptions with endpoint, key, model and limits
        system_prompt: System message
        user_prompt: User message
        transport: Optional httpx transport (used by tests)

    Returns:
        Content string of the first choice

    Raises:
        LLMRequestFailed: On non-2xx status, timeout, transport error, or a
            response without content.
    """
    provider = options.provider
    headers = {
        "Authorization": f"Bearer {options.api_key}",
        "Content-Type": "application/json",
    }
    body = build_request_body(options, system_prompt, user_prompt)

    logger.debug(f"  Calling {provider} API (model: {options.model}, url: {options.endpoint})...")

    try:
        httpx_timeout = get_httpx_timeout(options.timeout_ms)
        async with httpx.AsyncClient(timeout=httpx_timeout, transport=transport) as client:
            response = await client.post(options.endpoint, headers=headers, json=body)
            response.raise_for_status()

            result = response.json()
    except httpx.HTTPStatusError as e:
        handle_http_error(e, provider)
    except httpx.TimeoutException:
        raise LLMRequestFailed(f"{provider} API request timeout")
    except httpx.HTTPError as e:
        raise LLMRequestFailed(f"{provider} API call failed: {e}")
    except ValueError as e:
        raise LLMRequestFailed(f"{provider} API returned invalid JSON: {e}")

    usage = result.get('usage') if isinstance(result, dict) else None
    if isinstance(usage, dict) and usage:
        logger.debug(
            f"  {provider} token usage: prompt={usage.get('prompt_tokens', 0)}, "
            f"completion={usage.get('completion_tokens', 0)}"
        )

    choices = result.get('choices') if isinstance(result, dict) else None
    if isinstance(choices, list) and choices and isinstance(choices[0], dict):
        message = choices[0].get('message')
        content = message.get('content') if isinstance(message, dict) else None
        if isinstance(content, str) and content.strip():
            logger.debug(f"  Received {len(content)} chars from {provider}")
            return content

    raise LLMRequestFailed(f"Empty {provider} response")
