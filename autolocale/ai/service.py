"""
AI Completion Client Module

This module provides the JSON-completion client used by the localization
manager:
- LLMClient class wrapping one OpenAI-compatible endpoint
- Per-call deadline enforcement
- Error categorization and retry logic

For the HTTP call itself, see ai/providers.py
"""

import asyncio
from typing import Any, Dict, Optional, Tuple

import httpx

from autolocale.logger import get_logger
from autolocale.ai.exceptions import LLMRequestFailed

logger = get_logger(__name__)


class LLMClient:
    """JSON-completion client for one provider configuration."""

    def __init__(self, options, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Args:
            options: ClientOptions (see autolocale.config)
            transport: Optional httpx transport, mainly for tests
        """
        self.options = options
        self.transport = transport
        logger.debug(f"Initialized LLM client with provider: {options.provider}, model: {options.model}")

    async def complete(self, system_prompt: str, user_prompt: str) -> Dict[str, Any]:
        """
        Run one JSON completion and return the parsed object.

        The whole call, including retries, is abandoned as soon as one attempt
        fails with a non-recoverable error. Each attempt is bounded by
        options.timeout_ms.

        Returns:
            Parsed JSON object from the model's reply

        Raises:
            LLMRequestFailed: If every attempt failed
        """
        from autolocale.translation.utils import safe_parse_json_object

        max_retries = max(int(self.options.max_retries or 1), 1)
        last_error: Optional[Exception] = None

        for attempt in range(max_retries):
            try:
                if attempt > 0:
                    logger.info(f"  Retry attempt {attempt + 1}/{max_retries}")

                response_text = await self._call_with_deadline(system_prompt, user_prompt)
                logger.debug(f"  Output from AI (response):\n{response_text}")

                parsed = safe_parse_json_object(response_text)
                if parsed is None:
                    raise LLMRequestFailed("Could not parse JSON object from response")
                return parsed

            except LLMRequestFailed as e:
                last_error = e
                should_retry, wait_time = self._categorize_error(e, attempt)

                if should_retry and attempt < max_retries - 1:
                    logger.warning(f"  Attempt {attempt + 1} failed: {e}. Waiting {wait_time}s before retry...")
                    await asyncio.sleep(wait_time)
                elif not should_retry:
                    logger.debug(f"  Non-recoverable error: {e}")
                    break

        raise last_error

    async def _call_with_deadline(self, system_prompt: str, user_prompt: str) -> str:
        from autolocale.ai.providers import call_chat_completion_text, timeout_seconds

        deadline = timeout_seconds(self.options.timeout_ms)
        try:
            return await asyncio.wait_for(
                call_chat_completion_text(
                    self.options, system_prompt, user_prompt, transport=self.transport
                ),
                timeout=deadline,
            )
        except asyncio.TimeoutError:
            raise LLMRequestFailed(
                f"{self.options.provider} API request timeout after {int(deadline * 1000)}ms"
            )

    def _categorize_error(self, error: Exception, attempt: int) -> Tuple[bool, float]:
        """
        Categorize an error and determine retry strategy.

        Returns:
            Tuple of (should_retry, wait_time_seconds)
        """
        error_str = str(error).lower()
        base = float(self.options.retry_backoff)
        status_code = getattr(error, 'details', {}).get('status_code')

        # Rate limiting (429) - long backoff
        if status_code == 429 or 'rate limit' in error_str or 'too many requests' in error_str:
            return True, min(base * 30 * (2 ** attempt), 300)

        # Authentication errors (401, 403) - don't retry
        if status_code in (401, 403):
            return False, 0

        # Invalid request (400) - don't retry
        if status_code == 400:
            return False, 0

        # Server errors (5xx) - standard backoff
        if status_code is not None and 500 <= status_code < 600:
            return True, base * (2 ** attempt)

        # Timeout - retry with backoff
        if 'timeout' in error_str:
            return True, base * 5 * (2 ** attempt)

        # Parse errors - retry once
        if 'parse' in error_str or 'json' in error_str:
            return attempt < 1, base

        # Unknown errors - standard backoff
        return True, base * (2 ** attempt)
