from __future__ import annotations

import json

import httpx
import pytest

from autolocale.ai.exceptions import LLMRequestFailed
from autolocale.ai.providers import get_httpx_timeout, timeout_seconds
from autolocale.ai.service import LLMClient
from autolocale.config import ClientOptions


def _options(**overrides) -> ClientOptions:
    values = dict(
        api_key="sk-test",
        model="deepseek-chat",
        base_url="https://llm.example.com/",
        timeout_ms=2000,
        retry_backoff=0.0,
        provider="deepseek",
    )
    values.update(overrides)
    return ClientOptions(**values)


def _completion(content) -> httpx.Response:
    return httpx.Response(200, json={
        "choices": [{"message": {"role": "assistant", "content": content}}],
        "usage": {"prompt_tokens": 12, "completion_tokens": 5},
    })


class _Recorder:
    def __init__(self, *responses) -> None:
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.mark.asyncio
async def test_complete_posts_chat_completion_and_parses_object() -> None:
    recorder = _Recorder(_completion('{"title": "Hallo"}'))
    client = LLMClient(_options(temperature=0.1, max_tokens=64), transport=httpx.MockTransport(recorder))

    result = await client.complete("system text", "user text")

    assert result == {"title": "Hallo"}
    request = recorder.requests[0]
    assert str(request.url) == "https://llm.example.com/v1/chat/completions"
    assert request.headers["Authorization"] == "Bearer sk-test"
    body = json.loads(request.content)
    assert body["model"] == "deepseek-chat"
    assert body["messages"] == [
        {"role": "system", "content": "system text"},
        {"role": "user", "content": "user text"},
    ]
    assert body["temperature"] == 0.1
    assert body["max_tokens"] == 64
    assert body["response_format"] == {"type": "json_object"}


@pytest.mark.asyncio
async def test_complete_accepts_fenced_json() -> None:
    recorder = _Recorder(_completion('```json\n{"title": "Salut"}\n```'))
    client = LLMClient(_options(), transport=httpx.MockTransport(recorder))

    assert await client.complete("s", "u") == {"title": "Salut"}


@pytest.mark.asyncio
async def test_complete_http_error_is_request_failure() -> None:
    recorder = _Recorder(httpx.Response(401, json={"error": {"message": "bad key"}}))
    client = LLMClient(_options(max_retries=3), transport=httpx.MockTransport(recorder))

    with pytest.raises(LLMRequestFailed) as exc_info:
        await client.complete("s", "u")

    assert "401" in str(exc_info.value)
    assert "bad key" in str(exc_info.value)
    # authentication errors are not retried
    assert len(recorder.requests) == 1


@pytest.mark.asyncio
async def test_complete_empty_content_is_request_failure() -> None:
    recorder = _Recorder(_completion(""))
    client = LLMClient(_options(), transport=httpx.MockTransport(recorder))

    with pytest.raises(LLMRequestFailed, match="Empty"):
        await client.complete("s", "u")


@pytest.mark.asyncio
async def test_complete_non_json_content_is_request_failure() -> None:
    recorder = _Recorder(_completion("Sure! Here is your translation: Hallo"))
    client = LLMClient(_options(), transport=httpx.MockTransport(recorder))

    with pytest.raises(LLMRequestFailed, match="parse"):
        await client.complete("s", "u")


@pytest.mark.asyncio
async def test_complete_timeout_is_request_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    client = LLMClient(_options(), transport=httpx.MockTransport(handler))

    with pytest.raises(LLMRequestFailed, match="timeout"):
        await client.complete("s", "u")


@pytest.mark.asyncio
async def test_complete_retries_server_errors() -> None:
    recorder = _Recorder(
        httpx.Response(503, text="unavailable"),
        _completion('{"title": "Hola"}'),
    )
    client = LLMClient(_options(max_retries=2), transport=httpx.MockTransport(recorder))

    assert await client.complete("s", "u") == {"title": "Hola"}
    assert len(recorder.requests) == 2


@pytest.mark.asyncio
async def test_complete_single_attempt_by_default() -> None:
    recorder = _Recorder(httpx.Response(500, text="boom"), _completion('{"title": "x"}'))
    client = LLMClient(_options(), transport=httpx.MockTransport(recorder))

    with pytest.raises(LLMRequestFailed, match="500"):
        await client.complete("s", "u")
    assert len(recorder.requests) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [
    {"choices": ["not a message"]},
    {"choices": [{"message": "plain text"}]},
    {"choices": [{"message": {"content": 42}}], "usage": "n/a"},
    {"choices": {}},
    ["not", "an", "object"],
])
async def test_complete_malformed_choices_is_request_failure(payload) -> None:
    recorder = _Recorder(httpx.Response(200, json=payload))
    client = LLMClient(_options(), transport=httpx.MockTransport(recorder))

    with pytest.raises(LLMRequestFailed, match="Empty"):
        await client.complete("s", "u")


def test_timeout_zero_or_missing_means_default() -> None:
    assert timeout_seconds(0) == 20.0
    assert timeout_seconds(None) == 20.0
    assert timeout_seconds(-5) == 20.0
    assert timeout_seconds(1500) == 1.5
    assert get_httpx_timeout(0).read == 20.0


@pytest.mark.asyncio
async def test_complete_with_zero_timeout_uses_default_deadline() -> None:
    recorder = _Recorder(_completion('{"title": "Hallo"}'))
    client = LLMClient(_options(timeout_ms=0), transport=httpx.MockTransport(recorder))

    assert await client.complete("s", "u") == {"title": "Hallo"}
