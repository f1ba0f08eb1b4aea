"""Unit tests for the LLM client, using httpx.MockTransport."""

import json
from typing import Any

import httpx
import pytest

from ai_adoption_assessment.adapters.llm_client import LLMClient
from ai_adoption_assessment.errors import ErrorCode, LLMInvocationError
from ai_adoption_assessment.settings import LLMSettings

_SETTINGS = LLMSettings(api_key="sk-test", base_url="https://llm.test/v1", model="test-model")


def _completion(content: str | None) -> dict[str, Any]:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def _client(handler: Any, settings: LLMSettings = _SETTINGS) -> LLMClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=settings.base_url)
    return LLMClient(settings, http_client=http)


class TestInvoke:
    @pytest.mark.asyncio()
    async def test_returns_parsed_json_and_sends_schema(self) -> None:
        captured: dict[str, Any] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["auth"] = request.headers["Authorization"]
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json=_completion('{"score": 72}'))

        client = _client(handler)
        schema = {"type": "object", "properties": {"score": {"type": "number"}}}

        result = await client.invoke("Rate this", response_json_schema=schema, add_context_from_internet=True)

        assert result == {"score": 72}
        assert captured["url"] == "https://llm.test/v1/chat/completions"
        assert captured["auth"] == "Bearer sk-test"
        body = captured["body"]
        assert body["model"] == "test-model"
        assert body["messages"][1] == {"role": "user", "content": "Rate this"}
        assert body["response_format"]["json_schema"]["schema"] == schema
        await client.aclose()

    @pytest.mark.asyncio()
    async def test_identical_requests_served_from_cache(self) -> None:
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            return httpx.Response(200, json=_completion('{"ok": true}'))

        client = _client(handler)

        await client.invoke("same prompt")
        await client.invoke("same prompt")
        await client.invoke("different prompt")

        assert calls == 2

    @pytest.mark.asyncio()
    async def test_missing_api_key(self) -> None:
        client = _client(lambda request: httpx.Response(200), LLMSettings(api_key=""))

        with pytest.raises(LLMInvocationError) as exc_info:
            await client.invoke("hello")

        assert exc_info.value.error_code == ErrorCode.LLM_UNAVAILABLE

    @pytest.mark.asyncio()
    async def test_http_error_status(self) -> None:
        client = _client(lambda request: httpx.Response(503, json={"error": "overloaded"}))

        with pytest.raises(LLMInvocationError) as exc_info:
            await client.invoke("hello")

        assert "503" in exc_info.value.message

    @pytest.mark.asyncio()
    async def test_transport_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = _client(handler)

        with pytest.raises(LLMInvocationError):
            await client.invoke("hello")

    @pytest.mark.asyncio()
    @pytest.mark.parametrize(
        "payload",
        [
            _completion("not json"),
            _completion("[1, 2, 3]"),
            _completion(""),
            {"choices": []},
        ],
    )
    async def test_unusable_reply(self, payload: dict[str, Any]) -> None:
        client = _client(lambda request: httpx.Response(200, json=payload))

        with pytest.raises(LLMInvocationError) as exc_info:
            await client.invoke("hello")

        assert exc_info.value.error_code == ErrorCode.LLM_BAD_RESPONSE
