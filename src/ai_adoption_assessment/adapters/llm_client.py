"""HTTP client for the structured-output LLM endpoint.

Talks to any OpenAI-compatible ``/chat/completions`` API. The assistant's
reply is parsed as a JSON object and returned as-is; it is not checked
against the requested schema and failed calls are not retried.
"""

import json
from typing import Any

import httpx

from ai_adoption_assessment.adapters.response_cache import ResponseCache
from ai_adoption_assessment.core.prompting import estimate_tokens, generate_cache_key
from ai_adoption_assessment.errors import ErrorCode, LLMInvocationError
from ai_adoption_assessment.observability import get_logger
from ai_adoption_assessment.settings import LLMSettings

logger = get_logger(__name__)

_SYSTEM_PROMPT = (
    "You are an enterprise AI adoption analyst. "
    "Always answer with a single JSON object and nothing else."
)
_INTERNET_CONTEXT_NOTE = (
    "Where relevant, draw on current, publicly available information "
    "about the platforms and regulations mentioned."
)


class LLMClient:
    """OpenAI-compatible chat-completions client returning parsed JSON.

    Implements ILLMClient.
    """

    def __init__(
        self,
        settings: LLMSettings,
        http_client: httpx.AsyncClient | None = None,
        cache: ResponseCache | None = None,
    ) -> None:
        """Initialise the client.

        Args:
            settings: Endpoint, model and timeout settings.
            http_client: Optional pre-built client, mainly for tests.
            cache: Optional response cache; built from settings when omitted.
        """
        self._settings = settings
        self._http = http_client or httpx.AsyncClient(
            base_url=settings.base_url,
            timeout=settings.timeout_seconds,
        )
        self._cache = cache or ResponseCache(
            ttl_seconds=settings.cache_ttl_seconds,
            max_entries=settings.cache_max_entries,
        )

    def _build_payload(
        self,
        prompt: str,
        response_json_schema: dict[str, Any] | None,
        add_context_from_internet: bool,
    ) -> dict[str, Any]:
        system = _SYSTEM_PROMPT
        if add_context_from_internet:
            system = f"{system} {_INTERNET_CONTEXT_NOTE}"

        if response_json_schema is not None:
            response_format: dict[str, Any] = {
                "type": "json_schema",
                "json_schema": {"name": "response", "schema": response_json_schema},
            }
        else:
            response_format = {"type": "json_object"}

        return {
            "model": self._settings.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            "temperature": self._settings.temperature,
            "max_tokens": self._settings.max_tokens,
            "response_format": response_format,
        }

    async def invoke(
        self,
        prompt: str,
        response_json_schema: dict[str, Any] | None = None,
        add_context_from_internet: bool = False,
    ) -> dict[str, Any]:
        """Send a prompt and return the parsed JSON object.

        Args:
            prompt: Full prompt text.
            response_json_schema: JSON schema requested for the reply.
            add_context_from_internet: Ask the model to use current public information.

        Returns:
            The parsed JSON object from the assistant reply.

        Raises:
            LLMInvocationError: If no API key is configured, the request fails,
                or the reply is not a JSON object.
        """
        if not self._settings.api_key:
            raise LLMInvocationError(message="LLM API key is not configured.")

        cache_key = generate_cache_key(
            "llm", [prompt, response_json_schema, add_context_from_internet]
        )
        cached = self._cache.get(cache_key)
        if cached is not None:
            logger.debug("LLM response served from cache", cache_key=cache_key)
            return cached

        payload = self._build_payload(prompt, response_json_schema, add_context_from_internet)

        try:
            response = await self._http.post(
                "/chat/completions",
                json=payload,
                headers={"Authorization": f"Bearer {self._settings.api_key}"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "LLM endpoint returned an error",
                status_code=exc.response.status_code,
                model=self._settings.model,
            )
            raise LLMInvocationError(
                message=f"LLM endpoint returned HTTP {exc.response.status_code}."
            ) from exc
        except httpx.HTTPError as exc:
            logger.error("LLM request failed", error=str(exc), model=self._settings.model)
            raise LLMInvocationError(message=f"LLM request failed: {exc}") from exc

        result = self._parse(response)
        self._cache.set(cache_key, result)

        logger.info(
            "LLM invoked",
            model=self._settings.model,
            prompt_tokens_estimate=estimate_tokens(prompt),
            structured=response_json_schema is not None,
        )
        return result

    @staticmethod
    def _parse(response: httpx.Response) -> dict[str, Any]:
        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise LLMInvocationError(
                message="LLM response did not contain a message.",
                error_code=ErrorCode.LLM_BAD_RESPONSE,
            ) from exc

        if not content:
            raise LLMInvocationError(
                message="LLM response was empty.",
                error_code=ErrorCode.LLM_BAD_RESPONSE,
            )

        try:
            parsed = json.loads(content)
        except json.JSONDecodeError as exc:
            raise LLMInvocationError(
                message="LLM response was not valid JSON.",
                error_code=ErrorCode.LLM_BAD_RESPONSE,
            ) from exc

        if not isinstance(parsed, dict):
            raise LLMInvocationError(
                message="LLM response was not a JSON object.",
                error_code=ErrorCode.LLM_BAD_RESPONSE,
            )
        return parsed

    async def aclose(self) -> None:
        await self._http.aclose()
