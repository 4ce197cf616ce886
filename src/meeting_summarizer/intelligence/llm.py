"""LLM client abstractions used by the summarization service."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Protocol
from urllib.parse import urljoin

import httpx

from meeting_summarizer.core.config import LlmSettings

LOGGER = logging.getLogger(__name__)


class LLMError(RuntimeError):
    """Raised when the LLM provider fails to respond as expected."""


class LLMClient(Protocol):
    """Protocol describing the minimal LLM client behaviour."""

    @property
    def provider_id(self) -> str:
        """Identifier describing the backing model/provider."""
        raise NotImplementedError

    def generate(self, prompt: str, *, system: str | None = None) -> str:
        """Return the raw text completion for ``prompt``."""
        raise NotImplementedError


@dataclass(slots=True)
class ChatCompletionsClient:
    """Single-shot client for OpenAI-compatible ``chat/completions`` APIs."""

    settings: LlmSettings
    http_client: httpx.Client | None = None

    def generate(self, prompt: str, *, system: str | None = None) -> str:
        """Send one chat completion request and return the assistant text."""
        messages: list[dict[str, str]] = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        payload: dict[str, object] = {
            "model": self.settings.model,
            "messages": messages,
            "temperature": self.settings.temperature,
            "stream": False,
        }
        if self.settings.max_output_tokens is not None:
            payload["max_tokens"] = self.settings.max_output_tokens

        headers = {}
        if self.settings.api_key:
            headers["Authorization"] = f"Bearer {self.settings.api_key}"

        data = _post_json(
            self.http_client,
            _resolve_endpoint(self.settings.base_url, "chat/completions"),
            payload,
            headers=headers,
            timeout=self.settings.timeout_seconds,
        )
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise LLMError("LLM response missing 'choices[0].message.content'") from exc
        if not isinstance(content, str):
            raise LLMError("LLM response content is not text")
        return content

    @property
    def provider_id(self) -> str:
        """Return a human readable identifier for the configured model."""
        return f"openai:{self.settings.model}"


@dataclass(slots=True)
class OllamaClient:
    """Thin synchronous client for the Ollama HTTP API."""

    settings: LlmSettings
    http_client: httpx.Client | None = None

    def generate(self, prompt: str, *, system: str | None = None) -> str:
        """Send a completion request to the Ollama server."""
        options: dict[str, object] = {"temperature": self.settings.temperature}
        if self.settings.max_output_tokens is not None:
            options["num_predict"] = self.settings.max_output_tokens
        payload: dict[str, object] = {
            "model": self.settings.model,
            "prompt": prompt,
            "stream": False,
            "options": options,
        }
        if system:
            payload["system"] = system

        data = _post_json(
            self.http_client,
            _resolve_endpoint(self.settings.base_url, "api/generate"),
            payload,
            headers={},
            timeout=self.settings.timeout_seconds,
        )
        result = data.get("response")
        if not isinstance(result, str):
            raise LLMError("LLM response missing 'response' field")
        return result

    @property
    def provider_id(self) -> str:
        """Return a human readable identifier for the configured model."""
        return f"ollama:{self.settings.model}"


def build_llm_client(
    settings: LlmSettings, *, http_client: httpx.Client | None = None
) -> LLMClient | None:
    """Return the client matching ``settings.provider``, or ``None`` if unusable."""
    if settings.provider == "ollama":
        return OllamaClient(settings, http_client)
    if not settings.api_key:
        LOGGER.warning("No LLM API key configured; summarization is unavailable")
        return None
    return ChatCompletionsClient(settings, http_client)


def _post_json(
    client: httpx.Client | None,
    endpoint: str,
    payload: dict[str, object],
    *,
    headers: dict[str, str],
    timeout: float,
) -> dict[str, Any]:
    try:
        if client is not None:
            response = client.post(
                endpoint, json=payload, headers=headers, timeout=timeout
            )
        else:
            response = httpx.post(
                endpoint, json=payload, headers=headers, timeout=timeout
            )
        response.raise_for_status()
        data = response.json()
    except httpx.HTTPStatusError as exc:
        detail = _extract_error_message(exc.response)
        raise LLMError(
            f"LLM provider returned HTTP {exc.response.status_code}: {detail}"
        ) from exc
    except httpx.HTTPError as exc:
        raise LLMError(f"LLM request failed: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise LLMError("LLM returned invalid JSON") from exc

    if not isinstance(data, dict):
        raise LLMError("LLM returned an unexpected payload")
    return data


def _extract_error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except json.JSONDecodeError:
        return response.text.strip() or response.reason_phrase
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and isinstance(error.get("message"), str):
        return error["message"]
    if isinstance(error, str):
        return error
    return response.reason_phrase


def _resolve_endpoint(base_url: str, path: str) -> str:
    trimmed = base_url.rstrip("/") + "/"
    return urljoin(trimmed, path)


__all__ = [
    "ChatCompletionsClient",
    "LLMClient",
    "LLMError",
    "OllamaClient",
    "build_llm_client",
]
