"""Groq (OpenAI-compatible) chat completions client."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..exceptions import ConfigError, NarrativeServiceError
from ..redaction import sanitize_text


class GroqChatClient:
    """Sends a single chat completion request and returns the message content."""

    def __init__(
        self,
        settings: Any,
        logger: logging.Logger,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings
        self.logger = logger
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=settings.groq_timeout_seconds,
            headers={"Accept": "application/json"},
        )

    async def __aenter__(self) -> GroqChatClient:
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _api_key(self) -> str:
        api_key = self.settings.groq_api_key
        if not api_key:
            raise ConfigError(
                "GROQ_API_KEY is not set; add it to the environment or .env "
                "(free keys at https://console.groq.com/keys)."
            )
        return api_key

    def build_request_body(
        self, messages: list[dict[str, str]], *, json_mode: bool = False
    ) -> dict[str, Any]:
        body: dict[str, Any] = {
            "model": self.settings.groq_model,
            "messages": messages,
            "temperature": self.settings.groq_temperature,
            "max_tokens": self.settings.groq_max_tokens,
        }
        if json_mode:
            body["response_format"] = {"type": "json_object"}
        return body

    async def complete(
        self, messages: list[dict[str, str]], *, json_mode: bool = False
    ) -> str:
        """Return the first choice's message content.

        Raises ConfigError before any network call when no key is configured.
        """
        api_key = self._api_key()
        url = str(self.settings.groq_api_url)
        try:
            response = await self._client.post(
                url,
                json=self.build_request_body(messages, json_mode=json_mode),
                headers={"Authorization": f"Bearer {api_key}"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise NarrativeServiceError(
                f"Groq API error: {exc.response.status_code} - "
                f"{sanitize_text(exc.response.text[:300])}"
            ) from exc
        except httpx.HTTPError as exc:
            raise NarrativeServiceError(
                f"Groq request failed: {sanitize_text(str(exc))}"
            ) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise NarrativeServiceError("Groq returned a non-JSON response.") from exc
        if not isinstance(payload, dict):
            raise NarrativeServiceError(
                f"Groq returned unexpected payload type {type(payload).__name__}."
            )

        error = payload.get("error")
        if error:
            message = error.get("message") if isinstance(error, dict) else error
            raise NarrativeServiceError(f"Groq API error: {sanitize_text(str(message))}")

        choices = payload.get("choices")
        if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
            raise NarrativeServiceError("Groq response missing 'choices'.")
        message = choices[0].get("message")
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str):
            raise NarrativeServiceError("Groq response missing message content.")
        return content
