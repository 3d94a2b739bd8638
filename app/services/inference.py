"""Integration helpers for the OpenRouter chat completions API."""

from __future__ import annotations

import logging

import httpx

from ..config import Settings

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are Vibly, an analyst who reads entertainment taste as a window into personality, "
    "culture and emotional needs for a dating app. You always respond with a single JSON "
    "object that matches the documented schema and never include commentary outside JSON."
)


class InferenceError(RuntimeError):
    """Raised when the inference provider cannot produce a usable response."""


class InferenceClient:
    """Client responsible for talking to OpenRouter."""

    def __init__(
        self,
        settings: Settings,
        http_client: httpx.AsyncClient,
        *,
        api_key: str | None = None,
        model: str | None = None,
    ):
        self._settings = settings
        self._client = http_client
        self._api_key = api_key or settings.openrouter_api_key
        self._model = model or settings.openrouter_model

    @property
    def model(self) -> str:
        return self._model

    async def complete_json(self, prompt: str, *, temperature: float) -> str:
        """Send ``prompt`` and return the raw JSON text produced by the model."""

        if not self._api_key:
            raise InferenceError("OpenRouter API key is required for profile analysis")

        payload = {
            "model": self._model,
            "temperature": temperature,
            "response_format": {"type": "json_object"},
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
        }
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            "X-Title": self._settings.app_name,
        }

        try:
            response = await self._client.post(
                "/chat/completions", json=payload, headers=headers
            )
        except httpx.HTTPError as exc:
            raise InferenceError(f"Inference request failed: {exc}") from exc
        if response.status_code >= 400:
            raise InferenceError(
                f"Inference provider returned {response.status_code}: {response.text}"
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise InferenceError("Inference provider returned a non-JSON body") from exc
        choices = data.get("choices") if isinstance(data, dict) else None
        if not choices:
            raise InferenceError("Model returned no choices")
        first = choices[0] if isinstance(choices, list) else None
        message = first.get("message") if isinstance(first, dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str) or not content.strip():
            raise InferenceError("Model response missing content")
        logger.debug("Model %s returned %d characters", self._model, len(content))
        return content
